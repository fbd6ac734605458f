"""
borderd Gateway Context

The one gateway instance of a process. Constructed at startup and
handed to the dispatch table, which passes it to every handler.
"""

import logging
import time
from typing import Callable, Optional

from ..errors import WakeError
from ..rpc.wake import WakeChannel
from ..stack.base import NetworkStack
from .commissioning import CommissioningEngine, DEFAULT_JOINER_TIMEOUT
from .diagnostics import DiagnosticAggregator, DEFAULT_COOLDOWN
from .gate import SyncGate
from .scan import ScanOrchestrator, DEFAULT_SCAN_TIMEOUT


logger = logging.getLogger(__name__)


class GatewayContext:
    """
    Shared state of the gateway.

    Holds the stack, the gate shared with the stack's worker thread,
    the wake channel into the stack's event loop, and the stateful
    engines (scan session, diagnostic cache, commissioning).

    Usage:
        ctx = GatewayContext(stack, gate, wake)
        ctx.attach()
        table = build_dispatch_table(ctx)
        ...
        ctx.detach()
    """

    def __init__(
        self,
        stack: NetworkStack,
        gate: SyncGate,
        wake: Optional[WakeChannel] = None,
        scan_timeout: float = DEFAULT_SCAN_TIMEOUT,
        diagnostic_cooldown: float = DEFAULT_COOLDOWN,
        joiner_timeout: int = DEFAULT_JOINER_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize gateway context.

        Args:
            stack: Network stack
            gate: Gate shared with the stack's worker thread
            wake: Wake channel into the stack's event loop
            scan_timeout: Seconds a scan call waits for completion
            diagnostic_cooldown: Minimum seconds between diagnostic queries
            joiner_timeout: Joiner entry lifetime (seconds)
            clock: Monotonic clock used for the diagnostic cool-down
        """
        self.stack = stack
        self.gate = gate
        self.wake = wake

        self.scanner = ScanOrchestrator(self, timeout=scan_timeout)
        self.diagnostics = DiagnosticAggregator(
            self, cooldown=diagnostic_cooldown, clock=clock,
        )
        self.commissioning = CommissioningEngine(self, joiner_timeout=joiner_timeout)

    @classmethod
    def from_config(cls, config, stack: NetworkStack, gate: SyncGate,
                    wake: Optional[WakeChannel] = None) -> "GatewayContext":
        """Build a context from a borderd Config."""
        return cls(
            stack,
            gate,
            wake,
            scan_timeout=config.gateway.scan_timeout,
            diagnostic_cooldown=config.gateway.diagnostic_cooldown,
            joiner_timeout=config.gateway.joiner_timeout,
        )

    def attach(self) -> None:
        """Register stack callbacks owned by the gateway."""
        self.diagnostics.attach()

    def detach(self) -> None:
        self.diagnostics.detach()

    def notify(self) -> None:
        """
        Wake the stack's event loop.

        Raises:
            WakeError: If the channel cannot be signalled
        """
        if self.wake is None:
            return
        try:
            self.wake.notify()
        except WakeError as e:
            logger.error(f"Wake failed: {e.message}")
            raise
