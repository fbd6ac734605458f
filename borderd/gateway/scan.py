"""
borderd Scan Orchestrator

Bridges the stack's callback-driven active scan to a blocking RPC call.

    Idle -> Scanning -> (terminal callback | timeout) -> Idle

The RPC thread opens the "scan_list" array, triggers the scan with the
gate held, wakes the stack's event loop and then waits on an Event.
The worker thread appends one table per beacon into the caller's
document and, on the terminal (None) result, closes the array and
sets the Event.

At most one scan is in flight per process: a second scan call while
one is running is answered with BUSY.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from ..codec import format_u16, hex_encode
from ..errors import ErrorCode, StackError, WakeError
from ..rpc.dispatch import RequestContext
from ..rpc.document import Node, ResponseDocument
from ..stack.base import ScanResult


logger = logging.getLogger(__name__)

SCAN_LIST = "scan_list"

# Seconds a scan call waits for the terminal callback
DEFAULT_SCAN_TIMEOUT = 30.0


@dataclass
class ScanSession:
    """One in-flight scan."""
    document: ResponseDocument
    array: Node
    done: threading.Event = field(default_factory=threading.Event)
    count: int = 0
    active: bool = True


class ScanOrchestrator:
    """Single-flight active scan bridge."""

    def __init__(self, context, timeout: float = DEFAULT_SCAN_TIMEOUT):
        self._ctx = context
        self.timeout = timeout
        self._flight = threading.Lock()
        self.session: Optional[ScanSession] = None
        self.completed = 0

    @property
    def scanning(self) -> bool:
        return self._flight.locked()

    def handle_scan(self, request: RequestContext) -> ErrorCode:
        if not self._flight.acquire(blocking=False):
            logger.warning("Scan rejected: another scan is in progress")
            return ErrorCode.BUSY
        try:
            return self._scan(request.response)
        finally:
            self._flight.release()

    def _scan(self, document: ResponseDocument) -> ErrorCode:
        gate = self._ctx.gate
        session = ScanSession(document, document.open_array(SCAN_LIST))

        with gate:
            self.session = session
            try:
                self._ctx.stack.active_scan(self._on_result)
            except StackError:
                self._end(session)
                raise

        try:
            self._ctx.notify()
        except WakeError:
            with gate:
                self._end(session)
            return ErrorCode.FAILED

        if not session.done.wait(self.timeout):
            with gate:
                # The terminal callback may have won the race for the gate
                if not session.done.is_set():
                    self._end(session)
                    logger.warning(
                        f"Scan timed out after {self.timeout}s "
                        f"({session.count} networks)"
                    )
                    return ErrorCode.RESPONSE_TIMEOUT

        logger.info(f"Scan complete: {session.count} networks")
        return ErrorCode.NONE

    def _end(self, session: ScanSession) -> None:
        """Close the session's array and return to idle. Gate held."""
        if not session.active:
            return
        session.active = False
        session.document.close(session.array)
        if self.session is session:
            self.session = None

    def _on_result(self, result: Optional[ScanResult]) -> None:
        """Scan callback, invoked on the worker thread with the gate held."""
        session = self.session
        if session is None or not session.active:
            return

        if result is None:
            self._end(session)
            self.completed += 1
            session.done.set()
            return

        doc = session.document
        with doc.table():
            doc.add("IsJoinable", bool(result.is_joinable))
            doc.add("NetworkName", result.network_name)
            doc.add("ExtendedPanId", hex_encode(result.ext_pan_id))
            doc.add("PanId", format_u16(result.pan_id))
            doc.add("Channel", result.channel)
            doc.add("Rssi", result.rssi)
            doc.add("Lqi", result.lqi)
        session.count += 1
