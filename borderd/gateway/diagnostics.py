"""
borderd Diagnostic Aggregator

Folds streamed network diagnostic responses into one document and
rate-limits the underlying multicast query.

Cache:
- published: rendered snapshot returned to callers, never mutated
- pending: document the worker thread appends responses into
- last refresh: monotonic time of the last query

A networkdata call inside the cool-down window returns the published
snapshot with no stack interaction. Once the window has elapsed the
pending document is published, a new query is sent into a fresh
pending document, and the new snapshot is returned. The caller never
waits for responses to its own query.

Per response the pending document gets a "networkdata<N>" table:

    {"rloc": "0x0400",
     "routedata": [{"routerid": 3, "rloc": "0x0c00"}],
     "childdata": [{"rloc": "0x0401", "mode": 12}]}
"""

import ipaddress
import logging
import time
from typing import Any, Callable, Dict, Optional

from ..codec import format_u16
from ..errors import ErrorCode
from ..rpc.dispatch import RequestContext
from ..rpc.document import ResponseDocument
from ..stack.base import DiagnosticResponse, DiagTlvType, LinkMode


logger = logging.getLogger(__name__)

# All-routers realm-local multicast group
DIAGNOSTIC_MULTICAST = "ff03::2"
DIAGNOSTIC_TLV_TYPES = (DiagTlvType.ROUTE, DiagTlvType.CHILD_TABLE)

DEFAULT_COOLDOWN = 10.0

# Routing locator interface identifier: 0000:00ff:fe00:XXXX
RLOC_IID_PREFIX = bytes.fromhex("000000fffe00")
ALOC16_MASK = 0xFC
RLOC16_RESERVED_BIT = 0x02

# Child mode bitmask
MODE_RX_ON_WHEN_IDLE = 1 << 3
MODE_SECURE_DATA_REQUEST = 1 << 2
MODE_FULL_THREAD_DEVICE = 1 << 1
MODE_FULL_NETWORK_DATA = 1 << 0


def rloc16_from_address(address: str) -> Optional[int]:
    """
    Extract the RLOC16 from a routing locator address.

    Returns:
        The RLOC16, or None if the address is not in RLOC form
        (including anycast locators)
    """
    try:
        packed = ipaddress.IPv6Address(address).packed
    except ValueError:
        return None

    if packed[8:14] != RLOC_IID_PREFIX:
        return None
    if packed[14] >= ALOC16_MASK or packed[14] & RLOC16_RESERVED_BIT:
        return None
    return int.from_bytes(packed[14:16], "big")


def encode_child_mode(mode: LinkMode) -> int:
    """Pack link mode flags into the diagnostic mode bitmask."""
    return (
        (MODE_RX_ON_WHEN_IDLE if mode.rx_on_when_idle else 0)
        | (MODE_SECURE_DATA_REQUEST if mode.secure_data_requests else 0)
        | (MODE_FULL_THREAD_DEVICE if mode.device_type else 0)
        | (MODE_FULL_NETWORK_DATA if mode.network_data else 0)
    )


class DiagnosticAggregator:
    """Rate-limited network diagnostic cache."""

    def __init__(
        self,
        context,
        cooldown: float = DEFAULT_COOLDOWN,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ctx = context
        self.cooldown = cooldown
        self._clock = clock

        self._published: Dict[str, Any] = {}
        self._pending: Optional[ResponseDocument] = None
        self._responses = 0
        self._last_refresh: Optional[float] = None
        self.queries = 0

    def attach(self) -> None:
        with self._ctx.gate:
            self._ctx.stack.set_diagnostic_callback(self._on_response)

    def detach(self) -> None:
        with self._ctx.gate:
            self._ctx.stack.set_diagnostic_callback(None)

    @property
    def snapshot(self) -> Dict[str, Any]:
        """Currently published document."""
        return self._published

    def _stale(self, now: float) -> bool:
        return self._last_refresh is None or now - self._last_refresh >= self.cooldown

    def handle_networkdata(self, request: RequestContext) -> ErrorCode:
        with self._ctx.gate:
            now = self._clock()
            if self._stale(now):
                self._refresh(now)
            snapshot = self._published

        request.response.extend(snapshot)
        return ErrorCode.NONE

    def _refresh(self, now: float) -> None:
        """
        Publish the pending document and query again. Gate held.

        Nothing changes if the query cannot be sent.
        """
        self._ctx.stack.send_diagnostic_get(
            DIAGNOSTIC_MULTICAST, [int(t) for t in DIAGNOSTIC_TLV_TYPES],
        )

        if self._pending is not None:
            self._published = self._pending.to_dict()
        self._pending = ResponseDocument()
        self._responses = 0
        self._last_refresh = now
        self.queries += 1
        logger.debug(f"Diagnostic query sent to {DIAGNOSTIC_MULTICAST}")

    def _on_response(self, response: DiagnosticResponse) -> None:
        """Diagnostic callback, invoked on the worker thread with the gate held."""
        doc = self._pending
        if doc is None:
            return

        name = f"networkdata{self._responses}"
        self._responses += 1

        peer_rloc16 = rloc16_from_address(response.peer_address)
        with doc.table(name):
            if peer_rloc16 is not None:
                doc.add("rloc", format_u16(peer_rloc16))

            for record in response.records:
                if record.type == DiagTlvType.ROUTE:
                    with doc.array("routedata"):
                        for route in record.value or []:
                            if not (route.link_quality_in and route.link_quality_out):
                                continue
                            with doc.table("router"):
                                doc.add("routerid", route.router_id)
                                doc.add("rloc", format_u16(route.router_id << 10))

                elif record.type == DiagTlvType.CHILD_TABLE:
                    with doc.array("childdata"):
                        for child in record.value or []:
                            with doc.table("child"):
                                doc.add("rloc", format_u16((peer_rloc16 or 0) | child.child_id))
                                doc.add("mode", encode_child_mode(child.mode))

        logger.debug(f"Diagnostic response from {response.peer_address} stored as {name}")
