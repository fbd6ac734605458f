"""
borderd Commissioning Engine

Commissioner role control, joiner registration and the management
set of the active operational dataset.

Commissioner state changes and joiner lifecycle events arrive on the
stack's worker thread. They are logged and never reach an RPC reply.
"""

import logging
from typing import Optional

from .. import EXT_ADDRESS_SIZE, EXT_PAN_ID_SIZE, NETWORK_KEY_SIZE, NETWORK_NAME_MAX_SIZE, PSKC_SIZE
from ..codec import hex_decode_exact, hex_encode, parse_long
from ..errors import ErrorCode, ParseError, StackError
from ..rpc.dispatch import RequestContext
from ..stack.base import CommissionerState, Dataset, JoinerEvent


logger = logging.getLogger(__name__)

# eui64 value selecting any joiner
ANY_JOINER = "*"

# Joiner entry lifetime (seconds)
DEFAULT_JOINER_TIMEOUT = 120

_STATE_NAMES = {
    CommissionerState.DISABLED: "disabled",
    CommissionerState.PETITION: "petition",
    CommissionerState.ACTIVE: "active",
}

_JOINER_EVENT_NAMES = {
    JoinerEvent.START: "start",
    JoinerEvent.CONNECTED: "connected",
    JoinerEvent.FINALIZE: "finalize",
    JoinerEvent.END: "end",
    JoinerEvent.REMOVED: "removed",
}


def parse_joiner_eui64(value: Optional[str]) -> Optional[bytes]:
    """
    Parse a joiner selector.

    Returns:
        8-byte EUI-64, or None for the wildcard (or an absent value)

    Raises:
        ParseError: If the value is neither "*" nor 16 hex digits
    """
    if value is None or value == ANY_JOINER:
        return None
    return hex_decode_exact(value, EXT_ADDRESS_SIZE)


def build_dataset_update(base: Dataset, params: dict) -> Dataset:
    """
    Apply management-set parameters on top of the active dataset.

    Every field is parsed before anything is returned, so a single bad
    value leaves nothing half-applied. The active timestamp is bumped.

    Raises:
        ParseError: On the first malformed field
    """
    dataset = Dataset(
        active_timestamp=base.active_timestamp,
        network_key=base.network_key,
        network_name=base.network_name,
        ext_pan_id=base.ext_pan_id,
        pan_id=base.pan_id,
        channel=base.channel,
        pskc=base.pskc,
    )

    if "masterkey" in params:
        dataset.network_key = hex_decode_exact(params["masterkey"], NETWORK_KEY_SIZE)
    if "networkname" in params:
        name = params["networkname"]
        if len(name.encode("utf-8")) > NETWORK_NAME_MAX_SIZE:
            raise ParseError(f"network name longer than {NETWORK_NAME_MAX_SIZE} bytes")
        dataset.network_name = name
    if "extpanid" in params:
        dataset.ext_pan_id = hex_decode_exact(params["extpanid"], EXT_PAN_ID_SIZE)
    if "panid" in params:
        dataset.pan_id = parse_long(params["panid"], 0, 0xFFFF)
    if "channel" in params:
        dataset.channel = parse_long(params["channel"], 0, 0xFFFF)
    if "pskc" in params:
        dataset.pskc = hex_decode_exact(params["pskc"], PSKC_SIZE)

    dataset.active_timestamp += 1
    return dataset


class CommissioningEngine:
    """
    Commissioner and dataset commands.

    joiner_timeout is the lifetime given to every joiner entry added
    through joineradd.
    """

    def __init__(self, context, joiner_timeout: int = DEFAULT_JOINER_TIMEOUT):
        self._ctx = context
        self.joiner_timeout = joiner_timeout
        self.state_changes = 0
        self.joiner_events = 0

    # === Stack callbacks (worker thread) ===

    def on_state_changed(self, state: CommissionerState) -> None:
        self.state_changes += 1
        logger.info(f"commissioner state {_STATE_NAMES.get(state, int(state))}")

    def on_joiner_event(self, event: JoinerEvent, joiner_id: Optional[bytes]) -> None:
        self.joiner_events += 1
        joiner = hex_encode(joiner_id) if joiner_id else "any"
        logger.info(f"joiner {_JOINER_EVENT_NAMES.get(event, int(event))} ({joiner})")

    # === Handlers ===

    def handle_start(self, request: RequestContext) -> ErrorCode:
        stack = self._ctx.stack
        with self._ctx.gate:
            if stack.get_commissioner_state() == CommissionerState.DISABLED:
                stack.commissioner_start(self.on_state_changed, self.on_joiner_event)
        return ErrorCode.NONE

    def handle_joiner_add(self, request: RequestContext) -> ErrorCode:
        eui64 = parse_joiner_eui64(request.get("eui64"))
        pskd = request.get("pskd", "")

        with self._ctx.gate:
            self._ctx.stack.commissioner_add_joiner(eui64, pskd, self.joiner_timeout)

        logger.info(f"Joiner added: {hex_encode(eui64) if eui64 else 'any'}")
        return ErrorCode.NONE

    def handle_joiner_remove(self, request: RequestContext) -> ErrorCode:
        eui64 = parse_joiner_eui64(request.get("eui64"))

        with self._ctx.gate:
            self._ctx.stack.commissioner_remove_joiner(eui64)

        logger.info(f"Joiner removed: {hex_encode(eui64) if eui64 else 'any'}")
        return ErrorCode.NONE

    def handle_joiner_num(self, request: RequestContext) -> ErrorCode:
        with self._ctx.gate:
            joiners = self._ctx.stack.get_joiners()

        doc = request.response
        with doc.array("joinerList"):
            for joiner in joiners:
                with doc.table():
                    doc.add("pskc", joiner.pskd)
                    doc.add("eui64", hex_encode(joiner.eui64))
                    doc.add("isAny", 1 if joiner.any else 0)
        doc.add("joinernum", len(joiners))
        return ErrorCode.NONE

    def handle_mgmtset(self, request: RequestContext) -> ErrorCode:
        stack = self._ctx.stack
        with self._ctx.gate:
            dataset = build_dataset_update(stack.get_active_dataset(), request.params)

            if stack.get_commissioner_state() == CommissionerState.DISABLED:
                try:
                    stack.commissioner_stop()
                except StackError as e:
                    logger.debug(f"commissioner stop before management set: {e.message}")

            stack.send_mgmt_active_set(dataset)

        logger.info(f"Management set sent (active timestamp {dataset.active_timestamp})")
        return ErrorCode.NONE
