"""
borderd Generic Get/Set Engine

Parameterized read/write of named configuration fields.

Each Field pairs a read command (stack getter + formatter, one reply
key) with an optional write command (parameter parser + stack setter).
Parameters are parsed and validated before the gate is taken, so a
malformed value never reaches the stack.

Formatting:
- byte strings: lowercase hex
- 16-bit identifiers: "0x%04x"
- link mode: subset of "rsdn" in that order
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .. import EXT_ADDRESS_SIZE, EXT_PAN_ID_SIZE, NETWORK_KEY_SIZE, PSKC_SIZE
from ..codec import format_u16, hex_decode_exact, hex_encode, parse_long
from ..errors import ErrorCode, ParseError, StackError
from ..rpc.dispatch import CommandDescriptor, ParamSpec, ParamType, RequestContext, command
from ..stack.base import LinkMode, MacFilterMode, NetworkStack


logger = logging.getLogger(__name__)

MODE_FLAGS = "rsdn"

MAC_FILTER_STATES = {
    MacFilterMode.DISABLED: "disable",
    MacFilterMode.WHITELIST: "whitelist",
    MacFilterMode.BLACKLIST: "blacklist",
}


# === Formatters and parsers ===

def format_mode(mode: LinkMode) -> str:
    """Render link mode flags as a subset of "rsdn"."""
    flags = (
        mode.rx_on_when_idle,
        mode.secure_data_requests,
        mode.device_type,
        mode.network_data,
    )
    return "".join(ch for ch, on in zip(MODE_FLAGS, flags) if on)


def parse_mode(text: str) -> LinkMode:
    """
    Parse a mode string made of the characters r, s, d and n.

    Raises:
        ParseError: On any other character
    """
    bad = set(text) - set(MODE_FLAGS)
    if bad:
        raise ParseError(f"invalid mode flag(s): {''.join(sorted(bad))}")
    return LinkMode(
        rx_on_when_idle="r" in text,
        secure_data_requests="s" in text,
        device_type="d" in text,
        network_data="n" in text,
    )


def parse_mac_filter_state(text: str) -> MacFilterMode:
    for mode, name in MAC_FILTER_STATES.items():
        if text == name:
            return mode
    raise ParseError(f"unknown MAC filter state {text!r}")


def _hex_parser(length: int) -> Callable[[str], bytes]:
    return lambda text: hex_decode_exact(text, length)


def _identity(value: Any) -> Any:
    return value


# === Field table ===

@dataclass(frozen=True)
class Field:
    """
    One readable (and optionally writable) configuration field.

    Attributes:
        name: Read command name
        key: Reply key of the read command
        read: Fetches and formats the value, gate held
        setter: Write command name
        param: Write command parameter
        parse: Converts the parameter to the stack value
        write: Applies the value, gate held
    """
    name: str
    key: str
    read: Callable[[NetworkStack], Any]
    setter: Optional[str] = None
    param: Optional[ParamSpec] = None
    parse: Callable[[Any], Any] = _identity
    write: Optional[Callable[[NetworkStack, Any], None]] = None

    def handle_read(self, gw, request: RequestContext) -> ErrorCode:
        with gw.gate:
            value = self.read(gw.stack)
        request.response.add(self.key, value)
        return ErrorCode.NONE

    def handle_write(self, gw, request: RequestContext) -> ErrorCode:
        raw = request.get(self.param.name)
        if raw is None:
            return ErrorCode.NONE

        value = self.parse(raw)
        with gw.gate:
            self.write(gw.stack, value)
        logger.info(f"{self.name} set to {raw!r}")
        return ErrorCode.NONE

    def descriptors(self) -> List[CommandDescriptor]:
        result = [command(self.name, self.handle_read)]
        if self.setter:
            result.append(command(self.setter, self.handle_write, self.param))
        return result


FIELDS = (
    Field(
        "networkname", "NetworkName",
        read=lambda s: s.get_network_name(),
        setter="setnetworkname",
        param=ParamSpec("networkname", ParamType.STRING),
        write=lambda s, v: s.set_network_name(v),
    ),
    Field(
        "state", "State",
        read=lambda s: s.get_device_role().value,
    ),
    Field(
        "channel", "Channel",
        read=lambda s: s.get_channel(),
        setter="setchannel",
        param=ParamSpec("channel", ParamType.INT32),
        write=lambda s, v: s.set_channel(v),
    ),
    Field(
        "panid", "PanId",
        read=lambda s: format_u16(s.get_pan_id()),
        setter="setpanid",
        param=ParamSpec("panid", ParamType.STRING),
        parse=lambda text: parse_long(text, 0, 0xFFFF),
        write=lambda s, v: s.set_pan_id(v),
    ),
    Field(
        "rloc16", "rloc16",
        read=lambda s: format_u16(s.get_rloc16()),
    ),
    Field(
        "extpanid", "ExtPanId",
        read=lambda s: hex_encode(s.get_ext_pan_id()),
        setter="setextpanid",
        param=ParamSpec("extpanid", ParamType.STRING),
        parse=_hex_parser(EXT_PAN_ID_SIZE),
        write=lambda s, v: s.set_ext_pan_id(v),
    ),
    Field(
        "masterkey", "Masterkey",
        read=lambda s: hex_encode(s.get_network_key()),
        setter="setmasterkey",
        param=ParamSpec("masterkey", ParamType.STRING),
        parse=_hex_parser(NETWORK_KEY_SIZE),
        write=lambda s, v: s.set_network_key(v),
    ),
    Field(
        "pskc", "pskc",
        read=lambda s: hex_encode(s.get_pskc()),
        setter="setpskc",
        param=ParamSpec("pskc", ParamType.STRING),
        parse=_hex_parser(PSKC_SIZE),
        write=lambda s, v: s.set_pskc(v),
    ),
    Field(
        "mode", "Mode",
        read=lambda s: format_mode(s.get_link_mode()),
        setter="setmode",
        param=ParamSpec("mode", ParamType.STRING),
        parse=parse_mode,
        write=lambda s, v: s.set_link_mode(v),
    ),
    Field(
        "leaderpartitionid", "Leaderpartitionid",
        read=lambda s: s.get_local_leader_partition_id(),
        setter="setleaderpartitionid",
        param=ParamSpec("leaderpartitionid", ParamType.INT32),
        write=lambda s, v: s.set_local_leader_partition_id(v),
    ),
    Field(
        "macfilterstate", "state",
        read=lambda s: MAC_FILTER_STATES[s.get_mac_filter_mode()],
        setter="macfiltersetstate",
        param=ParamSpec("state", ParamType.STRING),
        parse=parse_mac_filter_state,
        write=lambda s, v: s.set_mac_filter_mode(v),
    ),
)


# === MAC filter address list ===

def handle_macfilter_addr(gw, request: RequestContext) -> ErrorCode:
    with gw.gate:
        addresses = gw.stack.get_mac_filter_addresses()

    doc = request.response
    with doc.array("addrlist"):
        for address in addresses:
            doc.add(None, hex_encode(address))
    return ErrorCode.NONE


def handle_macfilter_add(gw, request: RequestContext) -> ErrorCode:
    raw = request.get("addr")
    if raw is None:
        return ErrorCode.NONE

    address = hex_decode_exact(raw, EXT_ADDRESS_SIZE)
    with gw.gate:
        try:
            gw.stack.mac_filter_add(address)
        except StackError as e:
            if e.code != ErrorCode.ALREADY:
                raise
            logger.debug(f"MAC filter already holds {raw}")
    return ErrorCode.NONE


def handle_macfilter_remove(gw, request: RequestContext) -> ErrorCode:
    raw = request.get("addr")
    if raw is None:
        return ErrorCode.NONE

    address = hex_decode_exact(raw, EXT_ADDRESS_SIZE)
    with gw.gate:
        gw.stack.mac_filter_remove(address)
    return ErrorCode.NONE


def handle_macfilter_clear(gw, request: RequestContext) -> ErrorCode:
    with gw.gate:
        gw.stack.mac_filter_clear()
    return ErrorCode.NONE


def field_commands() -> List[CommandDescriptor]:
    """Commands served by the get/set engine."""
    descriptors: List[CommandDescriptor] = []
    for item in FIELDS:
        descriptors.extend(item.descriptors())

    addr = ParamSpec("addr", ParamType.STRING)
    descriptors.extend([
        command("macfilteraddr", handle_macfilter_addr),
        command("macfilteradd", handle_macfilter_add, addr),
        command("macfilterremove", handle_macfilter_remove, addr),
        command("macfilterclear", handle_macfilter_clear),
    ])
    return descriptors
