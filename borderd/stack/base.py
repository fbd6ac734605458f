"""
borderd Network Stack Interface

Defines the boundary between the gateway and the mesh network stack.
The stack owns its own worker thread; the gateway reaches it only
through the methods below.

Design Principles:
- Synchronous setters/getters, executed with the gateway's gate held
- Long operations (scan, diagnostics, commissioning) report back
  through callbacks invoked on the stack's worker thread
- Failures raise StackError carrying the stack's status code
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, List, Optional

from ..errors import ErrorCode, StackError


__all__ = [
    "ErrorCode",
    "StackError",
    "DeviceRole",
    "CommissionerState",
    "JoinerEvent",
    "MacFilterMode",
    "DiagTlvType",
    "LinkMode",
    "ScanResult",
    "NeighborInfo",
    "RouterInfo",
    "LeaderData",
    "JoinerInfo",
    "Dataset",
    "RouteData",
    "ChildEntry",
    "DiagnosticRecord",
    "DiagnosticResponse",
    "NetworkStack",
]


class DeviceRole(Enum):
    """Thread device role."""
    DISABLED = "disabled"
    DETACHED = "detached"
    CHILD = "child"
    ROUTER = "router"
    LEADER = "leader"


class CommissionerState(IntEnum):
    """Commissioner role state."""
    DISABLED = 0
    PETITION = 1
    ACTIVE = 2


class JoinerEvent(IntEnum):
    """Joiner lifecycle events reported to the commissioner."""
    START = 0
    CONNECTED = 1
    FINALIZE = 2
    END = 3
    REMOVED = 4


class MacFilterMode(IntEnum):
    """MAC address filter mode."""
    DISABLED = 0
    WHITELIST = 1
    BLACKLIST = 2


class DiagTlvType(IntEnum):
    """Network diagnostic record types."""
    EXT_ADDRESS = 0
    SHORT_ADDRESS = 1
    MODE = 2
    TIMEOUT = 3
    CONNECTIVITY = 4
    ROUTE = 5
    LEADER_DATA = 6
    NETWORK_DATA = 7
    IP6_ADDRESS_LIST = 8
    MAC_COUNTERS = 9
    BATTERY_LEVEL = 14
    SUPPLY_VOLTAGE = 15
    CHILD_TABLE = 16
    CHANNEL_PAGES = 17


@dataclass(frozen=True)
class LinkMode:
    """MLE link mode flags."""
    rx_on_when_idle: bool = False
    secure_data_requests: bool = False
    device_type: bool = False  # True for a full thread device
    network_data: bool = False  # True if full network data is requested


@dataclass
class ScanResult:
    """One beacon heard during an active scan."""
    ext_address: bytes
    network_name: str
    ext_pan_id: bytes
    pan_id: int
    channel: int
    rssi: int
    lqi: int
    is_joinable: bool = False


@dataclass
class NeighborInfo:
    """Entry of the neighbor table."""
    ext_address: bytes
    rloc16: int
    age: int = 0  # seconds since last heard
    average_rssi: int = -127
    last_rssi: int = -127
    link_quality_in: int = 0
    is_child: bool = False
    mode: LinkMode = field(default_factory=LinkMode)


@dataclass
class RouterInfo:
    """Router (parent) information."""
    ext_address: bytes
    rloc16: int
    router_id: int = 0
    age: int = 0
    link_quality_in: int = 0
    link_quality_out: int = 0


@dataclass
class LeaderData:
    """Thread leader data."""
    partition_id: int
    weighting: int
    data_version: int
    stable_data_version: int
    leader_router_id: int


@dataclass
class JoinerInfo:
    """Joiner entry held by the commissioner."""
    eui64: bytes  # all zero when any
    pskd: str
    any: bool = False
    expiration: float = 0.0  # monotonic deadline


@dataclass
class Dataset:
    """
    Operational dataset.

    A None component is absent from the dataset.
    """
    active_timestamp: int = 0
    network_key: Optional[bytes] = None
    network_name: Optional[str] = None
    ext_pan_id: Optional[bytes] = None
    pan_id: Optional[int] = None
    channel: Optional[int] = None
    pskc: Optional[bytes] = None


@dataclass
class RouteData:
    """Per-router entry of a route diagnostic record."""
    router_id: int
    link_quality_in: int = 0
    link_quality_out: int = 0
    route_cost: int = 0


@dataclass
class ChildEntry:
    """Per-child entry of a child table diagnostic record."""
    child_id: int
    timeout: int = 0
    mode: LinkMode = field(default_factory=LinkMode)


@dataclass
class DiagnosticRecord:
    """
    One typed diagnostic record.

    value holds a List[RouteData] for ROUTE records and a
    List[ChildEntry] for CHILD_TABLE records; other types carry
    whatever the stack decoded.
    """
    type: int
    value: Any = None


@dataclass
class DiagnosticResponse:
    """One peer's answer to a diagnostic query."""
    peer_address: str  # IPv6 source address of the responder
    records: List[DiagnosticRecord] = field(default_factory=list)


# Callback types
ScanCallback = Callable[[Optional[ScanResult]], None]
DiagnosticCallback = Callable[[DiagnosticResponse], None]
CommissionerStateCallback = Callable[[CommissionerState], None]
JoinerEventCallback = Callable[[JoinerEvent, Optional[bytes]], None]


class NetworkStack(ABC):
    """
    Abstract mesh network stack.

    None of these methods are thread-safe. Callers on other threads
    must hold the gate shared with the stack's worker thread; the
    worker holds the same gate while it runs callbacks.

    Usage:
        stack = ConcreteStack(gate=gate)
        stack.start()

        with gate:
            stack.set_channel(15)
            channel = stack.get_channel()
    """

    def __init__(self, name: str = "stack"):
        """
        Initialize stack base class.

        Args:
            name: Human-readable name for this stack instance
        """
        self.name = name

    # === Lifecycle ===

    @abstractmethod
    def start(self) -> None:
        """Start the stack's worker thread."""

    @abstractmethod
    def stop(self) -> None:
        """Stop the stack's worker thread."""

    # === Configuration ===

    @abstractmethod
    def get_network_name(self) -> str:
        pass

    @abstractmethod
    def set_network_name(self, name: str) -> None:
        pass

    @abstractmethod
    def get_channel(self) -> int:
        pass

    @abstractmethod
    def set_channel(self, channel: int) -> None:
        pass

    @abstractmethod
    def get_pan_id(self) -> int:
        pass

    @abstractmethod
    def set_pan_id(self, pan_id: int) -> None:
        pass

    @abstractmethod
    def get_ext_pan_id(self) -> bytes:
        pass

    @abstractmethod
    def set_ext_pan_id(self, ext_pan_id: bytes) -> None:
        pass

    @abstractmethod
    def get_network_key(self) -> bytes:
        pass

    @abstractmethod
    def set_network_key(self, key: bytes) -> None:
        pass

    @abstractmethod
    def get_pskc(self) -> bytes:
        pass

    @abstractmethod
    def set_pskc(self, pskc: bytes) -> None:
        pass

    @abstractmethod
    def get_link_mode(self) -> LinkMode:
        pass

    @abstractmethod
    def set_link_mode(self, mode: LinkMode) -> None:
        pass

    @abstractmethod
    def get_local_leader_partition_id(self) -> int:
        pass

    @abstractmethod
    def set_local_leader_partition_id(self, partition_id: int) -> None:
        pass

    # === Topology ===

    @abstractmethod
    def get_rloc16(self) -> int:
        pass

    @abstractmethod
    def get_device_role(self) -> DeviceRole:
        pass

    @abstractmethod
    def get_leader_data(self) -> LeaderData:
        """Raises StackError(DETACHED) when not attached."""

    @abstractmethod
    def get_parent_info(self) -> RouterInfo:
        """Raises StackError(INVALID_STATE) when not a child."""

    @abstractmethod
    def get_neighbors(self) -> List[NeighborInfo]:
        pass

    # === Role control ===

    @abstractmethod
    def set_ip6_enabled(self, enabled: bool) -> None:
        pass

    @abstractmethod
    def set_thread_enabled(self, enabled: bool) -> None:
        pass

    @abstractmethod
    def factory_reset(self) -> None:
        pass

    # === Asynchronous operations ===

    @abstractmethod
    def active_scan(self, callback: ScanCallback) -> None:
        """
        Start an active scan on all channels.

        callback is invoked on the worker thread once per beacon and
        finally once with None.

        Raises:
            StackError: BUSY if a scan is already running
        """

    @abstractmethod
    def set_diagnostic_callback(self, callback: Optional[DiagnosticCallback]) -> None:
        pass

    @abstractmethod
    def send_diagnostic_get(self, address: str, tlv_types: List[int]) -> None:
        """
        Send a diagnostic query.

        Every response is delivered to the diagnostic callback on the
        worker thread.
        """

    # === Commissioner ===

    @abstractmethod
    def get_commissioner_state(self) -> CommissionerState:
        pass

    @abstractmethod
    def commissioner_start(
        self,
        state_callback: CommissionerStateCallback,
        joiner_callback: JoinerEventCallback,
    ) -> None:
        pass

    @abstractmethod
    def commissioner_stop(self) -> None:
        pass

    @abstractmethod
    def commissioner_add_joiner(
        self,
        eui64: Optional[bytes],
        pskd: str,
        timeout: int,
    ) -> None:
        """Add a joiner; eui64 None means any joiner."""

    @abstractmethod
    def commissioner_remove_joiner(self, eui64: Optional[bytes]) -> None:
        """Remove a joiner; eui64 None removes the any-joiner entry."""

    @abstractmethod
    def get_joiners(self) -> List[JoinerInfo]:
        pass

    # === Datasets ===

    @abstractmethod
    def get_active_dataset(self) -> Dataset:
        pass

    @abstractmethod
    def send_mgmt_active_set(self, dataset: Dataset) -> None:
        pass

    # === MAC filter ===

    @abstractmethod
    def get_mac_filter_mode(self) -> MacFilterMode:
        pass

    @abstractmethod
    def set_mac_filter_mode(self, mode: MacFilterMode) -> None:
        pass

    @abstractmethod
    def mac_filter_add(self, ext_address: bytes) -> None:
        """Raises StackError(ALREADY) if the address is present."""

    @abstractmethod
    def mac_filter_remove(self, ext_address: bytes) -> None:
        pass

    @abstractmethod
    def mac_filter_clear(self) -> None:
        pass

    @abstractmethod
    def get_mac_filter_addresses(self) -> List[bytes]:
        pass
