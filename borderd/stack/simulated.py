"""
borderd Simulated Network Stack

An in-process stack with its own worker thread, for running the
gateway without a radio co-processor and for testing.

Useful for:
- Unit and integration testing of the gateway
- Development without hardware
- Scripted topologies (scan targets, diagnostic responders)

Features:
- Worker thread that selects on the wake channel and runs scheduled
  tasks with the shared gate held, like a real stack's event loop
- Validation and status codes modeled on the real stack API
- Configurable scan results and diagnostic responders
"""

import heapq
import ipaddress
import itertools
import logging
import selectors
import threading
import time
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from .. import (
    EXT_ADDRESS_SIZE,
    EXT_PAN_ID_SIZE,
    NETWORK_KEY_SIZE,
    NETWORK_NAME_MAX_SIZE,
    PSKC_SIZE,
)
from ..crypto.pskc import compute_joiner_id
from ..gateway.gate import SyncGate
from ..rpc.wake import WakeChannel
from .base import (
    ChildEntry,
    CommissionerState,
    CommissionerStateCallback,
    Dataset,
    DeviceRole,
    DiagnosticCallback,
    DiagnosticRecord,
    DiagnosticResponse,
    DiagTlvType,
    ErrorCode,
    JoinerEvent,
    JoinerEventCallback,
    JoinerInfo,
    LeaderData,
    LinkMode,
    MacFilterMode,
    NeighborInfo,
    NetworkStack,
    RouteData,
    RouterInfo,
    ScanCallback,
    ScanResult,
    StackError,
)


logger = logging.getLogger(__name__)

# IEEE 802.15.4 2.4 GHz channel range
CHANNEL_MIN = 11
CHANNEL_MAX = 26

# Invalid short address reported while detached
INVALID_RLOC16 = 0xFFFE

# Table capacities
MAC_FILTER_MAX_ENTRIES = 32
MAX_JOINERS = 4

# PSKd length limits
PSKD_MAX_LENGTH = 32

# Default network parameters
DEFAULT_NETWORK_NAME = "OpenThread"
DEFAULT_CHANNEL = 11
DEFAULT_PAN_ID = 0xFACE
DEFAULT_EXT_PAN_ID = bytes.fromhex("dead00beef00cafe")
DEFAULT_NETWORK_KEY = bytes.fromhex("00112233445566778899aabbccddeeff")
DEFAULT_PSKC = bytes.fromhex("c23a76e98f1a6483639b1ac1271e2e27")
DEFAULT_LINK_MODE = LinkMode(
    rx_on_when_idle=True,
    secure_data_requests=True,
    device_type=True,
    network_data=True,
)

# Router id taken when attaching as leader
LEADER_ROUTER_ID = 1

# Default partition id when no local leader partition id is set
DEFAULT_PARTITION_ID = 0x12345678

# Task timing (seconds)
DEFAULT_TICK = 0.05
SCAN_STEP = 0.01
DIAGNOSTIC_STEP = 0.01
PETITION_DELAY = 0.02
JOIN_STEP = 0.01


Task = Callable[[], None]


def default_scan_results() -> List[ScanResult]:
    """Networks heard by a fresh simulated stack."""
    return [
        ScanResult(
            ext_address=bytes.fromhex("1ac5e1d5bd3a8c6e"),
            network_name="OpenThread-beef",
            ext_pan_id=bytes.fromhex("dead00beef00cafe"),
            pan_id=0xBEEF,
            channel=15,
            rssi=-42,
            lqi=200,
            is_joinable=True,
        ),
        ScanResult(
            ext_address=bytes.fromhex("36a4f2e0a2d2b7a1"),
            network_name="HomeMesh",
            ext_pan_id=bytes.fromhex("1122334455667788"),
            pan_id=0x1234,
            channel=20,
            rssi=-71,
            lqi=96,
            is_joinable=False,
        ),
    ]


def default_diagnostic_peers() -> List[DiagnosticResponse]:
    """Routers answering a diagnostic query on a fresh simulated stack."""
    return [
        DiagnosticResponse(
            peer_address="fdde:ad00:beef:0:0:ff:fe00:400",
            records=[
                DiagnosticRecord(DiagTlvType.ROUTE, [
                    RouteData(router_id=1, link_quality_in=0, link_quality_out=0),
                    RouteData(router_id=3, link_quality_in=3, link_quality_out=3, route_cost=1),
                ]),
                DiagnosticRecord(DiagTlvType.CHILD_TABLE, [
                    ChildEntry(child_id=1, timeout=240, mode=LinkMode(
                        rx_on_when_idle=True, secure_data_requests=True,
                        device_type=False, network_data=False,
                    )),
                ]),
            ],
        ),
        DiagnosticResponse(
            peer_address="fdde:ad00:beef:0:0:ff:fe00:c00",
            records=[
                DiagnosticRecord(DiagTlvType.ROUTE, [
                    RouteData(router_id=1, link_quality_in=2, link_quality_out=3, route_cost=1),
                ]),
                DiagnosticRecord(DiagTlvType.CHILD_TABLE, []),
            ],
        ),
    ]


class SimulatedStack(NetworkStack):
    """
    Simulated mesh network stack.

    The stack's state is only touched with the gate held: by callers
    on other threads, and by the worker thread while it runs tasks
    and invokes callbacks.

    Usage:
        gate = SyncGate()
        wake = WakeChannel()
        stack = SimulatedStack(gate=gate, wake=wake)
        stack.start()

        with gate:
            stack.set_ip6_enabled(True)
            stack.set_thread_enabled(True)
        wake.notify()

        stack.wait_idle()
        stack.stop()
    """

    def __init__(
        self,
        gate: Optional[SyncGate] = None,
        wake: Optional[WakeChannel] = None,
        name: str = "simulated",
        tick: float = DEFAULT_TICK,
        scan_results: Optional[List[ScanResult]] = None,
        diagnostic_peers: Optional[List[DiagnosticResponse]] = None,
        neighbors: Optional[List[NeighborInfo]] = None,
        parent: Optional[RouterInfo] = None,
    ):
        """
        Initialize simulated stack.

        Args:
            gate: Gate shared with the gateway (created if omitted)
            wake: Wake channel the worker selects on
            name: Stack instance name
            tick: Maximum worker sleep between task checks (seconds)
            scan_results: Beacons reported by active_scan()
            diagnostic_peers: Responders to send_diagnostic_get()
            neighbors: Neighbor table reported once attached
            parent: Attach as a child of this parent instead of as leader
        """
        super().__init__(name)
        self.gate = gate or SyncGate()
        self._wake = wake
        self._tick = tick

        self.scan_results = (
            default_scan_results() if scan_results is None else scan_results
        )
        self.diagnostic_peers = (
            default_diagnostic_peers() if diagnostic_peers is None else diagnostic_peers
        )
        self.neighbors = neighbors or []
        self.parent = parent

        # Worker thread and task queue
        self._tasks: List[Tuple[float, int, Task]] = []
        self._task_seq = itertools.count()
        self._task_lock = threading.Lock()
        self._kick = threading.Event()
        self._idle = threading.Event()
        self._idle.set()
        self._running = False
        self._thread: Optional[threading.Thread] = None

        # Counters
        self.scans_started = 0
        self.diagnostic_queries = 0
        self.mgmt_sets = 0

        self._scan_callback: Optional[ScanCallback] = None
        self._diagnostic_callback: Optional[DiagnosticCallback] = None

        self._reset_state()

    def _reset_state(self) -> None:
        """Restore factory defaults."""
        self._network_name = DEFAULT_NETWORK_NAME
        self._channel = DEFAULT_CHANNEL
        self._pan_id = DEFAULT_PAN_ID
        self._ext_pan_id = DEFAULT_EXT_PAN_ID
        self._network_key = DEFAULT_NETWORK_KEY
        self._pskc = DEFAULT_PSKC
        self._link_mode = DEFAULT_LINK_MODE
        self._local_partition_id = 0
        self._active_timestamp = 0

        self._ip6_enabled = False
        self._thread_enabled = False
        self._role = DeviceRole.DISABLED
        self._rloc16 = INVALID_RLOC16

        self._mac_filter_mode = MacFilterMode.DISABLED
        self._mac_filter: List[bytes] = []

        self._commissioner_state = CommissionerState.DISABLED
        self._commissioner_state_cb: Optional[CommissionerStateCallback] = None
        self._joiner_cb: Optional[JoinerEventCallback] = None
        self._joiners: List[JoinerInfo] = []

        self._scan_callback = None

    # === Lifecycle ===

    def start(self) -> None:
        """Start the worker thread."""
        if self._running:
            return

        self._running = True
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="stack-worker",
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop the worker thread."""
        self._running = False
        self._kick.set()

        if self._thread:
            self._thread.join(timeout=5.0)
            self._thread = None

    @property
    def is_running(self) -> bool:
        return self._running

    def wait_idle(self, timeout: float = 5.0) -> bool:
        """
        Wait until no task is queued or running.

        Must be called without the gate held.

        Returns:
            True if the worker went idle before the timeout
        """
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            with self._task_lock:
                pending = bool(self._tasks)
            if not pending and self._idle.is_set():
                return True
            self._kick.set()
            time.sleep(0.005)
        return False

    # === Worker ===

    def _schedule(self, delay: float, task: Task) -> None:
        """Queue a task to run on the worker after delay seconds."""
        due = time.monotonic() + delay
        with self._task_lock:
            heapq.heappush(self._tasks, (due, next(self._task_seq), task))
            self._idle.clear()
        if self._wake is None:
            self._kick.set()

    def _next_timeout(self) -> float:
        with self._task_lock:
            if not self._tasks:
                return self._tick
            return max(0.0, min(self._tick, self._tasks[0][0] - time.monotonic()))

    def _run(self) -> None:
        """Worker event loop."""
        selector = selectors.DefaultSelector()
        if self._wake is not None:
            selector.register(self._wake, selectors.EVENT_READ)

        try:
            while self._running:
                timeout = self._next_timeout()
                if self._wake is not None:
                    if selector.select(timeout):
                        self._wake.drain()
                else:
                    self._kick.wait(timeout)
                self._kick.clear()

                self._process_due_tasks()
        finally:
            selector.close()

    def _process_due_tasks(self) -> None:
        now = time.monotonic()
        while True:
            with self._task_lock:
                if not self._tasks or self._tasks[0][0] > now:
                    if not self._tasks:
                        self._idle.set()
                    return
                _, _, task = heapq.heappop(self._tasks)

            try:
                with self.gate:
                    task()
            except Exception as e:
                logger.error(f"Stack task error: {e}")

    # === Helpers ===

    def _require_disabled(self) -> None:
        if self._role != DeviceRole.DISABLED:
            raise StackError(ErrorCode.INVALID_STATE, "thread protocol is enabled")

    def _is_attached(self) -> bool:
        return self._role in (DeviceRole.CHILD, DeviceRole.ROUTER, DeviceRole.LEADER)

    # === Configuration ===

    def get_network_name(self) -> str:
        return self._network_name

    def set_network_name(self, name: str) -> None:
        if len(name.encode("utf-8")) > NETWORK_NAME_MAX_SIZE:
            raise StackError(ErrorCode.INVALID_ARGS, "network name too long")
        self._require_disabled()
        self._network_name = name

    def get_channel(self) -> int:
        return self._channel

    def set_channel(self, channel: int) -> None:
        if not CHANNEL_MIN <= channel <= CHANNEL_MAX:
            raise StackError(ErrorCode.INVALID_ARGS, f"channel {channel} out of range")
        self._require_disabled()
        self._channel = channel

    def get_pan_id(self) -> int:
        return self._pan_id

    def set_pan_id(self, pan_id: int) -> None:
        if not 0 <= pan_id <= 0xFFFE:
            raise StackError(ErrorCode.INVALID_ARGS, f"invalid PAN ID {pan_id:#x}")
        self._require_disabled()
        self._pan_id = pan_id

    def get_ext_pan_id(self) -> bytes:
        return self._ext_pan_id

    def set_ext_pan_id(self, ext_pan_id: bytes) -> None:
        if len(ext_pan_id) != EXT_PAN_ID_SIZE:
            raise StackError(ErrorCode.INVALID_ARGS, "invalid extended PAN ID")
        self._require_disabled()
        self._ext_pan_id = bytes(ext_pan_id)

    def get_network_key(self) -> bytes:
        return self._network_key

    def set_network_key(self, key: bytes) -> None:
        if len(key) != NETWORK_KEY_SIZE:
            raise StackError(ErrorCode.INVALID_ARGS, "invalid network key")
        self._require_disabled()
        self._network_key = bytes(key)

    def get_pskc(self) -> bytes:
        return self._pskc

    def set_pskc(self, pskc: bytes) -> None:
        if len(pskc) != PSKC_SIZE:
            raise StackError(ErrorCode.INVALID_ARGS, "invalid PSKc")
        self._require_disabled()
        self._pskc = bytes(pskc)

    def get_link_mode(self) -> LinkMode:
        return self._link_mode

    def set_link_mode(self, mode: LinkMode) -> None:
        # A full thread device must keep its receiver on
        if mode.device_type and not mode.rx_on_when_idle:
            raise StackError(ErrorCode.INVALID_ARGS, "FTD requires rx-on-when-idle")
        self._link_mode = mode

    def get_local_leader_partition_id(self) -> int:
        return self._local_partition_id

    def set_local_leader_partition_id(self, partition_id: int) -> None:
        self._local_partition_id = partition_id & 0xFFFFFFFF

    # === Topology ===

    def get_rloc16(self) -> int:
        return self._rloc16

    def get_device_role(self) -> DeviceRole:
        return self._role

    def get_leader_data(self) -> LeaderData:
        if not self._is_attached():
            raise StackError(ErrorCode.DETACHED, "not attached")

        leader_id = LEADER_ROUTER_ID
        if self._role == DeviceRole.CHILD and self.parent is not None:
            leader_id = self.parent.router_id
        return LeaderData(
            partition_id=self._local_partition_id or DEFAULT_PARTITION_ID,
            weighting=64,
            data_version=self._active_timestamp & 0xFF,
            stable_data_version=self._active_timestamp & 0xFF,
            leader_router_id=leader_id,
        )

    def get_parent_info(self) -> RouterInfo:
        if self._role != DeviceRole.CHILD or self.parent is None:
            raise StackError(ErrorCode.INVALID_STATE, "not a child")
        return self.parent

    def get_neighbors(self) -> List[NeighborInfo]:
        if not self._is_attached():
            return []
        return list(self.neighbors)

    # === Role control ===

    def set_ip6_enabled(self, enabled: bool) -> None:
        if not enabled and self._thread_enabled:
            raise StackError(ErrorCode.INVALID_STATE, "thread still enabled")
        self._ip6_enabled = enabled

    def set_thread_enabled(self, enabled: bool) -> None:
        if enabled:
            if not self._ip6_enabled:
                raise StackError(ErrorCode.INVALID_STATE, "interface is down")
            if self._thread_enabled:
                return
            self._thread_enabled = True
            self._role = DeviceRole.DETACHED
            self._schedule(0, self._attach)
        else:
            self._thread_enabled = False
            self._role = DeviceRole.DISABLED
            self._rloc16 = INVALID_RLOC16

    def _attach(self) -> None:
        if self._role != DeviceRole.DETACHED:
            return
        if self.parent is not None:
            self._role = DeviceRole.CHILD
            self._rloc16 = (self.parent.rloc16 & 0xFC00) | 1
        else:
            self._role = DeviceRole.LEADER
            self._rloc16 = LEADER_ROUTER_ID << 10
        logger.info(f"{self.name}: attached as {self._role.value} rloc16=0x{self._rloc16:04x}")

    def factory_reset(self) -> None:
        logger.info(f"{self.name}: factory reset")
        with self._task_lock:
            self._tasks.clear()
        self._reset_state()

    # === Active scan ===

    def active_scan(self, callback: ScanCallback) -> None:
        if self._scan_callback is not None:
            raise StackError(ErrorCode.BUSY, "scan in progress")

        self._scan_callback = callback
        self.scans_started += 1

        results = list(self.scan_results)
        for index, result in enumerate(results):
            self._schedule(SCAN_STEP * (index + 1), self._make_scan_task(result))
        self._schedule(SCAN_STEP * (len(results) + 1), self._make_scan_task(None))

    def _make_scan_task(self, result: Optional[ScanResult]) -> Task:
        def deliver() -> None:
            callback = self._scan_callback
            if callback is None:
                return
            if result is None:
                self._scan_callback = None
            callback(result)
        return deliver

    # === Diagnostics ===

    def set_diagnostic_callback(self, callback: Optional[DiagnosticCallback]) -> None:
        self._diagnostic_callback = callback

    def send_diagnostic_get(self, address: str, tlv_types: List[int]) -> None:
        try:
            ipaddress.IPv6Address(address)
        except ValueError:
            raise StackError(ErrorCode.INVALID_ARGS, f"invalid address {address!r}") from None

        self.diagnostic_queries += 1
        wanted = set(int(t) for t in tlv_types)

        for index, peer in enumerate(self.diagnostic_peers):
            response = DiagnosticResponse(
                peer_address=peer.peer_address,
                records=[r for r in peer.records if int(r.type) in wanted],
            )
            self._schedule(DIAGNOSTIC_STEP * (index + 1), self._make_diagnostic_task(response))

    def _make_diagnostic_task(self, response: DiagnosticResponse) -> Task:
        def deliver() -> None:
            if self._diagnostic_callback is not None:
                self._diagnostic_callback(response)
        return deliver

    # === Commissioner ===

    def get_commissioner_state(self) -> CommissionerState:
        return self._commissioner_state

    def _set_commissioner_state(self, state: CommissionerState) -> None:
        self._commissioner_state = state
        callback = self._commissioner_state_cb
        if callback is not None:
            callback(state)

    def commissioner_start(
        self,
        state_callback: CommissionerStateCallback,
        joiner_callback: JoinerEventCallback,
    ) -> None:
        if self._commissioner_state != CommissionerState.DISABLED:
            raise StackError(ErrorCode.ALREADY, "commissioner already started")

        self._commissioner_state_cb = state_callback
        self._joiner_cb = joiner_callback
        self._commissioner_state = CommissionerState.PETITION
        self._schedule(0, lambda: self._set_commissioner_state(CommissionerState.PETITION))
        self._schedule(PETITION_DELAY, self._petition_accepted)

    def _petition_accepted(self) -> None:
        if self._commissioner_state == CommissionerState.PETITION:
            self._set_commissioner_state(CommissionerState.ACTIVE)

    def commissioner_stop(self) -> None:
        if self._commissioner_state == CommissionerState.DISABLED:
            raise StackError(ErrorCode.ALREADY, "commissioner not started")

        self._commissioner_state = CommissionerState.DISABLED
        self._joiners.clear()
        self._schedule(0, lambda: self._set_commissioner_state(CommissionerState.DISABLED))

    def _find_joiner(self, eui64: Optional[bytes]) -> Optional[JoinerInfo]:
        for joiner in self._joiners:
            if eui64 is None and joiner.any:
                return joiner
            if eui64 is not None and not joiner.any and joiner.eui64 == eui64:
                return joiner
        return None

    def commissioner_add_joiner(
        self,
        eui64: Optional[bytes],
        pskd: str,
        timeout: int,
    ) -> None:
        if not pskd or len(pskd) > PSKD_MAX_LENGTH:
            raise StackError(ErrorCode.INVALID_ARGS, "invalid PSKd")
        if eui64 is not None and len(eui64) != EXT_ADDRESS_SIZE:
            raise StackError(ErrorCode.INVALID_ARGS, "invalid EUI-64")

        expiration = time.monotonic() + timeout
        existing = self._find_joiner(eui64)
        if existing is not None:
            existing.pskd = pskd
            existing.expiration = expiration
            return

        if len(self._joiners) >= MAX_JOINERS:
            raise StackError(ErrorCode.NO_BUFS, "joiner table full")

        self._joiners.append(JoinerInfo(
            eui64=bytes(eui64) if eui64 is not None else bytes(EXT_ADDRESS_SIZE),
            pskd=pskd,
            any=eui64 is None,
            expiration=expiration,
        ))

    def commissioner_remove_joiner(self, eui64: Optional[bytes]) -> None:
        joiner = self._find_joiner(eui64)
        if joiner is None:
            raise StackError(ErrorCode.NOT_FOUND, "no such joiner")

        self._joiners.remove(joiner)
        joiner_id = None if joiner.any else compute_joiner_id(joiner.eui64)
        self._schedule(0, lambda: self._emit_joiner_event(JoinerEvent.REMOVED, joiner_id))

    def get_joiners(self) -> List[JoinerInfo]:
        now = time.monotonic()
        self._joiners = [j for j in self._joiners if j.expiration > now]
        return list(self._joiners)

    def _emit_joiner_event(self, event: JoinerEvent, joiner_id: Optional[bytes]) -> None:
        if self._joiner_cb is not None:
            self._joiner_cb(event, joiner_id)

    def simulate_join(self, eui64: bytes) -> None:
        """
        Play a successful join of a device through the commissioner.

        Emits START, CONNECTED, FINALIZE and END joiner events.

        Raises:
            StackError: INVALID_STATE if the commissioner is not active,
                        NOT_FOUND if no entry accepts this device
        """
        if self._commissioner_state != CommissionerState.ACTIVE:
            raise StackError(ErrorCode.INVALID_STATE, "commissioner not active")
        if self._find_joiner(bytes(eui64)) is None and self._find_joiner(None) is None:
            raise StackError(ErrorCode.NOT_FOUND, "no joiner entry")

        joiner_id = compute_joiner_id(bytes(eui64))
        events = (JoinerEvent.START, JoinerEvent.CONNECTED, JoinerEvent.FINALIZE, JoinerEvent.END)
        for step, event in enumerate(events):
            self._schedule(
                JOIN_STEP * step,
                lambda event=event: self._emit_joiner_event(event, joiner_id),
            )

    # === Datasets ===

    def get_active_dataset(self) -> Dataset:
        return Dataset(
            active_timestamp=self._active_timestamp,
            network_key=self._network_key,
            network_name=self._network_name,
            ext_pan_id=self._ext_pan_id,
            pan_id=self._pan_id,
            channel=self._channel,
            pskc=self._pskc,
        )

    def send_mgmt_active_set(self, dataset: Dataset) -> None:
        if dataset.channel is not None and not CHANNEL_MIN <= dataset.channel <= CHANNEL_MAX:
            raise StackError(ErrorCode.INVALID_ARGS, f"channel {dataset.channel} out of range")
        if dataset.network_name is not None and (
            len(dataset.network_name.encode("utf-8")) > NETWORK_NAME_MAX_SIZE
        ):
            raise StackError(ErrorCode.INVALID_ARGS, "network name too long")

        self.mgmt_sets += 1
        pending = replace(dataset)
        self._schedule(0, lambda: self._apply_dataset(pending))

    def _apply_dataset(self, dataset: Dataset) -> None:
        if dataset.active_timestamp <= self._active_timestamp:
            logger.warning(f"{self.name}: rejected dataset with stale timestamp")
            return

        self._active_timestamp = dataset.active_timestamp
        if dataset.network_key is not None:
            self._network_key = dataset.network_key
        if dataset.network_name is not None:
            self._network_name = dataset.network_name
        if dataset.ext_pan_id is not None:
            self._ext_pan_id = dataset.ext_pan_id
        if dataset.pan_id is not None:
            self._pan_id = dataset.pan_id
        if dataset.channel is not None:
            self._channel = dataset.channel
        if dataset.pskc is not None:
            self._pskc = dataset.pskc
        logger.info(f"{self.name}: active dataset updated (timestamp {self._active_timestamp})")

    # === MAC filter ===

    def get_mac_filter_mode(self) -> MacFilterMode:
        return self._mac_filter_mode

    def set_mac_filter_mode(self, mode: MacFilterMode) -> None:
        self._mac_filter_mode = MacFilterMode(mode)

    def mac_filter_add(self, ext_address: bytes) -> None:
        if len(ext_address) != EXT_ADDRESS_SIZE:
            raise StackError(ErrorCode.INVALID_ARGS, "invalid extended address")
        if ext_address in self._mac_filter:
            raise StackError(ErrorCode.ALREADY, "address already filtered")
        if len(self._mac_filter) >= MAC_FILTER_MAX_ENTRIES:
            raise StackError(ErrorCode.NO_BUFS, "MAC filter full")
        self._mac_filter.append(bytes(ext_address))

    def mac_filter_remove(self, ext_address: bytes) -> None:
        try:
            self._mac_filter.remove(bytes(ext_address))
        except ValueError:
            raise StackError(ErrorCode.NOT_FOUND, "address not filtered") from None

    def mac_filter_clear(self) -> None:
        self._mac_filter.clear()

    def get_mac_filter_addresses(self) -> List[bytes]:
        return list(self._mac_filter)
