"""Tests for the synchronization gate and the wake channel."""

import select
import threading

import pytest

from borderd.errors import ErrorCode, StackError, WakeError
from borderd.gateway import GatewayContext, SyncGate, build_dispatch_table
from borderd.rpc.wake import WakeChannel


class FailingStack:
    """Stack whose every method fails."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise StackError(ErrorCode.FAILED, f"{name} failed")
        return fail


# Well-formed values for every parameter any command declares
VALID_PARAMS = {
    "networkname": "Lab",
    "channel": 15,
    "panid": "0x1234",
    "extpanid": "0011223344556677",
    "masterkey": "00112233445566778899aabbccddeeff",
    "pskc": "00112233445566778899aabbccddeeff",
    "mode": "rsdn",
    "leaderpartitionid": 7,
    "state": "whitelist",
    "addr": "0011223344556677",
    "pskd": "J01NME",
    "eui64": "*",
}


class TestSyncGate:
    """Test gate locking behavior."""

    def test_acquire_release(self, gate):
        assert gate.acquire()
        assert gate.locked()
        assert gate.owner == threading.current_thread().name
        gate.release()
        assert not gate.locked()
        assert gate.owner is None

    def test_context_manager_releases_on_exception(self, gate):
        with pytest.raises(RuntimeError):
            with gate:
                raise RuntimeError("stack blew up")
        assert not gate.locked()

    def test_excludes_other_threads(self, gate):
        results = []

        with gate:
            t = threading.Thread(target=lambda: results.append(gate.acquire(timeout=0.05)))
            t.start()
            t.join()
        assert results == [False]

    def test_repr(self, gate):
        assert "free" in repr(gate)
        with gate:
            assert "held by" in repr(gate)


class TestGateRelease:
    """Every command leaves the gate free, whatever the stack does."""

    @pytest.fixture
    def failing_table(self, gate):
        ctx = GatewayContext(FailingStack(), gate, scan_timeout=0.1)
        return build_dispatch_table(ctx)

    def test_all_commands_fail_cleanly(self, failing_table, gate):
        for descriptor in failing_table:
            reply = failing_table.dispatch(descriptor.name, VALID_PARAMS)
            assert reply["Error"] == ErrorCode.FAILED, descriptor.name
            assert not gate.locked(), descriptor.name

    def test_gate_free_after_parse_errors(self, table, gate):
        table.dispatch("setextpanid", {"extpanid": "xyz"})
        table.dispatch("joineradd", {"eui64": "nothex", "pskd": "J01NME"})
        table.dispatch("mgmtset", {"pskc": "00"})
        assert not gate.locked()


class TestWakeChannel:
    """Test the pipe-backed wake channel."""

    def test_notify_makes_readable(self, wake):
        wake.notify()
        readable, _, _ = select.select([wake], [], [], 0.5)
        assert readable == [wake]
        assert wake.notifications == 1

    def test_drain(self, wake):
        for _ in range(3):
            wake.notify()
        assert wake.drain() == 3
        assert wake.drain() == 0
        readable, _, _ = select.select([wake], [], [], 0)
        assert readable == []

    def test_full_pipe_is_not_an_error(self, wake):
        for _ in range(70000):
            wake.notify()
        assert wake.notifications == 70000
        assert wake.drain() > 0

    def test_closed_channel(self):
        channel = WakeChannel()
        channel.close()
        assert channel.closed
        with pytest.raises(WakeError) as exc:
            channel.notify()
        assert exc.value.code == ErrorCode.FAILED
        with pytest.raises(ValueError):
            channel.fileno()
        assert channel.drain() == 0
        channel.close()
