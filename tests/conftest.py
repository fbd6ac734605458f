"""Shared fixtures: gate, wake channel, simulated stack, gateway and dispatch table."""

import shutil
import tempfile
from pathlib import Path

import pytest

from borderd.gateway import GatewayContext, SyncGate, build_dispatch_table
from borderd.rpc.server import RPCServer
from borderd.rpc.wake import WakeChannel
from borderd.stack.simulated import SimulatedStack


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def gate():
    return SyncGate()


@pytest.fixture
def wake():
    channel = WakeChannel()
    yield channel
    channel.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_gateway(gate, wake, clock):
    """Factory building a started simulated stack behind a dispatch table."""
    created = []

    def factory(scan_timeout=5.0, stack_class=SimulatedStack, **stack_kwargs):
        stack = stack_class(gate=gate, wake=wake, tick=0.01, **stack_kwargs)
        stack.start()
        ctx = GatewayContext(stack, gate, wake, scan_timeout=scan_timeout, clock=clock)
        ctx.attach()
        created.append(ctx)
        return build_dispatch_table(ctx)

    yield factory

    for ctx in created:
        ctx.detach()
        ctx.stack.stop()


@pytest.fixture
def table(make_gateway):
    return make_gateway()


@pytest.fixture
def gateway(table):
    return table.context


@pytest.fixture
def stack(gateway):
    return gateway.stack


@pytest.fixture
def attached(table, stack):
    """Dispatch table whose stack has attached as leader."""
    assert table.dispatch("threadstart")["Error"] == 0
    assert stack.wait_idle()
    return table


@pytest.fixture
def socket_dir():
    # AF_UNIX paths are limited to ~108 bytes; keep them short
    path = Path(tempfile.mkdtemp(prefix="bd"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def server(table, socket_dir):
    srv = RPCServer(table, socket_path=socket_dir / "borderd.sock")
    srv.start()
    yield srv
    srv.stop()
