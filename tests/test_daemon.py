"""Tests for daemon startup and shutdown."""

import pytest

from borderd.config import Config
from borderd.main import BorderDaemon
from borderd.rpc.server import RPCClient


@pytest.fixture
def config(socket_dir):
    config = Config()
    config.bus.socket_path = socket_dir / "borderd.sock"
    config.stack.tick = 0.01
    return config


class TestBorderDaemon:
    """Test the daemon lifecycle."""

    def test_start_and_stop(self, config):
        daemon = BorderDaemon(config)
        daemon.start()
        try:
            assert daemon.is_running
            client = RPCClient(config.bus.socket_path, timeout=5.0)
            assert client.call("state") == {"State": "disabled", "Error": 0}
            assert client.call("threadstart") == {"Error": 0}
        finally:
            daemon.stop()

        assert not daemon.is_running
        assert not config.bus.socket_path.exists()

    def test_stop_is_idempotent(self, config):
        daemon = BorderDaemon(config)
        daemon.start()
        daemon.stop()
        daemon.stop()

    def test_unknown_stack_type(self, config):
        config.stack.type = "hardware"
        daemon = BorderDaemon(config)
        with pytest.raises(ValueError):
            daemon.start()
        daemon.stop()
