"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from borderd.config import Config
from borderd.rpc.server import SOCKET_TIMEOUT


class TestLoad:
    """Test loading from TOML files."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = Config.load(tmp_path / "absent.toml")
        assert config.bus.socket_path == Path("/run/borderd/borderd.sock")
        assert config.stack.type == "simulated"
        assert config.gateway.scan_timeout == 30.0
        assert config.gateway.diagnostic_cooldown == 10.0
        assert config.gateway.joiner_timeout == 120
        assert config.log_level == "INFO"
        config.validate()

    def test_values_applied(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            'log_level = "debug"\n'
            'log_file = "/var/log/borderd.log"\n'
            "\n"
            "[bus]\n"
            'socket_path = "/tmp/bd.sock"\n'
            "\n"
            "[stack]\n"
            "tick = 0.02\n"
            "\n"
            "[gateway]\n"
            "scan_timeout = 12\n"
            "diagnostic_cooldown = 2.5\n"
            "joiner_timeout = 300\n"
        )
        config = Config.load(path)

        assert config.config_path == path
        assert config.log_level == "DEBUG"
        assert config.log_file == Path("/var/log/borderd.log")
        assert config.bus.socket_path == Path("/tmp/bd.sock")
        assert config.stack.tick == 0.02
        assert config.gateway.scan_timeout == 12.0
        assert config.gateway.diagnostic_cooldown == 2.5
        assert config.gateway.joiner_timeout == 300
        config.validate()

    def test_malformed_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[gateway\nscan_timeout = ")
        with pytest.raises(ValueError):
            Config.load(path)

    def test_wrong_value_type(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[gateway]\nscan_timeout = "soon"\n')
        with pytest.raises(ValueError):
            Config.load(path)


class TestValidate:
    """Test semantic validation."""

    @pytest.mark.parametrize("attr,section,value", [
        ("log_level", None, "LOUD"),
        ("type", "stack", "hardware"),
        ("tick", "stack", 0),
        ("tick", "stack", 2.0),
        ("scan_timeout", "gateway", 0),
        ("scan_timeout", "gateway", 60),
        ("scan_timeout", "gateway", 90),
        ("diagnostic_cooldown", "gateway", -1),
        ("joiner_timeout", "gateway", 0),
        ("joiner_timeout", "gateway", 2 ** 32),
    ])
    def test_invalid(self, attr, section, value):
        config = Config()
        target = getattr(config, section) if section else config
        setattr(target, attr, value)
        with pytest.raises(ValueError):
            config.validate()

    def test_zero_cooldown_allowed(self):
        config = Config()
        config.gateway.diagnostic_cooldown = 0
        config.validate()

    def test_scan_timeout_below_socket_timeout(self):
        config = Config()
        config.gateway.scan_timeout = SOCKET_TIMEOUT - 1
        config.validate()
