"""
borderd Configuration Management

Handles loading and validation of configuration from TOML file.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .rpc.server import SOCKET_TIMEOUT


logger = logging.getLogger(__name__)

# Default configuration path
DEFAULT_CONFIG_PATH = Path("/etc/borderd/config.toml")

# Default run directory
DEFAULT_RUN_DIR = Path("/run/borderd")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
STACK_TYPES = ("simulated",)


@dataclass
class BusConfig:
    """Command bus configuration."""
    socket_path: Path = field(default_factory=lambda: DEFAULT_RUN_DIR / "borderd.sock")


@dataclass
class StackConfig:
    """Network stack configuration."""
    type: str = "simulated"
    tick: float = 0.05  # seconds between worker task checks


@dataclass
class GatewayConfig:
    """Gateway behavior."""
    scan_timeout: float = 30.0  # seconds
    diagnostic_cooldown: float = 10.0  # seconds
    joiner_timeout: int = 120  # seconds


@dataclass
class Config:
    """
    Complete borderd configuration.
    """
    bus: BusConfig = field(default_factory=BusConfig)
    stack: StackConfig = field(default_factory=StackConfig)
    gateway: GatewayConfig = field(default_factory=GatewayConfig)

    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG_PATH)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from file.

        A missing file yields the defaults.

        Args:
            config_path: Path to config file (default: /etc/borderd/config.toml)

        Returns:
            Loaded configuration

        Raises:
            ValueError: If the file cannot be parsed
        """
        path = Path(config_path or DEFAULT_CONFIG_PATH)
        config = cls()
        config.config_path = path

        if not path.exists():
            logger.debug(f"No config file at {path}, using defaults")
            return config

        try:
            data = toml.load(path)
        except (toml.TomlDecodeError, OSError) as e:
            raise ValueError(f"Cannot read {path}: {e}") from e

        config._apply_dict(data)
        return config

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """
        Apply dictionary data to config.

        Raises:
            ValueError: If a value has the wrong type
        """
        try:
            if "log_level" in data:
                self.log_level = str(data["log_level"]).upper()
            if "log_file" in data:
                self.log_file = Path(data["log_file"])

            if "bus" in data:
                b = data["bus"]
                if "socket_path" in b:
                    self.bus.socket_path = Path(b["socket_path"])

            if "stack" in data:
                s = data["stack"]
                if "type" in s:
                    self.stack.type = str(s["type"])
                if "tick" in s:
                    self.stack.tick = float(s["tick"])

            if "gateway" in data:
                g = data["gateway"]
                if "scan_timeout" in g:
                    self.gateway.scan_timeout = float(g["scan_timeout"])
                if "diagnostic_cooldown" in g:
                    self.gateway.diagnostic_cooldown = float(g["diagnostic_cooldown"])
                if "joiner_timeout" in g:
                    self.gateway.joiner_timeout = int(g["joiner_timeout"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid configuration value: {e}") from e

    def validate(self) -> None:
        """
        Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.stack.type not in STACK_TYPES:
            raise ValueError(f"Unknown stack type: {self.stack.type}")

        if self.stack.tick <= 0 or self.stack.tick > 1.0:
            raise ValueError(f"Invalid stack tick: {self.stack.tick}")

        # A scan reply must reach the client before its socket times out
        if not 0 < self.gateway.scan_timeout < SOCKET_TIMEOUT:
            raise ValueError(
                f"Invalid scan timeout: {self.gateway.scan_timeout} "
                f"(must be below {SOCKET_TIMEOUT}s)"
            )

        if self.gateway.diagnostic_cooldown < 0:
            raise ValueError(
                f"Invalid diagnostic cool-down: {self.gateway.diagnostic_cooldown}"
            )

        # The stack stores joiner timeouts as 32-bit seconds
        if not 0 < self.gateway.joiner_timeout <= 0xFFFFFFFF:
            raise ValueError(f"Invalid joiner timeout: {self.gateway.joiner_timeout}")
