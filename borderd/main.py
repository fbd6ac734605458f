"""
borderd Daemon Main Entry Point

The borderd daemon runs:
- The network stack and its worker thread
- The gateway (synchronization gate, scan/diagnostic/commissioning engines)
- The RPC command bus for borderctl
"""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

from . import __version__
from .config import Config, DEFAULT_CONFIG_PATH
from .gateway import GatewayContext, SyncGate, build_dispatch_table
from .rpc.server import RPCServer
from .rpc.wake import WakeChannel
from .stack.base import NetworkStack
from .stack.simulated import SimulatedStack


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("borderd")


class BorderDaemon:
    """
    Main borderd daemon class.

    Owns the one gate shared between the RPC server thread and the
    stack's worker thread, and the wake channel between them.
    """

    def __init__(self, config: Config):
        """
        Initialize daemon with configuration.

        Args:
            config: Loaded configuration
        """
        self.config = config
        self._running = False
        self._shutdown_event = threading.Event()

        # Core components (initialized in start())
        self.gate = SyncGate()
        self._wake: Optional[WakeChannel] = None
        self._stack: Optional[NetworkStack] = None
        self._context: Optional[GatewayContext] = None
        self._rpc_server: Optional[RPCServer] = None

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """
        Start the daemon.

        Raises:
            OSError: If the wake channel or the bus socket cannot be created
        """
        logger.info(f"Starting borderd v{__version__}")

        self._wake = WakeChannel()

        logger.info(f"Starting {self.config.stack.type} stack...")
        self._stack = self._create_stack()
        self._stack.start()

        self._context = GatewayContext.from_config(
            self.config, self._stack, self.gate, self._wake,
        )
        self._context.attach()

        logger.info("Starting RPC server...")
        table = build_dispatch_table(self._context)
        self._rpc_server = RPCServer(table, socket_path=self.config.bus.socket_path)
        self._rpc_server.start()

        self._running = True
        logger.info(f"borderd started ({len(table)} commands)")

    def _create_stack(self) -> NetworkStack:
        stack_type = self.config.stack.type.lower()
        if stack_type == "simulated":
            return SimulatedStack(
                gate=self.gate,
                wake=self._wake,
                tick=self.config.stack.tick,
            )
        raise ValueError(f"Unknown stack type: {stack_type}")

    def stop(self) -> None:
        """Stop the daemon."""
        if self._shutdown_event.is_set():
            return
        logger.info("Stopping borderd...")

        self._running = False
        self._shutdown_event.set()

        if self._rpc_server:
            self._rpc_server.stop()
            self._rpc_server = None

        if self._context:
            self._context.detach()

        if self._stack:
            self._stack.stop()

        if self._wake:
            self._wake.close()

        logger.info("borderd stopped")

    def wait(self) -> None:
        """Block until stop() is called."""
        while not self._shutdown_event.wait(1.0):
            pass


def setup_logging(level: str, log_file: Optional[Path] = None) -> None:
    """Configure root logging once for the process."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Border router RPC gateway daemon")
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Configuration file path",
    )
    parser.add_argument(
        "-s", "--socket",
        type=Path,
        help="Command bus socket path (overrides config)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"borderd {__version__}",
    )

    args = parser.parse_args()

    try:
        config = Config.load(args.config)
        if args.socket:
            config.bus.socket_path = args.socket
        if args.verbose:
            config.log_level = "DEBUG"
        config.validate()
    except ValueError as e:
        setup_logging("INFO")
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    setup_logging(config.log_level, config.log_file)

    daemon = BorderDaemon(config)

    # Signal handlers
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}")
        daemon.stop()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        daemon.start()
    except (OSError, ValueError) as e:
        logger.error(f"Startup failed: {e}")
        daemon.stop()
        sys.exit(1)

    daemon.wait()


if __name__ == "__main__":
    main()
