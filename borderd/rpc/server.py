"""
borderd RPC Server

Unix socket command bus for borderctl and other local clients.

Protocol:
- JSON-RPC 2.0 over Unix domain socket
- One request/response per connection
- "params" is an object; its fields are validated per command
- "result" is the command's reply document, always carrying "Error"

Security:
- Socket only accessible to owner and group (0660)
- No network exposure
"""

import json
import logging
import os
import socket
import stat
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from .dispatch import DispatchTable


logger = logging.getLogger(__name__)

# Default socket path
DEFAULT_SOCKET_PATH = Path("/run/borderd/borderd.sock")

# Maximum request size (64KB)
MAX_REQUEST_SIZE = 65536

# Per-connection socket timeout (seconds). Config.validate() keeps the
# scan timeout below it.
SOCKET_TIMEOUT = 60


class RPCError(Exception):
    """RPC error with code and message."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> dict:
        result = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result


# Standard JSON-RPC error codes
class RPCErrorCode:
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


def _error_response(error: RPCError, request_id: Any = None) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "error": error.to_dict(), "id": request_id}


class RPCServer:
    """
    JSON-RPC server over Unix socket, fronting a DispatchTable.

    Requests are served one at a time on the server thread; a blocking
    command (scan) holds up the next connection until it replies.

    Usage:
        server = RPCServer(table, socket_path=Path("/tmp/borderd.sock"))
        server.start()
        ...
        server.stop()
    """

    def __init__(
        self,
        dispatch: DispatchTable,
        socket_path: Optional[Path] = None,
    ):
        """
        Initialize RPC server.

        Args:
            dispatch: Command table requests are dispatched to
            socket_path: Path for Unix socket
        """
        self._dispatch = dispatch
        self._socket_path = Path(socket_path or DEFAULT_SOCKET_PATH)
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self.requests_served = 0

    @property
    def socket_path(self) -> Path:
        return self._socket_path

    def start(self) -> None:
        """
        Start the RPC server.

        Raises:
            OSError: If the socket cannot be created or bound
        """
        if self._running:
            return

        # Ensure directory exists
        self._socket_path.parent.mkdir(parents=True, exist_ok=True)

        # Remove stale socket
        if self._socket_path.exists():
            self._socket_path.unlink()

        self._socket = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._socket.bind(str(self._socket_path))
        os.chmod(
            self._socket_path,
            stat.S_IRUSR | stat.S_IWUSR | stat.S_IRGRP | stat.S_IWGRP,
        )

        self._socket.listen(5)
        self._socket.settimeout(1.0)  # For clean shutdown

        self._running = True
        self._thread = threading.Thread(
            target=self._serve_loop,
            daemon=True,
            name="rpc-server",
        )
        self._thread.start()
        logger.info(f"RPC server listening on {self._socket_path}")

    def stop(self) -> None:
        """Stop the RPC server."""
        self._running = False

        if self._thread:
            self._thread.join(timeout=5.0)
            self._thread = None

        if self._socket:
            self._socket.close()
            self._socket = None

        try:
            self._socket_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove {self._socket_path}: {e}")

    @property
    def is_running(self) -> bool:
        return self._running

    def _serve_loop(self) -> None:
        """Main server loop."""
        while self._running:
            try:
                conn, _ = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept failed: {e}")
                continue

            conn.settimeout(SOCKET_TIMEOUT)
            try:
                self._handle_connection(conn)
            finally:
                conn.close()

    def _read_request(self, conn: socket.socket) -> bytes:
        data = b""
        while True:
            chunk = conn.recv(4096)
            if not chunk:
                break
            data += chunk
            if len(data) > MAX_REQUEST_SIZE:
                raise RPCError(RPCErrorCode.INVALID_REQUEST, "Request too large")
            # One JSON object per connection
            try:
                json.loads(data)
                break
            except json.JSONDecodeError:
                continue
        return data

    def _handle_connection(self, conn: socket.socket) -> None:
        """Handle a single client connection."""
        try:
            data = self._read_request(conn)
            if not data:
                return
            response = self.process_request(data)
        except RPCError as e:
            response = _error_response(e)
        except OSError as e:
            logger.warning(f"Connection error: {e}")
            return

        try:
            conn.sendall(json.dumps(response).encode() + b"\n")
        except OSError as e:
            # The handler has run; the caller went away
            logger.warning(f"Reply not delivered: {e}")

    def process_request(self, data: bytes) -> Dict[str, Any]:
        """
        Process one JSON-RPC request.

        Returns:
            JSON-RPC response object
        """
        request_id = None

        try:
            try:
                request = json.loads(data)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise RPCError(RPCErrorCode.PARSE_ERROR, f"Parse error: {e}")

            if not isinstance(request, dict):
                raise RPCError(RPCErrorCode.INVALID_REQUEST, "Request must be object")

            request_id = request.get("id")

            if request.get("jsonrpc") != "2.0":
                raise RPCError(RPCErrorCode.INVALID_REQUEST, "Invalid JSON-RPC version")

            method = request.get("method")
            if not isinstance(method, str):
                raise RPCError(RPCErrorCode.INVALID_REQUEST, "Method must be string")

            params = request.get("params", {})
            if not isinstance(params, dict):
                raise RPCError(RPCErrorCode.INVALID_PARAMS, "Params must be object")

            if method not in self._dispatch:
                raise RPCError(RPCErrorCode.METHOD_NOT_FOUND, f"Method not found: {method}")

            result = self._dispatch.dispatch(method, params, request_id)
            self.requests_served += 1

            return {
                "jsonrpc": "2.0",
                "result": result,
                "id": request_id,
            }

        except RPCError as e:
            return _error_response(e, request_id)
        except Exception as e:
            logger.exception(f"Unhandled error in request {request_id}")
            return _error_response(
                RPCError(RPCErrorCode.INTERNAL_ERROR, str(e)), request_id,
            )


class RPCClient:
    """
    Simple RPC client for borderctl and tests.

    Usage:
        client = RPCClient()
        reply = client.call("channel")
        print(reply["Channel"])
    """

    def __init__(self, socket_path: Optional[Path] = None, timeout: float = SOCKET_TIMEOUT):
        """Initialize client."""
        self._socket_path = Path(socket_path or DEFAULT_SOCKET_PATH)
        self._timeout = timeout

    def call(self, method: str, params: Optional[dict] = None) -> Any:
        """
        Call an RPC method.

        Args:
            method: Method name
            params: Method parameters

        Returns:
            Method result (the reply document)

        Raises:
            RPCError: If the server answers with an error
            OSError: If the server cannot be reached
        """
        request = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or {},
            "id": 1,
        }

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self._timeout)

        try:
            sock.connect(str(self._socket_path))
            sock.sendall(json.dumps(request).encode())
            sock.shutdown(socket.SHUT_WR)

            data = b""
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    break
                data += chunk

            try:
                response = json.loads(data)
            except json.JSONDecodeError as e:
                raise RPCError(RPCErrorCode.PARSE_ERROR, f"Bad response: {e}")

            if "error" in response:
                error = response["error"]
                raise RPCError(
                    error.get("code", -1),
                    error.get("message", "Unknown error"),
                    error.get("data"),
                )

            return response.get("result")

        finally:
            sock.close()
