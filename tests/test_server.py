"""Tests for the JSON-RPC command bus."""

import json
import stat

import pytest

from borderd.rpc.server import RPCClient, RPCError, RPCErrorCode, RPCServer


def request(method, params=None, request_id=1, **extra):
    body = {"jsonrpc": "2.0", "method": method, "id": request_id}
    if params is not None:
        body["params"] = params
    body.update(extra)
    return json.dumps(body).encode()


@pytest.fixture
def rpc(table, socket_dir):
    """Server that is never started, for process_request tests."""
    return RPCServer(table, socket_path=socket_dir / "unused.sock")


class TestProcessRequest:
    """Test request validation and dispatch."""

    def test_success(self, rpc):
        response = rpc.process_request(request("channel", request_id=7))
        assert response == {"jsonrpc": "2.0", "result": {"Channel": 11, "Error": 0}, "id": 7}
        assert rpc.requests_served == 1

    def test_params_passed(self, rpc):
        rpc.process_request(request("setchannel", {"channel": 15}))
        assert rpc.process_request(request("channel"))["result"]["Channel"] == 15

    def test_command_error_is_a_result(self, rpc):
        response = rpc.process_request(request("setpanid", {"panid": "zz"}))
        assert response["result"] == {"Error": 6}
        assert "error" not in response

    def test_parse_error(self, rpc):
        response = rpc.process_request(b"{not json")
        assert response["error"]["code"] == RPCErrorCode.PARSE_ERROR
        assert response["id"] is None

    def test_not_an_object(self, rpc):
        response = rpc.process_request(b"[1, 2]")
        assert response["error"]["code"] == RPCErrorCode.INVALID_REQUEST

    def test_bad_version(self, rpc):
        response = rpc.process_request(request("channel", jsonrpc="1.0"))
        assert response["error"]["code"] == RPCErrorCode.INVALID_REQUEST

    def test_method_not_string(self, rpc):
        response = rpc.process_request(json.dumps({"jsonrpc": "2.0", "method": 5, "id": 3}).encode())
        assert response["error"]["code"] == RPCErrorCode.INVALID_REQUEST
        assert response["id"] == 3

    def test_array_params_rejected(self, rpc):
        response = rpc.process_request(request("setchannel", [15]))
        assert response["error"]["code"] == RPCErrorCode.INVALID_PARAMS

    def test_unknown_method(self, rpc):
        response = rpc.process_request(request("reboot", request_id="x"))
        assert response["error"]["code"] == RPCErrorCode.METHOD_NOT_FOUND
        assert response["id"] == "x"
        assert rpc.requests_served == 0


class TestSocket:
    """Test the Unix socket transport."""

    def test_call(self, server):
        client = RPCClient(server.socket_path, timeout=5.0)
        assert client.call("state") == {"State": "disabled", "Error": 0}

    def test_call_with_params(self, server):
        client = RPCClient(server.socket_path, timeout=5.0)
        assert client.call("setchannel", {"channel": 25}) == {"Error": 0}
        assert client.call("channel")["Channel"] == 25

    def test_scan_over_socket(self, server):
        client = RPCClient(server.socket_path, timeout=10.0)
        reply = client.call("scan")
        assert reply["Error"] == 0
        assert len(reply["scan_list"]) == 2

    def test_unknown_method_raises(self, server):
        client = RPCClient(server.socket_path, timeout=5.0)
        with pytest.raises(RPCError) as exc:
            client.call("reboot")
        assert exc.value.code == RPCErrorCode.METHOD_NOT_FOUND

    def test_socket_permissions(self, server):
        mode = stat.S_IMODE(server.socket_path.stat().st_mode)
        assert mode == 0o660

    def test_stop_removes_socket(self, table, socket_dir):
        srv = RPCServer(table, socket_path=socket_dir / "b.sock")
        srv.start()
        assert srv.is_running
        srv.stop()
        assert not srv.socket_path.exists()

    def test_stale_socket_replaced(self, table, socket_dir):
        path = socket_dir / "b.sock"
        path.touch()
        srv = RPCServer(table, socket_path=path)
        srv.start()
        try:
            assert RPCClient(path, timeout=5.0).call("channel")["Channel"] == 11
        finally:
            srv.stop()

    def test_server_not_running(self, socket_dir):
        client = RPCClient(socket_dir / "missing.sock", timeout=1.0)
        with pytest.raises(OSError):
            client.call("state")
