"""Tests for the borderctl command-line client."""

import argparse
import json

import pytest

from borderctl.main import error_name, main, parse_assignment


@pytest.fixture
def ctl(server):
    """Run borderctl against the test server."""
    def run(*args):
        return main(["-s", str(server.socket_path), *args])
    return run


class TestHelpers:
    """Test argument helpers."""

    def test_string_assignment(self):
        assert parse_assignment("addr=0011223344556677") == ("addr", "0011223344556677")

    def test_json_assignment(self):
        assert parse_assignment("channel:=15") == ("channel", 15)

    def test_empty_value(self):
        assert parse_assignment("networkname=") == ("networkname", "")

    @pytest.mark.parametrize("text", ["channel", "=15", ":=15", "channel:=fifteen"])
    def test_bad_assignment(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_assignment(text)

    def test_error_name(self):
        assert error_name(28) == "RESPONSE_TIMEOUT"
        assert error_name(99) == "99"


class TestOffline:
    """Commands that need no daemon."""

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_pskc(self, capsys):
        assert main(["pskc", "12SECRETPASSWORD34", "Test Network", "0001020304050607"]) == 0
        assert capsys.readouterr().out.strip() == "c3f59368445a1b6106be420a706d4cc9"

    def test_pskc_bad_ext_pan_id(self, capsys):
        assert main(["pskc", "12SECRETPASSWORD34", "Test Network", "0001"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_daemon_not_running(self, socket_dir, capsys):
        assert main(["-s", str(socket_dir / "missing.sock"), "get", "channel"]) == 1
        assert "Failed to connect" in capsys.readouterr().err


class TestAgainstDaemon:
    """Commands sent to a running gateway."""

    def test_status(self, ctl, capsys):
        assert ctl("status") == 0
        out = capsys.readouterr().out
        assert "State:        disabled" in out
        assert "PAN ID:       0xface" in out

    def test_get(self, ctl, capsys):
        assert ctl("get", "channel") == 0
        assert capsys.readouterr().out.strip() == "11"

    def test_set_int_field(self, ctl, capsys):
        assert ctl("set", "channel", "15") == 0
        capsys.readouterr()
        ctl("get", "channel")
        assert capsys.readouterr().out.strip() == "15"

    def test_set_string_field(self, ctl, capsys):
        assert ctl("set", "panid", "0x1234") == 0
        capsys.readouterr()
        ctl("get", "panid")
        assert capsys.readouterr().out.strip() == "0x1234"

    def test_set_rejected(self, ctl, capsys):
        assert ctl("set", "channel", "40") == 1
        assert "INVALID_ARGS (7)" in capsys.readouterr().err

    def test_set_not_an_integer(self, ctl, capsys):
        assert ctl("set", "channel", "high") == 1

    def test_scan(self, ctl, capsys):
        assert ctl("scan") == 0
        out = capsys.readouterr().out
        assert "Networks (2)" in out
        assert "OpenThread-beef" in out

    def test_neighbors_empty(self, ctl, capsys):
        assert ctl("neighbors") == 0
        assert "No neighbors" in capsys.readouterr().out

    def test_call(self, ctl, capsys):
        assert ctl("call", "macfilteradd", "addr=0011223344556677") == 0
        capsys.readouterr()
        assert ctl("call", "macfilteraddr") == 0
        reply = json.loads(capsys.readouterr().out)
        assert reply == {"addrlist": ["0011223344556677"], "Error": 0}

    def test_call_failure_status(self, ctl, capsys):
        assert ctl("call", "setchannel", "channel:=99") == 1
        assert json.loads(capsys.readouterr().out)["Error"] == 7

    def test_joiners(self, ctl, capsys):
        assert ctl("joiner", "add", "*", "J01NME") == 0
        assert ctl("joiner", "list") == 0
        out = capsys.readouterr().out
        assert "Joiners (1)" in out
        assert "J01NME" in out
        assert ctl("joiner", "remove", "*") == 0

    def test_commissioner_start(self, ctl, capsys):
        assert ctl("commissioner", "start") == 0
        assert "Commissioner starting" in capsys.readouterr().out

    def test_networkdata_first_call(self, ctl, capsys):
        assert ctl("networkdata") == 0
        assert "No diagnostic data yet" in capsys.readouterr().out
