"""Tests for the generic get/set engine."""

import pytest

from borderd.errors import ParseError
from borderd.gateway.fields import format_mode, parse_mac_filter_state, parse_mode
from borderd.stack.base import LinkMode, MacFilterMode


class TestModeFormatting:
    """Test link mode string conversions."""

    def test_all_flags(self):
        mode = LinkMode(True, True, True, True)
        assert format_mode(mode) == "rsdn"

    def test_order_is_fixed(self):
        assert parse_mode("nr") == LinkMode(rx_on_when_idle=True, network_data=True)
        assert format_mode(parse_mode("nr")) == "rn"

    def test_empty(self):
        assert format_mode(LinkMode()) == ""
        assert parse_mode("") == LinkMode()

    def test_bad_character(self):
        with pytest.raises(ParseError):
            parse_mode("rsx")

    def test_mac_filter_state(self):
        assert parse_mac_filter_state("blacklist") == MacFilterMode.BLACKLIST
        with pytest.raises(ParseError):
            parse_mac_filter_state("deny")


class TestReads:
    """Test read commands on a fresh stack."""

    @pytest.mark.parametrize("method,expected", [
        ("networkname", {"NetworkName": "OpenThread"}),
        ("state", {"State": "disabled"}),
        ("channel", {"Channel": 11}),
        ("panid", {"PanId": "0xface"}),
        ("rloc16", {"rloc16": "0xfffe"}),
        ("extpanid", {"ExtPanId": "dead00beef00cafe"}),
        ("masterkey", {"Masterkey": "00112233445566778899aabbccddeeff"}),
        ("mode", {"Mode": "rsdn"}),
        ("leaderpartitionid", {"Leaderpartitionid": 0}),
        ("macfilterstate", {"state": "disable"}),
    ])
    def test_default_values(self, table, method, expected):
        expected = dict(expected, Error=0)
        assert table.dispatch(method) == expected

    def test_value_precedes_error(self, table):
        assert list(table.dispatch("channel")) == ["Channel", "Error"]

    def test_params_ignored_on_reads(self, table):
        assert table.dispatch("channel", {"channel": 20}) == {"Channel": 11, "Error": 0}


class TestWrites:
    """Test write commands."""

    def test_set_channel(self, table):
        assert table.dispatch("setchannel", {"channel": 15}) == {"Error": 0}
        assert table.dispatch("channel")["Channel"] == 15

    def test_channel_out_of_range(self, table):
        assert table.dispatch("setchannel", {"channel": 30})["Error"] == 7
        assert table.dispatch("channel")["Channel"] == 11

    def test_channel_wrong_type_is_noop(self, table):
        assert table.dispatch("setchannel", {"channel": "15"}) == {"Error": 0}
        assert table.dispatch("channel")["Channel"] == 11

    def test_missing_param_is_noop(self, table):
        assert table.dispatch("setnetworkname") == {"Error": 0}
        assert table.dispatch("networkname")["NetworkName"] == "OpenThread"

    @pytest.mark.parametrize("text,expected", [
        ("0x1234", "0x1234"),
        ("4660", "0x1234"),
        ("0", "0x0000"),
    ])
    def test_set_panid(self, table, text, expected):
        assert table.dispatch("setpanid", {"panid": text})["Error"] == 0
        assert table.dispatch("panid")["PanId"] == expected

    def test_panid_not_numeric(self, table):
        assert table.dispatch("setpanid", {"panid": "beef"})["Error"] == 6

    def test_panid_broadcast_rejected(self, table):
        assert table.dispatch("setpanid", {"panid": "0xffff"})["Error"] == 7

    def test_set_extpanid(self, table):
        assert table.dispatch("setextpanid", {"extpanid": "0011223344556677"})["Error"] == 0
        assert table.dispatch("extpanid")["ExtPanId"] == "0011223344556677"

    @pytest.mark.parametrize("value", ["00112233", "001122334455667788", "00112233445566zz"])
    def test_extpanid_must_be_eight_bytes(self, table, value):
        assert table.dispatch("setextpanid", {"extpanid": value})["Error"] == 6
        assert table.dispatch("extpanid")["ExtPanId"] == "dead00beef00cafe"

    def test_set_masterkey(self, table):
        key = "ffeeddccbbaa99887766554433221100"
        assert table.dispatch("setmasterkey", {"masterkey": key})["Error"] == 0
        assert table.dispatch("masterkey")["Masterkey"] == key

    def test_set_pskc(self, table):
        pskc = "c3f59368445a1b6106be420a706d4cc9"
        assert table.dispatch("setpskc", {"pskc": pskc})["Error"] == 0
        assert table.dispatch("pskc")["pskc"] == pskc

    def test_set_network_name(self, table):
        assert table.dispatch("setnetworkname", {"networkname": "Lab"})["Error"] == 0
        assert table.dispatch("networkname")["NetworkName"] == "Lab"

    def test_network_name_too_long(self, table):
        assert table.dispatch("setnetworkname", {"networkname": "x" * 17})["Error"] == 7

    def test_set_mode(self, table):
        assert table.dispatch("setmode", {"mode": "rs"})["Error"] == 0
        assert table.dispatch("mode")["Mode"] == "rs"

    def test_mode_bad_character(self, table):
        assert table.dispatch("setmode", {"mode": "rsq"})["Error"] == 6
        assert table.dispatch("mode")["Mode"] == "rsdn"

    def test_mode_ftd_requires_rx_on(self, table):
        assert table.dispatch("setmode", {"mode": "sd"})["Error"] == 7

    def test_set_leader_partition_id(self, table):
        assert table.dispatch("setleaderpartitionid", {"leaderpartitionid": 99})["Error"] == 0
        assert table.dispatch("leaderpartitionid")["Leaderpartitionid"] == 99

    def test_writes_rejected_while_attached(self, attached):
        assert attached.dispatch("setchannel", {"channel": 15})["Error"] == 13
        assert attached.dispatch("setpanid", {"panid": "0x1234"})["Error"] == 13

    def test_mode_writable_while_attached(self, attached):
        assert attached.dispatch("setmode", {"mode": "rsdn"})["Error"] == 0


class TestMacFilter:
    """Test MAC filter commands."""

    ADDR = "0011223344556677"

    def test_add_and_list(self, table):
        assert table.dispatch("macfilteradd", {"addr": self.ADDR}) == {"Error": 0}
        assert table.dispatch("macfilteraddr") == {"addrlist": [self.ADDR], "Error": 0}

    def test_duplicate_add_succeeds(self, table):
        assert table.dispatch("macfilteradd", {"addr": self.ADDR})["Error"] == 0
        assert table.dispatch("macfilteradd", {"addr": self.ADDR})["Error"] == 0
        assert table.dispatch("macfilteraddr")["addrlist"] == [self.ADDR]

    def test_bad_address(self, table):
        assert table.dispatch("macfilteradd", {"addr": "0011"})["Error"] == 6

    def test_remove(self, table):
        table.dispatch("macfilteradd", {"addr": self.ADDR})
        assert table.dispatch("macfilterremove", {"addr": self.ADDR})["Error"] == 0
        assert table.dispatch("macfilteraddr")["addrlist"] == []

    def test_remove_unknown(self, table):
        assert table.dispatch("macfilterremove", {"addr": self.ADDR})["Error"] == 23

    def test_clear(self, table):
        table.dispatch("macfilteradd", {"addr": self.ADDR})
        table.dispatch("macfilteradd", {"addr": "8899aabbccddeeff"})
        assert table.dispatch("macfilterclear")["Error"] == 0
        assert table.dispatch("macfilteraddr")["addrlist"] == []

    def test_filter_full(self, table):
        for i in range(32):
            assert table.dispatch("macfilteradd", {"addr": "%016x" % (i + 1)})["Error"] == 0
        assert table.dispatch("macfilteradd", {"addr": "%016x" % 100})["Error"] == 3

    def test_set_state(self, table):
        assert table.dispatch("macfiltersetstate", {"state": "whitelist"})["Error"] == 0
        assert table.dispatch("macfilterstate") == {"state": "whitelist", "Error": 0}

    def test_unknown_state(self, table):
        assert table.dispatch("macfiltersetstate", {"state": "allow"})["Error"] == 6
