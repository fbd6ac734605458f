"""Tests for PSKc and joiner id derivation."""

import hashlib

import pytest

from borderd.crypto.pskc import (
    _prf_key,
    aes_cmac,
    aes_cmac_prf_128,
    compute_joiner_id,
    compute_pskc,
)


class TestAesCmac:
    """RFC 4493 and RFC 4615 vectors."""

    KEY = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")

    def test_empty_message(self):
        assert aes_cmac(self.KEY, b"").hex() == "bb1d6929e95937287fa37d129b756746"

    def test_one_block(self):
        message = bytes.fromhex("6bc1bee22e409f96e93d7e117393172a")
        assert aes_cmac(self.KEY, message).hex() == "070a16b46b4d4144f79bdd9dd04a287c"

    @pytest.mark.parametrize("key,expected", [
        ("000102030405060708090a0b0c0d0e0f", "980ae87b5f4c9c5214f5b6a8455e4c2d"),
        ("000102030405060708090a0b0c0d0e0fedcb", "84a348a4a45d235babfffc0d2b4da09a"),
        ("00010203040506070809", "290d9e112edb09ee141fcf64c0b72f3d"),
    ])
    def test_prf_128(self, key, expected):
        message = bytes.fromhex("000102030405060708090a0b0c0d0e0f10111213")
        assert aes_cmac_prf_128(bytes.fromhex(key), message).hex() == expected

    def test_prf_key_passes_block_sized_key(self):
        assert _prf_key(self.KEY) == self.KEY

    def test_prf_key_condenses_other_lengths(self):
        key = bytes.fromhex("00010203040506070809")
        assert _prf_key(key) == aes_cmac(bytes(16), key)
        assert aes_cmac_prf_128(key, b"") == aes_cmac(_prf_key(key), b"")


class TestPskc:
    """Test PSKc derivation."""

    def test_known_vector(self):
        pskc = compute_pskc(
            "12SECRETPASSWORD34",
            "Test Network",
            bytes.fromhex("0001020304050607"),
        )
        assert pskc.hex() == "c3f59368445a1b6106be420a706d4cc9"

    def test_depends_on_network(self):
        xpanid = bytes.fromhex("0001020304050607")
        assert compute_pskc("J01NME", "A", xpanid) != compute_pskc("J01NME", "B", xpanid)

    def test_short_passphrase(self):
        with pytest.raises(ValueError):
            compute_pskc("abc", "Test Network", bytes(8))

    def test_long_network_name(self):
        with pytest.raises(ValueError):
            compute_pskc("12SECRETPASSWORD34", "n" * 17, bytes(8))

    def test_bad_ext_pan_id(self):
        with pytest.raises(ValueError):
            compute_pskc("12SECRETPASSWORD34", "Test Network", bytes(4))


class TestJoinerId:
    """Test joiner id derivation."""

    def test_matches_sha256(self):
        eui64 = bytes.fromhex("18b4300000000002")
        expected = bytearray(hashlib.sha256(eui64).digest()[:8])
        expected[0] |= 0x02
        assert compute_joiner_id(eui64) == bytes(expected)

    def test_local_bit_set(self):
        for i in range(16):
            assert compute_joiner_id(bytes([i] * 8))[0] & 0x02

    def test_bad_length(self):
        with pytest.raises(ValueError):
            compute_joiner_id(bytes(6))
