"""Tests for the cleartext AES-128 key expansion."""

import pytest

from homaes.key_schedule import EXPANDED_KEY_SIZE, key_expansion, round_key


class TestKeyExpansion:
    def test_sequential_key(self) -> None:
        expanded = key_expansion(bytes(range(16)))
        assert len(expanded) == EXPANDED_KEY_SIZE == 176
        assert expanded[:16] == bytes(range(16))
        assert expanded[16:32].hex() == "d6aa74fdd2af72fadaa678f1d6ab76fe"
        assert expanded[-16:].hex() == "13111d7fe3944a17f307a78b4d2b30c5"

    def test_fips_197_appendix_a1(self) -> None:
        expanded = key_expansion(bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"))
        assert round_key(expanded, 1).hex() == "a0fafe1788542cb123a339392a6c7605"
        assert round_key(expanded, 10).hex() == "d014f9a8c9ee2589e13f0cc8b6630ca6"

    @pytest.mark.parametrize("size", [0, 15, 17, 32])
    def test_invalid_key_length(self, size) -> None:
        with pytest.raises(ValueError, match=f"Key must be 16 bytes, got {size}"):
            key_expansion(bytes(size))


class TestRoundKey:
    def test_slices(self) -> None:
        expanded = key_expansion(bytes(16))
        for i in range(11):
            assert round_key(expanded, i) == expanded[16 * i:16 * i + 16]

    @pytest.mark.parametrize("round_num", [-1, 11])
    def test_out_of_range(self, round_num) -> None:
        with pytest.raises(ValueError, match="Round must be 0..10"):
            round_key(key_expansion(bytes(16)), round_num)
