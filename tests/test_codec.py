"""Tests for the position-value codec."""

import pytest

from homaes.codec import POWERS_OF_TWO, PositionValues, decompose, recompose


class TestPositionValues:
    def test_constants_decrypt_to_powers(self, clear_engine) -> None:
        pv = PositionValues.create(clear_engine)
        assert [clear_engine.decrypt_byte(p) for p in pv.powers] == list(POWERS_OF_TWO)
        assert clear_engine.decrypt_byte(pv.zero) == 0

    def test_wrong_number_of_powers(self, clear_engine) -> None:
        zero = clear_engine.encrypt_byte(0)
        with pytest.raises(ValueError, match="Expected 8 position values, got 3"):
            PositionValues(powers=(zero, zero, zero), zero=zero)


class TestDecompose:
    @pytest.mark.parametrize("value", [0x00, 0x01, 0x80, 0x5A, 0xFF])
    def test_bits_are_lsb_first(self, clear_engine, value) -> None:
        pv = PositionValues.create(clear_engine)
        bits = decompose(clear_engine, pv, clear_engine.encrypt_byte(value))
        assert [clear_engine.decrypt_bit(b) for b in bits] == [(value >> i) & 1 for i in range(8)]


class TestRoundTrip:
    def test_all_byte_values_clear(self, clear_engine) -> None:
        pv = PositionValues.create(clear_engine)
        for value in range(256):
            ct = clear_engine.encrypt_byte(value)
            back = recompose(clear_engine, pv, decompose(clear_engine, pv, ct))
            assert clear_engine.decrypt_byte(back) == value

    def test_all_byte_values_masked(self, masked_engine) -> None:
        pv = PositionValues.create(masked_engine)
        for value in range(256):
            ct = masked_engine.encrypt_byte(value)
            back = recompose(masked_engine, pv, decompose(masked_engine, pv, ct))
            assert masked_engine.decrypt_byte(back) == value

    def test_recompose_needs_eight_bits(self, clear_engine) -> None:
        pv = PositionValues.create(clear_engine)
        bits = [clear_engine.encrypt_bit(1)] * 7
        with pytest.raises(ValueError, match="Expected 8 bits, got 7"):
            recompose(clear_engine, pv, bits)
