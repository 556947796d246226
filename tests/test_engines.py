"""Tests for the evaluation engines and the engine registry."""

import pytest

from homaes.engines import ENGINES, ClearEngine, MaskedEngine, create_engine, get_engine, list_engines
from homaes.interfaces import EncryptedBit, EncryptedByte, SessionConfig
from homaes.tables import SBOX

BYTE_PAIRS = [(0x00, 0x00), (0x0F, 0xF0), (0x53, 0xCA), (0xFF, 0x01), (0xA5, 0xA5)]


@pytest.fixture(params=["clear", "masked_d1", "masked_d2"])
def engine(request):
    return {
        "clear": lambda: ClearEngine(),
        "masked_d1": lambda: MaskedEngine(d=1, seed=99),
        "masked_d2": lambda: MaskedEngine(d=2, seed=99),
    }[request.param]()


class TestBitPrimitives:
    @pytest.mark.parametrize("a", [0, 1])
    @pytest.mark.parametrize("b", [0, 1])
    def test_truth_tables(self, engine, a, b) -> None:
        x, y = engine.encrypt_bit(a), engine.encrypt_bit(b)
        assert engine.decrypt_bit(engine.bit_and(x, y)) == a & b
        assert engine.decrypt_bit(engine.bit_xor(x, y)) == a ^ b
        assert engine.decrypt_bit(engine.bit_not(x)) == 1 - a


class TestBytePrimitives:
    @pytest.mark.parametrize("a, b", BYTE_PAIRS)
    def test_bitwise(self, engine, a, b) -> None:
        x, y = engine.encrypt_byte(a), engine.encrypt_byte(b)
        assert engine.decrypt_byte(engine.byte_and(x, y)) == a & b
        assert engine.decrypt_byte(engine.byte_xor(x, y)) == a ^ b
        assert engine.decrypt_byte(engine.byte_or(x, y)) == a | b

    @pytest.mark.parametrize("a, b", BYTE_PAIRS)
    def test_equal(self, engine, a, b) -> None:
        x, y = engine.encrypt_byte(a), engine.encrypt_byte(b)
        assert engine.decrypt_bit(engine.byte_equal(x, y)) == int(a == b)

    @pytest.mark.parametrize("cond", [0, 1])
    def test_select(self, engine, cond) -> None:
        a, b = engine.encrypt_byte(0x3C), engine.encrypt_byte(0xC3)
        out = engine.select(engine.encrypt_bit(cond), a, b)
        assert engine.decrypt_byte(out) == (0x3C if cond else 0xC3)

    @pytest.mark.parametrize("value", [0x00, 0x01, 0x53, 0xFF])
    def test_table_lookup(self, engine, value) -> None:
        out = engine.table_lookup(engine.encrypt_byte(value), SBOX)
        assert engine.decrypt_byte(out) == SBOX[value]

    def test_bytes_round_trip(self, engine) -> None:
        data = bytes(range(16))
        assert engine.decrypt_bytes(engine.encrypt_bytes(data)) == data


class TestEngineBoundary:
    def test_byte_passed_as_bit(self, engine) -> None:
        byte = engine.encrypt_byte(1)
        with pytest.raises(TypeError, match="Expected EncryptedBit, got EncryptedByte"):
            engine.bit_xor(byte, byte)

    def test_bit_passed_as_byte(self, engine) -> None:
        bit = engine.encrypt_bit(1)
        with pytest.raises(TypeError, match="Expected EncryptedByte, got EncryptedBit"):
            engine.byte_xor(bit, bit)

    def test_select_condition_must_be_bit(self, engine) -> None:
        a = engine.encrypt_byte(1)
        with pytest.raises(TypeError):
            engine.select(a, a, a)

    def test_plaintext_out_of_range(self, engine) -> None:
        with pytest.raises(ValueError, match="out of range 0..1"):
            engine.encrypt_bit(2)
        with pytest.raises(ValueError, match="out of range 0..255"):
            engine.encrypt_byte(256)

    def test_short_lookup_table(self, engine) -> None:
        with pytest.raises(ValueError, match="256 entries, got 16"):
            engine.table_lookup(engine.encrypt_byte(0), list(range(16)))

    def test_ciphertext_repr_is_opaque(self, engine) -> None:
        assert repr(engine.encrypt_byte(0x42)) == "EncryptedByte(<opaque>)"
        assert repr(engine.encrypt_bit(1)) == "EncryptedBit(<opaque>)"

    def test_primitives_are_counted(self, engine) -> None:
        x = engine.encrypt_byte(3)
        engine.byte_xor(x, x)
        engine.byte_xor(x, x)
        engine.byte_equal(x, x)
        assert engine.counter.by_operation == {"byte_xor": 2, "byte_equal": 1}
        engine.counter.reset()
        assert engine.counter.total == 0


class TestMaskedEngine:
    def test_share_count(self) -> None:
        assert len(MaskedEngine(d=1, seed=1).encrypt_byte(5).payload) == 2
        assert len(MaskedEngine(d=2, seed=1).encrypt_byte(5).payload) == 3

    def test_invalid_order(self) -> None:
        with pytest.raises(ValueError, match="d must be 1 or 2"):
            MaskedEngine(d=3)

    def test_payload_hides_value(self) -> None:
        engine = MaskedEngine(d=1, seed=2024)
        share_zero = {engine.encrypt_byte(0x00).payload[0] for _ in range(64)}
        # With fresh masks the first share takes many values
        assert len(share_zero) > 16

    def test_seed_reproducibility(self) -> None:
        a = MaskedEngine(d=1, seed=5).encrypt_byte(0x77)
        b = MaskedEngine(d=1, seed=5).encrypt_byte(0x77)
        assert a.payload == b.payload

    def test_randomness_is_accounted(self) -> None:
        engine = MaskedEngine(d=1, seed=3)
        start = engine.random_bits_total
        x, y = engine.encrypt_byte(0x12), engine.encrypt_byte(0x34)
        engine.byte_and(x, y)
        breakdown = engine.rng.bits_breakdown
        assert breakdown["fresh_masks"] == 16
        assert breakdown["gadget_randomness"] == 8
        assert engine.random_bits_total - start == 24

    def test_clear_engine_draws_no_randomness(self) -> None:
        engine = ClearEngine()
        engine.bit_and(engine.encrypt_bit(1), engine.encrypt_bit(1))
        assert engine.random_bits_total == 0


class TestRegistry:
    def test_registered_engines(self) -> None:
        assert set(ENGINES) == {"clear", "masked"}
        assert [e["name"] for e in list_engines()] == ["clear", "masked"]

    def test_get_engine(self) -> None:
        assert get_engine("clear") is ClearEngine
        assert get_engine("masked") is MaskedEngine

    def test_unknown_engine(self) -> None:
        with pytest.raises(KeyError, match="Unknown engine 'tfhe'"):
            get_engine("tfhe")

    def test_create_from_config(self) -> None:
        engine = create_engine(SessionConfig(engine="masked", mask_order_d=2, seed=11))
        assert isinstance(engine, MaskedEngine)
        assert engine.d == 2
        assert engine.rng.seed == 11
        assert isinstance(create_engine(SessionConfig()), ClearEngine)


class TestCiphertextTypes:
    def test_frozen(self) -> None:
        ct = EncryptedByte(1)
        with pytest.raises(AttributeError):
            ct.payload = 2

    def test_bit_and_byte_are_distinct(self) -> None:
        assert EncryptedBit(1) != EncryptedByte(1)
