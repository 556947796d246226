"""
End-to-end homomorphic AES-128 against known answers and PyCryptodome.

Tests:
- Known-answer vectors in both directions (clear and masked engines)
- Random key/plaintext round trips checked against the library
- Session configuration validation and result accounting
"""

import random

import pytest
from Crypto.Cipher import AES

from homaes.engines import ClearEngine
from homaes.golden import FIPS_197_TEST_VECTORS
from homaes.interfaces import SessionConfig
from homaes.session import HomomorphicAES, decrypt_block, encrypt_block

KAT_KEY = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
KAT_PT = bytes.fromhex("00112233445566778899aabbccddeeff")
KAT_CT = bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a")

SP800_KEY = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
SP800_PT = bytes.fromhex("6bc1bee22e409f96e93d7e117393172a")
SP800_CT = bytes.fromhex("3ad77bb40d7a3660a89ecaf32466ef97")


def random_bytes(n: int, rng: random.Random) -> bytes:
    """Generate n random bytes."""
    return bytes(rng.randint(0, 255) for _ in range(n))


@pytest.fixture(scope="module")
def clear_session():
    return HomomorphicAES(SessionConfig(engine="clear", circuit_workers=2, state_workers=4))


class TestKnownAnswers:
    @pytest.mark.parametrize(
        "key, pt, ct",
        [(KAT_KEY, KAT_PT, KAT_CT), (SP800_KEY, SP800_PT, SP800_CT)],
    )
    def test_encrypt(self, clear_session, key, pt, ct) -> None:
        result = clear_session.encrypt_block(key, pt)
        assert result.output == ct
        assert result.correct, result.error_detail

    @pytest.mark.parametrize(
        "key, pt, ct",
        [(KAT_KEY, KAT_PT, KAT_CT), (SP800_KEY, SP800_PT, SP800_CT)],
    )
    def test_decrypt(self, clear_session, key, pt, ct) -> None:
        result = clear_session.decrypt_block(key, ct)
        assert result.output == pt
        assert result.correct, result.error_detail

    @pytest.mark.parametrize("vec", FIPS_197_TEST_VECTORS)
    def test_all_reference_vectors(self, clear_session, vec: dict) -> None:
        assert clear_session.encrypt_block(vec["key"], vec["plaintext"]).output == vec["ciphertext"]

    @pytest.mark.parametrize("d", [1, 2])
    def test_masked_engine(self, d) -> None:
        session = HomomorphicAES(SessionConfig(engine="masked", mask_order_d=d, seed=42))
        enc = session.encrypt_block(KAT_KEY, KAT_PT)
        assert enc.output == KAT_CT
        assert enc.random_bits_total > 0
        dec = session.decrypt_block(KAT_KEY, KAT_CT)
        assert dec.output == KAT_PT


class TestRandomized:
    @pytest.mark.parametrize("seed", range(3))
    def test_round_trip_matches_library(self, clear_session, seed) -> None:
        rng = random.Random(seed)
        key = random_bytes(16, rng)
        pt = random_bytes(16, rng)

        expected = AES.new(key, AES.MODE_ECB).encrypt(pt)
        enc = clear_session.encrypt_block(key, pt)
        assert enc.output == expected, (
            f"Seed {seed}: expected {expected.hex()}, got {enc.output.hex()}"
        )

        dec = clear_session.decrypt_block(key, enc.output)
        assert dec.output == pt

    def test_masked_round_trip(self) -> None:
        rng = random.Random(77)
        key = random_bytes(16, rng)
        pt = random_bytes(16, rng)
        config = SessionConfig(engine="masked", seed=77, circuit_workers=1, state_workers=16)

        ct = encrypt_block(key, pt, config)
        assert ct == AES.new(key, AES.MODE_ECB).encrypt(pt)
        assert decrypt_block(key, ct, config) == pt

    def test_worker_counts_do_not_change_output(self) -> None:
        outputs = {
            encrypt_block(SP800_KEY, SP800_PT, SessionConfig(circuit_workers=c, state_workers=s))
            for c, s in [(1, 1), (2, 4), (8, 16)]
        }
        assert outputs == {SP800_CT}


class TestResult:
    def test_accounting(self, clear_session) -> None:
        result = clear_session.encrypt_block(KAT_KEY, KAT_PT)
        assert result.direction == "encrypt"
        assert result.engine == "clear"
        assert result.random_bits_total == 0
        # 10 SubBytes stages of 16 circuits each
        assert result.op_counts["bit_and"] == 10 * 16 * 32
        # 16 AddRoundKey XORs per round key
        assert result.op_counts["byte_xor"] == 11 * 16
        assert "table_lookup" not in result.op_counts
        assert result.total_ops == sum(result.op_counts.values())
        assert set(result.stage_seconds) == {"add_round_key", "sub_bytes", "shift_rows", "mix_columns"}
        assert result.elapsed_seconds > 0

    def test_decrypt_uses_table_lookups(self, clear_session) -> None:
        result = clear_session.decrypt_block(KAT_KEY, KAT_CT)
        # 9 InvMixColumns stages, 4 columns, 16 lookups per column
        assert result.op_counts["table_lookup"] == 9 * 4 * 16
        assert result.op_counts["bit_and"] == 10 * 16 * 34

    def test_to_dict(self, clear_session) -> None:
        data = clear_session.encrypt_block(KAT_KEY, KAT_PT).to_dict()
        assert data["output_hex"] == KAT_CT.hex()
        assert data["correct"] is True
        assert data["notes"]

    def test_counters_reset_between_blocks(self, clear_session) -> None:
        first = clear_session.encrypt_block(KAT_KEY, KAT_PT)
        second = clear_session.encrypt_block(KAT_KEY, KAT_PT)
        assert first.op_counts == second.op_counts


class TestPreconditions:
    def test_wrong_plaintext_size(self, clear_session) -> None:
        with pytest.raises(ValueError, match="Plaintext must be 16 bytes, got 15"):
            clear_session.encrypt_block(KAT_KEY, bytes(15))

    def test_wrong_ciphertext_size(self, clear_session) -> None:
        with pytest.raises(ValueError, match="Ciphertext must be 16 bytes, got 32"):
            clear_session.decrypt_block(KAT_KEY, bytes(32))

    def test_wrong_key_size(self, clear_session) -> None:
        with pytest.raises(ValueError, match="Key must be 16 bytes, got 24"):
            clear_session.encrypt_block(bytes(24), KAT_PT)

    def test_unknown_engine(self) -> None:
        with pytest.raises(KeyError):
            HomomorphicAES(SessionConfig(engine="nonexistent"))

    def test_explicit_engine_wins(self) -> None:
        engine = ClearEngine()
        session = HomomorphicAES(SessionConfig(engine="masked"), engine=engine)
        assert session.engine is engine


class TestSessionConfig:
    def test_defaults(self) -> None:
        config = SessionConfig()
        assert config.engine == "clear"
        assert config.mask_order_d == 1
        assert config.seed is None
        assert 1 <= config.circuit_workers <= 8
        assert config.state_workers == 16

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"mask_order_d": 0}, "mask_order_d must be 1 or 2"),
            ({"mask_order_d": 3}, "mask_order_d must be 1 or 2"),
            ({"circuit_workers": 0}, "circuit_workers must be 1..8"),
            ({"circuit_workers": 500}, "circuit_workers must be 1..8"),
            ({"state_workers": 0}, "state_workers must be 1..16"),
            ({"state_workers": 17}, "state_workers must be 1..16"),
        ],
    )
    def test_invalid(self, kwargs, message) -> None:
        with pytest.raises(ValueError, match=message):
            SessionConfig(**kwargs)
