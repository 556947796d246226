"""Golden reference AES implementation using PyCryptodome."""

from Crypto.Cipher import AES


def _check_sizes(key: bytes, block: bytes, label: str) -> None:
    if len(key) != 16:
        raise ValueError(f"Key must be 16 bytes, got {len(key)}")
    if len(block) != 16:
        raise ValueError(f"{label} must be 16 bytes, got {len(block)}")


def golden_encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt a single block using PyCryptodome as golden reference.

    Args:
        key: 16-byte AES-128 key
        plaintext: 16-byte plaintext block

    Returns:
        16-byte ciphertext block

    Raises:
        ValueError: If key or plaintext is not 16 bytes
    """
    _check_sizes(key, plaintext, "Plaintext")
    return AES.new(key, AES.MODE_ECB).encrypt(plaintext)


def golden_decrypt(key: bytes, ciphertext: bytes) -> bytes:
    """Decrypt a single block using PyCryptodome as golden reference."""
    _check_sizes(key, ciphertext, "Ciphertext")
    return AES.new(key, AES.MODE_ECB).decrypt(ciphertext)


def validate_against_golden(
    key: bytes, block: bytes, candidate: bytes, direction: str = "encrypt"
) -> tuple[bool, str]:
    """Validate a candidate output against the golden reference.

    Args:
        key: 16-byte AES-128 key
        block: 16-byte input block (plaintext when encrypting)
        candidate: 16-byte output to validate
        direction: "encrypt" or "decrypt"

    Returns:
        Tuple of (is_correct, error_detail)
    """
    if direction == "encrypt":
        expected = golden_encrypt(key, block)
    elif direction == "decrypt":
        expected = golden_decrypt(key, block)
    else:
        raise ValueError(f"Unknown direction {direction!r}")

    if candidate == expected:
        return True, ""
    else:
        label = "Ciphertext" if direction == "encrypt" else "Plaintext"
        return False, (
            f"{label} mismatch: expected {expected.hex()}, "
            f"got {candidate.hex()}"
        )


# Known-answer vectors for AES-128
FIPS_197_TEST_VECTORS = [
    # FIPS-197 Appendix C.1
    {
        "key": bytes.fromhex("000102030405060708090a0b0c0d0e0f"),
        "plaintext": bytes.fromhex("00112233445566778899aabbccddeeff"),
        "ciphertext": bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a"),
    },
    # NIST SP 800-38A F.1.1, block 1
    {
        "key": bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"),
        "plaintext": bytes.fromhex("6bc1bee22e409f96e93d7e117393172a"),
        "ciphertext": bytes.fromhex("3ad77bb40d7a3660a89ecaf32466ef97"),
    },
    {
        "key": bytes.fromhex("00000000000000000000000000000000"),
        "plaintext": bytes.fromhex("00000000000000000000000000000000"),
        "ciphertext": bytes.fromhex("66e94bd4ef8a2c3b884cfa59ca342b2e"),
    },
    {
        "key": bytes.fromhex("00000000000000000000000000000000"),
        "plaintext": bytes.fromhex("f34481ec3cc627bacd5dc3fb08f273e6"),
        "ciphertext": bytes.fromhex("0336763e966d92595a567cc9ce537f5e"),
    },
    {
        "key": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "plaintext": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "ciphertext": bytes.fromhex("bcbf217cb280cf30b2517052193ab979"),
    },
]
