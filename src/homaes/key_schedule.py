"""
Cleartext AES-128 key expansion (FIPS-197 section 5.2).

Runs on the trusted side; the expanded material is encrypted once by
the session owner before it reaches AddRoundKey.
"""

from .tables import RCON, SBOX

KEY_SIZE = 16
BLOCK_SIZE = 16
ROUNDS = 10
EXPANDED_KEY_SIZE = BLOCK_SIZE * (ROUNDS + 1)  # 176


def _rot_word(word: list[int]) -> list[int]:
    return word[1:] + word[:1]


def _sub_word(word: list[int]) -> list[int]:
    return [SBOX[b] for b in word]


def key_expansion(key: bytes) -> bytes:
    """
    Expand a 16-byte key into 11 consecutive 16-byte round keys.

    Args:
        key: 16-byte AES-128 key

    Returns:
        176 bytes; round key i is bytes [16*i, 16*i + 16)
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be 16 bytes, got {len(key)}")

    words = [list(key[4 * i:4 * i + 4]) for i in range(4)]
    for i in range(4, 4 * (ROUNDS + 1)):
        temp = list(words[i - 1])
        if i % 4 == 0:
            temp = _sub_word(_rot_word(temp))
            temp[0] ^= RCON[i // 4 - 1]
        words.append([a ^ b for a, b in zip(words[i - 4], temp)])

    return bytes(b for word in words for b in word)


def round_key(expanded: bytes, round_num: int) -> bytes:
    """Slice round key `round_num` (0..10) out of the expanded key."""
    if not 0 <= round_num <= ROUNDS:
        raise ValueError(f"Round must be 0..{ROUNDS}, got {round_num}")
    return expanded[BLOCK_SIZE * round_num:BLOCK_SIZE * (round_num + 1)]
