"""
Utility functions for block/state conversions and hex formatting.

AES state is 4x4 bytes in column-major order:
  state[row][col] where row, col in [0..3]

Column-major mapping from 16-byte array:
  byte[0]  -> state[0][0]
  byte[1]  -> state[1][0]
  ...
  byte[15] -> state[3][3]
"""

import random


def bytes_to_state(data: bytes) -> list[list[int]]:
    """
    Convert 16 bytes to 4x4 AES state (column-major).

    Args:
        data: 16 bytes of input

    Returns:
        4x4 list of integers (0-255)
    """
    if len(data) != 16:
        raise ValueError(f"Expected 16 bytes, got {len(data)}")
    return [[data[col * 4 + row] for col in range(4)] for row in range(4)]


def format_state_grid(data: bytes) -> str:
    """
    Format a 16-byte block as a readable 4x4 grid (rows of the state).

    Returns multi-line string like:
      2b 28 ab 09
      7e ae f7 cf
      15 d2 15 4f
      16 a6 88 3c
    """
    state = bytes_to_state(data)
    return "\n".join("  " + " ".join(f"{b:02x}" for b in row) for row in state)


def parse_block_hex(hex_str: str, label: str = "Block") -> bytes:
    """
    Parse a 32-hex-digit string into a 16-byte block.

    Whitespace is ignored, so "00112233 44556677 ..." is accepted.

    Raises:
        ValueError: If the string is not valid hex or not 16 bytes long
    """
    cleaned = "".join(hex_str.split())
    try:
        data = bytes.fromhex(cleaned)
    except ValueError:
        raise ValueError(f"{label} is not valid hex: {hex_str!r}") from None
    if len(data) != 16:
        raise ValueError(f"{label} must be 16 bytes, got {len(data)}")
    return data


def random_block(rng: random.Random) -> bytes:
    """Draw 16 bytes from a seeded generator."""
    return bytes(rng.getrandbits(8) for _ in range(16))
