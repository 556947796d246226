"""
Position-value codec between encrypted bytes and encrypted bits.

Bit i of an encrypted byte x is extracted as equal(p_i & x, p_i) where
p_i is an encrypted public power of two. The reverse direction selects
p_i or an encrypted zero per bit and ORs the eight results together.

Bits are always LSB-first: bits[0] is the least significant bit.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Sequence

from .interfaces import EncryptedBit, EncryptedByte, EvaluationEngine

POWERS_OF_TWO = (1, 2, 4, 8, 16, 32, 64, 128)


@dataclass(frozen=True)
class PositionValues:
    """Encrypted powers of two plus an encrypted zero.

    Built once per session and shared read-only by every codec call.
    """

    powers: tuple[EncryptedByte, ...]
    zero: EncryptedByte

    def __post_init__(self) -> None:
        if len(self.powers) != 8:
            raise ValueError(f"Expected 8 position values, got {len(self.powers)}")

    @classmethod
    def create(cls, engine: EvaluationEngine) -> "PositionValues":
        """Encrypt the nine constants under the session's engine."""
        powers = tuple(engine.encrypt_byte(p) for p in POWERS_OF_TWO)
        return cls(powers=powers, zero=engine.encrypt_byte(0))


def decompose(
    engine: EvaluationEngine, pos_vals: PositionValues, ct: EncryptedByte
) -> list[EncryptedBit]:
    """Split an encrypted byte into 8 encrypted bits (LSB-first)."""
    return [engine.byte_equal(engine.byte_and(p, ct), p) for p in pos_vals.powers]


def recompose(
    engine: EvaluationEngine, pos_vals: PositionValues, bits: Sequence[EncryptedBit]
) -> EncryptedByte:
    """Assemble 8 encrypted bits (LSB-first) into one encrypted byte."""
    if len(bits) != 8:
        raise ValueError(f"Expected 8 bits, got {len(bits)}")

    weighted = [
        engine.select(bit, p, pos_vals.zero)
        for bit, p in zip(bits, pos_vals.powers)
    ]
    return reduce(engine.byte_or, weighted)
