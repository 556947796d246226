"""Transparent evaluation engine.

Ciphertexts carry their plaintext value, the way trivial ciphertexts do in
lattice libraries. Every primitive is still counted and type-checked, so
circuits and round logic exercise exactly the calls a real engine sees.
"""

from __future__ import annotations

from typing import Sequence

from homaes.interfaces import EncryptedBit, EncryptedByte, EvaluationEngine


class ClearEngine(EvaluationEngine):
    """Engine whose payloads are the plaintext values themselves."""

    name = "clear"
    description = "Transparent engine (payload = plaintext), for functional testing"

    def encrypt_bit(self, value: int) -> EncryptedBit:
        self._check_plain(value, 1)
        return EncryptedBit(value)

    def decrypt_bit(self, ct: EncryptedBit) -> int:
        self._check_bits(ct)
        return ct.payload

    def encrypt_byte(self, value: int) -> EncryptedByte:
        self._check_plain(value, 0xFF)
        return EncryptedByte(value)

    def decrypt_byte(self, ct: EncryptedByte) -> int:
        self._check_bytes(ct)
        return ct.payload

    def bit_and(self, a: EncryptedBit, b: EncryptedBit) -> EncryptedBit:
        self._check_bits(a, b)
        self._tick("bit_and")
        return EncryptedBit(a.payload & b.payload)

    def bit_xor(self, a: EncryptedBit, b: EncryptedBit) -> EncryptedBit:
        self._check_bits(a, b)
        self._tick("bit_xor")
        return EncryptedBit(a.payload ^ b.payload)

    def bit_not(self, a: EncryptedBit) -> EncryptedBit:
        self._check_bits(a)
        self._tick("bit_not")
        return EncryptedBit(a.payload ^ 1)

    def byte_and(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        self._check_bytes(a, b)
        self._tick("byte_and")
        return EncryptedByte(a.payload & b.payload)

    def byte_xor(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        self._check_bytes(a, b)
        self._tick("byte_xor")
        return EncryptedByte(a.payload ^ b.payload)

    def byte_or(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        self._check_bytes(a, b)
        self._tick("byte_or")
        return EncryptedByte(a.payload | b.payload)

    def byte_equal(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedBit:
        self._check_bytes(a, b)
        self._tick("byte_equal")
        return EncryptedBit(int(a.payload == b.payload))

    def select(
        self, cond: EncryptedBit, a: EncryptedByte, b: EncryptedByte
    ) -> EncryptedByte:
        self._check_bits(cond)
        self._check_bytes(a, b)
        self._tick("select")
        return a if cond.payload else b

    def table_lookup(self, ct: EncryptedByte, table: Sequence[int]) -> EncryptedByte:
        self._check_bytes(ct)
        self._check_table(table)
        self._tick("table_lookup")
        return EncryptedByte(table[ct.payload] & 0xFF)
