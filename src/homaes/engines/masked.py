"""Boolean-masking evaluation engine.

Every value is split into d+1 XOR shares and never held in the clear by
the evaluation path:

- XOR and NOT act share-wise (NOT flips share 0 only)
- AND on bits and bytes goes through a DOM-indep multiplier
- OR is a ^ b ^ (a & b)
- equality ORs the bits of the shared XOR-difference, then negates
- select is b ^ (expand(cond) & (a ^ b)), expand(c) = c * 0xFF per share
- table lookup recomputes a masked table under a fresh output mask
"""

from __future__ import annotations

from typing import Sequence

from homaes.interfaces import EncryptedBit, EncryptedByte, EvaluationEngine, SessionConfig
from homaes.randomness import RandomSource

from .dom_gadgets import DomIndepMultiplier, gf2_mult, recombine_shares, share_value

BIT_MASK = 0x1
BYTE_MASK = 0xFF


class MaskedEngine(EvaluationEngine):
    """d-th order Boolean masking engine with DOM AND gadgets."""

    name = "masked"
    description = "Boolean masking with DOM-indep AND gadgets (d+1 shares)"

    def __init__(self, d: int = 1, seed: int | None = None):
        super().__init__()
        if d not in (1, 2):
            raise ValueError(f"Protection order d must be 1 or 2, got {d}")
        self.d = d
        self.num_shares = d + 1
        self.rng = RandomSource(seed)
        self._bit_mult = DomIndepMultiplier(d, 1, gf2_mult, self.rng)
        self._byte_mult = DomIndepMultiplier(d, 8, gf2_mult, self.rng)

    @classmethod
    def from_config(cls, config: SessionConfig) -> "MaskedEngine":
        return cls(d=config.mask_order_d, seed=config.seed)

    # -- trusted party -------------------------------------------------

    def encrypt_bit(self, value: int) -> EncryptedBit:
        self._check_plain(value, BIT_MASK)
        return EncryptedBit(tuple(share_value(value, self.num_shares, BIT_MASK, self.rng)))

    def decrypt_bit(self, ct: EncryptedBit) -> int:
        self._check_bits(ct)
        return recombine_shares(ct.payload)

    def encrypt_byte(self, value: int) -> EncryptedByte:
        self._check_plain(value, BYTE_MASK)
        return EncryptedByte(tuple(share_value(value, self.num_shares, BYTE_MASK, self.rng)))

    def decrypt_byte(self, ct: EncryptedByte) -> int:
        self._check_bytes(ct)
        return recombine_shares(ct.payload)

    # -- share-level helpers (uncounted) -------------------------------

    @staticmethod
    def _xor(x: Sequence[int], y: Sequence[int]) -> list[int]:
        return [a ^ b for a, b in zip(x, y)]

    @staticmethod
    def _not(x: Sequence[int], mask: int) -> list[int]:
        return [x[0] ^ mask, *x[1:]]

    def _or(self, x: Sequence[int], y: Sequence[int], mult: DomIndepMultiplier) -> list[int]:
        return self._xor(self._xor(x, y), mult.multiply(list(x), list(y)))

    # -- encrypted bits ------------------------------------------------

    def bit_and(self, a: EncryptedBit, b: EncryptedBit) -> EncryptedBit:
        self._check_bits(a, b)
        self._tick("bit_and")
        return EncryptedBit(tuple(self._bit_mult.multiply(list(a.payload), list(b.payload))))

    def bit_xor(self, a: EncryptedBit, b: EncryptedBit) -> EncryptedBit:
        self._check_bits(a, b)
        self._tick("bit_xor")
        return EncryptedBit(tuple(self._xor(a.payload, b.payload)))

    def bit_not(self, a: EncryptedBit) -> EncryptedBit:
        self._check_bits(a)
        self._tick("bit_not")
        return EncryptedBit(tuple(self._not(a.payload, BIT_MASK)))

    # -- encrypted bytes -----------------------------------------------

    def byte_and(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        self._check_bytes(a, b)
        self._tick("byte_and")
        return EncryptedByte(tuple(self._byte_mult.multiply(list(a.payload), list(b.payload))))

    def byte_xor(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        self._check_bytes(a, b)
        self._tick("byte_xor")
        return EncryptedByte(tuple(self._xor(a.payload, b.payload)))

    def byte_or(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        self._check_bytes(a, b)
        self._tick("byte_or")
        return EncryptedByte(tuple(self._or(a.payload, b.payload, self._byte_mult)))

    def byte_equal(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedBit:
        self._check_bytes(a, b)
        self._tick("byte_equal")
        diff = self._xor(a.payload, b.payload)

        # any_set = OR of the 8 difference bits, each still shared
        any_set = [(s >> 0) & 1 for s in diff]
        for i in range(1, 8):
            bit = [(s >> i) & 1 for s in diff]
            any_set = self._or(any_set, bit, self._bit_mult)

        return EncryptedBit(tuple(self._not(any_set, BIT_MASK)))

    def select(
        self, cond: EncryptedBit, a: EncryptedByte, b: EncryptedByte
    ) -> EncryptedByte:
        self._check_bits(cond)
        self._check_bytes(a, b)
        self._tick("select")
        expanded = [BYTE_MASK if s else 0 for s in cond.payload]
        picked = self._byte_mult.multiply(expanded, self._xor(a.payload, b.payload))
        return EncryptedByte(tuple(self._xor(b.payload, picked)))

    def table_lookup(self, ct: EncryptedByte, table: Sequence[int]) -> EncryptedByte:
        """Masked table recomputation.

        With x = s0 ^ m (m = XOR of the remaining shares) and a fresh
        output mask r, T'[u] = T[u ^ m] ^ r gives T'[s0] = T[x] ^ r.
        """
        self._check_bytes(ct)
        self._check_table(table)
        self._tick("table_lookup")

        s0, *rest = ct.payload
        m = recombine_shares(rest)
        r = self.rng.get_bits(8, "table_remask")
        masked_table = [(table[u ^ m] ^ r) & BYTE_MASK for u in range(256)]

        out_mask = share_value(r, self.d, BYTE_MASK, self.rng, "table_remask")
        return EncryptedByte((masked_table[s0], *out_mask))

    @property
    def random_bits_total(self) -> int:
        return self.rng.total_bits
