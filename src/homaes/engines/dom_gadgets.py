"""
Domain-Oriented Masking (DOM) multiplier gadget.

Implements DOM-indep for d+1 Boolean shares. The field product is
pluggable: plain AND for single bits, bitwise AND for bytes (eight
GF(2) products side by side).
"""

from typing import Callable

from ..randomness import RandomSource


def gf2_mult(a: int, b: int) -> int:
    """Product in GF(2), applied bitwise to packed bytes."""
    return a & b


def share_value(value: int, num_shares: int, mask: int, rng: RandomSource,
                category: str = "fresh_masks") -> list[int]:
    """Split a value into num_shares additive shares."""
    width = mask.bit_length()
    shares = []
    acc = 0
    for _ in range(num_shares - 1):
        r = rng.get_bits(width, category)
        shares.append(r)
        acc ^= r
    shares.append((value ^ acc) & mask)
    return shares


def recombine_shares(shares: list[int] | tuple[int, ...]) -> int:
    """XOR all shares to recover the original value."""
    result = 0
    for s in shares:
        result ^= s
    return result


class DomIndepMultiplier:
    """
    DOM-independent multiplier for d+1 shares.

    - Uses d*(d+1)/2 fresh random masks Z_ij
    - Each Z has width n bits (field size)
    """

    def __init__(
        self,
        d: int,
        field_width: int,
        mult_func: Callable[[int, int], int],
        rng: RandomSource,
    ):
        """
        Initialize DOM-indep multiplier.

        Args:
            d: Protection order (1 or 2)
            field_width: Bit width of field elements (1 or 8)
            mult_func: Share-level product
            rng: Random source (tracks gadget randomness)
        """
        self.d = d
        self.num_shares = d + 1
        self.field_width = field_width
        self.field_mask = (1 << field_width) - 1
        self.mult = mult_func
        self.rng = rng

    def _sample_random(self) -> int:
        return self.rng.get_bits(self.field_width, "gadget_randomness")

    def multiply(self, x_shares: list[int], y_shares: list[int]) -> list[int]:
        """
        Compute DOM-independent multiplication of shared values.

        For each pair (i, j) with i < j a fresh Z_ij masks both cross
        products x_i*y_j and x_j*y_i; same-domain products stay unmasked.

        Args:
            x_shares: d+1 shares of x
            y_shares: d+1 shares of y

        Returns:
            d+1 shares of x*y
        """
        n = self.num_shares

        partials = [[self.mult(x_shares[i], y_shares[j]) for j in range(n)] for i in range(n)]

        z_masks = [[0 for _ in range(n)] for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                z_masks[i][j] = self._sample_random()

        result = [0 for _ in range(n)]
        for i in range(n):
            acc = partials[i][i]
            for j in range(n):
                if j == i:
                    continue
                z = z_masks[i][j] if i < j else z_masks[j][i]
                acc ^= partials[i][j] ^ z
            result[i] = acc & self.field_mask

        return result
