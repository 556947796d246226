"""Randomness source and accounting for the masked evaluation engine."""

from __future__ import annotations

import random
import secrets
import threading
from typing import Any

CATEGORIES = ("fresh_masks", "gadget_randomness", "table_remask", "other")


class RandomSource:
    """Random source with tracking for masked evaluation.

    Provides deterministic randomness (from seed) for reproducibility
    while tracking usage by category. Draws are serialised with a lock
    because gate-level workers share one source.
    """

    def __init__(self, seed: int | None = None):
        """Initialize random source.

        Args:
            seed: Optional seed for deterministic randomness
        """
        self._seed = seed
        self._lock = threading.Lock()
        self._rng = self._create_rng(seed)
        self._bits_used: dict[str, int] = {}
        self.reset()

    def _create_rng(self, seed: int | None) -> Any:
        """Create random number generator.

        Uses secrets for cryptographic randomness when no seed,
        or a seeded PRNG for reproducibility when seeded.
        """
        if seed is None:
            return None  # Use secrets
        return random.Random(seed)

    def reset(self) -> None:
        """Reset usage counters (and reseed when seeded)."""
        with self._lock:
            self._bits_used = {k: 0 for k in CATEGORIES}
            if self._seed is not None:
                self._rng = self._create_rng(self._seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    @property
    def total_bits(self) -> int:
        """Total random bits used."""
        with self._lock:
            return sum(self._bits_used.values())

    @property
    def bits_breakdown(self) -> dict[str, int]:
        """Get bits breakdown by category."""
        with self._lock:
            return self._bits_used.copy()

    def get_bits(self, count: int, category: str = "other") -> int:
        """Get random bits as integer and track usage.

        Args:
            count: Number of bits to generate
            category: Category for tracking

        Returns:
            Random integer with `count` bits
        """
        if count <= 0:
            return 0
        if category not in self._bits_used:
            category = "other"

        with self._lock:
            self._bits_used[category] += count
            if self._rng is None:
                return secrets.randbits(count)
            return self._rng.getrandbits(count)
