"""Core interfaces and data structures for homomorphic AES evaluation."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

from .counters import OpCounter

# Upper bound on gate-level workers per circuit evaluation
MAX_CIRCUIT_WORKERS = 8


def default_circuit_workers() -> int:
    """Gate-level pool size: available parallelism, capped."""
    return min(MAX_CIRCUIT_WORKERS, os.cpu_count() or 1)


@dataclass(frozen=True)
class EncryptedBit:
    """Ciphertext of a single boolean under the engine's scheme."""

    payload: Any

    def __repr__(self) -> str:
        return "EncryptedBit(<opaque>)"


@dataclass(frozen=True)
class EncryptedByte:
    """Ciphertext of one unsigned 8-bit value under the engine's scheme."""

    payload: Any

    def __repr__(self) -> str:
        return "EncryptedByte(<opaque>)"


@dataclass
class SessionConfig:
    """Configuration object for one encryption/decryption session.

    Passed to the engine factory and the round engine; nothing in the
    evaluation path reads global state.
    """

    # Evaluation engine registered under this name
    engine: str = "clear"

    # Masking order for the masked engine: 1 = 2 shares, 2 = 3 shares
    mask_order_d: int = 1

    # Seed for engines that draw randomness (None = OS randomness)
    seed: int | None = None

    # Worker threads per circuit evaluation (gate-level parallelism)
    circuit_workers: int = field(default_factory=default_circuit_workers)

    # Worker threads per round stage (byte/column-level parallelism)
    state_workers: int = 16

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.mask_order_d not in (1, 2):
            raise ValueError(f"mask_order_d must be 1 or 2, got {self.mask_order_d}")
        if not 1 <= self.circuit_workers <= MAX_CIRCUIT_WORKERS:
            raise ValueError(
                f"circuit_workers must be 1..{MAX_CIRCUIT_WORKERS}, got {self.circuit_workers}"
            )
        if not 1 <= self.state_workers <= 16:
            raise ValueError(f"state_workers must be 1..16, got {self.state_workers}")


@dataclass
class Result:
    """Result of one homomorphic block operation with full accounting."""

    # Core result
    output: bytes
    correct: bool
    error_detail: str = ""

    # "encrypt" or "decrypt"
    direction: str = "encrypt"
    engine: str = ""

    # Primitive accounting
    op_counts: dict[str, int] = field(default_factory=dict)
    random_bits_total: int = 0

    # Wall time per stage name, summed over rounds
    stage_seconds: dict[str, float] = field(default_factory=dict)
    elapsed_seconds: float = 0.0

    notes: list[str] = field(default_factory=list)

    def add_note(self, note: str) -> None:
        """Add an informational note."""
        self.notes.append(note)

    @property
    def total_ops(self) -> int:
        return sum(self.op_counts.values())

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "direction": self.direction,
            "engine": self.engine,
            "output_hex": self.output.hex(),
            "correct": self.correct,
            "error_detail": self.error_detail,
            "op_counts": self.op_counts,
            "random_bits_total": self.random_bits_total,
            "stage_seconds": self.stage_seconds,
            "elapsed_seconds": self.elapsed_seconds,
            "notes": self.notes,
        }


class EvaluationEngine(ABC):
    """Abstract homomorphic evaluation engine.

    The AES core only ever calls the gate, equality, select and lookup
    primitives. `encrypt_*` and `decrypt_*` belong to the trusted session
    owner and are never called from the evaluation path.
    """

    name: str = "base"
    description: str = "Base engine (abstract)"

    def __init__(self) -> None:
        self.counter = OpCounter()

    @classmethod
    def from_config(cls, config: SessionConfig) -> "EvaluationEngine":
        """Build an engine from a session configuration."""
        return cls()

    # -- trusted party -------------------------------------------------

    @abstractmethod
    def encrypt_bit(self, value: int) -> EncryptedBit:
        raise NotImplementedError

    @abstractmethod
    def decrypt_bit(self, ct: EncryptedBit) -> int:
        raise NotImplementedError

    @abstractmethod
    def encrypt_byte(self, value: int) -> EncryptedByte:
        raise NotImplementedError

    @abstractmethod
    def decrypt_byte(self, ct: EncryptedByte) -> int:
        raise NotImplementedError

    def encrypt_bytes(self, data: bytes) -> list[EncryptedByte]:
        """Encrypt a byte string into a list of encrypted bytes."""
        return [self.encrypt_byte(b) for b in data]

    def decrypt_bytes(self, cts: Sequence[EncryptedByte]) -> bytes:
        """Decrypt a sequence of encrypted bytes."""
        return bytes(self.decrypt_byte(ct) for ct in cts)

    # -- encrypted bits ------------------------------------------------

    @abstractmethod
    def bit_and(self, a: EncryptedBit, b: EncryptedBit) -> EncryptedBit:
        raise NotImplementedError

    @abstractmethod
    def bit_xor(self, a: EncryptedBit, b: EncryptedBit) -> EncryptedBit:
        raise NotImplementedError

    @abstractmethod
    def bit_not(self, a: EncryptedBit) -> EncryptedBit:
        raise NotImplementedError

    # -- encrypted bytes -----------------------------------------------

    @abstractmethod
    def byte_and(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        raise NotImplementedError

    @abstractmethod
    def byte_xor(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        raise NotImplementedError

    @abstractmethod
    def byte_or(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedByte:
        raise NotImplementedError

    @abstractmethod
    def byte_equal(self, a: EncryptedByte, b: EncryptedByte) -> EncryptedBit:
        raise NotImplementedError

    @abstractmethod
    def select(
        self, cond: EncryptedBit, a: EncryptedByte, b: EncryptedByte
    ) -> EncryptedByte:
        """Return `a` where `cond` encrypts 1, else `b`."""
        raise NotImplementedError

    @abstractmethod
    def table_lookup(self, ct: EncryptedByte, table: Sequence[int]) -> EncryptedByte:
        """Map an encrypted byte through a public 256-entry table."""
        raise NotImplementedError

    @property
    def random_bits_total(self) -> int:
        """Random bits drawn so far (0 for deterministic engines)."""
        return 0

    # -- shared validation ---------------------------------------------

    def _tick(self, operation: str) -> None:
        self.counter.increment(operation)

    @staticmethod
    def _check_bits(*cts: Any) -> None:
        for ct in cts:
            if not isinstance(ct, EncryptedBit):
                raise TypeError(f"Expected EncryptedBit, got {type(ct).__name__}")

    @staticmethod
    def _check_bytes(*cts: Any) -> None:
        for ct in cts:
            if not isinstance(ct, EncryptedByte):
                raise TypeError(f"Expected EncryptedByte, got {type(ct).__name__}")

    @staticmethod
    def _check_table(table: Sequence[int]) -> None:
        if len(table) != 256:
            raise ValueError(f"Lookup table must have 256 entries, got {len(table)}")

    @staticmethod
    def _check_plain(value: int, mask: int) -> None:
        if not 0 <= value <= mask:
            raise ValueError(f"Plaintext value {value} out of range 0..{mask}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
