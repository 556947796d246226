"""
Trusted session owner for homomorphic AES-128.

The owner holds the engine's secret side: it encrypts the input block and
the expanded key, hands only ciphertexts to the round engine, decrypts
the result and checks it against the PyCryptodome reference.
"""

from __future__ import annotations

import time

from .context import EvalContext
from .engines import create_engine
from .golden import validate_against_golden
from .interfaces import EvaluationEngine, Result, SessionConfig
from .key_schedule import BLOCK_SIZE, key_expansion
from .rounds import RoundEngine
from .trace import TraceRecorder


class HomomorphicAES:
    """
    One evaluation session: engine, context and round engine.

    Args:
        config: Session configuration (defaults to SessionConfig())
        engine: Pre-built engine; created from `config` when omitted
        tracer: Optional stage recorder
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        engine: EvaluationEngine | None = None,
        tracer: TraceRecorder | None = None,
    ):
        self.config = config or SessionConfig()
        self.engine = engine if engine is not None else create_engine(self.config)
        self.tracer = tracer
        self.ctx = EvalContext.create(self.engine, self.config.circuit_workers)
        self.rounds = RoundEngine(
            self.ctx, state_workers=self.config.state_workers, tracer=tracer
        )

    def encrypt_block(self, key: bytes, plaintext: bytes) -> Result:
        """Encrypt one 16-byte block homomorphically."""
        return self._process("encrypt", key, plaintext)

    def decrypt_block(self, key: bytes, ciphertext: bytes) -> Result:
        """Decrypt one 16-byte block homomorphically."""
        return self._process("decrypt", key, ciphertext)

    def _process(self, direction: str, key: bytes, block: bytes) -> Result:
        label = "Plaintext" if direction == "encrypt" else "Ciphertext"
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"{label} must be {BLOCK_SIZE} bytes, got {len(block)}")
        expanded = key_expansion(key)

        self.engine.counter.reset()
        bits_before = self.engine.random_bits_total
        start = time.perf_counter()

        state = self.engine.encrypt_bytes(block)
        round_keys = self.engine.encrypt_bytes(expanded)
        if direction == "encrypt":
            out = self.rounds.encrypt(state, round_keys)
        else:
            out = self.rounds.decrypt(state, round_keys)
        output = self.engine.decrypt_bytes(out)

        elapsed = time.perf_counter() - start
        correct, detail = validate_against_golden(key, block, output, direction)

        result = Result(
            output=output,
            correct=correct,
            error_detail=detail,
            direction=direction,
            engine=self.engine.name,
            op_counts=self.engine.counter.by_operation,
            random_bits_total=self.engine.random_bits_total - bits_before,
            stage_seconds=dict(self.rounds.stage_seconds),
            elapsed_seconds=elapsed,
        )
        result.add_note(
            f"circuit_workers={self.ctx.executor.workers}, "
            f"state_workers={self.rounds.state_workers}"
        )
        return result


def encrypt_block(
    key: bytes, plaintext: bytes, config: SessionConfig | None = None
) -> bytes:
    """Homomorphically encrypt one block and return the decrypted output."""
    return HomomorphicAES(config).encrypt_block(key, plaintext).output


def decrypt_block(
    key: bytes, ciphertext: bytes, config: SessionConfig | None = None
) -> bytes:
    """Homomorphically decrypt one block and return the decrypted output."""
    return HomomorphicAES(config).decrypt_block(key, ciphertext).output
