"""Homomorphic AES-128 evaluation over encrypted bits."""

__version__ = "0.1.0"

from .interfaces import (
    EncryptedBit,
    EncryptedByte,
    EvaluationEngine,
    Result,
    SessionConfig,
)
from .circuit import CircuitError, CircuitExecutor, GateProgram
from .context import EvalContext
from .golden import golden_decrypt, golden_encrypt
from .key_schedule import key_expansion
from .rounds import RoundEngine
from .session import HomomorphicAES, decrypt_block, encrypt_block

__all__ = [
    "EncryptedBit",
    "EncryptedByte",
    "EvaluationEngine",
    "Result",
    "SessionConfig",
    "CircuitError",
    "CircuitExecutor",
    "GateProgram",
    "EvalContext",
    "golden_encrypt",
    "golden_decrypt",
    "key_expansion",
    "RoundEngine",
    "HomomorphicAES",
    "encrypt_block",
    "decrypt_block",
]
