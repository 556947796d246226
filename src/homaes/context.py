"""Per-session evaluation context shared by circuits and rounds."""

from __future__ import annotations

from dataclasses import dataclass

from .circuit import CircuitExecutor
from .codec import PositionValues
from .interfaces import EvaluationEngine


@dataclass(frozen=True)
class EvalContext:
    """Engine, position-value constants and gate-level executor.

    Created once per session and passed explicitly to every circuit
    evaluation; read-only after construction.
    """

    engine: EvaluationEngine
    pos_vals: PositionValues
    executor: CircuitExecutor

    @classmethod
    def create(
        cls, engine: EvaluationEngine, circuit_workers: int | None = None
    ) -> "EvalContext":
        return cls(
            engine=engine,
            pos_vals=PositionValues.create(engine),
            executor=CircuitExecutor(engine, workers=circuit_workers),
        )
