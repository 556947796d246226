"""Homomorphic evaluation engines."""

from homaes.interfaces import EvaluationEngine, SessionConfig

from .clear import ClearEngine
from .masked import MaskedEngine

# Registry of available engines
ENGINES: dict[str, type[EvaluationEngine]] = {
    "clear": ClearEngine,
    "masked": MaskedEngine,
}


def get_engine(name: str) -> type[EvaluationEngine]:
    """Get engine class by name.

    Raises:
        KeyError: If engine not found
    """
    if name not in ENGINES:
        available = ", ".join(ENGINES.keys())
        raise KeyError(f"Unknown engine '{name}'. Available: {available}")
    return ENGINES[name]


def list_engines() -> list[dict[str, str]]:
    """List all available engines with descriptions."""
    return [
        {"name": name, "description": getattr(cls, "description", "No description")}
        for name, cls in ENGINES.items()
    ]


def create_engine(config: SessionConfig) -> EvaluationEngine:
    """Instantiate the engine named by `config.engine`."""
    return get_engine(config.engine).from_config(config)


__all__ = [
    "ENGINES",
    "get_engine",
    "list_engines",
    "create_engine",
    "ClearEngine",
    "MaskedEngine",
]
