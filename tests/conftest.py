"""Shared fixtures for homaes tests."""

import pytest

from homaes.context import EvalContext
from homaes.engines import ClearEngine, MaskedEngine


@pytest.fixture
def clear_engine():
    return ClearEngine()


@pytest.fixture
def masked_engine():
    return MaskedEngine(d=1, seed=1234)


@pytest.fixture
def clear_ctx(clear_engine):
    return EvalContext.create(clear_engine, circuit_workers=2)


@pytest.fixture
def masked_ctx(masked_engine):
    return EvalContext.create(masked_engine, circuit_workers=2)
