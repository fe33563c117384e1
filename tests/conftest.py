"""Pytest configuration and fixtures for aviscore tests.

This module provides common fixtures and configuration for all tests.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from aviscore.calc.formulas import FormulaRegistry, register_core_formulas
from aviscore.config import ENV_LOG_LEVEL, ENV_MINUTES_PER_QUESTION


@pytest.fixture(autouse=True)
def clear_engine_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove engine environment variables so every test starts from defaults.

    Tests that need to verify configuration behavior set them explicitly.
    """
    monkeypatch.delenv(ENV_LOG_LEVEL, raising=False)
    monkeypatch.delenv(ENV_MINUTES_PER_QUESTION, raising=False)


@pytest.fixture
def registry() -> Iterator[FormulaRegistry]:
    """Create a fresh formula registry with core formulas, discarded afterwards."""
    FormulaRegistry.reset_instance()
    reg = FormulaRegistry()
    register_core_formulas(reg)
    yield reg
    FormulaRegistry.reset_instance()
