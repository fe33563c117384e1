"""Runtime configuration for the aviscore engine.

Only operational knobs live here. Scoring constants (weights, thresholds,
evidence floors) are code and are never read from the environment.

Environment variables:
    AVISCORE_LOG_LEVEL: Logging level name (default: WARNING)
    AVISCORE_MINUTES_PER_QUESTION: Fallback answering time per question (default: 5)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Final

logger = logging.getLogger(__name__)

ENV_LOG_LEVEL: Final[str] = "AVISCORE_LOG_LEVEL"
ENV_MINUTES_PER_QUESTION: Final[str] = "AVISCORE_MINUTES_PER_QUESTION"

DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_MINUTES_PER_QUESTION: Final[Decimal] = Decimal("5")

VALID_LOG_LEVELS: Final[frozenset[str]] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)


class EngineConfigError(Exception):
    """Raised when engine configuration is invalid."""


@dataclass(frozen=True)
class EngineConfig:
    """Engine configuration (immutable).

    Attributes:
        log_level: Logging level name applied by the CLI.
        minutes_per_question: Answering time assumed when history gives no estimate.
    """

    log_level: str = DEFAULT_LOG_LEVEL
    minutes_per_question: Decimal = DEFAULT_MINUTES_PER_QUESTION

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.log_level not in VALID_LOG_LEVELS:
            raise EngineConfigError(
                f"{ENV_LOG_LEVEL} must be one of {sorted(VALID_LOG_LEVELS)}, "
                f"got '{self.log_level}'"
            )
        if self.minutes_per_question <= 0:
            raise EngineConfigError(
                f"{ENV_MINUTES_PER_QUESTION} must be a positive number, "
                f"got {self.minutes_per_question}"
            )

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)


def _parse_positive_decimal(env_var: str, default: Decimal) -> Decimal:
    """Parse a positive decimal from an environment variable.

    Raises:
        EngineConfigError: If value is set but not a positive number.
    """
    raw = os.environ.get(env_var)
    if raw is None:
        return default

    raw = raw.strip()
    if not raw:
        return default

    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise EngineConfigError(f"{env_var} must be a positive number, got '{raw}'") from e

    if not value.is_finite() or value <= 0:
        raise EngineConfigError(f"{env_var} must be a positive number, got {raw}")

    return value


def _parse_log_level(env_var: str, default: str) -> str:
    raw = os.environ.get(env_var)
    if raw is None or not raw.strip():
        return default
    return raw.strip().upper()


def load_engine_config() -> EngineConfig:
    """Load engine configuration from environment variables.

    Returns:
        EngineConfig with validated values.

    Raises:
        EngineConfigError: If any value is invalid.
    """
    config = EngineConfig(
        log_level=_parse_log_level(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
        minutes_per_question=_parse_positive_decimal(
            ENV_MINUTES_PER_QUESTION, DEFAULT_MINUTES_PER_QUESTION
        ),
    )
    logger.debug(
        "Engine config loaded: log_level=%s minutes_per_question=%s",
        config.log_level,
        config.minutes_per_question,
    )
    return config
