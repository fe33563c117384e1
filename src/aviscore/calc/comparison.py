"""Comparison of a score against an earlier assessment."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from aviscore.calc.formulas import quantize_half_up

STABLE_DELTA = Decimal("1")
DEFAULT_IMPROVEMENT_THRESHOLD = Decimal("5")


class ScoreTrend(StrEnum):
    """Direction of change between two assessments."""

    IMPROVING = "IMPROVING"
    DECLINING = "DECLINING"
    STABLE = "STABLE"
    NEW = "NEW"


class ScoreComparison(BaseModel):
    """Delta between a current and a previous score."""

    model_config = ConfigDict(frozen=True)

    current_score: Decimal
    previous_score: Decimal
    delta: Decimal = Field(..., description="current - previous, 2 dp")
    percentage_change: Decimal = Field(..., description="delta / previous * 100, 2 dp")
    trend: ScoreTrend


class ImprovementAreas(BaseModel):
    """Categories split by how far their score moved."""

    model_config = ConfigDict(frozen=True)

    improved: list[str] = Field(default_factory=list)
    declined: list[str] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)


def compare_scores(
    current: Decimal | int | float, previous: Decimal | int | float
) -> ScoreComparison:
    """Compare two scores.

    When the previous score is not positive, the percentage change is 100 for a
    positive delta and 0 otherwise. A move of less than one point is STABLE.
    """
    current_value = Decimal(str(current))
    previous_value = Decimal(str(previous))
    delta = quantize_half_up(current_value - previous_value, 2)

    if previous_value > 0:
        percentage_change = quantize_half_up(delta / previous_value * Decimal("100"), 2)
    elif delta > 0:
        percentage_change = Decimal("100.00")
    else:
        percentage_change = Decimal("0.00")

    if abs(delta) < STABLE_DELTA:
        trend = ScoreTrend.STABLE
    elif delta > 0:
        trend = ScoreTrend.IMPROVING
    else:
        trend = ScoreTrend.DECLINING

    return ScoreComparison(
        current_score=current_value,
        previous_score=previous_value,
        delta=delta,
        percentage_change=percentage_change,
        trend=trend,
    )


def identify_improvement_areas(
    current: Mapping[str, Decimal | int | float],
    previous: Mapping[str, Decimal | int | float],
    threshold: Decimal | int | float = DEFAULT_IMPROVEMENT_THRESHOLD,
) -> ImprovementAreas:
    """Split categories into improved, declined and unchanged.

    Every category in either mapping is considered; a missing side counts as 0.
    A move of at least `threshold` points in either direction is significant.
    """
    limit = Decimal(str(threshold))
    improved: list[str] = []
    declined: list[str] = []
    unchanged: list[str] = []

    for category in sorted(set(current) | set(previous)):
        delta = Decimal(str(current.get(category, 0))) - Decimal(str(previous.get(category, 0)))
        if delta >= limit:
            improved.append(category)
        elif delta <= -limit:
            declined.append(category)
        else:
            unchanged.append(category)

    return ImprovementAreas(improved=improved, declined=declined, unchanged=unchanged)
