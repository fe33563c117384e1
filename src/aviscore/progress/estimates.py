"""Time-to-complete estimates and progress labels."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal
from typing import Final

from pydantic import BaseModel, ConfigDict

from aviscore.calc.formulas import quantize_half_up
from aviscore.models.response import AssessmentResponse
from aviscore.models.taxonomy import BilingualLabel

DEFAULT_MINUTES_PER_QUESTION: Final[Decimal] = Decimal("5")

# Gaps outside this window are breaks or batch imports, not answering time.
MIN_GAP_MINUTES: Final[Decimal] = Decimal("0.5")
MAX_GAP_MINUTES: Final[Decimal] = Decimal("30")

# (upper bound exclusive, label); 0% is "not started", 100% falls through to complete.
_STATUS_LABELS: Final[tuple[tuple[int, BilingualLabel], ...]] = (
    (25, BilingualLabel("Just Started", "Tout juste commencé")),
    (50, BilingualLabel("In Progress", "En cours")),
    (75, BilingualLabel("Halfway Complete", "À moitié terminé")),
    (100, BilingualLabel("Almost Complete", "Presque terminé")),
)
_NOT_STARTED = BilingualLabel("Not Started", "Non commencé")
_COMPLETE = BilingualLabel("Complete", "Terminé")

_PROGRESS_COLORS: Final[tuple[tuple[int, str], ...]] = (
    (25, "red"),
    (50, "orange"),
    (75, "yellow"),
    (100, "blue"),
)


class TimeEstimate(BaseModel):
    """Remaining effort for an assessment."""

    model_config = ConfigDict(frozen=True)

    estimated_minutes: Decimal
    estimated_hours: Decimal
    formatted: str


def _plain(value: Decimal) -> str:
    """Render a Decimal without a trailing '.0'."""
    if value == value.to_integral_value():
        return str(int(value))
    return str(value.normalize())


def estimate_remaining_time(
    remaining_questions: int,
    average_minutes_per_question: Decimal | int | float = DEFAULT_MINUTES_PER_QUESTION,
) -> TimeEstimate:
    """Estimate the time left to answer `remaining_questions`.

    Formatting: "N minutes" under an hour, "1 hour N minutes" under two hours,
    otherwise "H hours" with hours at 1 dp. Negative counts are treated as 0.
    """
    remaining = max(remaining_questions, 0)
    minutes = quantize_half_up(Decimal(remaining) * Decimal(str(average_minutes_per_question)), 1)
    hours = quantize_half_up(minutes / Decimal("60"), 1)

    if minutes < 60:
        formatted = f"{_plain(minutes)} minutes"
    elif minutes < 120:
        formatted = f"1 hour {_plain(minutes - 60)} minutes"
    else:
        formatted = f"{_plain(hours)} hours"

    return TimeEstimate(estimated_minutes=minutes, estimated_hours=hours, formatted=formatted)


def normalize_timestamp(stamp: datetime) -> datetime:
    """Make a timestamp timezone-aware; naive values are taken as UTC."""
    if stamp.tzinfo is None or stamp.utcoffset() is None:
        return stamp.replace(tzinfo=UTC)
    return stamp


def calculate_average_time_per_question(
    responses: Iterable[AssessmentResponse] | Iterable[datetime],
    default: Decimal = DEFAULT_MINUTES_PER_QUESTION,
) -> Decimal:
    """Mean minutes between consecutive answers (1 dp).

    Only gaps between 30 seconds and 30 minutes count. Falls back to `default`
    when fewer than two timestamps exist or no gap qualifies.
    """
    timestamps: list[datetime] = []
    for item in responses:
        stamp = item if isinstance(item, datetime) else item.responded_at
        if stamp is not None:
            timestamps.append(normalize_timestamp(stamp))
    if len(timestamps) < 2:
        return default

    timestamps.sort()
    gaps: list[Decimal] = []
    for earlier, later in zip(timestamps, timestamps[1:]):
        minutes = Decimal(str((later - earlier).total_seconds())) / Decimal("60")
        if MIN_GAP_MINUTES <= minutes <= MAX_GAP_MINUTES:
            gaps.append(minutes)
    if not gaps:
        return default

    return quantize_half_up(sum(gaps, Decimal("0")) / Decimal(len(gaps)), 1)


def get_progress_status_label(percent_complete: int | float | Decimal, locale: str = "en") -> str:
    """Localized label describing how far along an assessment is."""
    if percent_complete == 0:
        return _NOT_STARTED.get(locale)
    for upper, label in _STATUS_LABELS:
        if percent_complete < upper:
            return label.get(locale)
    return _COMPLETE.get(locale)


def get_progress_color(percent_complete: int | float | Decimal) -> str:
    """Display color for a completion percentage."""
    if percent_complete == 0:
        return "gray"
    for upper, color in _PROGRESS_COLORS:
        if percent_complete < upper:
            return color
    return "green"
