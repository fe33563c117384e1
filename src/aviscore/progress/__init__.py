"""Assessment progress tracking, time estimates and progress labels."""

from aviscore.progress.estimates import (
    TimeEstimate,
    calculate_average_time_per_question,
    estimate_remaining_time,
    get_progress_color,
    get_progress_status_label,
    normalize_timestamp,
)
from aviscore.progress.tracker import ProgressTracker, is_answered

__all__ = [
    "ProgressTracker",
    "TimeEstimate",
    "calculate_average_time_per_question",
    "estimate_remaining_time",
    "get_progress_color",
    "get_progress_status_label",
    "is_answered",
    "normalize_timestamp",
]
