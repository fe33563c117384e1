"""Assessment status workflow table.

The persistence layer owns status changes; the engine only consults this table
(e.g. to refuse submission from a status that cannot move to SUBMITTED).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from aviscore.models.taxonomy import BilingualLabel


class AssessmentStatus(StrEnum):
    """Lifecycle status of an assessment."""

    DRAFT = "DRAFT"
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"


@dataclass(frozen=True)
class AssessmentStatusMeta:
    code: AssessmentStatus
    label: BilingualLabel
    sort_order: int
    allowed_transitions: frozenset[AssessmentStatus]


ASSESSMENT_STATUSES: Final[dict[AssessmentStatus, AssessmentStatusMeta]] = {
    AssessmentStatus.DRAFT: AssessmentStatusMeta(
        AssessmentStatus.DRAFT,
        BilingualLabel("Draft", "Brouillon"),
        sort_order=1,
        allowed_transitions=frozenset({AssessmentStatus.IN_PROGRESS, AssessmentStatus.ARCHIVED}),
    ),
    AssessmentStatus.IN_PROGRESS: AssessmentStatusMeta(
        AssessmentStatus.IN_PROGRESS,
        BilingualLabel("In Progress", "En cours"),
        sort_order=2,
        allowed_transitions=frozenset({AssessmentStatus.SUBMITTED, AssessmentStatus.DRAFT}),
    ),
    AssessmentStatus.SUBMITTED: AssessmentStatusMeta(
        AssessmentStatus.SUBMITTED,
        BilingualLabel("Submitted", "Soumis"),
        sort_order=3,
        allowed_transitions=frozenset(
            {AssessmentStatus.UNDER_REVIEW, AssessmentStatus.IN_PROGRESS}
        ),
    ),
    AssessmentStatus.UNDER_REVIEW: AssessmentStatusMeta(
        AssessmentStatus.UNDER_REVIEW,
        BilingualLabel("Under Review", "En cours d'examen"),
        sort_order=4,
        allowed_transitions=frozenset({AssessmentStatus.COMPLETED, AssessmentStatus.SUBMITTED}),
    ),
    AssessmentStatus.COMPLETED: AssessmentStatusMeta(
        AssessmentStatus.COMPLETED,
        BilingualLabel("Completed", "Terminé"),
        sort_order=5,
        allowed_transitions=frozenset({AssessmentStatus.ARCHIVED}),
    ),
    AssessmentStatus.ARCHIVED: AssessmentStatusMeta(
        AssessmentStatus.ARCHIVED,
        BilingualLabel("Archived", "Archivé"),
        sort_order=6,
        allowed_transitions=frozenset(),
    ),
}


def is_status_transition_allowed(current: str, target: str) -> bool:
    """Return True if the workflow permits moving from `current` to `target`.

    Unknown status codes are never allowed to transition.
    """
    try:
        current_status = AssessmentStatus(current)
        target_status = AssessmentStatus(target)
    except ValueError:
        return False
    return target_status in ASSESSMENT_STATUSES[current_status].allowed_transitions
