"""Progress and submission-validation result models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from aviscore.models.taxonomy import MaturityLevel


class CategoryProgress(BaseModel):
    """Completion of one category (audit area or SMS component)."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    total: int = Field(..., ge=0)
    answered: int = Field(..., ge=0)
    completed: int = Field(..., ge=0)
    percent_complete: int = Field(..., ge=0, le=100, description="completed / total, whole %")


class ElementProgress(BaseModel):
    """Per-element answer breakdown.

    USOAP elements carry the S/NS/NA counts and an EI; SMS elements carry the
    maturity distribution, average maturity and derived level.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    total: int = Field(..., ge=0)
    answered: int = Field(..., ge=0)
    completed: int = Field(..., ge=0)
    satisfactory: int | None = None
    not_satisfactory: int | None = None
    not_applicable: int | None = None
    ei_score: Decimal | None = None
    maturity_distribution: dict[str, int] | None = None
    average_maturity: Decimal | None = None
    maturity_level: MaturityLevel | None = None


class AssessmentProgress(BaseModel):
    """Completion state of one assessment."""

    model_config = ConfigDict(frozen=True)

    assessment_id: str | None = None
    total_questions: int = Field(..., ge=0)
    answered_questions: int = Field(..., ge=0)
    completed_questions: int = Field(..., ge=0, description="Answered and backed by evidence")
    skipped_questions: int = Field(..., ge=0, description="USOAP NOT_APPLICABLE answers")
    percent_complete: int = Field(..., ge=0)
    percent_answered: int = Field(..., ge=0)
    category_progress: list[CategoryProgress] = Field(default_factory=list)
    element_progress: list[ElementProgress] = Field(default_factory=list)
    last_activity_at: datetime | None = None
    average_time_per_question: Decimal = Field(..., description="Minutes per question")
    estimated_time_remaining: Decimal = Field(..., description="Minutes for remaining questions")


class SubmissionValidationResult(BaseModel):
    """Outcome of the submission gate."""

    model_config = ConfigDict(frozen=True)

    can_submit: bool
    blockers: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_findings(cls, blockers: list[str], warnings: list[str]) -> SubmissionValidationResult:
        """Build a result; submission is allowed iff there are no blockers."""
        return cls(can_submit=not blockers, blockers=blockers, warnings=warnings)
