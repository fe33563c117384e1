"""Response and question-classification input models.

A response is joined to the classification of its question by the caller before
it reaches the engine. Classification codes are closed enums and are rejected on
construction; response values stay raw strings so an unexpected value degrades
into "unclassified" at scoring time instead of failing the whole assessment.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from aviscore.models.taxonomy import (
    AuditArea,
    CriticalElement,
    MaturityLevel,
    ResponseValue,
    SMSComponent,
    StudyArea,
)


class QuestionClassification(BaseModel):
    """Immutable classification of a question from the external catalog."""

    model_config = ConfigDict(frozen=True)

    audit_area: AuditArea | None = Field(default=None, description="USOAP audit area")
    critical_element: CriticalElement | None = Field(
        default=None, description="USOAP critical element"
    )
    sms_component: SMSComponent | None = Field(default=None, description="CANSO SoE component")
    study_area: StudyArea | None = Field(default=None, description="CANSO SoE study area")
    is_priority_pq: bool = Field(default=False, description="Priority Protocol Question flag")
    weight: Decimal = Field(default=Decimal("1"), gt=0, description="Question weight")


class AssessmentResponse(BaseModel):
    """One response to one question, joined to the question's classification."""

    model_config = ConfigDict(frozen=True)

    response_id: str | None = Field(default=None, description="Response identifier")
    assessment_id: str | None = Field(default=None, description="Owning assessment")
    question_id: str | None = Field(default=None, description="Answered question")
    response_value: str | None = Field(
        default=None, description="USOAP answer (SATISFACTORY, NOT_SATISFACTORY, ...)"
    )
    maturity_level: str | None = Field(default=None, description="CANSO SoE level A-E")
    evidence_description: str | None = Field(default=None, description="Free-text evidence")
    evidence_urls: tuple[str, ...] = Field(default=(), description="Evidence locations")
    is_complete: bool = Field(default=False, description="Marked complete by the respondent")
    responded_at: datetime | None = Field(default=None, description="Last answer timestamp")
    question: QuestionClassification = Field(
        default_factory=QuestionClassification, description="Question classification"
    )

    @property
    def classified_value(self) -> ResponseValue | None:
        """USOAP answer as a known code.

        An absent value is treated as NOT_REVIEWED; an unknown string yields None.
        """
        if self.response_value is None:
            return ResponseValue.NOT_REVIEWED
        try:
            return ResponseValue(self.response_value)
        except ValueError:
            return None

    @property
    def classified_level(self) -> MaturityLevel | None:
        """Maturity level as a known code, or None when absent or unknown."""
        if self.maturity_level is None:
            return None
        try:
            return MaturityLevel(self.maturity_level)
        except ValueError:
            return None

    @property
    def has_evidence(self) -> bool:
        """True when complete, described, or backed by at least one URL."""
        if self.is_complete:
            return True
        if self.evidence_description and self.evidence_description.strip():
            return True
        return len(self.evidence_urls) > 0
