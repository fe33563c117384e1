"""Scoring result models for EI (USOAP CMA) and SMS maturity (CANSO SoE).

All results are frozen value objects; percentages and scores are Decimal,
quantized with ROUND_HALF_UP, and dump to JSON deterministically.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from aviscore.models.taxonomy import (
    AuditArea,
    CriticalElement,
    MaturityLevel,
    SMSComponent,
    StudyArea,
)


class AuditAreaScore(BaseModel):
    """EI and answer counts for one audit area."""

    model_config = ConfigDict(frozen=True)

    ei: Decimal = Field(..., description="EI percentage, 2 dp")
    satisfactory: int = Field(..., ge=0)
    not_satisfactory: int = Field(..., ge=0)
    not_applicable: int = Field(..., ge=0)
    total: int = Field(..., ge=0, description="All responses in the area")


class CriticalElementScore(BaseModel):
    """EI and answer counts for one critical element (no N/A tracking)."""

    model_config = ConfigDict(frozen=True)

    ei: Decimal = Field(..., description="EI percentage, 2 dp")
    satisfactory: int = Field(..., ge=0)
    not_satisfactory: int = Field(..., ge=0)
    total: int = Field(..., ge=0, description="All responses in the element")


class EIScoreResult(BaseModel):
    """USOAP CMA Effective Implementation score with breakdowns."""

    model_config = ConfigDict(frozen=True)

    overall_ei: Decimal = Field(..., description="S / (S + NS) * 100, 2 dp; 0 when no S or NS")
    total_applicable: int = Field(..., ge=0, description="S + NS")
    satisfactory_count: int = Field(..., ge=0)
    not_satisfactory_count: int = Field(..., ge=0)
    not_applicable_count: int = Field(..., ge=0)
    not_reviewed_count: int = Field(..., ge=0, description="NOT_REVIEWED or no answer")
    unclassified_count: int = Field(
        default=0, ge=0, description="Responses with an unrecognised answer value"
    )
    audit_area_scores: dict[AuditArea, AuditAreaScore] = Field(default_factory=dict)
    critical_element_scores: dict[CriticalElement, CriticalElementScore] = Field(
        default_factory=dict
    )
    priority_pq_score: Decimal | None = Field(
        default=None, description="EI over priority PQs; None when there are none"
    )
    formula_hash: str = Field(..., description="Hash of the EI formula version used")


class ComponentMaturity(BaseModel):
    """Maturity of one SMS component."""

    model_config = ConfigDict(frozen=True)

    level: MaturityLevel | None = Field(..., description="None when nothing was answered")
    score: Decimal = Field(..., description="Mean numeric maturity, 2 dp")
    weight: Decimal = Field(..., description="Fixed component weight")
    weighted_score: Decimal = Field(..., description="Mean * weight, 2 dp")
    question_count: int = Field(..., ge=0)
    answered_count: int = Field(..., ge=0)


class StudyAreaMaturity(BaseModel):
    """Maturity of one CANSO study area (unweighted)."""

    model_config = ConfigDict(frozen=True)

    level: MaturityLevel | None = Field(..., description="None when nothing was answered")
    score: Decimal = Field(..., description="Mean numeric maturity, 2 dp")
    question_count: int = Field(..., ge=0)
    answered_count: int = Field(..., ge=0)


class SMSMaturityResult(BaseModel):
    """CANSO SoE SMS maturity with component and study-area breakdowns."""

    model_config = ConfigDict(frozen=True)

    overall_level: MaturityLevel | None = Field(
        ..., description="Lowest level among answered components"
    )
    overall_score: Decimal = Field(..., description="Weighted mean renormalised, 2 dp")
    overall_percentage: int = Field(..., ge=0, le=100, description="overall_score / 5 * 100")
    component_levels: dict[SMSComponent, ComponentMaturity] = Field(default_factory=dict)
    study_area_levels: dict[StudyArea, StudyAreaMaturity] = Field(default_factory=dict)
    maturity_distribution: dict[str, int] = Field(
        default_factory=dict, description="Counts per level A-E plus 'null' for unanswered"
    )
    gap_areas: list[SMSComponent] = Field(
        default_factory=list, description="Components at level A or B"
    )
    formula_hash: str = Field(..., description="Hash of the weighted maturity formula used")
