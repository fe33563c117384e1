"""Synthetic deterministic response fixtures for scoring and progress testing.

Provides builders for:
- USOAP CMA responses classified by audit area and critical element
- CANSO SoE responses classified by SMS component and study area
- Bulk response sets with exact answer counts

All timestamps derive from one fixed base instant for determinism.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from itertools import cycle, islice

from aviscore.models.response import AssessmentResponse, QuestionClassification
from aviscore.models.taxonomy import (
    AUDIT_AREA_ORDER,
    CRITICAL_ELEMENT_ORDER,
    AuditArea,
    CriticalElement,
    ResponseValue,
    SMSComponent,
    StudyArea,
)

SYNTHETIC_ASSESSMENT_ID = "asmt0001-0000-0000-0000-000000000001"
SYNTHETIC_BASE_TIME = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)

FIRST_STUDY_AREA: dict[SMSComponent, StudyArea] = {
    SMSComponent.SAFETY_POLICY_OBJECTIVES: StudyArea.SA_1_1,
    SMSComponent.SAFETY_RISK_MANAGEMENT: StudyArea.SA_2_1,
    SMSComponent.SAFETY_ASSURANCE: StudyArea.SA_3_1,
    SMSComponent.SAFETY_PROMOTION: StudyArea.SA_4_1,
}


def make_usoap_response(
    value: str | None,
    audit_area: AuditArea | None = AuditArea.LEG,
    critical_element: CriticalElement | None = CriticalElement.CE_1,
    *,
    is_priority_pq: bool = False,
    evidence: bool = False,
    responded_at: datetime | None = None,
    question_id: str | None = None,
) -> AssessmentResponse:
    """Build one USOAP CMA response."""
    return AssessmentResponse(
        assessment_id=SYNTHETIC_ASSESSMENT_ID,
        question_id=question_id,
        response_value=value,
        evidence_description="Regulation on file" if evidence else None,
        responded_at=responded_at,
        question=QuestionClassification(
            audit_area=audit_area,
            critical_element=critical_element,
            is_priority_pq=is_priority_pq,
        ),
    )


def make_sms_response(
    level: str | None,
    component: SMSComponent | None = SMSComponent.SAFETY_POLICY_OBJECTIVES,
    study_area: StudyArea | None = None,
    *,
    evidence: bool = False,
    responded_at: datetime | None = None,
    question_id: str | None = None,
) -> AssessmentResponse:
    """Build one CANSO SoE response; the study area defaults to the component's first."""
    if study_area is None and component is not None:
        study_area = FIRST_STUDY_AREA[component]
    return AssessmentResponse(
        assessment_id=SYNTHETIC_ASSESSMENT_ID,
        question_id=question_id,
        maturity_level=level,
        evidence_urls=("https://evidence.example/sms.pdf",) if evidence else (),
        responded_at=responded_at,
        question=QuestionClassification(sms_component=component, study_area=study_area),
    )


def make_usoap_set(
    satisfactory: int,
    not_satisfactory: int,
    not_applicable: int = 0,
    not_reviewed: int = 0,
    *,
    evidence_count: int | None = None,
) -> list[AssessmentResponse]:
    """Build a USOAP response set with exact answer counts.

    Responses rotate through the audit areas and critical elements; the first
    `evidence_count` responses carry evidence (all of them when None).
    """
    values = (
        [ResponseValue.SATISFACTORY.value] * satisfactory
        + [ResponseValue.NOT_SATISFACTORY.value] * not_satisfactory
        + [ResponseValue.NOT_APPLICABLE.value] * not_applicable
        + [ResponseValue.NOT_REVIEWED.value] * not_reviewed
    )
    if evidence_count is None:
        evidence_count = len(values)
    areas = islice(cycle(AUDIT_AREA_ORDER), len(values))
    elements = islice(cycle(CRITICAL_ELEMENT_ORDER), len(values))
    return [
        make_usoap_response(
            value,
            area,
            element,
            evidence=index < evidence_count,
            question_id=f"PQ-{index + 1:04d}",
        )
        for index, (value, area, element) in enumerate(zip(values, areas, elements))
    ]


def minutes_after_base(minutes: float) -> datetime:
    """Timestamp `minutes` after the fixed base instant."""
    return SYNTHETIC_BASE_TIME + timedelta(minutes=minutes)
