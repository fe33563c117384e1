"""aviscore domain models.

Classification taxonomies, the status workflow table, response inputs and the
frozen result objects returned by the calculators, tracker and validator.
"""

from aviscore.models.progress import (
    AssessmentProgress,
    CategoryProgress,
    ElementProgress,
    SubmissionValidationResult,
)
from aviscore.models.response import AssessmentResponse, QuestionClassification
from aviscore.models.results import (
    AuditAreaScore,
    ComponentMaturity,
    CriticalElementScore,
    EIScoreResult,
    SMSMaturityResult,
    StudyAreaMaturity,
)
from aviscore.models.status import (
    ASSESSMENT_STATUSES,
    AssessmentStatus,
    is_status_transition_allowed,
)
from aviscore.models.taxonomy import (
    AuditArea,
    BilingualLabel,
    CriticalElement,
    MaturityLevel,
    QuestionnaireType,
    ResponseValue,
    ScoringConfigError,
    SMSComponent,
    StudyArea,
)

__all__ = [
    "ASSESSMENT_STATUSES",
    "AssessmentProgress",
    "AssessmentResponse",
    "AssessmentStatus",
    "AuditArea",
    "AuditAreaScore",
    "BilingualLabel",
    "CategoryProgress",
    "ComponentMaturity",
    "CriticalElement",
    "CriticalElementScore",
    "EIScoreResult",
    "ElementProgress",
    "MaturityLevel",
    "QuestionClassification",
    "QuestionnaireType",
    "ResponseValue",
    "SMSComponent",
    "SMSMaturityResult",
    "ScoringConfigError",
    "StudyArea",
    "StudyAreaMaturity",
    "SubmissionValidationResult",
    "is_status_transition_allowed",
]
