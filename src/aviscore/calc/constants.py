"""Scoring constants: SMS weights, maturity thresholds, EI bands, submission floors.

Constants are code, never configuration. The weight table and the threshold
ordering are verified at import; a drifted table raises ScoringConfigError.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Final

from aviscore.models.taxonomy import (
    MATURITY_LEVELS,
    BilingualLabel,
    MaturityLevel,
    QuestionnaireType,
    ScoringConfigError,
    SMSComponent,
)

SMS_COMPONENT_WEIGHTS: Final[dict[SMSComponent, Decimal]] = {
    SMSComponent.SAFETY_POLICY_OBJECTIVES: Decimal("0.25"),
    SMSComponent.SAFETY_RISK_MANAGEMENT: Decimal("0.30"),
    SMSComponent.SAFETY_ASSURANCE: Decimal("0.25"),
    SMSComponent.SAFETY_PROMOTION: Decimal("0.20"),
}

MATURITY_SCORES: Final[dict[MaturityLevel, int]] = {
    level: meta.score_value for level, meta in MATURITY_LEVELS.items()
}

# Minimum average score for each level, checked highest first; anything lower is A.
MATURITY_LEVEL_THRESHOLDS: Final[tuple[tuple[Decimal, MaturityLevel], ...]] = (
    (Decimal("4.5"), MaturityLevel.E),
    (Decimal("3.5"), MaturityLevel.D),
    (Decimal("2.5"), MaturityLevel.C),
    (Decimal("1.5"), MaturityLevel.B),
)

GAP_LEVELS: Final[frozenset[MaturityLevel]] = frozenset({MaturityLevel.A, MaturityLevel.B})


class EIScoreCategory(StrEnum):
    """Qualitative band for an EI percentage."""

    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    SATISFACTORY = "SATISFACTORY"
    NEEDS_IMPROVEMENT = "NEEDS_IMPROVEMENT"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class EIScoreBand:
    category: EIScoreCategory
    min_ei: Decimal
    label: BilingualLabel


EI_SCORE_BANDS: Final[tuple[EIScoreBand, ...]] = (
    EIScoreBand(EIScoreCategory.EXCELLENT, Decimal("90"), BilingualLabel("Excellent", "Excellent")),
    EIScoreBand(EIScoreCategory.GOOD, Decimal("75"), BilingualLabel("Good", "Bon")),
    EIScoreBand(
        EIScoreCategory.SATISFACTORY, Decimal("60"), BilingualLabel("Satisfactory", "Satisfaisant")
    ),
    EIScoreBand(
        EIScoreCategory.NEEDS_IMPROVEMENT,
        Decimal("40"),
        BilingualLabel("Needs Improvement", "À améliorer"),
    ),
    EIScoreBand(EIScoreCategory.CRITICAL, Decimal("0"), BilingualLabel("Critical", "Critique")),
)


@dataclass(frozen=True)
class SubmissionRequirements:
    """Methodology-specific gates applied before an assessment may be submitted."""

    min_evidence_percent: Decimal
    min_answered_percent: Decimal = Decimal("100")
    max_not_reviewed: int = 0


SUBMISSION_REQUIREMENTS: Final[dict[QuestionnaireType, SubmissionRequirements]] = {
    QuestionnaireType.ANS_USOAP_CMA: SubmissionRequirements(min_evidence_percent=Decimal("80")),
    QuestionnaireType.SMS_CANSO_SOE: SubmissionRequirements(min_evidence_percent=Decimal("75")),
}


def ei_score_category(ei: Decimal | int | float) -> EIScoreCategory:
    """Map an EI percentage to its qualitative band."""
    value = Decimal(str(ei))
    for band in EI_SCORE_BANDS:
        if value >= band.min_ei:
            return band.category
    return EIScoreCategory.CRITICAL


def ei_score_label(ei: Decimal | int | float, locale: str = "en") -> str:
    """Localized label of the band an EI percentage falls in."""
    category = ei_score_category(ei)
    band = next(b for b in EI_SCORE_BANDS if b.category == category)
    return band.label.get(locale)


def verify_scoring_constants() -> list[str]:
    """Verify weights, thresholds and bands.

    Returns:
        List of problems found (empty when consistent).
    """
    problems: list[str] = []

    missing = sorted(c.value for c in SMSComponent if c not in SMS_COMPONENT_WEIGHTS)
    if missing:
        problems.append(f"SMS_COMPONENT_WEIGHTS missing components: {missing}")
    weight_sum = sum(SMS_COMPONENT_WEIGHTS.values(), Decimal("0"))
    if weight_sum != Decimal("1"):
        problems.append(f"SMS_COMPONENT_WEIGHTS must sum to 1.0 (got {weight_sum})")
    if any(w <= 0 for w in SMS_COMPONENT_WEIGHTS.values()):
        problems.append("SMS_COMPONENT_WEIGHTS must be positive")

    cutoffs = [cutoff for cutoff, _ in MATURITY_LEVEL_THRESHOLDS]
    if cutoffs != sorted(cutoffs, reverse=True) or len(set(cutoffs)) != len(cutoffs):
        problems.append("MATURITY_LEVEL_THRESHOLDS must be strictly descending")

    minimums = [band.min_ei for band in EI_SCORE_BANDS]
    if minimums != sorted(minimums, reverse=True) or minimums[-1] != Decimal("0"):
        problems.append("EI_SCORE_BANDS must descend and end at 0")

    for qtype, requirements in SUBMISSION_REQUIREMENTS.items():
        if not Decimal("0") < requirements.min_answered_percent <= Decimal("100"):
            problems.append(f"SUBMISSION_REQUIREMENTS {qtype} min_answered_percent out of range")

    missing_types = sorted(q.value for q in QuestionnaireType if q not in SUBMISSION_REQUIREMENTS)
    if missing_types:
        problems.append(f"SUBMISSION_REQUIREMENTS missing questionnaire types: {missing_types}")

    return problems


_problems = verify_scoring_constants()
if _problems:
    raise ScoringConfigError(f"Scoring constants are inconsistent: {_problems}")
