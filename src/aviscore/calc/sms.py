"""CANSO Standard of Excellence SMS maturity calculator.

Each answered question scores A=1 .. E=5. A component's score is the mean of its
answered questions; the overall score is the weighted mean of the answered
components, renormalised over the weight actually present. The overall level is
the weakest component level (weakest-link rule), not the level of the average.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from aviscore.calc.constants import (
    GAP_LEVELS,
    MATURITY_LEVEL_THRESHOLDS,
    MATURITY_SCORES,
    SMS_COMPONENT_WEIGHTS,
)
from aviscore.calc.formulas import (
    INTERMEDIATE_PRECISION,
    FormulaRegistry,
    FormulaType,
    quantize_half_up,
    register_core_formulas,
)
from aviscore.models.response import AssessmentResponse
from aviscore.models.results import ComponentMaturity, SMSMaturityResult, StudyAreaMaturity
from aviscore.models.taxonomy import (
    MATURITY_LEVEL_ORDER,
    SMS_COMPONENT_ORDER,
    STUDY_AREA_ORDER,
    MaturityLevel,
    SMSComponent,
    StudyArea,
)

logger = logging.getLogger(__name__)

UNANSWERED_KEY = "null"


def maturity_level_to_score(level: MaturityLevel | str) -> int:
    """Numeric value of a maturity level (A=1 .. E=5)."""
    return MATURITY_SCORES[MaturityLevel(level)]


def maturity_level_from_score(score: Decimal | int | float) -> MaturityLevel:
    """Level for an average score: >=4.5 E, >=3.5 D, >=2.5 C, >=1.5 B, else A."""
    value = Decimal(str(score))
    for cutoff, level in MATURITY_LEVEL_THRESHOLDS:
        if value >= cutoff:
            return level
    return MaturityLevel.A


def lowest_maturity_level(levels: Iterable[MaturityLevel | None]) -> MaturityLevel | None:
    """Weakest level present, scanning A to E. None when no level is present."""
    present = {level for level in levels if level is not None}
    for level in MATURITY_LEVEL_ORDER:
        if level in present:
            return level
    return None


def calculate_weighted_sms_score(
    component_scores: Mapping[SMSComponent | str, Decimal | int | float],
    registry: FormulaRegistry | None = None,
) -> Decimal:
    """Weighted mean of component scores over the components supplied (2 dp).

    Missing components contribute neither score nor weight; an empty mapping
    yields 0.
    """
    registry = register_core_formulas(registry)
    weighted_sum = Decimal("0")
    weight_total = Decimal("0")
    for component, score in component_scores.items():
        weight = SMS_COMPONENT_WEIGHTS[SMSComponent(component)]
        weighted_sum += Decimal(str(score)) * weight
        weight_total += weight
    return registry.evaluate(
        FormulaType.WEIGHTED_MATURITY,
        {"weighted_sum": weighted_sum, "weight_total": weight_total},
    )


class SMSMaturityCalculator:
    """Computes the SMS maturity of a CANSO SoE assessment.

    Components or study areas without any answered question get no level, keep
    no weight in the roll-up and are never reported as gaps.
    """

    def __init__(self, registry: FormulaRegistry | None = None) -> None:
        self._registry = register_core_formulas(registry)

    def _average(self, scores: list[int]) -> Decimal:
        return self._registry.evaluate(
            FormulaType.AVERAGE_MATURITY,
            {"score_sum": sum(scores), "count": len(scores)},
            precision=INTERMEDIATE_PRECISION,
        )

    def calculate(self, responses: Iterable[AssessmentResponse]) -> SMSMaturityResult:
        """Calculate component, study-area and overall maturity.

        Args:
            responses: Responses joined to their question classification.

        Returns:
            SMSMaturityResult with breakdowns in canonical order.
        """
        distribution: dict[str, int] = {level.value: 0 for level in MATURITY_LEVEL_ORDER}
        distribution[UNANSWERED_KEY] = 0
        component_counts: dict[SMSComponent, int] = {}
        component_scores: dict[SMSComponent, list[int]] = {}
        study_area_counts: dict[StudyArea, int] = {}
        study_area_scores: dict[StudyArea, list[int]] = {}

        for response in responses:
            level = response.classified_level
            if level is None:
                if response.maturity_level is not None:
                    logger.warning(
                        "Treating response %s with unrecognised maturity level %r as unanswered",
                        response.response_id or response.question_id,
                        response.maturity_level,
                    )
                distribution[UNANSWERED_KEY] += 1
            else:
                distribution[level.value] += 1

            question = response.question
            if question.sms_component is not None:
                component = question.sms_component
                component_counts[component] = component_counts.get(component, 0) + 1
                scores = component_scores.setdefault(component, [])
                if level is not None:
                    scores.append(MATURITY_SCORES[level])
            if question.study_area is not None:
                area = question.study_area
                study_area_counts[area] = study_area_counts.get(area, 0) + 1
                scores = study_area_scores.setdefault(area, [])
                if level is not None:
                    scores.append(MATURITY_SCORES[level])

        component_levels: dict[SMSComponent, ComponentMaturity] = {}
        for component in SMS_COMPONENT_ORDER:
            if component not in component_counts:
                continue
            scores = component_scores[component]
            average = self._average(scores)
            weight = SMS_COMPONENT_WEIGHTS[component]
            component_levels[component] = ComponentMaturity(
                level=maturity_level_from_score(average) if scores else None,
                score=quantize_half_up(average, 2),
                weight=weight,
                weighted_score=quantize_half_up(average * weight, 2),
                question_count=component_counts[component],
                answered_count=len(scores),
            )

        study_area_levels: dict[StudyArea, StudyAreaMaturity] = {}
        for area in STUDY_AREA_ORDER:
            if area not in study_area_counts:
                continue
            scores = study_area_scores[area]
            average = self._average(scores)
            study_area_levels[area] = StudyAreaMaturity(
                level=maturity_level_from_score(average) if scores else None,
                score=quantize_half_up(average, 2),
                question_count=study_area_counts[area],
                answered_count=len(scores),
            )

        answered = [c for c in component_levels.values() if c.answered_count > 0]
        weighted_sum = sum((c.weighted_score for c in answered), Decimal("0"))
        weight_total = sum((c.weight for c in answered), Decimal("0"))
        overall_score = self._registry.evaluate(
            FormulaType.WEIGHTED_MATURITY,
            {"weighted_sum": weighted_sum, "weight_total": weight_total},
        )
        overall_percentage = int(
            self._registry.evaluate(FormulaType.MATURITY_PERCENTAGE, {"score": overall_score})
        )

        result = SMSMaturityResult(
            overall_level=lowest_maturity_level(c.level for c in answered),
            overall_score=overall_score,
            overall_percentage=overall_percentage,
            component_levels=component_levels,
            study_area_levels=study_area_levels,
            maturity_distribution=distribution,
            gap_areas=[
                component
                for component, maturity in component_levels.items()
                if maturity.level in GAP_LEVELS
            ],
            formula_hash=self._registry.get_or_raise(FormulaType.WEIGHTED_MATURITY).formula_hash,
        )
        logger.debug(
            "SMS maturity calculated: level=%s score=%s components=%d gaps=%d",
            result.overall_level,
            result.overall_score,
            len(component_levels),
            len(result.gap_areas),
        )
        return result
