"""Per-category headline scores on a common 0-100 scale.

USOAP categories are audit areas scored by EI; SMS categories are components
scored as average maturity over the top level (E=5). Both are 2 dp.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from aviscore.calc.constants import MATURITY_SCORES
from aviscore.calc.formulas import (
    INTERMEDIATE_PRECISION,
    FormulaRegistry,
    FormulaType,
    register_core_formulas,
)
from aviscore.models.response import AssessmentResponse
from aviscore.models.taxonomy import QuestionnaireType, ResponseValue


def calculate_category_scores(
    responses: Iterable[AssessmentResponse],
    questionnaire_type: QuestionnaireType | str,
    registry: FormulaRegistry | None = None,
) -> dict[str, Decimal]:
    """Score each category present in the responses.

    Args:
        responses: Responses joined to their question classification.
        questionnaire_type: Selects audit areas (USOAP) or SMS components.
        registry: Optional formula registry; defaults to the singleton.

    Returns:
        Mapping of category code to score, sorted by code.
    """
    registry = register_core_formulas(registry)
    is_usoap = QuestionnaireType(questionnaire_type) == QuestionnaireType.ANS_USOAP_CMA

    satisfactory: dict[str, int] = {}
    not_satisfactory: dict[str, int] = {}
    maturity: dict[str, list[int]] = {}

    for response in responses:
        question = response.question
        if is_usoap:
            if question.audit_area is None:
                continue
            code = question.audit_area.value
            satisfactory.setdefault(code, 0)
            not_satisfactory.setdefault(code, 0)
            value = response.classified_value
            if value is ResponseValue.SATISFACTORY:
                satisfactory[code] += 1
            elif value is ResponseValue.NOT_SATISFACTORY:
                not_satisfactory[code] += 1
        else:
            if question.sms_component is None:
                continue
            scores = maturity.setdefault(question.sms_component.value, [])
            level = response.classified_level
            if level is not None:
                scores.append(MATURITY_SCORES[level])

    if is_usoap:
        return {
            code: registry.evaluate(
                FormulaType.EI_PERCENTAGE,
                {"satisfactory": satisfactory[code], "not_satisfactory": not_satisfactory[code]},
            )
            for code in sorted(satisfactory)
        }

    category_scores: dict[str, Decimal] = {}
    for code in sorted(maturity):
        average = registry.evaluate(
            FormulaType.AVERAGE_MATURITY,
            {"score_sum": sum(maturity[code]), "count": len(maturity[code])},
            precision=INTERMEDIATE_PRECISION,
        )
        category_scores[code] = registry.evaluate(
            FormulaType.MATURITY_PERCENTAGE, {"score": average}, precision=2
        )
    return category_scores
