"""USOAP CMA Effective Implementation (EI) score calculator.

EI = Satisfactory / (Satisfactory + Not Satisfactory) * 100

NOT_APPLICABLE and NOT_REVIEWED answers (and responses with no answer) are
excluded from both numerator and denominator. The same formula is applied to the
whole assessment, to each audit area, to each critical element and to the
priority Protocol Questions.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from aviscore.calc.formulas import FormulaRegistry, FormulaType, register_core_formulas
from aviscore.models.response import AssessmentResponse
from aviscore.models.results import AuditAreaScore, CriticalElementScore, EIScoreResult
from aviscore.models.taxonomy import (
    AUDIT_AREA_ORDER,
    CRITICAL_ELEMENT_ORDER,
    AuditArea,
    CriticalElement,
    ResponseValue,
)

logger = logging.getLogger(__name__)


@dataclass
class _EITally:
    """Mutable answer counts for one bucket during the grouping pass."""

    satisfactory: int = 0
    not_satisfactory: int = 0
    not_applicable: int = 0
    not_reviewed: int = 0
    total: int = 0

    def add(self, value: ResponseValue) -> None:
        self.total += 1
        if value is ResponseValue.SATISFACTORY:
            self.satisfactory += 1
        elif value is ResponseValue.NOT_SATISFACTORY:
            self.not_satisfactory += 1
        elif value is ResponseValue.NOT_APPLICABLE:
            self.not_applicable += 1
        else:
            self.not_reviewed += 1


def calculate_simple_ei_score(
    satisfactory: int, not_satisfactory: int, registry: FormulaRegistry | None = None
) -> Decimal:
    """EI percentage from raw counts (2 dp, 0 when both counts are zero)."""
    registry = register_core_formulas(registry)
    return registry.evaluate(
        FormulaType.EI_PERCENTAGE,
        {"satisfactory": satisfactory, "not_satisfactory": not_satisfactory},
    )


class EIScoreCalculator:
    """Computes the EI score of a USOAP CMA assessment.

    Never raises on structurally valid input: an unrecognised answer value is
    logged and excluded from every bucket.
    """

    def __init__(self, registry: FormulaRegistry | None = None) -> None:
        self._registry = register_core_formulas(registry)

    def _ei(self, tally: _EITally) -> Decimal:
        return self._registry.evaluate(
            FormulaType.EI_PERCENTAGE,
            {"satisfactory": tally.satisfactory, "not_satisfactory": tally.not_satisfactory},
        )

    def calculate(self, responses: Iterable[AssessmentResponse]) -> EIScoreResult:
        """Calculate the overall, per-area, per-element and priority EI.

        Args:
            responses: Responses joined to their question classification.

        Returns:
            EIScoreResult with area and element breakdowns in canonical order.
        """
        overall = _EITally()
        priority: _EITally | None = None
        by_area: dict[AuditArea, _EITally] = {}
        by_element: dict[CriticalElement, _EITally] = {}
        unclassified = 0

        for response in responses:
            value = response.classified_value
            if value is None:
                unclassified += 1
                logger.warning(
                    "Excluding response %s with unrecognised value %r",
                    response.response_id or response.question_id,
                    response.response_value,
                )
                continue

            overall.add(value)
            question = response.question
            if question.audit_area is not None:
                by_area.setdefault(question.audit_area, _EITally()).add(value)
            if question.critical_element is not None:
                by_element.setdefault(question.critical_element, _EITally()).add(value)
            if question.is_priority_pq:
                if priority is None:
                    priority = _EITally()
                priority.add(value)

        audit_area_scores = {
            area: AuditAreaScore(
                ei=self._ei(by_area[area]),
                satisfactory=by_area[area].satisfactory,
                not_satisfactory=by_area[area].not_satisfactory,
                not_applicable=by_area[area].not_applicable,
                total=by_area[area].total,
            )
            for area in AUDIT_AREA_ORDER
            if area in by_area
        }
        critical_element_scores = {
            element: CriticalElementScore(
                ei=self._ei(by_element[element]),
                satisfactory=by_element[element].satisfactory,
                not_satisfactory=by_element[element].not_satisfactory,
                total=by_element[element].total,
            )
            for element in CRITICAL_ELEMENT_ORDER
            if element in by_element
        }

        result = EIScoreResult(
            overall_ei=self._ei(overall),
            total_applicable=overall.satisfactory + overall.not_satisfactory,
            satisfactory_count=overall.satisfactory,
            not_satisfactory_count=overall.not_satisfactory,
            not_applicable_count=overall.not_applicable,
            not_reviewed_count=overall.not_reviewed,
            unclassified_count=unclassified,
            audit_area_scores=audit_area_scores,
            critical_element_scores=critical_element_scores,
            priority_pq_score=self._ei(priority) if priority is not None else None,
            formula_hash=self._registry.get_or_raise(FormulaType.EI_PERCENTAGE).formula_hash,
        )
        logger.debug(
            "EI calculated: overall=%s applicable=%d areas=%d elements=%d",
            result.overall_ei,
            result.total_applicable,
            len(audit_area_scores),
            len(critical_element_scores),
        )
        return result
