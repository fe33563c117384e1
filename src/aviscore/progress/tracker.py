"""Assessment completion tracking.

Progress answers "how much of the questionnaire has been worked through", which
is not the same question scoring answers: NOT_APPLICABLE counts as answered here
even though it is excluded from every score.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from aviscore.calc.constants import MATURITY_SCORES
from aviscore.calc.formulas import (
    INTERMEDIATE_PRECISION,
    FormulaRegistry,
    FormulaType,
    register_core_formulas,
)
from aviscore.calc.sms import maturity_level_from_score
from aviscore.models.progress import AssessmentProgress, CategoryProgress, ElementProgress
from aviscore.models.response import AssessmentResponse
from aviscore.models.taxonomy import (
    AUDIT_AREAS,
    MATURITY_LEVEL_ORDER,
    SMS_COMPONENT_ORDER,
    SMS_COMPONENTS,
    QuestionnaireType,
    ResponseValue,
)
from aviscore.progress.estimates import (
    DEFAULT_MINUTES_PER_QUESTION,
    calculate_average_time_per_question,
    estimate_remaining_time,
    normalize_timestamp,
)

logger = logging.getLogger(__name__)


@dataclass
class _GroupTally:
    """Mutable counts for one category during the grouping pass."""

    total: int = 0
    answered: int = 0
    completed: int = 0
    satisfactory: int = 0
    not_satisfactory: int = 0
    not_applicable: int = 0
    maturity_scores: list[int] = field(default_factory=list)
    maturity_distribution: dict[str, int] = field(
        default_factory=lambda: {level.value: 0 for level in MATURITY_LEVEL_ORDER}
    )


def is_answered(response: AssessmentResponse, questionnaire_type: QuestionnaireType) -> bool:
    """True when the response counts toward progress for its methodology.

    USOAP: any known answer except NOT_REVIEWED. SMS: any known maturity level.
    """
    if questionnaire_type == QuestionnaireType.ANS_USOAP_CMA:
        value = response.classified_value
        return value is not None and value is not ResponseValue.NOT_REVIEWED
    return response.classified_level is not None


class ProgressTracker:
    """Computes completion counts overall, per category and per element."""

    def __init__(
        self,
        registry: FormulaRegistry | None = None,
        default_minutes_per_question: Decimal = DEFAULT_MINUTES_PER_QUESTION,
    ) -> None:
        self._registry = register_core_formulas(registry)
        self._default_minutes = default_minutes_per_question

    def _percent(self, part: int, total: int) -> int:
        return int(
            self._registry.evaluate(FormulaType.COMPLETION_RATE, {"part": part, "total": total})
        )

    def calculate(
        self,
        responses: Iterable[AssessmentResponse],
        total_questions: int,
        questionnaire_type: QuestionnaireType | str,
    ) -> AssessmentProgress:
        """Calculate the progress of one assessment.

        Args:
            responses: Responses joined to their question classification.
            total_questions: Number of questions in the questionnaire.
            questionnaire_type: Methodology the responses were given against.

        Returns:
            AssessmentProgress with category and element breakdowns.
        """
        questionnaire_type = QuestionnaireType(questionnaire_type)
        is_usoap = questionnaire_type == QuestionnaireType.ANS_USOAP_CMA
        responses = list(responses)

        answered = 0
        completed = 0
        skipped = 0
        groups: dict[str, _GroupTally] = {}

        for response in responses:
            question = response.question
            if is_usoap:
                group_code = question.audit_area.value if question.audit_area else None
            else:
                group_code = question.sms_component.value if question.sms_component else None
            tally = groups.setdefault(group_code, _GroupTally()) if group_code else None
            if tally is not None:
                tally.total += 1

            if not is_answered(response, questionnaire_type):
                continue

            answered += 1
            evidenced = response.has_evidence
            if evidenced:
                completed += 1
            value = response.classified_value if is_usoap else None
            if value is ResponseValue.NOT_APPLICABLE:
                skipped += 1

            if tally is None:
                continue
            tally.answered += 1
            if evidenced:
                tally.completed += 1
            if is_usoap:
                if value is ResponseValue.SATISFACTORY:
                    tally.satisfactory += 1
                elif value is ResponseValue.NOT_SATISFACTORY:
                    tally.not_satisfactory += 1
                elif value is ResponseValue.NOT_APPLICABLE:
                    tally.not_applicable += 1
            else:
                level = response.classified_level
                tally.maturity_distribution[level.value] += 1
                tally.maturity_scores.append(MATURITY_SCORES[level])

        category_progress = [
            CategoryProgress(
                code=code,
                name=self._category_name(code, is_usoap),
                total=tally.total,
                answered=tally.answered,
                completed=tally.completed,
                percent_complete=self._percent(tally.completed, tally.total),
            )
            for code, tally in sorted(groups.items())
        ]
        if is_usoap:
            element_progress = [
                self._usoap_element(code, tally) for code, tally in sorted(groups.items())
            ]
        else:
            element_progress = [
                self._sms_element(component.value, groups[component.value])
                for component in SMS_COMPONENT_ORDER
                if component.value in groups
            ]

        timestamps = [
            normalize_timestamp(r.responded_at) for r in responses if r.responded_at is not None
        ]
        average_minutes = calculate_average_time_per_question(
            timestamps, default=self._default_minutes
        )
        remaining = estimate_remaining_time(total_questions - answered, average_minutes)

        progress = AssessmentProgress(
            assessment_id=next((r.assessment_id for r in responses if r.assessment_id), None),
            total_questions=total_questions,
            answered_questions=answered,
            completed_questions=completed,
            skipped_questions=skipped,
            percent_complete=self._percent(completed, total_questions),
            percent_answered=self._percent(answered, total_questions),
            category_progress=category_progress,
            element_progress=element_progress,
            last_activity_at=max(timestamps) if timestamps else None,
            average_time_per_question=average_minutes,
            estimated_time_remaining=remaining.estimated_minutes,
        )
        logger.debug(
            "Progress calculated: type=%s answered=%d/%d completed=%d",
            questionnaire_type.value,
            answered,
            total_questions,
            completed,
        )
        return progress

    @staticmethod
    def _category_name(code: str, is_usoap: bool) -> str:
        if is_usoap:
            return AUDIT_AREAS[code].name.en
        return SMS_COMPONENTS[code].name.en

    def _usoap_element(self, code: str, tally: _GroupTally) -> ElementProgress:
        return ElementProgress(
            code=code,
            name=self._category_name(code, True),
            total=tally.total,
            answered=tally.answered,
            completed=tally.completed,
            satisfactory=tally.satisfactory,
            not_satisfactory=tally.not_satisfactory,
            not_applicable=tally.not_applicable,
            ei_score=self._registry.evaluate(
                FormulaType.EI_PERCENTAGE,
                {"satisfactory": tally.satisfactory, "not_satisfactory": tally.not_satisfactory},
            ),
        )

    def _sms_element(self, code: str, tally: _GroupTally) -> ElementProgress:
        scores = tally.maturity_scores
        average = self._registry.evaluate(
            FormulaType.AVERAGE_MATURITY,
            {"score_sum": sum(scores), "count": len(scores)},
        )
        exact_average = self._registry.evaluate(
            FormulaType.AVERAGE_MATURITY,
            {"score_sum": sum(scores), "count": len(scores)},
            precision=INTERMEDIATE_PRECISION,
        )
        return ElementProgress(
            code=code,
            name=self._category_name(code, False),
            total=tally.total,
            answered=tally.answered,
            completed=tally.completed,
            maturity_distribution=dict(tally.maturity_distribution),
            average_maturity=average,
            maturity_level=maturity_level_from_score(exact_average) if scores else None,
        )
