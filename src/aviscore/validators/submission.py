"""Submission Validator - gates the move of an assessment to SUBMITTED.

Blockers (submission forbidden):
- answered share below the methodology floor (every question by default;
  compared on exact counts, never a rounded percentage)
- any USOAP response still NOT_REVIEWED
- any category with unanswered questions
- a current status that cannot move to SUBMITTED
- a questionnaire with no questions

Warnings never affect can_submit:
- evidence coverage below the methodology floor (80% USOAP, 75% SMS)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from aviscore.calc.constants import SUBMISSION_REQUIREMENTS
from aviscore.calc.formulas import FormulaRegistry, FormulaType, register_core_formulas
from aviscore.models.progress import AssessmentProgress, SubmissionValidationResult
from aviscore.models.response import AssessmentResponse
from aviscore.models.status import AssessmentStatus, is_status_transition_allowed
from aviscore.models.taxonomy import QuestionnaireType, ResponseValue
from aviscore.progress.tracker import ProgressTracker

logger = logging.getLogger(__name__)


class SubmissionValidator:
    """Applies methodology-specific submission gates to an assessment."""

    def __init__(
        self,
        registry: FormulaRegistry | None = None,
        tracker: ProgressTracker | None = None,
    ) -> None:
        self._registry = register_core_formulas(registry)
        self._tracker = tracker or ProgressTracker(registry=self._registry)

    def _display_percent(self, part: int, total: int) -> Decimal:
        return self._registry.evaluate(
            FormulaType.COMPLETION_RATE, {"part": part, "total": total}, precision=1
        )

    def validate(
        self,
        responses: Iterable[AssessmentResponse],
        total_questions: int,
        questionnaire_type: QuestionnaireType | str,
        current_status: str | None = None,
        progress: AssessmentProgress | None = None,
    ) -> SubmissionValidationResult:
        """Decide whether an assessment may be submitted.

        Args:
            responses: Responses joined to their question classification.
            total_questions: Number of questions in the questionnaire.
            questionnaire_type: Methodology the responses were given against.
            current_status: Optional current workflow status.
            progress: Pre-computed progress for the same responses, if available.

        Returns:
            SubmissionValidationResult; can_submit is True iff there are no blockers.
        """
        questionnaire_type = QuestionnaireType(questionnaire_type)
        requirements = SUBMISSION_REQUIREMENTS[questionnaire_type]
        responses = list(responses)
        if progress is None:
            progress = self._tracker.calculate(responses, total_questions, questionnaire_type)

        blockers: list[str] = []
        warnings: list[str] = []

        if current_status is not None and not is_status_transition_allowed(
            current_status, AssessmentStatus.SUBMITTED
        ):
            blockers.append(
                f"Assessment in status {current_status} cannot move to "
                f"{AssessmentStatus.SUBMITTED.value}."
            )

        if total_questions <= 0:
            blockers.append("The questionnaire has no questions to answer.")
            return self._finish(blockers, warnings, questionnaire_type)

        answered = progress.answered_questions
        if Decimal(answered) * 100 < requirements.min_answered_percent * total_questions:
            remaining = total_questions - answered
            blockers.append(
                f"Only {answered} of {total_questions} questions answered "
                f"({self._display_percent(answered, total_questions)}%). "
                f"{remaining} questions still need to be answered."
            )

        if questionnaire_type == QuestionnaireType.ANS_USOAP_CMA:
            not_reviewed = sum(
                1 for r in responses if r.classified_value is ResponseValue.NOT_REVIEWED
            )
            if not_reviewed > requirements.max_not_reviewed:
                blockers.append(
                    f'{not_reviewed} questions are marked as "Not Reviewed". '
                    "All questions must be assessed."
                )

        incomplete = [c.code for c in progress.category_progress if c.answered < c.total]
        if incomplete:
            blockers.append(
                f"{len(incomplete)} categories have unanswered questions: {', '.join(incomplete)}"
            )

        completed = progress.completed_questions
        if Decimal(completed) * 100 < requirements.min_evidence_percent * total_questions:
            warnings.append(
                f"Only {self._display_percent(completed, total_questions)}% of questions have "
                f"supporting evidence. Recommended: at least {requirements.min_evidence_percent}%."
            )

        return self._finish(blockers, warnings, questionnaire_type)

    @staticmethod
    def _finish(
        blockers: list[str], warnings: list[str], questionnaire_type: QuestionnaireType
    ) -> SubmissionValidationResult:
        result = SubmissionValidationResult.from_findings(blockers, warnings)
        logger.debug(
            "Submission validated: type=%s can_submit=%s blockers=%d warnings=%d",
            questionnaire_type.value,
            result.can_submit,
            len(blockers),
            len(warnings),
        )
        return result
