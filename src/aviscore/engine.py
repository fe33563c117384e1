"""Assessment engine - one call that scores, tracks and gates an assessment.

Runs the calculator matching the questionnaire type, the progress tracker and
the submission validator over the same responses, and compares the headline
score with a previous assessment when one is given.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from aviscore.calc.categories import calculate_category_scores
from aviscore.calc.comparison import ScoreComparison, ScoreTrend, compare_scores
from aviscore.calc.constants import EIScoreCategory, ei_score_category
from aviscore.calc.ei import EIScoreCalculator
from aviscore.calc.formulas import FormulaRegistry, register_core_formulas
from aviscore.calc.sms import SMSMaturityCalculator
from aviscore.config import EngineConfig, load_engine_config
from aviscore.models.progress import AssessmentProgress, SubmissionValidationResult
from aviscore.models.response import AssessmentResponse
from aviscore.models.results import EIScoreResult, SMSMaturityResult
from aviscore.models.taxonomy import QuestionnaireType
from aviscore.progress.tracker import ProgressTracker
from aviscore.validators.submission import SubmissionValidator

logger = logging.getLogger(__name__)


class AssessmentEvaluation(BaseModel):
    """Everything the engine knows about one assessment."""

    model_config = ConfigDict(frozen=True)

    questionnaire_type: QuestionnaireType
    primary_score: Decimal = Field(
        ..., description="overall_ei (USOAP) or overall_percentage (SMS)"
    )
    ei_category: EIScoreCategory | None = Field(
        default=None, description="Qualitative EI band (USOAP only)"
    )
    ei_score: EIScoreResult | None = None
    sms_maturity: SMSMaturityResult | None = None
    category_scores: dict[str, Decimal] = Field(default_factory=dict)
    progress: AssessmentProgress
    submission: SubmissionValidationResult
    comparison: ScoreComparison | None = None
    trend: ScoreTrend


class AssessmentEngine:
    """Facade over the calculators, the progress tracker and the validator."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        registry: FormulaRegistry | None = None,
    ) -> None:
        self._config = config or load_engine_config()
        self._registry = register_core_formulas(registry)
        self._ei = EIScoreCalculator(registry=self._registry)
        self._sms = SMSMaturityCalculator(registry=self._registry)
        self._tracker = ProgressTracker(
            registry=self._registry,
            default_minutes_per_question=self._config.minutes_per_question,
        )
        self._validator = SubmissionValidator(registry=self._registry, tracker=self._tracker)

    def evaluate(
        self,
        responses: Iterable[AssessmentResponse],
        total_questions: int,
        questionnaire_type: QuestionnaireType | str,
        previous_score: Decimal | int | float | None = None,
        current_status: str | None = None,
    ) -> AssessmentEvaluation:
        """Score, track and gate one assessment.

        Args:
            responses: Responses joined to their question classification.
            total_questions: Number of questions in the questionnaire.
            questionnaire_type: Methodology the responses were given against.
            previous_score: Headline score of the previous assessment, if any.
            current_status: Current workflow status, if known.

        Returns:
            AssessmentEvaluation; trend is NEW when there is no previous score.
        """
        questionnaire_type = QuestionnaireType(questionnaire_type)
        responses = list(responses)

        ei_score: EIScoreResult | None = None
        sms_maturity: SMSMaturityResult | None = None
        ei_category: EIScoreCategory | None = None
        if questionnaire_type == QuestionnaireType.ANS_USOAP_CMA:
            ei_score = self._ei.calculate(responses)
            primary_score = ei_score.overall_ei
            ei_category = ei_score_category(primary_score)
        else:
            sms_maturity = self._sms.calculate(responses)
            primary_score = Decimal(sms_maturity.overall_percentage)

        progress = self._tracker.calculate(responses, total_questions, questionnaire_type)
        submission = self._validator.validate(
            responses,
            total_questions,
            questionnaire_type,
            current_status=current_status,
            progress=progress,
        )

        comparison = None
        trend = ScoreTrend.NEW
        if previous_score is not None:
            comparison = compare_scores(primary_score, previous_score)
            trend = comparison.trend

        evaluation = AssessmentEvaluation(
            questionnaire_type=questionnaire_type,
            primary_score=primary_score,
            ei_category=ei_category,
            ei_score=ei_score,
            sms_maturity=sms_maturity,
            category_scores=calculate_category_scores(
                responses, questionnaire_type, registry=self._registry
            ),
            progress=progress,
            submission=submission,
            comparison=comparison,
            trend=trend,
        )
        logger.info(
            "Assessment evaluated: type=%s score=%s trend=%s can_submit=%s",
            questionnaire_type.value,
            primary_score,
            trend.value,
            submission.can_submit,
        )
        return evaluation
