"""Tests for assessment progress tracking.

Tests verify:
- Answered vs completed (evidence) vs skipped counts
- Progress and scoring diverge on NOT_APPLICABLE
- Category progress sorted by code with catalog names
- Element progress shares the EI formula with the calculator
- SMS element progress in canonical component order
- Last activity and time estimates
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from aviscore.calc.ei import EIScoreCalculator
from aviscore.calc.formulas import FormulaRegistry
from aviscore.models.response import AssessmentResponse, QuestionClassification
from aviscore.models.taxonomy import AuditArea, MaturityLevel, QuestionnaireType, SMSComponent
from aviscore.progress.tracker import ProgressTracker, is_answered
from tests.fixtures.synthetic import (
    SYNTHETIC_ASSESSMENT_ID,
    make_sms_response,
    make_usoap_response,
    make_usoap_set,
    minutes_after_base,
)

USOAP = QuestionnaireType.ANS_USOAP_CMA
SMS = QuestionnaireType.SMS_CANSO_SOE


@pytest.fixture
def tracker(registry: FormulaRegistry) -> ProgressTracker:
    """Create a progress tracker with the test registry."""
    return ProgressTracker(registry=registry)


class TestOverallCounts:
    """Test overall answered/completed/skipped counts."""

    def test_completed_requires_evidence(self, tracker: ProgressTracker) -> None:
        """Only answered responses with evidence are completed."""
        responses = make_usoap_set(3, 1, evidence_count=2)

        progress = tracker.calculate(responses, 4, USOAP)

        assert progress.answered_questions == 4
        assert progress.completed_questions == 2
        assert progress.percent_answered == 100
        assert progress.percent_complete == 50

    def test_not_reviewed_is_not_answered(self, tracker: ProgressTracker) -> None:
        """NOT_REVIEWED and absent answers do not count as answered."""
        responses = make_usoap_set(2, 0, not_reviewed=1) + [make_usoap_response(None)]

        progress = tracker.calculate(responses, 4, USOAP)

        assert progress.answered_questions == 2
        assert progress.percent_answered == 50

    def test_all_not_applicable_diverges_from_score(
        self, tracker: ProgressTracker, registry: FormulaRegistry
    ) -> None:
        """All-N/A is 100% answered while the EI stays 0."""
        responses = make_usoap_set(0, 0, not_applicable=20)

        progress = tracker.calculate(responses, 20, USOAP)
        score = EIScoreCalculator(registry=registry).calculate(responses)

        assert progress.percent_answered == 100
        assert progress.skipped_questions == 20
        assert score.overall_ei == Decimal("0")
        assert score.total_applicable == 0

    def test_zero_total_questions(self, tracker: ProgressTracker) -> None:
        """A zero total gives 0% rather than an error."""
        progress = tracker.calculate([], 0, USOAP)

        assert progress.percent_complete == 0
        assert progress.percent_answered == 0
        assert progress.last_activity_at is None

    def test_percentages_are_whole_numbers(self, tracker: ProgressTracker) -> None:
        """2 of 3 answered rounds half up to 67%."""
        progress = tracker.calculate(make_usoap_set(2, 0), 3, USOAP)

        assert progress.percent_answered == 67

    def test_assessment_id_taken_from_responses(self, tracker: ProgressTracker) -> None:
        """The assessment id comes from the responses."""
        progress = tracker.calculate(make_usoap_set(1, 0), 1, USOAP)

        assert progress.assessment_id == SYNTHETIC_ASSESSMENT_ID

    def test_sms_answered_means_known_level(self, tracker: ProgressTracker) -> None:
        """SMS responses count as answered only with a known maturity level."""
        responses = [
            make_sms_response("B", evidence=True),
            make_sms_response(None, evidence=True),
            make_sms_response("X", evidence=True),
        ]

        progress = tracker.calculate(responses, 3, SMS)

        assert progress.answered_questions == 1
        assert progress.completed_questions == 1
        assert progress.skipped_questions == 0


class TestEvidence:
    """Test the has-evidence rule."""

    def test_is_complete_counts_as_evidence(self) -> None:
        """is_complete alone is evidence."""
        assert AssessmentResponse(response_value="SATISFACTORY", is_complete=True).has_evidence

    def test_blank_description_is_not_evidence(self) -> None:
        """Whitespace-only descriptions are not evidence."""
        response = AssessmentResponse(response_value="SATISFACTORY", evidence_description="   ")

        assert not response.has_evidence

    def test_url_counts_as_evidence(self) -> None:
        """A single evidence URL is evidence."""
        response = AssessmentResponse(maturity_level="C", evidence_urls=("s3://bucket/doc",))

        assert response.has_evidence


class TestCategoryAndElementProgress:
    """Test category and element breakdowns."""

    def test_usoap_categories_sorted_by_code(self, tracker: ProgressTracker) -> None:
        """Category progress lists audit areas alphabetically with catalog names."""
        responses = [
            make_usoap_response("SATISFACTORY", AuditArea.SSP, evidence=True),
            make_usoap_response("SATISFACTORY", AuditArea.LEG, evidence=True),
            make_usoap_response("NOT_REVIEWED", AuditArea.LEG),
            make_usoap_response("NOT_SATISFACTORY", AuditArea.AGA),
        ]

        progress = tracker.calculate(responses, 4, USOAP)
        categories = {c.code: c for c in progress.category_progress}

        assert [c.code for c in progress.category_progress] == ["AGA", "LEG", "SSP"]
        assert categories["LEG"].name == "Primary Aviation Legislation"
        assert categories["LEG"].total == 2
        assert categories["LEG"].answered == 1
        assert categories["LEG"].percent_complete == 50
        assert categories["AGA"].completed == 0

    def test_element_ei_matches_calculator(
        self, tracker: ProgressTracker, registry: FormulaRegistry
    ) -> None:
        """Per-area EI in progress equals the calculator's area EI."""
        responses = [
            make_usoap_response("SATISFACTORY", AuditArea.OPS),
            make_usoap_response("SATISFACTORY", AuditArea.OPS),
            make_usoap_response("NOT_SATISFACTORY", AuditArea.OPS),
            make_usoap_response("NOT_APPLICABLE", AuditArea.OPS),
        ]

        element = tracker.calculate(responses, 4, USOAP).element_progress[0]
        score = EIScoreCalculator(registry=registry).calculate(responses)

        assert element.code == "OPS"
        assert element.ei_score == Decimal("66.67")
        assert element.ei_score == score.audit_area_scores[AuditArea.OPS].ei
        assert element.satisfactory == 2
        assert element.not_satisfactory == 1
        assert element.not_applicable == 1
        assert element.maturity_distribution is None

    def test_sms_categories_alphabetical_elements_canonical(
        self, tracker: ProgressTracker
    ) -> None:
        """SMS categories sort by code; elements follow component order."""
        responses = [
            make_sms_response("C", SMSComponent.SAFETY_ASSURANCE),
            make_sms_response("D", SMSComponent.SAFETY_RISK_MANAGEMENT),
        ]

        progress = tracker.calculate(responses, 2, SMS)

        assert [c.code for c in progress.category_progress] == [
            "SAFETY_ASSURANCE",
            "SAFETY_RISK_MANAGEMENT",
        ]
        assert [e.code for e in progress.element_progress] == [
            "SAFETY_RISK_MANAGEMENT",
            "SAFETY_ASSURANCE",
        ]
        assert progress.category_progress[0].name == "Safety Assurance"

    def test_sms_element_maturity(self, tracker: ProgressTracker) -> None:
        """SMS elements carry distribution, average and derived level."""
        promotion = SMSComponent.SAFETY_PROMOTION
        responses = [
            make_sms_response("C", promotion),
            make_sms_response("D", promotion),
            make_sms_response("C", promotion),
            make_sms_response(None, promotion),
        ]

        element = tracker.calculate(responses, 4, SMS).element_progress[0]

        assert element.total == 4
        assert element.answered == 3
        assert element.average_maturity == Decimal("3.33")
        assert element.maturity_level == MaturityLevel.C
        assert element.maturity_distribution == {"A": 0, "B": 0, "C": 2, "D": 1, "E": 0}
        assert element.ei_score is None

    def test_question_without_category_counts_overall_only(
        self, tracker: ProgressTracker
    ) -> None:
        """Responses without a category still count toward overall progress."""
        response = AssessmentResponse(
            response_value="SATISFACTORY", question=QuestionClassification()
        )

        progress = tracker.calculate([response], 1, USOAP)

        assert progress.answered_questions == 1
        assert progress.category_progress == []


class TestActivityAndTime:
    """Test last activity and time estimates."""

    def test_last_activity_is_latest_timestamp(self, tracker: ProgressTracker) -> None:
        """last_activity_at is the latest responded_at."""
        responses = [
            make_usoap_response("SATISFACTORY", responded_at=minutes_after_base(10)),
            make_usoap_response("SATISFACTORY", responded_at=minutes_after_base(3)),
            make_usoap_response("SATISFACTORY"),
        ]

        progress = tracker.calculate(responses, 3, USOAP)

        assert progress.last_activity_at == minutes_after_base(10)

    def test_time_estimate_from_history(self, tracker: ProgressTracker) -> None:
        """Average gap of 2 minutes over 8 remaining questions gives 16 minutes."""
        responses = [
            make_usoap_response("SATISFACTORY", responded_at=minutes_after_base(0)),
            make_usoap_response("SATISFACTORY", responded_at=minutes_after_base(2)),
            make_usoap_response("SATISFACTORY", responded_at=minutes_after_base(4)),
        ]

        progress = tracker.calculate(responses, 11, USOAP)

        assert progress.average_time_per_question == Decimal("2.0")
        assert progress.estimated_time_remaining == Decimal("16.0")

    def test_time_estimate_default(self, registry: FormulaRegistry) -> None:
        """Without history the configured default is used."""
        tracker = ProgressTracker(registry=registry, default_minutes_per_question=Decimal("3"))

        progress = tracker.calculate(make_usoap_set(1, 0), 5, USOAP)

        assert progress.average_time_per_question == Decimal("3")
        assert progress.estimated_time_remaining == Decimal("12.0")

    def test_mixed_naive_and_aware_timestamps(self, tracker: ProgressTracker) -> None:
        """Naive timestamps are read as UTC and compared with aware ones."""
        responses = [
            AssessmentResponse.model_validate(
                {"response_value": "SATISFACTORY", "responded_at": "2024-01-01T10:00:00Z"}
            ),
            AssessmentResponse.model_validate(
                {"response_value": "SATISFACTORY", "responded_at": "2024-01-01T10:05:00"}
            ),
        ]

        progress = tracker.calculate(responses, 4, USOAP)

        assert progress.last_activity_at == datetime(2024, 1, 1, 10, 5, tzinfo=UTC)
        assert progress.average_time_per_question == Decimal("5.0")
        assert progress.estimated_time_remaining == Decimal("10.0")

    def test_no_negative_remaining_time(self, tracker: ProgressTracker) -> None:
        """More answers than questions never gives negative time."""
        progress = tracker.calculate(make_usoap_set(5, 0), 3, USOAP)

        assert progress.estimated_time_remaining == Decimal("0")


class TestIsAnswered:
    """Test the answered predicate."""

    def test_not_applicable_is_answered(self) -> None:
        """N/A counts as answered for USOAP."""
        assert is_answered(make_usoap_response("NOT_APPLICABLE"), USOAP)

    def test_unknown_value_is_not_answered(self) -> None:
        """Unrecognised answers are not progress."""
        assert not is_answered(make_usoap_response("MAYBE"), USOAP)
