"""Tests for the submission gate.

Tests verify:
- 99% answered is blocked with the exact remaining count
- 100% answered with 60% evidence is allowed with one warning
- Exact counts are used, never rounded percentages
- NOT_REVIEWED and incomplete categories block
- Evidence floors are 80% (USOAP) and 75% (SMS)
- Workflow status and empty questionnaires block
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from aviscore.calc.constants import SUBMISSION_REQUIREMENTS, SubmissionRequirements
from aviscore.calc.formulas import FormulaRegistry
from aviscore.models.taxonomy import AuditArea, QuestionnaireType, SMSComponent
from aviscore.validators.submission import SubmissionValidator
from tests.fixtures.synthetic import make_sms_response, make_usoap_response, make_usoap_set

USOAP = QuestionnaireType.ANS_USOAP_CMA
SMS = QuestionnaireType.SMS_CANSO_SOE


@pytest.fixture
def validator(registry: FormulaRegistry) -> SubmissionValidator:
    """Create a submission validator with the test registry."""
    return SubmissionValidator(registry=registry)


class TestAnsweredGate:
    """Test the every-question-answered gate."""

    def test_one_not_reviewed_blocks(self, validator: SubmissionValidator) -> None:
        """99 of 100 answered is blocked and names the single remaining question."""
        responses = make_usoap_set(80, 10, 9, 1)

        result = validator.validate(responses, 100, USOAP)

        assert result.can_submit is False
        assert any("1 questions still need to be answered" in b for b in result.blockers)
        assert any("99 of 100" in b for b in result.blockers)
        assert any('1 questions are marked as "Not Reviewed"' in b for b in result.blockers)

    def test_exact_count_not_rounded_percentage(self, validator: SubmissionValidator) -> None:
        """850 of 851 (99.9%) still blocks."""
        responses = make_usoap_set(850, 0)

        result = validator.validate(responses, 851, USOAP)

        assert result.can_submit is False
        assert len(result.blockers) == 1
        assert "850 of 851" in result.blockers[0]
        assert "1 questions still need to be answered" in result.blockers[0]

    def test_absent_answer_counts_as_not_reviewed(self, validator: SubmissionValidator) -> None:
        """A response without a value is reported as not reviewed."""
        responses = make_usoap_set(3, 0) + [make_usoap_response(None, evidence=True)]

        result = validator.validate(responses, 4, USOAP)

        assert result.can_submit is False
        assert any("Not Reviewed" in b for b in result.blockers)

    def test_zero_questions_blocks(self, validator: SubmissionValidator) -> None:
        """A questionnaire without questions cannot be submitted."""
        result = validator.validate([], 0, USOAP)

        assert result.can_submit is False
        assert result.blockers == ["The questionnaire has no questions to answer."]

    def test_answered_floor_from_requirements(
        self, validator: SubmissionValidator, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The answered gate reads the methodology floor."""
        component = SMSComponent.SAFETY_RISK_MANAGEMENT
        responses = [make_sms_response("D", component, evidence=True) for _ in range(9)]

        assert any("9 of 10" in b for b in validator.validate(responses, 10, SMS).blockers)

        monkeypatch.setitem(
            SUBMISSION_REQUIREMENTS,
            SMS,
            SubmissionRequirements(
                min_evidence_percent=Decimal("75"), min_answered_percent=Decimal("90")
            ),
        )
        result = validator.validate(responses, 10, SMS)

        assert result.can_submit is True
        assert result.blockers == []


class TestCategoryGate:
    """Test the per-category completeness gate."""

    def test_incomplete_categories_are_named(self, validator: SubmissionValidator) -> None:
        """Categories with unanswered questions are listed by code."""
        responses = [
            make_usoap_response("SATISFACTORY", AuditArea.LEG, evidence=True),
            make_usoap_response("NOT_REVIEWED", AuditArea.OPS),
            make_usoap_response("NOT_REVIEWED", AuditArea.AIR),
        ]

        result = validator.validate(responses, 3, USOAP)

        category_blockers = [b for b in result.blockers if "categories" in b]
        assert category_blockers == ["2 categories have unanswered questions: AIR, OPS"]

    def test_sms_unanswered_component(self, validator: SubmissionValidator) -> None:
        """An SMS component with an unanswered question blocks."""
        responses = [
            make_sms_response("C", SMSComponent.SAFETY_POLICY_OBJECTIVES, evidence=True),
            make_sms_response(None, SMSComponent.SAFETY_PROMOTION, evidence=True),
        ]

        result = validator.validate(responses, 2, SMS)

        assert result.can_submit is False
        assert any("SAFETY_PROMOTION" in b for b in result.blockers)
        assert not any("Not Reviewed" in b for b in result.blockers)


class TestEvidenceWarning:
    """Test the non-blocking evidence floor."""

    def test_full_answers_low_evidence_allowed(self, validator: SubmissionValidator) -> None:
        """100% answered with 60% evidence passes with exactly one warning."""
        responses = make_usoap_set(90, 10, evidence_count=60)

        result = validator.validate(responses, 100, USOAP)

        assert result.can_submit is True
        assert result.blockers == []
        assert len(result.warnings) == 1
        assert "60" in result.warnings[0]
        assert "80%" in result.warnings[0]

    def test_usoap_floor_met(self, validator: SubmissionValidator) -> None:
        """Exactly 80% evidence raises no warning."""
        responses = make_usoap_set(10, 0, evidence_count=8)

        result = validator.validate(responses, 10, USOAP)

        assert result.can_submit is True
        assert result.warnings == []

    def test_sms_floor_is_75(self, validator: SubmissionValidator) -> None:
        """SMS needs 75%: 3 of 4 passes quietly, 2 of 4 warns."""
        component = SMSComponent.SAFETY_ASSURANCE
        met = [make_sms_response("C", component, evidence=i < 3) for i in range(4)]
        short = [make_sms_response("C", component, evidence=i < 2) for i in range(4)]

        assert validator.validate(met, 4, SMS).warnings == []
        short_result = validator.validate(short, 4, SMS)
        assert short_result.can_submit is True
        assert len(short_result.warnings) == 1
        assert "75%" in short_result.warnings[0]


class TestStatusGate:
    """Test the workflow status gate."""

    def test_in_progress_may_submit(self, validator: SubmissionValidator) -> None:
        """IN_PROGRESS can move to SUBMITTED."""
        result = validator.validate(make_usoap_set(5, 0), 5, USOAP, current_status="IN_PROGRESS")

        assert result.can_submit is True

    @pytest.mark.parametrize("status", ["DRAFT", "COMPLETED", "ARCHIVED", "UNKNOWN"])
    def test_other_statuses_block(self, validator: SubmissionValidator, status: str) -> None:
        """Statuses without a SUBMITTED transition block."""
        result = validator.validate(make_usoap_set(5, 0), 5, USOAP, current_status=status)

        assert result.can_submit is False
        assert result.blockers == [f"Assessment in status {status} cannot move to SUBMITTED."]
