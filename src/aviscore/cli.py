"""aviscore CLI - deterministic command-line interface for the scoring engine.

Usage:
    python -m aviscore score [--input PATH]
    python -m aviscore progress [--input PATH]
    python -m aviscore validate [--input PATH]
    python -m aviscore evaluate [--input PATH]
    python -m aviscore tables check

Input JSON (stdin when --input is omitted):
    {"questionnaire_type": "ANS_USOAP_CMA" | "SMS_CANSO_SOE",
     "total_questions": 851,
     "responses": [...],
     "previous_score": 80.5,        (optional)
     "current_status": "IN_PROGRESS"} (optional)

Exit codes:
    0: Success / submission allowed / tables consistent
    1: Internal error
    2: Invalid input or configuration / submission blocked / tables inconsistent
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from aviscore.calc.constants import verify_scoring_constants
from aviscore.calc.ei import EIScoreCalculator
from aviscore.calc.formulas import FormulaRegistry, register_core_formulas
from aviscore.calc.sms import SMSMaturityCalculator
from aviscore.config import EngineConfig, EngineConfigError, load_engine_config
from aviscore.engine import AssessmentEngine
from aviscore.models.response import AssessmentResponse
from aviscore.models.taxonomy import QuestionnaireType, verify_taxonomy_tables
from aviscore.progress.tracker import ProgressTracker
from aviscore.validators.submission import SubmissionValidator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AssessmentInput(BaseModel):
    """CLI input document for one assessment."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    questionnaire_type: QuestionnaireType
    total_questions: int = Field(..., ge=0)
    responses: list[AssessmentResponse] = Field(default_factory=list)
    previous_score: Decimal | None = None
    current_status: str | None = None


def _output_json(data: dict[str, Any]) -> None:
    """Output JSON to stdout with deterministic ordering."""
    print(json.dumps(data, sort_keys=True, indent=2))


def _make_error_result(code: str, message: str, path: str = "$") -> dict[str, Any]:
    """Create a failed result dict with a single error."""
    return {
        "errors": [{"code": code, "message": message, "path": path}],
        "pass": False,
    }


def _validation_errors_to_result(exc: PydanticValidationError) -> dict[str, Any]:
    """Convert pydantic validation errors into the CLI error shape."""
    errors = []
    for error in exc.errors():
        path = "$" + "".join(
            f"[{part}]" if isinstance(part, int) else f".{part}" for part in error["loc"]
        )
        errors.append({"code": "INVALID_INPUT", "message": error["msg"], "path": path})
    return {"errors": errors, "pass": False}


def _load_json_input(input_path: str | None) -> tuple[Any, str | None]:
    """Load JSON from file or stdin.

    Returns:
        Tuple of (parsed_data, error_message). If error_message is not None,
        parsed_data should be ignored.
    """
    try:
        if input_path:
            with open(input_path, encoding="utf-8") as f:
                content = f.read()
        else:
            content = sys.stdin.read()

        if not content.strip():
            return None, "Empty input"

        return json.loads(content), None
    except FileNotFoundError:
        return None, f"File not found: {input_path}"
    except json.JSONDecodeError as e:
        return None, f"Invalid JSON: {e}"
    except OSError as e:
        return None, f"Cannot read input: {e}"


def _load_assessment(input_path: str | None) -> AssessmentInput | None:
    """Load and validate an assessment document, printing an error result on failure."""
    data, error_msg = _load_json_input(input_path)
    if error_msg is not None:
        _output_json(_make_error_result("INVALID_JSON", error_msg))
        return None
    try:
        return AssessmentInput.model_validate(data)
    except PydanticValidationError as e:
        _output_json(_validation_errors_to_result(e))
        return None


def _configure_logging(config: EngineConfig) -> None:
    """Send logs to stderr so stdout stays pure JSON."""
    logging.basicConfig(level=config.log_level_value, stream=sys.stderr, format=LOG_FORMAT)


def cmd_score(args: argparse.Namespace, config: EngineConfig) -> int:
    """Execute score command: EI or SMS maturity depending on questionnaire type."""
    assessment = _load_assessment(args.input)
    if assessment is None:
        return 2

    if assessment.questionnaire_type == QuestionnaireType.ANS_USOAP_CMA:
        result = EIScoreCalculator().calculate(assessment.responses)
    else:
        result = SMSMaturityCalculator().calculate(assessment.responses)
    _output_json(result.model_dump(mode="json"))
    return 0


def cmd_progress(args: argparse.Namespace, config: EngineConfig) -> int:
    """Execute progress command."""
    assessment = _load_assessment(args.input)
    if assessment is None:
        return 2

    tracker = ProgressTracker(default_minutes_per_question=config.minutes_per_question)
    progress = tracker.calculate(
        assessment.responses, assessment.total_questions, assessment.questionnaire_type
    )
    _output_json(progress.model_dump(mode="json"))
    return 0


def cmd_validate(args: argparse.Namespace, config: EngineConfig) -> int:
    """Execute validate command.

    Exit codes:
        0: submission allowed
        2: submission blocked or invalid input
    """
    assessment = _load_assessment(args.input)
    if assessment is None:
        return 2

    result = SubmissionValidator().validate(
        assessment.responses,
        assessment.total_questions,
        assessment.questionnaire_type,
        current_status=assessment.current_status,
    )
    _output_json(result.model_dump(mode="json"))
    return 0 if result.can_submit else 2


def cmd_evaluate(args: argparse.Namespace, config: EngineConfig) -> int:
    """Execute evaluate command: score, progress, submission gate and trend."""
    assessment = _load_assessment(args.input)
    if assessment is None:
        return 2

    evaluation = AssessmentEngine(config=config).evaluate(
        assessment.responses,
        assessment.total_questions,
        assessment.questionnaire_type,
        previous_score=assessment.previous_score,
        current_status=assessment.current_status,
    )
    _output_json(evaluation.model_dump(mode="json"))
    return 0


def cmd_tables_check(args: argparse.Namespace, config: EngineConfig) -> int:
    """Execute tables check command.

    Exit codes:
        0: lookup tables, weights and formulas consistent
        2: inconsistencies found
    """
    problems = verify_taxonomy_tables() + verify_scoring_constants()
    registry = register_core_formulas(FormulaRegistry())
    formulas = {
        formula_type.value: {
            "expression_id": registry.get_or_raise(formula_type).expression_id,
            "formula_hash": registry.get_or_raise(formula_type).formula_hash,
            "version": registry.get_or_raise(formula_type).version,
        }
        for formula_type in registry.list_registered()
    }
    _output_json({"formulas": formulas, "pass": not problems, "problems": problems})
    return 0 if not problems else 2


def _add_input_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input",
        required=False,
        default=None,
        metavar="PATH",
        help="Path to JSON file (reads from stdin if omitted)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="aviscore",
        description="aviscore - Assessment Scoring & Progress Engine CLI",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    for name, description in [
        ("score", "Compute the EI (USOAP CMA) or SMS maturity (CANSO SoE) score"),
        ("progress", "Compute completion progress"),
        ("validate", "Check whether the assessment may be submitted"),
        ("evaluate", "Score, track and gate an assessment in one call"),
    ]:
        command_parser = subparsers.add_parser(name, help=description)
        _add_input_argument(command_parser)

    tables_parser = subparsers.add_parser(
        "tables",
        help="Lookup table operations",
    )
    tables_subparsers = tables_parser.add_subparsers(
        dest="tables_command",
        help="Table subcommands",
    )
    tables_subparsers.add_parser(
        "check",
        help="Verify classification tables, SMS weights and formula registry",
    )

    return parser


COMMAND_DISPATCH = {
    "score": cmd_score,
    "progress": cmd_progress,
    "validate": cmd_validate,
    "evaluate": cmd_evaluate,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Exit codes:
        0: Success / submission allowed / tables consistent
        1: Internal error (unexpected)
        2: Invalid input or configuration / submission blocked / tables inconsistent
    """
    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        try:
            config = load_engine_config()
        except EngineConfigError as e:
            _output_json(_make_error_result("INVALID_CONFIG", str(e)))
            return 2
        _configure_logging(config)

        if args.command is None:
            parser.print_help()
            return 0

        if args.command in COMMAND_DISPATCH:
            return COMMAND_DISPATCH[args.command](args, config)

        if args.command == "tables":
            if getattr(args, "tables_command", None) == "check":
                return cmd_tables_check(args, config)
            else:
                parser.parse_args(["tables", "--help"])
                return 0

        return 0

    except Exception as e:
        # Fail-closed: unexpected errors return exit code 1
        logger.exception("Unexpected error")
        _output_json(_make_error_result("INTERNAL_ERROR", str(e)))
        return 1


if __name__ == "__main__":
    sys.exit(main())
