"""aviscore validators - fail-closed submission gating."""

from aviscore.validators.submission import SubmissionValidator

__all__ = ["SubmissionValidator"]
