"""Synthetic deterministic fixtures for aviscore tests.

These fixtures provide reproducible response sets for scoring, progress and
submission testing. All timestamps derive from one fixed base instant.
"""

from tests.fixtures.synthetic.responses_fixture import (
    FIRST_STUDY_AREA,
    SYNTHETIC_ASSESSMENT_ID,
    SYNTHETIC_BASE_TIME,
    make_sms_response,
    make_usoap_response,
    make_usoap_set,
    minutes_after_base,
)

__all__ = [
    "FIRST_STUDY_AREA",
    "SYNTHETIC_ASSESSMENT_ID",
    "SYNTHETIC_BASE_TIME",
    "make_sms_response",
    "make_usoap_response",
    "make_usoap_set",
    "minutes_after_base",
]
