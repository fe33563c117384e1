"""aviscore - Assessment Scoring & Progress Engine.

Pure computation layer for aviation safety oversight self-assessments:
- EI scores for ICAO USOAP CMA questionnaires
- SMS maturity for CANSO Standard of Excellence questionnaires
- completion progress and submission gating
"""

__version__ = "0.1.0"
