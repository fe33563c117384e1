"""aviscore scoring calculators.

This package provides:
- EIScoreCalculator: USOAP CMA Effective Implementation scores
- SMSMaturityCalculator: CANSO SoE weighted maturity with weakest-link level
- Category scores and score comparison helpers
- FormulaRegistry: Versioned formula specifications with stable hashes
"""

from aviscore.calc.categories import calculate_category_scores
from aviscore.calc.comparison import (
    ImprovementAreas,
    ScoreComparison,
    ScoreTrend,
    compare_scores,
    identify_improvement_areas,
)
from aviscore.calc.constants import EIScoreCategory, ei_score_category
from aviscore.calc.ei import EIScoreCalculator, calculate_simple_ei_score
from aviscore.calc.formulas import FormulaRegistry, FormulaSpec
from aviscore.calc.sms import (
    SMSMaturityCalculator,
    calculate_weighted_sms_score,
    lowest_maturity_level,
    maturity_level_from_score,
    maturity_level_to_score,
)

__all__ = [
    "EIScoreCalculator",
    "EIScoreCategory",
    "FormulaRegistry",
    "FormulaSpec",
    "ImprovementAreas",
    "SMSMaturityCalculator",
    "ScoreComparison",
    "ScoreTrend",
    "calculate_category_scores",
    "calculate_simple_ei_score",
    "calculate_weighted_sms_score",
    "compare_scores",
    "ei_score_category",
    "identify_improvement_areas",
    "lowest_maturity_level",
    "maturity_level_from_score",
    "maturity_level_to_score",
]
