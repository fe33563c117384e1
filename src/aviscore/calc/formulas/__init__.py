"""Versioned scoring formulas with stable hashing."""

from aviscore.calc.formulas.core import INTERMEDIATE_PRECISION, register_core_formulas
from aviscore.calc.formulas.registry import (
    FormulaRegistry,
    FormulaSpec,
    FormulaType,
    quantize_half_up,
)

__all__ = [
    "INTERMEDIATE_PRECISION",
    "FormulaRegistry",
    "FormulaSpec",
    "FormulaType",
    "quantize_half_up",
    "register_core_formulas",
]
