"""Core scoring formulas.

All formulas use Decimal arithmetic exclusively and return the unrounded value;
FormulaRegistry.evaluate applies the spec's output precision with ROUND_HALF_UP.
Empty denominators yield 0, never an error.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Final

from aviscore.calc.formulas.registry import FormulaRegistry, FormulaSpec, FormulaType

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_MAX_MATURITY = Decimal("5")

# Precision for averages that feed a further formula or a level threshold.
INTERMEDIATE_PRECISION: Final[int] = 10


def _ei_percentage_formula(inputs: dict[str, Decimal]) -> Decimal:
    """Effective Implementation percentage.

    Formula: ei = satisfactory / (satisfactory + not_satisfactory) * 100
    """
    applicable = inputs["satisfactory"] + inputs["not_satisfactory"]
    if applicable <= _ZERO:
        return _ZERO
    return inputs["satisfactory"] / applicable * _HUNDRED


def _completion_rate_formula(inputs: dict[str, Decimal]) -> Decimal:
    """Share of a total, as a percentage.

    Formula: rate = part / total * 100
    """
    if inputs["total"] <= _ZERO:
        return _ZERO
    return inputs["part"] / inputs["total"] * _HUNDRED


def _average_maturity_formula(inputs: dict[str, Decimal]) -> Decimal:
    """Mean numeric maturity (A=1 .. E=5) over answered responses."""
    if inputs["count"] <= _ZERO:
        return _ZERO
    return inputs["score_sum"] / inputs["count"]


def _weighted_maturity_formula(inputs: dict[str, Decimal]) -> Decimal:
    """Weighted maturity renormalised over the weight actually present.

    Formula: overall = sum(weighted_score) / sum(weight)
    """
    if inputs["weight_total"] <= _ZERO:
        return _ZERO
    return inputs["weighted_sum"] / inputs["weight_total"]


def _maturity_percentage_formula(inputs: dict[str, Decimal]) -> Decimal:
    """Maturity score expressed as a percentage of the top level (E=5)."""
    return inputs["score"] / _MAX_MATURITY * _HUNDRED


EI_PERCENTAGE_SPEC = FormulaSpec(
    formula_type=FormulaType.EI_PERCENTAGE,
    version="1.0.0",
    expression_id="usoap_cma_ei_satisfactory_over_applicable_v1",
    fn=_ei_percentage_formula,
    required_inputs=("satisfactory", "not_satisfactory"),
    output_precision=2,
)

COMPLETION_RATE_SPEC = FormulaSpec(
    formula_type=FormulaType.COMPLETION_RATE,
    version="1.0.0",
    expression_id="completion_part_over_total_v1",
    fn=_completion_rate_formula,
    required_inputs=("part", "total"),
    output_precision=0,
)

AVERAGE_MATURITY_SPEC = FormulaSpec(
    formula_type=FormulaType.AVERAGE_MATURITY,
    version="1.0.0",
    expression_id="canso_soe_mean_maturity_v1",
    fn=_average_maturity_formula,
    required_inputs=("score_sum", "count"),
    output_precision=2,
)

WEIGHTED_MATURITY_SPEC = FormulaSpec(
    formula_type=FormulaType.WEIGHTED_MATURITY,
    version="1.0.0",
    expression_id="canso_soe_weighted_renormalised_v1",
    fn=_weighted_maturity_formula,
    required_inputs=("weighted_sum", "weight_total"),
    output_precision=2,
)

MATURITY_PERCENTAGE_SPEC = FormulaSpec(
    formula_type=FormulaType.MATURITY_PERCENTAGE,
    version="1.0.0",
    expression_id="canso_soe_score_over_five_v1",
    fn=_maturity_percentage_formula,
    required_inputs=("score",),
    output_precision=0,
)

CORE_FORMULAS: tuple[FormulaSpec, ...] = (
    EI_PERCENTAGE_SPEC,
    COMPLETION_RATE_SPEC,
    AVERAGE_MATURITY_SPEC,
    WEIGHTED_MATURITY_SPEC,
    MATURITY_PERCENTAGE_SPEC,
)


def register_core_formulas(registry: FormulaRegistry | None = None) -> FormulaRegistry:
    """Register all core formulas with the registry.

    Idempotent: formulas already present are left untouched.

    Args:
        registry: Optional registry to use. If None, uses the singleton.

    Returns:
        The registry with core formulas registered.
    """
    if registry is None:
        registry = FormulaRegistry()

    for spec in CORE_FORMULAS:
        if registry.get(spec.formula_type) is None:
            registry.register(spec)

    return registry
