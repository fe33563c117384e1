"""Formula registry with versioned specifications and stable hashing.

Every headline score the engine reports is produced by a registered FormulaSpec,
so a stored score can be traced back to the methodology version that made it.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from typing import Any

from aviscore.models.taxonomy import ScoringConfigError


class FormulaType(StrEnum):
    """Kinds of scoring formula known to the engine."""

    EI_PERCENTAGE = "EI_PERCENTAGE"
    COMPLETION_RATE = "COMPLETION_RATE"
    AVERAGE_MATURITY = "AVERAGE_MATURITY"
    WEIGHTED_MATURITY = "WEIGHTED_MATURITY"
    MATURITY_PERCENTAGE = "MATURITY_PERCENTAGE"


def quantize_half_up(value: Decimal, precision: int) -> Decimal:
    """Quantize to `precision` decimal places, rounding half away from zero."""
    return value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class FormulaSpec:
    """Specification for a scoring formula.

    Attributes:
        formula_type: The kind of score this formula produces.
        version: Semantic version of the formula (e.g., "1.0.0").
        expression_id: Unique identifier for the formula expression.
        fn: The calculation function (Decimal inputs -> unrounded Decimal output).
        required_inputs: Required input value keys.
        output_precision: Number of decimal places for output quantization.
    """

    formula_type: FormulaType
    version: str
    expression_id: str
    fn: Callable[[dict[str, Decimal]], Decimal]
    required_inputs: tuple[str, ...] = field(default_factory=tuple)
    output_precision: int = 2

    @property
    def formula_hash(self) -> str:
        """Compute stable SHA256 hash of the formula specification.

        Hash is computed from canonical JSON of {formula_type, formula_version, expression_id}.
        """
        spec_dict = {
            "expression_id": self.expression_id,
            "formula_type": self.formula_type.value,
            "formula_version": self.version,
        }
        return compute_sha256(canonical_json_for_hash(spec_dict))


class FormulaRegistry:
    """Registry of versioned formula specifications.

    Formulas are immutable once registered; the registry is filled once at
    start-up and only read afterwards.
    """

    _instance: FormulaRegistry | None = None
    _formulas: dict[FormulaType, FormulaSpec]

    def __new__(cls) -> FormulaRegistry:
        """Singleton pattern for global registry."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._formulas = {}
        return cls._instance

    def register(self, spec: FormulaSpec) -> None:
        """Register a formula specification.

        Raises:
            ScoringConfigError: If a formula for this type is already registered.
        """
        if spec.formula_type in self._formulas:
            raise ScoringConfigError(
                f"Formula for {spec.formula_type.value} already registered. "
                "Create a new version instead of overwriting."
            )
        self._formulas[spec.formula_type] = spec

    def get(self, formula_type: FormulaType) -> FormulaSpec | None:
        """Get formula spec for a formula type, or None if not registered."""
        return self._formulas.get(formula_type)

    def get_or_raise(self, formula_type: FormulaType) -> FormulaSpec:
        """Get formula spec or raise if not found.

        Raises:
            KeyError: If no formula is registered for this type.
        """
        spec = self.get(formula_type)
        if spec is None:
            raise KeyError(f"No formula registered for formula_type: {formula_type.value}")
        return spec

    def evaluate(
        self,
        formula_type: FormulaType,
        inputs: Mapping[str, Decimal | int],
        precision: int | None = None,
    ) -> Decimal:
        """Evaluate a registered formula and quantize its output.

        Args:
            formula_type: The formula to run.
            inputs: Input values keyed by the formula's required input names.
            precision: Decimal places to keep; defaults to the spec's output precision.

        Returns:
            The quantized result (ROUND_HALF_UP).

        Raises:
            KeyError: If the formula is not registered or an input is missing.
        """
        spec = self.get_or_raise(formula_type)
        missing = [name for name in spec.required_inputs if name not in inputs]
        if missing:
            raise KeyError(f"{formula_type.value} missing inputs: {missing}")
        values = {name: Decimal(inputs[name]) for name in spec.required_inputs}
        places = spec.output_precision if precision is None else precision
        return quantize_half_up(spec.fn(values), places)

    def list_registered(self) -> list[FormulaType]:
        """List all registered formula types."""
        return list(self._formulas.keys())

    def clear(self) -> None:
        """Clear all registered formulas. For testing only."""
        self._formulas.clear()

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. For testing only."""
        cls._instance = None


def canonical_json_for_hash(obj: Any) -> str:
    """Serialize object to canonical JSON for hashing.

    Rules:
    - All keys sorted alphabetically (recursive)
    - Decimal values serialized as strings
    - Enums serialized by value
    - No whitespace
    """

    def normalize(value: Any) -> Any:
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, dict):
            return {str(k): normalize(v) for k, v in sorted(value.items())}
        if isinstance(value, (list, tuple)):
            return [normalize(item) for item in value]
        if isinstance(value, StrEnum):
            return value.value
        return value

    return json.dumps(normalize(obj), sort_keys=True, separators=(",", ":"))


def compute_sha256(data: str) -> str:
    """Compute SHA256 hash of a string as lowercase hex."""
    return hashlib.sha256(data.encode("utf-8")).hexdigest()
