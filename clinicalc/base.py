"""Calculator contract shared by every clinical module."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Tuple

from clinicalc.errors import InvalidInputError
from clinicalc.models import (
    CalculationResult,
    CalculatorDef,
    ParsedInputs,
    Reference,
    ValidationResult,
)
from clinicalc.parsing import parse_inputs

logger = logging.getLogger(__name__)


class Calculator(ABC):
    """
    Base class for a clinical calculator.

    Subclasses declare ``definition`` (whose ``inputs`` are the single source
    of field bounds) and ``references``, and implement ``compute`` and
    ``narrate``. Instances hold no per-call state and may be shared freely.
    """

    definition: CalculatorDef
    references: Tuple[Reference, ...] = ()

    @property
    def calculator_id(self) -> str:
        return self.definition.id

    # ── validation ──────────────────────────────────────────────────────────

    def parse(self, inputs: Mapping[str, str]) -> Tuple[ParsedInputs, List[str]]:
        """Parse all declared fields, then run cross-field checks."""
        parsed, errors = parse_inputs(self.definition.inputs, inputs)
        errors.extend(self.cross_check(parsed, inputs))
        return parsed, errors

    def cross_check(self, v: ParsedInputs, raw: Mapping[str, str]) -> List[str]:
        """Relationships between fields; ``raw`` still holds values that failed their own checks."""
        return []

    def validate(self, inputs: Mapping[str, str]) -> ValidationResult:
        _, errors = self.parse(inputs)
        return ValidationResult.from_errors(errors)

    # ── computation ─────────────────────────────────────────────────────────

    def calculate(self, inputs: Mapping[str, str]) -> CalculationResult:
        parsed, errors = self.parse(inputs)
        if errors:
            raise InvalidInputError(errors, self.calculator_id)
        results = self.compute(parsed)
        logger.debug(
            "Computed %s", self.calculator_id,
            extra={"calculator_id": self.calculator_id, "field_count": len(results)},
        )
        return CalculationResult(
            calculator_id=self.calculator_id,
            input_values=dict(inputs),
            result_values=results,
        )

    @abstractmethod
    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        """Apply the formula to validated, typed inputs."""

    # ── interpretation ──────────────────────────────────────────────────────

    def interpret(self, result: CalculationResult) -> str:
        if result.calculator_id != self.calculator_id:
            raise InvalidInputError(
                [f"El resultado pertenece a otra calculadora: {result.calculator_id}"],
                self.calculator_id,
            )
        return self.narrate(result)

    @abstractmethod
    def narrate(self, result: CalculationResult) -> str:
        """Build the clinician-facing narrative for a result of this module."""

    def echoed_inputs(self, result: CalculationResult) -> ParsedInputs:
        """Typed view of the inputs echoed in a result."""
        parsed, _ = parse_inputs(self.definition.inputs, result.input_values)
        return parsed

    def list_references(self) -> List[Reference]:
        return list(self.references)
