"""Error Hierarchy: typed, categorized exceptions for engine failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - User-input validation failures are returned as ValidationResult data, never raised
    - Only caller or configuration defects are raised: unknown ids, invalid input at calculate

Design Decisions:
    - Single hierarchy with ClinicalcError base so callers can catch every engine failure at once
    - Subclasses also derive from the matching builtin (LookupError, ValueError)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"


@dataclass
class ErrorContext:
    """Context attached to an error for logging and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    calculator_id: str | None = None


class ClinicalcError(Exception):
    """Base exception for all engine errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to a plain error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "calculator_id": self.context.calculator_id,
            }
        }


class CalculatorNotFoundError(ClinicalcError, LookupError):
    """No calculator is registered under the requested id."""
    def __init__(self, calculator_id: str):
        super().__init__(
            f"Calculator not found: {calculator_id}",
            "CALCULATOR_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ErrorContext(calculator_id=calculator_id),
        )
        self.calculator_id = calculator_id


class InvalidInputError(ClinicalcError, ValueError):
    """calculate() or interpret() was called with input that fails validation."""
    def __init__(self, errors: list[str], calculator_id: str | None = None):
        super().__init__(
            "; ".join(errors),
            "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ErrorContext(calculator_id=calculator_id),
        )
        self.errors = list(errors)
        self.calculator_id = calculator_id
