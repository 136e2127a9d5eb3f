"""Pydantic models for the clinical calculator engine."""

from __future__ import annotations

import time
from types import MappingProxyType
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class Reference(BaseModel):
    """Bibliographic reference attached to a calculator."""

    model_config = ConfigDict(frozen=True)

    title: str
    source: str
    url: Optional[str] = None
    year: Optional[int] = None


class ValidationResult(BaseModel):
    """Accumulated outcome of input-rule checking prior to computation."""

    is_valid: bool
    errors: List[str] = []
    error_code: Optional[str] = None  # set when the calculator id is unknown

    @model_validator(mode="after")
    def _check_consistency(self) -> "ValidationResult":
        if self.is_valid != (not self.errors):
            raise ValueError("is_valid must be True exactly when errors is empty")
        return self

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=list(errors))


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class CalculationResult(BaseModel):
    """Immutable record of one computation's inputs and formatted outputs."""

    model_config = ConfigDict(frozen=True)

    calculator_id: str
    timestamp: int = Field(default_factory=_now_ms)
    input_values: Mapping[str, str] = {}
    result_values: Mapping[str, str] = {}

    @field_validator("input_values", "result_values", mode="after")
    @classmethod
    def _read_only(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        # frozen only guards attribute assignment, not item assignment
        return MappingProxyType(dict(v))

    @field_serializer("input_values", "result_values")
    def _plain_dict(self, v: Mapping[str, str]) -> Dict[str, str]:
        return dict(v)


# ── Field metadata ───────────────────────────────────────────────────────────

class CalcInput(BaseModel):
    """Declaration of one input field; drives both validation and calc_info."""

    id: str
    label: str
    type: Literal["number", "int", "bool", "enum", "choice", "text"] = "number"
    required: bool = True
    canonical_unit: str = ""
    default: Optional[str] = None
    options: List[str] = []
    constraints: Dict[str, float] = {}  # min, max (inclusive), gt (exclusive)
    required_when: Dict[str, List[str]] = {}
    messages: Dict[str, str] = {}  # required, invalid, range, low, high


class CalculatorDef(BaseModel):
    id: str
    title: str
    description: str
    version: str = "1.0"
    tags: List[str] = []
    inputs: List[CalcInput] = []


# ── Typed input values ───────────────────────────────────────────────────────

class NumberValue(BaseModel):
    kind: Literal["number"] = "number"
    value: float


class TextValue(BaseModel):
    kind: Literal["text"] = "text"
    value: str


class BoolValue(BaseModel):
    kind: Literal["bool"] = "bool"
    value: bool


class EnumValue(BaseModel):
    """An enumerated option: the leading integer score plus its label."""

    kind: Literal["enum"] = "enum"
    score: int
    label: str = ""


InputValue = Annotated[
    Union[NumberValue, TextValue, BoolValue, EnumValue],
    Field(discriminator="kind"),
]


class ParsedInputs(BaseModel):
    """Typed view of a validated input set, keyed by field id."""

    values: Dict[str, InputValue] = {}

    def has(self, key: str) -> bool:
        return key in self.values

    def num(self, key: str, default: Optional[float] = None) -> Optional[float]:
        v = self.values.get(key)
        if isinstance(v, NumberValue):
            return v.value
        return default

    def score(self, key: str, default: int = 0) -> int:
        v = self.values.get(key)
        if isinstance(v, EnumValue):
            return v.score
        return default

    def text(self, key: str, default: str = "") -> str:
        v = self.values.get(key)
        if isinstance(v, TextValue):
            return v.value
        return default

    def flag(self, key: str) -> bool:
        v = self.values.get(key)
        return isinstance(v, BoolValue) and v.value


# ── Tool facade results ──────────────────────────────────────────────────────

class CalcInfoResult(BaseModel):
    """Result from calc_info tool."""

    calc_id: str
    title: str
    description: Optional[str] = None
    version: str
    tags: List[str] = []
    inputs: List[Dict[str, Any]]  # Input specifications


class ExecuteCalcResult(BaseModel):
    """Result from execute_calc tool."""

    success: bool
    outputs: Optional[Dict[str, str]] = None
    interpretation: Optional[str] = None
    errors: List[str] = []
    timestamp: Optional[int] = None
