"""
Parse raw string inputs into typed values, driven by CalcInput declarations.

Raw inputs are always ``str -> str`` maps. Each declared field is parsed into
one variant of the typed value union; every violated rule is collected and
returned together, nothing is raised for bad user input.
"""
from __future__ import annotations

import math
import re
from typing import Mapping, Optional

from clinicalc.models import (
    BoolValue,
    CalcInput,
    EnumValue,
    InputValue,
    NumberValue,
    ParsedInputs,
    TextValue,
)

_TRUE = "true"
_FALSE = "false"

# ASCII digits only: float() and int() also take "1_70" and non-Latin digits
_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _is_blank(raw: Optional[str]) -> bool:
    return raw is None or not raw.strip()


def _parse_num(raw: str) -> Optional[float]:
    """Parse decimal text; NaN and infinities are not numbers here."""
    text = raw.strip()
    if not _DECIMAL.fullmatch(text):
        return None
    val = float(text)
    # exponents can still overflow, e.g. "1e999"
    if math.isinf(val):
        return None
    return val


def raw_number(raw: Mapping[str, str], key: str) -> Optional[float]:
    """Number in ``raw[key]`` regardless of range, or None."""
    val = raw.get(key)
    return None if _is_blank(val) else _parse_num(val)


def _parse_int(raw: str) -> Optional[int]:
    text = raw.strip()
    if not _INTEGER.fullmatch(text):
        return None
    return int(text)


def _parse_enum(raw: str) -> Optional[EnumValue]:
    """Parse ``"<score> - <label>"``; a bare integer is accepted as well."""
    head, _, label = raw.strip().partition(" - ")
    score = _parse_int(head)
    if score is None:
        return None
    return EnumValue(score=score, label=label.strip())


def _parse_bool(raw: str) -> Optional[bool]:
    s = raw.strip().lower()
    if s == _TRUE:
        return True
    if s == _FALSE:
        return False
    return None


def _message(spec: CalcInput, key: str) -> str:
    msgs = spec.messages
    if key in ("low", "high"):
        if key in msgs:
            return msgs[key]
        key = "range"
    if key in msgs:
        return msgs[key]
    if key == "required":
        return f"{spec.label} es obligatorio"
    if key == "invalid":
        if spec.type == "bool":
            return f"{spec.label} debe ser true o false"
        if spec.type == "choice":
            return f"{spec.label}: opción no válida"
        return f"{spec.label} debe ser un número válido"
    c = spec.constraints
    lo = c.get("min", c.get("gt"))
    hi = c.get("max")
    return f"{spec.label} debe estar entre {_bound(lo)}-{_bound(hi)}"


def _bound(val: Optional[float]) -> str:
    if val is None:
        return "?"
    return str(int(val)) if float(val).is_integer() else str(val)


def _range_error(spec: CalcInput, value: float) -> Optional[str]:
    c = spec.constraints
    if "gt" in c and value <= c["gt"]:
        return _message(spec, "low")
    if "min" in c and value < c["min"]:
        return _message(spec, "low")
    if "max" in c and value > c["max"]:
        return _message(spec, "high")
    return None


def is_applicable(spec: CalcInput, raw: Mapping[str, str]) -> bool:
    """A gated field applies only when its gate holds one of the listed values."""
    for gate, allowed in spec.required_when.items():
        gate_val = raw.get(gate)
        if gate_val is None or gate_val.strip() not in allowed:
            return False
    return True


def parse_field(spec: CalcInput, raw_value: str) -> tuple[Optional[InputValue], Optional[str]]:
    """Parse one non-blank raw value. Returns (value, error); exactly one is set."""
    if spec.type == "number":
        num = _parse_num(raw_value)
        if num is None:
            return None, _message(spec, "invalid")
        err = _range_error(spec, num)
        return (None, err) if err else (NumberValue(value=num), None)

    if spec.type == "int":
        num = _parse_int(raw_value)
        if num is None:
            return None, _message(spec, "invalid")
        err = _range_error(spec, num)
        return (None, err) if err else (NumberValue(value=float(num)), None)

    if spec.type == "enum":
        enum = _parse_enum(raw_value)
        if enum is None:
            return None, _message(spec, "invalid")
        err = _range_error(spec, enum.score)
        return (None, err) if err else (enum, None)

    if spec.type == "bool":
        flag = _parse_bool(raw_value)
        if flag is None:
            return None, _message(spec, "invalid")
        return BoolValue(value=flag), None

    if spec.type == "choice":
        text = raw_value.strip()
        if text not in spec.options:
            return None, _message(spec, "invalid")
        return TextValue(value=text), None

    return TextValue(value=raw_value.strip()), None


def parse_inputs(specs: list[CalcInput], raw: Mapping[str, str]) -> tuple[ParsedInputs, list[str]]:
    """
    Parse and validate every declared field in one pass.

    Parameters
    ----------
    specs : field declarations, in the order errors should be reported
    raw   : caller input, field id -> string

    Returns
    -------
    (typed inputs for the fields that parsed, ordered list of error messages)
    """
    values: dict[str, InputValue] = {}
    errors: list[str] = []

    for spec in specs:
        if spec.required_when:
            if not is_applicable(spec, raw):
                continue
            required = True
        else:
            required = spec.required

        raw_value = raw.get(spec.id)
        if _is_blank(raw_value):
            if required:
                errors.append(_message(spec, "required"))
                continue
            if spec.type == "bool":
                values[spec.id] = BoolValue(value=False)
                continue
            if spec.default is None:
                continue
            raw_value = spec.default

        value, error = parse_field(spec, raw_value)
        if error:
            errors.append(error)
        else:
            values[spec.id] = value

    return ParsedInputs(values=values), errors
