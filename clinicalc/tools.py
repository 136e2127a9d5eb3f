"""Tool definitions and handlers exposing the calculator registry to function-calling clients."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from clinicalc.errors import CalculatorNotFoundError, InvalidInputError
from clinicalc.models import CalcInfoResult, ExecuteCalcResult
from clinicalc.service import CalculatorService

logger = logging.getLogger(__name__)

# Tool definitions for LLM function calling
TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "list_calculators",
            "description": "List the available clinical calculators with their ids and titles.",
            "parameters": {"type": "object", "properties": {}},
        },
    },
    {
        "type": "function",
        "function": {
            "name": "calc_info",
            "description": (
                "Get the input schema for a clinical calculator. "
                "Returns field names, types, units, options and constraints needed for execute_calc."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "calc_id": {
                        "type": "string",
                        "description": "Calculator ID (e.g., bmi, glasgow_coma_scale, iv_drip_rate)",
                    },
                },
                "required": ["calc_id"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "execute_calc",
            "description": (
                "Execute a calculation with extracted variables. "
                "Returns the calculated outputs and interpretation, or validation errors."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "calc_id": {
                        "type": "string",
                        "description": "Calculator ID",
                    },
                    "variables": {
                        "type": "object",
                        "description": (
                            "Variables as key-value pairs. "
                            "Numbers as numbers or decimal strings, booleans as true/false, "
                            "enumerated scores as the option text (e.g. \"4 - Abre los ojos espontáneamente\")."
                        ),
                    },
                },
                "required": ["calc_id", "variables"],
            },
        },
    },
]


def _to_raw(value: Any) -> str:
    """Flatten a tool-call argument into the string form calculators parse."""
    if isinstance(value, dict):
        return _to_raw(value.get("value", ""))
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


class CalculatorTools:
    """
    Tool-style facade over a CalculatorService.

    Every handler returns data: unknown ids and bad input come back as errors
    in the result instead of raising.
    """

    def __init__(self, service: CalculatorService):
        self._service = service

    def list_calculators(self) -> List[Dict[str, str]]:
        out = []
        for cid in self._service.calculator_ids():
            d = self._service.calc_info(cid)
            out.append({
                "id": cid,
                "title": d.title,
                "description": d.description,
                "version": d.version,
            })
        return out

    def _resolve_calc_id(self, input_id: str) -> str:
        """
        Resolve a loosely typed calculator id: exact match first, then a
        case-insensitive one. Unknown ids are returned unchanged.
        """
        if input_id in self._service:
            return input_id
        input_lower = input_id.strip().lower()
        for cid in self._service.calculator_ids():
            if cid.lower() == input_lower:
                return cid
        return input_id

    def calc_info(self, calc_id: str) -> CalcInfoResult:
        """Input schema of a calculator. Raises CalculatorNotFoundError for unknown ids."""
        resolved = self._resolve_calc_id(calc_id)
        d = self._service.calc_info(resolved)
        inputs = [
            {
                "id": inp.id,
                "label": inp.label,
                "type": inp.type,
                "required": inp.required,
                "canonical_unit": inp.canonical_unit,
                "constraints": dict(inp.constraints),
                "options": list(inp.options),
                "default": inp.default,
                "required_when": dict(inp.required_when),
            }
            for inp in d.inputs
        ]
        return CalcInfoResult(
            calc_id=d.id,
            title=d.title,
            description=d.description,
            version=d.version,
            tags=list(d.tags),
            inputs=inputs,
        )

    def execute_calc(self, calc_id: str, variables: Mapping[str, Any]) -> ExecuteCalcResult:
        """
        Validate, calculate and interpret in one call.

        Args:
            calc_id: Calculator ID (case-insensitive)
            variables: field id -> value; non-string values are flattened

        Returns:
            ExecuteCalcResult with outputs and interpretation, or errors
        """
        resolved = self._resolve_calc_id(calc_id)
        inputs = {k: _to_raw(v) for k, v in (variables or {}).items()}

        validation = self._service.validate(resolved, inputs)
        if not validation.is_valid:
            return ExecuteCalcResult(success=False, errors=validation.errors)

        try:
            result = self._service.calculate(resolved, inputs)
            interpretation = self._service.interpret(resolved, result)
        except (CalculatorNotFoundError, InvalidInputError) as e:
            return ExecuteCalcResult(success=False, errors=[e.message])

        return ExecuteCalcResult(
            success=True,
            outputs=dict(result.result_values),
            interpretation=interpretation,
            timestamp=result.timestamp,
        )

    def execute_tool(self, tool_name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Execute a tool by name and return the result as a dict."""
        if tool_name == "list_calculators":
            return {"calculators": self.list_calculators()}

        if tool_name == "calc_info":
            calc_id = arguments.get("calc_id")
            if not calc_id:
                return {"error": "Missing required parameter: calc_id"}
            try:
                return self.calc_info(calc_id).model_dump()
            except CalculatorNotFoundError as e:
                return {"error": e.message}

        if tool_name == "execute_calc":
            calc_id = arguments.get("calc_id")
            if not calc_id:
                return {"error": "Missing required parameter: calc_id"}
            return self.execute_calc(calc_id, arguments.get("variables", {})).model_dump()

        logger.warning("Unknown tool requested: %s", tool_name)
        return {"error": f"Unknown tool: {tool_name}"}


def format_calc_info(info: CalcInfoResult) -> str:
    """
    Format calculator info as text, one line per input.

    Required inputs are marked with ``*``; units, bounds, defaults and options
    are appended where the field declares them.
    """
    lines = [
        f"Calculator: {info.title} ({info.calc_id})",
        "",
        "Inputs:",
    ]

    for inp in info.inputs:
        inp_id = inp.get("id", "unknown")
        label = inp.get("label", inp_id)
        inp_type = inp.get("type", "number")
        required = inp.get("required", False)
        unit = inp.get("canonical_unit", "")
        constraints = inp.get("constraints", {})
        options = inp.get("options", [])
        default = inp.get("default")
        gate = inp.get("required_when", {})

        req_marker = "*" if required and not gate else ""
        unit_str = f" ({unit})" if unit else ""

        line = f"  - {inp_id}{req_marker}: {label}{unit_str} [{inp_type}]"

        if constraints:
            if "gt" in constraints:
                line += f" >{constraints['gt']:g}"
            if "min" in constraints:
                line += f" min={constraints['min']:g}"
            if "max" in constraints:
                line += f" max={constraints['max']:g}"
        if default is not None:
            line += f" default={default}"
        for field_id, values in gate.items():
            line += f" required when {field_id} in {values}"

        lines.append(line)
        if options:
            lines.append(f"      options: {' | '.join(options)}")

    return "\n".join(lines)
