"""Tool facade tests: calc_info / execute_calc / list_calculators over the registry.

Tests cover:
    - Field metadata served from the same declarations that validate
    - Case-insensitive id resolution
    - execute_calc flattens tool-call values and never raises for user errors
    - execute_tool dispatch, including unknown tools and missing arguments
    - format_calc_info text rendering
"""

import pytest

from clinicalc.errors import CalculatorNotFoundError
from clinicalc.tools import TOOL_DEFINITIONS, CalculatorTools, format_calc_info


@pytest.fixture
def tools(service):
    return CalculatorTools(service)


# -- list / info --------------------------------------------------------------

def test_list_calculators_is_sorted_and_complete(tools):
    calcs = tools.list_calculators()
    assert len(calcs) == 13
    assert [c["id"] for c in calcs] == sorted(c["id"] for c in calcs)
    assert {"id", "title", "description", "version"} <= set(calcs[0])


def test_calc_info_mirrors_input_declarations(tools):
    info = tools.calc_info("iv_drip_rate")
    fields = {i["id"]: i for i in info.inputs}
    assert fields["total_volume"]["constraints"] == {"gt": 0, "max": 5000}
    assert fields["drop_factor"]["type"] == "choice"
    assert "60 gtt/mL (microgotero)" in fields["drop_factor"]["options"]
    assert fields["fluid_type"]["default"] == "Solución Salina 0.9%"
    assert fields["patient_weight"]["required"] is False


def test_calc_info_resolves_ids_case_insensitively(tools):
    assert tools.calc_info("BMI_Calculator").calc_id == "bmi_calculator"


def test_calc_info_unknown_id_raises(tools):
    with pytest.raises(CalculatorNotFoundError):
        tools.calc_info("nope")


# -- execute_calc -------------------------------------------------------------

def test_execute_calc_success(tools):
    result = tools.execute_calc("map_calculator", {"systolic_bp": 120, "diastolic_bp": {"value": 80, "unit": "mmHg"}})
    assert result.success is True
    assert result.outputs["map"] == "93.3"
    assert result.interpretation.startswith("INTERPRETACIÓN CLÍNICA")
    assert result.timestamp is not None
    assert result.errors == []


def test_execute_calc_flattens_booleans(tools):
    result = tools.execute_calc("heparin_dosage", {
        "patient_weight": 70,
        "treatment_type": "Profiláctico",
        "high_bleeding_risk": True,
    })
    assert result.success is True
    assert result.outputs["recommended_dose"] == "20.0"


def test_execute_calc_returns_validation_errors(tools):
    result = tools.execute_calc("bmi_calculator", {"height": 170})
    assert result.success is False
    assert result.outputs is None
    assert result.errors == ["El peso es obligatorio"]


def test_execute_calc_unknown_id_is_an_error_not_an_exception(tools):
    result = tools.execute_calc("nope", {})
    assert result.success is False
    assert result.errors == ["Calculator not found: nope"]


# -- execute_tool -------------------------------------------------------------

def test_execute_tool_dispatch(tools):
    listed = tools.execute_tool("list_calculators", {})
    assert len(listed["calculators"]) == 13

    info = tools.execute_tool("calc_info", {"calc_id": "braden_scale"})
    assert info["calc_id"] == "braden_scale"

    run = tools.execute_tool("execute_calc", {"calc_id": "bmi_calculator", "variables": {"height": "170", "weight": "70"}})
    assert run["success"] is True
    assert run["outputs"]["bmi"] == "24.2"


def test_execute_tool_errors_are_dicts(tools):
    assert tools.execute_tool("calc_info", {}) == {"error": "Missing required parameter: calc_id"}
    assert tools.execute_tool("execute_calc", {"variables": {}}) == {"error": "Missing required parameter: calc_id"}
    assert tools.execute_tool("calc_info", {"calc_id": "nope"}) == {"error": "Calculator not found: nope"}
    assert tools.execute_tool("delete_everything", {}) == {"error": "Unknown tool: delete_everything"}


def test_tool_definitions_name_every_handler():
    names = {t["function"]["name"] for t in TOOL_DEFINITIONS}
    assert names == {"list_calculators", "calc_info", "execute_calc"}


# -- format_calc_info ---------------------------------------------------------

def test_format_calc_info_marks_required_and_gated_fields(tools):
    text = format_calc_info(tools.calc_info("heparin_dosage"))
    assert text.startswith("Calculator: Dosificación de Heparina (Enoxaparina) (heparin_dosage)")
    assert "  - patient_weight*: Peso (kg) [number] min=3 max=200" in text
    assert "dosing_schedule: Esquema de dosificación [choice] required when treatment_type in ['Terapéutico']" in text
    assert "options: Profiláctico | Terapéutico" in text
