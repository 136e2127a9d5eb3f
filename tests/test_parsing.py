"""Parsing tests: CalcInput-driven conversion of raw strings into typed values.

Tests cover:
    - Required, invalid and range messages (low/high fall back to range; invalid text follows the field type)
    - Numbers accept plain ASCII decimals only (no underscores, no other scripts' digits)
    - Enumerated scores, booleans, choices, defaults
    - required_when gating
    - Accumulation: every violated rule is reported, in declaration order
"""

from clinicalc.models import BoolValue, CalcInput, EnumValue, NumberValue, TextValue
from clinicalc.parsing import is_applicable, parse_field, parse_inputs, raw_number


def _num(**kwargs):
    base = dict(id="x", label="X", constraints={"min": 1, "max": 10})
    base.update(kwargs)
    return CalcInput(**base)


# -- numbers ------------------------------------------------------------------

def test_number_in_range_parses():
    value, error = parse_field(_num(), " 5.5 ")
    assert error is None
    assert value == NumberValue(value=5.5)


def test_number_garbage_is_invalid_not_a_crash():
    _, error = parse_field(_num(messages={"invalid": "bad"}), "abc")
    assert error == "bad"


def test_nan_and_infinity_are_invalid():
    spec = _num(messages={"invalid": "bad"})
    assert parse_field(spec, "nan")[1] == "bad"
    assert parse_field(spec, "inf")[1] == "bad"


def test_low_and_high_fall_back_to_range():
    spec = _num(messages={"range": "out"})
    assert parse_field(spec, "0")[1] == "out"
    assert parse_field(spec, "11")[1] == "out"


def test_low_and_high_messages_win_over_range():
    spec = _num(constraints={"gt": 0, "max": 10}, messages={"low": "too low", "high": "too high", "range": "out"})
    assert parse_field(spec, "0")[1] == "too low"
    assert parse_field(spec, "10.5")[1] == "too high"
    assert parse_field(spec, "10")[1] is None


def test_generated_messages_when_none_declared():
    spec = CalcInput(id="w", label="Peso", constraints={"min": 3, "max": 300})
    assert parse_field(spec, "x")[1] == "Peso debe ser un número válido"
    assert parse_field(spec, "1")[1] == "Peso debe estar entre 3-300"


def test_int_rejects_decimals():
    spec = _num(type="int", messages={"invalid": "entero"})
    assert parse_field(spec, "2.5")[1] == "entero"
    assert parse_field(spec, "2")[0] == NumberValue(value=2.0)


def test_numbers_must_be_plain_ascii_decimals():
    spec = _num(constraints={}, messages={"invalid": "bad"})
    for text in ["1_70", "١٧٠", "１７０", "0x10", "1e999", "5.", "--5"]:
        expected = None if text == "5." else "bad"
        assert parse_field(spec, text)[1] == expected, text
    assert parse_field(spec, "+5")[0] == NumberValue(value=5.0)
    assert parse_field(spec, ".5")[0] == NumberValue(value=0.5)
    assert parse_field(spec, "1.5e2")[0] == NumberValue(value=150.0)


def test_int_and_enum_scores_must_be_ascii():
    count = _num(type="int", messages={"invalid": "entero"})
    score = _num(type="enum", constraints={"min": 1, "max": 4}, messages={"invalid": "bad"})
    assert parse_field(count, "1_0")[1] == "entero"
    assert parse_field(count, "٣")[1] == "entero"
    assert parse_field(score, "٣ - Abre los ojos a la voz")[1] == "bad"
    assert parse_field(score, "-1")[1] is not None


def test_underscored_and_non_latin_numbers_fail_validation(service):
    result = service.validate("bmi_calculator", {"height": "1_70", "weight": "٧٠"})
    assert result.errors == [
        "La estatura debe ser un número válido",
        "El peso debe ser un número válido",
    ]


# -- enum / bool / choice -----------------------------------------------------

def test_enum_reads_leading_score_and_label():
    spec = _num(type="enum", constraints={"min": 1, "max": 4})
    value, _ = parse_field(spec, "4 - Abre los ojos espontáneamente")
    assert value == EnumValue(score=4, label="Abre los ojos espontáneamente")


def test_enum_accepts_bare_integer():
    spec = _num(type="enum", constraints={"min": 1, "max": 4})
    value, _ = parse_field(spec, "3")
    assert value.score == 3


def test_enum_out_of_range_and_malformed():
    spec = _num(type="enum", constraints={"min": 1, "max": 4}, messages={"invalid": "bad", "range": "out"})
    assert parse_field(spec, "5 - nope")[1] == "out"
    assert parse_field(spec, "Espontánea")[1] == "bad"


def test_bool_is_case_insensitive():
    spec = CalcInput(id="f", label="F", type="bool", required=False)
    assert parse_field(spec, "TRUE")[0] == BoolValue(value=True)
    assert parse_field(spec, "False")[0] == BoolValue(value=False)
    assert parse_field(spec, "yes")[1] is not None


def test_choice_must_match_an_option():
    spec = CalcInput(id="c", label="C", type="choice", options=["A", "B"], messages={"invalid": "no"})
    assert parse_field(spec, "A")[0] == TextValue(value="A")
    assert parse_field(spec, "a")[1] == "no"


def test_generated_invalid_message_follows_field_type():
    flag = CalcInput(id="f", label="Fiebre", type="bool", required=False)
    pick = CalcInput(id="c", label="Vía", type="choice", options=["Oral"])
    assert parse_field(flag, "yes")[1] == "Fiebre debe ser true o false"
    assert parse_field(pick, "Rectal")[1] == "Vía: opción no válida"


def test_bad_flag_reports_boolean_message(service):
    result = service.validate("fluid_balance", {"patient_weight": "70", "has_fever": "yes"})
    assert result.errors == ["Fiebre debe ser true o false"]


# -- parse_inputs -------------------------------------------------------------

def test_blank_optional_bool_is_false_and_default_applies():
    specs = [
        CalcInput(id="flag", label="Flag", type="bool", required=False),
        CalcInput(id="t", label="T", required=False, default="36.5", constraints={"min": 35, "max": 42}),
    ]
    parsed, errors = parse_inputs(specs, {"t": "  "})
    assert errors == []
    assert parsed.flag("flag") is False
    assert parsed.num("t") == 36.5


def test_blank_optional_without_default_is_absent():
    specs = [CalcInput(id="age", label="Edad", required=False)]
    parsed, errors = parse_inputs(specs, {})
    assert errors == []
    assert not parsed.has("age")
    assert parsed.num("age", 45.0) == 45.0


def test_errors_accumulate_in_declaration_order():
    specs = [
        CalcInput(id="a", label="A", messages={"required": "falta A"}),
        CalcInput(id="b", label="B", messages={"invalid": "B inválido"}),
        CalcInput(id="c", label="C", constraints={"max": 1}, messages={"range": "C fuera"}),
    ]
    _, errors = parse_inputs(specs, {"b": "x", "c": "5"})
    assert errors == ["falta A", "B inválido", "C fuera"]


def test_required_when_skips_field_until_gate_matches():
    gated = CalcInput(
        id="schedule", label="Esquema", type="choice", options=["x"],
        required_when={"mode": ["therapeutic"]}, messages={"required": "esquema requerido"},
    )
    specs = [CalcInput(id="mode", label="Modo", type="text"), gated]

    _, errors = parse_inputs(specs, {"mode": "prophylactic", "schedule": "garbage"})
    assert errors == []

    _, errors = parse_inputs(specs, {"mode": "therapeutic"})
    assert errors == ["esquema requerido"]


def test_is_applicable_and_raw_number():
    spec = CalcInput(id="x", label="X", required_when={"g": ["1"]})
    assert is_applicable(spec, {"g": " 1 "})
    assert not is_applicable(spec, {})
    assert raw_number({"s": "250"}, "s") == 250.0
    assert raw_number({"s": "abc"}, "s") is None
    assert raw_number({}, "s") is None
