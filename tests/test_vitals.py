"""Vital-sign calculator tests: BMI, Mean Arterial Pressure and Minute Ventilation.

Tests cover:
    - Reference values (BMI 170 cm / 70 kg, MAP 120/80, VE 12 × 500 mL)
    - Inclusive lower bounds on every band
    - Cross-field check (systolic above diastolic)
    - Formula lines rendered in the narrative
"""

import pytest

from clinicalc.calculators.bmi import imss_grade, who_category
from clinicalc.calculators.mean_arterial_pressure import classify_map
from clinicalc.calculators.minute_ventilation import ventilation_assessment


# -- BMI ----------------------------------------------------------------------

def test_bmi_reference_adult(service):
    result = service.calculate("bmi_calculator", {"height": "170", "weight": "70"})
    values = result.result_values
    assert values["bmi"] == "24.2"
    assert values["category"] == "Normal weight"
    assert values["imss_classification"] == "Peso normal"
    assert values["weight_range"] == "53.5 - 72.0 kg"


def test_bmi_lower_bound_of_normal_is_inclusive(service):
    result = service.calculate("bmi_calculator", {"height": "100", "weight": "18.5"})
    assert result.result_values["bmi"] == "18.5"
    assert result.result_values["category"] == "Normal weight"


@pytest.mark.parametrize("bmi, who, imss", [
    (18.4, "Underweight", "Bajo peso"),
    (25.0, "Overweight", "Sobrepeso"),
    (30.0, "Obese", "Obesidad grado I"),
    (35.0, "Obese", "Obesidad grado II"),
    (40.0, "Obese", "Obesidad grado III"),
])
def test_bmi_bands(bmi, who, imss):
    assert who_category(bmi) == who
    assert imss_grade(bmi) == imss


def test_bmi_range_messages(service):
    result = service.validate("bmi_calculator", {"height": "40", "weight": "301"})
    assert result.errors == [
        "La estatura debe estar entre 50-250 cm",
        "El peso debe estar entre 3-300 kg",
    ]


def test_bmi_narrative_shows_formula(service):
    result = service.calculate("bmi_calculator", {"height": "170", "weight": "70"})
    text = service.interpret("bmi_calculator", result)
    assert "IMC CALCULADO: 24.2 kg/m²" in text
    assert "IMC = 70 ÷ [1.70]² = 24.2" in text


# -- MAP ----------------------------------------------------------------------

def test_map_reference_value(service):
    result = service.calculate("map_calculator", {"systolic_bp": "120", "diastolic_bp": "80"})
    assert result.result_values["map"] == "93.3"
    assert result.result_values["map_category"] == "high"
    assert result.result_values["perfusion_status"].startswith("PERFUSIÓN ADECUADA")


@pytest.mark.parametrize("value, category", [
    (100.0, "elevated"),
    (90.0, "high"),
    (70.0, "normal"),
    (60.0, "borderline"),
    (50.0, "low"),
    (49.9, "critical"),
])
def test_map_bands(value, category):
    assert classify_map(value)[0] == category


def test_map_systolic_must_exceed_diastolic(service):
    result = service.validate("map_calculator", {"systolic_bp": "80", "diastolic_bp": "80"})
    assert result.errors == ["La presión sistólica debe ser mayor que la diastólica"]


def test_map_context_note(service):
    result = service.calculate("map_calculator", {
        "systolic_bp": "90", "diastolic_bp": "50", "clinical_context": "Choque",
    })
    assert result.result_values["map"] == "63.3"
    assert result.result_values["perfusion_status"].endswith("(Choque: objetivo PAM >65-70 mmHg)")


def test_map_narrative(service):
    result = service.calculate("map_calculator", {"systolic_bp": "120", "diastolic_bp": "80"})
    text = service.interpret("map_calculator", result)
    assert "PAM = (120 + 2×80) ÷ 3 = 93.3 mmHg" in text


# -- Minute ventilation --------------------------------------------------------

def test_minute_ventilation_reference(service):
    result = service.calculate("minute_ventilation", {"respiratory_rate": "12", "tidal_volume": "500"})
    values = result.result_values
    assert values["minute_ventilation"] == "6.00"
    assert values["ventilation_per_kg"] == "85.7"
    assert values["ventilation_assessment"] == "VENTILACIÓN NORMAL - Parámetros adecuados"
    assert "Mantener monitoreo de rutina" in values["clinical_recommendations"]


def test_minute_ventilation_uses_given_weight(service):
    result = service.calculate("minute_ventilation", {
        "respiratory_rate": "20", "tidal_volume": "400", "patient_weight": "80",
    })
    assert result.result_values["minute_ventilation"] == "8.00"
    assert result.result_values["ventilation_per_kg"] == "100.0"


def test_minute_ventilation_assessment_bands():
    assert ventilation_assessment(3.9, "Reposo").startswith("HIPOVENTILACIÓN")
    assert ventilation_assessment(5.0, "Reposo").startswith("VENTILACIÓN BAJA")
    assert ventilation_assessment(8.0, "Reposo").startswith("VENTILACIÓN NORMAL")
    assert ventilation_assessment(10.0, "Reposo").startswith("VENTILACIÓN ELEVADA")
    assert ventilation_assessment(10.1, "Reposo").startswith("HIPERVENTILACIÓN")
    assert ventilation_assessment(6.0, "Ventilación Mecánica").endswith("(VM: ajustar parámetros)")


def test_minute_ventilation_alarms(service):
    result = service.calculate("minute_ventilation", {"respiratory_rate": "6", "tidal_volume": "250"})
    alarms = result.result_values["alarm_parameters"]
    assert "FR CRÍTICA: <8 resp/min" in alarms
    assert "VT BAJO: <300 mL" in alarms
    assert "VE CRÍTICA: <4 L/min" in alarms
    assert alarms.endswith("• VE: 4-12 L/min")


def test_minute_ventilation_validation(service):
    result = service.validate("minute_ventilation", {
        "respiratory_rate": "4", "tidal_volume": "abc", "patient_weight": "5",
    })
    assert result.errors == [
        "La frecuencia respiratoria debe estar entre 5-60 resp/min",
        "El volumen corriente debe ser un número válido",
        "El peso debe estar entre 10-200 kg",
    ]


def test_minute_ventilation_narrative_formula(service):
    result = service.calculate("minute_ventilation", {"respiratory_rate": "12", "tidal_volume": "500"})
    text = service.interpret("minute_ventilation", result)
    assert "VE = 12 × 0.500 = 6.00 L/min" in text
