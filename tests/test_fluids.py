"""Fluid and electrolyte tests: 24h fluid balance, IV drip rate, Na+/K+ replacement.

Tests cover:
    - Insensible losses: weight band, fever, ventilation, environment (both spellings)
    - Balance totals and category bands
    - Drip/flow rates, 15-second counts, duration text, safety and monitoring lines
    - Sodium correction cap and potassium dose/rate limits
"""

import pytest

from clinicalc.calculators.electrolyte_management import potassium_replacement, sodium_replacement
from clinicalc.calculators.fluid_balance import balance_category, insensible_losses
from clinicalc.calculators.iv_drip_rate import format_duration


# -- fluid balance ------------------------------------------------------------

def test_fluid_balance_reference_adult(service):
    result = service.calculate("fluid_balance", {
        "patient_weight": "70",
        "oral_intake": "200",
        "iv_fluids": "1000",
        "urine_output": "800",
    })
    values = result.result_values
    assert values["insensible_losses"] == "1050"
    assert values["total_intake"] == "1200"
    assert values["total_output"] == "1850"
    assert values["fluid_balance"] == "-650"
    assert values["balance_category"] == "negative"
    assert values["balance_interpretation"].startswith("⚠️ BALANCE NEGATIVO")
    assert "• Fluidos IV: 1000 mL" in values["intake_breakdown"]
    assert "• Pérdidas insensibles: 1050 mL" in values["output_breakdown"]


def test_insensible_losses_modifiers():
    assert insensible_losses(70) == 1050
    assert insensible_losses(10) == 200
    assert insensible_losses(10, temperature=39.0, fever=True) == 252
    assert insensible_losses(10, temperature=36.0, fever=True) == 200
    assert insensible_losses(70, mechanical_ventilation=True, hyperventilation=True) == 525
    assert insensible_losses(70, hyperventilation=True) == 1575


@pytest.mark.parametrize("environment", ["Extreme Heat", "Calor Extremo"])
def test_environment_accepts_both_spellings(environment):
    assert insensible_losses(70, environment=environment) == 1890


def test_unknown_environment_is_neutral():
    assert insensible_losses(70, environment="Lunar") == 1050


@pytest.mark.parametrize("balance, category", [
    (1001, "very_positive"),
    (1000, "positive"),
    (501, "positive"),
    (500, "balanced"),
    (-500, "balanced"),
    (-501, "negative"),
    (-1000, "negative"),
    (-1001, "very_negative"),
])
def test_balance_bands(balance, category):
    assert balance_category(balance) == category


def test_fluid_balance_validation(service):
    result = service.validate("fluid_balance", {
        "patient_weight": "0", "temperature": "45", "oral_intake": "-5", "vomit": "x",
    })
    assert result.errors == [
        "El peso debe estar entre 1-200 kg",
        "La temperatura debe estar entre 35-42°C",
        "Los ingresos deben ser números no negativos",
        "Los egresos deben ser números no negativos",
    ]


def test_fluid_balance_fever_recommendations(service):
    result = service.calculate("fluid_balance", {
        "patient_weight": "70", "temperature": "39", "has_fever": "true",
        "iv_fluids": "3000", "urine_output": "1000",
    })
    values = result.result_values
    # 1050 × 1.26
    assert values["insensible_losses"] == "1323"
    assert values["fluid_balance"] == "677"
    assert values["balance_category"] == "positive"
    assert "MANEJO DE FIEBRE" in values["clinical_recommendations"]


# -- IV drip rate -------------------------------------------------------------

def test_iv_drip_reference(service):
    result = service.calculate("iv_drip_rate", {
        "total_volume": "1000", "infusion_time_hours": "8", "drop_factor": "20 gtt/mL",
    })
    values = result.result_values
    assert values["flow_rate"] == "125.0"
    assert values["drip_rate"] == "41.7"
    assert values["drops_per_15_seconds"] == "10.4"
    assert values["infusion_duration"] == "8 horas"
    assert values["safety_warnings"].startswith("✅ Parámetros dentro de rangos seguros")
    assert "📊 SIGNOS DE SOBRECARGA cada hora" in values["monitoring_guidelines"]
    assert "📊 ELECTROLITOS séricos diarios" in values["monitoring_guidelines"]


@pytest.mark.parametrize("hours, text", [
    (0.5, "30 minutos"),
    (1.0, "1 hora"),
    (2.0, "2 horas"),
    (1.5, "1h 30min"),
    (2.25, "2h 15min"),
])
def test_duration_text(hours, text):
    assert format_duration(hours) == text


def test_iv_drip_blood_products_fast(service):
    result = service.calculate("iv_drip_rate", {
        "total_volume": "500", "infusion_time_hours": "2", "drop_factor": "20 gtt/mL",
        "fluid_type": "Sangre/Hemoderivados",
    })
    warnings = result.result_values["safety_warnings"].split("\n")
    assert warnings[:3] == [
        "⚠️ VELOCIDAD ALTA - Monitoreo cardiopulmonar estrecho",
        "⚠️ GOTEO MUY RÁPIDO - Difícil de contar manualmente",
        "⚠️ HEMODERIVADOS - Velocidad máxima excedida",
    ]
    assert warnings[-1] == "⚠️ Confirmar indicación médica y velocidad prescrita"
    assert "📊 REACCIONES TRANSFUSIONALES" in result.result_values["monitoring_guidelines"]


def test_iv_drip_slow_microdrip(service):
    result = service.calculate("iv_drip_rate", {
        "total_volume": "100", "infusion_time_hours": "24", "drop_factor": "60 gtt/mL (microgotero)",
    })
    warnings = result.result_values["safety_warnings"]
    assert "VELOCIDAD MUY LENTA" in warnings
    assert "GOTEO MUY LENTO" in warnings
    assert "EVALUACIÓN NUTRICIONAL" not in result.result_values["monitoring_guidelines"]


def test_iv_drip_pediatric_weight_warning(service):
    result = service.calculate("iv_drip_rate", {
        "total_volume": "1000", "infusion_time_hours": "8", "drop_factor": "15 gtt/mL",
        "patient_weight": "15",
    })
    assert "PACIENTE PEDIÁTRICO" in result.result_values["safety_warnings"]


def test_iv_drip_validation(service):
    result = service.validate("iv_drip_rate", {
        "total_volume": "0", "infusion_time_hours": "49", "drop_factor": "30 gtt/mL", "patient_weight": "250",
    })
    assert result.errors == [
        "El volumen debe ser mayor que cero",
        "El tiempo excede el límite máximo (48 horas)",
        "Factor de goteo inválido",
        "El peso debe ser un número válido entre 1-200 kg",
    ]


def test_iv_drip_narrative(service):
    result = service.calculate("iv_drip_rate", {
        "total_volume": "1000", "infusion_time_hours": "8", "drop_factor": "20 gtt/mL",
    })
    text = service.interpret("iv_drip_rate", result)
    assert "• Velocidad de goteo: 41.7 gtt/min" in text
    assert "• Factor de goteo: 20 gtt/mL" in text


# -- electrolytes -------------------------------------------------------------

ELECTROLYTE_BASE = {
    "patient_weight": "70",
    "current_sodium": "125",
    "target_sodium": "140",
    "current_potassium": "3.0",
    "target_potassium": "4.0",
}


def test_electrolyte_reference(service):
    result = service.calculate("electrolyte_management", ELECTROLYTE_BASE)
    values = result.result_values
    assert values["sodium_deficit"] == "630.0"
    # capped at 12 mEq/L over 24 h
    assert values["sodium_replacement_rate"] == "21.00"
    assert values["sodium_solution_volume"] == "3273"
    assert values["potassium_deficit"] == "280.0"
    assert values["potassium_dose"] == "40.0"
    assert values["potassium_infusion_rate"] == "20.0"
    assert "INFUSIÓN K+ RÁPIDA" in values["safety_warnings"]


def test_sodium_cap_raised_for_neurological_symptoms():
    _, plain_rate, _ = sodium_replacement(110, 140, 70, 24, neurological=False)
    _, neuro_rate, _ = sodium_replacement(110, 140, 70, 24, neurological=True)
    _, short_rate, _ = sodium_replacement(110, 140, 70, 12, neurological=True)
    assert neuro_rate == pytest.approx(plain_rate * 1.25)
    # no extra allowance for windows shorter than a day
    assert short_rate == pytest.approx(plain_rate)


def test_sodium_small_deficit_is_not_capped():
    deficit, rate, volume = sodium_replacement(138, 140, 50, 24, neurological=False)
    assert deficit == pytest.approx(60.0)
    assert rate == pytest.approx(2.5)
    assert volume == pytest.approx(60.0 / 154 * 1000)


def test_potassium_limits():
    # oral: up to 80 mEq, no infusion rate
    assert potassium_replacement(3.0, 4.0, 70, "Vía Oral", "Normal", "Normal") == pytest.approx((280.0, 80.0, 0.0))
    # cardiac disease slows the IV rate
    assert potassium_replacement(3.0, 4.0, 70, "Vía Intravenosa", "Normal", "Arritmia")[2] == pytest.approx(10.0)
    # severe renal insufficiency halves the dose
    assert potassium_replacement(3.0, 4.0, 70, "Vía Intravenosa", "Insuficiencia Severa", "Normal") == pytest.approx(
        (280.0, 20.0, 10.0)
    )


def test_electrolyte_validation(service):
    inputs = dict(ELECTROLYTE_BASE, current_sodium="90", target_potassium="6", correction_time_hours="4")
    result = service.validate("electrolyte_management", inputs)
    assert result.errors == [
        "Sodio actual debe estar entre 100-180 mEq/L",
        "Potasio deseado debe estar entre 3.5-5.0 mEq/L",
        "Tiempo de corrección debe estar entre 6-48 horas",
    ]


def test_electrolyte_severe_hyponatremia_warnings(service):
    inputs = dict(ELECTROLYTE_BASE, current_sodium="118", neurological_symptoms="true")
    values = service.calculate("electrolyte_management", inputs).result_values
    assert "🚨 HIPONATREMIA SEVERA - Riesgo de edema cerebral" in values["safety_warnings"]
    assert "CORRECCIÓN RÁPIDA Na+" in values["safety_warnings"]
    assert "Escala de coma de Glasgow" in values["monitoring_protocol"]
