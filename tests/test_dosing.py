"""Dosing tests: weight-based medication, pediatric formulary, enoxaparin, unit conversion.

Tests cover:
    - Dose and volume arithmetic with half-up display rounding
    - Pediatric age/prematurity/renal adjustments and contraindications
    - "Otro medicamento" gated inputs and unknown formulary entries
    - Enoxaparin prophylactic tiers and therapeutic rounding to the syringe step
    - Unit conversions, gated concentration/substance inputs
"""

import pytest

from clinicalc.calculators.heparin_dosage import prophylactic_dose, therapeutic_dose
from clinicalc.calculators.medication_dosage import safety_check
from clinicalc.calculators.pediatric_dosage import age_adjusted_dose, dosing_schedule


# -- medication dosage --------------------------------------------------------

def test_medication_reference(service):
    result = service.calculate("medication_dosage", {
        "patient_weight": "70", "dose_per_kg": "10", "concentration": "50",
    })
    assert result.result_values == {
        "total_dose": "700.00",
        "volume_to_administer": "14.00",
        "safety_check": "✅ Cálculo dentro de rangos normales",
    }


def test_medication_safety_check_order():
    assert safety_check(2000.0, 25.0, 10.0) == "⚠️ Volumen alto - Verificar cálculo"
    assert safety_check(1.0, 0.05, 10.0) == "⚠️ Volumen muy pequeño - Verificar precisión"
    assert safety_check(600.0, 5.0, 10.0) == "⚠️ Dosis alta - Consultar con médico"


def test_medication_validation(service):
    result = service.validate("medication_dosage", {
        "patient_weight": "0.2", "dose_per_kg": "0", "concentration": "",
    })
    assert result.errors == [
        "El peso debe estar entre 0.5 kg y 250 kg",
        "La dosis debe ser mayor a 0 y típicamente menor a 100 mg/kg",
        "La concentración es obligatoria",
    ]


def test_medication_narrative(service):
    result = service.calculate("medication_dosage", {
        "patient_weight": "70", "dose_per_kg": "10", "concentration": "50",
    })
    text = service.interpret("medication_dosage", result)
    assert text.startswith("**Interpretación Clínica:**")
    assert "📋 **Dosis Calculada:** 700.00 mg" in text


# -- pediatric dosage ---------------------------------------------------------

PARACETAMOL = {
    "patient_weight": "10",
    "patient_age_months": "24",
    "medication": "Paracetamol",
    "medication_concentration": "32",
}


def test_pediatric_paracetamol(service):
    values = service.calculate("pediatric_dosage", PARACETAMOL).result_values
    assert values["recommended_dose_per_kg"] == "60.0"
    assert values["total_daily_dose"] == "600.0"
    assert values["dose_per_administration"] == "150.0"
    # 150 / 32 = 4.6875
    assert values["volume_per_dose"] == "4.69"
    assert values["doses_per_day"] == "4"
    assert values["dosing_schedule"].startswith("Cada 6 horas")
    assert "Riesgo de hepatotoxicidad" in values["safety_warnings"]
    assert "👦 PREESCOLAR (2-6 años):" in values["age_appropriate_warnings"]


def test_pediatric_without_concentration(service):
    inputs = dict(PARACETAMOL)
    del inputs["medication_concentration"]
    values = service.calculate("pediatric_dosage", inputs).result_values
    assert values["volume_per_dose"] == "No calculado"


def test_pediatric_severity_scales_formulary_dose(service):
    values = service.calculate("pediatric_dosage", dict(PARACETAMOL, severity="Severa")).result_values
    assert values["recommended_dose_per_kg"] == "72.0"
    assert "DOSIS ALTA" not in values["safety_warnings"]


def test_pediatric_ibuprofen_contraindicated_under_six_months(service):
    values = service.calculate("pediatric_dosage", {
        "patient_weight": "6", "patient_age_months": "3", "medication": "Ibuprofeno",
    }).result_values
    assert values["recommended_dose_per_kg"] == "0.0"
    assert values["total_daily_dose"] == "0.0"
    assert "🚫 CONTRAINDICADO en menores de 6 meses" in values["safety_warnings"]
    assert "🚫 IBUPROFENO:" in values["age_appropriate_warnings"]


def test_age_adjustments():
    assert age_adjusted_dose(50.0, 0.5, premature=False, medication="Amoxicilina") == pytest.approx(25.0)
    assert age_adjusted_dose(50.0, 0.5, premature=True, medication="Amoxicilina") == pytest.approx(17.5)
    assert age_adjusted_dose(50.0, 6, premature=False, medication="Amoxicilina") == pytest.approx(40.0)
    assert age_adjusted_dose(50.0, 12, premature=True, medication="Amoxicilina") == pytest.approx(50.0)
    assert age_adjusted_dose(0.2, 11, premature=False, medication="Loratadina") == 0.0


def test_pediatric_renal_factor(service):
    values = service.calculate("pediatric_dosage", dict(
        PARACETAMOL, renal_function="Insuficiencia Moderada",
    )).result_values
    assert values["recommended_dose_per_kg"] == "36.0"
    assert "🔬 MONITOREO FUNCIÓN RENAL:" in values["monitoring_recommendations"]


def test_pediatric_custom_medication(service):
    values = service.calculate("pediatric_dosage", {
        "patient_weight": "10",
        "patient_age_months": "60",
        "medication": "Otro medicamento",
        "custom_dose_per_kg": "30",
        "custom_doses_per_day": "3",
    }).result_values
    assert values["recommended_dose_per_kg"] == "30.0"
    assert values["dose_per_administration"] == "100.0"
    assert values["dosing_schedule"] == "Cada 8 horas (8:00 AM, 4:00 PM, 12:00 AM)"
    assert "ESPECÍFICAS PARA" not in values["administration_instructions"]


def test_pediatric_custom_medication_requires_dose(service):
    result = service.validate("pediatric_dosage", {
        "patient_weight": "10", "patient_age_months": "60", "medication": "Otro medicamento",
    })
    assert result.errors == [
        "Debe especificar la dosis personalizada para 'Otro medicamento'",
        "Debe especificar el número de dosis por día",
    ]


def test_pediatric_custom_fields_ignored_for_formulary_drug(service):
    result = service.validate("pediatric_dosage", dict(PARACETAMOL, custom_doses_per_day="9"))
    assert result.is_valid


def test_pediatric_unknown_medication(service):
    result = service.validate("pediatric_dosage", dict(PARACETAMOL, medication="Aspirina"))
    assert result.errors == ["Medicamento no encontrado: Aspirina"]


def test_dosing_schedule_fallback():
    assert dosing_schedule(1) == "Una vez al día (cada 24 horas)"
    assert dosing_schedule(5) == "Según indicación médica"


# -- heparin ------------------------------------------------------------------

def test_prophylactic_tiers():
    assert prophylactic_dose(False, False, False) == (40.0, "cada 24 horas")
    assert prophylactic_dose(False, False, True) == (30.0, "cada 24 horas")
    assert prophylactic_dose(True, False, True) == (20.0, "cada 24 horas")
    assert prophylactic_dose(False, True, False) == (20.0, "cada 24 horas")


@pytest.mark.parametrize("weight, schedule, renal, dose, frequency", [
    (70, "1 mg/kg cada 12h", False, 70.0, "cada 12 horas"),
    (70, "1 mg/kg cada 12h", True, 52.5, "cada 12 horas"),
    (71, "1 mg/kg cada 12h", False, 70.0, "cada 12 horas"),
    (75, "1.5 mg/kg cada 24h", False, 112.5, "cada 24 horas"),
])
def test_therapeutic_dose(weight, schedule, renal, dose, frequency):
    assert therapeutic_dose(weight, schedule, renal) == (pytest.approx(dose), frequency)


def test_heparin_prophylactic_with_volume(service):
    values = service.calculate("heparin_dosage", {
        "patient_weight": "70", "treatment_type": "Profiláctico", "drug_concentration": "100",
    }).result_values
    assert values["recommended_dose"] == "40.0"
    assert values["administration_frequency"] == "cada 24 horas"
    assert values["volume_to_administer"] == "0.40"
    assert values["monitoring_recommendations"].startswith("• 📊 Conteo plaquetario cada 2-3 días")


def test_heparin_therapeutic_without_concentration(service):
    values = service.calculate("heparin_dosage", {
        "patient_weight": "70",
        "treatment_type": "Terapéutico",
        "dosing_schedule": "1 mg/kg cada 12h",
        "renal_insufficiency": "true",
    }).result_values
    assert values["recommended_dose"] == "52.5"
    assert values["volume_to_administer"] == "No calculado (concentración no proporcionada)"
    assert "• ⚠️ INSUFICIENCIA RENAL - Dosis ajustada" in values["safety_warnings"]
    assert "Anti-Xa" in values["monitoring_recommendations"]


def test_heparin_high_therapeutic_dose_warning(service):
    values = service.calculate("heparin_dosage", {
        "patient_weight": "120", "treatment_type": "Terapéutico", "dosing_schedule": "1.5 mg/kg cada 24h",
    }).result_values
    assert values["recommended_dose"] == "180.0"
    assert "DOSIS ALTA - Verificar peso y esquema" in values["safety_warnings"]


def test_heparin_therapeutic_requires_schedule(service):
    result = service.validate("heparin_dosage", {"patient_weight": "70", "treatment_type": "Terapéutico"})
    assert result.errors == ["El esquema de dosificación es obligatorio para tratamiento terapéutico"]


def test_heparin_validation(service):
    result = service.validate("heparin_dosage", {
        "patient_weight": "2", "treatment_type": "Ninguno", "drug_concentration": "0",
    })
    assert result.errors == [
        "El peso debe estar entre 3 kg y 200 kg",
        "Tipo de tratamiento inválido",
        "La concentración debe ser un número válido mayor a 0",
    ]


# -- unit converter -----------------------------------------------------------

def test_mg_to_ml(service):
    values = service.calculate("unit_converter", {
        "conversion_type": "mg → mL", "input_value": "500", "concentration": "250",
    }).result_values
    assert values["converted_value"] == "2.000"
    assert values["output_unit"] == "mL"
    assert values["conversion_formula"] == "mL = mg ÷ Concentración\nmL = 500.0 ÷ 250.0 = 2.000"
    assert values["equivalent_weight_info"] == "Concentración utilizada: 250.0 mg/mL"


def test_meq_to_mg_potassium_chloride(service):
    values = service.calculate("unit_converter", {
        "conversion_type": "mEq → mg", "input_value": "20", "substance_for_meq": "KCl (Cloruro de Potasio)",
    }).result_values
    assert values["converted_value"] == "1490.00"
    assert values["clinical_notes"].startswith("⚡ POTASIO - Monitorear ECG y función renal")
    assert "DOSIS ALTA DE K+" not in values["clinical_notes"]


def test_mg_to_meq_high_potassium_warning(service):
    values = service.calculate("unit_converter", {
        "conversion_type": "mg → mEq", "input_value": "3725", "substance_for_meq": "KCl (Cloruro de Potasio)",
    }).result_values
    assert values["converted_value"] == "50.00"
    assert "⚠️ DOSIS ALTA DE K+ - Verificar indicación" in values["clinical_notes"]


def test_mcg_and_mg(service):
    to_mg = service.calculate("unit_converter", {"conversion_type": "mcg → mg", "input_value": "500"})
    to_mcg = service.calculate("unit_converter", {"conversion_type": "mg → mcg", "input_value": "0.25"})
    assert to_mg.result_values["converted_value"] == "0.500"
    assert to_mcg.result_values["converted_value"] == "250.0"
    assert to_mg.result_values["equivalent_weight_info"] == "Factor de conversión: 1 mg = 1000 mcg"


def test_insulin_units(service):
    regular = service.calculate("unit_converter", {"conversion_type": "Unidades → mL", "input_value": "10"})
    lenta = service.calculate("unit_converter", {
        "conversion_type": "Unidades → mL", "input_value": "10", "insulin_type": "Insulina Lenta (40 U/mL)",
    })
    assert regular.result_values["converted_value"] == "0.10"
    assert "🔵 CONCENTRACIÓN U-100" in regular.result_values["clinical_notes"]
    assert lenta.result_values["converted_value"] == "0.25"
    assert "🔴 CONCENTRACIÓN U-40 - Usar jeringa específica" in lenta.result_values["clinical_notes"]


def test_converter_gated_inputs(service):
    mg = service.validate("unit_converter", {"conversion_type": "mg → mL", "input_value": "500"})
    meq = service.validate("unit_converter", {"conversion_type": "mEq → mg", "input_value": "20"})
    assert mg.errors == ["La concentración es obligatoria para conversiones mg/mL"]
    assert meq.errors == ["La sustancia es obligatoria para conversiones mEq"]


def test_converter_unknown_type(service):
    result = service.validate("unit_converter", {"conversion_type": "g → kg", "input_value": "1"})
    assert result.errors == ["Tipo de conversión no soportado"]


def test_converter_narrative(service):
    result = service.calculate("unit_converter", {
        "conversion_type": "mg → mL", "input_value": "500", "concentration": "250",
    })
    text = service.interpret("unit_converter", result)
    assert "💱 RESULTADO: 2.000 mL" in text
    assert "📐 CONVERSIÓN: mg → mL" in text
