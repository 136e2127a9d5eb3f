"""Enoxaparin (low-molecular-weight heparin) dosing."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from clinicalc.base import Calculator
from clinicalc.formatting import bullet_list, fmt, round_to_step
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

PROPHYLACTIC = "Profiláctico"
THERAPEUTIC = "Terapéutico"

# schedule -> (mg/kg, frequency)
SCHEDULES: Dict[str, Tuple[float, str]] = {
    "1 mg/kg cada 12h": (1.0, "cada 12 horas"),
    "1.5 mg/kg cada 24h": (1.5, "cada 24 horas"),
}

SYRINGE_STEP_MG = 2.5


def prophylactic_dose(bleeding_risk: bool, renal: bool, elderly: bool) -> Tuple[float, str]:
    if bleeding_risk or renal:
        return 20.0, "cada 24 horas"
    if elderly:
        return 30.0, "cada 24 horas"
    return 40.0, "cada 24 horas"


def therapeutic_dose(weight: float, schedule: str, renal: bool) -> Tuple[float, str]:
    """Per-kg dose, 25% lower in renal insufficiency, rounded to the syringe step."""
    per_kg, frequency = SCHEDULES.get(schedule, SCHEDULES["1 mg/kg cada 12h"])
    dose = per_kg * weight
    if renal:
        dose *= 0.75
    return round_to_step(dose, SYRINGE_STEP_MG), frequency


def _safety_warnings(treatment: str, bleeding_risk: bool, renal: bool, elderly: bool, dose: float) -> str:
    out: List[str] = []
    if bleeding_risk:
        out.append("⚠️ ALTO RIESGO HEMORRÁGICO - Monitoreo estrecho")
    if renal:
        out.append("⚠️ INSUFICIENCIA RENAL - Dosis ajustada")
    if elderly:
        out.append("⚠️ PACIENTE GERIÁTRICO - Considerar factores adicionales")
    if treatment == THERAPEUTIC and dose > 150.0:
        out.append("⚠️ DOSIS ALTA - Verificar peso y esquema")
    out += [
        "⚠️ Verificar contraindicaciones antes de administrar",
        "⚠️ Monitorear signos de sangrado",
    ]
    return bullet_list(out)


def _monitoring(treatment: str, renal: bool, elderly: bool) -> str:
    if treatment == PROPHYLACTIC:
        out = [
            "📊 Conteo plaquetario cada 2-3 días",
            "📊 Vigilancia de signos de sangrado",
        ]
    else:
        out = [
            "📊 Anti-Xa a las 4h post-dosis (objetivo: 0.5-1.0 U/mL)",
            "📊 Conteo plaquetario cada 2-3 días",
            "📊 Creatinina sérica periódica",
        ]
    if renal:
        out += [
            "📊 Monitoreo de función renal más frecuente",
            "📊 Considerar anti-Xa si disponible",
        ]
    if elderly:
        out.append("📊 Evaluación de caídas y sangrado")
    out.append("📊 Educar al paciente sobre signos de sangrado")
    return bullet_list(out)


class HeparinDosageCalculator(Calculator):
    definition = CalculatorDef(
        id="heparin_dosage",
        title="Dosificación de Heparina (Enoxaparina)",
        description="Dosis profiláctica fija o terapéutica por peso, ajustada por riesgo y función renal.",
        tags=["hematology", "pharmacology", "anticoagulation"],
        inputs=[
            CalcInput(
                id="patient_weight", label="Peso", canonical_unit="kg",
                constraints={"min": 3, "max": 200},
                messages={
                    "required": "El peso del paciente es obligatorio",
                    "invalid": "El peso debe ser un número válido",
                    "range": "El peso debe estar entre 3 kg y 200 kg",
                },
            ),
            CalcInput(
                id="treatment_type", label="Tipo de tratamiento", type="choice",
                options=[PROPHYLACTIC, THERAPEUTIC],
                messages={
                    "required": "El tipo de tratamiento es obligatorio",
                    "invalid": "Tipo de tratamiento inválido",
                },
            ),
            CalcInput(
                id="dosing_schedule", label="Esquema de dosificación", type="choice",
                options=list(SCHEDULES),
                required_when={"treatment_type": [THERAPEUTIC]},
                messages={
                    "required": "El esquema de dosificación es obligatorio para tratamiento terapéutico",
                    "invalid": "Esquema de dosificación inválido",
                },
            ),
            CalcInput(
                id="drug_concentration", label="Concentración", required=False, canonical_unit="mg/mL",
                constraints={"gt": 0},
                messages={
                    "invalid": "La concentración debe ser un número válido mayor a 0",
                    "range": "La concentración debe ser un número válido mayor a 0",
                },
            ),
            CalcInput(id="high_bleeding_risk", label="Alto riesgo hemorrágico", type="bool", required=False),
            CalcInput(id="renal_insufficiency", label="Insuficiencia renal (ClCr <30 mL/min)", type="bool", required=False),
            CalcInput(id="elderly_patient", label="Paciente >75 años", type="bool", required=False),
        ],
    )

    references = (
        Reference(title="Protocolo de Anticoagulación con HBPM", source="Hospital Universitario de Navarra, España", year=2023),
        Reference(title="Guía ESC para el Diagnóstico y Manejo del Tromboembolismo Pulmonar", source="European Society of Cardiology", year=2022),
        Reference(title="Low-Molecular-Weight Heparin Dosing Guidelines", source="American College of Chest Physicians", year=2021),
        Reference(title="Anticoagulación en Insuficiencia Renal", source="Sociedad Española de Nefrología", year=2023),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        treatment = v.text("treatment_type")
        bleeding_risk = v.flag("high_bleeding_risk")
        renal = v.flag("renal_insufficiency")
        elderly = v.flag("elderly_patient")
        concentration: Optional[float] = v.num("drug_concentration")

        if treatment == PROPHYLACTIC:
            dose, frequency = prophylactic_dose(bleeding_risk, renal, elderly)
        else:
            dose, frequency = therapeutic_dose(v.num("patient_weight"), v.text("dosing_schedule"), renal)

        if concentration is not None:
            volume = fmt(dose / concentration, 2)
        else:
            volume = "No calculado (concentración no proporcionada)"

        return {
            "recommended_dose": fmt(dose, 1),
            "administration_frequency": frequency,
            "safety_warnings": _safety_warnings(treatment, bleeding_risk, renal, elderly, dose),
            "monitoring_recommendations": _monitoring(treatment, renal, elderly),
            "volume_to_administer": volume,
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        return f"""**Interpretación Clínica - Heparina de Bajo Peso Molecular:**

💉 **Dosis Recomendada:** {r.get("recommended_dose", "")} mg {r.get("administration_frequency", "")}
📏 **Volumen:** {r.get("volume_to_administer", "")}
🎯 **Tipo:** {result.input_values.get("treatment_type", "")}

**📋 Protocolo Basado en:**
• Hospital Universitario de Navarra (España)
• Guías Europeas de Anticoagulación
• Ajustes por función renal y factores de riesgo

**⚠️ RECORDATORIO CRÍTICO:**
• Esta calculadora es para ENOXAPARINA (Clexane®)
• Verificar contraindicaciones antes de administrar
• Monitoreo obligatorio según tipo de tratamiento
• Ajustar dosis según respuesta clínica
• En caso de sangrado, suspender inmediatamente

**🔬 Fórmulas Utilizadas:**
• Profiláctico: 40 mg/24h (20 mg si alto riesgo)
• Terapéutico: 1 mg/kg/12h o 1.5 mg/kg/24h
• Ajustes: -25% en insuficiencia renal"""
