"""Mean Arterial Pressure with perfusion assessment."""

from __future__ import annotations

from typing import Dict, List, Mapping

from clinicalc.base import Calculator
from clinicalc.formatting import fmt, lines
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference
from clinicalc.parsing import raw_number

# (lower bound, category, Spanish band text), checked in order
_BANDS = [
    (100.0, "elevated", "PAM ELEVADA - Riesgo de daño vascular"),
    (90.0, "high", "PAM ALTA - Considerar tratamiento antihipertensivo"),
    (70.0, "normal", "PAM NORMAL - Perfusión orgánica adecuada"),
    (60.0, "borderline", "PAM LÍMITE - Monitoreo estrecho requerido"),
    (50.0, "low", "PAM BAJA - Riesgo de hipoperfusión orgánica"),
]
_CRITICAL = ("critical", "PAM CRÍTICA - Hipoperfusión severa")

_CONTEXT_NOTES = {
    "Cuidados Intensivos": " (UCI: objetivo PAM >65 mmHg)",
    "Choque": " (Choque: objetivo PAM >65-70 mmHg)",
    "Postoperatorio": " (Post-Qx: mantener PAM >60 mmHg)",
}

_CONTEXT_RECOMMENDATIONS = {
    "Cuidados Intensivos": ["Objetivo PAM >65 mmHg en UCI", "Considerar noradrenalina si PAM <60"],
    "Choque": ["Protocolo de choque séptico/cardiogénico", "Lactato sérico para evaluar perfusión"],
    "Postoperatorio": ["Evaluar pérdidas sanguíneas", "Analgesia adecuada para controlar TA"],
}


def classify_map(map_value: float) -> tuple[str, str]:
    """Return (category, Spanish band text); first matching lower bound wins."""
    for bound, category, text in _BANDS:
        if map_value >= bound:
            return category, text
    return _CRITICAL


def _perfusion_status(map_value: float, context: str) -> str:
    if map_value >= 65:
        base = "PERFUSIÓN ADECUADA para la mayoría de órganos"
    elif map_value >= 60:
        base = "PERFUSIÓN LÍMITE - Vigilar función renal y cerebral"
    else:
        base = "HIPOPERFUSIÓN - Riesgo de falla orgánica"
    return base + _CONTEXT_NOTES.get(context, "")


def _recommendations(map_value: float, context: str) -> List[str]:
    if map_value < 50:
        recs = [
            "EMERGENCIA: Soporte vasopressor inmediato",
            "Evaluar causa de hipotensión (choque, sangrado)",
            "Monitoreo hemodinámico invasivo",
            "Acceso vascular central",
        ]
    elif map_value < 60:
        recs = [
            "URGENTE: Reposición de volumen",
            "Considerar vasopresores si no responde",
            "Monitoreo de diuresis cada hora",
            "Evaluar perfusión periférica",
        ]
    elif map_value < 70:
        recs = [
            "Monitoreo frecuente de signos vitales",
            "Evaluar estado de hidratación",
            "Vigilar función renal",
            "Considerar causas subyacentes",
        ]
    elif map_value > 100:
        recs = [
            "Evaluar hipertensión arterial",
            "Considerar tratamiento antihipertensivo",
            "Investigar daño a órgano blanco",
            "Control cada 4-6 horas",
        ]
    else:
        recs = [
            "Mantener monitoreo de rutina",
            "Controles según protocolo institucional",
            "Vigilar tendencias y cambios",
        ]
    return recs + _CONTEXT_RECOMMENDATIONS.get(context, [])


class MeanArterialPressureCalculator(Calculator):
    definition = CalculatorDef(
        id="map_calculator",
        title="Presión Arterial Media (PAM)",
        description="PAM = (PAS + 2×PAD) / 3, con evaluación de perfusión orgánica.",
        tags=["cardiology", "critical care"],
        inputs=[
            CalcInput(
                id="systolic_bp", label="Presión sistólica", canonical_unit="mmHg",
                constraints={"min": 50, "max": 250},
                messages={
                    "required": "La presión sistólica es obligatoria",
                    "invalid": "La presión sistólica debe ser un número válido",
                    "range": "La presión sistólica debe estar entre 50-250 mmHg",
                },
            ),
            CalcInput(
                id="diastolic_bp", label="Presión diastólica", canonical_unit="mmHg",
                constraints={"min": 30, "max": 150},
                messages={
                    "required": "La presión diastólica es obligatoria",
                    "invalid": "La presión diastólica debe ser un número válido",
                    "range": "La presión diastólica debe estar entre 30-150 mmHg",
                },
            ),
            CalcInput(
                id="patient_age", label="Edad", required=False, canonical_unit="años",
                constraints={"min": 1, "max": 120},
                messages={
                    "invalid": "La edad debe estar entre 1-120 años",
                    "range": "La edad debe estar entre 1-120 años",
                },
            ),
            CalcInput(
                id="clinical_context", label="Contexto clínico", type="text", required=False,
                default="Paciente Estable",
                options=["Paciente Estable", "Cuidados Intensivos", "Choque", "Postoperatorio"],
            ),
        ],
    )

    references = (
        Reference(title="Calculadora de Presión Arterial Media", source="Omni Calculator en Español", url="https://www.omnicalculator.com/es"),
        Reference(title="Manejo de la Hipertensión Arterial", source="Instituto Mexicano del Seguro Social (IMSS)", year=2023),
        Reference(title="Presión Arterial y Perfusión Orgánica", source="SciELO México - Medicina Crítica", year=2022),
        Reference(title="Guías de Hipertensión Arterial", source="Sociedad Mexicana de Cardiología", year=2023),
        Reference(title="Mean Arterial Pressure in Critical Care", source="Revista de Reumatología Clínica", year=2022),
    )

    def cross_check(self, v: ParsedInputs, raw: Mapping[str, str]) -> List[str]:
        systolic = raw_number(raw, "systolic_bp")
        diastolic = raw_number(raw, "diastolic_bp")
        if systolic is not None and diastolic is not None and systolic <= diastolic:
            return ["La presión sistólica debe ser mayor que la diastólica"]
        return []

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        systolic = v.num("systolic_bp")
        diastolic = v.num("diastolic_bp")
        context = v.text("clinical_context", "Paciente Estable")

        map_value = (systolic + 2 * diastolic) / 3
        category, band = classify_map(map_value)

        return {
            "map": fmt(map_value, 1),
            "map_category": category,
            "map_interpretation": band,
            "clinical_recommendations": lines(_recommendations(map_value, context)),
            "perfusion_status": _perfusion_status(map_value, context),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        map_value = r.get("map", "")
        systolic = result.input_values.get("systolic_bp", "").strip()
        diastolic = result.input_values.get("diastolic_bp", "").strip()

        return f"""INTERPRETACIÓN CLÍNICA - PRESIÓN ARTERIAL MEDIA

PAM CALCULADA: {map_value} mmHg
PRESIÓN SISTÓLICA: {systolic} mmHg
PRESIÓN DIASTÓLICA: {diastolic} mmHg
EVALUACIÓN: {r.get("map_interpretation", "")}

FÓRMULA UTILIZADA:
PAM = (PAS + 2×PAD) ÷ 3
PAM = ({systolic} + 2×{diastolic}) ÷ 3 = {map_value} mmHg

VALORES DE REFERENCIA:
• PAM ≥65 mmHg: Perfusión orgánica adecuada
• PAM 60-64 mmHg: Perfusión límite - monitoreo
• PAM <60 mmHg: Riesgo de hipoperfusión
• PAM <50 mmHg: Hipoperfusión crítica

SIGNIFICADO CLÍNICO:
La PAM representa la presión promedio durante el ciclo cardíaco y es el principal determinante de la perfusión orgánica. Es más confiable que la presión sistólica para evaluar la perfusión renal, cerebral y coronaria.

LIMITACIONES:
Valores pueden verse afectados por arritmias, edad del paciente, medicamentos vasoactivos y estados patológicos específicos."""
