"""Minute ventilation (VE = RR × VT) with setting-aware assessment and alarm limits."""

from __future__ import annotations

from typing import Dict, List

from clinicalc.base import Calculator
from clinicalc.formatting import fmt, lines
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

DEFAULT_WEIGHT_KG = 70.0
DEFAULT_SETTING = "Reposo"

MECHANICAL = "Ventilación Mecánica"
INTENSIVE_CARE = "Cuidados Intensivos"
POSTOPERATIVE = "Postoperatorio"
EXERCISE = "Ejercicio"

_SETTING_NOTES = {
    MECHANICAL: " (VM: ajustar parámetros)",
    INTENSIVE_CARE: " (UCI: objetivo 6-8 L/min)",
    POSTOPERATIVE: " (Post-Qx: vigilar depresión respiratoria)",
    EXERCISE: " (esperado aumento durante actividad)",
}

_SETTING_RECOMMENDATIONS = {
    MECHANICAL: ["Ajustar parámetros del ventilador", "Objetivo: 6-8 mL/kg peso ideal"],
    INTENSIVE_CARE: ["Protocolo de destete si apropiado", "Evaluación diaria de sedación"],
    POSTOPERATIVE: ["Vigilar efectos de anestesia", "Fisioterapia respiratoria"],
}


def ventilation_assessment(ve: float, setting: str) -> str:
    if ve < 4.0:
        base = "HIPOVENTILACIÓN - Ventilación inadecuada"
    elif ve <= 5.0:
        base = "VENTILACIÓN BAJA - Monitoreo estrecho"
    elif ve <= 8.0:
        base = "VENTILACIÓN NORMAL - Parámetros adecuados"
    elif ve <= 10.0:
        base = "VENTILACIÓN ELEVADA - Evaluar causa"
    else:
        base = "HIPERVENTILACIÓN - Intervención requerida"
    return base + _SETTING_NOTES.get(setting, "")


def _recommendations(ve: float, rr: float, tv_l: float, setting: str) -> str:
    if ve < 4.0:
        out = [
            "URGENTE: Evaluar insuficiencia respiratoria",
            "Considerar ventilación mecánica",
            "Gasometría arterial inmediata",
            "Monitoreo continuo de saturación",
        ]
    elif ve < 5.0:
        out = [
            "Aumentar frecuencia de monitoreo",
            "Evaluar función pulmonar",
            "Considerar oxigenoterapia",
            "Vigilar signos de fatiga respiratoria",
        ]
    elif ve > 10.0:
        out = [
            "Evaluar causa de hiperventilación",
            "Descartar dolor, ansiedad, acidosis",
            "Considerar sedación si apropiado",
            "Monitorear pH y CO2",
        ]
    else:
        out = ["Mantener monitoreo de rutina", "Controles según protocolo"]

    if rr < 12:
        out.append("BRADIAPNEA: Evaluar depresión del SNC")
    elif rr > 20:
        out.append("TAQUIPNEA: Investigar causa subyacente")

    if tv_l < 0.4:
        out.append("VOLUMEN BAJO: Riesgo de atelectasias")
    elif tv_l > 0.6:
        out.append("VOLUMEN ALTO: Riesgo de barotrauma")

    out += _SETTING_RECOMMENDATIONS.get(setting, [])
    return lines(out)


def _alarm_parameters(rr: float, tv_ml: float, ve: float) -> str:
    out: List[str] = ["PARÁMETROS DE ALARMA SUGERIDOS:"]

    if rr < 8:
        out.append("⚠️ FR CRÍTICA: <8 resp/min")
    elif rr < 12:
        out.append("⚠️ BRADIAPNEA: <12 resp/min")
    elif rr > 30:
        out.append("⚠️ TAQUIPNEA SEVERA: >30 resp/min")
    elif rr > 24:
        out.append("⚠️ TAQUIPNEA: >24 resp/min")

    if tv_ml < 300:
        out.append("⚠️ VT BAJO: <300 mL")
    elif tv_ml > 800:
        out.append("⚠️ VT ALTO: >800 mL")

    if ve < 4.0:
        out.append("⚠️ VE CRÍTICA: <4 L/min")
    elif ve > 12.0:
        out.append("⚠️ VE ALTA: >12 L/min")

    out += [
        "",
        "LÍMITES RECOMENDADOS:",
        "• FR: 8-30 resp/min",
        "• VT: 300-800 mL",
        "• VE: 4-12 L/min",
    ]
    return lines(out)


class MinuteVentilationCalculator(Calculator):
    definition = CalculatorDef(
        id="minute_ventilation",
        title="Ventilación Minuto",
        description="Volumen de aire movilizado por minuto: VE (L/min) = FR × VT.",
        tags=["respiratory", "critical_care"],
        inputs=[
            CalcInput(
                id="respiratory_rate", label="Frecuencia respiratoria", canonical_unit="resp/min",
                constraints={"min": 5, "max": 60},
                messages={
                    "required": "La frecuencia respiratoria es obligatoria",
                    "invalid": "La frecuencia respiratoria debe ser un número válido",
                    "range": "La frecuencia respiratoria debe estar entre 5-60 resp/min",
                },
            ),
            CalcInput(
                id="tidal_volume", label="Volumen corriente", canonical_unit="mL",
                constraints={"min": 200, "max": 1000},
                messages={
                    "required": "El volumen corriente es obligatorio",
                    "invalid": "El volumen corriente debe ser un número válido",
                    "range": "El volumen corriente debe estar entre 200-1000 mL",
                },
            ),
            CalcInput(
                id="patient_weight", label="Peso", required=False, canonical_unit="kg",
                constraints={"min": 10, "max": 200},
                messages={
                    "invalid": "El peso debe estar entre 10-200 kg",
                    "range": "El peso debe estar entre 10-200 kg",
                },
            ),
            CalcInput(
                id="clinical_setting", label="Contexto clínico", type="text", required=False,
                default=DEFAULT_SETTING,
                options=[DEFAULT_SETTING, EXERCISE, POSTOPERATIVE, INTENSIVE_CARE, MECHANICAL],
            ),
        ],
    )

    references = (
        Reference(title="MediCalculator - Ventilación Minuto", source="ScyMed Medical Calculators", url="https://scymed.com"),
        Reference(title="Parámetros Ventilatorios", source="Philips Healthcare México", url="https://philips.com.mx"),
        Reference(title="Ventilación Mecánica en UCI", source="Educación en Salud IMSS", year=2023),
        Reference(title="Calculadora de Ventilación", source="Omni Calculator en Español", url="https://www.omnicalculator.com/es"),
        Reference(title="Fisiología Respiratoria Aplicada", source="Universidad de Los Lagos Chile", year=2022),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        rr = v.num("respiratory_rate")
        tv_ml = v.num("tidal_volume")
        weight = v.num("patient_weight", DEFAULT_WEIGHT_KG)
        setting = v.text("clinical_setting", DEFAULT_SETTING)

        tv_l = tv_ml / 1000.0
        ve = rr * tv_l
        # mL/kg/min
        ve_per_kg = ve * 1000 / weight

        return {
            "minute_ventilation": fmt(ve, 2),
            "ventilation_per_kg": fmt(ve_per_kg, 1),
            "ventilation_assessment": ventilation_assessment(ve, setting),
            "clinical_recommendations": _recommendations(ve, rr, tv_l, setting),
            "alarm_parameters": _alarm_parameters(rr, tv_ml, ve),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        ve = r.get("minute_ventilation", "")
        rr = result.input_values.get("respiratory_rate", "")
        tv = result.input_values.get("tidal_volume", "")
        tv_ml = self.echoed_inputs(result).num("tidal_volume")
        tv_l = fmt(tv_ml / 1000.0, 3) if tv_ml is not None else ""
        return f"""INTERPRETACIÓN CLÍNICA - VENTILACIÓN MINUTO

VENTILACIÓN MINUTO: {ve} L/min
VENTILACIÓN/PESO: {r.get("ventilation_per_kg", "")} mL/kg/min
FRECUENCIA RESPIRATORIA: {rr} resp/min
VOLUMEN CORRIENTE: {tv} mL
EVALUACIÓN: {r.get("ventilation_assessment", "")}

FÓRMULA UTILIZADA:
VE = FR × VT
VE = {rr} × {tv_l} = {ve} L/min

VALORES DE REFERENCIA:
• VE normal en reposo: 5-8 L/min
• FR normal adultos: 12-20 resp/min
• VT normal adultos: 400-600 mL
• VE/kg normal: 80-120 mL/kg/min

SIGNIFICADO CLÍNICO:
La ventilación minuto representa el volumen total de aire movilizado por los pulmones en un minuto. Es fundamental para evaluar la eficacia ventilatoria y guiar ajustes en ventilación mecánica.

APLICACIONES:
• Monitoreo de pacientes críticos
• Ajuste de parámetros ventilatorios
• Evaluación de función pulmonar
• Detección de fatiga respiratoria"""
