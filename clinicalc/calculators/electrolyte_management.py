"""Sodium and potassium deficit and replacement planning."""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from clinicalc.base import Calculator
from clinicalc.formatting import fmt, lines
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

logger = logging.getLogger(__name__)

SODIUM_DISTRIBUTION = 0.6  # total body water fraction
MAX_SODIUM_CORRECTION = 12.0  # mEq/L per 24 h
MAX_POTASSIUM_IV_RATE = 20.0  # mEq/h
REDUCED_POTASSIUM_IV_RATE = 10.0  # mEq/h with cardiac disease
NORMAL_SALINE_SODIUM = 154.0  # mEq/L

ORAL = "Vía Oral"
INTRAVENOUS = "Vía Intravenosa"

_RENAL_DOSE_FACTORS = {
    "Insuficiencia Severa": 0.5,
    "Diálisis": 0.5,
    "Insuficiencia Moderada": 0.75,
}
_IMPAIRED_RENAL = ("Insuficiencia Moderada", "Insuficiencia Severa")


def sodium_replacement(
    current: float, target: float, weight: float, hours: float, neurological: bool,
) -> Tuple[float, float, float]:
    """
    Return (deficit mEq, replacement rate mEq/h, 0.9% saline volume mL).

    The corrected amount is capped at 12 mEq/L per 24 h, prorated over the
    correction window; symptomatic patients corrected over at least 24 h get
    a 25% higher cap.
    """
    deficit = (target - current) * weight * SODIUM_DISTRIBUTION
    cap = MAX_SODIUM_CORRECTION * weight * SODIUM_DISTRIBUTION * (hours / 24.0)
    if neurological and hours >= 24.0:
        cap *= 1.25
    to_correct = min(deficit, cap)
    return deficit, to_correct / hours, to_correct / NORMAL_SALINE_SODIUM * 1000


def potassium_replacement(
    current: float, target: float, weight: float, route: str, renal: str, cardiac: str,
) -> Tuple[float, float, float]:
    """Return (deficit mEq, dose mEq, IV infusion rate mEq/h; 0 when oral)."""
    deficit = (target - current) * weight * 4.0
    dose = min(80.0 if route == ORAL else 40.0, deficit)
    dose *= _RENAL_DOSE_FACTORS.get(renal, 1.0)

    if route == ORAL:
        rate = 0.0
    else:
        ceiling = MAX_POTASSIUM_IV_RATE if cardiac == "Normal" else REDUCED_POTASSIUM_IV_RATE
        rate = min(ceiling, dose / 2.0)  # at least a 2-hour infusion
    return deficit, dose, rate


def _safety_warnings(
    sodium: float, potassium: float, sodium_rate: float, potassium_rate: float,
    renal: str, cardiac: str, neurological: bool,
) -> str:
    out: List[str] = []
    if sodium < 120.0:
        out.append("🚨 HIPONATREMIA SEVERA - Riesgo de edema cerebral")
    elif sodium < 125.0:
        out.append("⚠️ HIPONATREMIA GRAVE - Monitoreo neurológico intensivo")
    elif sodium > 150.0:
        out.append("⚠️ HIPERNATREMIA - Corrección gradual obligatoria")

    if sodium_rate > 0.5 and sodium < 125.0:
        out.append("⚠️ CORRECCIÓN RÁPIDA Na+ - Riesgo de desmielinización osmótica")
    if neurological:
        out.append("🧠 SÍNTOMAS NEUROLÓGICOS - Balance riesgo/beneficio crítico")

    if potassium < 2.5:
        out.append("🚨 HIPOPOTASEMIA SEVERA - Riesgo de arritmias letales")
    elif potassium < 3.0:
        out.append("⚠️ HIPOPOTASEMIA GRAVE - Monitoreo cardíaco continuo")
    elif potassium > 5.5:
        out.append("⚠️ HIPERPOTASEMIA - Verificar función renal")

    if potassium_rate > 10.0:
        out.append("⚠️ INFUSIÓN K+ RÁPIDA - Monitoreo cardíaco obligatorio")
    if renal in _IMPAIRED_RENAL:
        out.append("🔴 FUNCIÓN RENAL COMPROMETIDA - Ajuste de dosis obligatorio")
    if cardiac != "Normal":
        out.append("❤️ ESTADO CARDÍACO ALTERADO - Infusión lenta de electrolitos")

    if not out:
        out.append("✅ Parámetros dentro de rangos de seguridad")
    out += [
        "⚠️ NUNCA administrar K+ IV en bolo",
        "⚠️ Verificar permeabilidad venosa antes de infusión",
    ]
    return lines(out)


def _monitoring(sodium: float, potassium: float, renal: str, cardiac: str) -> str:
    out = ["📊 MONITOREO OBLIGATORIO:"]
    if sodium < 125.0 or potassium < 2.5:
        out += ["• Electrolitos séricos cada 2-4 horas", "• Monitoreo cardíaco continuo"]
    elif sodium < 130.0 or potassium < 3.0:
        out += ["• Electrolitos séricos cada 6 horas", "• Monitoreo cardíaco cada 2 horas"]
    else:
        out += ["• Electrolitos séricos cada 8-12 horas", "• Signos vitales cada 4 horas"]

    if sodium < 130.0:
        out += [
            "• Evaluación neurológica cada 2 horas",
            "• Escala de coma de Glasgow",
            "• Vigilar convulsiones y alteraciones mentales",
        ]
    if potassium < 3.5 or cardiac != "Normal":
        out += [
            "• ECG cada 4 horas",
            "• Vigilar arritmias y cambios ST-T",
            "• Monitoreo de QT prolongado",
        ]
    if renal != "Normal":
        out += [
            "• Creatinina sérica diaria",
            "• Balance hídrico estricto",
            "• Diuresis cada hora",
        ]
    out += [
        "• Verificar sitio de infusión cada hora",
        "• Documentar volumen y velocidad de infusión",
        "• Tener disponible calcio IV para emergencias K+",
    ]
    return lines(out)


def _solutions(sodium_deficit: float, potassium_dose: float, route: str, renal: str) -> str:
    out = ["💊 SOLUCIONES RECOMENDADAS:"]
    if sodium_deficit > 0:
        out += [
            "• SODIO:",
            "  - Solución Salina 0.9% (154 mEq/L)",
            "  - Solución Salina 3% (513 mEq/L) solo en UCI",
            "  - Lactato de Ringer (130 mEq/L) alternativa",
        ]
    if potassium_dose > 0:
        out.append("• POTASIO:")
        if route == ORAL:
            out += [
                "  - Cloruro de Potasio VO: 10-20 mEq por toma",
                "  - Citrato de Potasio: mejor tolerancia gástrica",
                "  - Administrar con alimentos",
            ]
        else:
            out += [
                "  - Cloruro de Potasio IV: máximo 80 mEq/L",
                "  - Fosfato de Potasio: si también déficit de fósforo",
                "  - Diluir en solución glucosada o salina",
                "  - NUNCA en bolo directo",
            ]
    if renal in _IMPAIRED_RENAL:
        out += [
            "• CONSIDERACIONES RENALES:",
            "  - Reducir dosis de mantenimiento",
            "  - Evitar soluciones con fósforo",
            "  - Monitoreo más frecuente",
        ]
    out += [
        "• COMPATIBILIDADES:",
        "  - K+ compatible con glucosa, salina, lactato",
        "  - Evitar mezclar electrolitos concentrados",
        "  - Usar bombas de infusión para precisión",
    ]
    return lines(out)


def _level_input(field_id: str, label: str, lo: float, hi: float, required: str, out_of_range: str) -> CalcInput:
    return CalcInput(
        id=field_id, label=label, canonical_unit="mEq/L",
        constraints={"min": lo, "max": hi},
        messages={"required": required, "invalid": out_of_range, "range": out_of_range},
    )


class ElectrolyteManagementCalculator(Calculator):
    definition = CalculatorDef(
        id="electrolyte_management",
        title="Gestión de Electrolitos (Na+ / K+)",
        description="Déficit de sodio y potasio con límites seguros de corrección y velocidad de infusión.",
        tags=["critical care", "nephrology", "electrolytes"],
        inputs=[
            CalcInput(
                id="patient_weight", label="Peso", canonical_unit="kg",
                constraints={"gt": 0, "max": 200},
                messages={
                    "required": "El peso del paciente es obligatorio",
                    "invalid": "El peso debe estar entre 1-200 kg",
                    "range": "El peso debe estar entre 1-200 kg",
                },
            ),
            CalcInput(
                id="patient_age", label="Edad", required=False, canonical_unit="años",
                default="45", constraints={"min": 0, "max": 120},
                messages={
                    "invalid": "La edad debe estar entre 0-120 años",
                    "range": "La edad debe estar entre 0-120 años",
                },
            ),
            _level_input("current_sodium", "Sodio actual", 100, 180,
                         "El sodio sérico actual es obligatorio", "Sodio actual debe estar entre 100-180 mEq/L"),
            _level_input("target_sodium", "Sodio deseado", 135, 145,
                         "El sodio deseado es obligatorio", "Sodio deseado debe estar entre 135-145 mEq/L"),
            _level_input("current_potassium", "Potasio actual", 1.5, 6.0,
                         "El potasio sérico actual es obligatorio", "Potasio actual debe estar entre 1.5-6.0 mEq/L"),
            _level_input("target_potassium", "Potasio deseado", 3.5, 5.0,
                         "El potasio deseado es obligatorio", "Potasio deseado debe estar entre 3.5-5.0 mEq/L"),
            CalcInput(
                id="correction_time_hours", label="Tiempo de corrección", required=False,
                canonical_unit="h", default="24", constraints={"min": 6, "max": 48},
                messages={
                    "invalid": "Tiempo de corrección debe estar entre 6-48 horas",
                    "range": "Tiempo de corrección debe estar entre 6-48 horas",
                },
            ),
            CalcInput(
                id="potassium_route", label="Vía de potasio", type="text", required=False,
                default=INTRAVENOUS, options=[INTRAVENOUS, ORAL],
            ),
            CalcInput(
                id="renal_function", label="Función renal", type="text", required=False,
                default="Normal",
                options=["Normal", "Insuficiencia Leve", "Insuficiencia Moderada", "Insuficiencia Severa", "Diálisis"],
            ),
            CalcInput(
                id="cardiac_status", label="Estado cardíaco", type="text", required=False,
                default="Normal",
            ),
            CalcInput(id="diuretic_use", label="Uso de diuréticos", type="bool", required=False),
            CalcInput(id="neurological_symptoms", label="Síntomas neurológicos", type="bool", required=False),
        ],
    )

    references = (
        Reference(title="Manejo de Trastornos Hidroelectrolíticos", source="Instituto Mexicano del Seguro Social (IMSS)", year=2023),
        Reference(title="Corrección Segura de Hiponatremia", source="Blog Roosevelt Hospital México", url="https://blog.roosevelt.edu.mx"),
        Reference(title="Protocolos de Seguridad del Paciente", source="Aesculap Seguridad del Paciente México", url="https://aesculapseguridaddelpaciente.org.mx"),
        Reference(title="Reemplazo de Electrolitos en Pediatría", source="Salud Infantil México", url="https://saludinfantil.org"),
        Reference(title="Electrolyte Disorders in Critical Care", source="SlideShare Medical Education", url="https://www.slideshare.net"),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        weight = v.num("patient_weight")
        sodium = v.num("current_sodium")
        potassium = v.num("current_potassium")
        route = v.text("potassium_route", INTRAVENOUS)
        renal = v.text("renal_function", "Normal")
        cardiac = v.text("cardiac_status", "Normal")
        neurological = v.flag("neurological_symptoms")

        na_deficit, na_rate, na_volume = sodium_replacement(
            sodium, v.num("target_sodium"), weight, v.num("correction_time_hours", 24.0), neurological,
        )
        k_deficit, k_dose, k_rate = potassium_replacement(
            potassium, v.num("target_potassium"), weight, route, renal, cardiac,
        )
        logger.debug(
            "Na+ deficit %.1f mEq at %.2f mEq/h; K+ dose %.1f mEq at %.1f mEq/h",
            na_deficit, na_rate, k_dose, k_rate, extra={"calculator_id": self.calculator_id},
        )

        return {
            "sodium_deficit": fmt(na_deficit, 1),
            "sodium_replacement_rate": fmt(na_rate, 2),
            "sodium_solution_volume": fmt(na_volume, 0),
            "potassium_deficit": fmt(k_deficit, 1),
            "potassium_dose": fmt(k_dose, 1),
            "potassium_infusion_rate": fmt(k_rate, 1),
            "safety_warnings": _safety_warnings(sodium, potassium, na_rate, k_rate, renal, cardiac, neurological),
            "monitoring_protocol": _monitoring(sodium, potassium, renal, cardiac),
            "solution_recommendations": _solutions(na_deficit, k_dose, route, renal),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        inputs = result.input_values
        return f"""INTERPRETACIÓN CLÍNICA - GESTIÓN DE ELECTROLITOS

⚡ RESULTADOS PRINCIPALES:
• Déficit de Sodio: {r.get("sodium_deficit", "")} mEq
• Déficit de Potasio: {r.get("potassium_deficit", "")} mEq
• Velocidad reemplazo Na+: {r.get("sodium_replacement_rate", "")} mEq/h
• Velocidad infusión K+: {r.get("potassium_infusion_rate", "")} mEq/h

📊 NIVELES ACTUALES:
• Sodio sérico: {inputs.get("current_sodium", "")} mEq/L (Normal: 135-145)
• Potasio sérico: {inputs.get("current_potassium", "")} mEq/L (Normal: 3.5-5.0)

🔬 METODOLOGÍA IMSS:
• Déficit Na+: (Deseado - Actual) × Peso × 0.6
• Límite seguridad: 12 mEq/L por 24h
• K+ máximo IV: 20 mEq/h con monitoreo
• Factores de distribución validados

⚠️ LÍMITES DE SEGURIDAD:
• Corrección Na+ máxima: 12 mEq/L/24h
• Infusión K+ máxima: 20 mEq/h (10 mEq/h sin monitoreo)
• Concentración K+ IV: máximo 80 mEq/L periférico
• Monitoreo cardíaco obligatorio para K+ >10 mEq/h

🚨 COMPLICACIONES CRÍTICAS:
• Síndrome de desmielinización osmótica (Na+ rápido)
• Arritmias cardíacas por hipopotasemia
• Edema cerebral por hiponatremia severa
• Hiperpotasemia iatrogénica

🏥 PROTOCOLO MEXICANO IMSS:
• Basado en guías institucionales 2023
• Validado para población mexicana
• Ajustado por función renal
• Incluye factores de comorbilidad"""
