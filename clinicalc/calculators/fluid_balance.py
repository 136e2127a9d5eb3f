"""24-hour fluid balance with estimated insensible losses."""

from __future__ import annotations

import logging
from typing import Dict, List

from clinicalc.base import Calculator
from clinicalc.formatting import fmt, lines, round_half_up
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

logger = logging.getLogger(__name__)

ADULT_LOSS_PER_KG = 15.0
PEDIATRIC_LOSS_PER_KG = 20.0
FEVER_INCREASE_PER_DEGREE = 0.13

# Either spelling selects the same multiplier; anything else is neutral.
ENVIRONMENT_FACTORS = {
    "Extreme Heat": 1.8,
    "Calor Extremo": 1.8,
    "Phototherapy": 1.3,
    "Fototerapia": 1.3,
    "Incubator": 0.7,
    "Incubadora": 0.7,
    "Dry Environment": 1.2,
    "Ambiente Seco": 1.2,
}

# field id -> breakdown label
INTAKE_FIELDS = {
    "oral_intake": "Vía oral",
    "iv_fluids": "Fluidos IV",
    "enteral_feeding": "Alimentación enteral",
    "medications_fluids": "Medicamentos",
    "other_intake": "Otros",
}

OUTPUT_FIELDS = {
    "urine_output": "Diuresis",
    "vomit": "Vómitos",
    "drainage": "Drenajes",
    "diarrhea": "Diarrea",
}

# category -> Spanish band text
_BANDS = {
    "very_positive": "⚠️ BALANCE MUY POSITIVO - Riesgo de sobrecarga circulatoria",
    "positive": "⚠️ BALANCE POSITIVO - Monitoreo cardiaco recomendado",
    "balanced": "✅ BALANCE EQUILIBRADO - Dentro de rangos normales",
    "very_negative": "⚠️ BALANCE MUY NEGATIVO - Riesgo de deshidratación severa",
    "negative": "⚠️ BALANCE NEGATIVO - Considerar reposición hídrica",
    "neutral": "📊 BALANCE NEUTRAL",
}


def insensible_losses(
    weight: float,
    temperature: float = 36.5,
    fever: bool = False,
    mechanical_ventilation: bool = False,
    hyperventilation: bool = False,
    environment: str = "Normal",
) -> int:
    """Estimated mL/24h lost through skin and respiration, rounded half-up."""
    rate = PEDIATRIC_LOSS_PER_KG if weight < 20.0 else ADULT_LOSS_PER_KG
    loss = weight * rate

    if fever and temperature > 37.0:
        loss *= 1.0 + (temperature - 37.0) * FEVER_INCREASE_PER_DEGREE

    if mechanical_ventilation:
        loss *= 0.5
    elif hyperventilation:
        loss *= 1.5

    loss *= ENVIRONMENT_FACTORS.get(environment, 1.0)
    return round_half_up(loss)


def balance_category(balance: float) -> str:
    if balance > 1000:
        return "very_positive"
    if balance > 500:
        return "positive"
    if -500 <= balance <= 500:
        return "balanced"
    if balance < -1000:
        return "very_negative"
    if balance < -500:
        return "negative"
    return "neutral"


def _volume_input(field_id: str, label: str, message: str) -> CalcInput:
    return CalcInput(
        id=field_id, label=label, required=False, canonical_unit="mL",
        constraints={"min": 0},
        messages={"invalid": message, "range": message},
    )


def _breakdown(title: str, volumes: Dict[str, float], labels: Dict[str, str]) -> List[str]:
    out = [title]
    for field_id, label in labels.items():
        if volumes[field_id] > 0:
            out.append(f"• {label}: {fmt(volumes[field_id], 0)} mL")
    return out


def _recommendations(balance: float, weight: float, urine: float, fever: bool) -> str:
    out: List[str] = []
    if balance > 1000:
        out += [
            "🚨 ACCIONES INMEDIATAS:",
            "• Suspender fluidos no esenciales",
            "• Administrar diuréticos si indicado",
            "• Monitoreo cardiaco continuo",
            "• Evaluar signos de sobrecarga",
        ]
    elif balance > 500:
        out += [
            "⚠️ PRECAUCIONES:",
            "• Reducir velocidad de infusión",
            "• Monitorear signos vitales c/2h",
            "• Vigilar edema y distensión yugular",
        ]
    elif balance < -1000:
        out += [
            "🚨 ACCIONES INMEDIATAS:",
            "• Reposición hídrica urgente",
            "• Evaluar causa de pérdidas",
            "• Monitoreo hemodinámico",
            "• Considerar soluciones isotónicas",
        ]
    elif balance < -500:
        out += [
            "⚠️ PRECAUCIONES:",
            "• Incrementar ingesta hídrica",
            "• Investigar pérdidas ocultas",
            "• Vigilar signos de deshidratación",
        ]

    urine_rate = urine / 24.0 / weight  # mL/kg/h
    if urine_rate < 0.5:
        out += [
            "🚨 OLIGURIA SEVERA:",
            "• Evaluar función renal inmediatamente",
            "• Considerar causas prererenales",
            "• Vigilar electrolitos séricos",
        ]
    elif urine_rate < 1.0:
        out += [
            "⚠️ OLIGURIA:",
            "• Monitorear función renal",
            "• Evaluar estado de hidratación",
        ]
    elif urine_rate > 3.0:
        out += [
            "⚠️ POLIURIA:",
            "• Descartar diabetes insípida",
            "• Evaluar medicamentos diuréticos",
        ]

    if fever:
        out += [
            "🔥 MANEJO DE FIEBRE:",
            "• Incrementar fluidos 500mL por grado >37°C",
            "• Monitorear pérdidas insensibles",
            "• Considerar medios físicos de enfriamiento",
        ]

    out += [
        "📊 MONITOREO CONTINUO:",
        "• Balance hídrico cada 8 horas",
        "• Peso diario a la misma hora",
        "• Signos vitales cada 4 horas",
        "• Electrolitos séricos diarios",
    ]
    return lines(out)


class FluidBalanceCalculator(Calculator):
    definition = CalculatorDef(
        id="fluid_balance",
        title="Balance Hídrico 24 horas",
        description="Ingresos menos egresos medidos y pérdidas insensibles estimadas.",
        tags=["critical care", "nursing", "fluids"],
        inputs=[
            CalcInput(
                id="patient_weight", label="Peso", canonical_unit="kg",
                constraints={"gt": 0, "max": 200},
                messages={
                    "required": "El peso del paciente es obligatorio",
                    "invalid": "El peso debe ser un número válido",
                    "range": "El peso debe estar entre 1-200 kg",
                },
            ),
            CalcInput(
                id="temperature", label="Temperatura", required=False, canonical_unit="°C",
                default="36.5", constraints={"min": 35, "max": 42},
                messages={
                    "invalid": "La temperatura debe estar entre 35-42°C",
                    "range": "La temperatura debe estar entre 35-42°C",
                },
            ),
        ]
        + [
            _volume_input(fid, label, "Los ingresos deben ser números no negativos")
            for fid, label in INTAKE_FIELDS.items()
        ]
        + [
            _volume_input(fid, label, "Los egresos deben ser números no negativos")
            for fid, label in OUTPUT_FIELDS.items()
        ]
        + [
            CalcInput(id="has_fever", label="Fiebre", type="bool", required=False),
            CalcInput(id="on_mechanical_ventilation", label="Ventilación mecánica", type="bool", required=False),
            CalcInput(id="hyperventilation", label="Hiperventilación", type="bool", required=False),
            CalcInput(
                id="environmental_factors", label="Factores ambientales", type="text", required=False,
                default="Normal",
                options=["Normal", "Calor Extremo", "Fototerapia", "Incubadora", "Ambiente Seco"],
            ),
        ],
    )

    references = (
        Reference(title="Balance Hidroelectrolítico", source="Universidad Nacional Autónoma de México (UNAM)", url="https://studocu.com"),
        Reference(title="Manejo de Fluidos y Electrolitos", source="Instituto Mexicano del Seguro Social (IMSS)", year=2023),
        Reference(title="Pérdidas Insensibles en el Paciente Hospitalizado", source="SciELO México", year=2022),
        Reference(title="Balance Hídrico en Cuidados Intensivos", source="Revista Mexicana de Medicina Crítica", year=2023),
        Reference(title="Fluid Balance Monitoring", source="Nursing Care Plans and Documentation", year=2022),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        weight = v.num("patient_weight")
        fever = v.flag("has_fever")
        intake = {fid: v.num(fid, 0.0) for fid in INTAKE_FIELDS}
        output = {fid: v.num(fid, 0.0) for fid in OUTPUT_FIELDS}

        insensible = insensible_losses(
            weight,
            temperature=v.num("temperature", 36.5),
            fever=fever,
            mechanical_ventilation=v.flag("on_mechanical_ventilation"),
            hyperventilation=v.flag("hyperventilation"),
            environment=v.text("environmental_factors", "Normal"),
        )

        total_intake = sum(intake.values())
        total_output = sum(output.values()) + insensible
        balance = total_intake - total_output
        category = balance_category(balance)
        logger.debug(
            "Fluid balance %.0f mL (insensible %d mL)", balance, insensible,
            extra={"calculator_id": self.calculator_id},
        )

        intake_lines = _breakdown("📊 DESGLOSE DE INGRESOS (24h):", intake, INTAKE_FIELDS)
        intake_lines.append(f"• TOTAL INGRESOS: {fmt(total_intake, 0)} mL")
        output_lines = _breakdown("📊 DESGLOSE DE EGRESOS (24h):", output, OUTPUT_FIELDS)
        output_lines += [
            f"• Pérdidas insensibles: {insensible} mL",
            f"• TOTAL EGRESOS: {fmt(total_output, 0)} mL",
        ]

        return {
            "total_intake": fmt(total_intake, 0),
            "total_output": fmt(total_output, 0),
            "insensible_losses": str(insensible),
            "fluid_balance": fmt(balance, 0),
            "balance_category": category,
            "balance_interpretation": _BANDS[category],
            "intake_breakdown": lines(intake_lines),
            "output_breakdown": lines(output_lines),
            "clinical_recommendations": _recommendations(balance, weight, output["urine_output"], fever),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        return f"""INTERPRETACIÓN CLÍNICA - BALANCE HÍDRICO 24 HORAS

💧 RESULTADOS PRINCIPALES:
• Ingresos totales: {r.get("total_intake", "")} mL
• Egresos totales: {r.get("total_output", "")} mL
• Balance neto: {r.get("fluid_balance", "")} mL

📊 INTERPRETACIÓN:
{r.get("balance_interpretation", "")}

🔬 METODOLOGÍA UNAM/IMSS:
• Pérdidas insensibles: 15 mL/kg/día (adultos)
• Ajuste por fiebre: +13% por grado >37°C
• Factores ambientales considerados
• Ajustes por ventilación mecánica

⚠️ VALORES DE REFERENCIA:
• Balance normal: -500 a +500 mL/24h
• Diuresis normal: 0.5-3.0 mL/kg/h
• Pérdidas insensibles: 800-1200 mL/día (adulto 70kg)

📋 FACTORES INFLUYENTES:
• Temperatura corporal y fiebre
• Estado de ventilación
• Factores ambientales
• Peso corporal y edad
• Medicamentos diuréticos

🏥 PROTOCOLO MEXICANO:
• Basado en estándares UNAM
• Validado por IMSS
• Ajustado para población mexicana
• Incluye factores de altura y clima"""
