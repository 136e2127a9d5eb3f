"""Gravity IV drip rate for a prescribed volume and infusion time."""

from __future__ import annotations

from typing import Dict, List, Optional

from clinicalc.base import Calculator
from clinicalc.formatting import fmt, lines
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

# gtt per mL
DROP_FACTORS = {
    "10 gtt/mL": 10.0,
    "15 gtt/mL": 15.0,
    "20 gtt/mL": 20.0,
    "60 gtt/mL (microgotero)": 60.0,
}

DEFAULT_FLUID = "Solución Salina 0.9%"


def format_duration(hours: float) -> str:
    """Whole hours and truncated minutes: ``"45 minutos"``, ``"2 horas"``, ``"1h 30min"``."""
    whole = int(hours)
    minutes = int((hours - whole) * 60)
    if whole == 0:
        return f"{minutes} minutos"
    if minutes == 0:
        return f"{whole} hora{'s' if whole > 1 else ''}"
    return f"{whole}h {minutes}min"


def _safety_warnings(flow: float, drip: float, fluid: str, weight: Optional[float]) -> str:
    out: List[str] = []
    if flow > 300.0:
        out.append("⚠️ VELOCIDAD MUY ALTA - Riesgo de sobrecarga circulatoria")
    elif flow > 200.0:
        out.append("⚠️ VELOCIDAD ALTA - Monitoreo cardiopulmonar estrecho")
    elif flow < 10.0:
        out.append("⚠️ VELOCIDAD MUY LENTA - Verificar permeabilidad")

    if drip > 60.0:
        out.append("⚠️ GOTEO MUY RÁPIDO - Difícil de contar manualmente")
    elif drip < 5.0:
        out.append("⚠️ GOTEO MUY LENTO - Riesgo de coagulación")

    if "Dextrosa" in fluid and flow > 150.0:
        out.append("⚠️ DEXTROSA RÁPIDA - Monitorear glucemia")
    elif "Sangre" in fluid and flow > 100.0:
        out.append("⚠️ HEMODERIVADOS - Velocidad máxima excedida")
    elif "Medicamento" in fluid:
        out.append("⚠️ MEDICAMENTO DILUIDO - Verificar compatibilidad")

    if weight is not None:
        if weight < 20.0 and flow > 50.0:
            out.append("⚠️ PACIENTE PEDIÁTRICO - Velocidad alta para el peso")
        elif weight > 80.0 and flow / weight > 3.0:
            out.append("⚠️ ALTA VELOCIDAD POR PESO - Monitoreo intensivo")

    if not out:
        out.append("✅ Parámetros dentro de rangos seguros")
    out += [
        "⚠️ Verificar permeabilidad de catéter antes de iniciar",
        "⚠️ Confirmar indicación médica y velocidad prescrita",
    ]
    return lines(out)


def _monitoring(fluid: str, flow: float, hours: float) -> str:
    out = [
        "📊 SIGNOS VITALES cada 2-4 horas",
        "📊 BALANCE HÍDRICO estricto",
        "📊 SITIO DE PUNCIÓN cada hora",
    ]
    if flow > 200.0:
        out += [
            "📊 MONITOREO CARDIACO continuo",
            "📊 SATURACIÓN DE OXÍGENO continua",
            "📊 SIGNOS DE SOBRECARGA cada 30 min",
        ]
    elif flow > 100.0:
        out += ["📊 SIGNOS DE SOBRECARGA cada hora", "📊 AUSCULTACIÓN PULMONAR cada 2h"]

    if "Dextrosa" in fluid:
        out += ["📊 GLUCEMIA cada 4-6 horas", "📊 SIGNOS DE HIPERGLUCEMIA"]
    elif "Salina" in fluid:
        out += ["📊 ELECTROLITOS séricos diarios", "📊 SIGNOS DE HIPERNATREMIA"]
    elif "Lactato" in fluid:
        out += ["📊 ESTADO ÁCIDO-BASE", "📊 FUNCIÓN RENAL"]
    elif "Sangre" in fluid:
        out += [
            "📊 REACCIONES TRANSFUSIONALES",
            "📊 TEMPERATURA cada 15 min primera hora",
            "📊 HEMOGLOBINA post-transfusión",
        ]

    if hours > 24.0:
        out += ["📊 EVALUACIÓN NUTRICIONAL diaria", "📊 FUNCIÓN RENAL cada 24h"]
    out += [
        "📊 DOCUMENTAR volumen administrado cada turno",
        "📊 VERIFICAR bomba de infusión si disponible",
    ]
    return lines(out)


class IVDripRateCalculator(Calculator):
    definition = CalculatorDef(
        id="iv_drip_rate",
        title="Velocidad de Goteo IV",
        description="Goteo (gtt/min) = volumen × factor ÷ minutos; flujo (mL/h) = volumen ÷ horas.",
        tags=["nursing", "fluids"],
        inputs=[
            CalcInput(
                id="total_volume", label="Volumen total", canonical_unit="mL",
                constraints={"gt": 0, "max": 5000},
                messages={
                    "required": "El volumen total es obligatorio",
                    "invalid": "El volumen debe ser un número válido",
                    "low": "El volumen debe ser mayor que cero",
                    "high": "El volumen excede el límite máximo (5000 mL)",
                },
            ),
            CalcInput(
                id="infusion_time_hours", label="Tiempo de infusión", canonical_unit="h",
                constraints={"gt": 0, "max": 48},
                messages={
                    "required": "El tiempo de infusión es obligatorio",
                    "invalid": "El tiempo debe ser un número válido",
                    "low": "El tiempo debe ser mayor que cero",
                    "high": "El tiempo excede el límite máximo (48 horas)",
                },
            ),
            CalcInput(
                id="drop_factor", label="Factor de goteo", type="choice",
                options=list(DROP_FACTORS),
                messages={
                    "required": "El factor de goteo es obligatorio",
                    "invalid": "Factor de goteo inválido",
                },
            ),
            CalcInput(
                id="fluid_type", label="Tipo de solución", type="text", required=False,
                default=DEFAULT_FLUID,
                options=[DEFAULT_FLUID, "Dextrosa 5%", "Lactato de Ringer", "Sangre/Hemoderivados", "Medicamento diluido"],
            ),
            CalcInput(
                id="patient_weight", label="Peso", required=False, canonical_unit="kg",
                constraints={"gt": 0, "max": 200},
                messages={
                    "invalid": "El peso debe ser un número válido entre 1-200 kg",
                    "range": "El peso debe ser un número válido entre 1-200 kg",
                },
            ),
        ],
    )

    references = (
        Reference(title="Cálculo de Goteo Intravenoso", source="Blog Roosevelt Hospital México", url="https://blog.roosevelt.edu.mx"),
        Reference(title="Administración de Fluidos Intravenosos", source="Sociedad Mexicana de Enfermería", year=2023),
        Reference(title="IV Flow Rate Calculations", source="Nursing Drug Calculations", year=2022),
        Reference(title="Factores de Goteo Estandarizados", source="Manual de Procedimientos de Enfermería", year=2023),
        Reference(title="Seguridad en Terapia Intravenosa", source="Instituto Mexicano del Seguro Social", year=2022),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        volume = v.num("total_volume")
        hours = v.num("infusion_time_hours")
        factor = DROP_FACTORS[v.text("drop_factor")]
        fluid = v.text("fluid_type", DEFAULT_FLUID)

        flow = volume / hours
        drip = volume * factor / (hours * 60)

        return {
            "drip_rate": fmt(drip, 1),
            "flow_rate": fmt(flow, 1),
            "drops_per_15_seconds": fmt(drip / 4.0, 1),
            "infusion_duration": format_duration(hours),
            "safety_warnings": _safety_warnings(flow, drip, fluid, v.num("patient_weight")),
            "monitoring_guidelines": _monitoring(fluid, flow, hours),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        duration = r.get("infusion_duration", "")
        return f"""INTERPRETACIÓN CLÍNICA - VELOCIDAD DE GOTEO IV

💧 RESULTADOS PRINCIPALES:
• Velocidad de goteo: {r.get("drip_rate", "")} gtt/min
• Velocidad de flujo: {r.get("flow_rate", "")} mL/h
• Gotas en 15 segundos: {r.get("drops_per_15_seconds", "")} gtt
• Duración total: {duration}

📋 PARÁMETROS DE CÁLCULO:
• Volumen total: {result.input_values.get("total_volume", "")} mL
• Factor de goteo: {result.input_values.get("drop_factor", "")}
• Duración programada: {duration}

🔬 FÓRMULAS UTILIZADAS:
• Goteo (gtt/min) = (Volumen × Factor) ÷ Tiempo(min)
• Flujo (mL/h) = Volumen ÷ Tiempo(h)
• Conteo 15 seg = Goteo ÷ 4

⚠️ VERIFICACIONES OBLIGATORIAS:
• Confirmar PRESCRIPCIÓN MÉDICA exacta
• Verificar FACTOR DE GOTEO del equipo
• Comprobar PERMEABILIDAD del catéter
• Ajustar bomba de infusión si disponible

📊 TÉCNICA DE CONTEO:
• Contar gotas durante 15 segundos
• Multiplicar por 4 para obtener gtt/min
• Ajustar manualmente la llave de paso
• Verificar cada 30-60 minutos

🏥 PROTOCOLOS MEXICANOS:
• Basado en estándares Roosevelt Hospital
• Factores de goteo validados clínicamente
• Límites de seguridad por población
• Monitoreo según tipo de fluido"""
