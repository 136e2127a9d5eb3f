"""
Braden Scale for pressure-injury risk.

Six items are scored from the bedside assessment (friction and shear on a 1-3
scale, the rest on 1-4). Lower totals mean higher risk; the banding, the
prevention plan and the reassessment schedule all key off the risk level.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from clinicalc.base import Calculator
from clinicalc.formatting import lines
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

logger = logging.getLogger(__name__)

ITEMS: Dict[str, Dict[int, str]] = {
    "sensory_perception": {
        1: "Completamente limitada - No responde a estímulos dolorosos",
        2: "Muy limitada - Responde solo a estímulos dolorosos",
        3: "Ligeramente limitada - Responde a órdenes verbales",
        4: "Sin alteraciones - Responde a órdenes verbales",
    },
    "moisture": {
        1: "Constantemente húmeda - Piel húmeda constantemente",
        2: "Muy húmeda - Piel húmeda frecuentemente",
        3: "Ocasionalmente húmeda - Requiere cambio de ropa adicional",
        4: "Raramente húmeda - Piel generalmente seca",
    },
    "activity": {
        1: "Encamado - Confinado a la cama",
        2: "En silla - Capacidad de caminar severamente limitada",
        3: "Camina ocasionalmente - Camina ocasionalmente durante el día",
        4: "Camina frecuentemente - Camina fuera de la habitación al menos dos veces al día",
    },
    "mobility": {
        1: "Completamente inmóvil - No hace cambios de posición",
        2: "Muy limitada - Ocasionalmente hace cambios leves de posición",
        3: "Ligeramente limitada - Hace cambios frecuentes pero leves",
        4: "Sin limitaciones - Hace cambios importantes y frecuentes de posición",
    },
    "nutrition": {
        1: "Muy pobre - Nunca come una comida completa",
        2: "Probablemente inadecuada - Raramente come una comida completa",
        3: "Adecuada - Come más de la mitad de la mayoría de comidas",
        4: "Excelente - Come la mayoría de cada comida",
    },
    "friction_shear": {
        1: "Problema - Requiere asistencia moderada a máxima para moverse",
        2: "Problema potencial - Se mueve débilmente o requiere mínima asistencia",
        3: "Sin problema aparente - Se mueve en cama y silla independientemente",
    },
}

LABELS = {
    "sensory_perception": "Percepción sensorial",
    "moisture": "Exposición a la humedad",
    "activity": "Actividad",
    "mobility": "Movilidad",
    "nutrition": "Nutrición",
    "friction_shear": "Fricción y deslizamiento",
}

NO_RISK, MILD, MODERATE, HIGH, VERY_HIGH = (
    "Sin riesgo", "Riesgo leve", "Riesgo moderado", "Riesgo alto", "Riesgo muy alto",
)

_INTERPRETATION = {
    NO_RISK: "✅ RIESGO MÍNIMO - Paciente con bajo riesgo de desarrollar úlceras por presión. Mantener cuidados preventivos básicos.",
    MILD: "⚠️ RIESGO LEVE - Iniciar medidas preventivas. Evaluación diaria y cambios posturales regulares.",
    MODERATE: "🟡 RIESGO MODERADO - Implementar protocolo de prevención. Cambios posturales cada 2 horas y superficies de apoyo.",
    HIGH: "🔶 RIESGO ALTO - Protocolo intensivo requerido. Cambios posturales cada 1-2 horas, colchón especializado.",
    VERY_HIGH: "🚨 RIESGO MUY ALTO - Medidas preventivas máximas. Supervisión constante, colchón de presión alterna.",
}

# item -> (section header, risk note shown when the item scores <= 2)
_SECTIONS = {
    "sensory_perception": ("🧠 PERCEPCIÓN SENSORIAL", "⚠️ FACTOR DE ALTO RIESGO - Percepción limitada"),
    "moisture": ("💧 EXPOSICIÓN A HUMEDAD", "⚠️ FACTOR DE RIESGO - Exposición excesiva a humedad"),
    "activity": ("🚶 ACTIVIDAD", "⚠️ FACTOR DE ALTO RIESGO - Actividad muy limitada"),
    "mobility": ("🔄 MOVILIDAD", "⚠️ FACTOR DE ALTO RIESGO - Movilidad severamente limitada"),
    "nutrition": ("🍽️ NUTRICIÓN", "⚠️ FACTOR DE RIESGO - Estado nutricional comprometido"),
    "friction_shear": ("⚡ FRICCIÓN Y DESLIZAMIENTO", "⚠️ FACTOR DE RIESGO - Problemas de fricción/deslizamiento"),
}

_PREVENTION = {
    NO_RISK: [
        "✅ CUIDADOS BÁSICOS:",
        "• Inspección de piel diaria",
        "• Mantener piel limpia y seca",
        "• Cambios posturales cada 4 horas",
        "• Educación al paciente y familia",
    ],
    MILD: [
        "⚠️ PREVENCIÓN ACTIVA:",
        "• Inspección de piel cada turno (8 horas)",
        "• Cambios posturales cada 3 horas",
        "• Uso de almohadas para alivio de presión",
        "• Mantener nutrición e hidratación adecuada",
        "• Protección de prominencias óseas",
    ],
    MODERATE: [
        "🟡 PROTOCOLO INTENSIVO:",
        "• Inspección de piel cada 4 horas",
        "• Cambios posturales cada 2 horas",
        "• Colchón de espuma de alta densidad",
        "• Cojines de alivio de presión",
        "• Evaluación nutricional especializada",
        "• Mantener cabecera <30° cuando sea posible",
    ],
    HIGH: [
        "🔶 PREVENCIÓN MÁXIMA:",
        "• Inspección de piel cada 2 horas",
        "• Cambios posturales cada 1-2 horas",
        "• Colchón de presión alterna o aire",
        "• Superficies de apoyo especializadas",
        "• Suplementación nutricional si indicado",
        "• Evitar fricción durante movilización",
        "• Usar dispositivos de elevación",
    ],
    VERY_HIGH: [
        "🚨 MEDIDAS MÁXIMAS:",
        "• Inspección continua de la piel",
        "• Cambios posturales cada hora",
        "• Colchón de aire de presión baja",
        "• Cama especializada si disponible",
        "• Supervisión nutricional diaria",
        "• Equipo multidisciplinario",
        "• Documentación exhaustiva",
        "• Consulta especializada en heridas",
    ],
}

_SCHEDULE = {
    NO_RISK: [
        "• Evaluación Braden: Semanal",
        "• Inspección de piel: Diaria",
        "• Documentación: Semanal",
    ],
    MILD: [
        "• Evaluación Braden: Cada 3 días",
        "• Inspección de piel: Cada turno (8h)",
        "• Documentación: Cada 3 días",
        "• Revisión de medidas: Semanal",
    ],
    MODERATE: [
        "• Evaluación Braden: Cada 48 horas",
        "• Inspección de piel: Cada 4 horas",
        "• Documentación: Diaria",
        "• Revisión del plan: Cada 3 días",
    ],
    HIGH: [
        "• Evaluación Braden: Diaria",
        "• Inspección de piel: Cada 2 horas",
        "• Documentación: Cada turno",
        "• Revisión del plan: Diaria",
        "• Evaluación nutricional: Semanal",
    ],
    VERY_HIGH: [
        "• Evaluación Braden: Cada 12 horas",
        "• Inspección de piel: Continua",
        "• Documentación: Cada 2 horas",
        "• Revisión del plan: Cada 12 horas",
        "• Consulta especializada: Inmediata",
    ],
}

# item -> (high-risk factor when <= 2, moderate factor when == 3)
_FACTORS = {
    "sensory_perception": ("Percepción sensorial muy limitada", "Percepción sensorial ligeramente limitada"),
    "moisture": ("Exposición excesiva a humedad", "Humedad ocasional"),
    "activity": ("Actividad muy limitada", "Actividad limitada"),
    "mobility": ("Movilidad muy limitada", "Movilidad ligeramente limitada"),
    "nutrition": ("Estado nutricional comprometido", "Nutrición adecuada pero mejorable"),
}


def risk_level(total: int) -> str:
    if total >= 19:
        return NO_RISK
    if total >= 15:
        return MILD
    if total >= 13:
        return MODERATE
    if total >= 10:
        return HIGH
    return VERY_HIGH


def _item_input(field_id: str) -> CalcInput:
    label = LABELS[field_id]
    table = ITEMS[field_id]
    top = max(table)
    return CalcInput(
        id=field_id, label=label, type="enum",
        options=[f"{s} - {d}" for s, d in table.items()],
        constraints={"min": 1, "max": top},
        messages={
            "required": f"{label} es obligatorio",
            "invalid": f"{label} debe ser un número válido",
            "range": f"{label} debe estar entre 1-{top}",
        },
    )


def _detailed_assessment(scores: Dict[str, int]) -> str:
    out = ["📊 EVALUACIÓN DETALLADA POR ÁREA:", ""]
    for i, (item, (header, note)) in enumerate(_SECTIONS.items()):
        score = scores[item]
        if i:
            out.append("")
        out.append(f"{header} ({score}/{max(ITEMS[item])}):")
        out.append(f"• {ITEMS[item][score]}")
        if score <= 2:
            out.append(f"• {note}")
    return lines(out)


def _prevention(level: str, chronic: bool, bed_rest: bool, critical: bool) -> str:
    out = ["🛡️ MEDIDAS PREVENTIVAS ESPECÍFICAS:", ""] + _PREVENTION[level]
    if chronic:
        out += [
            "",
            "🏥 CONSIDERACIONES ESPECIALES - CONDICIONES CRÓNICAS:",
            "• Manejo optimizado de diabetes",
            "• Control de enfermedades vasculares",
            "• Evaluación de medicamentos",
        ]
    if bed_rest:
        out += [
            "",
            "🛏️ PROTOCOLO ESPECIAL - REPOSO EN CAMA:",
            "• Programa de movilización pasiva",
            "• Ejercicios de rango de movimiento",
            "• Fisioterapia respiratoria",
        ]
    if critical:
        out += [
            "",
            "🚨 CUIDADOS CRÍTICOS:",
            "• Monitoreo hemodinámico",
            "• Manejo de sedación y analgesia",
            "• Prevención de complicaciones",
        ]
    return lines(out)


def _monitoring_schedule(level: str, critical: bool) -> str:
    out = ["📅 CRONOGRAMA DE MONITOREO:", ""] + _SCHEDULE[level]
    if critical:
        out += [
            "",
            "🚨 MONITOREO INTENSIVO (UCI):",
            "• Evaluación continua durante procedimientos",
            "• Documentación cada hora",
            "• Comunicación con equipo médico",
        ]
    return lines(out)


def _risk_factors(scores: Dict[str, int], age: Optional[float]) -> str:
    high: List[str] = []
    moderate: List[str] = []
    for item, (high_note, moderate_note) in _FACTORS.items():
        if scores[item] <= 2:
            high.append(high_note)
        elif scores[item] == 3:
            moderate.append(moderate_note)

    friction = scores["friction_shear"]
    if friction <= 1:
        high.append("Problemas significativos de fricción")
    elif friction == 2:
        moderate.append("Problemas potenciales de fricción")

    if age is not None:
        if age >= 85:
            high.append("Edad muy avanzada (≥85 años)")
        elif age >= 75:
            moderate.append("Edad avanzada (75-84 años)")
        elif age >= 65:
            moderate.append("Adulto mayor (65-74 años)")

    out = ["🔍 ANÁLISIS DE FACTORES DE RIESGO:", ""]
    if high:
        out += ["🚨 FACTORES DE ALTO RIESGO:"] + [f"• {f}" for f in high] + [""]
    if moderate:
        out += ["⚠️ FACTORES DE RIESGO MODERADO:"] + [f"• {f}" for f in moderate] + [""]
    if not high and not moderate:
        out += ["✅ Sin factores de riesgo significativos identificados", ""]

    out.append("🎯 INTERVENCIONES PRIORITARIAS:")
    if scores["sensory_perception"] <= 2 or scores["mobility"] <= 2:
        out.append("• PRIORIDAD ALTA: Cambios posturales frecuentes")
    if scores["moisture"] <= 2:
        out.append("• PRIORIDAD ALTA: Control de humedad")
    if scores["nutrition"] <= 2:
        out.append("• PRIORIDAD ALTA: Evaluación nutricional")
    if friction <= 1:
        out.append("• PRIORIDAD ALTA: Técnicas de movilización segura")
    return lines(out)


class BradenScaleCalculator(Calculator):
    definition = CalculatorDef(
        id="braden_scale",
        title="Escala de Braden",
        description="Riesgo de úlceras por presión a partir de seis dimensiones de la valoración de enfermería.",
        tags=["nursing", "skin", "risk"],
        inputs=[_item_input(item) for item in ITEMS] + [
            CalcInput(
                id="patient_age", label="Edad", type="int", required=False, canonical_unit="años",
                constraints={"min": 0, "max": 120},
                messages={
                    "invalid": "La edad debe estar entre 0-120 años",
                    "range": "La edad debe estar entre 0-120 años",
                },
            ),
            CalcInput(id="chronic_conditions", label="Condiciones crónicas", type="bool", required=False),
            CalcInput(id="bed_rest", label="Reposo en cama", type="bool", required=False),
            CalcInput(id="critical_illness", label="Enfermedad crítica", type="bool", required=False),
        ],
    )

    references = (
        Reference(
            title="Guía de Práctica Clínica para la Prevención y Tratamiento de Úlceras por Presión",
            source="Secretaría de Salud México", url="http://gpc.salud.gob.mx",
        ),
        Reference(title="Escala de Braden para Evaluación de Riesgo", source="Instituto Mexicano del Seguro Social (IMSS)", year=2023),
        Reference(title="Prevención de Úlceras por Presión en Hospitalización", source="Revista Mexicana de Enfermería", year=2022),
        Reference(title="Braden Scale for Predicting Pressure Sore Risk", source="Braden & Bergstrom, 1987 - Validated tool", year=1987),
        Reference(title="Protocolo de Prevención de UPP", source="Hospital General de México", year=2023),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        scores = {item: v.score(item) for item in ITEMS}
        total = sum(scores.values())
        level = risk_level(total)
        critical = v.flag("critical_illness")
        logger.debug("Braden total %d (%s)", total, level, extra={"calculator_id": self.calculator_id})

        return {
            "total_score": str(total),
            "risk_level": level,
            "risk_interpretation": _INTERPRETATION[level],
            "detailed_assessment": _detailed_assessment(scores),
            "prevention_recommendations": _prevention(
                level, v.flag("chronic_conditions"), v.flag("bed_rest"), critical,
            ),
            "monitoring_schedule": _monitoring_schedule(level, critical),
            "risk_factors_analysis": _risk_factors(scores, v.num("patient_age")),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        return f"""INTERPRETACIÓN CLÍNICA - ESCALA DE BRADEN

PUNTUACIÓN TOTAL: {r.get("total_score", "")}/23 puntos
NIVEL DE RIESGO: {r.get("risk_level", "")}
EVALUACIÓN: {r.get("risk_interpretation", "")}

RANGOS DE PUNTUACIÓN:
• 19-23 puntos: Sin riesgo
• 15-18 puntos: Riesgo leve
• 13-14 puntos: Riesgo moderado
• 10-12 puntos: Riesgo alto
• ≤9 puntos: Riesgo muy alto

COMPONENTES EVALUADOS:
• Percepción sensorial (1-4 puntos)
• Exposición a humedad (1-4 puntos)
• Actividad (1-4 puntos)
• Movilidad (1-4 puntos)
• Nutrición (1-4 puntos)
• Fricción y deslizamiento (1-3 puntos)

VALIDEZ CLÍNICA:
La Escala de Braden es el instrumento más utilizado mundialmente para predecir el riesgo de desarrollar úlceras por presión. Ha demostrado alta sensibilidad (83-100%) y especificidad (64-90%) en diversos estudios.

LIMITACIONES:
• No considera factores como medicamentos, comorbilidades específicas
• Requiere evaluación clínica complementaria
• Debe combinarse con juicio clínico profesional"""
