"""Glasgow Coma Scale with component breakdown and neurological alerts."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from clinicalc.base import Calculator
from clinicalc.formatting import lines
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

logger = logging.getLogger(__name__)

EYE = {
    1: "No abre los ojos",
    2: "Abre los ojos al dolor",
    3: "Abre los ojos a la voz",
    4: "Abre los ojos espontáneamente",
}

VERBAL = {
    1: "No respuesta verbal",
    2: "Sonidos incomprensibles",
    3: "Palabras inapropiadas",
    4: "Confuso",
    5: "Orientado",
}

MOTOR = {
    1: "No respuesta motora",
    2: "Extensión anormal (descerebración)",
    3: "Flexión anormal (decorticación)",
    4: "Flexión de retirada",
    5: "Localiza el dolor",
    6: "Obedece órdenes",
}

FULL, MILD, MODERATE, SEVERE = (
    "Conciencia plena", "Confusión leve", "Estado moderado", "Estado grave / Coma",
)

_INTERPRETATION = {
    FULL: "✅ ESTADO NEUROLÓGICO NORMAL - Paciente completamente alerta y orientado. Funciones neurológicas preservadas.",
    MILD: "🟡 ALTERACIÓN LEVE - Paciente confuso pero consciente. Requiere evaluación de causa subyacente.",
    MODERATE: "🟠 ALTERACIÓN MODERADA - Deterioro significativo del estado de conciencia. Monitoreo neurológico intensivo.",
    SEVERE: "🚨 ESTADO CRÍTICO - Coma o estado vegetativo. Requiere manejo en UCI y medidas de soporte vital.",
}

_EYE_NOTES = {
    1: "⚠️ ALERTA CRÍTICA - No apertura ocular",
    2: "⚠️ RESPUESTA AL DOLOR solamente",
    3: "⚠️ Requiere estímulo verbal",
    4: "✅ Respuesta ocular normal",
}

_VERBAL_NOTES = {
    1: "🚨 ALERTA CRÍTICA - Sin respuesta verbal",
    2: "⚠️ Solo sonidos, sin palabras reconocibles",
    3: "⚠️ Palabras sin coherencia",
    4: "⚠️ Confusión pero respuesta verbal presente",
    5: "✅ Respuesta verbal normal y orientada",
}

_MOTOR_NOTES = {
    1: "🚨 ALERTA CRÍTICA - Sin respuesta motora",
    2: "🚨 DESCEREBRACIÓN - Lesión del tronco encefálico",
    3: "🚨 DECORTICACIÓN - Lesión cortical/subcortical",
    4: "⚠️ Retirada al dolor - función motora básica",
    5: "⚠️ Localiza dolor - función motora parcial",
    6: "✅ Obedece órdenes - función motora normal",
}

_LEVEL_RECOMMENDATIONS = {
    FULL: [
        "✅ MANEJO ESTÁNDAR:",
        "• Observación clínica de rutina",
        "• Evaluación neurológica cada 4 horas",
        "• Investigar causa de consulta neurológica",
        "• Alta médica si no hay otras complicaciones",
    ],
    MILD: [
        "🟡 EVALUACIÓN DIRIGIDA:",
        "• Evaluación neurológica cada 2 horas",
        "• Investigar causas metabólicas (glucosa, electrolitos)",
        "• Considerar TAC de cráneo simple",
        "• Evaluar medicamentos y tóxicos",
        "• Monitoreo de signos vitales",
    ],
    MODERATE: [
        "🟠 MANEJO INTENSIVO:",
        "• UCI o área de cuidados intensivos",
        "• TAC de cráneo urgente",
        "• Evaluación neurológica cada hora",
        "• Protección de vía aérea",
        "• Prevención de aspiración",
        "• Consulta neuroquirúrgica",
    ],
    SEVERE: [
        "🚨 MEDIDAS DE EMERGENCIA:",
        "• UCI inmediatamente",
        "• Intubación orotraqueal si indicado",
        "• TAC de cráneo STAT",
        "• Monitoreo de presión intracraneal",
        "• Consulta neuroquirúrgica urgente",
        "• Protocolo de coma",
        "• Considerar traslado a centro especializado",
    ],
}

_CONTEXT_RECOMMENDATIONS = {
    "Urgencias": [
        "🚑 PROTOCOLO DE URGENCIAS:",
        "• Evaluación ABCDE completa",
        "• Estabilización hemodinámica",
        "• Descartar otras lesiones",
    ],
    "Postoperatorio": [
        "🔬 CUIDADOS POSTOPERATORIOS:",
        "• Evaluar complicaciones quirúrgicas",
        "• Monitoreo de sangrado intracraneal",
        "• Manejo del dolor postoperatorio",
    ],
    "UCI": [
        "🏥 MANEJO EN UCI:",
        "• Sedoanalgesia controlada",
        "• Prevención de úlceras por estrés",
        "• Fisioterapia respiratoria",
    ],
}

_LEVEL_MONITORING = {
    FULL: [
        "✅ MONITOREO BÁSICO:",
        "• Glasgow cada 4 horas",
        "• Signos vitales cada 4 horas",
        "• Evaluación pupilar cada turno",
        "• Documentación en expediente",
    ],
    MILD: [
        "🟡 MONITOREO ESTRECHO:",
        "• Glasgow cada 2 horas",
        "• Signos vitales cada 2 horas",
        "• Evaluación pupilar cada 2 horas",
        "• Función motora focal",
        "• Estado de agitación/sedación",
    ],
    MODERATE: [
        "🟠 MONITOREO INTENSIVO:",
        "• Glasgow cada hora",
        "• Signos vitales cada 30 minutos",
        "• Evaluación pupilar cada hora",
        "• Presión arterial media >80 mmHg",
        "• Saturación O2 >95%",
        "• Diuresis cada hora",
    ],
    SEVERE: [
        "🚨 MONITOREO CRÍTICO:",
        "• Glasgow cada 15-30 minutos",
        "• Monitoreo hemodinámico continuo",
        "• Presión intracraneal si disponible",
        "• Gasometría arterial cada 4-6 horas",
        "• Balance hídrico estricto",
        "• Electrolitos séricos cada 12 horas",
        "• Temperatura corporal continua",
    ],
}

_MOTOR_PROGNOSIS = {
    6: "• ✅ Mejor pronóstico - función cortical preservada",
    5: "• 🟡 Buen pronóstico - localización del dolor",
    4: "• 🟠 Pronóstico moderado - respuesta de retirada",
    3: "• 🔴 Mal pronóstico - decorticación",
    2: "• 🚨 Muy mal pronóstico - descerebración",
    1: "• 🚨 Pronóstico crítico - sin respuesta motora",
}


def consciousness_level(total: int) -> str:
    if total == 15:
        return FULL
    if total >= 13:
        return MILD
    if total >= 9:
        return MODERATE
    return SEVERE


def _score_input(field_id: str, label: str, table: Dict[int, str]) -> CalcInput:
    top = max(table)
    out_of_range = f"{label} debe estar entre 1-{top}"
    return CalcInput(
        id=field_id, label=label, type="enum",
        options=[f"{s} - {d}" for s, d in table.items()],
        constraints={"min": 1, "max": top},
        messages={
            "required": f"{label} es obligatoria",
            "invalid": out_of_range,
            "range": out_of_range,
        },
    )


def _detailed_assessment(eye: int, verbal: int, motor: int, intubated: bool) -> str:
    out = [
        "📊 EVALUACIÓN DETALLADA POR COMPONENTE:",
        "",
        f"👁️ RESPUESTA OCULAR ({eye}/4):",
        f"• {EYE[eye]}",
        f"• {_EYE_NOTES[eye]}",
        "",
        f"🗣️ RESPUESTA VERBAL ({verbal}/5):",
    ]
    if intubated:
        out += [
            "• PACIENTE INTUBADO - Evaluación verbal no aplicable",
            "• ⚠️ Usar GCS modificado para pacientes intubados",
        ]
    else:
        out += [f"• {VERBAL[verbal]}", f"• {_VERBAL_NOTES[verbal]}"]
    out += [
        "",
        f"🤲 RESPUESTA MOTORA ({motor}/6):",
        f"• {MOTOR[motor]}",
        f"• {_MOTOR_NOTES[motor]}",
    ]
    return lines(out)


def _clinical_recommendations(level: str, tbi: bool, seizures: bool, context: str) -> str:
    out = ["🏥 RECOMENDACIONES CLÍNICAS ESPECÍFICAS:", ""]
    out += _LEVEL_RECOMMENDATIONS[level]
    if tbi:
        out += [
            "",
            "🧠 TRAUMATISMO CRANEOENCEFÁLICO:",
            "• Inmovilización cervical hasta descartar lesión",
            "• Protocolo de trauma craneal",
            "• Prevenir hipertensión intracraneal",
            "• Evitar hipotensión e hipoxia",
        ]
    if seizures:
        out += [
            "",
            "⚡ ACTIVIDAD CONVULSIVA:",
            "• Protocolo de status epiléptico",
            "• Anticonvulsivantes según protocolo",
            "• EEG si disponible",
            "• Monitoreo continuo",
        ]
    if context in _CONTEXT_RECOMMENDATIONS:
        out += [""] + _CONTEXT_RECOMMENDATIONS[context]
    return lines(out)


def _monitoring_protocol(level: str, tbi: bool) -> str:
    out = ["📅 PROTOCOLO DE MONITOREO NEUROLÓGICO:", ""]
    out += _LEVEL_MONITORING[level]
    if tbi:
        out += [
            "",
            "🧠 MONITOREO ESPECIALIZADO TCE:",
            "• Evaluación de heridas externas",
            "• Signos de aumento de PIC",
            "• Líquido cefalorraquídeo (otorrea/rinorrea)",
            "• TAC de control según evolución",
        ]
    out += [
        "",
        "⚠️ PARÁMETROS DE ALERTA:",
        "• Disminución Glasgow ≥2 puntos",
        "• Cambios pupilares (anisocoria >1mm)",
        "• Deterioro motor unilateral",
        "• Signos de herniación cerebral",
        "• Vómitos en proyectil",
        "• Bradicardia + hipertensión (Cushing)",
    ]
    return lines(out)


def _age_note(age: float) -> str:
    if age < 40:
        return "• ✅ Edad joven - mejor capacidad de recuperación"
    if age < 65:
        return "• 🟡 Edad adulta - pronóstico variable"
    if age >= 80:
        return "• 🔴 Edad muy avanzada - pronóstico reservado"
    return "• 🟠 Edad avanzada - recuperación más lenta"


def _prognostic_indicators(total: int, motor: int, age: Optional[float], tbi: bool) -> str:
    out = ["📈 INDICADORES PRONÓSTICOS:", ""]
    if total == 15:
        out += [
            "✅ PRONÓSTICO EXCELENTE",
            "• Recuperación completa esperada",
            "• Riesgo mínimo de complicaciones",
        ]
    elif total >= 13:
        out += [
            "🟡 PRONÓSTICO BUENO",
            "• Recuperación probable con manejo apropiado",
            "• Monitoreo para prevenir deterioro",
        ]
    elif total >= 9:
        out += [
            "🟠 PRONÓSTICO RESERVADO",
            "• Recuperación variable según causa",
            "• Riesgo moderado de complicaciones",
            "• Requiere manejo especializado",
        ]
    elif total >= 6:
        out += [
            "🔴 PRONÓSTICO GRAVE",
            "• Alta morbimortalidad",
            "• Posibles secuelas neurológicas",
            "• Requiere cuidados intensivos",
        ]
    else:
        out += [
            "🚨 PRONÓSTICO MUY GRAVE",
            "• Mortalidad elevada (>50%)",
            "• Alto riesgo de secuelas permanentes",
            "• Considerar medidas de soporte vital",
        ]

    out += ["", "🤲 VALOR PRONÓSTICO MOTOR:", _MOTOR_PROGNOSIS[motor]]

    if age is not None:
        out += ["", "👤 FACTORES DE EDAD:", _age_note(age)]

    if tbi:
        out += [
            "",
            "🧠 PRONÓSTICO EN TCE:",
            "• Depende de mecanismo de lesión",
            "• Lesiones difusas vs focales",
            "• Tiempo hasta atención médica",
            "• Presencia de lesiones secundarias",
        ]
    return lines(out)


def _emergency_alerts(total: int, eye: int, verbal: int, motor: int, intubated: bool) -> str:
    out: List[str] = []
    if total <= 8:
        out += [
            "🚨 ALERTA CRÍTICA: Glasgow ≤8",
            "• COMA - Requiere manejo inmediato en UCI",
            "• Considerar intubación orotraqueal",
            "• Consulta neuroquirúrgica URGENTE",
            "",
        ]
    if total <= 5:
        out += [
            "🚨 ALERTA MÁXIMA: Glasgow ≤5",
            "• ESTADO VEGETATIVO/COMA PROFUNDO",
            "• Medidas de soporte vital completo",
            "• Evaluación pronóstica familiar",
            "",
        ]
    if eye == 1:
        out += [
            "👁️ ALERTA OCULAR: Sin apertura de ojos",
            "• Posible lesión del tronco cerebral",
            "• Evaluar reflejos pupilares inmediatamente",
            "",
        ]
    if verbal == 1 and not intubated:
        out += [
            "🗣️ ALERTA VERBAL: Sin respuesta verbal",
            "• Descartar afasia vs disminución del nivel de conciencia",
            "• Evaluar comprensión de órdenes",
            "",
        ]
    if motor <= 2:
        out.append("🤲 ALERTA MOTORA CRÍTICA:")
        if motor == 1:
            out.append("• Sin respuesta motora - lesión grave del SNC")
        else:
            out.append("• Postura de descerebración - lesión del tronco")
        out += ["• TAC de cráneo inmediato", "• Manejo de presión intracraneal", ""]
    if motor == 3:
        out += [
            "🤲 ALERTA MOTORA: Postura de decorticación",
            "• Lesión cortical/subcortical",
            "• Monitoreo neurológico estrecho",
            "",
        ]
    if total >= 13:
        out += [
            "✅ SIN ALERTAS CRÍTICAS",
            "• Continuar monitoreo de rutina",
            "• Investigar causa de alteración si presente",
        ]
    if not out:
        out.append("📊 Estado evaluado - Ver recomendaciones específicas")
    return lines(out)


class GlasgowComaScaleCalculator(Calculator):
    definition = CalculatorDef(
        id="glasgow_coma_scale",
        title="Escala de Coma de Glasgow",
        description="Nivel de consciencia: respuesta ocular (1-4), verbal (1-5) y motora (1-6).",
        tags=["neurology", "emergency", "score"],
        inputs=[
            _score_input("eye_response", "La respuesta ocular", EYE),
            _score_input("verbal_response", "La respuesta verbal", VERBAL),
            _score_input("motor_response", "La respuesta motora", MOTOR),
            CalcInput(
                id="patient_age", label="Edad", required=False, canonical_unit="años",
                constraints={"min": 0, "max": 120},
                messages={
                    "invalid": "La edad debe estar entre 0-120 años",
                    "range": "La edad debe estar entre 0-120 años",
                },
            ),
            CalcInput(id="is_intubated", label="Paciente intubado", type="bool", required=False),
            CalcInput(id="has_seizures", label="Convulsiones", type="bool", required=False),
            CalcInput(id="traumatic_brain_injury", label="Traumatismo craneoencefálico", type="bool", required=False),
            CalcInput(id="drugs_alcohol", label="Drogas o alcohol", type="bool", required=False),
            CalcInput(
                id="clinical_context", label="Contexto clínico", type="text", required=False,
                default="Evaluación General",
                options=["Evaluación General", "Urgencias", "Postoperatorio", "UCI"],
            ),
        ],
    )

    references = (
        Reference(title="Manual de Atención Neurológica de Urgencia", source="Instituto Nacional de Neurología y Neurocirugía (INNN)", year=2023),
        Reference(title="Escala de Coma de Glasgow en Urgencias", source="Sociedad Mexicana de Medicina de Emergencia", year=2022),
        Reference(title="Guías de Manejo del Trauma Craneoencefálico", source="Instituto Mexicano del Seguro Social (IMSS)", year=2023),
        Reference(title="Assessment of coma and impaired consciousness", source="Teasdale & Jennett, The Lancet 1974", year=1974),
        Reference(title="Neurological Assessment in Critical Care", source="American Association of Neuroscience Nurses", year=2022),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        eye = v.score("eye_response")
        verbal = v.score("verbal_response")
        motor = v.score("motor_response")
        intubated = v.flag("is_intubated")
        tbi = v.flag("traumatic_brain_injury")

        total = eye + verbal + motor
        level = consciousness_level(total)
        logger.debug("GCS %d (E%d V%d M%d)", total, eye, verbal, motor, extra={"calculator_id": self.calculator_id})

        return {
            "total_score": str(total),
            "consciousness_level": level,
            "neurological_interpretation": _INTERPRETATION[level],
            "detailed_assessment": _detailed_assessment(eye, verbal, motor, intubated),
            "clinical_recommendations": _clinical_recommendations(
                level, tbi, v.flag("has_seizures"), v.text("clinical_context", "Evaluación General"),
            ),
            "monitoring_protocol": _monitoring_protocol(level, tbi),
            "prognostic_indicators": _prognostic_indicators(total, motor, v.num("patient_age"), tbi),
            "emergency_alerts": _emergency_alerts(total, eye, verbal, motor, intubated),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        echoed = self.echoed_inputs(result)
        eye, verbal, motor = (
            echoed.score(k) for k in ("eye_response", "verbal_response", "motor_response")
        )

        return f"""INTERPRETACIÓN CLÍNICA - ESCALA DE COMA DE GLASGOW

PUNTUACIÓN TOTAL: {r.get("total_score", "")}/15 puntos
NIVEL DE CONSCIENCIA: {r.get("consciousness_level", "")}

COMPONENTES EVALUADOS:
• Respuesta Ocular: {eye}/4 puntos
• Respuesta Verbal: {verbal}/5 puntos
• Respuesta Motora: {motor}/6 puntos

RANGOS DE INTERPRETACIÓN:
• 15 puntos: Conciencia plena
• 13-14 puntos: Confusión leve
• 9-12 puntos: Estado moderado
• 3-8 puntos: Estado grave / Coma

VALIDEZ CLÍNICA:
La Escala de Glasgow es el estándar internacional para evaluar el nivel de consciencia y predecir pronóstico neurológico. Desarrollada en 1974, tiene alta confiabilidad inter-observador cuando se aplica correctamente.

CONSIDERACIONES ESPECIALES:
• Pacientes intubados: Usar GCS modificado
• Edema facial: Puede limitar evaluación ocular
• Sedación/analgesia: Puede alterar las respuestas
• Lesiones locales: Evaluar componentes no afectados

APLICACIÓN CLÍNICA:
• Evaluación inicial y seriada en trauma
• Monitoreo neurológico en UCI
• Criterio para intubación (GCS ≤8)
• Predictor pronóstico en coma"""
