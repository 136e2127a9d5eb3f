"""APGAR newborn adaptation score."""

from __future__ import annotations

from typing import Dict, List, Optional

from clinicalc.base import Calculator
from clinicalc.formatting import lines
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

EVALUATION_TIMES = ["1 minuto", "5 minutos", "10 minutos"]

# field id -> (display name, score -> description)
_COMPONENTS: Dict[str, tuple[str, Dict[int, str]]] = {
    "appearance_color": ("Apariencia (color)", {
        0: "Cianosis generalizada o palidez",
        1: "Extremidades cianóticas, cuerpo rosado",
        2: "Rosado completamente",
    }),
    "pulse_heart_rate": ("Pulso", {
        0: "Ausente",
        1: "Menos de 100 lpm",
        2: "Más de 100 lpm",
    }),
    "grimace_reflex": ("Gesticulación", {
        0: "Sin respuesta",
        1: "Mueca o débil",
        2: "Llanto vigoroso",
    }),
    "activity_muscle_tone": ("Actividad", {
        0: "Flácido",
        1: "Flexión mínima de extremidades",
        2: "Movimientos activos",
    }),
    "respiratory_effort": ("Respiración", {
        0: "Ausente",
        1: "Débil o irregular",
        2: "Llanto fuerte",
    }),
}

# field id -> (section header, notes for score 0, 1, 2)
_ASSESSMENT: Dict[str, tuple[str, tuple[str, str, str]]] = {
    "appearance_color": ("🎨 APARIENCIA - COLOR", (
        "🚨 CIANOSIS CENTRAL - Hipoxia severa, requiere O2 inmediato",
        "⚠️ CIANOSIS PERIFÉRICA - Adaptación circulatoria en proceso",
        "✅ COLORACIÓN NORMAL - Buena oxigenación tisular",
    )),
    "pulse_heart_rate": ("💓 PULSO - FRECUENCIA CARDÍACA", (
        "🚨 ASISTOLIA - Reanimación cardiopulmonar inmediata",
        "⚠️ BRADICARDIA - Estimulación y oxigenación urgente",
        "✅ FRECUENCIA ADECUADA - Función cardíaca estable",
    )),
    "grimace_reflex": ("😤 GESTICULACIÓN - IRRITABILIDAD REFLEJA", (
        "🚨 SIN REFLEJOS - Depresión neurológica severa",
        "⚠️ RESPUESTA DÉBIL - Depresión neurológica leve-moderada",
        "✅ RESPUESTA VIGOROSA - Función neurológica adecuada",
    )),
    "activity_muscle_tone": ("💪 ACTIVIDAD - TONO MUSCULAR", (
        "🚨 HIPOTONÍA SEVERA - Depresión del sistema nervioso central",
        "⚠️ HIPOTONÍA LEVE - Adaptación neurológica en proceso",
        "✅ TONO NORMAL - Desarrollo neuromuscular adecuado",
    )),
    "respiratory_effort": ("🫁 RESPIRACIÓN - ESFUERZO RESPIRATORIO", (
        "🚨 APNEA - Ventilación asistida inmediata",
        "⚠️ RESPIRACIÓN IRREGULAR - Estimulación y oxígeno suplementario",
        "✅ RESPIRACIÓN VIGOROSA - Función pulmonar establecida",
    )),
}

GOOD, MODERATE, IMMEDIATE = "Buen estado", "Asistencia moderada", "Asistencia inmediata"


def clinical_status(score: int) -> str:
    if 7 <= score <= 10:
        return GOOD
    if 4 <= score <= 6:
        return MODERATE
    return IMMEDIATE


def _score_input(field_id: str, name: str) -> CalcInput:
    return CalcInput(
        id=field_id, label=name, type="enum",
        options=[f"{s} - {d}" for s, d in _COMPONENTS[field_id][1].items()],
        constraints={"min": 0, "max": 2},
        messages={
            "required": f"{name} es obligatorio",
            "invalid": f"{name} debe tener una puntuación válida (0-2)",
            "range": f"{name} debe tener una puntuación válida (0-2)",
        },
    )


def _interpretation(status: str, evaluation_time: str, gestational_age: Optional[float]) -> str:
    base = {
        GOOD: "✅ ESTADO ÓPTIMO - Recién nacido con excelente adaptación extrauterina. Signos vitales estables y respuesta neurológica adecuada.",
        MODERATE: "🟡 ASISTENCIA REQUERIDA - Recién nacido con adaptación comprometida. Requiere intervenciones de soporte y monitoreo estrecho.",
        IMMEDIATE: "🚨 EMERGENCIA NEONATAL - Recién nacido en estado crítico. Requiere reanimación inmediata y cuidados intensivos.",
    }[status]

    time_context = {
        "1 minuto": " Evaluación inicial al primer minuto de vida.",
        "5 minutos": " Evaluación a los 5 minutos - indicador pronóstico importante.",
        "10 minutos": " Evaluación tardía a los 10 minutos - seguimiento post-reanimación.",
    }.get(evaluation_time, "")

    gestational = ""
    if gestational_age is not None:
        if gestational_age < 28:
            gestational = " (Extremadamente prematuro - ajustar expectativas)"
        elif gestational_age < 32:
            gestational = " (Muy prematuro - considerar inmadurez orgánica)"
        elif gestational_age < 37:
            gestational = " (Prematuro - vigilar adaptación respiratoria)"
        elif gestational_age > 42:
            gestational = " (Postérmino - evaluar complicaciones asociadas)"
        else:
            gestational = " (A término - expectativas normales)"

    return base + time_context + gestational


def _detailed_assessment(scores: Dict[str, int], evaluation_time: str) -> str:
    out = [f"📊 EVALUACIÓN DETALLADA APGAR ({evaluation_time}):", ""]
    for i, (field_id, (header, notes)) in enumerate(_ASSESSMENT.items()):
        score = scores[field_id]
        if i:
            out.append("")
        out.append(f"{header} ({score}/2):")
        out.append(f"• {_COMPONENTS[field_id][1][score]}")
        out.append(f"• {notes[score]}")
    return lines(out)


def _immediate_actions(score: int, status: str, evaluation_time: str, resuscitation: bool) -> str:
    out = ["🚨 ACCIONES INMEDIATAS REQUERIDAS:", ""]
    if status == GOOD:
        out += [
            "✅ CUIDADOS DE RUTINA:",
            "• Secar y abrigar al recién nacido",
            "• Contacto piel a piel con la madre",
            "• Pinzamiento tardío del cordón (1-3 minutos)",
            "• Iniciar lactancia materna en la primera hora",
            "• Aplicar vitamina K intramuscular",
            "• Profilaxis ocular (eritromicina)",
            "• Identificación y registro del neonato",
        ]
    elif status == MODERATE:
        out += [
            "🟡 INTERVENCIONES DE SOPORTE:",
            "• Secar vigorosamente y proporcionar calor",
            "• Aspiración suave de secreciones si es necesario",
            "• Estimulación táctil suave",
            "• Oxigenoterapia a flujo libre si cianosis persiste",
            "• Monitoreo continuo de signos vitales",
            "• Reevaluar APGAR a los 5 minutos",
            "• Considerar CPAP nasal si dificultad respiratoria",
            "• Diferir procedimientos no urgentes",
        ]
    else:
        out += [
            "🚨 REANIMACIÓN NEONATAL - PROTOCOLO ABC:",
            "• A - AIRWAY: Posición, aspiración, permeabilidad",
            "• B - BREATHING: Ventilación con presión positiva",
            "• C - CIRCULATION: Compresiones torácicas si FC <60",
            "• Intubación endotraqueal si ventilación inefectiva",
            "• Acceso vascular umbilical de emergencia",
            "• Epinefrina IV/ET si bradicardia persistente",
            "• Expansión de volumen si shock hipovolémico",
            "• Traslado inmediato a UCIN",
            "• Documentación exhaustiva de la reanimación",
        ]

    if evaluation_time == "5 minutos" and score < 7:
        out += [
            "",
            "⏰ CONSIDERACIONES A LOS 5 MINUTOS:",
            "• Continuar reanimación si APGAR <7",
            "• Evaluar efectividad de intervenciones",
            "• Considerar causas reversibles",
            "• Documentar respuesta a reanimación",
            "• Planificar cuidados intensivos neonatales",
        ]

    if resuscitation:
        out += [
            "",
            "📋 PROTOCOLO POST-REANIMACIÓN:",
            "• Monitoreo hemodinámico continuo",
            "• Gasometría arterial",
            "• Glucemia y electrolitos",
            "• Radiografía de tórax",
            "• Evaluación neurológica seriada",
        ]
    return lines(out)


def _monitoring_protocol(score: int, gestational_age: Optional[float], birth_weight: Optional[float]) -> str:
    out = ["📊 PROTOCOLO DE MONITOREO NEONATAL:", ""]
    if score >= 7:
        out += [
            "✅ MONITOREO ESTÁNDAR:",
            "• Signos vitales cada 4 horas las primeras 24h",
            "• Temperatura, respiración, coloración",
            "• Alimentación y eliminación",
            "• Peso diario",
            "• Evaluación neurológica básica",
        ]
    elif score >= 4:
        out += [
            "🟡 MONITOREO INTENSIVO:",
            "• Signos vitales cada 2 horas",
            "• Monitoreo cardiorrespiratorio continuo",
            "• Saturación de oxígeno continua",
            "• Glucemia cada 6 horas",
            "• Balance hídrico estricto",
            "• Evaluación neurológica cada 8 horas",
            "• APGAR de seguimiento a los 10 minutos",
        ]
    else:
        out += [
            "🚨 MONITOREO CRÍTICO:",
            "• Monitoreo hemodinámico invasivo",
            "• Gasometrías arteriales seriadas",
            "• Presión arterial continua",
            "• Diuresis horaria",
            "• Electrolitos cada 6 horas",
            "• Evaluación neurológica continua",
            "• Ecocardiograma funcional",
            "• EEG si convulsiones o encefalopatía",
        ]

    if gestational_age is not None:
        out.append("")
        if gestational_age < 32:
            out += [
                "👶 MONITOREO GRAN PREMATURO:",
                "• Apneas y bradicardias",
                "• Síndrome de dificultad respiratoria",
                "• Hemorragia intraventricular",
                "• Enterocolitis necrotizante",
                "• Retinopatía del prematuro",
            ]
        elif gestational_age < 37:
            out += [
                "👶 MONITOREO PREMATURO:",
                "• Dificultad respiratoria transitoria",
                "• Hipoglucemia",
                "• Ictericia patológica",
                "• Problemas de termorregulación",
            ]
        elif gestational_age > 42:
            out += [
                "👶 MONITOREO POSTÉRMINO:",
                "• Síndrome de aspiración meconial",
                "• Hipoglucemia",
                "• Policitemia",
                "• Insuficiencia placentaria",
            ]

    if birth_weight is not None:
        out.append("")
        if birth_weight < 1500:
            out += [
                "⚖️ MONITOREO MUY BAJO PESO:",
                "• Hipotermia",
                "• Hipoglucemia severa",
                "• Síndrome de dificultad respiratoria",
                "• Conducto arterioso persistente",
            ]
        elif birth_weight < 2500:
            out += [
                "⚖️ MONITOREO BAJO PESO:",
                "• Hipoglucemia",
                "• Dificultades de alimentación",
                "• Pérdida de calor",
            ]
        elif birth_weight > 4000:
            out += [
                "⚖️ MONITOREO MACROSÓMICO:",
                "• Hipoglucemia",
                "• Traumatismo del parto",
                "• Policitemia",
            ]
    return lines(out)


def _prognostic_indicators(
    score: int, gestational_age: Optional[float], birth_weight: Optional[float],
    maternal_complications: bool, multiple_birth: bool,
) -> str:
    out = ["📈 INDICADORES PRONÓSTICOS:", ""]
    if score >= 7:
        out += [
            "✅ PRONÓSTICO EXCELENTE:",
            "• Adaptación extrauterina óptima",
            "• Bajo riesgo de complicaciones",
            "• Desarrollo neurológico normal esperado",
            "• Mortalidad neonatal mínima (<1%)",
        ]
    elif score >= 4:
        out += [
            "🟡 PRONÓSTICO MODERADO:",
            "• Requiere vigilancia estrecha",
            "• Riesgo moderado de complicaciones",
            "• Posibles secuelas neurológicas leves",
            "• Mortalidad neonatal baja (2-5%)",
        ]
    else:
        out += [
            "🔴 PRONÓSTICO RESERVADO:",
            "• Alto riesgo de morbimortalidad",
            "• Posibles secuelas neurológicas graves",
            "• Requiere cuidados intensivos prolongados",
            "• Mortalidad neonatal significativa (15-30%)",
        ]

    if gestational_age is not None:
        out += ["", "📅 IMPACTO DE EDAD GESTACIONAL:"]
        if gestational_age < 28:
            out.append("• Extremadamente prematuro - Supervivencia 50-80%")
        elif gestational_age < 32:
            out.append("• Muy prematuro - Supervivencia 85-95%")
        elif gestational_age < 37:
            out.append("• Prematuro - Supervivencia >95%")
        elif gestational_age > 42:
            out.append("• Postérmino - Riesgo de complicaciones aumentado")
        else:
            out.append("• A término - Pronóstico óptimo esperado")

    if birth_weight is not None:
        out += ["", "⚖️ IMPACTO DEL PESO AL NACER:"]
        if birth_weight < 1000:
            out.append("• Peso extremadamente bajo - Alto riesgo")
        elif birth_weight < 1500:
            out.append("• Muy bajo peso - Riesgo moderado-alto")
        elif birth_weight < 2500:
            out.append("• Bajo peso - Vigilancia aumentada")
        elif birth_weight > 4500:
            out.append("• Macrosomía - Riesgo de complicaciones metabólicas")
        else:
            out.append("• Peso adecuado - Pronóstico favorable")

    if maternal_complications:
        out += [
            "",
            "⚠️ COMPLICACIONES MATERNAS:",
            "• Aumentan riesgo de adaptación deficiente",
            "• Requieren monitoreo más intensivo",
            "• Posible necesidad de intervenciones adicionales",
        ]
    if multiple_birth:
        out += [
            "",
            "👥 EMBARAZO MÚLTIPLE:",
            "• Mayor riesgo de prematurez",
            "• Posible síndrome transfusor-transfundido",
            "• Competencia intrauterina por nutrientes",
        ]
    return lines(out)


def _follow_up(
    score: int, gestational_age: Optional[float], birth_weight: Optional[float], resuscitation: bool,
) -> str:
    out = ["📋 RECOMENDACIONES DE SEGUIMIENTO:", ""]
    if score >= 7:
        out += [
            "✅ SEGUIMIENTO ESTÁNDAR:",
            "• Control pediátrico a los 3-5 días",
            "• Tamiz neonatal ampliado",
            "• Vacunación según esquema nacional",
            "• Promoción de lactancia materna exclusiva",
            "• Evaluación del desarrollo a los 2 meses",
        ]
    elif score >= 4:
        out += [
            "🟡 SEGUIMIENTO INTENSIFICADO:",
            "• Control pediátrico en 24-48 horas",
            "• Evaluación neurológica a las 2 semanas",
            "• Audiometría antes del alta",
            "• Ecocardiograma si indicado",
            "• Seguimiento del desarrollo mensual",
            "• Intervención temprana si necesario",
        ]
    else:
        out += [
            "🚨 SEGUIMIENTO ESPECIALIZADO:",
            "• Neurología pediátrica urgente",
            "• Cardiología pediátrica",
            "• Programa de alto riesgo neurológico",
            "• Resonancia magnética cerebral",
            "• Evaluación oftalmológica",
            "• Fisioterapia y terapia ocupacional",
            "• Seguimiento multidisciplinario",
        ]

    if gestational_age is not None and gestational_age < 37:
        out += [
            "",
            "👶 SEGUIMIENTO PREMATUREZ:",
            "• Programa de seguimiento de prematuros",
            "• Evaluación oftalmológica (retinopatía)",
            "• Audiometría (potenciales evocados)",
            "• Evaluación del desarrollo corregida por edad",
            "• Inmunizaciones según peso y edad gestacional",
        ]
    if birth_weight is not None and birth_weight < 2500:
        out += [
            "",
            "⚖️ SEGUIMIENTO BAJO PESO:",
            "• Monitoreo estrecho del crecimiento",
            "• Suplementación nutricional si necesario",
            "• Evaluación del neurodesarrollo",
            "• Prevención de infecciones",
        ]
    if resuscitation:
        out += [
            "",
            "🚨 SEGUIMIENTO POST-REANIMACIÓN:",
            "• Evaluación neurológica especializada",
            "• EEG y neuroimagen si indicado",
            "• Programa de estimulación temprana",
            "• Evaluación cardiológica",
            "• Seguimiento pulmonar si ventilación prolongada",
        ]

    out += [
        "",
        "👨‍👩‍👧‍👦 APOYO FAMILIAR:",
        "• Educación sobre cuidados neonatales",
        "• Signos de alarma para consulta inmediata",
        "• Promoción del vínculo materno-filial",
        "• Apoyo psicológico si trauma del parto",
        "• Grupos de apoyo para padres",
    ]
    return lines(out)


class ApgarScoreCalculator(Calculator):
    definition = CalculatorDef(
        id="apgar_score",
        title="Puntuación APGAR",
        description="Adaptación del recién nacido: cinco componentes de 0 a 2 puntos.",
        tags=["obstetrics", "neonatology", "score"],
        inputs=[_score_input(fid, name) for fid, (name, _) in _COMPONENTS.items()] + [
            CalcInput(
                id="evaluation_time", label="Tiempo de evaluación", type="text",
                options=EVALUATION_TIMES,
                messages={"required": "El tiempo de evaluación es obligatorio"},
            ),
            CalcInput(
                id="gestational_age", label="Edad gestacional", required=False, canonical_unit="semanas",
                constraints={"min": 20, "max": 44},
                messages={
                    "invalid": "La edad gestacional debe estar entre 20-44 semanas",
                    "range": "La edad gestacional debe estar entre 20-44 semanas",
                },
            ),
            CalcInput(
                id="birth_weight", label="Peso al nacer", required=False, canonical_unit="g",
                constraints={"min": 500, "max": 6000},
                messages={
                    "invalid": "El peso al nacer debe estar entre 500-6000 gramos",
                    "range": "El peso al nacer debe estar entre 500-6000 gramos",
                },
            ),
            CalcInput(
                id="delivery_type", label="Tipo de parto", type="text", required=False,
                default="Vaginal espontáneo",
                options=["Vaginal espontáneo", "Vaginal instrumentado", "Cesárea"],
            ),
            CalcInput(id="maternal_complications", label="Complicaciones maternas", type="bool", required=False),
            CalcInput(id="multiple_birth", label="Embarazo múltiple", type="bool", required=False),
            CalcInput(id="resuscitation_needed", label="Requirió reanimación", type="bool", required=False),
        ],
    )

    references = (
        Reference(title="NOM-007-SSA2-2016 para la atención del embarazo, parto y puerperio", source="Diario Oficial de la Federación (DOF)", url="https://dof.gob.mx"),
        Reference(title="Guías de Reanimación Neonatal", source="Academia Mexicana de Pediatría", year=2023),
        Reference(title="Manual de Neonatología", source="Instituto Nacional de Perinatología", year=2022),
        Reference(title="A proposal for a new method of evaluation of the newborn infant", source="Virginia Apgar, 1953 - Artículo original", year=1953),
        Reference(title="Protocolo de Atención del Recién Nacido", source="Secretaría de Salud México", year=2023),
        Reference(
            title="Guía de Práctica Clínica: Prevención, Diagnóstico y Tratamiento del Recién Nacido con Trastorno del Ritmo y Frecuencia Respiratoria",
            source="Instituto Mexicano del Seguro Social (IMSS)", year=2022,
        ),
        Reference(title="Manual de Procedimientos en Sala de Partos", source="Hospital General de México", year=2023),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        scores = {fid: v.score(fid) for fid in _COMPONENTS}
        total = sum(scores.values())
        status = clinical_status(total)

        evaluation_time = v.text("evaluation_time", "1 minuto")
        gestational_age = v.num("gestational_age")
        birth_weight = v.num("birth_weight")
        resuscitation = v.flag("resuscitation_needed")

        return {
            "total_score": str(total),
            "clinical_status": status,
            "clinical_interpretation": _interpretation(status, evaluation_time, gestational_age),
            "detailed_assessment": _detailed_assessment(scores, evaluation_time),
            "immediate_actions": _immediate_actions(total, status, evaluation_time, resuscitation),
            "monitoring_protocol": _monitoring_protocol(total, gestational_age, birth_weight),
            "prognostic_indicators": _prognostic_indicators(
                total, gestational_age, birth_weight,
                v.flag("maternal_complications"), v.flag("multiple_birth"),
            ),
            "follow_up_recommendations": _follow_up(total, gestational_age, birth_weight, resuscitation),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        echoed = self.echoed_inputs(result)
        parts: List[str] = [str(echoed.score(fid)) for fid in _COMPONENTS]

        return f"""INTERPRETACIÓN CLÍNICA - PUNTUACIÓN APGAR

PUNTUACIÓN TOTAL: {r.get("total_score", "")}/10 puntos
TIEMPO DE EVALUACIÓN: {result.input_values.get("evaluation_time", "")}
ESTADO CLÍNICO: {r.get("clinical_status", "")}

COMPONENTES EVALUADOS:
- Apariencia (Color): {parts[0]}/2 puntos
- Pulso (Frecuencia Cardíaca): {parts[1]}/2 puntos
- Gesticulación (Irritabilidad): {parts[2]}/2 puntos
- Actividad (Tono Muscular): {parts[3]}/2 puntos
- Respiración (Esfuerzo): {parts[4]}/2 puntos

RANGOS DE INTERPRETACIÓN:
- 7-10 puntos: Buen estado
- 4-6 puntos: Asistencia moderada
- 0-3 puntos: Asistencia inmediata

SIGNIFICADO CLÍNICO:
La puntuación APGAR evalúa la adaptación del recién nacido a la vida extrauterina. Desarrollada por la Dra. Virginia Apgar en 1952, es un predictor confiable de la necesidad de intervención médica inmediata.

EVALUACIÓN TEMPORAL:
- 1 minuto: Refleja tolerancia al proceso del parto
- 5 minutos: Predictor de pronóstico neurológico
- 10 minutos: Evaluación post-reanimación

VALIDEZ CLÍNICA:
- Sensibilidad del 99% para identificar neonatos que requieren reanimación
- Especificidad del 95% para descartar depresión neonatal
- Correlación significativa con pH de cordón umbilical

LIMITACIONES:
- No predice desarrollo neurológico a largo plazo por sí solo
- Puede estar influenciado por medicamentos maternos
- Prematurez puede afectar algunos componentes
- Debe interpretarse en contexto clínico completo

MARCO LEGAL MEXICANO:
Basado en NOM-007-SSA2-2016 para la atención del embarazo, parto y puerperio. Evaluación obligatoria en todos los nacimientos en México."""
