"""
Pediatric weight-based dosing from a small formulary.

The daily dose per kg comes from the formulary (scaled by severity) or from
the caller for "Otro medicamento", and is then adjusted for age,
prematurity, drug-specific contraindications and renal function, in that
order.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from clinicalc.base import Calculator
from clinicalc.formatting import fmt, lines
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

OTHER = "Otro medicamento"


class Medication(BaseModel):
    model_config = ConfigDict(frozen=True)

    standard_dose: float  # mg/kg/day
    max_dose: float
    doses_per_day: int
    min_age_months: int
    max_age_months: int = 216
    route: str
    conditions: List[str]


FORMULARY: Dict[str, Medication] = {
    "Amoxicilina": Medication(
        standard_dose=50.0, max_dose=90.0, doses_per_day=2, min_age_months=1, route="Oral",
        conditions=["Infección Respiratoria", "Infección del Oído", "Infección Urinaria"],
    ),
    "Paracetamol": Medication(
        standard_dose=60.0, max_dose=90.0, doses_per_day=4, min_age_months=1, route="Oral/IV",
        conditions=["Fiebre", "Dolor/Inflamación"],
    ),
    "Ibuprofeno": Medication(
        standard_dose=20.0, max_dose=40.0, doses_per_day=3, min_age_months=6, route="Oral",
        conditions=["Fiebre", "Dolor/Inflamación"],
    ),
    "Azitromicina": Medication(
        standard_dose=10.0, max_dose=12.0, doses_per_day=1, min_age_months=6, route="Oral",
        conditions=["Infección Respiratoria", "Infección del Oído"],
    ),
    "Cefixima": Medication(
        standard_dose=8.0, max_dose=12.0, doses_per_day=2, min_age_months=6, route="Oral",
        conditions=["Infección Respiratoria", "Infección Urinaria"],
    ),
    # dose of the trimethoprim component
    "Trimetoprim-Sulfametoxazol": Medication(
        standard_dose=8.0, max_dose=12.0, doses_per_day=2, min_age_months=2, route="Oral",
        conditions=["Infección Urinaria", "Infección Gastrointestinal"],
    ),
    "Claritromicina": Medication(
        standard_dose=15.0, max_dose=20.0, doses_per_day=2, min_age_months=6, route="Oral",
        conditions=["Infección Respiratoria"],
    ),
    "Dexametasona": Medication(
        standard_dose=0.6, max_dose=1.0, doses_per_day=1, min_age_months=1, route="Oral/IV",
        conditions=["Asma/Broncoespasmo", "Inflamación"],
    ),
    "Salbutamol": Medication(
        standard_dose=0.3, max_dose=0.5, doses_per_day=3, min_age_months=2, route="Oral/Inhalado",
        conditions=["Asma/Broncoespasmo"],
    ),
    "Loratadina": Medication(
        standard_dose=0.2, max_dose=0.3, doses_per_day=1, min_age_months=12, route="Oral",
        conditions=["Alergia"],
    ),
    "Cetirizina": Medication(
        standard_dose=0.25, max_dose=0.5, doses_per_day=1, min_age_months=6, route="Oral",
        conditions=["Alergia"],
    ),
    "Furosemida": Medication(
        standard_dose=2.0, max_dose=6.0, doses_per_day=2, min_age_months=1, route="Oral/IV",
        conditions=["Edema", "Insuficiencia Cardíaca"],
    ),
}

SEVERITY_FACTORS = {"Leve": 0.8, "Moderada": 1.0, "Severa": 1.2}

RENAL_FACTORS = {
    "Normal": 1.0,
    "Insuficiencia Leve": 0.8,
    "Insuficiencia Moderada": 0.6,
    "Insuficiencia Severa": 0.4,
}

# drug -> age in months below which the dose is zeroed
_CONTRAINDICATED_UNDER = {"Ibuprofeno": 6, "Loratadina": 12}

_SCHEDULES = {
    1: "Una vez al día (cada 24 horas)",
    2: "Cada 12 horas (8:00 AM y 8:00 PM)",
    3: "Cada 8 horas (8:00 AM, 4:00 PM, 12:00 AM)",
    4: "Cada 6 horas (6:00 AM, 12:00 PM, 6:00 PM, 12:00 AM)",
    6: "Cada 4 horas (6:00 AM, 10:00 AM, 2:00 PM, 6:00 PM, 10:00 PM, 2:00 AM)",
}


def age_adjusted_dose(dose: float, age_months: float, premature: bool, medication: str) -> float:
    if age_months < 1:
        dose *= 0.5
    elif age_months < 12:
        dose *= 0.8

    if premature and age_months < 3:
        dose *= 0.7

    limit = _CONTRAINDICATED_UNDER.get(medication)
    if limit is not None and age_months < limit:
        dose = 0.0
    return dose


def dosing_schedule(doses_per_day: int) -> str:
    return _SCHEDULES.get(doses_per_day, "Según indicación médica")


def _safety_warnings(
    medication: str, info: Optional[Medication], dose: float, age_months: float,
    weight: float, renal: str, premature: bool, allergies: bool,
) -> str:
    out: List[str] = []
    if info is not None:
        if dose > info.max_dose:
            out.append("⚠️ DOSIS ALTA - Excede la dosis máxima recomendada")
        if age_months < info.min_age_months:
            out.append("⚠️ EDAD MÍNIMA - Medicamento no recomendado para esta edad")

    if weight < 2.5:
        out.append("⚠️ PESO BAJO - Recién nacido de bajo peso, ajustar dosis")
    if age_months < 1:
        out.append("⚠️ NEONATO - Dosis reducida aplicada automáticamente")
    if premature:
        out.append("⚠️ PREMATURO - Dosis ajustada para prematurez")
    if renal != "Normal":
        out.append("⚠️ FUNCIÓN RENAL - Dosis ajustada por insuficiencia renal")

    if medication == "Paracetamol":
        out.append("⚠️ No exceder 90 mg/kg/día - Riesgo de hepatotoxicidad")
    elif medication == "Ibuprofeno":
        out.append("⚠️ Administrar con alimentos - Evitar si hay deshidratación")
        if age_months < 6:
            out.append("🚫 CONTRAINDICADO en menores de 6 meses")
    elif medication == "Amoxicilina":
        out.append("⚠️ Verificar alergias a penicilina antes de administrar")
    elif medication == "Dexametasona":
        out.append("⚠️ ESTEROIDE - Uso a corto plazo, monitorear efectos secundarios")

    if allergies:
        out.append("⚠️ ALERGIAS CONOCIDAS - Verificar compatibilidad medicamentosa")

    out += [
        "⚠️ Verificar dosis con otro profesional de salud (doble verificación)",
        "⚠️ Usar jeringa o medidor adecuado para la edad",
    ]
    return lines(out)


_DRUG_INSTRUCTIONS = {
    "Amoxicilina": [
        "• Completar todo el tratamiento (7-10 días)",
        "• Puede administrarse con o sin alimentos",
        "• Refrigerar si es suspensión",
    ],
    "Paracetamol": [
        "• Puede administrarse con o sin alimentos",
        "• No exceder 5 días de uso continuo",
        "• Esperar al menos 4 horas entre dosis",
    ],
    "Ibuprofeno": [
        "• Administrar SIEMPRE con alimentos",
        "• Asegurar hidratación adecuada",
        "• No usar si hay vómitos o diarrea",
    ],
    "Salbutamol": [
        "• Enjuagar boca después de inhalación",
        "• Usar cámara espaciadora en menores de 4 años",
        "• Agitar inhalador antes de usar",
    ],
}


def _administration_instructions(medication: str, info: Optional[Medication], age_months: float) -> str:
    out = ["💊 INSTRUCCIONES DE ADMINISTRACIÓN:", ""]
    if age_months < 6:
        out += [
            "👶 LACTANTE:",
            "• Usar jeringa oral de 1-5 mL",
            "• Administrar lentamente en la mejilla",
            "• Evitar la parte posterior de la lengua",
            "• Puede mezclar con pequeña cantidad de leche materna",
        ]
    elif age_months < 24:
        out += [
            "🍼 BEBÉ:",
            "• Usar jeringa oral o cuchara medidora",
            "• Administrar sentado o semi-incorporado",
            "• Puede mezclarse con alimento si es necesario",
            "• No forzar si rechaza, intentar más tarde",
        ]
    elif age_months < 72:
        out += [
            "👦 NIÑO PEQUEÑO:",
            "• Usar vaso medidor o cuchara",
            "• Explicar que es medicina para sentirse mejor",
            "• Ofrecer agua después si acepta",
            "• Supervisión de adulto obligatoria",
        ]
    else:
        out += [
            "🧒 NIÑO MAYOR:",
            "• Puede usar vaso medidor",
            "• Enseñar la importancia de completar tratamiento",
            "• Supervisión de adulto para dosificación",
            "• Registrar horarios de administración",
        ]

    if info is not None:
        out += ["", f"📋 ESPECÍFICAS PARA {medication.upper()}:"]
        out += _DRUG_INSTRUCTIONS.get(medication, [])

    out += [
        "",
        "⏰ HORARIOS:",
        "• Mantener horarios regulares",
        "• Usar alarmas o recordatorios",
        "• Anotar cada dosis administrada",
    ]
    return lines(out)


_DRUG_MONITORING = {
    "Paracetamol": [
        "💊 MONITOREO PARACETAMOL:",
        "• Efectividad en reducción de fiebre",
        "• No usar más de 5 días consecutivos",
        "• Vigilar signos de hepatotoxicidad (amarillez)",
    ],
    "Ibuprofeno": [
        "💊 MONITOREO IBUPROFENO:",
        "• Hidratación adecuada",
        "• Dolor abdominal o vómitos",
        "• Función renal si uso prolongado",
    ],
    "Amoxicilina": [
        "💊 MONITOREO ANTIBIÓTICO:",
        "• Mejoría de síntomas en 48-72 horas",
        "• Erupciones cutáneas (alergia)",
        "• Diarrea (cambio de flora intestinal)",
        "• Completar tratamiento aunque mejore",
    ],
    "Dexametasona": [
        "💊 MONITOREO ESTEROIDE:",
        "• Respuesta respiratoria",
        "• Cambios de comportamiento",
        "• Aumento de apetito/sed",
        "• Uso por tiempo limitado",
    ],
}


def _monitoring(medication: str, age_months: float, renal: str) -> str:
    out = [
        "📊 MONITOREO RECOMENDADO:",
        "",
        "👀 OBSERVACIÓN GENERAL:",
        "• Respuesta clínica a las 24-48 horas",
        "• Signos de mejoría o empeoramiento",
        "• Tolerancia a la medicación",
        "• Efectos secundarios",
    ]
    if age_months < 6:
        out += [
            "",
            "👶 MONITOREO ESPECIAL LACTANTE:",
            "• Patrón de alimentación",
            "• Irritabilidad o somnolencia",
            "• Vómitos o regurgitación",
            "• Cambios en deposiciones",
        ]
    if medication in _DRUG_MONITORING:
        out += [""] + _DRUG_MONITORING[medication]
    if renal != "Normal":
        out += [
            "",
            "🔬 MONITOREO FUNCIÓN RENAL:",
            "• Diuresis adecuada",
            "• Signos de retención de líquidos",
            "• Consulta nefrológica si empeora",
        ]
    out += [
        "",
        "🚨 CONTACTAR AL MÉDICO SI:",
        "• Vómitos persistentes (no retiene medicación)",
        "• Fiebre que no cede después de 48 horas",
        "• Erupciones cutáneas o hinchazón",
        "• Dificultad respiratoria",
        "• Cambios significativos en comportamiento",
        "• Empeoramiento de síntomas",
    ]
    return lines(out)


def _age_warnings(medication: str, age_months: float, premature: bool) -> str:
    out = ["👶 CONSIDERACIONES POR EDAD:", ""]
    if age_months < 1:
        out += [
            "🍼 RECIÉN NACIDO (0-1 mes):",
            "• Metabolismo hepático inmaduro",
            "• Función renal reducida",
            "• Mayor riesgo de efectos secundarios",
            "• Monitoreo hospitalario recomendado",
        ]
    elif age_months < 6:
        out += [
            "👶 LACTANTE (1-6 meses):",
            "• Sistema inmune en desarrollo",
            "• Cuidado con medicamentos que afecten GI",
            "• Preferir formulaciones líquidas",
            "• Evitar miel como excipiente",
        ]
    elif age_months < 24:
        out += [
            "🍼 BEBÉ (6-24 meses):",
            "• Fase de mayor crecimiento",
            "• Ajustes frecuentes de dosis por peso",
            "• Cuidado con saborizantes artificiales",
            "• Supervisión constante de administración",
        ]
    elif age_months < 72:
        out += [
            "👦 PREESCOLAR (2-6 años):",
            "• Puede rechazar medicación por sabor",
            "• Explicaciones simples sobre el tratamiento",
            "• Usar técnicas de distracción si es necesario",
            "• Comenzar educación sobre medicamentos",
        ]
    else:
        out += [
            "🧒 ESCOLAR (6+ años):",
            "• Puede participar en su tratamiento",
            "• Enseñar importancia de adherencia",
            "• Supervisión adulta aún necesaria",
            "• Preparar para transición a adolescencia",
        ]

    if premature:
        out += [
            "",
            "⚠️ PREMATUREZ:",
            "• Órganos menos maduros",
            "• Mayor susceptibilidad a efectos adversos",
            "• Posible necesidad de ajustes adicionales",
            "• Seguimiento especializado",
        ]

    if medication == "Ibuprofeno" and age_months < 6:
        out += [
            "",
            "🚫 IBUPROFENO:",
            "• CONTRAINDICADO en menores de 6 meses",
            "• Usar paracetamol como alternativa",
        ]
    elif medication == "Loratadina" and age_months < 12:
        out += [
            "",
            "⚠️ LORATADINA:",
            "• No recomendado en menores de 1 año",
            "• Considerar antihistamínicos alternativos",
        ]
    return lines(out)


class PediatricDosageCalculator(Calculator):
    definition = CalculatorDef(
        id="pediatric_dosage",
        title="Dosificación Pediátrica",
        description="Dosis diaria y por toma ajustadas por edad, severidad y función renal.",
        tags=["pediatrics", "pharmacology"],
        inputs=[
            CalcInput(
                id="patient_weight", label="Peso", canonical_unit="kg",
                constraints={"min": 0.5, "max": 80},
                messages={
                    "required": "El peso del paciente es obligatorio",
                    "invalid": "El peso debe ser un número válido",
                    "range": "El peso debe estar entre 0.5-80 kg",
                },
            ),
            CalcInput(
                id="patient_age_months", label="Edad", canonical_unit="meses",
                constraints={"min": 0, "max": 216},
                messages={
                    "required": "La edad del paciente es obligatoria",
                    "invalid": "La edad debe ser un número válido",
                    "range": "La edad debe estar entre 0-216 meses (0-18 años)",
                },
            ),
            CalcInput(
                id="medication", label="Medicamento", type="text",
                options=list(FORMULARY) + [OTHER],
                messages={"required": "Debe seleccionar un medicamento"},
            ),
            CalcInput(
                id="custom_dose_per_kg", label="Dosis personalizada", canonical_unit="mg/kg/día",
                constraints={"gt": 0, "max": 500},
                required_when={"medication": [OTHER]},
                messages={
                    "required": "Debe especificar la dosis personalizada para 'Otro medicamento'",
                    "invalid": "La dosis personalizada debe estar entre 0.1-500 mg/kg/día",
                    "range": "La dosis personalizada debe estar entre 0.1-500 mg/kg/día",
                },
            ),
            CalcInput(
                id="custom_doses_per_day", label="Dosis por día", type="int",
                constraints={"min": 1, "max": 6},
                required_when={"medication": [OTHER]},
                messages={
                    "required": "Debe especificar el número de dosis por día",
                    "invalid": "El número de dosis debe estar entre 1-6 por día",
                    "range": "El número de dosis debe estar entre 1-6 por día",
                },
            ),
            CalcInput(
                id="medication_concentration", label="Concentración", required=False,
                canonical_unit="mg/mL", constraints={"gt": 0, "max": 1000},
                messages={
                    "invalid": "La concentración debe estar entre 0.1-1000 mg/mL",
                    "range": "La concentración debe estar entre 0.1-1000 mg/mL",
                },
            ),
            CalcInput(
                id="clinical_condition", label="Condición clínica", type="text", required=False,
                default="Otra condición",
            ),
            CalcInput(
                id="severity", label="Severidad", type="text", required=False,
                default="Moderada", options=list(SEVERITY_FACTORS),
            ),
            CalcInput(
                id="renal_function", label="Función renal", type="text", required=False,
                default="Normal", options=list(RENAL_FACTORS),
            ),
            CalcInput(id="premature_infant", label="Prematuro", type="bool", required=False),
            CalcInput(id="allergies", label="Alergias conocidas", type="bool", required=False),
        ],
    )

    references = (
        Reference(title="Guía de Práctica Clínica: Farmacología en Pediatría", source="Secretaría de Salud México", url="http://gpc.salud.gob.mx"),
        Reference(title="Manual de Dosificación Pediátrica", source="Instituto Nacional de Pediatría", year=2023),
        Reference(title="Farmacología Pediátrica Clínica", source="Hospital Infantil de México Federico Gómez", year=2022),
        Reference(title="Guías de Prescripción Segura en Pediatría", source="Instituto Mexicano del Seguro Social (IMSS)", year=2023),
        Reference(title="Pediatric Drug Dosing Guidelines", source="American Academy of Pediatrics", year=2022),
    )

    def cross_check(self, v: ParsedInputs, raw: Mapping[str, str]) -> List[str]:
        medication = v.text("medication")
        if medication and medication != OTHER and medication not in FORMULARY:
            return [f"Medicamento no encontrado: {medication}"]
        return []

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        weight = v.num("patient_weight")
        age_months = v.num("patient_age_months")
        medication = v.text("medication")
        concentration = v.num("medication_concentration")
        renal = v.text("renal_function", "Normal")
        premature = v.flag("premature_infant")

        if medication == OTHER:
            info = None
            dose = v.num("custom_dose_per_kg")
            doses_per_day = int(v.num("custom_doses_per_day"))
        else:
            info = FORMULARY[medication]
            dose = info.standard_dose * SEVERITY_FACTORS.get(v.text("severity", "Moderada"), 1.0)
            doses_per_day = info.doses_per_day

        dose = age_adjusted_dose(dose, age_months, premature, medication)
        dose *= RENAL_FACTORS.get(renal, 1.0)

        daily = dose * weight
        per_dose = daily / doses_per_day
        volume = fmt(per_dose / concentration, 2) if concentration is not None else "No calculado"

        return {
            "recommended_dose_per_kg": fmt(dose, 1),
            "total_daily_dose": fmt(daily, 1),
            "dose_per_administration": fmt(per_dose, 1),
            "volume_per_dose": volume,
            "doses_per_day": str(doses_per_day),
            "dosing_schedule": dosing_schedule(doses_per_day),
            "safety_warnings": _safety_warnings(
                medication, info, dose, age_months, weight, renal, premature, v.flag("allergies"),
            ),
            "administration_instructions": _administration_instructions(medication, info, age_months),
            "monitoring_recommendations": _monitoring(medication, age_months, renal),
            "age_appropriate_warnings": _age_warnings(medication, age_months, premature),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        inputs = result.input_values
        age_months = inputs.get("patient_age_months", "")
        age_years = self.echoed_inputs(result).num("patient_age_months", 0.0) / 12

        return f"""INTERPRETACIÓN CLÍNICA - DOSIFICACIÓN PEDIÁTRICA

MEDICAMENTO: {inputs.get("medication", "")}
PACIENTE: {fmt(age_years, 1)} años ({age_months} meses), {inputs.get("patient_weight", "")} kg

DOSIFICACIÓN CALCULADA:
• Dosis total diaria: {r.get("total_daily_dose", "")} mg/día
• Dosis por administración: {r.get("dose_per_administration", "")} mg
• Frecuencia: {r.get("doses_per_day", "")} veces al día

FÓRMULA UTILIZADA:
Dosis total = Dosis recomendada (mg/kg/día) × Peso (kg)
Dosis por toma = Dosis total ÷ Número de dosis por día

PRINCIPIOS DE DOSIFICACIÓN PEDIÁTRICA:
• Ajuste por peso corporal (mg/kg)
• Consideración de madurez orgánica
• Factores de seguridad adicionales
• Formulaciones apropiadas para la edad

FUENTES MEXICANAS:
• Guía de Práctica Clínica: Farmacología en Pediatría
• Secretaría de Salud México (gpc.salud.gob.mx)
• Instituto Nacional de Pediatría
• Normas farmacológicas pediátricas mexicanas

CONSIDERACIONES ESPECIALES:
• Verificación obligatoria por doble personal
• Uso de jeringas/medidores apropiados para edad
• Supervisión parental en administración
• Monitoreo de efectividad y efectos adversos

LIMITACIONES:
• Dosis calculadas son orientativas
• Requieren validación médica profesional
• Factores individuales pueden requerir ajustes
• Seguimiento clínico obligatorio"""
