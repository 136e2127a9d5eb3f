"""Body Mass Index with WHO screening category and IMSS obesity grades."""

from __future__ import annotations

from typing import Dict

from clinicalc.base import Calculator
from clinicalc.formatting import fmt, lines
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference


def who_category(bmi: float) -> str:
    """Screening band; each lower bound is inclusive."""
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25.0:
        return "Normal weight"
    if bmi < 30.0:
        return "Overweight"
    return "Obese"


def imss_grade(bmi: float) -> str:
    if bmi < 18.5:
        return "Bajo peso"
    if bmi < 25.0:
        return "Peso normal"
    if bmi < 30.0:
        return "Sobrepeso"
    if bmi < 35.0:
        return "Obesidad grado I"
    if bmi < 40.0:
        return "Obesidad grado II"
    return "Obesidad grado III"


_RECOMMENDATIONS: Dict[str, list[str]] = {
    "Bajo peso": [
        "CONSULTA MÉDICA para evaluación nutricional",
        "Incrementar ingesta calórica saludable",
        "Considerar suplementos nutricionales",
        "Ejercicio de fortalecimiento muscular",
    ],
    "Peso normal": [
        "MANTENER peso actual con dieta equilibrada",
        "Ejercicio regular 150 min/semana",
        "Controles médicos anuales de rutina",
        "Hidratación adecuada 2-3 L/día",
    ],
    "Sobrepeso": [
        "REDUCIR peso 5-10% en 6 meses",
        "Dieta hipocalórica supervisada",
        "Ejercicio aeróbico 300 min/semana",
        "Control médico cada 3 meses",
    ],
    "Obesidad grado I": [
        "CONSULTA NUTRICIONAL urgente",
        "Reducir peso 10-15% gradualmente",
        "Ejercicio supervisado y progresivo",
        "Evaluar factores de riesgo cardiovascular",
    ],
    "Obesidad grado II": [
        "MANEJO MÉDICO ESPECIALIZADO",
        "Evaluar cirugía bariátrica",
        "Control de diabetes e hipertensión",
        "Seguimiento psicológico",
    ],
    "Obesidad grado III": [
        "URGENTE: Evaluación bariátrica",
        "Manejo multidisciplinario inmediato",
        "Control metabólico estricto",
        "Monitoreo cardiológico",
    ],
}


class BMICalculator(Calculator):
    definition = CalculatorDef(
        id="bmi_calculator",
        title="Índice de Masa Corporal (IMC)",
        description="IMC = peso / estatura², con clasificación OMS y grados IMSS.",
        tags=["general", "nutrition"],
        inputs=[
            CalcInput(
                id="height", label="Estatura", canonical_unit="cm",
                constraints={"min": 50, "max": 250},
                messages={
                    "required": "La estatura es obligatoria",
                    "invalid": "La estatura debe ser un número válido",
                    "range": "La estatura debe estar entre 50-250 cm",
                },
            ),
            CalcInput(
                id="weight", label="Peso", canonical_unit="kg",
                constraints={"min": 3, "max": 300},
                messages={
                    "required": "El peso es obligatorio",
                    "invalid": "El peso debe ser un número válido",
                    "range": "El peso debe estar entre 3-300 kg",
                },
            ),
        ],
    )

    references = (
        Reference(title="Clasificación del IMC", source="Instituto Mexicano del Seguro Social (IMSS)", year=2023),
        Reference(title="Evaluación Nutricional en Adultos", source="Norma Oficial Mexicana NOM-043-SSA2-2012", year=2012),
        Reference(title="Obesidad y Factores de Riesgo Cardiovascular", source="SciELO México - Revista Médica", year=2022),
        Reference(title="Body Mass Index Guidelines", source="World Health Organization", year=2023),
        Reference(title="Manejo Integral de la Obesidad", source="Secretaría de Salud México", year=2023),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        height_m = v.num("height") / 100.0
        weight = v.num("weight")
        bmi = weight / (height_m ** 2)
        grade = imss_grade(bmi)

        low = 18.5 * height_m ** 2
        high = 24.9 * height_m ** 2

        return {
            "bmi": fmt(bmi, 1),
            "category": who_category(bmi),
            "imss_classification": grade,
            "health_recommendations": lines(_RECOMMENDATIONS[grade]),
            "weight_range": f"{fmt(low, 1)} - {fmt(high, 1)} kg",
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        bmi = r.get("bmi", "")
        weight = result.input_values.get("weight", "").strip()
        height = result.input_values.get("height", "").strip()
        height_m = self.echoed_inputs(result).num("height", 0.0) / 100

        return f"""INTERPRETACIÓN CLÍNICA - ÍNDICE DE MASA CORPORAL

IMC CALCULADO: {bmi} kg/m²
CATEGORÍA OMS: {r.get("category", "")}
CATEGORÍA IMSS: {r.get("imss_classification", "")}
PESO ACTUAL: {weight} kg
ESTATURA: {height} cm
RANGO SALUDABLE: {r.get("weight_range", "")}

CLASIFICACIÓN IMSS:
• Bajo peso: <18.5 kg/m²
• Peso normal: 18.5-24.9 kg/m²
• Sobrepeso: 25.0-29.9 kg/m²
• Obesidad I: 30.0-34.9 kg/m²
• Obesidad II: 35.0-39.9 kg/m²
• Obesidad III: ≥40.0 kg/m²

FÓRMULA UTILIZADA:
IMC = Peso (kg) ÷ [Estatura (m)]²
IMC = {weight} ÷ [{fmt(height_m, 2)}]² = {bmi}

EVALUACIÓN CLÍNICA:
El IMC es un indicador de masa corporal que correlaciona con grasa corporal y riesgos de salud. Valores fuera del rango normal requieren evaluación médica y modificaciones del estilo de vida.

LIMITACIONES:
• No distingue entre masa muscular y grasa
• Puede sobreestimar obesidad en atletas
• Subestima riesgo en adultos mayores
• Requiere evaluación clínica complementaria"""
