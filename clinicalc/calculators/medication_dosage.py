"""Weight-based medication dose and volume to administer."""

from __future__ import annotations

from typing import Dict

from clinicalc.base import Calculator
from clinicalc.formatting import fmt
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference


def safety_check(total_dose: float, volume: float, weight: float) -> str:
    if volume > 20.0:
        return "⚠️ Volumen alto - Verificar cálculo"
    if volume < 0.1:
        return "⚠️ Volumen muy pequeño - Verificar precisión"
    if total_dose > weight * 50:
        return "⚠️ Dosis alta - Consultar con médico"
    return "✅ Cálculo dentro de rangos normales"


class MedicationDosageCalculator(Calculator):
    definition = CalculatorDef(
        id="medication_dosage",
        title="Dosis de Medicamentos",
        description="Dosis total = dosis (mg/kg) × peso; volumen = dosis total ÷ concentración.",
        tags=["pharmacology", "nursing"],
        inputs=[
            CalcInput(
                id="patient_weight", label="Peso", canonical_unit="kg",
                constraints={"min": 0.5, "max": 250},
                messages={
                    "required": "El peso del paciente es obligatorio",
                    "invalid": "El peso debe ser un número válido",
                    "range": "El peso debe estar entre 0.5 kg y 250 kg",
                },
            ),
            CalcInput(
                id="dose_per_kg", label="Dosis por kg", canonical_unit="mg/kg",
                constraints={"gt": 0, "max": 100},
                messages={
                    "required": "La dosis por kg es obligatoria",
                    "invalid": "La dosis debe ser un número válido",
                    "range": "La dosis debe ser mayor a 0 y típicamente menor a 100 mg/kg",
                },
            ),
            CalcInput(
                id="concentration", label="Concentración", canonical_unit="mg/mL",
                constraints={"gt": 0},
                messages={
                    "required": "La concentración es obligatoria",
                    "invalid": "La concentración debe ser un número válido",
                    "range": "La concentración debe ser mayor a 0",
                },
            ),
        ],
    )

    references = (
        Reference(title="Cálculo de Dosis de Medicamentos en Enfermería", source="Elsevier - Enfermería Clínica (España)", year=2023),
        Reference(title="Medication Dosage Calculations", source="WTCS Pressbooks", url="https://wtcs.pressbooks.pub/dosagecalculations/"),
        Reference(title="Safe Medication Administration", source="World Health Organization", year=2022),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        weight = v.num("patient_weight")
        total_dose = v.num("dose_per_kg") * weight
        volume = total_dose / v.num("concentration")

        return {
            "total_dose": fmt(total_dose, 2),
            "volume_to_administer": fmt(volume, 2),
            "safety_check": safety_check(total_dose, volume, weight),
        }

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        return f"""**Interpretación Clínica:**

📋 **Dosis Calculada:** {r.get("total_dose", "")} mg
💉 **Volumen a Administrar:** {r.get("volume_to_administer", "")} mL

🔍 **Verificación:** {r.get("safety_check", "")}

**⚠️ IMPORTANTE:**
• Siempre verificar la dosis con un profesional médico
• Confirmar la concentración del medicamento antes de administrar
• Considerar factores individuales del paciente (edad, función renal/hepática)
• Para medicamentos de alto riesgo, usar el principio de doble verificación

**Fórmulas utilizadas:**
• Dosis total = Dosis (mg/kg) × Peso (kg)
• Volumen = Dosis total (mg) ÷ Concentración (mg/mL)"""
