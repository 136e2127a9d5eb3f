"""Clinical unit conversions: mg/mL, mEq/mg, mcg/mg and insulin units."""

from __future__ import annotations

from typing import Callable, Dict, List

from clinicalc.base import Calculator
from clinicalc.formatting import fmt, lines, plain
from clinicalc.models import CalcInput, CalculationResult, CalculatorDef, ParsedInputs, Reference

MG_TO_ML = "mg → mL"
ML_TO_MG = "mL → mg"
MEQ_TO_MG = "mEq → mg"
MG_TO_MEQ = "mg → mEq"
MCG_TO_MG = "mcg → mg"
MG_TO_MCG = "mg → mcg"
UNITS_TO_ML = "Unidades → mL"

CONVERSIONS = [MG_TO_ML, ML_TO_MG, MEQ_TO_MG, MG_TO_MEQ, MCG_TO_MG, MG_TO_MCG, UNITS_TO_ML]

# mg per mEq
EQUIVALENT_WEIGHTS = {
    "KCl (Cloruro de Potasio)": 74.5,
    "NaCl (Cloruro de Sodio)": 58.4,
    "CaCl2 (Cloruro de Calcio)": 147.0,
    "MgSO4 (Sulfato de Magnesio)": 246.0,
    "NaHCO3 (Bicarbonato de Sodio)": 84.0,
}

# U per mL
INSULIN_CONCENTRATIONS = {
    "Insulina Regular (100 U/mL)": 100.0,
    "Insulina NPH (100 U/mL)": 100.0,
    "Insulina Rápida (100 U/mL)": 100.0,
    "Insulina Lenta (40 U/mL)": 40.0,
}
DEFAULT_INSULIN = "Insulina Regular (100 U/mL)"


def _mg_ml_notes(ml: float, concentration: float) -> str:
    out: List[str] = []
    if ml < 0.1:
        out.append("⚠️ VOLUMEN MUY PEQUEÑO - Verificar precisión de administración")
    if ml > 10.0:
        out.append("⚠️ VOLUMEN GRANDE - Considerar dividir en múltiples dosis")
    if concentration > 500.0:
        out.append("💊 ALTA CONCENTRACIÓN - Medicamento muy concentrado")
    out += [
        "✅ Verificar concentración del vial antes de administrar",
        "📋 Usar jeringa apropiada para el volumen calculado",
    ]
    return lines(out)


def _meq_notes(substance: str, meq: float) -> str:
    out: List[str] = []
    if "KCl" in substance:
        out.append("⚡ POTASIO - Monitorear ECG y función renal")
        if meq > 40:
            out.append("⚠️ DOSIS ALTA DE K+ - Verificar indicación")
    elif "NaCl" in substance:
        out.append("🧂 SODIO - Monitorear balance hídrico")
        if meq > 100:
            out.append("⚠️ ALTA CARGA DE Na+ - Vigilar sobrecarga")
    elif "CaCl2" in substance:
        out += ["🦴 CALCIO - Monitorear ritmo cardíaco", "⚠️ ADMINISTRACIÓN IV LENTA obligatoria"]
    elif "MgSO4" in substance:
        out += ["🧠 MAGNESIO - Vigilar reflejos tendinosos", "⚠️ Puede causar DEPRESIÓN RESPIRATORIA"]
    out += [
        "📊 Verificar electrolitos séricos antes y después",
        "💉 Calcular velocidad de infusión apropiada",
    ]
    return lines(out)


def _mcg_notes(mcg: float, mg: float) -> str:
    out: List[str] = []
    if mcg < 100 and mg < 0.1:
        out.append("🔬 DOSIS MUY PEQUEÑA - Verificar unidades de medida")
    if mcg > 10000:
        out.append("📏 CONSIDERAR USAR MG para mayor claridad")
    out += [
        "✅ Conversión métrica estándar",
        "📋 Verificar que las unidades coincidan en prescripción",
        "⚠️ CUIDADO CON ERRORES de factor 1000",
    ]
    return lines(out)


def _insulin_notes(units: float, ml: float, insulin: str) -> str:
    out: List[str] = []
    if units > 50:
        out.append("⚠️ DOSIS ALTA DE INSULINA - Verificar indicación")
    if ml < 0.1:
        out.append("⚠️ VOLUMEN MUY PEQUEÑO - Usar jeringa de insulina")
    if "40 U/mL" in insulin:
        out.append("🔴 CONCENTRACIÓN U-40 - Usar jeringa específica")
    elif "100 U/mL" in insulin:
        out.append("🔵 CONCENTRACIÓN U-100 - Concentración estándar")
    out += [
        "💉 Usar siempre JERINGA DE INSULINA",
        "🍽️ Coordinar con horarios de comida",
        "📊 Monitorear glucemia antes y después",
    ]
    return lines(out)


def _result(value: str, unit: str, formula: str, notes: str, info: str) -> Dict[str, str]:
    return {
        "converted_value": value,
        "output_unit": unit,
        "conversion_formula": formula,
        "clinical_notes": notes,
        "equivalent_weight_info": info,
    }


def _mg_to_ml(x: float, v: ParsedInputs) -> Dict[str, str]:
    c = v.num("concentration")
    out = fmt(x / c, 3)
    return _result(
        out, "mL",
        f"mL = mg ÷ Concentración\nmL = {plain(x)} ÷ {plain(c)} = {out}",
        _mg_ml_notes(x / c, c),
        f"Concentración utilizada: {plain(c)} mg/mL",
    )


def _ml_to_mg(x: float, v: ParsedInputs) -> Dict[str, str]:
    c = v.num("concentration")
    out = fmt(x * c, 2)
    return _result(
        out, "mg",
        f"mg = mL × Concentración\nmg = {plain(x)} × {plain(c)} = {out}",
        _mg_ml_notes(x, c),
        f"Concentración utilizada: {plain(c)} mg/mL",
    )


def _meq_to_mg(x: float, v: ParsedInputs) -> Dict[str, str]:
    substance = v.text("substance_for_meq")
    weight = EQUIVALENT_WEIGHTS[substance]
    out = fmt(x * weight, 2)
    return _result(
        out, "mg",
        f"mg = mEq × Peso Equivalente\nmg = {plain(x)} × {plain(weight)} = {out}",
        _meq_notes(substance, x),
        f"Peso equivalente de {substance}: {plain(weight)} mg/mEq",
    )


def _mg_to_meq(x: float, v: ParsedInputs) -> Dict[str, str]:
    substance = v.text("substance_for_meq")
    weight = EQUIVALENT_WEIGHTS[substance]
    out = fmt(x / weight, 2)
    return _result(
        out, "mEq",
        f"mEq = mg ÷ Peso Equivalente\nmEq = {plain(x)} ÷ {plain(weight)} = {out}",
        _meq_notes(substance, x / weight),
        f"Peso equivalente de {substance}: {plain(weight)} mg/mEq",
    )


def _mcg_to_mg(x: float, v: ParsedInputs) -> Dict[str, str]:
    mg = x / 1000.0
    out = fmt(mg, 3)
    return _result(
        out, "mg",
        f"mg = mcg ÷ 1000\nmg = {plain(x)} ÷ 1000 = {out}",
        _mcg_notes(x, mg),
        "Factor de conversión: 1 mg = 1000 mcg",
    )


def _mg_to_mcg(x: float, v: ParsedInputs) -> Dict[str, str]:
    mcg = x * 1000.0
    out = fmt(mcg, 1)
    return _result(
        out, "mcg",
        f"mcg = mg × 1000\nmcg = {plain(x)} × 1000 = {out}",
        _mcg_notes(mcg, x),
        "Factor de conversión: 1 mg = 1000 mcg",
    )


def _units_to_ml(x: float, v: ParsedInputs) -> Dict[str, str]:
    insulin = v.text("insulin_type", DEFAULT_INSULIN)
    c = INSULIN_CONCENTRATIONS.get(insulin, 100.0)
    out = fmt(x / c, 2)
    return _result(
        out, "mL",
        f"mL = Unidades ÷ Concentración\nmL = {plain(x)} ÷ {plain(c)} = {out}",
        _insulin_notes(x, x / c, insulin),
        f"Concentración de {insulin}: {plain(c)} U/mL",
    )


_CONVERTERS: Dict[str, Callable[[float, ParsedInputs], Dict[str, str]]] = {
    MG_TO_ML: _mg_to_ml,
    ML_TO_MG: _ml_to_mg,
    MEQ_TO_MG: _meq_to_mg,
    MG_TO_MEQ: _mg_to_meq,
    MCG_TO_MG: _mcg_to_mg,
    MG_TO_MCG: _mg_to_mcg,
    UNITS_TO_ML: _units_to_ml,
}


class UnitConverterCalculator(Calculator):
    definition = CalculatorDef(
        id="unit_converter",
        title="Conversor de Unidades",
        description="Conversiones mg↔mL, mEq↔mg, mcg↔mg y unidades de insulina a mL.",
        tags=["pharmacology", "nursing", "conversion"],
        inputs=[
            CalcInput(
                id="conversion_type", label="Tipo de conversión", type="choice",
                options=CONVERSIONS,
                messages={
                    "required": "El tipo de conversión es obligatorio",
                    "invalid": "Tipo de conversión no soportado",
                },
            ),
            CalcInput(
                id="input_value", label="Valor",
                constraints={"gt": 0, "max": 999999},
                messages={
                    "required": "El valor a convertir es obligatorio",
                    "invalid": "El valor debe ser un número válido",
                    "low": "El valor debe ser mayor que cero",
                    "high": "El valor es demasiado grande",
                },
            ),
            CalcInput(
                id="concentration", label="Concentración", canonical_unit="mg/mL",
                constraints={"gt": 0},
                required_when={"conversion_type": [MG_TO_ML, ML_TO_MG]},
                messages={
                    "required": "La concentración es obligatoria para conversiones mg/mL",
                    "invalid": "La concentración debe ser un número válido",
                    "range": "La concentración debe ser mayor que cero",
                },
            ),
            CalcInput(
                id="substance_for_meq", label="Sustancia", type="choice",
                options=list(EQUIVALENT_WEIGHTS),
                required_when={"conversion_type": [MEQ_TO_MG, MG_TO_MEQ]},
                messages={
                    "required": "La sustancia es obligatoria para conversiones mEq",
                    "invalid": "Sustancia no reconocida para conversión mEq",
                },
            ),
            CalcInput(
                id="insulin_type", label="Tipo de insulina", type="text", required=False,
                default=DEFAULT_INSULIN, options=list(INSULIN_CONCENTRATIONS),
            ),
        ],
    )

    references = (
        Reference(title="Dosage Calculations for Nursing Students", source="WTCS Pressbooks", url="https://wtcs.pressbooks.pub/dosagecalculations/"),
        Reference(title="Fórmulas de Conversión en Farmacología", source="Manual de Farmacología Clínica", year=2023),
        Reference(title="Equivalent Weights of Common Electrolytes", source="American Journal of Health-System Pharmacy", year=2022),
        Reference(title="Insulin Concentration Standards", source="International Diabetes Federation", year=2023),
        Reference(title="Medication Safety in Unit Conversions", source="Institute for Safe Medication Practices", year=2022),
    )

    def compute(self, v: ParsedInputs) -> Dict[str, str]:
        convert = _CONVERTERS[v.text("conversion_type")]
        return convert(v.num("input_value"), v)

    def narrate(self, result: CalculationResult) -> str:
        r = result.result_values
        return f"""INTERPRETACIÓN CLÍNICA - CONVERSOR DE UNIDADES

💱 RESULTADO: {r.get("converted_value", "")} {r.get("output_unit", "")}
📐 CONVERSIÓN: {result.input_values.get("conversion_type", "")}

📋 FÓRMULA UTILIZADA:
{r.get("conversion_formula", "")}

⚠️ VERIFICACIONES OBLIGATORIAS:
• Confirmar CONCENTRACIÓN DEL MEDICAMENTO antes de administrar
• Verificar UNIDADES DE MEDIDA en prescripción médica
• Usar JERINGA APROPIADA para el volumen calculado
• DOBLE VERIFICACIÓN para medicamentos de alto riesgo

🔬 PRECISIÓN DE CÁLCULO:
• Conversiones mg/mL: 3 decimales
• Conversiones mEq: 2 decimales
• Conversiones mcg: Alta precisión
• Factores validados farmacológicamente

📚 BASES CIENTÍFICAS:
• Pesos equivalentes farmacológicos estándar
• Concentraciones comerciales verificadas
• Fórmulas universales de farmacología clínica"""
