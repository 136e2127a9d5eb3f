"""Calculator registry: id-based dispatch of validate / calculate / interpret."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from clinicalc.base import Calculator
from clinicalc.calculators.apgar import ApgarScoreCalculator
from clinicalc.calculators.bmi import BMICalculator
from clinicalc.calculators.braden_scale import BradenScaleCalculator
from clinicalc.calculators.electrolyte_management import ElectrolyteManagementCalculator
from clinicalc.calculators.fluid_balance import FluidBalanceCalculator
from clinicalc.calculators.glasgow_coma_scale import GlasgowComaScaleCalculator
from clinicalc.calculators.heparin_dosage import HeparinDosageCalculator
from clinicalc.calculators.iv_drip_rate import IVDripRateCalculator
from clinicalc.calculators.mean_arterial_pressure import MeanArterialPressureCalculator
from clinicalc.calculators.medication_dosage import MedicationDosageCalculator
from clinicalc.calculators.minute_ventilation import MinuteVentilationCalculator
from clinicalc.calculators.pediatric_dosage import PediatricDosageCalculator
from clinicalc.calculators.unit_converter import UnitConverterCalculator
from clinicalc.config import Settings, get_settings
from clinicalc.errors import CalculatorNotFoundError, InvalidInputError
from clinicalc.models import CalculationResult, CalculatorDef, Reference, ValidationResult

logger = logging.getLogger(__name__)

NOT_FOUND_CODE = "CALCULATOR_NOT_FOUND"


class CalculatorService:
    """
    Registry of calculator modules keyed by id.

    Registration happens once at startup; after that the service only reads
    its table and can be shared between threads.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._calculators: Dict[str, Calculator] = {}

    def register(self, calculator: Calculator) -> None:
        cid = calculator.calculator_id
        existing = self._calculators.get(cid)
        if existing is not None and existing is not calculator and self._settings.warn_on_overwrite:
            logger.warning(
                "Replacing calculator %s", cid, extra={"calculator_id": cid},
            )
        self._calculators[cid] = calculator
        logger.debug("Registered calculator %s", cid, extra={"calculator_id": cid})

    def get_calculator(self, calculator_id: str) -> Optional[Calculator]:
        return self._calculators.get(calculator_id)

    def _require(self, calculator_id: str) -> Calculator:
        calc = self._calculators.get(calculator_id)
        if calc is None:
            logger.warning(
                "Unknown calculator %s", calculator_id,
                extra={"calculator_id": calculator_id, "error_code": NOT_FOUND_CODE},
            )
            raise CalculatorNotFoundError(calculator_id)
        return calc

    def calculator_ids(self) -> List[str]:
        return sorted(self._calculators)

    def calc_info(self, calculator_id: str) -> CalculatorDef:
        return self._require(calculator_id).definition

    def validate(self, calculator_id: str, inputs: Mapping[str, str]) -> ValidationResult:
        """Check ``inputs``; an unknown id is reported in the result, not raised."""
        try:
            calc = self._require(calculator_id)
        except CalculatorNotFoundError as e:
            return ValidationResult(is_valid=False, errors=[e.message], error_code=e.code)
        return calc.validate(inputs)

    def calculate(self, calculator_id: str, inputs: Mapping[str, str]) -> CalculationResult:
        calc = self._require(calculator_id)
        try:
            return calc.calculate(inputs)
        except InvalidInputError as e:
            logger.warning(
                "Invalid input for %s: %s", calculator_id, e.message,
                extra={
                    "calculator_id": calculator_id,
                    "error_code": e.code,
                    "error_count": len(e.errors),
                },
            )
            raise

    def interpret(self, calculator_id: str, result: CalculationResult) -> str:
        return self._require(calculator_id).interpret(result)

    def list_references(self, calculator_id: str) -> List[Reference]:
        return self._require(calculator_id).list_references()

    def __contains__(self, calculator_id: object) -> bool:
        return calculator_id in self._calculators

    def __len__(self) -> int:
        return len(self._calculators)


def build_default_service(settings: Optional[Settings] = None) -> CalculatorService:
    """Registry holding every shipped calculator."""
    service = CalculatorService(settings)
    for calc in (
        BMICalculator(),
        MeanArterialPressureCalculator(),
        ApgarScoreCalculator(),
        GlasgowComaScaleCalculator(),
        FluidBalanceCalculator(),
        MedicationDosageCalculator(),
        PediatricDosageCalculator(),
        HeparinDosageCalculator(),
        ElectrolyteManagementCalculator(),
        UnitConverterCalculator(),
        IVDripRateCalculator(),
        MinuteVentilationCalculator(),
        BradenScaleCalculator(),
    ):
        service.register(calc)
    return service
