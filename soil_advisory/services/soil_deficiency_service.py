"""
Soil Deficiency Service.

Identifies nutrient deficiencies from validated soil parameters and ranks them
by severity and agronomic importance.
"""
import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, List, Optional

from soil_advisory.schemas.soil_schemas import (
    DeficiencyType,
    OptimalRange,
    ParameterStatus,
    SoilParameter,
    SoilParameterName,
)
from soil_advisory.services import deficiency_knowledge as knowledge
from soil_advisory.services import soil_rules as rules
from soil_advisory.services.soil_inputs import coerce_micronutrients, coerce_nutrients

logger = logging.getLogger(__name__)

SKIPPED_STATUSES = (ParameterStatus.OPTIMAL, ParameterStatus.ADEQUATE)


@dataclass(frozen=True)
class DeficiencyRange:
    min: float
    max: float


@dataclass(frozen=True)
class SoilDeficiency:
    """One below- or above-optimal soil parameter."""
    parameter: str
    deficiency_type: DeficiencyType
    current_value: float
    optimal_range: DeficiencyRange
    deficit_amount: float
    impact_on_crops: List[str]
    symptoms: List[str]
    causes: List[str]

    @property
    def is_excess(self) -> bool:
        """True when the reading sits above the optimal band rather than below it."""
        return self.current_value > self.optimal_range.max

    @property
    def parameter_key(self) -> Optional[SoilParameterName]:
        try:
            return SoilParameterName(self.parameter)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def deficiency_priority(deficiency: SoilDeficiency) -> float:
    """Severity score multiplied by parameter importance."""
    severity = rules.SEVERITY_WEIGHTS[deficiency.deficiency_type.value]
    weight = rules.IMPORTANCE_WEIGHTS.get(deficiency.parameter_key, rules.DEFAULT_IMPORTANCE_WEIGHT)
    return severity * weight


class SoilDeficiencyService:
    """Severity-tiering rules over pH, macronutrients, organic carbon and micronutrients."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._checks: Dict[SoilParameterName, Callable[[SoilParameterName, SoilParameter], Optional[SoilDeficiency]]] = {
            SoilParameterName.PH: self._check_ph,
            SoilParameterName.NITROGEN: self._check_macronutrient,
            SoilParameterName.PHOSPHORUS: self._check_macronutrient,
            SoilParameterName.POTASSIUM: self._check_macronutrient,
            SoilParameterName.ORGANIC_CARBON: self._check_organic_carbon,
        }

    def identify_deficiencies(
        self,
        nutrients: Any,
        micronutrients: Any = None,
        soil_type: Optional[str] = None,
        crop_type: Optional[str] = None,
    ) -> List[SoilDeficiency]:
        """
        Identify deficiencies in soil parameters.

        Args:
            nutrients: SoilNutrients or mapping from the extraction stage
            micronutrients: Optional Micronutrients or mapping
            soil_type: Soil type; sandy soils add leaching causes for N and K
            crop_type: Planned crop, recorded for traceability

        Returns:
            Deficiencies sorted by severity x importance, highest first
        """
        nutrients = coerce_nutrients(nutrients)
        micronutrients = coerce_micronutrients(micronutrients)

        deficiencies: List[SoilDeficiency] = []

        for name, parameter in nutrients.present():
            check = self._checks.get(name)
            if check is None:
                continue
            deficiency = check(name, parameter)
            if deficiency is not None:
                deficiencies.append(self._apply_soil_context(deficiency, soil_type))

        for name, parameter in micronutrients.present():
            deficiency = self._check_micronutrient(name, parameter)
            if deficiency is not None:
                deficiencies.append(deficiency)

        ranked = sorted(deficiencies, key=deficiency_priority, reverse=True)

        self.logger.info(
            f"Identified {len(ranked)} soil deficiencies"
            + (f" for crop {crop_type}" if crop_type else "")
            + (f" on {soil_type} soil" if soil_type else "")
        )
        return ranked

    # ==================== CHECKS ====================

    def _check_ph(self, name: SoilParameterName, parameter: SoilParameter) -> Optional[SoilDeficiency]:
        optimal_min, optimal_max = rules.PH_OPTIMAL
        value = parameter.value
        if optimal_min <= value <= optimal_max:
            return None

        severe_low, severe_high = rules.PH_SEVERE
        moderate_low, moderate_high = rules.PH_MODERATE
        if value < severe_low or value > severe_high:
            tier = DeficiencyType.SEVERE
        elif value < moderate_low or value > moderate_high:
            tier = DeficiencyType.MODERATE
        else:
            tier = DeficiencyType.MILD

        acidic = value < optimal_min
        info = knowledge.get_ph_info(tier, acidic)
        return SoilDeficiency(
            parameter=name.value,
            deficiency_type=tier,
            current_value=value,
            optimal_range=DeficiencyRange(min=optimal_min, max=optimal_max),
            deficit_amount=(optimal_min - value) if acidic else (value - optimal_max),
            **info,
        )

    def _tier_from_status(
        self, parameter: SoilParameter, band: OptimalRange, severe_fraction: float
    ) -> DeficiencyType:
        # Excessive status lands in the mild tier.
        if parameter.status == ParameterStatus.DEFICIENT:
            if parameter.value < band.min * severe_fraction:
                return DeficiencyType.SEVERE
            return DeficiencyType.MODERATE
        return DeficiencyType.MILD

    def _check_macronutrient(self, name: SoilParameterName, parameter: SoilParameter) -> Optional[SoilDeficiency]:
        if parameter.status in SKIPPED_STATUSES:
            return None

        band = parameter.range.optimal_or_range()
        tier = self._tier_from_status(parameter, band, rules.MACRO_SEVERE_FRACTION)
        info = knowledge.get_macronutrient_info(name, tier)
        return SoilDeficiency(
            parameter=name.value,
            deficiency_type=tier,
            current_value=parameter.value,
            optimal_range=DeficiencyRange(min=band.min, max=band.max),
            deficit_amount=max(0.0, band.min - parameter.value),
            **info,
        )

    def _check_organic_carbon(self, name: SoilParameterName, parameter: SoilParameter) -> Optional[SoilDeficiency]:
        optimal_min, optimal_max = rules.ORGANIC_CARBON_OPTIMAL
        value = parameter.value
        if value >= optimal_min:
            return None

        if value < rules.ORGANIC_CARBON_SEVERE:
            tier = DeficiencyType.SEVERE
        elif value < rules.ORGANIC_CARBON_MODERATE:
            tier = DeficiencyType.MODERATE
        else:
            tier = DeficiencyType.MILD

        return SoilDeficiency(
            parameter=name.value,
            deficiency_type=tier,
            current_value=value,
            optimal_range=DeficiencyRange(min=optimal_min, max=optimal_max),
            deficit_amount=optimal_min - value,
            **knowledge.get_organic_carbon_info(),
        )

    def _check_micronutrient(self, name: SoilParameterName, parameter: SoilParameter) -> Optional[SoilDeficiency]:
        if parameter.status in SKIPPED_STATUSES:
            return None

        band = parameter.range.optimal_or_range()
        tier = self._tier_from_status(parameter, band, rules.MICRO_SEVERE_FRACTION)
        info = knowledge.get_micronutrient_info(name, tier)
        return SoilDeficiency(
            parameter=name.value,
            deficiency_type=tier,
            current_value=parameter.value,
            optimal_range=DeficiencyRange(min=band.min, max=band.max),
            deficit_amount=max(0.0, band.min - parameter.value),
            **info,
        )

    def _apply_soil_context(self, deficiency: SoilDeficiency, soil_type: Optional[str]) -> SoilDeficiency:
        if not soil_type or "sand" not in soil_type.lower():
            return deficiency
        if deficiency.parameter_key not in (SoilParameterName.NITROGEN, SoilParameterName.POTASSIUM):
            return deficiency
        if deficiency.deficiency_type == DeficiencyType.MILD:
            return deficiency
        if knowledge.SANDY_SOIL_LEACHING_CAUSE in deficiency.causes:
            return deficiency

        self.logger.debug(f"Adding sandy soil leaching cause to {deficiency.parameter}")
        return replace(deficiency, causes=deficiency.causes + [knowledge.SANDY_SOIL_LEACHING_CAUSE])


soil_deficiency_service = SoilDeficiencyService()


def identify_deficiencies(
    nutrients: Any,
    micronutrients: Any = None,
    soil_type: Optional[str] = None,
    crop_type: Optional[str] = None,
) -> List[SoilDeficiency]:
    return soil_deficiency_service.identify_deficiencies(nutrients, micronutrients, soil_type, crop_type)
