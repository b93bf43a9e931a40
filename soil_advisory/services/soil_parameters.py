"""
Reference classification of raw soil measurements.

The extraction stage normally supplies each SoilParameter with its range and
status. These helpers build the same records from bare numbers using the
reference ranges in soil_rules, for callers (and scripts) that only have
values.
"""
import logging
from typing import Optional, Union

from soil_advisory.schemas.soil_schemas import (
    Micronutrients,
    OptimalRange,
    ParameterRange,
    ParameterStatus,
    SoilNutrients,
    SoilParameter,
    SoilParameterName,
)
from soil_advisory.services.soil_rules import (
    DEFAULT_UNITS,
    DEFICIENT_FRACTION,
    EXCESSIVE_FACTOR,
    PARAMETER_RANGES,
)

logger = logging.getLogger(__name__)


def reference_range(name: SoilParameterName) -> ParameterRange:
    """Typical range with optimal band for a parameter."""
    ranges = PARAMETER_RANGES[name]
    typical_min, typical_max = ranges["typical"]
    optimal_min, optimal_max = ranges["optimal"]
    return ParameterRange(
        min=typical_min,
        max=typical_max,
        optimal=OptimalRange(min=optimal_min, max=optimal_max),
    )


def determine_parameter_status(value: float, parameter_range: ParameterRange) -> ParameterStatus:
    """
    Classify a value against its range.

    Inside the optimal band -> optimal. Below it, values under 70% of the band
    minimum are deficient; above it, values over 130% of the band maximum are
    excessive. Anything in between is adequate. Without an optimal band the
    reference range bounds are used instead.
    """
    band = parameter_range.optimal_or_range()
    if band.min <= value <= band.max:
        return ParameterStatus.OPTIMAL
    if value < band.min:
        if value < band.min * DEFICIENT_FRACTION:
            return ParameterStatus.DEFICIENT
        return ParameterStatus.ADEQUATE
    if value > band.max * EXCESSIVE_FACTOR:
        return ParameterStatus.EXCESSIVE
    return ParameterStatus.ADEQUATE


def build_soil_parameter(
    name: Union[SoilParameterName, str],
    value: float,
    unit: Optional[str] = None,
    confidence: float = 1.0,
    status: Optional[ParameterStatus] = None,
) -> SoilParameter:
    """Create a SoilParameter from a raw value using the reference ranges."""
    key = SoilParameterName(name)
    parameter_range = reference_range(key)
    return SoilParameter(
        name=key.value,
        value=value,
        unit=DEFAULT_UNITS[key] if unit is None else unit,
        range=parameter_range,
        status=status or determine_parameter_status(value, parameter_range),
        confidence=confidence,
    )


def build_soil_nutrients(
    ph: Optional[float] = None,
    nitrogen: Optional[float] = None,
    phosphorus: Optional[float] = None,
    potassium: Optional[float] = None,
    organic_carbon: Optional[float] = None,
    electrical_conductivity: Optional[float] = None,
) -> SoilNutrients:
    values = {
        SoilParameterName.PH: ph,
        SoilParameterName.NITROGEN: nitrogen,
        SoilParameterName.PHOSPHORUS: phosphorus,
        SoilParameterName.POTASSIUM: potassium,
        SoilParameterName.ORGANIC_CARBON: organic_carbon,
        SoilParameterName.ELECTRICAL_CONDUCTIVITY: electrical_conductivity,
    }
    fields = {}
    for name, value in values.items():
        if value is None:
            continue
        field_name = "ph" if name is SoilParameterName.PH else name.value
        fields[field_name] = build_soil_parameter(name, value)
    return SoilNutrients(**fields)


def build_micronutrients(**values: Optional[float]) -> Micronutrients:
    """Build Micronutrients from keyword values, e.g. zinc=0.4, boron=0.2."""
    fields = {}
    for key, value in values.items():
        if value is None:
            continue
        fields[key] = build_soil_parameter(SoilParameterName(key), value)
    return Micronutrients(**fields)
