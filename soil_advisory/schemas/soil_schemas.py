"""
Pydantic schemas for the Soil Advisory engine.
Includes soil parameter records produced by the extraction stage and the
option objects accepted by the validator, remediation planner and crop scorer.
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Tuple
from enum import Enum


# ==================== ENUMS ====================

class ParameterStatus(str, Enum):
    """Status assigned to a soil parameter by the extraction stage."""
    DEFICIENT = "deficient"
    ADEQUATE = "adequate"
    EXCESSIVE = "excessive"
    OPTIMAL = "optimal"


class SoilParameterName(str, Enum):
    """Keys for every soil parameter the engine understands."""
    PH = "pH"
    NITROGEN = "nitrogen"
    PHOSPHORUS = "phosphorus"
    POTASSIUM = "potassium"
    ORGANIC_CARBON = "organic_carbon"
    ELECTRICAL_CONDUCTIVITY = "electrical_conductivity"
    ZINC = "zinc"
    IRON = "iron"
    MANGANESE = "manganese"
    COPPER = "copper"
    BORON = "boron"
    SULFUR = "sulfur"


MACRONUTRIENTS = (
    SoilParameterName.NITROGEN,
    SoilParameterName.PHOSPHORUS,
    SoilParameterName.POTASSIUM,
)

REQUIRED_PARAMETERS = (SoilParameterName.PH,) + MACRONUTRIENTS

MICRONUTRIENTS = (
    SoilParameterName.ZINC,
    SoilParameterName.IRON,
    SoilParameterName.MANGANESE,
    SoilParameterName.COPPER,
    SoilParameterName.BORON,
    SoilParameterName.SULFUR,
)


class IssueSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AnomalySeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DeficiencyType(str, Enum):
    SEVERE = "severe"
    MODERATE = "moderate"
    MILD = "mild"


class MaterialType(str, Enum):
    ORGANIC = "organic"
    INORGANIC = "inorganic"
    BIOLOGICAL = "biological"


class Season(str, Enum):
    """Indian cropping seasons."""
    KHARIF = "kharif"
    RABI = "rabi"
    ZAID = "zaid"
    PERENNIAL = "perennial"


class SeasonFilter(str, Enum):
    ALL = "all"
    KHARIF = "kharif"
    RABI = "rabi"
    ZAID = "zaid"
    PERENNIAL = "perennial"


class RiskTolerance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MarketFocus(str, Enum):
    LOCAL = "local"
    EXPORT = "export"
    PROCESSING = "processing"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class WaterRequirement(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ==================== SOIL PARAMETER SCHEMAS ====================

class OptimalRange(BaseModel):
    """Closed interval considered ideal for crop growth."""
    model_config = ConfigDict(frozen=True)

    min: float = Field(..., allow_inf_nan=False, description="Lower bound")
    max: float = Field(..., allow_inf_nan=False, description="Upper bound")

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min > self.max:
            raise ValueError(f"range min {self.min} is greater than max {self.max}")
        return self


class ParameterRange(BaseModel):
    """Reference range of a parameter with an optional optimal sub-interval."""
    model_config = ConfigDict(frozen=True)

    min: float = Field(..., allow_inf_nan=False)
    max: float = Field(..., allow_inf_nan=False)
    optimal: Optional[OptimalRange] = None

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min > self.max:
            raise ValueError(f"range min {self.min} is greater than max {self.max}")
        return self

    def optimal_or_range(self) -> OptimalRange:
        """Optimal band, falling back to the whole reference range."""
        if self.optimal is not None:
            return self.optimal
        return OptimalRange(min=self.min, max=self.max)


class SoilParameter(BaseModel):
    """A single measured soil parameter as supplied by the extraction stage."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Parameter name as reported")
    value: float = Field(..., allow_inf_nan=False, description="Measured value")
    unit: str = Field(default="", description="Unit of measurement")
    range: ParameterRange
    status: ParameterStatus
    confidence: float = Field(default=1.0, ge=0.0, le=1.0, description="Extraction confidence")


class SoilNutrients(BaseModel):
    """
    Primary soil parameters.

    pH, nitrogen, phosphorus and potassium are expected on every report; a
    report lacking them is still accepted and flagged by the validator.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    ph: Optional[SoilParameter] = Field(None, alias="pH")
    nitrogen: Optional[SoilParameter] = None
    phosphorus: Optional[SoilParameter] = None
    potassium: Optional[SoilParameter] = None
    organic_carbon: Optional[SoilParameter] = Field(None, alias="organicCarbon")
    electrical_conductivity: Optional[SoilParameter] = Field(None, alias="electricalConductivity")

    def get(self, name: SoilParameterName) -> Optional[SoilParameter]:
        return getattr(self, _NUTRIENT_FIELDS[name])

    def present(self) -> List[Tuple[SoilParameterName, SoilParameter]]:
        """Present parameters in report order."""
        result = []
        for name, field_name in _NUTRIENT_FIELDS.items():
            parameter = getattr(self, field_name)
            if parameter is not None:
                result.append((name, parameter))
        return result

    def missing_required(self) -> List[SoilParameterName]:
        return [name for name in REQUIRED_PARAMETERS if self.get(name) is None]


_NUTRIENT_FIELDS = {
    SoilParameterName.PH: "ph",
    SoilParameterName.NITROGEN: "nitrogen",
    SoilParameterName.PHOSPHORUS: "phosphorus",
    SoilParameterName.POTASSIUM: "potassium",
    SoilParameterName.ORGANIC_CARBON: "organic_carbon",
    SoilParameterName.ELECTRICAL_CONDUCTIVITY: "electrical_conductivity",
}


class Micronutrients(BaseModel):
    """Optional micronutrient measurements (ppm)."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    zinc: Optional[SoilParameter] = None
    iron: Optional[SoilParameter] = None
    manganese: Optional[SoilParameter] = None
    copper: Optional[SoilParameter] = None
    boron: Optional[SoilParameter] = None
    sulfur: Optional[SoilParameter] = None

    def get(self, name: SoilParameterName) -> Optional[SoilParameter]:
        return getattr(self, name.value)

    def present(self) -> List[Tuple[SoilParameterName, SoilParameter]]:
        return [
            (name, getattr(self, name.value))
            for name in MICRONUTRIENTS
            if getattr(self, name.value) is not None
        ]


# ==================== OPTION SCHEMAS ====================

class ValidationOptions(BaseModel):
    """Options for soil data validation."""
    model_config = ConfigDict(frozen=True)

    strict_mode: bool = Field(default=False, description="Escalate atypical values to errors")
    enable_statistical_analysis: bool = Field(default=True)
    enable_cross_parameter_validation: bool = Field(default=True)
    confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    crop_type: Optional[str] = Field(None, description="Crop planned for this field, enables crop pH checks")


class BudgetRange(BaseModel):
    """Budget bounds available for soil improvement."""
    model_config = ConfigDict(frozen=True)

    min: float = Field(default=0.0, ge=0)
    max: float = Field(..., ge=0)
    currency: str = Field(default="INR")

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min > self.max:
            raise ValueError(f"budget min {self.min} is greater than max {self.max}")
        return self


class RemediationPreferences(BaseModel):
    """Farmer preferences applied when selecting remediation materials."""
    model_config = ConfigDict(frozen=True)

    organic: bool = False
    quick_results: bool = False
    sustainable_focus: bool = False


class CropRecommendationOptions(BaseModel):
    """Options for crop recommendation from soil data."""
    model_config = ConfigDict(frozen=True)

    season: SeasonFilter = Field(default=SeasonFilter.ALL)
    farm_size: float = Field(default=1.0, gt=0, description="Farm size in hectares")
    budget: Optional[BudgetRange] = None
    risk_tolerance: RiskTolerance = Field(default=RiskTolerance.MEDIUM)
    market_focus: MarketFocus = Field(default=MarketFocus.LOCAL)
    organic_preference: bool = False
    experience_level: ExperienceLevel = Field(default=ExperienceLevel.INTERMEDIATE)
    irrigation_available: bool = True
    max_recommendations: int = Field(default=10, ge=1, le=100)
