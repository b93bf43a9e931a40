"""
Input coercion for the soil engine.

Callers may pass pydantic models or plain mappings from the extraction stage;
both are normalised to frozen models here. Structural problems surface as
InputError before any computation runs.
"""
import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from soil_advisory.schemas.soil_schemas import (
    BudgetRange,
    CropRecommendationOptions,
    Micronutrients,
    RemediationPreferences,
    SoilNutrients,
    ValidationOptions,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class InputError(ValueError):
    """Raised when soil input is structurally invalid (missing or malformed)."""
    pass


def _coerce(value: Any, model: Type[ModelT], label: str) -> ModelT:
    if isinstance(value, model):
        return value
    if isinstance(value, Mapping):
        try:
            return model.model_validate(dict(value))
        except ValidationError as e:
            raise InputError(f"Invalid {label}: {e}") from e
    raise InputError(f"{label} must be a {model.__name__} or a mapping, got {type(value).__name__}")


def coerce_nutrients(nutrients: Any) -> SoilNutrients:
    if nutrients is None:
        raise InputError("soil nutrients are required")
    return _coerce(nutrients, SoilNutrients, "soil nutrients")


def coerce_micronutrients(micronutrients: Any) -> Micronutrients:
    if micronutrients is None:
        return Micronutrients()
    return _coerce(micronutrients, Micronutrients, "micronutrients")


def coerce_validation_options(options: Any) -> ValidationOptions:
    if options is None:
        return ValidationOptions()
    return _coerce(options, ValidationOptions, "validation options")


def coerce_crop_options(options: Any) -> CropRecommendationOptions:
    if options is None:
        return CropRecommendationOptions()
    return _coerce(options, CropRecommendationOptions, "crop recommendation options")


def coerce_preferences(preferences: Any) -> RemediationPreferences:
    if preferences is None:
        return RemediationPreferences()
    return _coerce(preferences, RemediationPreferences, "remediation preferences")


def coerce_budget(budget: Any) -> Optional[BudgetRange]:
    if budget is None:
        return None
    return _coerce(budget, BudgetRange, "budget")


def check_farm_size(farm_size: Any) -> float:
    if isinstance(farm_size, bool) or not isinstance(farm_size, (int, float)):
        raise InputError(f"farm size must be a number, got {type(farm_size).__name__}")
    if not farm_size > 0 or farm_size == float("inf"):
        raise InputError(f"farm size must be a positive finite number of hectares, got {farm_size}")
    return float(farm_size)


def check_deficiency_list(deficiencies: Any) -> List:
    if deficiencies is None:
        raise InputError("deficiency list is required")
    if isinstance(deficiencies, (str, bytes, Mapping)) or not hasattr(deficiencies, "__iter__"):
        raise InputError(f"deficiencies must be a list, got {type(deficiencies).__name__}")
    return list(deficiencies)
