"""
Shared soil report fixtures for the soil advisory test suites.
"""
import pytest

from soil_advisory.schemas.soil_schemas import (
    OptimalRange,
    ParameterRange,
    ParameterStatus,
    SoilNutrients,
    SoilParameter,
)
from soil_advisory.services.crop_suitability_service import clear_crop_database_cache
from soil_advisory.services.soil_parameters import build_micronutrients, build_soil_nutrients


# =============================================================================
# Soil reports
# =============================================================================

@pytest.fixture
def balanced_soil():
    """pH 6.8, N 245, P 18, K 156: a typical healthy alluvial soil."""
    return build_soil_nutrients(ph=6.8, nitrogen=245, phosphorus=18, potassium=156)


@pytest.fixture
def depleted_acidic_soil():
    """Acidic soil with deficient N, P and K and low organic carbon."""
    return build_soil_nutrients(ph=5.2, nitrogen=90, phosphorus=8, potassium=60, organic_carbon=0.3)


@pytest.fixture
def alkaline_soil():
    return build_soil_nutrients(ph=8.6, nitrogen=240, phosphorus=25, potassium=150)


@pytest.fixture
def deficient_nitrogen():
    """Extracted N record: 80 kg/ha against an optimal minimum of 200."""
    return SoilParameter(
        name="nitrogen",
        value=80,
        unit="kg/ha",
        range=ParameterRange(min=0, max=1000, optimal=OptimalRange(min=200, max=300)),
        status=ParameterStatus.DEFICIENT,
        confidence=0.9,
    )


@pytest.fixture
def nitrogen_deficient_soil(deficient_nitrogen, balanced_soil):
    return SoilNutrients(
        ph=balanced_soil.ph,
        nitrogen=deficient_nitrogen,
        phosphorus=balanced_soil.phosphorus,
        potassium=balanced_soil.potassium,
    )


@pytest.fixture
def low_micronutrients():
    """Zinc and iron well below their optimal bands."""
    return build_micronutrients(zinc=0.25, iron=2.5)


@pytest.fixture(autouse=True)
def fresh_crop_database():
    """Every test starts from the packaged crop database."""
    clear_crop_database_cache()
    yield
    clear_crop_database_cache()
