"""
Deterministic agronomic rules and thresholds for soil analysis.

This module centralizes constants so validation, deficiency, remediation and
crop scoring logic can remain deterministic, auditable, and consistent across
services and tests.
"""
from soil_advisory.schemas.soil_schemas import SoilParameterName as P

# Reference ranges: absolute (physically possible), typical (common soils),
# optimal (ideal for crops). Units: pH unitless, N/P/K kg/ha, OC %, EC dS/m,
# micronutrients ppm.
PARAMETER_RANGES = {
    P.PH: {"absolute": (3.0, 11.0), "typical": (4.0, 9.5), "optimal": (6.0, 7.5)},
    P.NITROGEN: {"absolute": (0.0, 1000.0), "typical": (50.0, 500.0), "optimal": (200.0, 300.0)},
    P.PHOSPHORUS: {"absolute": (0.0, 200.0), "typical": (5.0, 100.0), "optimal": (20.0, 40.0)},
    P.POTASSIUM: {"absolute": (0.0, 800.0), "typical": (50.0, 400.0), "optimal": (120.0, 200.0)},
    P.ORGANIC_CARBON: {"absolute": (0.0, 5.0), "typical": (0.2, 2.0), "optimal": (0.5, 1.5)},
    P.ELECTRICAL_CONDUCTIVITY: {"absolute": (0.0, 10.0), "typical": (0.1, 4.0), "optimal": (0.2, 0.8)},
    P.ZINC: {"absolute": (0.0, 20.0), "typical": (0.2, 10.0), "optimal": (1.0, 3.0)},
    P.IRON: {"absolute": (0.0, 100.0), "typical": (2.0, 50.0), "optimal": (10.0, 25.0)},
    P.MANGANESE: {"absolute": (0.0, 50.0), "typical": (1.0, 30.0), "optimal": (5.0, 15.0)},
    P.COPPER: {"absolute": (0.0, 10.0), "typical": (0.1, 5.0), "optimal": (0.5, 2.0)},
    P.BORON: {"absolute": (0.0, 5.0), "typical": (0.1, 2.0), "optimal": (0.5, 1.0)},
    P.SULFUR: {"absolute": (0.0, 100.0), "typical": (2.0, 50.0), "optimal": (10.0, 20.0)},
}

DEFAULT_UNITS = {
    P.PH: "",
    P.NITROGEN: "kg/ha",
    P.PHOSPHORUS: "kg/ha",
    P.POTASSIUM: "kg/ha",
    P.ORGANIC_CARBON: "%",
    P.ELECTRICAL_CONDUCTIVITY: "dS/m",
    P.ZINC: "ppm",
    P.IRON: "ppm",
    P.MANGANESE: "ppm",
    P.COPPER: "ppm",
    P.BORON: "ppm",
    P.SULFUR: "ppm",
}

# ---------------- validation ----------------

CRITICAL_PENALTY = {P.PH: 0.30, P.NITROGEN: 0.25, P.PHOSPHORUS: 0.25, P.POTASSIUM: 0.25}
DEFAULT_CRITICAL_PENALTY = 0.20
ATYPICAL_PENALTY = 0.10
MISSING_REQUIRED_PENALTY = 0.10

OUTLIER_Z_THRESHOLD = 2.5
SIGNIFICANT_DEVIATION_Z = 3.0
OUTLIER_CONFIDENCE_MAX = 0.9
OUTLIER_CONFIDENCE_MIN = 0.05
CONSISTENCY_OUTLIER_WEIGHT = 0.3
CONSISTENCY_CORRELATION_WEIGHT = 0.2

# 0.5 % organic carbon corresponds to ~280 kg/ha available N in the Indian rating chart.
OC_TO_N_FACTOR = 560.0
OC_N_TOLERANCE = 0.5

NP_RATIO_MAX = 25.0
NP_RATIO_MIN = 5.0
NP_RATIO_HIGH_MAX = 30.0
NP_RATIO_HIGH_MIN = 3.0
NP_RATIO_PENALTY = 0.10

K_BALANCE_LOW_FACTOR = 0.5
K_BALANCE_HIGH_FACTOR = 3.0
K_BALANCE_PENALTY = 0.05

PH_P_LOW = 5.5
PH_P_HIGH = 8.0
PH_P_EXPECTED_P = 10.0
PH_P_EXCESS_FACTOR = 1.5

PH_MICRO_ALKALINE = 7.5
PH_MICRO_PENALTY = 0.10

CONTEXT_PENALTY = 0.10

# pH tolerances used for crop-specific validation.
CROP_PH_TOLERANCE = {
    "rice": {"max": 8.0},
    "potato": {"max": 7.5},
    "tea": {"min": 4.5, "max": 6.0},
    "wheat": {"min": 5.5},
}

# ---------------- deficiency identification ----------------

PH_OPTIMAL = (6.0, 7.5)
PH_SEVERE = (5.0, 8.5)
PH_MODERATE = (5.5, 8.0)

MACRO_SEVERE_FRACTION = 0.5
MICRO_SEVERE_FRACTION = 0.3

ORGANIC_CARBON_OPTIMAL = (0.5, 1.5)
ORGANIC_CARBON_SEVERE = 0.25
ORGANIC_CARBON_MODERATE = 0.4

SEVERITY_WEIGHTS = {"severe": 100, "moderate": 60, "mild": 30}
IMPORTANCE_WEIGHTS = {
    P.PH: 1.2,
    P.NITROGEN: 1.1,
    P.PHOSPHORUS: 1.0,
    P.POTASSIUM: 1.0,
    P.ORGANIC_CARBON: 0.9,
}
DEFAULT_IMPORTANCE_WEIGHT = 0.8

# ---------------- remediation economics ----------------

CURRENCY = "INR"
LONG_TERM_HORIZON_YEARS = 3
SEASONS_PER_YEAR = 2
AVERAGE_YIELD_VALUE_PER_HA = 50000.0
EXPECTED_YIELD_INCREASE = 0.25

# ---------------- crop suitability ----------------

SUITABILITY_TOLERANCE_FRACTION = 0.5
SUITABILITY_MAX_PENALTY = 60.0
LIMITING_FACTOR_THRESHOLD = 60
MIN_RECOMMENDATION_SCORE = 40
SUITABLE_SCORE = 70
MARGINAL_SCORE = 50
BASE_RECOMMENDATION_CONFIDENCE = 0.8
DEFAULT_PH_WHEN_MISSING = 7.0

SEASON_BUCKET_LIMITS = {"kharif": 5, "rabi": 5, "zaid": 3, "perennial": 3}

LIME_KG_PER_PH_UNIT = 500
SULFUR_KG_PER_PH_UNIT = 200
AMENDMENT_COST_MIN = 1000
AMENDMENT_COST_MAX = 2000
UREA_TOPDRESS_N_THRESHOLD = 100
# Crops longer than this (days) carry an extra risk for beginner growers.
BEGINNER_MAX_CROP_DURATION = 150

# Crop-independent limitation bands.
LIMITATION_BANDS = {
    P.PH: (6.0, 7.5),
    P.NITROGEN: (200.0, 300.0),
    P.PHOSPHORUS: (20.0, 40.0),
    P.POTASSIUM: (120.0, 200.0),
}

# Improved-soil simulation: (delta, ceiling) for deficient macronutrients.
SIMULATION_NUTRIENT_STEPS = {
    P.NITROGEN: (100.0, 250.0),
    P.PHOSPHORUS: (20.0, 35.0),
    P.POTASSIUM: (60.0, 180.0),
}
SIMULATION_PH_RAISE = (1.0, 6.5)
SIMULATION_PH_LOWER = (0.8, 7.0)

# ---------------- reference classification ----------------

DEFICIENT_FRACTION = 0.7
EXCESSIVE_FACTOR = 1.3

# ---------------- soil health interpretation ----------------

HEALTH_PH_RANGE = (5.5, 8.0)
HEALTH_PENALTIES = {
    P.PH: 15,
    P.NITROGEN: 20,
    P.PHOSPHORUS: 15,
    P.POTASSIUM: 15,
}
HEALTH_MICRO_PENALTY = 5
HEALTH_LABELS = ((85, "excellent"), (70, "good"), (50, "fair"))
