"""
Static impact / symptom / cause knowledge for soil deficiencies.

Records are keyed by parameter and deficiency tier. Lookups fall back to a
generic record when no detailed entry exists.
"""
from typing import Dict, List

from soil_advisory.schemas.soil_schemas import DeficiencyType as D
from soil_advisory.schemas.soil_schemas import SoilParameterName as P

DeficiencyInfo = Dict[str, List[str]]


def _info(impact: List[str], symptoms: List[str], causes: List[str]) -> DeficiencyInfo:
    return {"impact_on_crops": impact, "symptoms": symptoms, "causes": causes}


# pH records: causes differ between acidic and alkaline soils.
PH_KNOWLEDGE = {
    D.SEVERE: {
        "impact_on_crops": [
            "Severe nutrient lockup",
            "Poor root development",
            "Reduced crop yields (30-50%)",
            "Increased disease susceptibility",
        ],
        "symptoms": [
            "Yellowing of leaves",
            "Stunted plant growth",
            "Poor fruit/grain formation",
            "Increased pest problems",
        ],
        "acidic_causes": ["Excessive use of acidic fertilizers", "Acid rain", "Organic matter decomposition"],
        "alkaline_causes": ["High lime content", "Alkaline irrigation water", "Excessive lime application"],
    },
    D.MODERATE: {
        "impact_on_crops": [
            "Reduced nutrient availability",
            "Moderate yield reduction (15-30%)",
            "Slower plant growth",
        ],
        "symptoms": ["Slight leaf discoloration", "Reduced plant vigor", "Uneven crop growth"],
        "acidic_causes": ["Acidic fertilizers", "Natural soil acidity", "Heavy rainfall"],
        "alkaline_causes": ["Moderate lime content", "Alkaline water", "Natural soil alkalinity"],
    },
    D.MILD: {
        "impact_on_crops": ["Slightly reduced nutrient uptake", "Minor yield impact (5-15%)"],
        "symptoms": ["Subtle growth differences", "Occasional nutrient deficiency signs"],
        "acidic_causes": ["Natural soil variation", "Seasonal changes", "Fertilizer effects"],
        "alkaline_causes": ["Natural soil variation", "Seasonal changes", "Fertilizer effects"],
    },
}

MACRONUTRIENT_KNOWLEDGE = {
    P.NITROGEN: {
        D.SEVERE: _info(
            ["Severe growth stunting", "Yellowing of older leaves", "Poor grain/fruit development", "Yield loss 40-60%"],
            ["Pale yellow leaves", "Weak stems", "Reduced tillering", "Poor flowering"],
            ["Inadequate fertilizer application", "Leaching due to heavy rains", "Poor organic matter", "Continuous cropping"],
        ),
        D.MODERATE: _info(
            ["Reduced plant vigor", "Light green foliage", "Moderate yield reduction 20-40%"],
            ["Light green leaves", "Slower growth", "Reduced leaf size"],
            ["Insufficient nitrogen supply", "Seasonal leaching", "High crop demand"],
        ),
        D.MILD: _info(
            ["Slight growth reduction", "Minor yield impact 5-20%"],
            ["Slightly pale leaves", "Reduced growth rate"],
            ["Timing of fertilizer application", "Soil conditions"],
        ),
    },
    P.PHOSPHORUS: {
        D.SEVERE: _info(
            ["Poor root development", "Delayed maturity", "Purple leaf discoloration", "Yield loss 30-50%"],
            ["Dark green/purple leaves", "Stunted growth", "Poor flowering", "Weak root system"],
            ["Phosphorus fixation", "Low soil phosphorus", "High pH conditions", "Cold soil temperatures"],
        ),
        D.MODERATE: _info(
            ["Reduced root growth", "Delayed flowering", "Moderate yield reduction 15-30%"],
            ["Darker green foliage", "Slower establishment", "Reduced branching"],
            ["Moderate phosphorus deficiency", "Soil pH issues", "Organic matter depletion"],
        ),
        D.MILD: _info(
            ["Slight root development issues", "Minor yield impact 5-15%"],
            ["Subtle color changes", "Slightly delayed growth"],
            ["Seasonal availability", "Soil conditions"],
        ),
    },
    P.POTASSIUM: {
        D.SEVERE: _info(
            ["Leaf edge burning", "Weak stems", "Poor disease resistance", "Yield loss 25-45%"],
            ["Brown leaf margins", "Lodging", "Increased disease", "Poor fruit quality"],
            ["Inadequate potassium supply", "Leaching in sandy soils", "High magnesium/calcium", "Continuous cropping"],
        ),
        D.MODERATE: _info(
            ["Reduced disease resistance", "Moderate stem weakness", "Yield reduction 15-25%"],
            ["Yellowing leaf edges", "Reduced plant vigor", "Susceptibility to stress"],
            ["Moderate potassium deficiency", "Nutrient imbalance", "Soil type factors"],
        ),
        D.MILD: _info(
            ["Slight stress susceptibility", "Minor yield impact 5-15%"],
            ["Subtle leaf changes", "Reduced stress tolerance"],
            ["Seasonal demand", "Soil conditions"],
        ),
    },
}

GENERIC_MACRONUTRIENT_INFO = _info(
    ["General nutrient deficiency effects"],
    ["Reduced plant health"],
    ["Insufficient nutrient supply"],
)

ORGANIC_CARBON_INFO = _info(
    ["Poor soil structure", "Reduced water retention", "Lower nutrient availability", "Decreased microbial activity"],
    ["Hard, compacted soil", "Poor water infiltration", "Reduced crop vigor", "Increased erosion"],
    [
        "Lack of organic matter addition",
        "Excessive tillage",
        "Crop residue removal",
        "Continuous cropping without rotation",
    ],
)

MICRONUTRIENT_KNOWLEDGE = {
    P.ZINC: {
        D.SEVERE: _info(
            ["Severe stunting", "White bud/rosette formation", "Poor grain filling", "Yield loss 30-50%"],
            ["Interveinal chlorosis", "Shortened internodes", "Small leaves", "White buds"],
            ["High pH soils", "Excessive phosphorus", "Low organic matter", "Calcareous soils"],
        ),
        D.MODERATE: _info(
            ["Growth reduction", "Delayed maturity", "Yield reduction 15-30%"],
            ["Yellowing between veins", "Reduced leaf size", "Poor tillering"],
            ["Moderate zinc deficiency", "Soil pH issues", "Phosphorus interference"],
        ),
    },
    P.IRON: {
        D.SEVERE: _info(
            ["Severe chlorosis", "Leaf bleaching", "Poor photosynthesis", "Yield loss 25-40%"],
            ["Yellow/white leaves", "Green veins", "Leaf burn", "Stunted growth"],
            ["High pH/alkaline soils", "Waterlogged conditions", "High bicarbonate", "Excessive lime"],
        ),
    },
    P.MANGANESE: {
        D.SEVERE: _info(
            ["Interveinal chlorosis", "Necrotic spots", "Poor grain development", "Yield loss 20-35%"],
            ["Yellow leaves with green veins", "Brown spots", "Reduced vigor"],
            ["High pH soils", "Excessive liming", "Organic matter depletion", "Poor drainage"],
        ),
    },
}

SANDY_SOIL_LEACHING_CAUSE = "Leaching in light-textured (sandy) soil"


def get_ph_info(deficiency_type: D, acidic: bool) -> DeficiencyInfo:
    record = PH_KNOWLEDGE[deficiency_type]
    return _info(
        list(record["impact_on_crops"]),
        list(record["symptoms"]),
        list(record["acidic_causes"] if acidic else record["alkaline_causes"]),
    )


def get_macronutrient_info(name: P, deficiency_type: D) -> DeficiencyInfo:
    record = MACRONUTRIENT_KNOWLEDGE.get(name, {}).get(deficiency_type, GENERIC_MACRONUTRIENT_INFO)
    return {key: list(values) for key, values in record.items()}


def get_organic_carbon_info() -> DeficiencyInfo:
    return {key: list(values) for key, values in ORGANIC_CARBON_INFO.items()}


def get_micronutrient_info(name: P, deficiency_type: D) -> DeficiencyInfo:
    record = MICRONUTRIENT_KNOWLEDGE.get(name, {}).get(deficiency_type)
    if record is None:
        return _info(
            [f"{name.value.capitalize()} deficiency effects"],
            ["Micronutrient deficiency symptoms"],
            ["Insufficient micronutrient availability"],
        )
    return {key: list(values) for key, values in record.items()}
