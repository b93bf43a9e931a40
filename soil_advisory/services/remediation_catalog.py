"""
Static remediation knowledge: action templates, materials, seasonal calendars
and expected results.

Quantities are per hectare and keyed by deficiency tier. Costs are INR per
material unit.
"""
from soil_advisory.schemas.soil_schemas import DeficiencyType as D
from soil_advisory.schemas.soil_schemas import MaterialType as M
from soil_advisory.schemas.soil_schemas import SoilParameterName as P

READILY_AVAILABLE = "readily_available"
SEASONAL = "seasonal"
REQUIRES_SOURCING = "requires_sourcing"

# ==================== IMMEDIATE ACTIONS ====================

PH_IMMEDIATE = {
    "acidic": {
        "id": "lime_application_immediate",
        "action": "Apply Agricultural Lime",
        "description": "Quick lime application to raise soil pH and improve nutrient availability",
        "material": {
            "name": "Agricultural Lime (CaCO3)",
            "type": M.INORGANIC,
            "unit": "kg/hectare",
            "cost_per_unit": 8,
            "availability": READILY_AVAILABLE,
            "alternatives": ["Dolomitic lime", "Quick lime", "Wood ash"],
        },
        "quantities": {D.SEVERE: "1000-1500", D.MODERATE: "500-1000", D.MILD: "250-500"},
        "dosage_unit": "kg per hectare",
        "application_method": "Broadcast and incorporate into top 15-20 cm of soil",
        "frequency": "One-time application, retest after 3 months",
        "precautions": [
            "Do not apply during crop season",
            "Ensure uniform distribution",
            "Water lightly after application",
        ],
        "effectiveness": {D.SEVERE: 85, D.MODERATE: 75, D.MILD: 75},
    },
    "alkaline": {
        "id": "sulfur_application_immediate",
        "action": "Apply Elemental Sulfur",
        "description": "Sulfur application to lower soil pH in alkaline conditions",
        "material": {
            "name": "Elemental Sulfur",
            "type": M.INORGANIC,
            "unit": "kg/hectare",
            "cost_per_unit": 25,
            "availability": READILY_AVAILABLE,
            "alternatives": ["Gypsum", "Organic matter", "Acidic fertilizers"],
        },
        "quantities": {D.SEVERE: "300-500", D.MODERATE: "200-300", D.MILD: "100-200"},
        "dosage_unit": "kg per hectare",
        "application_method": "Broadcast and mix into soil before planting",
        "frequency": "One-time application, monitor pH monthly",
        "precautions": [
            "Apply 2-3 months before planting",
            "Ensure good soil moisture",
            "Monitor soil pH regularly",
        ],
        "effectiveness": {D.SEVERE: 80, D.MODERATE: 70, D.MILD: 70},
    },
}

# Macronutrient and organic carbon actions. Variants hold the material and
# the fields that change with an organic preference.
NUTRIENT_IMMEDIATE = {
    P.NITROGEN: {
        "id": "nitrogen_fertilizer_immediate",
        "action": "Apply Quick-Release Nitrogen Fertilizer",
        "description": "Immediate nitrogen supply to address deficiency and support plant growth",
        "quantities": {D.SEVERE: "150-200", D.MODERATE: "100-150", D.MILD: "50-100"},
        "dosage_unit": "kg per hectare",
        "frequency": "Split into 2-3 applications over 4-6 weeks",
        "precautions": [
            "Apply during cool hours",
            "Ensure adequate soil moisture",
            "Avoid over-application to prevent burning",
        ],
        "inorganic": {
            "material": {
                "name": "Urea (46-0-0)",
                "type": M.INORGANIC,
                "unit": "kg/hectare",
                "cost_per_unit": 25,
                "availability": READILY_AVAILABLE,
                "alternatives": ["Ammonium sulfate", "CAN", "NPK complex"],
            },
            "application_method": "Split application: 50% basal, 50% top dressing",
            "effectiveness": 85,
        },
        "organic": {
            "material": {
                "name": "Liquid Organic Fertilizer",
                "type": M.ORGANIC,
                "unit": "kg/hectare",
                "cost_per_unit": 45,
                "availability": READILY_AVAILABLE,
                "alternatives": ["Fish emulsion", "Compost tea", "Blood meal"],
            },
            "application_method": "Dilute and apply as foliar spray or soil drench",
            "effectiveness": 70,
        },
    },
    P.PHOSPHORUS: {
        "id": "phosphorus_fertilizer_immediate",
        "action": "Apply Phosphorus Fertilizer",
        "description": "Phosphorus application to improve root development and plant establishment",
        "quantities": {D.SEVERE: "100-150", D.MODERATE: "60-100", D.MILD: "30-60"},
        "dosage_unit": "kg per hectare",
        "frequency": "Single application at planting, side-dress if needed",
        "precautions": [
            "Place near root zone for better uptake",
            "Avoid surface application without incorporation",
            "Consider soil pH for optimal availability",
        ],
        "inorganic": {
            "material": {
                "name": "DAP (18-46-0)",
                "type": M.INORGANIC,
                "unit": "kg/hectare",
                "cost_per_unit": 35,
                "availability": READILY_AVAILABLE,
                "alternatives": ["SSP", "TSP", "NPK complex"],
            },
            "application_method": "Band placement near root zone or broadcast and incorporate",
            "effectiveness": 80,
        },
        "organic": {
            "material": {
                "name": "Bone Meal",
                "type": M.ORGANIC,
                "unit": "kg/hectare",
                "cost_per_unit": 60,
                "availability": READILY_AVAILABLE,
                "alternatives": ["Rock phosphate", "Compost", "Poultry manure"],
            },
            "application_method": "Band placement near root zone or broadcast and incorporate",
            "effectiveness": 65,
        },
    },
    P.POTASSIUM: {
        "id": "potassium_fertilizer_immediate",
        "action": "Apply Potassium Fertilizer",
        "description": "Potassium application to improve plant vigor and disease resistance",
        "quantities": {D.SEVERE: "120-180", D.MODERATE: "80-120", D.MILD: "40-80"},
        "dosage_unit": "kg per hectare",
        "frequency": "Split application: 60% basal, 40% at flowering",
        "precautions": [
            "Avoid chloride-sensitive crops if using KCl",
            "Ensure adequate soil moisture",
            "Monitor for salt buildup in arid regions",
        ],
        "inorganic": {
            "material": {
                "name": "Muriate of Potash (KCl)",
                "type": M.INORGANIC,
                "unit": "kg/hectare",
                "cost_per_unit": 30,
                "availability": READILY_AVAILABLE,
                "alternatives": ["SOP", "Potassium sulfate", "NPK complex"],
            },
            "application_method": "Broadcast and incorporate or side-dress around plants",
            "effectiveness": 75,
        },
        "organic": {
            "material": {
                "name": "Wood Ash",
                "type": M.ORGANIC,
                "unit": "kg/hectare",
                "cost_per_unit": 15,
                "availability": SEASONAL,
                "alternatives": ["Banana peel compost", "Kelp meal", "Greensand"],
            },
            "application_method": "Broadcast and incorporate or side-dress around plants",
            "effectiveness": 60,
        },
    },
    P.ORGANIC_CARBON: {
        "id": "quick_organic_matter",
        "action": "Apply Quick-Decomposing Organic Matter",
        "description": "Fast-acting organic matter to improve soil structure and microbial activity",
        "quantities": {D.SEVERE: "3-5", D.MODERATE: "2-3", D.MILD: "1-2"},
        "dosage_unit": "tons per hectare",
        "frequency": "Single application, repeat seasonally",
        "precautions": [
            "Ensure compost is well-decomposed",
            "Apply before planting or between crops",
            "Water lightly after application",
        ],
        "standard": {
            "material": {
                "name": "Well-decomposed Compost",
                "type": M.ORGANIC,
                "unit": "tons/hectare",
                "cost_per_unit": 2000,
                "availability": READILY_AVAILABLE,
                "alternatives": ["Vermicompost", "Aged FYM", "Biochar blend"],
            },
            "application_method": "Broadcast and incorporate into top 15 cm of soil",
            "effectiveness": 70,
        },
    },
}

# Sulfate salts by default, chelated or organic-certified forms under an
# organic preference.
MICRONUTRIENT_IMMEDIATE = {
    P.ZINC: {
        "quantities": {D.SEVERE: "25-40", D.MODERATE: "15-25", D.MILD: "10-15"},
        "inorganic": {"name": "Zinc Sulfate (ZnSO4)", "cost_per_unit": 60,
                      "alternatives": ["Zinc oxide", "Zinc chelate", "Zinc chloride"]},
        "organic": {"name": "Zinc Sulfate (Organic)", "cost_per_unit": 80,
                    "alternatives": ["Kelp meal", "Zinc-enriched compost", "Organic zinc chelate"]},
    },
    P.IRON: {
        "quantities": {D.SEVERE: "20-35", D.MODERATE: "10-20", D.MILD: "5-10"},
        "inorganic": {"name": "Ferrous Sulfate (FeSO4)", "cost_per_unit": 45,
                      "alternatives": ["Iron chelate", "Iron oxide", "Ferric chloride"]},
        "organic": {"name": "Iron Chelate (Organic)", "cost_per_unit": 120,
                    "alternatives": ["Iron-rich compost", "Seaweed extract", "Organic iron chelate"]},
    },
    P.MANGANESE: {
        "quantities": {D.SEVERE: "15-25", D.MODERATE: "8-15", D.MILD: "5-8"},
        "inorganic": {"name": "Manganese Sulfate (MnSO4)", "cost_per_unit": 55,
                      "alternatives": ["Manganese oxide", "Manganese chelate"]},
        "organic": {"name": "Manganese Sulfate (Organic)", "cost_per_unit": 90,
                    "alternatives": ["Manganese-enriched compost", "Organic chelates"]},
    },
    P.COPPER: {
        "quantities": {D.SEVERE: "8-15", D.MODERATE: "5-10", D.MILD: "3-5"},
        "inorganic": {"name": "Copper Sulfate (CuSO4)", "cost_per_unit": 70,
                      "alternatives": ["Copper oxide", "Copper chelate"]},
        "organic": {"name": "Copper Sulfate (Organic)", "cost_per_unit": 100,
                    "alternatives": ["Copper-enriched compost", "Organic copper chelate"]},
    },
    P.BORON: {
        "quantities": {D.SEVERE: "2-4", D.MODERATE: "1-2", D.MILD: "0.5-1"},
        "inorganic": {"name": "Borax (Na2B4O7)", "cost_per_unit": 80,
                      "alternatives": ["Boric acid", "Solubor"]},
        "organic": {"name": "Borax (Organic)", "cost_per_unit": 150,
                    "alternatives": ["Boron-rich compost", "Organic boron chelate"]},
    },
    P.SULFUR: {
        "quantities": {D.SEVERE: "400-600", D.MODERATE: "250-400", D.MILD: "150-250"},
        "inorganic": {"name": "Gypsum (CaSO4.2H2O)", "cost_per_unit": 6,
                      "alternatives": ["Ammonium sulfate", "Single super phosphate", "Bentonite sulfur"]},
        "organic": {"name": "Gypsum (Mined, Organic-certified)", "cost_per_unit": 8,
                    "alternatives": ["Pressmud compost", "Mustard cake", "Sulfur-enriched compost"]},
    },
}

MICRONUTRIENT_IMMEDIATE_TEMPLATE = {
    "id": "{key}_immediate",
    "action": "Apply {label} Fertilizer",
    "description": "Immediate {key} application to correct deficiency and restore plant function",
    "application_method": "Soil application or foliar spray for quick uptake",
    "frequency": "Single application, repeat if symptoms persist",
    "precautions": [
        "Avoid over-application to prevent toxicity",
        "Apply during cool hours for foliar application",
        "Ensure adequate soil moisture",
    ],
    "effectiveness": {"inorganic": 85, "organic": 70},
}

QUICK_RESULTS_OVERRIDES = {
    P.NITROGEN: {
        "application_method": "Top-dress immediately and irrigate lightly; follow with a 2% foliar spray",
        "frequency": "Immediate top dressing, balance within 2-3 weeks",
    },
    "micronutrient": {
        "application_method": "Foliar spray (0.5% solution) for fastest correction",
        "frequency": "Two sprays 10-15 days apart, soil application next season",
    },
}

# ==================== LONG-TERM ACTIONS ====================

LONG_TERM_ACTIONS = {
    P.PH: {
        "id": "organic_matter_ph_longterm",
        "action": "Build Organic Matter for pH Buffering",
        "description": "Long-term organic matter addition to naturally buffer soil pH",
        "material": {
            "name": "Farm Yard Manure (FYM)",
            "type": M.ORGANIC,
            "quantity": "8-12",
            "unit": "tons/hectare/year",
            "cost_per_unit": 1500,
            "availability": READILY_AVAILABLE,
            "alternatives": ["Compost", "Green manure", "Crop residues"],
        },
        "application_method": "Annual application and incorporation before main season",
        "dosage": "8-12 tons per hectare annually",
        "frequency": "Annual application for 3-5 years",
        "precautions": ["Use well-decomposed manure", "Apply during off-season", "Monitor pH changes annually"],
        "effectiveness": 85,
    },
    P.NITROGEN: {
        "id": "nitrogen_longterm_organic",
        "action": "Establish Nitrogen-Fixing System",
        "description": "Sustainable nitrogen supply through biological nitrogen fixation",
        "material": {
            "name": "Legume Cover Crop Seeds",
            "type": M.BIOLOGICAL,
            "quantity": "25-40",
            "unit": "kg/hectare",
            "cost_per_unit": 150,
            "availability": SEASONAL,
            "alternatives": ["Rhizobium inoculant", "Green manure crops", "Intercropping legumes"],
        },
        "application_method": "Intercropping or rotation with nitrogen-fixing legumes",
        "dosage": "25-40 kg seeds per hectare for cover crops",
        "frequency": "Include legumes in 30-50% of cropping system",
        "precautions": [
            "Select appropriate legume varieties",
            "Ensure proper inoculation",
            "Manage competition with main crops",
        ],
        "effectiveness": 80,
    },
    P.PHOSPHORUS: {
        "id": "phosphorus_longterm_organic",
        "action": "Build Soil Phosphorus Reserves",
        "description": "Long-term phosphorus management through organic and biological approaches",
        "material": {
            "name": "Rock Phosphate",
            "type": M.ORGANIC,
            "quantity": "200-400",
            "unit": "kg/hectare",
            "cost_per_unit": 20,
            "availability": READILY_AVAILABLE,
            "alternatives": ["Bone meal", "Phosphate-rich compost", "Mycorrhizal inoculants"],
        },
        "application_method": "Annual application with organic matter",
        "dosage": "200-400 kg per hectare annually",
        "frequency": "Annual application for 3-4 years, then maintenance",
        "precautions": [
            "Apply with organic matter for better availability",
            "Consider soil pH for optimal release",
            "Monitor soil P levels annually",
        ],
        "effectiveness": 75,
    },
    P.POTASSIUM: {
        "id": "potassium_longterm_organic",
        "action": "Sustainable Potassium Management",
        "description": "Long-term potassium supply through organic sources and conservation",
        "material": {
            "name": "Potassium-rich Compost",
            "type": M.ORGANIC,
            "quantity": "5-8",
            "unit": "tons/hectare/year",
            "cost_per_unit": 2500,
            "availability": READILY_AVAILABLE,
            "alternatives": ["Banana waste compost", "Kelp meal", "Wood ash"],
        },
        "application_method": "Annual compost application with crop residue management",
        "dosage": "5-8 tons per hectare annually",
        "frequency": "Annual application with residue incorporation",
        "precautions": [
            "Ensure balanced compost composition",
            "Incorporate crop residues to prevent K loss",
            "Monitor soil K status regularly",
        ],
        "effectiveness": 70,
    },
    P.ORGANIC_CARBON: {
        "id": "soil_carbon_building",
        "action": "Comprehensive Soil Carbon Building Program",
        "description": "Multi-year program to build soil organic matter and carbon",
        "material": {
            "name": "Diverse Organic Inputs",
            "type": M.ORGANIC,
            "quantity": "10-15",
            "unit": "tons/hectare/year",
            "cost_per_unit": 1800,
            "availability": READILY_AVAILABLE,
            "alternatives": ["Cover crops", "Agroforestry", "Integrated farming"],
        },
        "application_method": "Combination of FYM, compost, cover crops, and residue management",
        "dosage": "10-15 tons organic matter per hectare annually",
        "frequency": "Continuous program for 5+ years",
        "precautions": [
            "Diversify organic matter sources",
            "Minimize soil disturbance",
            "Maintain soil cover year-round",
        ],
        "effectiveness": 90,
    },
}

MICRONUTRIENT_LONG_TERM = {
    "id": "{key}_longterm",
    "action": "Long-term {label} Management",
    "description": "Sustainable {key} supply through organic matter and soil health improvement",
    "material": {
        "name": "Micronutrient-enriched Compost",
        "type": M.ORGANIC,
        "quantity": "3-5",
        "unit": "tons/hectare/year",
        "cost_per_unit": 3000,
        "availability": READILY_AVAILABLE,
        "alternatives": ["Biofortified organic matter", "Microbial inoculants", "Chelated micronutrients"],
    },
    "application_method": "Annual organic matter application with micronutrient supplementation",
    "dosage": "3-5 tons per hectare annually",
    "frequency": "Annual application for 2-3 years",
    "precautions": [
        "Monitor soil micronutrient levels annually",
        "Balance with other micronutrients",
        "Maintain optimal soil pH for availability",
    ],
    "effectiveness": 80,
}

INTEGRATED_SOIL_HEALTH_ACTION = {
    "id": "integrated_soil_health",
    "action": "Integrated Soil Health Management",
    "description": "Holistic approach to improve overall soil health and prevent future deficiencies",
    "material": {
        "name": "Soil Health Package",
        "type": M.BIOLOGICAL,
        "quantity": "1",
        "unit": "package/hectare",
        "cost_per_unit": 5000,
        "availability": REQUIRES_SOURCING,
        "alternatives": ["Custom microbial blend", "Diverse cover crop mix", "Agroecological practices"],
    },
    "application_method": "Integrated approach combining biological, organic, and conservation practices",
    "dosage": "Customized based on soil conditions and farming system",
    "frequency": "Ongoing management system",
    "precautions": [
        "Requires technical support",
        "Monitor soil health indicators",
        "Adapt practices based on results",
    ],
    "effectiveness": 95,
}

# ==================== SEASONAL TIMING ====================

SEASONAL_TIMING = {
    P.PH: {
        "best_season": ["Pre-monsoon (April-May)", "Post-harvest (November-December)"],
        "avoid_seasons": ["During crop season", "Heavy monsoon period"],
        "monthly_schedule": [
            ("April", ["Soil testing", "Lime procurement"], "high"),
            ("May", ["Lime application", "Soil incorporation"], "high"),
            ("June", ["Monitor pH changes"], "medium"),
            ("November", ["Post-harvest pH testing"], "medium"),
            ("December", ["Additional lime if needed"], "low"),
        ],
    },
    P.NITROGEN: {
        "best_season": ["Pre-planting", "Active growth period", "Split applications"],
        "avoid_seasons": ["Heavy rainfall period", "Dormant season"],
        "monthly_schedule": [
            ("March", ["Basal nitrogen application"], "high"),
            ("May", ["First top dressing"], "high"),
            ("July", ["Second top dressing"], "medium"),
            ("September", ["Final application if needed"], "low"),
        ],
    },
    P.PHOSPHORUS: {
        "best_season": ["Pre-planting", "Soil preparation time"],
        "avoid_seasons": ["During heavy rains", "Post-flowering"],
        "monthly_schedule": [
            ("March", ["Phosphorus application", "Soil incorporation"], "high"),
            ("April", ["Monitor plant response"], "medium"),
            ("June", ["Side dressing if needed"], "low"),
        ],
    },
    P.POTASSIUM: {
        "best_season": ["Pre-planting", "Flowering stage"],
        "avoid_seasons": ["Excessive moisture conditions"],
        "monthly_schedule": [
            ("March", ["Basal potassium application"], "high"),
            ("June", ["Flowering stage application"], "high"),
            ("August", ["Fruit development support"], "medium"),
        ],
    },
    P.ORGANIC_CARBON: {
        "best_season": ["Post-harvest", "Pre-monsoon preparation"],
        "avoid_seasons": ["Active crop season", "Peak monsoon"],
        "monthly_schedule": [
            ("November", ["Organic matter application"], "high"),
            ("December", ["Soil incorporation"], "high"),
            ("January", ["Composting preparation"], "medium"),
            ("April", ["Pre-season organic addition"], "medium"),
        ],
    },
}

DEFAULT_MICRONUTRIENT_TIMING = {
    "best_season": ["Pre-planting", "Early growth stage"],
    "avoid_seasons": ["Flowering period", "Harvest time"],
    "monthly_schedule": [
        ("March", ["Soil application"], "high"),
        ("May", ["Foliar application"], "medium"),
        ("July", ["Monitor deficiency symptoms"], "low"),
    ],
}

# ==================== EXPECTED RESULTS ====================

def _result(time, increase, yield_impact, soil_health, benefits):
    return {
        "time_to_improvement": time,
        "expected_increase": increase,
        "yield_impact": yield_impact,
        "soil_health_improvement": soil_health,
        "sustainability_benefits": benefits,
    }


EXPECTED_RESULTS = {
    P.PH: {
        D.SEVERE: _result(
            "2-3 months", "30-50% improvement in nutrient availability", "25-40% yield increase expected",
            "Significant improvement in overall soil health",
            ["Better nutrient use efficiency", "Reduced fertilizer requirements",
             "Improved soil microbial activity", "Enhanced root development"],
        ),
        D.MODERATE: _result(
            "1-2 months", "20-30% improvement in nutrient availability", "15-25% yield increase expected",
            "Moderate improvement in soil health",
            ["Improved nutrient uptake", "Better plant vigor", "Reduced nutrient losses"],
        ),
        D.MILD: _result(
            "3-6 weeks", "10-20% improvement in nutrient availability", "10-15% yield increase expected",
            "Gradual improvement in soil conditions",
            ["Optimized nutrient availability", "Stable soil conditions"],
        ),
    },
    P.NITROGEN: {
        D.SEVERE: _result(
            "2-4 weeks", "40-60% increase in plant vigor", "30-50% yield increase expected",
            "Improved soil biological activity",
            ["Enhanced plant growth", "Better protein content",
             "Improved soil organic matter", "Increased microbial diversity"],
        ),
        D.MODERATE: _result(
            "2-3 weeks", "25-40% increase in plant vigor", "20-30% yield increase expected",
            "Moderate improvement in soil biology",
            ["Better plant development", "Improved leaf color", "Enhanced tillering"],
        ),
        D.MILD: _result(
            "1-2 weeks", "15-25% increase in plant vigor", "10-20% yield increase expected",
            "Gradual improvement in plant health",
            ["Optimized growth rate", "Better stress tolerance"],
        ),
    },
    P.PHOSPHORUS: {
        D.SEVERE: _result(
            "4-6 weeks", "50-70% improvement in root development", "25-40% yield increase expected",
            "Significant improvement in root zone health",
            ["Enhanced root system", "Better flowering and fruiting",
             "Improved nutrient uptake", "Stronger plant establishment"],
        ),
        D.MODERATE: _result(
            "3-4 weeks", "30-50% improvement in root development", "15-25% yield increase expected",
            "Moderate improvement in root health",
            ["Better root growth", "Improved flowering", "Enhanced establishment"],
        ),
        D.MILD: _result(
            "2-3 weeks", "15-30% improvement in root development", "10-15% yield increase expected",
            "Gradual improvement in root zone",
            ["Optimized root function", "Better plant anchoring"],
        ),
    },
    P.POTASSIUM: {
        D.SEVERE: _result(
            "3-5 weeks", "40-60% improvement in disease resistance", "20-35% yield increase expected",
            "Enhanced plant stress tolerance",
            ["Better disease resistance", "Improved fruit quality",
             "Enhanced stress tolerance", "Stronger stems and branches"],
        ),
        D.MODERATE: _result(
            "2-4 weeks", "25-40% improvement in disease resistance", "15-25% yield increase expected",
            "Moderate improvement in plant health",
            ["Better plant vigor", "Improved quality", "Reduced lodging"],
        ),
        D.MILD: _result(
            "2-3 weeks", "15-25% improvement in disease resistance", "10-15% yield increase expected",
            "Gradual improvement in plant strength",
            ["Optimized plant function", "Better stress response"],
        ),
    },
    P.ORGANIC_CARBON: {
        D.SEVERE: _result(
            "3-6 months", "60-80% improvement in soil structure", "25-40% yield increase over 2-3 seasons",
            "Dramatic improvement in overall soil health",
            ["Better water retention", "Improved soil structure", "Enhanced microbial activity",
             "Increased nutrient cycling", "Reduced erosion", "Better carbon sequestration"],
        ),
        D.MODERATE: _result(
            "2-4 months", "40-60% improvement in soil structure", "15-25% yield increase over 2 seasons",
            "Significant improvement in soil properties",
            ["Improved water holding capacity", "Better soil aggregation", "Enhanced biological activity"],
        ),
        D.MILD: _result(
            "1-3 months", "20-40% improvement in soil structure", "10-15% yield increase over 1-2 seasons",
            "Gradual improvement in soil quality",
            ["Better soil tilth", "Improved nutrient retention"],
        ),
    },
}

DEFAULT_MICRONUTRIENT_RESULTS = {
    D.SEVERE: _result(
        "2-4 weeks", "30-50% reduction in deficiency symptoms", "15-25% yield increase expected",
        "Improved micronutrient availability",
        ["Better enzyme function", "Improved plant metabolism", "Enhanced crop quality"],
    ),
    D.MODERATE: _result(
        "1-3 weeks", "20-30% reduction in deficiency symptoms", "10-20% yield increase expected",
        "Moderate improvement in nutrient status",
        ["Better plant function", "Improved quality parameters"],
    ),
    D.MILD: _result(
        "1-2 weeks", "10-20% reduction in deficiency symptoms", "5-15% yield increase expected",
        "Gradual improvement in micronutrient status",
        ["Optimized plant metabolism"],
    ),
}

# ==================== INTEGRATED STRATEGY TEMPLATES ====================

# Fixed illustrative advisories, not derived from the deficiency set.
TEMPLATE_TIMELINE = (
    ("Immediate (0-2 weeks)", "2 weeks", ["Soil testing confirmation", "Material procurement"], 5000),
    ("Short-term (2-8 weeks)", "6 weeks", ["Primary treatments", "Fertilizer application"], 15000),
    ("Long-term (2-6 months)", "4 months", ["Organic matter addition", "Monitoring"], 10000),
)

TEMPLATE_SYNERGIES = (
    "Organic matter addition will improve multiple nutrient availability",
    "pH correction will enhance overall nutrient uptake",
    "Combined fertilizer application reduces labor costs",
)

TEMPLATE_WARNINGS = (
    "Avoid over-application of lime if pH is already borderline",
    "Monitor for nutrient interactions when applying multiple fertilizers",
    "Ensure proper timing to avoid nutrient losses",
)
