"""
Crop Suitability Service.

Scores every crop in the crop knowledge base against measured soil pH, N, P
and K, and builds ranked recommendations with yield and profitability
projections, cultivation guidance and crop-specific soil improvements.

The "improved soil" operations use simulate_improved_soil_conditions, an
approximate forward model that nudges out-of-range values by fixed steps.
It is not a soil-chemistry simulation.
"""
import json
import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from soil_advisory.schemas.soil_schemas import (
    BudgetRange,
    CropRecommendationOptions,
    ExperienceLevel,
    MarketFocus,
    ParameterStatus,
    RiskTolerance,
    Season,
    SeasonFilter,
    SoilNutrients,
    SoilParameterName,
    WaterRequirement,
)
from soil_advisory.services import soil_rules as rules
from soil_advisory.services.remediation_planner import CostRange
from soil_advisory.services.soil_inputs import (
    InputError,
    coerce_crop_options,
    coerce_micronutrients,
    coerce_nutrients,
)

logger = logging.getLogger(__name__)

CROP_DATABASE_ENV = "SOIL_ADVISORY_CROP_DATABASE"
CROP_DATABASE_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "crop_database.json")

_crop_database_cache = None


def get_crop_database_path() -> str:
    return os.environ.get(CROP_DATABASE_ENV) or CROP_DATABASE_PATH


def clear_crop_database_cache():
    """Clear the cache to reload the crop database on next call."""
    global _crop_database_cache
    _crop_database_cache = None


def load_crop_database() -> Dict:
    """Load the crop knowledge base from JSON file."""
    global _crop_database_cache
    if _crop_database_cache is not None:
        return _crop_database_cache

    path = get_crop_database_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            _crop_database_cache = json.load(f)
            return _crop_database_cache
    except (OSError, ValueError) as e:
        logger.error(f"Error loading crop database from {path}: {e}")
        return {"crops": []}


# ==================== STATIC GUIDANCE ====================

RISK_MITIGATIONS = {
    "Water dependency": "Install drip irrigation or rainwater harvesting",
    "Pest attacks": "Use integrated pest management and resistant varieties",
    "Weather sensitivity": "Choose appropriate sowing time and use weather forecasts",
    "Price volatility": "Diversify crops and use contract farming",
    "Price fluctuation": "Stagger sales and use warehouse receipts",
    "Market glut": "Plan harvest timing and explore value addition",
    "Storage issues": "Improve storage facilities and use proper drying",
    "High water requirement": "Ensure adequate irrigation and water conservation",
    "Long duration": "Plan crop rotation and intercropping carefully",
    "Waterlogging": "Sow on raised beds and keep drainage channels open",
    "Drought stress": "Conserve moisture with mulching and protective irrigation",
    "Wilt disease": "Use wilt-resistant varieties and rotate with cereals",
}
DEFAULT_MITIGATION = "Consult agricultural experts for specific guidance"

# Words marking a risk as market driven; risk tolerance changes their severity.
MARKET_RISK_MARKERS = ("price", "market", "glut", "volatility", "fluctuation")
MARKET_RISK_SEVERITY = {
    RiskTolerance.LOW: "high",
    RiskTolerance.MEDIUM: "medium",
    RiskTolerance.HIGH: "low",
}

# Extra risk carried by the selling channel.
MARKET_FOCUS_RISKS = {
    MarketFocus.EXPORT: (
        "Export quality and residue standards",
        "medium",
        "Follow pesticide residue limits and grading norms required by export buyers",
    ),
    MarketFocus.PROCESSING: (
        "Dependence on processor contracts",
        "low",
        "Agree quantity, grade and price with the processor before sowing",
    ),
}

SOWING_TIMES = {
    Season.KHARIF: "June-July (with monsoon onset)",
    Season.RABI: "October-December (post-monsoon)",
    Season.ZAID: "March-April (summer season)",
    Season.PERENNIAL: "Monsoon season for planting",
}

HARVEST_TIMES = {
    Season.KHARIF: "October-December",
    Season.RABI: "March-May",
    Season.ZAID: "June-July",
    Season.PERENNIAL: "Season-specific harvesting",
}

DEFAULT_KEY_PRACTICES = ["Follow recommended practices", "Monitor crop regularly", "Maintain proper nutrition"]
DEFAULT_EXPERT_TIPS = ["Use quality inputs", "Follow scientific practices", "Seek expert advice when needed"]

LIMITATION_ADVICE = {
    "acidic": (
        "Acidic soil reduces nutrient availability and limits crop choices",
        ["Apply agricultural lime", "Add organic matter", "Use acid-tolerant varieties"],
    ),
    "alkaline": (
        "Alkaline soil causes nutrient deficiencies and poor crop growth",
        ["Add sulfur or gypsum", "Increase organic matter", "Improve drainage"],
    ),
    SoilParameterName.NITROGEN: (
        "Low nitrogen limits plant growth and reduces yield potential",
        [
            "Apply nitrogen fertilizers (urea, ammonium sulfate)",
            "Use organic sources (FYM, compost)",
            "Grow leguminous crops for nitrogen fixation",
        ],
    ),
    SoilParameterName.PHOSPHORUS: (
        "Phosphorus deficiency affects root development and flowering",
        [
            "Apply phosphatic fertilizers (DAP, SSP)",
            "Use rock phosphate for long-term supply",
            "Apply near root zone for better uptake",
        ],
    ),
    SoilParameterName.POTASSIUM: (
        "Potassium deficiency reduces disease resistance and fruit quality",
        [
            "Apply potassic fertilizers (MOP, SOP)",
            "Use wood ash or banana peels",
            "Apply during fruit development stage",
        ],
    ),
}

# Crop-independent improvement plan entries: amendment, quantity, cost range, expected improvement.
IMPROVEMENT_AMENDMENTS = {
    "acidic": ("Agricultural Lime", "500-1000 kg per hectare", (2000, 4000),
               "Increase pH to optimal range (6.0-7.5)"),
    "alkaline": ("Sulfur", "200-400 kg per hectare", (1500, 3000),
                 "Reduce pH to optimal range (6.0-7.5)"),
    SoilParameterName.NITROGEN: ("Farmyard Manure", "10-15 tons per hectare", (5000, 8000),
                                 "Increase nitrogen and organic matter content"),
    SoilParameterName.PHOSPHORUS: ("Rock Phosphate", "300-500 kg per hectare", (3000, 5000),
                                   "Long-term phosphorus supply"),
    SoilParameterName.POTASSIUM: ("Muriate of Potash", "100-150 kg per hectare", (2000, 3500),
                                  "Improve potassium levels and plant health"),
    "compost": ("Compost", "5-8 tons per hectare", (3000, 5000),
                "Improve soil structure and nutrient retention"),
}

IMPROVEMENT_TIMELINE = "3-6 months for visible improvements"
IMPROVEMENT_BENEFITS = [
    "Improved crop suitability scores",
    "Higher expected yields",
    "Better nutrient availability",
    "Enhanced soil structure",
    "Reduced production risks",
    "Long-term soil health improvement",
]

SCORED_NUTRIENTS = (
    (SoilParameterName.NITROGEN, "Nitrogen"),
    (SoilParameterName.PHOSPHORUS, "Phosphorus"),
    (SoilParameterName.POTASSIUM, "Potassium"),
)


# ==================== DATA TYPES ====================

@dataclass(frozen=True)
class ValueRange:
    min: float
    max: float


@dataclass(frozen=True)
class CropRequirements:
    optimal_ph: ValueRange
    nitrogen: ValueRange
    phosphorus: ValueRange
    potassium: ValueRange
    fertilizer_requirement: Dict[str, ValueRange]
    water_requirement: WaterRequirement
    soil_types: List[str]

    def band(self, name: SoilParameterName) -> ValueRange:
        if name == SoilParameterName.PH:
            return self.optimal_ph
        return getattr(self, name.value)


@dataclass(frozen=True)
class CropProfile:
    """One crop of the knowledge base."""
    crop_id: str
    crop_name: str
    local_name: str
    season: Season
    requirements: CropRequirements
    expected_yield: ValueRange
    yield_unit: str
    market_price: ValueRange
    input_costs: ValueRange
    duration: int
    risk_factors: List[str]
    key_practices: List[str]
    expert_tips: List[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CropProfile":
        soil = data["soil_requirements"]
        fertilizer = data.get("fertilizer_requirement", {})
        return cls(
            crop_id=str(data["crop_id"]),
            crop_name=str(data["crop_name"]),
            local_name=str(data.get("local_name", "")),
            season=Season(data["season"]),
            requirements=CropRequirements(
                optimal_ph=_range(soil["ph"]),
                nitrogen=_range(soil["nitrogen"]),
                phosphorus=_range(soil["phosphorus"]),
                potassium=_range(soil["potassium"]),
                fertilizer_requirement={key: _range(value) for key, value in fertilizer.items()},
                water_requirement=WaterRequirement(data.get("water_requirement", "medium")),
                soil_types=list(data.get("soil_types", [])),
            ),
            expected_yield=_range(data["expected_yield"]),
            yield_unit=data["expected_yield"].get("unit", "kg/ha"),
            market_price=_range(data["market_price"]),
            input_costs=_range(data["input_costs"]),
            duration=int(data["duration"]),
            risk_factors=list(data.get("risk_factors", [])),
            key_practices=list(data.get("key_practices") or DEFAULT_KEY_PRACTICES),
            expert_tips=list(data.get("expert_tips") or DEFAULT_EXPERT_TIPS),
        )


def _range(data: Dict[str, Any]) -> ValueRange:
    low, high = float(data["min"]), float(data["max"])
    if low > high:
        raise ValueError(f"range min {low} is greater than max {high}")
    return ValueRange(min=low, max=high)


@dataclass(frozen=True)
class SoilCompatibility:
    ph_suitability: int
    nutrient_suitability: int
    overall_soil_match: int
    limiting_factors: List[str]


@dataclass(frozen=True)
class RiskFactor:
    factor: str
    severity: str
    mitigation: str


@dataclass(frozen=True)
class Profitability:
    gross_income: ValueRange
    input_costs: ValueRange
    net_profit: ValueRange
    roi: int


@dataclass(frozen=True)
class CropProjections:
    expected_yield: ValueRange
    yield_unit: str
    market_price: CostRange
    profitability: Profitability
    risk_factors: List[RiskFactor]


@dataclass(frozen=True)
class CultivationGuide:
    sowing_time: str
    harvest_time: str
    duration: int
    key_practices: List[str]
    common_challenges: List[str]
    expert_tips: List[str]


@dataclass(frozen=True)
class Amendment:
    amendment: str
    quantity: str
    purpose: str
    timing: str


@dataclass(frozen=True)
class FertilizerApplication:
    fertilizer: str
    quantity: str
    timing: str
    method: str


@dataclass(frozen=True)
class SoilImprovements:
    required_amendments: List[Amendment]
    fertilization_plan: List[FertilizerApplication]
    estimated_cost: CostRange


@dataclass(frozen=True)
class CropRecommendation:
    crop_id: str
    crop_name: str
    local_name: str
    suitability_score: int
    confidence: float
    season: Season
    soil_compatibility: SoilCompatibility
    requirements: CropRequirements
    projections: CropProjections
    cultivation: CultivationGuide
    soil_improvements: SoilImprovements

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SoilLimitation:
    parameter: str
    current_value: float
    optimal_range: ValueRange
    impact: str
    improvement_suggestions: List[str]


@dataclass(frozen=True)
class CropSuitabilityAnalysis:
    total_crops_analyzed: int
    suitable_crops: int
    marginally_suitable_crops: int
    unsuitable_crops: int
    top_recommendations: List[CropRecommendation]
    soil_limitations: List[SoilLimitation]
    seasonal_recommendations: Dict[str, List[CropRecommendation]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ImprovementAmendment:
    amendment: str
    quantity: str
    cost: ValueRange
    expected_improvement: str


@dataclass(frozen=True)
class SoilImprovementPlan:
    amendments: List[ImprovementAmendment]
    timeline: str
    total_cost: CostRange
    expected_benefits: List[str]
    target_crops: List[str]


@dataclass(frozen=True)
class SoilImprovementRecommendations:
    current_suitability: List[CropRecommendation]
    with_improvements: List[CropRecommendation]
    improvement_plan: SoilImprovementPlan

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ImprovementBenefits:
    suitability_increase: int
    yield_increase: ValueRange
    profitability_increase: int
    risk_reduction: List[str]


@dataclass(frozen=True)
class CropImprovementComparison:
    current: Optional[CropRecommendation]
    improved: Optional[CropRecommendation]
    improvement_benefits: ImprovementBenefits

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ==================== SCORING ====================

def calculate_parameter_suitability(value: float, min_optimal: float, max_optimal: float) -> int:
    """
    Score how well a value matches an optimal band (0-100).

    100 inside the band. Outside it the score drops linearly by 60 points
    per tolerance window (half the band width), floored at 0. A band of zero
    width has no tolerance, so any value outside it scores 0.
    """
    if min_optimal <= value <= max_optimal:
        return 100

    tolerance = (max_optimal - min_optimal) * rules.SUITABILITY_TOLERANCE_FRACTION
    if tolerance <= 0:
        return 0

    distance = min_optimal - value if value < min_optimal else value - max_optimal
    score = max(0.0, 100 - (distance / tolerance) * rules.SUITABILITY_MAX_PENALTY)
    return int(round(score))


def simulate_improved_soil_conditions(nutrients: Any) -> SoilNutrients:
    """
    Approximate soil after standard amendments.

    pH below 6.0 rises by 1.0 (capped at 6.5), pH above 7.5 drops by 0.8
    (floored at 7.0). Deficient N, P and K rise by fixed increments up to
    fixed ceilings; a value already above its ceiling is kept. Changed
    parameters are marked optimal. The input is not modified; a new
    SoilNutrients is returned.
    """
    nutrients = coerce_nutrients(nutrients)
    updates = {}

    ph = nutrients.ph
    if ph is not None:
        optimal_min, optimal_max = rules.PH_OPTIMAL
        if ph.value < optimal_min:
            step, ceiling = rules.SIMULATION_PH_RAISE
            updates["ph"] = ph.model_copy(
                update={"value": min(ceiling, ph.value + step), "status": ParameterStatus.OPTIMAL}
            )
        elif ph.value > optimal_max:
            step, floor = rules.SIMULATION_PH_LOWER
            updates["ph"] = ph.model_copy(
                update={"value": max(floor, ph.value - step), "status": ParameterStatus.OPTIMAL}
            )

    for name, (step, ceiling) in rules.SIMULATION_NUTRIENT_STEPS.items():
        parameter = nutrients.get(name)
        if parameter is not None and parameter.status == ParameterStatus.DEFICIENT:
            updates[name.value] = parameter.model_copy(
                update={
                    "value": max(parameter.value, min(ceiling, parameter.value + step)),
                    "status": ParameterStatus.OPTIMAL,
                }
            )

    return nutrients.model_copy(update=updates)


class CropSuitabilityService:
    """Crop recommendation engine over the static crop knowledge base."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def get_crop_profiles(self) -> List[CropProfile]:
        profiles = []
        for entry in load_crop_database().get("crops", []):
            try:
                profiles.append(CropProfile.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                crop_id = entry.get("crop_id", "?") if isinstance(entry, dict) else "?"
                self.logger.warning(f"Skipping malformed crop entry {crop_id}: {e}")
        return profiles

    def get_crop_recommendations_from_soil_data(
        self,
        nutrients: Any,
        micronutrients: Any = None,
        options: Any = None,
    ) -> CropSuitabilityAnalysis:
        """
        Rank crops by how well the soil suits them.

        Args:
            nutrients: SoilNutrients or mapping
            micronutrients: Optional Micronutrients or mapping
            options: CropRecommendationOptions or mapping

        Returns:
            CropSuitabilityAnalysis with crops scoring at least 40, best first
        """
        nutrients = coerce_nutrients(nutrients)
        coerce_micronutrients(micronutrients)
        options = coerce_crop_options(options)

        values, confidence = self._soil_inputs(nutrients)

        analyzed = 0
        retained: List[CropRecommendation] = []
        for crop in self.get_crop_profiles():
            if options.season != SeasonFilter.ALL and crop.season.value != options.season.value:
                continue
            analyzed += 1
            compatibility = self._analyze_crop_suitability(crop, values)
            if compatibility.overall_soil_match >= rules.MIN_RECOMMENDATION_SCORE:
                retained.append(self._build_recommendation(crop, compatibility, nutrients, confidence, options))

        retained = sorted(retained, key=lambda r: r.suitability_score, reverse=True)

        seasonal = {}
        for season in Season:
            limit = rules.SEASON_BUCKET_LIMITS[season.value]
            seasonal[season.value] = [r for r in retained if r.season == season][:limit]

        analysis = CropSuitabilityAnalysis(
            total_crops_analyzed=analyzed,
            suitable_crops=sum(1 for r in retained if r.suitability_score >= rules.SUITABLE_SCORE),
            marginally_suitable_crops=sum(
                1 for r in retained if rules.MARGINAL_SCORE <= r.suitability_score < rules.SUITABLE_SCORE
            ),
            unsuitable_crops=analyzed - len(retained),
            top_recommendations=retained[:options.max_recommendations],
            soil_limitations=self.analyze_soil_limitations(nutrients),
            seasonal_recommendations=seasonal,
        )

        self.logger.info(
            f"Crop suitability: {analyzed} analyzed, {len(retained)} retained, "
            f"{analysis.suitable_crops} suitable (season={options.season.value})"
        )
        return analysis

    def get_seasonal_crop_recommendations(
        self,
        nutrients: Any,
        season: Any,
        micronutrients: Any = None,
        options: Any = None,
    ) -> List[CropRecommendation]:
        """Top recommendations restricted to one season."""
        try:
            season = SeasonFilter(season)
        except ValueError as e:
            raise InputError(f"Unknown season: {season}") from e
        options = coerce_crop_options(options).model_copy(update={"season": season})
        return self.get_crop_recommendations_from_soil_data(nutrients, micronutrients, options).top_recommendations

    def get_crop_recommendations_with_soil_improvement(
        self,
        nutrients: Any,
        micronutrients: Any = None,
        target_crops: Optional[List[str]] = None,
        options: Any = None,
    ) -> SoilImprovementRecommendations:
        """Current recommendations next to the ones expected after soil improvement."""
        nutrients = coerce_nutrients(nutrients)
        current = self.get_crop_recommendations_from_soil_data(nutrients, micronutrients, options)
        improved = self.get_crop_recommendations_from_soil_data(
            simulate_improved_soil_conditions(nutrients), micronutrients, options
        )
        if target_crops is None:
            target_crops = [r.crop_name for r in current.top_recommendations[:3]]

        return SoilImprovementRecommendations(
            current_suitability=current.top_recommendations,
            with_improvements=improved.top_recommendations,
            improvement_plan=self._generate_soil_improvement_plan(nutrients, list(target_crops)),
        )

    def compare_crop_suitability_with_improvements(
        self,
        nutrients: Any,
        crop_name: str,
        micronutrients: Any = None,
        options: Any = None,
    ) -> CropImprovementComparison:
        """Compare one crop before and after simulated soil improvement."""
        nutrients = coerce_nutrients(nutrients)
        current_analysis = self.get_crop_recommendations_from_soil_data(nutrients, micronutrients, options)
        improved_analysis = self.get_crop_recommendations_from_soil_data(
            simulate_improved_soil_conditions(nutrients), micronutrients, options
        )
        current = _find_crop(current_analysis.top_recommendations, crop_name)
        improved = _find_crop(improved_analysis.top_recommendations, crop_name)

        def score(r: Optional[CropRecommendation]) -> int:
            return r.suitability_score if r else 0

        def yields(r: Optional[CropRecommendation]) -> Tuple[float, float]:
            if r is None:
                return 0, 0
            return r.projections.expected_yield.min, r.projections.expected_yield.max

        def roi(r: Optional[CropRecommendation]) -> int:
            return r.projections.profitability.roi if r else 0

        (current_min, current_max), (improved_min, improved_max) = yields(current), yields(improved)
        benefits = ImprovementBenefits(
            suitability_increase=score(improved) - score(current),
            yield_increase=ValueRange(min=improved_min - current_min, max=improved_max - current_max),
            profitability_increase=roi(improved) - roi(current),
            risk_reduction=self._calculate_risk_reduction(current, improved),
        )
        return CropImprovementComparison(current=current, improved=improved, improvement_benefits=benefits)

    def analyze_soil_limitations(self, nutrients: Any) -> List[SoilLimitation]:
        """Crop-independent limitations of the soil."""
        nutrients = coerce_nutrients(nutrients)
        limitations = []

        if nutrients.ph is not None:
            low, high = rules.LIMITATION_BANDS[SoilParameterName.PH]
            value = nutrients.ph.value
            if value < low or value > high:
                impact, suggestions = LIMITATION_ADVICE["acidic" if value < low else "alkaline"]
                limitations.append(SoilLimitation(
                    parameter=SoilParameterName.PH.value,
                    current_value=value,
                    optimal_range=ValueRange(min=low, max=high),
                    impact=impact,
                    improvement_suggestions=list(suggestions),
                ))

        for name, _ in SCORED_NUTRIENTS:
            parameter = nutrients.get(name)
            if parameter is None or parameter.status != ParameterStatus.DEFICIENT:
                continue
            low, high = rules.LIMITATION_BANDS[name]
            impact, suggestions = LIMITATION_ADVICE[name]
            limitations.append(SoilLimitation(
                parameter=name.value,
                current_value=parameter.value,
                optimal_range=ValueRange(min=low, max=high),
                impact=impact,
                improvement_suggestions=list(suggestions),
            ))
        return limitations

    # ==================== INTERNALS ====================

    def _soil_inputs(self, nutrients: SoilNutrients) -> Tuple[Dict[SoilParameterName, float], float]:
        """Values used for scoring, and the recommendation confidence."""
        values = {}
        confidences = []
        missing = []
        for name in (SoilParameterName.PH,) + tuple(n for n, _ in SCORED_NUTRIENTS):
            parameter = nutrients.get(name)
            if parameter is None:
                missing.append(name.value)
                values[name] = rules.DEFAULT_PH_WHEN_MISSING if name == SoilParameterName.PH else 0.0
            else:
                values[name] = parameter.value
                confidences.append(parameter.confidence)

        if missing:
            self.logger.warning(f"Scoring crops without {', '.join(missing)}; using default values")

        if confidences:
            confidence = rules.BASE_RECOMMENDATION_CONFIDENCE * sum(confidences) / len(confidences)
        else:
            confidence = 0.0
        return values, round(min(1.0, max(0.0, confidence)), 4)

    def _analyze_crop_suitability(
        self, crop: CropProfile, values: Dict[SoilParameterName, float]
    ) -> SoilCompatibility:
        limiting = []

        ph_band = crop.requirements.optimal_ph
        ph_value = values[SoilParameterName.PH]
        ph_score = calculate_parameter_suitability(ph_value, ph_band.min, ph_band.max)
        if ph_score < rules.LIMITING_FACTOR_THRESHOLD:
            limiting.append(f"pH {'too acidic' if ph_value < ph_band.min else 'too alkaline'}")

        nutrient_scores = []
        for name, label in SCORED_NUTRIENTS:
            band = crop.requirements.band(name)
            value = values[name]
            sub_score = calculate_parameter_suitability(value, band.min, band.max)
            if sub_score < rules.LIMITING_FACTOR_THRESHOLD:
                limiting.append(f"{label} {'deficiency' if value < band.min else 'excess'}")
            nutrient_scores.append(sub_score)

        score = int(round(0.25 * (ph_score + sum(nutrient_scores))))
        score = min(100, max(0, score))
        self.logger.debug(f"{crop.crop_name}: pH {ph_score}, NPK {nutrient_scores}, score {score}")

        return SoilCompatibility(
            ph_suitability=ph_score,
            nutrient_suitability=int(round(sum(nutrient_scores) / len(nutrient_scores))),
            overall_soil_match=score,
            limiting_factors=limiting,
        )

    def _build_recommendation(
        self,
        crop: CropProfile,
        compatibility: SoilCompatibility,
        nutrients: SoilNutrients,
        confidence: float,
        options: CropRecommendationOptions,
    ) -> CropRecommendation:
        factor = compatibility.overall_soil_match / 100
        yield_min = crop.expected_yield.min * factor
        yield_max = crop.expected_yield.max * factor
        gross_min = yield_min * crop.market_price.min
        gross_max = yield_max * crop.market_price.max
        costs = crop.input_costs
        net_min = gross_min - costs.max
        net_max = gross_max - costs.min
        mean_cost = (costs.min + costs.max) / 2
        roi = ((net_min + net_max) / 2) / mean_cost * 100 if mean_cost > 0 else 0.0

        soil_improvements = self._soil_improvements(crop, nutrients, options)

        return CropRecommendation(
            crop_id=crop.crop_id,
            crop_name=crop.crop_name,
            local_name=crop.local_name,
            suitability_score=compatibility.overall_soil_match,
            confidence=confidence,
            season=crop.season,
            soil_compatibility=compatibility,
            requirements=crop.requirements,
            projections=CropProjections(
                expected_yield=ValueRange(min=round(yield_min), max=round(yield_max)),
                yield_unit=crop.yield_unit,
                market_price=CostRange(min=crop.market_price.min, max=crop.market_price.max),
                profitability=Profitability(
                    gross_income=ValueRange(min=round(gross_min), max=round(gross_max)),
                    input_costs=costs,
                    net_profit=ValueRange(min=round(net_min), max=round(net_max)),
                    roi=int(round(roi)),
                ),
                risk_factors=self._risk_factors(crop, soil_improvements.estimated_cost, options),
            ),
            cultivation=CultivationGuide(
                sowing_time=SOWING_TIMES.get(crop.season, "Consult local agricultural calendar"),
                harvest_time=HARVEST_TIMES.get(crop.season, f"{crop.duration} days after sowing"),
                duration=crop.duration,
                key_practices=list(crop.key_practices),
                common_challenges=list(crop.risk_factors),
                expert_tips=list(crop.expert_tips),
            ),
            soil_improvements=soil_improvements,
        )

    def _risk_factors(
        self, crop: CropProfile, improvement_cost: CostRange, options: CropRecommendationOptions
    ) -> List[RiskFactor]:
        risks = []
        for factor in crop.risk_factors:
            severity = "medium"
            if any(marker in factor.lower() for marker in MARKET_RISK_MARKERS):
                severity = MARKET_RISK_SEVERITY[options.risk_tolerance]
            risks.append(RiskFactor(
                factor=factor,
                severity=severity,
                mitigation=RISK_MITIGATIONS.get(factor, DEFAULT_MITIGATION),
            ))

        if not options.irrigation_available and crop.requirements.water_requirement == WaterRequirement.HIGH:
            risks.append(RiskFactor(
                factor="No irrigation for a high water requirement crop",
                severity="high",
                mitigation="Arrange protective irrigation before sowing or choose a low-water crop",
            ))

        if options.market_focus in MARKET_FOCUS_RISKS:
            factor, severity, mitigation = MARKET_FOCUS_RISKS[options.market_focus]
            risks.append(RiskFactor(factor=factor, severity=severity, mitigation=mitigation))

        if (options.experience_level == ExperienceLevel.BEGINNER
                and crop.duration > rules.BEGINNER_MAX_CROP_DURATION):
            risks.append(RiskFactor(
                factor="Long-duration crop for a beginner grower",
                severity="medium",
                mitigation="Start on a small plot and follow the local extension calendar closely",
            ))

        budget: Optional[BudgetRange] = options.budget
        if budget is not None and improvement_cost.min > budget.max:
            risks.append(RiskFactor(
                factor="Budget below required soil improvement cost",
                severity="medium",
                mitigation="Prioritise pH correction and the most limiting nutrient first",
            ))
        return risks

    def _soil_improvements(
        self, crop: CropProfile, nutrients: SoilNutrients, options: CropRecommendationOptions
    ) -> SoilImprovements:
        amendments = self._required_amendments(crop, nutrients)
        count = len(amendments)
        return SoilImprovements(
            required_amendments=amendments,
            fertilization_plan=self._fertilization_plan(crop, options.organic_preference),
            estimated_cost=CostRange(
                min=count * rules.AMENDMENT_COST_MIN,
                max=count * rules.AMENDMENT_COST_MAX,
            ),
        )

    def _required_amendments(self, crop: CropProfile, nutrients: SoilNutrients) -> List[Amendment]:
        amendments = []
        requirements = crop.requirements

        if nutrients.ph is not None:
            ph = nutrients.ph.value
            band = requirements.optimal_ph
            if ph < band.min:
                amendments.append(Amendment(
                    amendment="Agricultural Lime",
                    quantity=f"{round((band.min - ph) * rules.LIME_KG_PER_PH_UNIT)} kg/ha",
                    purpose="Correct soil acidity",
                    timing="2-3 weeks before sowing",
                ))
            elif ph > band.max:
                amendments.append(Amendment(
                    amendment="Sulfur",
                    quantity=f"{round((ph - band.max) * rules.SULFUR_KG_PER_PH_UNIT)} kg/ha",
                    purpose="Reduce soil alkalinity",
                    timing="4-6 weeks before sowing",
                ))

        nitrogen = nutrients.nitrogen
        if nitrogen is not None and nitrogen.value < requirements.nitrogen.min:
            amendments.append(Amendment(
                amendment="Farmyard Manure",
                quantity="10-12 tons/ha",
                purpose="Increase nitrogen and organic matter",
                timing="3-4 weeks before sowing",
            ))

        phosphorus = nutrients.phosphorus
        if phosphorus is not None and phosphorus.value < requirements.phosphorus.min:
            amendments.append(Amendment(
                amendment="Single Super Phosphate",
                quantity="200-300 kg/ha",
                purpose="Improve phosphorus availability",
                timing="At sowing time",
            ))

        potassium = nutrients.potassium
        if potassium is not None and potassium.value < requirements.potassium.min:
            amendments.append(Amendment(
                amendment="Muriate of Potash",
                quantity="60-100 kg/ha",
                purpose="Improve potassium availability",
                timing="At sowing time",
            ))
        return amendments

    def _fertilization_plan(self, crop: CropProfile, organic: bool) -> List[FertilizerApplication]:
        nitrogen_dose = crop.requirements.fertilizer_requirement.get(SoilParameterName.NITROGEN.value)
        needs_top_dress = nitrogen_dose is not None and nitrogen_dose.min > rules.UREA_TOPDRESS_N_THRESHOLD

        if organic:
            plan = [FertilizerApplication(
                fertilizer="Vermicompost",
                quantity="2-3 tons/ha",
                timing="At sowing",
                method="Broadcast and incorporate",
            )]
            if needs_top_dress:
                plan.append(FertilizerApplication(
                    fertilizer="Jeevamrut",
                    quantity="500 L/ha",
                    timing="30-45 days after sowing",
                    method="With irrigation water",
                ))
            return plan

        plan = [FertilizerApplication(
            fertilizer="NPK Complex (12:32:16)",
            quantity="150-200 kg/ha",
            timing="At sowing",
            method="Broadcast and incorporate",
        )]
        if needs_top_dress:
            plan.append(FertilizerApplication(
                fertilizer="Urea",
                quantity="100-150 kg/ha",
                timing="30-45 days after sowing",
                method="Side dressing",
            ))
        return plan

    def _generate_soil_improvement_plan(self, nutrients: SoilNutrients, target_crops: List[str]) -> SoilImprovementPlan:
        keys = []
        if nutrients.ph is not None:
            low, high = rules.PH_OPTIMAL
            if nutrients.ph.value < low:
                keys.append("acidic")
            elif nutrients.ph.value > high:
                keys.append("alkaline")
        for name, _ in SCORED_NUTRIENTS:
            parameter = nutrients.get(name)
            if parameter is not None and parameter.status == ParameterStatus.DEFICIENT:
                keys.append(name)
        keys.append("compost")

        amendments = []
        for key in keys:
            name, quantity, (cost_min, cost_max), improvement = IMPROVEMENT_AMENDMENTS[key]
            amendments.append(ImprovementAmendment(
                amendment=name,
                quantity=quantity,
                cost=ValueRange(min=cost_min, max=cost_max),
                expected_improvement=improvement,
            ))

        return SoilImprovementPlan(
            amendments=amendments,
            timeline=IMPROVEMENT_TIMELINE,
            total_cost=CostRange(
                min=sum(a.cost.min for a in amendments),
                max=sum(a.cost.max for a in amendments),
            ),
            expected_benefits=list(IMPROVEMENT_BENEFITS),
            target_crops=target_crops,
        )

    def _calculate_risk_reduction(
        self, current: Optional[CropRecommendation], improved: Optional[CropRecommendation]
    ) -> List[str]:
        if current is None or improved is None:
            return []

        reductions = []
        if len(improved.soil_compatibility.limiting_factors) < len(current.soil_compatibility.limiting_factors):
            reductions.append("Reduced soil-related production risks")
        if improved.projections.profitability.roi > current.projections.profitability.roi:
            reductions.append("Improved financial returns and stability")
        if improved.suitability_score > current.suitability_score + 10:
            reductions.append("Better crop-soil compatibility reduces failure risk")
        return reductions


def _find_crop(recommendations: List[CropRecommendation], crop_name: str) -> Optional[CropRecommendation]:
    wanted = crop_name.strip().lower()
    for recommendation in recommendations:
        if recommendation.crop_name.lower() == wanted:
            return recommendation
    return None


crop_suitability_service = CropSuitabilityService()


def get_crop_recommendations_from_soil_data(
    nutrients: Any,
    micronutrients: Any = None,
    options: Any = None,
) -> CropSuitabilityAnalysis:
    return crop_suitability_service.get_crop_recommendations_from_soil_data(nutrients, micronutrients, options)


def get_seasonal_crop_recommendations(
    nutrients: Any,
    season: Any,
    micronutrients: Any = None,
    options: Any = None,
) -> List[CropRecommendation]:
    return crop_suitability_service.get_seasonal_crop_recommendations(nutrients, season, micronutrients, options)


def get_crop_recommendations_with_soil_improvement(
    nutrients: Any,
    micronutrients: Any = None,
    target_crops: Optional[List[str]] = None,
    options: Any = None,
) -> SoilImprovementRecommendations:
    return crop_suitability_service.get_crop_recommendations_with_soil_improvement(
        nutrients, micronutrients, target_crops, options
    )


def compare_crop_suitability_with_improvements(
    nutrients: Any,
    crop_name: str,
    micronutrients: Any = None,
    options: Any = None,
) -> CropImprovementComparison:
    return crop_suitability_service.compare_crop_suitability_with_improvements(
        nutrients, crop_name, micronutrients, options
    )
