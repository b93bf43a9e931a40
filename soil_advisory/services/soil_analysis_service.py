"""
Soil Analysis Service.

Ties the engine together: soil health interpretation, deficiency analysis
with remediation, and the one-call pipeline that runs validation, deficiency
analysis and crop suitability on one soil report.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from soil_advisory.schemas.soil_schemas import (
    MACRONUTRIENTS,
    ParameterStatus,
    SoilParameterName,
)
from soil_advisory.services import soil_rules as rules
from soil_advisory.services.crop_suitability_service import (
    CropSuitabilityAnalysis,
    CropSuitabilityService,
    crop_suitability_service,
)
from soil_advisory.services.remediation_planner import (
    CostRange,
    IntegratedRemediationStrategy,
    RemediationPlan,
    RemediationPlannerService,
    remediation_planner_service,
)
from soil_advisory.services.soil_deficiency_service import (
    SoilDeficiency,
    SoilDeficiencyService,
    soil_deficiency_service,
)
from soil_advisory.services.soil_inputs import (
    coerce_crop_options,
    coerce_micronutrients,
    coerce_nutrients,
)
from soil_advisory.services.soil_validation_service import (
    SoilDataValidationService,
    ValidationResult,
    soil_data_validation_service,
)

logger = logging.getLogger(__name__)

NO_DEFICIENCY_ACTION = "Maintain current soil management practices"
NO_DEFICIENCY_BENEFIT = "Soil is in good condition"
PRIORITY_ACTION_COUNT = 3
BENEFITS_PER_PLAN = 2
MAX_BENEFITS = 5

HEALTH_CONCERNS = {
    SoilParameterName.PH: "Soil pH is outside optimal range for most crops",
    SoilParameterName.NITROGEN: "Nitrogen levels are below optimal - may affect plant growth",
    SoilParameterName.PHOSPHORUS: "Phosphorus deficiency detected - important for root development",
    SoilParameterName.POTASSIUM: "Potassium levels are low - affects disease resistance",
}

HEALTH_STRENGTHS = {
    SoilParameterName.PH: "Soil pH is in optimal range for crop growth",
    SoilParameterName.NITROGEN: "Nitrogen levels are adequate for healthy plant growth",
    SoilParameterName.PHOSPHORUS: "Phosphorus levels support good root development",
    SoilParameterName.POTASSIUM: "Potassium levels support plant disease resistance",
}


@dataclass(frozen=True)
class SoilHealthInterpretation:
    overall_health: str
    health_score: int
    primary_concerns: List[str]
    strengths: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DeficiencyAnalysis:
    deficiencies: List[SoilDeficiency]
    remediation_plans: List[RemediationPlan]
    integrated_strategy: Optional[IntegratedRemediationStrategy]
    priority_actions: List[str]
    estimated_cost: CostRange
    expected_benefits: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SoilAnalysisReport:
    validation: ValidationResult
    health: SoilHealthInterpretation
    deficiency_analysis: DeficiencyAnalysis
    crop_analysis: CropSuitabilityAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def health_label(score: float) -> str:
    for threshold, label in rules.HEALTH_LABELS:
        if score >= threshold:
            return label
    return "poor"


class SoilAnalysisService:
    """Orchestrates validator, deficiency identifier, planner and crop scorer."""

    def __init__(
        self,
        validation_service: Optional[SoilDataValidationService] = None,
        deficiency_service: Optional[SoilDeficiencyService] = None,
        planner_service: Optional[RemediationPlannerService] = None,
        crop_service: Optional[CropSuitabilityService] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.validation_service = validation_service or soil_data_validation_service
        self.deficiency_service = deficiency_service or soil_deficiency_service
        self.planner_service = planner_service or remediation_planner_service
        self.crop_service = crop_service or crop_suitability_service
        self.logger = logger or logging.getLogger(__name__)

    def interpret_soil_health(self, nutrients: Any, micronutrients: Any = None) -> SoilHealthInterpretation:
        """
        Score overall soil health from 100 down.

        pH outside 5.5-8.0 costs 15, deficient nitrogen 20, deficient
        phosphorus or potassium 15 each, every deficient micronutrient 5.
        """
        nutrients = coerce_nutrients(nutrients)
        micronutrients = coerce_micronutrients(micronutrients)
        concerns = []
        strengths = []
        score = 100

        if nutrients.ph is not None:
            value = nutrients.ph.value
            low, high = rules.HEALTH_PH_RANGE
            optimal_low, optimal_high = rules.PH_OPTIMAL
            if value < low or value > high:
                concerns.append(HEALTH_CONCERNS[SoilParameterName.PH])
                score -= rules.HEALTH_PENALTIES[SoilParameterName.PH]
            elif optimal_low <= value <= optimal_high:
                strengths.append(HEALTH_STRENGTHS[SoilParameterName.PH])

        for name in MACRONUTRIENTS:
            parameter = nutrients.get(name)
            if parameter is None:
                continue
            if parameter.status == ParameterStatus.DEFICIENT:
                concerns.append(HEALTH_CONCERNS[name])
                score -= rules.HEALTH_PENALTIES[name]
            elif parameter.status == ParameterStatus.OPTIMAL:
                strengths.append(HEALTH_STRENGTHS[name])

        deficient_micros = [
            name.value for name, parameter in micronutrients.present()
            if parameter.status == ParameterStatus.DEFICIENT
        ]
        if deficient_micros:
            concerns.append(f"Micronutrient deficiencies detected: {', '.join(deficient_micros)}")
            score -= len(deficient_micros) * rules.HEALTH_MICRO_PENALTY

        score = max(0, score)
        return SoilHealthInterpretation(
            overall_health=health_label(score),
            health_score=score,
            primary_concerns=concerns,
            strengths=strengths,
        )

    def analyze_deficiencies(
        self,
        nutrients: Any,
        micronutrients: Any = None,
        farm_size: float = 1,
        budget: Any = None,
        preferences: Any = None,
        soil_type: Optional[str] = None,
        crop_type: Optional[str] = None,
        derive_advisories: bool = False,
    ) -> DeficiencyAnalysis:
        """Deficiencies with their remediation plans, integrated strategy and summary."""
        deficiencies = self.deficiency_service.identify_deficiencies(
            nutrients, micronutrients, soil_type, crop_type
        )

        if not deficiencies:
            return DeficiencyAnalysis(
                deficiencies=[],
                remediation_plans=[],
                integrated_strategy=None,
                priority_actions=[NO_DEFICIENCY_ACTION],
                estimated_cost=CostRange(min=0.0, max=0.0),
                expected_benefits=[NO_DEFICIENCY_BENEFIT],
            )

        plans = self.planner_service.generate_remediation_plan(deficiencies, farm_size, budget, preferences)
        strategy = self.planner_service.get_integrated_remediation_strategy(
            deficiencies, farm_size, budget, preferences, derive_advisories
        )

        benefits: List[str] = []
        for plan in plans:
            for benefit in plan.expected_results.sustainability_benefits[:BENEFITS_PER_PLAN]:
                if benefit not in benefits:
                    benefits.append(benefit)

        return DeficiencyAnalysis(
            deficiencies=deficiencies,
            remediation_plans=plans,
            integrated_strategy=strategy,
            priority_actions=[a.action for a in strategy.prioritized_actions[:PRIORITY_ACTION_COUNT]],
            estimated_cost=strategy.total_cost.total_per_hectare,
            expected_benefits=benefits[:MAX_BENEFITS],
        )

    def run_soil_analysis(
        self,
        nutrients: Any,
        micronutrients: Any = None,
        validation_options: Any = None,
        crop_options: Any = None,
        farm_size: Optional[float] = None,
        budget: Any = None,
        preferences: Any = None,
        soil_type: Optional[str] = None,
        crop_type: Optional[str] = None,
        derive_advisories: bool = False,
    ) -> SoilAnalysisReport:
        """
        Run the full soil pipeline on one report.

        farm_size defaults to the farm size in crop_options.
        """
        nutrients = coerce_nutrients(nutrients)
        micronutrients = coerce_micronutrients(micronutrients)
        crop_options = coerce_crop_options(crop_options)
        if farm_size is None:
            farm_size = crop_options.farm_size

        validation = self.validation_service.validate_soil_data(nutrients, micronutrients, validation_options)
        health = self.interpret_soil_health(nutrients, micronutrients)
        deficiency_analysis = self.analyze_deficiencies(
            nutrients,
            micronutrients,
            farm_size=farm_size,
            budget=budget,
            preferences=preferences,
            soil_type=soil_type,
            crop_type=crop_type,
            derive_advisories=derive_advisories,
        )
        crop_analysis = self.crop_service.get_crop_recommendations_from_soil_data(
            nutrients, micronutrients, crop_options
        )

        self.logger.info(
            f"Soil analysis complete: valid={validation.valid}, health={health.overall_health}, "
            f"{len(deficiency_analysis.deficiencies)} deficiencies, "
            f"{len(crop_analysis.top_recommendations)} crop recommendations"
        )
        return SoilAnalysisReport(
            validation=validation,
            health=health,
            deficiency_analysis=deficiency_analysis,
            crop_analysis=crop_analysis,
        )


soil_analysis_service = SoilAnalysisService()


def interpret_soil_health(nutrients: Any, micronutrients: Any = None) -> SoilHealthInterpretation:
    return soil_analysis_service.interpret_soil_health(nutrients, micronutrients)


def analyze_deficiencies(
    nutrients: Any,
    micronutrients: Any = None,
    farm_size: float = 1,
    budget: Any = None,
    preferences: Any = None,
    soil_type: Optional[str] = None,
    crop_type: Optional[str] = None,
    derive_advisories: bool = False,
) -> DeficiencyAnalysis:
    return soil_analysis_service.analyze_deficiencies(
        nutrients, micronutrients, farm_size, budget, preferences, soil_type, crop_type, derive_advisories
    )


def run_soil_analysis(
    nutrients: Any,
    micronutrients: Any = None,
    validation_options: Any = None,
    crop_options: Any = None,
    farm_size: Optional[float] = None,
    budget: Any = None,
    preferences: Any = None,
    soil_type: Optional[str] = None,
    crop_type: Optional[str] = None,
    derive_advisories: bool = False,
) -> SoilAnalysisReport:
    return soil_analysis_service.run_soil_analysis(
        nutrients,
        micronutrients,
        validation_options,
        crop_options,
        farm_size,
        budget,
        preferences,
        soil_type,
        crop_type,
        derive_advisories,
    )
