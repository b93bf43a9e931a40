"""
Remediation Planner.

Turns identified soil deficiencies into costed, time-phased remediation plans
and aggregates several plans into one integrated strategy.

Cost economics are an explicit approximation: every plan assumes a fixed
per-hectare seasonal yield value and a flat yield uplift (see soil_rules).
"""
import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from soil_advisory.schemas.soil_schemas import (
    MICRONUTRIENTS,
    BudgetRange,
    DeficiencyType,
    MaterialType,
    RemediationPreferences,
    SoilParameterName,
)
from soil_advisory.services import remediation_catalog as catalog
from soil_advisory.services import soil_rules as rules
from soil_advisory.services.soil_deficiency_service import SoilDeficiency
from soil_advisory.services.soil_inputs import (
    InputError,
    check_deficiency_list,
    check_farm_size,
    coerce_budget,
    coerce_preferences,
)

logger = logging.getLogger(__name__)

TEMPLATE = "template"
DERIVED = "derived"


# ==================== RESULT TYPES ====================

@dataclass(frozen=True)
class Material:
    name: str
    type: MaterialType
    quantity: str
    unit: str
    cost_per_unit: float
    availability: str
    alternatives: List[str]

    @property
    def key(self) -> Tuple[str, str]:
        return (self.name, self.unit)


@dataclass(frozen=True)
class RemediationAction:
    id: str
    action: str
    description: str
    materials: List[Material]
    application_method: str
    dosage: str
    frequency: str
    precautions: List[str]
    effectiveness: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonthlyActivity:
    month: str
    actions: List[str]
    priority: str


@dataclass(frozen=True)
class SeasonalTiming:
    best_season: List[str]
    avoid_seasons: List[str]
    monthly_schedule: List[MonthlyActivity]


@dataclass(frozen=True)
class CostRange:
    min: float
    max: float
    currency: str = rules.CURRENCY

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


@dataclass(frozen=True)
class CostEstimate:
    immediate: CostRange
    long_term: CostRange
    total_per_hectare: CostRange
    payback_period: str
    cost_benefit_ratio: float
    within_budget: Optional[bool] = None

    @property
    def total(self) -> CostRange:
        """Whole-farm cost, immediate plus long-term."""
        return CostRange(
            min=self.immediate.min + self.long_term.min,
            max=self.immediate.max + self.long_term.max,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ExpectedResults:
    time_to_improvement: str
    expected_increase: str
    yield_impact: str
    soil_health_improvement: str
    sustainability_benefits: List[str]


@dataclass(frozen=True)
class RemediationPlan:
    deficiency: SoilDeficiency
    immediate_actions: List[RemediationAction]
    long_term_actions: List[RemediationAction]
    seasonal_timing: SeasonalTiming
    cost_estimate: CostEstimate
    expected_results: ExpectedResults

    @property
    def actions(self) -> List[RemediationAction]:
        return self.immediate_actions + self.long_term_actions

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TimelinePhase:
    phase: str
    duration: str
    actions: List[str]
    cost: float


@dataclass(frozen=True)
class IntegratedRemediationStrategy:
    """
    Combined strategy for several deficiencies.

    advisory_source tells whether timeline, synergies and warnings are the
    fixed illustrative template ("template") or were computed from the
    deficiency set and the selected actions ("derived").
    """
    prioritized_actions: List[RemediationAction]
    combined_materials: List[Material]
    total_cost: CostEstimate
    timeline: List[TimelinePhase]
    synergies: List[str]
    warnings: List[str]
    advisory_source: str = TEMPLATE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ==================== COST HELPERS ====================

def parse_quantity(quantity: str) -> Tuple[float, float]:
    """
    Parse a "min-max" quantity string.

    A single number is both bounds; an unparseable bound counts as zero.
    """
    parts = [part.strip() for part in str(quantity).split("-", 1)]
    try:
        low = float(parts[0])
    except ValueError:
        logger.warning(f"Unparseable material quantity '{quantity}', costing as zero")
        return 0.0, 0.0
    high = low
    if len(parts) > 1:
        try:
            high = float(parts[1])
        except ValueError:
            logger.warning(f"Unparseable upper bound in quantity '{quantity}'")
    return low, max(low, high)


def format_quantity(low: float, high: float) -> str:
    if low == high:
        return f"{low:g}"
    return f"{low:g}-{high:g}"


def _hectare_cost(materials: Iterable[Material], years: int = 1) -> Tuple[float, float]:
    """Unrounded (min, max) cost of the materials on one hectare."""
    total_min = 0.0
    total_max = 0.0
    for material in materials:
        low, high = parse_quantity(material.quantity)
        total_min += low * material.cost_per_unit * years
        total_max += high * material.cost_per_unit * years
    return total_min, total_max


def material_cost(materials: Iterable[Material], farm_size: float, years: int = 1) -> CostRange:
    total_min, total_max = _hectare_cost(materials, years)
    return CostRange(min=round(total_min * farm_size, 2), max=round(total_max * farm_size, 2))


def merge_materials(materials: Iterable[Material]) -> List[Material]:
    """
    Merge materials applied more than once.

    Entries with the same name and unit become one application whose
    quantity is the element-wise maximum of the ranges; alternatives are
    unioned in first-seen order. Order of first appearance is kept.
    """
    merged: Dict[Tuple[str, str], Material] = {}
    for material in materials:
        existing = merged.get(material.key)
        if existing is None:
            merged[material.key] = material
            continue
        low_a, high_a = parse_quantity(existing.quantity)
        low_b, high_b = parse_quantity(material.quantity)
        alternatives = list(existing.alternatives)
        alternatives.extend(alt for alt in material.alternatives if alt not in alternatives)
        merged[material.key] = Material(
            name=existing.name,
            type=existing.type,
            quantity=format_quantity(max(low_a, low_b), max(high_a, high_b)),
            unit=existing.unit,
            cost_per_unit=max(existing.cost_per_unit, material.cost_per_unit),
            availability=existing.availability,
            alternatives=alternatives,
        )
    return list(merged.values())


def build_cost_estimate(
    immediate_materials: List[Material],
    long_term_materials: List[Material],
    farm_size: float,
    budget: Optional[BudgetRange] = None,
) -> CostEstimate:
    """Cost estimate for one set of materials on a farm of farm_size hectares."""
    horizon = rules.LONG_TERM_HORIZON_YEARS
    immediate = material_cost(immediate_materials, farm_size)
    long_term = material_cost(long_term_materials, farm_size, years=horizon)

    # Per-hectare figures are taken before farm-size scaling and rounding.
    immediate_min, immediate_max = _hectare_cost(immediate_materials)
    long_term_min, long_term_max = _hectare_cost(long_term_materials, years=horizon)
    per_hectare = CostRange(
        min=round(immediate_min + long_term_min, 2),
        max=round(immediate_max + long_term_max, 2),
    )

    additional_income = rules.AVERAGE_YIELD_VALUE_PER_HA * rules.EXPECTED_YIELD_INCREASE
    if per_hectare.min > 0:
        seasons = math.ceil(per_hectare.min / additional_income)
        payback = f"{seasons} season{'s' if seasons > 1 else ''}"
        total_benefit = additional_income * rules.LONG_TERM_HORIZON_YEARS * rules.SEASONS_PER_YEAR
        cost_benefit = round(total_benefit / per_hectare.min, 1)
    else:
        payback = "Not applicable"
        cost_benefit = 0.0

    within_budget = None
    if budget is not None:
        within_budget = per_hectare.min <= budget.max

    return CostEstimate(
        immediate=immediate,
        long_term=long_term,
        total_per_hectare=per_hectare,
        payback_period=payback,
        cost_benefit_ratio=cost_benefit,
        within_budget=within_budget,
    )


def _materials_of(actions: Iterable[RemediationAction]) -> List[Material]:
    return [material for action in actions for material in action.materials]


# ==================== SERVICE ====================

class RemediationPlannerService:
    """Builds remediation plans and integrated strategies from deficiencies."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def generate_remediation_plan(
        self,
        deficiencies: Any,
        farm_size: float = 1,
        budget: Any = None,
        preferences: Any = None,
    ) -> List[RemediationPlan]:
        """
        Generate one remediation plan per deficiency.

        Args:
            deficiencies: SoilDeficiency list from the deficiency identifier
            farm_size: Farm size in hectares
            budget: Optional BudgetRange or mapping, per hectare
            preferences: RemediationPreferences or mapping

        Returns:
            Plans in the order of the deficiency list
        """
        deficiencies = self._check_deficiencies(deficiencies)
        farm_size = check_farm_size(farm_size)
        budget = coerce_budget(budget)
        preferences = coerce_preferences(preferences)

        plans = []
        for deficiency in deficiencies:
            immediate = self.get_immediate_actions(deficiency, preferences)
            long_term = self.get_long_term_actions(deficiency, preferences)
            plans.append(RemediationPlan(
                deficiency=deficiency,
                immediate_actions=immediate,
                long_term_actions=long_term,
                seasonal_timing=self.get_seasonal_timing(deficiency),
                cost_estimate=build_cost_estimate(
                    _materials_of(immediate), _materials_of(long_term), farm_size, budget
                ),
                expected_results=self.get_expected_results(deficiency),
            ))

        self.logger.info(f"Generated {len(plans)} remediation plans for {farm_size:g} ha")
        return plans

    def get_integrated_remediation_strategy(
        self,
        deficiencies: Any,
        farm_size: float = 1,
        budget: Any = None,
        preferences: Any = None,
        derive_advisories: bool = False,
    ) -> IntegratedRemediationStrategy:
        """
        Merge the actions of every deficiency into one strategy.

        Actions are deduplicated by id and sorted by effectiveness. Shared
        materials are merged and the total cost is recomputed from the merged
        material sets. Timeline, synergies and warnings are the fixed
        template unless derive_advisories is set.
        """
        deficiencies = self._check_deficiencies(deficiencies)
        farm_size = check_farm_size(farm_size)
        budget = coerce_budget(budget)
        preferences = coerce_preferences(preferences)

        immediate: List[RemediationAction] = []
        long_term: List[RemediationAction] = []
        seen = set()
        for deficiency in deficiencies:
            for bucket, actions in (
                (immediate, self.get_immediate_actions(deficiency, preferences)),
                (long_term, self.get_long_term_actions(deficiency, preferences)),
            ):
                for action in actions:
                    if action.id in seen:
                        continue
                    seen.add(action.id)
                    bucket.append(action)

        prioritized = sorted(immediate + long_term, key=lambda a: a.effectiveness, reverse=True)
        immediate_materials = merge_materials(_materials_of(immediate))
        long_term_materials = merge_materials(_materials_of(long_term))
        combined = merge_materials(immediate_materials + long_term_materials)
        total_cost = build_cost_estimate(immediate_materials, long_term_materials, farm_size, budget)

        if derive_advisories:
            timeline = self._derive_timeline(immediate, long_term, farm_size)
            synergies = self._derive_synergies(deficiencies, immediate + long_term)
            warnings = self._derive_warnings(deficiencies, immediate)
            source = DERIVED
        else:
            timeline = [
                TimelinePhase(phase=phase, duration=duration, actions=list(actions), cost=cost)
                for phase, duration, actions, cost in catalog.TEMPLATE_TIMELINE
            ]
            synergies = list(catalog.TEMPLATE_SYNERGIES)
            warnings = list(catalog.TEMPLATE_WARNINGS)
            source = TEMPLATE

        if total_cost.within_budget is False:
            per_ha = total_cost.total_per_hectare
            warnings.append(
                f"Estimated cost of {per_ha.min:,.0f}-{per_ha.max:,.0f} {per_ha.currency} per hectare "
                f"exceeds the budget of {budget.max:,.0f} {budget.currency}"
            )

        self.logger.info(
            f"Integrated strategy: {len(prioritized)} actions, {len(combined)} materials, "
            f"advisories {source}"
        )
        return IntegratedRemediationStrategy(
            prioritized_actions=prioritized,
            combined_materials=combined,
            total_cost=total_cost,
            timeline=timeline,
            synergies=synergies,
            warnings=warnings,
            advisory_source=source,
        )

    # ==================== ACTIONS ====================

    def get_immediate_actions(
        self, deficiency: SoilDeficiency, preferences: Optional[RemediationPreferences] = None
    ) -> List[RemediationAction]:
        preferences = preferences or RemediationPreferences()
        key = deficiency.parameter_key
        tier = deficiency.deficiency_type

        if key == SoilParameterName.PH:
            if deficiency.current_value < deficiency.optimal_range.min:
                return [self._ph_action(catalog.PH_IMMEDIATE["acidic"], tier)]
            if deficiency.current_value > deficiency.optimal_range.max:
                return [self._ph_action(catalog.PH_IMMEDIATE["alkaline"], tier)]
            return []
        if deficiency.is_excess:
            self.logger.debug(f"{deficiency.parameter} is above its optimal range, no fertilizer action")
            return []
        if key in catalog.NUTRIENT_IMMEDIATE:
            return [self._nutrient_action(key, tier, preferences)]
        if key in MICRONUTRIENTS:
            return [self._micronutrient_action(key, tier, preferences)]

        self.logger.debug(f"No immediate action for parameter {deficiency.parameter}")
        return []

    def get_long_term_actions(
        self, deficiency: SoilDeficiency, preferences: Optional[RemediationPreferences] = None
    ) -> List[RemediationAction]:
        preferences = preferences or RemediationPreferences()
        key = deficiency.parameter_key
        actions = []

        if key in catalog.LONG_TERM_ACTIONS:
            actions.append(_action_from_entry(catalog.LONG_TERM_ACTIONS[key]))
        elif key in MICRONUTRIENTS:
            label = key.value.capitalize()
            actions.append(_action_from_entry(catalog.MICRONUTRIENT_LONG_TERM, key=key.value, label=label))

        if preferences.sustainable_focus:
            actions.append(_action_from_entry(catalog.INTEGRATED_SOIL_HEALTH_ACTION))
        return actions

    def get_seasonal_timing(self, deficiency: SoilDeficiency) -> SeasonalTiming:
        entry = catalog.SEASONAL_TIMING.get(deficiency.parameter_key, catalog.DEFAULT_MICRONUTRIENT_TIMING)
        return SeasonalTiming(
            best_season=list(entry["best_season"]),
            avoid_seasons=list(entry["avoid_seasons"]),
            monthly_schedule=[
                MonthlyActivity(month=month, actions=list(actions), priority=priority)
                for month, actions, priority in entry["monthly_schedule"]
            ],
        )

    def get_expected_results(self, deficiency: SoilDeficiency) -> ExpectedResults:
        table = catalog.EXPECTED_RESULTS.get(deficiency.parameter_key, catalog.DEFAULT_MICRONUTRIENT_RESULTS)
        entry = table[deficiency.deficiency_type]
        return ExpectedResults(
            time_to_improvement=entry["time_to_improvement"],
            expected_increase=entry["expected_increase"],
            yield_impact=entry["yield_impact"],
            soil_health_improvement=entry["soil_health_improvement"],
            sustainability_benefits=list(entry["sustainability_benefits"]),
        )

    def _ph_action(self, entry: Dict[str, Any], tier: DeficiencyType) -> RemediationAction:
        quantity = entry["quantities"][tier]
        return RemediationAction(
            id=entry["id"],
            action=entry["action"],
            description=entry["description"],
            materials=[_material(entry["material"], quantity)],
            application_method=entry["application_method"],
            dosage=f"{quantity} {entry['dosage_unit']}",
            frequency=entry["frequency"],
            precautions=list(entry["precautions"]),
            effectiveness=entry["effectiveness"][tier],
        )

    def _nutrient_action(
        self, key: SoilParameterName, tier: DeficiencyType, preferences: RemediationPreferences
    ) -> RemediationAction:
        entry = catalog.NUTRIENT_IMMEDIATE[key]
        if preferences.organic and "organic" in entry:
            variant = entry["organic"]
        else:
            variant = entry.get("inorganic") or entry["standard"]

        quantity = entry["quantities"][tier]
        application_method = variant["application_method"]
        frequency = entry["frequency"]
        if preferences.quick_results and key in catalog.QUICK_RESULTS_OVERRIDES:
            override = catalog.QUICK_RESULTS_OVERRIDES[key]
            application_method = override["application_method"]
            frequency = override["frequency"]

        return RemediationAction(
            id=entry["id"],
            action=entry["action"],
            description=entry["description"],
            materials=[_material(variant["material"], quantity)],
            application_method=application_method,
            dosage=f"{quantity} {entry['dosage_unit']}",
            frequency=frequency,
            precautions=list(entry["precautions"]),
            effectiveness=variant["effectiveness"],
        )

    def _micronutrient_action(
        self, key: SoilParameterName, tier: DeficiencyType, preferences: RemediationPreferences
    ) -> RemediationAction:
        entry = catalog.MICRONUTRIENT_IMMEDIATE[key]
        template = catalog.MICRONUTRIENT_IMMEDIATE_TEMPLATE
        flavour = "organic" if preferences.organic else "inorganic"
        variant = entry[flavour]
        quantity = entry["quantities"][tier]
        label = key.value.capitalize()

        application_method = template["application_method"]
        frequency = template["frequency"]
        if preferences.quick_results:
            override = catalog.QUICK_RESULTS_OVERRIDES["micronutrient"]
            application_method = override["application_method"]
            frequency = override["frequency"]

        material = Material(
            name=variant["name"],
            type=MaterialType.ORGANIC if preferences.organic else MaterialType.INORGANIC,
            quantity=quantity,
            unit="kg/hectare",
            cost_per_unit=variant["cost_per_unit"],
            availability=catalog.READILY_AVAILABLE,
            alternatives=list(variant["alternatives"]),
        )
        return RemediationAction(
            id=template["id"].format(key=key.value),
            action=template["action"].format(label=label),
            description=template["description"].format(key=key.value),
            materials=[material],
            application_method=application_method,
            dosage=f"{quantity} kg per hectare",
            frequency=frequency,
            precautions=list(template["precautions"]),
            effectiveness=template["effectiveness"][flavour],
        )

    # ==================== DERIVED ADVISORIES ====================

    def _derive_timeline(
        self,
        immediate: List[RemediationAction],
        long_term: List[RemediationAction],
        farm_size: float,
    ) -> List[TimelinePhase]:
        """
        Phase the selected actions: pH correction first, then the remaining
        immediate applications, then the long-term programs. Each merged
        material is costed in the first phase that applies it, so phase
        costs add up to the midpoint of the total cost.
        """
        ph_ids = {catalog.PH_IMMEDIATE[side]["id"] for side in ("acidic", "alkaline")}
        correction = [a for a in immediate if a.id in ph_ids]
        nutrition = [a for a in immediate if a.id not in ph_ids]

        immediate_pool = merge_materials(_materials_of(immediate))
        long_term_pool = merge_materials(_materials_of(long_term))
        horizon = rules.LONG_TERM_HORIZON_YEARS

        phases = []
        costed = set()
        for (phase, duration), actions, pool, years in (
            (("Immediate (0-2 weeks)", "2 weeks"), correction, immediate_pool, 1),
            (("Short-term (2-8 weeks)", "6 weeks"), nutrition, immediate_pool, 1),
            ((f"Long-term ({horizon} years)", f"{horizon} years"), long_term, long_term_pool, horizon),
        ):
            if not actions:
                continue
            used = {m.key for m in _materials_of(actions)}
            materials = [m for m in pool if m.key in used and (years, m.key) not in costed]
            costed.update((years, m.key) for m in materials)
            cost = material_cost(materials, farm_size, years=years)
            phases.append(TimelinePhase(
                phase=phase,
                duration=duration,
                actions=[a.action for a in actions],
                cost=cost.midpoint,
            ))
        return phases

    def _derive_synergies(
        self, deficiencies: List[SoilDeficiency], actions: List[RemediationAction]
    ) -> List[str]:
        keys = {d.parameter_key for d in deficiencies}
        acidic = any(
            d.parameter_key == SoilParameterName.PH and d.current_value < d.optimal_range.min
            for d in deficiencies
        )
        synergies = []

        if acidic and SoilParameterName.PHOSPHORUS in keys:
            synergies.append("Liming will release fixed phosphorus; phosphorus doses can stay at the lower end")
        if SoilParameterName.PH in keys and keys & set(MICRONUTRIENTS):
            synergies.append("pH correction will improve micronutrient availability")
        if SoilParameterName.ORGANIC_CARBON in keys and keys & {
            SoilParameterName.NITROGEN, SoilParameterName.PHOSPHORUS, SoilParameterName.POTASSIUM
        }:
            synergies.append("Organic matter addition will improve retention of applied N, P and K")

        material_names = {m.name for m in _materials_of(actions)}
        if "Urea (46-0-0)" in material_names and "DAP (18-46-0)" in material_names:
            synergies.append("DAP also supplies nitrogen; the urea dose can be reduced accordingly")

        all_materials = _materials_of(actions)
        shared = [m.name for m in merge_materials(all_materials)
                  if sum(1 for other in all_materials if other.key == m.key) > 1]
        if shared:
            synergies.append(f"Shared materials are combined into single applications: {', '.join(shared)}")
        return synergies

    def _derive_warnings(
        self, deficiencies: List[SoilDeficiency], immediate: List[RemediationAction]
    ) -> List[str]:
        ids = {a.id for a in immediate}
        warnings = []
        for d in deficiencies:
            if d.parameter_key != SoilParameterName.PH:
                if d.is_excess:
                    warnings.append(
                        f"{d.parameter.capitalize()} is above its optimal range; withhold further "
                        f"{d.parameter} fertilizer until the next soil test"
                    )
                continue
            if d.deficiency_type == DeficiencyType.MILD and d.current_value < d.optimal_range.min:
                warnings.append("pH is borderline; keep lime at the low end of the range to avoid over-liming")
            if d.current_value > d.optimal_range.max and any(
                other.parameter_key in (SoilParameterName.ZINC, SoilParameterName.IRON) for other in deficiencies
            ):
                warnings.append("High pH limits zinc and iron uptake; correct pH before relying on soil-applied micronutrients")

        lime = catalog.PH_IMMEDIATE["acidic"]["id"]
        if lime in ids and "phosphorus_fertilizer_immediate" in ids:
            warnings.append("Do not mix lime with phosphate fertilizers; apply them at least 2-3 weeks apart")
        if lime in ids and "nitrogen_fertilizer_immediate" in ids:
            warnings.append("Avoid applying urea together with lime to limit ammonia losses")
        if len(immediate) >= 3:
            warnings.append("Several fertilizers are applied in the same window; monitor for nutrient interactions")
        return warnings

    def _check_deficiencies(self, deficiencies: Any) -> List[SoilDeficiency]:
        deficiencies = check_deficiency_list(deficiencies)
        for item in deficiencies:
            if not isinstance(item, SoilDeficiency):
                raise InputError(f"deficiency entries must be SoilDeficiency, got {type(item).__name__}")
        return deficiencies


def _material(entry: Dict[str, Any], quantity: Optional[str] = None) -> Material:
    return Material(
        name=entry["name"],
        type=entry["type"],
        quantity=quantity if quantity is not None else entry["quantity"],
        unit=entry["unit"],
        cost_per_unit=entry["cost_per_unit"],
        availability=entry["availability"],
        alternatives=list(entry["alternatives"]),
    )


def _action_from_entry(entry: Dict[str, Any], **labels: str) -> RemediationAction:
    return RemediationAction(
        id=entry["id"].format(**labels),
        action=entry["action"].format(**labels),
        description=entry["description"].format(**labels),
        materials=[_material(entry["material"])],
        application_method=entry["application_method"],
        dosage=entry["dosage"],
        frequency=entry["frequency"],
        precautions=list(entry["precautions"]),
        effectiveness=entry["effectiveness"],
    )


remediation_planner_service = RemediationPlannerService()


def generate_remediation_plan(
    deficiencies: Any,
    farm_size: float = 1,
    budget: Any = None,
    preferences: Any = None,
) -> List[RemediationPlan]:
    return remediation_planner_service.generate_remediation_plan(deficiencies, farm_size, budget, preferences)


def get_integrated_remediation_strategy(
    deficiencies: Any,
    farm_size: float = 1,
    budget: Any = None,
    preferences: Any = None,
    derive_advisories: bool = False,
) -> IntegratedRemediationStrategy:
    return remediation_planner_service.get_integrated_remediation_strategy(
        deficiencies, farm_size, budget, preferences, derive_advisories
    )
