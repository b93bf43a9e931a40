"""
Tests for Remediation Planner.

Checks per-deficiency plans (materials, preferences, cost economics) and the
integrated strategy (deduplication, material merge, recomputed cost,
template and derived advisories).
"""
import pytest

from soil_advisory.schemas.soil_schemas import BudgetRange, MaterialType, RemediationPreferences
from soil_advisory.services.remediation_planner import (
    DERIVED,
    TEMPLATE,
    CostRange,
    Material,
    RemediationPlannerService,
    generate_remediation_plan,
    get_integrated_remediation_strategy,
    material_cost,
    merge_materials,
    parse_quantity,
)
from soil_advisory.services.soil_deficiency_service import identify_deficiencies
from soil_advisory.services.soil_inputs import InputError
from soil_advisory.services.soil_parameters import build_micronutrients, build_soil_nutrients


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def nitrogen_deficiencies(nitrogen_deficient_soil):
    return identify_deficiencies(nitrogen_deficient_soil)


@pytest.fixture
def micronutrient_deficiencies():
    """Severe zinc and iron on neutral soil: both share the long-term compost."""
    return identify_deficiencies(
        build_soil_nutrients(ph=6.8),
        build_micronutrients(zinc=0.25, iron=2.5),
    )


@pytest.fixture
def many_deficiencies(depleted_acidic_soil, low_micronutrients):
    return identify_deficiencies(depleted_acidic_soil, low_micronutrients)


def _material(name="Urea", quantity="100-150", unit="kg/hectare", cost=25, alternatives=None):
    return Material(
        name=name,
        type=MaterialType.INORGANIC,
        quantity=quantity,
        unit=unit,
        cost_per_unit=cost,
        availability="readily_available",
        alternatives=alternatives or [],
    )


# =============================================================================
# Quantity and cost helpers
# =============================================================================

class TestCostHelpers:

    @pytest.mark.parametrize("quantity,expected", [
        ("100-150", (100.0, 150.0)),
        ("0.5-1", (0.5, 1.0)),
        ("5", (5.0, 5.0)),
        ("150-100", (150.0, 150.0)),
        ("as needed", (0.0, 0.0)),
    ])
    def test_parse_quantity(self, quantity, expected):
        assert parse_quantity(quantity) == expected

    def test_material_cost_scales_with_farm_and_years(self):
        cost = material_cost([_material(quantity="10-20", cost=100)], farm_size=2, years=3)
        assert cost == CostRange(min=6000, max=12000)

    def test_merge_takes_elementwise_max(self):
        merged = merge_materials([
            _material(quantity="100-150", alternatives=["CAN"]),
            _material(quantity="120-140", cost=30, alternatives=["CAN", "Ammonium sulfate"]),
            _material(name="DAP", quantity="50-60"),
        ])

        assert [m.name for m in merged] == ["Urea", "DAP"]
        assert merged[0].quantity == "120-150"
        assert merged[0].cost_per_unit == 30
        assert merged[0].alternatives == ["CAN", "Ammonium sulfate"]

    def test_merge_keeps_different_units_apart(self):
        merged = merge_materials([_material(unit="kg/hectare"), _material(unit="tons/hectare")])
        assert len(merged) == 2


# =============================================================================
# Per-deficiency plans
# =============================================================================

class TestRemediationPlan:

    def test_nitrogen_plan_costs(self, nitrogen_deficiencies):
        """Severe N: urea 150-200 kg at 25 INR, legumes 25-40 kg at 150 INR over 3 years."""
        plan = generate_remediation_plan(nitrogen_deficiencies)[0]
        cost = plan.cost_estimate

        assert plan.immediate_actions[0].materials[0].name == "Urea (46-0-0)"
        assert plan.immediate_actions[0].dosage == "150-200 kg per hectare"
        assert cost.immediate == CostRange(min=3750, max=5000)
        assert cost.long_term == CostRange(min=11250, max=18000)
        assert cost.total_per_hectare == CostRange(min=15000, max=23000)
        assert cost.payback_period == "2 seasons"
        assert cost.cost_benefit_ratio == pytest.approx(5.0)
        assert cost.within_budget is None

    def test_per_hectare_cost_independent_of_farm_size(self, nitrogen_deficiencies):
        plan = generate_remediation_plan(nitrogen_deficiencies, farm_size=2)[0]
        assert plan.cost_estimate.immediate == CostRange(min=7500, max=10000)
        assert plan.cost_estimate.total_per_hectare == CostRange(min=15000, max=23000)
        assert plan.cost_estimate.total == CostRange(min=30000, max=46000)

    @pytest.mark.parametrize("farm_size", [0.003, 1e-9, 1e-300])
    def test_per_hectare_cost_on_tiny_farms(self, nitrogen_deficiencies, farm_size):
        """Whole-farm totals round towards zero; the per-hectare figure does not."""
        cost = generate_remediation_plan(nitrogen_deficiencies, farm_size=farm_size)[0].cost_estimate

        assert cost.total_per_hectare == CostRange(min=15000, max=23000)
        assert cost.payback_period == "2 seasons"
        assert cost.cost_benefit_ratio == pytest.approx(5.0)

    def test_budget_check_is_per_hectare(self, nitrogen_deficiencies):
        over = generate_remediation_plan(nitrogen_deficiencies, farm_size=3, budget={"max": 10000})[0]
        under = generate_remediation_plan(nitrogen_deficiencies, farm_size=3, budget=BudgetRange(max=20000))[0]
        assert over.cost_estimate.within_budget is False
        assert under.cost_estimate.within_budget is True

    def test_one_plan_per_deficiency_in_order(self, many_deficiencies):
        plans = generate_remediation_plan(many_deficiencies)
        assert [p.deficiency.parameter for p in plans] == [d.parameter for d in many_deficiencies]
        for plan in plans:
            assert plan.immediate_actions
            assert plan.long_term_actions
            assert plan.seasonal_timing.monthly_schedule
            assert plan.expected_results.sustainability_benefits

    def test_costs_are_ordered_ranges(self, many_deficiencies):
        for plan in generate_remediation_plan(many_deficiencies, farm_size=1.5):
            for cost in (plan.cost_estimate.immediate, plan.cost_estimate.long_term,
                         plan.cost_estimate.total_per_hectare):
                assert cost.min <= cost.max

    def test_effectiveness_within_bounds(self, many_deficiencies):
        for plan in generate_remediation_plan(many_deficiencies, preferences={"organic": True}):
            for action in plan.immediate_actions:
                assert 60 <= action.effectiveness <= 90

    def test_acidic_soil_gets_lime(self):
        deficiency = identify_deficiencies(build_soil_nutrients(ph=5.2))
        action = generate_remediation_plan(deficiency)[0].immediate_actions[0]
        assert action.action == "Apply Agricultural Lime"
        assert action.materials[0].quantity == "500-1000"

    def test_alkaline_soil_gets_sulfur(self, alkaline_soil):
        deficiency = identify_deficiencies(alkaline_soil)
        action = generate_remediation_plan(deficiency)[0].immediate_actions[0]
        assert action.action == "Apply Elemental Sulfur"
        assert action.materials[0].quantity == "300-500"

    def test_excess_nitrogen_gets_no_fertilizer(self):
        """N 900 is excessive, reported in the mild tier but above the optimal band."""
        deficiency = identify_deficiencies(build_soil_nutrients(ph=6.8, nitrogen=900))
        plan = generate_remediation_plan(deficiency)[0]

        assert deficiency[0].is_excess is True
        assert plan.immediate_actions == []
        assert "Apply Quick-Release Nitrogen Fertilizer" not in [a.action for a in plan.actions]
        assert plan.cost_estimate.immediate == CostRange(min=0, max=0)

    def test_excess_micronutrient_gets_no_fertilizer(self):
        deficiency = identify_deficiencies(build_soil_nutrients(ph=6.8), build_micronutrients(zinc=8))
        assert generate_remediation_plan(deficiency)[0].immediate_actions == []

    def test_sulfur_deficiency_uses_gypsum(self):
        deficiency = identify_deficiencies(build_soil_nutrients(ph=6.8), build_micronutrients(sulfur=3))
        action = generate_remediation_plan(deficiency)[0].immediate_actions[0]
        assert action.materials[0].name.startswith("Gypsum")


class TestPreferences:

    def test_organic_nitrogen(self, nitrogen_deficiencies):
        plan = generate_remediation_plan(nitrogen_deficiencies, preferences={"organic": True})[0]
        action = plan.immediate_actions[0]
        assert action.materials[0].name == "Liquid Organic Fertilizer"
        assert action.materials[0].type == MaterialType.ORGANIC
        assert action.effectiveness == 70

    def test_quick_results_nitrogen_top_dress(self, nitrogen_deficiencies):
        plan = generate_remediation_plan(nitrogen_deficiencies, preferences={"quick_results": True})[0]
        assert plan.immediate_actions[0].application_method.startswith("Top-dress immediately")

    def test_quick_results_micronutrient_foliar(self, micronutrient_deficiencies):
        plans = generate_remediation_plan(
            micronutrient_deficiencies, preferences=RemediationPreferences(quick_results=True)
        )
        for plan in plans:
            assert "Foliar spray" in plan.immediate_actions[0].application_method

    def test_organic_micronutrient(self, micronutrient_deficiencies):
        plan = generate_remediation_plan(micronutrient_deficiencies, preferences={"organic": True})[0]
        action = plan.immediate_actions[0]
        assert action.id == "zinc_immediate"
        assert action.materials[0].name == "Zinc Sulfate (Organic)"
        assert action.effectiveness == 70

    def test_sustainable_focus_adds_integrated_action(self, nitrogen_deficiencies):
        plan = generate_remediation_plan(nitrogen_deficiencies, preferences={"sustainable_focus": True})[0]
        integrated = [a for a in plan.long_term_actions if a.id == "integrated_soil_health"]
        assert len(integrated) == 1
        assert integrated[0].effectiveness == 95


class TestInputErrors:

    def test_none_deficiencies(self):
        with pytest.raises(InputError):
            generate_remediation_plan(None)

    @pytest.mark.parametrize("farm_size", [0, -1, float("nan"), "2"])
    def test_invalid_farm_size(self, nitrogen_deficiencies, farm_size):
        with pytest.raises(InputError):
            generate_remediation_plan(nitrogen_deficiencies, farm_size=farm_size)

    def test_foreign_entries(self):
        with pytest.raises(InputError):
            get_integrated_remediation_strategy([{"parameter": "nitrogen"}])

    def test_empty_list_is_fine(self):
        assert generate_remediation_plan([]) == []


# =============================================================================
# Integrated strategy
# =============================================================================

class TestIntegratedStrategy:

    def test_shared_material_is_costed_once(self, micronutrient_deficiencies):
        """Zinc and iron both schedule 3-5 t compost; merged it is paid for once."""
        strategy = get_integrated_remediation_strategy(micronutrient_deficiencies)
        cost = strategy.total_cost

        assert [m.name for m in strategy.combined_materials] == [
            "Zinc Sulfate (ZnSO4)",
            "Ferrous Sulfate (FeSO4)",
            "Micronutrient-enriched Compost",
        ]
        assert cost.immediate == CostRange(min=2400, max=3975)
        assert cost.long_term == CostRange(min=27000, max=45000)
        assert cost.total_per_hectare == CostRange(min=29400, max=48975)

    def test_actions_deduplicated_and_sorted(self, many_deficiencies):
        strategy = get_integrated_remediation_strategy(many_deficiencies)
        ids = [a.id for a in strategy.prioritized_actions]
        effectiveness = [a.effectiveness for a in strategy.prioritized_actions]

        assert len(ids) == len(set(ids))
        assert effectiveness == sorted(effectiveness, reverse=True)
        assert strategy.prioritized_actions[0].id == "soil_carbon_building"

    def test_duplicate_deficiencies_do_not_duplicate_actions(self, nitrogen_deficiencies):
        strategy = get_integrated_remediation_strategy(nitrogen_deficiencies * 2)
        single = get_integrated_remediation_strategy(nitrogen_deficiencies)
        assert len(strategy.prioritized_actions) == len(single.prioritized_actions)
        assert strategy.total_cost == single.total_cost

    def test_combined_material_ranges_are_ordered(self, many_deficiencies):
        strategy = get_integrated_remediation_strategy(many_deficiencies)
        for material in strategy.combined_materials:
            low, high = parse_quantity(material.quantity)
            assert low <= high

    def test_template_advisories(self, many_deficiencies):
        strategy = get_integrated_remediation_strategy(many_deficiencies)

        assert strategy.advisory_source == TEMPLATE
        assert [(p.phase, p.cost) for p in strategy.timeline] == [
            ("Immediate (0-2 weeks)", 5000),
            ("Short-term (2-8 weeks)", 15000),
            ("Long-term (2-6 months)", 10000),
        ]
        assert len(strategy.synergies) == 3
        assert len(strategy.warnings) == 3

    def test_derived_timeline_sums_to_total_midpoint(self, micronutrient_deficiencies):
        strategy = get_integrated_remediation_strategy(micronutrient_deficiencies, derive_advisories=True)

        assert strategy.advisory_source == DERIVED
        assert [p.phase for p in strategy.timeline] == ["Short-term (2-8 weeks)", "Long-term (3 years)"]
        assert strategy.timeline[0].cost == pytest.approx(3187.5)
        assert strategy.timeline[1].cost == pytest.approx(36000)
        total = strategy.total_cost.total
        assert sum(p.cost for p in strategy.timeline) == pytest.approx(total.midpoint)
        assert any("Micronutrient-enriched Compost" in s for s in strategy.synergies)

    def test_derived_timeline_with_ph_correction(self, many_deficiencies):
        strategy = get_integrated_remediation_strategy(many_deficiencies, farm_size=2, derive_advisories=True)

        assert [p.phase for p in strategy.timeline] == [
            "Immediate (0-2 weeks)",
            "Short-term (2-8 weeks)",
            "Long-term (3 years)",
        ]
        assert strategy.timeline[0].actions == ["Apply Agricultural Lime"]
        assert sum(p.cost for p in strategy.timeline) == pytest.approx(strategy.total_cost.total.midpoint)
        assert any("lime with phosphate" in w for w in strategy.warnings)
        assert any("Liming will release fixed phosphorus" in s for s in strategy.synergies)

    def test_derived_warning_for_excess_nutrient(self):
        deficiencies = identify_deficiencies(build_soil_nutrients(ph=6.8, nitrogen=900, phosphorus=8))
        strategy = get_integrated_remediation_strategy(deficiencies, derive_advisories=True)

        assert "Apply Quick-Release Nitrogen Fertilizer" not in [a.action for a in strategy.prioritized_actions]
        assert any(w.startswith("Nitrogen is above its optimal range") for w in strategy.warnings)
        assert not any(w.startswith("Phosphorus is above") for w in strategy.warnings)

    def test_budget_overrun_warning(self, nitrogen_deficiencies):
        strategy = get_integrated_remediation_strategy(nitrogen_deficiencies, budget={"max": 1000})
        assert strategy.total_cost.within_budget is False
        assert "exceeds the budget" in strategy.warnings[-1]

    def test_no_warning_within_budget(self, nitrogen_deficiencies):
        strategy = get_integrated_remediation_strategy(nitrogen_deficiencies, budget={"max": 50000})
        assert strategy.total_cost.within_budget is True
        assert not any("exceeds the budget" in w for w in strategy.warnings)

    def test_preferences_flow_into_strategy(self, nitrogen_deficiencies):
        strategy = get_integrated_remediation_strategy(nitrogen_deficiencies, preferences={"organic": True})
        assert "Liquid Organic Fertilizer" in [m.name for m in strategy.combined_materials]

    def test_deterministic(self, many_deficiencies):
        service = RemediationPlannerService()
        first = service.get_integrated_remediation_strategy(many_deficiencies, derive_advisories=True)
        second = service.get_integrated_remediation_strategy(many_deficiencies, derive_advisories=True)
        assert first.to_dict() == second.to_dict()
