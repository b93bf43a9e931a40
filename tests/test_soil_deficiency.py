"""
Tests for Soil Deficiency Service.

Verifies severity tiering for pH, N/P/K, organic carbon and micronutrients,
priority ordering, and the reference classifier used to build inputs.
"""
import pytest

from soil_advisory.schemas.soil_schemas import (
    DeficiencyType,
    OptimalRange,
    ParameterRange,
    ParameterStatus,
    SoilNutrients,
    SoilParameter,
    SoilParameterName,
)
from soil_advisory.services.deficiency_knowledge import SANDY_SOIL_LEACHING_CAUSE
from soil_advisory.services.soil_deficiency_service import (
    deficiency_priority,
    identify_deficiencies,
)
from soil_advisory.services.soil_inputs import InputError
from soil_advisory.services.soil_parameters import (
    build_micronutrients,
    build_soil_nutrients,
    build_soil_parameter,
    determine_parameter_status,
    reference_range,
)


class TestNitrogenScenario:
    """N 80 kg/ha against an optimal minimum of 200."""

    def test_severe_with_deficit_120(self, nitrogen_deficient_soil):
        deficiencies = identify_deficiencies(nitrogen_deficient_soil)

        assert len(deficiencies) == 1
        nitrogen = deficiencies[0]
        assert nitrogen.parameter == "nitrogen"
        assert nitrogen.deficiency_type == DeficiencyType.SEVERE
        assert nitrogen.deficit_amount == pytest.approx(120)
        assert nitrogen.optimal_range.min == 200
        assert nitrogen.impact_on_crops
        assert nitrogen.symptoms

    def test_reference_classifier_marks_80_deficient(self):
        """80 is below 70% of the 200 kg/ha optimal minimum."""
        parameter = build_soil_parameter("nitrogen", 80)
        assert parameter.status == ParameterStatus.DEFICIENT
        assert parameter.range.optimal.min == 200

        deficiencies = identify_deficiencies(SoilNutrients(nitrogen=parameter))
        assert deficiencies[0].deficiency_type == DeficiencyType.SEVERE
        assert deficiencies[0].deficit_amount == pytest.approx(120)

    def test_moderate_above_half_of_minimum(self):
        nutrients = build_soil_nutrients(nitrogen=130)
        deficiencies = identify_deficiencies(nutrients)
        assert deficiencies[0].deficiency_type == DeficiencyType.MODERATE
        assert deficiencies[0].deficit_amount == pytest.approx(70)


class TestPhTiers:
    """pH tiers and deficit distance to the 6.0-7.5 band."""

    @pytest.mark.parametrize("ph,expected", [
        (4.8, DeficiencyType.SEVERE),
        (5.2, DeficiencyType.MODERATE),
        (5.8, DeficiencyType.MILD),
        (7.8, DeficiencyType.MILD),
        (8.2, DeficiencyType.MODERATE),
        (8.7, DeficiencyType.SEVERE),
    ])
    def test_tier(self, ph, expected):
        deficiencies = identify_deficiencies(build_soil_nutrients(ph=ph))
        assert deficiencies[0].parameter == "pH"
        assert deficiencies[0].deficiency_type == expected

    def test_acidic_deficit(self):
        deficiency = identify_deficiencies(build_soil_nutrients(ph=5.8))[0]
        assert deficiency.deficit_amount == pytest.approx(0.2)
        assert deficiency.causes == ["Natural soil variation", "Seasonal changes", "Fertilizer effects"]

    def test_alkaline_deficit(self):
        deficiency = identify_deficiencies(build_soil_nutrients(ph=8.7))[0]
        assert deficiency.deficit_amount == pytest.approx(1.2)
        assert "High lime content" in deficiency.causes

    def test_in_band_ph_is_not_a_deficiency(self):
        assert identify_deficiencies(build_soil_nutrients(ph=6.0)) == []
        assert identify_deficiencies(build_soil_nutrients(ph=7.5)) == []


class TestNutrientStatuses:
    """Status-driven tiering of N/P/K and micronutrients."""

    def test_optimal_and_adequate_are_skipped(self, balanced_soil):
        # P 18 is adequate, the rest optimal
        assert identify_deficiencies(balanced_soil) == []

    def test_excessive_is_reported_as_mild(self):
        nutrients = build_soil_nutrients(nitrogen=500)
        assert nutrients.nitrogen.status == ParameterStatus.EXCESSIVE

        deficiency = identify_deficiencies(nutrients)[0]
        assert deficiency.deficiency_type == DeficiencyType.MILD
        assert deficiency.deficit_amount == 0

    def test_optimal_range_falls_back_to_range(self):
        parameter = SoilParameter(
            name="Phosphorus",
            value=4,
            unit="kg/ha",
            range=ParameterRange(min=10, max=50),
            status=ParameterStatus.DEFICIENT,
        )
        deficiency = identify_deficiencies(SoilNutrients(phosphorus=parameter))[0]
        assert deficiency.optimal_range.min == 10
        assert deficiency.deficiency_type == DeficiencyType.SEVERE
        assert deficiency.deficit_amount == pytest.approx(6)

    def test_micronutrient_severe_cutoff_is_30_percent(self):
        micronutrients = build_micronutrients(zinc=0.25, copper=0.3)
        deficiencies = identify_deficiencies(build_soil_nutrients(ph=6.8), micronutrients)

        by_parameter = {d.parameter: d for d in deficiencies}
        assert by_parameter["zinc"].deficiency_type == DeficiencyType.SEVERE
        # 0.3 is not below 0.5 * 0.3
        assert by_parameter["copper"].deficiency_type == DeficiencyType.MODERATE

    def test_undocumented_micronutrient_uses_generic_record(self):
        micronutrients = build_micronutrients(boron=0.1)
        deficiency = identify_deficiencies(build_soil_nutrients(ph=6.8), micronutrients)[0]
        assert deficiency.parameter == "boron"
        assert deficiency.impact_on_crops
        assert deficiency.causes


class TestOrganicCarbon:

    @pytest.mark.parametrize("value,expected", [
        (0.2, DeficiencyType.SEVERE),
        (0.3, DeficiencyType.MODERATE),
        (0.45, DeficiencyType.MILD),
    ])
    def test_tiers(self, value, expected):
        deficiency = identify_deficiencies(build_soil_nutrients(organic_carbon=value))[0]
        assert deficiency.parameter == "organic_carbon"
        assert deficiency.deficiency_type == expected
        assert deficiency.deficit_amount == pytest.approx(0.5 - value)

    def test_sufficient_carbon(self):
        assert identify_deficiencies(build_soil_nutrients(organic_carbon=0.8)) == []


class TestOrdering:
    """Severity x importance ordering."""

    def test_sorted_by_priority(self, depleted_acidic_soil, low_micronutrients):
        deficiencies = identify_deficiencies(depleted_acidic_soil, low_micronutrients)

        assert [d.parameter for d in deficiencies] == [
            "nitrogen",        # severe x 1.1 = 110
            "phosphorus",      # severe x 1.0 = 100
            "zinc",            # severe x 0.8 = 80
            "iron",            # severe x 0.8 = 80, after zinc
            "pH",              # moderate x 1.2 = 72
            "potassium",       # moderate x 1.0 = 60
            "organic_carbon",  # moderate x 0.9 = 54
        ]
        priorities = [deficiency_priority(d) for d in deficiencies]
        assert priorities == sorted(priorities, reverse=True)

    def test_deficits_never_negative(self, depleted_acidic_soil, low_micronutrients):
        for deficiency in identify_deficiencies(depleted_acidic_soil, low_micronutrients):
            assert deficiency.deficit_amount >= 0


class TestContext:

    def test_sandy_soil_adds_leaching_cause(self):
        nutrients = build_soil_nutrients(nitrogen=90, potassium=60)
        deficiencies = identify_deficiencies(nutrients, soil_type="Sandy loam")

        for deficiency in deficiencies:
            assert SANDY_SOIL_LEACHING_CAUSE in deficiency.causes

    def test_other_soils_unchanged(self):
        nutrients = build_soil_nutrients(nitrogen=90)
        deficiency = identify_deficiencies(nutrients, soil_type="clay")[0]
        assert SANDY_SOIL_LEACHING_CAUSE not in deficiency.causes

    def test_crop_type_does_not_change_result(self, depleted_acidic_soil):
        with_crop = identify_deficiencies(depleted_acidic_soil, crop_type="rice")
        without_crop = identify_deficiencies(depleted_acidic_soil)
        assert [d.to_dict() for d in with_crop] == [d.to_dict() for d in without_crop]

    def test_none_nutrients_raise(self):
        with pytest.raises(InputError):
            identify_deficiencies(None)


class TestReferenceClassification:
    """determine_parameter_status boundaries."""

    @pytest.mark.parametrize("value,expected", [
        (250, ParameterStatus.OPTIMAL),
        (200, ParameterStatus.OPTIMAL),
        (150, ParameterStatus.ADEQUATE),
        (139, ParameterStatus.DEFICIENT),
        (350, ParameterStatus.ADEQUATE),
        (400, ParameterStatus.EXCESSIVE),
    ])
    def test_nitrogen_status(self, value, expected):
        assert determine_parameter_status(value, reference_range(SoilParameterName.NITROGEN)) == expected

    def test_without_optimal_band_uses_range(self):
        parameter_range = ParameterRange(min=10, max=20)
        assert determine_parameter_status(15, parameter_range) == ParameterStatus.OPTIMAL
        assert determine_parameter_status(5, parameter_range) == ParameterStatus.DEFICIENT

    def test_optimal_range_bounds_are_checked(self):
        with pytest.raises(ValueError):
            OptimalRange(min=5, max=1)
