"""
Tests for Soil Data Validation Service.

Covers the reference reports:
1. Balanced report (pH 6.8, N 245, P 18, K 156) -> valid, confident
2. Negative nitrogen -> critical issue, invalid
3. pH 2.0 -> critical issue and extreme anomaly
plus strict mode, statistical and cross-parameter checks, and input errors.
"""
import pytest

from soil_advisory.schemas.soil_schemas import (
    AnomalySeverity,
    IssueSeverity,
    ValidationOptions,
)
from soil_advisory.services.soil_inputs import InputError
from soil_advisory.services.soil_parameters import build_micronutrients, build_soil_nutrients
from soil_advisory.services.soil_validation_service import (
    SoilDataValidationService,
    validate_soil_data,
)


class TestReferenceReports:
    """Balanced, negative-nitrogen and impossible-pH reports."""

    def test_balanced_report_is_valid(self, balanced_soil):
        """Typical values validate with high confidence."""
        result = validate_soil_data(balanced_soil)

        assert result.valid is True
        assert result.critical_issues == []
        assert result.confidence >= 0.7
        assert result.recommendations == [
            "Soil data validation passed - values appear reasonable and consistent"
        ]

    def test_negative_nitrogen_is_critical(self):
        """Negative N yields a critical issue on nitrogen."""
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=-50, phosphorus=18, potassium=156)
        result = validate_soil_data(nutrients)

        negative = [i for i in result.issues if i.parameter == "nitrogen"]
        assert negative
        assert negative[0].severity == IssueSeverity.CRITICAL
        assert "Negative value detected" in negative[0].issue
        assert result.valid is False
        assert any(
            a.parameter == "nitrogen" and a.severity == AnomalySeverity.HIGH
            for a in result.anomalies
        )

    def test_impossible_ph_is_flagged(self):
        """pH 2.0 is outside the possible range."""
        nutrients = build_soil_nutrients(ph=2.0, nitrogen=245, phosphorus=18, potassium=156)
        result = validate_soil_data(nutrients)

        ph_issues = [i for i in result.issues if i.parameter == "pH"]
        ph_anomalies = [a for a in result.anomalies if a.parameter == "pH"]
        assert any(i.severity == IssueSeverity.CRITICAL for i in ph_issues)
        assert any(a.issue == "Extreme value detected" for a in ph_anomalies)
        assert result.valid is False
        assert "pH validation issues detected - verify pH meter calibration" in result.recommendations

    def test_critical_ph_penalty_lowers_confidence(self):
        nutrients = build_soil_nutrients(ph=2.0, nitrogen=245, phosphorus=18, potassium=156)
        result = validate_soil_data(nutrients, options=ValidationOptions(enable_statistical_analysis=False))

        assert result.confidence == pytest.approx(0.7)


class TestRangeChecks:
    """Typical-range checks and strict mode."""

    def test_atypical_value_is_warning(self):
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=600, phosphorus=30, potassium=156)
        result = validate_soil_data(nutrients)

        unusual = [i for i in result.issues if i.issue == "Unusual value detected"]
        assert len(unusual) == 1
        assert unusual[0].parameter == "nitrogen"
        assert unusual[0].severity == IssueSeverity.WARNING
        assert result.valid is True

    def test_strict_mode_escalates_to_error(self):
        """Under strict mode an atypical value invalidates the report."""
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=600, phosphorus=30, potassium=156)
        result = validate_soil_data(nutrients, options={"strict_mode": True})

        unusual = [i for i in result.issues if i.issue == "Unusual value detected"]
        assert unusual[0].severity == IssueSeverity.ERROR
        assert result.valid is False

    def test_missing_required_parameters_warn(self):
        """A report without N, P and K is accepted with one warning."""
        result = validate_soil_data(build_soil_nutrients(ph=6.5))

        missing = [i for i in result.issues if i.parameter == "required_parameters"]
        assert len(missing) == 1
        assert missing[0].severity == IssueSeverity.WARNING
        assert "nitrogen, phosphorus, potassium" in missing[0].issue
        assert result.valid is True
        assert result.confidence == pytest.approx(0.9)

    def test_low_confidence_marks_results_provisional(self):
        """Missing N, P and K leave confidence at 0.9, below a 0.95 threshold."""
        result = validate_soil_data(build_soil_nutrients(ph=6.5), options={"confidence_threshold": 0.95})

        assert result.confidence == pytest.approx(0.9)
        assert result.recommendations[-1] == (
            "Overall confidence 0.90 is below the threshold of 0.95 - treat results as provisional"
        )

    def test_confidence_at_threshold_is_not_provisional(self):
        result = validate_soil_data(build_soil_nutrients(ph=6.5), options={"confidence_threshold": 0.9})
        assert not any("provisional" in r for r in result.recommendations)

    def test_micronutrient_outside_possible_range(self):
        micronutrients = build_micronutrients(boron=7.5)
        result = validate_soil_data(
            build_soil_nutrients(ph=6.8, nitrogen=245, phosphorus=30, potassium=156),
            micronutrients,
        )

        boron = [i for i in result.issues if i.parameter == "boron"]
        assert boron[0].severity == IssueSeverity.CRITICAL
        assert result.valid is False


class TestStatisticalAnalysis:
    """Outliers and the organic carbon / nitrogen correlation."""

    def test_outlier_detected_beyond_z_threshold(self):
        # z = |600 - 275| / 112.5 = 2.89
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=600, phosphorus=30, potassium=156)
        result = validate_soil_data(nutrients)

        outliers = result.statistical_analysis.outliers
        assert [o.parameter for o in outliers] == ["nitrogen"]
        assert outliers[0].deviation_score == pytest.approx(2.8889, abs=1e-4)
        outlier_issue = [i for i in result.issues if i.issue == "Statistical outlier detected"][0]
        assert outlier_issue.severity == IssueSeverity.INFO

    def test_organic_carbon_nitrogen_mismatch(self):
        # 1.5 % OC implies about 840 kg/ha N
        nutrients = build_soil_nutrients(
            ph=6.8, nitrogen=245, phosphorus=30, potassium=156, organic_carbon=1.5
        )
        result = validate_soil_data(nutrients)

        correlations = result.statistical_analysis.correlation_issues
        assert len(correlations) == 1
        assert correlations[0].parameters == ["organic_carbon", "nitrogen"]
        assert any(
            i.issue == "Parameter correlation anomaly" and i.severity == IssueSeverity.INFO
            for i in result.issues
        )
        assert result.confidence <= result.statistical_analysis.consistency_score

    def test_consistent_organic_carbon_passes(self):
        nutrients = build_soil_nutrients(
            ph=6.8, nitrogen=245, phosphorus=30, potassium=156, organic_carbon=0.5
        )
        result = validate_soil_data(nutrients)

        assert result.statistical_analysis.correlation_issues == []
        assert result.statistical_analysis.consistency_score == pytest.approx(1.0)

    def test_statistical_analysis_can_be_disabled(self, balanced_soil):
        result = validate_soil_data(balanced_soil, options={"enable_statistical_analysis": False})
        assert result.statistical_analysis is None


class TestCrossParameterValidation:
    """Nutrient ratio, potassium balance and pH relationships."""

    def test_high_np_ratio(self):
        # N:P = 300 / 10 = 30 -> warning, anomaly medium (not beyond 30)
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=300, phosphorus=10, potassium=200)
        result = validate_soil_data(nutrients)

        ratio_issues = [i for i in result.issues if i.parameter == "N:P ratio"]
        ratio_anomalies = [a for a in result.anomalies if a.parameter == "N:P ratio"]
        assert len(ratio_issues) == 1
        assert ratio_issues[0].severity == IssueSeverity.WARNING
        assert ratio_anomalies[0].severity == AnomalySeverity.MEDIUM

    def test_extreme_np_ratio_is_high_anomaly(self):
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=400, phosphorus=10, potassium=200)
        result = validate_soil_data(nutrients)

        ratio_anomalies = [a for a in result.anomalies if a.parameter == "N:P ratio"]
        assert ratio_anomalies[0].severity == AnomalySeverity.HIGH

    def test_low_np_ratio(self):
        # N:P = 100 / 25 = 4 -> below 5, not below 3
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=100, phosphorus=25, potassium=156)
        result = validate_soil_data(nutrients)

        ratio_issues = [i for i in result.issues if i.parameter == "N:P ratio"]
        ratio_anomalies = [a for a in result.anomalies if a.parameter == "N:P ratio"]
        assert len(ratio_issues) == 1
        assert ratio_issues[0].severity == IssueSeverity.WARNING
        assert ratio_issues[0].suggestion == "N:P ratio of 4.0:1 indicates nitrogen deficiency or excess phosphorus"
        assert ratio_issues[0].possible_causes[:2] == [
            "Insufficient nitrogen application", "Excessive phosphorus application",
        ]
        assert ratio_anomalies[0].severity == AnomalySeverity.MEDIUM

    def test_extreme_low_np_ratio_is_high_anomaly(self):
        # N:P = 60 / 30 = 2
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=60, phosphorus=30, potassium=100)
        result = validate_soil_data(nutrients)

        ratio_anomalies = [a for a in result.anomalies if a.parameter == "N:P ratio"]
        assert ratio_anomalies[0].severity == AnomalySeverity.HIGH
        assert "Investigate causes of detected soil anomalies" in result.recommendations

    def test_np_ratio_within_band_is_silent(self, balanced_soil):
        result = validate_soil_data(balanced_soil)
        assert not any(i.parameter == "N:P ratio" for i in result.issues)

    def test_high_phosphorus_at_acidic_ph(self):
        # pH 5.0 is below 5.5 and P 20 is above 15
        nutrients = build_soil_nutrients(ph=5.0, nitrogen=245, phosphorus=20, potassium=156)
        result = validate_soil_data(nutrients)

        relationship = [i for i in result.issues if i.parameter == "pH-P relationship"]
        assert len(relationship) == 1
        assert relationship[0].severity == IssueSeverity.INFO
        assert relationship[0].suggestion == "Phosphorus level 20 is higher than expected at pH 5"
        assert result.valid is True

    @pytest.mark.parametrize("ph,phosphorus", [(5.0, 12), (6.8, 30), (8.0, 30)])
    def test_no_ph_phosphorus_issue(self, ph, phosphorus):
        nutrients = build_soil_nutrients(ph=ph, nitrogen=245, phosphorus=phosphorus, potassium=156)
        result = validate_soil_data(nutrients)
        assert not any(i.parameter == "pH-P relationship" for i in result.issues)

    def test_low_potassium_balance(self):
        # mean(N, P) = 150 -> K below 75 is low
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=270, phosphorus=30, potassium=60)
        result = validate_soil_data(nutrients)

        k_issues = [i for i in result.issues if i.parameter == "K balance"]
        assert len(k_issues) == 1
        assert "too low" in k_issues[0].suggestion

    def test_high_ph_with_deficient_micronutrients(self, low_micronutrients):
        nutrients = build_soil_nutrients(ph=8.2, nitrogen=245, phosphorus=30, potassium=156)
        result = validate_soil_data(nutrients, low_micronutrients)

        relationship = [i for i in result.issues if i.parameter == "pH-micronutrient relationship"]
        assert len(relationship) == 1
        assert "zinc" in relationship[0].suggestion
        assert "iron" in relationship[0].suggestion

    def test_negative_values_skip_cross_checks(self):
        nutrients = build_soil_nutrients(ph=6.8, nitrogen=-50, phosphorus=10, potassium=60)
        result = validate_soil_data(nutrients)

        assert not any(i.parameter in ("N:P ratio", "K balance") for i in result.issues)


class TestCropContext:
    """Crop-specific pH tolerance."""

    def test_rice_on_alkaline_soil(self):
        nutrients = build_soil_nutrients(ph=8.3, nitrogen=245, phosphorus=30, potassium=156)
        result = validate_soil_data(nutrients, options={"crop_type": "Rice"})

        context = [i for i in result.issues if i.issue == "High pH for Rice cultivation"]
        assert len(context) == 1
        assert context[0].severity == IssueSeverity.WARNING

    def test_unknown_crop_is_ignored(self, balanced_soil):
        result = validate_soil_data(balanced_soil, options={"crop_type": "quinoa"})
        assert result.issues == []


class TestResultProperties:
    """Determinism, bounds and input errors."""

    def test_identical_input_identical_output(self, depleted_acidic_soil, low_micronutrients):
        first = validate_soil_data(depleted_acidic_soil, low_micronutrients)
        second = validate_soil_data(depleted_acidic_soil, low_micronutrients)
        assert first.to_dict() == second.to_dict()

    def test_confidence_stays_in_unit_interval(self):
        nutrients = build_soil_nutrients(ph=1.0, nitrogen=-5, phosphorus=-1, potassium=-3, organic_carbon=9)
        result = validate_soil_data(nutrients, build_micronutrients(zinc=-1, boron=9))

        assert 0.0 <= result.confidence <= 1.0
        assert result.confidence == 0.0

    def test_valid_iff_no_error_or_critical(self, depleted_acidic_soil):
        result = validate_soil_data(depleted_acidic_soil)
        blocking = [i for i in result.issues if i.severity in (IssueSeverity.ERROR, IssueSeverity.CRITICAL)]
        assert result.valid == (not blocking)

    def test_accepts_plain_mappings(self, balanced_soil):
        payload = balanced_soil.model_dump(by_alias=True, exclude_none=True)
        result = validate_soil_data(payload)
        assert result.valid is True

    def test_none_nutrients_raise(self):
        with pytest.raises(InputError):
            validate_soil_data(None)

    def test_malformed_record_raises(self):
        with pytest.raises(InputError):
            validate_soil_data({"nitrogen": {"value": 245}})

    def test_unknown_micronutrient_raises(self, balanced_soil):
        molybdenum = {
            "name": "molybdenum",
            "value": -0.5,
            "range": {"min": 0, "max": 5},
            "status": "deficient",
        }
        with pytest.raises(InputError, match="molybdenum"):
            validate_soil_data(balanced_soil, {"molybdenum": molybdenum})

    def test_unknown_nutrient_raises(self):
        with pytest.raises(InputError, match="calcium"):
            validate_soil_data({"calcium": {"value": 3, "range": {"min": 0, "max": 10}, "status": "optimal"}})

    def test_non_mapping_raises(self):
        with pytest.raises(InputError):
            validate_soil_data([6.8, 245, 18, 156])

    def test_injected_logger_is_used(self, balanced_soil, caplog):
        import logging
        service = SoilDataValidationService(logger=logging.getLogger("tests.validation"))
        with caplog.at_level(logging.INFO, logger="tests.validation"):
            service.validate_soil_data(balanced_soil)
        assert "Validation completed: VALID" in caplog.text
