"""
Soil Data Validation Service.

Checks soil-test parameters for data quality before they are used:
- Absolute and typical range checks per parameter
- Statistical outlier detection against reference ranges
- Cross-parameter relationships (N:P ratio, K balance, pH interactions)
- Crop-specific pH context
- Confidence scoring and follow-up recommendations

Findings are returned inside the ValidationResult; only structurally invalid
input raises InputError.
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from soil_advisory.schemas.soil_schemas import (
    AnomalySeverity,
    IssueSeverity,
    MACRONUTRIENTS,
    Micronutrients,
    ParameterStatus,
    SoilNutrients,
    SoilParameterName,
    ValidationOptions,
)
from soil_advisory.services import soil_rules as rules
from soil_advisory.services.soil_inputs import (
    coerce_micronutrients,
    coerce_nutrients,
    coerce_validation_options,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationIssue:
    parameter: str
    issue: str
    severity: IssueSeverity
    suggestion: str
    confidence: float
    possible_causes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SoilAnomaly:
    parameter: str
    issue: str
    severity: AnomalySeverity
    description: str
    possible_causes: List[str]
    recommended_action: str


@dataclass(frozen=True)
class Outlier:
    parameter: str
    value: float
    expected_range: Tuple[float, float]
    deviation_score: float


@dataclass(frozen=True)
class CorrelationIssue:
    parameters: List[str]
    issue: str
    expected_correlation: str


@dataclass(frozen=True)
class StatisticalAnalysis:
    outliers: List[Outlier]
    correlation_issues: List[CorrelationIssue]
    consistency_score: float


@dataclass(frozen=True)
class ValidationResult:
    """Data-quality verdict for one soil report."""
    valid: bool
    confidence: float
    issues: List[ValidationIssue]
    anomalies: List[SoilAnomaly]
    recommendations: List[str]
    statistical_analysis: Optional[StatisticalAnalysis] = None

    @property
    def critical_issues(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.CRITICAL]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _label(name: SoilParameterName) -> str:
    if name is SoilParameterName.PH:
        return "pH"
    return name.value.replace("_", " ").capitalize()


def _fmt(value: float) -> str:
    return f"{value:g}"


class SoilDataValidationService:
    """
    Validates soil nutrients and micronutrients.

    Stateless: every call is a pure function of its arguments and the
    reference tables in soil_rules.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def validate_soil_data(
        self,
        nutrients: Any,
        micronutrients: Any = None,
        options: Any = None,
    ) -> ValidationResult:
        nutrients = coerce_nutrients(nutrients)
        micronutrients = coerce_micronutrients(micronutrients)
        options = coerce_validation_options(options)

        issues: List[ValidationIssue] = []
        anomalies: List[SoilAnomaly] = []
        penalty = 0.0

        range_issues, range_anomalies, range_penalty = self._validate_parameter_ranges(
            nutrients, micronutrients, options
        )
        issues.extend(range_issues)
        anomalies.extend(range_anomalies)
        penalty += range_penalty

        statistical_analysis = None
        if options.enable_statistical_analysis:
            statistical_analysis = self._perform_statistical_analysis(nutrients, micronutrients)
            stat_issues, stat_anomalies = self._convert_statistical_findings(statistical_analysis)
            issues.extend(stat_issues)
            anomalies.extend(stat_anomalies)

        if options.enable_cross_parameter_validation:
            cross_issues, cross_anomalies, cross_penalty = self._validate_cross_parameters(
                nutrients, micronutrients
            )
            issues.extend(cross_issues)
            anomalies.extend(cross_anomalies)
            penalty += cross_penalty

        if options.crop_type:
            context_issues, context_penalty = self._validate_crop_context(nutrients, options.crop_type)
            issues.extend(context_issues)
            penalty += context_penalty

        confidence = 1.0 - penalty
        if statistical_analysis is not None:
            confidence = min(confidence, statistical_analysis.consistency_score)
        confidence = round(min(1.0, max(0.0, confidence)), 4)

        valid = not any(
            i.severity in (IssueSeverity.ERROR, IssueSeverity.CRITICAL) for i in issues
        )
        recommendations = self._generate_recommendations(issues, anomalies, confidence, options)

        self.logger.info(
            f"Validation completed: {'VALID' if valid else 'INVALID'}, confidence: {confidence:.2f}, "
            f"{len(issues)} issues, {len(anomalies)} anomalies"
        )

        return ValidationResult(
            valid=valid,
            confidence=confidence,
            issues=issues,
            anomalies=anomalies,
            recommendations=recommendations,
            statistical_analysis=statistical_analysis,
        )

    # ==================== RANGE CHECKS ====================

    def _all_parameters(
        self, nutrients: SoilNutrients, micronutrients: Micronutrients
    ) -> List[Tuple[SoilParameterName, float]]:
        present = nutrients.present() + micronutrients.present()
        return [(name, parameter.value) for name, parameter in present]

    def _validate_parameter_ranges(
        self,
        nutrients: SoilNutrients,
        micronutrients: Micronutrients,
        options: ValidationOptions,
    ) -> Tuple[List[ValidationIssue], List[SoilAnomaly], float]:
        issues: List[ValidationIssue] = []
        anomalies: List[SoilAnomaly] = []
        penalty = 0.0

        for name, value in self._all_parameters(nutrients, micronutrients):
            issue, anomaly, parameter_penalty = self._validate_single_parameter(name, value, options)
            if issue is not None:
                issues.append(issue)
                penalty += parameter_penalty
            if anomaly is not None:
                anomalies.append(anomaly)

        missing = nutrients.missing_required()
        if missing:
            missing_labels = ", ".join(name.value for name in missing)
            issues.append(ValidationIssue(
                parameter="required_parameters",
                issue=f"Missing critical soil parameters: {missing_labels}",
                severity=IssueSeverity.WARNING,
                suggestion="Essential parameters (pH, N, P, K) are missing from the report - request a complete soil test",
                confidence=0.9,
                possible_causes=["Incomplete laboratory report", "Extraction failure", "Parameter not tested"],
            ))
            penalty += rules.MISSING_REQUIRED_PENALTY
            self.logger.debug(f"Missing required parameters: {missing_labels}")

        return issues, anomalies, penalty

    def _validate_single_parameter(
        self,
        name: SoilParameterName,
        value: float,
        options: ValidationOptions,
    ) -> Tuple[Optional[ValidationIssue], Optional[SoilAnomaly], float]:
        ranges = rules.PARAMETER_RANGES[name]
        abs_min, abs_max = ranges["absolute"]
        typ_min, typ_max = ranges["typical"]
        label = _label(name)
        critical_penalty = rules.CRITICAL_PENALTY.get(name, rules.DEFAULT_CRITICAL_PENALTY)

        if value < 0 and name is not SoilParameterName.PH:
            return (
                ValidationIssue(
                    parameter=name.value,
                    issue="Negative value detected",
                    severity=IssueSeverity.CRITICAL,
                    suggestion=f"{label} cannot be negative - check measurement accuracy",
                    confidence=0.95,
                    possible_causes=["Measurement error", "Data entry mistake", "Equipment malfunction"],
                ),
                SoilAnomaly(
                    parameter=name.value,
                    issue="Impossible negative value",
                    severity=AnomalySeverity.HIGH,
                    description=f"{label} value of {_fmt(value)} is physically impossible",
                    possible_causes=["Measurement error", "Data entry mistake"],
                    recommended_action="Retest the soil sample and verify measurement procedures",
                ),
                critical_penalty,
            )

        if value < abs_min or value > abs_max:
            direction = "low" if value < abs_min else "high"
            return (
                ValidationIssue(
                    parameter=name.value,
                    issue="Value outside possible range",
                    severity=IssueSeverity.CRITICAL,
                    suggestion=(
                        f"{label} value {_fmt(value)} is outside possible range "
                        f"({_fmt(abs_min)}-{_fmt(abs_max)})"
                    ),
                    confidence=0.9,
                    possible_causes=["Measurement error", "Extreme soil conditions", "Equipment calibration issue"],
                ),
                SoilAnomaly(
                    parameter=name.value,
                    issue="Extreme value detected",
                    severity=AnomalySeverity.HIGH,
                    description=f"{label} value of {_fmt(value)} is extremely {direction}",
                    possible_causes=[
                        "Severe deficiency" if direction == "low" else "Excessive application",
                        "Measurement error",
                        "Unusual soil conditions",
                    ],
                    recommended_action="Verify measurement and consider retesting",
                ),
                critical_penalty,
            )

        if value < typ_min or value > typ_max:
            return (
                ValidationIssue(
                    parameter=name.value,
                    issue="Unusual value detected",
                    severity=IssueSeverity.ERROR if options.strict_mode else IssueSeverity.WARNING,
                    suggestion=(
                        f"{label} value {_fmt(value)} is outside typical range "
                        f"({_fmt(typ_min)}-{_fmt(typ_max)})"
                    ),
                    confidence=0.7,
                    possible_causes=["Unusual soil conditions", "Recent fertilizer application", "Natural variation"],
                ),
                SoilAnomaly(
                    parameter=name.value,
                    issue="Atypical value",
                    severity=AnomalySeverity.MEDIUM,
                    description=f"{label} value of {_fmt(value)} is unusual for typical soils",
                    possible_causes=[
                        "Natural soil variation",
                        "Recent agricultural practices",
                        "Specific soil type characteristics",
                    ],
                    recommended_action="Monitor parameter and consider soil management adjustments",
                ),
                rules.ATYPICAL_PENALTY,
            )

        return None, None, 0.0

    # ==================== STATISTICAL ANALYSIS ====================

    def _perform_statistical_analysis(
        self, nutrients: SoilNutrients, micronutrients: Micronutrients
    ) -> StatisticalAnalysis:
        parameters = self._all_parameters(nutrients, micronutrients)
        outliers: List[Outlier] = []

        for name, value in parameters:
            typ_min, typ_max = rules.PARAMETER_RANGES[name]["typical"]
            mean = (typ_min + typ_max) / 2
            std_dev = (typ_max - typ_min) / 4
            z_score = abs(value - mean) / std_dev
            if z_score > rules.OUTLIER_Z_THRESHOLD:
                outliers.append(Outlier(
                    parameter=name.value,
                    value=value,
                    expected_range=(typ_min, typ_max),
                    deviation_score=round(z_score, 4),
                ))

        correlation_issues = self._check_parameter_correlations(nutrients)
        consistency_score = self._calculate_consistency_score(
            len(outliers), len(correlation_issues), len(parameters)
        )

        return StatisticalAnalysis(
            outliers=outliers,
            correlation_issues=correlation_issues,
            consistency_score=consistency_score,
        )

    def _check_parameter_correlations(self, nutrients: SoilNutrients) -> List[CorrelationIssue]:
        issues: List[CorrelationIssue] = []
        if nutrients.organic_carbon is None or nutrients.nitrogen is None:
            return issues

        oc = nutrients.organic_carbon.value
        n = nutrients.nitrogen.value
        if oc <= 0 or n < 0:
            return issues

        expected_n = oc * rules.OC_TO_N_FACTOR
        if abs(n - expected_n) > expected_n * rules.OC_N_TOLERANCE:
            issues.append(CorrelationIssue(
                parameters=[SoilParameterName.ORGANIC_CARBON.value, SoilParameterName.NITROGEN.value],
                issue=(
                    f"Nitrogen {_fmt(n)} kg/ha is inconsistent with organic carbon {_fmt(oc)}% "
                    f"(expected about {expected_n:.0f} kg/ha)"
                ),
                expected_correlation="Organic carbon should correlate with nitrogen availability",
            ))
        return issues

    @staticmethod
    def _calculate_consistency_score(outliers: int, correlation_issues: int, total: int) -> float:
        if total == 0:
            return 1.0
        outlier_penalty = (outliers / total) * rules.CONSISTENCY_OUTLIER_WEIGHT
        correlation_penalty = (correlation_issues / max(1, total / 2)) * rules.CONSISTENCY_CORRELATION_WEIGHT
        return round(max(0.0, 1.0 - outlier_penalty - correlation_penalty), 4)

    def _convert_statistical_findings(
        self, analysis: StatisticalAnalysis
    ) -> Tuple[List[ValidationIssue], List[SoilAnomaly]]:
        issues: List[ValidationIssue] = []
        anomalies: List[SoilAnomaly] = []

        for outlier in analysis.outliers:
            significant = outlier.deviation_score > rules.SIGNIFICANT_DEVIATION_Z
            confidence = 1 - (outlier.deviation_score - 2) * 0.1
            confidence = min(rules.OUTLIER_CONFIDENCE_MAX, max(rules.OUTLIER_CONFIDENCE_MIN, confidence))
            issues.append(ValidationIssue(
                parameter=outlier.parameter,
                issue="Statistical outlier detected",
                severity=IssueSeverity.WARNING if significant else IssueSeverity.INFO,
                suggestion=(
                    f"{outlier.parameter} value {_fmt(outlier.value)} deviates significantly "
                    f"from expected range"
                ),
                confidence=round(confidence, 4),
                possible_causes=["Natural soil variation", "Recent agricultural practices", "Measurement uncertainty"],
            ))
            if significant:
                anomalies.append(SoilAnomaly(
                    parameter=outlier.parameter,
                    issue="Significant statistical deviation",
                    severity=AnomalySeverity.MEDIUM,
                    description=f"{outlier.parameter} shows significant deviation from typical values",
                    possible_causes=["Unusual soil conditions", "Recent management practices", "Natural soil variability"],
                    recommended_action="Consider retesting or investigate recent soil management",
                ))

        for correlation in analysis.correlation_issues:
            issues.append(ValidationIssue(
                parameter="-".join(correlation.parameters),
                issue="Parameter correlation anomaly",
                severity=IssueSeverity.INFO,
                suggestion=correlation.issue,
                confidence=0.6,
                possible_causes=[
                    "Independent nutrient applications",
                    "Soil-specific characteristics",
                    "Temporal variation in measurements",
                ],
            ))

        return issues, anomalies

    # ==================== CROSS-PARAMETER CHECKS ====================

    def _validate_cross_parameters(
        self, nutrients: SoilNutrients, micronutrients: Micronutrients
    ) -> Tuple[List[ValidationIssue], List[SoilAnomaly], float]:
        issues: List[ValidationIssue] = []
        anomalies: List[SoilAnomaly] = []
        penalty = 0.0

        n_param, p_param, k_param = (nutrients.get(name) for name in MACRONUTRIENTS)
        if n_param and p_param and k_param:
            n, p, k = n_param.value, p_param.value, k_param.value
            if min(n, p, k) >= 0:
                if p > 0:
                    np_ratio = n / p
                    if np_ratio > rules.NP_RATIO_MAX or np_ratio < rules.NP_RATIO_MIN:
                        high = np_ratio > rules.NP_RATIO_MAX
                        issues.append(ValidationIssue(
                            parameter="N:P ratio",
                            issue="Imbalanced nitrogen to phosphorus ratio",
                            severity=IssueSeverity.WARNING,
                            suggestion=(
                                f"N:P ratio of {np_ratio:.1f}:1 indicates "
                                + ("excess nitrogen or phosphorus deficiency" if high
                                   else "nitrogen deficiency or excess phosphorus")
                            ),
                            confidence=0.8,
                            possible_causes=[
                                "Excessive nitrogen fertilization" if high else "Insufficient nitrogen application",
                                "Phosphorus fixation" if high else "Excessive phosphorus application",
                                "Imbalanced fertilizer program",
                            ],
                        ))
                        extreme = np_ratio > rules.NP_RATIO_HIGH_MAX or np_ratio < rules.NP_RATIO_HIGH_MIN
                        anomalies.append(SoilAnomaly(
                            parameter="N:P ratio",
                            issue="Nutrient ratio imbalance",
                            severity=AnomalySeverity.HIGH if extreme else AnomalySeverity.MEDIUM,
                            description=f"N:P ratio of {np_ratio:.1f}:1 suggests imbalanced fertilization",
                            possible_causes=[
                                "Unbalanced fertilizer application",
                                "Nutrient fixation in soil",
                                "Crop-specific nutrient uptake patterns",
                            ],
                            recommended_action="Adjust fertilizer program to balance N:P ratio",
                        ))
                        penalty += rules.NP_RATIO_PENALTY

                avg_np = (n + p) / 2
                low_k = k < avg_np * rules.K_BALANCE_LOW_FACTOR
                if low_k or k > avg_np * rules.K_BALANCE_HIGH_FACTOR:
                    issues.append(ValidationIssue(
                        parameter="K balance",
                        issue="Potassium imbalance relative to N and P",
                        severity=IssueSeverity.WARNING,
                        suggestion=f"Potassium level {'too low' if low_k else 'too high'} compared to nitrogen and phosphorus",
                        confidence=0.7,
                        possible_causes=[
                            "Insufficient potassium application" if low_k else "Excessive potassium fertilization",
                            "Soil type-specific nutrient dynamics",
                            "Crop removal patterns",
                        ],
                    ))
                    penalty += rules.K_BALANCE_PENALTY

        if nutrients.ph is not None:
            ph = nutrients.ph.value
            if p_param is not None and (ph < rules.PH_P_LOW or ph > rules.PH_P_HIGH):
                if p_param.value > rules.PH_P_EXPECTED_P * rules.PH_P_EXCESS_FACTOR:
                    issues.append(ValidationIssue(
                        parameter="pH-P relationship",
                        issue="High phosphorus despite unfavorable pH",
                        severity=IssueSeverity.INFO,
                        suggestion=f"Phosphorus level {_fmt(p_param.value)} is higher than expected at pH {_fmt(ph)}",
                        confidence=0.6,
                        possible_causes=[
                            "Recent phosphorus fertilizer application",
                            "Organic matter contribution",
                            "Measurement timing effects",
                        ],
                    ))

            if ph > rules.PH_MICRO_ALKALINE:
                deficient = [
                    name.value for name, parameter in micronutrients.present()
                    if parameter.status == ParameterStatus.DEFICIENT
                ]
                if deficient:
                    issues.append(ValidationIssue(
                        parameter="pH-micronutrient relationship",
                        issue="Micronutrient deficiencies at high pH",
                        severity=IssueSeverity.WARNING,
                        suggestion=f"High pH ({_fmt(ph)}) may be causing micronutrient deficiencies: {', '.join(deficient)}",
                        confidence=0.8,
                        possible_causes=[
                            "Alkaline pH reducing micronutrient availability",
                            "Nutrient precipitation at high pH",
                            "Soil chemistry interactions",
                        ],
                    ))
                    penalty += rules.PH_MICRO_PENALTY

        return issues, anomalies, penalty

    def _validate_crop_context(
        self, nutrients: SoilNutrients, crop_type: str
    ) -> Tuple[List[ValidationIssue], float]:
        tolerance = rules.CROP_PH_TOLERANCE.get(crop_type.strip().lower())
        if tolerance is None or nutrients.ph is None:
            return [], 0.0

        ph = nutrients.ph.value
        too_low = "min" in tolerance and ph < tolerance["min"]
        too_high = "max" in tolerance and ph > tolerance["max"]
        if not (too_low or too_high):
            return [], 0.0

        limit = tolerance["min"] if too_low else tolerance["max"]
        return [ValidationIssue(
            parameter=SoilParameterName.PH.value,
            issue=f"{'Low' if too_low else 'High'} pH for {crop_type} cultivation",
            severity=IssueSeverity.WARNING,
            suggestion=(
                f"pH {'below' if too_low else 'above'} {_fmt(limit)} may affect {crop_type} "
                f"growth and nutrient availability"
            ),
            confidence=0.8,
            possible_causes=(
                ["Acidic parent material", "Acidifying fertilizers", "High rainfall leaching"] if too_low
                else ["Alkaline soil conditions", "Lime application", "Irrigation water quality"]
            ),
        )], rules.CONTEXT_PENALTY

    # ==================== RECOMMENDATIONS ====================

    def _generate_recommendations(
        self,
        issues: List[ValidationIssue],
        anomalies: List[SoilAnomaly],
        confidence: float,
        options: ValidationOptions,
    ) -> List[str]:
        recommendations: List[str] = []
        severities = [i.severity for i in issues]

        if IssueSeverity.CRITICAL in severities:
            recommendations.append("CRITICAL: Retest soil sample immediately - critical validation errors detected")
            recommendations.append("Verify laboratory procedures and equipment calibration")

        if IssueSeverity.ERROR in severities:
            recommendations.append("Verify measurement accuracy for parameters with validation errors")
            recommendations.append("Consider retesting soil sample to confirm unusual values")

        if severities.count(IssueSeverity.WARNING) > 2:
            recommendations.append("Multiple validation warnings detected - review soil management practices")

        if any(a.severity == AnomalySeverity.HIGH for a in anomalies):
            recommendations.append("Investigate causes of detected soil anomalies")
            recommendations.append("Consider consulting with soil science expert for unusual conditions")

        if any(i.parameter == SoilParameterName.PH.value for i in issues):
            recommendations.append("pH validation issues detected - verify pH meter calibration")

        macro_keys = {name.value for name in MACRONUTRIENTS}
        if sum(1 for i in issues if i.parameter in macro_keys) > 1:
            recommendations.append("Multiple nutrient validation issues - review fertilizer application records")

        if confidence < options.confidence_threshold:
            recommendations.append(
                f"Overall confidence {confidence:.2f} is below the threshold of "
                f"{options.confidence_threshold:.2f} - treat results as provisional"
            )

        if not recommendations:
            recommendations.append("Soil data validation passed - values appear reasonable and consistent")

        return recommendations


soil_data_validation_service = SoilDataValidationService()


def validate_soil_data(nutrients: Any, micronutrients: Any = None, options: Any = None) -> ValidationResult:
    """Validate a soil report with the shared service instance."""
    return soil_data_validation_service.validate_soil_data(nutrients, micronutrients, options)
