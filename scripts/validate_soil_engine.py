#!/usr/bin/env python3
"""
Soil Advisory Engine Validation Script
Runs randomized soil reports through the full pipeline and checks the
engine's invariants (ranges, ordering, cost bounds, determinism).
"""
import sys
import os
import random
import json
from typing import List, Dict, Any

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from soil_advisory.schemas.soil_schemas import BudgetRange, CropRecommendationOptions
from soil_advisory.services.soil_analysis_service import soil_analysis_service
from soil_advisory.services.soil_deficiency_service import deficiency_priority
from soil_advisory.services.soil_parameters import build_micronutrients, build_soil_nutrients

SOIL_PROFILES = [
    {"name": "Balanced Alluvial", "ph": 6.8, "nitrogen": 250, "phosphorus": 30, "potassium": 160, "organic_carbon": 0.75},
    {"name": "Acidic Laterite", "ph": 5.0, "nitrogen": 150, "phosphorus": 12, "potassium": 90, "organic_carbon": 0.4},
    {"name": "Alkaline Black Cotton", "ph": 8.4, "nitrogen": 180, "phosphorus": 15, "potassium": 320, "organic_carbon": 0.5},
    {"name": "Sandy Desert", "ph": 7.9, "nitrogen": 90, "phosphorus": 8, "potassium": 70, "organic_carbon": 0.2},
    {"name": "Red Loam", "ph": 6.2, "nitrogen": 210, "phosphorus": 18, "potassium": 130, "organic_carbon": 0.6},
    {"name": "Saline Coastal", "ph": 8.8, "nitrogen": 120, "phosphorus": 10, "potassium": 240, "organic_carbon": 0.3},
    {"name": "Peaty Hill", "ph": 4.8, "nitrogen": 380, "phosphorus": 22, "potassium": 110, "organic_carbon": 1.8},
    {"name": "Depleted Paddy", "ph": 6.5, "nitrogen": 100, "phosphorus": 9, "potassium": 80, "organic_carbon": 0.35},
]

MICRONUTRIENT_PROFILES = [
    {},
    {"zinc": 0.4, "boron": 0.2},
    {"zinc": 1.2, "iron": 6.0, "manganese": 3.0, "copper": 0.5, "boron": 0.8, "sulfur": 15},
    {"iron": 2.0, "sulfur": 5},
]

SEASONS = ["all", "kharif", "rabi", "zaid", "perennial"]


def jitter(value: float, spread: float = 0.15) -> float:
    return round(value * random.uniform(1 - spread, 1 + spread), 2)


def check_report(report, issues: List[str], test_id: int):
    validation = report.validation
    if not 0 <= validation.confidence <= 1:
        issues.append(f"#{test_id}: validation confidence out of range ({validation.confidence})")

    deficiencies = report.deficiency_analysis.deficiencies
    priorities = [deficiency_priority(d) for d in deficiencies]
    if priorities != sorted(priorities, reverse=True):
        issues.append(f"#{test_id}: deficiencies not sorted by priority")
    for d in deficiencies:
        if d.deficit_amount < 0:
            issues.append(f"#{test_id}: negative deficit for {d.parameter}")

    strategy = report.deficiency_analysis.integrated_strategy
    if strategy is not None:
        total = strategy.total_cost
        for label, cost in (("immediate", total.immediate), ("long_term", total.long_term),
                            ("per_hectare", total.total_per_hectare)):
            if cost.min > cost.max:
                issues.append(f"#{test_id}: {label} cost min > max")
        ids = [a.id for a in strategy.prioritized_actions]
        if len(ids) != len(set(ids)):
            issues.append(f"#{test_id}: duplicate action ids in strategy")

    crops = report.crop_analysis
    scores = [r.suitability_score for r in crops.top_recommendations]
    if scores != sorted(scores, reverse=True):
        issues.append(f"#{test_id}: crop recommendations not sorted by score")
    if any(s < 0 or s > 100 for s in scores):
        issues.append(f"#{test_id}: crop score outside 0-100")
    # Crops scoring 40-49 are retained but counted in neither bucket
    if crops.suitable_crops + crops.marginally_suitable_crops + crops.unsuitable_crops > crops.total_crops_analyzed:
        issues.append(f"#{test_id}: crop bucket counts exceed crops analyzed")


def run_validation(num_tests: int = 100, seed: int = 42) -> Dict[str, Any]:
    random.seed(seed)
    results = []
    issues: List[str] = []
    stats = {
        "total_tests": num_tests,
        "successful": 0,
        "failed": 0,
        "invalid_reports": 0,
        "deficiencies_found": 0,
        "health": {"excellent": 0, "good": 0, "fair": 0, "poor": 0},
    }

    for i in range(num_tests):
        profile = random.choice(SOIL_PROFILES)
        micro = random.choice(MICRONUTRIENT_PROFILES)
        season = random.choice(SEASONS)
        farm_size = random.choice([0.5, 1, 2, 5])
        budget_max = random.choice([None, 5000, 20000, 60000])

        try:
            nutrients = build_soil_nutrients(
                ph=jitter(profile["ph"], 0.05),
                nitrogen=jitter(profile["nitrogen"]),
                phosphorus=jitter(profile["phosphorus"]),
                potassium=jitter(profile["potassium"]),
                organic_carbon=jitter(profile["organic_carbon"]),
            )
            micronutrients = build_micronutrients(**{k: jitter(v) for k, v in micro.items()})
            budget = BudgetRange(min=0, max=budget_max) if budget_max else None
            options = CropRecommendationOptions(season=season, farm_size=farm_size)

            report = soil_analysis_service.run_soil_analysis(
                nutrients, micronutrients, crop_options=options, budget=budget
            )
            again = soil_analysis_service.run_soil_analysis(
                nutrients, micronutrients, crop_options=options, budget=budget
            )
            if report.to_dict() != again.to_dict():
                issues.append(f"#{i + 1}: pipeline is not deterministic")

            check_report(report, issues, i + 1)

            stats["successful"] += 1
            stats["deficiencies_found"] += len(report.deficiency_analysis.deficiencies)
            stats["health"][report.health.overall_health] += 1
            if not report.validation.valid:
                stats["invalid_reports"] += 1

            top = report.crop_analysis.top_recommendations
            results.append({
                "test_id": i + 1,
                "profile": profile["name"],
                "season": season,
                "farm_size": farm_size,
                "health": report.health.overall_health,
                "health_score": report.health.health_score,
                "deficiencies": [d.parameter for d in report.deficiency_analysis.deficiencies],
                "cost_per_ha": report.deficiency_analysis.estimated_cost.max,
                "top_crop": top[0].crop_name if top else None,
                "top_score": top[0].suitability_score if top else None,
            })
        except Exception as e:
            stats["failed"] += 1
            issues.append(f"#{i + 1}: pipeline error: {e}")

    return {"stats": stats, "results": results, "issues": issues}


def generate_report(validation: Dict[str, Any]) -> str:
    stats = validation["stats"]
    results = validation["results"]
    issues = validation["issues"]

    report = []
    report.append("=" * 80)
    report.append("VALIDATION REPORT - SOIL ADVISORY ENGINE")
    report.append("=" * 80)
    report.append("")

    report.append("## SUMMARY")
    report.append("-" * 40)
    report.append(f"Total tests: {stats['total_tests']}")
    report.append(f"Successful: {stats['successful']}")
    report.append(f"Failed: {stats['failed']}")
    report.append(f"Reports flagged invalid: {stats['invalid_reports']}")
    report.append(f"Deficiencies found: {stats['deficiencies_found']}")
    report.append(f"Invariant issues: {len(issues)}")
    report.append("")

    report.append("## SOIL HEALTH DISTRIBUTION")
    report.append("-" * 40)
    for label, count in stats["health"].items():
        report.append(f"{label:<10} {count:>4}")
    report.append("")

    if issues:
        report.append("## ISSUES")
        report.append("-" * 40)
        for issue in issues[:15]:
            report.append(f"- {issue}")
        if len(issues) > 15:
            report.append(f"   ... and {len(issues) - 15} more")
        report.append("")

    report.append("## SAMPLE RESULTS (10 scenarios)")
    report.append("-" * 40)
    for r in random.sample(results, min(10, len(results))):
        report.append(f"\nTest #{r['test_id']}: {r['profile']} ({r['season']}, {r['farm_size']} ha)")
        report.append(f"  Health: {r['health']} ({r['health_score']}/100)")
        report.append(f"  Deficiencies: {', '.join(r['deficiencies']) or 'none'}")
        report.append(f"  Top crop: {r['top_crop']} ({r['top_score']})")
    report.append("")

    report.append("## CONCLUSIONS")
    report.append("-" * 40)
    if stats["failed"] == 0:
        report.append("✓ Every scenario completed without errors.")
    else:
        report.append(f"⚠️ {stats['failed']} scenarios failed with errors.")
    if not issues:
        report.append("✓ All invariants hold across the scenarios.")
    else:
        report.append(f"⚠️ {len(issues)} invariant violations detected.")

    report.append("")
    report.append("=" * 80)
    report.append("END OF REPORT")
    report.append("=" * 80)

    return "\n".join(report)


if __name__ == "__main__":
    print("Running soil advisory validation (100 scenarios)...")
    print("")

    validation = run_validation(num_tests=100, seed=42)

    report = generate_report(validation)
    print(report)

    with open("soil_engine_validation_report.txt", "w", encoding="utf-8") as f:
        f.write(report)

    with open("soil_engine_validation_data.json", "w", encoding="utf-8") as f:
        json.dump(validation, f, indent=2, ensure_ascii=False)

    print("\nGenerated files:")
    print("- soil_engine_validation_report.txt")
    print("- soil_engine_validation_data.json")
