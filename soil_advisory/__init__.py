"""
Soil advisory engine: validates soil test reports, identifies nutrient
deficiencies, plans costed remediation and ranks suitable crops.
"""
from soil_advisory.services.crop_suitability_service import (
    calculate_parameter_suitability,
    compare_crop_suitability_with_improvements,
    get_crop_recommendations_from_soil_data,
    get_crop_recommendations_with_soil_improvement,
    get_seasonal_crop_recommendations,
    simulate_improved_soil_conditions,
)
from soil_advisory.services.remediation_planner import (
    generate_remediation_plan,
    get_integrated_remediation_strategy,
)
from soil_advisory.services.soil_analysis_service import (
    analyze_deficiencies,
    interpret_soil_health,
    run_soil_analysis,
)
from soil_advisory.services.soil_deficiency_service import identify_deficiencies
from soil_advisory.services.soil_excel_service import generate_soil_analysis_excel
from soil_advisory.services.soil_inputs import InputError
from soil_advisory.services.soil_validation_service import validate_soil_data

__version__ = "1.0.0"
