"""
Ridecalc Calculator - drivetrain, tire pressure and suspension engines.

All entry points are pure functions returning frozen result models.

Example:
    >>> from ridecalc.calculator import calculate_tire_pressure, TirePressureParams
    >>>
    >>> params = TirePressureParams(
    ...     rider_weight_kg=80, bike_weight_kg=14, tire_width_mm=60,
    ...     terrain="trail", tubeless=True,
    ... )
    >>> result = calculate_tire_pressure(params)
    >>> result.front_psi, result.rear_psi
"""

from .errors import (
    RideCalcError,
    MissingRequiredData,
    MissingComponentData,
    InvalidParameter,
)

from .drivetrain import (
    # Result types
    GearRatio,
    CrossChainingIssue,
    ChainLengthResult,
    ChainlineResult,

    # Lenient gear helpers
    chainring_teeth,
    gear_ratio,
    calculate_top_speed,
    calculate_climbing_gear,
    calculate_gear_range,
    generate_gear_ratios,
    analyze_cross_chaining,
    calculate_total_weight,
    calculate_total_cost,

    # Standalone calculations
    calculate_chain_length,
    analyze_chainline,
)

from .compatibility import (
    check_compatibility,
    CompatibilityIssue,
    CompatibilitySolution,
    CompatibilityResult,
)

from .comparison import (
    compare_setups,
    ComparisonResult,
    MetricDelta,
    PerformanceComparison,
    WeightComparison,
    CostComparison,
    CostLine,
)

from .tire_pressure import (
    calculate_tire_pressure,
    calculate_optimal_pressure,
    get_tire_width_recommendations,
    adjust_pressure_from_feedback,
    TirePressureParams,
    TirePressureResult,
    SafeRange,
    PressureRange,
    TireWidthRecommendation,
    RideFeedback,
    FeedbackAdjustment,
)

from .suspension import (
    calculate_suspension_settings,
    find_damper_preset,
    SuspensionInput,
    SuspensionResult,
    SuspensionUnitSettings,
    DamperPreset,
)

from .output import to_json, to_summary, to_markdown

# Entry point name used by UI callers
compare_drivetrain_setups = compare_setups

__all__ = [
    # Errors
    "RideCalcError",
    "MissingRequiredData",
    "MissingComponentData",
    "InvalidParameter",

    # Drivetrain
    "GearRatio",
    "CrossChainingIssue",
    "ChainLengthResult",
    "ChainlineResult",
    "chainring_teeth",
    "gear_ratio",
    "calculate_top_speed",
    "calculate_climbing_gear",
    "calculate_gear_range",
    "generate_gear_ratios",
    "analyze_cross_chaining",
    "calculate_total_weight",
    "calculate_total_cost",
    "calculate_chain_length",
    "analyze_chainline",

    # Compatibility and comparison
    "check_compatibility",
    "CompatibilityIssue",
    "CompatibilitySolution",
    "CompatibilityResult",
    "compare_setups",
    "compare_drivetrain_setups",
    "ComparisonResult",
    "MetricDelta",
    "PerformanceComparison",
    "WeightComparison",
    "CostComparison",
    "CostLine",

    # Tire pressure
    "calculate_tire_pressure",
    "calculate_optimal_pressure",
    "get_tire_width_recommendations",
    "adjust_pressure_from_feedback",
    "TirePressureParams",
    "TirePressureResult",
    "SafeRange",
    "PressureRange",
    "TireWidthRecommendation",
    "RideFeedback",
    "FeedbackAdjustment",

    # Suspension
    "calculate_suspension_settings",
    "find_damper_preset",
    "SuspensionInput",
    "SuspensionResult",
    "SuspensionUnitSettings",
    "DamperPreset",

    # Output
    "to_json",
    "to_summary",
    "to_markdown",
]
