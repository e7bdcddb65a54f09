"""
Policy constants for the ride setup calculators.

This module centralizes every numeric threshold and lookup table used by the
drivetrain, tire pressure and suspension engines. Most values are workshop
rules of thumb rather than derived physics; each group notes where it comes
from.

MODIFICATION GUIDELINES:
- Add new constants here rather than hardcoding in functions
- Always include units in constant names (_MM, _PSI, _KG, _PERCENT, _USD)
- Category-dependent values are keyed lookup tables, one entry per enum member
- Keep the tire terrain tables monotonic from ROAD to DOWNHILL

Constants are grouped by category:
- Unit conversion
- Drivetrain: gear metrics, cross-chaining, compatibility, chain, chainline
- Tire pressure: pipeline factors, ranges, safety limits, feedback
- Suspension: pressure ratios, sag, travel, damping presets
"""

from typing import Dict, Tuple

from ..enums import BikeCategory, FrameType, RidingStyle, Severity, Terrain

# =============================================================================
# Unit conversion
# =============================================================================

INCHES_PER_MILE: float = 63360.0
MINUTES_PER_HOUR: float = 60.0
KG_TO_LBF: float = 2.20462
PSI_TO_BAR: float = 0.0689476

# =============================================================================
# Drivetrain - gear metrics
# =============================================================================

DEFAULT_WHEEL_DIAMETER_IN: float = 29.0
DEFAULT_CADENCE_RPM: float = 90.0

# Number of extreme ratios dropped from each end when listing "optimal" gears
OPTIMAL_GEAR_TRIM: int = 2

# =============================================================================
# Drivetrain - cross-chaining
# =============================================================================

# Evaluated in order, first match wins. Each row is
# (end, cogs_from_end, severity, efficiency_loss_percent, recommendation).
# "small" counts from the smallest cog, "large" from the largest.
# Loss percentages are policy values, not measured friction losses.
CROSS_CHAINING_RULES: Tuple[Tuple[str, int, Severity, float, str], ...] = (
    ("small", 2, Severity.HIGH, 8.0,
     "Avoid using smallest cogs with this chainring for extended periods"),
    ("large", 2, Severity.HIGH, 6.0,
     "Consider using a smaller chainring for these larger cogs"),
    ("small", 4, Severity.MEDIUM, 3.0,
     "Moderate cross-chaining - acceptable for short periods"),
    ("large", 4, Severity.MEDIUM, 3.0,
     "Moderate cross-chaining - acceptable for short periods"),
)

# =============================================================================
# Drivetrain - compatibility
# =============================================================================

# Derailleur max cog assumed when the catalog does not state one
DEFAULT_DERAILLEUR_MAX_COG: int = 50

# Estimated shop cost of each remediation (parts plus labour)
FREEHUB_SWAP_COST_USD: float = 150.0
DERAILLEUR_UPGRADE_COST_USD: float = 120.0
CHAIN_REPLACEMENT_COST_USD: float = 35.0

# Each compatibility issue removes this much from a 100 point confidence
CONFIDENCE_PENALTY_PER_ISSUE: int = 15

# Upgrade value (grams saved per dollar) reported when weight drops at no cost
UPGRADE_VALUE_FREE_SAVINGS: float = 100.0

# =============================================================================
# Drivetrain - chain length
# =============================================================================

CHAIN_PITCH_MM: float = 12.7            # 1/2 inch, all derailleur chains
CHAIN_WRAP_ALLOWANCE_MM: float = 4.0    # Added to the big-big wrap estimate
CHAIN_LINK_TOLERANCE: int = 2

# =============================================================================
# Drivetrain - chainline
# =============================================================================

# Optimal chainline (mm from frame centre) per frame standard
OPTIMAL_CHAINLINE_MM: Dict[FrameType, float] = {
    FrameType.ROAD: 43.5,
    FrameType.GRAVEL: 45.5,
    FrameType.MTB: 48.5,
    FrameType.BOOST: 50.0,
}

CHAINLINE_MIN_EFFICIENCY_PERCENT: float = 85.0
CHAINLINE_EFFICIENCY_LOSS_PER_MM: float = 2.0

CHAINLINE_SEVERE_DEVIATION_MM: float = 10.0
CHAINLINE_SIGNIFICANT_DEVIATION_MM: float = 5.0
CHAINLINE_EXCELLENT_DEVIATION_MM: float = 2.0

CHAINSTAY_SHORT_MM: float = 420.0
CHAINSTAY_LONG_MM: float = 450.0

# =============================================================================
# Tire pressure - input bounds
# =============================================================================

MAX_RIDER_WEIGHT_KG: float = 250.0
MAX_BIKE_WEIGHT_KG: float = 60.0
MIN_TIRE_WIDTH_MM: float = 18.0
MAX_TIRE_WIDTH_MM: float = 130.0
MIN_WHEEL_DIAMETER_IN: float = 12.0
MAX_WHEEL_DIAMETER_IN: float = 36.0

# =============================================================================
# Tire pressure - base pressure
# =============================================================================

# Contact patch area (in^2) = intercept + slope * width_mm, for a 29" wheel
# at the load of one tire. Scaled by sqrt(diameter / 29) for other wheels.
CONTACT_PATCH_INTERCEPT_IN2: float = -0.35
CONTACT_PATCH_SLOPE_IN2_PER_MM: float = 0.055
CONTACT_PATCH_REFERENCE_DIAMETER_IN: float = 29.0

# Lowest base pressure accepted. Below this the load is too light for the
# tire width: the smallest gap between adjacent terrains (enduro to downhill,
# tubeless, wet, grip priority) shrinks under one 0.5 PSI step and the
# terrain and tubeless adjustments round away.
MIN_BASE_PRESSURE_PSI: float = 12.0

# Width bands for the terrain factor table
NARROW_TIRE_MAX_MM: float = 32.0
STANDARD_TIRE_MAX_MM: float = 50.0

# Terrain factor per width band: (narrow, standard, wide)
TERRAIN_FACTORS: Dict[Terrain, Tuple[float, float, float]] = {
    Terrain.ROAD: (1.00, 0.95, 0.90),
    Terrain.ROAD_ROUGH: (0.92, 0.88, 0.84),
    Terrain.GRAVEL: (0.84, 0.80, 0.76),
    Terrain.GRAVEL_ROUGH: (0.78, 0.74, 0.70),
    Terrain.XC_TRAIL: (0.74, 0.70, 0.68),
    Terrain.TRAIL: (0.68, 0.65, 0.63),
    Terrain.ENDURO: (0.60, 0.58, 0.56),
    Terrain.DOWNHILL: (0.54, 0.52, 0.50),
    Terrain.BIKE_PARK: (0.56, 0.54, 0.52),
}

PAVED_TERRAIN = frozenset({Terrain.ROAD, Terrain.ROAD_ROUGH})
GRAVEL_TERRAIN = frozenset({Terrain.GRAVEL, Terrain.GRAVEL_ROUGH})
TECHNICAL_TERRAIN = frozenset({Terrain.ENDURO, Terrain.DOWNHILL, Terrain.BIKE_PARK})

# Tubeless runs lower without pinch-flat risk
TUBELESS_FACTOR_PAVED: float = 0.92
TUBELESS_FACTOR_GRAVEL: float = 0.90
TUBELESS_FACTOR_OFFROAD: float = 0.88

# Condition factors: (wet, mixed). Loose surfaces gain more grip from a drop.
CONDITION_FACTORS_PAVED: Tuple[float, float] = (0.97, 0.985)
CONDITION_FACTORS_LOOSE: Tuple[float, float] = (0.95, 0.97)

PRIORITY_FACTORS: Dict[RidingStyle, float] = {
    RidingStyle.COMFORT: 0.95,
    RidingStyle.BALANCED: 1.00,
    RidingStyle.SPEED: 1.05,
    RidingStyle.GRIP: 0.93,
}

# Front/rear multipliers; front is always lighter than rear
WEIGHT_DISTRIBUTION: Dict[Terrain, Tuple[float, float]] = {
    Terrain.ROAD: (0.95, 1.05),
    Terrain.ROAD_ROUGH: (0.95, 1.05),
    Terrain.GRAVEL: (0.94, 1.06),
    Terrain.GRAVEL_ROUGH: (0.94, 1.06),
    Terrain.XC_TRAIL: (0.92, 1.08),
    Terrain.TRAIL: (0.92, 1.08),
    Terrain.ENDURO: (0.92, 1.08),
    Terrain.DOWNHILL: (0.90, 1.10),
    Terrain.BIKE_PARK: (0.90, 1.10),
}

PRESSURE_PRECISION_PSI: float = 0.5

# =============================================================================
# Tire pressure - safe range and confidence
# =============================================================================

# Safe operating band as (min, max) multipliers of the recommended pressure
SAFE_RANGE_FACTORS: Dict[Terrain, Tuple[float, float]] = {
    Terrain.ROAD: (0.92, 1.08),
    Terrain.ROAD_ROUGH: (0.90, 1.10),
    Terrain.GRAVEL: (0.90, 1.10),
    Terrain.GRAVEL_ROUGH: (0.88, 1.12),
    Terrain.XC_TRAIL: (0.88, 1.12),
    Terrain.TRAIL: (0.85, 1.15),
    Terrain.ENDURO: (0.85, 1.15),
    Terrain.DOWNHILL: (0.80, 1.20),
    Terrain.BIKE_PARK: (0.82, 1.18),
}

# Tire widths (mm) commonly ridden on each terrain
TYPICAL_TIRE_WIDTH_MM: Dict[Terrain, Tuple[float, float]] = {
    Terrain.ROAD: (23.0, 32.0),
    Terrain.ROAD_ROUGH: (28.0, 35.0),
    Terrain.GRAVEL: (35.0, 50.0),
    Terrain.GRAVEL_ROUGH: (40.0, 55.0),
    Terrain.XC_TRAIL: (50.0, 62.0),
    Terrain.TRAIL: (56.0, 66.0),
    Terrain.ENDURO: (58.0, 68.0),
    Terrain.DOWNHILL: (60.0, 72.0),
    Terrain.BIKE_PARK: (60.0, 72.0),
}

CONFIDENCE_BASE: int = 85
CONFIDENCE_TYPICAL_WIDTH_BONUS: int = 10
CONFIDENCE_ATYPICAL_WIDTH_PENALTY: int = 10
CONFIDENCE_ATYPICAL_WIDTH_MARGIN_PERCENT: float = 25.0
CONFIDENCE_EXTREME_WEIGHT_PENALTY: int = 5
CONFIDENCE_LIGHT_RIDER_KG: float = 50.0
CONFIDENCE_HEAVY_RIDER_KG: float = 120.0
CONFIDENCE_MIN: int = 70
CONFIDENCE_MAX: int = 95

# =============================================================================
# Tire pressure - safety limits and notes
# =============================================================================

# Below this with inner tubes, pinch flats become likely
PINCH_FLAT_FLOOR_PSI: Dict[Terrain, float] = {
    Terrain.ROAD: 60.0,
    Terrain.ROAD_ROUGH: 55.0,
    Terrain.GRAVEL: 30.0,
    Terrain.GRAVEL_ROUGH: 30.0,
    Terrain.XC_TRAIL: 25.0,
    Terrain.TRAIL: 25.0,
    Terrain.ENDURO: 25.0,
    Terrain.DOWNHILL: 25.0,
    Terrain.BIKE_PARK: 25.0,
}

# Above this the tire is past its useful range for the terrain
PRACTICAL_MAX_PSI: Dict[Terrain, float] = {
    Terrain.ROAD: 120.0,
    Terrain.ROAD_ROUGH: 100.0,
    Terrain.GRAVEL: 60.0,
    Terrain.GRAVEL_ROUGH: 50.0,
    Terrain.XC_TRAIL: 40.0,
    Terrain.TRAIL: 35.0,
    Terrain.ENDURO: 35.0,
    Terrain.DOWNHILL: 35.0,
    Terrain.BIKE_PARK: 35.0,
}

# Estimated internal rim width: (tire width threshold, narrower rim, wider rim)
ESTIMATED_RIM_WIDTH_MM: Dict[str, Tuple[float, float, float]] = {
    "paved": (28.0, 17.0, 21.0),
    "gravel": (45.0, 23.0, 25.0),
    "offroad": (60.0, 27.0, 30.0),
}
MAX_RIM_TO_TIRE_RATIO: float = 0.7

HEAVY_RIDER_KG: float = 100.0
INSERT_SUGGESTION_MAX_REAR_PSI: float = 25.0

# Environmental corrections reported alongside every result
TEMPERATURE_PSI_PER_10C: float = 1.5
ALTITUDE_PSI_PER_1000M: float = 0.5

# =============================================================================
# Tire pressure - width recommendations and ride feedback
# =============================================================================

# (widths, default width, notes) per terrain family
TIRE_WIDTH_RECOMMENDATIONS: Dict[str, Tuple[Tuple[int, ...], int, Tuple[str, ...]]] = {
    "road": (
        (23, 25, 28, 30, 32), 28,
        ("23-25mm: Racing", "28-30mm: Performance", "32mm+: Endurance/Comfort"),
    ),
    "gravel": (
        (38, 40, 42, 45, 50), 42,
        ("38-40mm: Fast gravel", "42-45mm: Mixed terrain comfort"),
    ),
    "xc_trail": (
        (56, 58, 61), 58,
        ('56mm (2.2"): Fast rolling', '58mm (2.3"): Good balance',
         '61mm (2.4"): Modern XC grip'),
    ),
    "trail": (
        (58, 61, 64, 66), 61,
        ('58mm (2.3"): Light trail', '61mm (2.4"): All-mountain',
         '64-66mm (2.5-2.6"): Aggressive trail'),
    ),
    "enduro": (
        (61, 64, 66), 64,
        ('61mm (2.4"): Versatile', '64mm (2.5"): Standard for racing',
         '66mm (2.6"): Maximum grip'),
    ),
    "downhill": (
        (61, 64, 66, 71), 64,
        ('61-64mm (2.4-2.5"): Standard',
         '66-71mm (2.6-2.8"): Maximum grip/Rough conditions'),
    ),
}
DEFAULT_WIDTH_RECOMMENDATION_KEY: str = "trail"

# PSI change per severity step, with reasoning
FEEDBACK_ADJUSTMENTS_PSI: Dict[str, Tuple[float, str]] = {
    "too_harsh": (-1.5, "Reduce pressure for better comfort and small bump compliance"),
    "too_soft": (1.5, "Increase pressure for better support and efficiency"),
    "bottoming_out": (2.5, "Increase pressure to prevent rim strikes and damage"),
    "poor_traction": (-1.5, "Reduce pressure to increase contact patch and grip"),
    "slow_rolling": (1.5, "Increase pressure to reduce rolling resistance"),
    "unstable_cornering": (1.0, "Increase pressure for better cornering stability"),
    "harsh_small_bumps": (-2.0, "Reduce pressure for better small bump sensitivity"),
}
FEEDBACK_SEVERITY_MULTIPLIER: Dict[str, int] = {"mild": 1, "moderate": 2, "severe": 3}
FEEDBACK_BASE_CONFIDENCE: float = 85.0
FEEDBACK_CONFIDENCE_PER_PSI: float = 2.0

# =============================================================================
# Suspension - input bounds and pressure
# =============================================================================

MAX_SUSPENSION_RIDER_WEIGHT_KG: float = 200.0
MAX_GEAR_WEIGHT_KG: float = 40.0
DEFAULT_GEAR_WEIGHT_KG: float = 5.0

# Air spring PSI per kg of system weight: (fork, shock). No shock on hardtails.
PRESSURE_RATIO_PSI_PER_KG: Dict[BikeCategory, Tuple[float, float]] = {
    BikeCategory.HARDTAIL: (0.95, 0.0),
    BikeCategory.XC: (0.95, 2.30),
    BikeCategory.TRAIL: (1.00, 2.40),
    BikeCategory.ENDURO: (1.05, 2.50),
    BikeCategory.DOWNHILL: (1.10, 2.60),
}

STYLE_ADJUSTMENT: Dict[RidingStyle, float] = {
    RidingStyle.COMFORT: -0.05,
    RidingStyle.BALANCED: 0.0,
    RidingStyle.SPEED: 0.05,
    RidingStyle.GRIP: -0.03,
}

SUSPENSION_TERRAIN_ADJUSTMENT: Dict[Terrain, float] = {
    Terrain.ROAD: 0.0,
    Terrain.ROAD_ROUGH: 0.0,
    Terrain.GRAVEL: 0.0,
    Terrain.GRAVEL_ROUGH: 0.0,
    Terrain.XC_TRAIL: 0.0,
    Terrain.TRAIL: 0.0,
    Terrain.ENDURO: 0.03,
    Terrain.DOWNHILL: 0.05,
    Terrain.BIKE_PARK: 0.07,
}

# =============================================================================
# Suspension - sag and travel
# =============================================================================

SAG_TARGET_PERCENT: Dict[BikeCategory, Tuple[float, float]] = {
    BikeCategory.HARDTAIL: (20.0, 0.0),
    BikeCategory.XC: (20.0, 25.0),
    BikeCategory.TRAIL: (25.0, 30.0),
    BikeCategory.ENDURO: (25.0, 30.0),
    BikeCategory.DOWNHILL: (30.0, 35.0),
}

TRAVEL_MM: Dict[BikeCategory, Tuple[float, float]] = {
    BikeCategory.HARDTAIL: (100.0, 0.0),
    BikeCategory.XC: (120.0, 110.0),
    BikeCategory.TRAIL: (140.0, 130.0),
    BikeCategory.ENDURO: (170.0, 160.0),
    BikeCategory.DOWNHILL: (200.0, 200.0),
}

# =============================================================================
# Suspension - damping
# =============================================================================

REFERENCE_SYSTEM_WEIGHT_KG: float = 75.0
REBOUND_KG_PER_CLICK: float = 10.0

# Rebound clicks from closed for the reference weight: (fork, shock)
REBOUND_BASE_CLICKS: Dict[BikeCategory, Tuple[int, int]] = {
    BikeCategory.HARDTAIL: (10, 0),
    BikeCategory.XC: (10, 10),
    BikeCategory.TRAIL: (8, 10),
    BikeCategory.ENDURO: (8, 9),
    BikeCategory.DOWNHILL: (7, 8),
}

MAX_DAMPER_CLICKS: int = 20

COMPRESSION_BASE_CLICKS: int = 5
COMPRESSION_STYLE_ADJUSTMENT: Dict[RidingStyle, int] = {
    RidingStyle.COMFORT: 2,
    RidingStyle.BALANCED: 0,
    RidingStyle.SPEED: -2,
    RidingStyle.GRIP: 2,
}
COMPRESSION_ROUGH_TERRAIN = frozenset({Terrain.DOWNHILL, Terrain.BIKE_PARK})
COMPRESSION_ROUGH_TERRAIN_CLICKS: int = 2

# Whether the stock unit of each category has an external compression
# adjuster: (fork, shock). XC forks typically offer only a lockout.
EXTERNAL_COMPRESSION: Dict[BikeCategory, Tuple[bool, bool]] = {
    BikeCategory.HARDTAIL: (False, False),
    BikeCategory.XC: (False, True),
    BikeCategory.TRAIL: (True, True),
    BikeCategory.ENDURO: (True, True),
    BikeCategory.DOWNHILL: (True, True),
}

# Damper presets, matched by case-insensitive substring of the model tag.
# Checked in order so "float x2" wins over "float x".
# Each row: (match, name, max_clicks, rebound_offset, external_compression)
DAMPER_PRESETS: Tuple[Tuple[str, str, int, int, bool], ...] = (
    ("charger race day", "RockShox Charger Race Day", 20, 0, False),
    ("charger 3", "RockShox Charger 3", 15, 0, True),
    ("grip2", "Fox GRIP2", 16, 1, True),
    ("fit4", "Fox FIT4", 20, 0, True),
    ("float x2", "Fox Float X2", 16, 1, True),
    ("dpx2", "Fox Float X / DPX2", 14, 0, True),
    ("float x", "Fox Float X / DPX2", 14, 0, True),
)

SUSPENSION_CATEGORY_NOTES: Dict[BikeCategory, str] = {
    BikeCategory.HARDTAIL: "Hardtail: run the fork slightly firmer to match the rigid rear end.",
    BikeCategory.XC: "XC: prioritize pedaling efficiency; use the lockout on smooth climbs.",
    BikeCategory.TRAIL: "Trail: balance small-bump sensitivity with mid-stroke support.",
    BikeCategory.ENDURO: "Enduro: favour support and bottom-out resistance for big hits.",
    BikeCategory.DOWNHILL: "Downhill: set up for maximum traction and control at speed.",
}

SERVICE_INTERVAL_HOURS: int = 50
