"""
Tire pressure engine.

Pressure is built in a fixed left-to-right pipeline:

1. Base pressure from per-tire load over an estimated contact patch
2. × terrain factor (by width band)
3. × tubeless factor (tubeless only)
4. × condition factor (wet/mixed)
5. × priority factor (speed clamped to 1.0 on technical terrain)
6. Front/rear split, rounded half-up to 0.5 PSI

The safe range, confidence and note lists are derived afterwards from
independent rule checks against the rounded pressures and the inputs.
"""

import logging
import math
from typing import Iterable, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

from ..enums import (
    RIDING_STYLE_ALIASES,
    RidingStyle,
    SurfaceCondition,
    Terrain,
    coerce_enum,
    coerce_enum_or_default,
)
from .constants import (
    ALTITUDE_PSI_PER_1000M,
    CONDITION_FACTORS_LOOSE,
    CONDITION_FACTORS_PAVED,
    CONFIDENCE_ATYPICAL_WIDTH_MARGIN_PERCENT,
    CONFIDENCE_ATYPICAL_WIDTH_PENALTY,
    CONFIDENCE_BASE,
    CONFIDENCE_EXTREME_WEIGHT_PENALTY,
    CONFIDENCE_HEAVY_RIDER_KG,
    CONFIDENCE_LIGHT_RIDER_KG,
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    CONFIDENCE_TYPICAL_WIDTH_BONUS,
    CONTACT_PATCH_INTERCEPT_IN2,
    CONTACT_PATCH_REFERENCE_DIAMETER_IN,
    CONTACT_PATCH_SLOPE_IN2_PER_MM,
    DEFAULT_WHEEL_DIAMETER_IN,
    DEFAULT_WIDTH_RECOMMENDATION_KEY,
    ESTIMATED_RIM_WIDTH_MM,
    FEEDBACK_ADJUSTMENTS_PSI,
    FEEDBACK_BASE_CONFIDENCE,
    FEEDBACK_CONFIDENCE_PER_PSI,
    FEEDBACK_SEVERITY_MULTIPLIER,
    GRAVEL_TERRAIN,
    HEAVY_RIDER_KG,
    INSERT_SUGGESTION_MAX_REAR_PSI,
    KG_TO_LBF,
    MAX_BIKE_WEIGHT_KG,
    MAX_RIDER_WEIGHT_KG,
    MAX_RIM_TO_TIRE_RATIO,
    MAX_TIRE_WIDTH_MM,
    MAX_WHEEL_DIAMETER_IN,
    MIN_BASE_PRESSURE_PSI,
    MIN_TIRE_WIDTH_MM,
    MIN_WHEEL_DIAMETER_IN,
    NARROW_TIRE_MAX_MM,
    PAVED_TERRAIN,
    PINCH_FLAT_FLOOR_PSI,
    PRACTICAL_MAX_PSI,
    PRESSURE_PRECISION_PSI,
    PRIORITY_FACTORS,
    PSI_TO_BAR,
    SAFE_RANGE_FACTORS,
    STANDARD_TIRE_MAX_MM,
    TECHNICAL_TERRAIN,
    TEMPERATURE_PSI_PER_10C,
    TERRAIN_FACTORS,
    TIRE_WIDTH_RECOMMENDATIONS,
    TUBELESS_FACTOR_GRAVEL,
    TUBELESS_FACTOR_OFFROAD,
    TUBELESS_FACTOR_PAVED,
    TYPICAL_TIRE_WIDTH_MM,
    WEIGHT_DISTRIBUTION,
)
from .errors import InvalidParameter

logger = logging.getLogger(__name__)


TERRAIN_NOTES = {
    Terrain.ROAD: "Smooth pavement rewards higher pressure for low rolling resistance",
    Terrain.ROAD_ROUGH: "Broken tarmac: a few PSI less improves comfort and grip",
    Terrain.GRAVEL: "Gravel: lower pressure lets the tire conform to loose surfaces",
    Terrain.GRAVEL_ROUGH: "Rough gravel: balance rim protection against traction on chunky sections",
    Terrain.XC_TRAIL: "XC trails: moderate pressure keeps rolling speed without losing grip",
    Terrain.TRAIL: "Trail riding: prioritize traction and small-bump compliance",
    Terrain.ENDURO: "Enduro: support for hard cornering and rim protection on big hits",
    Terrain.DOWNHILL: "Downhill: maximum traction; casing and rim protection matter more than speed",
    Terrain.BIKE_PARK: "Bike park: repeated jumps and berms need extra support from the rear tire",
}


# ─── Models ──────────────────────────────────────────────────────────────


class TirePressureParams(BaseModel):
    """Inputs for a tire pressure recommendation.

    Unknown terrain, condition or priority strings fall back to
    trail/dry/balanced with a logged warning instead of failing.
    """
    model_config = ConfigDict(frozen=True)

    rider_weight_kg: float
    bike_weight_kg: float
    tire_width_mm: float
    wheel_diameter_in: float = DEFAULT_WHEEL_DIAMETER_IN
    terrain: Terrain = Terrain.TRAIL
    tubeless: bool = False
    conditions: SurfaceCondition = SurfaceCondition.DRY
    priority: RidingStyle = RidingStyle.BALANCED

    @field_validator('terrain', mode='before')
    @classmethod
    def coerce_terrain(cls, v):
        return coerce_enum_or_default(Terrain, v, Terrain.TRAIL)

    @field_validator('conditions', mode='before')
    @classmethod
    def coerce_conditions(cls, v):
        return coerce_enum_or_default(SurfaceCondition, v, SurfaceCondition.DRY)

    @field_validator('priority', mode='before')
    @classmethod
    def coerce_priority(cls, v):
        return coerce_enum_or_default(RidingStyle, v, RidingStyle.BALANCED, RIDING_STYLE_ALIASES)


class PressureRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_psi: float
    max_psi: float


class SafeRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    front: PressureRange
    rear: PressureRange
    overall: PressureRange


class EnvironmentAdjustments(BaseModel):
    """How far to correct the recommendation for ambient conditions."""
    model_config = ConfigDict(frozen=True)

    temperature_psi_per_10c: float = TEMPERATURE_PSI_PER_10C
    altitude_psi_per_1000m: float = ALTITUDE_PSI_PER_1000M


class TirePressureResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    front_psi: float
    rear_psi: float
    front_bar: float
    rear_bar: float
    safe_range: SafeRange
    confidence: int
    terrain_notes: Tuple[str, ...] = ()
    setup_notes: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()
    adjustments: EnvironmentAdjustments = EnvironmentAdjustments()


class TireWidthRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    terrain: str
    widths_mm: Tuple[int, ...]
    default_width_mm: int
    notes: Tuple[str, ...]


class RideFeedback(BaseModel):
    """One piece of post-ride feedback about a tire."""
    model_config = ConfigDict(frozen=True)

    issue: str  # e.g. "too_harsh", "bottoming_out"
    severity: Literal['mild', 'moderate', 'severe'] = 'moderate'
    component: Literal['front_tire', 'rear_tire', 'fork', 'shock'] = 'rear_tire'


class FeedbackAdjustment(BaseModel):
    model_config = ConfigDict(frozen=True)

    component: str
    current_psi: float
    suggested_psi: float
    change_psi: float
    reasoning: str
    confidence: float


# ─── Pipeline steps ──────────────────────────────────────────────────────


def round_to_precision(psi: float, precision: float = PRESSURE_PRECISION_PSI) -> float:
    """Round half-up to the nearest ``precision`` PSI."""
    steps = math.floor(psi / precision + 0.5)
    return steps * precision


def psi_to_bar(psi: float) -> float:
    return round(psi * PSI_TO_BAR, 2)


def _validate(params: TirePressureParams) -> None:
    """Reject non-positive or implausible numbers."""
    checks = (
        ("rider_weight_kg", params.rider_weight_kg, 0.0, MAX_RIDER_WEIGHT_KG, False),
        ("bike_weight_kg", params.bike_weight_kg, 0.0, MAX_BIKE_WEIGHT_KG, False),
        ("tire_width_mm", params.tire_width_mm, MIN_TIRE_WIDTH_MM, MAX_TIRE_WIDTH_MM, True),
        ("wheel_diameter_in", params.wheel_diameter_in,
         MIN_WHEEL_DIAMETER_IN, MAX_WHEEL_DIAMETER_IN, True),
    )
    for name, value, low, high, low_inclusive in checks:
        # Written so NaN fails the check
        inside = low <= value <= high if low_inclusive else low < value <= high
        if not inside:
            logger.debug(f"Rejecting {name}={value}")
            bracket = "[" if low_inclusive else "("
            raise InvalidParameter(name, value, f"must be within {bracket}{low:g}, {high:g}]")

    total_weight = params.rider_weight_kg + params.bike_weight_kg
    base = calculate_base_pressure(total_weight, params.tire_width_mm, params.wheel_diameter_in)
    if base < MIN_BASE_PRESSURE_PSI:
        logger.debug(f"Rejecting base pressure {base:.1f} PSI for {params.tire_width_mm}mm tire")
        raise InvalidParameter(
            "tire_width_mm", params.tire_width_mm,
            f"too wide for a {total_weight:g}kg system (base pressure {base:.1f} PSI, "
            f"minimum {MIN_BASE_PRESSURE_PSI:g} PSI)",
        )


def _contact_patch_in2(tire_width_mm: float, wheel_diameter_in: float) -> float:
    """Approximate contact patch area of one tire, in square inches."""
    area = CONTACT_PATCH_INTERCEPT_IN2 + CONTACT_PATCH_SLOPE_IN2_PER_MM * tire_width_mm
    return area * math.sqrt(wheel_diameter_in / CONTACT_PATCH_REFERENCE_DIAMETER_IN)


def calculate_base_pressure(total_weight_kg: float, tire_width_mm: float,
                            wheel_diameter_in: float = DEFAULT_WHEEL_DIAMETER_IN) -> float:
    """Per-tire load (lbf) divided by contact patch (in²), in PSI."""
    load_per_tire_lbf = total_weight_kg * KG_TO_LBF / 2
    return load_per_tire_lbf / _contact_patch_in2(tire_width_mm, wheel_diameter_in)


def _width_band(tire_width_mm: float) -> int:
    if tire_width_mm <= NARROW_TIRE_MAX_MM:
        return 0
    if tire_width_mm <= STANDARD_TIRE_MAX_MM:
        return 1
    return 2


def terrain_factor(terrain: Terrain, tire_width_mm: float) -> float:
    return TERRAIN_FACTORS[terrain][_width_band(tire_width_mm)]


def tubeless_factor(terrain: Terrain) -> float:
    if terrain in PAVED_TERRAIN:
        return TUBELESS_FACTOR_PAVED
    if terrain in GRAVEL_TERRAIN:
        return TUBELESS_FACTOR_GRAVEL
    return TUBELESS_FACTOR_OFFROAD


def condition_factor(conditions: SurfaceCondition, terrain: Terrain) -> float:
    if conditions == SurfaceCondition.DRY:
        return 1.0
    wet, mixed = CONDITION_FACTORS_PAVED if terrain in PAVED_TERRAIN else CONDITION_FACTORS_LOOSE
    return wet if conditions == SurfaceCondition.WET else mixed


def priority_factor(priority: RidingStyle, terrain: Terrain) -> float:
    factor = PRIORITY_FACTORS[priority]
    if terrain in TECHNICAL_TERRAIN:
        factor = min(factor, 1.0)
    return factor


def _safe_range(front: float, rear: float, terrain: Terrain) -> SafeRange:
    low, high = SAFE_RANGE_FACTORS[terrain]
    front_range = PressureRange(
        min_psi=round_to_precision(front * low), max_psi=round_to_precision(front * high)
    )
    rear_range = PressureRange(
        min_psi=round_to_precision(rear * low), max_psi=round_to_precision(rear * high)
    )
    return SafeRange(
        front=front_range,
        rear=rear_range,
        overall=PressureRange(min_psi=front_range.min_psi, max_psi=rear_range.max_psi),
    )


def _confidence(params: TirePressureParams) -> int:
    """Confidence score, rewarding common width/terrain pairings."""
    score = CONFIDENCE_BASE
    low, high = TYPICAL_TIRE_WIDTH_MM[params.terrain]
    margin = CONFIDENCE_ATYPICAL_WIDTH_MARGIN_PERCENT / 100
    width = params.tire_width_mm
    if low <= width <= high:
        score += CONFIDENCE_TYPICAL_WIDTH_BONUS
    elif width < low * (1 - margin) or width > high * (1 + margin):
        score -= CONFIDENCE_ATYPICAL_WIDTH_PENALTY

    rider = params.rider_weight_kg
    if rider < CONFIDENCE_LIGHT_RIDER_KG or rider > CONFIDENCE_HEAVY_RIDER_KG:
        score -= CONFIDENCE_EXTREME_WEIGHT_PENALTY

    return max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, score))


# ─── Notes ───────────────────────────────────────────────────────────────


def _estimated_rim_width_mm(terrain: Terrain, tire_width_mm: float) -> float:
    if terrain in PAVED_TERRAIN:
        key = "paved"
    elif terrain in GRAVEL_TERRAIN:
        key = "gravel"
    else:
        key = "offroad"
    threshold, narrow_rim, wide_rim = ESTIMATED_RIM_WIDTH_MM[key]
    return narrow_rim if tire_width_mm < threshold else wide_rim


def _terrain_notes(params: TirePressureParams, priority_clamped: bool) -> List[str]:
    notes = [TERRAIN_NOTES[params.terrain]]
    if params.conditions == SurfaceCondition.WET:
        notes.append("Wet conditions: pressure lowered for a larger contact patch")
    elif params.conditions == SurfaceCondition.MIXED:
        notes.append("Mixed conditions: pressure slightly lowered for variable grip")

    if priority_clamped:
        notes.append("Speed priority not applied on technical terrain; control comes first")
    elif params.priority == RidingStyle.GRIP:
        notes.append("Grip priority: lower pressure for maximum traction")
    elif params.priority == RidingStyle.COMFORT:
        notes.append("Comfort priority: lower pressure to absorb vibration")
    elif params.priority == RidingStyle.SPEED:
        notes.append("Speed priority: higher pressure for lower rolling resistance")
    return notes


def _setup_notes(params: TirePressureParams, front: float, rear: float) -> List[str]:
    notes = [
        f"A {front:g} PSI front / {rear:g} PSI rear setup is a good starting point "
        f"for {params.terrain.value.replace('_', ' ')} riding"
    ]
    if params.tubeless:
        notes.append("Top up tubeless sealant every 3-6 months")
    else:
        notes.append("Inspect inner tubes for wear and carry a spare")
    if params.rider_weight_kg > HEAVY_RIDER_KG:
        notes.append(
            "Heavier riders should check pressure before every ride and favour reinforced casings"
        )
    return notes


def _warnings(params: TirePressureParams, front: float, rear: float) -> List[str]:
    warnings = []
    floor = PINCH_FLAT_FLOOR_PSI[params.terrain]
    if not params.tubeless and front < floor:
        warnings.append(
            f"Pinch-flat risk: {front:g} PSI front is below {floor:g} PSI with inner tubes"
        )

    ceiling = PRACTICAL_MAX_PSI[params.terrain]
    if rear > ceiling:
        warnings.append(
            f"Rear pressure {rear:g} PSI exceeds the practical maximum of {ceiling:g} PSI "
            f"for this terrain; consider a wider tire"
        )

    rim = _estimated_rim_width_mm(params.terrain, params.tire_width_mm)
    if rim / params.tire_width_mm > MAX_RIM_TO_TIRE_RATIO:
        warnings.append(
            f"Tire is narrow for the estimated {rim:g}mm rim; "
            f"check the rim maker's minimum tire width"
        )
    return warnings


def _recommendations(params: TirePressureParams, rear: float) -> List[str]:
    recs = ["Start with these pressures and adjust in 1-2 PSI steps based on feel"]
    if not params.tubeless and params.terrain not in PAVED_TERRAIN:
        recs.append("Consider converting to tubeless for lower pressures without pinch flats")
    aggressive = params.terrain in TECHNICAL_TERRAIN or params.priority == RidingStyle.GRIP
    if aggressive and rear < INSERT_SUGGESTION_MAX_REAR_PSI:
        recs.append("Consider tire inserts to protect rims at these pressures")
    recs.append("Use a digital gauge; floor pump gauges can read several PSI off")
    return recs


# ─── Entry points ────────────────────────────────────────────────────────


def calculate_tire_pressure(params: TirePressureParams) -> TirePressureResult:
    """
    Recommend front and rear tire pressure.

    Args:
        params: Rider, bike, tire and riding inputs

    Returns:
        TirePressureResult with PSI/BAR, safe range, confidence and notes

    Raises:
        InvalidParameter: If a weight, the tire width or wheel diameter is
            out of bounds, or the load is too light for the tire width
    """
    _validate(params)

    total_weight = params.rider_weight_kg + params.bike_weight_kg
    base = calculate_base_pressure(total_weight, params.tire_width_mm, params.wheel_diameter_in)

    adjusted = base * terrain_factor(params.terrain, params.tire_width_mm)
    if params.tubeless:
        adjusted *= tubeless_factor(params.terrain)
    adjusted *= condition_factor(params.conditions, params.terrain)
    adjusted *= priority_factor(params.priority, params.terrain)

    front_split, rear_split = WEIGHT_DISTRIBUTION[params.terrain]
    front = round_to_precision(adjusted * front_split)
    rear = round_to_precision(adjusted * rear_split)

    logger.debug(
        f"Tire pressure: total {total_weight}kg, base {base:.1f} PSI, "
        f"adjusted {adjusted:.1f} PSI -> {front}/{rear}"
    )

    priority_clamped = (
        params.terrain in TECHNICAL_TERRAIN
        and PRIORITY_FACTORS[params.priority] > priority_factor(params.priority, params.terrain)
    )

    return TirePressureResult(
        front_psi=front,
        rear_psi=rear,
        front_bar=psi_to_bar(front),
        rear_bar=psi_to_bar(rear),
        safe_range=_safe_range(front, rear, params.terrain),
        confidence=_confidence(params),
        terrain_notes=tuple(_terrain_notes(params, priority_clamped)),
        setup_notes=tuple(_setup_notes(params, front, rear)),
        warnings=tuple(_warnings(params, front, rear)),
        recommendations=tuple(_recommendations(params, rear)),
    )


def get_tire_width_recommendations(terrain: Union[Terrain, str]) -> TireWidthRecommendation:
    """
    Common tire widths for a terrain.

    Rough variants share their base terrain's list (``gravel_rough`` uses
    ``gravel``); anything unlisted gets the trail list.
    """
    try:
        key = coerce_enum(Terrain, terrain).value
    except ValueError:
        key = str(terrain).strip().lower()

    if key not in TIRE_WIDTH_RECOMMENDATIONS:
        key = key.split('_')[0]
    if key not in TIRE_WIDTH_RECOMMENDATIONS:
        key = DEFAULT_WIDTH_RECOMMENDATION_KEY

    widths, default, notes = TIRE_WIDTH_RECOMMENDATIONS[key]
    return TireWidthRecommendation(
        terrain=key, widths_mm=widths, default_width_mm=default, notes=notes
    )


def adjust_pressure_from_feedback(
    front_psi: float,
    rear_psi: float,
    feedback: Iterable[RideFeedback],
) -> List[FeedbackAdjustment]:
    """
    Translate ride feedback into pressure changes.

    Each feedback item moves its tire by the issue's base change times the
    severity multiplier (mild 1, moderate 2, severe 3). Bigger changes get
    lower confidence. Feedback about suspension units, or issues a tire
    change cannot address, is skipped.
    """
    adjustments = []
    for item in feedback:
        if item.component not in ('front_tire', 'rear_tire'):
            logger.debug(f"Skipping {item.component} feedback for tire pressure")
            continue
        if item.issue not in FEEDBACK_ADJUSTMENTS_PSI:
            logger.debug(f"No tire pressure remedy for {item.issue!r}")
            continue

        base_change, reasoning = FEEDBACK_ADJUSTMENTS_PSI[item.issue]
        change = base_change * FEEDBACK_SEVERITY_MULTIPLIER[item.severity]
        current = front_psi if item.component == 'front_tire' else rear_psi
        adjustments.append(FeedbackAdjustment(
            component=item.component.replace('_', ' '),
            current_psi=current,
            suggested_psi=round_to_precision(current + change),
            change_psi=change,
            reasoning=reasoning,
            confidence=FEEDBACK_BASE_CONFIDENCE - abs(change) * FEEDBACK_CONFIDENCE_PER_PSI,
        ))
    return adjustments


# Older name for the same entry point
calculate_optimal_pressure = calculate_tire_pressure
