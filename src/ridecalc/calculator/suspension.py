"""
Suspension setup engine.

Baseline air pressure, sag and damper clicks for fork and rear shock, from
total system weight (rider plus gear), bike category, riding style and
terrain. Fork and shock are computed independently from the per-category
tables in ``constants``; hardtails get no shock settings.

Fork and shock model tags only select a damper preset, which changes the
click range, a rebound offset and whether compression is adjustable. The
pressure and sag formulas do not depend on the model.
"""

import logging
import math
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from ..enums import (
    BIKE_CATEGORY_ALIASES,
    RIDING_STYLE_ALIASES,
    BikeCategory,
    RidingStyle,
    Terrain,
    coerce_enum_or_default,
)
from .constants import (
    COMPRESSION_BASE_CLICKS,
    COMPRESSION_ROUGH_TERRAIN,
    COMPRESSION_ROUGH_TERRAIN_CLICKS,
    COMPRESSION_STYLE_ADJUSTMENT,
    DAMPER_PRESETS,
    DEFAULT_GEAR_WEIGHT_KG,
    EXTERNAL_COMPRESSION,
    MAX_DAMPER_CLICKS,
    MAX_GEAR_WEIGHT_KG,
    MAX_SUSPENSION_RIDER_WEIGHT_KG,
    PRESSURE_RATIO_PSI_PER_KG,
    REBOUND_BASE_CLICKS,
    REBOUND_KG_PER_CLICK,
    REFERENCE_SYSTEM_WEIGHT_KG,
    SAG_TARGET_PERCENT,
    SERVICE_INTERVAL_HOURS,
    STYLE_ADJUSTMENT,
    SUSPENSION_CATEGORY_NOTES,
    SUSPENSION_TERRAIN_ADJUSTMENT,
    TRAVEL_MM,
)
from .errors import InvalidParameter

logger = logging.getLogger(__name__)

FORK = 0
SHOCK = 1


class SuspensionInput(BaseModel):
    """Rider and bike description for a suspension baseline."""
    model_config = ConfigDict(frozen=True)

    rider_weight_kg: float
    gear_weight_kg: float = DEFAULT_GEAR_WEIGHT_KG
    bike_category: BikeCategory = BikeCategory.TRAIL
    riding_style: RidingStyle = RidingStyle.BALANCED
    terrain: Terrain = Terrain.TRAIL
    fork_brand: Optional[str] = None
    fork_model: Optional[str] = None
    shock_brand: Optional[str] = None
    shock_model: Optional[str] = None

    @field_validator('bike_category', mode='before')
    @classmethod
    def coerce_bike_category(cls, v):
        return coerce_enum_or_default(BikeCategory, v, BikeCategory.TRAIL, BIKE_CATEGORY_ALIASES)

    @field_validator('riding_style', mode='before')
    @classmethod
    def coerce_riding_style(cls, v):
        return coerce_enum_or_default(RidingStyle, v, RidingStyle.BALANCED, RIDING_STYLE_ALIASES)

    @field_validator('terrain', mode='before')
    @classmethod
    def coerce_terrain(cls, v):
        return coerce_enum_or_default(Terrain, v, Terrain.TRAIL)

    @property
    def total_weight_kg(self) -> float:
        return self.rider_weight_kg + self.gear_weight_kg


class DamperPreset(BaseModel):
    """Adjuster characteristics of a damper family."""
    model_config = ConfigDict(frozen=True)

    name: str
    max_clicks: int = MAX_DAMPER_CLICKS
    rebound_offset: int = 0
    external_compression: Optional[bool] = None  # None: use the category default


GENERIC_DAMPER = DamperPreset(name="Generic")


class SuspensionUnitSettings(BaseModel):
    """Baseline settings for one fork or shock."""
    model_config = ConfigDict(frozen=True)

    pressure_psi: int
    sag_percentage: float
    sag_mm: float
    travel_mm: float
    rebound_clicks: int
    compression_clicks: Optional[int] = None  # None: no external adjuster
    damper: str = GENERIC_DAMPER.name


class SuspensionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_weight_kg: float
    bike_category: BikeCategory
    fork: SuspensionUnitSettings
    shock: Optional[SuspensionUnitSettings] = None
    recommendations: Tuple[str, ...] = ()
    setup_notes: Tuple[str, ...] = ()


def find_damper_preset(brand: Optional[str], model: Optional[str]) -> DamperPreset:
    """Match a fork/shock tag against DAMPER_PRESETS by substring."""
    tag = " ".join(part for part in (brand, model) if part).lower()
    if not tag:
        return GENERIC_DAMPER
    for match, name, max_clicks, rebound_offset, compression in DAMPER_PRESETS:
        if match in tag:
            return DamperPreset(
                name=name,
                max_clicks=max_clicks,
                rebound_offset=rebound_offset,
                external_compression=compression,
            )
    return GENERIC_DAMPER


def _validate(inp: SuspensionInput) -> None:
    if not 0 < inp.rider_weight_kg <= MAX_SUSPENSION_RIDER_WEIGHT_KG:
        logger.debug(f"Rejecting rider weight {inp.rider_weight_kg}")
        raise InvalidParameter(
            "rider_weight_kg", inp.rider_weight_kg,
            f"must be within (0, {MAX_SUSPENSION_RIDER_WEIGHT_KG:g}]",
        )
    if not 0 <= inp.gear_weight_kg <= MAX_GEAR_WEIGHT_KG:
        logger.debug(f"Rejecting gear weight {inp.gear_weight_kg}")
        raise InvalidParameter(
            "gear_weight_kg", inp.gear_weight_kg,
            f"must be within [0, {MAX_GEAR_WEIGHT_KG:g}]",
        )


def _clamp_clicks(clicks: int, preset: DamperPreset) -> int:
    return max(0, min(clicks, MAX_DAMPER_CLICKS, preset.max_clicks))


def calculate_air_pressure(inp: SuspensionInput, unit: int) -> int:
    """
    Air spring pressure for one unit, in whole PSI.

    Formula: total × ratio(category, unit) × (1 + style + terrain)
    """
    ratio = PRESSURE_RATIO_PSI_PER_KG[inp.bike_category][unit]
    modifier = 1 + STYLE_ADJUSTMENT[inp.riding_style] + SUSPENSION_TERRAIN_ADJUSTMENT[inp.terrain]
    return int(math.floor(inp.total_weight_kg * ratio * modifier + 0.5))


def calculate_rebound_clicks(inp: SuspensionInput, unit: int,
                             preset: DamperPreset = GENERIC_DAMPER) -> int:
    """Rebound clicks from closed; one click slower per 10 kg over 75 kg."""
    base = REBOUND_BASE_CLICKS[inp.bike_category][unit]
    weight_steps = math.floor(
        (inp.total_weight_kg - REFERENCE_SYSTEM_WEIGHT_KG) / REBOUND_KG_PER_CLICK
    )
    return _clamp_clicks(base - weight_steps + preset.rebound_offset, preset)


def calculate_compression_clicks(inp: SuspensionInput, unit: int,
                                 preset: DamperPreset = GENERIC_DAMPER) -> Optional[int]:
    """Compression clicks from open, or None without an external adjuster."""
    adjustable = preset.external_compression
    if adjustable is None:
        adjustable = EXTERNAL_COMPRESSION[inp.bike_category][unit]
    if not adjustable:
        return None

    clicks = COMPRESSION_BASE_CLICKS + COMPRESSION_STYLE_ADJUSTMENT[inp.riding_style]
    if inp.terrain in COMPRESSION_ROUGH_TERRAIN:
        clicks += COMPRESSION_ROUGH_TERRAIN_CLICKS
    return _clamp_clicks(clicks, preset)


def _unit_settings(inp: SuspensionInput, unit: int, preset: DamperPreset) -> SuspensionUnitSettings:
    sag_percentage = SAG_TARGET_PERCENT[inp.bike_category][unit]
    travel = TRAVEL_MM[inp.bike_category][unit]
    return SuspensionUnitSettings(
        pressure_psi=calculate_air_pressure(inp, unit),
        sag_percentage=sag_percentage,
        sag_mm=round(travel * sag_percentage / 100, 1),
        travel_mm=travel,
        rebound_clicks=calculate_rebound_clicks(inp, unit, preset),
        compression_clicks=calculate_compression_clicks(inp, unit, preset),
        damper=preset.name,
    )


def calculate_suspension_settings(inp: SuspensionInput) -> SuspensionResult:
    """
    Baseline fork and shock settings.

    Args:
        inp: Rider weight, gear weight, bike category, style, terrain and
            optional fork/shock tags

    Returns:
        SuspensionResult; ``shock`` is None for hardtails

    Raises:
        InvalidParameter: If rider or gear weight is out of bounds
    """
    _validate(inp)

    fork = _unit_settings(inp, FORK, find_damper_preset(inp.fork_brand, inp.fork_model))
    shock = None
    if inp.bike_category != BikeCategory.HARDTAIL:
        shock = _unit_settings(inp, SHOCK, find_damper_preset(inp.shock_brand, inp.shock_model))

    logger.debug(
        f"Suspension for {inp.total_weight_kg}kg {inp.bike_category.value}: "
        f"fork {fork.pressure_psi} PSI"
        + (f", shock {shock.pressure_psi} PSI" if shock else "")
    )

    recommendations = (
        "Set sag first with all your riding gear on.",
        "Adjust rebound so the suspension returns quickly without being bouncy.",
        "Fine-tune compression for the trail: more for smooth sections, less for rough terrain.",
        f"Service air springs and dampers every {SERVICE_INTERVAL_HOURS} riding hours.",
    )
    setup_notes = (
        SUSPENSION_CATEGORY_NOTES[inp.bike_category],
        "Always set pressure with a dedicated shock pump.",
        "Record your settings for different trails to build a tuning baseline.",
    )

    return SuspensionResult(
        total_weight_kg=inp.total_weight_kg,
        bike_category=inp.bike_category,
        fork=fork,
        shock=shock,
        recommendations=recommendations,
        setup_notes=setup_notes,
    )
