"""Type-safe enums for the ride setup calculators.

String values match the identifiers used in component catalogs and on the
command line. ``coerce_enum`` accepts either the value or the member name,
case-insensitively.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Type, TypeVar, Union

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class ComponentCategory(Enum):
    """Catalog component category"""
    CASSETTE = "cassette"
    CHAINRING = "chainring"
    CRANKSET = "crankset"
    CHAIN = "chain"
    WHEEL = "wheel"
    TIRE = "tire"
    DERAILLEUR = "derailleur"
    HUB = "hub"
    CRANK = "crank"
    BOTTOM_BRACKET = "bottom_bracket"
    SHIFTER = "shifter"
    BRAKE = "brake"
    FORK = "fork"
    SHOCK = "shock"
    FRAME = "frame"


class FreehubType(Enum):
    """Cassette/freehub spline interface"""
    SHIMANO_HG = "shimano_hg"      # Hyperglide, 8-11 speed road and MTB
    SRAM_XD = "sram_xd"            # XD driver, 10T smallest cog
    MICRO_SPLINE = "micro_spline"  # Shimano 12 speed MTB


class Terrain(Enum):
    """Riding terrain, ordered from smoothest to roughest"""
    ROAD = "road"
    ROAD_ROUGH = "road_rough"
    GRAVEL = "gravel"
    GRAVEL_ROUGH = "gravel_rough"
    XC_TRAIL = "xc_trail"
    TRAIL = "trail"
    ENDURO = "enduro"
    DOWNHILL = "downhill"
    BIKE_PARK = "bike_park"


class SurfaceCondition(Enum):
    """Surface condition"""
    DRY = "dry"
    WET = "wet"
    MIXED = "mixed"


class RidingStyle(Enum):
    """Ride priority for tires, riding style for suspension"""
    COMFORT = "comfort"
    BALANCED = "balanced"
    SPEED = "speed"
    GRIP = "grip"


# Older catalog and form values, mapped onto the current styles
RIDING_STYLE_ALIASES: Dict[str, RidingStyle] = {
    "racing": RidingStyle.SPEED,
    "fitness": RidingStyle.BALANCED,
    "casual": RidingStyle.COMFORT,
    "technical": RidingStyle.GRIP,
    "aggressive": RidingStyle.GRIP,
}


class BikeCategory(Enum):
    """Suspension bike category"""
    XC = "xc"
    TRAIL = "trail"
    ENDURO = "enduro"
    DOWNHILL = "downhill"
    HARDTAIL = "hardtail"


BIKE_CATEGORY_ALIASES: Dict[str, BikeCategory] = {
    "full_suspension_xc": BikeCategory.XC,
    "hardtail_xc": BikeCategory.HARDTAIL,
}


class FrameType(Enum):
    """Frame standard used for the chainline optimum"""
    ROAD = "road"
    GRAVEL = "gravel"
    MTB = "mtb"
    BOOST = "boost"


class Severity(Enum):
    """Severity of a drivetrain finding"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueType(Enum):
    """Compatibility issue kind"""
    FREEHUB = "freehub"
    CAPACITY = "capacity"
    CHAIN = "chain"
    OTHER = "other"


class CompatibilityStatus(Enum):
    """Overall compatibility verdict"""
    COMPATIBLE = "compatible"
    WARNING = "warning"
    INCOMPATIBLE = "incompatible"


class SolutionType(Enum):
    """Kind of remediation"""
    REPLACE = "replace"
    UPGRADE = "upgrade"
    ADAPTER = "adapter"
    MODIFICATION = "modification"


class Difficulty(Enum):
    """Workshop difficulty of a remediation"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def coerce_enum(
    enum_cls: Type[E],
    value: Union[str, E],
    aliases: Optional[Dict[str, E]] = None,
) -> E:
    """
    Convert a string to an enum member by value or name, ignoring case.

    Args:
        enum_cls: Target enum class
        value: Member, value string or name string
        aliases: Extra lowercase names accepted for this enum

    Returns:
        Matching enum member

    Raises:
        ValueError: If nothing matches
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected {enum_cls.__name__} or string, got {value!r}")

    key = value.strip().lower().replace("-", "_").replace(" ", "_")
    for member in enum_cls:
        if member.value.lower() == key or member.name.lower() == key:
            return member
    if aliases and key in aliases:
        return aliases[key]
    raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}")


def coerce_enum_or_default(
    enum_cls: Type[E],
    value: Union[str, E, None],
    default: E,
    aliases: Optional[Dict[str, E]] = None,
) -> E:
    """Like coerce_enum, but unknown values fall back to ``default`` with a warning."""
    if value is None:
        return default
    try:
        return coerce_enum(enum_cls, value, aliases)
    except ValueError:
        logger.warning(
            f"Unknown {enum_cls.__name__} {value!r}, falling back to {default.value!r}"
        )
        return default
