"""
Drivetrain gear math, chain length and chainline.

The gear helpers are lenient: missing cassette or chainring data yields 0 or
an empty list rather than an error. Only the comparison entry point in
``comparison.py`` insists on complete data.

Chain length and chainline are standalone calculations on plain numbers and
reject non-positive geometry with InvalidParameter.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict

from ..enums import FrameType, Severity, coerce_enum
from ..io.loaders import CassetteSpec, ChainringSpec, Component, CranksetSpec
from .constants import (
    CHAIN_LINK_TOLERANCE,
    CHAIN_PITCH_MM,
    CHAIN_WRAP_ALLOWANCE_MM,
    CHAINLINE_EFFICIENCY_LOSS_PER_MM,
    CHAINLINE_EXCELLENT_DEVIATION_MM,
    CHAINLINE_MIN_EFFICIENCY_PERCENT,
    CHAINLINE_SEVERE_DEVIATION_MM,
    CHAINLINE_SIGNIFICANT_DEVIATION_MM,
    CHAINSTAY_LONG_MM,
    CHAINSTAY_SHORT_MM,
    CROSS_CHAINING_RULES,
    DEFAULT_CADENCE_RPM,
    DEFAULT_WHEEL_DIAMETER_IN,
    INCHES_PER_MILE,
    MINUTES_PER_HOUR,
    OPTIMAL_CHAINLINE_MM,
)
from .errors import InvalidParameter

logger = logging.getLogger(__name__)

DriveSpec = Union[ChainringSpec, CranksetSpec, Component, Tuple[int, ...], None]


class GearRatio(BaseModel):
    """One chainring/cog combination."""
    model_config = ConfigDict(frozen=True)

    chainring_teeth: int
    cog_teeth: int
    ratio: float


class CrossChainingIssue(BaseModel):
    """A gear flagged for running the chain at a steep angle."""
    model_config = ConfigDict(frozen=True)

    gear: str  # e.g. "32T x 10T"
    chainring_teeth: int
    cog_teeth: int
    severity: Severity
    efficiency_loss_percent: float
    recommendation: str


class ChainLengthResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    links: int
    length_mm: float
    tolerance_min_links: int
    tolerance_max_links: int
    notes: Tuple[str, ...]


class ChainlineResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    frame_type: FrameType
    optimal_chainline_mm: float
    current_chainline_mm: float
    deviation_mm: float
    efficiency_percent: float
    recommendations: Tuple[str, ...]


# ─── Component accessors ─────────────────────────────────────────────────


def chainring_teeth(drive: DriveSpec) -> Tuple[int, ...]:
    """
    Tooth counts of the front drive, whatever form it comes in.

    A single chainring and a crankset are treated the same way: the result
    is ``(teeth,)`` or the crankset's ring list. Missing data gives ``()``.
    """
    if drive is None:
        return ()
    if isinstance(drive, Component):
        drive = drive.chainring if drive.chainring is not None else drive.crankset
        return chainring_teeth(drive)
    if isinstance(drive, ChainringSpec):
        return (drive.teeth,)
    if isinstance(drive, CranksetSpec):
        return tuple(drive.chainrings)
    if isinstance(drive, str):
        raise TypeError(f"Chainring teeth must be numbers, got the string {drive!r}")
    return tuple(int(t) for t in drive)


def cassette_spec(cassette: Union[CassetteSpec, Component, None]) -> Optional[CassetteSpec]:
    """Cassette payload from a spec or a cassette component."""
    if isinstance(cassette, Component):
        return cassette.cassette
    return cassette


# ─── Gear metrics ────────────────────────────────────────────────────────


def gear_ratio(chainring: int, cog: int) -> float:
    """Chainring teeth divided by cog teeth (0.0 for a zero cog)."""
    if cog <= 0:
        return 0.0
    return chainring / cog


def calculate_top_speed(
    cassette: Union[CassetteSpec, Component, None],
    drive: DriveSpec,
    wheel_diameter_in: float = DEFAULT_WHEEL_DIAMETER_IN,
    cadence_rpm: float = DEFAULT_CADENCE_RPM,
) -> float:
    """
    Top speed in the hardest gear.

    Formula: ratio × (diameter × π) × cadence × 60 / 63360

    Args:
        cassette: Cassette spec or component
        drive: Chainring, crankset, or tooth counts
        wheel_diameter_in: Wheel diameter in inches
        cadence_rpm: Pedalling cadence

    Returns:
        Speed in mph rounded to 0.1, or 0 if gearing data is missing
    """
    spec = cassette_spec(cassette)
    rings = chainring_teeth(drive)
    if spec is None or not spec.cogs or not rings:
        return 0.0

    ratio = gear_ratio(max(rings), min(spec.cogs))
    circumference_in = wheel_diameter_in * math.pi
    mph = ratio * circumference_in * cadence_rpm * MINUTES_PER_HOUR / INCHES_PER_MILE
    return round(mph, 1)


def calculate_climbing_gear(
    cassette: Union[CassetteSpec, Component, None],
    drive: DriveSpec,
) -> float:
    """Easiest ratio (smallest ring over largest cog), rounded to 0.01."""
    spec = cassette_spec(cassette)
    rings = chainring_teeth(drive)
    if spec is None or not spec.cogs or not rings:
        return 0.0
    return round(gear_ratio(min(rings), max(spec.cogs)), 2)


def calculate_gear_range(
    cassette: Union[CassetteSpec, Component, None],
    drive: DriveSpec = None,
) -> int:
    """
    Cassette range in percent: (largest / smallest − 1) × 100.

    Depends only on the cassette; ``drive`` is accepted so all gear metrics
    share a call shape.
    """
    spec = cassette_spec(cassette)
    if spec is None or not spec.cogs:
        return 0
    return round((max(spec.cogs) / min(spec.cogs) - 1) * 100)


def generate_gear_ratios(
    cassette: Union[CassetteSpec, Component, None],
    drive: DriveSpec,
) -> List[GearRatio]:
    """
    One ratio per cog on the largest chainring, highest gear first.

    Equal ratios keep their cassette order (sorting is stable).
    """
    spec = cassette_spec(cassette)
    rings = chainring_teeth(drive)
    if spec is None or not rings:
        return []

    ring = max(rings)
    ratios = [
        GearRatio(chainring_teeth=ring, cog_teeth=cog, ratio=gear_ratio(ring, cog))
        for cog in spec.cogs
    ]
    return sorted(ratios, key=lambda r: r.ratio, reverse=True)


def analyze_cross_chaining(
    cassette: Union[CassetteSpec, Component, None],
    drive: DriveSpec,
) -> List[CrossChainingIssue]:
    """
    Flag cogs near either end of the cassette.

    Cogs are ranked smallest to largest and matched against
    CROSS_CHAINING_RULES; the first matching rule sets severity and loss.
    Middle cogs produce no issue.
    """
    spec = cassette_spec(cassette)
    rings = chainring_teeth(drive)
    if spec is None or not rings:
        return []

    ring = max(rings)
    cogs = sorted(spec.cogs)
    last = len(cogs) - 1
    issues = []
    for index, cog in enumerate(cogs):
        for end, span, severity, loss, recommendation in CROSS_CHAINING_RULES:
            distance = index if end == "small" else last - index
            if distance < span:
                issues.append(CrossChainingIssue(
                    gear=f"{ring}T x {cog}T",
                    chainring_teeth=ring,
                    cog_teeth=cog,
                    severity=severity,
                    efficiency_loss_percent=loss,
                    recommendation=recommendation,
                ))
                break
    return issues


def calculate_total_weight(components: Sequence[Optional[Component]]) -> float:
    """Sum of weights in grams; missing components or weights count as 0."""
    return sum((c.weight_grams or 0.0) for c in components if c is not None)


def calculate_total_cost(components: Sequence[Optional[Component]]) -> float:
    """Sum of MSRP in USD; missing components or prices count as 0."""
    return sum((c.msrp or 0.0) for c in components if c is not None)


# ─── Chain length ────────────────────────────────────────────────────────


def calculate_chain_length(
    chainring_teeth: int,
    largest_cog_teeth: int,
    chainstay_length_mm: float,
) -> ChainLengthResult:
    """
    Chain length for a big-ring/big-cog wrap.

    Formula: base = 2 × chainstay + chainring + cog + 4 (mm),
    links = ceil(base / 12.7) rounded up to an even count.

    Args:
        chainring_teeth: Largest chainring teeth
        largest_cog_teeth: Largest cassette cog teeth
        chainstay_length_mm: Bottom bracket to rear axle distance

    Returns:
        ChainLengthResult with link count, length and ±2 link tolerance

    Raises:
        InvalidParameter: If any input is not a positive finite number
    """
    for name, value in (
        ("chainring_teeth", chainring_teeth),
        ("largest_cog_teeth", largest_cog_teeth),
        ("chainstay_length_mm", chainstay_length_mm),
    ):
        if not (0 < value < math.inf):
            logger.debug(f"Rejecting chain length input {name}={value}")
            raise InvalidParameter(name, value, "must be a positive finite number")

    base_length_mm = (
        2 * chainstay_length_mm + chainring_teeth + largest_cog_teeth + CHAIN_WRAP_ALLOWANCE_MM
    )
    links = math.ceil(base_length_mm / CHAIN_PITCH_MM)
    if links % 2:
        links += 1  # Chains close with an outer/inner pair

    logger.debug(f"Chain base length {base_length_mm:.1f}mm -> {links} links")

    return ChainLengthResult(
        links=links,
        length_mm=round(links * CHAIN_PITCH_MM, 1),
        tolerance_min_links=links - CHAIN_LINK_TOLERANCE,
        tolerance_max_links=links + CHAIN_LINK_TOLERANCE,
        notes=(
            "This is a simplified calculation",
            "Always test chain length before final installation",
            "Consider derailleur capacity when sizing",
        ),
    )


# ─── Chainline ───────────────────────────────────────────────────────────


def _resolve_frame_type(frame_type: Union[FrameType, str]) -> FrameType:
    try:
        return coerce_enum(FrameType, frame_type)
    except ValueError:
        logger.warning(f"Unknown frame type {frame_type!r}, using mtb chainline")
        return FrameType.MTB


def analyze_chainline(
    chainring_offset_mm: float,
    cassette_offset_mm: float,
    chainstay_length_mm: float,
    frame_type: Union[FrameType, str],
) -> ChainlineResult:
    """
    Compare the running chainline with the frame standard's optimum.

    ``chainring_offset_mm`` is the chainring's distance from the frame
    centreline and ``cassette_offset_mm`` the lateral shift of the cassette
    centre; half of the latter carries through to the chain.

    Efficiency is 100% at the optimum and drops 2% per mm of deviation,
    never below 85%.

    Raises:
        InvalidParameter: If chainstay length is not positive, or an offset
            is not a finite number
    """
    if not (0 < chainstay_length_mm < math.inf):
        logger.debug(f"Rejecting chainstay length {chainstay_length_mm}")
        raise InvalidParameter("chainstay_length_mm", chainstay_length_mm, "must be positive")
    for name, value in (
        ("chainring_offset_mm", chainring_offset_mm),
        ("cassette_offset_mm", cassette_offset_mm),
    ):
        if not math.isfinite(value):
            logger.debug(f"Rejecting chainline input {name}={value}")
            raise InvalidParameter(name, value, "must be a finite number")

    frame = _resolve_frame_type(frame_type)
    optimal = OPTIMAL_CHAINLINE_MM[frame]
    current = chainring_offset_mm + cassette_offset_mm / 2
    deviation = abs(current - optimal)
    efficiency = max(
        CHAINLINE_MIN_EFFICIENCY_PERCENT,
        100.0 - CHAINLINE_EFFICIENCY_LOSS_PER_MM * deviation,
    )

    recommendations = []
    if deviation > CHAINLINE_SEVERE_DEVIATION_MM:
        recommendations.append(
            "Severe chainline misalignment - expect poor shifting and rapid wear"
        )
        recommendations.append(
            "Check chainring offset, bottom bracket spacers and hub spacing"
        )
    elif deviation > CHAINLINE_SIGNIFICANT_DEVIATION_MM:
        recommendations.append(
            "Significant chainline deviation - consider a chainring with different offset"
        )
    elif deviation < CHAINLINE_EXCELLENT_DEVIATION_MM:
        recommendations.append("Excellent chainline alignment")
    else:
        recommendations.append(
            "Minor chainline deviation - acceptable for most riding"
        )

    if chainstay_length_mm < CHAINSTAY_SHORT_MM:
        recommendations.append("Short chainstays may require more precise chainline alignment")
    elif chainstay_length_mm > CHAINSTAY_LONG_MM:
        recommendations.append("Longer chainstays provide more chainline tolerance")

    logger.debug(
        f"Chainline {current:.1f}mm vs optimal {optimal}mm ({frame.value}), "
        f"deviation {deviation:.1f}mm"
    )

    return ChainlineResult(
        frame_type=frame,
        optimal_chainline_mm=optimal,
        current_chainline_mm=round(current, 2),
        deviation_mm=round(deviation, 2),
        efficiency_percent=round(efficiency, 1),
        recommendations=tuple(recommendations),
    )
