"""
Current-versus-proposed drivetrain comparison.

``compare_setups`` is the strict entry point of the drivetrain engine: both
setups must carry cassette and chainring (or crankset) data, otherwise it
raises MissingRequiredData. Everything it calls degrades gracefully.
"""

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..io.loaders import BikeSetup, Component
from .compatibility import CompatibilityResult, check_compatibility
from .constants import (
    DEFAULT_CADENCE_RPM,
    DEFAULT_WHEEL_DIAMETER_IN,
    OPTIMAL_GEAR_TRIM,
    UPGRADE_VALUE_FREE_SAVINGS,
)
from .drivetrain import (
    CrossChainingIssue,
    GearRatio,
    analyze_cross_chaining,
    calculate_climbing_gear,
    calculate_gear_range,
    calculate_top_speed,
    calculate_total_cost,
    calculate_total_weight,
    generate_gear_ratios,
)
from .errors import MissingRequiredData

logger = logging.getLogger(__name__)


class MetricDelta(BaseModel):
    """A metric for both setups with absolute and relative change."""
    model_config = ConfigDict(frozen=True)

    current: float
    proposed: float
    unit: str
    difference: float
    percentage_change: float


class PerformanceComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    top_speed: MetricDelta
    climbing_gear: MetricDelta
    gear_range: MetricDelta
    gear_ratios: Tuple[GearRatio, ...]
    optimal_gears: Tuple[float, ...]
    cross_chaining_current: Tuple[CrossChainingIssue, ...]
    cross_chaining_proposed: Tuple[CrossChainingIssue, ...]
    cross_chaining_improvement: int
    efficiency_loss_percent: float


class WeightComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_grams: float
    proposed_grams: float
    difference_grams: float
    percentage_change: float
    cost_per_gram: float


class CostLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    component: str
    current_usd: float
    proposed_usd: float
    difference_usd: float


class CostComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_usd: float
    proposed_usd: float
    difference_usd: float
    includes_compatibility_fixes: bool
    breakdown: Tuple[CostLine, ...]
    upgrade_value: float  # Grams saved per dollar spent


class ComparisonResult(BaseModel):
    """Full comparison of a proposed drivetrain against the current one."""
    model_config = ConfigDict(frozen=True)

    performance: PerformanceComparison
    compatibility: CompatibilityResult
    weight: WeightComparison
    cost: CostComparison


def _percentage_change(current: float, proposed: float) -> float:
    if current == 0:
        return 0.0
    return round((proposed - current) / current * 100, 1)


def _delta(current: float, proposed: float, unit: str, precision: int = 2) -> MetricDelta:
    return MetricDelta(
        current=current,
        proposed=proposed,
        unit=unit,
        difference=round(proposed - current, precision),
        percentage_change=_percentage_change(current, proposed),
    )


def _wheel_diameter(setup: BikeSetup) -> float:
    """Wheel diameter from the wheel, else the tire, else 29 inches."""
    if setup.wheel is not None and setup.wheel.wheel is not None:
        return setup.wheel.wheel.diameter_in
    if setup.tire is not None and setup.tire.tire is not None:
        return setup.tire.tire.diameter_in
    return DEFAULT_WHEEL_DIAMETER_IN


def _weighed_components(setup: BikeSetup) -> List[Tuple[str, Optional[Component]]]:
    """Components counted for weight and cost, labelled for the breakdown."""
    return [
        ('cassette', setup.cassette),
        ('chainring', setup.drive),
        ('chain', setup.chain),
        ('wheel', setup.wheel),
        ('tire', setup.tire),
    ]


def _cost_breakdown(
    current: BikeSetup,
    proposed: BikeSetup,
    compatibility_cost: float,
) -> List[CostLine]:
    lines = []
    for (label, cur), (_, prop) in zip(_weighed_components(current), _weighed_components(proposed)):
        if cur is None and prop is None:
            continue
        current_usd = (cur.msrp or 0.0) if cur is not None else 0.0
        proposed_usd = (prop.msrp or 0.0) if prop is not None else 0.0
        lines.append(CostLine(
            component=label,
            current_usd=current_usd,
            proposed_usd=proposed_usd,
            difference_usd=round(proposed_usd - current_usd, 2),
        ))
    if compatibility_cost > 0:
        lines.append(CostLine(
            component='compatibility fixes',
            current_usd=0.0,
            proposed_usd=compatibility_cost,
            difference_usd=compatibility_cost,
        ))
    return lines


def _upgrade_value(weight_saved_grams: float, cost_increase_usd: float) -> float:
    """Grams saved per dollar. Free weight savings score a fixed 100."""
    if cost_increase_usd <= 0:
        return UPGRADE_VALUE_FREE_SAVINGS if weight_saved_grams > 0 else 0.0
    if weight_saved_grams <= 0:
        return 0.0
    return round(weight_saved_grams / cost_increase_usd, 2)


def _require_gearing(setup: BikeSetup, label: str) -> None:
    if setup.cassette is None:
        raise MissingRequiredData(label, "cassette")
    if setup.drive is None:
        raise MissingRequiredData(label, "chainring")


def compare_setups(
    current: BikeSetup,
    proposed: BikeSetup,
    cadence_rpm: float = DEFAULT_CADENCE_RPM,
) -> ComparisonResult:
    """
    Compare a proposed drivetrain against the current one.

    Args:
        current: Existing setup
        proposed: Candidate setup
        cadence_rpm: Cadence used for top speed

    Returns:
        ComparisonResult with performance, compatibility, weight and cost

    Raises:
        MissingRequiredData: If either setup lacks a cassette or a
            chainring/crankset
    """
    _require_gearing(current, "current")
    _require_gearing(proposed, "proposed")

    cur_speed = calculate_top_speed(
        current.cassette, current.drive, _wheel_diameter(current), cadence_rpm
    )
    prop_speed = calculate_top_speed(
        proposed.cassette, proposed.drive, _wheel_diameter(proposed), cadence_rpm
    )
    cur_climb = calculate_climbing_gear(current.cassette, current.drive)
    prop_climb = calculate_climbing_gear(proposed.cassette, proposed.drive)
    cur_range = calculate_gear_range(current.cassette)
    prop_range = calculate_gear_range(proposed.cassette)

    ratios = generate_gear_ratios(proposed.cassette, proposed.drive)
    cur_cross = analyze_cross_chaining(current.cassette, current.drive)
    prop_cross = analyze_cross_chaining(proposed.cassette, proposed.drive)
    trimmed = ratios[OPTIMAL_GEAR_TRIM:-OPTIMAL_GEAR_TRIM] if len(ratios) > 2 * OPTIMAL_GEAR_TRIM else []

    performance = PerformanceComparison(
        top_speed=_delta(cur_speed, prop_speed, 'mph', precision=1),
        climbing_gear=_delta(cur_climb, prop_climb, 'ratio'),
        gear_range=_delta(cur_range, prop_range, '%', precision=0),
        gear_ratios=tuple(ratios),
        optimal_gears=tuple(round(r.ratio, 2) for r in trimmed),
        cross_chaining_current=tuple(cur_cross),
        cross_chaining_proposed=tuple(prop_cross),
        cross_chaining_improvement=max(0, len(cur_cross) - len(prop_cross)),
        efficiency_loss_percent=sum(i.efficiency_loss_percent for i in prop_cross),
    )

    compatibility = check_compatibility(current, proposed)
    fix_cost = compatibility.total_solution_cost

    cur_parts = [c for _, c in _weighed_components(current)]
    prop_parts = [c for _, c in _weighed_components(proposed)]
    cur_weight = calculate_total_weight(cur_parts)
    prop_weight = calculate_total_weight(prop_parts)
    weight_diff = prop_weight - cur_weight

    cur_cost = calculate_total_cost(cur_parts)
    prop_cost = calculate_total_cost(prop_parts) + fix_cost
    cost_diff = prop_cost - cur_cost

    weight = WeightComparison(
        current_grams=cur_weight,
        proposed_grams=prop_weight,
        difference_grams=round(weight_diff, 1),
        percentage_change=_percentage_change(cur_weight, prop_weight),
        cost_per_gram=round(abs(cost_diff / weight_diff), 3) if weight_diff else 0.0,
    )
    cost = CostComparison(
        current_usd=round(cur_cost, 2),
        proposed_usd=round(prop_cost, 2),
        difference_usd=round(cost_diff, 2),
        includes_compatibility_fixes=fix_cost > 0,
        breakdown=tuple(_cost_breakdown(current, proposed, fix_cost)),
        upgrade_value=_upgrade_value(-weight_diff, cost_diff),
    )

    logger.debug(
        f"Compared setups: speed {cur_speed} -> {prop_speed} mph, "
        f"weight {weight_diff:+.0f}g, cost {cost_diff:+.2f} USD"
    )

    return ComparisonResult(
        performance=performance,
        compatibility=compatibility,
        weight=weight,
        cost=cost,
    )
