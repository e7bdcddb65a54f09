"""Output formatters for calculation results.

Converts result models to JSON, plain-text summaries and (for drivetrain
comparisons) a markdown report.

Uses Pydantic's model_dump(mode='json') for serialization, so enums come out
as their string values.
"""

import json
from typing import List, Union

from pydantic import BaseModel

from .comparison import ComparisonResult
from .drivetrain import ChainLengthResult, ChainlineResult
from .suspension import SuspensionResult, SuspensionUnitSettings
from .tire_pressure import TirePressureResult

Result = Union[
    ComparisonResult, ChainLengthResult, ChainlineResult, TirePressureResult, SuspensionResult
]


def _model_to_dict(model: BaseModel) -> dict:
    """Convert Pydantic model to dict with JSON-compatible types."""
    return model.model_dump(mode='json')


def to_json(result: BaseModel, indent: int = 2) -> str:
    """Convert any result model to a JSON string."""
    return json.dumps(_model_to_dict(result), indent=indent)


def _bullets(title: str, items) -> List[str]:
    if not items:
        return []
    return ["", f"{title}:"] + [f"  - {item}" for item in items]


def _tire_summary(result: TirePressureResult) -> List[str]:
    rng = result.safe_range
    lines = [
        "═══ Tire Pressure ═══",
        f"Front: {result.front_psi:g} PSI ({result.front_bar:.2f} bar)",
        f"Rear:  {result.rear_psi:g} PSI ({result.rear_bar:.2f} bar)",
        "",
        "Safe range:",
        f"  Front: {rng.front.min_psi:g}-{rng.front.max_psi:g} PSI",
        f"  Rear:  {rng.rear.min_psi:g}-{rng.rear.max_psi:g} PSI",
        f"Confidence: {result.confidence}%",
    ]
    lines += _bullets("Terrain", result.terrain_notes)
    lines += _bullets("Warnings", result.warnings)
    lines += _bullets("Setup", result.setup_notes)
    lines += _bullets("Recommendations", result.recommendations)
    return lines


def _unit_lines(label: str, unit: SuspensionUnitSettings) -> List[str]:
    compression = "n/a" if unit.compression_clicks is None else str(unit.compression_clicks)
    return [
        f"{label} ({unit.damper}):",
        f"  Pressure:    {unit.pressure_psi} PSI",
        f"  Sag:         {unit.sag_mm:g} mm ({unit.sag_percentage:g}% of {unit.travel_mm:g} mm)",
        f"  Rebound:     {unit.rebound_clicks} clicks from closed",
        f"  Compression: {compression}",
    ]


def _suspension_summary(result: SuspensionResult) -> List[str]:
    lines = [
        "═══ Suspension Setup ═══",
        f"System weight: {result.total_weight_kg:g} kg | Category: {result.bike_category.value}",
        "",
    ]
    lines += _unit_lines("Fork", result.fork)
    if result.shock is not None:
        lines.append("")
        lines += _unit_lines("Shock", result.shock)
    lines += _bullets("Recommendations", result.recommendations)
    lines += _bullets("Notes", result.setup_notes)
    return lines


def _chain_length_summary(result: ChainLengthResult) -> List[str]:
    lines = [
        "═══ Chain Length ═══",
        f"Links: {result.links} ({result.length_mm:.1f} mm)",
        f"Tolerance: {result.tolerance_min_links}-{result.tolerance_max_links} links",
    ]
    return lines + _bullets("Notes", result.notes)


def _chainline_summary(result: ChainlineResult) -> List[str]:
    lines = [
        "═══ Chainline ═══",
        f"Frame: {result.frame_type.value}",
        f"Optimal: {result.optimal_chainline_mm:.1f} mm",
        f"Current: {result.current_chainline_mm:.1f} mm",
        f"Deviation: {result.deviation_mm:.1f} mm",
        f"Efficiency: {result.efficiency_percent:.0f}%",
    ]
    return lines + _bullets("Recommendations", result.recommendations)


def _comparison_summary(result: ComparisonResult) -> List[str]:
    perf = result.performance
    compat = result.compatibility
    lines = [
        "═══ Drivetrain Comparison ═══",
        f"Top speed:    {perf.top_speed.current:g} -> {perf.top_speed.proposed:g} mph "
        f"({perf.top_speed.percentage_change:+.1f}%)",
        f"Climbing:     {perf.climbing_gear.current:.2f} -> {perf.climbing_gear.proposed:.2f}",
        f"Gear range:   {perf.gear_range.current:.0f}% -> {perf.gear_range.proposed:.0f}%",
        f"Weight:       {result.weight.difference_grams:+.0f} g",
        f"Cost:         {result.cost.difference_usd:+.2f} USD",
        "",
        f"Compatibility: {compat.status.value} (confidence {compat.confidence}%)",
    ]
    for issue in compat.issues:
        lines.append(f"  [{issue.severity.value.upper()}] {issue.message}")
    for solution in compat.solutions:
        lines.append(f"  -> {solution.description} (${solution.cost:.0f}, {solution.difficulty.value})")
    return lines


def to_summary(result: Result) -> str:
    """Convert a result to a formatted text summary.

    Raises:
        TypeError: For objects that are not calculator results
    """
    if isinstance(result, TirePressureResult):
        lines = _tire_summary(result)
    elif isinstance(result, SuspensionResult):
        lines = _suspension_summary(result)
    elif isinstance(result, ChainLengthResult):
        lines = _chain_length_summary(result)
    elif isinstance(result, ChainlineResult):
        lines = _chainline_summary(result)
    elif isinstance(result, ComparisonResult):
        lines = _comparison_summary(result)
    else:
        raise TypeError(f"No summary format for {type(result).__name__}")
    return "\n".join(lines)


def to_markdown(result: ComparisonResult) -> str:
    """Convert a drivetrain comparison to a markdown report.

    Args:
        result: ComparisonResult from compare_setups()

    Returns:
        Markdown string with performance, gearing, compatibility and cost
    """
    perf = result.performance

    md = "# Drivetrain Comparison\n\n"

    md += "## Performance\n\n"
    md += "| Metric | Current | Proposed | Change |\n"
    md += "|--------|---------|----------|--------|\n"
    for label, metric in (
        ("Top speed", perf.top_speed),
        ("Climbing gear", perf.climbing_gear),
        ("Gear range", perf.gear_range),
    ):
        md += (
            f"| {label} | {metric.current:g} {metric.unit} | {metric.proposed:g} {metric.unit} "
            f"| {metric.difference:+g} ({metric.percentage_change:+.1f}%) |\n"
        )
    md += "\n"

    md += "## Gear Ratios (proposed)\n\n"
    md += "| Gear | Ratio |\n"
    md += "|------|-------|\n"
    for ratio in perf.gear_ratios:
        md += f"| {ratio.chainring_teeth}T x {ratio.cog_teeth}T | {ratio.ratio:.2f} |\n"
    md += "\n"

    if perf.cross_chaining_proposed:
        md += "## Cross-Chaining\n\n"
        md += f"Total efficiency loss: {perf.efficiency_loss_percent:g}%\n\n"
        for issue in perf.cross_chaining_proposed:
            md += (
                f"- **{issue.gear}** ({issue.severity.value}, "
                f"-{issue.efficiency_loss_percent:g}%): {issue.recommendation}\n"
            )
        md += "\n"

    compat = result.compatibility
    md += "## Compatibility\n\n"
    md += f"**Status:** {compat.status.value} (confidence {compat.confidence}%)\n\n"
    if compat.issues:
        for issue in compat.issues:
            md += f"- **{issue.severity.value.upper()}** ({issue.type.value}): {issue.message}\n"
        md += "\n"
    if compat.solutions:
        md += "### Solutions\n\n"
        for solution in compat.solutions:
            md += (
                f"- {solution.description}: ${solution.cost:.2f} "
                f"({solution.difficulty.value})\n"
            )
        md += "\n"

    md += "## Weight and Cost\n\n"
    md += "| Component | Current | Proposed | Difference |\n"
    md += "|-----------|---------|----------|------------|\n"
    for line in result.cost.breakdown:
        md += (
            f"| {line.component} | ${line.current_usd:.2f} | ${line.proposed_usd:.2f} "
            f"| ${line.difference_usd:+.2f} |\n"
        )
    md += "\n"
    md += f"Weight change: {result.weight.difference_grams:+.0f} g "
    md += f"({result.weight.percentage_change:+.1f}%)\n\n"
    md += f"Upgrade value: {result.cost.upgrade_value:g} g per dollar\n"

    return md
