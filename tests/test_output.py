"""
Tests for output formatters (to_json, to_markdown, to_summary).
"""

import json
import pytest

from ridecalc.calculator import (
    SuspensionInput,
    TirePressureParams,
    analyze_chainline,
    calculate_chain_length,
    calculate_suspension_settings,
    calculate_tire_pressure,
    compare_setups,
    to_json,
    to_markdown,
    to_summary,
)


@pytest.fixture
def tire_result():
    return calculate_tire_pressure(TirePressureParams(
        rider_weight_kg=80, bike_weight_kg=14, tire_width_mm=60, terrain="trail",
    ))


@pytest.fixture
def hardtail_result():
    return calculate_suspension_settings(
        SuspensionInput(rider_weight_kg=70, bike_category="hardtail")
    )


@pytest.fixture
def comparison(current_setup, eagle_setup):
    return compare_setups(current_setup, eagle_setup)


class TestToJson:
    """Tests for to_json."""

    def test_tire_fields(self, tire_result):
        data = json.loads(to_json(tire_result))
        assert data["front_psi"] == 20.5
        assert data["rear_psi"] == 24.0
        assert data["safe_range"]["overall"]["min_psi"] == 17.5
        assert isinstance(data["warnings"], list)

    def test_enums_as_strings(self, comparison):
        data = json.loads(to_json(comparison))
        assert data["compatibility"]["status"] == "incompatible"
        assert data["compatibility"]["issues"][0]["type"] == "freehub"
        assert data["compatibility"]["issues"][0]["severity"] == "critical"

    def test_optional_shock_is_null(self, hardtail_result):
        data = json.loads(to_json(hardtail_result))
        assert data["shock"] is None
        assert data["bike_category"] == "hardtail"

    def test_indent(self, tire_result):
        assert to_json(tire_result, indent=4).startswith('{\n    "front_psi"')


class TestToSummary:
    """Tests for to_summary."""

    def test_tire(self, tire_result):
        text = to_summary(tire_result)
        assert text.startswith("═══ Tire Pressure ═══")
        assert "Front: 20.5 PSI (1.41 bar)" in text
        assert "Rear:  24 PSI (1.65 bar)" in text
        assert "Warnings:" in text

    def test_suspension_hardtail(self, hardtail_result):
        text = to_summary(hardtail_result)
        assert text.startswith("═══ Suspension Setup ═══")
        assert "Fork (Generic):" in text
        assert "Shock" not in text.split("Recommendations:")[0]
        assert "Compression: n/a" in text

    def test_chain_length(self):
        text = to_summary(calculate_chain_length(32, 52, 435))
        assert "═══ Chain Length ═══" in text
        assert "Links: 76 (965.2 mm)" in text
        assert "Tolerance: 74-78 links" in text

    def test_chainline(self):
        text = to_summary(analyze_chainline(49, 2, 435, "boost"))
        assert "═══ Chainline ═══" in text
        assert "Efficiency: 100%" in text

    def test_comparison(self, comparison):
        text = to_summary(comparison)
        assert "═══ Drivetrain Comparison ═══" in text
        assert "Compatibility: incompatible" in text
        assert "[CRITICAL]" in text

    def test_unknown_type(self):
        with pytest.raises(TypeError):
            to_summary({"front_psi": 20})


class TestToMarkdown:
    """Tests for to_markdown."""

    def test_sections(self, comparison):
        md = to_markdown(comparison)
        assert md.startswith("# Drivetrain Comparison")
        for heading in ("## Performance", "## Gear Ratios (proposed)", "## Cross-Chaining",
                        "## Compatibility", "### Solutions", "## Weight and Cost"):
            assert heading in md

    def test_gear_table(self, comparison):
        md = to_markdown(comparison)
        assert "| 32T x 10T | 3.20 |" in md
        assert "| 32T x 52T | 0.62 |" in md

    def test_cost_breakdown(self, comparison):
        md = to_markdown(comparison)
        assert "| compatibility fixes | $0.00 | $270.00 | $+270.00 |" in md
