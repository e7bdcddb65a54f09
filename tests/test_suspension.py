"""
Tests for the suspension setup engine.
"""

import pytest

from ridecalc.calculator import (
    InvalidParameter,
    SuspensionInput,
    calculate_suspension_settings,
    find_damper_preset,
)
from ridecalc.calculator.suspension import (
    FORK,
    SHOCK,
    calculate_air_pressure,
    calculate_rebound_clicks,
)
from ridecalc.enums import BikeCategory, RidingStyle, Terrain


def _settings(**overrides):
    values = dict(rider_weight_kg=75, gear_weight_kg=5, bike_category="trail")
    values.update(overrides)
    return calculate_suspension_settings(SuspensionInput(**values))


class TestSuspensionInput:
    """Tests for input coercion."""

    def test_defaults(self):
        inp = SuspensionInput(rider_weight_kg=80)
        assert inp.gear_weight_kg == 5.0
        assert inp.total_weight_kg == 85.0
        assert inp.bike_category == BikeCategory.TRAIL
        assert inp.riding_style == RidingStyle.BALANCED
        assert inp.terrain == Terrain.TRAIL

    @pytest.mark.parametrize("value,expected", [
        ("hardtail_xc", BikeCategory.HARDTAIL),
        ("full_suspension_xc", BikeCategory.XC),
        ("Enduro", BikeCategory.ENDURO),
        ("bmx", BikeCategory.TRAIL),
    ])
    def test_category_aliases(self, value, expected):
        assert SuspensionInput(rider_weight_kg=80, bike_category=value).bike_category == expected

    def test_style_alias(self):
        inp = SuspensionInput(rider_weight_kg=80, riding_style="aggressive")
        assert inp.riding_style == RidingStyle.GRIP


class TestTrailBaseline:
    """75kg rider with 5kg of gear on a trail bike."""

    def test_fork(self):
        fork = _settings().fork
        assert fork.pressure_psi == 80
        assert fork.sag_percentage == 25.0
        assert fork.travel_mm == 140.0
        assert fork.sag_mm == 35.0
        assert fork.rebound_clicks == 8
        assert fork.compression_clicks == 5
        assert fork.damper == "Generic"

    def test_shock(self):
        shock = _settings().shock
        assert shock is not None
        assert shock.pressure_psi == 192
        assert shock.sag_mm == 39.0
        assert shock.rebound_clicks == 10

    def test_total_weight(self):
        assert _settings().total_weight_kg == 80.0

    def test_recommendations(self):
        result = _settings()
        assert result.recommendations == (
            "Set sag first with all your riding gear on.",
            "Adjust rebound so the suspension returns quickly without being bouncy.",
            "Fine-tune compression for the trail: more for smooth sections, less for rough terrain.",
            "Service air springs and dampers every 50 riding hours.",
        )
        assert "Always set pressure with a dedicated shock pump." in result.setup_notes


class TestWeightScaling:
    """Heavier riders need more air and slower rebound."""

    def test_heavier_rider(self):
        light = _settings(rider_weight_kg=80)
        heavy = _settings(rider_weight_kg=100)

        assert light.fork.pressure_psi == 85
        assert heavy.fork.pressure_psi == 105
        assert light.fork.rebound_clicks == 7
        assert heavy.fork.rebound_clicks == 5
        assert heavy.shock.pressure_psi > light.shock.pressure_psi
        assert heavy.shock.rebound_clicks <= light.shock.rebound_clicks

    def test_monotonic_over_weight(self):
        weights = range(50, 131, 10)
        results = [_settings(rider_weight_kg=w) for w in weights]
        pressures = [r.fork.pressure_psi for r in results]
        rebounds = [r.fork.rebound_clicks for r in results]
        assert pressures == sorted(pressures)
        assert rebounds == sorted(rebounds, reverse=True)

    def test_light_rider_faster_rebound(self):
        """45kg system weight opens rebound three clicks."""
        assert _settings(rider_weight_kg=40).fork.rebound_clicks == 11

    def test_clicks_clamped(self):
        result = _settings(rider_weight_kg=200, gear_weight_kg=40)
        assert result.fork.rebound_clicks == 0
        assert result.shock.rebound_clicks == 0

    def test_helpers_by_unit(self):
        inp = SuspensionInput(rider_weight_kg=75, gear_weight_kg=5)
        assert calculate_air_pressure(inp, FORK) == 80
        assert calculate_air_pressure(inp, SHOCK) == 192
        assert calculate_rebound_clicks(inp, SHOCK) == 10


class TestCategories:
    """Category-specific behaviour."""

    def test_hardtail_has_no_shock(self):
        result = _settings(bike_category="hardtail")
        assert result.shock is None
        assert result.fork.compression_clicks is None
        assert result.fork.sag_percentage == 20.0

    def test_xc_fork_has_no_compression_adjuster(self):
        result = _settings(bike_category=BikeCategory.XC)
        assert result.fork.compression_clicks is None
        assert result.shock.compression_clicks == 5
        assert result.setup_notes[0].startswith("XC:")

    def test_downhill_bike_park(self):
        """Bike park terrain adds 7% on top of the downhill ratio."""
        result = _settings(bike_category="downhill", terrain="bike_park")
        assert result.fork.pressure_psi == 94
        assert result.fork.compression_clicks == 7


class TestStyleAndTerrain:
    """Riding style and terrain adjustments."""

    def test_comfort_lowers_pressure(self):
        assert _settings(riding_style="comfort").fork.pressure_psi == 76
        assert _settings(riding_style="speed").fork.pressure_psi == 84

    def test_compression_by_style(self):
        assert _settings(riding_style="speed").fork.compression_clicks == 3
        assert _settings(riding_style="comfort").fork.compression_clicks == 7

    def test_rough_terrain_compression(self):
        result = _settings(riding_style="comfort", terrain="downhill")
        assert result.fork.compression_clicks == 9


class TestDamperPresets:
    """Fork and shock tags select damper presets."""

    def test_grip2(self):
        preset = find_damper_preset("Fox", "36 Factory GRIP2")
        assert preset.name == "Fox GRIP2"
        assert preset.max_clicks == 16
        assert preset.rebound_offset == 1

    def test_grip2_offsets_rebound(self):
        result = _settings(fork_model="Fox 36 GRIP2")
        assert result.fork.damper == "Fox GRIP2"
        assert result.fork.rebound_clicks == 9

    def test_race_day_has_no_compression(self):
        result = _settings(fork_brand="RockShox", fork_model="SID Charger Race Day")
        assert result.fork.compression_clicks is None

    def test_float_x2_before_float_x(self):
        assert find_damper_preset(None, "Float X2").name == "Fox Float X2"
        assert find_damper_preset(None, "Float X").name == "Fox Float X / DPX2"

    def test_unknown_and_missing(self):
        assert find_damper_preset("Manitou", "Mezzer").name == "Generic"
        assert find_damper_preset(None, None).name == "Generic"


class TestValidation:
    """Out-of-range weights raise InvalidParameter."""

    @pytest.mark.parametrize("rider,gear,field", [
        (0, 5, "rider_weight_kg"),
        (-10, 5, "rider_weight_kg"),
        (201, 5, "rider_weight_kg"),
        (80, -1, "gear_weight_kg"),
        (80, 41, "gear_weight_kg"),
        (float("nan"), 5, "rider_weight_kg"),
        (80, float("nan"), "gear_weight_kg"),
        (80, float("inf"), "gear_weight_kg"),
    ])
    def test_rejects(self, rider, gear, field):
        with pytest.raises(InvalidParameter) as exc:
            _settings(rider_weight_kg=rider, gear_weight_kg=gear)
        assert exc.value.parameter == field
