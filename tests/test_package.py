"""
Tests for the top-level package exports.
"""

import pytest

import ridecalc


class TestLazyExports:
    """Names resolve through the lazy loader."""

    def test_version(self):
        assert ridecalc.__version__ == "1.0.0-alpha"

    def test_calculator_names(self):
        from ridecalc.calculator import calculate_tire_pressure
        assert ridecalc.calculate_tire_pressure is calculate_tire_pressure
        assert ridecalc.compare_drivetrain_setups is ridecalc.compare_setups

    def test_enum_and_io_names(self):
        assert ridecalc.Terrain.TRAIL.value == "trail"
        assert ridecalc.BikeSetup().is_comparison_ready is False

    def test_all_resolves(self):
        for name in ridecalc.__all__:
            assert getattr(ridecalc, name) is not None

    def test_unknown_name(self):
        with pytest.raises(AttributeError):
            ridecalc.not_a_thing
