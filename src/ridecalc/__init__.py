"""
Ridecalc - bicycle drivetrain, tire pressure and suspension calculators.

Example:
    >>> from ridecalc import calculate_suspension_settings, SuspensionInput
    >>>
    >>> settings = calculate_suspension_settings(
    ...     SuspensionInput(rider_weight_kg=78, bike_category="enduro")
    ... )
    >>> settings.fork.pressure_psi
    >>>
    >>> from ridecalc import load_catalog_json, build_setup, compare_setups
    >>> catalog = load_catalog_json("catalog.json")
    >>> result = compare_setups(
    ...     build_setup(catalog, ["xt-m8100", "ring-32"]),
    ...     build_setup(catalog, ["gx-eagle", "ring-32"]),
    ... )

Note: All imports are lazy-loaded, so ``import ridecalc`` does not pull in
Pydantic until a model or calculator is first used.
"""

__version__ = "1.0.0-alpha"

# Define which names come from which submodule

_ENUMS = {
    "ComponentCategory",
    "FreehubType",
    "Terrain",
    "SurfaceCondition",
    "RidingStyle",
    "BikeCategory",
    "FrameType",
    "Severity",
    "CompatibilityStatus",
}

_CALCULATOR = {
    "compare_setups",
    "compare_drivetrain_setups",
    "check_compatibility",
    "calculate_chain_length",
    "analyze_chainline",
    "generate_gear_ratios",
    "calculate_tire_pressure",
    "get_tire_width_recommendations",
    "adjust_pressure_from_feedback",
    "calculate_suspension_settings",
    "TirePressureParams",
    "SuspensionInput",
    "RideFeedback",
    "MissingRequiredData",
    "MissingComponentData",
    "InvalidParameter",
}

_IO = {
    "load_catalog_json",
    "build_setup",
    "save_result_json",
    "Component",
    "BikeSetup",
}

# Cache for lazy-loaded modules
_modules = {}


def __getattr__(name):
    """Lazy load submodules when their attributes are accessed."""
    if name in _ENUMS:
        if "enums" not in _modules:
            from . import enums
            _modules["enums"] = enums
        return getattr(_modules["enums"], name)

    if name in _CALCULATOR:
        if "calculator" not in _modules:
            from . import calculator
            _modules["calculator"] = calculator
        return getattr(_modules["calculator"], name)

    if name in _IO:
        if "io" not in _modules:
            from . import io
            _modules["io"] = io
        return getattr(_modules["io"], name)

    raise AttributeError(f"module 'ridecalc' has no attribute {name!r}")


__all__ = ["__version__"] + sorted(_ENUMS | _CALCULATOR | _IO)
