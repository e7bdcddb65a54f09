"""
Ridecalc IO - component catalog models and JSON loaders.

Example:
    >>> from ridecalc.io import load_catalog_json, build_setup
    >>> from ridecalc.calculator import compare_setups
    >>>
    >>> catalog = load_catalog_json("catalog.json")
    >>> current = build_setup(catalog, ["xt-m8100", "ring-32", "hub-hg"])
    >>> proposed = build_setup(catalog, ["gx-eagle", "ring-32", "hub-hg"])
    >>> result = compare_setups(current, proposed)
"""

from .loaders import (
    load_catalog_json,
    build_setup,
    save_result_json,
    Component,
    BikeSetup,
    CassetteSpec,
    ChainringSpec,
    CranksetSpec,
    ChainSpec,
    WheelSpec,
    TireSpec,
    DerailleurSpec,
    HubSpec,
    PAYLOAD_CATEGORIES,
)

__all__ = [
    "load_catalog_json",
    "build_setup",
    "save_result_json",
    "Component",
    "BikeSetup",
    "CassetteSpec",
    "ChainringSpec",
    "CranksetSpec",
    "ChainSpec",
    "WheelSpec",
    "TireSpec",
    "DerailleurSpec",
    "HubSpec",
    "PAYLOAD_CATEGORIES",
]
