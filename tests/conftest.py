"""
Pytest configuration and shared fixtures for ridecalc tests.
"""

import json
import pytest

from ridecalc.io import BikeSetup, Component


EAGLE_COGS = (10, 12, 14, 16, 18, 21, 24, 28, 32, 36, 42, 52)
XT_COGS = (10, 12, 14, 16, 18, 21, 24, 28, 32, 36, 40, 45)


# ─── Component builders ──────────────────────────────────────────────────


def _cassette(id="gx-eagle", cogs=EAGLE_COGS, freehub="sram_xd",
              weight=390.0, msrp=95.0, speeds=None):
    return Component(
        id=id, manufacturer="SRAM", model=f"Cassette {id}", category="cassette",
        weight_grams=weight, msrp=msrp,
        cassette={"speeds": speeds or len(cogs), "cogs": cogs, "freehub_type": freehub},
    )


def _chainring(teeth=32, weight=100.0, msrp=60.0, id=None):
    return Component(
        id=id or f"ring-{teeth}", manufacturer="SRAM", model=f"X-Sync {teeth}T",
        category="chainring", weight_grams=weight, msrp=msrp,
        chainring={"teeth": teeth},
    )


def _hub(freehub_types=("micro_spline",), id="hub-ms"):
    return Component(
        id=id, manufacturer="Shimano", model="XT M8110", category="hub",
        weight_grams=300.0, msrp=120.0,
        hub={"freehub_types": list(freehub_types), "axle_type": "12x148"},
    )


def _chain(speeds=12, id="chain-12", weight=250.0, msrp=40.0):
    return Component(
        id=id, manufacturer="Shimano", model=f"{speeds}-speed chain", category="chain",
        weight_grams=weight, msrp=msrp, chain={"speeds": speeds},
    )


def _derailleur(max_cog=51, capacity=None, speeds=12, id="rd-xt"):
    return Component(
        id=id, manufacturer="Shimano", model="XT M8100 SGS", category="derailleur",
        weight_grams=290.0, msrp=110.0,
        derailleur={"speeds": speeds, "max_cog": max_cog, "capacity": capacity},
    )


def _wheel(diameter=29.0, id="wheel-29"):
    return Component(
        id=id, manufacturer="DT Swiss", model="XM1700", category="wheel",
        weight_grams=1900.0, msrp=600.0, wheel={"diameter_in": diameter, "width_mm": 30},
    )


# ─── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture
def eagle_cassette():
    """12-speed 10-52 cassette on an XD driver."""
    return _cassette()


@pytest.fixture
def xt_cassette():
    """12-speed 10-45 cassette on Micro Spline."""
    return _cassette(id="xt-m8100", cogs=XT_COGS, freehub="micro_spline",
                     weight=420.0, msrp=89.99)


@pytest.fixture
def ring_32():
    return _chainring(32)


@pytest.fixture
def current_setup(xt_cassette, ring_32):
    """Complete Micro Spline drivetrain."""
    return BikeSetup(
        cassette=xt_cassette,
        chainring=ring_32,
        chain=_chain(),
        derailleur=_derailleur(),
        hub=_hub(),
        wheel=_wheel(),
    )


@pytest.fixture
def eagle_setup(eagle_cassette, ring_32):
    """Proposed Eagle cassette reusing the current hub, chain and derailleur."""
    return BikeSetup(cassette=eagle_cassette, chainring=ring_32)


@pytest.fixture
def catalog_file(tmp_path):
    """Catalog JSON in camelCase, as exported by the web UI."""
    data = {
        "components": [
            {
                "id": "xt-m8100", "manufacturer": "Shimano", "model": "XT M8100",
                "year": 2021, "weightGrams": 420, "msrp": 89.99, "category": "CASSETTE",
                "cassette": {"speeds": 12, "cogs": list(XT_COGS), "freehubType": "MICRO_SPLINE"},
            },
            {
                "id": "gx-eagle", "manufacturer": "SRAM", "model": "GX Eagle",
                "year": 2022, "weightGrams": 390, "msrp": 95, "category": "CASSETTE",
                "cassette": {"speeds": 12, "cogs": list(EAGLE_COGS), "freehubType": "SRAM_XD"},
            },
            {
                "id": "ring-32", "manufacturer": "SRAM", "model": "X-Sync 2 32T",
                "weightGrams": 100, "msrp": 60, "category": "chainring",
                "chainring": {"teeth": 32, "bcd": 104},
            },
            {
                "id": "hub-ms", "manufacturer": "Shimano", "model": "XT M8110",
                "weightGrams": 300, "msrp": 120, "category": "hub",
                "hub": {"freehubTypes": ["micro_spline"], "axleType": "12x148"},
            },
            {
                "id": "chain-12", "manufacturer": "Shimano", "model": "CN-M8100",
                "weightGrams": 250, "msrp": 40, "category": "chain",
                "chain": {"speeds": 12},
            },
            {
                "id": "brake-1", "manufacturer": "Shimano", "model": "XT M8120",
                "category": "brake",
            },
        ]
    }
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(data))
    return path


# ─── Builder fixtures (for tests that need variants) ─────────────────────


@pytest.fixture
def make_cassette():
    return _cassette


@pytest.fixture
def make_chainring():
    return _chainring


@pytest.fixture
def make_hub():
    return _hub


@pytest.fixture
def make_chain():
    return _chain


@pytest.fixture
def make_derailleur():
    return _derailleur
