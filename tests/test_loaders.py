"""
Tests for catalog loading and setup assembly.
"""

import json
import pytest
from pydantic import ValidationError

from ridecalc.calculator import calculate_chain_length
from ridecalc.enums import ComponentCategory, FreehubType
from ridecalc.io import BikeSetup, Component, build_setup, load_catalog_json, save_result_json


class TestLoadCatalog:
    """Tests for load_catalog_json."""

    def test_loads_camel_case(self, catalog_file):
        catalog = load_catalog_json(catalog_file)

        assert list(catalog) == ["xt-m8100", "gx-eagle", "ring-32", "hub-ms", "chain-12", "brake-1"]
        xt = catalog["xt-m8100"]
        assert xt.category == ComponentCategory.CASSETTE
        assert xt.weight_grams == 420
        assert xt.cassette.freehub_type == FreehubType.MICRO_SPLINE
        assert xt.cassette.cogs[-1] == 45
        assert catalog["hub-ms"].hub.freehub_types == (FreehubType.MICRO_SPLINE,)
        assert catalog["brake-1"].category == ComponentCategory.BRAKE

    def test_bare_list(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([
            {"id": "c1", "manufacturer": "KMC", "model": "X12", "category": "chain",
             "chain": {"speeds": 12}},
        ]))
        assert list(load_catalog_json(path)) == ["c1"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog_json(tmp_path / "nope.json")

    def test_wrong_structure(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"parts": []}))
        with pytest.raises(ValueError, match="Invalid catalog JSON"):
            load_catalog_json(path)

    def test_duplicate_ids(self, tmp_path):
        entry = {"id": "c1", "manufacturer": "KMC", "model": "X12", "category": "chain",
                 "chain": {"speeds": 12}}
        path = tmp_path / "dup.json"
        path.write_text(json.dumps([entry, entry]))
        with pytest.raises(ValueError, match="Duplicate component id"):
            load_catalog_json(path)


class TestComponentValidation:
    """Payload and category checks."""

    def test_payload_must_match_category(self):
        with pytest.raises(ValidationError):
            Component(id="x", manufacturer="A", model="B", category="chain",
                      cassette={"speeds": 12, "cogs": [10, 52], "freehub_type": "sram_xd"})

    def test_payload_required(self):
        with pytest.raises(ValidationError):
            Component(id="x", manufacturer="A", model="B", category="cassette")

    def test_single_payload(self):
        with pytest.raises(ValidationError):
            Component(id="x", manufacturer="A", model="B", category="chain",
                      chain={"speeds": 12}, hub={"freehub_types": ["sram_xd"]})

    def test_unknown_freehub(self):
        with pytest.raises(ValidationError):
            Component(id="x", manufacturer="A", model="B", category="cassette",
                      cassette={"speeds": 12, "cogs": [10, 52], "freehub_type": "campagnolo_n3w"})

    def test_non_positive_cog(self):
        with pytest.raises(ValidationError):
            Component(id="x", manufacturer="A", model="B", category="cassette",
                      cassette={"speeds": 2, "cogs": [0, 52], "freehub_type": "sram_xd"})

    def test_hub_accepts_single_string(self):
        hub = Component(id="h", manufacturer="DT", model="350", category="hub",
                        hub={"freehub_types": "Shimano HG"})
        assert hub.hub.freehub_types == (FreehubType.SHIMANO_HG,)

    def test_frozen(self, eagle_cassette):
        with pytest.raises(ValidationError):
            eagle_cassette.msrp = 10.0

    def test_name(self, ring_32):
        assert ring_32.name == "SRAM X-Sync 32T"


class TestBikeSetup:
    """Tests for BikeSetup and build_setup."""

    def test_slot_category_checked(self, make_chain):
        with pytest.raises(ValidationError):
            BikeSetup(cassette=make_chain())

    def test_drive_prefers_chainring(self, current_setup, ring_32):
        assert current_setup.drive == ring_32
        assert current_setup.is_comparison_ready
        assert not BikeSetup().is_comparison_ready

    def test_components_in_slot_order(self, current_setup):
        categories = [c.category.value for c in current_setup.components()]
        assert categories == ["cassette", "chainring", "chain", "wheel", "derailleur", "hub"]

    def test_build_setup(self, catalog_file):
        catalog = load_catalog_json(catalog_file)
        setup = build_setup(catalog, ["gx-eagle", " ring-32 ", "", "hub-ms"])
        assert setup.cassette.id == "gx-eagle"
        assert setup.chainring.id == "ring-32"
        assert setup.hub.id == "hub-ms"
        assert setup.chain is None

    def test_unknown_id(self, catalog_file):
        catalog = load_catalog_json(catalog_file)
        with pytest.raises(KeyError):
            build_setup(catalog, ["gx-eagle", "missing"])

    def test_component_without_slot(self, catalog_file):
        catalog = load_catalog_json(catalog_file)
        with pytest.raises(ValueError, match="has no slot"):
            build_setup(catalog, ["brake-1"])

    def test_slot_filled_twice(self, catalog_file):
        catalog = load_catalog_json(catalog_file)
        with pytest.raises(ValueError, match="given twice"):
            build_setup(catalog, ["gx-eagle", "xt-m8100"])


class TestSaveResult:
    """Tests for save_result_json."""

    def test_writes_json(self, tmp_path):
        path = tmp_path / "chain.json"
        save_result_json(calculate_chain_length(32, 52, 435), path)

        data = json.loads(path.read_text())
        assert data["links"] == 76
        assert data["notes"][0] == "This is a simplified calculation"
