"""
Tests for the component catalog, ship designs and the design library.

Run with: python -m pytest tests/test_catalog.py -v
"""

import json

import pytest

from gamecore.catalog import (
    Catalog,
    ComponentCategory,
    EngineComponent,
    TechSectorComponent,
    UnknownReferenceError,
    WeaponComponent,
    WeaponType,
    default_catalog,
    load_catalog,
    parse_category,
)
from gamecore.design import (
    ComponentInstallation,
    DesignLibrary,
    ShipDesign,
    installed_count,
    space_used,
)


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def enterprise(catalog):
    return ShipDesign.from_dict(catalog.default_designs[0])


class TestCatalog:

    def test_hulls(self, catalog):
        assert len(catalog.hulls) == 5
        assert catalog.hull("sz1").mass == 2
        assert catalog.hull("sz5").mass == 32

    def test_hull_space_scales_with_size_and_tech(self, catalog):
        cruiser = catalog.hull("sz4")
        assert cruiser.total_space(1) == 80
        assert cruiser.total_space(3) == 96

    def test_component_variants(self, catalog):
        assert isinstance(catalog.component("engines", "en1"), EngineComponent)
        assert isinstance(catalog.component(ComponentCategory.WARP, "wd1"), TechSectorComponent)
        torpedo = catalog.component(ComponentCategory.WEAPONS, "w_plt")
        assert isinstance(torpedo, WeaponComponent)
        assert torpedo.weapon_type is WeaponType.PROJECTILE
        assert torpedo.is_projectile

    def test_unknown_references(self, catalog):
        with pytest.raises(UnknownReferenceError):
            catalog.hull("sz9")
        with pytest.raises(UnknownReferenceError):
            catalog.component("weapons", "w_nope")
        with pytest.raises(UnknownReferenceError):
            parse_category("lasers")

    def test_find_component_logs_and_returns_none(self, catalog, caplog):
        assert catalog.find_component("weapons", "w_nope") is None
        assert "w_nope" in caplog.text

    def test_map_size(self, catalog):
        assert catalog.map_width == 1000
        assert catalog.map_height == 1000

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "hulls": {"hx": {"name": "Test", "size": 2, "mass": 5}},
            "components": {"drives": {"d": {"space": 3}}},
            "map": {"width": 400, "height": 300},
        }))
        loaded = load_catalog(path)
        assert loaded.hull("hx").mass == 5
        assert loaded.component("drives", "d").space_for(2, None, 1) == 6
        assert loaded.map_width == 400

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "missing.json")


class TestSpaceAccounting:

    def test_tech_sector_space(self, catalog):
        warp = catalog.component("warp", "wd1")
        assert warp.space_for(2, None, 1) == 20
        assert warp.space_for(1, None, 6) == 15

    def test_weapon_arc_space(self, catalog):
        phaser = catalog.component(ComponentCategory.WEAPONS, "w_hp")
        assert phaser.space_for(1, [1], 1) == 1
        assert phaser.space_for(2, [1, 2, 3, 6, 7, 8], 1) == pytest.approx(5.75)

    def test_seekers_take_no_hull_space(self, catalog):
        assert catalog.component("seekers", "sk2").space_for(3, None, 1) == 0

    def test_design_space_used(self, catalog, enterprise):
        # warp 20 + engines 8 + drives 16 + marines 1 + transporter 1
        # + torpedoes (2 + 0.75) * 4 + phasers 5.75
        assert space_used(enterprise, catalog) == pytest.approx(62.75)

    def test_installed_count_skips_unknown(self, catalog):
        design = ShipDesign(
            id="d", name="D", hull="sz2",
            components=(
                ComponentInstallation(ComponentCategory.DRIVES, "dr1", 2),
                ComponentInstallation(ComponentCategory.DRIVES, "dr_missing", 5),
            ),
        )
        assert installed_count(design, ComponentCategory.DRIVES, catalog) == 2


class TestShipDesign:

    def test_from_dict_accepts_camel_case_tech_level(self):
        design = ShipDesign.from_dict({"id": "x", "hull": "sz1", "techLevel": 3})
        assert design.tech_level == 3
        assert design.name == "x"

    def test_tech_level_bounds(self):
        with pytest.raises(ValueError):
            ShipDesign(id="x", name="X", hull="sz1", tech_level=7)

    def test_invalid_arcs_are_dropped(self):
        installation = ComponentInstallation.from_dict(
            {"category": "weapons", "id": "w_hp", "arcs": [0, 1, 8, 9]}
        )
        assert installation.arcs == (1, 8)

    def test_round_trip(self, enterprise):
        assert ShipDesign.from_dict(enterprise.to_dict()) == enterprise


class TestDesignLibrary:

    def test_defaults_included(self):
        library = DesignLibrary()
        assert "default-enterprise" in library
        assert "default-reliant" in library
        assert len(library) == 2

    def test_user_design_overrides_default(self):
        custom = ShipDesign(id="default-reliant", name="Custom", hull="sz1")
        library = DesignLibrary([custom])
        assert library.get("default-reliant").name == "Custom"

    def test_missing_design(self):
        library = DesignLibrary(include_defaults=False)
        assert library.get("default-enterprise") is None
        assert list(library) == []

    def test_contains_and_len(self):
        library = DesignLibrary()
        assert "default-reliant" in library
        assert "ghost" not in library
        assert len(library) == len(list(library))


class TestCatalogFromDict:

    def test_empty_catalog(self):
        catalog = Catalog.from_dict({})
        assert catalog.hulls == {}
        assert catalog.map_width == 1000.0
