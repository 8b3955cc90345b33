"""Tests for the inventory loader, rule parsing and the inventory catalog."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from osm_scenery.core.exceptions import InventoryError
from osm_scenery.inventory.catalog import SceneryInventory
from osm_scenery.inventory.loader import load_inventory, load_sized_models, parse_model_size
from osm_scenery.inventory.rules import (
    parse_facade_rules,
    parse_light_rules,
    parse_object_rules,
    parse_tag_matches,
)
from osm_scenery.models.inventory import (
    BuildingCategory,
    BuildingType,
    FacadeSetKey,
    SpecialFacadeType,
    TagMatch,
)
from tests.factories import (
    FOREST,
    GARAGE_FACADE,
    HOUSE_10X10,
    IND_SIMPLE_FLAT,
    RES_SIMPLE_FLAT,
    STREET_LIGHT,
    WATER_TOWER,
    make_inventory,
)

INVENTORY_YAML = """\
facades:
  - path: facades/res_1.fac
    building_type: residential
    simple: true
    sloped: false
  - path: facades/ind_1.fac
    building_type: industrial
    simple: false
special_facades:
  garage: facades/garage.fac
  fence: [facades/fence.fac]
forests: [forests/mixed.for]
street_lights: [objects/street_light.obj]
facade_rules:
  - tags: {building: church}
    facade: facades/church.fac
object_rules:
  - tags: [man_made=water_tower]
    objects: [objects/water_tower.obj]
    min_area: 20
    random_angle: false
light_rules:
  - tags: [highway]
"""


def _write_inventory(root: Path, text: str = INVENTORY_YAML) -> Path:
    path = root / "inventory.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class TestLoadInventory:
    def test_full_file(self, tmp_path: Path) -> None:
        _touch(tmp_path / "objects" / "house" / "house_10x8.obj")
        inventory = load_inventory(_write_inventory(tmp_path))

        assert inventory.polygon_defs == (
            "facades/res_1.fac",
            "facades/ind_1.fac",
            "facades/garage.fac",
            "facades/fence.fac",
            "facades/church.fac",
            "forests/mixed.for",
        )
        assert inventory.object_defs == (
            "objects/water_tower.obj",
            "objects/house/house_10x8.obj",
            "objects/street_light.obj",
        )
        assert inventory.facade_index_from_rules({"building": "church"}) == 4
        assert inventory.light_objects_for({"highway": "primary"}) == ("objects/street_light.obj",)
        (model,) = inventory.models_for(BuildingCategory.HOUSE)
        assert (model.width, model.depth) == (10.0, 8.0)

    def test_explicit_objects_dir(self, tmp_path: Path) -> None:
        _touch(tmp_path / "models" / "garage" / "garage_3.5x6.obj")
        inventory = load_inventory(_write_inventory(tmp_path), tmp_path / "models")
        (model,) = inventory.models_for(BuildingCategory.GARAGE)
        assert model.path == "models/garage/garage_3.5x6.obj"

    def test_empty_file(self, tmp_path: Path) -> None:
        inventory = load_inventory(_write_inventory(tmp_path, ""))
        assert inventory.polygon_defs == ()
        assert inventory.object_defs == ()
        assert not inventory.has_facades()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InventoryError, match="Cannot read"):
            load_inventory(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(InventoryError, match="Invalid YAML"):
            load_inventory(_write_inventory(tmp_path, "facades: [\n"))

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(InventoryError, match="mapping"):
            load_inventory(_write_inventory(tmp_path, "- a\n- b\n"))

    def test_unknown_building_type(self, tmp_path: Path) -> None:
        text = "facades:\n  - path: a.fac\n    building_type: castle\n"
        with pytest.raises(InventoryError, match="castle"):
            load_inventory(_write_inventory(tmp_path, text))

    def test_facade_without_path(self, tmp_path: Path) -> None:
        with pytest.raises(InventoryError, match="facades\\[0\\]"):
            load_inventory(_write_inventory(tmp_path, "facades:\n  - sloped: true\n"))

    def test_unknown_special_facade(self, tmp_path: Path) -> None:
        text = "special_facades:\n  castle: [a.fac]\n"
        with pytest.raises(InventoryError, match="castle"):
            load_inventory(_write_inventory(tmp_path, text))


class TestSizedModels:
    def test_scan(self, tmp_path: Path) -> None:
        objects = tmp_path / "objects"
        _touch(objects / "house" / "house_8x6.obj")
        _touch(objects / "house" / "house_10x10.obj")
        _touch(objects / "house" / "house_plain.obj")
        _touch(objects / "house" / "readme_2x2.txt")
        _touch(objects / "unknown" / "thing_4x4.obj")

        models = load_sized_models(objects)

        assert list(models) == [BuildingCategory.HOUSE]
        assert [m.path for m in models[BuildingCategory.HOUSE]] == [
            "objects/house/house_10x10.obj",
            "objects/house/house_8x6.obj",
        ]

    @pytest.mark.parametrize(
        ("name", "size"),
        [
            ("house_10x8.obj", (10.0, 8.0)),
            ("garage_3.5x6.obj", (3.5, 6.0)),
            ("Shed_4X3.OBJ", (4.0, 3.0)),
            ("church.obj", None),
        ],
    )
    def test_parse_model_size(self, name: str, size: tuple[float, float] | None) -> None:
        assert parse_model_size(name) == size


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class TestRules:
    def test_mapping_condition(self) -> None:
        matches = parse_tag_matches({"building": "church", "denomination": "*"}, section="t")
        assert matches == (TagMatch("building", "church"), TagMatch("denomination", None))

    def test_list_condition(self) -> None:
        matches = parse_tag_matches(["man_made=tower", "tower:type"], section="t")
        assert matches == (TagMatch("man_made", "tower"), TagMatch("tower:type", None))

    @pytest.mark.parametrize("raw", ["building", None, {}, [], ["=x"]])
    def test_malformed_condition(self, raw: object) -> None:
        with pytest.raises(InventoryError):
            parse_tag_matches(raw, section="t")

    def test_facade_rule_requires_facade(self) -> None:
        with pytest.raises(InventoryError, match="missing 'facade'"):
            parse_facade_rules([{"tags": {"building": "church"}}])

    def test_object_rules(self) -> None:
        (rule,) = parse_object_rules(
            [{"tags": {"man_made": "mast"}, "objects": "objects/mast.obj", "max_area": "50"}]
        )
        assert rule.objects == ("objects/mast.obj",)
        assert rule.max_area_m2 == 50.0
        assert rule.random_angle is True

    def test_object_rule_without_objects(self) -> None:
        with pytest.raises(InventoryError, match="must not be empty"):
            parse_object_rules([{"tags": {"man_made": "mast"}, "objects": []}])

    def test_object_rule_bad_area(self) -> None:
        with pytest.raises(InventoryError, match="numbers"):
            parse_object_rules([{"tags": ["a"], "objects": ["x.obj"], "min_area": "big"}])

    def test_light_rules(self) -> None:
        (rule,) = parse_light_rules([{"tags": ["highway=primary"], "objects": ["l.obj"]}])
        assert rule.applies_to({"highway": "primary"})
        assert not rule.applies_to({"highway": "track"})
        assert rule.objects == ("l.obj",)

    def test_no_rules(self) -> None:
        assert parse_facade_rules(None) == ()
        assert parse_object_rules(None) == ()
        assert parse_light_rules(None) == ()


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestSceneryInventory:
    def test_definition_order(self) -> None:
        inventory = make_inventory()
        assert inventory.polygon_index(RES_SIMPLE_FLAT) == 0
        assert inventory.polygon_index(GARAGE_FACADE) == 4
        assert inventory.polygon_index(FOREST) == 8
        assert inventory.object_defs[0] == WATER_TOWER
        assert inventory.object_index(HOUSE_10X10) == 1
        assert inventory.object_defs[-1] == STREET_LIGHT

    def test_unknown_path(self) -> None:
        with pytest.raises(KeyError):
            make_inventory().object_index("objects/missing.obj")

    def test_duplicate_paths_deduplicated(self) -> None:
        inventory = SceneryInventory(forests=["a.for", "a.for", "b.for"])
        assert inventory.polygon_defs == ("a.for", "b.for")

    def test_pick_facade_exact(self) -> None:
        inventory = make_inventory()
        key = FacadeSetKey(True, BuildingType.INDUSTRIAL, False)
        assert inventory.pick_facade(key, random.Random(1)) == inventory.polygon_index(
            IND_SIMPLE_FLAT
        )

    def test_pick_facade_falls_back_to_residential(self) -> None:
        inventory = make_inventory()
        key = FacadeSetKey(True, BuildingType.COMMERCIAL, False)
        assert inventory.pick_facade(key, random.Random(1)) == inventory.polygon_index(
            RES_SIMPLE_FLAT
        )

    def test_pick_facade_none_available(self) -> None:
        key = FacadeSetKey(True, BuildingType.RESIDENTIAL, True)
        assert SceneryInventory().pick_facade(key, random.Random(1)) is None

    def test_special_facades(self) -> None:
        inventory = make_inventory()
        rng = random.Random(1)
        assert inventory.pick_special_facade(SpecialFacadeType.GARAGE, rng) == 4
        assert SceneryInventory().pick_special_facade(SpecialFacadeType.TANK, rng) is None

    def test_object_rule_area_limits(self) -> None:
        inventory = make_inventory()
        tags = {"man_made": "water_tower"}
        assert inventory.object_rule_for(tags, 50.0) is not None
        assert inventory.object_rule_for(tags, 5.0) is None
        assert inventory.object_rule_for(tags, None) is not None
        assert inventory.object_rule_for({"man_made": "mast"}, 50.0) is None

    def test_light_objects(self) -> None:
        inventory = make_inventory()
        assert inventory.light_objects_for({"landuse": "residential"}) == (STREET_LIGHT,)
        assert inventory.light_objects_for({"landuse": "industrial"}) == ()

    @pytest.mark.parametrize(
        ("value", "category"),
        [
            ("house", BuildingCategory.HOUSE),
            ("garages", BuildingCategory.GARAGE),
            ("Church", BuildingCategory.CHURCH),
            ("yes", None),
        ],
    )
    def test_building_category(self, value: str, category: BuildingCategory | None) -> None:
        assert BuildingCategory.from_tags({"building": value}) is category
