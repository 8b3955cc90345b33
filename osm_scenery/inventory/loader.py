"""Load the scenery inventory from a YAML file and an objects directory.

The YAML file lists facades (with the set they belong to), special
facades, forests, street lights and the rule tables. Sized building
models are discovered on disk: every ``<objects_dir>/<category>/``
folder holds models whose file name encodes the footprint size, e.g.
``house/house_10x10.obj`` or ``garage/garage_3.5x6.obj``.

Example inventory file::

    facades:
      - path: facades/res_simple_flat_1.fac
        building_type: residential
        simple: true
        sloped: false
    special_facades:
      garage: [facades/garage.fac]
      fence: [facades/fence.fac]
    forests: [forests/mixed.for]
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from osm_scenery.core.exceptions import InventoryError
from osm_scenery.inventory.catalog import SceneryInventory
from osm_scenery.inventory.rules import (
    parse_facade_rules,
    parse_light_rules,
    parse_object_rules,
)
from osm_scenery.models.inventory import (
    BuildingCategory,
    BuildingType,
    FacadeDescriptor,
    FacadeSetKey,
    ModelDescriptor,
    SpecialFacadeType,
)

logger = logging.getLogger("osm_scenery.inventory.loader")

_MODEL_SIZE_RE = re.compile(r"(\d+(?:\.\d+)?)x(\d+(?:\.\d+)?)", re.IGNORECASE)
_MODEL_SUFFIX = ".obj"


def load_inventory(path: str | Path, objects_dir: str | Path | None = None) -> SceneryInventory:
    """Build a ``SceneryInventory`` from an inventory file.

    Args:
        path: YAML inventory file.
        objects_dir: Directory with per-category sized models; defaults to
            ``objects`` next to the inventory file (skipped if missing).

    Raises:
        InventoryError: If the file is missing, not valid YAML or has a
            malformed section.
    """
    inventory_path = Path(path)
    try:
        raw = yaml.safe_load(inventory_path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise InventoryError(f"Cannot read inventory {inventory_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise InventoryError(f"Invalid YAML in {inventory_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise InventoryError(f"Inventory {inventory_path} must be a mapping")

    models_root = Path(objects_dir) if objects_dir else inventory_path.parent / "objects"
    sized_models = load_sized_models(models_root) if models_root.is_dir() else {}

    inventory = SceneryInventory(
        facades=_parse_facades(raw.get("facades")),
        special_facades=_parse_special_facades(raw.get("special_facades")),
        forests=[str(p) for p in raw.get("forests") or []],
        sized_models=sized_models,
        facade_rules=parse_facade_rules(raw.get("facade_rules")),
        object_rules=parse_object_rules(raw.get("object_rules")),
        light_rules=parse_light_rules(raw.get("light_rules")),
        street_lights=[str(p) for p in raw.get("street_lights") or []],
    )
    logger.info(
        "Inventory loaded | path=%s | polygon_defs=%d | object_defs=%d",
        inventory_path,
        len(inventory.polygon_defs),
        len(inventory.object_defs),
    )
    return inventory


def load_sized_models(objects_dir: Path) -> dict[BuildingCategory, list[ModelDescriptor]]:
    """Scan ``objects_dir`` for per-category sized models.

    Files without a ``<width>x<depth>`` size in their name are ignored.
    Model paths are relative to the parent of ``objects_dir``.
    """
    result: dict[BuildingCategory, list[ModelDescriptor]] = {}
    for category in BuildingCategory:
        folder = objects_dir / category.value
        if not folder.is_dir():
            continue
        models: list[ModelDescriptor] = []
        for file in sorted(folder.iterdir()):
            if file.suffix.lower() != _MODEL_SUFFIX:
                continue
            size = parse_model_size(file.name)
            if size is None:
                logger.debug("Skipping model without size | file=%s", file)
                continue
            rel = file.relative_to(objects_dir.parent).as_posix()
            models.append(ModelDescriptor(path=rel, width=size[0], depth=size[1]))
        if models:
            result[category] = models
    return result


def parse_model_size(file_name: str) -> tuple[float, float] | None:
    """Extract ``(width, depth)`` from a model file name (``house_10x8.obj``)."""
    match = _MODEL_SIZE_RE.search(Path(file_name).stem)
    if match is None:
        return None
    return (float(match.group(1)), float(match.group(2)))


def _parse_facades(raw: Any) -> list[FacadeDescriptor]:
    facades: list[FacadeDescriptor] = []
    for i, entry in enumerate(raw or []):
        if not isinstance(entry, dict) or "path" not in entry:
            raise InventoryError(f"facades[{i}]: expected a mapping with 'path'")
        building_type = BuildingType.from_id(entry.get("building_type", "residential"))
        if building_type is None:
            raise InventoryError(
                f"facades[{i}]: unknown building_type {entry.get('building_type')!r}"
            )
        key = FacadeSetKey(
            simple_footprint=bool(entry.get("simple", True)),
            building_type=building_type,
            sloped=bool(entry.get("sloped", False)),
        )
        facades.append(FacadeDescriptor(path=str(entry["path"]), key=key))
    return facades


def _parse_special_facades(raw: Any) -> dict[SpecialFacadeType, list[str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InventoryError("special_facades must be a mapping")
    result: dict[SpecialFacadeType, list[str]] = {}
    for name, paths in raw.items():
        try:
            kind = SpecialFacadeType(str(name).lower())
        except ValueError as exc:
            raise InventoryError(f"special_facades: unknown type {name!r}") from exc
        result[kind] = [paths] if isinstance(paths, str) else [str(p) for p in paths or []]
    return result
