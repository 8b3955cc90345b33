"""Scenery content inventory: definition indices and candidate lookups.

The inventory is built once per run (see ``inventory.loader``) and
shared read-only by every tile. It owns the two DSF definition tables
written in each tile header:

- ``polygon_defs``: facades (regular, then special) followed by forests.
- ``object_defs``: rule objects, sized models, then light objects.

Indices handed to the classifiers are positions in these tables. Random
choices always go through the caller's ``random.Random`` so tiles stay
reproducible under a fixed seed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from osm_scenery.models.inventory import (
    BuildingCategory,
    BuildingType,
    FacadeDescriptor,
    FacadeRule,
    FacadeSetKey,
    LightRule,
    ModelDescriptor,
    ObjectRule,
    SpecialFacadeType,
)

if TYPE_CHECKING:
    import random
    from collections.abc import Iterable, Mapping

logger = logging.getLogger("osm_scenery.inventory.catalog")


class SceneryInventory:
    """Read-only index of facades, forests, objects and rule tables."""

    def __init__(
        self,
        *,
        facades: Iterable[FacadeDescriptor] = (),
        special_facades: Mapping[SpecialFacadeType, Iterable[str]] | None = None,
        forests: Iterable[str] = (),
        sized_models: Mapping[BuildingCategory, Iterable[ModelDescriptor]] | None = None,
        facade_rules: Iterable[FacadeRule] = (),
        object_rules: Iterable[ObjectRule] = (),
        light_rules: Iterable[LightRule] = (),
        street_lights: Iterable[str] = (),
    ) -> None:
        self._facades = tuple(facades)
        self._special = {
            kind: tuple(paths) for kind, paths in (special_facades or {}).items()
        }
        self._forests = tuple(forests)
        self._sized_models = {
            category: tuple(models) for category, models in (sized_models or {}).items()
        }
        self.facade_rules = tuple(facade_rules)
        self.object_rules = tuple(object_rules)
        self.light_rules = tuple(light_rules)
        self._street_lights = tuple(street_lights)

        polygon_defs: list[str] = [f.path for f in self._facades]
        for paths in self._special.values():
            polygon_defs.extend(paths)
        polygon_defs.extend(rule.facade for rule in self.facade_rules)
        polygon_defs.extend(self._forests)
        self.polygon_defs: tuple[str, ...] = _unique(polygon_defs)

        object_defs: list[str] = []
        for rule in self.object_rules:
            object_defs.extend(rule.objects)
        for models in self._sized_models.values():
            object_defs.extend(m.path for m in models)
        for rule in self.light_rules:
            object_defs.extend(rule.objects)
        object_defs.extend(self._street_lights)
        self.object_defs: tuple[str, ...] = _unique(object_defs)

        self._polygon_index = {path: i for i, path in enumerate(self.polygon_defs)}
        self._object_index = {path: i for i, path in enumerate(self.object_defs)}

    # ------------------------------------------------------------------
    # Index lookups
    # ------------------------------------------------------------------

    def polygon_index(self, path: str) -> int:
        """Return the ``POLYGON_DEF`` index of ``path``.

        Raises:
            KeyError: If the path is not part of the inventory.
        """
        return self._polygon_index[path]

    def object_index(self, path: str) -> int:
        """Return the ``OBJECT_DEF`` index of ``path``.

        Raises:
            KeyError: If the path is not part of the inventory.
        """
        return self._object_index[path]

    # ------------------------------------------------------------------
    # Facades
    # ------------------------------------------------------------------

    def facade_index_from_rules(self, tags: dict[str, str]) -> int:
        """Return the facade of the first matching rule, or ``-1``."""
        for rule in self.facade_rules:
            if rule.applies_to(tags):
                return self._polygon_index[rule.facade]
        return -1

    def pick_facade(self, key: FacadeSetKey, rng: random.Random) -> int | None:
        """Pick a facade from the set ``key``.

        Falls back to the residential set with the same footprint/roof
        shape, then to any facade of the requested roof shape.
        """
        candidates = [f for f in self._facades if f.key == key]
        if not candidates and key.building_type is not BuildingType.RESIDENTIAL:
            fallback = FacadeSetKey(key.simple_footprint, BuildingType.RESIDENTIAL, key.sloped)
            candidates = [f for f in self._facades if f.key == fallback]
        if not candidates:
            candidates = [f for f in self._facades if f.key.sloped == key.sloped]
        if not candidates:
            logger.debug("No facade available | key=%s", key)
            return None
        return self._polygon_index[rng.choice(candidates).path]

    def pick_special_facade(self, kind: SpecialFacadeType, rng: random.Random) -> int | None:
        paths = self._special.get(kind, ())
        if not paths:
            return None
        return self._polygon_index[rng.choice(paths)]

    def has_facades(self) -> bool:
        return bool(self._facades)

    # ------------------------------------------------------------------
    # Forests
    # ------------------------------------------------------------------

    def pick_forest(self, rng: random.Random) -> int | None:
        if not self._forests:
            return None
        return self._polygon_index[rng.choice(self._forests)]

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def models_for(self, category: BuildingCategory | None) -> tuple[ModelDescriptor, ...]:
        """Sized models of a building category (empty when unknown)."""
        if category is None:
            return ()
        return self._sized_models.get(category, ())

    def object_rule_for(self, tags: dict[str, str], area: float | None = None) -> ObjectRule | None:
        """Return the first object rule matching ``tags``.

        ``area`` is the footprint area for polygons, ``None`` for nodes
        (area limits then do not apply).
        """
        for rule in self.object_rules:
            if not rule.applies_to(tags) or not rule.objects:
                continue
            if area is not None:
                if area < rule.min_area_m2:
                    continue
                if rule.max_area_m2 and area > rule.max_area_m2:
                    continue
            return rule
        return None

    def light_objects_for(self, tags: dict[str, str]) -> tuple[str, ...]:
        """Light objects of the first matching light rule (may be empty)."""
        for rule in self.light_rules:
            if rule.applies_to(tags):
                return rule.objects or self._street_lights
        return ()


def _unique(paths: Iterable[str]) -> tuple[str, ...]:
    """Deduplicate preserving first-seen order."""
    return tuple(dict.fromkeys(paths))
