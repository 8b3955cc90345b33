"""Building height, type and facade inference.

Pure functions of tags, geometry and configuration. The only source of
non-determinism is the random height band fallback (and the facade pick
within a set), both drawn from the injected ``random.Random``.

Height priority (first applicable wins):

1. explicit ``height`` tag
2. ``building:levels`` x level height, rounded
3. type rule: garage = one level; tank = perimeter / pi (doubled for
   gasometers)
4. perimeter clamp: <= 30 m one level, <= 50 m two levels
5. area band: tiny footprints get the residential minimum, otherwise a
   random height in the residential or the generic building band

Facade priority:

1. facade rule table
2. special facade (garage/tank)
3. sloped-roof set for simple footprints below the flat-roof height
4. 4-edge set for rectangles, complex-footprint set otherwise
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from osm_scenery.core.constants import (
    BUILDING_MAX_VECTORS,
    BUILDING_MIN_VECTORS,
    BUILDING_TAG,
    HEIGHT_TAG,
    LEVELS_TAG,
    MAN_MADE_TAG,
    MIN_SPEC_BUILDING_PERIMETER_M,
    ONE_LEVEL_PERIMETER_M,
    SMALL_BUILDING_AREA_M2,
    TWO_LEVELS_PERIMETER_M,
)
from osm_scenery.models.inventory import BuildingType, FacadeSetKey, SpecialFacadeType
from osm_scenery.utils import tags as tag_utils

if TYPE_CHECKING:
    import random

    from osm_scenery.core.config import GenerationConfig
    from osm_scenery.inventory.catalog import SceneryInventory
    from osm_scenery.models.feature import Feature

logger = logging.getLogger("osm_scenery.classifiers.heuristics")

_TANK_VALUES = frozenset({"storage_tank", "fuel_storage_tank", "gasometer"})
_GARAGE_VALUES = frozenset({"garage", "garages"})
_BUILDING_MAN_MADE_VALUES = frozenset({"yes", "gasometer", "works"})


# ---------------------------------------------------------------------------
# Special buildings
# ---------------------------------------------------------------------------


def special_building_type(feature: Feature, config: GenerationConfig) -> SpecialFacadeType | None:
    """Return ``TANK`` or ``GARAGE`` for special buildings.

    Tanks are recognised only when tank generation is enabled; garages
    are always recognised.
    """
    if config.generate_tanks and feature.tag(MAN_MADE_TAG) in _TANK_VALUES:
        return SpecialFacadeType.TANK
    if feature.tag(BUILDING_TAG) in _GARAGE_VALUES:
        return SpecialFacadeType.GARAGE
    return None


def is_special_excluded(feature: Feature, config: GenerationConfig) -> bool:
    """Whether a feature must not become a facade building.

    Special buildings below the minimum perimeter are skipped (no swarms
    of tiny garages). Most ``man_made`` structures are skipped too;
    tanks, works and plain ``man_made=yes`` stay eligible.
    """
    if special_building_type(feature, config) is not None:
        return feature.perimeter < MIN_SPEC_BUILDING_PERIMETER_M
    man_made = feature.tag(MAN_MADE_TAG)
    return (
        man_made is not None
        and "tank" not in man_made
        and man_made not in _BUILDING_MAN_MADE_VALUES
    )


def qualifies_as_building(feature: Feature, config: GenerationConfig) -> bool:
    """Eligibility filter of the building facade classifier."""
    if not config.generate_buildings or not feature.is_polygon:
        return False
    if not tag_utils.is_building(feature.tags) or tag_utils.is_excluded(feature.tags):
        return False
    if is_special_excluded(feature, config) or not feature.is_valid:
        return False
    if not BUILDING_MIN_VECTORS < feature.vertex_count < BUILDING_MAX_VECTORS:
        return False
    return (
        config.min_house_segment_m < feature.max_edge_length < config.max_house_segment_m
        and feature.area > config.min_house_area_m2
    )


# ---------------------------------------------------------------------------
# Height
# ---------------------------------------------------------------------------


def height_by_type(feature: Feature, config: GenerationConfig) -> int:
    """Type-specific height, or ``0`` when the type gives no hint."""
    special = special_building_type(feature, config)
    if special is SpecialFacadeType.GARAGE:
        return round(config.level_height_m)
    if special is SpecialFacadeType.TANK:
        diameter = round(feature.perimeter / math.pi)
        if (feature.tag(MAN_MADE_TAG) or "").lower() == "gasometer":
            return diameter * 2
        return diameter
    return 0


def compute_height(feature: Feature, config: GenerationConfig, rng: random.Random) -> int:
    """Infer the building height in whole metres."""
    explicit = tag_utils.parse_number(feature.tag(HEIGHT_TAG))
    if explicit is not None and explicit > 0:
        return round(explicit)

    levels = tag_utils.parse_number(feature.tag(LEVELS_TAG))
    if levels is not None and levels > 0 and math.isfinite(levels * config.level_height_m):
        return round(levels * config.level_height_m)

    by_type = height_by_type(feature, config)
    if by_type > 0:
        return by_type

    perimeter = feature.perimeter
    if perimeter <= ONE_LEVEL_PERIMETER_M:
        return round(config.level_height_m)
    if perimeter <= TWO_LEVELS_PERIMETER_M:
        return round(config.level_height_m * 2)

    area = feature.area
    if area < SMALL_BUILDING_AREA_M2:
        return config.residential_min_height
    if area >= config.residential_max_area_m2:
        return rng.randint(config.building_min_height, config.building_max_height)
    return rng.randint(config.residential_min_height, config.residential_max_height)


# ---------------------------------------------------------------------------
# Building type and facade
# ---------------------------------------------------------------------------


def building_type(feature: Feature, height: int, config: GenerationConfig) -> BuildingType:
    """Estimate the facade family of a building."""
    value = feature.tag(BUILDING_TAG)
    explicit = BuildingType.from_id(value)
    if explicit is not None:
        return explicit
    if value == "apartments":
        return BuildingType.RESIDENTIAL
    if tag_utils.has_value(feature.tags, "residential") or tag_utils.has_value(
        feature.tags, "house"
    ):
        return BuildingType.RESIDENTIAL
    if (feature.tag("shop") or "").strip():
        return BuildingType.COMMERCIAL

    area = feature.area
    if area < config.residential_max_area_m2 and height < config.residential_max_height:
        return BuildingType.RESIDENTIAL
    if (
        tag_utils.has_value(feature.tags, "industrial")
        or tag_utils.has_value(feature.tags, "commercial")
        or area > config.residential_max_area_m2
        or height > config.residential_max_height
    ):
        return BuildingType.INDUSTRIAL
    return BuildingType.RESIDENTIAL


def facade_set_key(feature: Feature, height: int, config: GenerationConfig) -> FacadeSetKey:
    """Facade set for an ordinary (non-special, no rule) building."""
    btype = building_type(feature, height, config)
    if (
        config.generate_sloped_roofs
        and feature.is_simple
        and height < config.sloped_roof_max_height_m
    ):
        return FacadeSetKey(simple_footprint=True, building_type=btype, sloped=True)
    return FacadeSetKey(
        simple_footprint=feature.vertex_count == 4, building_type=btype, sloped=False
    )


def compute_facade(
    feature: Feature,
    height: int,
    config: GenerationConfig,
    inventory: SceneryInventory,
    rng: random.Random,
) -> int | None:
    """Pick the facade definition index, ``None`` if none is available."""
    index = inventory.facade_index_from_rules(feature.tags)
    if index >= 0:
        return index
    special = special_building_type(feature, config)
    if special is not None:
        return inventory.pick_special_facade(special, rng)
    return inventory.pick_facade(facade_set_key(feature, height, config), rng)
