"""Tag predicates for OSM features.

Pure functions over a ``dict[str, str]`` tag mapping. They decide which
broad family a feature belongs to; the classifiers apply the finer rules.
"""

from __future__ import annotations

import logging
import math
import re

from osm_scenery.core.constants import (
    BUILDING_TAG,
    HIGHWAY_TAG,
    POWER_TAG,
    RAILWAY_TAG,
    ROAD_TYPES,
)

logger = logging.getLogger("osm_scenery.utils.tags")

_EXCLUDED_BUILDING_VALUES = frozenset({"no", "roof", "ruins", "construction"})
_NUMBER_RE = re.compile(r"^\s*(-?\d+(?:[.,]\d+)?)")

Tags = dict[str, str]


def is_building(tags: Tags) -> bool:
    """Whether the tags describe a building footprint."""
    return BUILDING_TAG in tags or "building:part" in tags


def is_excluded(tags: Tags) -> bool:
    """Whether a building-like feature must never become a building."""
    if tags.get(BUILDING_TAG, "").lower() in _EXCLUDED_BUILDING_VALUES:
        return True
    if tags.get("location", "").lower() in ("underground", "underwater"):
        return True
    layer = parse_number(tags.get("layer"))
    return layer is not None and layer < 0


def is_forest(tags: Tags) -> bool:
    return tags.get("landuse") == "forest" or tags.get("natural") == "wood"


def is_road(tags: Tags) -> bool:
    return tags.get(HIGHWAY_TAG) in ROAD_TYPES and tags.get("area") != "yes"


def is_railway(tags: Tags) -> bool:
    return tags.get(RAILWAY_TAG) == "rail"


def is_powerline(tags: Tags) -> bool:
    return tags.get(POWER_TAG) == "line"


def has_value(tags: Tags, value: str) -> bool:
    """Whether any tag carries ``value`` (case-insensitive)."""
    needle = value.lower()
    return any(v.lower() == needle for v in tags.values())


def parse_number(value: str | None) -> float | None:
    """Parse the leading number of a tag value (``"12 m"`` -> ``12.0``).

    Returns ``None`` for missing, unparsable or non-finite values.
    """
    if value is None:
        return None
    match = _NUMBER_RE.match(value)
    if match is None:
        logger.debug("Unparsable numeric tag value: %r", value)
        return None
    number = float(match.group(1).replace(",", "."))
    if not math.isfinite(number):
        logger.debug("Non-finite numeric tag value: %r", value)
        return None
    return number
