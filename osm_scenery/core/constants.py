"""Shared generation constants: single source of truth.

Centralises OSM tag keys, geometric thresholds and X-Plane network type
codes that are used across classifiers, the airfield binder and the
output format.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# OSM tag keys
# ---------------------------------------------------------------------------

BUILDING_TAG = "building"
LEVELS_TAG = "building:levels"
HEIGHT_TAG = "height"
MAN_MADE_TAG = "man_made"
BARRIER_TAG = "barrier"
HIGHWAY_TAG = "highway"
RAILWAY_TAG = "railway"
POWER_TAG = "power"
AEROWAY_TAG = "aeroway"
ELEVATION_TAG = "ele"

# ---------------------------------------------------------------------------
# Building thresholds
# ---------------------------------------------------------------------------

BUILDING_MIN_VECTORS = 3
"""Buildings need strictly more vertices than this."""

BUILDING_MAX_VECTORS = 512
"""Buildings need strictly fewer vertices than this."""

MIN_SPEC_BUILDING_PERIMETER_M = 30.0
"""Garages and tanks below this perimeter are not generated."""

ONE_LEVEL_PERIMETER_M = 30.0
TWO_LEVELS_PERIMETER_M = 50.0

SMALL_BUILDING_AREA_M2 = 250.0
"""Footprints below this area get the minimum residential height."""

MIN_EMITTED_AREA_M2 = 1.0
"""Facade polygons smaller than this are never written."""

# ---------------------------------------------------------------------------
# Barrier thresholds
# ---------------------------------------------------------------------------

MIN_BARRIER_PERIMETER_M = 200.0
BARRIER_HEIGHT_M = 2

# ---------------------------------------------------------------------------
# Lights
# ---------------------------------------------------------------------------

LIGHTS_STRIDE_BY_DENSITY: dict[int, int] = {0: 10, 1: 5, 2: 3}
"""Every N-th vertex of a lit feature receives a light object."""

LIGHT_OFFSET_DEG = 0.0001

# ---------------------------------------------------------------------------
# Network type codes (lib/g10/roads.net)
# ---------------------------------------------------------------------------

ROAD_TYPES: dict[str, int] = {
    "motorway": 10,
    "motorway_link": 10,
    "trunk": 20,
    "trunk_link": 20,
    "primary": 30,
    "primary_link": 30,
    "secondary": 40,
    "secondary_link": 40,
    "tertiary": 50,
    "tertiary_link": 50,
    "unclassified": 60,
    "residential": 60,
    "living_street": 60,
    "service": 70,
}

RAIL_TYPE = 151
POWERLINE_TYPE = 220

FOREST_DENSITY = 255
