"""Airfield records assembled by the spatial binder.

An airfield is created when an ``aeroway=aerodrome`` (or heliport)
feature is observed. Polygon-backed airfields have a precise boundary;
point-backed airfields (tagged nodes) claim children within a fixed
radius. Both accumulate bound children until the binder completes, then
resolve their elevation once and are emitted exactly once.
"""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import ClassVar

from shapely.geometry import LineString, Point, Polygon

from osm_scenery.core.constants import ELEVATION_TAG
from osm_scenery.models.feature import Feature
from osm_scenery.utils import geometry
from osm_scenery.utils.tags import parse_number

Coord = tuple[float, float]

# Tags tried in order for the airfield identifier
_CODE_TAGS = ("icao", "iata", "faa", "local_ref", "ref")


class AirfieldKind(enum.Enum):
    """Airfield backing geometry; binding waves run in this order."""

    POLYGON = "polygon"
    POINT = "point"


@dataclass(eq=False)
class AirfieldRecord(abc.ABC):
    """An airfield and the children bound to it.

    Attributes:
        feature: The aerodrome/heliport feature.
        runways: Bound runways.
        apron_areas: Bound closed apron/taxiway areas.
        taxi_lanes: Bound open taxiway/taxilane lines.
        heli_areas: Bound helipad polygons.
        helipads: Bound helipad nodes.
        elevation: Elevation in metres, ``None`` until resolved.
    """

    feature: Feature
    runways: list[Feature] = field(default_factory=list)
    apron_areas: list[Feature] = field(default_factory=list)
    taxi_lanes: list[Feature] = field(default_factory=list)
    heli_areas: list[Feature] = field(default_factory=list)
    helipads: list[Feature] = field(default_factory=list)
    elevation: float | None = None

    kind: ClassVar[AirfieldKind]

    def __post_init__(self) -> None:
        if self.elevation is None:
            self.elevation = parse_number(self.feature.tag(ELEVATION_TAG))

    @property
    def code(self) -> str:
        """Identifier used by the ignore list (ICAO first), upper-cased."""
        for key in _CODE_TAGS:
            value = self.feature.tag(key)
            if value:
                return value.strip().upper()
        return ""

    @property
    def name(self) -> str:
        return self.feature.tag("name") or self.code

    @property
    def is_heliport(self) -> bool:
        return self.feature.tag("aeroway") == "heliport"

    @property
    def has_actual_elevation(self) -> bool:
        return self.elevation is not None

    @property
    def area_center(self) -> Coord:
        return self.feature.centroid

    @property
    def child_count(self) -> int:
        return (
            len(self.runways)
            + len(self.apron_areas)
            + len(self.taxi_lanes)
            + len(self.heli_areas)
            + len(self.helipads)
        )

    @abc.abstractmethod
    def contains_feature(self, child: Feature) -> bool:
        """Whether ``child`` lies within this airfield."""


@dataclass(eq=False)
class PolygonAirfield(AirfieldRecord):
    """Airfield backed by a closed aerodrome outline."""

    kind: ClassVar[AirfieldKind] = AirfieldKind.POLYGON

    def contains_feature(self, child: Feature) -> bool:
        """Whether the outline contains the child geometry."""
        if not self.feature.is_polygon or not child.coords:
            return False
        boundary = Polygon(geometry.close_ring(self.feature.vertices))
        if not boundary.is_valid:
            boundary = boundary.buffer(0)
        return bool(boundary.contains(_shape_of(child)))


@dataclass(eq=False)
class PointAirfield(AirfieldRecord):
    """Airfield backed by a tagged node; claims children within ``radius_m``."""

    kind: ClassVar[AirfieldKind] = AirfieldKind.POINT

    radius_m: float = 3000.0

    @property
    def area_center(self) -> Coord:
        return self.feature.coords[0]

    def contains_feature(self, child: Feature) -> bool:
        """Whether every child vertex lies within the binding radius."""
        if not child.coords:
            return False
        center = self.area_center
        return all(geometry.distance_m(center, v) <= self.radius_m for v in child.vertices)


def _shape_of(feature: Feature) -> Point | LineString | Polygon:
    if feature.is_point:
        return Point(feature.coords[0])
    if feature.is_polygon:
        return Polygon(geometry.close_ring(feature.vertices))
    return LineString(feature.coords)
