"""Data model for a tagged OSM feature.

A Feature is a node (single coordinate), an open way (polyline) or a
closed way (polygon) together with its tags. Derived measures (perimeter,
area, longest edge, simplicity) are computed lazily and cached.

Features are immutable. Orientation fixes and lossy simplification
return a *new* Feature (``normalized()`` / ``simplified()``), so the
single normalization step before classification never mutates input.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from functools import cached_property

from osm_scenery.utils import geometry

Coord = tuple[float, float]


@dataclass(frozen=True)
class Feature:
    """A tagged geometric OSM entity.

    Attributes:
        feature_id: Stable OSM identifier.
        tags: Tag mapping (keys unique).
        coords: Vertices as ``(lon, lat)`` tuples. Closed rings may or may
            not repeat the first vertex at the end.
        closed: ``True`` for polygons.
        partial: ``True`` when the feature was clipped at a tile border.
    """

    feature_id: int
    tags: dict[str, str] = field(default_factory=dict)
    coords: list[Coord] = field(default_factory=list)
    closed: bool = False
    partial: bool = False

    @classmethod
    def node(cls, feature_id: int, lon: float, lat: float, tags: dict[str, str]) -> Feature:
        """Create a point feature."""
        return cls(feature_id=feature_id, tags=dict(tags), coords=[(lon, lat)])

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def tag(self, key: str) -> str | None:
        """Return a tag value or ``None``."""
        return self.tags.get(key)

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def is_point(self) -> bool:
        return len(self.coords) == 1

    @property
    def is_polygon(self) -> bool:
        return self.closed and len(self.vertices) >= 3

    @cached_property
    def vertices(self) -> list[Coord]:
        """Vertices without the repeated closing vertex."""
        if self.closed:
            return geometry.open_ring(self.coords)
        return list(self.coords)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @cached_property
    def edge_lengths(self) -> list[float]:
        """Geodesic length of every edge in metres."""
        return geometry.edge_lengths_m(self.vertices, closed=self.closed)

    @cached_property
    def perimeter(self) -> float:
        """Geodesic perimeter (or line length) in metres."""
        return sum(self.edge_lengths)

    @cached_property
    def area(self) -> float:
        """Geodesic area in square metres (0 for lines and points)."""
        if not self.is_polygon:
            return 0.0
        return geometry.area_m2(self.vertices)

    @cached_property
    def max_edge_length(self) -> float:
        """Longest edge in metres."""
        return max(self.edge_lengths, default=0.0)

    @cached_property
    def is_simple(self) -> bool:
        """Whether the ring has no self-intersections."""
        if not self.is_polygon:
            return False
        return geometry.is_simple_ring(self.vertices)

    @cached_property
    def is_valid(self) -> bool:
        """Whether the geometry is usable.

        Polygons: closed, at least 3 distinct vertices, no zero-length
        edge and non-zero area. Lines: at least 2 vertices and no
        zero-length edge.
        """
        if not self.closed:
            return len(self.coords) >= 2 and all(length > 0.0 for length in self.edge_lengths)
        if len(set(self.vertices)) < 3:
            return False
        if any(length <= 0.0 for length in self.edge_lengths):
            return False
        return self.area > 0.0

    @cached_property
    def centroid(self) -> Coord:
        return geometry.centroid(self.vertices)

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def normalized(self) -> Feature:
        """Return the feature wound counter-clockwise.

        Returns ``self`` for lines, points and rings that already are CCW,
        so normalizing twice equals normalizing once.
        """
        if not self.is_polygon or geometry.is_ccw(self.vertices):
            return self
        return replace(self, coords=geometry.force_ccw(self.vertices))

    def simplified(self) -> Feature:
        """Return a simple (lossy) version of a polygon footprint."""
        if not self.is_polygon:
            return self
        return replace(self, coords=geometry.simplify_ring(self.vertices))
