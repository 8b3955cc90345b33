"""Geometry helpers shared by the classifiers and the airfield binder.

Lengths, areas, distances and bearings are geodesic on the WGS 84
ellipsoid (``pyproj.Geod``). Footprint dimensions are measured after
projecting to the local UTM zone, never by scaling degrees. Planar
predicates (simplicity, orientation, containment, simplification) use
shapely directly on ``(lon, lat)`` coordinates.
"""

from __future__ import annotations

import math
from functools import lru_cache

from pyproj import Geod, Transformer
from shapely.geometry import LinearRing, LineString, Point, Polygon

Coord = tuple[float, float]

_GEOD = Geod(ellps="WGS84")

# Douglas-Peucker tolerance for lossy footprint reduction (~0.5 m)
SIMPLIFY_TOLERANCE_DEG = 5e-6


# ---------------------------------------------------------------------------
# Ring helpers
# ---------------------------------------------------------------------------


def open_ring(coords: list[Coord]) -> list[Coord]:
    """Return ring vertices without the repeated closing vertex."""
    if len(coords) > 1 and coords[0] == coords[-1]:
        return list(coords[:-1])
    return list(coords)


def close_ring(coords: list[Coord]) -> list[Coord]:
    """Return ring vertices with the first vertex repeated at the end."""
    vertices = open_ring(coords)
    if not vertices:
        return []
    return [*vertices, vertices[0]]


def edges(coords: list[Coord], *, closed: bool) -> list[tuple[Coord, Coord]]:
    """Return consecutive vertex pairs; closed rings include the closing edge."""
    points = close_ring(coords) if closed else list(coords)
    return list(zip(points[:-1], points[1:], strict=True))


def is_ccw(coords: list[Coord]) -> bool:
    """Whether a ring is wound counter-clockwise."""
    return bool(LinearRing(close_ring(coords)).is_ccw)


def force_ccw(coords: list[Coord]) -> list[Coord]:
    """Return the ring wound counter-clockwise (unchanged if it already is)."""
    vertices = open_ring(coords)
    if len(vertices) < 3 or is_ccw(vertices):
        return vertices
    return [vertices[0], *reversed(vertices[1:])]


def is_simple_ring(coords: list[Coord]) -> bool:
    """Whether a closed ring has no self-intersections."""
    vertices = open_ring(coords)
    if len(vertices) < 3:
        return False
    return bool(LinearRing(close_ring(vertices)).is_simple)


def simplify_ring(coords: list[Coord]) -> list[Coord]:
    """Reduce a footprint to a simple ring.

    Applies Douglas-Peucker simplification; if the result is still not a
    valid simple polygon the minimum rotated rectangle is used instead.
    The result is counter-clockwise and open (no repeated closing vertex).
    """
    polygon = Polygon(close_ring(coords))
    candidate = polygon.simplify(SIMPLIFY_TOLERANCE_DEG, preserve_topology=False)
    if (
        candidate.is_empty
        or candidate.geom_type != "Polygon"
        or not candidate.is_valid
        or len(candidate.exterior.coords) < 4
    ):
        candidate = polygon.minimum_rotated_rectangle
    if candidate.geom_type != "Polygon" or candidate.is_empty:
        return force_ccw(coords)
    return force_ccw([(x, y) for x, y in candidate.exterior.coords])


# ---------------------------------------------------------------------------
# Geodesic measures
# ---------------------------------------------------------------------------


def edge_lengths_m(coords: list[Coord], *, closed: bool) -> list[float]:
    """Geodesic length of every edge in metres."""
    points = close_ring(coords) if closed else list(coords)
    if len(points) < 2:
        return []
    lons = [c[0] for c in points]
    lats = [c[1] for c in points]
    return [float(d) for d in _GEOD.line_lengths(lons, lats)]


def length_m(coords: list[Coord], *, closed: bool) -> float:
    """Geodesic length (perimeter when ``closed``) in metres."""
    return sum(edge_lengths_m(coords, closed=closed))


def area_m2(coords: list[Coord]) -> float:
    """Absolute geodesic polygon area in square metres."""
    vertices = open_ring(coords)
    if len(vertices) < 3:
        return 0.0
    lons = [c[0] for c in vertices]
    lats = [c[1] for c in vertices]
    area, _perimeter = _GEOD.polygon_area_perimeter(lons, lats)
    return abs(float(area))


def distance_m(a: Coord, b: Coord) -> float:
    """Geodesic distance between two points in metres."""
    _az12, _az21, dist = _GEOD.inv(a[0], a[1], b[0], b[1])
    return float(dist)


def true_bearing(a: Coord, b: Coord) -> float:
    """Initial true bearing from ``a`` to ``b`` in degrees, in ``[0, 360)``."""
    az12, _az21, _dist = _GEOD.inv(a[0], a[1], b[0], b[1])
    return float(az12) % 360.0


def offset_point(origin: Coord, bearing_deg: float, dist: float) -> Coord:
    """Return the point ``dist`` metres from ``origin`` along ``bearing_deg``."""
    lon, lat, _back = _GEOD.fwd(origin[0], origin[1], bearing_deg, dist)
    return (float(lon), float(lat))


def centroid(coords: list[Coord]) -> Coord:
    """Centroid of a ring (or mean of the vertices for lines and points)."""
    vertices = open_ring(coords)
    if len(vertices) >= 3:
        c = Polygon(close_ring(vertices)).centroid
        if not c.is_empty:
            return (c.x, c.y)
    n = len(vertices)
    return (sum(v[0] for v in vertices) / n, sum(v[1] for v in vertices) / n)


# ---------------------------------------------------------------------------
# Local metric frame (footprint dimensions)
# ---------------------------------------------------------------------------


def get_utm_crs(lon: float, lat: float) -> str:
    """Determine the UTM CRS (``"EPSG:326xx"`` / ``"EPSG:327xx"``) for a coordinate."""
    zone_number = int((lon + 180) / 6) + 1
    zone_number = max(1, min(60, zone_number))
    if lat >= 0:
        return f"EPSG:{32600 + zone_number}"
    return f"EPSG:{32700 + zone_number}"


@lru_cache(maxsize=16)
def _to_utm(utm_crs: str) -> Transformer:
    return Transformer.from_crs("EPSG:4326", utm_crs, always_xy=True)


def to_metric(coords: list[Coord]) -> list[Coord]:
    """Project ``(lon, lat)`` coordinates to the UTM zone of their first vertex."""
    if not coords:
        return []
    transformer = _to_utm(get_utm_crs(coords[0][0], coords[0][1]))
    return [tuple(transformer.transform(lon, lat)) for lon, lat in coords]  # type: ignore[misc]


def avg_distance(edge_a: tuple[Coord, Coord], edge_b: tuple[Coord, Coord]) -> float:
    """Average distance between two (roughly opposite) metric edges.

    Averages the distance of each endpoint to the other edge, which
    tolerates slightly non-parallel opposite sides.
    """
    seg_a = LineString(edge_a)
    seg_b = LineString(edge_b)
    dists = [Point(p).distance(seg_b) for p in edge_a]
    dists.extend(Point(p).distance(seg_a) for p in edge_b)
    return sum(dists) / len(dists)


def fit_with_distance(
    x_size: float,
    y_size: float,
    tolerance: float,
    len1: float,
    len2: float,
) -> float:
    """Distance between model and footprint sizes, ``inf`` outside tolerance."""
    dx = abs(x_size - len1)
    dy = abs(y_size - len2)
    if dx > tolerance or dy > tolerance:
        return math.inf
    return math.hypot(dx, dy)


# ---------------------------------------------------------------------------
# Tiles
# ---------------------------------------------------------------------------


def tile_of(lon: float, lat: float) -> tuple[int, int]:
    """Return the 1x1 degree tile ``(lon, lat)`` origin containing a point."""
    return (math.floor(lon), math.floor(lat))


def in_tile(point: Coord, tile: tuple[int, int] | None) -> bool:
    """Whether ``point`` lies inside ``tile`` (always true without a tile)."""
    if tile is None:
        return True
    return tile_of(point[0], point[1]) == tile
