"""DSF2Text rendering of the tile header and emission payloads.

The header carries the tile properties, optional exclusion regions and
the definition tables (network, polygon and object defs) from the
inventory. Payload lines follow the DSFTool text syntax::

    BEGIN_POLYGON   <def>   <param> 2
    BEGIN_WINDING
    POLYGON_POINT   <lon> <lat>
    END_WINDING
    END_POLYGON
    OBJECT  <def>   <lon> <lat> <heading>
    BEGIN_SEGMENT 0 <type> <node> <lon> <lat> 0.000000
    END_SEGMENT <node> <lon> <lat> 0.000000

Airfields and runways are handed over as payloads for the separate
airport writer and render here as comments only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from osm_scenery.core.exceptions import ContractError
from osm_scenery.models.emission import (
    AirfieldPayload,
    EmissionRequest,
    FacadePolygon,
    ForestPolygon,
    NetworkSegment,
    ObjectPlacement,
    RunwayPayload,
)

if TYPE_CHECKING:
    from osm_scenery.inventory.catalog import SceneryInventory

Box = tuple[float, float, float, float]
"""``(west, south, east, north)`` in degrees."""

NETWORK_DEF = "lib/g10/roads.net"
CREATION_AGENT = "osm-scenery"

# Exclusion properties written for generated buildings (smart exclusions)
BUILDING_EXCLUSIONS = ("sim/exclude_fac", "sim/exclude_obj")

# Exclusion properties written for a whole-tile / input-bbox exclusion
FULL_EXCLUSIONS = (
    "sim/exclude_fac",
    "sim/exclude_for",
    "sim/exclude_obj",
    "sim/exclude_net",
)


def tile_box(tile: tuple[int, int]) -> Box:
    lon, lat = tile
    return (float(lon), float(lat), float(lon + 1), float(lat + 1))


def intersect_boxes(a: Box, b: Box) -> Box | None:
    """Intersection of two boxes, ``None`` when they do not overlap."""
    west, south = max(a[0], b[0]), max(a[1], b[1])
    east, north = min(a[2], b[2]), min(a[3], b[3])
    if west >= east or south >= north:
        return None
    return (west, south, east, north)


def tile_label(tile: tuple[int, int] | None) -> str:
    """X-Plane tile name, e.g. ``+50+030``."""
    if tile is None:
        return "single-pass"
    lon, lat = tile
    return f"{lat:+03d}{lon:+04d}"


class DsfTextFormat:
    """Formats DSF2Text header, payload and exclusion lines."""

    def header(
        self,
        tile: tuple[int, int] | None,
        exclusion_box: Box | None,
        inventory: SceneryInventory,
    ) -> str:
        """Return the tile header.

        Args:
            tile: Tile origin ``(lon, lat)``; ``None`` in single-pass mode.
            exclusion_box: Region whose default scenery is excluded.
            inventory: Source of the definition tables.
        """
        lines = [
            "I",
            "800",
            "DSF2TEXT",
            "",
            "PROPERTY\tsim/planet\tearth",
            "PROPERTY\tsim/overlay\t1",
            "PROPERTY\tsim/require_facade\t6/0",
            "PROPERTY\tsim/require_object\t1/0",
            f"PROPERTY\tsim/creation_agent\t{CREATION_AGENT}",
        ]
        if exclusion_box is not None:
            lines.extend(self.exclusion_lines([exclusion_box], FULL_EXCLUSIONS))
        if tile is not None:
            west, south, east, north = tile_box(tile)
            lines.extend(
                [
                    f"PROPERTY\tsim/west\t{west:.0f}",
                    f"PROPERTY\tsim/east\t{east:.0f}",
                    f"PROPERTY\tsim/north\t{north:.0f}",
                    f"PROPERTY\tsim/south\t{south:.0f}",
                ]
            )
        lines.append("")
        lines.append(f"NETWORK_DEF\t{NETWORK_DEF}")
        lines.extend(f"POLYGON_DEF\t{path}" for path in inventory.polygon_defs)
        lines.extend(f"OBJECT_DEF\t{path}" for path in inventory.object_defs)
        lines.append("")
        return "\n".join(lines) + "\n"

    def exclusion_lines(self, boxes: list[Box], properties: tuple[str, ...]) -> list[str]:
        return [
            f"PROPERTY\t{prop}\t{w:.9f}/{s:.9f}/{e:.9f}/{n:.9f}"
            for w, s, e, n in boxes
            for prop in properties
        ]

    def render(self, request: EmissionRequest) -> str:
        """Render one emission request as DSF2Text lines.

        Raises:
            ContractError: If the payload type is unknown.
        """
        payload = request.payload
        if isinstance(payload, str):
            return payload if payload.endswith("\n") else payload + "\n"
        if isinstance(payload, FacadePolygon):
            return self._polygon(payload.facade_id, payload.height, payload.coords)
        if isinstance(payload, ForestPolygon):
            return self._polygon(payload.forest_id, payload.density, payload.coords)
        if isinstance(payload, ObjectPlacement):
            return "OBJECT\t%d\t%14.9f %14.9f %5.1f\n" % (
                payload.object_id,
                payload.lon,
                payload.lat,
                payload.bearing,
            )
        if isinstance(payload, NetworkSegment):
            return self._segment(payload)
        if isinstance(payload, AirfieldPayload):
            airfield = payload.airfield
            return "# airfield %s main=%s elevation=%s children=%d\n" % (
                airfield.code or airfield.feature.feature_id,
                payload.main,
                airfield.elevation,
                airfield.child_count,
            )
        if isinstance(payload, RunwayPayload):
            return "# runway %d main=%s\n" % (payload.runway.feature_id, payload.main)
        raise ContractError(
            f"Unknown payload type {type(payload).__name__}",
            stage="emit",
            code="PAYLOAD_UNKNOWN",
            feature_id=request.feature_id,
        )

    def _polygon(self, def_index: int, param: int, coords: list[tuple[float, float]]) -> str:
        parts = [f"BEGIN_POLYGON\t{def_index}\t{param} 2\n", "BEGIN_WINDING\n"]
        parts.extend("POLYGON_POINT\t%14.9f %14.9f\n" % (lon, lat) for lon, lat in coords)
        parts.append("END_WINDING\n")
        parts.append("END_POLYGON\n")
        return "".join(parts)

    def _segment(self, segment: NetworkSegment) -> str:
        first, *middle, last = segment.coords
        parts = [
            "BEGIN_SEGMENT\t0\t%d\t%d\t%14.9f %14.9f 0.000000\n"
            % (segment.network_type, segment.start_node, first[0], first[1])
        ]
        parts.extend("SHAPE_POINT\t%14.9f %14.9f 0.000000\n" % (lon, lat) for lon, lat in middle)
        parts.append(
            "END_SEGMENT\t%d\t%14.9f %14.9f 0.000000\n" % (segment.end_node, last[0], last[1])
        )
        return "".join(parts)
