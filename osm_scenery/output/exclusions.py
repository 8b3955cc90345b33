"""Exclusion regions written in the tile trailer.

With smart exclusions, the envelopes of every generated building are
merged (shapely ``unary_union``) and each merged region excludes default
facades and objects. Without smart exclusions the tile header carries
a single exclusion box instead (see ``DsfTextFormat.header``).
"""

from __future__ import annotations

import logging

from shapely.geometry import box
from shapely.ops import unary_union

from osm_scenery.models.feature import Feature
from osm_scenery.output.dsf_format import (
    BUILDING_EXCLUSIONS,
    Box,
    DsfTextFormat,
)

logger = logging.getLogger("osm_scenery.output.exclusions")


class ExclusionsBuilder:
    """Accumulates generated building footprints for smart exclusions."""

    def __init__(self, text_format: DsfTextFormat | None = None) -> None:
        self._format = text_format or DsfTextFormat()
        self._boxes: list[Box] = []

    def add(self, feature: Feature) -> None:
        lons = [v[0] for v in feature.vertices]
        lats = [v[1] for v in feature.vertices]
        if lons:
            self._boxes.append((min(lons), min(lats), max(lons), max(lats)))

    def __len__(self) -> int:
        return len(self._boxes)

    def merged_boxes(self) -> list[Box]:
        """Envelopes of the union of all building envelopes."""
        if not self._boxes:
            return []
        merged = unary_union([box(*b) for b in self._boxes])
        parts = getattr(merged, "geoms", [merged])
        return [tuple(part.bounds) for part in parts if not part.is_empty]  # type: ignore[misc]

    def export(self) -> str:
        lines = self._format.exclusion_lines(self.merged_boxes(), BUILDING_EXCLUSIONS)
        logger.debug("Smart exclusions | buildings=%d | regions=%d", len(self._boxes), len(lines))
        return "".join(line + "\n" for line in lines)

