"""Lights overlay.

Runs before the classifier chain on every polygon, regardless of which
classifier ends up owning the feature; open ways never get lights.
Polygons matching a light rule get a light object at every N-th vertex
(N from the lights density), nudged off the vertex and with a random
heading. Only lights inside the current tile are written.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from osm_scenery.core.constants import LIGHT_OFFSET_DEG
from osm_scenery.models.emission import EmissionRequest, ObjectPlacement
from osm_scenery.utils import geometry

if TYPE_CHECKING:
    from osm_scenery.classifiers.base import ClassificationContext
    from osm_scenery.models.feature import Feature

logger = logging.getLogger("osm_scenery.classifiers.lights")

LIGHTS_CATEGORY = "light"


class LightsOverlay:
    """Places light objects along lit features."""

    def __init__(self, context: ClassificationContext) -> None:
        self._context = context

    def apply(self, feature: Feature) -> int:
        """Emit lights for ``feature``; returns how many were written."""
        context = self._context
        if not context.config.generate_lights or not feature.is_polygon:
            return 0
        objects = context.inventory.light_objects_for(feature.tags)
        if not objects:
            return 0

        stride = context.config.lights_stride
        written = 0
        for i, (lon, lat) in enumerate(feature.vertices):
            if i % stride:
                continue
            location = (lon + LIGHT_OFFSET_DEG, lat + LIGHT_OFFSET_DEG)
            if not geometry.in_tile(location, context.tile):
                continue
            path = context.rng.choice(objects)
            context.emit(
                EmissionRequest(
                    category=LIGHTS_CATEGORY,
                    payload=ObjectPlacement(
                        object_id=context.inventory.object_index(path),
                        lon=location[0],
                        lat=location[1],
                        bearing=float(context.rng.randrange(360)),
                    ),
                    feature_id=feature.feature_id,
                )
            )
            written += 1
        if written:
            logger.debug("Lights placed | feature_id=%d | count=%d", feature.feature_id, written)
        return written
