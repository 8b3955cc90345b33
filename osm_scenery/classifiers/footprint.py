"""Footprint-to-model matcher (3D objects for small buildings).

A quadrilateral building footprint is measured in the local UTM frame:
``len1`` is the average distance between edges 0 and 2, ``len2`` between
edges 1 and 3. Every sized model of the building category is scored in
both axis assignments::

    direct:  |width - len1|, |depth - len2|
    swapped: |width - len2|, |depth - len1|

A model is eligible only when both differences are within the size
tolerance; the smallest Euclidean distance wins. The object is placed at
the footprint centroid, aligned with edge 1 (direct) or edge 0
(swapped), and flipped by 180 degrees half of the time.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from osm_scenery.classifiers.base import Classifier
from osm_scenery.models.emission import Classification, ClassificationKind, ObjectPlacement
from osm_scenery.models.feature import Feature
from osm_scenery.models.inventory import BuildingCategory, ModelDescriptor
from osm_scenery.utils import geometry

logger = logging.getLogger("osm_scenery.classifiers.footprint")

_QUAD_VERTICES = 4


@dataclass(frozen=True, slots=True)
class FootprintMatch:
    """Best-fitting model and the axis assignment that produced it."""

    model: ModelDescriptor
    distance: float
    direct: bool


def footprint_dimensions(vertices: list[tuple[float, float]]) -> tuple[float, float]:
    """Return ``(len1, len2)`` in metres for a 4-vertex footprint."""
    metric = geometry.to_metric(vertices)
    edges = geometry.edges(metric, closed=True)
    len1 = geometry.avg_distance(edges[0], edges[2])
    len2 = geometry.avg_distance(edges[1], edges[3])
    return len1, len2


def best_model(
    models: tuple[ModelDescriptor, ...] | list[ModelDescriptor],
    len1: float,
    len2: float,
    tolerance: float,
) -> FootprintMatch | None:
    """Select the closest model within ``tolerance``.

    Ties between the two axis assignments keep the direct one; ties
    between models keep the first listed.
    """
    best: FootprintMatch | None = None
    for model in models:
        dist1 = geometry.fit_with_distance(model.width, model.depth, tolerance, len1, len2)
        dist2 = geometry.fit_with_distance(model.width, model.depth, tolerance, len2, len1)
        dist = min(dist1, dist2)
        if math.isinf(dist):
            continue
        if best is None or dist < best.distance:
            direct = dist1 <= dist2 or math.isclose(dist1, dist2)
            best = FootprintMatch(model=model, distance=dist, direct=direct)
    return best


class FootprintObjectClassifier(Classifier):
    """Replaces small building footprints with matching sized 3D models."""

    classifier_id = "polygon_to_object"

    def try_handle(self, feature: Feature) -> Classification | None:
        if not self.config.generate_obj_buildings or not feature.is_polygon:
            return None
        if not feature.is_valid:
            return None

        models = self.inventory.models_for(BuildingCategory.from_tags(feature.tags))
        if not models:
            return None

        footprint = feature.normalized()
        if not footprint.is_simple or footprint.vertex_count != _QUAD_VERTICES:
            if footprint.perimeter > self.config.max_perimeter_to_simplify_m:
                return None
            footprint = footprint.simplified()
        if footprint.vertex_count != _QUAD_VERTICES:
            return None

        len1, len2 = footprint_dimensions(footprint.vertices)
        match = best_model(models, len1, len2, self.config.obj_size_tolerance_m)
        if match is None:
            logger.debug(
                "No model fits footprint | feature_id=%d | size=%.1fx%.1f",
                feature.feature_id,
                len1,
                len2,
            )
            return None

        vertices = footprint.vertices
        edge0 = (vertices[0], vertices[1])
        edge1 = (vertices[1], vertices[2])
        start, end = edge1 if match.direct else edge0
        angle = geometry.true_bearing(start, end)
        if self.rng.random() >= 0.5:
            angle = (angle + 180.0) % 360.0

        lon, lat = footprint.centroid
        self.emit(
            ObjectPlacement(
                object_id=self.inventory.object_index(match.model.path),
                lon=lon,
                lat=lat,
                bearing=angle,
            ),
            feature,
        )
        return Classification(
            kind=ClassificationKind.THREE_D_OBJECT,
            classifier_id=self.classifier_id,
            model_ref=match.model.path,
            angle=angle,
        )
