"""Building facade classifier."""

from __future__ import annotations

import logging

from osm_scenery.classifiers import heuristics
from osm_scenery.classifiers.base import Classifier
from osm_scenery.core.constants import BUILDING_MIN_VECTORS, MIN_EMITTED_AREA_M2
from osm_scenery.models.emission import Classification, ClassificationKind, FacadePolygon
from osm_scenery.models.feature import Feature

logger = logging.getLogger("osm_scenery.classifiers.building")


class BuildingClassifier(Classifier):
    """Turns building footprints into facade polygons.

    Non-simple footprints are simplified first when shape simplification
    is enabled. Declines when no facade can be picked for the building.
    """

    classifier_id = "building"

    def try_handle(self, feature: Feature) -> Classification | None:
        if not heuristics.qualifies_as_building(feature, self.config):
            return None

        footprint = feature
        if self.config.simplify_shapes and not footprint.is_simple:
            footprint = footprint.simplified()

        height = heuristics.compute_height(footprint, self.config, self.rng)
        facade = heuristics.compute_facade(
            footprint, height, self.config, self.inventory, self.rng
        )
        if facade is None:
            logger.debug("No facade for building | feature_id=%d", feature.feature_id)
            return None

        if footprint.area > MIN_EMITTED_AREA_M2 and footprint.vertex_count > BUILDING_MIN_VECTORS:
            self.emit(
                FacadePolygon(
                    facade_id=facade,
                    height=height,
                    coords=footprint.normalized().vertices,
                ),
                feature,
            )
            if self.context.exclusions is not None:
                self.context.exclusions.add(footprint)

        return Classification(
            kind=ClassificationKind.BUILDING,
            classifier_id=self.classifier_id,
            height=height,
            facade_id=facade,
        )
