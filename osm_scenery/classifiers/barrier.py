"""Barrier (fence/wall) classifier."""

from __future__ import annotations

import logging

from osm_scenery.classifiers.base import Classifier
from osm_scenery.core.constants import BARRIER_HEIGHT_M, BARRIER_TAG, MIN_BARRIER_PERIMETER_M
from osm_scenery.models.emission import Classification, ClassificationKind, FacadePolygon
from osm_scenery.models.feature import Feature
from osm_scenery.models.inventory import SpecialFacadeType

logger = logging.getLogger("osm_scenery.classifiers.barrier")


class BarrierClassifier(Classifier):
    """Long ``barrier=*`` lines and rings become wall or fence facades.

    A qualifying barrier is owned even when the inventory has no barrier
    facade; nothing is written in that case.
    """

    classifier_id = "barrier"

    def try_handle(self, feature: Feature) -> Classification | None:
        if not self.config.generate_fence or feature.partial:
            return None
        barrier = feature.tag(BARRIER_TAG)
        if barrier is None or feature.is_point:
            return None
        if feature.perimeter <= MIN_BARRIER_PERIMETER_M or not feature.is_valid:
            return None

        kind = SpecialFacadeType.WALL if barrier.lower() == "wall" else SpecialFacadeType.FENCE
        facade = self.inventory.pick_special_facade(kind, self.rng)
        if facade is not None:
            shape = feature.normalized()
            self.emit(
                FacadePolygon(
                    facade_id=facade,
                    height=BARRIER_HEIGHT_M,
                    coords=shape.vertices,
                    closed=shape.closed,
                ),
                feature,
            )
        else:
            logger.debug("No %s facade | feature_id=%d", kind.value, feature.feature_id)

        return Classification(
            kind=ClassificationKind.BARRIER,
            classifier_id=self.classifier_id,
            height=BARRIER_HEIGHT_M,
            facade_id=facade,
        )
