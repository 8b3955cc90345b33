"""Cooling tower and chimney classifiers.

Both replace a closed ``man_made`` footprint with a 3D model from the
matching sized-model folder (``objects/cooling_tower/``,
``objects/chimney/``). The footprint is taken as round: its diameter is
``perimeter / pi`` and the model whose larger side is closest to that
diameter wins. Round models have no preferred orientation, so the
bearing is random.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, ClassVar

from osm_scenery.classifiers.base import Classifier
from osm_scenery.core.constants import MAN_MADE_TAG
from osm_scenery.models.emission import Classification, ClassificationKind, ObjectPlacement
from osm_scenery.models.inventory import BuildingCategory, ModelDescriptor

if TYPE_CHECKING:
    from collections.abc import Sequence

    from osm_scenery.models.feature import Feature

logger = logging.getLogger("osm_scenery.classifiers.industrial")


def closest_round_model(models: Sequence[ModelDescriptor], diameter: float) -> ModelDescriptor:
    """Model whose larger side is closest to ``diameter`` (first wins ties)."""
    return min(models, key=lambda m: abs(max(m.width, m.depth) - diameter))


class RoundStructureClassifier(Classifier):
    """Places a sized model for one ``man_made`` value."""

    man_made_value: ClassVar[str] = ""
    category: ClassVar[BuildingCategory]

    def try_handle(self, feature: Feature) -> Classification | None:
        if not self.config.generate_obj or feature.tag(MAN_MADE_TAG) != self.man_made_value:
            return None
        if feature.partial or not feature.is_polygon or not feature.is_valid:
            return None
        models = self.inventory.models_for(self.category)
        if not models:
            logger.debug(
                "No %s models | feature_id=%d", self.category.value, feature.feature_id
            )
            return None

        diameter = feature.perimeter / math.pi
        model = closest_round_model(models, diameter)
        angle = float(self.rng.randrange(360))
        lon, lat = feature.centroid
        self.emit(
            ObjectPlacement(
                object_id=self.inventory.object_index(model.path),
                lon=lon,
                lat=lat,
                bearing=angle,
            ),
            feature,
        )
        return Classification(
            kind=ClassificationKind.THREE_D_OBJECT,
            classifier_id=self.classifier_id,
            model_ref=model.path,
            angle=angle,
        )


class CoolingTowerClassifier(RoundStructureClassifier):
    classifier_id = "cooling_tower"
    man_made_value = "cooling_tower"
    category = BuildingCategory.COOLING_TOWER


class ChimneyClassifier(RoundStructureClassifier):
    classifier_id = "chimney"
    man_made_value = "chimney"
    category = BuildingCategory.CHIMNEY
