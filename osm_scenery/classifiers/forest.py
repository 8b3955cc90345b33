"""Forest polygon classifier."""

from __future__ import annotations

from osm_scenery.classifiers.base import Classifier
from osm_scenery.core.constants import FOREST_DENSITY
from osm_scenery.models.emission import Classification, ClassificationKind, ForestPolygon
from osm_scenery.models.feature import Feature
from osm_scenery.utils import tags as tag_utils


class ForestClassifier(Classifier):
    """``landuse=forest`` / ``natural=wood`` areas become forest polygons."""

    classifier_id = "forest"

    def try_handle(self, feature: Feature) -> Classification | None:
        if not self.config.generate_forests or not feature.is_polygon:
            return None
        if not tag_utils.is_forest(feature.tags) or not feature.is_valid:
            return None
        forest = self.inventory.pick_forest(self.rng)
        if forest is None:
            return None
        self.emit(
            ForestPolygon(
                forest_id=forest,
                density=FOREST_DENSITY,
                coords=feature.normalized().vertices,
            ),
            feature,
        )
        return Classification(kind=ClassificationKind.FOREST, classifier_id=self.classifier_id)
