"""Rule-driven 3D object placement for polygons and tagged nodes."""

from __future__ import annotations

import logging

from osm_scenery.classifiers.base import Classifier
from osm_scenery.models.emission import Classification, ClassificationKind, ObjectPlacement
from osm_scenery.models.feature import Feature
from osm_scenery.utils import geometry

logger = logging.getLogger("osm_scenery.classifiers.objects")


class ObjectRuleClassifier(Classifier):
    """Places an object from the first matching object rule.

    Polygons get the object at their centroid (area limits of the rule
    apply); nodes get it at their position. The bearing is random, or
    follows the longest edge when the rule disables random angles.
    """

    classifier_id = "object"

    def try_handle(self, feature: Feature) -> Classification | None:
        if not self.config.generate_obj or not feature.coords:
            return None
        if feature.is_point:
            return self._place(
                feature,
                feature.coords[0],
                area=None,
                kind=ClassificationKind.POINT_OBJECT,
            )
        if feature.partial or not feature.is_polygon or not feature.is_valid:
            return None

        footprint = feature
        if self.config.simplify_shapes and not footprint.is_simple:
            footprint = footprint.simplified()
        return self._place(
            footprint,
            footprint.centroid,
            area=footprint.area,
            kind=ClassificationKind.THREE_D_OBJECT,
        )

    def _place(
        self,
        feature: Feature,
        position: tuple[float, float],
        *,
        area: float | None,
        kind: ClassificationKind,
    ) -> Classification | None:
        rule = self.inventory.object_rule_for(feature.tags, area)
        if rule is None:
            return None
        path = self.rng.choice(rule.objects)
        if rule.random_angle or feature.is_point:
            angle = float(self.rng.randrange(360))
        else:
            angle = _longest_edge_bearing(feature)

        self.emit(
            ObjectPlacement(
                object_id=self.inventory.object_index(path),
                lon=position[0],
                lat=position[1],
                bearing=angle,
            ),
            feature,
        )
        return Classification(
            kind=kind,
            classifier_id=self.classifier_id,
            model_ref=path,
            angle=angle,
        )


def _longest_edge_bearing(feature: Feature) -> float:
    pairs = geometry.edges(feature.vertices, closed=feature.closed)
    index = max(range(len(pairs)), key=feature.edge_lengths.__getitem__)
    start, end = pairs[index]
    return geometry.true_bearing(start, end)
