"""Road, railway and power line classifiers.

All three emit network segments: the end points are renumbered through
the tile's shared ``NodeIdRenumberer`` so that ways meeting at the same
coordinate share a network node; inner vertices become shape points.
"""

from __future__ import annotations

import abc

from osm_scenery.classifiers.base import Classifier
from osm_scenery.core.constants import HIGHWAY_TAG, POWERLINE_TYPE, RAIL_TYPE, ROAD_TYPES
from osm_scenery.models.emission import Classification, ClassificationKind, NetworkSegment
from osm_scenery.models.feature import Feature
from osm_scenery.utils import tags as tag_utils


class NetworkClassifier(Classifier):
    """Base for line classifiers writing network segments."""

    kind: ClassificationKind

    @abc.abstractmethod
    def enabled(self) -> bool:
        """Whether this network type is generated."""

    @abc.abstractmethod
    def matches(self, feature: Feature) -> bool:
        """Whether the tags select this network type."""

    @abc.abstractmethod
    def network_type(self, feature: Feature) -> int:
        """Network definition subtype of the feature."""

    def try_handle(self, feature: Feature) -> Classification | None:
        if not self.enabled() or feature.closed or not self.matches(feature):
            return None
        if not feature.is_valid:
            return None
        coords = list(feature.coords)
        nodes = self.context.nodes
        self.emit(
            NetworkSegment(
                network_type=self.network_type(feature),
                start_node=nodes.id_for(coords[0]),
                end_node=nodes.id_for(coords[-1]),
                coords=coords,
            ),
            feature,
        )
        return Classification(kind=self.kind, classifier_id=self.classifier_id)


class RoadClassifier(NetworkClassifier):
    classifier_id = "road"
    kind = ClassificationKind.ROAD

    def enabled(self) -> bool:
        return self.config.generate_roads

    def matches(self, feature: Feature) -> bool:
        return tag_utils.is_road(feature.tags)

    def network_type(self, feature: Feature) -> int:
        return ROAD_TYPES[feature.tags[HIGHWAY_TAG]]


class RailClassifier(NetworkClassifier):
    classifier_id = "railway"
    kind = ClassificationKind.RAIL

    def enabled(self) -> bool:
        return self.config.generate_railways

    def matches(self, feature: Feature) -> bool:
        return tag_utils.is_railway(feature.tags)

    def network_type(self, feature: Feature) -> int:
        return RAIL_TYPE


class PowerlineClassifier(NetworkClassifier):
    classifier_id = "powerline"
    kind = ClassificationKind.POWERLINE

    def enabled(self) -> bool:
        return self.config.generate_powerlines

    def matches(self, feature: Feature) -> bool:
        return tag_utils.is_powerline(feature.tags)

    def network_type(self, feature: Feature) -> int:
        return POWERLINE_TYPE
