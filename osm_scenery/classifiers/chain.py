"""First-match-wins classifier chain.

The chain is an explicit ordered list of classifiers. Each gets first
refusal on a feature; the first one returning a classification owns the
feature and nothing after it runs. Features nobody accepts are counted
as unclassified and dropped.

A classifier that raises a ``SceneryError``, ``ValueError``,
``ArithmeticError`` or shapely ``GEOSException`` is logged and treated
as a decline, so one bad feature never aborts the tile.

Default order::

    barrier -> road -> railway -> powerline -> cooling_tower -> chimney
        -> polygon_to_object -> object -> building -> forest
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shapely.errors import GEOSException

from osm_scenery.classifiers.barrier import BarrierClassifier
from osm_scenery.classifiers.building import BuildingClassifier
from osm_scenery.classifiers.footprint import FootprintObjectClassifier
from osm_scenery.classifiers.forest import ForestClassifier
from osm_scenery.classifiers.industrial import ChimneyClassifier, CoolingTowerClassifier
from osm_scenery.classifiers.network import PowerlineClassifier, RailClassifier, RoadClassifier
from osm_scenery.classifiers.objects import ObjectRuleClassifier
from osm_scenery.core.exceptions import SceneryError
from osm_scenery.models.emission import Classification

if TYPE_CHECKING:
    from collections.abc import Sequence

    from osm_scenery.classifiers.base import ClassificationContext, Classifier
    from osm_scenery.models.feature import Feature
    from osm_scenery.models.summary import GenerationStats

logger = logging.getLogger("osm_scenery.classifiers.chain")

DEFAULT_ORDER: tuple[type[Classifier], ...] = (
    BarrierClassifier,
    RoadClassifier,
    RailClassifier,
    PowerlineClassifier,
    CoolingTowerClassifier,
    ChimneyClassifier,
    FootprintObjectClassifier,
    ObjectRuleClassifier,
    BuildingClassifier,
    ForestClassifier,
)


class ClassifierChain:
    """Ordered classifiers evaluated with first-match-wins semantics."""

    def __init__(self, classifiers: Sequence[Classifier], stats: GenerationStats) -> None:
        self._classifiers = tuple(classifiers)
        self._stats = stats

    @classmethod
    def default(cls, context: ClassificationContext, stats: GenerationStats) -> ClassifierChain:
        """Build the standard chain for one tile."""
        return cls([factory(context) for factory in DEFAULT_ORDER], stats)

    @property
    def classifiers(self) -> tuple[Classifier, ...]:
        return self._classifiers

    def get(self, classifier_id: str) -> Classifier | None:
        for classifier in self._classifiers:
            if classifier.classifier_id == classifier_id:
                return classifier
        return None

    def classify(self, feature: Feature) -> Classification:
        """Run the chain on one feature.

        Returns:
            The owning classifier's result, or ``UNCLASSIFIED``.
        """
        for classifier in self._classifiers:
            try:
                result = classifier.try_handle(feature)
            except (SceneryError, ValueError, ArithmeticError, GEOSException):
                logger.warning(
                    "Classifier failed, declining | classifier=%s | feature_id=%d",
                    classifier.classifier_id,
                    feature.feature_id,
                    exc_info=True,
                )
                continue
            if result is not None and result.is_classified:
                self._stats.add(classifier.classifier_id)
                return result
        self._stats.unclassified += 1
        return Classification.unclassified()

    def complete(self) -> None:
        """Signal end of stream to every classifier."""
        for classifier in self._classifiers:
            classifier.translation_complete()
