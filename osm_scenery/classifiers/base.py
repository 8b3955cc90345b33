"""Classifier abstract base class and the per-tile classification context.

Every classifier implements the same contract::

    classification = classifier.try_handle(feature)

``try_handle`` returns ``None`` to decline (the chain moves on) or a
``Classification`` after emitting its output through
``context.emit``. Classifiers never inspect each other; ordering is the
chain's job.

All per-tile mutable state (random source, node renumbering, smart
exclusions) lives in ``ClassificationContext``. One context belongs to
exactly one tile; only the inventory is shared between tiles.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from osm_scenery.models.emission import EmissionRequest, Payload

if TYPE_CHECKING:
    import random

    from osm_scenery.core.config import GenerationConfig
    from osm_scenery.inventory.catalog import SceneryInventory
    from osm_scenery.models.emission import Classification
    from osm_scenery.models.feature import Feature
    from osm_scenery.output.exclusions import ExclusionsBuilder

logger = logging.getLogger("osm_scenery.classifiers.base")

Coord = tuple[float, float]


class NodeIdRenumberer:
    """Assigns compact sequential ids to network end points.

    End points with identical coordinates share one id, which is what
    connects consecutive road/rail segments into a network.
    """

    def __init__(self) -> None:
        self._ids: dict[Coord, int] = {}

    def id_for(self, coord: Coord) -> int:
        node_id = self._ids.get(coord)
        if node_id is None:
            node_id = len(self._ids)
            self._ids[coord] = node_id
        return node_id

    def __len__(self) -> int:
        return len(self._ids)


@dataclass
class ClassificationContext:
    """Everything a classifier needs for one tile.

    Attributes:
        config: Generation options.
        inventory: Shared read-only content inventory.
        rng: Injected random source (seed it for reproducible tiles).
        emit: Sink for emission requests.
        tile: Current tile origin, ``None`` in single-pass mode.
        nodes: Network end-point renumberer.
        exclusions: Smart-exclusions accumulator, if enabled.
    """

    config: GenerationConfig
    inventory: SceneryInventory
    rng: random.Random
    emit: Callable[[EmissionRequest], None]
    tile: tuple[int, int] | None = None
    nodes: NodeIdRenumberer = field(default_factory=NodeIdRenumberer)
    exclusions: ExclusionsBuilder | None = None


class Classifier(abc.ABC):
    """Abstract classifier with first-refusal semantics.

    Subclasses set ``classifier_id`` (the statistics category) and
    implement ``try_handle``.
    """

    classifier_id: ClassVar[str] = ""

    def __init__(self, context: ClassificationContext) -> None:
        self._context = context

    @property
    def context(self) -> ClassificationContext:
        return self._context

    @property
    def config(self) -> GenerationConfig:
        return self._context.config

    @property
    def inventory(self) -> SceneryInventory:
        return self._context.inventory

    @property
    def rng(self) -> random.Random:
        return self._context.rng

    @abc.abstractmethod
    def try_handle(self, feature: Feature) -> Classification | None:
        """Classify ``feature`` or decline with ``None``.

        Must emit its output before returning a classification.
        """

    def translation_complete(self) -> None:  # noqa: B027
        """Called once when the feature stream of the tile ends."""

    def emit(self, payload: Payload, feature: Feature | None = None) -> None:
        self._context.emit(
            EmissionRequest(
                category=self.classifier_id,
                payload=payload,
                feature_id=feature.feature_id if feature is not None else None,
            )
        )
