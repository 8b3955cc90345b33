"""Per-tile scenery translator.

One ``SceneryTranslator`` owns everything mutable for one tile: the
classifier chain, the lights overlay, the airfield assembler, the
statistics and the writer. Features must be fed strictly in input
order from a single thread; parallelism happens across tiles (see
``tile_pipeline``), never inside one translator.

Lifecycle::

    translator.init()
    translator.process_bounding_box(bbox)      # optional, any time
    translator.process_node(node)              # tagged nodes
    translator.process_feature(feature)        # ways / polygons
    summary = translator.complete()
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from shapely.errors import GEOSException

from osm_scenery.airfields.binder import AIRFIELD_CATEGORY, RUNWAY_CATEGORY, AirfieldAssembler
from osm_scenery.classifiers.base import ClassificationContext
from osm_scenery.classifiers.chain import ClassifierChain
from osm_scenery.classifiers.lights import LIGHTS_CATEGORY, LightsOverlay
from osm_scenery.classifiers.objects import ObjectRuleClassifier
from osm_scenery.core.exceptions import EmissionError, SceneryError
from osm_scenery.models.emission import Classification
from osm_scenery.models.summary import GenerationStats, TileSummary
from osm_scenery.output.dsf_format import (
    Box,
    DsfTextFormat,
    intersect_boxes,
    tile_box,
    tile_label,
)
from osm_scenery.output.exclusions import ExclusionsBuilder
from osm_scenery.utils import geometry

if TYPE_CHECKING:
    from osm_scenery.core.config import GenerationConfig
    from osm_scenery.inventory.catalog import SceneryInventory
    from osm_scenery.models.emission import EmissionRequest
    from osm_scenery.models.feature import Feature
    from osm_scenery.output.writer import SceneryWriter
    from osm_scenery.providers.elevation_service import ElevationService

logger = logging.getLogger("osm_scenery.orchestrators.translator")

# Categories counted on write; chain classifiers are counted by the chain
_WRITE_COUNTED = frozenset({LIGHTS_CATEGORY, AIRFIELD_CATEGORY, RUNWAY_CATEGORY})


class SceneryTranslator:
    """Translates the feature stream of one tile into emission requests.

    Args:
        writer: Output sink of this tile.
        tile: Tile origin ``(lon, lat)``; ``None`` in single-pass mode.
        config: Generation options.
        inventory: Shared read-only content inventory.
        rng: Random source; pass a seeded ``random.Random`` for
            reproducible output.
        elevation: Elevation service for airfields without ``ele``.
        text_format: DSF text formatter used for the header.
    """

    def __init__(
        self,
        writer: SceneryWriter,
        tile: tuple[int, int] | None,
        config: GenerationConfig,
        inventory: SceneryInventory,
        *,
        rng: random.Random | None = None,
        elevation: ElevationService | None = None,
        text_format: DsfTextFormat | None = None,
    ) -> None:
        self._writer = writer
        self._tile = tile
        self._config = config
        self._inventory = inventory
        self._format = text_format or DsfTextFormat()
        self.stats = GenerationStats()
        self.context = ClassificationContext(
            config=config,
            inventory=inventory,
            rng=rng or random.Random(),
            emit=self._write,
            tile=tile,
            exclusions=ExclusionsBuilder(self._format) if config.smart_exclusions else None,
        )
        self.chain = ClassifierChain.default(self.context, self.stats)
        self.lights = LightsOverlay(self.context)
        self.airfields = AirfieldAssembler(config, self._write, elevation)
        self._node_objects = ObjectRuleClassifier(self.context)

    @property
    def tile(self) -> tuple[int, int] | None:
        return self._tile

    # ------------------------------------------------------------------
    # Stream events
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Start the tile and write the initial header."""
        self._writer.init(self._tile)
        self._writer.set_header(self._header(self._default_exclusion_box()))

    def process_bounding_box(self, bbox: Box | None) -> None:
        """Narrow the header exclusion box to the input data extent."""
        if bbox is None or not self._config.exclusions_from_input:
            return
        if self._config.smart_exclusions:
            return
        box = bbox if self._tile is None else intersect_boxes(tile_box(self._tile), bbox)
        self._writer.set_header(self._header(box))

    def process_feature(self, feature: Feature) -> Classification | None:
        """Classify one way/polygon.

        Returns:
            The chain result, or ``None`` when the airfield assembler
            took the feature for deferred binding.
        """
        self.stats.features += 1
        if not feature.coords:
            self.stats.unclassified += 1
            return Classification.unclassified()
        if self.airfields.handle_feature(feature):
            return None
        normalized = feature.normalized()
        self.lights.apply(normalized)
        return self.chain.classify(normalized)

    def process_node(self, node: Feature) -> Classification | None:
        """Handle a tagged node (airfield parts or rule objects)."""
        self.stats.features += 1
        if self.airfields.handle_node(node):
            return None
        if not self._config.generate_obj or not node.coords:
            return None
        if not self._config.single_pass and not geometry.in_tile(node.coords[0], self._tile):
            return None
        try:
            result = self._node_objects.try_handle(node)
        except (SceneryError, ValueError, ArithmeticError, GEOSException):
            logger.warning(
                "Node object failed | feature_id=%d", node.feature_id, exc_info=True
            )
            return None
        if result is not None:
            self.stats.add(self._node_objects.classifier_id)
        return result

    def complete(self) -> TileSummary:
        """End of stream: flush classifiers, bind airfields, close the writer."""
        self.chain.complete()
        airfield_count = self.airfields.complete()
        exclusions = self.context.exclusions
        self._writer.complete(exclusions.export() if exclusions is not None else None)

        summary = TileSummary.from_stats(
            tile_label(self._tile), self.stats, airfields=airfield_count
        )
        logger.info(
            "Tile translated | tile=%s | features=%d | generated=%s",
            summary.tile,
            summary.features,
            summary.summary_text(),
        )
        return summary

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _default_exclusion_box(self) -> Box | None:
        if self._config.smart_exclusions or self._tile is None:
            return None
        return tile_box(self._tile)

    def _header(self, exclusion_box: Box | None) -> str:
        return self._format.header(self._tile, exclusion_box, self._inventory)

    def _write(self, request: EmissionRequest) -> None:
        try:
            self._writer.write(request)
        except EmissionError:
            logger.warning(
                "Emission failed, skipping | category=%s | feature_id=%s",
                request.category,
                request.feature_id,
                exc_info=True,
            )
            self.stats.skipped += 1
            return
        if request.category in _WRITE_COUNTED:
            self.stats.add(request.category)
