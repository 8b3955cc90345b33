"""Tile-level drivers: one tile, or many tiles in parallel.

``translate_tile`` pushes one tile's nodes and features through a fresh
``SceneryTranslator``. ``run_tiles`` fans out independent tiles over a
thread pool. Tiles share only the read-only inventory and configuration;
every tile gets its own translator, random source, elevation service
and writer.

A failure of a tile's feature stream is structural: ``translate_tile``
raises ``TileProcessingError``, and ``run_tiles`` records it as a failed
tile summary without stopping the other tiles.
"""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from osm_scenery.core.exceptions import SceneryError, TileProcessingError
from osm_scenery.models.summary import STATUS_FAILED, TileSummary
from osm_scenery.orchestrators.translator import SceneryTranslator
from osm_scenery.output.dsf_format import Box, tile_label
from osm_scenery.providers.elevation_service import ElevationService
from osm_scenery.providers.factory import get_elevation_provider

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from osm_scenery.core.config import GenerationConfig
    from osm_scenery.inventory.catalog import SceneryInventory
    from osm_scenery.models.feature import Feature
    from osm_scenery.output.writer import SceneryWriter
    from osm_scenery.providers.base import ElevationProvider

logger = logging.getLogger("osm_scenery.orchestrators.tile_pipeline")

DEFAULT_MAX_WORKERS = 4


@dataclass
class TileJob:
    """Input of one tile.

    Attributes:
        tile: Tile origin ``(lon, lat)``; ``None`` for single-pass runs.
        writer: Output sink for the tile.
        features: Ways and polygons, in input order.
        nodes: Tagged nodes, in input order.
        bbox: Input data extent, if known.
    """

    tile: tuple[int, int] | None
    writer: SceneryWriter
    features: Iterable[Feature] = field(default_factory=list)
    nodes: Iterable[Feature] = field(default_factory=list)
    bbox: Box | None = None


def tile_rng(seed: int | str | None, tile: tuple[int, int] | None) -> random.Random:
    """Per-tile random source; identical seeds give identical tiles."""
    if seed is None:
        return random.Random()
    return random.Random(f"{seed}:{tile_label(tile)}")


def translate_tile(
    job: TileJob,
    config: GenerationConfig,
    inventory: SceneryInventory,
    *,
    seed: int | str | None = None,
    elevation_provider: ElevationProvider | None = None,
) -> TileSummary:
    """Translate one tile.

    Raises:
        TileProcessingError: If the node or feature stream fails.
    """
    elevation: ElevationService | None = None
    if config.generate_airfields and config.airfield_try_get_elevation:
        provider = elevation_provider or get_elevation_provider(
            config.elevation_provider, config.elevation_api_url
        )
        elevation = ElevationService(provider)

    translator = SceneryTranslator(
        job.writer,
        job.tile,
        config,
        inventory,
        rng=tile_rng(seed, job.tile),
        elevation=elevation,
    )
    translator.init()
    translator.process_bounding_box(job.bbox)
    try:
        for node in job.nodes:
            translator.process_node(node)
        for feature in job.features:
            translator.process_feature(feature)
    except Exception as exc:
        if elevation is not None:
            elevation.finish()
        msg = f"Feature stream failed for tile {tile_label(job.tile)}: {exc}"
        raise TileProcessingError(msg) from exc
    return translator.complete()


def run_tiles(
    jobs: Sequence[TileJob],
    config: GenerationConfig,
    inventory: SceneryInventory,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    seed: int | str | None = None,
    elevation_provider: ElevationProvider | None = None,
) -> list[TileSummary]:
    """Translate tiles in parallel; summaries come back in job order."""
    if not jobs:
        return []

    def _run(job: TileJob) -> TileSummary:
        try:
            return translate_tile(
                job,
                config,
                inventory,
                seed=seed,
                elevation_provider=elevation_provider,
            )
        except SceneryError as exc:
            logger.error(
                "Tile failed | tile=%s | code=%s | error=%s",
                tile_label(job.tile),
                exc.code,
                exc.message,
            )
            return TileSummary(
                tile=tile_label(job.tile),
                status=STATUS_FAILED,
                errors=[exc.to_error_dict()],
            )

    workers = max(1, min(max_workers, len(jobs)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tile") as pool:
        summaries = list(pool.map(_run, jobs))

    failed = sum(1 for s in summaries if s.status == STATUS_FAILED)
    logger.info("Tiles translated | total=%d | failed=%d", len(summaries), failed)
    return summaries
