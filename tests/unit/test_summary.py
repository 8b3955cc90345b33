"""Tests for generation statistics and tile summaries."""

from __future__ import annotations

import json

from osm_scenery.models.summary import (
    STATUS_FAILED,
    STATUS_SUCCESS,
    GenerationStats,
    TileSummary,
)


class TestGenerationStats:
    def test_counts(self) -> None:
        stats = GenerationStats()
        stats.add("building")
        stats.add("building")
        stats.add("road", 3)
        assert stats.get("building") == 2
        assert stats.get("forest") == 0
        assert stats.counts == {"building": 2, "road": 3}
        assert stats.total == 5
        assert not stats.is_empty()

    def test_empty(self) -> None:
        stats = GenerationStats()
        stats.unclassified = 4
        assert stats.is_empty()
        assert stats.total == 0


class TestTileSummary:
    def test_from_stats(self) -> None:
        stats = GenerationStats()
        stats.add("road", 2)
        stats.add("building")
        stats.features = 5
        stats.unclassified = 1
        stats.skipped = 1

        summary = TileSummary.from_stats("+47+008", stats, airfields=2)

        assert summary.status == STATUS_SUCCESS
        assert summary.features == 5
        assert summary.airfields == 2
        assert summary.generated
        assert summary.summary_text() == "building: 1, road: 2"

    def test_nothing_generated(self) -> None:
        summary = TileSummary(tile="+47+008")
        assert not summary.generated
        assert summary.summary_text() == "nothing generated"

    def test_to_json(self) -> None:
        summary = TileSummary(
            tile="+47+008",
            status=STATUS_FAILED,
            errors=[{"code": "TILE_FAILED", "stage": "tile"}],
        )
        data = json.loads(summary.to_json())
        assert data["tile"] == "+47+008"
        assert data["status"] == "failed"
        assert data["errors"] == [{"code": "TILE_FAILED", "stage": "tile"}]
        assert data["counts"] == {}
