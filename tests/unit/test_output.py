"""Tests for DSF2Text rendering, scenery writers and smart exclusions."""

from __future__ import annotations

from pathlib import Path

import pytest

from osm_scenery.core.exceptions import ContractError, EmissionError
from osm_scenery.inventory.catalog import SceneryInventory
from osm_scenery.models.emission import (
    EmissionRequest,
    FacadePolygon,
    ForestPolygon,
    NetworkSegment,
    ObjectPlacement,
    RunwayPayload,
)
from osm_scenery.output.dsf_format import (
    DsfTextFormat,
    intersect_boxes,
    tile_box,
    tile_label,
)
from osm_scenery.output.exclusions import ExclusionsBuilder
from osm_scenery.output.writer import DsfTextFileWriter, MemoryWriter
from tests.factories import line, polygon, square, straight_line

TILE = (8, 47)


def _object(object_id: int = 1) -> EmissionRequest:
    return EmissionRequest("object", ObjectPlacement(object_id, 8.5, 47.3, 90.0), feature_id=4)


# ---------------------------------------------------------------------------
# Tiles and boxes
# ---------------------------------------------------------------------------


class TestTiles:
    @pytest.mark.parametrize(
        ("tile", "label"),
        [
            ((8, 47), "+47+008"),
            ((-122, 37), "+37-122"),
            ((0, -1), "-01+000"),
            (None, "single-pass"),
        ],
    )
    def test_tile_label(self, tile: tuple[int, int] | None, label: str) -> None:
        assert tile_label(tile) == label

    def test_tile_box(self) -> None:
        assert tile_box(TILE) == (8.0, 47.0, 9.0, 48.0)

    def test_intersect_boxes(self) -> None:
        assert intersect_boxes((8.0, 47.0, 9.0, 48.0), (8.5, 46.0, 10.0, 47.5)) == (
            8.5,
            47.0,
            9.0,
            47.5,
        )
        assert intersect_boxes((8.0, 47.0, 9.0, 48.0), (9.5, 47.0, 10.0, 48.0)) is None


# ---------------------------------------------------------------------------
# DSF text format
# ---------------------------------------------------------------------------


class TestDsfTextFormat:
    def test_header(self, inventory: SceneryInventory) -> None:
        header = DsfTextFormat().header(TILE, tile_box(TILE), inventory)
        lines = header.splitlines()
        assert lines[:3] == ["I", "800", "DSF2TEXT"]
        assert "PROPERTY\tsim/west\t8" in lines
        assert "PROPERTY\tsim/north\t48" in lines
        box = "8.000000000/47.000000000/9.000000000/48.000000000"
        assert f"PROPERTY\tsim/exclude_fac\t{box}" in lines
        assert "NETWORK_DEF\tlib/g10/roads.net" in lines
        polygon_defs = [ln.split("\t")[1] for ln in lines if ln.startswith("POLYGON_DEF")]
        object_defs = [ln.split("\t")[1] for ln in lines if ln.startswith("OBJECT_DEF")]
        assert polygon_defs == list(inventory.polygon_defs)
        assert object_defs == list(inventory.object_defs)

    def test_header_without_exclusions(self, inventory: SceneryInventory) -> None:
        header = DsfTextFormat().header(None, None, inventory)
        assert "sim/exclude" not in header
        assert "sim/west" not in header

    def test_facade_polygon(self) -> None:
        coords = square(10.0)
        text = DsfTextFormat().render(EmissionRequest("building", FacadePolygon(3, 9, coords)))
        lines = text.splitlines()
        assert lines[0] == "BEGIN_POLYGON\t3\t9 2"
        assert lines[1] == "BEGIN_WINDING"
        assert sum(1 for ln in lines if ln.startswith("POLYGON_POINT")) == 4
        assert lines[-2:] == ["END_WINDING", "END_POLYGON"]

    def test_forest_polygon(self) -> None:
        request = EmissionRequest("forest", ForestPolygon(8, 255, square(100.0)))
        assert DsfTextFormat().render(request).startswith("BEGIN_POLYGON\t8\t255 2\n")

    def test_object(self) -> None:
        text = DsfTextFormat().render(_object())
        assert text.endswith("\n")
        assert text.split() == ["OBJECT", "1", "8.500000000", "47.300000000", "90.0"]

    def test_segment(self) -> None:
        coords = [(8.5, 47.3), (8.6, 47.3), (8.7, 47.4)]
        text = DsfTextFormat().render(EmissionRequest("road", NetworkSegment(60, 0, 1, coords)))
        lines = text.splitlines()
        assert lines[0].split() == [
            "BEGIN_SEGMENT", "0", "60", "0", "8.500000000", "47.300000000", "0.000000"
        ]
        assert lines[1].startswith("SHAPE_POINT")
        assert lines[2].split() == ["END_SEGMENT", "1", "8.700000000", "47.400000000", "0.000000"]

    def test_runway_comment(self) -> None:
        runway = line(straight_line(800.0), {"aeroway": "runway"}, feature_id=77)
        text = DsfTextFormat().render(EmissionRequest("runway", RunwayPayload(runway, main=True)))
        assert text == "# runway 77 main=True\n"

    def test_preformatted_text(self) -> None:
        assert DsfTextFormat().render(EmissionRequest("raw", "# note")) == "# note\n"

    def test_unknown_payload(self) -> None:
        request = EmissionRequest("odd", object(), feature_id=5)  # type: ignore[arg-type]
        with pytest.raises(ContractError) as exc_info:
            DsfTextFormat().render(request)
        assert exc_info.value.code == "PAYLOAD_UNKNOWN"
        assert exc_info.value.feature_id == 5


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


class TestMemoryWriter:
    def test_collects_requests(self) -> None:
        writer = MemoryWriter()
        writer.init(TILE)
        writer.set_header("HEADER\nNETWORK_DEF\tx\n")
        writer.write(_object())
        writer.complete("PROPERTY\tsim/exclude_obj\t1/2/3/4\n")

        assert writer.tile == TILE
        assert writer.completed
        assert writer.payloads_of(ObjectPlacement) == [_object().payload]
        text = writer.text()
        assert text.index("sim/exclude_obj") < text.index("NETWORK_DEF")
        assert text.rstrip().endswith("90.0")

    def test_header_replaced(self) -> None:
        writer = MemoryWriter()
        writer.set_header("first")
        writer.set_header("second")
        assert writer.header == "second"


class TestDsfTextFileWriter:
    def test_writes_tile_file(self, tmp_path: Path) -> None:
        writer = DsfTextFileWriter(tmp_path / "out")
        writer.init(TILE)
        writer.set_header("I\n800\nDSF2TEXT\n")
        writer.write(_object())
        writer.complete(None)

        assert writer.path == tmp_path / "out" / "+47+008.txt"
        content = writer.path.read_text(encoding="utf-8")
        assert content.startswith("I\n800\nDSF2TEXT\n")
        assert "OBJECT\t1\t" in content

    def test_empty_tile_writes_nothing(self, tmp_path: Path) -> None:
        writer = DsfTextFileWriter(tmp_path)
        writer.init(TILE)
        writer.complete(None)
        assert writer.path is None
        assert list(tmp_path.iterdir()) == []

    def test_io_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x", encoding="utf-8")
        writer = DsfTextFileWriter(blocker)
        writer.init(TILE)
        writer.write(_object())
        with pytest.raises(EmissionError):
            writer.complete(None)


# ---------------------------------------------------------------------------
# Smart exclusions
# ---------------------------------------------------------------------------


class TestExclusionsBuilder:
    def test_overlapping_footprints_merge(self) -> None:
        builder = ExclusionsBuilder()
        first = square(20.0)
        builder.add(polygon(first, {"building": "yes"}))
        origin = (first[0][0] + 0.0001, first[0][1] + 0.0001)
        builder.add(polygon(square(20.0, origin=origin), {"building": "yes"}))
        assert len(builder) == 2
        assert len(builder.merged_boxes()) == 1

    def test_distant_footprints_stay_apart(self) -> None:
        builder = ExclusionsBuilder()
        builder.add(polygon(square(20.0), {"building": "yes"}))
        builder.add(polygon(square(20.0, origin=(8.6, 47.4)), {"building": "yes"}))
        boxes = builder.merged_boxes()
        assert len(boxes) == 2
        lines = builder.export().splitlines()
        assert len(lines) == 4
        prefixes = ("PROPERTY\tsim/exclude_fac", "PROPERTY\tsim/exclude_obj")
        assert all(ln.startswith(prefixes) for ln in lines)

    def test_empty(self) -> None:
        builder = ExclusionsBuilder()
        assert builder.merged_boxes() == []
        assert builder.export() == ""
