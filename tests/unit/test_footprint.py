"""Tests for the footprint-to-model matcher."""

from __future__ import annotations

import math

import pytest

from osm_scenery.classifiers.footprint import (
    FootprintObjectClassifier,
    best_model,
    footprint_dimensions,
)
from osm_scenery.models.emission import ClassificationKind, ObjectPlacement
from osm_scenery.models.inventory import ModelDescriptor
from osm_scenery.utils import geometry
from tests.factories import HOUSE_8X6, HOUSE_10X10, make_config, make_context, polygon, rect

MODELS = (
    ModelDescriptor(HOUSE_10X10, 10.0, 10.0),
    ModelDescriptor(HOUSE_8X6, 8.0, 6.0),
)


def _axis_offset(angle: float, axis: float) -> float:
    """Angular distance between ``angle`` and the line through ``axis``."""
    diff = (angle - axis) % 180.0
    return min(diff, 180.0 - diff)


class TestBestModel:
    def test_square_model_matches_direct(self) -> None:
        match = best_model(MODELS, 9.5, 9.8, 1.0)
        assert match is not None
        assert match.model.path == HOUSE_10X10
        assert match.direct is True
        assert match.distance == pytest.approx(math.hypot(0.5, 0.2))

    def test_swapped_assignment(self) -> None:
        match = best_model([ModelDescriptor("m.obj", 6.0, 10.0)], 9.8, 6.1, 1.0)
        assert match is not None
        assert match.direct is False

    def test_closest_model_wins(self) -> None:
        models = [ModelDescriptor("a.obj", 8.0, 8.0), ModelDescriptor("b.obj", 8.4, 8.1)]
        match = best_model(models, 8.5, 8.0, 1.0)
        assert match is not None
        assert match.model.path == "b.obj"

    def test_nothing_within_tolerance(self) -> None:
        assert best_model(MODELS, 15.0, 4.0, 1.0) is None

    def test_zero_tolerance_needs_exact_size(self) -> None:
        assert best_model(MODELS, 8.0, 6.0, 0.0) is not None
        assert best_model(MODELS, 8.1, 6.0, 0.0) is None


class TestFootprintDimensions:
    def test_rectangle(self) -> None:
        len1, len2 = footprint_dimensions(rect(12.0, 7.0))
        assert len1 == pytest.approx(7.0, abs=0.05)
        assert len2 == pytest.approx(12.0, abs=0.05)


class TestFootprintObjectClassifier:
    def test_places_matching_house(self) -> None:
        context, emitted = make_context()
        feature = polygon(rect(9.8, 9.5), {"building": "house"}, feature_id=11)

        result = FootprintObjectClassifier(context).try_handle(feature)

        assert result is not None
        assert result.kind is ClassificationKind.THREE_D_OBJECT
        assert result.model_ref == HOUSE_10X10
        # direct match: aligned with edge 1 (north-south)
        assert _axis_offset(result.angle, 0.0) < 0.01
        assert len(emitted) == 1
        placement = emitted[0].payload
        assert isinstance(placement, ObjectPlacement)
        assert placement.object_id == context.inventory.object_index(HOUSE_10X10)
        assert emitted[0].category == "polygon_to_object"
        assert emitted[0].feature_id == 11
        center = geometry.centroid(rect(9.8, 9.5))
        assert placement.lon == pytest.approx(center[0])
        assert placement.lat == pytest.approx(center[1])

    def test_swapped_match_aligns_with_edge0(self) -> None:
        context, _ = make_context()
        feature = polygon(rect(8.0, 6.0), {"building": "house"})
        result = FootprintObjectClassifier(context).try_handle(feature)
        assert result is not None
        assert result.model_ref == HOUSE_8X6
        assert _axis_offset(result.angle, 90.0) < 0.01

    def test_flip_is_seeded(self) -> None:
        feature = polygon(rect(9.8, 9.5), {"building": "house"})
        angles = set()
        for seed in range(20):
            context, _ = make_context(seed=seed)
            result = FootprintObjectClassifier(context).try_handle(feature)
            assert result is not None
            angles.add(round(result.angle) % 360)
        assert len(angles) == 2

    def test_unknown_category_declines(self) -> None:
        context, emitted = make_context()
        feature = polygon(rect(9.8, 9.5), {"building": "yes"})
        assert FootprintObjectClassifier(context).try_handle(feature) is None
        assert emitted == []

    def test_no_model_fits(self) -> None:
        context, emitted = make_context()
        feature = polygon(rect(20.0, 14.0), {"building": "house"})
        assert FootprintObjectClassifier(context).try_handle(feature) is None
        assert emitted == []

    def test_large_non_quad_declines(self) -> None:
        context, _ = make_context()
        coords = rect(30.0, 30.0)
        midpoint = geometry.offset_point(coords[0], 90.0, 15.0)
        feature = polygon([coords[0], midpoint, *coords[1:]], {"building": "house"})
        assert feature.perimeter > context.config.max_perimeter_to_simplify_m
        assert FootprintObjectClassifier(context).try_handle(feature) is None

    def test_disabled(self) -> None:
        context, _ = make_context(make_config(generate_obj_buildings=False))
        feature = polygon(rect(9.8, 9.5), {"building": "house"})
        assert FootprintObjectClassifier(context).try_handle(feature) is None
