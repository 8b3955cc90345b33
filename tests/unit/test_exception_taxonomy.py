"""Tests for the scenery exception taxonomy.

Covers category resolution, default stage/code, retryability and the
structured error payload.
"""

from __future__ import annotations

import pytest

from osm_scenery.core.config import ConfigValidationError
from osm_scenery.core.exceptions import (
    ContractError,
    EmissionError,
    GeometryError,
    InventoryError,
    PermanentError,
    SceneryError,
    TileProcessingError,
    TransientError,
    ValidationError,
)
from osm_scenery.providers.base import ElevationProviderError


class TestCategories:
    @pytest.mark.parametrize(
        ("exc", "category", "retryable"),
        [
            (ValidationError("bad"), "validation", False),
            (TransientError("later"), "transient", True),
            (PermanentError("never"), "permanent", False),
            (ContractError("drift"), "contract", False),
            (GeometryError("degenerate"), "validation", False),
            (InventoryError("missing"), "validation", False),
            (EmissionError("io"), "permanent", False),
            (TileProcessingError("stream"), "permanent", False),
            (ElevationProviderError("open_elevation", "timeout"), "transient", True),
        ],
    )
    def test_category_and_retryable(
        self, exc: SceneryError, category: str, retryable: bool
    ) -> None:
        assert exc.category == category
        assert exc.retryable is retryable

    def test_base_category_follows_retryable(self) -> None:
        assert SceneryError("x", retryable=True).category == "transient"
        assert SceneryError("x").category == "permanent"

    def test_config_error_is_validation(self) -> None:
        exc = ConfigValidationError("LEVEL_HEIGHT_M", 0, "must be > 0")
        assert isinstance(exc, ValidationError)
        assert "LEVEL_HEIGHT_M=0" in exc.message


class TestDefaults:
    def test_default_stage_and_code(self) -> None:
        exc = EmissionError("cannot write")
        assert exc.stage == "emit"
        assert exc.code == "EMISSION_FAILED"

    def test_explicit_overrides(self) -> None:
        exc = ContractError("drift", stage="emit", code="PAYLOAD_UNKNOWN", feature_id=7)
        assert exc.stage == "emit"
        assert exc.code == "PAYLOAD_UNKNOWN"
        assert exc.feature_id == 7

    def test_provider_error_str(self) -> None:
        exc = ElevationProviderError("open_elevation", "timeout")
        assert str(exc) == "[open_elevation] timeout"
        assert exc.provider == "open_elevation"
        assert exc.code == "ELEVATION_LOOKUP_FAILED"


class TestErrorDict:
    def test_stable_keys(self) -> None:
        payload = TileProcessingError("stream broke", feature_id=12).to_error_dict()
        assert payload == {
            "category": "permanent",
            "code": "TILE_FAILED",
            "stage": "tile",
            "message": "stream broke",
            "retryable": False,
            "feature_id": 12,
        }
