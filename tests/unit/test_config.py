"""Tests for generation configuration.

Covers:
- Default values
- Loading from environment variables
- Boolean and list parsing
- Fail-fast range validation
"""

from __future__ import annotations

import os
from dataclasses import replace
from unittest.mock import patch

import pytest

from osm_scenery.core.config import ConfigValidationError, GenerationConfig, validate_config


class TestGenerationConfigDefaults:
    """Verify default configuration values."""

    def test_generation_switches(self) -> None:
        cfg = GenerationConfig()
        assert cfg.generate_buildings is True
        assert cfg.generate_fence is True
        assert cfg.generate_lights is False
        assert cfg.smart_exclusions is False

    def test_height_bands(self) -> None:
        cfg = GenerationConfig()
        assert (cfg.residential_min_height, cfg.residential_max_height) == (3, 12)
        assert (cfg.building_min_height, cfg.building_max_height) == (6, 30)
        assert cfg.level_height_m == 3.0

    def test_airfield_defaults(self) -> None:
        cfg = GenerationConfig()
        assert cfg.airfield_ignore_list == ()
        assert cfg.airfield_single_as_main is True
        assert cfg.airfield_point_radius_m == 3000.0

    def test_lights_stride(self) -> None:
        assert GenerationConfig().lights_stride == 10
        assert GenerationConfig(lights_density=1).lights_stride == 5
        assert GenerationConfig(lights_density=2).lights_stride == 3

    def test_frozen(self) -> None:
        cfg = GenerationConfig()
        with pytest.raises(AttributeError):
            cfg.generate_buildings = False  # type: ignore[misc]


class TestGenerationConfigFromEnv:
    """Verify loading from environment variables."""

    def test_loads_from_environment(self) -> None:
        env = {
            "GENERATE_BUILDINGS": "false",
            "GENERATE_LIGHTS": "yes",
            "LEVEL_HEIGHT_M": "2.5",
            "RESIDENTIAL_MAX_HEIGHT": "15",
            "LIGHTS_DENSITY": "2",
            "AIRFIELD_IGNORE_LIST": " lszh, lsgg ,,",
            "ELEVATION_API_URL": "http://localhost:8080",
        }
        with patch.dict(os.environ, env, clear=False):
            cfg = GenerationConfig.from_env()

        assert cfg.generate_buildings is False
        assert cfg.generate_lights is True
        assert cfg.level_height_m == 2.5
        assert cfg.residential_max_height == 15
        assert cfg.lights_density == 2
        assert cfg.airfield_ignore_list == ("LSZH", "LSGG")
        assert cfg.elevation_api_url == "http://localhost:8080"

    def test_defaults_when_env_missing(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            cfg = GenerationConfig.from_env()
        assert cfg == GenerationConfig()

    def test_blank_boolean_uses_default(self) -> None:
        with patch.dict(os.environ, {"GENERATE_FENCE": "  "}, clear=True):
            cfg = GenerationConfig.from_env()
        assert cfg.generate_fence is True

    def test_invalid_boolean_raises(self) -> None:
        with (
            patch.dict(os.environ, {"SMART_EXCLUSIONS": "maybe"}, clear=True),
            pytest.raises(ConfigValidationError, match="SMART_EXCLUSIONS"),
        ):
            GenerationConfig.from_env()

    def test_non_numeric_raises_value_error(self) -> None:
        with (
            patch.dict(os.environ, {"LEVEL_HEIGHT_M": "abc"}, clear=True),
            pytest.raises(ValueError),
        ):
            GenerationConfig.from_env()

    def test_out_of_range_from_env_raises(self) -> None:
        with (
            patch.dict(os.environ, {"LIGHTS_DENSITY": "7"}, clear=True),
            pytest.raises(ConfigValidationError),
        ):
            GenerationConfig.from_env()


class TestValidateConfig:
    """Fail-fast range validation."""

    def test_defaults_are_valid(self) -> None:
        validate_config(GenerationConfig())

    @pytest.mark.parametrize(
        ("overrides", "key"),
        [
            ({"min_house_segment_m": -1.0}, "MIN_HOUSE_SEGMENT_M"),
            ({"max_house_segment_m": 1.0}, "MAX_HOUSE_SEGMENT_M"),
            ({"min_house_area_m2": -5.0}, "MIN_HOUSE_AREA_M2"),
            ({"residential_min_height": 20}, "RESIDENTIAL_MIN_HEIGHT"),
            ({"building_min_height": 0}, "BUILDING_MIN_HEIGHT"),
            ({"level_height_m": 0.0}, "LEVEL_HEIGHT_M"),
            ({"obj_size_tolerance_m": -0.1}, "OBJ_SIZE_TOLERANCE_M"),
            ({"lights_density": 3}, "LIGHTS_DENSITY"),
            ({"airfield_point_radius_m": 0.0}, "AIRFIELD_POINT_RADIUS_M"),
            (
                {"airfield_try_get_elevation": True, "elevation_provider": ""},
                "ELEVATION_PROVIDER",
            ),
        ],
    )
    def test_out_of_range(self, overrides: dict[str, object], key: str) -> None:
        cfg = replace(GenerationConfig(), **overrides)
        with pytest.raises(ConfigValidationError) as exc_info:
            validate_config(cfg)
        assert exc_info.value.key == key
        assert exc_info.value.code == "CONFIG_VALIDATION_FAILED"
        assert exc_info.value.stage == "config"
