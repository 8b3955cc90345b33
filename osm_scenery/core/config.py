"""Generation configuration loaded from environment variables.

All options have defaults matching the stock scenery generator. The
configuration is read once per run and shared read-only by every tile.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range, so bad settings surface before
    the first feature is classified.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from osm_scenery.core.constants import LIGHTS_STRIDE_BY_DENSITY
from osm_scenery.core.exceptions import ValidationError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    """Immutable generation options.

    Lengths are metres, areas square metres, heights whole metres.

    Attributes:
        generate_buildings: Emit facade buildings.
        generate_fence: Emit barrier facades.
        generate_obj: Emit rule-driven 3D objects.
        generate_obj_buildings: Match building footprints against sized models.
        generate_lights: Run the lights overlay pass.
        generate_sloped_roofs: Prefer sloped-roof facades for simple low buildings.
        generate_tanks: Treat storage tanks and gasometers as special buildings.
        generate_roads: Emit road network segments.
        generate_railways: Emit railway network segments.
        generate_powerlines: Emit power line network segments.
        generate_forests: Emit forest polygons.
        generate_airfields: Collect and bind airfield features.
        simplify_shapes: Simplify non-simple building footprints.
        smart_exclusions: Exclude default scenery only around generated buildings.
        exclusions_from_input: Rebuild the header exclusion box from the input bbox.
        single_pass: Process nodes regardless of the current tile.
        min_house_segment_m: Longest footprint edge must exceed this.
        max_house_segment_m: Longest footprint edge must stay below this.
        min_house_area_m2: Footprint area must exceed this.
        residential_min_height: Lower bound of the residential height band.
        residential_max_height: Upper bound of the residential height band.
        building_min_height: Lower bound of the generic building height band.
        building_max_height: Upper bound of the generic building height band.
        level_height_m: Height of one building level.
        residential_max_area_m2: Footprints above this area are not residential.
        sloped_roof_max_height_m: Buildings at or above this height get flat roofs.
        obj_size_tolerance_m: Allowed size mismatch when matching sized models.
        max_perimeter_to_simplify_m: Footprint matcher simplifies only below this.
        lights_density: 0 (sparse), 1 or 2 (dense).
        airfield_ignore_list: Airfield codes that are never generated.
        airfield_try_get_elevation: Query the elevation provider for airfields.
        airfield_single_as_main: Write a lone airfield/runway as the main airport.
        airfield_point_radius_m: Binding radius of point-backed airfields.
        elevation_provider: Registered elevation provider name.
        elevation_api_url: Base URL of the elevation provider.
    """

    generate_buildings: bool = True
    generate_fence: bool = True
    generate_obj: bool = True
    generate_obj_buildings: bool = True
    generate_lights: bool = False
    generate_sloped_roofs: bool = True
    generate_tanks: bool = True
    generate_roads: bool = True
    generate_railways: bool = True
    generate_powerlines: bool = True
    generate_forests: bool = True
    generate_airfields: bool = True
    simplify_shapes: bool = True
    smart_exclusions: bool = False
    exclusions_from_input: bool = True
    single_pass: bool = False
    min_house_segment_m: float = 2.0
    max_house_segment_m: float = 200.0
    min_house_area_m2: float = 20.0
    residential_min_height: int = 3
    residential_max_height: int = 12
    building_min_height: int = 6
    building_max_height: int = 30
    level_height_m: float = 3.0
    residential_max_area_m2: float = 600.0
    sloped_roof_max_height_m: float = 20.0
    obj_size_tolerance_m: float = 1.0
    max_perimeter_to_simplify_m: float = 100.0
    lights_density: int = 0
    airfield_ignore_list: tuple[str, ...] = ()
    airfield_try_get_elevation: bool = False
    airfield_single_as_main: bool = True
    airfield_point_radius_m: float = 3000.0
    elevation_provider: str = "open_elevation"
    elevation_api_url: str = ""

    @property
    def lights_stride(self) -> int:
        """Vertex sampling stride for the configured lights density."""
        return LIGHTS_STRIDE_BY_DENSITY[self.lights_density]

    @classmethod
    def from_env(cls) -> GenerationConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a
                boolean variable is not recognisable.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``LEVEL_HEIGHT_M=abc``).
        """
        defaults = cls()
        ignore_raw = os.getenv("AIRFIELD_IGNORE_LIST", "")
        config = cls(
            generate_buildings=_env_bool("GENERATE_BUILDINGS", defaults.generate_buildings),
            generate_fence=_env_bool("GENERATE_FENCE", defaults.generate_fence),
            generate_obj=_env_bool("GENERATE_OBJ", defaults.generate_obj),
            generate_obj_buildings=_env_bool(
                "GENERATE_OBJ_BUILDINGS", defaults.generate_obj_buildings
            ),
            generate_lights=_env_bool("GENERATE_LIGHTS", defaults.generate_lights),
            generate_sloped_roofs=_env_bool(
                "GENERATE_SLOPED_ROOFS", defaults.generate_sloped_roofs
            ),
            generate_tanks=_env_bool("GENERATE_TANKS", defaults.generate_tanks),
            generate_roads=_env_bool("GENERATE_ROADS", defaults.generate_roads),
            generate_railways=_env_bool("GENERATE_RAILWAYS", defaults.generate_railways),
            generate_powerlines=_env_bool("GENERATE_POWERLINES", defaults.generate_powerlines),
            generate_forests=_env_bool("GENERATE_FORESTS", defaults.generate_forests),
            generate_airfields=_env_bool("GENERATE_AIRFIELDS", defaults.generate_airfields),
            simplify_shapes=_env_bool("SIMPLIFY_SHAPES", defaults.simplify_shapes),
            smart_exclusions=_env_bool("SMART_EXCLUSIONS", defaults.smart_exclusions),
            exclusions_from_input=_env_bool(
                "EXCLUSIONS_FROM_INPUT", defaults.exclusions_from_input
            ),
            single_pass=_env_bool("SINGLE_PASS", defaults.single_pass),
            min_house_segment_m=float(os.getenv("MIN_HOUSE_SEGMENT_M", "2")),
            max_house_segment_m=float(os.getenv("MAX_HOUSE_SEGMENT_M", "200")),
            min_house_area_m2=float(os.getenv("MIN_HOUSE_AREA_M2", "20")),
            residential_min_height=int(os.getenv("RESIDENTIAL_MIN_HEIGHT", "3")),
            residential_max_height=int(os.getenv("RESIDENTIAL_MAX_HEIGHT", "12")),
            building_min_height=int(os.getenv("BUILDING_MIN_HEIGHT", "6")),
            building_max_height=int(os.getenv("BUILDING_MAX_HEIGHT", "30")),
            level_height_m=float(os.getenv("LEVEL_HEIGHT_M", "3")),
            residential_max_area_m2=float(os.getenv("RESIDENTIAL_MAX_AREA_M2", "600")),
            sloped_roof_max_height_m=float(os.getenv("SLOPED_ROOF_MAX_HEIGHT_M", "20")),
            obj_size_tolerance_m=float(os.getenv("OBJ_SIZE_TOLERANCE_M", "1.0")),
            max_perimeter_to_simplify_m=float(os.getenv("MAX_PERIMETER_TO_SIMPLIFY_M", "100")),
            lights_density=int(os.getenv("LIGHTS_DENSITY", "0")),
            airfield_ignore_list=tuple(
                code.strip().upper() for code in ignore_raw.split(",") if code.strip()
            ),
            airfield_try_get_elevation=_env_bool(
                "AIRFIELD_TRY_GET_ELEVATION", defaults.airfield_try_get_elevation
            ),
            airfield_single_as_main=_env_bool(
                "AIRFIELD_SINGLE_AS_MAIN", defaults.airfield_single_as_main
            ),
            airfield_point_radius_m=float(os.getenv("AIRFIELD_POINT_RADIUS_M", "3000")),
            elevation_provider=os.getenv("ELEVATION_PROVIDER", "open_elevation"),
            elevation_api_url=os.getenv("ELEVATION_API_URL", ""),
        )
        validate_config(config)
        return config


def _env_bool(key: str, default: bool) -> bool:
    """Read a boolean flag from the environment.

    Raises:
        ConfigValidationError: If the value is not a recognised boolean.
    """
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false, 1/0, yes/no)")


def validate_config(config: GenerationConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.min_house_segment_m < 0:
        raise ConfigValidationError(
            "MIN_HOUSE_SEGMENT_M", config.min_house_segment_m, "must be >= 0 (metres)"
        )

    if config.max_house_segment_m <= config.min_house_segment_m:
        raise ConfigValidationError(
            "MAX_HOUSE_SEGMENT_M",
            config.max_house_segment_m,
            f"must be > MIN_HOUSE_SEGMENT_M ({config.min_house_segment_m})",
        )

    if config.min_house_area_m2 < 0:
        raise ConfigValidationError(
            "MIN_HOUSE_AREA_M2", config.min_house_area_m2, "must be >= 0 (square metres)"
        )

    if not 0 < config.residential_min_height <= config.residential_max_height:
        raise ConfigValidationError(
            "RESIDENTIAL_MIN_HEIGHT",
            config.residential_min_height,
            f"must be > 0 and <= RESIDENTIAL_MAX_HEIGHT ({config.residential_max_height})",
        )

    if not 0 < config.building_min_height <= config.building_max_height:
        raise ConfigValidationError(
            "BUILDING_MIN_HEIGHT",
            config.building_min_height,
            f"must be > 0 and <= BUILDING_MAX_HEIGHT ({config.building_max_height})",
        )

    if config.level_height_m <= 0:
        raise ConfigValidationError("LEVEL_HEIGHT_M", config.level_height_m, "must be > 0")

    if config.obj_size_tolerance_m < 0:
        raise ConfigValidationError(
            "OBJ_SIZE_TOLERANCE_M", config.obj_size_tolerance_m, "must be >= 0 (metres)"
        )

    if config.lights_density not in LIGHTS_STRIDE_BY_DENSITY:
        raise ConfigValidationError(
            "LIGHTS_DENSITY",
            config.lights_density,
            f"must be one of {sorted(LIGHTS_STRIDE_BY_DENSITY)}",
        )

    if config.airfield_point_radius_m <= 0:
        raise ConfigValidationError(
            "AIRFIELD_POINT_RADIUS_M", config.airfield_point_radius_m, "must be > 0 (metres)"
        )

    if config.airfield_try_get_elevation and not config.elevation_provider:
        raise ConfigValidationError(
            "ELEVATION_PROVIDER",
            config.elevation_provider,
            "must not be empty when AIRFIELD_TRY_GET_ELEVATION is enabled",
        )
