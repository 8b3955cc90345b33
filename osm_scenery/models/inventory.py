"""Typed models for the scenery content inventory.

- ``BuildingType``: coarse facade family (residential/commercial/industrial)
- ``BuildingCategory``: fine building kind used to pick sized 3D models
- ``SpecialFacadeType``: garage/tank/fence/wall facade sets
- ``FacadeSetKey``: facade selection key (footprint shape, type, roof)
- ``FacadeDescriptor``: a facade file tagged with its set key
- ``ModelDescriptor``: a sized 3D model (``house_10x10.obj``)
- ``TagMatch`` and the rule records loaded from the inventory file

All models are frozen; the inventory is built once per run and shared
read-only between tiles.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from osm_scenery.core.constants import BUILDING_TAG


class BuildingType(enum.Enum):
    """Facade family of a building."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"

    @classmethod
    def from_id(cls, value: str | None) -> BuildingType | None:
        """Map a tag value (``"industrial"``) to a type, or ``None``."""
        if not value:
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


class BuildingCategory(enum.Enum):
    """Building kind used to look up sized models (one folder each)."""

    HOUSE = "house"
    DETACHED = "detached"
    SEMIDETACHED_HOUSE = "semidetached_house"
    TERRACE = "terrace"
    APARTMENTS = "apartments"
    GARAGE = "garage"
    SHED = "shed"
    BARN = "barn"
    FARM_AUXILIARY = "farm_auxiliary"
    HUT = "hut"
    CABIN = "cabin"
    CHURCH = "church"
    CHAPEL = "chapel"
    KIOSK = "kiosk"
    RETAIL = "retail"
    WAREHOUSE = "warehouse"
    COOLING_TOWER = "cooling_tower"
    CHIMNEY = "chimney"

    @classmethod
    def from_tags(cls, tags: dict[str, str]) -> BuildingCategory | None:
        """Return the category of a ``building=*`` value, if known."""
        value = tags.get(BUILDING_TAG, "").lower()
        if value == "garages":
            return cls.GARAGE
        try:
            return cls(value)
        except ValueError:
            return None


class SpecialFacadeType(enum.Enum):
    """Facade sets for features that are not ordinary buildings."""

    GARAGE = "garage"
    TANK = "tank"
    FENCE = "fence"
    WALL = "wall"


@dataclass(frozen=True, slots=True)
class FacadeSetKey:
    """Selects one facade set.

    Attributes:
        simple_footprint: ``True`` for 4-edge (rectangle-like) footprints.
        building_type: Facade family.
        sloped: Sloped-roof facade.
    """

    simple_footprint: bool
    building_type: BuildingType
    sloped: bool


@dataclass(frozen=True, slots=True)
class FacadeDescriptor:
    """A facade definition file and the set it belongs to."""

    path: str
    key: FacadeSetKey


@dataclass(frozen=True, slots=True)
class ModelDescriptor:
    """A 3D model with its footprint size in metres.

    Attributes:
        path: Library path written to ``OBJECT_DEF``.
        width: Size along the model X axis.
        depth: Size along the model Y axis.
    """

    path: str
    width: float
    depth: float


@dataclass(frozen=True, slots=True)
class TagMatch:
    """Matches one tag; ``value=None`` matches any value of ``key``."""

    key: str
    value: str | None = None

    def matches(self, tags: dict[str, str]) -> bool:
        if self.key not in tags:
            return False
        return self.value is None or tags[self.key] == self.value


@dataclass(frozen=True, slots=True)
class FacadeRule:
    """All ``matches`` present selects the facade at ``facade``."""

    matches: tuple[TagMatch, ...]
    facade: str

    def applies_to(self, tags: dict[str, str]) -> bool:
        return all(m.matches(tags) for m in self.matches)


@dataclass(frozen=True, slots=True)
class ObjectRule:
    """Places one of ``objects`` for features matching all ``matches``.

    Attributes:
        matches: Required tags.
        objects: Candidate object paths (one is picked at random).
        min_area_m2: Polygon features below this area are skipped.
        max_area_m2: Polygon features above this area are skipped (0 = no limit).
        random_angle: Random bearing; otherwise aligned with the longest edge.
    """

    matches: tuple[TagMatch, ...]
    objects: tuple[str, ...]
    min_area_m2: float = 0.0
    max_area_m2: float = 0.0
    random_angle: bool = True

    def applies_to(self, tags: dict[str, str]) -> bool:
        return all(m.matches(tags) for m in self.matches)


@dataclass(frozen=True, slots=True)
class LightRule:
    """Lights placed along features matching all ``matches``."""

    matches: tuple[TagMatch, ...]
    objects: tuple[str, ...] = field(default_factory=tuple)

    def applies_to(self, tags: dict[str, str]) -> bool:
        return all(m.matches(tags) for m in self.matches)
