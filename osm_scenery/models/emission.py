"""Classification results and emission requests.

A ``Classification`` is the discriminated outcome of the classifier chain
for one feature. An ``EmissionRequest`` is what a classifier hands to the
scenery writer: a statistics category plus a typed payload. Payloads are
frozen dataclasses rendered to DSF text by ``output.dsf_format``.

Design notes:
- No subtype checks: the chain inspects ``Classification.kind``.
- At most one non-``None`` classification per feature.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from osm_scenery.models.airfield import AirfieldRecord
    from osm_scenery.models.feature import Feature

Coord = tuple[float, float]


class ClassificationKind(enum.Enum):
    """What a feature became."""

    BARRIER = "barrier"
    ROAD = "road"
    RAIL = "rail"
    POWERLINE = "powerline"
    POINT_OBJECT = "point_object"
    BUILDING = "building"
    THREE_D_OBJECT = "three_d_object"
    FOREST = "forest"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True, slots=True)
class Classification:
    """Outcome of classifying one feature.

    Attributes:
        kind: Variant discriminator.
        classifier_id: Id of the classifier that owns the feature.
        height: Building height in metres (``BUILDING`` only).
        facade_id: Facade definition index (``BUILDING``/``BARRIER``).
        model_ref: Object model path (``THREE_D_OBJECT``/``POINT_OBJECT``).
        angle: Object bearing in degrees.
    """

    kind: ClassificationKind
    classifier_id: str = ""
    height: int | None = None
    facade_id: int | None = None
    model_ref: str | None = None
    angle: float | None = None

    @classmethod
    def unclassified(cls) -> Classification:
        return cls(kind=ClassificationKind.UNCLASSIFIED)

    @property
    def is_classified(self) -> bool:
        return self.kind is not ClassificationKind.UNCLASSIFIED


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FacadePolygon:
    """A facade (building or barrier) footprint with its wall height."""

    facade_id: int
    height: int
    coords: list[Coord] = field(default_factory=list)
    closed: bool = True


@dataclass(frozen=True, slots=True)
class ObjectPlacement:
    """A 3D object instance at a position with a true bearing."""

    object_id: int
    lon: float
    lat: float
    bearing: float


@dataclass(frozen=True, slots=True)
class NetworkSegment:
    """A road/rail/power-line segment between two renumbered nodes."""

    network_type: int
    start_node: int
    end_node: int
    coords: list[Coord] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ForestPolygon:
    """A forest area using a forest polygon definition."""

    forest_id: int
    density: int
    coords: list[Coord] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class AirfieldPayload:
    """A fully bound airfield handed to the airport writer."""

    airfield: AirfieldRecord
    main: bool = False


@dataclass(frozen=True, slots=True)
class RunwayPayload:
    """A runway that no airfield encloses."""

    runway: Feature
    main: bool = False


Payload = (
    FacadePolygon
    | ObjectPlacement
    | NetworkSegment
    | ForestPolygon
    | AirfieldPayload
    | RunwayPayload
    | str
)


@dataclass(frozen=True, slots=True)
class EmissionRequest:
    """One output instruction for the scenery writer.

    Attributes:
        category: Statistics category (classifier id, ``"light"``, ``"airfield"``...).
        payload: Typed payload, or preformatted text.
        feature_id: Source feature, if any.
    """

    category: str
    payload: Payload
    feature_id: int | None = None
