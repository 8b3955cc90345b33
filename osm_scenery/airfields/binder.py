"""Airfield assembly: buffering, spatial binding, elevation and emission.

Aeroway features do not go through the classifier chain. They stream
into per-category buffers while the tile is read::

    aerodrome/heliport  -> airfields (polygon- or point-backed)
    runway              -> runways
    apron/taxiway/taxilane (closed) -> apron areas
    apron/taxiway/taxilane (open)   -> taxi lanes
    helipad (polygon)   -> heli areas
    helipad (node)      -> helipads

When the stream ends, ``complete()`` runs the binding waves (polygon
airfields first, point airfields second; within a wave, children bind
to the first containing airfield in stream order and are never bound
twice), resolves missing elevations and emits every airfield followed
by the runways no airfield claimed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from osm_scenery.core.constants import AEROWAY_TAG
from osm_scenery.models.airfield import AirfieldKind, AirfieldRecord, PointAirfield, PolygonAirfield
from osm_scenery.models.emission import AirfieldPayload, EmissionRequest, RunwayPayload

if TYPE_CHECKING:
    from osm_scenery.core.config import GenerationConfig
    from osm_scenery.models.feature import Feature
    from osm_scenery.providers.elevation_service import ElevationService

logger = logging.getLogger("osm_scenery.airfields.binder")

AIRFIELD_CATEGORY = "airfield"
RUNWAY_CATEGORY = "runway"

DEFAULT_WAVES: tuple[AirfieldKind, ...] = (AirfieldKind.POLYGON, AirfieldKind.POINT)
"""Binding order: precise outlines claim children before point radii."""

_AIRFIELD_VALUES = frozenset({"aerodrome", "heliport"})
_APRON_VALUES = frozenset({"apron", "taxiway", "taxilane"})

# (child buffer attribute, airfield list attribute)
_CHILD_SLOTS = (
    ("_runways", "runways"),
    ("_apron_areas", "apron_areas"),
    ("_taxi_lanes", "taxi_lanes"),
    ("_heli_areas", "heli_areas"),
    ("_helipads", "helipads"),
)


class AirfieldAssembler:
    """Collects aeroway features of one tile and binds them to airfields.

    Args:
        config: Generation options (ignore list, elevation, main airfield).
        emit: Sink for the final airfield/runway emission requests.
        elevation: Batched elevation service, used only when
            ``airfield_try_get_elevation`` is enabled.
    """

    def __init__(
        self,
        config: GenerationConfig,
        emit: Callable[[EmissionRequest], None],
        elevation: ElevationService | None = None,
    ) -> None:
        self._config = config
        self._emit = emit
        self._elevation = elevation
        self._ignored_codes = frozenset(
            code.strip().upper() for code in config.airfield_ignore_list if code.strip()
        )
        self.airfields: list[AirfieldRecord] = []
        self._runways: list[Feature] = []
        self._apron_areas: list[Feature] = []
        self._taxi_lanes: list[Feature] = []
        self._heli_areas: list[Feature] = []
        self._helipads: list[Feature] = []
        self.ignored = 0

    # ------------------------------------------------------------------
    # Accumulation
    # ------------------------------------------------------------------

    def handle_feature(self, feature: Feature) -> bool:
        """Buffer a way-based aeroway feature.

        Returns:
            ``True`` if the feature was consumed (it must then skip the
            classifier chain).
        """
        if not self._config.generate_airfields:
            return False
        aeroway = (feature.tag(AEROWAY_TAG) or "").lower()
        if not aeroway or feature.is_point:
            return False
        if aeroway in _AIRFIELD_VALUES:
            if not feature.is_polygon:
                logger.debug("Open airfield outline skipped | feature_id=%d", feature.feature_id)
                return False
            self._add_airfield(PolygonAirfield(feature=feature))
            return True
        if aeroway == "runway":
            self._runways.append(feature)
            return True
        if aeroway in _APRON_VALUES:
            (self._apron_areas if feature.is_polygon else self._taxi_lanes).append(feature)
            return True
        if aeroway == "helipad" and feature.is_polygon:
            self._heli_areas.append(feature)
            return True
        return False

    def handle_node(self, node: Feature) -> bool:
        """Buffer an aeroway node (helipad or point airfield)."""
        if not self._config.generate_airfields:
            return False
        aeroway = (node.tag(AEROWAY_TAG) or "").lower()
        if aeroway == "helipad":
            self._helipads.append(node)
            return True
        if aeroway in _AIRFIELD_VALUES:
            self._add_airfield(
                PointAirfield(feature=node, radius_m=self._config.airfield_point_radius_m)
            )
            return True
        return False

    def _add_airfield(self, record: AirfieldRecord) -> None:
        if record.code and record.code in self._ignored_codes:
            logger.info("Airfield ignored | code=%s", record.code)
            self.ignored += 1
            return
        if (
            not record.has_actual_elevation
            and self._config.airfield_try_get_elevation
            and self._elevation is not None
        ):
            lon, lat = record.area_center
            self._elevation.request(lon, lat)
        self.airfields.append(record)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def unbound_count(self) -> int:
        return sum(len(getattr(self, buffer)) for buffer, _ in _CHILD_SLOTS)

    def bind(self, waves: Sequence[AirfieldKind] = DEFAULT_WAVES) -> None:
        """Bind buffered children to airfields, one wave per airfield kind."""
        for kind in waves:
            candidates = [a for a in self.airfields if a.kind is kind]
            if candidates:
                self._bind_wave(candidates)

    def _bind_wave(self, airfields: list[AirfieldRecord]) -> None:
        for buffer_name, target_name in _CHILD_SLOTS:
            remaining: list[Feature] = []
            for child in getattr(self, buffer_name):
                owner = next((a for a in airfields if a.contains_feature(child)), None)
                if owner is None:
                    remaining.append(child)
                else:
                    getattr(owner, target_name).append(child)
            setattr(self, buffer_name, remaining)

    # ------------------------------------------------------------------
    # Elevation and emission
    # ------------------------------------------------------------------

    def resolve_elevations(self) -> None:
        """Drain the elevation service, then look up what is still missing."""
        if not self._config.airfield_try_get_elevation or self._elevation is None:
            return
        self._elevation.finish()
        for record in self.airfields:
            if record.has_actual_elevation:
                continue
            lon, lat = record.area_center
            value = self._elevation.get_elevation(lon, lat, blocking=True)
            if value is not None:
                record.elevation = round(value)

    def complete(self, waves: Sequence[AirfieldKind] = DEFAULT_WAVES) -> int:
        """Bind, resolve elevations and emit.

        Returns:
            Number of airfields emitted.
        """
        self.bind(waves)
        self.resolve_elevations()

        main = self._config.airfield_single_as_main and (
            len(self.airfields) + len(self._runways) == 1
        )
        for record in self.airfields:
            self._emit(
                EmissionRequest(
                    category=AIRFIELD_CATEGORY,
                    payload=AirfieldPayload(airfield=record, main=main),
                    feature_id=record.feature.feature_id,
                )
            )
        for runway in self._runways:
            self._emit(
                EmissionRequest(
                    category=RUNWAY_CATEGORY,
                    payload=RunwayPayload(runway=runway, main=main),
                    feature_id=runway.feature_id,
                )
            )
        logger.info(
            "Airfields assembled | airfields=%d | free_runways=%d | unbound=%d | main=%s",
            len(self.airfields),
            len(self._runways),
            self.unbound_count(),
            main,
        )
        return len(self.airfields)
