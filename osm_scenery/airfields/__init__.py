"""Airfield spatial binder."""

from osm_scenery.airfields.binder import DEFAULT_WAVES, AirfieldAssembler

__all__ = ["DEFAULT_WAVES", "AirfieldAssembler"]
