"""Scenery content inventory (facades, forests, objects) and rule tables."""

from osm_scenery.inventory.catalog import SceneryInventory
from osm_scenery.inventory.loader import load_inventory

__all__ = ["SceneryInventory", "load_inventory"]
