"""Shared pytest fixtures for the OSM scenery test suite."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from osm_scenery.core.config import GenerationConfig
from osm_scenery.inventory.catalog import SceneryInventory
from osm_scenery.output.writer import MemoryWriter
from tests.factories import make_config, make_inventory

TESTS_DIR = Path(__file__).parent

# ---------------------------------------------------------------------------
# Generation fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> GenerationConfig:
    """Default configuration with sloped roofs disabled (deterministic facade sets)."""
    return make_config(generate_sloped_roofs=False)


@pytest.fixture()
def inventory() -> SceneryInventory:
    """Small inventory: residential/industrial facades, special facades, one forest."""
    return make_inventory()


@pytest.fixture()
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture()
def writer() -> MemoryWriter:
    """In-memory scenery writer."""
    return MemoryWriter()
