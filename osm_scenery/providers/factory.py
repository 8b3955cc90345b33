"""Elevation provider factory: selects the active adapter by name.

The factory maintains a registry of known adapters. New adapters are
registered with ``register_elevation_provider``.

Usage::

    from osm_scenery.providers.factory import get_elevation_provider

    provider = get_elevation_provider("open_elevation", "http://localhost:8080")
    elevation = provider.lookup(8.55, 47.37)

The provider name comes from ``GenerationConfig.elevation_provider``
(``ELEVATION_PROVIDER`` environment variable).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from osm_scenery.providers.base import ElevationProvider, ElevationProviderError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("osm_scenery.providers.factory")

OPEN_ELEVATION = "open_elevation"

# Provider name -> callable returning the adapter class (lazy import)
_PROVIDER_REGISTRY: dict[str, Callable[[], type[ElevationProvider]]] = {}


def _register_builtin_providers() -> None:
    def _open_elevation() -> type[ElevationProvider]:
        from osm_scenery.providers.open_elevation import OpenElevationProvider

        return OpenElevationProvider

    _PROVIDER_REGISTRY[OPEN_ELEVATION] = _open_elevation


def _ensure_registry() -> None:
    """Initialise the provider registry once (idempotent)."""
    if not _PROVIDER_REGISTRY:
        _register_builtin_providers()


def register_elevation_provider(
    name: str,
    loader: Callable[[], type[ElevationProvider]],
) -> None:
    """Register a custom elevation adapter.

    Raises:
        ValueError: If the name is empty.
    """
    if not name:
        msg = "Provider name must be non-empty"
        raise ValueError(msg)
    _ensure_registry()
    _PROVIDER_REGISTRY[name] = loader
    logger.debug("Registered elevation provider: %s", name)


def get_elevation_provider(name: str, base_url: str = "") -> ElevationProvider:
    """Create an elevation provider instance.

    Raises:
        ElevationProviderError: If the named provider is not registered.
    """
    _ensure_registry()
    loader = _PROVIDER_REGISTRY.get(name)
    if loader is None:
        available = ", ".join(sorted(_PROVIDER_REGISTRY))
        msg = f"Unknown elevation provider: {name!r}. Available: {available}"
        raise ElevationProviderError(name, msg, retryable=False)
    provider_cls = loader()
    logger.info("Creating elevation provider: %s", name)
    return provider_cls(base_url)


def list_elevation_providers() -> list[str]:
    _ensure_registry()
    return sorted(_PROVIDER_REGISTRY)
