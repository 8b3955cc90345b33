"""ElevationProvider abstract base class.

Defines the contract every elevation lookup adapter implements. The
airfield binder never talks to an adapter directly; it goes through the
batching ``ElevationService``, which turns adapter failures into
"elevation unknown".

Each concrete adapter (``OpenElevationProvider``, ...) implements
``lookup`` for its service's API.
"""

from __future__ import annotations

import abc

from osm_scenery.core.exceptions import TransientError


class ElevationProvider(abc.ABC):
    """Abstract base class for elevation lookup adapters.

    Example usage::

        provider = get_elevation_provider("open_elevation")
        elevation = provider.lookup(8.55, 47.37)
    """

    name: str = ""

    def __init__(self, base_url: str = "", *, timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    @abc.abstractmethod
    def lookup(self, lon: float, lat: float) -> float | None:
        """Return the ground elevation in metres at a WGS 84 point.

        Returns:
            The elevation, or ``None`` when the service has no data.

        Raises:
            ElevationProviderError: On network or API errors.
        """


# ---------------------------------------------------------------------------
# Provider exceptions
# ---------------------------------------------------------------------------


class ElevationProviderError(TransientError):
    """Elevation lookup failure.

    Attributes:
        provider: Name of the provider that raised the error.
    """

    default_stage = "elevation"
    default_code = "ELEVATION_LOOKUP_FAILED"

    def __init__(self, provider: str, message: str, *, retryable: bool = True) -> None:
        self.provider = provider
        super().__init__(message, retryable=retryable)

    def __str__(self) -> str:
        return f"[{self.provider}] {self.message}"
