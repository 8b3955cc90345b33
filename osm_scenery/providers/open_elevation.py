"""Open-Elevation API adapter.

Queries ``GET {base_url}/api/v1/lookup?locations=<lat>,<lon>`` and reads
``results[0].elevation`` from the JSON answer::

    {"results": [{"latitude": 47.37, "longitude": 8.55, "elevation": 408.0}]}
"""

from __future__ import annotations

import logging

import httpx

from osm_scenery.providers.base import ElevationProvider, ElevationProviderError

logger = logging.getLogger("osm_scenery.providers.open_elevation")

DEFAULT_OPEN_ELEVATION_URL = "https://api.open-elevation.com"
_LOOKUP_PATH = "/api/v1/lookup"


class OpenElevationProvider(ElevationProvider):
    """Elevation adapter for Open-Elevation compatible services."""

    name = "open_elevation"

    def __init__(self, base_url: str = "", *, timeout: float = 10.0) -> None:
        super().__init__(base_url or DEFAULT_OPEN_ELEVATION_URL, timeout=timeout)

    def lookup(self, lon: float, lat: float) -> float | None:
        url = f"{self._base_url}{_LOOKUP_PATH}"
        params = {"locations": f"{lat:.7f},{lon:.7f}"}
        try:
            with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
                response = client.get(url, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            msg = f"Elevation request failed for ({lon:.5f}, {lat:.5f}): {exc}"
            raise ElevationProviderError(self.name, msg) from exc
        except ValueError as exc:
            msg = f"Elevation response is not JSON: {exc}"
            raise ElevationProviderError(self.name, msg, retryable=False) from exc

        try:
            value = payload["results"][0]["elevation"]
        except (KeyError, IndexError, TypeError):
            logger.debug("No elevation in response | lon=%.5f | lat=%.5f", lon, lat)
            return None
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            msg = f"Elevation is not a number: {value!r}"
            raise ElevationProviderError(self.name, msg, retryable=False) from exc
