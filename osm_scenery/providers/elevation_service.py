"""Batched elevation lookups with explicit completion.

``ElevationService`` wraps an ``ElevationProvider`` with a bounded work
queue drained by a small pool of worker threads:

1. ``request(lon, lat)``  - enqueue a lookup (blocks while the queue is full).
2. ``finish()``           - barrier: waits until every queued lookup is done
                             and stops the workers.
3. ``get_elevation(lon, lat, blocking=True)`` - cached value, or a
                             synchronous lookup for points never resolved.

Provider failures are logged and cached as "unknown" (``None``); they
never propagate to the caller.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import TYPE_CHECKING

from osm_scenery.providers.base import ElevationProviderError

if TYPE_CHECKING:
    from osm_scenery.providers.base import ElevationProvider

logger = logging.getLogger("osm_scenery.providers.elevation_service")

DEFAULT_QUEUE_SIZE = 64
DEFAULT_WORKERS = 2

# Cache key precision (~1 m)
_KEY_DIGITS = 5

_STOP = object()


def _key(lon: float, lat: float) -> tuple[float, float]:
    return (round(lon, _KEY_DIGITS), round(lat, _KEY_DIGITS))


class ElevationService:
    """Thread-backed elevation lookup queue with a result cache."""

    def __init__(
        self,
        provider: ElevationProvider,
        *,
        max_queue: int = DEFAULT_QUEUE_SIZE,
        workers: int = DEFAULT_WORKERS,
    ) -> None:
        self._provider = provider
        self._queue: queue.Queue[object] = queue.Queue(maxsize=max_queue)
        self._cache: dict[tuple[float, float], float | None] = {}
        self._pending: set[tuple[float, float]] = set()
        self._lock = threading.Lock()
        self._workers: list[threading.Thread] = []
        self._worker_count = max(1, workers)
        self._finished = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def request(self, lon: float, lat: float) -> None:
        """Queue an asynchronous lookup (no-op if known or already queued)."""
        key = _key(lon, lat)
        with self._lock:
            if self._finished or key in self._cache or key in self._pending:
                return
            self._pending.add(key)
            self._start_workers()
        self._queue.put(key)

    def get_elevation(self, lon: float, lat: float, *, blocking: bool = False) -> float | None:
        """Return a resolved elevation.

        Args:
            blocking: Look the point up synchronously when it has no
                cached result yet.
        """
        key = _key(lon, lat)
        with self._lock:
            if key in self._cache:
                return self._cache[key]
        if not blocking:
            return None
        value = self._lookup(key)
        with self._lock:
            self._cache[key] = value
        return value

    def finish(self) -> None:
        """Wait for all queued lookups, then stop the workers."""
        with self._lock:
            self._finished = True
            workers = list(self._workers)
        self._queue.join()
        for _ in workers:
            self._queue.put(_STOP)
        for worker in workers:
            worker.join()
        logger.info("Elevation lookups finished | resolved=%d", self.resolved_count)

    @property
    def resolved_count(self) -> int:
        with self._lock:
            return sum(1 for value in self._cache.values() if value is not None)

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    def _start_workers(self) -> None:
        """Start the worker pool on first use (caller holds the lock)."""
        if self._workers:
            return
        for i in range(self._worker_count):
            worker = threading.Thread(
                target=self._run, name=f"elevation-{i}", daemon=True
            )
            worker.start()
            self._workers.append(worker)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                key: tuple[float, float] = item  # type: ignore[assignment]
                value = self._lookup(key)
                with self._lock:
                    self._cache[key] = value
                    self._pending.discard(key)
            finally:
                self._queue.task_done()

    def _lookup(self, key: tuple[float, float]) -> float | None:
        lon, lat = key
        try:
            return self._provider.lookup(lon, lat)
        except ElevationProviderError as exc:
            logger.warning(
                "Elevation lookup failed | provider=%s | lon=%.5f | lat=%.5f | error=%s",
                exc.provider,
                lon,
                lat,
                exc.message,
            )
            return None
        except Exception:
            # never propagate into a worker thread or the airfield pass
            logger.exception("Elevation lookup error | lon=%.5f | lat=%.5f", lon, lat)
            return None
