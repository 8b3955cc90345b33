"""Per-tile generation statistics and the pydantic tile summary report.

``GenerationStats`` is the mutable counter owned by one tile's
translator (never shared across tiles). ``TileSummary`` is the
immutable report produced when the tile completes; it serialises to
JSON for logs and batch reports.
"""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, Field

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


class GenerationStats:
    """Counts emitted items per category and unclassified features."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self.unclassified = 0
        self.features = 0
        self.skipped = 0

    def add(self, category: str, count: int = 1) -> None:
        self._counts[category] += count

    def get(self, category: str) -> int:
        return self._counts[category]

    @property
    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def is_empty(self) -> bool:
        return not self._counts


class TileSummary(BaseModel):
    """Report for one translated tile.

    Attributes:
        tile: Tile label (``"+50+030"``).
        status: ``"success"`` or ``"failed"``.
        features: Features received.
        counts: Emitted items per category.
        unclassified: Features no classifier accepted.
        skipped: Features dropped after a per-feature error.
        airfields: Airfields written.
        errors: Structured error payloads (``to_error_dict()``).
    """

    tile: str = ""
    status: str = STATUS_SUCCESS
    features: int = 0
    counts: dict[str, int] = Field(default_factory=dict)
    unclassified: int = 0
    skipped: int = 0
    airfields: int = 0
    errors: list[dict[str, object]] = Field(default_factory=list)

    @classmethod
    def from_stats(cls, tile: str, stats: GenerationStats, *, airfields: int = 0) -> TileSummary:
        return cls(
            tile=tile,
            features=stats.features,
            counts=stats.counts,
            unclassified=stats.unclassified,
            skipped=stats.skipped,
            airfields=airfields,
        )

    @property
    def generated(self) -> bool:
        return any(self.counts.values())

    def summary_text(self) -> str:
        """One-line human-readable summary (``building: 12, road: 3``)."""
        if not self.counts:
            return "nothing generated"
        return ", ".join(f"{name}: {count}" for name, count in sorted(self.counts.items()))

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)
