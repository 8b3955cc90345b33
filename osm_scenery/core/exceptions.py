"""Unified scenery-generation exception taxonomy.

Provides a shared base exception hierarchy for classifiers, inventory
loading, elevation providers and the tile orchestrator. Every domain
exception inherits from ``SceneryError`` and carries structured context
fields so callers can decide whether to skip a feature, retry a lookup
or fail a tile.

Taxonomy categories
-------------------
- ``ValidationError``   - bad input data or configuration, never retryable.
- ``TransientError``    - temporary failures (network, throttle), retryable.
- ``PermanentError``    - unrecoverable domain failures, not retryable.
- ``ContractError``     - payload/schema drift between stages, never retryable.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for tile summaries and logging.
"""

from __future__ import annotations


class SceneryError(Exception):
    """Base exception for all scenery-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (e.g. ``"classify"``, ``"elevation"``).
        code: Machine-readable error code (e.g. ``"EMISSION_FAILED"``).
        retryable: Whether the caller may retry the operation.
        feature_id: Identifier of the feature being processed, if any.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        feature_id: int | None = None,
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.feature_id = feature_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "feature_id": self.feature_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(SceneryError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(SceneryError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(SceneryError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(SceneryError):
    """Payload or schema drift between pipeline stages. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Concrete domain errors
# ---------------------------------------------------------------------------


class GeometryError(ValidationError):
    """A feature geometry is degenerate where a valid one was required."""

    default_stage = "geometry"
    default_code = "GEOMETRY_INVALID"


class InventoryError(ValidationError):
    """The content inventory or rule table could not be loaded."""

    default_stage = "inventory"
    default_code = "INVENTORY_INVALID"


class EmissionError(PermanentError):
    """An emission request could not be written for a feature."""

    default_stage = "emit"
    default_code = "EMISSION_FAILED"


class TileProcessingError(PermanentError):
    """The feature stream of a tile could not be processed."""

    default_stage = "tile"
    default_code = "TILE_FAILED"
