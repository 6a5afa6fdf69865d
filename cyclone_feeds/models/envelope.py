"""Pydantic response envelope for product extraction results.

The dispatcher that fronts this package returns one JSON document per
product request. Success and failure share a single shape so the caller
can render either without branching on exception types:

- **success**: ``data`` holds a FeatureCollection or ModelTrackSet dict
- **failure**: ``error`` holds the ``PipelineError.to_error_dict()`` payload
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from cyclone_feeds.models.feature import FeatureCollection

if TYPE_CHECKING:
    from cyclone_feeds.core.exceptions import PipelineError
    from cyclone_feeds.models.tracks import ModelTrackSet

SCHEMA_VERSION = "product-response-v1"


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


class ProductResponse(BaseModel):
    """Uniform result document for one product extraction.

    Attributes:
        schema_version: Schema identifier for forward compatibility.
        success: Whether extraction produced data.
        product: Product selector (e.g. ``"storm-surge"``).
        storm_id: Storm identifier supplied by the caller, if any.
        data: Serialised FeatureCollection / ModelTrackSet on success.
        error: Structured error payload on failure.
        feature_count: Number of features (or tracks) in ``data``.
        timestamp: Creation time (ISO 8601, UTC).
    """

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    success: bool
    product: str
    storm_id: str = ""
    data: dict[str, Any] | None = None
    error: dict[str, Any] | None = None
    feature_count: int = 0
    timestamp: str = Field(default_factory=_utc_now_iso)

    model_config = {"populate_by_name": True}

    @classmethod
    def ok(
        cls,
        product: str,
        result: FeatureCollection | ModelTrackSet,
        *,
        storm_id: str = "",
    ) -> ProductResponse:
        """Build a success envelope from an extraction result."""
        count = len(result.features) if isinstance(result, FeatureCollection) else len(result.tracks)
        return cls(
            success=True,
            product=product,
            storm_id=storm_id,
            data=result.to_dict(),
            feature_count=count,
        )

    @classmethod
    def failed(cls, product: str, error: PipelineError, *, storm_id: str = "") -> ProductResponse:
        """Build a failure envelope from a pipeline error."""
        return cls(
            success=False,
            product=product,
            storm_id=storm_id or error.correlation_id,
            error=error.to_error_dict(),
        )

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise to a JSON string using the ``$schema`` alias."""
        return self.model_dump_json(indent=indent, by_alias=True)

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)  # type: ignore[return-value]
