"""Unified exception taxonomy for the normalization pipeline.

Provides a shared base exception hierarchy for the archive reader,
markup parser, extractors and the product facade. Every domain exception
inherits from ``PipelineError`` and carries structured context fields so a
calling dispatcher can produce a uniform failure response.

Taxonomy categories
-------------------
- ``ValidationError``: input/contract violations, never retryable.
- ``TransientError``: temporary failures, retryable by the caller. Nothing
  in this package raises it (the core does no I/O); it is kept for
  callers that wrap fetching around the extractors.
- ``PermanentError``: unrecoverable domain failures, not retryable.
- ``ContractError``: payload/schema drift between stages, never retryable.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging and response envelopes.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (e.g. ``"archive"``, ``"markup"``, ``"extract"``).
        code: Machine-readable error code (e.g. ``"ARCHIVE_CORRUPT"``).
        retryable: Whether the caller may retry the operation.
        correlation_id: Request correlation identifier (the storm id
            when the caller provides one).
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
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
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
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(PipelineError):
    """Temporary failure that may succeed on retry.

    Reserved for callers (fetch and retry layers); the core never raises it.
    """

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(PipelineError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(PipelineError):
    """Payload or schema drift between pipeline stages. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Input errors (fatal to a single product request)
# ---------------------------------------------------------------------------


class CorruptArchiveError(ValidationError):
    """Raised when the byte buffer cannot be opened or read as a zip archive."""

    default_stage = "archive"
    default_code = "ARCHIVE_CORRUPT"


class NoMarkupEntryError(ValidationError):
    """Raised when an archive holds no entry with the markup extension."""

    default_stage = "archive"
    default_code = "ARCHIVE_NO_MARKUP"


class MalformedMarkupError(ValidationError):
    """Raised when the markup document is empty or not well-formed XML."""

    default_stage = "markup"
    default_code = "MARKUP_MALFORMED"


class UnknownProductError(ValidationError):
    """Raised when a product selector is not one of the supported products."""

    default_stage = "dispatch"
    default_code = "PRODUCT_UNKNOWN"


class InvalidStormIdError(ValidationError):
    """Raised when a storm identifier does not look like ``AL052025``."""

    default_stage = "dispatch"
    default_code = "STORM_ID_INVALID"


class ExtractionFailedError(PermanentError):
    """Wraps an input error with the product (and storm) it was raised for.

    Attributes:
        product: Product selector that was being extracted.
        cause: The underlying ``PipelineError``.
        storm_id: Storm identifier supplied by the caller (may be empty).
    """

    default_stage = "extract"
    default_code = "EXTRACTION_FAILED"

    def __init__(self, product: str, cause: PipelineError, *, storm_id: str = "") -> None:
        self.product = product
        self.cause = cause
        self.storm_id = storm_id
        target = f"{product} ({storm_id})" if storm_id else product
        super().__init__(
            f"Failed to extract {target}: {cause.message or cause}",
            correlation_id=storm_id,
        )

    def to_error_dict(self) -> dict[str, object]:
        payload = super().to_error_dict()
        payload["product"] = self.product
        payload["cause_code"] = self.cause.code
        payload["cause_stage"] = self.cause.stage
        return payload
