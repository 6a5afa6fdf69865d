"""Pipeline configuration.

All configuration values have sensible defaults. The normalization core
never reads the environment itself: callers (a dispatcher, a CLI, tests)
build a ``PipelineConfig`` and pass it in. ``from_env()`` is provided for
callers that keep their settings in environment variables.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from cyclone_feeds.core.constants import (
    DEFAULT_MARKUP_EXTENSION,
    DEFAULT_MAX_MARKUP_BYTES,
    DEFAULT_MAX_WORKERS,
)
from cyclone_feeds.core.exceptions import PipelineError


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Immutable pipeline configuration.

    Attributes:
        markup_extension: Archive entry suffix that identifies the markup
            document (matched case-insensitively).
        max_markup_bytes: Largest uncompressed markup entry that will be read.
        max_workers: Upper bound on concurrent product extractions.
        adeck_max_tau: Drop A-deck points beyond this forecast hour
            (``None`` keeps every point).
    """

    markup_extension: str = DEFAULT_MARKUP_EXTENSION
    max_markup_bytes: int = DEFAULT_MAX_MARKUP_BYTES
    max_workers: int = DEFAULT_MAX_WORKERS
    adeck_max_tau: int | None = None

    @classmethod
    def from_env(cls) -> PipelineConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``CYCLONE_MAX_WORKERS=abc``).
        """
        max_tau_raw = os.getenv("CYCLONE_ADECK_MAX_TAU", "").strip()
        config = cls(
            markup_extension=os.getenv("CYCLONE_MARKUP_EXTENSION", DEFAULT_MARKUP_EXTENSION),
            max_markup_bytes=int(
                os.getenv("CYCLONE_MAX_MARKUP_BYTES", str(DEFAULT_MAX_MARKUP_BYTES))
            ),
            max_workers=int(os.getenv("CYCLONE_MAX_WORKERS", str(DEFAULT_MAX_WORKERS))),
            adeck_max_tau=int(max_tau_raw) if max_tau_raw else None,
        )
        _validate(config)
        return config


def _validate(config: PipelineConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.markup_extension.startswith("."):
        raise ConfigValidationError(
            "CYCLONE_MARKUP_EXTENSION",
            config.markup_extension,
            "must start with '.' (e.g. '.kml')",
        )

    if config.max_markup_bytes <= 0:
        raise ConfigValidationError(
            "CYCLONE_MAX_MARKUP_BYTES",
            config.max_markup_bytes,
            "must be > 0 (bytes)",
        )

    if config.max_workers < 1:
        raise ConfigValidationError(
            "CYCLONE_MAX_WORKERS",
            config.max_workers,
            "must be >= 1",
        )

    if config.adeck_max_tau is not None and config.adeck_max_tau < 0:
        raise ConfigValidationError(
            "CYCLONE_ADECK_MAX_TAU",
            config.adeck_max_tau,
            "must be >= 0 (hours)",
        )
