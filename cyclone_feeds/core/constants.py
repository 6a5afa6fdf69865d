"""Shared pipeline constants.

Centralises archive defaults, feature source tags, and the unit
conversions used by more than one module.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Archive / markup
# ---------------------------------------------------------------------------

DEFAULT_MARKUP_EXTENSION: str = ".kml"
"""Suffix of the markup entry inside a KMZ archive."""

DEFAULT_MAX_MARKUP_BYTES: int = 50 * 1024 * 1024
"""Largest uncompressed markup entry the archive reader will inflate."""

# ---------------------------------------------------------------------------
# Output shape
# ---------------------------------------------------------------------------

KMZ_SOURCE_TAG: str = "kmz"
"""``source`` value carried by every FeatureCollection built from an archive."""

# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

DEFAULT_MAX_WORKERS: int = 5
"""One worker per upstream archive of a storm (track, cone, surge, wsp, toa)."""

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

KNOT_TO_MPH: float = 1.15078

WGS84_MIN_LONGITUDE: float = -180.0
WGS84_MAX_LONGITUDE: float = 180.0
