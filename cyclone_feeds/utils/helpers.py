"""Shared helper functions used across multiple parser and extractor modules."""

from __future__ import annotations

import re

from cyclone_feeds.core.constants import WGS84_MAX_LONGITUDE, WGS84_MIN_LONGITUDE

_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")


def parse_int_or_none(value: object) -> int | None:
    """Parse the leading integer of ``value`` (``"65 kt"`` -> 65).

    Returns ``None`` for ``None``, blank, or non-numeric input.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude into [-180, 180] by adding or subtracting 360."""
    while lon > WGS84_MAX_LONGITUDE:
        lon -= 360.0
    while lon < WGS84_MIN_LONGITUDE:
        lon += 360.0
    return lon
