"""Tests for shared constants and helper functions."""

from __future__ import annotations

import unittest

import pytest

from cyclone_feeds.core.constants import KMZ_SOURCE_TAG, WGS84_MAX_LONGITUDE
from cyclone_feeds.utils.helpers import normalize_longitude, parse_int_or_none

# ---------------------------------------------------------------------------
# Tests: core.constants
# ---------------------------------------------------------------------------


class TestConstants(unittest.TestCase):
    """Verify centralised constants."""

    def test_source_tag(self) -> None:
        assert KMZ_SOURCE_TAG == "kmz"

    def test_longitude_bound(self) -> None:
        assert WGS84_MAX_LONGITUDE == 180.0


# ---------------------------------------------------------------------------
# Tests: utils.helpers.parse_int_or_none
# ---------------------------------------------------------------------------


class TestParseIntOrNone:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("65", 65),
            (" 985 mb", 985),
            ("-12", -12),
            (42, 42),
            ("", None),
            ("   ", None),
            ("N/A", None),
            (None, None),
            (True, None),
        ],
    )
    def test_values(self, value: object, expected: int | None) -> None:
        assert parse_int_or_none(value) == expected


# ---------------------------------------------------------------------------
# Tests: utils.helpers.normalize_longitude
# ---------------------------------------------------------------------------


class TestNormalizeLongitude:
    @pytest.mark.parametrize(
        ("lon", "expected"),
        [
            (-75.5, -75.5),
            (180.0, 180.0),
            (-180.0, -180.0),
            (185.0, -175.0),
            (-185.0, 175.0),
            (545.0, -175.0),
        ],
    )
    def test_wraps(self, lon: float, expected: float) -> None:
        assert normalize_longitude(lon) == pytest.approx(expected)
