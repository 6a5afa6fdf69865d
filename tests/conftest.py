"""Shared pytest fixtures for the cyclone feeds test suite."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from cyclone_feeds.parsers.markup import MarkupElement, parse_markup

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"


def build_kmz(entries: dict[str, str | bytes]) -> bytes:
    """Zip ``name -> content`` entries, in insertion order, into KMZ bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def damage_entry(data: bytes, name: str) -> bytes:
    """Overwrite the first 8 bytes of an entry's compressed data with 0xFF."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        offset = archive.getinfo(name).header_offset
    name_len = int.from_bytes(data[offset + 26 : offset + 28], "little")
    extra_len = int.from_bytes(data[offset + 28 : offset + 30], "little")
    start = offset + 30 + name_len + extra_len
    return data[:start] + b"\xff" * 8 + data[start + 8 :]


def wrap_kml(body: str) -> str:
    """Wrap Placemark / Folder markup in a namespaced KML Document."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<kml xmlns="http://www.opengis.net/kml/2.2"><Document>'
        f"{body}"
        "</Document></kml>"
    )


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


# ---------------------------------------------------------------------------
# Sample KML documents
# ---------------------------------------------------------------------------


@pytest.fixture()
def track_kml() -> str:
    """Forecast track: one LineString and three forecast points."""
    return (DATA_DIR / "track.kml").read_text(encoding="utf-8")


@pytest.fixture()
def cone_kml() -> str:
    """Forecast cone with an inner ring and a nameless polygon."""
    return (DATA_DIR / "cone.kml").read_text(encoding="utf-8")


@pytest.fixture()
def surge_kml() -> str:
    """Peak storm surge bands."""
    return (DATA_DIR / "surge.kml").read_text(encoding="utf-8")


@pytest.fixture()
def wind_probability_kml() -> str:
    """34 kt probability bands, one of them a MultiGeometry."""
    return (DATA_DIR / "wind_probability.kml").read_text(encoding="utf-8")


@pytest.fixture()
def wind_arrival_kml() -> str:
    """Arrival lines, an area, split icon labels; styles declared last."""
    return (DATA_DIR / "wind_arrival.kml").read_text(encoding="utf-8")


@pytest.fixture()
def adeck_text() -> str:
    """A-deck sample with two cycles, duplicates and malformed lines."""
    return (DATA_DIR / "aal052025.dat").read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Parsed trees and archives
# ---------------------------------------------------------------------------


@pytest.fixture()
def track_root(track_kml: str) -> MarkupElement:
    return parse_markup(track_kml)


@pytest.fixture()
def wind_arrival_root(wind_arrival_kml: str) -> MarkupElement:
    return parse_markup(wind_arrival_kml)


@pytest.fixture()
def track_kmz(track_kml: str) -> bytes:
    """Track KML zipped with an icon entry ahead of it."""
    return build_kmz({"icons/cat1.png": b"\x89PNG\r\n", "al052025_track.kml": track_kml})


@pytest.fixture()
def damaged_track_kmz(track_kmz: bytes) -> bytes:
    """Track archive whose markup entry has a broken deflate stream."""
    return damage_entry(track_kmz, "al052025_track.kml")


@pytest.fixture()
def kmz_factory() -> Callable[[dict[str, str | bytes]], bytes]:
    """Return ``build_kmz`` for tests that assemble their own archives."""
    return build_kmz


@pytest.fixture()
def kml_document() -> Callable[[str], str]:
    """Return ``wrap_kml`` for tests that inline their Placemarks."""
    return wrap_kml
