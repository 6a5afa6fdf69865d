"""Forecast cone and peak storm surge extractors.

Both products are one Polygon per Placemark. Only the outer boundary is
kept: inner boundaries are not read, so cone or inundation polygons with
holes come out filled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cyclone_feeds.classifiers import surge_height_from_text
from cyclone_feeds.extractors._traversal import (
    iter_placemarks,
    log_skipped,
    outer_ring,
    placemark_text,
)
from cyclone_feeds.models.feature import Feature

if TYPE_CHECKING:
    from collections.abc import Callable

    from cyclone_feeds.parsers.markup import MarkupElement

DEFAULT_CONE_NAME = "Forecast Cone"
DEFAULT_SURGE_NAME = "Storm Surge Area"


def extract_cone(root: MarkupElement) -> list[Feature]:
    """One Polygon feature per cone Placemark."""
    return _extract_outer_polygons(root, _cone_properties)


def extract_surge(root: MarkupElement) -> list[Feature]:
    """One Polygon feature per surge band, tagged with its upper height in feet."""
    return _extract_outer_polygons(root, _surge_properties)


def _extract_outer_polygons(
    root: MarkupElement,
    build_properties: Callable[[MarkupElement], dict[str, Any]],
) -> list[Feature]:
    features: list[Feature] = []
    for placemark in iter_placemarks(root):
        polygon = placemark.child("Polygon")
        if polygon is None or not polygon.has_child("outerBoundaryIs"):
            log_skipped(placemark, "no Polygon outer boundary")
            continue

        ring = outer_ring(polygon)
        if not ring:
            log_skipped(placemark, "empty outer boundary")
            continue

        features.append(Feature.polygon(ring, build_properties(placemark)))
    return features


def _cone_properties(placemark: MarkupElement) -> dict[str, Any]:
    return {
        "name": placemark_text(placemark, "name", DEFAULT_CONE_NAME),
        "description": placemark_text(placemark, "description"),
    }


def _surge_properties(placemark: MarkupElement) -> dict[str, Any]:
    name = placemark_text(placemark, "name")
    description = placemark_text(placemark, "description")
    height = surge_height_from_text(name, description)
    return {
        "name": name or DEFAULT_SURGE_NAME,
        "description": description,
        "SURGE_FT": height,
        "height": height,
    }
