"""Wind speed probability extractor.

The 34/50/64 kt cumulative probability products draw each probability
band as a Placemark named after the band (``"<5%"``, ``"10-20"``,
``">90%"``) holding a single Polygon or a MultiGeometry of several.
Every polygon becomes its own feature, numbered by ``polygonIndex``
within its Placemark.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cyclone_feeds.classifiers import probability_from_label
from cyclone_feeds.extractors._traversal import (
    iter_placemarks,
    log_skipped,
    multi_geometry_parts,
    outer_ring,
    placemark_text,
    style_id,
)
from cyclone_feeds.models.feature import Feature

if TYPE_CHECKING:
    from cyclone_feeds.parsers.markup import MarkupElement

FEATURE_TYPE = "wind_probability"
WIND_SPEEDS: tuple[str, ...] = ("34kt", "50kt", "64kt")


def extract_wind_probability(root: MarkupElement, *, wind_speed: str = "34kt") -> list[Feature]:
    """Extract probability band polygons for one wind-speed threshold."""
    features: list[Feature] = []
    for placemark in iter_placemarks(root):
        polygons = multi_geometry_parts(placemark, "Polygon")
        if not polygons:
            single = placemark.child("Polygon")
            polygons = (single,) if single is not None else ()
        if not polygons:
            log_skipped(placemark, "no Polygon or MultiGeometry")
            continue

        name = placemark_text(placemark, "name")
        base: dict[str, Any] = {
            "name": name,
            "description": placemark_text(placemark, "description"),
            "probability": probability_from_label(name),
            "styleId": style_id(placemark),
            "windSpeed": wind_speed,
            "type": FEATURE_TYPE,
        }

        for index, polygon in enumerate(polygons):
            ring = outer_ring(polygon)
            if not ring:
                log_skipped(placemark, f"polygon {index} has no outer boundary")
                continue
            features.append(Feature.polygon(ring, {**base, "polygonIndex": index}))

    return features
