"""Forecast / best track extractor.

A track KML holds one LineString Placemark for the path and one Point
Placemark per forecast position. Point properties come from direct
fields when the product carries them, otherwise from the free-text
HTML description:

    Valid at: 8:00 PM EDT August 20, 2025
    Maximum Wind: 65 knots (75 mph)
    Minimum Pressure: 985 mb
    72 hr Forecast

The category starts from the marker style (``#cat3``) and is replaced by
the Saffir-Simpson class whenever a numeric wind speed was resolved.

Lines carry a ``trackType`` and points a ``pointType`` taken from the
placemark name. ``stormName`` falls back to the Document's ``<name>``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from cyclone_feeds.classifiers import (
    RuleList,
    first_group,
    first_group_int,
    style_to_category,
    wind_to_category,
)
from cyclone_feeds.extractors._traversal import (
    geometry_coordinates,
    iter_placemarks,
    log_skipped,
    placemark_field,
    placemark_int,
    placemark_text,
    style_id,
)
from cyclone_feeds.models.feature import Feature

if TYPE_CHECKING:
    from cyclone_feeds.parsers.markup import MarkupElement

DEFAULT_LINE_NAME = "Track"
DEFAULT_POINT_NAME = "Forecast Position"

# Lower-cased name keyword -> track type; first match wins.
TRACK_TYPES: tuple[tuple[str, str], ...] = (("forecast", "forecast"), ("past", "historical"))
DEFAULT_TRACK_TYPE = "track"
CURRENT_POINT_TYPE = "current"
DEFAULT_POINT_TYPE = "position"

# Property -> rules over the description, used only when the direct field is absent.
DESCRIPTION_RULES: dict[str, RuleList[Any]] = {
    "intensity": RuleList([(r"Maximum Wind:\s*(\d+)\s*knots", first_group_int)]),
    "intensityMPH": RuleList(
        [(r"Maximum Wind:\s*\d+\s*knots\s*\((\d+)\s*mph\)", first_group_int)]
    ),
    "minSeaLevelPres": RuleList([(r"Minimum Pressure:\s*(\d+)\s*mb", first_group_int)]),
    "datetime": RuleList([(r"Valid at:\s*([^<]+)", first_group)]),
    "forecastHour": RuleList([(r"(\d+)\s*hr\s*Forecast", first_group_int)]),
}

INTEGER_FIELDS: tuple[str, ...] = ("intensity", "intensityMPH", "minSeaLevelPres")
TEXT_FIELDS: tuple[str, ...] = ("stormType", "stormName", "basin")

_WHITESPACE = re.compile(r"\s+")


def extract_track(root: MarkupElement) -> list[Feature]:
    """Extract track line and forecast point features in document order."""
    features: list[Feature] = []
    storm_name = document_name(root)
    for placemark in iter_placemarks(root):
        line = placemark.child("LineString")
        point = placemark.child("Point")

        if line is not None and line.has_child("coordinates"):
            coords = geometry_coordinates(line)
            if not coords:
                log_skipped(placemark, "LineString without valid positions")
                continue
            features.append(Feature.line(coords, _line_properties(placemark, storm_name)))
        elif point is not None and point.has_child("coordinates"):
            coords = geometry_coordinates(point)
            if not coords:
                log_skipped(placemark, "Point without a valid position")
                continue
            features.append(
                Feature.point(coords[0], track_point_properties(placemark, storm_name=storm_name))
            )
        else:
            log_skipped(placemark, "no LineString or Point geometry")

    return features


def document_name(root: MarkupElement) -> str | None:
    """``<name>`` of the top-level Document (or Folder), used as the storm name."""
    if root.tag in ("Document", "Folder"):
        container: MarkupElement | None = root
    else:
        container = root.child("Document") or root.child("Folder")
    if container is None:
        return None
    return container.child_text("name") or None


def track_type(name: str) -> str:
    """``forecast`` / ``historical`` / ``track`` from the line's name."""
    lowered = name.lower()
    for keyword, kind in TRACK_TYPES:
        if keyword in lowered:
            return kind
    return DEFAULT_TRACK_TYPE


def point_type(name: str) -> str:
    return CURRENT_POINT_TYPE if "current" in name.lower() else DEFAULT_POINT_TYPE


def _line_properties(placemark: MarkupElement, storm_name: str | None) -> dict[str, Any]:
    name = placemark_text(placemark, "name", DEFAULT_LINE_NAME)
    return {
        "name": name,
        "description": placemark_text(placemark, "description"),
        "stormName": placemark_field(placemark, "stormName") or storm_name or "",
        "trackType": track_type(name),
    }


def track_point_properties(
    placemark: MarkupElement, *, storm_name: str | None = None
) -> dict[str, Any]:
    """Build the property bag of one forecast position.

    ``storm_name`` fills ``stormName`` when the placemark has no field of
    its own.
    """
    name = placemark_text(placemark, "name", DEFAULT_POINT_NAME)
    description = placemark_text(placemark, "description")

    properties: dict[str, Any] = {
        "name": name,
        "description": description,
        "datetime": placemark_field(placemark, "dtg"),
        "forecastHour": placemark_int(placemark, "forecastHour"),
        "pointType": point_type(name),
    }
    for key in TEXT_FIELDS:
        properties[key] = placemark_text(placemark, key)
    if not properties["stormName"]:
        properties["stormName"] = storm_name or ""
    for key in INTEGER_FIELDS:
        properties[key] = placemark_int(placemark, key)

    for key, rules in DESCRIPTION_RULES.items():
        if properties.get(key) is None:
            value = rules.evaluate(description)
            if isinstance(value, str):
                value = _WHITESPACE.sub(" ", value).strip() or None
            properties[key] = value

    if properties["datetime"] is None:
        properties["datetime"] = placemark_text(placemark, "name")

    style = style_id(placemark)
    properties["styleCategory"] = style
    properties["category"] = style_to_category(style) if style else None

    # Numeric evidence beats the marker style.
    if properties["intensity"] is not None:
        properties["category"] = wind_to_category(properties["intensity"])

    return properties
