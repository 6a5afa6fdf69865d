"""Shared Placemark traversal and field helpers for the extractors.

Responsibilities:
- Walk ``kml`` / ``Document`` / ``Folder`` containers at any depth
- Parse KML coordinate text into ``(lon, lat)`` pairs
- Read Placemark fields from attributes, child elements or ExtendedData
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cyclone_feeds.classifiers import strip_style_ref
from cyclone_feeds.utils.helpers import parse_int_or_none

if TYPE_CHECKING:
    from collections.abc import Iterator

    from cyclone_feeds.models.feature import Coordinate
    from cyclone_feeds.parsers.markup import MarkupElement

logger = logging.getLogger("cyclone_feeds.extractors")

CONTAINER_TAGS: tuple[str, ...] = ("Folder", "Document")
OUTER_RING_PATH = "outerBoundaryIs/LinearRing/coordinates"


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def iter_placemarks(root: MarkupElement) -> Iterator[MarkupElement]:
    """Yield every Placemark under ``root``, depth-first.

    Within one container its own Placemarks come first, then its Folders,
    then its Documents, each in document order. Containers nest to any
    depth and each Placemark is yielded exactly once.
    """
    yield from root.children_named("Placemark")
    for tag in CONTAINER_TAGS:
        for container in root.children_named(tag):
            yield from iter_placemarks(container)


def iter_styles(root: MarkupElement) -> Iterator[MarkupElement]:
    """Yield every ``Style`` element anywhere in the document."""
    if root.tag == "Style":
        yield root
    yield from root.iter_descendants("Style")


# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------


def parse_coordinates_text(text: str | None) -> list[Coordinate]:
    """Parse KML coordinate text (``lon,lat,alt lon,lat,alt ...``) to (lon, lat) tuples.

    Altitude is dropped. Tuples that do not hold two numbers are skipped.
    """
    coords: list[Coordinate] = []
    if not text:
        return coords
    for token in text.split():
        parts = token.strip().split(",")
        if len(parts) >= 2:
            try:
                lon = float(parts[0])
                lat = float(parts[1])
            except ValueError:
                continue
            coords.append((lon, lat))
    return coords


def geometry_coordinates(geometry: MarkupElement) -> list[Coordinate]:
    """Coordinates of a Point or LineString element."""
    return parse_coordinates_text(geometry.child_text("coordinates"))


def outer_ring(polygon: MarkupElement) -> list[Coordinate]:
    """Outer boundary of a Polygon. Inner boundaries (holes) are not read."""
    node = polygon.find_path(OUTER_RING_PATH)
    if node is None:
        return []
    return parse_coordinates_text(node.text)


def multi_geometry_parts(placemark: MarkupElement, tag: str) -> tuple[MarkupElement, ...]:
    """``tag`` children of the Placemark's first MultiGeometry (nested ones included)."""
    multi = placemark.child("MultiGeometry")
    if multi is None:
        return ()
    parts = list(multi.children_named(tag))
    for nested in multi.children_named("MultiGeometry"):
        parts.extend(nested.iter_descendants(tag))
    return tuple(parts)


# ---------------------------------------------------------------------------
# Placemark fields
# ---------------------------------------------------------------------------


def placemark_field(placemark: MarkupElement, name: str) -> str | None:
    """Read a named field from a Placemark.

    Lookup order:
    - attribute on the Placemark element
    - direct child element text
    - ``ExtendedData/Data[@name]/value``
    - ``ExtendedData/SchemaData/SimpleData[@name]``

    Returns ``None`` when the field is absent or blank.
    """
    value = placemark.attributes.get(name)
    if value and value.strip():
        return value.strip()

    child = placemark.child(name)
    if child is not None and child.text:
        return child.text

    extended = placemark.child("ExtendedData")
    if extended is None:
        return None

    for data in extended.children_named("Data"):
        if data.attributes.get("name") == name:
            text = data.child_text("value")
            if text:
                return text

    for schema_data in extended.children_named("SchemaData"):
        for simple in schema_data.children_named("SimpleData"):
            if simple.attributes.get("name") == name and simple.text:
                return simple.text

    return None


def placemark_text(placemark: MarkupElement, name: str, default: str = "") -> str:
    return placemark_field(placemark, name) or default


def placemark_int(placemark: MarkupElement, name: str) -> int | None:
    """Integer field value; unparseable text counts as absent."""
    return parse_int_or_none(placemark_field(placemark, name))


def style_id(placemark: MarkupElement) -> str | None:
    return strip_style_ref(placemark.child_text("styleUrl"))


def log_skipped(placemark: MarkupElement, reason: str) -> None:
    logger.debug(
        "Skipping placemark '%s': %s",
        placemark.child_text("name") or "<unnamed>",
        reason,
    )
