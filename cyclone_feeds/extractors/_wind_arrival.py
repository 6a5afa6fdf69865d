"""Tropical-storm-force wind arrival time extractor.

Both arrival products (most likely and earliest reasonable) mix several
geometry kinds:

- LineString isochrones and Polygon areas carrying the arrival time in
  their name or description,
- Point labels drawn as icons, where one logical label (``"Wed 8 AM"``)
  is split over three Placemarks styled ``style<N>a`` (day),
  ``style<N>b`` (hour) and ``style<N>c`` (AM/PM).

Split labels are collected during the walk and emitted after it as one
``wind_arrival_group`` Point per group, anchored at the centroid of its
components, with each component's coordinates and part tag kept for the
rendering layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cyclone_feeds.classifiers import (
    COMPONENT_SUFFIX_PARTS,
    arrival_time_from_text,
    hour_word_to_number,
    label_style_group,
    reconstruct_label,
)
from cyclone_feeds.extractors._styles import build_style_map
from cyclone_feeds.extractors._traversal import (
    geometry_coordinates,
    iter_placemarks,
    log_skipped,
    multi_geometry_parts,
    outer_ring,
    placemark_text,
    style_id,
)
from cyclone_feeds.models.feature import Coordinate, Feature

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cyclone_feeds.parsers.markup import MarkupElement

ARRIVAL_WIND_SPEED = "34kt"
UNKNOWN_ARRIVAL = "Unknown"

POINT_TYPE = "wind_arrival_point"
LINE_TYPE = "wind_arrival_line"
POLYGON_TYPE = "wind_arrival"
GROUP_TYPE = "wind_arrival_group"


@dataclass(slots=True)
class _LabelComponent:
    style_id: str
    suffix: str
    coordinates: Coordinate


@dataclass(slots=True)
class _LabelGroup:
    number: str
    components: dict[str, _LabelComponent] = field(default_factory=dict)

    def add(self, component: _LabelComponent) -> None:
        # First placemark per suffix wins.
        self.components.setdefault(component.suffix, component)

    def ordered(self) -> list[_LabelComponent]:
        return [self.components[s] for s in sorted(self.components)]


def extract_wind_arrival(
    root: MarkupElement,
    *,
    product: str = "most_likely",
    style_map: Mapping[str, str] | None = None,
) -> list[Feature]:
    """Extract arrival-time lines, areas, points and grouped labels.

    Args:
        root: Parsed document root.
        product: ``"most_likely"`` or ``"earliest"``, copied to every feature.
        style_map: Prebuilt style id -> icon label map; built from ``root``
            when omitted.
    """
    styles = build_style_map(root) if style_map is None else style_map
    walker = _ArrivalWalker(styles, product)

    for placemark in iter_placemarks(root):
        walker.visit(placemark)

    return walker.features + walker.group_features()


class _ArrivalWalker:
    def __init__(self, style_map: Mapping[str, str], product: str) -> None:
        self.style_map = style_map
        self.product = product
        self.features: list[Feature] = []
        self.groups: dict[str, _LabelGroup] = {}

    # -- dispatch -----------------------------------------------------------

    def visit(self, placemark: MarkupElement) -> None:
        point = placemark.child("Point")
        line = placemark.child("LineString")
        multi = placemark.child("MultiGeometry")
        polygon = placemark.child("Polygon")

        if point is not None:
            self._point(point, placemark, 0)
        elif line is not None:
            self._line(line, placemark, 0)
        elif multi is not None:
            for index, part in enumerate(multi_geometry_parts(placemark, "Point")):
                self._point(part, placemark, index)
            for index, part in enumerate(multi_geometry_parts(placemark, "LineString")):
                self._line(part, placemark, index)
            for index, part in enumerate(multi_geometry_parts(placemark, "Polygon")):
                self._polygon(part, placemark, index)
        elif polygon is not None:
            self._polygon(polygon, placemark, 0)
        else:
            log_skipped(placemark, "no arrival geometry")

    # -- geometry handlers --------------------------------------------------

    def _point(self, point: MarkupElement, placemark: MarkupElement, index: int) -> None:
        coords = geometry_coordinates(point)
        if not coords:
            log_skipped(placemark, "Point without a valid position")
            return

        sid = style_id(placemark)
        group = label_style_group(sid)
        if sid is not None and group is not None and group[1]:
            number, suffix = group
            self.groups.setdefault(number, _LabelGroup(number)).add(
                _LabelComponent(style_id=sid, suffix=suffix, coordinates=coords[0])
            )
            return

        properties = self._base_properties(placemark, sid, POINT_TYPE)
        properties["arrivalTime"] = self._arrival_time(placemark, sid) or UNKNOWN_ARRIVAL
        properties["pointIndex"] = index
        self.features.append(Feature.point(coords[0], properties))

    def _line(self, line: MarkupElement, placemark: MarkupElement, index: int) -> None:
        coords = geometry_coordinates(line)
        if not coords:
            log_skipped(placemark, "LineString without valid positions")
            return

        sid = style_id(placemark)
        properties = self._base_properties(placemark, sid, LINE_TYPE)
        properties["arrivalTime"] = self._arrival_time(placemark, sid)
        properties["lineIndex"] = index
        self.features.append(Feature.line(coords, properties))

    def _polygon(self, polygon: MarkupElement, placemark: MarkupElement, index: int) -> None:
        ring = outer_ring(polygon)
        if not ring:
            log_skipped(placemark, "Polygon without an outer boundary")
            return

        sid = style_id(placemark)
        properties = self._base_properties(placemark, sid, POLYGON_TYPE)
        properties["arrivalTime"] = self._arrival_time(placemark, sid)
        properties["polygonIndex"] = index
        self.features.append(Feature.polygon(ring, properties))

    # -- label groups -------------------------------------------------------

    def group_features(self) -> list[Feature]:
        """One anchored Point per split label group, in first-seen order."""
        features: list[Feature] = []
        for number, group in self.groups.items():
            components = group.ordered()
            arrival = None
            for component in components:
                arrival = reconstruct_label(component.style_id, self.style_map)
                if arrival:
                    break

            properties: dict[str, Any] = {
                "name": "",
                "description": "",
                "arrivalTime": arrival or UNKNOWN_ARRIVAL,
                "styleId": f"group{number}",
                "windSpeed": ARRIVAL_WIND_SPEED,
                "type": GROUP_TYPE,
                "product": self.product,
                "pointIndex": 0,
                "components": [self._component_dict(c) for c in components],
            }
            features.append(Feature.point(_centroid(components), properties))
        return features

    def _component_dict(self, component: _LabelComponent) -> dict[str, Any]:
        part = COMPONENT_SUFFIX_PARTS[component.suffix]
        text = self.style_map.get(component.style_id, "")
        if part == "hour":
            text = hour_word_to_number(text)
        return {
            "type": part,
            "styleId": component.style_id,
            "text": text,
            "coordinates": list(component.coordinates),
        }

    # -- shared -------------------------------------------------------------

    def _arrival_time(self, placemark: MarkupElement, sid: str | None) -> str | None:
        from_styles = reconstruct_label(sid, self.style_map)
        if from_styles:
            return from_styles
        return arrival_time_from_text(
            placemark_text(placemark, "name"),
            placemark_text(placemark, "description"),
        )

    def _base_properties(
        self, placemark: MarkupElement, sid: str | None, feature_type: str
    ) -> dict[str, Any]:
        return {
            "name": placemark_text(placemark, "name"),
            "description": placemark_text(placemark, "description"),
            "styleId": sid,
            "windSpeed": ARRIVAL_WIND_SPEED,
            "type": feature_type,
            "product": self.product,
        }


def _centroid(components: list[_LabelComponent]) -> Coordinate:
    """Anchor point of a label group."""
    from shapely.geometry import MultiPoint

    centre = MultiPoint([c.coordinates for c in components]).centroid
    return (centre.x, centre.y)
