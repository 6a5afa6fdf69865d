"""Data model for normalized geographic features.

A Feature is a single Point, LineString or Polygon extracted from a
product's markup document, plus a flat ``properties`` bag filled by the
product-specific extractor. A FeatureCollection is the ordered output of
one extraction and is what the rendering layer consumes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from cyclone_feeds.core.constants import KMZ_SOURCE_TAG

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from shapely.geometry.base import BaseGeometry


class GeometryType(str, enum.Enum):
    """Geometry kinds emitted by the extractors."""

    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"


Coordinate = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Feature:
    """A single normalized feature.

    Attributes:
        geometry_type: Point, LineString or Polygon.
        coordinates: ``(lon, lat)`` pairs in source order. A Point holds one
            pair; a Polygon holds its outer ring only.
        properties: Product-specific properties (read-only view).
    """

    geometry_type: GeometryType
    coordinates: tuple[Coordinate, ...]
    properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "geometry_type", GeometryType(self.geometry_type))
        object.__setattr__(
            self, "coordinates", tuple((float(lon), float(lat)) for lon, lat in self.coordinates)
        )
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @classmethod
    def point(cls, coordinate: Coordinate, properties: Mapping[str, Any]) -> Feature:
        return cls(GeometryType.POINT, (coordinate,), properties)

    @classmethod
    def line(cls, coordinates: Iterable[Coordinate], properties: Mapping[str, Any]) -> Feature:
        return cls(GeometryType.LINE_STRING, tuple(coordinates), properties)

    @classmethod
    def polygon(cls, ring: Iterable[Coordinate], properties: Mapping[str, Any]) -> Feature:
        return cls(GeometryType.POLYGON, tuple(ring), properties)

    @property
    def geometry(self) -> dict[str, object]:
        """GeoJSON-shaped geometry dict."""
        pairs = [list(c) for c in self.coordinates]
        if self.geometry_type is GeometryType.POINT:
            coordinates: object = pairs[0] if pairs else []
        elif self.geometry_type is GeometryType.POLYGON:
            coordinates = [pairs]
        else:
            coordinates = pairs
        return {"type": self.geometry_type.value, "coordinates": coordinates}

    def to_dict(self) -> dict[str, object]:
        """Serialise to the conventional GeoJSON feature shape."""
        return {
            "type": "Feature",
            "properties": dict(self.properties),
            "geometry": self.geometry,
        }

    def to_shapely(self) -> BaseGeometry:
        """Return the equivalent shapely geometry (no validation or repair)."""
        from shapely.geometry import shape

        return shape(self.geometry)


@dataclass(frozen=True, slots=True)
class FeatureCollection:
    """Ordered features extracted from one product archive.

    Attributes:
        features: Features in document traversal order.
        source_tag: Origin of the features (always ``"kmz"`` for archives).
        product: Product selector the collection was extracted for.
    """

    features: tuple[Feature, ...] = ()
    source_tag: str = KMZ_SOURCE_TAG
    product: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", tuple(self.features))

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def of_type(self, geometry_type: GeometryType | str) -> list[Feature]:
        """Features with the given geometry type, in order."""
        wanted = GeometryType(geometry_type)
        return [f for f in self.features if f.geometry_type is wanted]

    def to_dict(self) -> dict[str, object]:
        return {
            "type": "FeatureCollection",
            "features": [f.to_dict() for f in self.features],
            "source": self.source_tag,
        }
