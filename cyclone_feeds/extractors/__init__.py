"""Per-product feature extraction over a parsed markup tree.

Each extractor walks every Placemark (``_traversal.iter_placemarks``) and
turns the ones carrying its geometry into Feature records:

- **_track**: forecast / best track line and positions (category, wind, pressure)
- **_polygons**: forecast cone and storm surge areas
- **_wind_probability**: 34/50/64 kt probability bands
- **_wind_arrival**: arrival-time isochrones, areas and split icon labels
- **_styles**: style id -> icon label map used by the arrival labels

Records without a usable geometry are skipped and logged at DEBUG.
Extractors never raise for bad data.
"""

from __future__ import annotations

from cyclone_feeds.extractors._polygons import extract_cone, extract_surge
from cyclone_feeds.extractors._styles import build_style_map, icon_label
from cyclone_feeds.extractors._track import extract_track, track_point_properties
from cyclone_feeds.extractors._traversal import (
    iter_placemarks,
    parse_coordinates_text,
    placemark_field,
)
from cyclone_feeds.extractors._wind_arrival import extract_wind_arrival
from cyclone_feeds.extractors._wind_probability import WIND_SPEEDS, extract_wind_probability

__all__ = [
    "WIND_SPEEDS",
    "build_style_map",
    "extract_cone",
    "extract_surge",
    "extract_track",
    "extract_wind_arrival",
    "extract_wind_probability",
    "icon_label",
    "iter_placemarks",
    "parse_coordinates_text",
    "placemark_field",
    "track_point_properties",
]
