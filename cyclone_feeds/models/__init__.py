"""Data models and schemas.

Defines the data structures produced by the pipeline:
- Feature / FeatureCollection: Normalized geometry with product properties
- ModelPoint / ModelTrack / ModelTrackSet: A-deck model forecast tracks
- ProductResponse: Uniform success/failure envelope for a dispatcher
"""

from cyclone_feeds.models.envelope import ProductResponse
from cyclone_feeds.models.feature import Feature, FeatureCollection, GeometryType
from cyclone_feeds.models.tracks import ModelPoint, ModelTrack, ModelTrackSet, TrackModelError

__all__ = [
    "Feature",
    "FeatureCollection",
    "GeometryType",
    "ModelPoint",
    "ModelTrack",
    "ModelTrackSet",
    "ProductResponse",
    "TrackModelError",
]
