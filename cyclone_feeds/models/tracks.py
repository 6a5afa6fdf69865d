"""Data models for A-deck model forecast tracks.

- ``ModelPoint``: one forecast position of one model at one tau.
- ``ModelTrack``: the ordered, tau-unique points of one model.
- ``ModelTrackSet``: every retained model for the operative cycle.

Design notes:
- All models are frozen dataclasses for immutability.
- Serialised keys (``tau``, ``vmax``, ``modelId``, ``modelsPresent``,
  ``cycleTime``) match what the track-plotting layer already consumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from cyclone_feeds.core.constants import WGS84_MAX_LONGITUDE, WGS84_MIN_LONGITUDE
from cyclone_feeds.core.exceptions import ContractError

CYCLE_FORMAT = "%Y%m%d%H"


class TrackModelError(ContractError):
    """Raised when a track model is constructed with invalid field values."""

    default_stage = "adeck"
    default_code = "TRACK_MODEL_INVALID"


@dataclass(frozen=True, slots=True)
class ModelPoint:
    """A forecast position.

    Attributes:
        tau: Forecast hour offset from the cycle time.
        lat: Latitude in degrees (south negative).
        lon: Longitude in degrees, within [-180, 180] (west negative).
        vmax: Maximum sustained wind in knots, ``None`` when not reported.
    """

    tau: int
    lat: float
    lon: float
    vmax: int | None = None

    def __post_init__(self) -> None:
        if not WGS84_MIN_LONGITUDE <= self.lon <= WGS84_MAX_LONGITUDE:
            msg = f"ModelPoint.lon={self.lon!r}: must be within [-180, 180]"
            raise TrackModelError(msg)

    def to_dict(self) -> dict[str, object]:
        return {"tau": self.tau, "lat": self.lat, "lon": self.lon, "vmax": self.vmax}


@dataclass(frozen=True, slots=True)
class ModelTrack:
    """One model's forecast track, sorted by tau with no repeated tau."""

    model_id: str
    points: tuple[ModelPoint, ...] = ()

    def __post_init__(self) -> None:
        points = tuple(self.points)
        taus = [p.tau for p in points]
        if len(set(taus)) != len(taus):
            msg = f"ModelTrack.points for {self.model_id}: duplicate tau in {taus}"
            raise TrackModelError(msg)
        object.__setattr__(self, "points", points)

    @property
    def taus(self) -> list[int]:
        return [p.tau for p in self.points]

    def point_at(self, tau: int) -> ModelPoint | None:
        for point in self.points:
            if point.tau == tau:
                return point
        return None

    def to_dict(self) -> dict[str, object]:
        return {"modelId": self.model_id, "points": [p.to_dict() for p in self.points]}


@dataclass(frozen=True, slots=True)
class ModelTrackSet:
    """All retained model tracks for the latest cycle in an A-deck.

    Attributes:
        cycle_timestamp: Operative cycle as ``YYYYMMDDHH``; ``None`` when the
            text held no valid record.
        models_present: Model ids in priority order.
        tracks: Tracks in the same priority order.
        filename: Name of the A-deck file the text came from, if known.
    """

    cycle_timestamp: str | None = None
    models_present: tuple[str, ...] = ()
    tracks: tuple[ModelTrack, ...] = ()
    filename: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "models_present", tuple(self.models_present))
        object.__setattr__(self, "tracks", tuple(self.tracks))

    @property
    def cycle_datetime(self) -> datetime | None:
        """The cycle as an aware UTC datetime."""
        if self.cycle_timestamp is None:
            return None
        return datetime.strptime(self.cycle_timestamp, CYCLE_FORMAT).replace(tzinfo=UTC)

    def track_for(self, model_id: str) -> ModelTrack | None:
        wanted = model_id.upper()
        for track in self.tracks:
            if track.model_id == wanted:
                return track
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "filename": self.filename,
            "modelsPresent": list(self.models_present),
            "tracks": [t.to_dict() for t in self.tracks],
            "cycleTime": self.cycle_timestamp,
        }
