"""ATCF A-deck forecast-track parser.

An A-deck is a comma-delimited text feed with one line per model, cycle
and forecast hour. Only the first nine columns are used:

    0 basin, 1 cyclone number, 2 cycle (YYYYMMDDHH), 3 tech number,
    4 model id, 5 tau, 6 latitude, 7 longitude, 8 max wind (kt)

Example::

    AL, 05, 2025082012, 03, OFCL,  24, 253N,  755W,  65

Parsing rules:
- Lines with fewer than nine fields or a cycle that is not ten digits
  are skipped; the latest cycle in the text is the operative one.
- Only allow-listed models are kept (official, hurricane, global,
  European and GEFS ensemble aids plus the track consensus aids).
- Within a model the first record for each tau wins; points are sorted
  by tau and models are ranked by ``MODEL_PRIORITY`` then id.
- Malformed lines never fail the parse.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from cyclone_feeds.core.exceptions import InvalidStormIdError
from cyclone_feeds.models.tracks import ModelPoint, ModelTrack, ModelTrackSet
from cyclone_feeds.utils.helpers import normalize_longitude, parse_int_or_none

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger("cyclone_feeds.parsers.adeck")

# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------

MIN_FIELDS = 9
CYCLE_COLUMN = 2
MODEL_COLUMN = 4
TAU_COLUMN = 5
LAT_COLUMN = 6
LON_COLUMN = 7
VMAX_COLUMN = 8

CYCLE_PATTERN = re.compile(r"^\d{10}$")
LINE_SPLIT = re.compile(r"\r?\n")

# Integer tokens are tenths of a degree; decimal tokens are already degrees.
_TENTHS_TOKEN = r"^(-?\d+)([{hemis}])$"
_DEGREES_TOKEN = r"^(-?\d+(?:\.\d+)?)([{hemis}])$"
LAT_TENTHS = re.compile(_TENTHS_TOKEN.format(hemis="NS"), re.IGNORECASE)
LAT_DEGREES = re.compile(_DEGREES_TOKEN.format(hemis="NS"), re.IGNORECASE)
LON_TENTHS = re.compile(_TENTHS_TOKEN.format(hemis="EW"), re.IGNORECASE)
LON_DEGREES = re.compile(_DEGREES_TOKEN.format(hemis="EW"), re.IGNORECASE)

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

#: Ranking tiers, best first. Ids not in any tier rank after all of them.
MODEL_PRIORITY: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("official", ("OFCL", "OFCI")),
    ("hurricane", ("HWRF", "HWFI", "HMON", "HMNI")),
    ("hurricane_system", ("HAFA", "HAFB", "HFSA", "HFSB", "HFAI", "HFBI")),
    (
        "global",
        ("AVNO", "AVNI", "GFS", "GFSO", "CMC", "CMCI", "NGX", "NVGM", "UKM", "UKX", "UKMI"),
    ),
    ("european", ("EMX", "EMXI", "EMX2", "ECMF")),
    ("ensemble_mean", ("AEMN", "AEMI")),
    ("ensemble_control", ("AC00",)),
)
ENSEMBLE_MEMBER_PATTERN = re.compile(r"^AP\d{2}$")
CONSENSUS_MODELS: tuple[str, ...] = ("TVCN", "TVCA", "HCCA", "IVCN")

_MODEL_RANK: dict[str, int] = {
    model: rank for rank, (_tier, models) in enumerate(MODEL_PRIORITY) for model in models
}
MEMBER_RANK = len(MODEL_PRIORITY)
OTHER_RANK = MEMBER_RANK + 1

DEFAULT_MODEL_PATTERN = re.compile(
    "^(?:"
    + "|".join(
        [m for _tier, models in MODEL_PRIORITY for m in models]
        + list(CONSENSUS_MODELS)
        + [r"AP\d{2}"]
    )
    + ")$",
    re.IGNORECASE,
)

# ---------------------------------------------------------------------------
# File naming
# ---------------------------------------------------------------------------

STORM_ID_PATTERN = re.compile(r"^(AL|EP|CP)(\d{2})(\d{4})$", re.IGNORECASE)


def adeck_filename(storm_id: str) -> str:
    """``"AL052025"`` -> ``"aal052025.dat"``.

    Raises:
        InvalidStormIdError: If ``storm_id`` is not basin + number + year.
    """
    match = STORM_ID_PATTERN.match(storm_id.strip()) if storm_id else None
    if match is None:
        msg = f"Invalid storm id {storm_id!r}: expected a form like AL052025"
        raise InvalidStormIdError(msg, correlation_id=storm_id or "")
    basin, number, year = match.groups()
    return f"a{basin.lower()}{number}{year}.dat"


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def parse_latitude(token: str | None) -> float | None:
    """``"253N"`` -> 25.3, ``"18.5S"`` -> -18.5; ``None`` if unparseable."""
    value = _parse_hemisphere_token(token, LAT_TENTHS, LAT_DEGREES)
    if value is None:
        return None
    magnitude, hemisphere = value
    return -magnitude if hemisphere == "S" else magnitude


def parse_longitude(token: str | None) -> float | None:
    """``"755W"`` -> -75.5, wrapped into [-180, 180]; ``None`` if unparseable."""
    value = _parse_hemisphere_token(token, LON_TENTHS, LON_DEGREES)
    if value is None:
        return None
    magnitude, hemisphere = value
    return normalize_longitude(-magnitude if hemisphere == "W" else magnitude)


def _parse_hemisphere_token(
    token: str | None, tenths: re.Pattern[str], degrees: re.Pattern[str]
) -> tuple[float, str] | None:
    if not token:
        return None
    match = tenths.match(token)
    if match is not None:
        return int(match.group(1)) / 10.0, match.group(2).upper()
    match = degrees.match(token)
    if match is not None:
        return float(match.group(1)), match.group(2).upper()
    return None


def model_rank(model_id: str) -> tuple[int, str]:
    """Sort key: priority tier, then id."""
    model = model_id.upper()
    if model in _MODEL_RANK:
        return (_MODEL_RANK[model], model)
    if ENSEMBLE_MEMBER_PATTERN.match(model):
        return (MEMBER_RANK, model)
    return (OTHER_RANK, model)


def sort_models(model_ids: Iterable[str]) -> list[str]:
    return sorted(model_ids, key=model_rank)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def parse_adeck(
    text: str,
    *,
    filename: str | None = None,
    model_pattern: re.Pattern[str] = DEFAULT_MODEL_PATTERN,
    max_tau: int | None = None,
) -> ModelTrackSet:
    """Decode A-deck text into ranked per-model tracks for the latest cycle.

    Args:
        text: Raw A-deck text.
        filename: Source file name, copied onto the result.
        model_pattern: Allow-list of model ids (matched against the
            upper-cased id).
        max_tau: Drop points beyond this forecast hour.

    Returns:
        ModelTrackSet; empty (``cycle_timestamp=None``) when no line
        carries a valid cycle.
    """
    records: list[list[str]] = []
    latest_cycle: str | None = None
    skipped = 0

    for line in LINE_SPLIT.split(text or ""):
        if "," not in line:
            continue
        fields = [f.strip() for f in line.split(",")]
        if len(fields) < MIN_FIELDS or not CYCLE_PATTERN.match(fields[CYCLE_COLUMN]):
            skipped += 1
            continue
        cycle = fields[CYCLE_COLUMN]
        if latest_cycle is None or cycle > latest_cycle:
            latest_cycle = cycle
        records.append(fields)

    if latest_cycle is None:
        logger.debug("A-deck %s: no valid records (%d lines skipped)", filename or "<text>", skipped)
        return ModelTrackSet(filename=filename)

    by_model: dict[str, dict[int, ModelPoint]] = {}
    for fields in records:
        if fields[CYCLE_COLUMN] != latest_cycle:
            continue
        model = fields[MODEL_COLUMN].upper()
        if not model_pattern.match(model):
            continue

        point = _record_point(fields)
        if point is None:
            skipped += 1
            continue
        if max_tau is not None and point.tau > max_tau:
            continue
        by_model.setdefault(model, {}).setdefault(point.tau, point)

    models = sort_models(m for m, points in by_model.items() if points)
    tracks = tuple(
        ModelTrack(model_id=m, points=tuple(sorted(by_model[m].values(), key=lambda p: p.tau)))
        for m in models
    )

    logger.debug(
        "A-deck %s: cycle=%s models=%d skipped_lines=%d",
        filename or "<text>",
        latest_cycle,
        len(tracks),
        skipped,
    )
    return ModelTrackSet(
        cycle_timestamp=latest_cycle,
        models_present=tuple(models),
        tracks=tracks,
        filename=filename,
    )


def _record_point(fields: list[str]) -> ModelPoint | None:
    tau = parse_int_or_none(fields[TAU_COLUMN] or "0")
    lat = parse_latitude(fields[LAT_COLUMN])
    lon = parse_longitude(fields[LON_COLUMN])
    if tau is None or lat is None or lon is None:
        return None
    return ModelPoint(tau=tau, lat=lat, lon=lon, vmax=parse_int_or_none(fields[VMAX_COLUMN]))
