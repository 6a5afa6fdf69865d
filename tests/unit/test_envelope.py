"""Tests for the ProductResponse envelope.

Covers:
- Success envelope counts features or tracks
- Failure envelope carries the structured error payload
- ``$schema`` alias in JSON and dict output
"""

from __future__ import annotations

import json
from datetime import datetime

from cyclone_feeds.core.exceptions import ExtractionFailedError, NoMarkupEntryError
from cyclone_feeds.models import (
    Feature,
    FeatureCollection,
    ModelPoint,
    ModelTrack,
    ModelTrackSet,
    ProductResponse,
)


class TestProductResponseOk:
    def test_feature_collection(self) -> None:
        collection = FeatureCollection(
            features=(Feature.point((0, 0), {}), Feature.point((1, 1), {})), product="track"
        )
        response = ProductResponse.ok("track", collection, storm_id="AL052025")
        assert response.success is True
        assert response.feature_count == 2
        assert response.data == collection.to_dict()
        assert response.error is None
        assert response.storm_id == "AL052025"

    def test_model_track_set(self) -> None:
        tracks = ModelTrackSet(
            cycle_timestamp="2025082012",
            models_present=("OFCL",),
            tracks=(ModelTrack("OFCL", (ModelPoint(0, 25.0, -75.0),)),),
        )
        response = ProductResponse.ok("adeck", tracks)
        assert response.feature_count == 1
        assert response.data is not None
        assert response.data["cycleTime"] == "2025082012"


class TestProductResponseFailed:
    def test_error_payload(self) -> None:
        error = ExtractionFailedError("storm-surge", NoMarkupEntryError("none"), storm_id="AL052025")
        response = ProductResponse.failed("storm-surge", error)
        assert response.success is False
        assert response.data is None
        assert response.error is not None
        assert response.error["code"] == "EXTRACTION_FAILED"
        assert response.error["cause_code"] == "ARCHIVE_NO_MARKUP"
        assert response.storm_id == "AL052025"


class TestSerialisation:
    def test_schema_alias(self) -> None:
        response = ProductResponse.ok("track", FeatureCollection())
        payload = json.loads(response.to_json())
        assert payload["$schema"] == "product-response-v1"
        assert "schema_version" not in payload
        assert response.to_dict()["$schema"] == "product-response-v1"

    def test_timestamp_is_iso_utc(self) -> None:
        response = ProductResponse.ok("track", FeatureCollection())
        assert datetime.fromisoformat(response.timestamp).utcoffset() is not None

    def test_populate_by_name(self) -> None:
        response = ProductResponse(schema_version="v2", success=True, product="track")
        assert response.schema_version == "v2"
