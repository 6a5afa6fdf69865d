"""Tests for the forecast track extractor."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from cyclone_feeds.extractors import extract_track
from cyclone_feeds.models.feature import GeometryType
from cyclone_feeds.parsers.markup import MarkupElement, parse_markup


class TestTrackFeatures:
    """Feature sequence from the sample track document."""

    def test_feature_order_and_types(self, track_root: MarkupElement) -> None:
        features = extract_track(track_root)
        assert [f.geometry_type for f in features] == [
            GeometryType.LINE_STRING,
            GeometryType.POINT,
            GeometryType.POINT,
            GeometryType.POINT,
        ]

    def test_line_properties(self, track_root: MarkupElement) -> None:
        line = extract_track(track_root)[0]
        assert line.properties["name"] == "Forecast Track"
        assert line.coordinates == ((-75.5, 25.3), (-76.8, 26.9), (-77.9, 28.4))

    def test_placemark_without_geometry_skipped(self, track_root: MarkupElement) -> None:
        names = [f.properties["name"] for f in extract_track(track_root)]
        assert "Decorative label" not in names


class TestDescriptionParsing:
    """Properties recovered from the HTML description."""

    def test_wind_and_pressure(self, track_root: MarkupElement) -> None:
        point = extract_track(track_root)[1]
        assert point.properties["intensity"] == 65
        assert point.properties["intensityMPH"] == 75
        assert point.properties["minSeaLevelPres"] == 985

    def test_valid_time_and_forecast_hour(self, track_root: MarkupElement) -> None:
        point = extract_track(track_root)[1]
        assert point.properties["datetime"] == "8:00 PM EDT August 20, 2025"
        assert point.properties["forecastHour"] == 12

    def test_numeric_wind_overrides_style(self, track_root: MarkupElement) -> None:
        point = extract_track(track_root)[1]
        assert point.properties["styleCategory"] == "ts"
        assert point.properties["category"] == "1"

    def test_point_geometry(self, track_root: MarkupElement) -> None:
        point = extract_track(track_root)[1]
        assert point.geometry == {"type": "Point", "coordinates": [-75.5, 25.3]}


class TestStyleCategory:
    def test_style_category_without_wind(self, track_root: MarkupElement) -> None:
        point = extract_track(track_root)[2]
        assert point.properties["intensity"] is None
        assert point.properties["category"] == "3"

    def test_datetime_falls_back_to_name(self, track_root: MarkupElement) -> None:
        point = extract_track(track_root)[2]
        assert point.properties["datetime"] == "Hurricane Erin"

    def test_no_style_no_wind_has_no_category(self, kml_document: Callable[[str], str]) -> None:
        root = parse_markup(
            kml_document("<Placemark><Point><coordinates>-70,20</coordinates></Point></Placemark>")
        )
        point = extract_track(root)[0]
        assert point.properties["name"] == "Forecast Position"
        assert point.properties["category"] is None
        assert point.properties["styleCategory"] is None


class TestDirectFields:
    """ExtendedData fields take precedence over the description."""

    def test_direct_intensity_wins(self, track_root: MarkupElement) -> None:
        point = extract_track(track_root)[3]
        assert point.properties["intensity"] == 100
        assert point.properties["category"] == "3"

    def test_missing_direct_field_filled_from_description(self, track_root: MarkupElement) -> None:
        point = extract_track(track_root)[3]
        assert point.properties["intensityMPH"] == 45

    def test_text_fields(self, track_root: MarkupElement) -> None:
        props = extract_track(track_root)[3].properties
        assert props["datetime"] == "2025082112"
        assert props["stormType"] == "HU"
        assert props["stormName"] == "ERIN"
        assert props["basin"] == "AL"

    def test_attribute_fields(self, kml_document: Callable[[str], str]) -> None:
        root = parse_markup(
            kml_document(
                '<Placemark intensity="120" dtg="2025082200">'
                "<Point><coordinates>-70,20</coordinates></Point></Placemark>"
            )
        )
        props = extract_track(root)[0].properties
        assert props["intensity"] == 120
        assert props["category"] == "4"
        assert props["datetime"] == "2025082200"


class TestGeometryPrecedence:
    def test_line_wins_over_point(self, kml_document: Callable[[str], str]) -> None:
        root = parse_markup(
            kml_document(
                "<Placemark><name>Both</name>"
                "<LineString><coordinates>-70,20 -71,21</coordinates></LineString>"
                "<Point><coordinates>-70,20</coordinates></Point></Placemark>"
            )
        )
        features = extract_track(root)
        assert len(features) == 1
        assert features[0].geometry_type is GeometryType.LINE_STRING

    def test_bad_coordinates_skipped(self, kml_document: Callable[[str], str]) -> None:
        root = parse_markup(
            kml_document("<Placemark><Point><coordinates>abc,def</coordinates></Point></Placemark>")
        )
        assert extract_track(root) == []

    def test_cat3_scenario(self, kml_document: Callable[[str], str]) -> None:
        root = parse_markup(
            kml_document(
                "<Placemark><styleUrl>#cat3</styleUrl>"
                "<Point><coordinates>-80.1,26.2,0</coordinates></Point></Placemark>"
            )
        )
        features = extract_track(root)
        assert len(features) == 1
        assert features[0].properties["category"] == "3"


class TestTrackAndPointTypes:
    """Types from placemark names and the document-level storm name."""

    def test_sample_types(self, track_root: MarkupElement) -> None:
        line, point = extract_track(track_root)[:2]
        assert line.properties["trackType"] == "forecast"
        assert point.properties["pointType"] == "position"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Forecast Track", "forecast"),
            ("Past Track", "historical"),
            ("PAST TRACK", "historical"),
            ("Storm Path", "track"),
        ],
    )
    def test_track_type(
        self, name: str, expected: str, kml_document: Callable[[str], str]
    ) -> None:
        root = parse_markup(
            kml_document(
                f"<Placemark><name>{name}</name>"
                "<LineString><coordinates>-70,20 -71,21</coordinates></LineString></Placemark>"
            )
        )
        assert extract_track(root)[0].properties["trackType"] == expected

    def test_current_point_type(self, kml_document: Callable[[str], str]) -> None:
        root = parse_markup(
            kml_document(
                "<Placemark><name>Current Position</name>"
                "<Point><coordinates>-70,20</coordinates></Point></Placemark>"
            )
        )
        assert extract_track(root)[0].properties["pointType"] == "current"

    def test_storm_name_from_document(self, track_root: MarkupElement) -> None:
        line, point = extract_track(track_root)[:2]
        assert line.properties["stormName"] == "AL052025 Advisory 12 Forecast Track"
        assert point.properties["stormName"] == "AL052025 Advisory 12 Forecast Track"

    def test_direct_storm_name_wins(self, track_root: MarkupElement) -> None:
        assert extract_track(track_root)[3].properties["stormName"] == "ERIN"

    def test_unnamed_document(self, kml_document: Callable[[str], str]) -> None:
        root = parse_markup(
            kml_document("<Placemark><Point><coordinates>-70,20</coordinates></Point></Placemark>")
        )
        assert extract_track(root)[0].properties["stormName"] == ""
