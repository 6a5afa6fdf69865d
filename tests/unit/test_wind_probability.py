"""Tests for the wind speed probability extractor."""

from __future__ import annotations

import pytest

from cyclone_feeds.extractors import WIND_SPEEDS, extract_wind_probability
from cyclone_feeds.parsers.markup import parse_markup


class TestWindProbability:
    """Band polygons and their representative probability."""

    def test_multigeometry_expands_to_polygons(self, wind_probability_kml: str) -> None:
        features = extract_wind_probability(parse_markup(wind_probability_kml))
        assert [f.properties["name"] for f in features] == ["<5%", "80-90", "80-90", ">90%"]
        assert [f.properties["polygonIndex"] for f in features] == [0, 0, 1, 0]

    def test_probabilities(self, wind_probability_kml: str) -> None:
        features = extract_wind_probability(parse_markup(wind_probability_kml))
        assert [f.properties["probability"] for f in features] == [2.5, 85.0, 85.0, 95.0]

    def test_common_properties(self, wind_probability_kml: str) -> None:
        band = extract_wind_probability(parse_markup(wind_probability_kml))[1]
        assert band.properties["type"] == "wind_probability"
        assert band.properties["windSpeed"] == "34kt"
        assert band.properties["styleId"] == "wsp80"

    def test_missing_style_is_none(self, wind_probability_kml: str) -> None:
        band = extract_wind_probability(parse_markup(wind_probability_kml))[3]
        assert band.properties["styleId"] is None

    @pytest.mark.parametrize("speed", WIND_SPEEDS)
    def test_wind_speed_tag(self, wind_probability_kml: str, speed: str) -> None:
        features = extract_wind_probability(parse_markup(wind_probability_kml), wind_speed=speed)
        assert {f.properties["windSpeed"] for f in features} == {speed}

    def test_point_placemarks_ignored(self, wind_probability_kml: str) -> None:
        features = extract_wind_probability(parse_markup(wind_probability_kml))
        assert "Legend" not in {f.properties["name"] for f in features}
