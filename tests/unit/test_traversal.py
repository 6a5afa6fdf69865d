"""Tests for shared Placemark traversal and field lookup."""

from __future__ import annotations

from collections.abc import Callable

from cyclone_feeds.extractors import iter_placemarks, parse_coordinates_text, placemark_field
from cyclone_feeds.parsers.markup import MarkupElement, parse_markup

NESTED = """
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Folder>
      <Placemark><name>folder-1</name></Placemark>
      <Folder>
        <Placemark><name>deep</name></Placemark>
      </Folder>
    </Folder>
    <Placemark><name>doc-1</name></Placemark>
    <Document>
      <Placemark><name>inner-doc</name></Placemark>
    </Document>
    <Placemark><name>doc-2</name></Placemark>
  </Document>
</kml>
"""


class TestIterPlacemarks:
    """Recursive walk over Document / Folder containers."""

    def test_container_placemarks_before_subcontainers(self) -> None:
        names = [p.child_text("name") for p in iter_placemarks(parse_markup(NESTED))]
        assert names == ["doc-1", "doc-2", "folder-1", "deep", "inner-doc"]

    def test_each_placemark_visited_once(self) -> None:
        placemarks = list(iter_placemarks(parse_markup(NESTED)))
        assert len(placemarks) == len({id(p) for p in placemarks}) == 5

    def test_placemarks_directly_under_root(self) -> None:
        root = parse_markup("<kml><Placemark><name>top</name></Placemark></kml>")
        assert [p.child_text("name") for p in iter_placemarks(root)] == ["top"]

    def test_empty_document(self) -> None:
        assert list(iter_placemarks(parse_markup("<kml><Document/></kml>"))) == []


class TestParseCoordinates:
    def test_drops_altitude(self) -> None:
        assert parse_coordinates_text("-75.5,25.3,0 -76,26,100") == [(-75.5, 25.3), (-76.0, 26.0)]

    def test_skips_malformed_tuples(self) -> None:
        assert parse_coordinates_text("-75,25 bad -x,1 7 -76,26") == [(-75.0, 25.0), (-76.0, 26.0)]

    def test_multiline_whitespace(self) -> None:
        assert parse_coordinates_text("\n\t-75,25\n\t-76,26\n") == [(-75.0, 25.0), (-76.0, 26.0)]

    def test_empty(self) -> None:
        assert parse_coordinates_text(None) == []
        assert parse_coordinates_text("") == []


class TestPlacemarkField:
    """Lookup order: attribute, child, Data, SimpleData."""

    def _placemark(
        self, kml_document: Callable[[str], str], body: str, attrs: str = ""
    ) -> MarkupElement:
        root = parse_markup(kml_document(f"<Placemark {attrs}>{body}</Placemark>"))
        return next(iter_placemarks(root))

    def test_attribute_first(self, kml_document: Callable[[str], str]) -> None:
        placemark = self._placemark(kml_document, "<basin>EP</basin>", 'basin="AL"')
        assert placemark_field(placemark, "basin") == "AL"

    def test_child_element(self, kml_document: Callable[[str], str]) -> None:
        placemark = self._placemark(kml_document, "<stormName>ERIN</stormName>")
        assert placemark_field(placemark, "stormName") == "ERIN"

    def test_extended_data(self, kml_document: Callable[[str], str]) -> None:
        placemark = self._placemark(
            kml_document,
            '<ExtendedData><Data name="intensity"><value>90</value></Data></ExtendedData>',
        )
        assert placemark_field(placemark, "intensity") == "90"

    def test_schema_data(self, kml_document: Callable[[str], str]) -> None:
        placemark = self._placemark(
            kml_document,
            '<ExtendedData><SchemaData schemaUrl="#s">'
            '<SimpleData name="dtg">2025082018</SimpleData>'
            "</SchemaData></ExtendedData>",
        )
        assert placemark_field(placemark, "dtg") == "2025082018"

    def test_missing_is_none(self, kml_document: Callable[[str], str]) -> None:
        placemark = self._placemark(kml_document, "<name>x</name>")
        assert placemark_field(placemark, "intensity") is None

    def test_blank_child_is_none(self, kml_document: Callable[[str], str]) -> None:
        placemark = self._placemark(kml_document, "<stormName>  </stormName>")
        assert placemark_field(placemark, "stormName") is None
