import json

import pytest
from rdflib import Literal, URIRef

from data_products.models import ResponseFormat
from exceptions import MalformedPayloadError, UnsupportedFormatError
from services.dispatcher import RawPayload
from services.normalizer import (
    DEFAULT_CRS,
    GeometryCollection,
    LinkedDataGraph,
    TabularSet,
    normalize,
)

from .conftest import feature_collection

GML = b"""<?xml version="1.0" encoding="UTF-8"?>
<wfs:FeatureCollection xmlns:wfs="http://www.opengis.net/wfs/2.0"
    xmlns:gml="http://www.opengis.net/gml/3.2"
    xmlns:MarineRegions="http://marineregions.org"
    numberMatched="2" numberReturned="2">
  <wfs:member>
    <MarineRegions:eez gml:id="eez.1">
      <MarineRegions:mrgid>3293</MarineRegions:mrgid>
      <MarineRegions:geoname>Belgian Exclusive Economic Zone</MarineRegions:geoname>
      <MarineRegions:the_geom>
        <gml:Point><gml:pos>51.5 2.5</gml:pos></gml:Point>
      </MarineRegions:the_geom>
    </MarineRegions:eez>
  </wfs:member>
  <!-- second member -->
  <wfs:member>
    <MarineRegions:eez gml:id="eez.2">
      <MarineRegions:mrgid>5668</MarineRegions:mrgid>
      <MarineRegions:geoname>Dutch Exclusive Economic Zone</MarineRegions:geoname>
    </MarineRegions:eez>
  </wfs:member>
</wfs:FeatureCollection>
"""

TURTLE = b"""
@prefix mr: <http://marineregions.org/ns/ontology#> .
@prefix skos: <http://www.w3.org/2004/02/skos/core#> .

<http://marineregions.org/mrgid/3293> skos:prefLabel "Belgium" .
<http://marineregions.org/mrgid/3293> mr:isPartOf <http://marineregions.org/mrgid/1920> .
<http://marineregions.org/mrgid/3293> skos:prefLabel "Belgium" .
"""

RDF_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:skos="http://www.w3.org/2004/02/skos/core#">
  <rdf:Description rdf:about="http://marineregions.org/mrgid/3293">
    <skos:prefLabel>Belgium</skos:prefLabel>
    <skos:prefLabel>Belgium</skos:prefLabel>
  </rdf:Description>
</rdf:RDF>
"""


def test_geojson_records_in_server_order():
    payload = json.dumps(feature_collection(
        {"mrgid": 5668, "geoname": "Dutch EEZ"},
        {"mrgid": 3293, "geoname": "Belgian EEZ", "area_km2": 3495},
    ))
    result = normalize(payload, ResponseFormat.GEOJSON)
    assert isinstance(result, TabularSet)
    assert [r["mrgid"] for r in result] == [5668, 3293]
    assert result.columns == ["mrgid", "geoname", "area_km2"]


def test_geojson_without_matches_is_empty():
    result = normalize(json.dumps(feature_collection()), "geojson")
    assert len(result) == 0


def test_json_rows_and_single_object():
    assert normalize(b'[{"a": 1}, {"a": 2}]', ResponseFormat.JSON).records == [{"a": 1}, {"a": 2}]
    assert normalize(b'{"MRGID": 3293}', ResponseFormat.JSON).records == [{"MRGID": 3293}]


def test_gml_records():
    result = normalize(RawPayload(url="u", status_code=200, content=GML), ResponseFormat.GML)
    assert result.records == [
        {"mrgid": "3293", "geoname": "Belgian Exclusive Economic Zone"},
        {"mrgid": "5668", "geoname": "Dutch Exclusive Economic Zone"},
    ]


def test_geometry_without_crs_uses_default():
    result = normalize(json.dumps(feature_collection({"a": 1}, {"a": 2})), ResponseFormat.GEOMETRY)
    assert isinstance(result, GeometryCollection)
    assert len(result) == 2
    for tagged in result:
        assert tagged.crs == DEFAULT_CRS
        assert tagged.crs_is_default is True
        assert tagged.geometry["type"] == "Point"


def test_geometry_with_declared_crs():
    crs = "urn:ogc:def:crs:EPSG::4326"
    result = normalize(json.dumps(feature_collection({"a": 1}, crs=crs)), ResponseFormat.GEOMETRY)
    assert [(g.crs, g.crs_is_default) for g in result] == [(crs, False)]


def test_bare_geometry():
    result = normalize(b'{"type": "Polygon", "coordinates": [[[0,0],[1,0],[1,1],[0,0]]]}', "geometry")
    assert result.to_dict()["geometries"][0]["crs"] == DEFAULT_CRS


def test_turtle_keeps_duplicates_in_order():
    result = normalize(TURTLE, ResponseFormat.TURTLE)
    assert isinstance(result, LinkedDataGraph)
    assert len(result) == 3
    subject, predicate, obj = result.triples[0]
    assert subject == URIRef("http://marineregions.org/mrgid/3293")
    assert obj == Literal("Belgium")
    assert result.triples[0] == result.triples[2]
    assert len(result.to_graph()) == 2


def test_rdf_xml_keeps_duplicates():
    result = normalize(RDF_XML, ResponseFormat.RDF)
    assert len(result) == 2
    assert result.to_dict()["triples"][0][2] == '"Belgium"'


@pytest.mark.parametrize("fmt, content", [
    (ResponseFormat.GEOJSON, b"<html>Service Unavailable</html>"),
    (ResponseFormat.GEOJSON, b'{"type": "FeatureCollection"}'),
    (ResponseFormat.GEOJSON, b'{"features": [1, 2]}'),
    (ResponseFormat.GEOJSON, b'{"type": "FeatureCollection", "features": [{"type": "Feature", "properties": [1, 2]}]}'),
    (ResponseFormat.JSON, b'"just a string"'),
    (ResponseFormat.JSON, b"[1, 2, 3]"),
    (ResponseFormat.GML, b"{}"),
    (ResponseFormat.GML, b"<ows:ExceptionReport xmlns:ows='http://www.opengis.net/ows/1.1'/>"),
    (ResponseFormat.GEOMETRY, b'{"type": "Topology"}'),
    (ResponseFormat.GEOMETRY, b'{"type": "Point", "coordinates": [0, 0], "crs": {"type": "name", "properties": "EPSG:4326"}}'),
    (ResponseFormat.GEOMETRY, b'{"type": "FeatureCollection", "features": [{"geometry": {"type": "Blob"}}]}'),
    (ResponseFormat.RDF, b"not rdf at all"),
    (ResponseFormat.TURTLE, b"<a> <b> ."),
])
def test_malformed_payload(fmt, content):
    with pytest.raises(MalformedPayloadError) as exc_info:
        normalize(content, fmt)
    assert exc_info.value.declared_format == fmt.value


@pytest.mark.parametrize("content", [b"", b"   \n", RawPayload(url="u", status_code=204, content=b"")])
def test_empty_payload_is_malformed(content):
    with pytest.raises(MalformedPayloadError, match="empty"):
        normalize(content, ResponseFormat.JSON)


@pytest.mark.parametrize("fmt", ["csv", "shapefile", "jsonld", None])
def test_unsupported_format(fmt):
    with pytest.raises(UnsupportedFormatError):
        normalize(b"{}", fmt)


def test_gml_entities_are_not_expanded():
    content = b"""<?xml version="1.0"?>
<!DOCTYPE wfs:FeatureCollection [<!ENTITY secret "expanded">]>
<wfs:FeatureCollection xmlns:wfs="http://www.opengis.net/wfs/2.0" xmlns:m="http://marineregions.org">
  <wfs:member><m:eez><m:geoname>&secret;</m:geoname></m:eez></wfs:member>
</wfs:FeatureCollection>
"""
    result = normalize(content, ResponseFormat.GML)
    assert len(result) == 1
    assert result.records[0].get("geoname") != "expanded"
