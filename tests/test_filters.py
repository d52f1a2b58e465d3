from unittest import mock
from urllib.parse import unquote

import pytest

from data_products import filters as filters_module
from data_products.filters import CqlFilter, FilterBuilder, NoFilter, OgcXmlFilter
from exceptions import ConflictingFilterError, UnknownColumnError, UnknownProductError

XML_FILTER = (
    '<Filter><PropertyIsEqualTo><PropertyName>territory1</PropertyName>'
    '<Literal>Belgium</Literal></PropertyIsEqualTo></Filter>'
)


@pytest.fixture
def builder(catalog):
    return FilterBuilder(catalog)


def test_no_filter(builder):
    assert builder.build() == NoFilter()
    assert builder.build(cql="", xml="") == NoFilter()
    assert NoFilter().as_query() == ""


def test_cql_filter(builder):
    expr = builder.build(cql="territory1 = 'Belgium'")
    assert isinstance(expr, CqlFilter)
    assert expr.as_query() == "cql_filter=territory1%20%3D%20%27Belgium%27"


def test_xml_filter(builder):
    expr = builder.build(xml=XML_FILTER)
    assert isinstance(expr, OgcXmlFilter)
    assert expr.as_query().startswith("filter=%3CFilter%3E")


@pytest.mark.parametrize("cql, xml", [
    ("territory1 = 'Belgium'", XML_FILTER),
    ("x", "y"),
])
def test_conflicting_filters_fail_before_encoding(builder, cql, xml):
    with mock.patch.object(filters_module, "encode_filter_text") as encode:
        with pytest.raises(ConflictingFilterError, match="not both"):
            builder.build(cql=cql, xml=xml)
    encode.assert_not_called()


def test_conflicting_filter_is_a_value_error(builder):
    with pytest.raises(ValueError):
        builder.build(cql="a = 1", xml=XML_FILTER)


def test_non_string_filter(builder):
    with pytest.raises(TypeError):
        builder.build(cql=42)


@pytest.mark.parametrize("text", [
    "territory1 = 'Belgium'",
    "ecoregion = 'Azores Canaries Madeira'",
    "name LIKE 'North%' AND mrgid > 100",
    "INTERSECTS(the_geom, POINT(2.9 51.2))",
    "geoname IN ('Côte d''Ivoire', 'São Tomé & Príncipe')",
    "a=1&b=2#frag?x=+",
    "  leading and trailing  ",
    XML_FILTER,
])
def test_encoding_round_trip(text):
    expr = CqlFilter(text)
    assert unquote(expr.encoded) == text
    assert not set(expr.encoded) & set(" &=#?+'<>")


def test_long_filter_is_not_truncated(builder):
    text = " OR ".join(f"mrgid = {i}" for i in range(2000))
    expr = builder.build(cql=text)
    assert unquote(expr.as_query().split("=", 1)[1]) == text


def test_property_names_checked_against_schema(builder):
    assert builder.property_names("eez", ["geoname", "mrgid"]) == ["geoname", "mrgid"]
    with pytest.raises(UnknownColumnError) as exc_info:
        builder.property_names("eez", ["geoname", "colour"])
    assert exc_info.value.column == "colour"


def test_property_names_unchecked_without_schema(builder):
    assert builder.property_names("ecs", ["anything"]) == ["anything"]


def test_property_names_unknown_product(builder):
    with pytest.raises(UnknownProductError):
        builder.property_names("nope", ["geoname"])
