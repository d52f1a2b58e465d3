import pytest

from config import AppConfig
from data_products.endpoints import EndpointResolver
from data_products.models import Protocol


@pytest.mark.parametrize("product_id, protocol, expected", [
    ("eez", Protocol.WMS, "https://geo.vliz.be/geoserver/MarineRegions/wms?"),
    ("eez", Protocol.WFS, "https://geo.vliz.be/geoserver/MarineRegions/wfs?"),
    ("ecoregions", Protocol.WMS, "https://geo.vliz.be/geoserver/Ecoregions/wms?"),
    ("ecoregions", "WFS", "https://geo.vliz.be/geoserver/Ecoregions/wfs?"),
])
def test_geoserver_endpoints(catalog, config, product_id, protocol, expected):
    endpoint = EndpointResolver(config).resolve(catalog.resolve(product_id), protocol)
    assert endpoint.base_url == expected
    assert endpoint.protocol is Protocol(protocol)


def test_rest_endpoint_ignores_namespace(catalog, config):
    resolver = EndpointResolver(config)
    eez = resolver.resolve(catalog.resolve("eez"), Protocol.REST)
    eco = resolver.resolve(catalog.resolve("ecoregions"), Protocol.REST)
    assert eez.base_url == eco.base_url == "https://marineregions.org/rest/"
    assert resolver.rest() == eez


def test_roots_are_normalized(catalog):
    config = AppConfig(geoserver_root="https://example.org/geoserver/", rest_root="https://example.org/rest")
    resolver = EndpointResolver(config)
    assert resolver.resolve(catalog.resolve("eez"), Protocol.WFS).base_url == "https://example.org/geoserver/MarineRegions/wfs?"
    assert resolver.rest().base_url == "https://example.org/rest/"


def test_unknown_protocol(catalog, config):
    with pytest.raises(ValueError):
        EndpointResolver(config).resolve(catalog.resolve("eez"), "WCS")
