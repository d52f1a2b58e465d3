import pytest

from data_products.catalog import Catalog, DEFAULT_PRODUCTS, get_default_catalog
from data_products.endpoints import EndpointResolver
from data_products.models import DataProductDescriptor, Protocol
from exceptions import UnknownProductError


@pytest.mark.parametrize("product_id", ["nope", "", "EEZ", "MarineRegions:eez", None, 42])
def test_resolve_unknown_product(catalog, server, http_client, product_id):
    with pytest.raises(UnknownProductError) as exc_info:
        catalog.resolve(product_id)
    assert exc_info.value.product_id == product_id
    assert server.requests == []


def test_unknown_product_is_a_key_error(catalog):
    with pytest.raises(KeyError):
        catalog.resolve("nope")
    assert str(UnknownProductError("nope")) == "Unknown data product: 'nope'"


def test_resolve_ecs_and_wfs_endpoint(catalog, config):
    descriptor = catalog.resolve("ecs")
    assert descriptor == DataProductDescriptor(id="ecs", namespace="MarineRegions", layer="eez_boundaries_ecs")
    assert descriptor.type_name == "MarineRegions:eez_boundaries_ecs"

    endpoint = EndpointResolver(config).resolve(descriptor, Protocol.WFS)
    assert endpoint.base_url == "https://geo.vliz.be/geoserver/MarineRegions/wfs?"


def test_duplicate_id_rejected():
    with pytest.raises(ValueError, match="Duplicate data product id"):
        Catalog([
            DataProductDescriptor(id="eez", namespace="MarineRegions", layer="eez"),
            DataProductDescriptor(id="eez", namespace="MarineRegions", layer="eez_12nm"),
        ])


def test_duplicate_resource_rejected():
    with pytest.raises(ValueError, match="Duplicate geoserver resource"):
        Catalog([
            DataProductDescriptor(id="eez", namespace="MarineRegions", layer="eez"),
            DataProductDescriptor(id="eez_copy", namespace="MarineRegions", layer="eez"),
        ])


def test_schema_of(catalog):
    assert catalog.schema_of("eez") == {"mrgid": "int", "geoname": "string", "territory1": "string"}
    assert catalog.schema_of("ecs") == {}
    assert catalog.schema_of("nope") == {}


def test_schema_of_returns_a_copy(catalog):
    catalog.schema_of("eez")["extra"] = "string"
    assert "extra" not in catalog.schema_of("eez")


def test_descriptors_are_frozen(catalog):
    descriptor = catalog.resolve("eez")
    with pytest.raises(Exception):
        descriptor.layer = "other"


def test_default_catalog():
    catalog = get_default_catalog()
    assert len(catalog) == len(DEFAULT_PRODUCTS)
    assert "eez" in catalog
    assert catalog.resolve("ecoregions").type_name == "Ecoregions:ecoregions"
    assert catalog.resolve("worldheritagemarineprogramme").namespace == "Worldheritage"
    assert [p.id for p in catalog.list_products()] == [p.id for p in DEFAULT_PRODUCTS]
