import json

import azure.functions as func
import pytest

from data_products.service import DataProductService
from data_products.triggers import get_data_product_triggers
from gazetteer.service import GazetteerService
from gazetteer.triggers import get_gazetteer_triggers

from .conftest import feature_collection


def make_request(url, params=None, route_params=None):
    return func.HttpRequest(
        method="GET",
        url=url,
        params=params or {},
        route_params=route_params or {},
        body=b"",
    )


@pytest.fixture
def product_handlers(config, catalog, http_client):
    service = DataProductService(config=config, catalog=catalog, http_client=http_client)
    return {t['route']: t['handler'] for t in get_data_product_triggers(service)}


@pytest.fixture
def gazetteer_handlers(config, http_client):
    service = GazetteerService(config=config, http_client=http_client)
    return {t['route']: t['handler'] for t in get_gazetteer_triggers(service)}


def body_of(response):
    return json.loads(response.get_body())


def test_routes(product_handlers, gazetteer_handlers):
    assert sorted(product_handlers) == [
        "products",
        "products/{product_id}",
        "products/{product_id}/columns",
        "products/{product_id}/features",
        "products/{product_id}/view",
    ]
    assert sorted(gazetteer_handlers) == ["gazetteer/{mrgid}", "gazetteer/{mrgid}/relations"]


def test_product_list(product_handlers):
    response = product_handlers["products"](make_request("/api/products"))
    assert response.status_code == 200
    products = body_of(response)["products"]
    assert [p["id"] for p in products] == ["eez", "ecs", "ecoregions"]
    assert products[1]["type_name"] == "MarineRegions:eez_boundaries_ecs"


def test_product_descriptor(product_handlers):
    response = product_handlers["products/{product_id}"](
        make_request("/api/products/eez", route_params={"product_id": "eez"})
    )
    body = body_of(response)
    assert body["schema"]["geoname"] == "string"
    assert body["type_name"] == "MarineRegions:eez"


def test_unknown_product_is_404(product_handlers, server):
    response = product_handlers["products/{product_id}/features"](
        make_request("/api/products/nope/features", route_params={"product_id": "nope"})
    )
    assert response.status_code == 404
    assert body_of(response)["code"] == "UnknownProductError"
    assert server.requests == []


def test_conflicting_filters_is_400(product_handlers):
    response = product_handlers["products/{product_id}/features"](make_request(
        "/api/products/eez/features",
        params={"cql_filter": "a = 1", "filter": "<Filter/>"},
        route_params={"product_id": "eez"},
    ))
    assert response.status_code == 400
    assert body_of(response)["code"] == "ConflictingFilterError"


def test_bad_count_is_400(product_handlers):
    response = product_handlers["products/{product_id}/features"](make_request(
        "/api/products/eez/features",
        params={"count": "ten"},
        route_params={"product_id": "eez"},
    ))
    assert response.status_code == 400
    assert "count" in body_of(response)["description"]


def test_zero_count_is_400(product_handlers, server):
    response = product_handlers["products/{product_id}/features"](make_request(
        "/api/products/eez/features",
        params={"count": "0"},
        route_params={"product_id": "eez"},
    ))
    assert response.status_code == 400
    assert server.requests == []


def test_features(product_handlers, server):
    server.on("GET", "GetFeature", json_body=feature_collection({"mrgid": 3293}))
    response = product_handlers["products/{product_id}/features"](make_request(
        "/api/products/eez/features",
        params={"cql_filter": "mrgid = 3293", "count": "1"},
        route_params={"product_id": "eez"},
    ))
    assert response.status_code == 200
    assert body_of(response) == {"shape": "tabular", "numberReturned": 1, "records": [{"mrgid": 3293}]}


def test_probe_failure_is_503(product_handlers, server):
    server.on("HEAD", "GetCapabilities", status=500)
    response = product_handlers["products/{product_id}/features"](
        make_request("/api/products/eez/features", route_params={"product_id": "eez"})
    )
    assert response.status_code == 503
    assert body_of(response)["code"] == "EndpointErrorStatusError"


def test_rejected_request_is_502(product_handlers, server):
    server.on("GET", "GetFeature", status=400, content="bad filter")
    response = product_handlers["products/{product_id}/features"](make_request(
        "/api/products/eez/features",
        params={"cql_filter": "mrgid = "},
        route_params={"product_id": "eez"},
    ))
    assert response.status_code == 502
    assert body_of(response)["code"] == "RequestStatusError"


def test_view(product_handlers):
    response = product_handlers["products/{product_id}/view"](make_request(
        "/api/products/ecoregions/view",
        params={"cql_filter": "realm = 'Temperate Northern Atlantic'"},
        route_params={"product_id": "ecoregions"},
    ))
    body = body_of(response)
    assert body["layers"] == "ecoregions"
    assert body["base_url"].startswith("https://geo.vliz.be/geoserver/Ecoregions/wms?cql_filter=realm%20%3D")


def test_relations(gazetteer_handlers, server):
    server.on("GET", "getGazetteerRelationsByMRGID.json/3293/", json_body=[
        {"MRGID": 1920, "preferredGazetteerName": "Europe", "relationType": "partOf", "direction": "upper"},
        {"MRGID": 26567, "relationType": "partOf", "direction": "lower"},
    ])
    response = gazetteer_handlers["gazetteer/{mrgid}/relations"](make_request(
        "/api/gazetteer/3293/relations",
        params={"direction": "lower"},
        route_params={"mrgid": "3293"},
    ))
    assert response.status_code == 200
    assert body_of(response) == {
        "mrgid": 3293,
        "numberReturned": 1,
        "relations": [{
            "source_id": 3293,
            "target_id": 26567,
            "relation_type": "partof",
            "direction": "lower",
        }],
    }


def test_relations_invalid_type_is_400(gazetteer_handlers, server):
    response = gazetteer_handlers["gazetteer/{mrgid}/relations"](make_request(
        "/api/gazetteer/3293/relations",
        params={"type": "near"},
        route_params={"mrgid": "3293"},
    ))
    assert response.status_code == 400
    assert server.requests == []


def test_unknown_record_is_404(gazetteer_handlers, server):
    server.on("GET", "getGazetteerRecordByMRGID.json/42/", status=404)
    response = gazetteer_handlers["gazetteer/{mrgid}"](
        make_request("/api/gazetteer/42", route_params={"mrgid": "42"})
    )
    assert response.status_code == 404
    assert body_of(response)["code"] == "UnknownIdentifierError"


def test_record_rdf(gazetteer_handlers, server):
    server.on("GET", "mrgid/3293.rdf", content=(
        '<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" '
        'xmlns:skos="http://www.w3.org/2004/02/skos/core#">'
        '<rdf:Description rdf:about="http://marineregions.org/mrgid/3293">'
        '<skos:prefLabel>Belgium</skos:prefLabel></rdf:Description></rdf:RDF>'
    ))
    response = gazetteer_handlers["gazetteer/{mrgid}"](make_request(
        "/api/gazetteer/3293", params={"format": "rdf"}, route_params={"mrgid": "3293"}
    ))
    body = body_of(response)
    assert body["shape"] == "linked_data"
    assert body["triples"] == [[
        "<http://marineregions.org/mrgid/3293>",
        "<http://www.w3.org/2004/02/skos/core#prefLabel>",
        '"Belgium"',
    ]]
