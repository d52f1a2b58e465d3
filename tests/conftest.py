import json
from typing import Callable, List, Optional, Union

import httpx
import pytest

from config import AppConfig
from data_products.catalog import Catalog
from data_products.models import DataProductDescriptor
from infrastructure.http_client import HttpClient


class FakeServer:
    """
    Routes requests made through httpx.MockTransport and records them.

    Routes match on method and a URL fragment, first match wins. Unmatched
    HEAD requests answer 200 (every probe passes), unmatched GETs answer 404.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes = []

    def on(
        self,
        method: str,
        fragment: str,
        status: int = 200,
        content: Union[bytes, str] = b"",
        json_body=None,
        raises: Optional[Callable[..., Exception]] = None,
    ) -> "FakeServer":
        if json_body is not None:
            content = json.dumps(json_body)
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._routes.append((method.upper(), fragment, status, content, raises))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        for method, fragment, status, content, raises in self._routes:
            if method == request.method and fragment in url:
                if raises is not None:
                    raise raises("simulated failure", request=request)
                return httpx.Response(status, content=content)
        if request.method == "HEAD":
            return httpx.Response(200)
        return httpx.Response(404, content=b"not found")

    def sent(self, method: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        geoserver_root="https://geo.vliz.be/geoserver",
        rest_root="https://marineregions.org/rest/",
        mrgid_root="https://marineregions.org/mrgid/",
        request_timeout_seconds=5,
        probe_timeout_seconds=2,
        default_page_size=50,
    )


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def http_client(config: AppConfig, server: FakeServer):
    client = HttpClient(config, transport=httpx.MockTransport(server.handler))
    yield client
    client.close()


@pytest.fixture
def catalog() -> Catalog:
    return Catalog([
        DataProductDescriptor(
            id="eez",
            namespace="MarineRegions",
            layer="eez",
            schema={"mrgid": "int", "geoname": "string", "territory1": "string"},
        ),
        DataProductDescriptor(id="ecs", namespace="MarineRegions", layer="eez_boundaries_ecs"),
        DataProductDescriptor(id="ecoregions", namespace="Ecoregions", layer="ecoregions"),
    ])


def feature_collection(*properties, crs=None) -> dict:
    data = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [2.5 + i, 51.5]},
                "properties": props,
            }
            for i, props in enumerate(properties)
        ],
    }
    if crs:
        data["crs"] = {"type": "name", "properties": {"name": crs}}
    return data
