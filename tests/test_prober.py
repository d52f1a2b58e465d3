import httpx
import pytest

from data_products.models import Endpoint, Protocol, ResponseFormat
from exceptions import EndpointErrorStatusError, EndpointUnreachableError, ProbeError, TransportError
from services.dispatcher import QueryRequest, RequestDispatcher
from services.prober import CapabilityProber, capabilities_url

WMS = Endpoint(protocol=Protocol.WMS, base_url="https://geo.vliz.be/geoserver/MarineRegions/wms?")
WFS = Endpoint(protocol=Protocol.WFS, base_url="https://geo.vliz.be/geoserver/MarineRegions/wfs?")
REST = Endpoint(protocol=Protocol.REST, base_url="https://marineregions.org/rest/")


def test_capabilities_url():
    assert capabilities_url(WMS) == "https://geo.vliz.be/geoserver/MarineRegions/wms?request=GetCapabilities&service=WMS"
    assert capabilities_url(WFS) == "https://geo.vliz.be/geoserver/MarineRegions/wfs?request=GetCapabilities&service=WFS"
    assert capabilities_url(REST) == "https://marineregions.org/rest/"


def test_probe_passes(http_client, server):
    result = CapabilityProber(http_client).probe(WFS)
    assert result.status_code == 200
    assert result.url == capabilities_url(WFS)
    assert [r.method for r in server.requests] == ["HEAD"]


def test_probe_uses_probe_timeout(http_client, server):
    CapabilityProber(http_client).probe(WMS)
    assert server.requests[0].extensions["timeout"]["read"] == 2


def test_probe_error_status(http_client, server):
    server.on("HEAD", "GetCapabilities", status=500)
    with pytest.raises(EndpointErrorStatusError) as exc_info:
        CapabilityProber(http_client).probe(WFS)
    assert exc_info.value.status_code == 500
    assert exc_info.value.url == capabilities_url(WFS)


@pytest.mark.parametrize("error", [httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout])
def test_probe_unreachable(http_client, server, error):
    server.on("HEAD", "GetCapabilities", raises=error)
    with pytest.raises(EndpointUnreachableError) as exc_info:
        CapabilityProber(http_client).probe(WMS)
    assert exc_info.value.url == capabilities_url(WMS)
    assert isinstance(exc_info.value.cause, error)


def test_failed_probe_stops_dispatch(http_client, server):
    server.on("HEAD", "GetCapabilities", status=500)
    server.on("GET", "GetFeature", json_body={"type": "FeatureCollection", "features": []})

    request = QueryRequest(endpoint=WFS, response_format=ResponseFormat.GEOJSON, params={"request": "GetFeature"})
    with pytest.raises(EndpointErrorStatusError):
        RequestDispatcher(http_client).dispatch(request)

    assert server.sent("GET") == []


def test_probe_errors_are_not_transport_errors(http_client, server):
    server.on("HEAD", "", status=503)
    with pytest.raises(ProbeError) as exc_info:
        CapabilityProber(http_client).probe(REST)
    assert not isinstance(exc_info.value, TransportError)


def test_probe_url(http_client, server):
    server.on("HEAD", "tiles.example.org", status=404)
    with pytest.raises(EndpointErrorStatusError):
        CapabilityProber(http_client).probe_url("https://tiles.example.org/1/1/1.png")
