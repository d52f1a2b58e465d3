# ============================================================================
# FILE CONTEXT - REQUEST DISPATCHER
# ============================================================================
# STATUS: Service Layer - Final request composition and execution
# PURPOSE: Compose endpoint + params + pagination + filter and perform one GET
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: QueryRequest, RawPayload, RequestDispatcher, compose_url
# DEPENDENCIES: httpx, services.prober, data_products.filters
# PATTERNS: Probe-then-dispatch, single attempt (no retry)
# ============================================================================
"""
Request Dispatcher

URL layout (WFS example):

    https://geo.vliz.be/geoserver/MarineRegions/wfs?service=WFS&version=2.0.0
        &request=GetFeature&typeName=MarineRegions%3Aeez
        &outputFormat=application%2Fjson&count=10&startIndex=20
        &cql_filter=territory1%20%3D%20%27Belgium%27

Pagination parameter names differ by protocol: geoserver WFS calls the
offset `startIndex`, the Marine Regions REST service calls it `offset`.

No retry is attempted here. Remote geospatial services are not guaranteed
safe to retry blindly; callers own any retry policy.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from data_products.filters import FilterExpression, NoFilter
from data_products.models import Endpoint, Pagination, Protocol, ResponseFormat, WFS_OUTPUT_FORMATS
from exceptions import RequestStatusError, TransportError
from infrastructure.http_client import HttpClient
from util_logger import LoggerFactory, ComponentType
from .prober import CapabilityProber

logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "RequestDispatcher")

_OFFSET_PARAM = {
    Protocol.WFS: "startIndex",
    Protocol.REST: "offset",
}


@dataclass(frozen=True)
class QueryRequest:
    """
    One substantive request. Built per call and dispatched once.

    Attributes:
        endpoint: Resolved protocol endpoint
        filter: Filter expression from FilterBuilder.build()
        response_format: Declared format of the expected payload
        pagination: Optional page window
        params: Protocol parameters in the order they should appear
        path: Resource path appended to the endpoint (REST only)
    """
    endpoint: Endpoint
    filter: FilterExpression = field(default_factory=NoFilter)
    response_format: ResponseFormat = ResponseFormat.JSON
    pagination: Optional[Pagination] = None
    params: Dict[str, Any] = field(default_factory=dict)
    path: str = ""


@dataclass
class RawPayload:
    """Undecoded response body plus what is needed to interpret it."""
    url: str
    status_code: int
    content: bytes
    content_type: str = ""

    @property
    def is_empty(self) -> bool:
        return self.status_code == 204 or not self.content.strip()


def _encode(value: Any) -> str:
    return quote(str(value), safe="")


def compose_url(request: QueryRequest) -> str:
    """
    Build the final request URL.

    Raises:
        ValueError: If pagination or a filter is used with a protocol that
            does not support it
    """
    protocol = request.endpoint.protocol
    base = request.endpoint.base_url + request.path.lstrip("/")

    parts = [f"{key}={_encode(value)}" for key, value in request.params.items() if value is not None]

    if protocol is Protocol.WFS and "outputFormat" not in request.params:
        output_format = WFS_OUTPUT_FORMATS.get(ResponseFormat(request.response_format))
        if output_format:
            parts.append(f"outputFormat={_encode(output_format)}")

    if request.pagination is not None:
        if protocol not in _OFFSET_PARAM:
            raise ValueError(f"Pagination is not supported for {protocol.value} requests")
        parts.append(f"count={request.pagination.count}")
        parts.append(f"{_OFFSET_PARAM[protocol]}={request.pagination.offset}")

    if not isinstance(request.filter, NoFilter):
        if protocol is Protocol.REST:
            raise ValueError("Server-side filters are only supported on WMS and WFS endpoints")
        parts.append(request.filter.as_query())

    if not parts:
        return base

    if base.endswith("?") or base.endswith("&"):
        separator = ""
    elif "?" in base:
        separator = "&"
    else:
        separator = "?"
    return base + separator + "&".join(parts)


class RequestDispatcher:
    """
    Executes QueryRequests through the shared HTTP client.

    Args:
        http_client: Shared outbound client
        prober: Capability prober (built from http_client if omitted)
    """

    def __init__(self, http_client: HttpClient, prober: Optional[CapabilityProber] = None):
        self.http_client = http_client
        self.prober = prober or CapabilityProber(http_client)

    def dispatch(self, request: QueryRequest, probed: bool = False) -> RawPayload:
        """
        Probe (unless already done) and perform the request.

        Args:
            request: Request to perform
            probed: True if the caller already probed request.endpoint

        Returns:
            RawPayload with the response body

        Raises:
            EndpointUnreachableError, EndpointErrorStatusError: From the probe
            TransportError: Network failure or timeout on the request itself
            RequestStatusError: Request reached the server and was rejected
        """
        url = compose_url(request)

        if not probed:
            self.prober.probe(request.endpoint)

        try:
            response = self.http_client.get(url)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out after {self.http_client.timeout}s: {url}")
            raise TransportError(url, e) from e
        except httpx.RequestError as e:
            logger.error(f"Request failed: {url}: {e}")
            raise TransportError(url, e) from e

        if response.status_code >= 400:
            body = response.text[:500] if response.content else ""
            logger.warning(
                f"Request rejected with HTTP {response.status_code}: {url}",
                extra={'custom_dimensions': {'status_code': response.status_code, 'body': body}}
            )
            raise RequestStatusError(url, response.status_code, body)

        logger.info(
            f"Request completed: {request.endpoint.protocol.value} {response.status_code}",
            extra={'custom_dimensions': {'url': url, 'bytes': len(response.content)}}
        )

        return RawPayload(
            url=url,
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("content-type", "")
        )
