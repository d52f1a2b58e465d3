# ============================================================================
# FILE CONTEXT - CAPABILITY PROBER
# ============================================================================
# STATUS: Service Layer - Fast-fail endpoint health gate
# PURPOSE: Check an endpoint is reachable before a substantive request is sent
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: CapabilityProber, ProbeResult
# DEPENDENCIES: httpx, infrastructure.http_client
# PATTERNS: Probe-then-dispatch, typed probe errors carrying the URL
# ============================================================================
"""
Capability Prober

A probe is a HEAD request against the endpoint's capabilities document:

    WMS/WFS -> <base_url>request=GetCapabilities&service=<WMS|WFS>
    REST    -> <rest_root>

It never carries the filter or pagination of the request it guards, so a
probe failure always means "service outage" and never "bad query".

A passing probe is necessary but not sufficient: the substantive request
can still be rejected (e.g. an invalid CQL string). The dispatcher reports
that case as RequestStatusError, never as a probe error.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from data_products.models import Endpoint, Protocol
from exceptions import EndpointErrorStatusError, EndpointUnreachableError
from infrastructure.http_client import HttpClient
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "CapabilityProber")


@dataclass
class ProbeResult:
    """Successful probe outcome."""
    url: str
    status_code: int
    latency_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "status_code": self.status_code,
            "latency_ms": round(self.latency_ms, 2)
        }


def capabilities_url(endpoint: Endpoint) -> str:
    """URL probed for an endpoint."""
    if endpoint.protocol is Protocol.REST:
        return endpoint.base_url
    return f"{endpoint.base_url}request=GetCapabilities&service={endpoint.protocol.value}"


class CapabilityProber:
    """
    Issues HEAD probes with the configured probe timeout.

    Args:
        http_client: Shared outbound client
        timeout: Probe timeout in seconds (config.probe_timeout_seconds if omitted)
    """

    def __init__(self, http_client: HttpClient, timeout: Optional[float] = None):
        self.http_client = http_client
        self.timeout = timeout if timeout is not None else http_client.config.probe_timeout_seconds

    def probe(self, endpoint: Endpoint) -> ProbeResult:
        """
        Probe a protocol endpoint.

        Raises:
            EndpointUnreachableError: Network-level failure or timeout
            EndpointErrorStatusError: Endpoint answered with status >= 400
        """
        return self.probe_url(capabilities_url(endpoint))

    def probe_url(self, url: str) -> ProbeResult:
        """
        Probe an arbitrary URL (e.g. a base-map tile).

        Raises:
            EndpointUnreachableError: Network-level failure or timeout
            EndpointErrorStatusError: URL answered with status >= 400
        """
        start_time = time.perf_counter()

        try:
            response = self.http_client.head(url, timeout=self.timeout)
        except httpx.TimeoutException as e:
            logger.warning(f"Probe timed out after {self.timeout}s: {url}")
            raise EndpointUnreachableError(url, e) from e
        except httpx.RequestError as e:
            logger.warning(f"Probe could not reach {url}: {e}")
            raise EndpointUnreachableError(url, e) from e

        latency_ms = (time.perf_counter() - start_time) * 1000

        if response.status_code >= 400:
            logger.warning(
                f"Probe failed with HTTP {response.status_code}: {url}",
                extra={'custom_dimensions': {'status_code': response.status_code, 'url': url}}
            )
            raise EndpointErrorStatusError(url, response.status_code)

        logger.debug(
            f"Probe passed: {url}",
            extra={'custom_dimensions': {'latency_ms': round(latency_ms, 2)}}
        )
        return ProbeResult(url=url, status_code=response.status_code, latency_ms=latency_ms)
