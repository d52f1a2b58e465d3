# ============================================================================
# FILE CONTEXT - HTTP CLIENT
# ============================================================================
# STATUS: Infrastructure - Outbound HTTP transport
# PURPOSE: Shared httpx client with bounded timeouts and a fixed User-Agent
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: HttpClient
# DEPENDENCIES: httpx (sync)
# PATTERNS: Lazily created client, injectable transport for tests
# ============================================================================
"""
Outbound HTTP Client (SYNC VERSION).

Thin wrapper around httpx.Client used by the capability prober and the
request dispatcher. It does not interpret status codes and does not catch
httpx errors: callers decide whether a failure is a probe failure or a
transport failure.

Every request carries a timeout. The probe and request timeouts come from
AppConfig and can be overridden per call.

Usage:
    client = HttpClient(config)
    response = client.head("https://geo.vliz.be/geoserver/MarineRegions/wms?request=GetCapabilities")
    client.close()

    # Tests inject a transport instead of hitting the network
    client = HttpClient(config, transport=httpx.MockTransport(handler))
"""

from typing import Dict, Optional

import httpx

from config import AppConfig, get_app_config
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "HttpClient")


class HttpClient:
    """
    Sync HTTP client for geoserver and Marine Regions REST calls.

    The underlying httpx.Client keeps a connection pool which is safe to
    share between threads.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize HTTP client.

        Args:
            config: Application configuration (singleton if omitted)
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self.config = config or get_app_config()
        self.timeout = self.config.request_timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get or create sync HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers={"User-Agent": self.config.user_agent},
                transport=self._transport
            )
        return self._client

    def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def head(self, url: str, timeout: Optional[float] = None) -> httpx.Response:
        """
        Send a HEAD request.

        Raises:
            httpx.TimeoutException: If the timeout elapses
            httpx.RequestError: On any other transport failure
        """
        logger.debug(f"HEAD {url}")
        return self._get_client().head(url, timeout=self._timeout(timeout))

    def get(
        self,
        url: str,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """
        Send a GET request. The URL must already carry its query string.

        Raises:
            httpx.TimeoutException: If the timeout elapses
            httpx.RequestError: On any other transport failure
        """
        logger.debug(f"GET {url}")
        return self._get_client().get(url, timeout=self._timeout(timeout), headers=headers)

    def _timeout(self, override: Optional[float]) -> httpx.Timeout:
        return httpx.Timeout(override if override is not None else self.timeout)
