# ============================================================================
# FILE CONTEXT - ENDPOINT RESOLVER
# ============================================================================
# STATUS: Service Layer - Protocol endpoint construction
# PURPOSE: Turn a data product descriptor and a protocol into a base URL
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: EndpointResolver
# DEPENDENCIES: config
# PATTERNS: Pure function over injected configuration, no I/O
# ============================================================================

"""
Endpoint Resolver

    WMS  -> <geoserver_root>/<namespace>/wms?
    WFS  -> <geoserver_root>/<namespace>/wfs?
    REST -> <rest_root>            (fixed, independent of namespace)

The trailing '?' is part of the base URL; query parameters are appended
directly by the dispatcher and the viewer.
"""

from typing import Optional

from config import AppConfig, get_app_config
from .models import DataProductDescriptor, Endpoint, Protocol

_PROTOCOL_PATHS = {
    Protocol.WMS: "wms?",
    Protocol.WFS: "wfs?",
}


class EndpointResolver:
    """Resolve descriptors to protocol endpoints."""

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or get_app_config()

    def resolve(self, descriptor: DataProductDescriptor, protocol: Protocol) -> Endpoint:
        protocol = Protocol(protocol)

        if protocol is Protocol.REST:
            return Endpoint(protocol=protocol, base_url=self.config.rest_root)

        base_url = f"{self.config.geoserver_root}/{descriptor.namespace}/{_PROTOCOL_PATHS[protocol]}"
        return Endpoint(protocol=protocol, base_url=base_url)

    def rest(self) -> Endpoint:
        """REST endpoint for calls that are not tied to a data product (gazetteer)."""
        return Endpoint(protocol=Protocol.REST, base_url=self.config.rest_root)
