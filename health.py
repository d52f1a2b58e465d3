# ============================================================================
# FILE CONTEXT - HEALTH CHECK MODULE
# ============================================================================
# STATUS: Core Infrastructure - Health Monitoring
# PURPOSE: Health checks of the remote services this app depends on
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: get_public_health, get_detailed_health, HealthStatus, CheckResult
# DEPENDENCIES: config, services.prober, util_logger
# PATTERNS: Two-tier health checks (public/detailed) for APIM
# ============================================================================

"""
Health Check Module

Two-tier health monitoring:

1. Public Health (/api/health):
   - Probes the geoserver WFS of the first catalog namespace only
   - Returns only status and timestamp
   - Always returns 200 (status in body indicates health)

2. Detailed Health (/api/health/detailed):
   - Probes every distinct geoserver namespace (WFS), the Marine Regions
     REST root and the EMODnet base-map tiles, with latencies
   - Returns 503 if unhealthy

Critical checks: geoserver namespaces and REST root. The base map only
affects map views, so its failure degrades instead of failing.
"""

import time
import uuid
from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, Dict, Any, Callable

from config import AppConfig, get_app_config
from data_products.catalog import Catalog, get_default_catalog
from data_products.endpoints import EndpointResolver
from data_products.models import Protocol
from exceptions import ProbeError
from infrastructure.http_client import HttpClient
from services.prober import CapabilityProber, ProbeResult
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "HealthService")


# ============================================================================
# Health Status Enum
# ============================================================================

class HealthStatus(str, Enum):
    """Health status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"      # Non-critical components failing
    UNHEALTHY = "unhealthy"    # Critical components failing


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class CheckResult:
    """Result of a single health check."""
    status: str              # "pass" or "fail"
    latency_ms: float        # Time taken for check
    message: str             # Human-readable status message
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        result = {
            "status": self.status,
            "latency_ms": round(self.latency_ms, 2),
            "message": self.message
        }
        if self.details:
            result["details"] = self.details
        return result


# ============================================================================
# Health Check Functions
# ============================================================================

def _run_probe(name: str, probe: Callable[[], ProbeResult]) -> CheckResult:
    start_time = time.perf_counter()
    try:
        result = probe()
        return CheckResult(
            status="pass",
            latency_ms=result.latency_ms,
            message=f"{name} reachable",
            details=result.to_dict()
        )
    except ProbeError as e:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"{name} health check failed: {e}")
        return CheckResult(
            status="fail",
            latency_ms=latency_ms,
            message=f"{name} check failed: {type(e).__name__}",
            details={"url": e.url, "error": str(e)}
        )


def check_geoserver_namespace(prober: CapabilityProber, endpoints: EndpointResolver,
                              catalog: Catalog, namespace: str) -> CheckResult:
    """Probe the WFS endpoint of one geoserver namespace."""
    descriptor = next(p for p in catalog.list_products() if p.namespace == namespace)
    endpoint = endpoints.resolve(descriptor, Protocol.WFS)
    return _run_probe(f"Geoserver namespace {namespace}", lambda: prober.probe(endpoint))


def check_rest_service(prober: CapabilityProber, endpoints: EndpointResolver) -> CheckResult:
    """Probe the Marine Regions REST root."""
    return _run_probe("Marine Regions REST", lambda: prober.probe(endpoints.rest()))


def check_base_map(prober: CapabilityProber, config: AppConfig) -> CheckResult:
    """Probe one EMODnet base-map tile."""
    url = config.base_tiles_url.format(z=1, x=1, y=1)
    return _run_probe("EMODnet base map", lambda: prober.probe_url(url))


# ============================================================================
# Main Entry Points
# ============================================================================

def _components(config: Optional[AppConfig], http_client: Optional[HttpClient], catalog: Optional[Catalog]):
    config = config or get_app_config()
    http_client = http_client or HttpClient(config)
    return config, CapabilityProber(http_client), EndpointResolver(config), catalog or get_default_catalog()


def get_public_health(
    config: Optional[AppConfig] = None,
    http_client: Optional[HttpClient] = None,
    catalog: Optional[Catalog] = None
) -> Dict[str, Any]:
    """
    Get minimal health status for public endpoint.

    Returns:
        Dict with status and timestamp only
    """
    start_time = time.perf_counter()
    config, prober, endpoints, catalog = _components(config, http_client, catalog)

    namespace = catalog.list_products()[0].namespace
    result = check_geoserver_namespace(prober, endpoints, catalog, namespace)
    status = HealthStatus.HEALTHY if result.status == "pass" else HealthStatus.UNHEALTHY

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info("Public health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round(total_duration, 2),
            'check_type': 'public'
        }
    })

    return {
        "status": status.value,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def get_detailed_health(
    config: Optional[AppConfig] = None,
    http_client: Optional[HttpClient] = None,
    catalog: Optional[Catalog] = None
) -> Dict[str, Any]:
    """
    Get detailed health status for APIM probes and operations.

    SECURITY NOTE: Block this endpoint from external access via APIM policy.

    Returns:
        Dict with full health metrics
    """
    start_time = time.perf_counter()
    request_id = str(uuid.uuid4())[:8]
    config, prober, endpoints, catalog = _components(config, http_client, catalog)

    checks = {}
    critical_failures = []
    non_critical_failures = []

    # Critical: every geoserver namespace used by the catalog
    namespaces = list(dict.fromkeys(p.namespace for p in catalog.list_products()))
    for namespace in namespaces:
        result = check_geoserver_namespace(prober, endpoints, catalog, namespace)
        key = f"geoserver_{namespace}"
        checks[key] = result.to_dict()
        if result.status == "fail":
            critical_failures.append(key)

    # Critical: gazetteer REST service
    rest_result = check_rest_service(prober, endpoints)
    checks["rest"] = rest_result.to_dict()
    if rest_result.status == "fail":
        critical_failures.append("rest")

    # Non-critical: base map tiles (map views only)
    base_map_result = check_base_map(prober, config)
    checks["base_map"] = base_map_result.to_dict()
    if base_map_result.status == "fail":
        non_critical_failures.append("base_map")

    if critical_failures:
        status = HealthStatus.UNHEALTHY
    elif non_critical_failures:
        status = HealthStatus.DEGRADED
    else:
        status = HealthStatus.HEALTHY

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info("Detailed health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round(total_duration, 2),
            'check_type': 'detailed',
            'request_id': request_id,
            'critical_failures': critical_failures,
            'non_critical_failures': non_critical_failures
        }
    })

    return {
        "status": status.value,
        "app": "marineregions-query-service",
        "description": "Marine Regions data products & gazetteer",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "checks": checks,
        "total_duration_ms": round(total_duration, 2)
    }
