# ============================================================================
# FILE CONTEXT - AZURE FUNCTIONS ENTRY POINT
# ============================================================================
# STATUS: Core Infrastructure - Function App Entry Point
# PURPOSE: Main entry point for Azure Functions runtime with data product and gazetteer APIs
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: app (FunctionApp instance)
# DEPENDENCIES: azure-functions, data_products, gazetteer, health
# ============================================================================

"""
Azure Functions Entry Point for the Marine Regions query service

This module serves as the main entry point for the Azure Functions runtime.
It registers all HTTP triggers for the data product and gazetteer APIs.

Architecture:
    - Data Products API: 5 endpoints over the VLIZ geoserver (WFS/WMS)
    - Gazetteer API: 2 endpoints over the Marine Regions REST service
    - Health checks: 2 endpoints for monitoring and APIM integration
        - /api/health - Public (minimal response for external callers)
        - /api/health/detailed - Internal (full metrics for APIM probes)

Total: 9 HTTP endpoints (7 API + 2 health check)

Deployment:
    - Local: func start
    - Azure: func azure functionapp publish <app-name> --python --build remote
"""

import json

import azure.functions as func

from config import validate_configuration
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "FunctionApp")

validate_configuration()

# Initialize Azure Function App
app = func.FunctionApp()


def _bind(handler, name: str):
    """Wrap a trigger handler in a function with a unique name and a single bound parameter."""
    def endpoint(req: func.HttpRequest) -> func.HttpResponse:
        return handler(req)

    endpoint.__name__ = name
    return endpoint


def _register(triggers, prefix: str) -> None:
    """Register trigger dicts (route, methods, handler) with the app."""
    for index, trigger in enumerate(triggers):
        app.route(
            route=trigger["route"],
            methods=trigger["methods"],
            auth_level=func.AuthLevel.ANONYMOUS
        )(_bind(trigger["handler"], f"{prefix}_{index}"))


# ============================================================================
# Data Products API - 5 Endpoints
# ============================================================================

from data_products.triggers import get_data_product_triggers

logger.info("Registering Data Products API endpoints...")
_register(get_data_product_triggers(), "data_product")
logger.info("✅ Data Products API registered successfully (5 endpoints)")

# ============================================================================
# Gazetteer API - 2 Endpoints
# ============================================================================

from gazetteer.triggers import get_gazetteer_triggers

logger.info("Registering Gazetteer API endpoints...")
_register(get_gazetteer_triggers(), "gazetteer")
logger.info("✅ Gazetteer API registered successfully (2 endpoints)")

# ============================================================================
# Health Check Endpoints - 2 Endpoints (Public + Detailed)
# ============================================================================

@app.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """
    Public health check endpoint - minimal response for external callers.

    Always returns 200 - status in body indicates health.

    Returns:
        JSON: {"status": "healthy|unhealthy", "timestamp": "..."}
    """
    from health import get_public_health

    result = get_public_health()
    return func.HttpResponse(
        json.dumps(result, default=str),
        mimetype="application/json",
        status_code=200,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )


@app.route(route="health/detailed", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_detailed(req: func.HttpRequest) -> func.HttpResponse:
    """
    Detailed health check endpoint - for APIM probes and operations.

    Returns 503 if unhealthy, 200 otherwise.

    SECURITY: Block this endpoint from external access via APIM policy.

    Returns:
        JSON with per-endpoint probe results (geoserver namespaces,
        REST root, base map) and latencies
    """
    from health import get_detailed_health, HealthStatus

    result = get_detailed_health()

    # Return 503 if unhealthy, 200 otherwise (healthy or degraded)
    status_code = 503 if result["status"] == HealthStatus.UNHEALTHY.value else 200

    return func.HttpResponse(
        json.dumps(result, default=str, indent=2),
        mimetype="application/json",
        status_code=status_code,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )


# ============================================================================
# Application Startup
# ============================================================================

logger.info("=" * 60)
logger.info("Marine Regions query service - data products & gazetteer")
logger.info("=" * 60)
logger.info("Function App initialized successfully")
logger.info("Available endpoints:")
logger.info("  - GET /api/products[/{product_id}[/columns|/features|/view]]")
logger.info("  - GET /api/gazetteer/{mrgid}[/relations]")
logger.info("  - GET /api/health - Public health check (minimal)")
logger.info("  - GET /api/health/detailed - Detailed health (APIM only)")
