# ============================================================================
# FILE CONTEXT - DATA PRODUCTS MODULE
# ============================================================================
# STATUS: Standalone Module - Marine Regions data products
# PURPOSE: Catalog, filters, endpoints and queries for geoserver-hosted products
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: Catalog, FilterBuilder, EndpointResolver, models
# DEPENDENCIES: httpx, pydantic, azure-functions
# ENTRY_POINTS: from data_products.triggers import get_data_product_triggers
# ============================================================================

"""
Data Products - Standalone Module

    data_products/
    ├── models.py      # Descriptors, endpoints, WMS layer contract
    ├── catalog.py     # Product id -> namespace/layer/schema
    ├── filters.py     # CQL / OGC XML filter builder
    ├── endpoints.py   # WMS / WFS / REST base URLs
    ├── view.py        # Map view contract (probe WMS + base map)
    ├── service.py     # get / colnames / col_unique / view
    └── triggers.py    # Azure Functions HTTP handlers

Integration:
    from data_products.triggers import get_data_product_triggers

    for trigger in get_data_product_triggers():
        app.route(
            route=trigger['route'],
            methods=trigger['methods'],
            auth_level=func.AuthLevel.ANONYMOUS
        )(trigger['handler'])

The package root exports only the leaf modules; the service and trigger
layers import services.*, which imports back into this package.
"""

from .catalog import Catalog, get_default_catalog
from .endpoints import EndpointResolver
from .filters import FilterBuilder
from .models import DataProductDescriptor, Endpoint, Protocol, ResponseFormat

__version__ = "1.0.0"
__all__ = [
    "Catalog",
    "get_default_catalog",
    "EndpointResolver",
    "FilterBuilder",
    "DataProductDescriptor",
    "Endpoint",
    "Protocol",
    "ResponseFormat"
]
