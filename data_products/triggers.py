# ============================================================================
# FILE CONTEXT - DATA PRODUCT TRIGGERS
# ============================================================================
# STATUS: Standalone HTTP Triggers - Data product endpoints
# PURPOSE: Azure Functions HTTP triggers for catalog, features, columns and map view
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: get_data_product_triggers, BaseTrigger
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# DEPENDENCIES: azure.functions, json
# PATTERNS: Trigger Pattern, Factory Pattern (get_data_product_triggers)
# ENTRY_POINTS: Function App route registration via get_data_product_triggers()
# ============================================================================

"""
Data Product HTTP Triggers - Azure Functions Handlers

    GET /api/products                          - Catalog list
    GET /api/products/{product_id}             - Product descriptor
    GET /api/products/{product_id}/columns     - Column names and types
    GET /api/products/{product_id}/features    - Features (cql_filter | filter, count, offset, format)
    GET /api/products/{product_id}/view        - WMS layer contract (cql_filter | filter)

Each trigger parses parameters, calls DataProductService and maps the error
taxonomy onto HTTP statuses (MarineRegionsError.http_status): validation
400/404, probe failures 503, request and payload failures 502.
"""

import json
from typing import Any, Dict, List, Optional

import azure.functions as func

from exceptions import MarineRegionsError
from util_logger import LoggerFactory, ComponentType
from .service import DataProductService

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "DataProductTriggers")


# ============================================================================
# TRIGGER REGISTRY FUNCTION
# ============================================================================

def get_data_product_triggers(service: Optional[DataProductService] = None) -> List[Dict[str, Any]]:
    """
    Get list of data product trigger configurations for function_app.py.

    Returns:
        List of dicts with keys: route, methods, handler
    """
    service = service or DataProductService()
    return [
        {
            'route': 'products',
            'methods': ['GET'],
            'handler': ProductListTrigger(service).handle
        },
        {
            'route': 'products/{product_id}',
            'methods': ['GET'],
            'handler': ProductTrigger(service).handle
        },
        {
            'route': 'products/{product_id}/columns',
            'methods': ['GET'],
            'handler': ProductColumnsTrigger(service).handle
        },
        {
            'route': 'products/{product_id}/features',
            'methods': ['GET'],
            'handler': ProductFeaturesTrigger(service).handle
        },
        {
            'route': 'products/{product_id}/view',
            'methods': ['GET'],
            'handler': ProductViewTrigger(service).handle
        }
    ]


# ============================================================================
# BASE TRIGGER CLASS
# ============================================================================

class BaseTrigger:
    """
    Common response and error handling for HTTP triggers.
    """

    def _json_response(self, data: Any, status_code: int = 200) -> func.HttpResponse:
        """
        Create JSON HTTP response.

        Handles Pydantic models, result shapes (to_dict) and plain data.
        """
        if hasattr(data, 'model_dump'):
            data = data.model_dump(mode='json', exclude_none=True)
        elif hasattr(data, 'to_dict'):
            data = data.to_dict()

        return func.HttpResponse(
            body=json.dumps(data, indent=2, default=str),
            status_code=status_code,
            mimetype="application/json"
        )

    def _error_response(
        self,
        message: str,
        status_code: int = 400,
        error_type: str = "BadRequest"
    ) -> func.HttpResponse:
        error_body = {
            "code": error_type,
            "description": message
        }
        return func.HttpResponse(
            body=json.dumps(error_body, indent=2),
            status_code=status_code,
            mimetype="application/json"
        )

    def _handle_exception(self, e: Exception, action: str) -> func.HttpResponse:
        """Map an exception raised by the service layer onto an HTTP error."""
        if isinstance(e, MarineRegionsError):
            log = logger.warning if e.http_status < 500 else logger.error
            log(f"{action} failed: {e}")
            return self._error_response(str(e), e.http_status, type(e).__name__)

        if isinstance(e, ValueError):
            logger.warning(f"{action} rejected: {e}")
            return self._error_response(str(e), 400, "BadRequest")

        logger.error(f"Error {action}: {e}", exc_info=True)
        return self._error_response(
            message=f"Internal server error: {str(e)}",
            status_code=500,
            error_type="InternalServerError"
        )

    @staticmethod
    def _int_param(req: func.HttpRequest, name: str, default: Optional[int] = None) -> Optional[int]:
        raw = req.params.get(name)
        if raw is None or raw == "":
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"Query parameter '{name}' must be an integer, got {raw!r}") from None


class DataProductTrigger(BaseTrigger):
    """Base for triggers backed by DataProductService."""

    def __init__(self, service: DataProductService):
        self.service = service


# ============================================================================
# ENDPOINT TRIGGERS
# ============================================================================

class ProductListTrigger(DataProductTrigger):
    """
    Catalog list trigger.

    Endpoint: GET /api/products
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            products = self.service.list_products()
            logger.info(f"Product list requested ({len(products)} products)")
            return self._json_response({
                "products": [
                    {**p.model_dump(mode="json", by_alias=True, exclude_none=True), "type_name": p.type_name}
                    for p in products
                ]
            })
        except Exception as e:
            return self._handle_exception(e, "listing products")


class ProductTrigger(DataProductTrigger):
    """
    Product descriptor trigger.

    Endpoint: GET /api/products/{product_id}
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            product_id = req.route_params.get('product_id')
            descriptor = self.service.describe(product_id)
            body = descriptor.model_dump(mode='json', by_alias=True, exclude_none=True)
            body["type_name"] = descriptor.type_name
            return self._json_response(body)
        except Exception as e:
            return self._handle_exception(e, "describing product")


class ProductColumnsTrigger(DataProductTrigger):
    """
    Column names and types trigger.

    Endpoint: GET /api/products/{product_id}/columns
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            product_id = req.route_params.get('product_id')
            columns = self.service.colnames(product_id)
            logger.info(f"Columns requested for '{product_id}'")
            return self._json_response(columns)
        except Exception as e:
            return self._handle_exception(e, "listing columns")


class ProductFeaturesTrigger(DataProductTrigger):
    """
    Features trigger.

    Endpoint: GET /api/products/{product_id}/features

    Query Parameters:
        cql_filter: CQL/ECQL predicate
        filter: OGC Filter XML predicate (mutually exclusive with cql_filter)
        count: Page size
        offset: Features to skip
        format: geojson (default), gml or geometry
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            product_id = req.route_params.get('product_id')
            result = self.service.get(
                product_id,
                cql_filter=req.params.get('cql_filter'),
                filter=req.params.get('filter'),
                count=self._int_param(req, 'count'),
                offset=self._int_param(req, 'offset', 0),
                fmt=req.params.get('format', 'geojson')
            )
            LoggerFactory.create_with_context(
                ComponentType.TRIGGER, "ProductFeaturesTrigger", product_id=product_id
            ).info(f"Returning {len(result)} entries")
            return self._json_response(result)
        except Exception as e:
            return self._handle_exception(e, "querying features")


class ProductViewTrigger(DataProductTrigger):
    """
    WMS layer contract trigger.

    Endpoint: GET /api/products/{product_id}/view
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            product_id = req.route_params.get('product_id')
            spec = self.service.view(
                product_id,
                cql_filter=req.params.get('cql_filter'),
                filter=req.params.get('filter')
            )
            return self._json_response(spec)
        except Exception as e:
            return self._handle_exception(e, "building map view")
