# ============================================================================
# FILE CONTEXT - GAZETTEER TRIGGERS
# ============================================================================
# STATUS: Standalone HTTP Triggers - Gazetteer endpoints
# PURPOSE: Azure Functions HTTP triggers for gazetteer records and relations
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: get_gazetteer_triggers
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# DEPENDENCIES: azure.functions
# PATTERNS: Trigger Pattern, Factory Pattern (get_gazetteer_triggers)
# ============================================================================

"""
Gazetteer HTTP Triggers

    GET /api/gazetteer/{mrgid}              - Record (JSON, or RDF triples with ?format=rdf)
    GET /api/gazetteer/{mrgid}/relations    - Relations (?type=all|partof|..., ?direction=both|upper|lower)
"""

from typing import Any, Dict, List, Optional

import azure.functions as func

from data_products.triggers import BaseTrigger
from util_logger import LoggerFactory, ComponentType
from .models import ALL_TYPES, BOTH_DIRECTIONS
from .service import GazetteerService

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "GazetteerTriggers")


def get_gazetteer_triggers(service: Optional[GazetteerService] = None) -> List[Dict[str, Any]]:
    """
    Get list of gazetteer trigger configurations for function_app.py.

    Returns:
        List of dicts with keys: route, methods, handler
    """
    service = service or GazetteerService()
    return [
        {
            'route': 'gazetteer/{mrgid}',
            'methods': ['GET'],
            'handler': GazetteerRecordTrigger(service).handle
        },
        {
            'route': 'gazetteer/{mrgid}/relations',
            'methods': ['GET'],
            'handler': GazetteerRelationsTrigger(service).handle
        }
    ]


class GazetteerTrigger(BaseTrigger):
    """Base for triggers backed by GazetteerService."""

    def __init__(self, service: GazetteerService):
        self.service = service


class GazetteerRecordTrigger(GazetteerTrigger):
    """
    Gazetteer record trigger.

    Endpoint: GET /api/gazetteer/{mrgid}
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            mrgid = req.route_params.get('mrgid')
            if req.params.get('format', 'json').lower() == 'rdf':
                result = self.service.record_rdf(mrgid)
            else:
                result = self.service.record(mrgid)
            return self._json_response(result)
        except Exception as e:
            return self._handle_exception(e, "fetching gazetteer record")


class GazetteerRelationsTrigger(GazetteerTrigger):
    """
    Relations trigger.

    Endpoint: GET /api/gazetteer/{mrgid}/relations
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            mrgid = req.route_params.get('mrgid')
            edges = self.service.relations(
                mrgid,
                relation_type=req.params.get('type', ALL_TYPES),
                direction=req.params.get('direction', BOTH_DIRECTIONS)
            )
            LoggerFactory.create_with_context(
                ComponentType.TRIGGER, "GazetteerRelationsTrigger", mrgid=int(mrgid)
            ).info(f"Returning {len(edges)} relations")
            return self._json_response({
                "mrgid": int(mrgid),
                "numberReturned": len(edges),
                "relations": [edge.model_dump(mode='json', exclude_none=True) for edge in edges]
            })
        except Exception as e:
            return self._handle_exception(e, "resolving relations")
