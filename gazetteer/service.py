# ============================================================================
# FILE CONTEXT - GAZETTEER SERVICE
# ============================================================================
# STATUS: Service Layer - Gazetteer records and relations
# PURPOSE: Gazetteer record lookups (JSON and RDF) plus relation graph access
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: GazetteerService
# DEPENDENCIES: infrastructure.http_client, services.*, gazetteer.relations
# PATTERNS: Service Layer, Facade Pattern
# ENTRY_POINTS: service = GazetteerService(); service.relations(3293)
# ============================================================================

"""
Gazetteer Service

Facade over the Marine Regions gazetteer:

    record(mrgid)      -> TabularSet with one record (REST JSON)
    record_rdf(mrgid)  -> LinkedDataGraph (https://marineregions.org/mrgid/<mrgid>.rdf)
    relations(...)     -> List[RelationEdge]
"""

from typing import List, Optional, Union

from config import AppConfig, get_app_config
from data_products.endpoints import EndpointResolver
from data_products.models import Endpoint, Protocol, ResponseFormat
from exceptions import RequestStatusError, UnknownIdentifierError
from infrastructure.http_client import HttpClient
from services.dispatcher import QueryRequest, RequestDispatcher
from services.normalizer import LinkedDataGraph, TabularSet, normalize
from util_logger import LoggerFactory, ComponentType
from .models import ALL_TYPES, BOTH_DIRECTIONS, Direction, RelationEdge, RelationType
from .relations import RelationGraphResolver, validate_mrgid

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "GazetteerService")


class GazetteerService:
    """
    Gazetteer lookups by MRGID.

    Args:
        config: Application configuration (singleton if omitted)
        http_client: Shared outbound client (created from config if omitted)
    """

    def __init__(self, config: Optional[AppConfig] = None, http_client: Optional[HttpClient] = None):
        self.config = config or get_app_config()
        self.http_client = http_client or HttpClient(self.config)
        self.endpoints = EndpointResolver(self.config)
        self.dispatcher = RequestDispatcher(self.http_client)
        self.resolver = RelationGraphResolver(self.dispatcher, self.endpoints)
        logger.info("GazetteerService initialized")

    def close(self):
        self.http_client.close()

    def relations(
        self,
        mrgid: Union[int, str],
        relation_type: Union[str, RelationType] = ALL_TYPES,
        direction: Union[str, Direction] = BOTH_DIRECTIONS
    ) -> List[RelationEdge]:
        """See RelationGraphResolver.relations."""
        return self.resolver.relations(mrgid, relation_type, direction)

    def record(self, mrgid: Union[int, str]) -> TabularSet:
        """
        Gazetteer record as a single-row table.

        Raises:
            ValueError: Invalid mrgid
            UnknownIdentifierError: No record for mrgid
        """
        mrgid = validate_mrgid(mrgid)
        request = QueryRequest(
            endpoint=self.endpoints.rest(),
            response_format=ResponseFormat.JSON,
            path=f"getGazetteerRecordByMRGID.json/{mrgid}/"
        )
        payload = self._dispatch_record(mrgid, request, probed=False)
        return normalize(payload, ResponseFormat.JSON)

    def record_rdf(self, mrgid: Union[int, str]) -> LinkedDataGraph:
        """
        Gazetteer record as linked data.

        The MRGID resolver has no capabilities document, so the REST root
        on the same host is probed instead.

        Raises:
            ValueError: Invalid mrgid
            UnknownIdentifierError: No record for mrgid
        """
        mrgid = validate_mrgid(mrgid)
        self.dispatcher.prober.probe(self.endpoints.rest())

        request = QueryRequest(
            endpoint=Endpoint(protocol=Protocol.REST, base_url=self.config.mrgid_root),
            response_format=ResponseFormat.RDF,
            path=f"{mrgid}.rdf"
        )
        payload = self._dispatch_record(mrgid, request, probed=True)
        return normalize(payload, ResponseFormat.RDF)

    def _dispatch_record(self, mrgid: int, request: QueryRequest, probed: bool):
        try:
            payload = self.dispatcher.dispatch(request, probed=probed)
        except RequestStatusError as e:
            if e.status_code == 404:
                raise UnknownIdentifierError(mrgid) from e
            raise
        if payload.is_empty:
            raise UnknownIdentifierError(mrgid)
        return payload
