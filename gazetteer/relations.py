# ============================================================================
# FILE CONTEXT - RELATION GRAPH RESOLVER
# ============================================================================
# STATUS: Service Layer - Gazetteer place-relation graph
# PURPOSE: Fetch relation edges for an MRGID and filter them by type and direction
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: RelationGraphResolver, validate_mrgid
# DEPENDENCIES: services.dispatcher, services.normalizer
# PATTERNS: Fetch everything once, filter locally
# ============================================================================

"""
Relation Graph Resolver

The remote call always asks for every relation of the identifier
(direction=both, type=all); type and direction filtering happens here, so
a narrower query is always a subset of the default one.

    resolver.relations(3293)                       # every edge of Belgium
    resolver.relations(3293, "partof", "upper")    # only upward partof edges

"No record" and "no relations" are different outcomes: the first raises
UnknownIdentifierError, the second returns an empty list. When the
relations call comes back empty the record endpoint decides which one it is.
"""

from typing import Any, Dict, List, Optional, Union

from data_products.endpoints import EndpointResolver
from data_products.models import ResponseFormat
from exceptions import MalformedPayloadError, RequestStatusError, UnknownIdentifierError
from services.dispatcher import QueryRequest, RequestDispatcher
from services.normalizer import normalize
from util_logger import LoggerFactory, ComponentType
from .models import ALL_TYPES, BOTH_DIRECTIONS, Direction, RelationEdge, RelationType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "RelationGraphResolver")

_RELATION_KEYS = ("relationType", "relation", "type")


def validate_mrgid(mrgid: Union[int, str]) -> int:
    """
    Coerce an MRGID to a positive int.

    Raises:
        ValueError: If mrgid is not a positive integer
    """
    if isinstance(mrgid, bool):
        raise ValueError(f"MRGID must be a positive integer, got {mrgid!r}")
    if isinstance(mrgid, str) and mrgid.strip().isdigit():
        mrgid = int(mrgid.strip())
    if not isinstance(mrgid, int) or mrgid <= 0:
        raise ValueError(f"MRGID must be a positive integer, got {mrgid!r}")
    return mrgid


def _relation_filter(relation_type: Union[str, RelationType]) -> Optional[RelationType]:
    value = relation_type.value if isinstance(relation_type, RelationType) else str(relation_type).lower()
    if value == ALL_TYPES:
        return None
    try:
        return RelationType(value)
    except ValueError:
        allowed = ", ".join([ALL_TYPES] + [t.value for t in RelationType])
        raise ValueError(f"Unknown relation type {relation_type!r}, expected one of: {allowed}") from None


def _direction_filter(direction: Union[str, Direction]) -> Optional[Direction]:
    value = direction.value if isinstance(direction, Direction) else str(direction).lower()
    if value == BOTH_DIRECTIONS:
        return None
    try:
        return Direction(value)
    except ValueError:
        raise ValueError(f"Unknown direction {direction!r}, expected one of: both, upper, lower") from None


class RelationGraphResolver:
    """
    Resolve the place-relation graph around one MRGID.

    Args:
        dispatcher: Request dispatcher (probes the REST root once per call)
        endpoints: Endpoint resolver providing the REST root
    """

    def __init__(self, dispatcher: RequestDispatcher, endpoints: Optional[EndpointResolver] = None):
        self.dispatcher = dispatcher
        self.endpoints = endpoints or EndpointResolver(dispatcher.http_client.config)

    def relations(
        self,
        mrgid: Union[int, str],
        relation_type: Union[str, RelationType] = ALL_TYPES,
        direction: Union[str, Direction] = BOTH_DIRECTIONS
    ) -> List[RelationEdge]:
        """
        Relation edges of a gazetteer entry.

        Args:
            mrgid: Gazetteer identifier
            relation_type: "all" or a RelationType value
            direction: "both", "upper" or "lower"

        Returns:
            Deduplicated edges in server order

        Raises:
            ValueError: Invalid mrgid, relation_type or direction (before any I/O)
            UnknownIdentifierError: Gazetteer has no record for mrgid
        """
        mrgid = validate_mrgid(mrgid)
        wanted_type = _relation_filter(relation_type)
        wanted_direction = _direction_filter(direction)

        edges = self._fetch_edges(mrgid)

        seen = set()
        result = []
        for edge in edges:
            if wanted_type is not None and edge.relation_type is not wanted_type:
                continue
            if wanted_direction is not None and edge.direction is not wanted_direction:
                continue
            if edge.key in seen:
                continue
            seen.add(edge.key)
            result.append(edge)

        logger.info(
            f"Resolved {len(result)} relations for MRGID {mrgid}",
            extra={'custom_dimensions': {
                'mrgid': mrgid,
                'relation_type': wanted_type.value if wanted_type else ALL_TYPES,
                'direction': wanted_direction.value if wanted_direction else BOTH_DIRECTIONS,
                'fetched': len(edges)
            }}
        )
        return result

    def _fetch_edges(self, mrgid: int) -> List[RelationEdge]:
        request = QueryRequest(
            endpoint=self.endpoints.rest(),
            response_format=ResponseFormat.JSON,
            path=f"getGazetteerRelationsByMRGID.json/{mrgid}/",
            params={"direction": BOTH_DIRECTIONS, "type": ALL_TYPES}
        )

        try:
            payload = self.dispatcher.dispatch(request)
        except RequestStatusError as e:
            if e.status_code == 404:
                raise UnknownIdentifierError(mrgid) from e
            raise

        records = [] if payload.is_empty else normalize(payload, ResponseFormat.JSON).records

        if not records:
            if not self._record_exists(mrgid):
                raise UnknownIdentifierError(mrgid)
            return []

        edges = []
        for record in records:
            edge = self._edge_from_record(mrgid, record)
            if edge is not None:
                edges.append(edge)
        return edges

    def _record_exists(self, mrgid: int) -> bool:
        request = QueryRequest(
            endpoint=self.endpoints.rest(),
            response_format=ResponseFormat.JSON,
            path=f"getGazetteerRecordByMRGID.json/{mrgid}/"
        )
        try:
            payload = self.dispatcher.dispatch(request, probed=True)
        except RequestStatusError as e:
            if e.status_code == 404:
                return False
            raise
        return not payload.is_empty

    def _edge_from_record(self, mrgid: int, record: Dict[str, Any]) -> Optional[RelationEdge]:
        target = record.get("MRGID")
        if isinstance(target, bool) or not isinstance(target, int) or target <= 0:
            raise MalformedPayloadError(ResponseFormat.JSON.value, f"relation without a valid MRGID: {record!r}"[:300])

        raw_type = next((record[k] for k in _RELATION_KEYS if record.get(k)), None)
        raw_direction = record.get("direction")

        try:
            relation_type = RelationType(str(raw_type).lower())
            direction = Direction(str(raw_direction).lower())
        except ValueError:
            logger.warning(
                f"Skipping relation of MRGID {mrgid} with unrecognised type/direction",
                extra={'custom_dimensions': {'target': target, 'type': raw_type, 'direction': raw_direction}}
            )
            return None

        return RelationEdge(
            source_id=mrgid,
            target_id=target,
            relation_type=relation_type,
            direction=direction,
            target_name=record.get("preferredGazetteerName")
        )
