# ============================================================================
# FILE CONTEXT - RESPONSE NORMALIZER
# ============================================================================
# STATUS: Schema Layer - Payload decoding into canonical shapes
# PURPOSE: Turn JSON / GeoJSON / GML / RDF payloads into three result shapes
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: TabularSet, TaggedGeometry, GeometryCollection, LinkedDataGraph, NormalizedResult, normalize, DEFAULT_CRS
# DEPENDENCIES: json, lxml, rdflib
# PATTERNS: Closed tagged union, pure function of bytes + declared format
# ============================================================================
"""
Response Normalizer

    declared format              canonical shape
    ---------------              ---------------
    geojson, json, gml     ->    TabularSet          (records in server order)
    geometry               ->    GeometryCollection  (each geometry tagged with a CRS)
    rdf, turtle            ->    LinkedDataGraph     (triples in parse order, duplicates kept)

A payload that cannot be read as its declared format raises
MalformedPayloadError. It is never turned into an empty result, because an
empty result means "no matching records" to every caller.

Geometry payloads without a `crs` member are tagged with DEFAULT_CRS and
crs_is_default=True so consumers can tell an assumed CRS from a declared one.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from lxml import etree
from rdflib import Graph
from rdflib.term import Node

from data_products.models import ResponseFormat
from exceptions import MalformedPayloadError, UnsupportedFormatError
from util_logger import LoggerFactory, ComponentType
from .dispatcher import RawPayload

logger = LoggerFactory.create_logger(ComponentType.SCHEMA, "ResponseNormalizer")

# WGS84 longitude/latitude, the geoserver GeoJSON default
DEFAULT_CRS = "http://www.opengis.net/def/crs/OGC/1.3/CRS84"

_RDF_PARSER_FORMATS = {
    ResponseFormat.RDF: "xml",
    ResponseFormat.TURTLE: "turtle",
}

_GEOMETRY_TYPES = {
    "Point", "MultiPoint", "LineString", "MultiLineString",
    "Polygon", "MultiPolygon", "GeometryCollection",
}


# ============================================================================
# Canonical shapes
# ============================================================================

@dataclass(frozen=True)
class TabularSet:
    """Ordered records, each a mapping of column name to value."""
    records: List[Dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.records)

    @property
    def columns(self) -> List[str]:
        """Column names in first-seen order."""
        seen: Dict[str, None] = {}
        for record in self.records:
            for key in record:
                seen.setdefault(key, None)
        return list(seen)

    def to_dict(self) -> Dict[str, Any]:
        return {"shape": "tabular", "numberReturned": len(self.records), "records": self.records}


@dataclass(frozen=True)
class TaggedGeometry:
    """GeoJSON geometry with the CRS it is expressed in."""
    geometry: Optional[Dict[str, Any]]
    crs: str
    crs_is_default: bool = False


@dataclass(frozen=True)
class GeometryCollection:
    """Geometries in server order."""
    geometries: List[TaggedGeometry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.geometries)

    def __iter__(self) -> Iterator[TaggedGeometry]:
        return iter(self.geometries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shape": "geometry",
            "numberReturned": len(self.geometries),
            "geometries": [
                {"geometry": g.geometry, "crs": g.crs, "crs_is_default": g.crs_is_default}
                for g in self.geometries
            ]
        }


@dataclass(frozen=True)
class LinkedDataGraph:
    """Subject-predicate-object triples in parse order, duplicates preserved."""
    triples: List[Tuple[Node, Node, Node]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.triples)

    def __iter__(self) -> Iterator[Tuple[Node, Node, Node]]:
        return iter(self.triples)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shape": "linked_data",
            "numberReturned": len(self.triples),
            "triples": [[term.n3() for term in triple] for triple in self.triples]
        }

    def to_graph(self) -> Graph:
        """Load the triples into an rdflib Graph (duplicates collapse there)."""
        graph = Graph()
        for triple in self.triples:
            graph.add(triple)
        return graph


NormalizedResult = Union[TabularSet, GeometryCollection, LinkedDataGraph]


# ============================================================================
# Entry point
# ============================================================================

def normalize(payload: Union[RawPayload, bytes, str], declared_format: Union[ResponseFormat, str]) -> NormalizedResult:
    """
    Decode a payload into its canonical shape.

    Args:
        payload: RawPayload from the dispatcher, or raw bytes/str
        declared_format: ResponseFormat (or its string value)

    Raises:
        UnsupportedFormatError: declared_format has no canonical shape
        MalformedPayloadError: payload is not valid for declared_format
    """
    try:
        fmt = ResponseFormat(declared_format)
    except ValueError:
        raise UnsupportedFormatError(declared_format) from None

    if isinstance(payload, RawPayload):
        content = payload.content
    elif isinstance(payload, str):
        content = payload.encode("utf-8")
    else:
        content = payload

    if not content or not content.strip():
        raise MalformedPayloadError(fmt.value, "empty payload")

    if fmt in (ResponseFormat.GEOJSON, ResponseFormat.JSON):
        result = _tabular_from_json(content, fmt)
    elif fmt is ResponseFormat.GML:
        result = _tabular_from_gml(content)
    elif fmt is ResponseFormat.GEOMETRY:
        result = _geometries_from_geojson(content)
    elif fmt in _RDF_PARSER_FORMATS:
        result = _graph_from_rdf(content, fmt)
    else:
        raise UnsupportedFormatError(declared_format)

    logger.debug(
        f"Normalized {fmt.value} payload into {type(result).__name__} ({len(result)} entries)"
    )
    return result


# ============================================================================
# Tabular
# ============================================================================

def _load_json(content: bytes, fmt: ResponseFormat) -> Any:
    try:
        return json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedPayloadError(fmt.value, str(e)) from e


def _tabular_from_json(content: bytes, fmt: ResponseFormat) -> TabularSet:
    data = _load_json(content, fmt)

    if fmt is ResponseFormat.GEOJSON:
        if not isinstance(data, dict) or not isinstance(data.get("features"), list):
            raise MalformedPayloadError(fmt.value, "expected a FeatureCollection with a 'features' array")
        records = []
        for index, feature in enumerate(data["features"]):
            if not isinstance(feature, dict):
                raise MalformedPayloadError(fmt.value, f"feature {index} is not an object")
            properties = feature.get("properties")
            if properties is not None and not isinstance(properties, dict):
                raise MalformedPayloadError(fmt.value, f"feature {index} properties is not an object")
            records.append(dict(properties or {}))
        return TabularSet(records=records)

    # Plain JSON: an array of rows or a single row object
    if isinstance(data, dict):
        return TabularSet(records=[data])
    if isinstance(data, list):
        for index, row in enumerate(data):
            if not isinstance(row, dict):
                raise MalformedPayloadError(fmt.value, f"row {index} is not an object")
        return TabularSet(records=[dict(row) for row in data])
    raise MalformedPayloadError(fmt.value, f"expected an object or array, got {type(data).__name__}")


# Remote input: no entity expansion, no network lookups
_GML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


def _local_name(element) -> str:
    return etree.QName(element).localname


def _tabular_from_gml(content: bytes) -> TabularSet:
    try:
        root = etree.fromstring(content, parser=_GML_PARSER)
    except etree.XMLSyntaxError as e:
        raise MalformedPayloadError(ResponseFormat.GML.value, str(e)) from e

    if _local_name(root) != "FeatureCollection":
        raise MalformedPayloadError(
            ResponseFormat.GML.value,
            f"expected a FeatureCollection root, got {_local_name(root)!r}"
        )

    records = []
    for member in root:
        if not isinstance(member.tag, str):
            continue  # comments, processing instructions
        if _local_name(member) not in ("member", "featureMember", "featureMembers"):
            continue
        for feature in member:
            if not isinstance(feature.tag, str):
                continue
            record = {}
            for prop in feature:
                if not isinstance(prop.tag, str):
                    continue
                # Geometry and other complex properties have element children
                if len(prop):
                    continue
                record[_local_name(prop)] = prop.text
            records.append(record)

    return TabularSet(records=records)


# ============================================================================
# Geometry
# ============================================================================

def _declared_crs(data: Dict[str, Any]) -> Optional[str]:
    crs = data.get("crs")
    if not isinstance(crs, dict):
        return None
    properties = crs.get("properties")
    if properties is None:
        return None
    if not isinstance(properties, dict):
        raise MalformedPayloadError(ResponseFormat.GEOMETRY.value, "crs properties is not an object")
    return properties.get("name") or properties.get("href")


def _geometries_from_geojson(content: bytes) -> GeometryCollection:
    fmt = ResponseFormat.GEOMETRY
    data = _load_json(content, fmt)
    if not isinstance(data, dict):
        raise MalformedPayloadError(fmt.value, "expected a GeoJSON object")

    geo_type = data.get("type")
    if geo_type == "FeatureCollection" and isinstance(data.get("features"), list):
        raw = [feature.get("geometry") if isinstance(feature, dict) else feature for feature in data["features"]]
    elif geo_type == "GeometryCollection" and isinstance(data.get("geometries"), list):
        raw = data["geometries"]
    elif geo_type == "Feature":
        raw = [data.get("geometry")]
    elif geo_type in _GEOMETRY_TYPES:
        raw = [data]
    else:
        raise MalformedPayloadError(fmt.value, f"unexpected GeoJSON type {geo_type!r}")

    for index, geometry in enumerate(raw):
        if geometry is not None and not (isinstance(geometry, dict) and geometry.get("type") in _GEOMETRY_TYPES):
            raise MalformedPayloadError(fmt.value, f"entry {index} is not a GeoJSON geometry")

    crs = _declared_crs(data)
    crs_is_default = crs is None
    if crs_is_default:
        crs = DEFAULT_CRS

    return GeometryCollection(
        geometries=[TaggedGeometry(geometry=g, crs=crs, crs_is_default=crs_is_default) for g in raw]
    )


# ============================================================================
# Linked data
# ============================================================================

class _RecordingGraph(Graph):
    """Graph that also keeps every added triple, in order, duplicates included."""

    def __init__(self):
        super().__init__()
        self.recorded: List[Tuple[Node, Node, Node]] = []

    def add(self, triple):
        self.recorded.append(triple)
        return super().add(triple)


def _graph_from_rdf(content: bytes, fmt: ResponseFormat) -> LinkedDataGraph:
    graph = _RecordingGraph()
    try:
        graph.parse(data=content, format=_RDF_PARSER_FORMATS[fmt])
    except Exception as e:
        # rdflib raises parser-specific exception types (SAX, BadSyntax, ...)
        raise MalformedPayloadError(fmt.value, f"{type(e).__name__}: {e}") from e
    return LinkedDataGraph(triples=list(graph.recorded))
