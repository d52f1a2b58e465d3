# ============================================================================
# FILE CONTEXT - DATA PRODUCT MODELS
# ============================================================================
# STATUS: Standalone Models - Data product descriptors and endpoint contracts
# PURPOSE: Immutable descriptors, endpoints and the WMS layer contract
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: Protocol, ResponseFormat, DataProductDescriptor, Endpoint, Pagination, WMSTileOptions, TileLayer, WMSLayerSpec
# INTERFACES: Pydantic BaseModel
# PYDANTIC_MODELS: All classes except the enums
# DEPENDENCIES: pydantic, typing, enum
# SCOPE: Data product descriptors and endpoint models
# VALIDATION: Pydantic v2 validation, frozen models
# ENTRY_POINTS: from data_products.models import DataProductDescriptor
# ============================================================================

"""
Data Product Models

Descriptors are created once per Catalog and never mutated, so every model
here is frozen. The WMS layer contract (WMSLayerSpec) is what an external
tile-rendering widget needs from this service: a layer name, a
filter-augmented base URL and the tile options.

References:
- OGC WMS 1.3.0: https://www.ogc.org/standards/wms
- OGC WFS 2.0: https://www.ogc.org/standards/wfs
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Protocol(str, Enum):
    """Service protocols a data product can be reached through."""
    WMS = "WMS"
    WFS = "WFS"
    REST = "REST"


class ResponseFormat(str, Enum):
    """
    Declared payload formats.

    Each format maps to exactly one canonical shape in the normalizer:
    GEOJSON/JSON/GML -> tabular, GEOMETRY -> geometry collection,
    RDF/TURTLE -> linked-data graph.
    """
    GEOJSON = "geojson"
    JSON = "json"
    GML = "gml"
    GEOMETRY = "geometry"
    RDF = "rdf"
    TURTLE = "turtle"


# WFS outputFormat values understood by geoserver
WFS_OUTPUT_FORMATS: Dict[ResponseFormat, str] = {
    ResponseFormat.GEOJSON: "application/json",
    ResponseFormat.JSON: "application/json",
    ResponseFormat.GEOMETRY: "application/json",
    ResponseFormat.GML: "GML3",
}


class DataProductDescriptor(BaseModel):
    """
    A Marine Regions data product served by the geoserver.

    `schema` is None when the catalog declares no attribute schema for the
    product; filter validation then degrades to unchecked.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        description="Data product identifier (e.g. 'eez')"
    )
    namespace: str = Field(
        description="Geoserver workspace (e.g. 'MarineRegions')"
    )
    layer: str = Field(
        description="Geoserver layer name within the namespace"
    )
    title: Optional[str] = Field(
        default=None,
        description="Human-readable product title"
    )
    attribute_schema: Optional[Dict[str, str]] = Field(
        default=None,
        alias="schema",
        description="Column name -> data type, when declared"
    )

    @property
    def type_name(self) -> str:
        """Qualified WFS/WMS type name (namespace:layer)."""
        return f"{self.namespace}:{self.layer}"


class Endpoint(BaseModel):
    """Protocol endpoint derived from a descriptor."""
    model_config = ConfigDict(frozen=True)

    protocol: Protocol
    base_url: str = Field(
        description="Base URL ready for query parameters to be appended"
    )


class Pagination(BaseModel):
    """Page window for feature and REST queries."""
    model_config = ConfigDict(frozen=True)

    count: int = Field(ge=1, description="Maximum number of records")
    offset: int = Field(default=0, ge=0, description="Number of records to skip")


# ============================================================================
# WMS LAYER CONTRACT (viewer)
# ============================================================================

class WMSTileOptions(BaseModel):
    """Tile options passed to the WMS tile layer."""
    transparent: bool = True
    format: str = "image/png"
    info_format: str = "text/html"


class TileLayer(BaseModel):
    """XYZ tile layer (base map or labels)."""
    url_template: str
    attribution: Optional[str] = None
    tms: bool = False


class WMSLayerSpec(BaseModel):
    """
    Everything a map widget needs to render a data product.

    base_url already carries the cql_filter/filter parameter when one was
    given; layers is the bare layer name (namespace is in the URL).
    """
    product_id: str
    base_url: str
    layers: str
    options: WMSTileOptions = Field(default_factory=WMSTileOptions)
    attribution: str = "<a href='https://marineregions.org/'>Marine Regions</a>"
    base_layer: TileLayer
    labels_layer: TileLayer
    crs: str = "EPSG:4326"
