# ============================================================================
# FILE CONTEXT - DATA PRODUCT SERVICE
# ============================================================================
# STATUS: Service Layer - Data product queries
# PURPOSE: Orchestrate catalog, filters, endpoints, dispatch and normalization
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: DataProductService
# DEPENDENCIES: data_products.*, services.*, infrastructure.http_client
# PATTERNS: Service Layer, Facade Pattern
# ENTRY_POINTS: service = DataProductService(); service.get("eez", cql_filter="...")
# ============================================================================

"""
Data Product Service - Business Logic Layer

    list_products()                       catalog table
    get(product_id, ...)                  WFS GetFeature -> normalized result
    colnames(product_id)                  WFS DescribeFeatureType -> column table
    col_unique(product_id, colname, ...)  distinct values of one column
    view(product_id, ...)                 WMS layer contract for a map widget
    view_<product_id>(...)                shortcut for view(product_id, ...)

Every call validates locally (product id, filter exclusivity, column
names) before the first network request, then probes the endpoint, then
dispatches.
"""

from typing import Any, List, Optional, Union

from config import AppConfig, get_app_config
from exceptions import MalformedPayloadError, UnsupportedFormatError
from infrastructure.http_client import HttpClient
from services.dispatcher import QueryRequest, RequestDispatcher
from services.normalizer import NormalizedResult, TabularSet, normalize
from util_logger import LoggerFactory, ComponentType
from .catalog import Catalog, get_default_catalog
from .endpoints import EndpointResolver
from .filters import FilterBuilder
from .models import DataProductDescriptor, Pagination, Protocol, ResponseFormat, WFS_OUTPUT_FORMATS, WMSLayerSpec
from .view import MapViewBuilder, VIEW_HELPERS, view_helper

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "DataProductService")

WFS_VERSION = "2.0.0"


class DataProductService:
    """
    Query Marine Regions data products.

    Args:
        config: Application configuration (singleton if omitted)
        catalog: Product catalog (default catalog if omitted)
        http_client: Shared outbound client (created from config if omitted)
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        catalog: Optional[Catalog] = None,
        http_client: Optional[HttpClient] = None
    ):
        self.config = config or get_app_config()
        self.catalog = catalog or get_default_catalog()
        self.http_client = http_client or HttpClient(self.config)
        self.filters = FilterBuilder(self.catalog)
        self.endpoints = EndpointResolver(self.config)
        self.dispatcher = RequestDispatcher(self.http_client)
        self.viewer = MapViewBuilder(
            self.catalog, self.filters, self.endpoints, self.dispatcher.prober, self.config
        )
        logger.info("DataProductService initialized")

    def __getattr__(self, name: str):
        if name in VIEW_HELPERS:
            return view_helper(VIEW_HELPERS[name], self.viewer)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def close(self):
        self.http_client.close()

    # ========================================================================
    # CATALOG
    # ========================================================================

    def list_products(self) -> List[DataProductDescriptor]:
        return self.catalog.list_products()

    def describe(self, product_id: str) -> DataProductDescriptor:
        return self.catalog.resolve(product_id)

    # ========================================================================
    # FEATURES
    # ========================================================================

    def get(
        self,
        product_id: str,
        cql_filter: Optional[str] = None,
        filter: Optional[str] = None,
        count: Optional[int] = None,
        offset: int = 0,
        fmt: Union[ResponseFormat, str] = ResponseFormat.GEOJSON
    ) -> NormalizedResult:
        """
        Fetch features of a data product through WFS GetFeature.

        Args:
            product_id: Catalog id
            cql_filter: CQL/ECQL predicate
            filter: OGC Filter XML predicate
            count: Page size (config.default_page_size if omitted)
            offset: Number of features to skip
            fmt: geojson/gml (records) or geometry (geometries)

        Raises:
            UnknownProductError, ConflictingFilterError, UnsupportedFormatError: Before any I/O
            EndpointUnreachableError, EndpointErrorStatusError: WFS endpoint down
            TransportError, RequestStatusError: Request failed or was rejected
            MalformedPayloadError: Response did not match fmt
        """
        descriptor = self.catalog.resolve(product_id)
        expression = self.filters.build(cql=cql_filter, xml=filter)
        fmt = self._wfs_format(fmt)
        pagination = Pagination(count=count if count is not None else self.config.default_page_size, offset=offset)

        request = QueryRequest(
            endpoint=self.endpoints.resolve(descriptor, Protocol.WFS),
            filter=expression,
            response_format=fmt,
            pagination=pagination,
            params=self._wfs_params("GetFeature", descriptor)
        )
        payload = self.dispatcher.dispatch(request)
        result = normalize(payload, fmt)

        logger.info(
            f"Fetched {len(result)} features from {descriptor.type_name}",
            extra={'custom_dimensions': {
                'product_id': product_id,
                'format': fmt.value,
                'count': pagination.count,
                'offset': pagination.offset,
                'filter': expression.param_name
            }}
        )
        return result

    def colnames(self, product_id: str) -> TabularSet:
        """
        Column names and types as declared by WFS DescribeFeatureType.

        Returns:
            TabularSet of {"layer", "colname", "type"} records

        Raises:
            UnknownProductError: Before any I/O
            MalformedPayloadError: Response has no featureTypes/properties
        """
        descriptor = self.catalog.resolve(product_id)
        request = QueryRequest(
            endpoint=self.endpoints.resolve(descriptor, Protocol.WFS),
            response_format=ResponseFormat.JSON,
            params=self._wfs_params("DescribeFeatureType", descriptor)
        )
        table = normalize(self.dispatcher.dispatch(request), ResponseFormat.JSON)
        if len(table) != 1:
            raise MalformedPayloadError(ResponseFormat.JSON.value, "DescribeFeatureType response is not a single document")

        feature_types = table.records[0].get("featureTypes")
        if not isinstance(feature_types, list):
            raise MalformedPayloadError(ResponseFormat.JSON.value, "DescribeFeatureType response has no featureTypes")

        records = []
        for feature_type in feature_types:
            if not isinstance(feature_type, dict):
                raise MalformedPayloadError(ResponseFormat.JSON.value, "featureTypes entry is not an object")
            properties = feature_type.get("properties") or []
            if not isinstance(properties, list):
                raise MalformedPayloadError(ResponseFormat.JSON.value, "featureType properties is not an array")
            for prop in properties:
                if not isinstance(prop, dict):
                    raise MalformedPayloadError(ResponseFormat.JSON.value, "featureType property is not an object")
                records.append({
                    "layer": feature_type.get("typeName", descriptor.layer),
                    "colname": prop.get("name"),
                    "type": prop.get("localType") or prop.get("type")
                })
        return TabularSet(records=records)

    def col_unique(
        self,
        product_id: str,
        colname: str,
        cql_filter: Optional[str] = None,
        filter: Optional[str] = None
    ) -> List[Any]:
        """
        Distinct values of one column, in first-seen order.

        Raises:
            UnknownProductError, UnknownColumnError, ConflictingFilterError: Before any I/O
        """
        descriptor = self.catalog.resolve(product_id)
        columns = self.filters.property_names(product_id, [colname])
        expression = self.filters.build(cql=cql_filter, xml=filter)

        params = self._wfs_params("GetFeature", descriptor)
        params["propertyName"] = ",".join(columns)

        request = QueryRequest(
            endpoint=self.endpoints.resolve(descriptor, Protocol.WFS),
            filter=expression,
            response_format=ResponseFormat.GEOJSON,
            params=params
        )
        table = normalize(self.dispatcher.dispatch(request), ResponseFormat.GEOJSON)

        values = []
        seen = set()
        for record in table:
            value = record.get(colname)
            marker = repr(value)
            if marker not in seen:
                seen.add(marker)
                values.append(value)
        return values

    # ========================================================================
    # MAP VIEW
    # ========================================================================

    def view(
        self,
        product_id: str,
        cql_filter: Optional[str] = None,
        filter: Optional[str] = None
    ) -> WMSLayerSpec:
        """See MapViewBuilder.build."""
        return self.viewer.build(product_id, cql_filter=cql_filter, filter=filter)

    # ========================================================================
    # HELPERS
    # ========================================================================

    @staticmethod
    def _wfs_format(fmt: Union[ResponseFormat, str]) -> ResponseFormat:
        try:
            fmt = ResponseFormat(fmt)
        except ValueError:
            raise UnsupportedFormatError(fmt) from None
        if fmt is ResponseFormat.JSON or fmt not in WFS_OUTPUT_FORMATS:
            raise UnsupportedFormatError(fmt.value)
        return fmt

    @staticmethod
    def _wfs_params(request: str, descriptor: DataProductDescriptor) -> dict:
        return {
            "service": "WFS",
            "version": WFS_VERSION,
            "request": request,
            "typeName": descriptor.type_name,
        }
