# ============================================================================
# FILE CONTEXT - FILTER BUILDER
# ============================================================================
# STATUS: Service Layer - Server-side filter construction
# PURPOSE: Build CQL / OGC Filter XML expressions and encode them for URLs
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: FilterExpression, NoFilter, CqlFilter, OgcXmlFilter, FilterBuilder
# DEPENDENCIES: urllib.parse
# PATTERNS: Tagged union built through one validating factory
# ============================================================================

"""
Filter Builder

Geoserver accepts two mutually exclusive filter dialects on WMS and WFS:

    cql_filter=<ECQL text>          (geoserver vendor parameter)
    filter=<OGC Filter XML>         (standard OGC parameter)

FilterBuilder.build() is the only place a FilterExpression is created, and
it refuses to create one carrying both. Filter text is opaque: it is never
parsed, trimmed or reordered, only percent-encoded.

    builder = FilterBuilder()
    expr = builder.build(cql="ecoregion = 'Azores Canaries Madeira'")
    expr.as_query()   # "cql_filter=ecoregion%20%3D%20%27Azores..."

CQL tutorial: https://docs.geoserver.org/stable/en/user/tutorials/cql/cql_tutorial.html
"""

from dataclasses import dataclass
from typing import ClassVar, Iterable, List, Optional, Union
from urllib.parse import quote

from exceptions import ConflictingFilterError, UnknownColumnError
from util_logger import LoggerFactory, ComponentType
from .catalog import Catalog, get_default_catalog

logger = LoggerFactory.create_logger(ComponentType.VALIDATOR, "FilterBuilder")


def encode_filter_text(text: str) -> str:
    """Percent-encode filter text so it is safe inside a query component."""
    return quote(text, safe="")


@dataclass(frozen=True)
class NoFilter:
    """No server-side filter."""
    param_name: ClassVar[Optional[str]] = None

    def as_query(self) -> str:
        return ""


@dataclass(frozen=True)
class CqlFilter:
    """Geoserver CQL/ECQL predicate."""
    text: str
    param_name: ClassVar[str] = "cql_filter"

    @property
    def encoded(self) -> str:
        return encode_filter_text(self.text)

    def as_query(self) -> str:
        return f"{self.param_name}={self.encoded}"


@dataclass(frozen=True)
class OgcXmlFilter:
    """OGC Filter Encoding XML predicate."""
    text: str
    param_name: ClassVar[str] = "filter"

    @property
    def encoded(self) -> str:
        return encode_filter_text(self.text)

    def as_query(self) -> str:
        return f"{self.param_name}={self.encoded}"


FilterExpression = Union[NoFilter, CqlFilter, OgcXmlFilter]


def _given(value: Optional[str]) -> bool:
    return value is not None and value != ""


class FilterBuilder:
    """
    Validating factory for FilterExpression values.

    Args:
        catalog: Catalog used to validate column names (default catalog if omitted)
    """

    def __init__(self, catalog: Optional[Catalog] = None):
        self.catalog = catalog or get_default_catalog()

    def build(self, cql: Optional[str] = None, xml: Optional[str] = None) -> FilterExpression:
        """
        Build a filter expression from at most one dialect.

        Args:
            cql: CQL/ECQL predicate text
            xml: OGC Filter XML text

        Returns:
            NoFilter, CqlFilter or OgcXmlFilter

        Raises:
            ConflictingFilterError: If both cql and xml are given
            TypeError: If a filter is not a string
        """
        if _given(cql) and _given(xml):
            raise ConflictingFilterError()

        for name, value in (("cql_filter", cql), ("filter", xml)):
            if value is not None and not isinstance(value, str):
                raise TypeError(f"`{name}` must be a string, got {type(value).__name__}")

        if _given(cql):
            logger.debug("Built CQL filter", extra={'custom_dimensions': {'length': len(cql)}})
            return CqlFilter(cql)
        if _given(xml):
            logger.debug("Built OGC XML filter", extra={'custom_dimensions': {'length': len(xml)}})
            return OgcXmlFilter(xml)
        return NoFilter()

    def property_names(self, product_id: str, columns: Iterable[str]) -> List[str]:
        """
        Validate column names for a product's WFS propertyName parameter.

        Columns are checked against the catalog schema when the product
        declares one, and passed through unchecked otherwise.

        Raises:
            UnknownProductError: If product_id is not registered
            UnknownColumnError: If a column is missing from the declared schema
        """
        self.catalog.resolve(product_id)
        schema = self.catalog.schema_of(product_id)
        names = list(columns)

        if not schema:
            logger.debug(f"No declared schema for {product_id}, columns unchecked")
            return names

        for column in names:
            if column not in schema:
                raise UnknownColumnError(product_id, column)
        return names
