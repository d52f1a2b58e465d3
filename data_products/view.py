# ============================================================================
# FILE CONTEXT - MAP VIEW CONTRACT
# ============================================================================
# STATUS: Service Layer - WMS layer contract for map widgets
# PURPOSE: Probe WMS + base map and return what a tile widget needs to render a product
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: MapViewBuilder, view_helper, VIEW_HELPERS
# DEPENDENCIES: data_products.*, services.prober
# PATTERNS: Probe-then-render, helpers generated from the catalog
# ============================================================================

"""
Map View Contract

The map widget itself is not part of this service. It needs three things:
a layer name, a WMS base URL that already carries the filter, and proof
that the services behind both the overlay and the base map are up.

    builder = MapViewBuilder(catalog, filters, endpoints, prober, config)
    spec = builder.build("ecoregions", cql_filter="ecoregion = 'Azores Canaries Madeira'")
    spec.base_url  # https://geo.vliz.be/geoserver/Ecoregions/wms?cql_filter=ecoregion%20%3D%20...
    spec.layers    # "ecoregions"

The base layer is EMODnet bathymetry in EPSG:4326 with an OSM labels
overlay on top of the product.
"""

from functools import partial
from typing import Callable, Dict, Optional

from config import AppConfig
from util_logger import LoggerFactory, ComponentType
from .catalog import Catalog, DEFAULT_PRODUCTS
from .endpoints import EndpointResolver
from .filters import FilterBuilder
from .models import Protocol, TileLayer, WMSLayerSpec

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "MapViewBuilder")

EMODNET_ATTRIBUTION = "<a href='https://emodnet.ec.europa.eu'>EMODnet</a>"


class MapViewBuilder:
    """Builds WMSLayerSpec values after probing both tile services."""

    def __init__(
        self,
        catalog: Catalog,
        filters: FilterBuilder,
        endpoints: EndpointResolver,
        prober,
        config: AppConfig
    ):
        self.catalog = catalog
        self.filters = filters
        self.endpoints = endpoints
        self.prober = prober
        self.config = config

    def build(
        self,
        product_id: str,
        cql_filter: Optional[str] = None,
        filter: Optional[str] = None
    ) -> WMSLayerSpec:
        """
        Build the WMS layer contract for a product.

        Raises:
            UnknownProductError, ConflictingFilterError: Before any I/O
            EndpointUnreachableError, EndpointErrorStatusError: WMS or base map down
        """
        descriptor = self.catalog.resolve(product_id)
        expression = self.filters.build(cql=cql_filter, xml=filter)
        endpoint = self.endpoints.resolve(descriptor, Protocol.WMS)

        # Server check
        self.prober.probe(endpoint)
        self.prober.probe_url(self.config.base_tiles_url.format(z=1, x=1, y=1))

        spec = WMSLayerSpec(
            product_id=descriptor.id,
            base_url=endpoint.base_url + expression.as_query(),
            layers=descriptor.layer,
            base_layer=TileLayer(
                url_template=self.config.base_tiles_url,
                attribution=EMODNET_ATTRIBUTION
            ),
            labels_layer=TileLayer(url_template=self.config.labels_tiles_url)
        )

        logger.info(
            f"Map view ready for {descriptor.type_name}",
            extra={'custom_dimensions': {'product_id': descriptor.id, 'filter': expression.param_name}}
        )
        return spec


def view_helper(product_id: str, builder: MapViewBuilder) -> Callable[..., WMSLayerSpec]:
    """
    Bind a product id to a builder, e.g. view_helper("eez", b)(cql_filter=...).
    """
    return partial(builder.build, product_id)


# Product ids that get a view_<id> helper on DataProductService
VIEW_HELPERS: Dict[str, str] = {f"view_{p.id}": p.id for p in DEFAULT_PRODUCTS}
