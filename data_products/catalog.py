# ============================================================================
# FILE CONTEXT - DATA PRODUCT CATALOG
# ============================================================================
# STATUS: Service Layer - Static product registry
# PURPOSE: Map data product ids to geoserver namespace/layer and attribute schema
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: Catalog, DEFAULT_PRODUCTS, get_default_catalog
# DEPENDENCIES: pydantic (models)
# PATTERNS: Immutable registry injected into consumers
# ============================================================================

"""
Data Product Catalog

The product table is a plain immutable value. The Catalog only indexes it;
tests build a Catalog from their own descriptors instead of patching the
default table.

    catalog = Catalog()
    descriptor = catalog.resolve("eez")
    descriptor.type_name        # "MarineRegions:eez"
    catalog.schema_of("eez")    # {"mrgid": "int", "geoname": "string", ...}
"""

from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from exceptions import UnknownProductError
from util_logger import LoggerFactory, ComponentType
from .models import DataProductDescriptor

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "Catalog")


_EEZ_SCHEMA = {
    "mrgid": "int",
    "geoname": "string",
    "mrgid_ter1": "int",
    "pol_type": "string",
    "mrgid_sov1": "int",
    "territory1": "string",
    "iso_ter1": "string",
    "sovereign1": "string",
    "iso_sov1": "string",
    "area_km2": "int",
}

_BOUNDARY_SCHEMA = {
    "line_id": "int",
    "line_name": "string",
    "line_type": "string",
    "mrgid_sov1": "int",
    "territory1": "string",
    "sovereign1": "string",
    "source1": "string",
    "doc_date": "date",
}

_IHO_SCHEMA = {
    "name": "string",
    "id": "string",
    "mrgid": "int",
    "longitude": "number",
    "latitude": "number",
    "area": "int",
}

_ECOREGIONS_SCHEMA = {
    "eco_code": "int",
    "ecoregion": "string",
    "prov_code": "int",
    "province": "string",
    "rlm_code": "int",
    "realm": "string",
    "alt_code": "int",
    "eco_code_x": "int",
    "lat_zone": "string",
}


def _product(id: str, type_name: str, title: str, schema: Optional[Dict[str, str]] = None) -> DataProductDescriptor:
    namespace, layer = type_name.split(":", 1)
    return DataProductDescriptor(id=id, namespace=namespace, layer=layer, title=title, schema=schema)


DEFAULT_PRODUCTS = (
    _product("eez", "MarineRegions:eez", "Exclusive Economic Zones (200NM)", _EEZ_SCHEMA),
    _product("eez_boundaries", "MarineRegions:eez_boundaries", "Maritime Boundaries", _BOUNDARY_SCHEMA),
    _product("eez_12nm", "MarineRegions:eez_12nm", "Territorial Seas (12NM)"),
    _product("eez_24nm", "MarineRegions:eez_24nm", "Contiguous Zones (24NM)"),
    _product("eez_internal_waters", "MarineRegions:eez_internal_waters", "Internal Waters"),
    _product("eez_archipelagic_waters", "MarineRegions:eez_archipelagic_waters", "Archipelagic Waters"),
    _product("high_seas", "MarineRegions:high_seas", "High Seas"),
    _product("ecs", "MarineRegions:ecs", "Extended Continental Shelves"),
    _product("ecs_boundaries", "MarineRegions:ecs_boundaries", "Extended Continental Shelf Boundaries", _BOUNDARY_SCHEMA),
    _product("iho", "MarineRegions:iho", "IHO Sea Areas", _IHO_SCHEMA),
    _product("goas", "MarineRegions:goas", "Global Oceans and Seas"),
    _product("eez_iho", "MarineRegions:eez_iho", "Intersect of EEZs and IHO Sea Areas"),
    _product("eez_land", "MarineRegions:eez_land", "Union of EEZs and Land"),
    _product("longhurst", "MarineRegions:longhurst", "Longhurst Provinces"),
    _product("cds", "MarineRegions:cds", "Cold-water coral reefs distribution"),
    _product("eca_reg13_nox", "MarineRegions:eca_reg13_nox", "Emission Control Areas (MARPOL Annex VI Reg. 13)"),
    _product("eca_reg14_sox_pm", "MarineRegions:eca_reg14_sox_pm", "Emission Control Areas (MARPOL Annex VI Reg. 14)"),
    _product("worldheritagemarineprogramme", "Worldheritage:worldheritagemarineprogramme", "World Marine Heritage Sites"),
    _product("lme", "MarineRegions:lme", "Large Marine Ecosystems of the World"),
    _product("ecoregions", "Ecoregions:ecoregions", "Marine Ecoregions of the World (MEOW)", _ECOREGIONS_SCHEMA),
    _product("seavox_v18", "SeaVoX:SeaVoX_sea_areas_polygons_v18", "SeaVoX Salt and Fresh Water Body Gazetteer"),
)


class Catalog:
    """
    Read-only registry of data products.

    Args:
        products: Descriptors to register, defaults to DEFAULT_PRODUCTS

    Raises:
        ValueError: If two descriptors share an id or a namespace:layer pair
    """

    def __init__(self, products: Optional[Iterable[DataProductDescriptor]] = None):
        index: Dict[str, DataProductDescriptor] = {}
        type_names = set()

        for descriptor in (DEFAULT_PRODUCTS if products is None else products):
            if descriptor.id in index:
                raise ValueError(f"Duplicate data product id: {descriptor.id!r}")
            if descriptor.type_name in type_names:
                raise ValueError(f"Duplicate geoserver resource: {descriptor.type_name!r}")
            index[descriptor.id] = descriptor
            type_names.add(descriptor.type_name)

        self._products: Mapping[str, DataProductDescriptor] = MappingProxyType(index)
        logger.debug(f"Catalog loaded with {len(index)} data products")

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._products

    def __len__(self) -> int:
        return len(self._products)

    def resolve(self, product_id: str) -> DataProductDescriptor:
        """
        Look up a data product.

        Raises:
            UnknownProductError: If product_id is not registered
        """
        try:
            return self._products[product_id]
        except (KeyError, TypeError):
            raise UnknownProductError(product_id) from None

    def schema_of(self, product_id: str) -> Dict[str, str]:
        """
        Declared attribute schema of a product.

        Returns an empty dict when no schema is declared or the product is
        unknown; never raises.
        """
        descriptor = self._products.get(product_id) if isinstance(product_id, str) else None
        if descriptor is None or not descriptor.attribute_schema:
            return {}
        return dict(descriptor.attribute_schema)

    def list_products(self) -> List[DataProductDescriptor]:
        """All descriptors in registration order."""
        return list(self._products.values())


@lru_cache(maxsize=1)
def get_default_catalog() -> Catalog:
    """Singleton catalog over DEFAULT_PRODUCTS."""
    return Catalog()
