# ============================================================================
# FILE CONTEXT - APPLICATION CONFIGURATION
# ============================================================================
# STATUS: Core Infrastructure - Configuration Management
# PURPOSE: Service hosts, timeouts and client identity for Marine Regions access
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: AppConfig, get_app_config, validate_configuration
# DEPENDENCIES: pydantic-settings
# SOURCE: Environment variables (MR_ prefix), optional .env file
# PATTERNS: Singleton via cached function, explicit injection for tests
# ============================================================================

"""
Application Configuration Module

All remote locations this service talks to live here, so nothing else in
the codebase hardcodes a host:

    - VLIZ geoserver root (WMS/WFS per namespace)
    - Marine Regions REST root (gazetteer)
    - Marine Regions MRGID resolver (linked data)
    - EMODnet bathymetry tiles (viewer base map and labels)

Every component accepts an AppConfig in its constructor and only falls back
to get_app_config() when none is given. Tests build their own AppConfig
instead of touching the process environment.

Environment Variables (all optional):
    MR_GEOSERVER_ROOT, MR_REST_ROOT, MR_MRGID_ROOT,
    MR_BASE_TILES_URL, MR_LABELS_TILES_URL,
    MR_REQUEST_TIMEOUT_SECONDS, MR_PROBE_TIMEOUT_SECONDS,
    MR_USER_AGENT, MR_DEFAULT_PAGE_SIZE

Usage:
    from config import get_app_config

    config = get_app_config()
    print(config.geoserver_root)
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


# ============================================================================
# Application Configuration
# ============================================================================

class AppConfig(BaseSettings):
    """
    Application-wide configuration loaded from environment variables.

    Attributes:
        geoserver_root: Geoserver host serving WMS/WFS, without namespace
        rest_root: Marine Regions REST service root
        mrgid_root: Root of the MRGID linked-data resolver
        base_tiles_url: EMODnet bathymetry base layer tile template
        labels_tiles_url: EMODnet labels overlay tile template
        request_timeout_seconds: Timeout for substantive requests
        probe_timeout_seconds: Timeout for capability probes
        user_agent: User-Agent header sent with every request
        default_page_size: Feature count used when a caller gives none
    """

    model_config = SettingsConfigDict(
        env_prefix="MR_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Remote services
    geoserver_root: str = Field(
        default="https://geo.vliz.be/geoserver",
        description="Geoserver root URL"
    )
    rest_root: str = Field(
        default="https://marineregions.org/rest/",
        description="Marine Regions REST service root"
    )
    mrgid_root: str = Field(
        default="https://marineregions.org/mrgid/",
        description="MRGID linked-data resolver root"
    )
    base_tiles_url: str = Field(
        default="https://tiles.emodnet-bathymetry.eu/2020/baselayer/inspire_quad/{z}/{x}/{y}.png",
        description="Viewer base layer tile template"
    )
    labels_tiles_url: str = Field(
        default="https://tiles.emodnet-bathymetry.eu/osm/labels/inspire_quad/{z}/{x}/{y}.png",
        description="Viewer labels overlay tile template"
    )

    # Transport
    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for substantive requests in seconds"
    )
    probe_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for capability probes in seconds"
    )
    user_agent: str = Field(
        default="marineregions-query-service",
        description="User-Agent header for outgoing requests"
    )
    default_page_size: int = Field(
        default=1000,
        ge=1,
        description="Feature count used when none is requested"
    )

    @field_validator("geoserver_root")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Geoserver root is joined with '/<namespace>/...' so no trailing slash."""
        return v.rstrip("/")

    @field_validator("rest_root", "mrgid_root")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """REST and MRGID roots are joined with relative paths."""
        return v if v.endswith("/") else v + "/"


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """
    Get singleton application configuration instance.

    Returns:
        AppConfig: Validated configuration object

    Raises:
        ValidationError: If an environment variable holds an invalid value
    """
    return AppConfig()


# ============================================================================
# Configuration Validation
# ============================================================================

def validate_configuration() -> bool:
    """
    Validate configuration on application startup.

    Returns:
        bool: True if configuration is valid

    Raises:
        Exception: If configuration validation fails
    """
    try:
        config = get_app_config()
        logger.info("Configuration validation:")
        logger.info(f"  Geoserver: {config.geoserver_root}")
        logger.info(f"  REST root: {config.rest_root}")
        logger.info(f"  Request timeout: {config.request_timeout_seconds}s")
        logger.info(f"  Probe timeout: {config.probe_timeout_seconds}s")
        return True

    except Exception as e:
        logger.error(f"❌ Configuration validation failed: {e}")
        raise


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    validate_configuration()
