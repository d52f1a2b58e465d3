# ============================================================================
# FILE CONTEXT - INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Core Infrastructure - Outbound transport
# PURPOSE: Shared infrastructure components for data product and gazetteer access
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: HttpClient
# DEPENDENCIES: httpx, config
# ============================================================================

"""
Infrastructure Module

Provides the outbound HTTP client shared by the capability prober and the
request dispatcher.
"""

from .http_client import HttpClient

__version__ = "1.0.0"
__all__ = [
    "HttpClient"
]
