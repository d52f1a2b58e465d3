# ============================================================================
# FILE CONTEXT - ERROR TAXONOMY
# ============================================================================
# STATUS: Core Infrastructure - Shared exception hierarchy
# PURPOSE: Typed errors for validation, network and payload failures
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: MarineRegionsError and all subclasses
# DEPENDENCIES: none (stdlib only)
# PATTERNS: Validation errors before I/O, network errors carry the URL
# ============================================================================

"""
Error Taxonomy

Three families, raised at three different stages of a call:

1. Validation (no network I/O has happened yet):
   - UnknownProductError, ConflictingFilterError, UnknownColumnError

2. Network:
   - ProbeError -> EndpointUnreachableError, EndpointErrorStatusError
   - TransportError -> RequestStatusError
   Every network error carries the URL that failed.

3. Payload:
   - UnsupportedFormatError, MalformedPayloadError, UnknownIdentifierError

Only the trigger layer turns these into HTTP responses (see http_status).
"""

from typing import Optional


class MarineRegionsError(Exception):
    """Base class for every error raised by this service."""

    http_status = 500


# ============================================================================
# Validation errors
# ============================================================================

class UnknownProductError(MarineRegionsError, KeyError):
    """Data product id is not registered in the catalog."""

    http_status = 404

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Unknown data product: {product_id!r}")

    def __str__(self) -> str:
        # KeyError quotes its argument otherwise
        return self.args[0]


class ConflictingFilterError(MarineRegionsError, ValueError):
    """Both a CQL filter and an OGC XML filter were supplied."""

    http_status = 400

    def __init__(self):
        super().__init__("You must provide one of `cql_filter` or `filter`, not both.")


class UnknownColumnError(MarineRegionsError, ValueError):
    """Column name is not part of the product's declared schema."""

    http_status = 400

    def __init__(self, product_id: str, column: str):
        self.product_id = product_id
        self.column = column
        super().__init__(f"Column {column!r} is not an attribute of data product {product_id!r}")


# ============================================================================
# Network errors
# ============================================================================

class ProbeError(MarineRegionsError):
    """Capability probe failed; the substantive request must not be sent."""

    http_status = 503

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(message)


class EndpointUnreachableError(ProbeError):
    """Endpoint could not be reached at all (DNS, connect, timeout)."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(url, f"Connection to {url} failed{detail}")


class EndpointErrorStatusError(ProbeError):
    """Endpoint answered the probe with an error status."""

    def __init__(self, url: str, status_code: int):
        self.status_code = status_code
        super().__init__(url, f"Endpoint {url} returned HTTP {status_code}")


class TransportError(MarineRegionsError):
    """Substantive request failed after the probe stage."""

    http_status = 502

    def __init__(self, url: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.url = url
        self.cause = cause
        if message is None:
            detail = f": {cause}" if cause else ""
            message = f"Request to {url} failed{detail}"
        super().__init__(message)


class RequestStatusError(TransportError):
    """Substantive request reached the server but was rejected (e.g. bad filter)."""

    def __init__(self, url: str, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(url, message=f"Request to {url} returned HTTP {status_code}")


# ============================================================================
# Payload errors
# ============================================================================

class UnsupportedFormatError(MarineRegionsError, ValueError):
    """Declared response format has no canonical shape."""

    http_status = 400

    def __init__(self, declared_format):
        self.declared_format = declared_format
        super().__init__(f"Unsupported response format: {declared_format!r}")


class MalformedPayloadError(MarineRegionsError):
    """Payload could not be parsed as its declared format."""

    http_status = 502

    def __init__(self, declared_format: str, reason: str):
        self.declared_format = declared_format
        self.reason = reason
        super().__init__(f"Malformed {declared_format} payload: {reason}")


class UnknownIdentifierError(MarineRegionsError):
    """Gazetteer has no record for the given MRGID."""

    http_status = 404

    def __init__(self, mrgid: int):
        self.mrgid = mrgid
        super().__init__(f"No gazetteer record found for MRGID {mrgid}")
