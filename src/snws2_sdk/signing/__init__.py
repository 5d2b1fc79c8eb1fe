"""
SNWS2 Python SDK - Request Signing Module

SNWS2 HTTP authorization scheme implementation with HMAC-SHA256 signatures.
This module provides request signing functionality for authenticating with
SolarNetwork's token-protected API endpoints.
"""

from .types import (
    HttpMethod,
    HttpContentType,
    HttpHeaders,
    MultiMap,
    SigningContext,
    SigningErrorCodes,
)

from .authorization_builder import AuthorizationV2Builder

from .canonical_request import (
    CanonicalRequestBuilder,
    build_canonical_request,
)

from .signing_key import (
    SigningKey,
    derive_signing_key,
    signing_key_expiration,
)

from .signature import (
    SIGNATURE_ALGORITHM,
    compute_signature,
    compute_signature_data,
    format_authorization_header,
)

from .utils import (
    EMPTY_STRING_SHA256_HEX,
    encode_uri_component,
    format_http_date,
    format_iso8601_date,
    parse_date,
    url_query_parse,
    form_query_parse,
)

from .integration import (
    SNWS2Auth,
    sign_prepared_request,
    create_signing_session,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'AuthorizationV2Builder',
    'CanonicalRequestBuilder',
    'build_canonical_request',
    'SigningKey',
    'derive_signing_key',
    'signing_key_expiration',
    'SIGNATURE_ALGORITHM',
    'compute_signature',
    'compute_signature_data',
    'format_authorization_header',
    # Types
    'HttpMethod',
    'HttpContentType',
    'HttpHeaders',
    'MultiMap',
    'SigningContext',
    'SigningErrorCodes',
    # Utilities
    'EMPTY_STRING_SHA256_HEX',
    'encode_uri_component',
    'format_http_date',
    'format_iso8601_date',
    'parse_date',
    'url_query_parse',
    'form_query_parse',
    # HTTP Integration
    'SNWS2Auth',
    'sign_prepared_request',
    'create_signing_session',
]
