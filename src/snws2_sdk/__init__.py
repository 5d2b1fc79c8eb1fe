"""
SNWS2 Python SDK
SolarNetwork SNWS2 HTTP request authorization with HMAC-SHA256 signatures
"""

from .version import __version__
from .exceptions import (
    SNWS2SDKError,
    SigningError,
    MissingSigningKeyError,
    ConfigurationError,
)
from .config import (
    Environment,
    SigningSettings,
)
from .signing import (
    # Core signing functionality
    AuthorizationV2Builder,
    CanonicalRequestBuilder,
    build_canonical_request,
    SigningKey,
    derive_signing_key,
    # Types
    HttpMethod,
    HttpContentType,
    HttpHeaders,
    MultiMap,
    SigningContext,
    SigningErrorCodes,
    # Utilities
    EMPTY_STRING_SHA256_HEX,
    encode_uri_component,
    # HTTP Integration
    SNWS2Auth,
    sign_prepared_request,
    create_signing_session,
)

# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'SNWS2SDKError',
    'SigningError',
    'MissingSigningKeyError',
    'ConfigurationError',
    # Configuration
    'Environment',
    'SigningSettings',
    # Signing
    'AuthorizationV2Builder',
    'CanonicalRequestBuilder',
    'build_canonical_request',
    'SigningKey',
    'derive_signing_key',
    'HttpMethod',
    'HttpContentType',
    'HttpHeaders',
    'MultiMap',
    'SigningContext',
    'SigningErrorCodes',
    'EMPTY_STRING_SHA256_HEX',
    'encode_uri_component',
    # HTTP Integration
    'SNWS2Auth',
    'sign_prepared_request',
    'create_signing_session',
]
