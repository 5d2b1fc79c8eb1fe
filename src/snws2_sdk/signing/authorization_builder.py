"""
SNWS2 HTTP authorization builder

This module provides the main builder for the SNWS2 HTTP authorization scheme.
A builder holds the mutable description of one request (method, host, path,
date, headers, parameters and body digest) and computes the `Authorization`
header value for it.

A one-off header value:

    auth = (AuthorizationV2Builder("my-token")
            .path("/solarquery/api/v1/pub/...")
            .build("my-token-secret"))

Re-using a builder and a saved signing key, valid for up to 7 days:

    builder = AuthorizationV2Builder("my-token").save_signing_key("my-token-secret")
    auth = builder.reset().path("/solarquery/api/v1/pub/...").build_with_saved_key()

For `POST` or `PUT` requests, configure the same method and `Content-Type` as
the actual request. Form-encoded bodies are signed as parameters via
`query_params()`; any other body is signed via `compute_content_digest()`, and
the resulting `Digest` header must then be sent with the request.

Builders are not thread safe: use one builder per request being prepared, or
`reset()` between requests.
"""

import base64
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Union
from urllib.parse import urlsplit

from ..config.environment import Environment
from ..crypto.digest import HmacSha256Function, Sha256Function, hmac_sha256, sha256
from ..exceptions import MissingSigningKeyError
from .canonical_request import (
    CanonicalRequestBuilder,
    canonical_content_sha256,
    canonical_header_names,
    canonical_headers,
    canonical_query_parameters,
    uses_sn_date,
)
from .signature import compute_signature, compute_signature_data, format_authorization_header
from .signing_key import SigningKey, derive_signing_key
from .types import (
    HttpHeaders,
    HttpMethod,
    MultiMap,
    QueryParams,
    SigningContext,
    SigningErrorCodes,
)
from .utils import (
    EMPTY_STRING_SHA256_HEX,
    default_port,
    format_http_date,
    parse_hex,
    to_utc,
    url_query_parse,
    utc_now,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _has_port(host: str) -> bool:
    # IPv6 literals are bracketed, so only a colon after `]` starts a port
    return ':' in host.rsplit(']', 1)[-1]


class AuthorizationV2Builder:
    """
    A builder for the SNWS2 HTTP authorization scheme.
    """

    EMPTY_STRING_SHA256_HEX = EMPTY_STRING_SHA256_HEX
    SNWS2_AUTH_SCHEME = "SNWS2"

    def __init__(
        self,
        token_id: str,
        environment: Optional[Environment] = None,
        force_host_port: bool = False,
        clock: Optional[Clock] = None,
        sha256_fn: Sha256Function = sha256,
        hmac_fn: HmacSha256Function = hmac_sha256
    ):
        """
        Initialize the builder and reset it to default values.

        Args:
            token_id: The auth token identifier
            environment: The environment to sign requests for; a default
                environment is created when not provided
            force_host_port: Always add a port to host values, even when it
                would be implied; useful behind a proxy that forwards the port
            clock: Optional current time provider, returning UTC datetimes
            sha256_fn: SHA-256 implementation
            hmac_fn: HMAC-SHA256 implementation
        """
        self.token_id = token_id
        self.environment = environment if environment is not None else Environment()
        self.force_host_port = force_host_port
        self.http_headers = HttpHeaders()
        self.parameters = MultiMap()
        self._clock = clock or utc_now
        self._sha256 = sha256_fn
        self._hmac = hmac_fn
        self._http_method: str = HttpMethod.GET.value
        self._request_path = "/"
        self._request_date = self._now()
        self._content_digest: Optional[bytes] = None
        self._signed_header_names: Optional[List[str]] = None
        self._signing_key: Optional[SigningKey] = None
        self.reset()

    def _now(self) -> datetime:
        return to_utc(self._clock())

    def reset(self) -> 'AuthorizationV2Builder':
        """
        Reset to default property values.

        The method is set to `GET`, the host to the environment host (see
        `host()` for how the port is added), the path
        to `/` and the date to now; the content digest, headers, parameters and
        additional signed header names are cleared. A saved signing key is
        preserved.

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        self._http_method = HttpMethod.GET.value
        self._request_date = self._now()
        self._request_path = "/"
        self._content_digest = None
        self._signed_header_names = None
        self.http_headers.clear()
        self.parameters.clear()
        return self.host(self.environment.host_header_value())

    # Signing key management

    def compute_signing_key(self, token_secret: str) -> bytes:
        """
        Compute a signing key from a token secret and the configured date.

        The key is not saved on this builder; see `save_signing_key()` for
        that. To make a key expire in fewer than 7 days, configure a date in
        the past before calling this method.

        Args:
            token_secret: The token secret

        Returns:
            bytes: The signing key
        """
        return derive_signing_key(token_secret, self._request_date, self._hmac)

    def save_signing_key(self, token_secret: str) -> 'AuthorizationV2Builder':
        """
        Compute and save the signing key for later `build_with_saved_key()` calls.

        The key is derived for the currently configured date.

        Args:
            token_secret: The token secret

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        return self.key(self.compute_signing_key(token_secret), self._request_date)

    def key(self, key: Union[bytes, str], date: Optional[datetime] = None) -> 'AuthorizationV2Builder':
        """
        Save an externally computed signing key, such as one returned by a
        token refresh request.

        Args:
            key: The signing key, as raw bytes or a hex string
            date: The date the key was derived for; defaults to the configured
                request date

        Returns:
            AuthorizationV2Builder: Self for method chaining

        Raises:
            SigningError: If a hex key string is invalid
        """
        if isinstance(key, str):
            key = parse_hex(key, SigningErrorCodes.INVALID_SIGNING_KEY)
        self._signing_key = SigningKey(bytes(key), date if date is not None else self._request_date)
        return self

    def clear_signing_key(self) -> 'AuthorizationV2Builder':
        """Discard the saved signing key."""
        self._signing_key = None
        return self

    @property
    def signing_key(self) -> Optional[bytes]:
        """The saved signing key, or None."""
        return self._signing_key.key if self._signing_key else None

    @property
    def saved_signing_key(self) -> Optional[SigningKey]:
        """The saved signing key with its derivation date, or None."""
        return self._signing_key

    @property
    def signing_key_expiration_date(self) -> Optional[datetime]:
        """The instant the saved signing key expires, or None without a key."""
        return self._signing_key.expiration_date if self._signing_key else None

    @property
    def signing_key_valid(self) -> bool:
        """True if a signing key is saved and not expired."""
        return self._signing_key is not None and self._signing_key.is_valid(self._now())

    # Request configuration

    def method(self, val: Union[str, HttpMethod]) -> 'AuthorizationV2Builder':
        """Set the HTTP method (verb)."""
        self._http_method = val.value if isinstance(val, HttpMethod) else val
        return self

    @property
    def http_method(self) -> str:
        return self._http_method

    def host(self, val: str) -> 'AuthorizationV2Builder':
        """
        Set the HTTP host.

        When `force_host_port` is enabled and the value has no port, the
        environment port is appended unless it is 80. The same rule applies
        to the host set by `reset()` and `url()`.

        Args:
            val: The host value

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        if self.force_host_port and not _has_port(val) and self.environment.port != 80:
            val = f"{val}:{self.environment.port}"
        self.http_headers.put(HttpHeaders.HOST, val)
        return self

    def path(self, val: str) -> 'AuthorizationV2Builder':
        """Set the request path, used verbatim."""
        self._request_path = val
        return self

    @property
    def request_path(self) -> str:
        return self._request_path

    def url(self, url: str, ignore_host: bool = False) -> 'AuthorizationV2Builder':
        """
        Set the host, path and query parameters from a URL.

        Args:
            url: The URL
            ignore_host: Keep the configured host instead of the URL host

        Returns:
            AuthorizationV2Builder: Self for method chaining

        Raises:
            ValueError: If the URL cannot be parsed
        """
        parts = urlsplit(url)
        host = parts.hostname
        port = parts.port
        if host and ':' in host:
            host = f"[{host}]"
        if host and port and port != default_port(parts.scheme):
            host = f"{host}:{port}"
        if parts.query:
            self.query_params(url_query_parse(parts.query))
        if not ignore_host and host:
            self.host(host)
        return self.path(parts.path or "/")

    def content_type(self, val: Optional[str]) -> 'AuthorizationV2Builder':
        """Set the `Content-Type` header."""
        self.http_headers.put(HttpHeaders.CONTENT_TYPE, val)
        return self

    def date(self, val: datetime) -> 'AuthorizationV2Builder':
        """
        Set the request date.

        A value that is not a datetime resets the date to now.

        Args:
            val: The date to sign with, typically the current time

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        if isinstance(val, datetime):
            self._request_date = to_utc(val)
        else:
            self._request_date = self._now()
            logger.warning(
                f"Invalid request date {val!r} replaced with current time "
                f"(code: {SigningErrorCodes.INVALID_DATE})"
            )
        return self

    @property
    def request_date(self) -> datetime:
        return self._request_date

    @property
    def request_date_header_value(self) -> str:
        """The request date as an HTTP header value."""
        return format_http_date(self._request_date)

    @property
    def use_sn_date(self) -> bool:
        """
        True when the `X-SN-Date` header is signed instead of `Date`.

        This is the case when `X-SN-Date` is one of the additional signed
        header names or is present in the HTTP headers. Setting the property
        adds or removes `X-SN-Date` from the signed header names, and always
        removes any `X-SN-Date` HTTP header value.
        """
        return uses_sn_date(self.http_headers, self._signed_header_names)

    @use_sn_date.setter
    def use_sn_date(self, enabled: bool) -> None:
        x_sn_date = HttpHeaders.X_SN_DATE.lower()
        names = self._signed_header_names
        existing = [i for i, name in enumerate(names or []) if name.lower() == x_sn_date]
        if enabled and not existing:
            self._signed_header_names = (names or []) + [HttpHeaders.X_SN_DATE]
        elif not enabled and existing:
            self._signed_header_names = [name for name in names if name.lower() != x_sn_date]
        self.http_headers.remove(HttpHeaders.X_SN_DATE)

    def sn_date(self, enabled: bool) -> 'AuthorizationV2Builder':
        """Set the `use_sn_date` property."""
        self.use_sn_date = enabled
        return self

    def header(self, name: str, value: Optional[str]) -> 'AuthorizationV2Builder':
        """Set an HTTP header value."""
        self.http_headers.put(name, value)
        return self

    def headers(self, headers: HttpHeaders) -> 'AuthorizationV2Builder':
        """
        Replace the HTTP headers.

        The headers must include everything the scheme signs, plus any names
        configured via `signed_http_headers()`.
        """
        self.http_headers = headers
        return self

    def query_params(self, params: QueryParams) -> 'AuthorizationV2Builder':
        """
        Set the query parameters, or the form parameters of a form-encoded body.

        Args:
            params: A MultiMap, which replaces the current parameters, or a
                mapping whose keys replace matching current parameters

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        if isinstance(params, MultiMap):
            self.parameters = params
        else:
            self.parameters.put_all(params)
        return self

    def signed_http_headers(self, names: Iterable[str]) -> 'AuthorizationV2Builder':
        """Set additional HTTP header names to include in the signature."""
        self._signed_header_names = list(names)
        return self

    @property
    def signed_header_names(self) -> Optional[List[str]]:
        """A copy of the additional signed header names, or None."""
        return list(self._signed_header_names) if self._signed_header_names is not None else None

    def content_sha256(self, digest: Union[bytes, str]) -> 'AuthorizationV2Builder':
        """
        Set the SHA-256 digest of the request body.

        Args:
            digest: The raw digest, or a hex string

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        if isinstance(digest, str):
            digest = parse_hex(digest, SigningErrorCodes.INVALID_CONTENT_DIGEST)
        self._content_digest = bytes(digest)
        return self

    def compute_content_digest(self, content: Union[str, bytes]) -> 'AuthorizationV2Builder':
        """
        Compute the SHA-256 digest of the request body and configure it.

        The `Digest` header is also set, as `sha-256=<base64 digest>`, and must
        be sent with the request.

        Args:
            content: The request body; strings are UTF-8 encoded

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        if isinstance(content, str):
            content = content.encode('utf-8')
        digest = self._sha256(content)
        self.content_sha256(digest)
        return self.header(HttpHeaders.DIGEST, "sha-256=" + base64.b64encode(digest).decode('ascii'))

    # Canonical request

    def signing_context(self) -> SigningContext:
        """Snapshot the current request state."""
        return SigningContext(
            method=self._http_method,
            path=self._request_path,
            parameters=self.parameters,
            headers=self.http_headers,
            request_date=self._request_date,
            signed_header_names=self._signed_header_names,
            content_digest=self._content_digest
        )

    def canonical_query_parameters(self) -> str:
        return canonical_query_parameters(self.parameters)

    def canonical_header_names(self) -> List[str]:
        """Compute the sorted, lower-cased header names to sign."""
        return canonical_header_names(self.http_headers, self._signed_header_names)

    def canonical_headers(self, sorted_lowercase_header_names: Iterable[str]) -> str:
        return canonical_headers(sorted_lowercase_header_names, self.http_headers, self._request_date)

    def canonical_content_sha256(self) -> str:
        return canonical_content_sha256(self._content_digest)

    def build_canonical_request_data(self) -> str:
        """Compute the canonical request data that is signed."""
        return CanonicalRequestBuilder(self.signing_context()).build()

    def compute_signature_data(self, canonical_request_data: str) -> str:
        """Compute the data to be signed by the signing key."""
        return compute_signature_data(canonical_request_data, self._request_date, self._sha256)

    # Authorization header

    def build_with_key(self, signing_key: Union[bytes, SigningKey]) -> str:
        """
        Compute the Authorization header value using the given signing key.

        The key is not saved on this builder.

        Args:
            signing_key: The key to sign with

        Returns:
            str: The SNWS2 Authorization header value
        """
        if isinstance(signing_key, SigningKey):
            signing_key = signing_key.key
        builder = CanonicalRequestBuilder(self.signing_context())
        header_names = builder.header_names()
        canonical_request = builder.build(header_names)
        logger.debug(f"Canonical request data:\n{canonical_request}")
        signature_data = self.compute_signature_data(canonical_request)
        signature = compute_signature(signing_key, signature_data, self._hmac)
        return format_authorization_header(self.token_id, header_names, signature)

    def build(self, token_secret: str) -> str:
        """
        Compute the Authorization header value, deriving a new signing key
        from the token secret and the configured date.

        Args:
            token_secret: The token secret

        Returns:
            str: The SNWS2 Authorization header value
        """
        return self.build_with_key(self.compute_signing_key(token_secret))

    def build_with_saved_key(self) -> str:
        """
        Compute the Authorization header value using the key saved by
        `save_signing_key()` or `key()`.

        Returns:
            str: The SNWS2 Authorization header value

        Raises:
            MissingSigningKeyError: If no signing key has been saved
        """
        if self._signing_key is None:
            raise MissingSigningKeyError(details={"token_id": self.token_id})
        return self.build_with_key(self._signing_key.key)
