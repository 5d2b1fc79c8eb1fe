"""
Canonical request construction for SNWS2 signatures

This module builds the canonical request text that is hashed and signed. The
server reconstructs the same text from the request it receives, so the byte
layout, ordering and escaping here form the wire contract of the scheme:

    <method>
    <path>
    <canonical query>
    <canonical headers, one "name:value" line each>
    <signed header names, ";" separated>
    <hex SHA-256 of the body>
"""

from datetime import datetime
from typing import Iterable, List, Optional

from .types import HttpHeaders, MultiMap, SigningContext
from .utils import (
    EMPTY_STRING_SHA256_HEX,
    encode_uri_component,
    format_http_date,
    lowercase_sorted,
)

# Header names whose canonical value is always the signing date
DATE_HEADER_NAMES = frozenset(('date', 'x-sn-date'))


def canonical_query_parameters(parameters: MultiMap) -> str:
    """
    Compute the canonical query string.

    Keys are sorted by their raw value; each value of a multi-value key is
    emitted as its own pair in stored order.

    Args:
        parameters: Query parameters

    Returns:
        str: Canonical query string, or an empty string without parameters
    """
    pairs = []
    for key in sorted(parameters.key_set()):
        encoded_key = encode_uri_component(key)
        for value in parameters.value(key) or []:
            pairs.append(f"{encoded_key}={encode_uri_component(value)}")
    return '&'.join(pairs)


def uses_sn_date(headers: HttpHeaders, signed_header_names: Optional[Iterable[str]]) -> bool:
    """
    Test if the `X-SN-Date` header is signed instead of `Date`.

    Args:
        headers: HTTP headers
        signed_header_names: Additional header names to sign

    Returns:
        bool: True if `X-SN-Date` is in the signed names or the headers
    """
    x_sn_date = HttpHeaders.X_SN_DATE.lower()
    if signed_header_names and any(name.lower() == x_sn_date for name in signed_header_names):
        return True
    return headers.contains_key(HttpHeaders.X_SN_DATE)


def canonical_header_names(headers: HttpHeaders, signed_header_names: Optional[Iterable[str]] = None) -> List[str]:
    """
    Compute the header names to include in the signature.

    `Host` and one of `Date` or `X-SN-Date` are always signed; `Content-MD5`,
    `Content-Type` and `Digest` are signed when present, followed by any
    additional names requested.

    Args:
        headers: HTTP headers
        signed_header_names: Additional header names to sign

    Returns:
        list: Sorted, lower-cased, de-duplicated header names
    """
    names = MultiMap()
    names.put(HttpHeaders.HOST, True)
    if uses_sn_date(headers, signed_header_names):
        names.put(HttpHeaders.X_SN_DATE, True)
    else:
        names.put(HttpHeaders.DATE, True)
    for optional in (HttpHeaders.CONTENT_MD5, HttpHeaders.CONTENT_TYPE, HttpHeaders.DIGEST):
        if headers.contains_key(optional):
            names.put(optional, True)
    for name in signed_header_names or []:
        names.put(name, True)
    return lowercase_sorted(names.key_set())


def canonical_headers(sorted_lowercase_header_names: Iterable[str], headers: HttpHeaders, request_date: datetime) -> str:
    """
    Compute the canonical headers block.

    Args:
        sorted_lowercase_header_names: Header names to include
        headers: HTTP headers
        request_date: Signing date, used for the date headers

    Returns:
        str: One `name:value` line per header, each ending with a newline
    """
    lines = []
    for name in sorted_lowercase_header_names:
        if name in DATE_HEADER_NAMES:
            value = format_http_date(request_date)
        else:
            value = headers.first_value(name)
        lines.append(f"{name}:{str(value).strip() if value is not None else ''}\n")
    return ''.join(lines)


def canonical_signed_header_names(sorted_lowercase_header_names: Iterable[str]) -> str:
    return ';'.join(sorted_lowercase_header_names)


def canonical_content_sha256(content_digest: Optional[bytes]) -> str:
    """Get the hex content digest, defaulting to the digest of an empty body."""
    return content_digest.hex() if content_digest else EMPTY_STRING_SHA256_HEX


class CanonicalRequestBuilder:
    """
    Canonical request builder for SNWS2 signatures
    """

    def __init__(self, context: SigningContext):
        """
        Initialize canonical request builder.

        Args:
            context: Snapshot of the request state to sign
        """
        self.context = context

    def header_names(self) -> List[str]:
        return canonical_header_names(self.context.headers, self.context.signed_header_names)

    def build(self, sorted_lowercase_header_names: Optional[List[str]] = None) -> str:
        """
        Build the canonical request for signing.

        Args:
            sorted_lowercase_header_names: Header names to sign; computed from
                the context when not given

        Returns:
            str: Canonical request text
        """
        context = self.context
        names = sorted_lowercase_header_names
        if names is None:
            names = self.header_names()
        # the headers block carries its own trailing newline
        return (
            f"{context.method}\n"
            f"{context.path}\n"
            f"{canonical_query_parameters(context.parameters)}\n"
            f"{canonical_headers(names, context.headers, context.request_date)}"
            f"{canonical_signed_header_names(names)}\n"
            f"{canonical_content_sha256(context.content_digest)}"
        )


def build_canonical_request(context: SigningContext) -> str:
    """
    Build canonical request for signing.

    Args:
        context: Snapshot of the request state to sign

    Returns:
        str: Canonical request text
    """
    return CanonicalRequestBuilder(context).build()
