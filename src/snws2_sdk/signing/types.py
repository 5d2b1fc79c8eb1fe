"""
Type definitions for SNWS2 request signing

This module provides the HTTP enumerations, the case-insensitive multi-value
map used for headers and query parameters, and the data classes shared by the
canonical request and signature functions.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass
from enum import Enum


class HttpMethod(str, Enum):
    """HTTP methods (verbs)"""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


class HttpContentType(str, Enum):
    """Common HTTP Content-Type values"""
    APPLICATION_JSON = "application/json"
    APPLICATION_JSON_UTF8 = "application/json; charset=UTF-8"
    FORM_URLENCODED = "application/x-www-form-urlencoded"
    FORM_URLENCODED_UTF8 = "application/x-www-form-urlencoded; charset=UTF-8"


class MultiMap:
    """
    A case-insensitive, case-preserving string key multi-value map.

    Keys keep the case they were first added with, and both the order of
    distinct keys and the order of values within a key follow insertion order.
    `None` is stored as a value like any other.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        # lower-case key -> (original key, values)
        self._mappings: Dict[str, Tuple[str, List[Any]]] = {}
        if values:
            self.put_all(values)

    def _add_value(self, key: str, value: Any, replace: bool) -> 'MultiMap':
        key_lc = key.lower()
        mapping = self._mappings.get(key_lc)
        if mapping is None:
            mapping = (key, [])
            self._mappings[key_lc] = mapping
        values = mapping[1]
        if replace:
            values.clear()
        if isinstance(value, (list, tuple)):
            values.extend(value)
        else:
            values.append(value)
        return self

    def add(self, key: str, value: Any) -> 'MultiMap':
        """
        Add a value, appending to any existing values for the key.

        Args:
            key: Key to add to
            value: Value to add; a list or tuple adds each element

        Returns:
            MultiMap: Self for method chaining
        """
        return self._add_value(key, value, replace=False)

    def put(self, key: str, value: Any) -> 'MultiMap':
        """
        Set a value, replacing any existing values for the key.

        Args:
            key: Key to set
            value: Value to set; a list or tuple sets each element

        Returns:
            MultiMap: Self for method chaining
        """
        return self._add_value(key, value, replace=True)

    def put_all(self, values: Mapping[str, Any]) -> 'MultiMap':
        """Set every key of a mapping, replacing existing values."""
        for key, value in values.items():
            self._add_value(key, value, replace=True)
        return self

    def value(self, key: str) -> Optional[List[Any]]:
        """Get all values for a key, or None if the key is not present."""
        mapping = self._mappings.get(key.lower())
        return mapping[1] if mapping is not None else None

    def first_value(self, key: str) -> Any:
        """Get the first value for a key, or None if not available."""
        values = self.value(key)
        return values[0] if values else None

    def remove(self, key: str) -> Optional[List[Any]]:
        """Remove a key, returning its values or None if it was not present."""
        mapping = self._mappings.pop(key.lower(), None)
        return mapping[1] if mapping is not None else None

    def clear(self) -> 'MultiMap':
        self._mappings.clear()
        return self

    def contains_key(self, key: str) -> bool:
        return key.lower() in self._mappings

    def key_set(self) -> List[str]:
        """Get the case-preserved keys in insertion order."""
        return [mapping[0] for mapping in self._mappings.values()]

    def size(self) -> int:
        return len(self._mappings)

    def is_empty(self) -> bool:
        return not self._mappings

    def items(self) -> Iterator[Tuple[str, List[Any]]]:
        """Iterate over (key, values) pairs in insertion order."""
        for key, values in self._mappings.values():
            yield key, list(values)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains_key(key)

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[str]:
        return iter(self.key_set())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"


class HttpHeaders(MultiMap):
    """HTTP headers multi-map with common header name constants"""

    ACCEPT = "Accept"
    AUTHORIZATION = "Authorization"
    CONTENT_MD5 = "Content-MD5"
    CONTENT_TYPE = "Content-Type"
    DATE = "Date"
    DIGEST = "Digest"
    HOST = "Host"
    X_SN_PRE_SIGNED_AUTHORIZATION = "X-SN-PreSignedAuthorization"
    X_SN_DATE = "X-SN-Date"


@dataclass
class SigningContext:
    """
    Snapshot of the request state that is signed

    Attributes:
        method: HTTP method
        path: Request path, used verbatim
        parameters: Query (or form) parameters
        headers: HTTP headers
        request_date: Signing date, UTC
        signed_header_names: Additional header names to sign
        content_digest: Raw SHA-256 digest of the request body, if any
    """
    method: str
    path: str
    parameters: MultiMap
    headers: HttpHeaders
    request_date: datetime
    signed_header_names: Optional[List[str]] = None
    content_digest: Optional[bytes] = None


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    MISSING_SIGNING_KEY = "MISSING_SIGNING_KEY"
    INVALID_SIGNING_KEY = "INVALID_SIGNING_KEY"
    INVALID_CONTENT_DIGEST = "INVALID_CONTENT_DIGEST"
    INVALID_DATE = "INVALID_DATE"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNSIGNABLE_BODY = "UNSIGNABLE_BODY"


# Type aliases for convenience
QueryParams = Union[MultiMap, Mapping[str, Any]]
HeaderNames = Iterable[str]
