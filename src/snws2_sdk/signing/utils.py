"""
Utility functions for SNWS2 request signing

This module provides the percent-encoding, date formatting and URL query
parsing helpers that the canonical request is built from. Every output here
is recomputed independently by the server, so formats must match exactly.
"""

from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Any, Dict, Iterable, List, Optional, Union
from urllib.parse import parse_qsl, quote, unquote

from ..exceptions import SigningError
from .types import SigningErrorCodes

# The hex-encoded SHA-256 digest of an empty string
EMPTY_STRING_SHA256_HEX = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def encode_uri_component(value: Any) -> str:
    """
    Percent-encode a query parameter key or value.

    Only `A-Z a-z 0-9 - _ . ~` are left unescaped, so `! ' ( ) *` are escaped
    as well as all reserved characters.

    Args:
        value: Value to encode; None encodes as the empty string

    Returns:
        str: Percent-encoded value with upper-case hex digits
    """
    if value is None:
        return ""
    return quote(str(value), safe="")


def utc_now() -> datetime:
    """Get the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(date: datetime) -> datetime:
    """
    Normalize a datetime to UTC.

    Naive datetimes are interpreted as UTC.
    """
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc)


def floor_to_utc_day(date: datetime) -> datetime:
    """Truncate a datetime to midnight of its UTC day."""
    return to_utc(date).replace(hour=0, minute=0, second=0, microsecond=0)


def format_http_date(date: datetime) -> str:
    """
    Format a date as an RFC 1123 HTTP-date.

    Args:
        date: Date to format

    Returns:
        str: Date string like `Tue, 25 Apr 2017 14:30:00 GMT`
    """
    return format_datetime(to_utc(date).replace(microsecond=0), usegmt=True)


def format_iso8601_date(date: datetime, include_time: bool = False) -> str:
    """
    Format a date in compact ISO 8601 form, in UTC.

    Args:
        date: Date to format
        include_time: Include the time to second precision

    Returns:
        str: `yyyyMMdd`, or `yyyyMMddTHHmmssZ` when include_time is True
    """
    if include_time:
        return to_utc(date).strftime('%Y%m%dT%H%M%SZ')
    return to_utc(date).strftime('%Y%m%d')


def parse_date(value: str) -> datetime:
    """
    Parse an HTTP-date or ISO 8601 date string.

    Args:
        value: Date string, e.g. `Tue, 25 Apr 2017 14:30:00 GMT` or
            `2017-04-25T14:30:00Z`

    Returns:
        datetime: Parsed UTC datetime

    Raises:
        ValueError: If the value is not a recognized date
    """
    text = value.strip()
    try:
        return to_utc(datetime.fromisoformat(text.replace('Z', '+00:00')))
    except ValueError:
        pass
    try:
        return to_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid date: {value}") from e


def lowercase_sorted(names: Iterable[str]) -> List[str]:
    """Lower-case and sort a collection of names."""
    return sorted(name.lower() for name in names)


def url_query_parse(query: str) -> Dict[str, Union[str, List[str]]]:
    """
    Parse a URL query string into a parameter dictionary.

    Pairs without an `=` are ignored. Repeated keys collect their values into
    a list, in order. `+` is not treated as a space.

    Args:
        query: Query string, with or without a leading `?`

    Returns:
        dict: Parameter values keyed by decoded name
    """
    params: Dict[str, Union[str, List[str]]] = {}
    if not query:
        return params
    if query.startswith('?'):
        query = query[1:]
    for pair in query.split('&'):
        if '=' not in pair:
            continue
        raw_key, raw_value = pair.split('=', 1)
        key = unquote(raw_key)
        value = unquote(raw_value)
        existing = params.get(key)
        if existing is None:
            params[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            params[key] = [existing, value]
    return params


def parse_hex(value: str, code: str = SigningErrorCodes.INVALID_SIGNING_KEY) -> bytes:
    """
    Convert a hex string to bytes.

    Raises:
        SigningError: If the hex string is invalid
    """
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise SigningError(
            f"Invalid hex string: {e}",
            code,
            {"hex_string": value}
        )


def default_port(scheme: Optional[str]) -> int:
    """Get the implied port for a URL scheme."""
    if scheme in ('https', 'wss'):
        return 443
    return 80


def form_query_parse(body: Union[str, bytes]) -> Dict[str, List[str]]:
    """
    Parse an `application/x-www-form-urlencoded` body into a parameter dictionary.

    Unlike `url_query_parse()`, `+` decodes as a space and blank values are kept.

    Args:
        body: Form body; bytes are decoded as UTF-8

    Returns:
        dict: Lists of parameter values keyed by decoded name
    """
    if isinstance(body, bytes):
        body = body.decode('utf-8')
    params: Dict[str, List[str]] = {}
    for key, value in parse_qsl(body, keep_blank_values=True):
        params.setdefault(key, []).append(value)
    return params
