"""
Signature computation and Authorization header formatting for SNWS2
"""

from datetime import datetime
from typing import Iterable

from ..crypto.digest import HmacSha256Function, Sha256Function, hmac_sha256, sha256
from .utils import format_iso8601_date

SIGNATURE_ALGORITHM = "SNWS2-HMAC-SHA256"


def compute_signature_data(
    canonical_request: str,
    request_date: datetime,
    sha256_fn: Sha256Function = sha256
) -> str:
    """
    Compute the data to be signed by the signing key.

    The signature data takes this form:

        SNWS2-HMAC-SHA256
        20170301T120000Z
        Hex(SHA256(canonical_request))

    Args:
        canonical_request: Canonical request text
        request_date: Signing date
        sha256_fn: SHA-256 implementation

    Returns:
        str: The data to sign
    """
    canonical_hash = sha256_fn(canonical_request.encode('utf-8')).hex()
    return f"{SIGNATURE_ALGORITHM}\n{format_iso8601_date(request_date, include_time=True)}\n{canonical_hash}"


def compute_signature(
    signing_key: bytes,
    signature_data: str,
    hmac_fn: HmacSha256Function = hmac_sha256
) -> str:
    """Sign the signature data, returning the hex encoded HMAC."""
    return hmac_fn(signing_key, signature_data.encode('utf-8')).hex()


def format_authorization_header(token_id: str, sorted_lowercase_header_names: Iterable[str], signature: str) -> str:
    """
    Format an SNWS2 Authorization header value.

    Args:
        token_id: Token identifier
        sorted_lowercase_header_names: Signed header names
        signature: Hex encoded signature

    Returns:
        str: `SNWS2 Credential=<id>,SignedHeaders=<names>,Signature=<hex>`
    """
    signed_headers = ';'.join(sorted_lowercase_header_names)
    return f"SNWS2 Credential={token_id},SignedHeaders={signed_headers},Signature={signature}"
