"""
Signing key derivation and expiry for SNWS2

A signing key is derived from a token secret and a UTC calendar day with two
chained HMAC-SHA256 operations:

    k1  = HMAC-SHA256(key="SNWS2" + secret, message=yyyyMMdd)
    key = HMAC-SHA256(key=k1, message="snws2_request")

A key derived for day D is accepted from the start of D through the end of
D+6, a rolling window of seven whole UTC days.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..crypto.digest import HmacSha256Function, hmac_sha256
from .utils import floor_to_utc_day, format_iso8601_date, to_utc, utc_now

logger = logging.getLogger(__name__)

SNWS2_AUTH_SCHEME = "SNWS2"
SIGNING_KEY_REQUEST = "snws2_request"
SIGNING_KEY_VALIDITY = timedelta(days=7)


def derive_signing_key(
    token_secret: str,
    signing_date: datetime,
    hmac_fn: HmacSha256Function = hmac_sha256
) -> bytes:
    """
    Derive a signing key from a token secret.

    Args:
        token_secret: The token secret
        signing_date: Date the key is scoped to; only its UTC day is used
        hmac_fn: HMAC-SHA256 implementation

    Returns:
        bytes: The 32 byte signing key
    """
    date_string = format_iso8601_date(signing_date)
    date_key = hmac_fn((SNWS2_AUTH_SCHEME + token_secret).encode('utf-8'), date_string.encode('utf-8'))
    logger.debug(f"Derived signing key for {date_string}")
    return hmac_fn(date_key, SIGNING_KEY_REQUEST.encode('utf-8'))


def signing_key_expiration(signing_date: datetime) -> datetime:
    """Get the instant a key derived for the given date stops being valid."""
    return floor_to_utc_day(signing_date) + SIGNING_KEY_VALIDITY


@dataclass(frozen=True)
class SigningKey:
    """
    A derived signing key and the date it was derived for

    Attributes:
        key: Raw signing key bytes
        date: Date the key was derived for, UTC
    """
    key: bytes
    date: datetime

    def __post_init__(self):
        object.__setattr__(self, 'date', to_utc(self.date))

    @property
    def valid_from(self) -> datetime:
        return floor_to_utc_day(self.date)

    @property
    def expiration_date(self) -> datetime:
        return signing_key_expiration(self.date)

    def is_valid(self, at: Optional[datetime] = None) -> bool:
        """
        Test if the key is within its validity window.

        Args:
            at: Instant to test; defaults to now

        Returns:
            bool: True if `valid_from <= at < expiration_date`
        """
        instant = to_utc(at) if at is not None else utc_now()
        return self.valid_from <= instant < self.expiration_date

    def hex(self) -> str:
        return self.key.hex()

    @classmethod
    def derive(
        cls,
        token_secret: str,
        signing_date: datetime,
        hmac_fn: HmacSha256Function = hmac_sha256
    ) -> 'SigningKey':
        """Derive a key from a token secret for the given date."""
        return cls(derive_signing_key(token_secret, signing_date, hmac_fn), signing_date)
