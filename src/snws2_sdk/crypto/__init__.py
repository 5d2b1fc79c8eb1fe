"""
Cryptographic primitives used by the SNWS2 signing builder
"""

from .digest import (
    sha256,
    sha256_hex,
    hmac_sha256,
    Sha256Function,
    HmacSha256Function,
)

__all__ = [
    'sha256',
    'sha256_hex',
    'hmac_sha256',
    'Sha256Function',
    'HmacSha256Function',
]
