"""
SHA-256 and HMAC-SHA256 primitives for SNWS2 signing

This module wraps the cryptography package hash primitives behind two plain
functions so the signing builder can accept replacements for testing.
"""

from typing import Callable, Union

from cryptography.hazmat.primitives import hashes, hmac

# Function signatures accepted by the signing builder
Sha256Function = Callable[[bytes], bytes]
HmacSha256Function = Callable[[bytes, bytes], bytes]

BytesLike = Union[str, bytes]


def _to_bytes(value: BytesLike) -> bytes:
    if isinstance(value, str):
        return value.encode('utf-8')
    return bytes(value)


def sha256(data: BytesLike) -> bytes:
    """
    Compute a SHA-256 digest.

    Args:
        data: Data to hash; strings are UTF-8 encoded

    Returns:
        bytes: 32 byte digest
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(_to_bytes(data))
    return digest.finalize()


def hmac_sha256(key: BytesLike, message: BytesLike) -> bytes:
    """
    Compute an HMAC-SHA256 message authentication code.

    Args:
        key: HMAC key; strings are UTF-8 encoded
        message: Message to authenticate; strings are UTF-8 encoded

    Returns:
        bytes: 32 byte MAC
    """
    mac = hmac.HMAC(_to_bytes(key), hashes.SHA256())
    mac.update(_to_bytes(message))
    return mac.finalize()


def sha256_hex(data: BytesLike) -> str:
    """Compute a lower-case hex encoded SHA-256 digest."""
    return sha256(data).hex()
