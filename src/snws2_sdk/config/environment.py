"""
Network environment configuration

The environment describes the SolarNetwork host an SNWS2 builder signs
requests for, and supplies the default `Host` header value.
"""

from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlsplit

DEFAULT_HOST = "data.solarnetwork.net"
DEFAULT_PROTOCOL = "https"


def normalized_protocol(value: Optional[str]) -> str:
    """
    Normalize a protocol value.

    Values taken from a browser style location carry a trailing colon, which
    is removed. An empty value defaults to `https`.
    """
    if not value:
        return DEFAULT_PROTOCOL
    return value.rstrip(':').lower()


def implied_port(protocol: str) -> int:
    return 443 if protocol == 'https' else 80


@dataclass
class Environment:
    """
    Network environment configuration

    Attributes:
        host: The host name
        protocol: The protocol, `https` or `http`
        port: The port number; defaults to the protocol's standard port
        proxy_url_prefix: Optional proxy URL prefix, for example
            `https://query.solarnetwork.net/1m`
    """
    host: str = DEFAULT_HOST
    protocol: str = DEFAULT_PROTOCOL
    port: Optional[Union[int, str]] = None
    proxy_url_prefix: Optional[str] = None

    def __post_init__(self):
        self.host = self.host or DEFAULT_HOST
        self.protocol = normalized_protocol(self.protocol)
        try:
            port = int(self.port) if self.port not in (None, '') else 0
        except (TypeError, ValueError):
            port = 0
        self.port = port or implied_port(self.protocol)

    def use_tls(self) -> bool:
        """Check if TLS is in use via the `https` protocol."""
        return self.protocol == 'https'

    def is_default_port(self) -> bool:
        return self.port == implied_port(self.protocol)

    def host_header_value(self, force_port: bool = False) -> str:
        """
        Get the `Host` header value for this environment.

        Args:
            force_port: Include the port even when it is the protocol default

        Returns:
            str: The host, with `:port` appended when needed
        """
        if force_port or not self.is_default_port():
            return f"{self.host}:{self.port}"
        return self.host

    @classmethod
    def from_url(cls, url: str, proxy_url_prefix: Optional[str] = None) -> 'Environment':
        """
        Create an environment from a URL such as `https://data.solarnetwork.net`.

        Raises:
            ValueError: If the URL cannot be parsed
        """
        parts = urlsplit(url)
        return cls(
            host=parts.hostname or DEFAULT_HOST,
            protocol=parts.scheme,
            port=parts.port,
            proxy_url_prefix=proxy_url_prefix
        )
