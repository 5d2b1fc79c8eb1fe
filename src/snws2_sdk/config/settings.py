"""
Settings management for SNWS2 Python SDK

Provides loading of token credentials and environment settings from process
environment variables, JSON strings and JSON files.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..exceptions import ConfigurationError
from .environment import DEFAULT_HOST, DEFAULT_PROTOCOL, Environment

logger = logging.getLogger(__name__)

ENV_TOKEN = "SNWS2_TOKEN"
ENV_TOKEN_SECRET = "SNWS2_TOKEN_SECRET"
ENV_HOST = "SNWS2_HOST"
ENV_PROTOCOL = "SNWS2_PROTOCOL"
ENV_PORT = "SNWS2_PORT"
ENV_FORCE_HOST_PORT = "SNWS2_FORCE_HOST_PORT"
ENV_USE_SN_DATE = "SNWS2_USE_SN_DATE"
ENV_LOG_LEVEL = "SNWS2_LOG_LEVEL"

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off', '')


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value for {name}: {value}", "INVALID_SETTING", {"name": name})


def _parse_port(value: Any) -> Optional[int]:
    if value in (None, ''):
        return None
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid port: {value}", "INVALID_SETTING", {"name": "port"})
    if not 0 < port < 65536:
        raise ConfigurationError(f"Port out of range: {port}", "INVALID_SETTING", {"name": "port"})
    return port


@dataclass
class SigningSettings:
    """
    Token credentials and environment settings

    Attributes:
        token_id: The auth token identifier
        token_secret: The auth token secret
        host: SolarNetwork host name
        protocol: `https` or `http`
        port: Port number; defaults to the protocol's standard port
        force_host_port: Always include the port in the `Host` value
        use_sn_date: Sign `X-SN-Date` rather than `Date`
        log_level: Logging level name
    """
    token_id: Optional[str] = None
    token_secret: Optional[str] = None
    host: str = DEFAULT_HOST
    protocol: str = DEFAULT_PROTOCOL
    port: Optional[int] = None
    force_host_port: bool = False
    use_sn_date: bool = True
    log_level: str = "WARNING"

    def __post_init__(self):
        self.port = _parse_port(self.port)
        self.force_host_port = _parse_bool("force_host_port", self.force_host_port)
        self.use_sn_date = _parse_bool("use_sn_date", self.use_sn_date)
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"Invalid log level: {self.log_level}", "INVALID_SETTING", {"name": "log_level"})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'SigningSettings':
        """
        Load settings from environment variables.

        Args:
            environ: Variables to read; defaults to `os.environ`

        Returns:
            SigningSettings: The loaded settings
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name, variable in (
            ('token_id', ENV_TOKEN),
            ('token_secret', ENV_TOKEN_SECRET),
            ('host', ENV_HOST),
            ('protocol', ENV_PROTOCOL),
            ('port', ENV_PORT),
            ('force_host_port', ENV_FORCE_HOST_PORT),
            ('use_sn_date', ENV_USE_SN_DATE),
            ('log_level', ENV_LOG_LEVEL),
        ):
            if variable in environ:
                values[name] = environ[variable]
        return cls(**values)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SigningSettings':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown settings: {', '.join(sorted(unknown))}",
                "INVALID_FORMAT",
                {"unknown": sorted(unknown)}
            )
        return cls(**dict(data))

    @classmethod
    def from_json(cls, json_string: str) -> 'SigningSettings':
        """Load settings from a JSON object string."""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse settings JSON: {e}", "PARSE_ERROR")
        if not isinstance(data, dict):
            raise ConfigurationError("Settings JSON must be an object", "INVALID_FORMAT")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'SigningSettings':
        """Load settings from a JSON file."""
        try:
            with open(Path(file_path), 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read settings file: {e}", "FILE_ERROR", {"path": str(file_path)})
        logger.debug(f"Loaded settings from {file_path}")
        return cls.from_json(json_string)

    def to_environment(self) -> Environment:
        return Environment(host=self.host, protocol=self.protocol, port=self.port)

    def require_token(self) -> str:
        if not self.token_id:
            raise ConfigurationError(
                f"Token not configured; set {ENV_TOKEN}",
                "INVALID_CREDENTIALS"
            )
        return self.token_id

    def require_secret(self) -> str:
        if not self.token_secret:
            raise ConfigurationError(
                f"Token secret not configured; set {ENV_TOKEN_SECRET}",
                "INVALID_CREDENTIALS"
            )
        return self.token_secret

    def create_builder(self, **kwargs):
        """
        Create an authorization builder for these settings.

        Args:
            **kwargs: Additional builder arguments, such as `clock`

        Returns:
            AuthorizationV2Builder: A builder, reset for a new request
        """
        from ..signing.authorization_builder import AuthorizationV2Builder

        builder = AuthorizationV2Builder(
            self.require_token(),
            environment=self.to_environment(),
            force_host_port=self.force_host_port,
            **kwargs
        )
        if self.use_sn_date:
            builder.sn_date(True)
        return builder

    def create_auth(self, **kwargs):
        """
        Create a `requests` authentication hook for these settings.

        Returns:
            SNWS2Auth: The authentication hook
        """
        from ..signing.integration import SNWS2Auth

        return SNWS2Auth(
            self.require_token(),
            token_secret=self.require_secret(),
            environment=self.to_environment(),
            use_sn_date=self.use_sn_date,
            force_host_port=self.force_host_port,
            **kwargs
        )
