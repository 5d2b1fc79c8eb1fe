"""
Configuration management for SNWS2 Python SDK

This module provides the network environment description and the settings
loaders used by the command line and the `requests` integration.
"""

from .environment import (
    DEFAULT_HOST,
    DEFAULT_PROTOCOL,
    Environment,
)
from .settings import SigningSettings

__all__ = [
    'DEFAULT_HOST',
    'DEFAULT_PROTOCOL',
    'Environment',
    'SigningSettings',
]
