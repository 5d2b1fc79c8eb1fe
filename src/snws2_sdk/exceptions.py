"""
Exception classes for SNWS2 Python SDK
"""

from typing import Optional, Dict, Any


class SNWS2SDKError(Exception):
    """Base exception for all SNWS2 SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"


class SigningError(SNWS2SDKError):
    """Exception raised for invalid signing input"""
    pass


class MissingSigningKeyError(SigningError):
    """Exception raised when a saved signing key is required but none is available"""

    def __init__(self, message: str = "Saved signing key not available", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "MISSING_SIGNING_KEY", details)


class ConfigurationError(SNWS2SDKError):
    """Exception raised for invalid SDK settings"""
    pass
