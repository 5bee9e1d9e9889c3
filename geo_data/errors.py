"""
Registry Errors
===============

Error taxonomy for the registry access layer.

- NetworkError: source unreachable, non-success response, or timeout.
  Recoverable through the stale cache, otherwise fatal for the operation.
- ValidationError: payload reachable but structurally non-conforming.
  Never cached, never retried.
- NotFoundError: a country code that the registry index does not know.
- ConfigError: malformed project configuration.
"""

from typing import Optional


class GeoDataError(Exception):
    """Base class for all geo-data errors."""


class NetworkError(GeoDataError):
    """Raised when a registry location cannot be fetched."""

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.location = location
        self.status_code = status_code


class ValidationError(GeoDataError):
    """Raised at the first constraint a payload violates."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class NotFoundError(GeoDataError):
    """Raised when a country code is absent from the registry index."""

    def __init__(self, code: str, suggestion: Optional[str] = None):
        self.code = code
        self.suggestion = suggestion
        message = f"Unknown country code: {code.upper()}"
        if suggestion:
            message += f" (did you mean {suggestion.upper()}?)"
        super().__init__(message)


class ConfigError(GeoDataError):
    """Raised for invalid geo-data configuration values."""
