"""Custom exception hierarchy for geosnap."""

from __future__ import annotations


class GeoSnapError(Exception):
    """Base exception for all geosnap-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(GeoSnapError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(GeoSnapError):
    """Base class for validation errors."""
    pass


class GeometryError(GeoSnapError):
    """Raised when geometry operations fail."""
    pass


class GeometryParseError(GeometryError):
    """Raised when a GeoJSON geometry cannot be parsed in strict mode."""
    pass


class PositionPathError(ValidationError):
    """Raised when a vertex position path does not address a vertex."""
    pass
