"""Tests for custom exception hierarchy."""

import pytest

from geosnap.exceptions import (
    ConfigurationError,
    GeometryError,
    GeometryParseError,
    GeoSnapError,
    PositionPathError,
    ValidationError,
)


def test_geosnap_error_base():
    """Test base GeoSnapError."""
    error = GeoSnapError("Test error", {"key": "value"})
    assert str(error) == "Test error"
    assert error.message == "Test error"
    assert error.details == {"key": "value"}


def test_configuration_error():
    """Test ConfigurationError."""
    error = ConfigurationError("Config missing", {"path": "config/default.yaml"})
    assert isinstance(error, GeoSnapError)
    assert error.message == "Config missing"


def test_geometry_parse_error():
    """Test GeometryParseError."""
    error = GeometryParseError("Unsupported geometry type", {"type": "Circle"})
    assert isinstance(error, GeometryError)
    assert isinstance(error, GeoSnapError)
    assert error.details == {"type": "Circle"}


def test_position_path_error():
    """Test PositionPathError."""
    error = PositionPathError("Position path [9] is out of range")
    assert isinstance(error, ValidationError)
    assert isinstance(error, GeoSnapError)


def test_error_details_default():
    """Test that details default to empty dict."""
    error = GeoSnapError("Test")
    assert error.details == {}


def test_error_inheritance():
    """Test exception inheritance chain."""
    with pytest.raises(GeoSnapError):
        raise PositionPathError("Test")

    with pytest.raises(GeometryError):
        raise GeometryParseError("Test")

    with pytest.raises(GeoSnapError):
        raise ConfigurationError("Test")
