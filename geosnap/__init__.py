"""Snapping and alignment-guide engine for interactive vector editing."""

__version__ = "0.1.0"
