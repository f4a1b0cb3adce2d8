"""Geometry model, extraction helpers and numeric contract."""
