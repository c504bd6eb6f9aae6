"""Helpers shared across pkgbump modules."""
