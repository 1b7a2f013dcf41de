"""Typed settings and immutable run configuration."""
