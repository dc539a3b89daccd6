"""Service-layer utilities."""
