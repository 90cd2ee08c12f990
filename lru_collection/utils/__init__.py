"""Low-level utilities."""
