"""Bootstrap helpers for wiring infrastructure at startup."""
