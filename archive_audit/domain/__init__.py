"""Domain layer: block models, continuity diagnostics and errors."""
