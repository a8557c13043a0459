"""Domain layer: errors, severity and typed tags."""
