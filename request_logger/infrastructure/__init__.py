"""Infrastructure layer: configuration, constants and logging."""
