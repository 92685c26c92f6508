"""Infrastructure layer: store connectors and built-in hooks."""
