"""Infrastructure layer: storage and engine adapters for the ports."""
