"""Infrastructure layer: remote driver and persistence facades."""
