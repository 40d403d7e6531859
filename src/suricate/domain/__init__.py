"""Domain layer: entities, field types and validation services."""
