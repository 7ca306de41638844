"""Domain layer: entities, value objects, repository interfaces and policies."""
