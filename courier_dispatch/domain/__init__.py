"""Domain layer: entities and error types of the dispatch core."""
