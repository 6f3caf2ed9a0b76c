"""Data access layer: point storage and remote providers."""
