from __future__ import annotations


class IngestionError(Exception):
    """Raised when ingestion of a single file fails."""


class ConfigurationError(Exception):
    """Raised for invalid or missing configuration."""


class InvalidQueryError(ValueError):
    """Raised when a caller passes an empty or blank query."""
