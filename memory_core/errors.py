from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a deck or game configuration cannot be satisfied."""
