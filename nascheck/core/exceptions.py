"""Root exception hierarchy shared by every nascheck subpackage."""

from __future__ import annotations


class NasCheckError(Exception):
    """Base exception for all nascheck errors."""


class ConfigError(NasCheckError):
    """Configuration is missing, unreadable, or invalid."""
