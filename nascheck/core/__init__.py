"""Core module — config, types, logging, base exceptions."""

from nascheck.core.config import Settings, get_settings, load_settings, reset_settings
from nascheck.core.exceptions import ConfigError, NasCheckError
from nascheck.core.logging import setup_logging
from nascheck.core.types import CheckType, ThresholdKind, ThresholdPair

__all__ = [
    "CheckType",
    "ConfigError",
    "NasCheckError",
    "Settings",
    "ThresholdKind",
    "ThresholdPair",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
