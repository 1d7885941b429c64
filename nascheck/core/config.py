"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, SecretStr, ValidationError, model_validator

from nascheck.core.exceptions import ConfigError
from nascheck.core.types import CheckType, ThresholdKind, ThresholdPair

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class DeviceConfig(BaseModel):
    """Connection and credentials for the NAS web interface."""

    hostname: str = ""
    username: str = ""
    password: SecretStr = SecretStr("")
    scheme: str = "http"
    timeout_secs: float = 10.0


class CheckConfig(BaseModel):
    """Which check to run and the per-check switches."""

    type: CheckType | None = None
    ignore_bad_sectors_below: int | None = None
    ignore_smart_status: bool = False


class ThresholdsConfig(BaseModel):
    """Warning/critical levels per measured quantity."""

    cpu_usage: ThresholdPair = ThresholdPair(warn=95, crit=98)
    mem_usage: ThresholdPair = ThresholdPair(warn=90, crit=95)
    disk_usage: ThresholdPair = ThresholdPair(warn=80, crit=90)
    disk_temp: ThresholdPair = ThresholdPair(warn=55, crit=60)
    # 32 is the device's own reallocated sector warning level
    reallocated_sector: ThresholdPair = ThresholdPair(warn=32, crit=320)
    current_pending_sector: ThresholdPair = ThresholdPair(warn=1, crit=1)
    # seconds since boot; lower is worse
    uptime: ThresholdPair = ThresholdPair(warn=1200, crit=300)

    @model_validator(mode="before")
    @classmethod
    def _fill_missing_levels(cls, data: Any) -> Any:
        """Keep the default for a level the input leaves out.

        ``{"cpu_usage": {"warn": 90}}`` changes only the warning level; an
        explicit ``null`` still unsets a level.
        """
        if not isinstance(data, dict):
            return data
        filled = dict(data)
        for name, field in cls.model_fields.items():
            value = filled.get(name)
            if isinstance(value, dict):
                default = field.default
                filled[name] = {"warn": default.warn, "crit": default.crit, **value}
        return filled

    def get(self, kind: ThresholdKind) -> ThresholdPair:
        """Return the pair for a threshold kind."""
        return getattr(self, kind.value)


class SessionConfig(BaseModel):
    """Session cookie persistence."""

    cookie_dir: Path = Path("/tmp")
    logout_after_check: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "console"


class Settings(BaseModel):
    """Root settings container."""

    device: DeviceConfig = DeviceConfig()
    check: CheckConfig = CheckConfig()
    thresholds: ThresholdsConfig = ThresholdsConfig()
    session: SessionConfig = SessionConfig()
    logging: LoggingConfig = LoggingConfig()

    def missing_required(self) -> str | None:
        """Name the first required option that is not set, if any."""
        if not self.device.hostname:
            return "Hostname"
        if not self.device.username:
            return "Username"
        if not self.device.password.get_secret_value():
            return "Password"
        if self.check.type is None:
            return "Check type"
        return None


def merge_overrides(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overrides* into a copy of *base*.

    ``None`` values in *overrides* are skipped at every depth so unset
    command-line options leave file values alone; a section with nothing
    set is not added.
    """
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict):
            current = merged.get(key)
            section = merge_overrides(current if isinstance(current, dict) else {}, value)
            if section or key in merged:
                merged[key] = section
        else:
            merged[key] = value
    return merged


def load_settings(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml; an
            explicit path that does not exist is an error.
        overrides: Nested values layered on top of the file (e.g. CLI options).

    Returns:
        Parsed Settings instance.

    Raises:
        ConfigError: The file cannot be read or parsed, or a value is invalid.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH
    if path and not config_path.is_file():
        raise ConfigError(f"Can't read config file {config_path}")

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path) as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Can't parse config file {config_path}") from exc
        if isinstance(raw, dict):
            data = raw

    if overrides:
        data = merge_overrides(data, overrides)

    try:
        _settings = Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc.errors()[0]['msg']}") from exc
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
