"""Domain types shared across the check engine."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class CheckType(StrEnum):
    """Selectable check types."""

    HEALTH = "health"
    CPU = "cpu"
    MEMORY = "memory"
    DISK_USAGE = "disk-usage"
    UPTIME = "uptime"

    @classmethod
    def parse(cls, raw: str) -> CheckType:
        """Case- and whitespace-insensitive lookup."""
        return cls(raw.strip().lower())


class ThresholdKind(StrEnum):
    """Identifiers for configurable threshold pairs."""

    CPU_USAGE = "cpu_usage"
    MEM_USAGE = "mem_usage"
    DISK_USAGE = "disk_usage"
    DISK_TEMP = "disk_temp"
    REALLOCATED_SECTOR = "reallocated_sector"
    CURRENT_PENDING_SECTOR = "current_pending_sector"
    UPTIME = "uptime"


class ThresholdPair(BaseModel, frozen=True):
    """Warning/critical levels for one measured quantity.

    An unset level never triggers.
    """

    warn: float | None = None
    crit: float | None = None
