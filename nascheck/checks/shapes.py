"""Response-shape variants mapped onto common status records.

Device generations report the same facts under different field names.
Each parser below holds an ordered list of variants, each a predicate on
which fields are present plus a converter; the first matching variant
wins. Unknown shapes raise ``UnparseableMetric``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, Field

from nascheck.checks.exceptions import UnparseableMetric
from nascheck.device.response import DeviceResponse

T = TypeVar("T")

Variant = tuple[str, Callable[[DeviceResponse], bool], Callable[[DeviceResponse], T]]

_LEADING_INT_RE = re.compile(r"^\s*(-?\d+)")
_LEADING_NUMBER_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)")
_UPTIME_RE = re.compile(
    r"^\s*(?:(?P<days>\d+)\s*days?,?\s*)?"
    r"(?:(?P<hours>\d+):(?P<minutes>\d{2})(?::(?P<seconds>\d{2}))?)?\s*$",
    re.IGNORECASE,
)


# ── Records ─────────────────────────────────────────────────────


class FanStatus(BaseModel):
    number: int
    state: str


class SystemStatus(BaseModel):
    """Hardware status as reported by the system status page."""

    cpu_fan: str | None = None
    fans: list[FanStatus] = Field(default_factory=list)
    cpu_loading: Any = None
    uptime: str | None = None


class MemoryStatus(BaseModel):
    used_pct: float


class RaidVolume(BaseModel):
    raid_id: str
    status: str
    capacity: str = ""


class DiskStatus(BaseModel):
    trayno: str
    diskno: str
    status: str


class SmartReport(BaseModel):
    """SMART attributes the checks care about; None when not reported."""

    model: str = ""
    smart_ok: bool | None = None
    reallocated: int | None = None
    temperature: int | None = None
    pending: int | None = None


# ── Field helpers ───────────────────────────────────────────────


def leading_int(value: Any, what: str) -> int:
    """Integer at the start of *value* (``"38 (Min/Max 20/45)"`` → 38)."""
    if isinstance(value, bool):
        raise UnparseableMetric(f"Can't parse {what}: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT_RE.match(str(value))
    if match is None:
        raise UnparseableMetric(f"Can't parse {what}: {value!r}")
    return int(match.group(1))


def leading_number(value: Any, what: str) -> float:
    """Number at the start of *value* (``"45.5%"`` → 45.5)."""
    if isinstance(value, bool):
        raise UnparseableMetric(f"Can't parse {what}: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER_RE.match(str(value))
    if match is None:
        raise UnparseableMetric(f"Can't parse {what}: {value!r}")
    return float(match.group(1))


def parse_uptime(raw: Any) -> int:
    """Seconds since boot from ``"3 days 04:05"``, ``"04:05:10"`` or ``"12345"``."""
    text = str(raw).strip()
    if text.isdigit():
        return int(text)
    match = _UPTIME_RE.match(text)
    if match is None or not any(match.groupdict().values()):
        raise UnparseableMetric(f"Can't parse uptime: {raw!r}")
    days = int(match.group("days") or 0)
    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    seconds = int(match.group("seconds") or 0)
    return ((days * 24 + hours) * 60 + minutes) * 60 + seconds


def _select(variants: list[Variant[T]], response: DeviceResponse, what: str) -> T:
    for _name, matches, convert in variants:
        if matches(response):
            return convert(response)
    raise UnparseableMetric(f"Can't parse {what}")


# ── System status ───────────────────────────────────────────────


def _system_from_fan_readings(response: DeviceResponse) -> SystemStatus:
    fans: list[FanStatus] = []
    if response.has("sys_fan_speed"):
        fans.append(FanStatus(number=1, state=str(response.get("sys_fan_speed"))))
    for number, state in response.probe("sys_fan_speed", start=2):
        fans.append(FanStatus(number=number, state=str(state)))
    cpu_fan = response.get("cpu_fan")
    uptime = response.get("up_time")
    return SystemStatus(
        cpu_fan=None if cpu_fan is None else str(cpu_fan),
        fans=fans,
        cpu_loading=response.get("cpu_loading"),
        uptime=None if uptime is None else str(uptime),
    )


_SYSTEM_VARIANTS: list[Variant[SystemStatus]] = [
    ("fan_readings", lambda r: isinstance(r.raw, dict), _system_from_fan_readings),
]


def parse_system_status(response: DeviceResponse) -> SystemStatus | None:
    """System status, or None for models that publish none (e.g. N2520)."""
    if response.is_empty:
        return None
    return _select(_SYSTEM_VARIANTS, response, "system status")


# ── Memory ──────────────────────────────────────────────────────


def _memory_from_percent(response: DeviceResponse) -> MemoryStatus:
    return MemoryStatus(used_pct=leading_number(response.get("mem_usage"), "memory usage"))


def _memory_from_totals(response: DeviceResponse) -> MemoryStatus:
    total = leading_number(response.get("mem_total"), "total memory")
    free = leading_number(response.get("mem_free"), "free memory")
    if total <= 0:
        raise UnparseableMetric(f"Can't parse memory usage: total is {total}")
    return MemoryStatus(used_pct=round((total - free) / total * 100, 2))


_MEMORY_VARIANTS: list[Variant[MemoryStatus]] = [
    ("percent", lambda r: r.has("mem_usage"), _memory_from_percent),
    ("totals", lambda r: r.has("mem_total") and r.has("mem_free"), _memory_from_totals),
]


def parse_memory_status(*responses: DeviceResponse | None) -> MemoryStatus:
    """Memory usage from the first response that carries it."""
    for response in responses:
        if response is None:
            continue
        for _name, matches, convert in _MEMORY_VARIANTS:
            if matches(response):
                return convert(response)
    raise UnparseableMetric("Memory usage not reported by the device")


# ── RAID ────────────────────────────────────────────────────────


def _raid_from_raid_list(response: DeviceResponse) -> list[RaidVolume]:
    return [
        RaidVolume(
            raid_id=str(entry.get("raid_id", "")),
            status=str(entry.get("raid_status", "")),
            capacity=str(entry.get("data_capacity", "")),
        )
        for entry in response.children("raid_list")
    ]


_RAID_VARIANTS: list[Variant[list[RaidVolume]]] = [
    ("raid_list", lambda r: r.has("raid_list"), _raid_from_raid_list),
]


def parse_raid_volumes(response: DeviceResponse) -> list[RaidVolume]:
    return _select(_RAID_VARIANTS, response, "RAID list")


def parse_raid_access_status(response: DeviceResponse | None) -> str | None:
    """Overall RAID access status, None when the model doesn't report one."""
    if response is None or not response.has("status"):
        return None
    return str(response.get("status"))


# ── Disks ───────────────────────────────────────────────────────


def _disks_from_disk_data(response: DeviceResponse) -> list[DiskStatus]:
    return [
        DiskStatus(
            trayno=str(entry.get("trayno", "")),
            diskno=str(entry.get("diskno", "")),
            status=str(entry.get("s_status", "")),
        )
        for entry in response.children("disk_data")
    ]


def _disks_from_disk_info(response: DeviceResponse) -> list[DiskStatus]:
    return [
        DiskStatus(
            trayno=str(entry.get("tray_no", "")),
            diskno=str(entry.get("disk_no", "")),
            status=str(entry.get("status", "")),
        )
        for entry in response.children("disk_info")
    ]


_DISK_VARIANTS: list[Variant[list[DiskStatus]]] = [
    ("disk_data", lambda r: r.has("disk_data"), _disks_from_disk_data),
    ("disk_info", lambda r: r.has("disk_info"), _disks_from_disk_info),
]


def parse_disks(response: DeviceResponse) -> list[DiskStatus]:
    return _select(_DISK_VARIANTS, response, "disk list")


# ── SMART ───────────────────────────────────────────────────────


def _optional_int(response: DeviceResponse, name: str, what: str) -> int | None:
    if not response.has(name):
        return None
    return leading_int(response.get(name), what)


def parse_smart_report(response: DeviceResponse) -> SmartReport:
    smart_ok: bool | None = None
    if response.has("smart_status"):
        smart_ok = response.get("smart_status") in (0, "0")
    return SmartReport(
        model=str(response.get("model", "")),
        smart_ok=smart_ok,
        reallocated=_optional_int(response, "ATTR5", "reallocated sector count"),
        temperature=_optional_int(response, "ATTR194", "disk temperature"),
        pending=_optional_int(response, "ATTR197", "current pending sector count"),
    )
