"""Percentage-based usage checks: CPU, memory, and RAID capacity."""

from __future__ import annotations

import re

from nascheck.checks.base import CheckRoutine
from nascheck.checks.exceptions import UnparseableMetric
from nascheck.checks.shapes import (
    leading_int,
    parse_memory_status,
    parse_raid_volumes,
    parse_system_status,
)
from nascheck.checks.thresholds import evaluate, format_number, perfdata
from nascheck.monitor.aggregator import StatusAggregator
from nascheck.monitor.types import Severity, worst

# "512.00 GB / 1.00 TB" style capacity strings: used, unit, total, unit
_CAPACITY_RE = re.compile(r"([0-9.]+) ?([KMGTP]B)[^0-9.]+([0-9.]+) ?([KMGTP]B)")


class CpuUsageCheck(CheckRoutine):
    name = "cpu"

    def check(self, aggregator: StatusAggregator) -> None:
        status = parse_system_status(self._api.get_sys_status())
        if status is None or status.cpu_loading is None:
            raise UnparseableMetric("CPU usage not reported by the device")

        usage = leading_int(status.cpu_loading, "CPU usage")
        pair = self.thresholds.cpu_usage
        severity = evaluate(usage, pair, label="CPU")
        aggregator.report(
            severity,
            f"CPU usage: {usage}%",
            perfdata("CPU", usage, pair, minimum=0, maximum=100),
        )


class MemoryUsageCheck(CheckRoutine):
    name = "memory"

    def check(self, aggregator: StatusAggregator) -> None:
        memory = parse_memory_status(
            self._api.get_sys_status(),
            self._api.get_nas_status(),
        )
        usage = memory.used_pct
        pair = self.thresholds.mem_usage
        severity = evaluate(usage, pair, label="MEM")
        aggregator.report(
            severity,
            f"Memory usage: {format_number(usage)}%",
            perfdata("MEM", usage, pair, minimum=0, maximum=100),
        )


def parse_capacity(capacity: str) -> float:
    """Percentage used from a ``"<used> <unit> ... <total> <unit>"`` string.

    Raises:
        UnparseableMetric: No match, mismatched units, or a zero total.
    """
    match = _CAPACITY_RE.search(capacity)
    if match is None:
        raise UnparseableMetric("Can't parse disk usage data.")
    used_raw, used_unit, total_raw, total_unit = match.groups()
    # TODO: convert between units instead of giving up once a device reports mixed units
    if used_unit != total_unit:
        raise UnparseableMetric("Can't parse disk usage data. Different units used.")
    try:
        used = float(used_raw)
        total = float(total_raw)
    except ValueError as exc:
        raise UnparseableMetric("Can't parse disk usage data.") from exc
    if total <= 0:
        raise UnparseableMetric("Can't parse disk usage data.")
    return round(used / total * 100, 2)


class DiskUsageCheck(CheckRoutine):
    """Capacity used per RAID volume.

    One unparseable volume makes the whole result UNKNOWN without
    perfdata, since partial numbers would graph as a drop in usage.
    """

    name = "disk-usage"

    def check(self, aggregator: StatusAggregator) -> None:
        pair = self.thresholds.disk_usage
        severity = Severity.OK
        texts: list[str] = []
        perf: list[str] = []

        for volume in parse_raid_volumes(self._api.get_raid_list()):
            pct_used = parse_capacity(volume.capacity)
            label = f"{volume.raid_id}_usage"
            severity = worst(severity, evaluate(pct_used, pair, label=label))
            perf.append(perfdata(label, pct_used, pair, minimum=0, maximum=100))
            texts.append(f"{volume.raid_id} {format_number(pct_used)}% ({volume.capacity})")

        aggregator.report(
            severity,
            "Disk usage: " + ", ".join(texts) if texts else None,
            " ".join(perf) if perf else None,
        )
