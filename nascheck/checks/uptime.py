"""Uptime check: alerts on a recent reboot."""

from __future__ import annotations

from nascheck.checks.base import CheckRoutine
from nascheck.checks.exceptions import UnparseableMetric
from nascheck.checks.shapes import parse_system_status, parse_uptime
from nascheck.checks.thresholds import evaluate_below, perfdata
from nascheck.monitor.aggregator import StatusAggregator


class UptimeCheck(CheckRoutine):
    """Seconds since boot; lower than the thresholds is worse."""

    name = "uptime"

    def check(self, aggregator: StatusAggregator) -> None:
        status = parse_system_status(self._api.get_sys_status())
        if status is None or status.uptime is None:
            raise UnparseableMetric("Uptime not reported by the device")

        seconds = parse_uptime(status.uptime)
        pair = self.thresholds.uptime
        severity = evaluate_below(seconds, pair, label="uptime")
        aggregator.report(
            severity,
            f"Uptime: {status.uptime}",
            perfdata("uptime", seconds, pair, minimum=0, unit="s"),
        )
