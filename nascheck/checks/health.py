"""System health — fans, RAID, and per-disk status including SMART."""

from __future__ import annotations

from nascheck.checks.base import SUBCHECK_ERRORS, CheckRoutine
from nascheck.checks.shapes import (
    DiskStatus,
    parse_disks,
    parse_raid_access_status,
    parse_raid_volumes,
    parse_smart_report,
    parse_system_status,
)
from nascheck.checks.thresholds import evaluate, perfdata
from nascheck.monitor.aggregator import StatusAggregator
from nascheck.monitor.types import PartialResult, Severity, worst

_RAID_SEVERITY: dict[str, Severity] = {
    "Damaged": Severity.CRITICAL,
    "Degraded": Severity.WARNING,
    "Healthy": Severity.OK,
}

_DISK_SKIPPED = "N/A"
_DISK_CRITICAL = "Critical"
_DISK_WARNING = "Warning"


class SystemHealthCheck(CheckRoutine):
    """CPU fan and numbered system fans."""

    name = "system"

    def check(self, aggregator: StatusAggregator) -> None:
        status = parse_system_status(self._api.get_sys_status())
        if status is None:
            self._log.debug("system_status_not_provided")
            return

        severity = Severity.OK
        texts: list[str] = []

        if status.cpu_fan != "OK":
            severity = Severity.CRITICAL
            texts.append("CPU fan not OK")

        for fan in status.fans:
            if fan.state != "OK":
                severity = Severity.CRITICAL
                texts.append(f"System fan {fan.number} not OK")

        if severity == Severity.OK:
            texts.append("Hardware working fine")

        aggregator.report(severity, ", ".join(texts))


class RaidHealthCheck(CheckRoutine):
    """RAID access status plus the status of every volume."""

    name = "raid"

    def check(self, aggregator: StatusAggregator) -> None:
        severity = Severity.OK
        texts: list[str] = []

        access_status = parse_raid_access_status(self._api.get_raid_access_status())
        if access_status is not None:
            access_severity = _RAID_SEVERITY.get(access_status, Severity.UNKNOWN)
            severity = worst(severity, access_severity)
            if access_severity != Severity.OK:
                texts.append(f"access status: {access_status}")

        for volume in parse_raid_volumes(self._api.get_raid_list()):
            volume_severity = _RAID_SEVERITY.get(volume.status, Severity.UNKNOWN)
            severity = worst(severity, volume_severity)
            if volume_severity != Severity.OK:
                texts.append(f"{volume.raid_id} status: {volume.status}")

        if severity == Severity.OK:
            texts.append("Healthy")

        aggregator.report(severity, "RAID " + ", ".join(texts))


class DiskHealthCheck(CheckRoutine):
    """Disk tray status, with a SMART check for every populated tray.

    A failure to read one disk's SMART data is reported for that disk only.
    """

    name = "disks"

    def check(self, aggregator: StatusAggregator) -> None:
        for disk in parse_disks(self._api.get_disk_info()):
            if disk.status == _DISK_SKIPPED:
                continue
            if disk.status == _DISK_CRITICAL:
                aggregator.report(Severity.CRITICAL, f"Disk {disk.trayno} status: {disk.status}")
                continue

            try:
                partial = self.check_smart(disk)
            except SUBCHECK_ERRORS as exc:
                self._log.warning("smart_unknown", trayno=disk.trayno, error=str(exc))
                aggregator.report(Severity.UNKNOWN, f"Disk {disk.trayno}: {exc}")
                continue

            if disk.status == _DISK_WARNING:
                partial = partial.floored(
                    Severity.WARNING,
                    fallback_text=f"Disk {disk.trayno} status: {disk.status}",
                )
            aggregator.report_partial(partial)

    def check_smart(self, disk: DiskStatus) -> PartialResult:
        """Evaluate the SMART attributes of one disk."""
        report = parse_smart_report(self._api.get_smart_info(disk.diskno, disk.trayno))
        check_cfg = self._settings.check
        thresholds = self.thresholds

        severity = Severity.OK
        texts: list[str] = []
        perf: str | None = None

        if report.smart_ok is False and not check_cfg.ignore_smart_status:
            severity = Severity.CRITICAL
            texts.append("Status not OK")

        if report.reallocated is not None:
            level = evaluate(
                report.reallocated,
                thresholds.reallocated_sector,
                ignore_below=check_cfg.ignore_bad_sectors_below,
                label=f"Disk{disk.trayno}_reallocated",
            )
            severity = worst(severity, level)
            if level != Severity.OK:
                texts.append(f"Bad sector count: {report.reallocated}")

        if report.temperature is not None:
            level = evaluate(
                report.temperature,
                thresholds.disk_temp,
                label=f"Disk{disk.trayno}_temp",
            )
            severity = worst(severity, level)
            if level != Severity.OK:
                texts.append(f"Temp: {report.temperature}°C")
            perf = perfdata(f"Disk{disk.trayno}_temp", report.temperature, thresholds.disk_temp)

        if report.pending is not None:
            level = evaluate(
                report.pending,
                thresholds.current_pending_sector,
                label=f"Disk{disk.trayno}_pending",
            )
            severity = worst(severity, level)
            if level != Severity.OK:
                texts.append(f"Unstable sector count: {report.pending}")

        text = None
        if texts:
            text = f"Disk {disk.trayno} ({report.model}) {', '.join(texts)}"
        return PartialResult(severity=severity, text=text, perf_metric=perf)


class HealthCheck(CheckRoutine):
    """Whole-system health: hardware, RAID, then disks."""

    name = "health"
    default_text = "System healthy"

    _PARTS: tuple[type[CheckRoutine], ...] = (SystemHealthCheck, RaidHealthCheck, DiskHealthCheck)

    def check(self, aggregator: StatusAggregator) -> None:
        for part in self._PARTS:
            part(self._api, self._settings, self._log).run(aggregator)
