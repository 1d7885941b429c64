"""Runs one check type end to end and returns the aggregated result."""

from __future__ import annotations

import structlog

from nascheck.checks.base import CheckRoutine
from nascheck.checks.health import HealthCheck
from nascheck.checks.uptime import UptimeCheck
from nascheck.checks.usage import CpuUsageCheck, DiskUsageCheck, MemoryUsageCheck
from nascheck.core.config import Settings
from nascheck.core.exceptions import ConfigError, NasCheckError
from nascheck.core.types import CheckType
from nascheck.device.api import DeviceApi
from nascheck.device.client import SessionClient
from nascheck.device.exceptions import DeviceError
from nascheck.device.resolver import EndpointFallbackResolver
from nascheck.monitor.aggregator import StatusAggregator
from nascheck.monitor.types import AggregateResult, Severity

logger = structlog.stdlib.get_logger()

ROUTINES: dict[CheckType, type[CheckRoutine]] = {
    CheckType.HEALTH: HealthCheck,
    CheckType.CPU: CpuUsageCheck,
    CheckType.MEMORY: MemoryUsageCheck,
    CheckType.DISK_USAGE: DiskUsageCheck,
    CheckType.UPTIME: UptimeCheck,
}


def build_routine(
    check_type: CheckType,
    api: DeviceApi,
    settings: Settings,
    log: structlog.stdlib.BoundLogger | None = None,
) -> CheckRoutine:
    return ROUTINES[check_type](api, settings, log)


def run_check(
    settings: Settings,
    client: SessionClient | None = None,
    log: structlog.stdlib.BoundLogger | None = None,
) -> AggregateResult:
    """Run the configured check type against the device.

    Failures that end the whole run (authentication, transport, session
    conflict) are reported as UNKNOWN; the result is always returned.

    Args:
        settings: Resolved configuration; ``settings.check.type`` must be set.
        client: Session client to use. One is built from *settings* (and
            closed afterwards) when omitted.
        log: Logger handed to every component.
    """
    log = log or logger
    check_type = settings.check.type
    if check_type is None:
        raise ConfigError("Check type not specified")

    owns_client = client is None
    session_client = client or SessionClient.from_settings(settings, log=log)
    api = DeviceApi(EndpointFallbackResolver(session_client, log=log), log=log)
    routine = build_routine(check_type, api, settings, log)
    aggregator = StatusAggregator()

    try:
        routine.run(aggregator)
    except NasCheckError as exc:
        log.warning("check_aborted", check=check_type.value, error_type=type(exc).__name__, error=str(exc))
        aggregator.report(Severity.UNKNOWN, str(exc))
    finally:
        if settings.session.logout_after_check:
            try:
                session_client.logout()
            except DeviceError as exc:
                log.warning("logout_failed", error=str(exc))
        if owns_client:
            session_client.close()

    if aggregator.severity == Severity.OK and not aggregator.has_texts:
        aggregator.report(Severity.OK, routine.default_text)

    result = aggregator.finalize()
    log.info(
        "check_completed",
        check=check_type.value,
        severity=result.severity.label,
        texts=len(result.texts),
        perf_metrics=len(result.perf_metrics),
    )
    return result
