"""Abstract check routine with per-sub-check error isolation."""

from __future__ import annotations

import abc

import structlog

from nascheck.checks.exceptions import UnparseableMetric
from nascheck.core.config import Settings, ThresholdsConfig
from nascheck.device.api import DeviceApi
from nascheck.device.exceptions import NoEndpointSatisfied
from nascheck.monitor.aggregator import StatusAggregator
from nascheck.monitor.formatters import DEFAULT_STATUS_TEXT
from nascheck.monitor.types import Severity

logger = structlog.stdlib.get_logger()

# Failures that only affect the sub-check that hit them
SUBCHECK_ERRORS: tuple[type[Exception], ...] = (NoEndpointSatisfied, UnparseableMetric)


class CheckRoutine(abc.ABC):
    """Base class for check routines.

    Subclasses implement ``check()`` and report into the aggregator. The
    base ``run()`` turns a sub-check-local failure into an UNKNOWN
    contribution so sibling routines still run. Session-level failures
    (authentication, transport, session conflict) propagate.
    """

    name: str = ""
    default_text: str = DEFAULT_STATUS_TEXT

    def __init__(
        self,
        api: DeviceApi,
        settings: Settings,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._api = api
        self._settings = settings
        self._log = (log or logger).bind(check=self.name)

    @property
    def thresholds(self) -> ThresholdsConfig:
        return self._settings.thresholds

    def run(self, aggregator: StatusAggregator) -> None:
        try:
            self.check(aggregator)
        except SUBCHECK_ERRORS as exc:
            self._log.warning("check_unknown", error_type=type(exc).__name__, error=str(exc))
            aggregator.report(Severity.UNKNOWN, str(exc))

    @abc.abstractmethod
    def check(self, aggregator: StatusAggregator) -> None:
        """Query the device and report one or more contributions."""
