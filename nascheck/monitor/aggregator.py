"""Merges independent partial check results into one verdict."""

from __future__ import annotations

from nascheck.monitor.types import AggregateResult, PartialResult, Severity, worst


class StatusAggregator:
    """Accumulates (severity, text, perfdata) contributions.

    Severity only ever escalates; texts and perfdata are append-only logs
    kept in call order, so a failing sub-check can never be hidden by a
    later healthy one.

    Usage::

        agg = StatusAggregator()
        agg.report(Severity.OK, "Hardware working fine")
        agg.report(Severity.CRITICAL, "RAID RAID0 status: Damaged")
        result = agg.finalize()
    """

    def __init__(self) -> None:
        self._severity = Severity.OK
        self._texts: list[str] = []
        self._perf_metrics: list[str] = []

    @property
    def severity(self) -> Severity:
        return self._severity

    @property
    def texts(self) -> list[str]:
        return list(self._texts)

    @property
    def perf_metrics(self) -> list[str]:
        return list(self._perf_metrics)

    @property
    def has_texts(self) -> bool:
        return bool(self._texts)

    def report(
        self,
        severity: Severity,
        text: str | None = None,
        perf_metric: str | None = None,
    ) -> None:
        """Add one contribution."""
        self._severity = worst(self._severity, severity)
        if text is not None:
            self._texts.append(text)
        if perf_metric is not None:
            self._perf_metrics.append(perf_metric)

    def report_partial(self, partial: PartialResult) -> None:
        """Add a sub-check result built elsewhere."""
        self.report(partial.severity, partial.text, partial.perf_metric)

    def finalize(self) -> AggregateResult:
        """Snapshot the current state; the aggregator is left unchanged."""
        return AggregateResult(
            severity=self._severity,
            texts=list(self._texts),
            perf_metrics=list(self._perf_metrics),
        )
