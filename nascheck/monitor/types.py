"""Domain types for check results."""

from __future__ import annotations

import functools
from enum import IntEnum

from pydantic import BaseModel, Field


class Severity(IntEnum):
    """Check severity — values match the Nagios plugin exit codes.

    Ordered so the numeric max is the escalation rule: UNKNOWN sits on top,
    so once reported it is never downgraded by a later healthy result.
    """

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def label(self) -> str:
        return self.name


def worst(*severities: Severity) -> Severity:
    """Reduce *severities* to the most significant one (OK when empty)."""
    return functools.reduce(max, severities, Severity.OK)


class PartialResult(BaseModel):
    """One sub-check's contribution before it is reported."""

    severity: Severity = Severity.OK
    text: str | None = None
    perf_metric: str | None = None

    def floored(self, floor: Severity, fallback_text: str | None = None) -> PartialResult:
        """Copy with severity raised to at least *floor*.

        *fallback_text* fills in the text when the sub-check produced none.
        """
        return PartialResult(
            severity=worst(self.severity, floor),
            text=self.text if self.text is not None else fallback_text,
            perf_metric=self.perf_metric,
        )


class AggregateResult(BaseModel):
    """Final state of a check run."""

    severity: Severity = Severity.OK
    texts: list[str] = Field(default_factory=list)
    perf_metrics: list[str] = Field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return int(self.severity)
