"""Result aggregation and plugin output formatting."""

from nascheck.monitor.aggregator import StatusAggregator
from nascheck.monitor.formatters import (
    DEFAULT_STATUS_TEXT,
    exit_code,
    format_perfdata,
    format_plugin_output,
    format_status_text,
)
from nascheck.monitor.types import AggregateResult, PartialResult, Severity, worst

__all__ = [
    "DEFAULT_STATUS_TEXT",
    "AggregateResult",
    "PartialResult",
    "Severity",
    "StatusAggregator",
    "exit_code",
    "format_perfdata",
    "format_plugin_output",
    "format_status_text",
    "worst",
]
