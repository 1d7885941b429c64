"""Pure functions that render an AggregateResult as a Nagios plugin line."""

from __future__ import annotations

from nascheck.monitor.types import AggregateResult

DEFAULT_STATUS_TEXT = "System working fine"


def format_status_text(result: AggregateResult, default_text: str = DEFAULT_STATUS_TEXT) -> str:
    """Join status texts with ``, `` or fall back to *default_text*."""
    if result.texts:
        return ", ".join(result.texts)
    return default_text


def format_perfdata(result: AggregateResult) -> str:
    """Join perfdata tokens with single spaces."""
    return " ".join(result.perf_metrics)


def format_plugin_output(
    result: AggregateResult,
    default_text: str = DEFAULT_STATUS_TEXT,
) -> str:
    """Render ``LABEL - text[, text] [| perf perf]``.

    Example::

        CRITICAL - CPU usage: 97% | CPU=97;90;95;0;100
    """
    line = f"{result.severity.label} - {format_status_text(result, default_text)}"
    perfdata = format_perfdata(result)
    if perfdata:
        line = f"{line} | {perfdata}"
    return line


def exit_code(result: AggregateResult) -> int:
    """Plugin exit code for *result*."""
    return result.exit_code
