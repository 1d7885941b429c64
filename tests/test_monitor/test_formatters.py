"""Tests for monitor formatters — plugin line rendering and exit codes."""

from __future__ import annotations

from nascheck.monitor.formatters import (
    DEFAULT_STATUS_TEXT,
    exit_code,
    format_perfdata,
    format_plugin_output,
    format_status_text,
)
from nascheck.monitor.types import AggregateResult, Severity


# ── Helpers ─────────────────────────────────────────────────────


def _result(**kw: object) -> AggregateResult:
    return AggregateResult(**kw)  # type: ignore[arg-type]


class TestStatusText:
    def test_joins_texts(self) -> None:
        result = _result(texts=["RAID Healthy", "Disk 2 status: Critical"])
        assert format_status_text(result) == "RAID Healthy, Disk 2 status: Critical"

    def test_default_when_empty(self) -> None:
        assert format_status_text(_result()) == DEFAULT_STATUS_TEXT

    def test_custom_default(self) -> None:
        assert format_status_text(_result(), "System healthy") == "System healthy"


class TestPluginOutput:
    def test_with_perfdata(self) -> None:
        result = _result(
            severity=Severity.CRITICAL,
            texts=["CPU usage: 97%"],
            perf_metrics=["CPU=97;90;95;0;100"],
        )
        assert format_plugin_output(result) == "CRITICAL - CPU usage: 97% | CPU=97;90;95;0;100"

    def test_without_perfdata_has_no_pipe(self) -> None:
        result = _result(severity=Severity.OK, texts=["RAID Healthy"])
        assert format_plugin_output(result) == "OK - RAID Healthy"

    def test_multiple_perf_tokens_space_separated(self) -> None:
        result = _result(texts=["x"], perf_metrics=["a=1", "b=2"])
        assert format_perfdata(result) == "a=1 b=2"
        assert format_plugin_output(result).endswith("| a=1 b=2")

    def test_default_text_used_when_no_texts(self) -> None:
        assert format_plugin_output(_result()) == "OK - System working fine"


class TestExitCode:
    def test_exit_code_per_severity(self) -> None:
        for severity, code in [
            (Severity.OK, 0),
            (Severity.WARNING, 1),
            (Severity.CRITICAL, 2),
            (Severity.UNKNOWN, 3),
        ]:
            assert exit_code(_result(severity=severity)) == code
