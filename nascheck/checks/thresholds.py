"""Pure threshold functions shared by every check routine."""

from __future__ import annotations

import structlog

from nascheck.core.types import ThresholdPair
from nascheck.monitor.types import Severity

logger = structlog.stdlib.get_logger()


def evaluate(
    value: float,
    pair: ThresholdPair,
    ignore_below: float | None = None,
    label: str = "",
) -> Severity:
    """Higher-is-worse comparison of *value* against *pair*.

    CRITICAL when ``value >= crit``, else WARNING when ``value >= warn``,
    else OK. Unset levels are skipped. Values under *ignore_below* are
    always OK.
    """
    if ignore_below is not None and value < ignore_below:
        severity = Severity.OK
    elif pair.crit is not None and value >= pair.crit:
        severity = Severity.CRITICAL
    elif pair.warn is not None and value >= pair.warn:
        severity = Severity.WARNING
    else:
        severity = Severity.OK

    logger.debug(
        "threshold_evaluated",
        label=label,
        value=value,
        warn=pair.warn,
        crit=pair.crit,
        severity=severity.label,
    )
    return severity


def evaluate_below(value: float, pair: ThresholdPair, label: str = "") -> Severity:
    """Lower-is-worse comparison: CRITICAL when ``value <= crit``, and so on."""
    if pair.crit is not None and value <= pair.crit:
        severity = Severity.CRITICAL
    elif pair.warn is not None and value <= pair.warn:
        severity = Severity.WARNING
    else:
        severity = Severity.OK

    logger.debug(
        "threshold_evaluated",
        label=label,
        value=value,
        warn=pair.warn,
        crit=pair.crit,
        severity=severity.label,
    )
    return severity


def format_number(value: float | None) -> str:
    """Render a number the way the plugin output expects (``90``, ``45.5``).

    ``None`` renders as an empty string so unset levels leave empty fields.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def perfdata(
    label: str,
    value: float,
    pair: ThresholdPair,
    minimum: float | None = None,
    maximum: float | None = None,
    unit: str = "",
) -> str:
    """Build a ``label=value[unit];warn;crit[;min[;max]]`` perfdata token."""
    fields = [
        f"{format_number(value)}{unit}",
        format_number(pair.warn),
        format_number(pair.crit),
    ]
    if minimum is not None or maximum is not None:
        fields.append(format_number(minimum))
    if maximum is not None:
        fields.append(format_number(maximum))
    return f"{label}={';'.join(fields)}"
