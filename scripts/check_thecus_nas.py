#!/usr/bin/env python3
"""Nagios plugin entrypoint — checks a Thecus NAS through its web interface.

Usage::

    # Overall health (fans, RAID, disks)
    python scripts/check_thecus_nas.py -H nas.example.com -u admin -p secret -t health

    # CPU usage with custom thresholds
    python scripts/check_thecus_nas.py -H nas.example.com -u admin -p secret \\
        -t cpu --cpu-warning 80 --cpu-critical 90

    # Options from a YAML file, command line wins
    python scripts/check_thecus_nas.py -c /etc/nagios/thecus.yaml -t disk-usage

Prints one status line on stdout and exits 0/1/2/3 for OK/WARNING/CRITICAL/UNKNOWN.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, NoReturn

import structlog

from nascheck import __version__
from nascheck.checks.runner import run_check
from nascheck.core.config import Settings, load_settings
from nascheck.core.exceptions import NasCheckError
from nascheck.core.logging import setup_logging
from nascheck.core.types import CheckType
from nascheck.monitor.formatters import format_plugin_output
from nascheck.monitor.types import AggregateResult, Severity

logger = structlog.get_logger(__name__)

VERSION_TEXT = f"""check_thecus_nas version {__version__}
License GPLv3+: GNU GPL version 3 or later <http://gnu.org/licenses/gpl.html>.
This is free software: you are free to change and redistribute it.
There is NO WARRANTY, to the extent permitted by law."""


class PluginArgumentParser(argparse.ArgumentParser):
    """Usage errors end as an UNKNOWN plugin line instead of exit status 2."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print(format_plugin_output(unknown(message)))
        sys.exit(Severity.UNKNOWN.value)


def _check_type(raw: str) -> CheckType:
    try:
        return CheckType.parse(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid check type {raw!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = PluginArgumentParser(
        prog="check_thecus_nas",
        description="Check the health of a Thecus NAS through its web interface.",
    )
    parser.add_argument("-c", "--config-file", default=None, help="YAML file with configuration parameters")
    parser.add_argument("-H", "--hostname", default=None, help="The hostname")
    parser.add_argument("-u", "--username", default=None, help="The username (usually admin)")
    parser.add_argument("-p", "--password", default=None, help="The password")
    parser.add_argument(
        "-t",
        "--type",
        default=None,
        choices=list(CheckType),
        type=_check_type,
        help="The check type: health, cpu, memory, disk-usage or uptime",
    )
    parser.add_argument("--cpu-warning", type=float, default=None, help="CPU usage warning level in %% (default: 95)")
    parser.add_argument("--cpu-critical", type=float, default=None, help="CPU usage critical level in %% (default: 98)")
    parser.add_argument("--mem-warning", type=float, default=None, help="Memory usage warning level in %% (default: 90)")
    parser.add_argument("--mem-critical", type=float, default=None, help="Memory usage critical level in %% (default: 95)")
    parser.add_argument(
        "--disk-usage-warning", type=float, default=None, help="Disk usage warning level in %% (default: 80)",
    )
    parser.add_argument(
        "--disk-usage-critical", type=float, default=None, help="Disk usage critical level in %% (default: 90)",
    )
    parser.add_argument(
        "--disk-temp-warning", type=float, default=None, help="Disk temperature warning level in °C (default: 55)",
    )
    parser.add_argument(
        "--disk-temp-critical", type=float, default=None, help="Disk temperature critical level in °C (default: 60)",
    )
    parser.add_argument(
        "--ignore-bad-sectors",
        type=int,
        default=None,
        metavar="N",
        help="Don't alert on reallocated sector counts below N",
    )
    parser.add_argument(
        "--ignore-smart-status",
        action="store_true",
        default=None,
        help="Don't alert on the overall SMART status flag",
    )
    parser.add_argument("--cookie-dir", default=None, help="Directory for the session cookie file (default: /tmp)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug information to stderr")
    parser.add_argument("--version", action="version", version=VERSION_TEXT)
    return parser


def _pair(warn: float | None, crit: float | None) -> dict[str, float] | None:
    pair = {k: v for k, v in (("warn", warn), ("crit", crit)) if v is not None}
    return pair or None


def overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Nested settings overrides for every option given on the command line."""
    return {
        "device": {
            "hostname": args.hostname,
            "username": args.username,
            "password": args.password,
        },
        "check": {
            "type": args.type,
            "ignore_bad_sectors_below": args.ignore_bad_sectors,
            "ignore_smart_status": args.ignore_smart_status,
        },
        "thresholds": {
            "cpu_usage": _pair(args.cpu_warning, args.cpu_critical),
            "mem_usage": _pair(args.mem_warning, args.mem_critical),
            "disk_usage": _pair(args.disk_usage_warning, args.disk_usage_critical),
            "disk_temp": _pair(args.disk_temp_warning, args.disk_temp_critical),
        },
        "session": {"cookie_dir": args.cookie_dir},
    }


def unknown(message: str) -> AggregateResult:
    return AggregateResult(severity=Severity.UNKNOWN, texts=[message])


def run(args: argparse.Namespace) -> AggregateResult:
    """Resolve settings, run the check, and never raise."""
    try:
        settings: Settings = load_settings(args.config_file, overrides_from_args(args))
    except NasCheckError as exc:
        return unknown(str(exc))

    setup_logging(level="DEBUG" if args.verbose else None)

    missing = settings.missing_required()
    if missing is not None:
        return unknown(f"{missing} missing. Use --help for usage information.")

    try:
        return run_check(settings)
    except Exception as exc:  # noqa: BLE001
        logger.exception("check_crashed")
        return unknown(f"Check failed: {exc}")


def main() -> None:
    args = build_parser().parse_args()
    result = run(args)
    print(format_plugin_output(result))
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
