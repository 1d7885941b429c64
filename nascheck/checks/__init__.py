"""Check routines and the run-level orchestration."""

from nascheck.checks.base import CheckRoutine
from nascheck.checks.exceptions import CheckError, UnparseableMetric
from nascheck.checks.health import (
    DiskHealthCheck,
    HealthCheck,
    RaidHealthCheck,
    SystemHealthCheck,
)
from nascheck.checks.runner import ROUTINES, build_routine, run_check
from nascheck.checks.thresholds import evaluate, evaluate_below, perfdata
from nascheck.checks.uptime import UptimeCheck
from nascheck.checks.usage import CpuUsageCheck, DiskUsageCheck, MemoryUsageCheck

__all__ = [
    "ROUTINES",
    "CheckError",
    "CheckRoutine",
    "CpuUsageCheck",
    "DiskHealthCheck",
    "DiskUsageCheck",
    "HealthCheck",
    "MemoryUsageCheck",
    "RaidHealthCheck",
    "SystemHealthCheck",
    "UnparseableMetric",
    "UptimeCheck",
    "build_routine",
    "evaluate",
    "evaluate_below",
    "perfdata",
    "run_check",
]
