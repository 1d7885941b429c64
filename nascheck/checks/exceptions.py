"""Check-routine exceptions."""

from __future__ import annotations

from nascheck.core.exceptions import NasCheckError


class CheckError(NasCheckError):
    """Base exception for check routine errors."""


class UnparseableMetric(CheckError):
    """A field a check needs is missing or can't be interpreted."""
