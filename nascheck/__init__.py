"""Thecus NAS health checks for Nagios-compatible monitoring."""

__version__ = "1.1.0"
