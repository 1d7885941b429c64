"""Loosely-typed view over decoded device JSON."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any


class DeviceResponse:
    """Sparse mapping from field name to optional value.

    The device schema differs between models and firmware revisions, so
    nothing here assumes a fixed shape. A field counts as present only
    when it exists and is not ``null``.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: Any) -> None:
        self._raw = raw

    def __repr__(self) -> str:
        return f"DeviceResponse({self._raw!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DeviceResponse):
            return self._raw == other._raw
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @property
    def raw(self) -> Any:
        return self._raw

    @property
    def is_empty(self) -> bool:
        """True for a decoded ``null``, empty map, or empty list."""
        return self._raw is None or self._raw == {} or self._raw == []

    def has(self, name: str) -> bool:
        return isinstance(self._raw, dict) and self._raw.get(name) is not None

    def get(self, name: str, default: Any = None) -> Any:
        if not self.has(name):
            return default
        return self._raw[name]

    def child(self, name: str) -> DeviceResponse:
        """Nested map as a DeviceResponse (empty when absent)."""
        value = self.get(name)
        return DeviceResponse(value if isinstance(value, dict) else None)

    def children(self, name: str) -> list[DeviceResponse]:
        """List of nested maps; non-map entries are skipped."""
        value = self.get(name)
        if not isinstance(value, list):
            return []
        return [DeviceResponse(entry) for entry in value if isinstance(entry, dict)]

    def probe(self, prefix: str, start: int = 2) -> Iterator[tuple[int, Any]]:
        """Yield ``(n, value)`` for ``prefix<n>``, ``prefix<n+1>``, … until one is missing.

        Used for numbered fields such as ``sys_fan_speed2``, ``sys_fan_speed3``.
        """
        n = start
        while self.has(f"{prefix}{n}"):
            yield n, self._raw[f"{prefix}{n}"]
            n += 1
