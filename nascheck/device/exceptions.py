"""Exception hierarchy for the NAS web interface client.

``EndpointError`` subclasses are local to one endpoint and drive fallback
to the next candidate. Every other ``DeviceError`` is fatal for the query.
"""

from __future__ import annotations

from nascheck.core.exceptions import NasCheckError


class DeviceError(NasCheckError):
    """Base exception for all device communication errors."""


class TransportFailure(DeviceError):
    """Network-level failure (connect, timeout, protocol)."""


class EndpointError(DeviceError):
    """The endpoint did not serve usable data."""


class ClientError(EndpointError):
    """The device answered with a 4xx status."""

    def __init__(self, status_code: int, path: str) -> None:
        super().__init__(f"HTTP {status_code} for {path}")
        self.status_code = status_code
        self.path = path


class ServerError(EndpointError):
    """The device answered with a 5xx status."""

    def __init__(self, status_code: int, path: str) -> None:
        super().__init__(f"HTTP {status_code} for {path}")
        self.status_code = status_code
        self.path = path


class DecodeError(EndpointError):
    """The response body was empty or not valid JSON."""


class AuthorizationExpired(DeviceError):
    """The session is no longer authorized; a fresh login may recover it."""


class AuthenticationFailed(DeviceError):
    """The device rejected the credentials."""


class SessionConflict(DeviceError):
    """Another administrator session is active on the device."""


class NoEndpointSatisfied(DeviceError):
    """Every candidate endpoint for a query failed."""

    def __init__(self, message: str, candidates: list[str] | None = None) -> None:
        super().__init__(message)
        self.candidates = list(candidates or [])
