"""NAS web interface access: session client, endpoint fallback and named queries."""

from nascheck.device.api import DeviceApi
from nascheck.device.client import SessionClient, classify_response
from nascheck.device.exceptions import (
    AuthenticationFailed,
    AuthorizationExpired,
    ClientError,
    DecodeError,
    DeviceError,
    EndpointError,
    NoEndpointSatisfied,
    ServerError,
    SessionConflict,
    TransportFailure,
)
from nascheck.device.resolver import EndpointFallbackResolver, EndpointQuery
from nascheck.device.response import DeviceResponse
from nascheck.device.session_store import CookieStore

__all__ = [
    "AuthenticationFailed",
    "AuthorizationExpired",
    "ClientError",
    "CookieStore",
    "DecodeError",
    "DeviceApi",
    "DeviceError",
    "DeviceResponse",
    "EndpointError",
    "EndpointFallbackResolver",
    "EndpointQuery",
    "NoEndpointSatisfied",
    "ServerError",
    "SessionClient",
    "SessionConflict",
    "TransportFailure",
    "classify_response",
]
