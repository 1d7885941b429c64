"""Fallback across the several device paths that may serve one logical query."""

from __future__ import annotations

from collections.abc import Iterator

import structlog
from pydantic import BaseModel, Field

from nascheck.device.client import SessionClient
from nascheck.device.exceptions import EndpointError, NoEndpointSatisfied
from nascheck.device.response import DeviceResponse

logger = structlog.stdlib.get_logger()


class EndpointQuery(BaseModel):
    """A logical device query and the endpoint shapes that may serve it."""

    candidate_uris: list[str] = Field(min_length=1)
    post_body: str | None = None
    allow_auto_login: bool = True
    collect_all: bool = False


class EndpointFallbackResolver:
    """Tries candidate endpoints in order until one serves the query.

    Endpoint-local failures (4xx, 5xx, undecodable body) move on to the
    next candidate. Anything else (transport, authentication, session
    conflict) is not specific to the path and propagates immediately.
    """

    def __init__(
        self,
        client: SessionClient,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._client = client
        self._log = log or logger

    def resolve(self, query: EndpointQuery) -> DeviceResponse | list[DeviceResponse]:
        """Run *query*.

        Returns:
            The first successful response, or with ``collect_all`` every
            successful response in candidate order.

        Raises:
            NoEndpointSatisfied: No candidate produced a response.
            DeviceError: A fatal failure from the first candidate that hit it.
        """
        if query.collect_all:
            return self.resolve_all(query)
        return self.resolve_one(query)

    def resolve_one(self, query: EndpointQuery) -> DeviceResponse:
        """First successful response; later candidates are not tried."""
        for response in self._successes(query):
            return response
        raise _unsatisfied(query)

    def resolve_all(self, query: EndpointQuery) -> list[DeviceResponse]:
        """Every successful response in candidate order."""
        collected = list(self._successes(query))
        if not collected:
            raise _unsatisfied(query)
        return collected

    def _successes(self, query: EndpointQuery) -> Iterator[DeviceResponse]:
        for uri in query.candidate_uris:
            try:
                response = self._client.request(
                    uri,
                    query.post_body,
                    auto_login=query.allow_auto_login,
                )
            except EndpointError as exc:
                self._log.debug(
                    "endpoint_candidate_failed",
                    uri=uri,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                continue
            yield response


def _unsatisfied(query: EndpointQuery) -> NoEndpointSatisfied:
    return NoEndpointSatisfied(
        f"No endpoint satisfied the query ({', '.join(query.candidate_uris)})",
        candidates=query.candidate_uris,
    )
