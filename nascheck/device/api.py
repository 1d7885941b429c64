"""Logical device queries, each mapped to its candidate endpoints."""

from __future__ import annotations

import structlog

from nascheck.device import endpoints
from nascheck.device.exceptions import NoEndpointSatisfied
from nascheck.device.resolver import EndpointFallbackResolver, EndpointQuery
from nascheck.device.response import DeviceResponse

logger = structlog.stdlib.get_logger()


def _query(candidates: list[str], collect_all: bool = False) -> EndpointQuery:
    return EndpointQuery(candidate_uris=list(candidates), collect_all=collect_all)


class DeviceApi:
    """Named read queries against the NAS web interface."""

    def __init__(
        self,
        resolver: EndpointFallbackResolver,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._resolver = resolver
        self._log = log or logger

    def get_sys_status(self) -> DeviceResponse:
        return self._resolver.resolve_one(_query(endpoints.SYS_STATUS))

    def get_nas_status(self) -> DeviceResponse | None:
        """NAS status, or None on models that don't serve it."""
        return self._optional(_query(endpoints.NAS_STATUS))

    def get_raid_list(self) -> DeviceResponse:
        return self._resolver.resolve_one(_query(endpoints.RAID_LIST))

    def get_raid_access_status(self) -> DeviceResponse | None:
        """RAID access status, or None on models that don't serve it."""
        return self._optional(_query(endpoints.RAID_ACCESS_STATUS))

    def get_disk_info(self) -> DeviceResponse:
        return self._resolver.resolve_one(_query(endpoints.DISKS))

    def get_smart_info(self, diskno: str, trayno: str) -> DeviceResponse:
        """SMART data for one disk.

        Every candidate is asked because endpoints that don't apply to the
        unit still answer, just with the placeholder model ``N/A``.

        Raises:
            NoEndpointSatisfied: No candidate returned data for a real disk.
        """
        candidates = endpoints.smart_candidates(str(diskno), str(trayno))
        responses = self._resolver.resolve_all(_query(candidates, collect_all=True))
        for response in responses:
            if response.get("model") not in (None, endpoints.PLACEHOLDER_VALUE):
                return response
        raise NoEndpointSatisfied(
            f"No SMART data for disk {trayno}",
            candidates=candidates,
        )

    def _optional(self, query: EndpointQuery) -> DeviceResponse | None:
        try:
            return self._resolver.resolve_one(query)
        except NoEndpointSatisfied:
            self._log.debug("optional_query_unavailable", candidates=query.candidate_uris)
            return None
