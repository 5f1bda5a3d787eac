"""Cache of the server-provided list of files eligible for analysis."""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from bundles.errors import ErrorFunnel, FilterFetchError
from bundles.messages import FILTERS_FETCH_FAILED
from clients.service_client import FilterResponse, ServiceClient
from models.bundle import FilterList
from utils.helpers import normalize_filter_list


def _coerce_filters(response: FilterResponse) -> FilterList:
    if isinstance(response, FilterList):
        return normalize_filter_list(response.extensions, response.config_files)
    raw: Mapping[str, Any] = response
    config_files = raw.get("configFiles", raw.get("config_files", []))
    return normalize_filter_list(raw.get("extensions", []), config_files)


class FilterListCache:
    """
    Holds the current FilterList.

    A failed refresh is reported through the error funnel and leaves the
    previous value in place, so callers never see the failure. An empty list
    means nothing is eligible.
    """

    def __init__(self, client: ServiceClient, errors: ErrorFunnel) -> None:
        self._client = client
        self._errors = errors
        self._value = FilterList()

    @property
    def value(self) -> FilterList:
        return self._value

    def is_empty(self) -> bool:
        return self._value.is_empty()

    async def refresh(self, token: str) -> FilterList:
        try:
            response = await self._client.get_filters(token)
            filters = _coerce_filters(response)
        except Exception as exc:
            error = FilterFetchError(f"{FILTERS_FETCH_FAILED}: {exc}")
            error.__cause__ = exc
            self._errors.report(self, error, FILTERS_FETCH_FAILED)
            return self._value

        self._value = filters
        logger.info(
            f"Filter list refreshed: {len(filters.extensions)} extensions, "
            f"{len(filters.config_files)} config files."
        )
        return self._value

    async def ensure(self, token: str) -> FilterList:
        """Fetch the filter list only if nothing has been fetched yet."""
        if self.is_empty():
            return await self.refresh(token)
        return self._value
