"""
Base endpoint interface.
"""

import time
from abc import ABC, abstractmethod
from datetime import timedelta
from operator import attrgetter
from typing import Any, ClassVar, Generic, Sequence, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from aggregator.models import EndpointResult, FilterOptions, SortBy, SortingOptions
from aggregator.services.cache import CacheManager
from aggregator.services.errors import EndpointNotConfiguredError, UpstreamStatusError
from aggregator.services.resilience import FALLBACK_SOURCE
from aggregator.services.statistics import StatisticsAccumulator

T = TypeVar("T", bound=BaseModel)


class VendorModel(BaseModel):
    """Base for vendor payload models: camelCase on the wire, extras ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BaseEndpoint(ABC):
    """
    Abstract base class for all aggregated endpoints.

    invoke() never raises: cache hits are returned as-is, and every failure
    of the upstream call is turned into an unsuccessful EndpointResult that
    is not cached.
    """

    ENDPOINT_NAME: ClassVar[str]
    URL: ClassVar[str]

    def __init__(
        self,
        api_key: str,
        cache: CacheManager,
        statistics: StatisticsAccumulator,
        cache_ttl: timedelta | None = None,
    ):
        self.api_key = api_key
        self.cache = cache
        self.statistics = statistics
        self.cache_ttl = cache.default_ttl if cache_ttl is None else cache_ttl

    @property
    def endpoint_name(self) -> str:
        return self.ENDPOINT_NAME

    def is_configured(self) -> bool:
        """An empty credential means the endpoint is not called at all."""
        return bool(self.api_key)

    @abstractmethod
    def cache_key(
        self, filter_options: FilterOptions, sorting_options: SortingOptions
    ) -> str:
        """Deterministic key built from the options this endpoint uses."""
        ...

    def url(self) -> str:
        """Upstream URL."""
        return self.URL

    @abstractmethod
    def params(self) -> dict[str, Any]:
        """Query parameters for the upstream request."""
        ...

    def headers(self) -> dict[str, str]:
        """Extra headers for the upstream request."""
        return {}

    @abstractmethod
    def render(
        self,
        payload: Any,
        filter_options: FilterOptions,
        sorting_options: SortingOptions,
    ) -> str:
        """Turn the decoded vendor payload into the result body."""
        ...

    async def invoke(
        self,
        client: httpx.AsyncClient,
        filter_options: FilterOptions,
        sorting_options: SortingOptions,
    ) -> EndpointResult:
        """
        Call the endpoint, or serve it from cache.

        Args:
            client: Shared resilient HTTP client
            filter_options: Keyword filters
            sorting_options: Ordering of the rendered items

        Returns:
            EndpointResult, successful or carrying the failure cause
        """
        key = self.cache_key(filter_options, sorting_options)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        if not self.is_configured():
            return self._failure(EndpointNotConfiguredError(self.endpoint_name))

        try:
            start = time.perf_counter()
            response = await client.get(
                self.url(), params=self.params(), headers=self.headers()
            )
            if response.is_error:
                raise UpstreamStatusError(
                    self.endpoint_name, response.status_code, response.reason_phrase
                )
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            self.statistics.record(self.endpoint_name, elapsed_ms)

            payload = response.json()
            fallback_message = self._fallback_message(payload)
            if fallback_message is not None:
                logger.warning(f"[{self.endpoint_name}] served by fallback response")
                return EndpointResult(
                    name=self.endpoint_name,
                    is_success=True,
                    response_body=fallback_message,
                )

            result = EndpointResult(
                name=self.endpoint_name,
                is_success=True,
                response_body=self.render(payload, filter_options, sorting_options),
            )
        except Exception as e:
            return self._failure(e)

        await self.cache.set(key, result, self.cache_ttl)
        return result

    def _fallback_message(self, payload: Any) -> str | None:
        """Message of a fallback response, None for regular vendor data."""
        if isinstance(payload, dict) and payload.get("source") == FALLBACK_SOURCE:
            return str(payload.get("message") or "")
        return None

    def _failure(self, error: Exception) -> EndpointResult:
        message = str(error) or type(error).__name__
        logger.error(f"[{self.endpoint_name}] call failed: {message}")
        return EndpointResult(
            name=self.endpoint_name,
            is_success=False,
            error_message=message,
        )


class CollectionEndpoint(BaseEndpoint, Generic[T]):
    """
    Endpoint whose payload is a list of items rendered one block per item.

    Subclasses describe the item shape with lookup tables instead of code:
    SORT_FIELDS maps each SortBy to an attribute path, FILTER_FIELDS lists
    the attribute paths a keyword is matched against, and ITEM_TEMPLATE is
    formatted with the item bound to `item`.
    """

    SORT_FIELDS: ClassVar[dict[SortBy, str]] = {}
    FILTER_FIELDS: ClassVar[Sequence[str]] = ()
    ITEM_TEMPLATE: ClassVar[str]
    HEADER: ClassVar[str] = ""
    NOT_FOUND_MESSAGE: ClassVar[str]
    CACHE_KEY_PREFIX: ClassVar[str]

    @abstractmethod
    def parse_items(self, payload: Any) -> list[T] | None:
        """Extract the item collection from the payload."""
        ...

    @abstractmethod
    def keyword(self, filter_options: FilterOptions) -> str | None:
        """The filter value that applies to this endpoint."""
        ...

    def cache_key(
        self, filter_options: FilterOptions, sorting_options: SortingOptions
    ) -> str:
        return (
            f"{self.CACHE_KEY_PREFIX}_{self.keyword(filter_options) or ''}"
            f"_{sorting_options.sort_by.value}_{sorting_options.sort_order.value}"
        )

    def render(
        self,
        payload: Any,
        filter_options: FilterOptions,
        sorting_options: SortingOptions,
    ) -> str:
        items = self.parse_items(payload)
        if not items:
            return self.NOT_FOUND_MESSAGE

        sort_path = self.SORT_FIELDS.get(sorting_options.sort_by)
        if sort_path:
            items = sort_items(items, sort_path, sorting_options.descending)
        items = filter_items(items, self.keyword(filter_options), self.FILTER_FIELDS)

        lines = [self.ITEM_TEMPLATE.format(item=item) for item in items]
        return self.HEADER + "".join(f"{line}\n" for line in lines)


def sort_items(items: list[T], path: str, descending: bool = False) -> list[T]:
    """Stable sort by an attribute path; strings compare case-insensitively."""
    getter = attrgetter(path)

    def key(item: T) -> tuple[bool, Any]:
        value = getter(item)
        if isinstance(value, str):
            value = value.casefold()
        return (value is None, value)

    return sorted(items, key=key, reverse=descending)


def filter_items(
    items: list[T], keyword: str | None, paths: Sequence[str]
) -> list[T]:
    """Keep items where any of the paths contains keyword, ignoring case."""
    if not keyword or not paths:
        return items

    needle = keyword.casefold()
    getters = [attrgetter(path) for path in paths]
    return [
        item
        for item in items
        if any(needle in (getter(item) or "").casefold() for getter in getters)
    ]
