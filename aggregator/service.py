"""
Aggregation service: concurrent fan-out over every configured endpoint.
"""

import asyncio
import time
from datetime import timedelta
from typing import Sequence

import httpx
from loguru import logger

from aggregator.endpoints import (
    BaseEndpoint,
    NewsEndpoint,
    SportsNewsEndpoint,
    WeatherEndpoint,
)
from aggregator.models import EndpointResult, FilterOptions, SortingOptions
from aggregator.services.cache import CacheManager
from aggregator.services.client import create_http_client
from aggregator.services.statistics import EndpointStats, StatisticsAccumulator
from aggregator.settings import Settings, global_settings


class ApiAggregatorService:
    """
    Calls all endpoints concurrently and collects one result per endpoint.

    Endpoints never raise, so an aggregation always completes with a full
    set of results; failures show up per entry via is_success and
    error_message. Result order is not significant.

    Usage:
        service = ApiAggregatorService.from_settings()
        results = await service.aggregate(FilterOptions(news_keyword="bank"))
        stats = service.get_statistics()
        await service.close()
    """

    def __init__(
        self,
        endpoints: Sequence[BaseEndpoint],
        client: httpx.AsyncClient,
        statistics: StatisticsAccumulator | None = None,
    ):
        self.endpoints = list(endpoints)
        self.client = client
        self.statistics = statistics or StatisticsAccumulator()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ApiAggregatorService":
        """Wire cache, statistics, shared client and the three endpoints."""
        settings = settings or global_settings
        cache = CacheManager(
            default_ttl=timedelta(minutes=settings.cache_ttl_minutes),
            debug=settings.cache_debug,
        )
        statistics = StatisticsAccumulator()
        client = create_http_client(settings, transport=transport)
        endpoints = create_endpoints(settings, cache, statistics)
        return cls(endpoints, client, statistics)

    async def aggregate(
        self,
        filter_options: FilterOptions | None = None,
        sorting_options: SortingOptions | None = None,
    ) -> list[EndpointResult]:
        """
        Invoke every endpoint concurrently and wait for all of them.

        Cancelling the aggregation cancels every in-flight endpoint call.

        Args:
            filter_options: Keyword filters (default: none)
            sorting_options: Ordering (default: by date, ascending)

        Returns:
            One EndpointResult per endpoint, in no particular order
        """
        filter_options = filter_options or FilterOptions()
        sorting_options = sorting_options or SortingOptions()

        start_time = time.time()
        results = await asyncio.gather(
            *(
                endpoint.invoke(self.client, filter_options, sorting_options)
                for endpoint in self.endpoints
            )
        )

        failed = sum(1 for r in results if not r.is_success)
        logger.info(
            f"Aggregated {len(results)} endpoints ({failed} failed) "
            f"in {time.time() - start_time:.2f}s"
        )
        return list(results)

    def get_statistics(self) -> dict[str, EndpointStats]:
        """Snapshot of per-endpoint call counts and latency."""
        return self.statistics.snapshot()

    async def close(self) -> None:
        """Close the shared HTTP client."""
        await self.client.aclose()
        logger.debug("ApiAggregatorService closed")

    async def __aenter__(self) -> "ApiAggregatorService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def create_endpoints(
    settings: Settings,
    cache: CacheManager,
    statistics: StatisticsAccumulator,
) -> list[BaseEndpoint]:
    """The fixed set of aggregated endpoints."""
    return [
        WeatherEndpoint(
            settings.weather_api_key, cache, statistics, city=settings.weather_city
        ),
        NewsEndpoint(
            settings.news_api_key,
            cache,
            statistics,
            country=settings.news_country,
            category=settings.news_category,
        ),
        SportsNewsEndpoint(
            settings.sports_api_key,
            cache,
            statistics,
            competition=settings.sports_competition,
            season=settings.sports_season,
        ),
    ]
