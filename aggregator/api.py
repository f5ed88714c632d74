"""FastAPI application exposing aggregation and statistics."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Query, Request
from loguru import logger

from aggregator.models import (
    EndpointResult,
    FilterOptions,
    SortBy,
    SortingOptions,
    SortOrder,
)
from aggregator.service import ApiAggregatorService
from aggregator.settings import Settings


def get_service(request: Request) -> ApiAggregatorService:
    return request.app.state.service


def create_app(
    settings: Settings | None = None,
    service: ApiAggregatorService | None = None,
) -> FastAPI:
    """Create the FastAPI app.

    Args:
        settings: Settings used to build the service when none is given
        service: Pre-built service (tests inject one with a mock transport)

    Returns:
        FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.service = service or ApiAggregatorService.from_settings(settings)
        logger.info(
            f"API aggregator ready with {len(app.state.service.endpoints)} endpoints"
        )
        yield
        await app.state.service.close()

    app = FastAPI(title="API Aggregator", lifespan=lifespan)

    @app.get("/ApiAggregator", response_model=list[EndpointResult])
    async def get_aggregator_data(
        service: Annotated[ApiAggregatorService, Depends(get_service)],
        news_keyword: Annotated[str | None, Query(alias="newsKeyword")] = None,
        sport_news_keyword: Annotated[
            str | None, Query(alias="sportNewsKeyword")
        ] = None,
        sort_by: Annotated[SortBy, Query(alias="sortBy")] = SortBy.DATE,
        sort_order: Annotated[SortOrder, Query(alias="sortOrder")] = SortOrder.ASC,
    ):
        """Aggregated results of all endpoints."""
        return await service.aggregate(
            FilterOptions(
                news_keyword=news_keyword, sport_news_keyword=sport_news_keyword
            ),
            SortingOptions(sort_by=sort_by, sort_order=sort_order),
        )

    @app.get("/Statistics")
    async def get_statistics(
        service: Annotated[ApiAggregatorService, Depends(get_service)],
    ):
        """Call count and performance bracket per endpoint."""
        return {
            name: {"callCount": stats.call_count, "performance": stats.performance_bracket}
            for name, stats in service.get_statistics().items()
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "service": "api-aggregator"}

    return app
