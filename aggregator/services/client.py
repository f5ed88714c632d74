"""
Shared HTTP client wiring.

All endpoint adapters send through one httpx.AsyncClient whose transport is
a ResilientTransport, so they share a single connection pool and a single
resilience pipeline.
"""

import asyncio
from typing import Awaitable, Callable

import httpx
from loguru import logger

from aggregator.services.resilience import ResiliencePipeline, ResilientTransport
from aggregator.settings import Settings, global_settings


def build_pipeline(
    settings: Settings | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ResiliencePipeline:
    """Build the default pipeline from settings."""
    settings = settings or global_settings
    return ResiliencePipeline.default(
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
        backoff_base=settings.retry_backoff_base,
        fallback_enabled=settings.fallback_enabled,
        sleep=sleep,
    )


def create_http_client(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    pipeline: ResiliencePipeline | None = None,
) -> httpx.AsyncClient:
    """
    Create the shared resilient HTTP client.

    Args:
        settings: Settings to read timeouts and pool limits from
        transport: Inner transport (defaults to a pooled AsyncHTTPTransport)
        pipeline: Pipeline to apply (defaults to build_pipeline(settings))

    Returns:
        httpx.AsyncClient sending every request through the pipeline
    """
    settings = settings or global_settings
    if transport is None:
        transport = httpx.AsyncHTTPTransport(
            limits=httpx.Limits(max_connections=settings.http_max_connections),
        )
    pipeline = pipeline or build_pipeline(settings)

    logger.debug(
        f"Creating HTTP client: timeout={settings.request_timeout}s, "
        f"retries={settings.max_retries}, fallback={settings.fallback_enabled}"
    )
    return httpx.AsyncClient(
        transport=ResilientTransport(pipeline, transport),
        timeout=httpx.Timeout(settings.request_timeout),
        follow_redirects=True,
    )
