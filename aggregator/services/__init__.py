"""
Service layer infrastructure - resilience patterns for external API calls.

Provides:
- CacheManager: In-memory TTL cache for endpoint results
- StatisticsAccumulator: Per-endpoint call counts and latency
- ResiliencePipeline: Timeout, retry and fallback around the transport
- create_http_client: Shared httpx client using the pipeline
"""

from aggregator.services.errors import (
    ServiceError,
    RequestTimeoutError,
    UpstreamStatusError,
    EndpointNotConfiguredError,
)
from aggregator.services.cache import CacheManager, CacheEntry, CacheStats
from aggregator.services.statistics import EndpointStats, StatisticsAccumulator
from aggregator.services.resilience import (
    FALLBACK_SOURCE,
    FallbackPolicy,
    Policy,
    ResiliencePipeline,
    ResilientTransport,
    RetryPolicy,
    TimeoutPolicy,
)
from aggregator.services.client import build_pipeline, create_http_client

__all__ = [
    # Errors
    "ServiceError",
    "RequestTimeoutError",
    "UpstreamStatusError",
    "EndpointNotConfiguredError",
    # Cache
    "CacheManager",
    "CacheEntry",
    "CacheStats",
    # Statistics
    "EndpointStats",
    "StatisticsAccumulator",
    # Resilience
    "FALLBACK_SOURCE",
    "FallbackPolicy",
    "Policy",
    "ResiliencePipeline",
    "ResilientTransport",
    "RetryPolicy",
    "TimeoutPolicy",
    # Client
    "build_pipeline",
    "create_http_client",
]
