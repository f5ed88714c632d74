"""
API aggregator: resilient fan-out over weather, news and sports APIs.
"""

from aggregator.models import (
    EndpointResult,
    FilterOptions,
    SortBy,
    SortingOptions,
    SortOrder,
)
from aggregator.service import ApiAggregatorService

__all__ = [
    "ApiAggregatorService",
    "EndpointResult",
    "FilterOptions",
    "SortBy",
    "SortingOptions",
    "SortOrder",
]
