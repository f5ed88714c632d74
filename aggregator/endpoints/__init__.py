"""
Aggregated endpoints: one adapter per upstream vendor API.
"""

from aggregator.endpoints.base import BaseEndpoint, CollectionEndpoint
from aggregator.endpoints.news import NewsEndpoint
from aggregator.endpoints.sports import SportsNewsEndpoint
from aggregator.endpoints.weather import WeatherEndpoint

__all__ = [
    "BaseEndpoint",
    "CollectionEndpoint",
    "NewsEndpoint",
    "SportsNewsEndpoint",
    "WeatherEndpoint",
]
