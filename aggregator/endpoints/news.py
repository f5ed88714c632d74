"""
NewsAPI top-headlines endpoint.

API Documentation: https://newsapi.org/docs/endpoints/top-headlines
"""

from datetime import datetime
from typing import Any

from aggregator.endpoints.base import CollectionEndpoint, VendorModel
from aggregator.models import FilterOptions, SortBy


class ArticleSource(VendorModel):
    id: str | None = None
    name: str | None = None


class Article(VendorModel):
    """Single headline from NewsAPI."""

    source: ArticleSource | None = None
    author: str | None = None
    title: str | None = None
    description: str | None = None
    url: str | None = None
    content: str | None = None
    published_at: datetime | None = None

    @property
    def headline(self) -> str:
        return self.title or ""

    @property
    def published(self) -> str:
        return self.published_at.isoformat() if self.published_at else ""

    @property
    def summary(self) -> str:
        return self.description or ""


class NewsApiResponse(VendorModel):
    status: str | None = None
    total_results: int | None = None
    articles: list[Article] | None = None


class NewsEndpoint(CollectionEndpoint[Article]):
    """
    Business headlines from NewsAPI.

    Filtered by FilterOptions.news_keyword against the title, sortable by
    publication date or title.
    """

    ENDPOINT_NAME = "NewsEndpoint"
    URL = "https://newsapi.org/v2/top-headlines"
    CACHE_KEY_PREFIX = "NewsCacheKey"
    NOT_FOUND_MESSAGE = "News articles not found!"

    SORT_FIELDS = {SortBy.DATE: "published_at", SortBy.NAME: "title"}
    FILTER_FIELDS = ("title",)
    ITEM_TEMPLATE = (
        "Published At: {item.published}\n"
        "Title: {item.headline}\n"
        "Description: {item.summary}"
    )

    def __init__(self, *args, country: str = "us", category: str = "business", **kwargs):
        super().__init__(*args, **kwargs)
        self.country = country
        self.category = category

    def keyword(self, filter_options: FilterOptions) -> str | None:
        return filter_options.news_keyword

    def params(self) -> dict[str, Any]:
        return {
            "country": self.country,
            "category": self.category,
            "apiKey": self.api_key,
        }

    def headers(self) -> dict[str, str]:
        # NewsAPI rejects requests without a User-Agent
        return {"User-Agent": "ApiAggregator/1.0"}

    def parse_items(self, payload: Any) -> list[Article] | None:
        return NewsApiResponse.model_validate(payload).articles
