"""
Aggregator contracts shared by endpoints, the service and the HTTP API.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SortBy(str, Enum):
    """Field to order endpoint items by."""

    NAME = "Name"
    DATE = "Date"


class SortOrder(str, Enum):
    """Direction of the ordering."""

    ASC = "Asc"
    DESC = "Desc"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class FilterOptions(_CamelModel):
    """Free-text filters, one per endpoint domain."""

    news_keyword: str | None = None
    sport_news_keyword: str | None = None


class SortingOptions(_CamelModel):
    """Ordering applied by every endpoint that has matching data."""

    sort_by: SortBy = SortBy.DATE
    sort_order: SortOrder = SortOrder.ASC

    @property
    def descending(self) -> bool:
        return self.sort_order == SortOrder.DESC


class EndpointResult(_CamelModel):
    """Outcome of one endpoint call, success or failure."""

    name: str
    is_success: bool
    response_body: str = ""
    error_message: str = ""
