"""
football-data.org finished matches endpoint.

API Documentation: https://www.football-data.org/documentation/api
Requires an X-Auth-Token header.
"""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from aggregator.endpoints.base import CollectionEndpoint, VendorModel
from aggregator.models import FilterOptions, SortBy


class Team(VendorModel):
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or ""

    @model_validator(mode="before")
    @classmethod
    def _from_name(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data


class FullTime(VendorModel):
    home: int | None = None
    away: int | None = None


class Score(VendorModel):
    full_time: FullTime = Field(default_factory=FullTime)

    @model_validator(mode="before")
    @classmethod
    def _flat_score(cls, data: Any) -> Any:
        # Accept {"home": 2, "away": 1} as shorthand for the full-time score
        if isinstance(data, dict) and "fullTime" not in data and "full_time" not in data:
            if "home" in data or "away" in data:
                return {"fullTime": {"home": data.get("home"), "away": data.get("away")}}
        return data


class Match(VendorModel):
    """Single finished match."""

    utc_date: datetime
    home_team: Team = Field(default_factory=Team)
    away_team: Team = Field(default_factory=Team)
    score: Score = Field(default_factory=Score)

    @property
    def home_goals(self) -> str:
        home = self.score.full_time.home
        return "-" if home is None else str(home)

    @property
    def away_goals(self) -> str:
        away = self.score.full_time.away
        return "-" if away is None else str(away)


class MatchResponse(VendorModel):
    matches: list[Match] | None = None


class SportsNewsEndpoint(CollectionEndpoint[Match]):
    """
    Champions League results from football-data.org.

    Filtered by FilterOptions.sport_news_keyword against either team name,
    sortable by match date or home team name.
    """

    ENDPOINT_NAME = "SportsNewsEndpoint"
    BASE_URL = "https://api.football-data.org/v4"
    CACHE_KEY_PREFIX = "SportsNewsCacheKey"
    HEADER = "Champions League Results (Last 7 Days):\n"
    NOT_FOUND_MESSAGE = "No Champions League matches in the last 7 days."

    SORT_FIELDS = {SortBy.DATE: "utc_date", SortBy.NAME: "home_team.name"}
    FILTER_FIELDS = ("home_team.name", "away_team.name")
    ITEM_TEMPLATE = (
        "{item.utc_date:%Y-%m-%d} - {item.home_team.display_name} "
        "{item.home_goals} : {item.away_goals} {item.away_team.display_name}"
    )

    def __init__(self, *args, competition: str = "CL", season: int = 2025, **kwargs):
        super().__init__(*args, **kwargs)
        self.competition = competition
        self.season = season

    def url(self) -> str:
        return f"{self.BASE_URL}/competitions/{self.competition}/matches"

    def keyword(self, filter_options: FilterOptions) -> str | None:
        return filter_options.sport_news_keyword

    def params(self) -> dict[str, Any]:
        return {"season": self.season, "status": "FINISHED"}

    def headers(self) -> dict[str, str]:
        return {"X-Auth-Token": self.api_key, "Accept": "application/json"}

    def parse_items(self, payload: Any) -> list[Match] | None:
        return MatchResponse.model_validate(payload).matches
