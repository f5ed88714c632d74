"""
Unit tests for SportsNewsEndpoint.
"""

import pytest

from aggregator.endpoints.sports import SportsNewsEndpoint
from aggregator.models import FilterOptions, SortBy, SortingOptions, SortOrder
from tests.helpers import json_upstream, make_client, status_upstream


def match(date: str, home: str, away: str, home_goals: int, away_goals: int) -> dict:
    return {
        "utcDate": date,
        "homeTeam": {"name": home},
        "awayTeam": {"name": away},
        "score": {"fullTime": {"home": home_goals, "away": away_goals}},
    }


MATCHES = {
    "matches": [
        match("2025-05-06T19:00:00Z", "Inter", "Barcelona", 4, 3),
        match("2025-04-30T19:00:00Z", "Barcelona", "Inter", 3, 3),
        match("2025-05-07T19:00:00Z", "Arsenal", "PSG", 1, 2),
    ]
}


class TestSportsNewsEndpoint:
    """Test cases for SportsNewsEndpoint."""

    @pytest.fixture
    def endpoint(self, cache, statistics):
        return SportsNewsEndpoint("fake-key", cache, statistics)

    @pytest.mark.asyncio
    async def test_parsed_results(self, endpoint, statistics):
        """Test a finished match is rendered under the header."""
        upstream = json_upstream(
            {"matches": [match("2025-05-01T20:00:00Z", "TeamA", "TeamB", 2, 1)]}
        )

        async with make_client(upstream) as client:
            result = await endpoint.invoke(client, FilterOptions(), SortingOptions())

        assert result.is_success is True
        assert result.name == "SportsNewsEndpoint"
        assert "Champions League Results" in result.response_body
        assert "2025-05-01 - TeamA 2 : 1 TeamB" in result.response_body
        assert statistics.get("SportsNewsEndpoint").call_count == 1

    @pytest.mark.asyncio
    async def test_flat_score_shape(self, endpoint):
        """Test the shorthand team/score shape is accepted."""
        upstream = json_upstream(
            {
                "matches": [
                    {
                        "utcDate": "2025-05-01T20:00:00Z",
                        "homeTeam": "TeamA",
                        "awayTeam": "TeamB",
                        "score": {"home": 2, "away": 1},
                    }
                ]
            }
        )

        async with make_client(upstream) as client:
            result = await endpoint.invoke(client, FilterOptions(), SortingOptions())

        assert "2025-05-01 - TeamA 2 : 1 TeamB" in result.response_body

    @pytest.mark.asyncio
    async def test_request_headers(self, endpoint):
        """Test auth token header and query parameters."""
        upstream = json_upstream({"matches": []})

        async with make_client(upstream) as client:
            await endpoint.invoke(client, FilterOptions(), SortingOptions())

        request = upstream.requests[0]
        assert request.headers["X-Auth-Token"] == "fake-key"
        assert request.url.path == "/v4/competitions/CL/matches"
        assert request.url.params["status"] == "FINISHED"
        assert request.url.params["season"] == "2025"

    @pytest.mark.asyncio
    async def test_no_matches_message(self, endpoint):
        """Test an empty match list renders the not-found message."""
        async with make_client(json_upstream({"matches": []})) as client:
            result = await endpoint.invoke(client, FilterOptions(), SortingOptions())

        assert result.is_success is True
        assert "No Champions League matches in the last 7 days." in result.response_body

    @pytest.mark.asyncio
    async def test_sort_by_date_descending(self, endpoint):
        """Test newest match comes first."""
        async with make_client(json_upstream(MATCHES)) as client:
            result = await endpoint.invoke(
                client,
                FilterOptions(),
                SortingOptions(sort_by=SortBy.DATE, sort_order=SortOrder.DESC),
            )

        lines = result.response_body.splitlines()
        assert lines[1].startswith("2025-05-07 - Arsenal")
        assert lines[2].startswith("2025-05-06 - Inter")
        assert lines[3].startswith("2025-04-30 - Barcelona")

    @pytest.mark.asyncio
    async def test_sort_by_home_team(self, endpoint):
        """Test name sorting uses the home team."""
        async with make_client(json_upstream(MATCHES)) as client:
            result = await endpoint.invoke(
                client, FilterOptions(), SortingOptions(sort_by=SortBy.NAME)
            )

        lines = result.response_body.splitlines()
        assert [line.split(" - ")[1].split(" ")[0] for line in lines[1:]] == [
            "Arsenal",
            "Barcelona",
            "Inter",
        ]

    @pytest.mark.asyncio
    async def test_filter_matches_either_team(self, endpoint):
        """Test keyword matches home or away team, ignoring case."""
        async with make_client(json_upstream(MATCHES)) as client:
            result = await endpoint.invoke(
                client, FilterOptions(sport_news_keyword="inter"), SortingOptions()
            )

        body = result.response_body
        assert "2025-04-30 - Barcelona 3 : 3 Inter" in body
        assert "2025-05-06 - Inter 4 : 3 Barcelona" in body
        assert "Arsenal" not in body

    @pytest.mark.asyncio
    async def test_error_result_on_failure(self, endpoint):
        """Test a failing upstream without fallback gives an error result."""
        async with make_client(status_upstream(500), fallback_enabled=False) as client:
            result = await endpoint.invoke(client, FilterOptions(), SortingOptions())

        assert result.is_success is False
        assert result.error_message

    @pytest.mark.asyncio
    async def test_fallback_message(self, endpoint):
        """Test the fallback sentinel is surfaced verbatim."""
        upstream = json_upstream(
            {"source": "PollyFallback", "message": "Fallback triggered"}
        )

        async with make_client(upstream) as client:
            result = await endpoint.invoke(client, FilterOptions(), SortingOptions())

        assert result.is_success is True
        assert result.response_body == "Fallback triggered"

    @pytest.mark.asyncio
    async def test_cached_per_keyword(self, endpoint):
        """Test a repeated call is served from cache, a new keyword is not."""
        upstream = json_upstream(MATCHES)

        async with make_client(upstream) as client:
            first = await endpoint.invoke(
                client, FilterOptions(sport_news_keyword="psg"), SortingOptions()
            )
            second = await endpoint.invoke(
                client, FilterOptions(sport_news_keyword="psg"), SortingOptions()
            )
            await endpoint.invoke(
                client, FilterOptions(sport_news_keyword="inter"), SortingOptions()
            )

        assert second == first
        assert upstream.call_count == 2

    @pytest.mark.asyncio
    async def test_null_team_name_renders_empty(self, endpoint):
        """Test a null team name neither fails the call nor blocks filtering."""
        upstream = json_upstream(
            {
                "matches": [
                    {
                        "utcDate": "2025-05-01T20:00:00Z",
                        "homeTeam": {"name": None},
                        "awayTeam": {"name": "Inter"},
                        "score": {"fullTime": {"home": 0, "away": 1}},
                    }
                ]
            }
        )

        async with make_client(upstream) as client:
            sorted_result = await endpoint.invoke(
                client, FilterOptions(), SortingOptions(sort_by=SortBy.NAME)
            )
            filtered = await endpoint.invoke(
                client, FilterOptions(sport_news_keyword="inter"), SortingOptions()
            )

        assert sorted_result.is_success is True
        assert "2025-05-01 -  0 : 1 Inter" in sorted_result.response_body
        assert "2025-05-01 -  0 : 1 Inter" in filtered.response_body
