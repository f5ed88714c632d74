"""
Test helpers: a mock upstream that counts requests, and clients wired
through the real resilience pipeline without real backoff delays.
"""

from typing import Any, Callable

import httpx

from aggregator.services.resilience import ResiliencePipeline, ResilientTransport


class SleepRecorder:
    """Stands in for asyncio.sleep and remembers requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class MockUpstream:
    """Callable for httpx.MockTransport that records every request."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def calls_to(self, host: str) -> int:
        return sum(1 for r in self.requests if r.url.host == host)


def json_upstream(payload: Any, status_code: int = 200) -> MockUpstream:
    """Upstream answering every request with the same JSON payload."""
    return MockUpstream(lambda request: httpx.Response(status_code, json=payload))


def status_upstream(status_code: int) -> MockUpstream:
    """Upstream answering every request with an empty body and a status."""
    return MockUpstream(lambda request: httpx.Response(status_code))


def make_client(
    upstream: MockUpstream,
    fallback_enabled: bool = True,
    sleep: SleepRecorder | None = None,
) -> httpx.AsyncClient:
    """AsyncClient sending through the default pipeline to a mock upstream."""
    pipeline = ResiliencePipeline.default(
        fallback_enabled=fallback_enabled,
        sleep=sleep or SleepRecorder(),
    )
    return httpx.AsyncClient(
        transport=ResilientTransport(pipeline, httpx.MockTransport(upstream))
    )


# Minimal valid payload per vendor host
PAYLOADS = {
    "api.openweathermap.org": {
        "weather": [{"description": "few clouds"}],
        "main": {"temp": 18.0},
    },
    "newsapi.org": {
        "articles": [
            {
                "title": "Bank earnings beat estimates",
                "description": "Profits up.",
                "publishedAt": "2025-05-01T08:00:00Z",
            }
        ]
    },
    "api.football-data.org": {
        "matches": [
            {
                "utcDate": "2025-05-01T20:00:00Z",
                "homeTeam": {"name": "TeamA"},
                "awayTeam": {"name": "TeamB"},
                "score": {"fullTime": {"home": 2, "away": 1}},
            }
        ]
    },
}


def route(request: httpx.Request) -> httpx.Response:
    """Answer each vendor host with its payload from PAYLOADS."""
    return httpx.Response(200, json=PAYLOADS[request.url.host])
