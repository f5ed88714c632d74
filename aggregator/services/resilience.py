"""
ResiliencePipeline - Ordered chain of policies around the outbound transport.

Policies (outermost first in the default pipeline):
- FallbackPolicy: Substitutes a synthetic "unavailable" response when
  everything below it failed
- RetryPolicy: Retries transient failures with exponential backoff
- TimeoutPolicy: Bounds every single attempt

Each policy wraps "the next stage", an async callable taking an
httpx.Request and returning an httpx.Response, so any policy can be
exercised on its own against a stub stage.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Awaitable, Callable, Sequence

import httpx
from loguru import logger

from aggregator.services.errors import RequestTimeoutError

Stage = Callable[[httpx.Request], Awaitable[httpx.Response]]

FALLBACK_SOURCE = "PollyFallback"
FALLBACK_MESSAGE = "Service is currently unavailable. Please try again later."

TRANSIENT_STATUS_CODES = frozenset({408, 429})
TRANSIENT_ERRORS = (
    httpx.NetworkError,
    httpx.TimeoutException,
    httpx.RemoteProtocolError,
    RequestTimeoutError,
)


def is_transient_status(status_code: int) -> bool:
    """5xx, 408 Request Timeout and 429 Too Many Requests are worth retrying."""
    return status_code >= 500 or status_code in TRANSIENT_STATUS_CODES


class Policy(ABC):
    """A single resilience concern applied around the next stage."""

    @abstractmethod
    def wrap(self, next_stage: Stage) -> Stage:
        """Return a stage that applies this policy around next_stage."""
        ...


class TimeoutPolicy(Policy):
    """Cancels an attempt that runs longer than `timeout` seconds."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def wrap(self, next_stage: Stage) -> Stage:
        async def stage(request: httpx.Request) -> httpx.Response:
            try:
                return await asyncio.wait_for(next_stage(request), self.timeout)
            except asyncio.TimeoutError as e:
                raise RequestTimeoutError(request.url.host, self.timeout) from e

        return stage


class RetryPolicy(Policy):
    """
    Retries transient failures up to `max_retries` additional times.

    The delay before retry number n is backoff_base ** n seconds
    (2s, 4s, 8s with the defaults). Once retries are exhausted the last
    response is returned as-is, or the last error re-raised.
    """

    def __init__(
        self,
        max_retries: int = 3,
        backoff_base: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self._sleep = sleep

    def get_delay(self, attempt: int) -> float:
        """Seconds to wait before the given retry attempt (1-based)."""
        return self.backoff_base**attempt

    def wrap(self, next_stage: Stage) -> Stage:
        async def stage(request: httpx.Request) -> httpx.Response:
            attempt = 0
            while True:
                try:
                    response = await next_stage(request)
                except TRANSIENT_ERRORS as e:
                    if attempt >= self.max_retries:
                        logger.warning(
                            f"[Retry] {request.url.host}: giving up after "
                            f"{attempt + 1} attempts: {e}"
                        )
                        raise
                    reason = f"{type(e).__name__}: {e}"
                else:
                    if not is_transient_status(response.status_code):
                        return response
                    if attempt >= self.max_retries:
                        logger.warning(
                            f"[Retry] {request.url.host}: giving up after "
                            f"{attempt + 1} attempts: HTTP {response.status_code}"
                        )
                        return response
                    reason = f"HTTP {response.status_code}"
                    await response.aclose()

                attempt += 1
                delay = self.get_delay(attempt)
                logger.warning(
                    f"[Retry] {request.url.host} failed ({reason}), "
                    f"retry {attempt}/{self.max_retries} in {delay:.1f}s"
                )
                await self._sleep(delay)

        return stage


class FallbackPolicy(Policy):
    """
    Turns an unrecoverable failure into a degraded 200 response.

    The body carries `source: "PollyFallback"` so endpoint adapters can tell
    the synthetic response apart from real vendor data.
    """

    def __init__(self, message: str = FALLBACK_MESSAGE):
        self.message = message

    def build_response(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "message": self.message,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "source": FALLBACK_SOURCE,
            },
            request=request,
        )

    def wrap(self, next_stage: Stage) -> Stage:
        async def stage(request: httpx.Request) -> httpx.Response:
            try:
                response = await next_stage(request)
            except Exception as e:
                logger.warning(f"Fallback executed due to: {type(e).__name__}: {e}")
                return self.build_response(request)

            if is_transient_status(response.status_code):
                await response.aclose()
                logger.warning(
                    f"Fallback executed due to: HTTP {response.status_code}"
                )
                return self.build_response(request)

            return response

        return stage


class ResiliencePipeline:
    """
    Explicit ordered chain of policies, outermost first.

    Usage:
        pipeline = ResiliencePipeline.default()
        send = pipeline.build(transport.handle_async_request)
        response = await send(request)
    """

    def __init__(self, policies: Sequence[Policy]):
        self.policies = list(policies)

    @classmethod
    def default(
        cls,
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff_base: float = 2.0,
        fallback_enabled: bool = True,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> "ResiliencePipeline":
        """Fallback -> Retry -> Timeout, fallback optional."""
        policies: list[Policy] = []
        if fallback_enabled:
            policies.append(FallbackPolicy())
        policies.append(
            RetryPolicy(max_retries=max_retries, backoff_base=backoff_base, sleep=sleep)
        )
        policies.append(TimeoutPolicy(timeout=timeout))
        return cls(policies)

    def build(self, handler: Stage) -> Stage:
        """Wrap handler so the first policy ends up outermost."""
        stage = handler
        for policy in reversed(self.policies):
            stage = policy.wrap(stage)
        return stage


class ResilientTransport(httpx.AsyncBaseTransport):
    """
    httpx transport that sends every request through a ResiliencePipeline.

    The innermost stage reads the whole body, so body read errors and slow
    bodies are subject to the timeout, retry and fallback policies.
    """

    def __init__(
        self,
        pipeline: ResiliencePipeline,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._send = pipeline.build(self._send_buffered)

    async def _send_buffered(self, request: httpx.Request) -> httpx.Response:
        response = await self._transport.handle_async_request(request)
        try:
            await response.aread()
        except BaseException:
            await response.aclose()
            raise
        return response

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._send(request)

    async def aclose(self) -> None:
        await self._transport.aclose()
