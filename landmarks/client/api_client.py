# HTTP client for the landmark proxy, used by the map client.
# Retries failed calls twice (exponential backoff, or the server's Retry-After when throttled),
# then surfaces the error.

import asyncio
import random
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

import httpx
import pydantic
import structlog

from landmarks.client.cache import TTLCache
from landmarks.core.exceptions import (
    LandmarkError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    UpstreamError,
    ValidationError,
)
from landmarks.models.dto import Landmark, LandmarkDetail, SearchRequest, SearchResponse

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _retry_after_seconds(*candidates: Any) -> int:
    """First candidate that is a whole number of seconds; HTTP-date headers and junk fall back to 1."""
    for value in candidates:
        try:
            seconds = int(value)
        except (TypeError, ValueError):
            continue
        if seconds > 0:
            return seconds
    return 1


class LandmarkApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: Optional[httpx.AsyncClient] = None,
        max_retries: int = 2,
        initial_backoff: float = 0.5,
        detail_ttl: float = 300,
        timeout: float = 10.0,
    ):
        self.http_client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._owns_client = http_client is None
        self.max_retries = max_retries
        self.initial_backoff = initial_backoff
        self.detail_cache: TTLCache[LandmarkDetail] = TTLCache(ttl_seconds=detail_ttl)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def search(self, request: SearchRequest) -> List[Landmark]:
        params = {"lat": request.lat, "lon": request.lon, "radius": request.radius}

        async def call() -> List[Landmark]:
            data = await self._get("/api/landmarks/search", params=params)
            return self._parse(SearchResponse, data).landmarks

        return await self._with_retries(call, "search")

    async def detail(self, pageid: int) -> LandmarkDetail:
        cached = self.detail_cache.get(pageid)
        if cached is not None:
            return cached

        async def call() -> LandmarkDetail:
            data = await self._get(f"/api/landmarks/{pageid}")
            return self._parse(LandmarkDetail, data)

        detail = await self._with_retries(call, "detail")
        self.detail_cache.set(pageid, detail)
        return detail

    async def _with_retries(self, call: Callable[[], Awaitable[T]], operation: str) -> T:
        for attempt in range(self.max_retries + 1):
            try:
                return await call()
            except LandmarkError as e:
                if attempt >= self.max_retries:
                    logger.error("landmark_api_gave_up", operation=operation, attempts=attempt + 1, error=e.message)
                    raise
                if isinstance(e, RateLimitError):
                    # Throttled: wait out the window the server asked for
                    wait_time = float(e.retry_after)
                else:
                    wait_time = self.initial_backoff * (2 ** attempt) + random.uniform(0, 0.1)
                logger.warning(
                    "landmark_api_retry",
                    operation=operation,
                    attempt=attempt + 1,
                    wait_seconds=round(wait_time, 2),
                    error=e.message,
                )
                await asyncio.sleep(wait_time)
        raise AssertionError("unreachable")

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self.http_client.get(path, params=params)
        except httpx.HTTPError as e:
            raise NetworkError(f"Could not reach landmark API: {type(e).__name__}") from e

        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise UpstreamError("Landmark API returned invalid JSON", upstream_status=response.status_code) from e
        raise self._error_for(response)

    @staticmethod
    def _parse(model: Any, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            raise UpstreamError(f"Landmark API returned a malformed {model.__name__}") from e

    @staticmethod
    def _error_for(response: httpx.Response) -> LandmarkError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        code = response.status_code
        if code == 400:
            return ValidationError(body.get("details") or [], error=body.get("error"))
        if code == 404:
            return NotFoundError(body.get("error"))
        if code == 429:
            retry_after = _retry_after_seconds(body.get("retryAfter"), response.headers.get("Retry-After"))
            return RateLimitError(retry_after=retry_after, message=body.get("message"))
        return UpstreamError(
            body.get("message") or body.get("error") or f"Landmark API error: {code}",
            upstream_status=code,
        )
