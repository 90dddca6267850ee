import logging
from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .schemas import GammaEvent, GammaMarket
from ..http_logging import UpstreamTimer, log_upstream_response
from ..settings import settings

logger = logging.getLogger(__name__)


class PolymarketError(Exception):
    """Gamma API call failed or returned something we cannot use."""


class PolymarketClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        attempts: int | None = None,
    ):
        self.base_url = (base_url or settings.POLYMARKET_GAMMA_URL).rstrip("/")
        self.timeout_seconds = (
            settings.POLY_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        )
        self.attempts = max(int(settings.POLY_FETCH_ATTEMPTS if attempts is None else attempts), 1)

    async def fetch_market_by_slug(self, slug: str) -> GammaMarket | None:
        """
        GET /markets?slug=<slug>. Gamma answers with an array; the first element
        is the match. Returns None when the array is empty.
        """
        first = await self._fetch_first("markets", slug)
        if first is None:
            return None
        try:
            return GammaMarket.model_validate(first)
        except ValidationError as exc:
            raise PolymarketError(f"malformed market payload slug={slug}") from exc

    async def fetch_event_by_slug(self, slug: str) -> GammaEvent | None:
        """GET /events?slug=<slug>; events carry their outcome markets in 'markets'."""
        first = await self._fetch_first("events", slug)
        if first is None:
            return None
        try:
            return GammaEvent.model_validate(first)
        except ValidationError as exc:
            raise PolymarketError(f"malformed event payload slug={slug}") from exc

    async def _fetch_first(self, resource: str, slug: str) -> dict[str, Any] | None:
        url = f"{self.base_url}/{resource}"
        params = {"slug": slug}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                data = await self._get_json(client, url, params)
        except httpx.HTTPStatusError as exc:
            raise PolymarketError(
                f"gamma status={exc.response.status_code} resource={resource} slug={slug}"
            ) from exc
        except httpx.HTTPError as exc:
            raise PolymarketError(
                f"gamma request failed resource={resource} slug={slug}: {exc.__class__.__name__}"
            ) from exc
        except ValueError as exc:
            raise PolymarketError(f"gamma returned invalid json resource={resource} slug={slug}") from exc

        if not isinstance(data, list):
            raise PolymarketError(f"gamma returned non-list payload resource={resource} slug={slug}")
        if not data:
            logger.info("polymarket_slug_not_found resource=%s slug=%s", resource, slug)
            return None
        first = data[0]
        if not isinstance(first, dict):
            raise PolymarketError(f"gamma returned non-object item resource={resource} slug={slug}")
        return first

    async def _get_json(self, client: httpx.AsyncClient, url: str, params: dict[str, str]) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                timer = UpstreamTimer()
                response = await client.get(url, params=params, headers={"Accept": "application/json"})
                log_upstream_response("polymarket", response, timer.elapsed())
                response.raise_for_status()
                return response.json()
