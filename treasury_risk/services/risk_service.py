import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Sequence

from ..polymarket.client import PolymarketClient
from ..risk.cache import RiskSummaryCache
from ..risk.calculator import allocation_for, calculate_risk_summary
from ..risk.config import MarketConfig, load_markets
from ..risk.models import Regime, RiskSummary
from ..settings import settings

logger = logging.getLogger(__name__)

STALE_WARNING = "Warning: Using stale cached data due to API error."
FALLBACK_EXPLANATION = "Error fetching market data. Using neutral fallback."

Calculator = Callable[[Sequence[MarketConfig], PolymarketClient], Awaitable[RiskSummary]]


@dataclass(frozen=True)
class SummaryResult:
    summary: RiskSummary
    # hit | miss | stale | fallback
    cache_status: str
    max_age: int


def neutral_fallback_summary(now: datetime | None = None) -> RiskSummary:
    allocation = allocation_for(Regime.NEUTRAL)
    return RiskSummary(
        risk_score=50,
        regime=Regime.NEUTRAL,
        recommended_base_pct=allocation.base_pct,
        recommended_solana_pct=allocation.solana_pct,
        explanations=[FALLBACK_EXPLANATION],
        markets=[],
        timestamp=now or datetime.now(timezone.utc),
        cache_hit=False,
    )


class RiskSummaryService:
    """
    Serves the current risk summary, preferring availability over freshness:
    a fresh cache entry, else a new computation, else the stale entry, else a
    neutral fallback. Callers never see an exception.
    """

    def __init__(
        self,
        markets: Sequence[MarketConfig],
        client: PolymarketClient,
        cache: RiskSummaryCache,
        calculator: Calculator = calculate_risk_summary,
    ) -> None:
        self.markets = tuple(markets)
        self.client = client
        self.cache = cache
        self._calculator = calculator

    async def get_summary(self) -> SummaryResult:
        entry = self.cache.get()
        now = self.cache.now()
        if entry is not None and self.cache.is_fresh(entry, now):
            return SummaryResult(
                summary=entry.summary.model_copy(update={"cache_hit": True}),
                cache_status="hit",
                max_age=self.cache.remaining_seconds(entry, now),
            )

        try:
            summary = await self._calculator(self.markets, self.client)
        except Exception:
            logger.exception("risk_summary_failed cached=%s", entry is not None)
            if entry is not None:
                stale = entry.summary.model_copy(
                    update={
                        "cache_hit": True,
                        "explanations": [*entry.summary.explanations, STALE_WARNING],
                    }
                )
                return SummaryResult(summary=stale, cache_status="stale", max_age=0)
            return SummaryResult(
                summary=neutral_fallback_summary(),
                cache_status="fallback",
                max_age=0,
            )

        summary = summary.model_copy(update={"cache_hit": False})
        self.cache.set(summary)
        return SummaryResult(
            summary=summary,
            cache_status="miss",
            max_age=int(self.cache.ttl_seconds),
        )


def build_risk_service(
    markets: Sequence[MarketConfig] | None = None,
    client: PolymarketClient | None = None,
    cache: RiskSummaryCache | None = None,
) -> RiskSummaryService:
    return RiskSummaryService(
        markets=load_markets() if markets is None else markets,
        client=client or PolymarketClient(),
        cache=cache or RiskSummaryCache(ttl_seconds=settings.RISK_CACHE_TTL_SECONDS),
    )
