import logging
from dataclasses import dataclass

from .config import FED_CUTS_SATURATION, MarketConfig, MarketKind, RiskDirection
from ..polymarket.client import PolymarketClient, PolymarketError
from ..polymarket.outcomes import NEUTRAL_PROBABILITY, bull_probability, expected_fed_cuts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Observed:
    """A reading backed by live market data."""

    probability: float
    question: str
    expected_cuts: float | None = None


@dataclass(frozen=True)
class Defaulted:
    """No usable data; the market counts as neutral."""

    reason: str
    question: str
    probability: float = NEUTRAL_PROBABILITY


ProbabilityReading = Observed | Defaulted


async def fetch_probability(client: PolymarketClient, config: MarketConfig) -> ProbabilityReading:
    """
    Read one configured market. Never raises: any failure becomes Defaulted so
    a single bad market cannot sink the whole score.
    """
    try:
        if config.kind is MarketKind.BINARY:
            return await _read_binary(client, config)
        return await _read_multi(client, config)
    except PolymarketError as exc:
        logger.warning("risk_market_defaulted slug=%s reason=%s", config.slug, exc)
        return Defaulted(reason="Error fetching data", question=config.slug)
    except Exception:
        logger.exception("risk_market_failed slug=%s", config.slug)
        return Defaulted(reason="Error fetching data", question=config.slug)


async def _read_binary(client: PolymarketClient, config: MarketConfig) -> ProbabilityReading:
    market = await client.fetch_market_by_slug(config.slug)
    if market is None:
        logger.warning("risk_market_defaulted slug=%s reason=unavailable", config.slug)
        return Defaulted(reason="Market data unavailable", question=config.slug)

    question = (market.question or "").strip() or config.slug
    yes_price = market.yes_price
    if yes_price is None:
        logger.warning("risk_market_defaulted slug=%s reason=missing_outcome_prices", config.slug)
        return Defaulted(reason="Market prices unavailable", question=question)
    return Observed(probability=_clamp01(yes_price), question=question)


async def _read_multi(client: PolymarketClient, config: MarketConfig) -> ProbabilityReading:
    event = await client.fetch_event_by_slug(config.slug)
    if event is None:
        logger.warning("risk_market_defaulted slug=%s reason=unavailable", config.slug)
        return Defaulted(reason="Event data unavailable", question=config.slug)

    question = (event.title or "").strip() or config.slug
    if config.risk_direction is RiskDirection.MONETARY_STRESS_FROM_CUTS:
        cuts = expected_fed_cuts(event)
        return Observed(
            probability=_clamp01(cuts / FED_CUTS_SATURATION),
            question=question,
            expected_cuts=cuts,
        )
    bull = bull_probability(event, config.bull_threshold or 0.0)
    return Observed(probability=bull, question=question)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))
