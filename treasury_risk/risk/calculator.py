import asyncio
import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from .config import (
    AGGRESSIVE_MAX_SCORE,
    NEUTRAL_MAX_SCORE,
    REGIME_ALLOCATIONS,
    MarketConfig,
    RiskDirection,
    weight_total,
    weights_are_normalized,
)
from .fetcher import Defaulted, Observed, ProbabilityReading, fetch_probability
from .models import Allocation, MarketObservation, Regime, RiskSummary
from ..polymarket.client import PolymarketClient

logger = logging.getLogger(__name__)


def classify_regime(score: int) -> Regime:
    if score <= AGGRESSIVE_MAX_SCORE:
        return Regime.AGGRESSIVE
    if score <= NEUTRAL_MAX_SCORE:
        return Regime.NEUTRAL
    return Regime.DEFENSIVE


def allocation_for(regime: Regime) -> Allocation:
    return REGIME_ALLOCATIONS[regime]


def score_from_contributions(contributions: Iterable[float]) -> int:
    """
    Sum of weighted contributions scaled to 0-100, halves rounded up.

    The sum is first rounded to 6 places so float noise like 71.49999999999999
    still lands on 72.
    """
    raw = sum(contributions) * 100
    return int(Decimal(str(round(raw, 6))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalized_risk(config: MarketConfig, reading: ProbabilityReading) -> float:
    if isinstance(reading, Defaulted):
        return reading.probability
    if config.risk_direction is RiskDirection.HIGHER_YES_IS_MORE_RISK:
        return reading.probability
    # Fewer expected cuts or less bull mass both mean more risk.
    return 1.0 - reading.probability


def observe_market(config: MarketConfig, reading: ProbabilityReading) -> MarketObservation:
    risk = normalized_risk(config, reading)
    return MarketObservation(
        key=config.key,
        slug=config.slug,
        question=reading.question,
        probability=reading.probability,
        normalized_risk=risk,
        weight=config.weight,
        risk_contribution=risk * config.weight,
        explanation=_explain(config, reading, risk),
        status="active" if isinstance(reading, Observed) else "error",
    )


def _explain(config: MarketConfig, reading: ProbabilityReading, risk: float) -> str:
    if isinstance(reading, Defaulted):
        return f"{config.slug}: {reading.reason}, using neutral (50%)"
    if config.risk_direction is RiskDirection.MONETARY_STRESS_FROM_CUTS:
        return (
            f"Fed rate cuts: Expected {reading.expected_cuts or 0.0:.2f} cuts -> "
            f"{risk * 100:.1f}% monetary stress"
        )
    if config.risk_direction is RiskDirection.INVERSE_BULL_PROBABILITY:
        return (
            f"{reading.question}: {reading.probability * 100:.1f}% bull probability -> "
            f"{risk * 100:.1f}% risk contribution"
        )
    return (
        f"{reading.question}: {reading.probability * 100:.1f}% probability -> "
        f"{risk * 100:.1f}% risk contribution"
    )


async def calculate_risk_summary(
    markets: Sequence[MarketConfig],
    client: PolymarketClient,
    *,
    now: datetime | None = None,
) -> RiskSummary:
    """
    Fetch every configured market concurrently and fold them into one summary.

    Per-market failures are already absorbed by fetch_probability, so this only
    raises on unexpected errors; the caller decides what to serve then.
    """
    readings = await asyncio.gather(*(fetch_probability(client, config) for config in markets))
    observations = [observe_market(config, reading) for config, reading in zip(markets, readings)]

    score = score_from_contributions(obs.risk_contribution for obs in observations)
    regime = classify_regime(score)
    allocation = allocation_for(regime)

    explanations = [obs.explanation for obs in observations]
    if not weights_are_normalized(markets):
        total = weight_total(markets)
        logger.warning("risk_weights_not_normalized weight_total=%.4f", total)
        explanations.append(
            f"Warning: configured market weights sum to {total:.4f}, not 1.0; score is not normalized."
        )

    defaulted = sum(1 for obs in observations if obs.status == "error")
    logger.info(
        "risk_summary_computed score=%s regime=%s markets=%s defaulted=%s",
        score,
        regime.value,
        len(observations),
        defaulted,
    )
    return RiskSummary(
        risk_score=score,
        regime=regime,
        recommended_base_pct=allocation.base_pct,
        recommended_solana_pct=allocation.solana_pct,
        explanations=explanations,
        markets=observations,
        timestamp=now or datetime.now(timezone.utc),
        cache_hit=False,
    )
