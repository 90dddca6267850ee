"""
Static risk configuration: which Polymarket markets feed the score, how much
each one weighs, and the regime bands and allocations derived from the score.

Weights are expected to sum to 1.0. They are never renormalized; see
``weights_are_normalized`` for the check the calculator reports on.
"""
import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .models import Allocation, Regime
from ..settings import settings

logger = logging.getLogger(__name__)


class MarketKind(str, Enum):
    BINARY = "binary"
    MULTI = "multi"


class RiskDirection(str, Enum):
    HIGHER_YES_IS_MORE_RISK = "higher_yes_is_more_risk"
    MONETARY_STRESS_FROM_CUTS = "monetary_stress_from_cuts"
    INVERSE_BULL_PROBABILITY = "inverse_bull_probability"


_DIRECTIONS_BY_KIND = {
    MarketKind.BINARY: {RiskDirection.HIGHER_YES_IS_MORE_RISK},
    MarketKind.MULTI: {
        RiskDirection.MONETARY_STRESS_FROM_CUTS,
        RiskDirection.INVERSE_BULL_PROBABILITY,
    },
}


class MarketConfigError(ValueError):
    pass


@dataclass(frozen=True)
class MarketConfig:
    key: str
    slug: str
    weight: float
    kind: MarketKind = MarketKind.BINARY
    risk_direction: RiskDirection = RiskDirection.HIGHER_YES_IS_MORE_RISK
    bull_threshold: float | None = None


DEFAULT_MARKETS: tuple[MarketConfig, ...] = (
    MarketConfig(
        key="us_recession_2026",
        slug="us-recession-by-end-of-2026",
        weight=0.25,
    ),
    MarketConfig(
        key="us_recession_2025",
        slug="us-recession-in-2025",
        weight=0.20,
    ),
    MarketConfig(
        key="fed_cuts_2025",
        slug="how-many-fed-rate-cuts-in-2025",
        weight=0.15,
        kind=MarketKind.MULTI,
        risk_direction=RiskDirection.MONETARY_STRESS_FROM_CUTS,
    ),
    MarketConfig(
        key="btc_2025_price",
        slug="what-price-will-bitcoin-hit-in-2025",
        weight=0.25,
        kind=MarketKind.MULTI,
        risk_direction=RiskDirection.INVERSE_BULL_PROBABILITY,
        bull_threshold=95000,
    ),
    MarketConfig(
        key="eth_2025_price",
        slug="what-price-will-ethereum-hit-in-2025",
        weight=0.15,
        kind=MarketKind.MULTI,
        risk_direction=RiskDirection.INVERSE_BULL_PROBABILITY,
        bull_threshold=5000,
    ),
)

# Upper bound (inclusive) of each band; anything above NEUTRAL_MAX_SCORE is Defensive.
AGGRESSIVE_MAX_SCORE = 30
NEUTRAL_MAX_SCORE = 60

REGIME_ALLOCATIONS: dict[Regime, Allocation] = {
    Regime.AGGRESSIVE: Allocation(base_pct=30, solana_pct=70),
    Regime.NEUTRAL: Allocation(base_pct=50, solana_pct=50),
    Regime.DEFENSIVE: Allocation(base_pct=70, solana_pct=30),
}

# Three or more expected cuts means no monetary stress.
FED_CUTS_SATURATION = 3.0

WEIGHT_TOLERANCE = 1e-6


def weight_total(markets) -> float:
    return sum(market.weight for market in markets)


def weights_are_normalized(markets, tolerance: float = WEIGHT_TOLERANCE) -> bool:
    return abs(weight_total(markets) - 1.0) <= tolerance


def load_markets(path: str | None = None) -> tuple[MarketConfig, ...]:
    """
    Market list from RISK_MARKETS_FILE (a JSON array of market objects) or the
    built-in defaults when no file is configured.
    """
    path = settings.RISK_MARKETS_FILE if path is None else path
    if not path:
        return DEFAULT_MARKETS

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise MarketConfigError(f"cannot read markets file {path}") from exc
    except json.JSONDecodeError as exc:
        raise MarketConfigError(f"markets file {path} is not valid json") from exc

    if not isinstance(raw, list) or not raw:
        raise MarketConfigError(f"markets file {path} must contain a non-empty list")

    markets = tuple(_parse_market(item, index) for index, item in enumerate(raw))
    keys = [market.key for market in markets]
    if len(set(keys)) != len(keys):
        raise MarketConfigError(f"markets file {path} has duplicate keys")

    logger.info(
        "risk_markets_loaded path=%s count=%s weight_total=%.4f",
        path,
        len(markets),
        weight_total(markets),
    )
    return markets


def _parse_market(item, index: int) -> MarketConfig:
    if not isinstance(item, dict):
        raise MarketConfigError(f"market #{index} must be an object")
    key = str(item.get("key") or "").strip()
    slug = str(item.get("slug") or "").strip()
    if not key or not slug:
        raise MarketConfigError(f"market #{index} needs both key and slug")

    try:
        weight = float(item.get("weight"))
    except (TypeError, ValueError) as exc:
        raise MarketConfigError(f"market {key} has a non-numeric weight") from exc
    if not math.isfinite(weight):
        raise MarketConfigError(f"market {key} has a non-finite weight")
    if weight < 0:
        raise MarketConfigError(f"market {key} has a negative weight")

    try:
        kind = MarketKind(item.get("type") or item.get("kind") or MarketKind.BINARY.value)
        direction = RiskDirection(
            item.get("riskDirection")
            or item.get("risk_direction")
            or RiskDirection.HIGHER_YES_IS_MORE_RISK.value
        )
    except ValueError as exc:
        raise MarketConfigError(f"market {key}: {exc}") from exc

    if direction not in _DIRECTIONS_BY_KIND[kind]:
        raise MarketConfigError(
            f"market {key}: direction {direction.value} is not valid for {kind.value} markets"
        )

    bull_threshold = item.get("bullThreshold", item.get("bull_threshold"))
    if direction is RiskDirection.INVERSE_BULL_PROBABILITY:
        try:
            bull_threshold = float(bull_threshold)
        except (TypeError, ValueError) as exc:
            raise MarketConfigError(f"market {key} needs a numeric bullThreshold") from exc
    else:
        bull_threshold = None

    return MarketConfig(
        key=key,
        slug=slug,
        weight=weight,
        kind=kind,
        risk_direction=direction,
        bull_threshold=bull_threshold,
    )
