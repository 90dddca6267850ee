from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Regime(str, Enum):
    AGGRESSIVE = "Aggressive"
    NEUTRAL = "Neutral"
    DEFENSIVE = "Defensive"


@dataclass(frozen=True)
class Allocation:
    base_pct: int
    solana_pct: int


class _WireModel(BaseModel):
    # Dashboard consumes camelCase keys (riskScore, cacheHit, ...).
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class MarketObservation(_WireModel):
    key: str
    slug: str
    question: str
    probability: float
    normalized_risk: float
    weight: float
    risk_contribution: float
    explanation: str
    status: Literal["active", "error"]


class RiskSummary(_WireModel):
    risk_score: int
    regime: Regime
    recommended_base_pct: int
    recommended_solana_pct: int
    explanations: list[str]
    markets: list[MarketObservation]
    timestamp: datetime
    cache_hit: bool = False
