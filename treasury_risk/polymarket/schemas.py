import json
import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _parse_price(value) -> float | None:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price):
        return None
    return price


class GammaMarket(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    slug: str | None = None
    question: str | None = None
    # Gamma ships outcomePrices as a JSON-string array: '["0.12","0.88"]'
    outcome_prices: list[float | None] = Field(default_factory=list, alias="outcomePrices")
    active: bool | None = None
    closed: bool | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        if value is None:
            return None
        return str(value)

    @field_validator("outcome_prices", mode="before")
    @classmethod
    def _parse_outcome_prices(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return []
        if not isinstance(value, list):
            return []
        return [_parse_price(item) for item in value]

    @property
    def yes_price(self) -> float | None:
        """First outcome price, which Gamma lists as "Yes" for binary markets."""
        if not self.outcome_prices:
            return None
        return self.outcome_prices[0]


class GammaEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    slug: str | None = None
    title: str | None = None
    markets: list[GammaMarket] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        if value is None:
            return None
        return str(value)

    @field_validator("markets", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or []
