import re

from .schemas import GammaEvent

NEUTRAL_PROBABILITY = 0.5

_CUTS_RE = re.compile(r"(\d+)\+?\s*cut")
_PRICE_RE = re.compile(r"\$?([\d,]+)(?:k|\+|\?|$)", re.IGNORECASE)


def expected_fed_cuts(event: GammaEvent) -> float:
    """
    Expected number of rate cuts from a "how many cuts" event.

    Each outcome market question names a count ("0 cuts", "1 cut", "3+ cuts");
    its Yes price is the probability of that count. When the prices do not sum
    to 1 the expectation is renormalized by their total.
    """
    expected = 0.0
    total_prob = 0.0
    for market in event.markets:
        question = (market.question or "").lower()
        match = _CUTS_RE.search(question)
        if not match:
            continue
        prob = market.yes_price if market.outcome_prices else 0.0
        if prob is None:
            continue
        expected += int(match.group(1)) * prob
        total_prob += prob

    if total_prob > 0 and total_prob != 1:
        expected = expected / total_prob
    return expected


def bull_probability(event: GammaEvent, threshold_price: float) -> float:
    """
    Probability mass on price outcomes at or above threshold_price.

    Outcome questions look like "$100,000?", "$95,000+" or "95k".
    """
    if not event.markets:
        return NEUTRAL_PROBABILITY

    bull = 0.0
    for market in event.markets:
        question = (market.question or "").lower()
        price = _question_price(question)
        if price is None or price < threshold_price:
            continue
        prob = market.yes_price if market.outcome_prices else 0.0
        if prob is not None:
            bull += prob

    return min(max(bull, 0.0), 1.0)


def _question_price(question: str) -> float | None:
    match = _PRICE_RE.search(question)
    if not match:
        return None
    digits = match.group(1).replace(",", "")
    if not digits:
        return None
    price = float(digits)
    if "k" in question and price < 1000:
        price *= 1000
    return price
