import argparse
import asyncio
import json

from treasury_risk.logging import configure_logging
from treasury_risk.polymarket.client import PolymarketClient
from treasury_risk.risk.calculator import calculate_risk_summary
from treasury_risk.risk.config import load_markets


def _print_table(summary) -> None:
    print(f"Risk score: {summary.risk_score} ({summary.regime.value})")
    print(
        f"Recommended split: Base {summary.recommended_base_pct}% / "
        f"Solana {summary.recommended_solana_pct}%"
    )
    for obs in summary.markets:
        print(
            f"  [{obs.status:6}] {obs.key:20} w={obs.weight:.2f} "
            f"p={obs.probability:.3f} risk={obs.normalized_risk:.3f} "
            f"contrib={obs.risk_contribution:.3f}"
        )
    for line in summary.explanations:
        print(f"  - {line}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute one risk summary from live Polymarket data.")
    parser.add_argument("--markets-file", help="JSON markets file (default: RISK_MARKETS_FILE or built-in list)")
    parser.add_argument("--gamma-url", help="Override the Gamma API base URL")
    parser.add_argument("--json", action="store_true", help="Print the API JSON payload instead of a table")
    args = parser.parse_args()

    configure_logging()
    markets = load_markets(args.markets_file)
    client = PolymarketClient(base_url=args.gamma_url)
    summary = asyncio.run(calculate_risk_summary(markets, client))

    if args.json:
        print(json.dumps(summary.model_dump(mode="json", by_alias=True), indent=2))
    else:
        _print_table(summary)


if __name__ == "__main__":
    main()
