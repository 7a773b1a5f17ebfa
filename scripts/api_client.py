"""Lightweight REST client for the herodeck API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx

from herodeck.ingest import load_feed_csv
from herodeck.pool import expand_portfolio, load_portfolio_csv


def build_overrides(raw: str) -> dict[str, float]:
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid overrides JSON: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the herodeck REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("feed", type=Path, help="Hero feed CSV")
    parser.add_argument("portfolio", type=Path, nargs="?", help="Owned cards CSV (card_id,hero_key)")
    parser.add_argument("--algorithm", default="exponentialSmoothing", help="Scoring algorithm id")
    parser.add_argument("--overrides", default="", help="JSON mapping of hero key to override score")
    parser.add_argument("--scores-only", action="store_true", help="Fetch projected scores without building a deck")
    args = parser.parse_args()

    snapshot, _ = load_feed_csv(args.feed)

    with httpx.Client(base_url=args.base_url) as client:
        if args.scores_only:
            resp = client.post("/scores", json={"history": snapshot.history, "algorithm": args.algorithm})
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        owned = load_portfolio_csv(args.portfolio) if args.portfolio else []
        cards = expand_portfolio(snapshot.heroes, owned)
        payload = {
            "cards": [card.model_dump() for card in cards],
            "history": snapshot.history,
            "algorithm": args.algorithm,
            "score_overrides": build_overrides(args.overrides),
        }
        resp = client.post("/decks", json=payload)
        if resp.status_code == 422:
            raise SystemExit(f"deck not built: {resp.json().get('detail')}")
        resp.raise_for_status()
        print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
