"""Command-line interface for building a deck from the hero feed."""

from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from herodeck.config import DeckConfig, ScoringAlgorithm, get_rules
from herodeck.config_loader import OverrideProfile
from herodeck.ingest import DEFAULT_FEED_URL, fetch_feed, load_feed_csv
from herodeck.optimizer import DeckOptimizer
from herodeck.pool import expand_portfolio, load_portfolio_csv


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the highest projected deck from owned hero cards")
    parser.add_argument("feed", type=Path, nargs="?", help="Path to the hero feed CSV", default=None)
    parser.add_argument(
        "--feed-url",
        nargs="?",
        const=DEFAULT_FEED_URL,
        default=None,
        help=f"Download the feed instead of reading a file (bare flag uses {DEFAULT_FEED_URL})",
    )
    parser.add_argument("--portfolio", type=Path, default=None, help="Owned cards CSV (card_id,hero_key)")
    parser.add_argument(
        "--algorithm",
        choices=[algorithm.value for algorithm in ScoringAlgorithm],
        default=None,
        help="Scoring algorithm (default exponentialSmoothing)",
    )
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        help="Flat score override for a hero (e.g., 0XMAKESY=300)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load algorithm and overrides JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save algorithm and overrides JSON", default=None)
    parser.add_argument("--tournament", default="MAIN", help="Tournament rules key")
    parser.add_argument("--cards", type=int, default=None, help="Number of cards (defaults to tournament rules)")
    parser.add_argument("--stars", type=int, default=None, help="Star cap (defaults to tournament rules)")
    parser.add_argument("--bucket-cap", type=int, default=None, help="Cards kept per star bucket before search")
    parser.add_argument("--output", type=Path, default=Path("deck.csv"), help="Output CSV path")
    parser.add_argument(
        "--scores-output",
        type=Path,
        default=None,
        help="Optional path to write per-hero projected scores JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log optimizer progress")
    return parser.parse_args(argv)


def _parse_overrides(entries: list[str]) -> dict[str, float]:
    overrides: dict[str, float] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid override entry '{entry}', expected HERO=SCORE")
        key, value = entry.split("=", 1)
        try:
            overrides[key.strip().upper()] = float(value)
        except ValueError:
            raise ValueError(f"Override score for {key.strip()!r} is not numeric: {value!r}") from None
    return overrides


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if args.feed is None and args.feed_url is None:
        raise SystemExit("a feed CSV path or --feed-url is required")

    try:
        overrides = _parse_overrides(args.override)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    profile = OverrideProfile()
    if args.load_profile:
        profile = OverrideProfile.load(args.load_profile)
    algorithm = args.algorithm or profile.algorithm
    overrides = profile.score_overrides | overrides

    if args.save_profile:
        OverrideProfile(algorithm, overrides).save(args.save_profile)
        print(f"Saved scoring profile to {args.save_profile}")

    try:
        rules = get_rules(args.tournament)
    except KeyError as exc:
        raise SystemExit(str(exc)) from exc

    try:
        config = DeckConfig(
            algorithm=algorithm,
            score_overrides=overrides,
            target_count=args.cards if args.cards is not None else rules.card_count,
            target_stars=args.stars if args.stars is not None else rules.star_cap,
            bucket_cap=args.bucket_cap,
        )
    except ValidationError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    if args.feed is not None:
        snapshot, report = load_feed_csv(args.feed)
    else:
        snapshot, report = fetch_feed(args.feed_url)
    print(f"Loaded {report.processed_rows} heroes from feed ({report.skipped_rows} rows skipped)")

    owned = load_portfolio_csv(args.portfolio) if args.portfolio else []
    cards = expand_portfolio(snapshot.heroes, owned)
    print(f"{len(cards)} cards available for selection")

    optimizer = DeckOptimizer(snapshot.history, cards=cards)

    if args.scores_output:
        scores = optimizer.estimator(config).score_catalog()
        args.scores_output.write_text(json.dumps(scores, indent=2, sort_keys=True), encoding="utf-8")
        print(f"Wrote {len(scores)} projected scores to {args.scores_output}")

    outcome = optimizer.build_optimal_selection(config)
    if not outcome.success:
        print(f"Could not build deck: {outcome.reason}")
        return 1

    with args.output.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["slot", "card_id", "hero_key", "name", "stars", "expected_score", "score_per_star"])
        for idx, card in enumerate(outcome.cards, start=1):
            writer.writerow([
                idx,
                card.card_id,
                card.hero_key,
                card.card.name,
                card.stars,
                f"{card.score:.2f}",
                f"{card.efficiency:.2f}",
            ])

    print(
        f"Deck: {outcome.total_stars}/{outcome.target_stars} stars, "
        f"expected score {outcome.total_score:.0f} ({outcome.strategy})"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
