"""Turn owned card copies into the per-copy pool the optimizer selects from."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from herodeck.ingest import HeroRecord
from herodeck.models import CardRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OwnedCard:
    card_id: str
    hero_key: str


def load_portfolio_csv(path: Path) -> List[OwnedCard]:
    """Read ``card_id,hero_key`` rows; rows missing either field are dropped."""

    owned: List[OwnedCard] = []
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            card_id = (row.get("card_id") or "").strip()
            hero_key = (row.get("hero_key") or "").strip().upper()
            if not card_id or not hero_key:
                logger.warning("Portfolio row missing card_id or hero_key: %s", row)
                continue
            owned.append(OwnedCard(card_id=card_id, hero_key=hero_key))
    return owned


def expand_portfolio(heroes: Sequence[HeroRecord], owned: Iterable[OwnedCard]) -> List[CardRecord]:
    """Create one card per owned copy, taking star costs from the hero catalog.

    With no owned cards the whole catalog is used, one card per hero keyed by
    its hero key.
    """

    owned = list(owned)
    if not owned:
        logger.info("No portfolio cards available, using all %s heroes", len(heroes))
        catalog: Dict[str, CardRecord] = {}
        for hero in heroes:
            if hero.hero_key in catalog:
                logger.warning("Hero %s listed more than once; keeping the first entry", hero.hero_key)
                continue
            catalog[hero.hero_key] = CardRecord(
                card_id=hero.hero_key,
                hero_key=hero.hero_key,
                name=hero.name or hero.handle,
                stars=hero.stars,
            )
        return list(catalog.values())

    by_hero: Dict[str, List[OwnedCard]] = {}
    for owned_card in owned:
        by_hero.setdefault(owned_card.hero_key.upper(), []).append(owned_card)

    cards: List[CardRecord] = []
    seen_ids: set[str] = set()
    for hero in heroes:
        for owned_card in by_hero.get(hero.hero_key, []):
            if owned_card.card_id in seen_ids:
                continue
            seen_ids.add(owned_card.card_id)
            cards.append(
                CardRecord(
                    card_id=owned_card.card_id,
                    hero_key=hero.hero_key,
                    name=hero.name or hero.handle,
                    stars=hero.stars,
                )
            )

    known = {hero.hero_key for hero in heroes}
    unknown = sorted(set(by_hero) - known)
    if unknown:
        logger.warning("Portfolio heroes without feed history: %s", ", ".join(unknown[:5]))
    logger.info(
        "Filtered: %s heroes -> %s portfolio cards (one per owned copy)",
        len(heroes),
        len(cards),
    )
    return cards
