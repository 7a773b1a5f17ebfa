"""Deck-size rules for supported tournament formats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable


@dataclass(frozen=True)
class TournamentRules:
    key: str
    card_count: int
    star_cap: int
    description: str = ""


_TOURNAMENT_RULES: Dict[str, TournamentRules] = {
    "MAIN": TournamentRules(
        key="MAIN",
        card_count=5,
        star_cap=19,
        description="Weekly main tournament, five cards with a hard 19-star cap",
    ),
}


def iter_rules() -> Iterable[TournamentRules]:
    """Return an iterator of all configured rule sets."""

    return _TOURNAMENT_RULES.values()


def get_rules(key: str) -> TournamentRules:
    """Fetch rules for a tournament key, raising KeyError if missing."""

    normalized = key.strip().upper()
    if normalized not in _TOURNAMENT_RULES:
        raise KeyError(f"No tournament rules configured for {key!r}")
    return _TOURNAMENT_RULES[normalized]


DEFAULT_RULES = _TOURNAMENT_RULES["MAIN"]
