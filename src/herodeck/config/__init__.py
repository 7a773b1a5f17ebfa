"""Configuration helpers for tournament rules and optimization settings."""

from .deck import DEFAULT_ALGORITHM, DeckConfig, ScoringAlgorithm
from .tournament import DEFAULT_RULES, TournamentRules, get_rules, iter_rules

__all__ = [
    "DEFAULT_ALGORITHM",
    "DEFAULT_RULES",
    "DeckConfig",
    "ScoringAlgorithm",
    "TournamentRules",
    "get_rules",
    "iter_rules",
]
