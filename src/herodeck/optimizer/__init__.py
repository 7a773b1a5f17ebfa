"""Deck optimizer: candidate ranking, combination search and result validation."""

from .cache import CandidateCache, ScoreCache
from .ranking import rank_and_prune, score_and_rank
from .result import CapViolation, DeckFailure, DeckOutcome, DeckSelection, assemble_result
from .service import DeckOptimizer, build_optimal_selection
from .solver import SolverResult, find_optimal_combination, greedy_fill, solve

__all__ = [
    "CandidateCache",
    "CapViolation",
    "DeckFailure",
    "DeckOptimizer",
    "DeckOutcome",
    "DeckSelection",
    "ScoreCache",
    "SolverResult",
    "assemble_result",
    "build_optimal_selection",
    "find_optimal_combination",
    "greedy_fill",
    "rank_and_prune",
    "score_and_rank",
    "solve",
]
