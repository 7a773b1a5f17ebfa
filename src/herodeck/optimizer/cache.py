"""Session-owned memoization for projected scores and ranked candidate lists."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from herodeck.models import ScoredCard


logger = logging.getLogger(__name__)


class ScoreCache:
    """Projected score per (hero key, algorithm id)."""

    def __init__(self) -> None:
        self._scores: Dict[Tuple[str, str], float] = {}
        self.hits = 0
        self.misses = 0

    def get(self, hero_key: str, algorithm: str) -> Optional[float]:
        score = self._scores.get((hero_key, algorithm))
        if score is None:
            self.misses += 1
        else:
            self.hits += 1
        return score

    def put(self, hero_key: str, algorithm: str, score: float) -> None:
        self._scores[(hero_key, algorithm)] = score

    def invalidate(self) -> None:
        if self._scores:
            logger.debug("Clearing %s cached scores", len(self._scores))
        self._scores.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._scores)


class CandidateCache:
    """Full efficiency-sorted candidate list for one configuration fingerprint.

    A cached list is only reused when both the fingerprint and the pool size
    match the request.
    """

    def __init__(self) -> None:
        self._fingerprint: Optional[str] = None
        self._pool_size: Optional[int] = None
        self._candidates: Optional[List[ScoredCard]] = None

    @property
    def fingerprint(self) -> Optional[str]:
        return self._fingerprint

    def lookup(self, fingerprint: str, pool_size: int) -> Optional[List[ScoredCard]]:
        if self._candidates is None:
            return None
        if fingerprint != self._fingerprint or pool_size != self._pool_size:
            return None
        return list(self._candidates)

    def store(self, fingerprint: str, pool_size: int, candidates: Sequence[ScoredCard]) -> None:
        self._fingerprint = fingerprint
        self._pool_size = pool_size
        self._candidates = list(candidates)

    def invalidate(self) -> None:
        self._fingerprint = None
        self._pool_size = None
        self._candidates = None

    def __bool__(self) -> bool:
        return self._candidates is not None
