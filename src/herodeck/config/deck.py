"""Optimization settings shared by the CLI, the API and the optimizer session."""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .tournament import DEFAULT_RULES


logger = logging.getLogger(__name__)

_BUCKET_CAP_ENV = "HERODECK_BUCKET_CAP"
_GREEDY_WINDOW_ENV = "HERODECK_GREEDY_WINDOW"

_BUCKET_CAP_DEFAULT = 5
_GREEDY_WINDOW_DEFAULT = 120


class ScoringAlgorithm(str, Enum):
    RECENT_6_WEEKS = "recent6weeks"
    RECENT_4_WEEKS = "recent4weeks"
    RECENT_6_EXCLUDE_1 = "recent6exclude1"
    RECENT_4_EXCLUDE_1 = "recent4exclude1"
    WEIGHTED = "weighted"
    CONSISTENCY_FLOOR = "consistencyFloor"
    CONSISTENCY_MEDIAN = "consistencyMedian"
    EXPONENTIAL_SMOOTHING = "exponentialSmoothing"

    @classmethod
    def resolve(cls, value: str | ScoringAlgorithm | None) -> "ScoringAlgorithm":
        """Map an algorithm id to a member, falling back to exponential smoothing."""

        if isinstance(value, cls):
            return value
        if value is None:
            return cls.EXPONENTIAL_SMOOTHING
        try:
            return cls(value)
        except ValueError:
            logger.debug("Unknown scoring algorithm %r; using exponential smoothing", value)
            return cls.EXPONENTIAL_SMOOTHING


DEFAULT_ALGORITHM = ScoringAlgorithm.EXPONENTIAL_SMOOTHING


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def default_bucket_cap() -> int:
    return _env_int(_BUCKET_CAP_ENV, _BUCKET_CAP_DEFAULT, min_value=1)


def default_greedy_window() -> int:
    return _env_int(_GREEDY_WINDOW_ENV, _GREEDY_WINDOW_DEFAULT, min_value=1)


class DeckConfig(BaseModel):
    """Caller-supplied configuration for a single optimization request.

    ``algorithm`` is kept as the raw id so that unknown ids survive a round trip
    through stored profiles; :attr:`scoring_algorithm` resolves it.
    """

    algorithm: str = Field(default=DEFAULT_ALGORITHM.value)
    score_overrides: Dict[str, float] = Field(default_factory=dict)
    target_count: int = Field(default=DEFAULT_RULES.card_count, ge=1)
    target_stars: int = Field(default=DEFAULT_RULES.star_cap, ge=1)
    bucket_cap: Optional[int] = Field(default=None, ge=1)
    greedy_window: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)

    @property
    def scoring_algorithm(self) -> ScoringAlgorithm:
        return ScoringAlgorithm.resolve(self.algorithm)

    @property
    def effective_bucket_cap(self) -> int:
        return self.bucket_cap if self.bucket_cap is not None else default_bucket_cap()

    @property
    def effective_greedy_window(self) -> int:
        return self.greedy_window if self.greedy_window is not None else default_greedy_window()

    def normalized_overrides(self) -> Dict[str, float]:
        return {key.strip().upper(): float(value) for key, value in self.score_overrides.items()}

    def fingerprint(self) -> str:
        """Identity of the settings that influence scores (algorithm and overrides)."""

        overrides = json.dumps(self.normalized_overrides(), sort_keys=True)
        return f"{self.algorithm}_{overrides}"
