"""Persist and load CLI scoring profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from herodeck.config import DEFAULT_ALGORITHM


@dataclass
class OverrideProfile:
    algorithm: str = DEFAULT_ALGORITHM.value
    score_overrides: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "OverrideProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            algorithm=data.get("algorithm", DEFAULT_ALGORITHM.value),
            score_overrides={key.upper(): float(value) for key, value in data.get("score_overrides", {}).items()},
        )

    def save(self, path: Path) -> None:
        payload = {
            "algorithm": self.algorithm,
            "score_overrides": self.score_overrides,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
