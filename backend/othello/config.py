# othello/config.py
import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional

from .eval import EvalWeights

logger = logging.getLogger(__name__)

# Hard cap on the search depth, whatever the difficulty asks for
MAX_SEARCH_DEPTH = 60


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @classmethod
    def parse(cls, value: "Difficulty | str") -> "Difficulty":
        if isinstance(value, Difficulty):
            return value
        return cls(value.strip().lower())


@dataclass(frozen=True)
class SearchLimits:
    max_depth: int
    max_time_ms: Optional[int] = None  # None means depth-only
    max_nodes: Optional[int] = None
    use_ordering: bool = True
    endgame_empties: int = 0  # solve exactly when this few squares are left
    weights: EvalWeights = field(default_factory=EvalWeights)


# Beginners play a greedy one-ply game on raw disc count and position
BEGINNER_WEIGHTS = EvalWeights(discs=10.0, mobility=0.0, psqt=1.0, frontier=0.0, corners=0.0, corner_closeness=0.0)

DIFFICULTIES: Dict[Difficulty, SearchLimits] = {
    Difficulty.BEGINNER: SearchLimits(max_depth=1, use_ordering=False, weights=BEGINNER_WEIGHTS),
    Difficulty.EASY: SearchLimits(max_depth=2, max_time_ms=500),
    Difficulty.MEDIUM: SearchLimits(max_depth=4, max_time_ms=1000),
    Difficulty.HARD: SearchLimits(max_depth=6, max_time_ms=2000, max_nodes=400_000, endgame_empties=8),
    Difficulty.EXPERT: SearchLimits(max_depth=8, max_time_ms=5000, max_nodes=1_500_000, endgame_empties=12),
}


def limits_for(difficulty: "Difficulty | str | SearchLimits", weights: Optional[EvalWeights] = None) -> SearchLimits:
    """Resolve a difficulty name, enum member or explicit limits.

    `weights` replaces default weights only: the beginner tuning and weights set
    explicitly on a SearchLimits are kept.
    """
    if isinstance(difficulty, SearchLimits):
        limits = difficulty
    else:
        limits = DIFFICULTIES[Difficulty.parse(difficulty)]
    if weights is not None and limits.weights == EvalWeights():
        limits = replace(limits, weights=weights)
    return replace(limits, max_depth=max(1, min(limits.max_depth, MAX_SEARCH_DEPTH)))


@dataclass
class Settings:
    default_difficulty: Difficulty = Difficulty.MEDIUM
    weights_file: Optional[str] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @staticmethod
    def load_from_toml(path: str = "othello.toml") -> "Settings":
        cfg = Settings()
        if os.path.exists(path):
            with open(path, "rb") as f:
                raw = tomllib.load(f)
            for section in ("engine", "server"):
                for k, v in raw.get(section, {}).items():
                    if hasattr(cfg, k):
                        setattr(cfg, k, v)
                    else:
                        logger.warning("Unknown setting %s.%s in %s", section, k, path)

        # env overrides for quick debugging
        cfg.default_difficulty = Difficulty.parse(os.environ.get("OTHELLO_DIFFICULTY", cfg.default_difficulty))
        cfg.log_level = os.environ.get("OTHELLO_LOG_LEVEL", cfg.log_level).upper()
        return cfg

    @staticmethod
    def from_env() -> "Settings":
        return Settings.load_from_toml(os.environ.get("OTHELLO_CONFIG_TOML", "othello.toml"))

    def eval_weights(self) -> EvalWeights:
        return EvalWeights.load(self.weights_file)
