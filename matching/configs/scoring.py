"""
Scoring constants and orchestration settings.

The weight table, load-balance steps and explanation thresholds are
frozen dataclasses collected in SCORING_CONFIG. They are constants: two
runs over the same profiles must always produce the same numbers.

MatcherConfig holds the knobs of the batch workflow (pool size, success
cut-off, optional eligibility constraints). Those may come from YAML.

Weight table (maxima sum to 100):
    mbti            25
    learning_style  25
    saju            20
    name            15
    load_balance    15   (added unweighted, already on a 0-15 scale)
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Optional, Tuple

logger = logging.getLogger(__name__)

NEUTRAL_SIMILARITY = 0.5


@dataclass(frozen=True)
class ScoringWeights:
    """Multipliers that turn [0, 1] similarities into breakdown points."""
    mbti: float = 25.0
    learning_style: float = 25.0
    saju: float = 20.0
    name: float = 15.0
    load_balance: float = 15.0  # maximum of the load step function

    @property
    def total(self) -> float:
        return self.mbti + self.learning_style + self.saju + self.name + self.load_balance


@dataclass(frozen=True)
class LoadBalanceTiers:
    """
    Step function from current student count to load-balance points.

    Each (max_load, points) step applies when current_load <= max_load;
    anything above the last step scores overflow_points.
    """
    steps: Tuple[Tuple[int, float], ...] = ((10, 15.0), (20, 10.0), (30, 5.0))
    overflow_points: float = 0.0


@dataclass(frozen=True)
class ReasonThresholds:
    """Cut-offs used by the explanation rules, in rule order."""
    mbti: Tuple[float, ...] = (0.8, 0.6, 0.4)
    learning_style: Tuple[float, ...] = (0.8, 0.5)
    saju: Tuple[float, ...] = (0.7, 0.5)
    name: Tuple[float, ...] = (0.7,)
    load_balance: Tuple[float, ...] = (15.0, 10.0, 5.0)
    combined_style_bonus: float = 40.0


@dataclass(frozen=True)
class ScoringConfig:
    """Single named configuration object for the aggregator."""
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    load_tiers: LoadBalanceTiers = field(default_factory=LoadBalanceTiers)
    reasons: ReasonThresholds = field(default_factory=ReasonThresholds)
    neutral_similarity: float = NEUTRAL_SIMILARITY
    default_average_load: float = 15.0


SCORING_CONFIG = ScoringConfig()


@dataclass
class MatcherConfig:
    """
    Configuration for the batch matcher.

    Attributes:
        max_workers: Size of the worker pool used for pair computations
        success_threshold: Scores at or above this count as successful matches
        min_compatibility_threshold: Pairs scoring below this are ineligible (None: no floor)
        max_students_per_teacher: Capacity cap including current load (None: no cap)
        average_load: Passed through to the aggregator; currently unused by the formula
    """
    max_workers: int = 4
    success_threshold: float = 60.0
    min_compatibility_threshold: Optional[float] = None
    max_students_per_teacher: Optional[int] = None
    average_load: float = 15.0

    def validate(self) -> None:
        """Validate configuration values."""
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if not 0 <= self.success_threshold <= 100:
            raise ValueError(f"success_threshold must be in [0, 100], got {self.success_threshold}")
        if self.min_compatibility_threshold is not None and not 0 <= self.min_compatibility_threshold <= 100:
            raise ValueError(
                f"min_compatibility_threshold must be in [0, 100], got {self.min_compatibility_threshold}"
            )
        if self.max_students_per_teacher is not None and self.max_students_per_teacher < 1:
            raise ValueError(
                f"max_students_per_teacher must be >= 1, got {self.max_students_per_teacher}"
            )
        if self.average_load < 0:
            raise ValueError(f"average_load must be non-negative, got {self.average_load}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MatcherConfig":
        """Create from dictionary."""
        return cls(**d)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "MatcherConfig":
        """Create from main config dictionary."""
        matching_config = config.get("matching", {}) or {}

        return cls(
            max_workers=matching_config.get("max_workers", 4),
            success_threshold=matching_config.get("success_threshold", 60.0),
            min_compatibility_threshold=matching_config.get("min_compatibility_threshold"),
            max_students_per_teacher=matching_config.get("max_students_per_teacher"),
            average_load=matching_config.get("average_load", 15.0),
        )

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved matcher config to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "MatcherConfig":
        """Load from JSON file."""
        with open(filepath, "r", encoding="utf-8") as f:
            d = json.load(f)
        return cls.from_dict(d)
