"""Configuration loading and scoring constants."""

from .loader import load_config, validate_config, get_config_value
from .scoring import (
    SCORING_CONFIG,
    NEUTRAL_SIMILARITY,
    ScoringConfig,
    ScoringWeights,
    LoadBalanceTiers,
    ReasonThresholds,
    MatcherConfig,
)

__all__ = [
    "load_config",
    "validate_config",
    "get_config_value",
    "SCORING_CONFIG",
    "NEUTRAL_SIMILARITY",
    "ScoringConfig",
    "ScoringWeights",
    "LoadBalanceTiers",
    "ReasonThresholds",
    "MatcherConfig",
]
