"""Score aggregation and explanation."""

from .aggregator import (
    CompatibilityScorer,
    CompatibilityScore,
    CompatibilityBreakdown,
    CompatibilitySimilarities,
    calculate_compatibility_score,
)
from .explain import generate_reasons

__all__ = [
    "CompatibilityScorer",
    "CompatibilityScore",
    "CompatibilityBreakdown",
    "CompatibilitySimilarities",
    "calculate_compatibility_score",
    "generate_reasons",
]
