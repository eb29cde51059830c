"""Pure per-dimension similarity calculators."""

from .mbti import calculate_mbti_compatibility
from .learning_style import (
    LearningStyleScores,
    derive_learning_style,
    calculate_learning_style_compatibility,
)
from .saju import calculate_saju_compatibility
from .name import calculate_name_compatibility
from .load_balance import calculate_load_balance_score

__all__ = [
    "calculate_mbti_compatibility",
    "LearningStyleScores",
    "derive_learning_style",
    "calculate_learning_style_compatibility",
    "calculate_saju_compatibility",
    "calculate_name_compatibility",
    "calculate_load_balance_score",
]
