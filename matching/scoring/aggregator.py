"""
Compatibility aggregation.

This module combines the per-dimension similarities into one 0-100
teacher-student compatibility score.

Aggregation Formula:
    mbti           = sim_mbti           * 25
    learning_style = sim_learning_style * 25
    saju           = sim_saju           * 20
    name           = sim_name           * 15
    load_balance   = load step points   (0-15, added as is)
    overall        = mbti + learning_style + saju + name + load_balance

The overall score is the plain sum of the breakdown fields with no
rounding, so any consumer can reconstruct it from the breakdown.

Missing analyses never raise: each calculator returns its neutral 0.5 and
the score degrades gracefully. Profiles are expected to have passed the
ingestion boundary (matching.profiles.loaders) already.
"""

import logging
from dataclasses import dataclass, asdict, field
from typing import Dict, Any, List, Optional

from ..configs.scoring import SCORING_CONFIG, ScoringConfig
from ..profiles.schema import PersonalityProfile, TeacherProfile
from ..similarity import (
    calculate_mbti_compatibility,
    calculate_learning_style_compatibility,
    calculate_saju_compatibility,
    calculate_name_compatibility,
    calculate_load_balance_score,
)
from .explain import generate_reasons

logger = logging.getLogger(__name__)

_EMPTY_PROFILE = PersonalityProfile()


@dataclass(frozen=True)
class CompatibilitySimilarities:
    """Raw [0, 1] similarities before weighting."""
    mbti: float
    learning_style: float
    saju: float
    name: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class CompatibilityBreakdown:
    """
    Weighted contribution of each dimension.

    Attributes:
        mbti: 0-25
        learning_style: 0-25
        saju: 0-20
        name: 0-15
        load_balance: 0-15
    """
    mbti: float
    learning_style: float
    saju: float
    name: float
    load_balance: float

    def total(self) -> float:
        """Sum of all contributions, in declaration order."""
        return self.mbti + self.learning_style + self.saju + self.name + self.load_balance

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class CompatibilityScore:
    """
    Result of scoring one teacher-student pair.

    Attributes:
        overall: Sum of the breakdown, in [0, 100]
        breakdown: Weighted per-dimension contributions
        reasons: Ordered, never-empty explanation strings
        similarities: Raw similarities the breakdown was built from
    """
    overall: float
    breakdown: CompatibilityBreakdown
    reasons: List[str]
    similarities: Optional[CompatibilitySimilarities] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = {
            "overall": self.overall,
            "breakdown": self.breakdown.to_dict(),
            "reasons": list(self.reasons),
        }
        if self.similarities is not None:
            result["similarities"] = self.similarities.to_dict()
        return result


class CompatibilityScorer:
    """
    Scores teacher-student pairs with a fixed scoring configuration.

    The scorer holds no mutable state and can be shared across threads.

    Attributes:
        config: ScoringConfig with weights, load steps and reason thresholds
    """

    def __init__(self, config: ScoringConfig = SCORING_CONFIG):
        self.config = config

    def similarities(
        self,
        teacher: PersonalityProfile,
        student: PersonalityProfile
    ) -> CompatibilitySimilarities:
        """Compute the four raw similarities for a pair."""
        return CompatibilitySimilarities(
            mbti=calculate_mbti_compatibility(teacher.mbti, student.mbti),
            learning_style=calculate_learning_style_compatibility(teacher.mbti, student.mbti),
            saju=calculate_saju_compatibility(teacher.saju, student.saju),
            name=calculate_name_compatibility(teacher.name, student.name),
        )

    def breakdown(
        self,
        similarities: CompatibilitySimilarities,
        current_load: Optional[int],
        average_load: float
    ) -> CompatibilityBreakdown:
        """Apply the weight table to raw similarities and add the load score."""
        weights = self.config.weights
        return CompatibilityBreakdown(
            mbti=similarities.mbti * weights.mbti,
            learning_style=similarities.learning_style * weights.learning_style,
            saju=similarities.saju * weights.saju,
            name=similarities.name * weights.name,
            load_balance=calculate_load_balance_score(
                current_load, average_load, self.config.load_tiers
            ),
        )

    def score(
        self,
        teacher: Optional[PersonalityProfile],
        student: Optional[PersonalityProfile],
        average_load: Optional[float] = None
    ) -> CompatibilityScore:
        """
        Score one teacher-student pair.

        Args:
            teacher: Teacher profile; a TeacherProfile carries current_load
            student: Student profile
            average_load: Organisation-wide average load (default 15);
                accepted for API stability, unused by the load formula

        Returns:
            CompatibilityScore with overall, breakdown and reasons
        """
        teacher = teacher or _EMPTY_PROFILE
        student = student or _EMPTY_PROFILE
        if average_load is None:
            average_load = self.config.default_average_load

        current_load = teacher.current_load if isinstance(teacher, TeacherProfile) else None

        sims = self.similarities(teacher, student)
        breakdown = self.breakdown(sims, current_load, average_load)
        logger.debug(
            f"Scored teacher={teacher.subject_id} student={student.subject_id}: {breakdown.total():.2f}"
        )

        return CompatibilityScore(
            overall=breakdown.total(),
            breakdown=breakdown,
            reasons=generate_reasons(breakdown, sims, self.config.reasons),
            similarities=sims,
        )


_DEFAULT_SCORER = CompatibilityScorer()


def calculate_compatibility_score(
    teacher: Optional[PersonalityProfile],
    student: Optional[PersonalityProfile],
    average_load: float = 15
) -> CompatibilityScore:
    """
    Score one teacher-student pair with the fixed scoring configuration.

    Args:
        teacher: Teacher profile (TeacherProfile to include workload)
        student: Student profile
        average_load: Average students per teacher (default 15, unused)

    Returns:
        CompatibilityScore in [0, 100]
    """
    return _DEFAULT_SCORER.score(teacher, student, average_load)
