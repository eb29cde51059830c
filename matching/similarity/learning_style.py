"""
Learning-style derivation and compatibility.

A VARK-style vector is derived from MBTI percentages rather than from an
independent survey:

    visual      = S * 0.6 + J * 0.4   (structured, visual material)
    auditory    = E                   (discussion-led learning)
    read_write  = I                   (reading and writing)
    kinesthetic = N * 0.6 + P * 0.4   (experience-led learning)

Compatibility is the cosine similarity of the two vectors, clipped to
[0, 1]. All components are non-negative, so the cosine is never below 0
in practice.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional, Dict, List

from ..configs.scoring import NEUTRAL_SIMILARITY
from ..profiles.schema import MbtiProfile
from .vectors import cosine_similarity, clip_unit

logger = logging.getLogger(__name__)

VISUAL_SENSING_WEIGHT = 0.6
VISUAL_JUDGING_WEIGHT = 0.4
KINESTHETIC_INTUITION_WEIGHT = 0.6
KINESTHETIC_PERCEIVING_WEIGHT = 0.4


@dataclass(frozen=True)
class LearningStyleScores:
    """Derived learning-style vector on a 0-100 scale."""
    visual: float
    auditory: float
    read_write: float
    kinesthetic: float

    def to_vector(self) -> List[float]:
        return [self.visual, self.auditory, self.read_write, self.kinesthetic]

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def derive_learning_style(mbti: Optional[MbtiProfile]) -> Optional[LearningStyleScores]:
    """
    Derive a learning-style vector from MBTI percentages.

    Args:
        mbti: MBTI percentages, or None

    Returns:
        LearningStyleScores, or None when there is no MBTI analysis
    """
    if mbti is None:
        return None

    return LearningStyleScores(
        visual=mbti["S"] * VISUAL_SENSING_WEIGHT + mbti["J"] * VISUAL_JUDGING_WEIGHT,
        auditory=mbti["E"],
        read_write=mbti["I"],
        kinesthetic=mbti["N"] * KINESTHETIC_INTUITION_WEIGHT + mbti["P"] * KINESTHETIC_PERCEIVING_WEIGHT,
    )


def calculate_learning_style_compatibility(
    teacher_mbti: Optional[MbtiProfile],
    student_mbti: Optional[MbtiProfile]
) -> float:
    """
    Compute learning-style similarity between a teacher and a student.

    Args:
        teacher_mbti: Teacher MBTI percentages (None if not analysed)
        student_mbti: Student MBTI percentages (None if not analysed)

    Returns:
        Cosine similarity clipped to [0, 1]; 0.5 when either profile is
        missing or either derived vector has zero magnitude
    """
    teacher_style = derive_learning_style(teacher_mbti)
    student_style = derive_learning_style(student_mbti)

    if teacher_style is None or student_style is None:
        logger.debug("No MBTI to derive a learning style from; using neutral similarity")
        return NEUTRAL_SIMILARITY

    similarity = cosine_similarity(teacher_style.to_vector(), student_style.to_vector())
    if similarity is None:
        logger.debug("Learning-style vector has zero magnitude; using neutral similarity")
        return NEUTRAL_SIMILARITY

    return clip_unit(similarity)
