"""
MBTI compatibility calculator.

Compares two eight-axis percentage profiles axis by axis:

    agreement(axis) = 1 - |teacher_pct - student_pct| / 100
    similarity      = mean(agreement over E/I, S/N, T/F, J/P)

Because each axis pair sums to 100, measuring the first pole of each
axis is equivalent to measuring the second.
"""

import logging
from typing import Optional

import numpy as np

from ..configs.scoring import NEUTRAL_SIMILARITY
from ..profiles.schema import MbtiProfile, MBTI_AXES
from .vectors import clip_unit

logger = logging.getLogger(__name__)


def calculate_mbti_compatibility(
    teacher_mbti: Optional[MbtiProfile],
    student_mbti: Optional[MbtiProfile]
) -> float:
    """
    Compute MBTI similarity between a teacher and a student.

    Args:
        teacher_mbti: Teacher MBTI percentages (None if not analysed)
        student_mbti: Student MBTI percentages (None if not analysed)

    Returns:
        Similarity in [0, 1]; 0.5 when either side is missing
    """
    if teacher_mbti is None or student_mbti is None:
        logger.debug("MBTI analysis missing; using neutral similarity")
        return NEUTRAL_SIMILARITY

    agreements = [
        1 - abs(teacher_mbti[first] - student_mbti[first]) / 100
        for first, _ in MBTI_AXES
    ]

    return clip_unit(np.mean(agreements))
