"""
Saju compatibility calculator.

Compares two five-element distributions (wood, fire, earth, metal, water)
by cosine similarity, clipped to [0, 1]. Two people whose elemental
balance leans the same way score high; opposite balances score low.

The traditional generation/restraint lookup used by Saju practitioners is
not encoded here. The numeric contract (range [0, 1], neutral 0.5 for
missing data) holds for any rule that replaces this one.
"""

import logging
from typing import Optional

from ..configs.scoring import NEUTRAL_SIMILARITY
from ..profiles.schema import SajuProfile
from .vectors import cosine_similarity, clip_unit

logger = logging.getLogger(__name__)


def calculate_saju_compatibility(
    teacher_saju: Optional[SajuProfile],
    student_saju: Optional[SajuProfile]
) -> float:
    """
    Compute five-element similarity between a teacher and a student.

    Args:
        teacher_saju: Teacher element distribution (None if not analysed)
        student_saju: Student element distribution (None if not analysed)

    Returns:
        Similarity in [0, 1]; 0.5 when either side is missing or empty
    """
    if teacher_saju is None or student_saju is None:
        logger.debug("Saju analysis missing; using neutral similarity")
        return NEUTRAL_SIMILARITY

    similarity = cosine_similarity(teacher_saju.to_vector(), student_saju.to_vector())
    if similarity is None:
        logger.debug("Saju distribution is empty; using neutral similarity")
        return NEUTRAL_SIMILARITY

    return clip_unit(similarity)
