"""
Name-numerology compatibility calculator.

Compares the four structural grids (won, hyung, yi, jeong) of two names.
Grid numbers live on the traditional 1-81 scale, so the largest per-grid
gap is 80:

    similarity = 1 - sum(|teacher_grid - student_grid|) / (80 * 4)

clipped to [0, 1] for stroke sums that run past 81.
"""

import logging
from typing import Optional

import numpy as np

from ..configs.scoring import NEUTRAL_SIMILARITY
from ..profiles.schema import NameProfile, GRID_ORDER
from .vectors import clip_unit

logger = logging.getLogger(__name__)

MAX_GRID_DIFFERENCE = 80


def calculate_name_compatibility(
    teacher_name: Optional[NameProfile],
    student_name: Optional[NameProfile]
) -> float:
    """
    Compute name-numerology similarity between a teacher and a student.

    Args:
        teacher_name: Teacher grids (None if not analysed)
        student_name: Student grids (None if not analysed)

    Returns:
        Similarity in [0, 1]; 0.5 when either side is missing
    """
    if teacher_name is None or student_name is None:
        logger.debug("Name analysis missing; using neutral similarity")
        return NEUTRAL_SIMILARITY

    differences = np.abs(
        np.asarray(teacher_name.to_vector(), dtype=float)
        - np.asarray(student_name.to_vector(), dtype=float)
    )
    normalized = float(np.sum(differences)) / (MAX_GRID_DIFFERENCE * len(GRID_ORDER))

    return clip_unit(1 - normalized)
