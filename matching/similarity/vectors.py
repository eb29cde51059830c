"""Vector helpers shared by the similarity calculators."""

from typing import Optional, Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> Optional[float]:
    """
    Cosine similarity of two equal-length vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Cosine similarity in [-1, 1], or None if either vector has zero magnitude
    """
    vec_a = np.asarray(a, dtype=float)
    vec_b = np.asarray(b, dtype=float)

    if vec_a.shape != vec_b.shape:
        raise ValueError(f"Vectors must have the same shape: {vec_a.shape} vs {vec_b.shape}")

    norm_a = np.sqrt(np.sum(vec_a * vec_a))
    norm_b = np.sqrt(np.sum(vec_b * vec_b))

    if norm_a == 0 or norm_b == 0:
        return None

    # Elementwise product then sum keeps the result symmetric in (a, b)
    return float(np.sum(vec_a * vec_b) / (norm_a * norm_b))


def clip_unit(value: float) -> float:
    """Clip a similarity into [0, 1]."""
    return float(np.clip(value, 0.0, 1.0))
