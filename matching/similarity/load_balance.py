"""
Load-balance scorer.

Maps a teacher's current number of assigned students onto 0-15 points:

    0-10 students   15  (plenty of room)
    11-20 students  10  (comfortable)
    21-30 students   5  (busy)
    31+ students     0  (overloaded)
"""

from typing import Optional

from ..configs.scoring import SCORING_CONFIG, LoadBalanceTiers


def calculate_load_balance_score(
    current_load: Optional[int],
    average_load: float = 15,
    tiers: LoadBalanceTiers = SCORING_CONFIG.load_tiers
) -> float:
    """
    Score a teacher's workload.

    Args:
        current_load: Students currently assigned (None counts as 0)
        average_load: Organisation-wide average load; accepted for API
            stability, not used by the step function
        tiers: Step table, defaults to the fixed scoring configuration

    Returns:
        Load-balance points (already on the 0-15 breakdown scale)
    """
    load = current_load or 0

    for max_load, points in tiers.steps:
        if load <= max_load:
            return points
    return tiers.overflow_points
