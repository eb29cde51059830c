"""
Fairness and load metrics for assignment proposals.

There is no ground truth for "the right teacher", so a proposal is
checked for bias and balance instead:

1. Disparity index - spread of mean scores across student groups
   (e.g. schools): (max group mean - min group mean) / 100
2. Distribution skew - L1 distance between a 10-bin score histogram and
   a uniform histogram, normalised by 2N
3. Distribution balance - 1 - std/mean of students per teacher

All three are clipped to [0, 1]. Lower disparity and skew are better;
higher balance is better.

These metrics describe a proposal. They do not change it.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional, Mapping, Sequence

import numpy as np
import pandas as pd

from .proposal import AssignmentProposal, ProposedAssignment

logger = logging.getLogger(__name__)

DISPARITY_WARNING = 0.2
SKEW_WARNING = 0.3
BALANCE_WARNING = 0.7
HISTOGRAM_BINS = 10


@dataclass
class FairnessMetrics:
    """Fairness metrics for one set of assignments."""
    disparity_index: float
    distribution_skew: float
    distribution_balance: float
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LoadStats:
    """Spread of students per teacher."""
    mean: float
    variance: float
    std: float
    min: float
    max: float
    range: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


def _assignments_frame(assignments: Sequence[ProposedAssignment]) -> pd.DataFrame:
    return pd.DataFrame(
        [a.to_dict() for a in assignments],
        columns=["student_id", "teacher_id", "score"]
    )


def calculate_disparity_index(
    assignments: Sequence[ProposedAssignment],
    student_groups: Optional[Mapping[str, str]] = None
) -> float:
    """
    Spread of mean scores across student groups.

    Args:
        assignments: Proposed assignments
        student_groups: Group label per student id (e.g. school);
            students without a label are ignored

    Returns:
        Disparity in [0, 1]; 0 when fewer than two groups are present
    """
    if not assignments or not student_groups:
        return 0.0

    df = _assignments_frame(assignments)
    df["group"] = df["student_id"].map(dict(student_groups))
    df = df.dropna(subset=["group"])

    group_means = df.groupby("group")["score"].mean()
    if len(group_means) < 2:
        return 0.0

    disparity = (group_means.max() - group_means.min()) / 100
    return float(np.clip(disparity, 0.0, 1.0))


def calculate_distribution_skew(assignments: Sequence[ProposedAssignment]) -> float:
    """
    How far the score histogram is from uniform.

    Returns:
        Skew in [0, 1]; 0 for no assignments
    """
    if not assignments:
        return 0.0

    scores = np.array([a.score for a in assignments], dtype=float)
    bin_size = 100 / HISTOGRAM_BINS
    bin_index = np.minimum(np.floor(scores / bin_size).astype(int), HISTOGRAM_BINS - 1)
    histogram = np.bincount(bin_index, minlength=HISTOGRAM_BINS)

    ideal = len(scores) / HISTOGRAM_BINS
    l1_distance = float(np.sum(np.abs(histogram - ideal)))

    return float(np.clip(l1_distance / (2 * len(scores)), 0.0, 1.0))


def calculate_distribution_balance(assignments: Sequence[ProposedAssignment]) -> float:
    """
    Evenness of students per teacher.

    Returns:
        Balance in [0, 1]; 1 means every assigned teacher got the same count
    """
    if not assignments:
        return 1.0

    counts = _assignments_frame(assignments)["teacher_id"].value_counts().to_numpy(dtype=float)
    mean = counts.mean()
    if mean == 0:
        return 1.0

    balance = 1 - counts.std() / mean
    return float(np.clip(balance, 0.0, 1.0))


def generate_fairness_recommendations(
    disparity_index: float,
    distribution_skew: float,
    distribution_balance: float
) -> List[str]:
    """Turn metric values into review notes; never empty."""
    recommendations = []

    if disparity_index > DISPARITY_WARNING:
        recommendations.append(
            "Compatibility scores differ widely between student groups. Review the weighting."
        )
    if distribution_skew > SKEW_WARNING:
        recommendations.append(
            "The compatibility score distribution is skewed. The algorithm needs review."
        )
    if distribution_balance < BALANCE_WARNING:
        recommendations.append(
            "Assignments are unevenly spread across teachers. Consider more weight on load balance."
        )

    if not recommendations:
        recommendations.append("Fairness metrics are within the normal range.")

    return recommendations


def calculate_fairness_metrics(
    assignments: Sequence[ProposedAssignment],
    student_groups: Optional[Mapping[str, str]] = None
) -> FairnessMetrics:
    """
    Compute all fairness metrics for a set of assignments.

    Args:
        assignments: Proposed assignments
        student_groups: Optional group label per student id

    Returns:
        FairnessMetrics with recommendations
    """
    disparity = calculate_disparity_index(assignments, student_groups)
    skew = calculate_distribution_skew(assignments)
    balance = calculate_distribution_balance(assignments)

    return FairnessMetrics(
        disparity_index=disparity,
        distribution_skew=skew,
        distribution_balance=balance,
        recommendations=generate_fairness_recommendations(disparity, skew, balance),
    )


def calculate_load_stats(teacher_loads: Mapping[str, int]) -> LoadStats:
    """
    Population statistics of students per teacher.

    Args:
        teacher_loads: Student count per teacher id

    Returns:
        LoadStats (all zeros for an empty mapping)
    """
    loads = np.array(list(teacher_loads.values()), dtype=float)
    if loads.size == 0:
        return LoadStats(mean=0.0, variance=0.0, std=0.0, min=0.0, max=0.0, range=0.0)

    return LoadStats(
        mean=float(loads.mean()),
        variance=float(loads.var()),
        std=float(loads.std()),
        min=float(loads.min()),
        max=float(loads.max()),
        range=float(loads.max() - loads.min()),
    )


def compute_score_distribution_stats(
    scores: Sequence[float],
    quantiles: Sequence[float] = (0.1, 0.25, 0.5, 0.75, 0.9)
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Compatibility scores (must be non-empty)
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance
    """
    scores = np.asarray(scores, dtype=float)
    if scores.size == 0:
        raise ValueError("Cannot compute distribution statistics of an empty score list")

    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


@dataclass
class EvaluationReport:
    """
    Review report for an assignment proposal.

    Documents how a proposal distributes scores and students; it does not
    claim anything about real-world teaching outcomes.
    """
    proposal_id: str
    summary: Dict[str, Any]
    fairness: FairnessMetrics
    assignment_load: LoadStats
    score_stats: Optional[ScoreDistributionStats] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "proposal_id": self.proposal_id,
            "summary": self.summary,
            "fairness": self.fairness.to_dict(),
            "assignment_load": self.assignment_load.to_dict(),
        }
        if self.score_stats:
            result["score_stats"] = self.score_stats.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info(f"Saved evaluation report to {filepath}")

    def summary_text(self) -> str:
        """Generate text summary of the report."""
        lines = [
            f"Proposal Report: {self.proposal_id}",
            "=" * 50,
            "",
            f"Students: {self.summary['assigned_count']}/{self.summary['total_students']} assigned, "
            f"{self.summary['excluded_count']} excluded",
            f"Successful matches: {self.summary['success_count']}, "
            f"weak matches: {self.summary['failure_count']}",
            "",
            "Fairness:",
            f"  Disparity index:      {self.fairness.disparity_index:.4f}",
            f"  Distribution skew:    {self.fairness.distribution_skew:.4f}",
            f"  Distribution balance: {self.fairness.distribution_balance:.4f}",
        ]
        for note in self.fairness.recommendations:
            lines.append(f"  - {note}")

        if self.score_stats:
            lines.extend([
                "",
                "Score Distribution:",
                f"  Mean: {self.score_stats.mean:.2f}",
                f"  Std:  {self.score_stats.std:.2f}",
                f"  Min:  {self.score_stats.min:.2f}",
                f"  Max:  {self.score_stats.max:.2f}",
            ])

        return "\n".join(lines)


def create_evaluation_report(
    proposal: AssignmentProposal,
    student_groups: Optional[Mapping[str, str]] = None
) -> EvaluationReport:
    """
    Create a complete evaluation report for a proposal.

    Args:
        proposal: The proposal to evaluate
        student_groups: Optional group label per student id

    Returns:
        EvaluationReport instance
    """
    assignments = proposal.assignments
    counts: Dict[str, int] = {}
    for a in assignments:
        counts[a.teacher_id] = counts.get(a.teacher_id, 0) + 1

    return EvaluationReport(
        proposal_id=proposal.id,
        summary=proposal.summary.to_dict(),
        fairness=calculate_fairness_metrics(assignments, student_groups),
        assignment_load=calculate_load_stats(counts),
        score_stats=compute_score_distribution_stats([a.score for a in assignments]) if assignments else None,
    )
