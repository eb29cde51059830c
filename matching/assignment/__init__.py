"""
Batch assignment workflow.

This module turns pair scores into reviewable student -> teacher
assignment proposals, ranked recommendations and fairness reports.
"""

from .sources import ProfileSource, InMemoryProfileSource
from .proposal import (
    AssignmentProposal,
    AssignmentScope,
    ProposalStatus,
    ProposalSummary,
    ProposedAssignment,
)
from .matcher import (
    PairResult,
    BatchAnalysisResult,
    compute_pair_scores,
    resolve_scope,
    propose_assignments,
    batch_analyze_compatibility,
    recommend_teachers,
)
from .fairness import (
    FairnessMetrics,
    LoadStats,
    EvaluationReport,
    calculate_fairness_metrics,
    calculate_load_stats,
    compute_score_distribution_stats,
    create_evaluation_report,
)

__all__ = [
    "ProfileSource",
    "InMemoryProfileSource",
    "AssignmentProposal",
    "AssignmentScope",
    "ProposalStatus",
    "ProposalSummary",
    "ProposedAssignment",
    "PairResult",
    "BatchAnalysisResult",
    "compute_pair_scores",
    "resolve_scope",
    "propose_assignments",
    "batch_analyze_compatibility",
    "recommend_teachers",
    "FairnessMetrics",
    "LoadStats",
    "EvaluationReport",
    "calculate_fairness_metrics",
    "calculate_load_stats",
    "compute_score_distribution_stats",
    "create_evaluation_report",
]
