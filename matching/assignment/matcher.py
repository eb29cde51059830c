"""
Batch matching of students to teachers.

This module scores every (teacher, student) pair in a run and turns the
scores into assignment proposals, ranked recommendations, or a raw batch
analysis.

Key Design Decisions:
- Pair computations are independent and run on a bounded worker pool
  (joblib, threading backend) to cap load on upstream profile stores
- Profiles are fetched per pair inside the pool; a failing fetch drops
  only that pair (fail-soft), never the batch
- Results are collected in submission order, so output does not depend
  on which worker finishes first
- Best-teacher selection is a stable sort by descending score: ties go
  to the teacher listed first in the pool
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd
from joblib import Parallel, delayed

from ..configs.scoring import MatcherConfig
from ..errors import PairComputationFailure
from ..profiles.schema import PersonalityProfile
from ..scoring.aggregator import CompatibilityScorer, CompatibilityScore
from .proposal import AssignmentProposal, AssignmentScope, ProposedAssignment
from .sources import ProfileSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PairResult:
    """
    Outcome of scoring one (teacher, student) pair.

    Exactly one of score and error is set.
    """
    teacher_id: str
    student_id: str
    score: Optional[CompatibilityScore] = None
    error: Optional[PairComputationFailure] = None
    teacher_load: int = 0
    teacher_version: Optional[int] = None
    student_version: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.score is not None

    def to_dict(self) -> Dict:
        result = {"teacher_id": self.teacher_id, "student_id": self.student_id}
        if self.score is not None:
            result["score"] = self.score.to_dict()
        else:
            result["error"] = str(self.error)
        return result


@dataclass
class BatchAnalysisResult:
    """
    Scores for every student against every teacher.

    Attributes:
        results: Successful pair results per student, in teacher-pool order
        failures: Pairs that could not be computed
    """
    results: Dict[str, List[PairResult]] = field(default_factory=dict)
    failures: List[PairComputationFailure] = field(default_factory=list)

    @property
    def n_scored(self) -> int:
        return sum(len(pairs) for pairs in self.results.values())

    @property
    def n_failed(self) -> int:
        return len(self.failures)

    def to_frame(self) -> pd.DataFrame:
        """One row per successfully scored pair with breakdown columns."""
        rows = []
        for student_id, pairs in self.results.items():
            for pair in pairs:
                row = {
                    "student_id": student_id,
                    "teacher_id": pair.teacher_id,
                    "overall": pair.score.overall,
                }
                row.update(pair.score.breakdown.to_dict())
                rows.append(row)
        columns = ["student_id", "teacher_id", "overall",
                   "mbti", "learning_style", "saju", "name", "load_balance"]
        return pd.DataFrame(rows, columns=columns)


def _fetch_and_score(
    teacher_id: str,
    student_id: str,
    source: ProfileSource,
    scorer: CompatibilityScorer,
    average_load: float
) -> PairResult:
    try:
        teacher = source.get_teacher_profile(teacher_id)
        student = source.get_student_profile(student_id)
        for role, profile in (("teacher", teacher), ("student", student)):
            if not isinstance(profile, PersonalityProfile):
                raise TypeError(f"Source returned {type(profile).__name__} for {role} profile")
    except Exception as exc:
        raise PairComputationFailure(teacher_id, student_id, exc) from exc

    score = scorer.score(teacher, student, average_load)
    return PairResult(
        teacher_id=teacher_id,
        student_id=student_id,
        score=score,
        teacher_load=getattr(teacher, "current_load", None) or 0,
        teacher_version=teacher.version,
        student_version=student.version,
    )


def _compute_pair(
    teacher_id: str,
    student_id: str,
    source: ProfileSource,
    scorer: CompatibilityScorer,
    average_load: float
) -> PairResult:
    """Score one pair; failures are logged and returned, never raised."""
    try:
        return _fetch_and_score(teacher_id, student_id, source, scorer, average_load)
    except PairComputationFailure as failure:
        logger.warning(str(failure))
        return PairResult(teacher_id=teacher_id, student_id=student_id, error=failure)


def compute_pair_scores(
    pairs: Sequence[Tuple[str, str]],
    source: ProfileSource,
    config: Optional[MatcherConfig] = None,
    scorer: Optional[CompatibilityScorer] = None
) -> List[PairResult]:
    """
    Score (teacher_id, student_id) pairs on a bounded worker pool.

    Args:
        pairs: Pairs to score
        source: Profile source queried inside each pair task
        config: MatcherConfig (max_workers, average_load)
        scorer: CompatibilityScorer, defaults to the fixed configuration

    Returns:
        One PairResult per input pair, in input order
    """
    config = config or MatcherConfig()
    config.validate()
    scorer = scorer or CompatibilityScorer()

    if not pairs:
        return []

    logger.info(f"Scoring {len(pairs)} pairs with {config.max_workers} workers")
    results = Parallel(n_jobs=config.max_workers, backend="threading")(
        delayed(_compute_pair)(teacher_id, student_id, source, scorer, config.average_load)
        for teacher_id, student_id in pairs
    )

    n_failed = sum(1 for r in results if not r.ok)
    if n_failed:
        logger.warning(f"{n_failed} of {len(results)} pairs failed and were excluded")
    return list(results)


def _unique(ids: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(ids))


def _score_grid(
    student_ids: Sequence[str],
    teacher_pool: Sequence[str],
    source: ProfileSource,
    config: MatcherConfig,
    scorer: Optional[CompatibilityScorer]
) -> Dict[str, List[PairResult]]:
    pairs = [(t, s) for s in student_ids for t in teacher_pool]
    results = compute_pair_scores(pairs, source, config, scorer)

    grid: Dict[str, List[PairResult]] = {s: [] for s in student_ids}
    for result in results:
        grid[result.student_id].append(result)
    return grid


def _rank(pairs: Sequence[PairResult]) -> List[PairResult]:
    """Successful pairs by descending score; ties keep teacher-pool order."""
    return sorted((p for p in pairs if p.ok), key=lambda p: p.score.overall, reverse=True)


def resolve_scope(scope: AssignmentScope, source: ProfileSource) -> List[str]:
    """Expand a scope into the ordered, de-duplicated list of student ids."""
    if scope.team_id is not None:
        student_ids = source.list_team_students(scope.team_id)
    else:
        student_ids = list(scope.student_ids)

    unique_ids = _unique(student_ids)
    if len(unique_ids) != len(student_ids):
        logger.warning(f"Dropped {len(student_ids) - len(unique_ids)} duplicate student ids from scope")
    return unique_ids


def propose_assignments(
    scope: AssignmentScope,
    teacher_pool: Sequence[str],
    source: ProfileSource,
    config: Optional[MatcherConfig] = None,
    scorer: Optional[CompatibilityScorer] = None
) -> AssignmentProposal:
    """
    Build a PENDING assignment proposal for every student in scope.

    Each student goes to their best-scoring eligible teacher. A teacher is
    eligible for a student when the pair was computed successfully, its
    score reaches min_compatibility_threshold (if set), and the teacher
    is under max_students_per_teacher (if set) counting students already
    proposed to them earlier in this run. Students are processed in scope
    order.

    Args:
        scope: Team or explicit student ids
        teacher_pool: Candidate teacher ids; order breaks score ties
        source: Profile source
        config: MatcherConfig
        scorer: CompatibilityScorer

    Returns:
        AssignmentProposal in PENDING state
    """
    config = config or MatcherConfig()
    student_ids = resolve_scope(scope, source)
    teacher_pool = _unique(teacher_pool)

    if not teacher_pool:
        logger.warning("Teacher pool is empty; every student will be excluded")

    grid = _score_grid(student_ids, teacher_pool, source, config, scorer)

    assignments = []
    excluded = []
    proposed_counts = {teacher_id: 0 for teacher_id in teacher_pool}
    versions: Dict[str, int] = {}

    def eligible(candidate: PairResult) -> bool:
        if (config.min_compatibility_threshold is not None
                and candidate.score.overall < config.min_compatibility_threshold):
            return False
        if (config.max_students_per_teacher is not None
                and candidate.teacher_load + proposed_counts[candidate.teacher_id]
                >= config.max_students_per_teacher):
            return False
        return True

    for student_id in student_ids:
        ranked = _rank(grid[student_id])
        for candidate in ranked:
            if candidate.student_version is not None:
                versions[student_id] = candidate.student_version
            if candidate.teacher_version is not None:
                versions[candidate.teacher_id] = candidate.teacher_version

        chosen = next((c for c in ranked if eligible(c)), None)
        if chosen is None:
            logger.warning(f"Cannot assign student {student_id}: no eligible teacher found")
            excluded.append(student_id)
            continue

        proposed_counts[chosen.teacher_id] += 1
        assignments.append(ProposedAssignment(
            student_id=student_id,
            teacher_id=chosen.teacher_id,
            score=chosen.score.overall,
            details=chosen.score,
        ))

    return AssignmentProposal(
        scope=scope,
        assignments=assignments,
        total_students=len(student_ids),
        excluded_student_ids=excluded,
        success_threshold=config.success_threshold,
        snapshot_versions=versions,
    )


def batch_analyze_compatibility(
    student_ids: Sequence[str],
    teacher_pool: Sequence[str],
    source: ProfileSource,
    config: Optional[MatcherConfig] = None,
    scorer: Optional[CompatibilityScorer] = None
) -> BatchAnalysisResult:
    """
    Score every student against every teacher.

    A pair that fails is logged and reported in failures; all other pairs
    are still computed.

    Args:
        student_ids: Students to analyse
        teacher_pool: Teachers to score against
        source: Profile source
        config: MatcherConfig
        scorer: CompatibilityScorer

    Returns:
        BatchAnalysisResult with per-student successful results and failures
    """
    config = config or MatcherConfig()
    student_ids = _unique(student_ids)
    grid = _score_grid(student_ids, _unique(teacher_pool), source, config, scorer)

    result = BatchAnalysisResult()
    for student_id in student_ids:
        result.results[student_id] = [p for p in grid[student_id] if p.ok]
        result.failures.extend(p.error for p in grid[student_id] if not p.ok)

    logger.info(f"Batch analysis: {result.n_scored} pairs scored, {result.n_failed} failed")
    return result


def recommend_teachers(
    student_id: str,
    teacher_pool: Sequence[str],
    source: ProfileSource,
    config: Optional[MatcherConfig] = None,
    scorer: Optional[CompatibilityScorer] = None
) -> List[PairResult]:
    """
    Rank teachers for one student.

    Returns:
        Successful pair results by descending score; ties keep pool order
    """
    config = config or MatcherConfig()
    grid = _score_grid([student_id], _unique(teacher_pool), source, config, scorer)
    return _rank(grid[student_id])
