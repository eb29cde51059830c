"""Tests for batch scoring, proposals and recommendations."""

import numpy as np
import pytest

from matching.configs import MatcherConfig
from matching.errors import PairComputationFailure
from matching.assignment import (
    AssignmentScope,
    InMemoryProfileSource,
    compute_pair_scores,
    propose_assignments,
    batch_analyze_compatibility,
    recommend_teachers,
    resolve_scope,
)

from tests.conftest import make_mbti, make_student, make_teacher


class FlakyTeacherSource(InMemoryProfileSource):
    """Source whose fetch fails for selected teachers."""

    def __init__(self, broken_teachers, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.broken_teachers = set(broken_teachers)

    def get_teacher_profile(self, teacher_id):
        if teacher_id in self.broken_teachers:
            raise ConnectionError(f"profile store unavailable for {teacher_id}")
        return super().get_teacher_profile(teacher_id)


def _blank_source(loads, n_students):
    teachers = {tid: make_teacher(tid, current_load=load) for tid, load in loads.items()}
    students = {f"s{i}": make_student(f"s{i}") for i in range(n_students)}
    return InMemoryProfileSource(students, teachers)


def test_every_student_assigned_with_healthy_source(team_source):
    proposal = propose_assignments(
        AssignmentScope(team_id="team-1"), ["t-a", "t-b", "t-c"], team_source
    )
    summary = proposal.summary
    assert summary.total_students == 10
    assert summary.assigned_count == 10
    assert [a.student_id for a in proposal.assignments] == [f"s{i}" for i in range(10)]


def test_assignment_is_best_scoring_teacher(team_source):
    pool = ["t-a", "t-b", "t-c"]
    proposal = propose_assignments(AssignmentScope(team_id="team-1"), pool, team_source)

    for assignment in proposal.assignments:
        ranked = recommend_teachers(assignment.student_id, pool, team_source)
        assert assignment.teacher_id == ranked[0].teacher_id
        assert assignment.score == ranked[0].score.overall


def test_failing_teacher_is_skipped_per_pair(team_source):
    source = FlakyTeacherSource(
        ["t-c"], team_source.students, team_source.teachers, team_source.teams
    )
    proposal = propose_assignments(AssignmentScope(team_id="team-1"), ["t-a", "t-b", "t-c"], source)

    assert proposal.summary.assigned_count == 10
    assert all(a.teacher_id != "t-c" for a in proposal.assignments)


def test_student_with_only_failing_teachers_is_excluded(team_source):
    source = FlakyTeacherSource(
        ["t-a", "t-b"], team_source.students, team_source.teachers, team_source.teams
    )
    proposal = propose_assignments(AssignmentScope(student_ids=["s1", "s2"]), ["t-a", "t-b"], source)

    assert proposal.summary.assigned_count == 0
    assert proposal.excluded_student_ids == ("s1", "s2")
    assert proposal.summary.excluded_count == 2


def test_batch_analysis_reports_failures(team_source):
    source = FlakyTeacherSource(
        ["t-c"], team_source.students, team_source.teachers, team_source.teams
    )
    students = [f"s{i}" for i in range(10)]
    result = batch_analyze_compatibility(students, ["t-a", "t-b", "t-c"], source)

    assert result.n_scored == 20
    assert result.n_failed == 10
    assert all(isinstance(f, PairComputationFailure) for f in result.failures)
    assert {f.teacher_id for f in result.failures} == {"t-c"}
    assert isinstance(result.failures[0].cause, ConnectionError)
    assert [p.teacher_id for p in result.results["s0"]] == ["t-a", "t-b"]


def test_batch_analysis_frame(team_source):
    result = batch_analyze_compatibility(["s1", "s2"], ["t-a", "t-b"], team_source)
    frame = result.to_frame()

    assert len(frame) == 4
    parts = frame[["mbti", "learning_style", "saju", "name", "load_balance"]].sum(axis=1)
    assert np.allclose(frame["overall"], parts)


def test_pair_results_keep_input_order(team_source):
    pairs = [("t-c", "s3"), ("t-a", "s0"), ("t-b", "s9"), ("t-a", "s5")]
    results = compute_pair_scores(pairs, team_source, MatcherConfig(max_workers=3))
    assert [(r.teacher_id, r.student_id) for r in results] == pairs


def test_results_do_not_depend_on_worker_count(team_source):
    scope = AssignmentScope(team_id="team-1")
    pool = ["t-a", "t-b", "t-c"]
    serial = propose_assignments(scope, pool, team_source, MatcherConfig(max_workers=1))
    parallel = propose_assignments(scope, pool, team_source, MatcherConfig(max_workers=8))

    assert serial.assignments == parallel.assignments
    assert serial.snapshot_versions == parallel.snapshot_versions


def test_ties_go_to_first_teacher_in_pool():
    source = _blank_source({"t1": 0, "t2": 0}, n_students=1)
    scope = AssignmentScope(student_ids=["s0"])

    assert propose_assignments(scope, ["t1", "t2"], source).assignments[0].teacher_id == "t1"
    assert propose_assignments(scope, ["t2", "t1"], source).assignments[0].teacher_id == "t2"


def test_capacity_cap_spreads_students():
    source = _blank_source({"t1": 0, "t2": 0}, n_students=5)
    config = MatcherConfig(max_students_per_teacher=2)
    scope = AssignmentScope(student_ids=[f"s{i}" for i in range(5)])

    proposal = propose_assignments(scope, ["t1", "t2"], source, config)

    assert [a.teacher_id for a in proposal.assignments] == ["t1", "t1", "t2", "t2"]
    assert proposal.excluded_student_ids == ("s4",)


def test_capacity_counts_current_load():
    source = _blank_source({"t1": 2, "t2": 0}, n_students=1)
    config = MatcherConfig(max_students_per_teacher=2)

    proposal = propose_assignments(AssignmentScope(student_ids=["s0"]), ["t1", "t2"], source, config)
    assert proposal.assignments[0].teacher_id == "t2"


def test_min_threshold_excludes_weak_pairs():
    # Overloaded teacher with no analyses scores 42.5
    source = _blank_source({"t1": 40}, n_students=2)
    scope = AssignmentScope(student_ids=["s0", "s1"])

    strict = propose_assignments(scope, ["t1"], source, MatcherConfig(min_compatibility_threshold=50))
    assert strict.summary.assigned_count == 0
    assert strict.summary.excluded_count == 2

    lenient = propose_assignments(scope, ["t1"], source, MatcherConfig(min_compatibility_threshold=40))
    assert lenient.summary.assigned_count == 2
    assert lenient.summary.success_count == 0


def test_empty_teacher_pool_excludes_everyone(team_source):
    proposal = propose_assignments(AssignmentScope(student_ids=["s1", "s2"]), [], team_source)
    assert proposal.summary.assigned_count == 0
    assert proposal.summary.total_students == 2


def test_unknown_team_gives_empty_proposal(team_source):
    proposal = propose_assignments(AssignmentScope(team_id="nope"), ["t-a"], team_source)
    assert proposal.total_students == 0
    assert proposal.assignments == ()


def test_duplicate_scope_ids_are_removed(team_source):
    scope = AssignmentScope(student_ids=["s1", "s2", "s1"])
    assert resolve_scope(scope, team_source) == ["s1", "s2"]
    assert propose_assignments(scope, ["t-a"], team_source).summary.total_students == 2


def test_unknown_subjects_score_as_unanalysed(team_source):
    results = compute_pair_scores([("t-ghost", "s-ghost")], team_source)
    assert results[0].ok
    assert results[0].score.overall == 57.5


def test_snapshot_versions_recorded(team_source):
    proposal = propose_assignments(AssignmentScope(student_ids=["s3"]), ["t-a", "t-b"], team_source)
    assert proposal.snapshot_versions == {"s3": 3, "t-a": 1, "t-b": 2}


def test_recommend_teachers_sorted_descending(team_source):
    ranked = recommend_teachers("s9", ["t-a", "t-b", "t-c"], team_source)
    scores = [r.score.overall for r in ranked]
    assert scores == sorted(scores, reverse=True)
    assert len(ranked) == 3


def test_recommend_teachers_skips_failed_pairs(team_source):
    source = FlakyTeacherSource(
        ["t-b"], team_source.students, team_source.teachers, team_source.teams
    )
    ranked = recommend_teachers("s0", ["t-a", "t-b", "t-c"], source)
    assert [r.teacher_id for r in ranked].count("t-b") == 0


def test_invalid_config_rejected(team_source):
    with pytest.raises(ValueError):
        compute_pair_scores([("t-a", "s0")], team_source, MatcherConfig(max_workers=0))


class MixedTeacherSource(InMemoryProfileSource):
    """Source that returns a plain profile or nothing for some teachers."""

    def get_teacher_profile(self, teacher_id):
        if teacher_id == "t-plain":
            return make_student("t-plain", mbti=make_mbti(e=60))
        if teacher_id == "t-none":
            return None
        return super().get_teacher_profile(teacher_id)


def test_plain_teacher_profile_is_scored_without_load(team_source):
    source = MixedTeacherSource(team_source.students, team_source.teachers, team_source.teams)
    results = compute_pair_scores([("t-a", "s1"), ("t-plain", "s1")], source)

    assert all(r.ok for r in results)
    assert results[1].teacher_load == 0
    assert results[1].score.breakdown.load_balance == 15


def test_missing_profile_from_source_fails_only_that_pair(team_source):
    source = MixedTeacherSource(team_source.students, team_source.teachers, team_source.teams)
    proposal = propose_assignments(
        AssignmentScope(student_ids=["s1", "s2"]), ["t-none", "t-a"], source
    )
    assert proposal.summary.assigned_count == 2
    assert {a.teacher_id for a in proposal.assignments} == {"t-a"}

    result = batch_analyze_compatibility(["s1"], ["t-none", "t-a"], source)
    assert result.n_failed == 1
    assert isinstance(result.failures[0].cause, TypeError)
