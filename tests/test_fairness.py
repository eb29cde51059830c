"""Tests for fairness metrics and evaluation reports."""

import json

import pytest

from matching.assignment import (
    AssignmentProposal,
    AssignmentScope,
    ProposedAssignment,
    calculate_fairness_metrics,
    calculate_load_stats,
    compute_score_distribution_stats,
    create_evaluation_report,
)
from matching.assignment.fairness import (
    calculate_disparity_index,
    calculate_distribution_skew,
    calculate_distribution_balance,
    generate_fairness_recommendations,
)


def _assignments(rows):
    return [ProposedAssignment(student_id=s, teacher_id=t, score=score) for s, t, score in rows]


def test_disparity_between_groups():
    assignments = _assignments([("s1", "t1", 80), ("s2", "t1", 70), ("s3", "t2", 50)])
    groups = {"s1": "north", "s2": "north", "s3": "south"}
    assert calculate_disparity_index(assignments, groups) == pytest.approx(0.25)


def test_disparity_needs_two_groups():
    assignments = _assignments([("s1", "t1", 80), ("s2", "t1", 20)])
    assert calculate_disparity_index(assignments) == 0.0
    assert calculate_disparity_index(assignments, {"s1": "north", "s2": "north"}) == 0.0


def test_disparity_ignores_unlabelled_students():
    assignments = _assignments([("s1", "t1", 80), ("s2", "t1", 20), ("s3", "t1", 60)])
    groups = {"s1": "north", "s3": "south"}
    assert calculate_disparity_index(assignments, groups) == pytest.approx(0.2)


def test_skew_of_concentrated_scores():
    # All ten scores in one bin: |10 - 1| + 9 * |0 - 1| = 18, / (2 * 10)
    assignments = _assignments([(f"s{i}", "t1", 57.5) for i in range(10)])
    assert calculate_distribution_skew(assignments) == pytest.approx(0.9)


def test_skew_of_uniform_scores_is_zero():
    assignments = _assignments([(f"s{i}", "t1", i * 10 + 5) for i in range(10)])
    assert calculate_distribution_skew(assignments) == 0.0


def test_score_of_one_hundred_lands_in_top_bin():
    assignments = _assignments([("s1", "t1", 100.0)])
    assert calculate_distribution_skew(assignments) == pytest.approx(0.9)


def test_balance_even_and_uneven():
    even = _assignments([("s1", "t1", 60), ("s2", "t2", 60)])
    uneven = _assignments([("s1", "t1", 60), ("s2", "t1", 60), ("s3", "t1", 60), ("s4", "t2", 60)])

    assert calculate_distribution_balance(even) == 1.0
    # counts [3, 1]: mean 2, population std 1
    assert calculate_distribution_balance(uneven) == pytest.approx(0.5)


def test_empty_assignments_are_neutral():
    metrics = calculate_fairness_metrics([])
    assert metrics.disparity_index == 0.0
    assert metrics.distribution_skew == 0.0
    assert metrics.distribution_balance == 1.0
    assert metrics.recommendations == ["Fairness metrics are within the normal range."]


def test_recommendations_per_threshold():
    notes = generate_fairness_recommendations(0.5, 0.5, 0.2)
    assert len(notes) == 3
    assert generate_fairness_recommendations(0.2, 0.3, 0.7) == [
        "Fairness metrics are within the normal range."
    ]


def test_load_stats():
    stats = calculate_load_stats({"t1": 3, "t2": 1})
    assert stats.mean == 2.0
    assert stats.variance == 1.0
    assert stats.std == 1.0
    assert stats.range == 2.0


def test_load_stats_empty():
    assert calculate_load_stats({}).to_dict() == {
        "mean": 0.0, "variance": 0.0, "std": 0.0, "min": 0.0, "max": 0.0, "range": 0.0
    }


def test_score_distribution_stats():
    stats = compute_score_distribution_stats([10, 20, 30, 40, 50])
    assert stats.mean == 30.0
    assert stats.quantiles["p50"] == 30.0
    assert set(stats.quantiles) == {"p10", "p25", "p50", "p75", "p90"}


def test_score_distribution_stats_rejects_empty():
    with pytest.raises(ValueError):
        compute_score_distribution_stats([])


def test_evaluation_report(tmp_path):
    proposal = AssignmentProposal(
        scope=AssignmentScope(student_ids=["s1", "s2", "s3"]),
        assignments=_assignments([("s1", "t1", 80), ("s2", "t2", 45)]),
        total_students=3,
        excluded_student_ids=["s3"],
    )
    report = create_evaluation_report(proposal, {"s1": "north", "s2": "south"})

    assert report.proposal_id == proposal.id
    assert report.fairness.disparity_index == pytest.approx(0.35)
    assert report.assignment_load.mean == 1.0
    assert report.score_stats.max == 80.0
    assert "1 excluded" in report.summary_text()

    path = tmp_path / "report.json"
    report.save(str(path))
    with open(path, encoding="utf-8") as f:
        assert json.load(f)["summary"]["excluded_count"] == 1


def test_report_for_empty_proposal():
    proposal = AssignmentProposal(
        scope=AssignmentScope(team_id="empty"), assignments=[], total_students=0
    )
    report = create_evaluation_report(proposal)
    assert report.score_stats is None
    assert "score_stats" not in report.to_dict()
