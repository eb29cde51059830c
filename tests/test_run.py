"""Tests for the command-line runner."""

import json
import sys
from pathlib import Path

import pytest
import yaml

from matching.run import run_matching, main

PROJECT_ROOT = Path(__file__).parent.parent
SAMPLE_SNAPSHOT = PROJECT_ROOT / "data" / "sample_snapshot.yaml"


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "global": {"log_level": "INFO"},
        "matching": {"max_workers": 2, "success_threshold": 60},
    }), encoding="utf-8")
    return str(path)


def test_run_matching_for_team(config_path, tmp_path):
    output = tmp_path / "proposal.json"
    report = tmp_path / "report.json"

    result = run_matching(
        config_path,
        str(SAMPLE_SNAPSHOT),
        team_id="team-a",
        output_path=str(output),
        report_path=str(report),
    )

    assert result["success"]
    summary = result["proposal"]["summary"]
    assert summary["total_students"] == 4
    assert summary["assigned_count"] == 4
    assert result["proposal"]["status"] == "PENDING"

    with open(output, encoding="utf-8") as f:
        assert json.load(f)["id"] == result["proposal"]["id"]
    assert report.exists()


def test_run_matching_restricts_teacher_pool(config_path):
    result = run_matching(
        config_path,
        str(SAMPLE_SNAPSHOT),
        student_ids=["s-001", "s-005"],
        teacher_ids=["t-lee"],
    )
    teachers = {a["teacher_id"] for a in result["proposal"]["assignments"]}
    assert teachers == {"t-lee"}


def test_main_returns_error_code_for_missing_snapshot(config_path, tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", [
        "matching.run",
        "--config", config_path,
        "--profiles", str(tmp_path / "missing.yaml"),
        "--team", "team-a",
    ])
    assert main() == 1


def test_main_success(config_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", [
        "matching.run",
        "--config", config_path,
        "--profiles", str(SAMPLE_SNAPSHOT),
        "--students", "s-002", "s-003",
    ])
    assert main() == 0


def test_package_readme_is_declared():
    pyproject = (PROJECT_ROOT / "pyproject.toml").read_text(encoding="utf-8")
    assert 'readme = "README.md"' in pyproject
    assert (PROJECT_ROOT / "README.md").exists()
