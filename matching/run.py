"""
Command-line runner for batch assignment proposals.

Usage:
    python -m matching.run --config configs/config.yaml \
        --profiles snapshot.yaml --team team-a --output proposal.json

The runner performs the following steps:
1. Load and validate configuration
2. Load and validate the profile snapshot
3. Score every in-scope student against the teacher pool
4. Build a PENDING assignment proposal
5. Evaluate fairness and save the proposal (and report)

The proposal is never applied here; applying is a separate review step.
"""

import argparse
import logging
import sys
from typing import Dict, Any, List, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run_matching(
    config_path: str,
    profiles_path: str,
    team_id: Optional[str] = None,
    student_ids: Optional[List[str]] = None,
    teacher_ids: Optional[List[str]] = None,
    output_path: Optional[str] = None,
    report_path: Optional[str] = None,
    clamp: bool = False
) -> Dict[str, Any]:
    """
    Build an assignment proposal from a profile snapshot.

    Args:
        config_path: Path to the configuration YAML file
        profiles_path: Path to the profile snapshot (YAML or JSON)
        team_id: Team whose students are in scope
        student_ids: Explicit student ids in scope (alternative to team_id)
        teacher_ids: Teacher pool; defaults to every teacher in the snapshot
        output_path: Where to write the proposal JSON
        report_path: Where to write the evaluation report JSON
        clamp: Clamp out-of-range profile values instead of failing

    Returns:
        Dictionary with the proposal and its evaluation report
    """
    from .configs import load_config, validate_config, MatcherConfig
    from .profiles import load_profile_snapshot
    from .assignment import (
        AssignmentScope,
        InMemoryProfileSource,
        propose_assignments,
        create_evaluation_report,
    )

    logger.info("=" * 60)
    logger.info("BATCH ASSIGNMENT PROPOSAL")
    logger.info("=" * 60)

    config = load_config(config_path)
    issues = validate_config(config)
    for issue in issues:
        logger.warning(f"Config issue: {issue}")

    setup_logging(config.get("global", {}).get("log_level", "INFO"))
    matcher_config = MatcherConfig.from_config(config)
    matcher_config.validate()

    snapshot = load_profile_snapshot(profiles_path, clamp=clamp)
    source = InMemoryProfileSource.from_snapshot(snapshot)

    scope = AssignmentScope(team_id=team_id, student_ids=student_ids)
    pool = teacher_ids if teacher_ids else list(snapshot.teachers)
    logger.info(f"Scope: {scope.to_dict()}, teacher pool: {len(pool)} teachers")

    proposal = propose_assignments(scope, pool, source, matcher_config)
    report = create_evaluation_report(proposal)
    logger.info("\n" + report.summary_text())

    if output_path:
        proposal.save(output_path)
    if report_path:
        report.save(report_path)

    return {
        "success": True,
        "proposal": proposal.to_dict(),
        "report": report.to_dict(),
    }


def main():
    """Main entry point for the runner."""
    parser = argparse.ArgumentParser(
        description="Propose student-to-teacher assignments from compatibility scores"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--profiles",
        type=str,
        required=True,
        help="Path to the profile snapshot (YAML or JSON)"
    )
    scope_group = parser.add_mutually_exclusive_group(required=True)
    scope_group.add_argument("--team", type=str, help="Team whose students are in scope")
    scope_group.add_argument("--students", type=str, nargs="+", help="Student ids in scope")
    parser.add_argument(
        "--teachers",
        type=str,
        nargs="+",
        default=None,
        help="Teacher pool (default: all teachers in the snapshot)"
    )
    parser.add_argument("--output", type=str, default=None, help="Proposal JSON output path")
    parser.add_argument("--report", type=str, default=None, help="Evaluation report JSON output path")
    parser.add_argument(
        "--clamp",
        action="store_true",
        help="Clamp out-of-range profile values instead of failing"
    )

    args = parser.parse_args()

    try:
        result = run_matching(
            args.config,
            args.profiles,
            team_id=args.team,
            student_ids=args.students,
            teacher_ids=args.teachers,
            output_path=args.output,
            report_path=args.report,
            clamp=args.clamp,
        )
        if result["success"]:
            logger.info("\nProposal created successfully!")
            return 0
        logger.error("\nProposal creation failed!")
        return 1
    except Exception as e:
        logger.exception(f"Proposal creation failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
