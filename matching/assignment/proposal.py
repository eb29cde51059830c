"""
Assignment proposals.

A proposal is the reviewable output of one batch matching run: which
teacher each in-scope student would be moved to, with what score, and
summary statistics for the whole batch.

Lifecycle:
    PENDING --apply-->  APPLIED    (terminal)
    PENDING --cancel--> CANCELLED  (terminal)

Nothing is reassigned while a proposal is PENDING. Applying it hands the
diff payload [{student_id, teacher_id, score}] to an audit sink; the
surrounding application performs the actual reassignment.

Summary invariants:
    assigned_count + excluded_count == total_students
    success_count + failure_count   == assigned_count
"""

import json
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, List, Optional, Callable, Sequence

import numpy as np
import pandas as pd

from ..errors import InvalidProposalTransition, InvalidScopeError
from ..scoring.aggregator import CompatibilityScore

logger = logging.getLogger(__name__)

AuditSink = Callable[[List[Dict[str, Any]]], None]


class ProposalStatus(Enum):
    """Proposal lifecycle states."""
    PENDING = "PENDING"
    APPLIED = "APPLIED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class AssignmentScope:
    """
    Which students a matching run covers.

    Exactly one of team_id or student_ids must be given.
    """
    team_id: Optional[str] = None
    student_ids: Optional[Sequence[str]] = None

    def __post_init__(self):
        if (self.team_id is None) == (self.student_ids is None):
            raise InvalidScopeError("Scope needs exactly one of team_id or student_ids")
        if isinstance(self.student_ids, str):
            raise InvalidScopeError("student_ids must be a sequence of ids, not a single string")
        if self.student_ids is not None:
            object.__setattr__(self, "student_ids", tuple(self.student_ids))

    def to_dict(self) -> Dict[str, Any]:
        if self.team_id is not None:
            return {"team_id": self.team_id}
        return {"student_ids": list(self.student_ids)}


@dataclass(frozen=True)
class ProposedAssignment:
    """One student -> teacher move with its compatibility score."""
    student_id: str
    teacher_id: str
    score: float
    details: Optional[CompatibilityScore] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Diff-payload shape consumed by the audit log writer."""
        return {
            "student_id": self.student_id,
            "teacher_id": self.teacher_id,
            "score": self.score,
        }


@dataclass(frozen=True)
class ProposalSummary:
    """Aggregate statistics for a proposal."""
    total_students: int
    assigned_count: int
    excluded_count: int
    success_count: int
    failure_count: int
    average_score: float
    min_score: float
    max_score: float
    created_at: datetime
    status: ProposalStatus

    @classmethod
    def from_assignments(
        cls,
        assignments: Sequence[ProposedAssignment],
        total_students: int,
        success_threshold: float,
        created_at: datetime,
        status: ProposalStatus
    ) -> "ProposalSummary":
        """
        Compute summary statistics.

        Scores at or above success_threshold count as successes; the rest
        as failures. Empty proposals report 0 for all score statistics.
        """
        scores = np.array([a.score for a in assignments], dtype=float)
        assigned = len(assignments)
        success = int(np.sum(scores >= success_threshold)) if assigned else 0

        return cls(
            total_students=total_students,
            assigned_count=assigned,
            excluded_count=total_students - assigned,
            success_count=success,
            failure_count=assigned - success,
            average_score=float(np.mean(scores)) if assigned else 0.0,
            min_score=float(np.min(scores)) if assigned else 0.0,
            max_score=float(np.max(scores)) if assigned else 0.0,
            created_at=created_at,
            status=status,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_students": self.total_students,
            "assigned_count": self.assigned_count,
            "excluded_count": self.excluded_count,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "average_score": self.average_score,
            "min_score": self.min_score,
            "max_score": self.max_score,
            "created_at": self.created_at.isoformat(),
            "status": self.status.value,
        }


class AssignmentProposal:
    """
    Batch student -> teacher assignment proposal.

    Attributes:
        id: Unique proposal identifier
        scope: The AssignmentScope the proposal was built for
        created_at: Creation timestamp (UTC)
        assignments: Proposed moves, in scope order
        excluded_student_ids: In-scope students with no eligible teacher
        total_students: Number of in-scope students
        success_threshold: Score separating successful from weak matches
        snapshot_versions: Upstream profile versions read to build the proposal
    """

    def __init__(
        self,
        scope: AssignmentScope,
        assignments: Sequence[ProposedAssignment],
        total_students: int,
        excluded_student_ids: Sequence[str] = (),
        success_threshold: float = 60.0,
        snapshot_versions: Optional[Dict[str, int]] = None,
        proposal_id: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        if len(assignments) + len(excluded_student_ids) != total_students:
            raise ValueError(
                f"Assigned ({len(assignments)}) and excluded ({len(excluded_student_ids)}) "
                f"students must add up to total_students ({total_students})"
            )

        self.id = proposal_id or str(uuid.uuid4())
        self.scope = scope
        self.created_at = created_at or datetime.now(timezone.utc)
        self.assignments = tuple(assignments)
        self.excluded_student_ids = tuple(excluded_student_ids)
        self.total_students = total_students
        self.success_threshold = success_threshold
        self.snapshot_versions = dict(snapshot_versions or {})
        self._status = ProposalStatus.PENDING
        self._lock = threading.Lock()

        logger.info(
            f"Created proposal {self.id}: {len(self.assignments)}/{total_students} students assigned"
        )

    @property
    def status(self) -> ProposalStatus:
        return self._status

    @property
    def summary(self) -> ProposalSummary:
        return ProposalSummary.from_assignments(
            self.assignments,
            self.total_students,
            self.success_threshold,
            self.created_at,
            self._status,
        )

    def diff_payload(self) -> List[Dict[str, Any]]:
        """Assignments in the shape consumed by the audit log writer."""
        return [a.to_dict() for a in self.assignments]

    def _transition(self, target: ProposalStatus, before: Optional[Callable[[], None]] = None) -> None:
        with self._lock:
            if self._status is not ProposalStatus.PENDING:
                raise InvalidProposalTransition(self.id, self._status.value, target.value)
            # The proposal stays PENDING if this raises
            if before is not None:
                before()
            self._status = target
        logger.info(f"Proposal {self.id} is now {target.value}")

    def apply(self, audit_sink: Optional[AuditSink] = None) -> List[Dict[str, Any]]:
        """
        Mark the proposal APPLIED and emit the diff payload.

        The sink runs before the status changes, so a sink that raises
        leaves the proposal PENDING and apply can be retried.

        Args:
            audit_sink: Optional callable receiving the diff payload

        Returns:
            The diff payload [{student_id, teacher_id, score}, ...]

        Raises:
            InvalidProposalTransition: If the proposal is not PENDING
        """
        payload = self.diff_payload()
        self._transition(
            ProposalStatus.APPLIED,
            before=(lambda: audit_sink(payload)) if audit_sink is not None else None,
        )
        return payload

    def cancel(self) -> None:
        """
        Mark the proposal CANCELLED.

        Raises:
            InvalidProposalTransition: If the proposal is not PENDING
        """
        self._transition(ProposalStatus.CANCELLED)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "scope": self.scope.to_dict(),
            "created_at": self.created_at.isoformat(),
            "status": self._status.value,
            "assignments": self.diff_payload(),
            "excluded_student_ids": list(self.excluded_student_ids),
            "summary": self.summary.to_dict(),
            "snapshot_versions": dict(self.snapshot_versions),
        }

    def to_frame(self) -> pd.DataFrame:
        """Assignments as a DataFrame, one row per student, with breakdown columns."""
        rows = []
        for a in self.assignments:
            row = a.to_dict()
            if a.details is not None:
                row.update({f"breakdown_{k}": v for k, v in a.details.breakdown.to_dict().items()})
            rows.append(row)
        return pd.DataFrame(rows, columns=None if rows else ["student_id", "teacher_id", "score"])

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info(f"Saved proposal {self.id} to {filepath}")
