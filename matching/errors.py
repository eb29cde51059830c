"""
Exception types for the matching package.

There is no error for missing profile data: absent analyses score the
neutral default.
"""

from typing import Optional


class MatchingError(Exception):
    """Base class for errors raised by the matching package."""


class InvalidProfileRangeError(ValueError):
    """Raised at the ingestion boundary for out-of-domain profile values."""

    def __init__(self, field_name: str, value, expected: str):
        self.field_name = field_name
        self.value = value
        self.expected = expected
        super().__init__(f"{field_name} must be {expected}, got {value!r}")


class PairComputationFailure(MatchingError):
    """A single (teacher, student) pair could not be scored."""

    def __init__(self, teacher_id: str, student_id: str, cause: Optional[BaseException] = None):
        self.teacher_id = teacher_id
        self.student_id = student_id
        self.cause = cause
        message = f"Pair computation failed (teacher={teacher_id}, student={student_id})"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class InvalidProposalTransition(MatchingError):
    """An assignment proposal was asked to leave a terminal state."""

    def __init__(self, proposal_id: str, current: str, requested: str):
        self.proposal_id = proposal_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Proposal {proposal_id} cannot transition from {current} to {requested}"
        )


class InvalidScopeError(MatchingError, ValueError):
    """An assignment scope named neither or both of a team and student ids."""
