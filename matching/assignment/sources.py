"""
Upstream profile sources.

The batch matcher never talks to a database directly. It asks a
ProfileSource for read-only snapshots, one subject at a time, so that
retrieval (and its failures) stays in the orchestration layer and the
scoring functions stay pure.

A subject the source has never heard of is treated as "not analysed yet"
and comes back as an empty profile. Retrieval errors (timeouts, broken
connections) are raised by the source and handled per pair by the
matcher.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..profiles.loaders import ProfileSnapshot, load_profile_snapshot
from ..profiles.schema import PersonalityProfile, TeacherProfile

logger = logging.getLogger(__name__)


class ProfileSource(ABC):
    """Read-only access to student and teacher profiles."""

    @abstractmethod
    def get_student_profile(self, student_id: str) -> PersonalityProfile:
        """Return the current profile snapshot for a student."""

    @abstractmethod
    def get_teacher_profile(self, teacher_id: str) -> TeacherProfile:
        """Return the current profile snapshot (with workload) for a teacher."""

    @abstractmethod
    def list_team_students(self, team_id: str) -> List[str]:
        """Return the ids of the students that belong to a team."""


class InMemoryProfileSource(ProfileSource):
    """
    Profile source backed by dictionaries.

    Attributes:
        students: Student profiles keyed by id
        teachers: Teacher profiles keyed by id
        teams: Student id rosters keyed by team id
    """

    def __init__(
        self,
        students: Optional[Dict[str, PersonalityProfile]] = None,
        teachers: Optional[Dict[str, TeacherProfile]] = None,
        teams: Optional[Dict[str, List[str]]] = None
    ):
        self.students = dict(students or {})
        self.teachers = dict(teachers or {})
        self.teams = {team_id: list(members) for team_id, members in (teams or {}).items()}

    @classmethod
    def from_snapshot(cls, snapshot: ProfileSnapshot) -> "InMemoryProfileSource":
        """Create from a validated ProfileSnapshot."""
        return cls(snapshot.students, snapshot.teachers, snapshot.teams)

    @classmethod
    def from_file(cls, filepath: str, clamp: bool = False) -> "InMemoryProfileSource":
        """Load a snapshot file and wrap it."""
        return cls.from_snapshot(load_profile_snapshot(filepath, clamp))

    def get_student_profile(self, student_id: str) -> PersonalityProfile:
        profile = self.students.get(student_id)
        if profile is None:
            logger.debug(f"No analyses for student {student_id}; using empty profile")
            return PersonalityProfile(subject_id=student_id)
        return profile

    def get_teacher_profile(self, teacher_id: str) -> TeacherProfile:
        profile = self.teachers.get(teacher_id)
        if profile is None:
            logger.debug(f"No analyses for teacher {teacher_id}; using empty profile")
            return TeacherProfile(subject_id=teacher_id)
        return profile

    def list_team_students(self, team_id: str) -> List[str]:
        if team_id not in self.teams:
            logger.warning(f"Unknown team {team_id}; roster is empty")
            return []
        return list(self.teams[team_id])
