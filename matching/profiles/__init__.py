"""Profile value objects and the ingestion boundary that validates them."""

from .schema import (
    MbtiProfile,
    SajuProfile,
    NameProfile,
    PersonalityProfile,
    TeacherProfile,
)
from .loaders import (
    ProfileSnapshot,
    parse_mbti,
    parse_saju,
    parse_name,
    parse_student_profile,
    parse_teacher_profile,
    parse_snapshot,
    load_profile_snapshot,
)

__all__ = [
    "MbtiProfile",
    "SajuProfile",
    "NameProfile",
    "PersonalityProfile",
    "TeacherProfile",
    "ProfileSnapshot",
    "parse_mbti",
    "parse_saju",
    "parse_name",
    "parse_student_profile",
    "parse_teacher_profile",
    "parse_snapshot",
    "load_profile_snapshot",
]
