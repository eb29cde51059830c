"""Shared profile builders for the test suite."""

import pytest

from matching.profiles import (
    MbtiProfile,
    SajuProfile,
    NameProfile,
    PersonalityProfile,
    TeacherProfile,
)
from matching.assignment import InMemoryProfileSource


def make_mbti(e=50, s=50, t=50, j=50):
    """MBTI profile from the first pole of each axis."""
    return MbtiProfile(percentages={
        "E": e, "I": 100 - e,
        "S": s, "N": 100 - s,
        "T": t, "F": 100 - t,
        "J": j, "P": 100 - j,
    })


def make_student(student_id, mbti=None, saju=None, name=None, version=None):
    return PersonalityProfile(subject_id=student_id, mbti=mbti, saju=saju, name=name, version=version)


def make_teacher(teacher_id, current_load=None, mbti=None, saju=None, name=None, version=None):
    return TeacherProfile(
        subject_id=teacher_id,
        mbti=mbti,
        saju=saju,
        name=name,
        version=version,
        current_load=current_load,
    )


@pytest.fixture
def full_teacher():
    return make_teacher(
        "t1",
        current_load=5,
        mbti=make_mbti(e=70, s=40, t=35, j=60),
        saju=SajuProfile(wood=2, fire=2, earth=1, metal=1, water=2),
        name=NameProfile(won=12, hyung=18, yi=9, jeong=25),
    )


@pytest.fixture
def similar_student():
    return make_student(
        "s1",
        mbti=make_mbti(e=72, s=38, t=36, j=58),
        saju=SajuProfile(wood=2, fire=2, earth=1, metal=1, water=2),
        name=NameProfile(won=13, hyung=18, yi=10, jeong=25),
    )


@pytest.fixture
def team_source():
    """Three teachers and a ten-student team."""
    teachers = {
        "t-a": make_teacher("t-a", current_load=5, mbti=make_mbti(e=80, s=30), version=1),
        "t-b": make_teacher("t-b", current_load=15, mbti=make_mbti(e=20, s=70), version=2),
        "t-c": make_teacher("t-c", current_load=25, mbti=make_mbti(e=50, s=50), version=3),
    }
    students = {
        f"s{i}": make_student(f"s{i}", mbti=make_mbti(e=10 * i, s=100 - 10 * i), version=i)
        for i in range(10)
    }
    teams = {"team-1": [f"s{i}" for i in range(10)]}
    return InMemoryProfileSource(students, teachers, teams)
