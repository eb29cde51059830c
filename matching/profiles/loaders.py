"""
Ingestion boundary for profile snapshots.

Raw analysis payloads arrive as dictionaries (from a snapshot file or an
upstream service). This module turns them into validated profile objects
before anything reaches the scoring engine, which assumes clean input.

Two modes:
- strict (default): out-of-domain values raise InvalidProfileRangeError
- clamp: values are pulled back into range and a warning is logged

Snapshot file layout (YAML or JSON):

    teams:
      team-a: [s1, s2]
    students:
      - id: s1
        version: 3
        mbti: {type: ENFP, percentages: {E: 70, I: 30, ...}}
        saju: {wood: 2, fire: 1, earth: 2, metal: 1, water: 2}
        name: {won: 12, hyung: 18, yi: 9, jeong: 25}
    teachers:
      - id: t1
        current_load: 8
        mbti: ...
"""

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from ..errors import InvalidProfileRangeError
from .schema import (
    MBTI_AXES,
    MBTI_LETTERS,
    ELEMENT_ORDER,
    GRID_ORDER,
    MbtiProfile,
    SajuProfile,
    NameProfile,
    PersonalityProfile,
    TeacherProfile,
)

logger = logging.getLogger(__name__)

# Saju engines report elements under their Korean names
ELEMENT_ALIASES = {
    "목": "wood",
    "화": "fire",
    "토": "earth",
    "금": "metal",
    "수": "water",
}


@dataclass
class ProfileSnapshot:
    """Validated profiles loaded from one snapshot."""
    students: Dict[str, PersonalityProfile] = field(default_factory=dict)
    teachers: Dict[str, TeacherProfile] = field(default_factory=dict)
    teams: Dict[str, List[str]] = field(default_factory=dict)


def _as_number(field_name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidProfileRangeError(field_name, value, "a finite number")
    return float(value)


def _clamp(field_name: str, value: float, low: float, high: Optional[float] = None) -> float:
    clamped = max(low, value if high is None else min(high, value))
    if clamped != value:
        logger.warning(f"Clamped {field_name} from {value} to {clamped}")
    return clamped


def parse_mbti(raw: Optional[Dict[str, Any]], clamp: bool = False) -> Optional[MbtiProfile]:
    """
    Parse an MBTI payload.

    Accepts either {"type": ..., "percentages": {...}} or a flat mapping
    of axis letters. In clamp mode each letter is clipped to [0, 100] and
    each axis pair is rescaled to sum to 100.

    Args:
        raw: MBTI payload, or None when the person has no MBTI analysis
        clamp: Clamp out-of-range values instead of raising

    Returns:
        MbtiProfile, or None if raw is None
    """
    if raw is None:
        return None

    percentages_raw = raw.get("percentages", raw)
    type_code = raw.get("type") if "percentages" in raw else None

    percentages = {}
    for letter in MBTI_LETTERS:
        if letter not in percentages_raw:
            raise InvalidProfileRangeError("mbti.percentages", letter, "a value for every axis letter")
        value = _as_number(f"mbti.{letter}", percentages_raw[letter])
        if clamp:
            value = _clamp(f"mbti.{letter}", value, 0.0, 100.0)
        percentages[letter] = value

    if clamp:
        for first, second in MBTI_AXES:
            total = percentages[first] + percentages[second]
            if total == 0:
                percentages[first] = percentages[second] = 50.0
            elif total != 100:
                percentages[first] = percentages[first] * 100 / total
                percentages[second] = 100 - percentages[first]

    return MbtiProfile(percentages=percentages, type_code=type_code)


def parse_saju(raw: Optional[Dict[str, Any]], clamp: bool = False) -> Optional[SajuProfile]:
    """
    Parse a five-element distribution.

    Accepts English or Korean element keys, optionally nested under
    "elements". Missing elements count as 0.
    """
    if raw is None:
        return None

    elements_raw = raw.get("elements", raw)
    values = {element: 0.0 for element in ELEMENT_ORDER}
    for key, value in elements_raw.items():
        element = ELEMENT_ALIASES.get(key, key)
        if element not in values:
            raise InvalidProfileRangeError("saju", key, f"one of {ELEMENT_ORDER}")
        number = _as_number(f"saju.{element}", value)
        if clamp:
            number = _clamp(f"saju.{element}", number, 0.0)
        values[element] = number

    return SajuProfile(**values)


def parse_name(raw: Optional[Dict[str, Any]], clamp: bool = False) -> Optional[NameProfile]:
    """
    Parse name-numerology grids.

    Accepts {"grids": {...}} or a flat mapping. In clamp mode negative
    stroke counts become 0 and fractional values are rounded.
    """
    if raw is None:
        return None

    grids_raw = raw.get("grids", raw)
    if grids_raw is None:
        return None

    values = {}
    for grid in GRID_ORDER:
        if grid not in grids_raw:
            raise InvalidProfileRangeError("name.grids", grid, "a value for every grid")
        value = grids_raw[grid]
        if clamp:
            number = _clamp(f"name.{grid}", _as_number(f"name.{grid}", value), 0.0)
            value = int(round(number))
        values[grid] = value

    return NameProfile(**values)


def _parse_version(record: Dict[str, Any]) -> Optional[int]:
    version = record.get("version")
    if version is not None and (isinstance(version, bool) or not isinstance(version, int)):
        raise InvalidProfileRangeError("version", version, "an integer")
    return version


def parse_student_profile(record: Dict[str, Any], clamp: bool = False) -> PersonalityProfile:
    """Parse one student record into a PersonalityProfile."""
    return PersonalityProfile(
        subject_id=str(record["id"]),
        mbti=parse_mbti(record.get("mbti"), clamp),
        saju=parse_saju(record.get("saju"), clamp),
        name=parse_name(record.get("name"), clamp),
        version=_parse_version(record),
    )


def parse_teacher_profile(record: Dict[str, Any], clamp: bool = False) -> TeacherProfile:
    """Parse one teacher record into a TeacherProfile."""
    current_load = record.get("current_load")
    if clamp and current_load is not None:
        current_load = int(_clamp("current_load", _as_number("current_load", current_load), 0.0))

    return TeacherProfile(
        subject_id=str(record["id"]),
        mbti=parse_mbti(record.get("mbti"), clamp),
        saju=parse_saju(record.get("saju"), clamp),
        name=parse_name(record.get("name"), clamp),
        version=_parse_version(record),
        current_load=current_load,
    )


def parse_snapshot(data: Dict[str, Any], clamp: bool = False) -> ProfileSnapshot:
    """
    Build a ProfileSnapshot from an already-decoded dictionary.

    Raises:
        ValueError: If a subject id appears twice in the same section
    """
    snapshot = ProfileSnapshot()

    for record in data.get("students", []) or []:
        profile = parse_student_profile(record, clamp)
        if profile.subject_id in snapshot.students:
            raise ValueError(f"Duplicate student id in snapshot: {profile.subject_id}")
        snapshot.students[profile.subject_id] = profile

    for record in data.get("teachers", []) or []:
        profile = parse_teacher_profile(record, clamp)
        if profile.subject_id in snapshot.teachers:
            raise ValueError(f"Duplicate teacher id in snapshot: {profile.subject_id}")
        snapshot.teachers[profile.subject_id] = profile

    for team_id, members in (data.get("teams", {}) or {}).items():
        snapshot.teams[str(team_id)] = [str(m) for m in members]

    return snapshot


def load_profile_snapshot(filepath: str, clamp: bool = False) -> ProfileSnapshot:
    """
    Load and validate a profile snapshot from YAML or JSON.

    Args:
        filepath: Path to the snapshot file (.json, .yaml or .yml)
        clamp: Clamp out-of-range values instead of raising

    Returns:
        ProfileSnapshot with validated students, teachers and team rosters

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty
        InvalidProfileRangeError: If a value is out of domain (strict mode)
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Profile snapshot not found: {filepath}")

    logger.info(f"Loading profile snapshot from {filepath}")
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not data:
        raise ValueError(f"Profile snapshot is empty: {filepath}")

    snapshot = parse_snapshot(data, clamp)
    logger.info(
        f"Loaded {len(snapshot.students)} students, {len(snapshot.teachers)} teachers, "
        f"{len(snapshot.teams)} teams"
    )
    return snapshot
