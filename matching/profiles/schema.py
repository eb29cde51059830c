"""
Profile value objects consumed by the scoring engine.

Profiles are read-only snapshots of analyses produced elsewhere (MBTI
survey scoring, Saju pillar analysis, name-numerology stroke analysis).
Every sub-profile is optional: a person who has not been analysed yet
simply carries None, and the calculators fall back to a neutral value.

Relationships are ID references only. A profile never points at another
profile, a team, or a live database row.

MBTI percentages:
    Eight axis letters E, I, S, N, T, F, J, P, each in [0, 100],
    with each axis pair summing to 100.

Saju five elements:
    wood, fire, earth, metal, water - non-negative weights
    (typically counts out of the eight pillar characters).

Name-numerology grids:
    won, hyung, yi, jeong - non-negative stroke-derived integers.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple

from ..errors import InvalidProfileRangeError

MBTI_AXES: List[Tuple[str, str]] = [("E", "I"), ("S", "N"), ("T", "F"), ("J", "P")]
MBTI_LETTERS: List[str] = [letter for axis in MBTI_AXES for letter in axis]
ELEMENT_ORDER: List[str] = ["wood", "fire", "earth", "metal", "water"]
GRID_ORDER: List[str] = ["won", "hyung", "yi", "jeong"]

# Tolerance for axis pairs that were rounded independently upstream
AXIS_SUM_TOLERANCE = 1.0


@dataclass(frozen=True)
class MbtiProfile:
    """
    MBTI analysis result as eight axis percentages.

    Attributes:
        percentages: Mapping of the eight axis letters to [0, 100]
        type_code: Four-letter type; derived from the percentages if omitted,
            otherwise it must name the larger pole of every axis
    """
    percentages: Dict[str, float]
    type_code: Optional[str] = None

    def __post_init__(self):
        """Validate axis letters, bounds, pair sums and the type code."""
        missing = [letter for letter in MBTI_LETTERS if letter not in self.percentages]
        if missing:
            raise InvalidProfileRangeError("mbti.percentages", missing, "a value for every axis letter")

        for letter in MBTI_LETTERS:
            val = self.percentages[letter]
            if isinstance(val, bool) or not isinstance(val, (int, float)) or not 0 <= val <= 100:
                raise InvalidProfileRangeError(f"mbti.{letter}", val, "a number between 0 and 100")

        for first, second in MBTI_AXES:
            total = self.percentages[first] + self.percentages[second]
            if abs(total - 100) > AXIS_SUM_TOLERANCE:
                raise InvalidProfileRangeError(f"mbti.{first}+{second}", total, "100")

        if self.type_code is None:
            object.__setattr__(self, "type_code", self._derive_type_code())
        else:
            code = self.type_code.upper()
            if len(code) != 4 or any(code[i] not in MBTI_AXES[i] for i in range(4)):
                raise InvalidProfileRangeError("mbti.type", self.type_code, "a four-letter MBTI code")
            # Either pole is accepted on a 50/50 axis
            for letter, (first, second) in zip(code, MBTI_AXES):
                other = second if letter == first else first
                if self.percentages[letter] < self.percentages[other]:
                    raise InvalidProfileRangeError(
                        "mbti.type", self.type_code, f"consistent with the percentages on {first}/{second}"
                    )
            object.__setattr__(self, "type_code", code)

    def _derive_type_code(self) -> str:
        # Ties resolve to the first pole of the axis
        return "".join(
            first if self.percentages[first] >= self.percentages[second] else second
            for first, second in MBTI_AXES
        )

    def __getitem__(self, letter: str) -> float:
        return float(self.percentages[letter])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type_code,
            "percentages": {letter: float(self.percentages[letter]) for letter in MBTI_LETTERS},
        }


@dataclass(frozen=True)
class SajuProfile:
    """Five-element distribution from a Saju analysis."""
    wood: float = 0.0
    fire: float = 0.0
    earth: float = 0.0
    metal: float = 0.0
    water: float = 0.0

    def __post_init__(self):
        for element in ELEMENT_ORDER:
            val = getattr(self, element)
            if isinstance(val, bool) or not isinstance(val, (int, float)) or not math.isfinite(val) or val < 0:
                raise InvalidProfileRangeError(f"saju.{element}", val, "a finite non-negative number")

    def to_vector(self) -> List[float]:
        """Element weights in wood, fire, earth, metal, water order."""
        return [float(getattr(self, element)) for element in ELEMENT_ORDER]

    def to_dict(self) -> Dict[str, float]:
        return {element: float(getattr(self, element)) for element in ELEMENT_ORDER}


@dataclass(frozen=True)
class NameProfile:
    """Four structural grids from a name-numerology analysis."""
    won: int
    hyung: int
    yi: int
    jeong: int

    def __post_init__(self):
        for grid in GRID_ORDER:
            val = getattr(self, grid)
            if isinstance(val, bool) or not isinstance(val, int) or val < 0:
                raise InvalidProfileRangeError(f"name.{grid}", val, "a non-negative integer")

    def to_vector(self) -> List[int]:
        return [getattr(self, grid) for grid in GRID_ORDER]

    def to_dict(self) -> Dict[str, int]:
        return {grid: getattr(self, grid) for grid in GRID_ORDER}


@dataclass(frozen=True)
class PersonalityProfile:
    """
    All analyses known for one person.

    Attributes:
        subject_id: Student or teacher identifier
        mbti: MBTI percentages, or None if not analysed
        saju: Five-element distribution, or None
        name: Name-numerology grids, or None
        version: Upstream snapshot version, if the source tracks one
    """
    subject_id: Optional[str] = None
    mbti: Optional[MbtiProfile] = None
    saju: Optional[SajuProfile] = None
    name: Optional[NameProfile] = None
    version: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.subject_id,
            "version": self.version,
            "mbti": self.mbti.to_dict() if self.mbti else None,
            "saju": self.saju.to_dict() if self.saju else None,
            "name": self.name.to_dict() if self.name else None,
        }


@dataclass(frozen=True)
class TeacherProfile(PersonalityProfile):
    """A personality profile plus the teacher's current workload."""
    current_load: Optional[int] = field(default=None)

    def __post_init__(self):
        load = self.current_load
        if load is not None and (isinstance(load, bool) or not isinstance(load, int) or load < 0):
            raise InvalidProfileRangeError("current_load", load, "a non-negative integer")

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["current_load"] = self.current_load
        return result
