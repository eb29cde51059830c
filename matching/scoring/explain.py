"""
Rule-based explanations for compatibility scores.

Reasons are produced in a fixed order, so the same inputs always yield
the same list:

1. MBTI similarity          - four tiers, one always fires
2. Learning-style similarity - two positive tiers only
3. Saju similarity           - two tiers
4. Name similarity           - one tier
5. Load-balance points       - three tiers
6. MBTI + learning-style points >= 40 - combined bonus
7. Generic fallback when nothing above fired
"""

from typing import List

from ..configs.scoring import SCORING_CONFIG, ReasonThresholds

MBTI_REASONS = [
    "MBTI tendencies are very similar, so communication styles should match well.",
    "MBTI tendencies are alike, so everyday communication should come easily.",
    "MBTI tendencies differ somewhat, but the two can complement each other.",
    "MBTI tendencies differ widely, but mutual complementing can create synergy.",
]

LEARNING_STYLE_REASONS = [
    "Learning styles fit well, enabling effective instruction.",
    "Learning styles largely agree, which should support efficient study.",
]

SAJU_REASONS = [
    "Saju five-element balance fits well, favouring a lasting relationship.",
    "Saju energies blend together for a harmonious relationship.",
]

NAME_REASONS = [
    "Name-numerology traits fit well, suggesting a positive relationship.",
]

LOAD_BALANCE_REASONS = [
    "The teacher currently has few students, allowing sufficient attention and guidance.",
    "The teacher's student count is moderate, allowing balanced guidance.",
    "The teacher has a fairly large number of students but can still manage efficiently.",
]

COMBINED_STYLE_REASON = "Shows high compatibility in both personality and learning style."

FALLBACK_REASON = (
    "Teacher-student compatibility was calculated by combining the available analysis data."
)


def _tier(value: float, thresholds) -> int:
    """Index of the first threshold the value reaches, or -1."""
    for index, threshold in enumerate(thresholds):
        if value >= threshold:
            return index
    return -1


def generate_reasons(
    breakdown,
    similarities,
    thresholds: ReasonThresholds = SCORING_CONFIG.reasons
) -> List[str]:
    """
    Build the ordered list of reasons for a scored pair.

    Args:
        breakdown: CompatibilityBreakdown (weighted points)
        similarities: CompatibilitySimilarities (raw [0, 1] values)
        thresholds: Reason cut-offs

    Returns:
        Non-empty list of reason strings
    """
    reasons = []

    mbti_tier = _tier(similarities.mbti, thresholds.mbti)
    reasons.append(MBTI_REASONS[mbti_tier])  # -1 selects the "else" tier

    style_tier = _tier(similarities.learning_style, thresholds.learning_style)
    if style_tier >= 0:
        reasons.append(LEARNING_STYLE_REASONS[style_tier])

    saju_tier = _tier(similarities.saju, thresholds.saju)
    if saju_tier >= 0:
        reasons.append(SAJU_REASONS[saju_tier])

    name_tier = _tier(similarities.name, thresholds.name)
    if name_tier >= 0:
        reasons.append(NAME_REASONS[name_tier])

    load_tier = _tier(breakdown.load_balance, thresholds.load_balance)
    if load_tier >= 0:
        reasons.append(LOAD_BALANCE_REASONS[load_tier])

    if breakdown.mbti + breakdown.learning_style >= thresholds.combined_style_bonus:
        reasons.append(COMBINED_STYLE_REASON)

    if not reasons:
        reasons.append(FALLBACK_REASON)

    return reasons
