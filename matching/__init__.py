"""
Teacher-Student Compatibility Matching

This package implements the compatibility scoring engine used to pair
students with teachers, and the batch workflow that turns pair scores into
reviewable assignment proposals.

Key Design Decisions:
- Leaf calculators are pure functions over read-only profile snapshots
- Missing analysis data degrades to a neutral 0.5, never to "incompatible"
- Weights and thresholds are fixed constants so scores are audit-stable
- Batch scoring is fail-soft: one broken pair never aborts the batch
"""

__version__ = "1.0.0"
