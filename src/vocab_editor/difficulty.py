"""Difficulty buckets derived from a learner's difficulty score."""

from __future__ import annotations

from enum import Enum

# Upper bound of the easy bucket (inclusive)
EASY_MAX = 0.45
# Lower bound of the hard bucket (inclusive)
HARD_MIN = 0.69


class Difficulty(str, Enum):
    """Three-bucket difficulty category of a word."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def classify(score: float | None) -> Difficulty:
    """Map a score in [0, 1] to a difficulty bucket.

    An absent score is treated as medium. Both range checks of the medium
    bucket are strict, so 0.45 falls into EASY and 0.69 into HARD.
    """
    if score is None or EASY_MAX < score < HARD_MIN:
        return Difficulty.MEDIUM
    if score <= EASY_MAX:
        return Difficulty.EASY
    return Difficulty.HARD
