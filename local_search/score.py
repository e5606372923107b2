"""Totally ordered objective values.

Scores follow the minimisation convention: lower is better. Plain floats are
already ordered except for NaN, so :class:`Score` is a thin ``float`` subclass
that refuses NaN at construction time. Once a value is a ``Score`` every pair
of scores compares consistently and the search loop never has to think about
incomparable values.
"""
from __future__ import annotations

import math
from typing import Any


class InvalidScoreError(ValueError):
    """Raised when a model produces a score that cannot be ordered."""


class Score(float):
    """A ``float`` that is guaranteed not to be NaN.

    Infinities are accepted since they are still ordered.
    """

    def __new__(cls, value: Any) -> "Score":
        obj = super().__new__(cls, value)
        if math.isnan(obj):
            raise InvalidScoreError(f"Score must not be NaN (got {value!r}).")
        return obj


def as_score(value: Any) -> Score:
    """Return ``value`` as a :class:`Score`, reusing it if it already is one."""
    if isinstance(value, Score):
        return value
    return Score(value)
