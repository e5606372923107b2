"""Per-iteration progress notifications."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .score import Score


@dataclass(frozen=True)
class OptProgress:
    """Read-only view of the search state after one iteration.

    ``best_solution`` is a private copy made for this notification only, so a
    callback may keep or modify it without affecting the search.
    """

    iteration: int
    accepted_count: int
    best_solution: Any
    best_score: Score


OptCallback = Callable[[OptProgress], None]
