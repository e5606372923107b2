"""Epsilon-greedy local search."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..criteria import EpsilonGreedyCriterion
from ..engine import GenericLocalSearchOptimizer
from .base import PresetOptimizer


@dataclass(frozen=True)
class EpsilonGreedyOptimizer(PresetOptimizer):
    """Greedy search that also accepts any trial with probability ``epsilon``.

    With ``epsilon = 0`` this behaves like :class:`HillClimbingOptimizer`.
    Accepted regressions let the current solution drift away from the best
    one, which is tracked separately and returned at the end.
    """

    patience: int
    n_trials: int
    epsilon: float
    max_workers: Optional[int] = None

    def engine(self) -> GenericLocalSearchOptimizer:
        return GenericLocalSearchOptimizer(
            patience=self.patience,
            n_trials=self.n_trials,
            criterion=EpsilonGreedyCriterion(epsilon=self.epsilon),
            max_workers=self.max_workers,
        )
