"""Relative annealing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..criteria import RelativeAnnealingCriterion
from ..engine import GenericLocalSearchOptimizer
from .base import PresetOptimizer


@dataclass(frozen=True)
class RelativeAnnealingOptimizer(PresetOptimizer):
    """Annealing on the relative score difference.

    Unlike simulated annealing, whether to accept a trial depends on the
    score difference relative to the current score, so no temperature has to
    be tuned to the scale of the objective:

    1. ``d <- (trial_score - current_score) / |current_score|``
    2. ``p <- exp(-weight * d)``
    3. accept if ``p > rand(0, 1)``

    - ``return_iter``: return to the best solution after this many iterations
      without improvement.
    - ``weight``: multiplier of the relative score difference.
    """

    patience: int
    n_trials: int
    return_iter: int
    weight: float
    max_workers: Optional[int] = None

    def engine(self) -> GenericLocalSearchOptimizer:
        return GenericLocalSearchOptimizer(
            patience=self.patience,
            n_trials=self.n_trials,
            criterion=RelativeAnnealingCriterion(weight=self.weight),
            return_iter=self.return_iter,
            max_workers=self.max_workers,
        )
