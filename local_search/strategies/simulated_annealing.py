"""Simulated annealing with a geometric cooling schedule."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..criteria import SimulatedAnnealingCriterion
from ..engine import GenericLocalSearchOptimizer
from .base import PresetOptimizer


@dataclass(frozen=True)
class SimulatedAnnealingOptimizer(PresetOptimizer):
    """Simulated annealing over the absolute score difference.

    1. ``d <- trial_score - current_score``
    2. ``T <- max_temperature * (min_temperature / max_temperature) ** (iteration / n_iter)``
    3. accept if ``exp(-d / T) > rand(0, 1)``

    The search returns to the best solution every ``return_iter`` iterations
    without improvement.
    """

    patience: int
    n_trials: int
    return_iter: int
    max_temperature: float
    min_temperature: float
    max_workers: Optional[int] = None

    def engine(self) -> GenericLocalSearchOptimizer:
        return GenericLocalSearchOptimizer(
            patience=self.patience,
            n_trials=self.n_trials,
            criterion=SimulatedAnnealingCriterion(
                max_temperature=self.max_temperature,
                min_temperature=self.min_temperature,
            ),
            return_iter=self.return_iter,
            max_workers=self.max_workers,
        )
