"""Logistic annealing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..criteria import LogisticAnnealingCriterion
from ..engine import GenericLocalSearchOptimizer
from .base import PresetOptimizer


@dataclass(frozen=True)
class LogisticAnnealingOptimizer(PresetOptimizer):
    """Annealing with a logistic acceptance curve.

    ``p = 2 / (1 + exp(weight * d))`` where ``d`` is the relative score
    difference. Compared with :class:`RelativeAnnealingOptimizer` the curve is
    flatter around zero degradation, so slightly worse trials are accepted
    more often.
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
            criterion=LogisticAnnealingCriterion(weight=self.weight),
            return_iter=self.return_iter,
            max_workers=self.max_workers,
        )
