"""Hill climbing: move to the best trial only when it strictly improves."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..criteria import GreedyCriterion
from ..engine import GenericLocalSearchOptimizer
from .base import PresetOptimizer


@dataclass(frozen=True)
class HillClimbingOptimizer(PresetOptimizer):
    """Greedy local search without restarts.

    - ``patience``: give up after this many iterations without improvement.
    - ``n_trials``: number of trial solutions generated per iteration.

    Since a regressing move is never accepted, the current solution is always
    the best one seen so far.
    """

    patience: int
    n_trials: int
    max_workers: Optional[int] = None

    def engine(self) -> GenericLocalSearchOptimizer:
        return GenericLocalSearchOptimizer(
            patience=self.patience,
            n_trials=self.n_trials,
            criterion=GreedyCriterion(),
            max_workers=self.max_workers,
        )
