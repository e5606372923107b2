"""Acceptance criteria for the local search engine.

A criterion decides whether the search moves from the current solution to the
best trial of an iteration. Every criterion exposes a single probability
function ``probability(current_score, trial_score, progress)`` and the engine
turns it into a decision by drawing ``r`` uniformly from ``[0, 1)`` and
accepting iff ``p > r``.

Available criteria
------------------
* :class:`GreedyCriterion` accepts strict improvements only.
* :class:`EpsilonGreedyCriterion` accepts strict improvements, and any move
  with a fixed probability ``epsilon``.
* The annealing family maps the degradation ``trial - current`` to a smooth
  probability that equals 1 when there is no degradation:

  - :class:`SimulatedAnnealingCriterion`: ``exp(-(trial - current) / T)`` with
    a geometric temperature schedule.
  - :class:`RelativeAnnealingCriterion`: ``exp(-w * d)`` with the relative
    difference ``d = (trial - current) / |current|``.
  - :class:`LogisticAnnealingCriterion`: ``2 / (1 + exp(w * d))``.

``progress`` is the fraction of the iteration budget already consumed. Only
schedule-driven criteria use it.
"""
from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

# math.exp overflows a little above 709.
_MAX_EXPONENT = 700.0


def _exp(x: float) -> float:
    return math.exp(min(x, _MAX_EXPONENT))


def _relative_difference(current_score: float, trial_score: float) -> float:
    return (trial_score - current_score) / abs(current_score)


class AcceptanceCriterion:
    """Base class for acceptance policies."""

    def probability(self, current_score: float, trial_score: float, progress: float = 0.0) -> float:
        """Return the probability of moving from ``current_score`` to ``trial_score``."""
        raise NotImplementedError

    def accept(
        self,
        current_score: float,
        trial_score: float,
        rng: np.random.Generator,
        progress: float = 0.0,
    ) -> bool:
        """Draw a decision for one move."""
        r = rng.random()
        return self.probability(current_score, trial_score, progress) > r


@dataclass(frozen=True)
class GreedyCriterion(AcceptanceCriterion):
    """Deterministic hill-climbing rule: never accept a non-improving move."""

    def probability(self, current_score: float, trial_score: float, progress: float = 0.0) -> float:
        return 1.0 if trial_score < current_score else 0.0


@dataclass(frozen=True)
class EpsilonGreedyCriterion(AcceptanceCriterion):
    """Greedy rule with a fixed chance ``epsilon`` of accepting any move."""

    epsilon: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.epsilon <= 1.0:
            raise ValueError(f"epsilon must lie in [0, 1] (got {self.epsilon}).")

    def probability(self, current_score: float, trial_score: float, progress: float = 0.0) -> float:
        return 1.0 if trial_score < current_score else self.epsilon

    def accept(
        self,
        current_score: float,
        trial_score: float,
        rng: np.random.Generator,
        progress: float = 0.0,
    ) -> bool:
        # One draw per decision, improving or not.
        r = rng.random()
        return trial_score < current_score or self.epsilon > r


@dataclass(frozen=True)
class SimulatedAnnealingCriterion(AcceptanceCriterion):
    """Metropolis rule on the absolute score difference.

    Parameters
    ----------
    max_temperature:
        Temperature at the start of the iteration budget.
    min_temperature:
        Temperature reached at the end of the budget. The schedule is
        geometric: ``T = max_temperature * (min_temperature / max_temperature) ** progress``.
    """

    max_temperature: float
    min_temperature: float

    def __post_init__(self) -> None:
        if self.min_temperature <= 0.0:
            raise ValueError(f"min_temperature must be positive (got {self.min_temperature}).")
        if self.max_temperature < self.min_temperature:
            raise ValueError(
                f"max_temperature ({self.max_temperature}) must be >= "
                f"min_temperature ({self.min_temperature})."
            )

    def temperature(self, progress: float) -> float:
        progress = min(max(progress, 0.0), 1.0)
        ratio = self.min_temperature / self.max_temperature
        return self.max_temperature * ratio ** progress

    def probability(self, current_score: float, trial_score: float, progress: float = 0.0) -> float:
        delta = trial_score - current_score
        return _exp(-delta / self.temperature(progress))


@dataclass(frozen=True)
class RelativeAnnealingCriterion(AcceptanceCriterion):
    """Annealing on the relative score difference.

    1. ``d = (trial - current) / |current|``
    2. ``p = exp(-weight * d)``
    """

    weight: float

    def probability(self, current_score: float, trial_score: float, progress: float = 0.0) -> float:
        if current_score == 0.0:
            return 1.0 if trial_score <= current_score else 0.0
        d = _relative_difference(current_score, trial_score)
        return _exp(-self.weight * d)


@dataclass(frozen=True)
class LogisticAnnealingCriterion(AcceptanceCriterion):
    """Logistic transform of the relative score difference.

    ``p = 2 / (1 + exp(weight * d))`` with ``d`` as in
    :class:`RelativeAnnealingCriterion`. Improving moves give ``1 < p <= 2``.
    """

    weight: float

    def probability(self, current_score: float, trial_score: float, progress: float = 0.0) -> float:
        if current_score == 0.0:
            return 1.0 if trial_score <= current_score else 0.0
        d = _relative_difference(current_score, trial_score)
        return 2.0 / (1.0 + _exp(self.weight * d))
