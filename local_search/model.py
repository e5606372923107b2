"""Problem-side contract consumed by the local search engine.

The engine knows nothing about the structure of a solution. A concrete model
only has to produce random solutions, neighbours of an existing solution and
scores; everything else is optional.

A simple mental model is the quadratic fixture used in the tests:

* A solution is a vector ``x`` of three bounded reals.
* ``generate_random_solution`` draws ``x`` uniformly inside the bounds.
* ``generate_trial_solution`` nudges one coordinate and reuses the current
  score to update the objective incrementally.
* ``evaluate_solution`` returns ``sum((x_i - target_i) ** 2)``; lower is better.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Tuple

import numpy as np

from .score import Score, as_score


class ModelError(Exception):
    """Raised by a model when it cannot provide a feasible solution.

    Typical causes are constraints that are too tight to sample a random
    solution, or a preprocessing hook that rejects the initial solution.
    """


class OptModel(Protocol):
    """Abstract optimisation problem searched by :mod:`local_search`.

    Trial generation may run concurrently from several threads, each with its
    own :class:`numpy.random.Generator`. Implementations must therefore not
    mutate shared state in ``generate_trial_solution`` unless they synchronise
    it themselves.
    """

    def generate_random_solution(self, rng: np.random.Generator) -> Tuple[Any, float]:
        """Return a random feasible ``(solution, score)`` pair.

        Raises:
            ModelError: if no feasible solution can be constructed.
        """

        ...

    def generate_trial_solution(
        self,
        current_solution: Any,
        rng: np.random.Generator,
        current_score: Optional[float] = None,
    ) -> Tuple[Any, Any, float]:
        """Return ``(solution, extra, score)`` for one neighbour of ``current_solution``.

        ``current_score`` is a hint that lets the model update the objective
        incrementally instead of recomputing it from scratch. ``extra`` is free
        form metadata describing the move; the engine ignores it.
        """

        ...

    def evaluate_solution(self, solution: Any) -> float:
        """Return the score of ``solution``. Must be free of side effects."""

        ...

    def preprocess_solution(self, solution: Any, score: float) -> Tuple[Any, float]:
        """Hook applied once to the initial solution. Identity by default."""

        return solution, score

    def postprocess_solution(self, solution: Any, score: float) -> Tuple[Any, float]:
        """Hook applied once to the final solution. Identity by default."""

        return solution, score


@dataclass(frozen=True)
class Trial:
    """A neighbour produced during one iteration."""

    solution: Any
    score: Score
    extra: Any = None


def preprocess(model: OptModel, solution: Any, score: float) -> Tuple[Any, Score]:
    """Apply ``model.preprocess_solution`` if the model defines it."""
    hook = getattr(model, "preprocess_solution", None)
    if callable(hook):
        solution, score = hook(solution, score)
    return solution, as_score(score)


def postprocess(model: OptModel, solution: Any, score: float) -> Tuple[Any, Score]:
    """Apply ``model.postprocess_solution`` if the model defines it."""
    hook = getattr(model, "postprocess_solution", None)
    if callable(hook):
        solution, score = hook(solution, score)
    return solution, as_score(score)
