"""Generic local search loop.

Overview
--------
Every optimiser in this package is the same loop with a different
:class:`~local_search.criteria.AcceptanceCriterion` and restart policy. One
iteration does the following:

1. Stop if the wall-clock time limit has been exceeded.
2. Generate ``n_trials`` neighbours of the current solution in parallel and
   keep the lowest scoring one (:func:`local_search.parallel.best_trial`).
3. Ask the criterion whether to move to that trial.
4. Update the best snapshot when the current score strictly improves on it,
   resetting the patience counter; otherwise increment the counter.
5. With ``return_iter`` set, jump back to the best snapshot every
   ``return_iter`` non-improving iterations. The counter is left untouched.
6. Stop once the counter reaches ``patience``.
7. Notify the callback with a fresh :class:`~local_search.callback.OptProgress`.

The loop stops after ``n_iter`` iterations at the latest. It always returns
the tracked best solution, which for a greedy criterion coincides with the
current one.

The callback runs synchronously on the loop thread, so its latency counts
towards the time limit. The time limit is only checked between iterations;
a batch of trials that has been dispatched always runs to completion.
"""
from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple
import copy
import logging
import math
import time

import numpy as np

from .callback import OptCallback, OptProgress
from .criteria import AcceptanceCriterion
from .model import OptModel, postprocess, preprocess
from .parallel import best_trial, spawn_streams
from .score import Score, as_score

logger = logging.getLogger(__name__)


class StopReason(Enum):
    """Why the search loop terminated. All of them are successful exits."""

    PATIENCE_EXHAUSTED = "patience_exhausted"
    TIME_LIMIT_REACHED = "time_limit_reached"
    ITERATION_BUDGET_EXHAUSTED = "iteration_budget_exhausted"


class LocalSearchOptimizer:
    """Base class for optimisers that search a :class:`~local_search.model.OptModel`."""

    def optimize(
        self,
        model: OptModel,
        initial_solution: Any,
        initial_score: float,
        n_iter: int,
        time_limit: float = math.inf,
        callback: Optional[OptCallback] = None,
        seed: Any = None,
        executor: Optional[Executor] = None,
    ) -> Tuple[Any, Score]:
        """Search from ``initial_solution`` and return the best ``(solution, score)``."""
        raise NotImplementedError

    def run(
        self,
        model: OptModel,
        initial_solution_and_score: Optional[Tuple[Any, float]],
        n_iter: int,
        time_limit: float = math.inf,
        callback: Optional[OptCallback] = None,
        seed: Optional[int] = None,
        executor: Optional[Executor] = None,
    ) -> Tuple[Any, Score]:
        """Resolve the initial solution, optimise, and post-process the result.

        Parameters
        ----------
        model:
            Problem to optimise.
        initial_solution_and_score:
            Starting point. When ``None`` the model generates a random one.
        n_iter:
            Maximum number of iterations.
        time_limit:
            Wall-clock budget in seconds, checked between iterations.
        callback:
            Optional function called with an :class:`OptProgress` after each
            iteration.
        seed:
            Seed for every random stream used by the run. ``None`` draws fresh
            entropy from the operating system.
        executor:
            Optional executor for trial generation. When ``None`` a thread pool
            is created for the duration of the call if ``n_trials > 1``.

        Raises
        ------
        ModelError
            If the model cannot generate a random initial solution or rejects
            the initial solution during preprocessing. Nothing has been searched
            at that point.
        """

        seed_sequence = np.random.SeedSequence(seed)
        init_seq, search_seq = seed_sequence.spawn(2)

        if initial_solution_and_score is None:
            rng = np.random.default_rng(init_seq)
            initial_solution, initial_score = model.generate_random_solution(rng)
        else:
            initial_solution, initial_score = initial_solution_and_score

        initial_solution, initial_score = preprocess(model, initial_solution, initial_score)

        solution, score = self.optimize(
            model,
            initial_solution,
            initial_score,
            n_iter,
            time_limit=time_limit,
            callback=callback,
            seed=search_seq,
            executor=executor,
        )
        return postprocess(model, solution, score)


@dataclass(frozen=True)
class GenericLocalSearchOptimizer(LocalSearchOptimizer):
    """Local search loop parameterised by an acceptance criterion.

    Parameters
    ----------
    patience:
        Number of consecutive iterations without improvement of the best
        score after which the search stops.
    n_trials:
        Number of neighbours generated and evaluated per iteration.
    criterion:
        Policy deciding whether to move to the best trial of an iteration.
    return_iter:
        If set, the current solution is reset to the best one every
        ``return_iter`` iterations without improvement. Must be smaller than
        ``patience``, otherwise the search would stop before restarting.
    max_workers:
        Size of the thread pool created when no executor is passed to
        :meth:`optimize`. ``None`` lets :class:`ThreadPoolExecutor` decide.
    """

    patience: int
    n_trials: int
    criterion: AcceptanceCriterion
    return_iter: Optional[int] = None
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.patience < 1:
            raise ValueError(f"patience must be at least 1 (got {self.patience}).")
        if self.n_trials < 1:
            raise ValueError(f"n_trials must be at least 1 (got {self.n_trials}).")
        if self.return_iter is not None:
            if self.return_iter < 1:
                raise ValueError(f"return_iter must be at least 1 (got {self.return_iter}).")
            if self.return_iter >= self.patience:
                raise ValueError(
                    f"return_iter ({self.return_iter}) must be smaller than "
                    f"patience ({self.patience})."
                )
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1 (got {self.max_workers}).")

    def optimize(
        self,
        model: OptModel,
        initial_solution: Any,
        initial_score: float,
        n_iter: int,
        time_limit: float = math.inf,
        callback: Optional[OptCallback] = None,
        seed: Any = None,
        executor: Optional[Executor] = None,
    ) -> Tuple[Any, Score]:
        """Run the search loop.

        ``seed`` may be an int, ``None`` or a :class:`numpy.random.SeedSequence`.
        """

        if executor is None and self.n_trials > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                return self._optimize(
                    model, initial_solution, initial_score, n_iter, time_limit, callback, seed, pool
                )
        return self._optimize(
            model, initial_solution, initial_score, n_iter, time_limit, callback, seed, executor
        )

    def _optimize(
        self,
        model: OptModel,
        initial_solution: Any,
        initial_score: float,
        n_iter: int,
        time_limit: float,
        callback: Optional[OptCallback],
        seed: Any,
        executor: Optional[Executor],
    ) -> Tuple[Any, Score]:
        """Internal loop that assumes an executor (if any) is already available."""

        seed_sequence = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
        accept_seq, trials_seq = seed_sequence.spawn(2)
        rng = np.random.default_rng(accept_seq)
        trial_rngs = spawn_streams(trials_seq, self.n_trials)

        logger.info(
            "Starting local search: criterion=%r patience=%d n_trials=%d return_iter=%s n_iter=%d",
            self.criterion,
            self.patience,
            self.n_trials,
            self.return_iter,
            n_iter,
        )

        start = time.monotonic()
        current_solution = initial_solution
        current_score = as_score(initial_score)
        best_solution = copy.deepcopy(current_solution)
        best_score = current_score
        counter = 0
        accepted_count = 0
        iterations = 0
        reason = StopReason.ITERATION_BUDGET_EXHAUSTED

        for it in range(n_iter):
            if time.monotonic() - start > time_limit:
                reason = StopReason.TIME_LIMIT_REACHED
                break
            iterations = it + 1

            trial = best_trial(model, current_solution, current_score, trial_rngs, executor)

            if self.criterion.accept(current_score, trial.score, rng, it / n_iter):
                current_solution = trial.solution
                current_score = trial.score
                accepted_count += 1

            if current_score < best_score:
                logger.debug("Iteration %d: best score %s -> %s", it, best_score, current_score)
                best_solution = copy.deepcopy(current_solution)
                best_score = current_score
                counter = 0
            else:
                counter += 1

            if self.return_iter is not None and counter > 0 and counter % self.return_iter == 0:
                logger.debug("Iteration %d: returning to best solution (score %s)", it, best_score)
                current_solution = copy.deepcopy(best_solution)
                current_score = best_score

            if counter >= self.patience:
                reason = StopReason.PATIENCE_EXHAUSTED
                break

            if callback is not None:
                callback(
                    OptProgress(
                        iteration=it,
                        accepted_count=accepted_count,
                        best_solution=copy.deepcopy(best_solution),
                        best_score=best_score,
                    )
                )

        logger.info(
            "Local search finished: reason=%s iterations=%d accepted=%d best_score=%s elapsed=%.3fs",
            reason.value,
            iterations,
            accepted_count,
            best_score,
            time.monotonic() - start,
        )
        return best_solution, best_score
