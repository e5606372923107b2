"""Parallel trial generation.

Each iteration of the search generates ``n_trials`` neighbours of the current
solution and keeps the one with the lowest score. The neighbours are
independent, so they are produced concurrently on an executor, each task using
its own random stream. Parallelism stays an implementation detail: the search
loop waits for the whole batch and only ever sees the single best trial.

Ties between equal scores are broken by the order in which trials complete,
which is not stable across runs. The search does not require determinism.
"""
from __future__ import annotations

from concurrent.futures import Executor, as_completed
from typing import Any, List, Optional, Sequence

import numpy as np

from .model import OptModel, Trial
from .score import as_score


def spawn_streams(seed_sequence: np.random.SeedSequence, n: int) -> List[np.random.Generator]:
    """Return ``n`` statistically independent generators derived from ``seed_sequence``."""
    if n < 1:
        raise ValueError(f"Need at least one random stream (got {n}).")
    return [np.random.default_rng(child) for child in seed_sequence.spawn(n)]


def generate_trial(
    model: OptModel,
    current_solution: Any,
    current_score: float,
    rng: np.random.Generator,
) -> Trial:
    """Generate and score a single neighbour of ``current_solution``."""
    solution, extra, score = model.generate_trial_solution(current_solution, rng, current_score)
    return Trial(solution=solution, score=as_score(score), extra=extra)


def best_trial(
    model: OptModel,
    current_solution: Any,
    current_score: float,
    rngs: Sequence[np.random.Generator],
    executor: Optional[Executor] = None,
) -> Trial:
    """Generate one trial per stream in ``rngs`` and return the lowest scoring one.

    Parameters
    ----------
    model:
        Problem supplying neighbours.
    current_solution, current_score:
        Point the neighbours are generated around. The score is forwarded to
        the model as a hint.
    rngs:
        One generator per trial. A generator is never shared between tasks.
    executor:
        Executor used for the fan-out. When ``None``, or when there is a single
        stream, trials are generated serially in the calling thread.

    Notes
    -----
    The call blocks until every task has finished; there is no cancellation
    of a dispatched batch. Exceptions raised by the model propagate.
    """

    if not rngs:
        raise ValueError("best_trial needs at least one random stream.")

    if executor is None or len(rngs) == 1:
        trials = (generate_trial(model, current_solution, current_score, rng) for rng in rngs)
        return _reduce(trials)

    futures = [
        executor.submit(generate_trial, model, current_solution, current_score, rng)
        for rng in rngs
    ]
    return _reduce(future.result() for future in as_completed(futures))


def _reduce(trials) -> Trial:
    """Keep the first trial seen with the strictly lowest score."""

    best: Optional[Trial] = None
    for trial in trials:
        if best is None or trial.score < best.score:
            best = trial
    assert best is not None
    return best
