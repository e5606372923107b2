from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List
import logging
import time

import numpy as np
import pytest

from local_search.callback import OptProgress
from local_search.criteria import EpsilonGreedyCriterion, GreedyCriterion
from local_search.engine import GenericLocalSearchOptimizer, StopReason

from .quadratic import ConstantModel, QuadraticModel


class WorseningModel:
    """Integer walk where every trial is one step worse than the current solution."""

    def __init__(self) -> None:
        self.seen: List[int] = []

    def generate_random_solution(self, rng):
        return 0, 0.0

    def generate_trial_solution(self, current_solution, rng, current_score=None):
        self.seen.append(current_solution)
        return current_solution + 1, "up", float(current_solution + 1)

    def evaluate_solution(self, solution):
        return float(solution)


class BrokenModel(ConstantModel):
    def generate_trial_solution(self, current_solution, rng, current_score=None):
        raise RuntimeError("neighbourhood exploded")


def _quadratic() -> QuadraticModel:
    return QuadraticModel(3, [2.0, 0.0, -3.5], (-10.0, 10.0))


def _stop_reasons(caplog) -> List[str]:
    return [r.getMessage() for r in caplog.records if "finished" in r.getMessage()]


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(patience=0, n_trials=1),
        dict(patience=10, n_trials=0),
        dict(patience=10, n_trials=1, return_iter=0),
        dict(patience=10, n_trials=1, return_iter=10),
        dict(patience=10, n_trials=1, return_iter=20),
        dict(patience=10, n_trials=1, max_workers=0),
    ],
)
def test_invalid_configuration_is_rejected(kwargs):
    with pytest.raises(ValueError):
        GenericLocalSearchOptimizer(criterion=GreedyCriterion(), **kwargs)


def test_greedy_never_returns_worse_than_initial():
    model = _quadratic()
    optimizer = GenericLocalSearchOptimizer(patience=50, n_trials=4, criterion=GreedyCriterion())
    for seed in range(5):
        rng = np.random.default_rng(seed)
        solution, score = model.generate_random_solution(rng)
        final_solution, final_score = optimizer.optimize(model, solution, score, 500, seed=seed)
        assert final_score <= score
        assert final_score == pytest.approx(model.evaluate_solution(final_solution))


def test_patience_exhausted_when_nothing_improves(caplog):
    model = ConstantModel()
    progress: List[OptProgress] = []
    optimizer = GenericLocalSearchOptimizer(patience=5, n_trials=3, criterion=GreedyCriterion())

    with caplog.at_level(logging.INFO, logger="local_search"):
        solution, score = optimizer.optimize(model, 0.5, 1.0, 100, callback=progress.append, seed=0)

    assert (solution, score) == (0.5, 1.0)
    assert model.trial_calls == 5 * 3
    # The stopping iteration does not notify the callback.
    assert [p.iteration for p in progress] == [0, 1, 2, 3]
    assert all(p.accepted_count == 0 for p in progress)
    assert StopReason.PATIENCE_EXHAUSTED.value in _stop_reasons(caplog)[-1]


def test_patience_bounds_iterations_after_last_improvement():
    model = _quadratic()
    patience = 30
    progress: List[OptProgress] = []
    optimizer = GenericLocalSearchOptimizer(
        patience=patience, n_trials=2, criterion=EpsilonGreedyCriterion(epsilon=0.2)
    )
    rng = np.random.default_rng(11)
    solution, score = model.generate_random_solution(rng)
    optimizer.optimize(model, solution, score, 5000, callback=progress.append, seed=11)

    last_improvement = -1
    best = score
    for p in progress:
        assert p.best_score <= best
        if p.best_score < best:
            best = p.best_score
            last_improvement = p.iteration
    assert progress[-1].iteration < last_improvement + patience


def test_iteration_budget_exhausted(caplog):
    model = ConstantModel()
    progress: List[OptProgress] = []
    optimizer = GenericLocalSearchOptimizer(patience=1000, n_trials=2, criterion=GreedyCriterion())

    with caplog.at_level(logging.INFO, logger="local_search"):
        optimizer.optimize(model, 0.5, 1.0, 7, callback=progress.append)

    assert len(progress) == 7
    assert model.trial_calls == 14
    assert StopReason.ITERATION_BUDGET_EXHAUSTED.value in _stop_reasons(caplog)[-1]


def test_zero_iterations_returns_initial_solution():
    model = ConstantModel()
    optimizer = GenericLocalSearchOptimizer(patience=10, n_trials=4, criterion=GreedyCriterion())
    assert optimizer.optimize(model, 0.25, 3.0, 0) == (0.25, 3.0)
    assert model.trial_calls == 0


def test_time_limit_includes_callback_latency(caplog):
    model = ConstantModel()
    optimizer = GenericLocalSearchOptimizer(patience=10_000, n_trials=1, criterion=GreedyCriterion())
    calls: List[int] = []

    def slow_callback(progress: OptProgress) -> None:
        calls.append(progress.iteration)
        time.sleep(0.02)

    with caplog.at_level(logging.INFO, logger="local_search"):
        solution, score = optimizer.optimize(
            model, 0.5, 1.0, 10_000, time_limit=0.05, callback=slow_callback
        )

    assert (solution, score) == (0.5, 1.0)
    assert 1 <= len(calls) < 10
    assert StopReason.TIME_LIMIT_REACHED.value in _stop_reasons(caplog)[-1]


def test_callback_receives_independent_copies():
    model = _quadratic()
    optimizer = GenericLocalSearchOptimizer(patience=100, n_trials=2, criterion=GreedyCriterion())

    def vandalise(progress: OptProgress) -> None:
        progress.best_solution[:] = 999.0

    initial = np.zeros(3)
    solution, score = optimizer.optimize(
        model, initial, model.evaluate_solution(initial), 200, callback=vandalise, seed=3
    )
    assert np.all(np.abs(solution) <= 10.0)
    assert score == pytest.approx(model.evaluate_solution(solution))
    assert np.array_equal(initial, np.zeros(3))


def test_accepted_count_tracks_accepted_moves():
    model = ConstantModel()
    progress: List[OptProgress] = []
    optimizer = GenericLocalSearchOptimizer(
        patience=1000, n_trials=1, criterion=EpsilonGreedyCriterion(epsilon=1.0)
    )
    optimizer.optimize(model, 0.5, 1.0, 5, callback=progress.append)
    assert [p.accepted_count for p in progress] == [1, 2, 3, 4, 5]


def test_returns_best_not_drifted_current():
    model = WorseningModel()
    optimizer = GenericLocalSearchOptimizer(
        patience=10, n_trials=1, criterion=EpsilonGreedyCriterion(epsilon=1.0)
    )
    assert optimizer.optimize(model, 0, 0.0, 100) == (0, 0.0)
    assert model.seen == list(range(10))


def test_return_to_best_resets_current_periodically():
    model = WorseningModel()
    optimizer = GenericLocalSearchOptimizer(
        patience=10, n_trials=1, criterion=EpsilonGreedyCriterion(epsilon=1.0), return_iter=3
    )
    solution, score = optimizer.optimize(model, 0, 0.0, 100)
    assert (solution, score) == (0, 0.0)
    assert model.seen == [0, 1, 2, 0, 1, 2, 0, 1, 2, 0]


@pytest.mark.parametrize("n_trials", [1, 2, 17, 256])
def test_any_number_of_trials_terminates_with_valid_pair(n_trials):
    model = _quadratic()
    optimizer = GenericLocalSearchOptimizer(
        patience=20, n_trials=n_trials, criterion=GreedyCriterion(), max_workers=8
    )
    initial = np.array([9.0, 9.0, 9.0])
    initial_score = model.evaluate_solution(initial)
    solution, score = optimizer.optimize(model, initial, initial_score, 50, seed=n_trials)
    assert solution.shape == (3,)
    assert score <= initial_score
    assert score == pytest.approx(model.evaluate_solution(solution))


def test_external_executor_is_used_and_left_running():
    model = _quadratic()
    optimizer = GenericLocalSearchOptimizer(patience=20, n_trials=4, criterion=GreedyCriterion())
    initial = np.ones(3)
    with ThreadPoolExecutor(max_workers=2) as pool:
        optimizer.optimize(model, initial, model.evaluate_solution(initial), 30, executor=pool)
        # Still usable: the optimiser does not shut down executors it does not own.
        assert pool.submit(lambda: 42).result() == 42


def test_model_errors_during_search_propagate():
    optimizer = GenericLocalSearchOptimizer(patience=5, n_trials=3, criterion=GreedyCriterion())
    with pytest.raises(RuntimeError, match="exploded"):
        optimizer.optimize(BrokenModel(), 0.5, 1.0, 10)
