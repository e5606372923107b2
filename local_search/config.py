"""YAML configuration for optimisers and runs.

A configuration file names a preset, its parameters and the run budget::

    optimizer:
      name: relative_annealing
      patience: 5000
      n_trials: 10
      return_iter: 200
      weight: 10.0
    run:
      n_iter: 10000
      time_limit: 60.0
      seed: 7

``time_limit`` (seconds) and ``seed`` are optional. Preset parameters are
passed to the preset class unchanged, so every required parameter must be
present.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Type
import math

from .callback import OptCallback
from .engine import LocalSearchOptimizer
from .model import OptModel
from .score import Score
from .strategies import (
    EpsilonGreedyOptimizer,
    HillClimbingOptimizer,
    LogisticAnnealingOptimizer,
    RelativeAnnealingOptimizer,
    SimulatedAnnealingOptimizer,
)

PRESETS: Dict[str, Type[LocalSearchOptimizer]] = {
    "hill_climbing": HillClimbingOptimizer,
    "epsilon_greedy": EpsilonGreedyOptimizer,
    "simulated_annealing": SimulatedAnnealingOptimizer,
    "relative_annealing": RelativeAnnealingOptimizer,
    "logistic_annealing": LogisticAnnealingOptimizer,
}


@dataclass(frozen=True)
class OptimizerConfig:
    name: str
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RunConfig:
    n_iter: int
    time_limit: float = math.inf
    seed: Optional[int] = None


@dataclass(frozen=True)
class Config:
    optimizer: OptimizerConfig
    run: RunConfig


def parse_config(data: Mapping[str, Any]) -> Config:
    """Build a :class:`Config` from an already parsed mapping."""
    try:
        opt_data = dict(data["optimizer"])
        run_data = data["run"]
        name = str(opt_data.pop("name"))
        n_iter = int(run_data["n_iter"])
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Invalid local search configuration: missing {exc}") from exc

    time_limit = run_data.get("time_limit")
    seed = run_data.get("seed")
    return Config(
        optimizer=OptimizerConfig(name=name, params=opt_data),
        run=RunConfig(
            n_iter=n_iter,
            time_limit=math.inf if time_limit is None else float(time_limit),
            seed=None if seed is None else int(seed),
        ),
    )


def load_config(path: Path) -> Config:
    import yaml  # type: ignore

    data = yaml.safe_load(Path(path).read_text())
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration file {path} must contain a mapping.")
    return parse_config(data)


def build_optimizer(config: OptimizerConfig) -> LocalSearchOptimizer:
    """Instantiate the preset named by ``config``."""
    try:
        preset = PRESETS[config.name]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise ValueError(f"Unknown optimizer '{config.name}'. Known optimizers: {known}.") from None
    try:
        return preset(**config.params)
    except TypeError as exc:
        raise ValueError(f"Invalid parameters for optimizer '{config.name}': {exc}") from exc


def run_from_config(
    model: OptModel,
    config: Config,
    initial_solution_and_score: Optional[Tuple[Any, float]] = None,
    callback: Optional[OptCallback] = None,
) -> Tuple[Any, Score]:
    """Build the configured optimiser and run it on ``model``."""
    optimizer = build_optimizer(config.optimizer)
    return optimizer.run(
        model,
        initial_solution_and_score,
        config.run.n_iter,
        time_limit=config.run.time_limit,
        callback=callback,
        seed=config.run.seed,
    )
