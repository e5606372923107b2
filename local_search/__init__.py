"""Pluggable local search.

Describe a problem as an :class:`OptModel` (random solutions, neighbours,
scores), pick one of the preset optimisers and call ``run``::

    optimizer = HillClimbingOptimizer(patience=1000, n_trials=10)
    solution, score = optimizer.run(model, None, n_iter=10000)
"""
import logging

from .callback import OptCallback, OptProgress
from .config import Config, OptimizerConfig, RunConfig, build_optimizer, load_config, run_from_config
from .criteria import (
    AcceptanceCriterion,
    EpsilonGreedyCriterion,
    GreedyCriterion,
    LogisticAnnealingCriterion,
    RelativeAnnealingCriterion,
    SimulatedAnnealingCriterion,
)
from .engine import GenericLocalSearchOptimizer, LocalSearchOptimizer, StopReason
from .model import ModelError, OptModel, Trial
from .score import InvalidScoreError, Score
from .strategies import (
    EpsilonGreedyOptimizer,
    HillClimbingOptimizer,
    LogisticAnnealingOptimizer,
    RelativeAnnealingOptimizer,
    SimulatedAnnealingOptimizer,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "OptModel",
    "ModelError",
    "Trial",
    "Score",
    "InvalidScoreError",
    "OptProgress",
    "OptCallback",
    "AcceptanceCriterion",
    "GreedyCriterion",
    "EpsilonGreedyCriterion",
    "SimulatedAnnealingCriterion",
    "RelativeAnnealingCriterion",
    "LogisticAnnealingCriterion",
    "LocalSearchOptimizer",
    "GenericLocalSearchOptimizer",
    "StopReason",
    "HillClimbingOptimizer",
    "EpsilonGreedyOptimizer",
    "SimulatedAnnealingOptimizer",
    "RelativeAnnealingOptimizer",
    "LogisticAnnealingOptimizer",
    "Config",
    "OptimizerConfig",
    "RunConfig",
    "load_config",
    "build_optimizer",
    "run_from_config",
]
