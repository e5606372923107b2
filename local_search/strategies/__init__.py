"""Ready-made optimisers built on the generic local search loop.

Each preset fixes an acceptance criterion and a restart policy for
:class:`local_search.engine.GenericLocalSearchOptimizer`. They are immutable
after construction, so a single instance can back several concurrent runs.
"""
from .epsilon_greedy import EpsilonGreedyOptimizer
from .hill_climbing import HillClimbingOptimizer
from .logistic_annealing import LogisticAnnealingOptimizer
from .relative_annealing import RelativeAnnealingOptimizer
from .simulated_annealing import SimulatedAnnealingOptimizer

__all__ = [
    "HillClimbingOptimizer",
    "EpsilonGreedyOptimizer",
    "SimulatedAnnealingOptimizer",
    "RelativeAnnealingOptimizer",
    "LogisticAnnealingOptimizer",
]
