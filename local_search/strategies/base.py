"""Shared plumbing for the preset optimisers."""
from __future__ import annotations

from concurrent.futures import Executor
from typing import Any, Optional, Tuple
import math

from ..callback import OptCallback
from ..engine import GenericLocalSearchOptimizer, LocalSearchOptimizer
from ..model import OptModel
from ..score import Score


class PresetOptimizer(LocalSearchOptimizer):
    """A fixed configuration of :class:`GenericLocalSearchOptimizer`.

    Subclasses only describe how to build the engine; ``optimize`` delegates
    to it. Building the engine once in ``__post_init__`` validates the
    parameters at construction time.
    """

    def engine(self) -> GenericLocalSearchOptimizer:
        raise NotImplementedError

    def __post_init__(self) -> None:
        self.engine()

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
        return self.engine().optimize(
            model,
            initial_solution,
            initial_score,
            n_iter,
            time_limit=time_limit,
            callback=callback,
            seed=seed,
            executor=executor,
        )
