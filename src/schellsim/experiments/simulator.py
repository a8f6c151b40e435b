"""
SchellingSimulator: runs repeated trials and collects homophily.

Each trial starts from an empty grid:
1. Place the population at random
2. Relocate unsatisfied agents (optionally with evictions) until stable
3. Measure homophily of the final state

The simulator owns the grid for its whole lifetime. After an experiment the
grid holds the last trial's final state, for inspection or rendering.

Randomness comes from two generators spawned from the master seed: one for
placement and relocation, one for eviction draws. Both streams run on
across trials, so reproducing a result means repeating the same calls on a
simulator built with the same seed.
"""

from __future__ import annotations
import logging
from typing import Literal

import numpy as np

from schellsim.core.grid import Grid, GridConfig
from schellsim.core.relocation import RelocationScheduler
from schellsim.core.eviction import EvictionConfig, EvictionScheduler
from schellsim.analysis.homophily import compute_homophily, aggregate_homophily

logger = logging.getLogger(__name__)


class SchellingSimulator:
    """
    Experiment driver for the segregation model.

    Usage:
        sim = SchellingSimulator(GridConfig(width=50, height=50, population=2300), seed=1)
        baseline = sim.simulate(10)
        evicted = sim.simulate_with_evictions(10, rate=0.05, probability=0.1, target_class=1)
    """

    def __init__(self, config: GridConfig, seed: int = 0, max_rounds: int | None = None):
        """
        Create a simulator.

        Args:
            config: Grid and population parameters
            seed: Master seed for all random streams
            max_rounds: Optional cap on relocation rounds per trial. None
                        (default) runs every trial until it converges.
        """
        self.config = config
        self.seed = seed
        self.max_rounds = max_rounds

        move_seq, eviction_seq = np.random.SeedSequence(seed).spawn(2)
        self.rng = np.random.default_rng(move_seq)
        self.eviction_rng = np.random.default_rng(eviction_seq)

        self.grid = Grid(config)
        self.last_stats: dict | None = None

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def get_class(self, x: int, y: int) -> int:
        """Class at (x, y) in the current grid: 0 if empty, else 1..C."""
        return self.grid.get_class(x, y)

    def _run_trial(self, scheduler: RelocationScheduler) -> dict:
        self.grid.clear()
        self.grid.populate(self.rng)
        scheduler.reset()
        self.last_stats = scheduler.run_to_convergence()
        return self.last_stats

    def simulate(self, k: int) -> list[float]:
        """
        Run k trials without evictions.

        Args:
            k: Number of trials

        Returns:
            Aggregate homophily of each trial, in order
        """
        if k < 0:
            raise ValueError("Number of trials must be >= 0")

        scheduler = RelocationScheduler(self.grid, self.rng, max_rounds=self.max_rounds)
        homophily = []
        for i in range(k):
            stats = self._run_trial(scheduler)
            result = compute_homophily(self.grid)
            value = aggregate_homophily(result)
            logger.info(
                "Trial %d: homophily %.4f after %d rounds (%d moves)",
                i, value, stats["rounds"], stats["total_moves"],
            )
            for c, ratio in result.by_class().items():
                logger.debug(
                    "  class %d: ratio %.4f, population share %.4f",
                    c, ratio, result.population_share[c - 1],
                )
            homophily.append(value)
        return homophily

    def simulate_with_evictions(
        self,
        k: int,
        rate: float,
        probability: float,
        target_class: int,
        on_shortfall: Literal["clamp", "raise"] = "clamp",
    ) -> dict[int, list[float]]:
        """
        Run k trials in which rounds may start with an eviction.

        Args:
            k: Number of trials
            rate: Fraction of the population evicted per eviction event
            probability: Chance that any given round starts with an eviction
            target_class: Class id (1..C) whose members are evicted
            on_shortfall: "clamp" or "raise" when the class is too small

        Returns:
            Per-class homophily of each trial: {class_id: [trial values]}
        """
        if k < 0:
            raise ValueError("Number of trials must be >= 0")

        eviction = EvictionConfig(
            rate=rate,
            probability=probability,
            target_class=target_class,
            on_shortfall=on_shortfall,
        )
        scheduler = EvictionScheduler(
            self.grid,
            self.rng,
            max_rounds=self.max_rounds,
            eviction=eviction,
            eviction_rng=self.eviction_rng,
        )

        homophily = {c: [] for c in range(1, self.config.n_classes + 1)}
        for i in range(k):
            stats = self._run_trial(scheduler)
            result = compute_homophily(self.grid)
            logger.info(
                "Trial %d with eviction rate %s and probability %s: %d rounds, "
                "%d evictions (%d agents)",
                i, rate, probability, stats["rounds"],
                stats["evictions"], stats["evicted_agents"],
            )
            for c, ratio in result.by_class().items():
                logger.debug(
                    "  class %d: ratio %.4f, population share %.4f",
                    c, ratio, result.population_share[c - 1],
                )
                homophily[c].append(ratio)
        return homophily
