"""
Evictions: forced displacement of one population class.

An eviction removes a fraction of the target class from their homes and
reinserts them at random empty cells, regardless of whether they were
satisfied. It only redistributes positions: population and class
composition are unchanged.

Timing is a per-round Bernoulli trial. At the start of every relocation
round one uniform draw decides whether an eviction happens before the
ordinary relocation pass.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Literal, TYPE_CHECKING

import numpy as np

from schellsim.core.relocation import RelocationScheduler

if TYPE_CHECKING:
    from schellsim.core.grid import Grid

logger = logging.getLogger(__name__)


@dataclass
class EvictionConfig:
    """Eviction parameters for one experiment."""

    rate: float  # Fraction of the total population evicted per event
    probability: float  # Chance that a round starts with an eviction
    target_class: int = 1  # Class whose members get evicted

    # What to do when the target class has fewer members than the rate asks for:
    # "clamp" evicts everyone available, "raise" fails fast
    on_shortfall: Literal["clamp", "raise"] = "clamp"

    def __post_init__(self):
        if not 0.0 <= self.rate <= 1.0:
            raise ValueError("eviction rate must be in [0, 1]")
        if not 0.0 <= self.probability <= 1.0:
            raise ValueError("eviction probability must be in [0, 1]")
        if self.target_class < 1:
            raise ValueError("target_class must be a class id >= 1")
        if self.on_shortfall not in ("clamp", "raise"):
            raise ValueError(f"Unknown shortfall policy: {self.on_shortfall!r}")

    def validate_for(self, grid: "Grid"):
        """Check the target class exists on this grid."""
        if self.target_class > grid.config.n_classes:
            raise ValueError(
                f"target_class {self.target_class} out of range: "
                f"grid has {grid.config.n_classes} classes"
            )


def eviction_count(population: int, rate: float) -> int:
    """Agents removed per eviction event: floor(population * rate)."""
    return int(population * rate)


def evict_and_relocate(
    grid: "Grid",
    rng: np.random.Generator,
    rate: float,
    target_class: int,
    on_shortfall: Literal["clamp", "raise"] = "clamp",
) -> int:
    """
    Evict members of `target_class` and reinsert them at random.

    Two phases: all selected homes are cleared first, then each evicted
    agent is placed on a uniformly random empty cell. A destination may
    therefore be a home that was just vacated.

    Args:
        grid: Grid to modify in place
        rng: Random generator for victim and destination choices
        rate: Fraction of the configured population to evict
        target_class: Class id of the evicted agents
        on_shortfall: "clamp" or "raise" when too few targets exist

    Returns:
        Number of agents evicted
    """
    wanted = eviction_count(grid.config.population, rate)
    candidates = grid.cells_of_class(target_class)

    n_evict = wanted
    if wanted > len(candidates):
        if on_shortfall == "raise":
            raise ValueError(
                f"Cannot evict {wanted} agents of class {target_class}: "
                f"only {len(candidates)} present"
            )
        logger.warning(
            "Eviction of %d agents of class %d clamped to %d present",
            wanted, target_class, len(candidates),
        )
        n_evict = len(candidates)

    if n_evict == 0:
        return 0

    chosen = candidates[rng.choice(len(candidates), size=n_evict, replace=False)]

    # Phase 1: empty every selected home
    grid.cells[chosen[:, 1], chosen[:, 0]] = 0

    # Phase 2: reinsert; at least n_evict cells are empty now
    for _ in range(n_evict):
        x, y = grid.random_empty_cell(rng)
        grid.cells[y, x] = target_class

    return n_evict


@dataclass
class EvictionScheduler(RelocationScheduler):
    """
    Relocation scheduler whose rounds may start with an eviction.

    Eviction decisions and victims are drawn from `eviction_rng`, so the
    relocation stream in `rng` is consumed exactly as in the plain
    scheduler whenever no eviction fires.
    """

    eviction: EvictionConfig | None = None
    eviction_rng: np.random.Generator | None = None

    # Per-trial counters
    evictions: int = field(default=0, init=False)
    evicted_agents: int = field(default=0, init=False)

    def __post_init__(self):
        super().__post_init__()
        if self.eviction is None:
            raise ValueError("EvictionScheduler requires an EvictionConfig")
        self.eviction.validate_for(self.grid)
        if self.eviction_rng is None:
            self.eviction_rng = self.rng

    def reset(self):
        super().reset()
        self.evictions = 0
        self.evicted_agents = 0

    def movement_round(self) -> bool:
        """
        Possibly evict, then run one relocation pass.

        The eviction itself does not count as a move; only relocations of
        unsatisfied agents decide convergence.
        """
        cfg = self.eviction
        if self.eviction_rng.random() < cfg.probability:
            self.evicted_agents += evict_and_relocate(
                self.grid,
                self.eviction_rng,
                cfg.rate,
                cfg.target_class,
                on_shortfall=cfg.on_shortfall,
            )
            self.evictions += 1

        return super().movement_round()

    def stats(self, converged: bool) -> dict:
        stats = super().stats(converged)
        stats["evictions"] = self.evictions
        stats["evicted_agents"] = self.evicted_agents
        return stats
