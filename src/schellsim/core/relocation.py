"""
Relocation Scheduler: the classic Schelling process.

Each round scans the grid once in a fixed order. Any agent with fewer
like neighbors than the configured threshold moves immediately to a
uniformly random empty cell. Rounds repeat until one full pass moves
nobody.

Updates are in place, not double-buffered: an agent that moves may be
scanned again later in the same round.

Note: termination is not guaranteed. Moves are random rather than
targeted, so the process can in principle cycle forever. This is the
accepted behavior of the classic model, so no round cap is applied
unless `max_rounds` is set explicitly.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from schellsim.core.grid import Grid

logger = logging.getLogger(__name__)


@dataclass
class RelocationScheduler:
    """
    Runs satisfaction-driven relocation rounds on a grid.

    The grid and random generator are owned by the caller and shared
    across trials; the counters below describe the current trial only.
    """

    grid: "Grid"
    rng: np.random.Generator
    max_rounds: int | None = None  # None: run until convergence, however long

    # Per-trial counters
    rounds: int = field(default=0, init=False)
    total_moves: int = field(default=0, init=False)
    last_round_moves: int = field(default=0, init=False)

    def __post_init__(self):
        if self.max_rounds is not None and self.max_rounds < 1:
            raise ValueError("max_rounds must be >= 1 or None")

    def reset(self):
        """Zero the per-trial counters."""
        self.rounds = 0
        self.total_moves = 0
        self.last_round_moves = 0

    def is_satisfied(self, x: int, y: int) -> bool:
        """
        Is the occupant of (x, y) satisfied?

        Empty cells are always satisfied. Without wraparound, border cells
        are exempt and always satisfied as well.
        """
        grid = self.grid
        if grid.cells[y, x] == 0 or not grid.has_full_neighborhood(x, y):
            return True
        return grid.count_like_neighbors(x, y) >= grid.config.min_neighbors

    def move_to_random(self, x: int, y: int) -> bool:
        """
        Move the occupant of (x, y) to a random empty cell.

        Returns False (and leaves the agent in place) when the grid has no
        empty cell to move to.
        """
        target = self.grid.random_empty_cell(self.rng)
        if target is None:
            return False

        new_x, new_y = target
        cells = self.grid.cells
        cells[new_y, new_x] = cells[y, x]
        cells[y, x] = 0
        return True

    def movement_round(self) -> bool:
        """
        One pass over the grid, moving every unsatisfied agent.

        Returns:
            True if nobody moved (everyone is satisfied)
        """
        moves = 0
        for x, y in self.grid.iter_cells():
            if not self.is_satisfied(x, y) and self.move_to_random(x, y):
                moves += 1

        self.rounds += 1
        self.total_moves += moves
        self.last_round_moves = moves
        return moves == 0

    def run_to_convergence(self) -> dict:
        """
        Run rounds until a round moves nobody.

        Returns:
            Statistics dictionary
        """
        converged = False
        while not converged:
            if self.max_rounds is not None and self.rounds >= self.max_rounds:
                logger.warning(
                    "Stopped after %d rounds without convergence (%d moves in last round)",
                    self.rounds, self.last_round_moves,
                )
                break
            converged = self.movement_round()

        return self.stats(converged)

    def stats(self, converged: bool) -> dict:
        """Counters of the current trial."""
        return {
            "rounds": self.rounds,
            "total_moves": self.total_moves,
            "converged": converged,
        }
