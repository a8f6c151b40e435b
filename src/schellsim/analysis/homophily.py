"""
Homophily: how clustered is the final grid?

For every counted agent we look at its 3x3 block:
- like count: cells sharing its class, minus one for itself
- unlike count: cells with any other label (empty cells included),
  NOT corrected for self since a cell never differs from itself

The two counts are not symmetric in how they treat the center cell. This is
a property of the metric and is kept as is: experiments compare against
numbers computed this way.

Only agents whose whole neighborhood exists are counted: interior cells,
plus border cells when the grid wraps around.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from schellsim.core.grid import BLOCK_OFFSETS

if TYPE_CHECKING:
    from schellsim.core.grid import Grid


@dataclass
class HomophilyResult:
    """Per-class homophily of one grid state. Arrays are indexed by class - 1."""

    ratios: np.ndarray            # like / (like + unlike), NaN if undefined
    like_counts: np.ndarray       # Summed like counts
    unlike_counts: np.ndarray     # Summed unlike counts
    counted: np.ndarray           # Agents that contributed
    population_share: np.ndarray  # counted / all counted agents, NaN if none

    @property
    def n_classes(self) -> int:
        return len(self.ratios)

    def by_class(self) -> dict[int, float]:
        """Ratios keyed by class id (1..C)."""
        return {c + 1: float(r) for c, r in enumerate(self.ratios)}


def count_block_matches(cells: np.ndarray) -> np.ndarray:
    """
    Count, for every cell, the block cells holding the same label.

    Indices wrap (torus), so the count includes the cell itself and lies
    in [1, 9].
    """
    matches = np.zeros(cells.shape, dtype=np.int64)
    for dx, dy in BLOCK_OFFSETS:
        # shifted[y, x] == cells[y + dy, x + dx]
        shifted = np.roll(cells, shift=(-dy, -dx), axis=(0, 1))
        matches += shifted == cells
    return matches


def counted_mask(grid: "Grid") -> np.ndarray:
    """Occupied cells whose full neighborhood is defined."""
    mask = grid.cells != 0
    if not grid.config.wrap_around:
        interior = np.zeros(grid.shape, dtype=bool)
        interior[1:-1, 1:-1] = True
        mask &= interior
    return mask


def compute_homophily(grid: "Grid") -> HomophilyResult:
    """
    Compute per-class homophily ratios for the current grid state.

    Classes with no counted neighbor observations get NaN instead of a
    division error.

    Args:
        grid: Grid to measure

    Returns:
        HomophilyResult with ratios and the raw counts behind them
    """
    cells = grid.cells
    n_classes = grid.config.n_classes

    matches = count_block_matches(cells)
    like = matches - 1
    unlike = len(BLOCK_OFFSETS) - matches
    mask = counted_mask(grid)

    like_counts = np.zeros(n_classes, dtype=np.int64)
    unlike_counts = np.zeros(n_classes, dtype=np.int64)
    counted = np.zeros(n_classes, dtype=np.int64)
    for c in range(n_classes):
        sel = mask & (cells == c + 1)
        like_counts[c] = like[sel].sum()
        unlike_counts[c] = unlike[sel].sum()
        counted[c] = np.count_nonzero(sel)

    total_obs = like_counts + unlike_counts
    n_counted = counted.sum()
    with np.errstate(divide='ignore', invalid='ignore'):
        ratios = np.where(total_obs > 0, like_counts / total_obs, np.nan)
        if n_counted > 0:
            population_share = counted / n_counted
        else:
            population_share = np.full(n_classes, np.nan)

    return HomophilyResult(
        ratios=ratios,
        like_counts=like_counts,
        unlike_counts=unlike_counts,
        counted=counted,
        population_share=population_share,
    )


def aggregate_homophily(result: HomophilyResult) -> float:
    """
    Whole-grid homophily: unweighted mean of the per-class ratios.

    A NaN class ratio makes the aggregate NaN.
    """
    return float(np.mean(result.ratios))
