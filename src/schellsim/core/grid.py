"""
Grid: the rectangular world the population lives on.

The grid stores ONLY class labels:
- 0 marks an empty cell
- 1..C marks a cell occupied by an agent of that class

Agents have no identity beyond position + class. Moving an agent means
writing its class into the destination and clearing the source.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator

import numpy as np


@dataclass
class GridConfig:
    """Configuration for a segregation grid."""

    width: int
    height: int
    n_classes: int = 2  # Number of population classes C
    population: int = 0  # Agents placed per trial (must be <= width * height)
    min_neighbors: int = 3  # Like neighbors required for satisfaction
    wrap_around: bool = False  # Torus: neighbor lookups wrap across the edges

    # Random draws attempted before falling back to enumerating candidates.
    # Keeps placement and relocation bounded near full occupancy.
    max_rejection_tries: int = 100

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError("Grid dimensions must be positive")
        if self.n_classes < 1:
            raise ValueError("n_classes must be >= 1")
        if self.population < 0:
            raise ValueError("population must be >= 0")
        if self.population > self.capacity:
            raise ValueError(
                f"population {self.population} exceeds grid capacity: "
                f"only {self.capacity} cells exist"
            )
        if self.min_neighbors < 0:
            raise ValueError("min_neighbors must be >= 0")
        if self.max_rejection_tries < 1:
            raise ValueError("max_rejection_tries must be >= 1")

    @property
    def capacity(self) -> int:
        """Total number of cells."""
        return self.width * self.height


# (dx, dy) offsets of the 3x3 block around a cell, self included
BLOCK_OFFSETS = [(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)]


class Grid:
    """
    Class labels for every cell of a W x H grid.

    Stored as cells[y, x], i.e. shape (height, width).
    """

    def __init__(self, config: GridConfig):
        self.config = config
        self.cells = np.zeros((config.height, config.width), dtype=np.int64)

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def shape(self) -> tuple[int, int]:
        """Return (height, width) grid dimensions."""
        return self.config.height, self.config.width

    def get_class(self, x: int, y: int) -> int:
        """Class label at (x, y): 0 if empty, else class id (1, 2, ...)."""
        return int(self.cells[y, x])

    def clear(self):
        """Empty the grid."""
        self.cells.fill(0)

    def populate(self, rng: np.random.Generator):
        """
        Place the configured population on empty cells.

        Each agent gets a uniformly random class in [1, C] and a uniformly
        random empty cell. Call clear() first; the grid must have room for
        every agent.
        """
        needed = self.config.population
        free = self.config.capacity - self.occupied_count()
        if needed > free:
            raise ValueError(f"Only {free} empty cells exist, cannot place {needed} agents")

        for _ in range(needed):
            x, y = self.random_empty_cell(rng)
            self.cells[y, x] = rng.integers(1, self.config.n_classes + 1)

    def random_empty_cell(self, rng: np.random.Generator) -> tuple[int, int] | None:
        """
        Pick a uniformly random empty cell.

        Tries rejection sampling first (cheap at low density), then chooses
        among the enumerated empty cells. Returns None if the grid is full.
        """
        for _ in range(self.config.max_rejection_tries):
            x = int(rng.integers(self.width))
            y = int(rng.integers(self.height))
            if self.cells[y, x] == 0:
                return x, y

        empty = self.empty_cells()
        if len(empty) == 0:
            return None
        x, y = empty[rng.integers(len(empty))]
        return int(x), int(y)

    def is_edge(self, x: int, y: int) -> bool:
        """True if (x, y) lies on the border of the grid."""
        return x == 0 or y == 0 or x == self.width - 1 or y == self.height - 1

    def has_full_neighborhood(self, x: int, y: int) -> bool:
        """All 8 neighbors exist: always on a torus, interior cells otherwise."""
        return self.config.wrap_around or not self.is_edge(x, y)

    def iter_cells(self) -> Iterator[tuple[int, int]]:
        """Iterate over all (x, y) coordinates, column by column."""
        for x in range(self.width):
            for y in range(self.height):
                yield x, y

    def neighborhood(self, x: int, y: int) -> np.ndarray:
        """The 3x3 block of labels centered on (x, y), indices wrapped."""
        if 0 < x < self.width - 1 and 0 < y < self.height - 1:
            return self.cells[y - 1:y + 2, x - 1:x + 2]
        ys = [(y + dy) % self.height for dy in (-1, 0, 1)]
        xs = [(x + dx) % self.width for dx in (-1, 0, 1)]
        return self.cells[np.ix_(ys, xs)]

    def count_like_neighbors(self, x: int, y: int) -> int:
        """
        Number of neighbors sharing this cell's class.

        Counts matches over the 3x3 block and subtracts one for the cell
        itself. Empty cells, and border cells when not wrapping, count 0.
        """
        label = self.cells[y, x]
        if label == 0 or not self.has_full_neighborhood(x, y):
            return 0
        return int(np.count_nonzero(self.neighborhood(x, y) == label)) - 1

    def count_unlike_neighbors(self, x: int, y: int) -> int:
        """
        Number of block cells whose label differs from this cell's.

        Empty neighbors differ too. Not self-corrected: the cell itself
        never differs from its own label.
        """
        label = self.cells[y, x]
        if label == 0 or not self.has_full_neighborhood(x, y):
            return 0
        return int(np.count_nonzero(self.neighborhood(x, y) != label))

    def occupied_count(self) -> int:
        """Number of non-empty cells."""
        return int(np.count_nonzero(self.cells))

    def class_counts(self) -> np.ndarray:
        """Cell counts per label; index 0 holds the empty cells."""
        return np.bincount(self.cells.ravel(), minlength=self.config.n_classes + 1)

    def cells_of_class(self, label: int) -> np.ndarray:
        """(x, y) coordinates of every cell holding `label`, shape [n, 2]."""
        return np.argwhere(self.cells == label)[:, ::-1]

    def empty_cells(self) -> np.ndarray:
        """(x, y) coordinates of every empty cell, shape [n, 2]."""
        return self.cells_of_class(0)

    def snapshot(self) -> np.ndarray:
        """Copy of the current labels."""
        return self.cells.copy()
