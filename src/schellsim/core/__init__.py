"""
Core engine primitives.

This layer knows NOTHING about homophily or experiment statistics.
It only knows:
- A grid of class labels and how to populate it
- Whether an agent is satisfied with its neighborhood
- Relocation rounds, run until nobody moves
- Evictions that displace part of one class at round start
"""

from schellsim.core.grid import Grid, GridConfig
from schellsim.core.relocation import RelocationScheduler
from schellsim.core.eviction import (
    EvictionConfig,
    EvictionScheduler,
    evict_and_relocate,
    eviction_count,
)

__all__ = [
    "Grid",
    "GridConfig",
    "RelocationScheduler",
    "EvictionConfig",
    "EvictionScheduler",
    "evict_and_relocate",
    "eviction_count",
]
