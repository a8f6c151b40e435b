"""Unit tests for evictions."""

import numpy as np
import pytest

from schellsim.core.grid import Grid, GridConfig
from schellsim.core.relocation import RelocationScheduler
from schellsim.core.eviction import (
    EvictionConfig,
    EvictionScheduler,
    evict_and_relocate,
    eviction_count,
)


class TestEvictionConfig:
    """Tests for EvictionConfig."""

    def test_defaults(self):
        cfg = EvictionConfig(rate=0.1, probability=0.5)
        assert cfg.target_class == 1
        assert cfg.on_shortfall == "clamp"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"rate": -0.1, "probability": 0.5},
            {"rate": 1.5, "probability": 0.5},
            {"rate": 0.1, "probability": 1.01},
            {"rate": 0.1, "probability": 0.5, "target_class": 0},
            {"rate": 0.1, "probability": 0.5, "on_shortfall": "ignore"},
        ],
    )
    def test_invalid_config_rejected(self, kwargs):
        with pytest.raises(ValueError):
            EvictionConfig(**kwargs)

    def test_target_class_checked_against_grid(self):
        grid = Grid(GridConfig(width=5, height=5, n_classes=2))
        with pytest.raises(ValueError, match="out of range"):
            EvictionConfig(rate=0.1, probability=0.5, target_class=3).validate_for(grid)


class TestEvictionCount:
    """Tests for the number of agents evicted per event."""

    def test_floor(self):
        assert eviction_count(50, 0.3) == 15
        assert eviction_count(7, 0.5) == 3
        assert eviction_count(100, 0.0) == 0
        assert eviction_count(100, 1.0) == 100


class TestEvictAndRelocate:
    """Tests for a single eviction event."""

    def test_conserves_class_composition(self, small_grid_config, rng):
        grid = Grid(small_grid_config)
        grid.populate(rng)
        counts_before = grid.class_counts()

        n = evict_and_relocate(grid, rng, rate=0.2, target_class=1)

        assert n == 10
        assert np.array_equal(grid.class_counts(), counts_before)
        assert grid.occupied_count() == 50

    def test_only_target_class_moves(self, small_grid_config, rng):
        grid = Grid(small_grid_config)
        grid.populate(rng)
        before = grid.snapshot()

        evict_and_relocate(grid, rng, rate=0.2, target_class=2)

        # Class 1 agents keep their homes
        assert np.array_equal(grid.cells == 1, before == 1)

    def test_zero_rate_is_noop(self, small_grid_config, rng):
        grid = Grid(small_grid_config)
        grid.populate(rng)
        before = grid.snapshot()

        assert evict_and_relocate(grid, rng, rate=0.0, target_class=1) == 0
        assert np.array_equal(grid.cells, before)

    def test_shortfall_clamps(self, rng):
        grid = Grid(GridConfig(width=6, height=6, population=10))
        grid.cells[1, 1] = 1
        grid.cells[2, 2] = 1
        grid.cells[3, 3:5] = 2

        # Asks for 5 of class 1 but only 2 exist
        n = evict_and_relocate(grid, rng, rate=0.5, target_class=1)

        assert n == 2
        assert grid.class_counts()[1] == 2
        assert grid.class_counts()[2] == 2

    def test_shortfall_raises(self, rng):
        grid = Grid(GridConfig(width=6, height=6, population=10))
        grid.cells[1, 1] = 1
        with pytest.raises(ValueError, match="Cannot evict"):
            evict_and_relocate(grid, rng, rate=0.5, target_class=1, on_shortfall="raise")
        assert grid.class_counts()[1] == 1

    def test_full_grid_reinserts_into_vacated_homes(self, rng):
        grid = Grid(GridConfig(width=4, height=4, population=16))
        grid.cells[:] = 2
        grid.cells[0, :] = 1
        before = grid.snapshot()

        n = evict_and_relocate(grid, rng, rate=0.25, target_class=1)

        # Only the vacated homes are free, so everyone lands back in row 0
        assert n == 4
        assert np.array_equal(grid.cells, before)


class TestEvictionScheduler:
    """Tests for relocation rounds with evictions."""

    def _populated(self, config, seed):
        grid = Grid(config)
        rng = np.random.default_rng(seed)
        grid.populate(rng)
        return grid, rng

    def test_requires_eviction_config(self, small_grid_config, rng):
        with pytest.raises(ValueError):
            EvictionScheduler(Grid(small_grid_config), rng)

    def test_rejects_unknown_target_class(self, small_grid_config, rng):
        with pytest.raises(ValueError):
            EvictionScheduler(
                Grid(small_grid_config),
                rng,
                eviction=EvictionConfig(rate=0.1, probability=1.0, target_class=3),
            )

    def test_certain_eviction_fires_every_round(self, small_grid_config):
        grid, rng = self._populated(small_grid_config, seed=2)
        sched = EvictionScheduler(
            grid, rng, eviction=EvictionConfig(rate=0.1, probability=1.0, target_class=2)
        )

        sched.movement_round()
        sched.movement_round()

        assert sched.evictions == 2
        assert sched.evicted_agents == 10
        assert grid.occupied_count() == 50

    def test_zero_probability_matches_plain_relocation(self, small_grid_config):
        grid_a, rng_a = self._populated(small_grid_config, seed=9)
        grid_b, rng_b = self._populated(small_grid_config, seed=9)

        plain = RelocationScheduler(grid_a, rng_a)
        evicting = EvictionScheduler(
            grid_b,
            rng_b,
            eviction=EvictionConfig(rate=0.3, probability=0.0, target_class=1),
            eviction_rng=np.random.default_rng(123),
        )

        stats_a = plain.run_to_convergence()
        stats_b = evicting.run_to_convergence()

        assert np.array_equal(grid_a.cells, grid_b.cells)
        assert stats_a["rounds"] == stats_b["rounds"]
        assert stats_b["evictions"] == 0
        assert stats_b["evicted_agents"] == 0

    def test_converges_with_occasional_evictions(self, small_grid_config):
        grid, rng = self._populated(small_grid_config, seed=4)
        counts_before = grid.class_counts()
        sched = EvictionScheduler(
            grid,
            rng,
            eviction=EvictionConfig(rate=0.04, probability=0.2, target_class=1),
            eviction_rng=np.random.default_rng(5),
        )

        stats = sched.run_to_convergence()

        assert stats["converged"]
        assert np.array_equal(grid.class_counts(), counts_before)

    def test_reset_clears_eviction_counters(self, small_grid_config):
        grid, rng = self._populated(small_grid_config, seed=2)
        sched = EvictionScheduler(
            grid, rng, eviction=EvictionConfig(rate=0.1, probability=1.0)
        )
        sched.movement_round()
        sched.reset()
        assert sched.evictions == 0
        assert sched.evicted_agents == 0
        assert sched.rounds == 0
