"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def small_grid_config():
    """Configuration for a small 10x10 grid, half occupied."""
    from schellsim.core import GridConfig
    return GridConfig(
        width=10,
        height=10,
        n_classes=2,
        population=50,
        min_neighbors=3,
        wrap_around=False,
    )


@pytest.fixture
def torus_grid_config():
    """Configuration for a 12x8 torus, two thirds occupied, three classes."""
    from schellsim.core import GridConfig
    return GridConfig(
        width=12,
        height=8,
        n_classes=3,
        population=64,
        min_neighbors=2,
        wrap_around=True,
    )


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)
