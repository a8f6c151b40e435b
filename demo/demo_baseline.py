#!/usr/bin/env python3
"""
Demo: Classic Schelling Segregation

Runs the unperturbed model on a crowded grid:
1. 50x50 grid, 92% occupied, two classes
2. Agents want at least 3 like neighbors
3. Relocate until nobody moves, repeat for 10 trials
4. Report mean and spread of homophily, plot the last grid

Output: output/demo_baseline/final_grid.png
"""

import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap

from schellsim.core import GridConfig
from schellsim.experiments import SchellingSimulator
from schellsim.analysis import summarize_trials

# empty, class 1, class 2, further classes
CMAP_CLASSES = ListedColormap(["#f7f4ea", "#d1495b", "#00798c", "#edae49", "#30638e"])


def render_grid(sim: SchellingSimulator) -> np.ndarray:
    """Read the simulator's grid through the per-cell class query."""
    image = np.zeros((sim.height, sim.width), dtype=np.int64)
    for x in range(sim.width):
        for y in range(sim.height):
            image[y, x] = sim.get_class(x, y)
    return image


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("  SCHELLING SEGREGATION (NO EVICTIONS)")
    print("=" * 60)

    grid_size = 50
    config = GridConfig(
        width=grid_size,
        height=grid_size,
        n_classes=2,
        population=int(grid_size * grid_size * 0.92),
        min_neighbors=3,
        wrap_around=False,
    )
    n_trials = 10

    print(f"\n1. Setup:")
    print(f"   Grid: {grid_size}x{grid_size}, population {config.population}")
    print(f"   Satisfaction: >= {config.min_neighbors} like neighbors")

    print(f"\n2. Running {n_trials} trials...")
    sim = SchellingSimulator(config, seed=1)
    homophily = sim.simulate(n_trials)

    summary = summarize_trials(homophily)
    print(f"\n3. Results:")
    print(f"   Average homophily ratio across trials: {summary.mean:.4f}")
    print(f"   Standard deviation across trials:      {summary.std:.4f}")

    print("\n4. Creating visualization...")
    fig, ax = plt.subplots(figsize=(7, 7))
    ax.imshow(render_grid(sim), origin="lower", cmap=CMAP_CLASSES,
              vmin=0, vmax=CMAP_CLASSES.N - 1, interpolation="nearest")
    ax.set_title(f"Final grid of last trial (homophily {homophily[-1]:.3f})")
    ax.set_xticks([])
    ax.set_yticks([])

    output_dir = Path("output/demo_baseline")
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / "final_grid.png"
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"   Saved: {output_path}")


if __name__ == "__main__":
    main()
