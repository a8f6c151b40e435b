#!/usr/bin/env python3
"""
Demo: Evictions vs. Segregation

Compares the classic model with runs where one class is periodically
evicted:
1. Baseline trials with no evictions
2. For several eviction probabilities, evict 5% of the population
   (all from class 1) at the start of a round
3. Compare per-class homophily against the baseline (Welch t-test)

Output: output/demo_evictions/homophily.png
"""

import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from schellsim.core import GridConfig
from schellsim.experiments import SchellingSimulator
from schellsim.analysis import compare_eviction_effect, summarize_by_class


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("  EVICTIONS AND HOMOPHILY")
    print("=" * 60)

    grid_size = 30
    config = GridConfig(
        width=grid_size,
        height=grid_size,
        n_classes=2,
        population=int(grid_size * grid_size * 0.8),
        min_neighbors=3,
    )
    n_trials = 10
    rate = 0.05
    target_class = 1
    probabilities = [0.0, 0.05, 0.1, 0.2]

    print(f"\n1. Setup:")
    print(f"   Grid: {grid_size}x{grid_size}, population {config.population}")
    print(f"   Eviction: {rate:.0%} of population from class {target_class}")

    print(f"\n2. Baseline ({n_trials} trials)...")
    baseline = SchellingSimulator(config, seed=7).simulate_with_evictions(
        n_trials, rate=rate, probability=0.0, target_class=target_class,
    )

    results = {}
    print("\n3. Eviction experiments...")
    for probability in probabilities[1:]:
        sim = SchellingSimulator(config, seed=7)
        results[probability] = sim.simulate_with_evictions(
            n_trials, rate=rate, probability=probability, target_class=target_class,
        )

    print(f"\n   {'p(evict)':>9} | {'class':>5} | {'mean':>7} | {'std':>7} | {'diff':>7} | {'p-value':>8}")
    print(f"   {'-'*9}-+-{'-'*5}-+-{'-'*7}-+-{'-'*7}-+-{'-'*7}-+-{'-'*8}")
    for c, summary in summarize_by_class(baseline).items():
        print(f"   {0.0:>9.2f} | {c:>5} | {summary.mean:>7.4f} | {summary.std:>7.4f} | {'':>7} | {'':>8}")
    for probability, per_class in results.items():
        for c in per_class:
            effect = compare_eviction_effect(baseline[c], per_class[c])
            print(f"   {probability:>9.2f} | {c:>5} | {effect.evicted.mean:>7.4f} | "
                  f"{effect.evicted.std:>7.4f} | {effect.difference:>+7.4f} | {effect.p_value:>8.3g}")

    print("\n4. Creating visualization...")
    fig, ax = plt.subplots(figsize=(8, 5))
    all_results = {0.0: baseline, **results}
    for c in range(1, config.n_classes + 1):
        means = [np.nanmean(all_results[p][c]) for p in probabilities]
        stds = [np.nanstd(all_results[p][c]) for p in probabilities]
        ax.errorbar(probabilities, means, yerr=stds, marker="o", capsize=4, label=f"class {c}")
    ax.set_xlabel("Eviction probability per round")
    ax.set_ylabel("Homophily ratio")
    ax.set_title(f"Homophily under evictions of class {target_class} (rate {rate})")
    ax.legend()
    ax.grid(True, alpha=0.3)

    output_dir = Path("output/demo_evictions")
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / "homophily.png"
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"   Saved: {output_path}")


if __name__ == "__main__":
    main()
