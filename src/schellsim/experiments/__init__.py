"""
Experiment harness: repeated trials with and without evictions.

- SchellingSimulator.simulate: baseline Schelling trials
- SchellingSimulator.simulate_with_evictions: trials with eviction shocks
"""

from schellsim.experiments.simulator import SchellingSimulator

__all__ = ["SchellingSimulator"]
