"""
Analysis layer: measurements on final grid states.

IMPORTANT: This is NOT seen by the engine. One-way derivation only.

- compute_homophily: per-class like/unlike neighbor ratios
- aggregate_homophily: unweighted mean over classes
- summarize_trials / compare_eviction_effect: statistics across trials
"""

from schellsim.analysis.homophily import (
    HomophilyResult,
    compute_homophily,
    aggregate_homophily,
)
from schellsim.analysis.statistics import (
    TrialSummary,
    EvictionEffect,
    summarize_trials,
    summarize_by_class,
    compare_eviction_effect,
)

__all__ = [
    "HomophilyResult",
    "compute_homophily",
    "aggregate_homophily",
    # Across-trial statistics
    "TrialSummary",
    "EvictionEffect",
    "summarize_trials",
    "summarize_by_class",
    "compare_eviction_effect",
]
