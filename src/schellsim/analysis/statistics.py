"""
Across-trial statistics for homophily experiments.

Trials are independent samples of the same stochastic process, so results
are reported as mean +/- standard deviation over trials. Trials whose
homophily is undefined (NaN) are left out of the summary.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np
from scipy import stats


@dataclass
class TrialSummary:
    """Mean and spread of one homophily series."""

    mean: float
    std: float      # Population standard deviation (ddof=0)
    n_trials: int   # All trials, NaN included
    n_valid: int    # Trials with a defined value


@dataclass
class EvictionEffect:
    """Change in homophily between a baseline and an eviction experiment."""

    baseline: TrialSummary
    evicted: TrialSummary
    difference: float  # evicted.mean - baseline.mean
    t_statistic: float  # Welch's t, NaN if too few trials
    p_value: float


def _valid(values: Sequence[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    return arr[~np.isnan(arr)]


def summarize_trials(values: Sequence[float]) -> TrialSummary:
    """
    Summarize per-trial homophily values.

    Args:
        values: One homophily value per trial

    Returns:
        TrialSummary; mean and std are NaN when no trial is valid
    """
    valid = _valid(values)
    if len(valid) == 0:
        return TrialSummary(mean=np.nan, std=np.nan, n_trials=len(values), n_valid=0)

    return TrialSummary(
        mean=float(valid.mean()),
        std=float(valid.std()),
        n_trials=len(values),
        n_valid=len(valid),
    )


def summarize_by_class(per_class: Mapping[int, Sequence[float]]) -> dict[int, TrialSummary]:
    """Summarize each class's per-trial series."""
    return {c: summarize_trials(values) for c, values in sorted(per_class.items())}


def compare_eviction_effect(
    baseline: Sequence[float],
    evicted: Sequence[float],
) -> EvictionEffect:
    """
    Compare homophily with and without evictions.

    Uses Welch's t-test (unequal variances) on the valid trials of each
    series.

    Args:
        baseline: Per-trial homophily without evictions
        evicted: Per-trial homophily with evictions

    Returns:
        EvictionEffect with summaries, mean difference and test result
    """
    base_summary = summarize_trials(baseline)
    evict_summary = summarize_trials(evicted)
    a, b = _valid(baseline), _valid(evicted)

    if len(a) < 2 or len(b) < 2:
        t_stat, p_value = np.nan, np.nan
    else:
        t_stat, p_value = stats.ttest_ind(b, a, equal_var=False)

    return EvictionEffect(
        baseline=base_summary,
        evicted=evict_summary,
        difference=evict_summary.mean - base_summary.mean,
        t_statistic=float(t_stat),
        p_value=float(p_value),
    )
