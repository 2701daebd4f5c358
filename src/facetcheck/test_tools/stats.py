"""Goodness-of-fit helpers for statistical tests of samplers."""

from __future__ import annotations

import typing as t

import numpy as np
import scipy.stats


def chi2_pvalue(
    values: np.typing.ArrayLike,
    bin_edges: np.typing.ArrayLike,
    cdf: t.Callable[[np.ndarray], np.ndarray],
) -> float:
    """
    Pearson chi-square goodness-of-fit p-value of binned samples against a
    reference cumulative distribution function.

    Parameters
    ----------
    values : array-like
        Samples.

    bin_edges : array-like
        Increasing bin edges covering the support of the reference
        distribution.

    cdf : callable
        Vectorized reference CDF.

    Returns
    -------
    float
    """
    values = np.asarray(values, dtype=float)
    bin_edges = np.asarray(bin_edges, dtype=float)
    observed, _ = np.histogram(values, bins=bin_edges)
    expected = np.diff(cdf(bin_edges)) * len(values)
    # Rescale to the observed total to absorb rounding in the CDF differences
    expected *= observed.sum() / expected.sum()
    return float(scipy.stats.chisquare(observed, expected).pvalue)


def ks_pvalue(
    values: np.typing.ArrayLike, cdf: t.Callable[[np.ndarray], np.ndarray]
) -> float:
    """
    Kolmogorov-Smirnov goodness-of-fit p-value of samples against a reference
    cumulative distribution function.
    """
    return float(scipy.stats.kstest(np.asarray(values, dtype=float), cdf).pvalue)
