"""
Running Monte Carlo estimator.

For evaluations f_1..f_n of a transform of i.i.d. draws:

    mean_k = (sum_{i<=k} f_i) / k
    var_k  = ((sum_{i<=k} f_i^2) / k - mean_k^2) / k

var_k estimates the variance of mean_k itself (Var(f) / k), so
mean_k +/- 2 sqrt(var_k) is an approximate 95% band at every prefix.
"""

import numpy as np
from typing import Callable, List, Sequence, Union
import logging

from ..types import RunningEstimate, PercentileBand

logger = logging.getLogger(__name__)


SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]
Draw = Callable[[np.random.Generator, int], np.ndarray]
Transform = Callable[[np.ndarray], np.ndarray]

DEFAULT_PERCENTILES = (2.5, 50.0, 97.5)


def spawn_seeds(seed, n_children: int) -> List[np.random.SeedSequence]:
    """
    Child SeedSequences of a root seed (int, SeedSequence or None).

    Unlike SeedSequence.spawn, the caller's SeedSequence is left untouched, so
    passing the same object twice yields the same children.
    """
    root = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    return [
        np.random.SeedSequence(
            root.entropy, spawn_key=root.spawn_key + (i,), pool_size=root.pool_size
        )
        for i in range(n_children)
    ]


def running_statistics(values: np.ndarray) -> RunningEstimate:
    """Running mean and variance-of-the-mean from evaluated values."""
    values = np.asarray(values, dtype=np.float64)
    n = len(values)
    if n == 0:
        return RunningEstimate(
            means=np.empty(0, dtype=np.float64),
            variances=np.empty(0, dtype=np.float64)
        )

    k = np.arange(1, n + 1, dtype=np.float64)
    means = np.cumsum(values) / k
    second_moments = np.cumsum(values * values) / k

    # Cancellation can leave tiny negatives when the values are near-constant
    variances = np.maximum(second_moments - means * means, 0.0) / k

    return RunningEstimate(means=means, variances=variances)


def running_estimate(
    draw: Draw,
    transform: Transform,
    n: int,
    seed: SeedLike = None,
) -> RunningEstimate:
    """
    Running estimate of E[transform(X)] from n i.i.d. draws of X.

    Args:
        draw: draw(rng, size) -> [size] i.i.d. draws of the base variable
        transform: Vectorized function applied elementwise to the draws
        n: Number of draws (0 gives empty sequences)
        seed: int, SeedSequence, Generator or None

    Returns:
        RunningEstimate with means and variances of length n

    Domain errors raised by `transform` propagate unchanged.
    """
    if n < 0:
        raise ValueError(f"Sample size must be non-negative, got {n}")

    rng = np.random.default_rng(seed)
    if n == 0:
        return running_statistics(np.empty(0))

    x = np.asarray(draw(rng, n), dtype=np.float64)
    if x.shape != (n,):
        raise ValueError(f"draw returned shape {x.shape}, expected ({n},)")

    values = np.asarray(transform(x), dtype=np.float64)
    return running_statistics(values)


def multi_run_band(
    draw: Draw,
    transform: Transform,
    n: int,
    n_runs: int,
    seed: Union[None, int, np.random.SeedSequence] = None,
    percentiles: Sequence[float] = DEFAULT_PERCENTILES,
) -> PercentileBand:
    """
    Pointwise percentile band of mean_k across independent runs.

    Each run gets its own child SeedSequence, so the runs share no RNG
    state and could be executed in any order.

    Args:
        draw: draw(rng, size) -> draws of the base variable
        transform: Vectorized transform
        n: Draws per run
        n_runs: Number of independent runs
        seed: Root seed (int or SeedSequence)
        percentiles: (lower, median, upper) percentile levels

    Returns:
        PercentileBand over k = 1..n
    """
    if n_runs <= 0:
        raise ValueError(f"n_runs must be a positive integer, got {n_runs}")
    if len(percentiles) != 3:
        raise ValueError(f"Expected 3 percentile levels, got {len(percentiles)}")

    children = spawn_seeds(seed, n_runs)

    all_means = np.empty((n_runs, n), dtype=np.float64)
    for run, child in enumerate(children):
        all_means[run] = running_estimate(draw, transform, n, seed=child).means
        if (run + 1) % 100 == 0:
            logger.info(f"Multi-run band: {run + 1}/{n_runs} runs")

    if n == 0:
        empty = np.empty(0, dtype=np.float64)
        return PercentileBand(empty, empty, empty, n_runs, tuple(percentiles))

    lower, median, upper = np.percentile(all_means, list(percentiles), axis=0)

    return PercentileBand(
        lower=lower,
        median=median,
        upper=upper,
        n_runs=n_runs,
        percentiles=tuple(float(p) for p in percentiles),
    )
