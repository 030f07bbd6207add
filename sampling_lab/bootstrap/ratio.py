"""
Bootstrap sampling distribution of a ratio of means.

Pairs (x_i, y_i) are resampled together with replacement; each resample
gives one replicate of mean(y*) / mean(x*). Confidence intervals:

- percentile: empirical quantiles of the replicates
- basic:      reflected percentile interval, 2*theta - quantiles
- normal:     theta - bias +/- z * se
"""

import numpy as np
from scipy import stats
from typing import Union
import logging

from ..types import BootstrapResult

logger = logging.getLogger(__name__)


SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]

CI_METHODS = ("percentile", "basic", "normal")


def ratio_of_means(x: np.ndarray, y: np.ndarray) -> float:
    """mean(y) / mean(x)."""
    x_mean = float(np.mean(x))
    if x_mean == 0.0:
        raise ValueError("Ratio of means is undefined: mean of x is zero")
    return float(np.mean(y)) / x_mean


def _validate_pairs(x: np.ndarray, y: np.ndarray) -> None:
    if x.ndim != 1 or y.ndim != 1:
        raise ValueError("x and y must be one-dimensional")
    if len(x) != len(y):
        raise ValueError(f"x and y must have the same length, got {len(x)} and {len(y)}")
    if len(x) < 2:
        raise ValueError(f"Need at least 2 observations, got {len(x)}")
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise ValueError("x and y must not contain NaN or infinite values")


def bootstrap_ratio_of_means(
    x,
    y,
    n_boot: int = 2000,
    confidence: float = 0.95,
    method: str = "percentile",
    seed: SeedLike = None,
) -> BootstrapResult:
    """
    Bootstrap the ratio mean(y) / mean(x).

    Args:
        x: Denominator sample
        y: Numerator sample, paired with x
        n_boot: Number of bootstrap resamples
        confidence: Confidence level in (0, 1)
        method: "percentile", "basic" or "normal"
        seed: int, SeedSequence, Generator or None

    Returns:
        BootstrapResult with replicates and the confidence interval

    Raises:
        ValueError: On mismatched, short or non-finite samples, bad
                    confidence/method/n_boot, or a zero mean of x
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    _validate_pairs(x, y)

    if n_boot <= 0:
        raise ValueError(f"n_boot must be a positive integer, got {n_boot}")
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"confidence must be in (0, 1), got {confidence}")
    if method not in CI_METHODS:
        raise ValueError(f"Unknown CI method '{method}'. Expected one of {CI_METHODS}")

    rng = np.random.default_rng(seed)
    n = len(x)
    estimate = ratio_of_means(x, y)

    # [n_boot, n] resample indices; each row is one paired resample
    idx = rng.integers(0, n, size=(n_boot, n))
    x_means = x[idx].mean(axis=1)
    y_means = y[idx].mean(axis=1)

    degenerate = x_means == 0.0
    if degenerate.any():
        logger.warning(
            "%d bootstrap resamples had zero mean(x) and were dropped",
            int(degenerate.sum())
        )
        x_means = x_means[~degenerate]
        y_means = y_means[~degenerate]
        if len(x_means) == 0:
            raise ValueError("All bootstrap resamples had zero mean(x)")

    replicates = y_means / x_means

    alpha = 1.0 - confidence
    std_error = float(np.std(replicates, ddof=1)) if len(replicates) > 1 else 0.0
    bias = float(np.mean(replicates) - estimate)

    if method == "percentile":
        ci_low, ci_high = np.percentile(replicates, [100 * alpha / 2, 100 * (1 - alpha / 2)])
    elif method == "basic":
        q_low, q_high = np.percentile(replicates, [100 * alpha / 2, 100 * (1 - alpha / 2)])
        ci_low, ci_high = 2 * estimate - q_high, 2 * estimate - q_low
    else:
        z = stats.norm.ppf(1 - alpha / 2)
        center = estimate - bias
        ci_low, ci_high = center - z * std_error, center + z * std_error

    logger.info(
        "Bootstrap ratio of means: %.4f, %s %.0f%% CI [%.4f, %.4f] (%d resamples)",
        estimate, method, confidence * 100, ci_low, ci_high, len(replicates)
    )

    return BootstrapResult(
        estimate=estimate,
        replicates=replicates,
        ci_low=float(ci_low),
        ci_high=float(ci_high),
        std_error=std_error,
        bias=bias,
        confidence=confidence,
        method=method,
    )
