"""
Sampler and estimator diagnostics.

Goodness-of-fit for sampler output, band coverage and variance decay
for the running estimator, and console formatting of pipeline results.
"""

import numpy as np
from scipy import stats
from typing import Callable, Dict, Sequence
import logging

from .estimation.running import running_estimate, spawn_seeds, Draw, Transform

logger = logging.getLogger(__name__)


def ks_check(samples: np.ndarray, cdf: Callable) -> Dict:
    """
    Kolmogorov-Smirnov test of samples against a known CDF.

    Returns:
        Dict with statistic, p_value and n
    """
    samples = np.asarray(samples, dtype=np.float64)
    if len(samples) == 0:
        raise ValueError("KS test needs at least one sample")
    result = stats.kstest(samples, cdf)
    return {
        'statistic': float(result.statistic),
        'p_value': float(result.pvalue),
        'n': int(len(samples)),
    }


def band_coverage(
    draw: Draw,
    transform: Transform,
    n: int,
    true_value: float,
    n_runs: int,
    seed=None,
    z: float = 2.0,
) -> float:
    """
    Fraction of independent runs whose final band mean_n +/- z*sqrt(var_n)
    contains the true value. About 0.95 for z = 2 when the estimator is sound.
    """
    if n <= 0 or n_runs <= 0:
        raise ValueError(f"n and n_runs must be positive, got n={n}, n_runs={n_runs}")

    hits = 0
    for child in spawn_seeds(seed, n_runs):
        estimate = running_estimate(draw, transform, n, seed=child)
        half_width = z * estimate.final_std_error
        if abs(estimate.final - true_value) <= half_width:
            hits += 1

    coverage = hits / n_runs
    logger.info(f"Band coverage: {coverage:.3f} over {n_runs} runs (z={z})")
    return coverage


def mean_variance_profile(
    draw: Draw,
    transform: Transform,
    n: int,
    n_runs: int,
    seed=None,
) -> np.ndarray:
    """Mean of var_k across independent runs, k = 1..n."""
    if n_runs <= 0:
        raise ValueError(f"n_runs must be positive, got {n_runs}")

    total = np.zeros(n, dtype=np.float64)
    for child in spawn_seeds(seed, n_runs):
        total += running_estimate(draw, transform, n, seed=child).variances
    return total / n_runs


def checkpoint_summary(
    means: np.ndarray,
    variances: np.ndarray,
    checkpoints: Sequence[int] = (10, 100, 1000, 10000),
    z: float = 2.0,
) -> Dict[int, Dict[str, float]]:
    """Estimate and band at selected sample sizes (those <= n)."""
    summary = {}
    for k in checkpoints:
        if 0 < k <= len(means):
            se = float(np.sqrt(variances[k - 1]))
            summary[k] = {
                'estimate': float(means[k - 1]),
                'std_error': se,
                'band_low': float(means[k - 1] - z * se),
                'band_high': float(means[k - 1] + z * se),
            }
    return summary


def format_diagnostics(results: Dict) -> str:
    """Format pipeline results into readable console output."""
    lines = []
    lines.append("SAMPLING LAB DIAGNOSTICS")
    lines.append("=" * 60)

    rejection = results.get('rejection')
    if rejection:
        lines.append(f"\n  Rejection sampling (target mean {rejection['true_mean']:.4f}):")
        for name, r in rejection['proposals'].items():
            lines.append(
                f"    {name:<10} M={r['envelope_m']:.4f} | "
                f"accept={r['stats']['acceptance_rate']:.3f} "
                f"(theory {r['expected_acceptance_rate']:.3f}) | "
                f"mean={r['sample_mean']:.4f} | KS p={r['ks']['p_value']:.3f}"
            )

    monte_carlo = results.get('monte_carlo')
    if monte_carlo:
        lines.append(f"\n  Monte Carlo integration:")
        for name, r in monte_carlo['integrands'].items():
            single = r['single_run']
            lines.append(
                f"    {name:<26} est={single['estimate']:.5f} "
                f"+/- {2 * single['std_error']:.5f} (true {r['true_value']:.5f})"
            )
            band = r.get('multi_run')
            if band and band.get('median') is not None:
                lines.append(
                    f"    {'':<26} {band['n_runs']} runs: "
                    f"[{band['lower']:.5f}, {band['median']:.5f}, {band['upper']:.5f}]"
                )

    bootstrap = results.get('bootstrap')
    if bootstrap:
        lines.append(f"\n  Bootstrap ratio of means:")
        lines.append(
            f"    estimate={bootstrap['estimate']:.4f} | se={bootstrap['std_error']:.4f} | "
            f"bias={bootstrap['bias']:.4f}"
        )
        lines.append(
            f"    {bootstrap['confidence'] * 100:.0f}% {bootstrap['method']} CI: "
            f"[{bootstrap['ci_low']:.4f}, {bootstrap['ci_high']:.4f}]"
        )

    return "\n".join(lines)
