"""
Sampler and estimator validation diagnostic.

Checks the rejection sampler against the triangular CDF for every proposal
preset, and the running estimator's band coverage and variance decay for
every integrand preset.

Usage:
    python -m scripts.validate_estimators --n 10000 --runs 200 --seed 42
"""

import argparse
import sys
import numpy as np
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sampling_lab.config import PROPOSAL_PRESETS, INTEGRAND_PRESETS
from sampling_lab.densities.triangular import STANDARD_TRIANGLE
from sampling_lab.sampling.rejection import sample_from_proposal
from sampling_lab.estimation.integrals import importance_weights
from sampling_lab.diagnostics import ks_check, band_coverage, mean_variance_profile


def validate_sampler(n: int, seed: int) -> list:
    """KS and mean checks for every proposal preset. Returns failure messages."""
    issues = []
    children = np.random.SeedSequence(seed).spawn(len(PROPOSAL_PRESETS))
    for (name, preset), child in zip(PROPOSAL_PRESETS.items(), children):
        samples, stats = sample_from_proposal(
            STANDARD_TRIANGLE.pdf, preset.proposal, preset.envelope, n, seed=child
        )
        ks = ks_check(samples, STANDARD_TRIANGLE.cdf)
        mean_err = abs(samples.mean() - STANDARD_TRIANGLE.mean)
        print(f"  {name:<10} accept={stats.acceptance_rate:.3f} "
              f"(theory {1 / preset.envelope.m:.3f})  "
              f"mean err={mean_err:.4f}  KS p={ks['p_value']:.3f}")
        if ks['p_value'] < 0.01:
            issues.append(f"  {name}: KS p-value {ks['p_value']:.4f} < 0.01")
        if mean_err > 0.02:
            issues.append(f"  {name}: sample mean off by {mean_err:.4f}")
    return issues


def validate_estimator(n: int, runs: int, seed: int) -> list:
    """Coverage and variance decay for every integrand preset."""
    issues = []
    children = np.random.SeedSequence(seed).spawn(len(INTEGRAND_PRESETS))
    for (name, preset), child in zip(INTEGRAND_PRESETS.items(), children):
        cov_seed, var_seed = child.spawn(2)
        transform = importance_weights(preset.integrand, preset.base)
        coverage = band_coverage(
            preset.base.draw, transform, n, preset.true_value, runs, seed=cov_seed
        )
        profile = mean_variance_profile(preset.base.draw, transform, n, runs, seed=var_seed)
        checkpoints = [k for k in (10, 100, 1000, 10000) if k <= n]
        decay = [profile[k - 1] for k in checkpoints]
        print(f"  {name:<26} coverage={coverage:.3f}  "
              + "  ".join(f"var@{k}={v:.2e}" for k, v in zip(checkpoints, decay)))
        if not 0.90 <= coverage <= 0.99:
            issues.append(f"  {name}: coverage {coverage:.3f} outside [0.90, 0.99]")
        if any(later >= earlier for earlier, later in zip(decay, decay[1:])):
            issues.append(f"  {name}: mean var_k does not decrease across {checkpoints}")
    return issues


def main():
    parser = argparse.ArgumentParser(description="Validate sampler and estimators")
    parser.add_argument("--n", type=int, default=10000, help="Draws per check")
    parser.add_argument("--runs", type=int, default=200, help="Independent runs for coverage")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    print("Rejection sampler:")
    issues = validate_sampler(args.n, args.seed)
    print("\nRunning estimator:")
    issues += validate_estimator(args.n, args.runs, args.seed)

    if issues:
        print("\nISSUES:")
        for issue in issues:
            print(issue)
        sys.exit(1)
    print("\nAll checks passed.")


if __name__ == '__main__':
    main()
