"""
Notebook pipeline orchestration.

Runs the rejection sampling, Monte Carlo integration and bootstrap sections
end to end and collects JSON-serializable results.
"""

import numpy as np
from typing import Dict, Optional, Sequence
import logging

from .config import (
    NotebookConfig, RejectionConfig, MonteCarloConfig, BootstrapConfig,
    get_proposal_preset, get_integrand_preset,
)
from .densities.triangular import TriangularDensity, STANDARD_TRIANGLE
from .sampling.rejection import sample_from_proposal
from .sampling.envelope import compute_envelope, envelope_violation
from .estimation.integrals import importance_integral, importance_weights
from .estimation.running import multi_run_band, spawn_seeds
from .bootstrap.ratio import bootstrap_ratio_of_means
from .data.loader import load_paired_columns
from .diagnostics import ks_check, checkpoint_summary

logger = logging.getLogger(__name__)


SECTIONS = ("rejection", "monte_carlo", "bootstrap")


def _as_seed_sequence(seed) -> np.random.SeedSequence:
    if isinstance(seed, np.random.SeedSequence):
        return seed
    return np.random.SeedSequence(seed)


def run_rejection_section(
    config: RejectionConfig,
    seed=None,
) -> Dict:
    """
    Sample the triangular target with every configured proposal.

    The preset envelopes hold for the standard triangle; any other triangle
    gets a numeric envelope over its own support.
    """
    target = TriangularDensity(config.left, config.mode, config.right)
    children = spawn_seeds(seed, max(len(config.proposals), 1))
    check_grid = np.linspace(target.left, target.right, 2001)

    per_proposal = {}
    for name, child in zip(config.proposals, children):
        preset = get_proposal_preset(name)
        proposal = preset.proposal

        if target == STANDARD_TRIANGLE:
            envelope = preset.envelope
        else:
            envelope = compute_envelope(target.pdf, proposal.pdf, bounds=target.support)

        violation = envelope_violation(target.pdf, proposal.pdf, envelope.m, check_grid)
        if violation > 1e-9:
            logger.warning(
                "Envelope for %s is violated by %.3g; samples will be biased",
                name, violation
            )

        logger.info(f"Rejection sampling {config.n} draws with {proposal.name}...")
        samples, stats = sample_from_proposal(target.pdf, proposal, envelope, config.n, seed=child)

        entry = {
            'proposal': proposal.name,
            'envelope_m': envelope.m,
            'envelope_method': envelope.method,
            'envelope_violation': violation,
            'expected_acceptance_rate': 1.0 / envelope.m,
            'stats': stats.to_dict(),
            'sample_mean': float(samples.mean()) if config.n else None,
            'sample_std': float(samples.std(ddof=1)) if config.n > 1 else None,
            'ks': ks_check(samples, target.cdf) if config.n else None,
        }
        per_proposal[name] = entry

    return {
        'target': {'left': target.left, 'mode': target.mode, 'right': target.right},
        'true_mean': target.mean,
        'true_std': float(np.sqrt(target.variance)),
        'proposals': per_proposal,
    }


def run_monte_carlo_section(
    config: MonteCarloConfig,
    seed=None,
) -> Dict:
    """Single-run analytic bands and multi-run percentile bands per integrand."""
    children = spawn_seeds(seed, max(len(config.integrands), 1))

    per_integrand = {}
    for name, child in zip(config.integrands, children):
        preset = get_integrand_preset(name)
        single_seed, multi_seed = spawn_seeds(child, 2)

        logger.info(f"Estimating {preset.description} with n={config.n}...")
        estimate = importance_integral(preset.integrand, preset.base, config.n, seed=single_seed)

        entry = {
            'description': preset.description,
            'base': preset.base.name,
            'true_value': preset.true_value,
            'single_run': estimate.to_dict(z=config.z),
            'checkpoints': checkpoint_summary(estimate.means, estimate.variances, z=config.z),
            'multi_run': None,
        }
        if len(estimate):
            low, high = entry['single_run']['band_low'], entry['single_run']['band_high']
            entry['band_contains_true_value'] = bool(low <= preset.true_value <= high)

        if config.n_runs > 0 and config.n > 0:
            logger.info(f"Multi-run band: {config.n_runs} runs of {config.n} draws...")
            band = multi_run_band(
                preset.base.draw,
                importance_weights(preset.integrand, preset.base),
                config.n,
                config.n_runs,
                seed=multi_seed,
            )
            entry['multi_run'] = band.to_dict()

        per_integrand[name] = entry

    return {'n': config.n, 'z': config.z, 'integrands': per_integrand}


def run_bootstrap_section(
    config: BootstrapConfig,
    seed=None,
    x: Optional[np.ndarray] = None,
    y: Optional[np.ndarray] = None,
) -> Optional[Dict]:
    """
    Bootstrap the ratio of means of paired data.

    Uses `x` and `y` when given, otherwise loads them from config.csv_path.
    Returns None when there is no data to bootstrap.
    """
    if x is None or y is None:
        if config.csv_path is None:
            logger.info("No bootstrap data configured, skipping bootstrap section")
            return None
        x, y = load_paired_columns(config.csv_path, config.x_column, config.y_column)

    result = bootstrap_ratio_of_means(
        x, y,
        n_boot=config.n_boot,
        confidence=config.confidence,
        method=config.method,
        seed=_as_seed_sequence(seed),
    )
    summary = result.to_dict()
    summary['n_pairs'] = int(len(x))
    summary['x_column'] = config.x_column
    summary['y_column'] = config.y_column
    return summary


def run_notebook(
    config: Optional[NotebookConfig] = None,
    sections: Sequence[str] = SECTIONS,
) -> Dict:
    """
    Run the selected notebook sections.

    Steps:
    1. Rejection sampling from the triangular density
    2. Monte Carlo integration with running bands
    3. Bootstrap of the ratio of means

    Each section draws from its own child of the root seed, so running a
    subset of sections does not change the others' output.

    Returns:
        Dict keyed by section name plus 'metadata'
    """
    if config is None:
        config = NotebookConfig()

    unknown = [s for s in sections if s not in SECTIONS]
    if unknown:
        raise ValueError(f"Unknown sections {unknown}. Expected a subset of {SECTIONS}")

    rejection_seed, mc_seed, boot_seed = spawn_seeds(config.seed, 3)

    results = {'rejection': None, 'monte_carlo': None, 'bootstrap': None}

    if 'rejection' in sections:
        results['rejection'] = run_rejection_section(config.rejection, seed=rejection_seed)
    if 'monte_carlo' in sections:
        results['monte_carlo'] = run_monte_carlo_section(config.monte_carlo, seed=mc_seed)
    if 'bootstrap' in sections:
        results['bootstrap'] = run_bootstrap_section(config.bootstrap, seed=boot_seed)

    results['metadata'] = {
        'seed': config.seed,
        'sections': list(sections),
    }
    return results
