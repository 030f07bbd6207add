"""
Command-line interface for the sampling lab.
"""

import click
import json
import logging

import numpy as np
import pandas as pd

from .config import (
    PROPOSAL_PRESETS, INTEGRAND_PRESETS, NotebookConfig, load_notebook_config,
    get_integrand_preset, get_proposal_preset,
)
from .densities.triangular import STANDARD_TRIANGLE
from .sampling.rejection import sample_from_proposal
from .estimation.integrals import importance_integral, importance_weights
from .estimation.running import multi_run_band, spawn_seeds
from .bootstrap.ratio import bootstrap_ratio_of_means, CI_METHODS
from .data.loader import load_paired_columns
from .diagnostics import ks_check, format_diagnostics
from .pipeline import run_notebook, SECTIONS


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )


@click.group()
def main():
    """Rejection sampling, Monte Carlo integration and bootstrap demos."""


@main.command()
@click.option(
    '--proposal', '-p',
    type=click.Choice(list(PROPOSAL_PRESETS.keys())),
    default='uniform',
    help='Proposal distribution (default: uniform)'
)
@click.option('--n-samples', '-n', 'n', type=int, default=10000, help='Number of samples (default: 10000)')
@click.option('--seed', type=int, help='Random seed for reproducibility')
@click.option('--output', '-o', type=click.Path(), help='Write samples to this CSV')
@click.option('--verbose/--quiet', '-v/-q', default=False, help='Verbose output')
def sample(proposal, n, seed, output, verbose):
    """Rejection sample the triangular density f(x) = 2 - 4|x - 0.5|."""
    _configure_logging(verbose)
    if n < 0:
        raise click.BadParameter("n must be non-negative", param_hint="'--n-samples'")

    preset = get_proposal_preset(proposal)
    samples, stats = sample_from_proposal(
        STANDARD_TRIANGLE.pdf, preset.proposal, preset.envelope, n, seed=seed
    )

    click.echo(f"Proposal: {preset.proposal.name} (M={preset.envelope.m:.4f})")
    click.echo(f"Accepted: {stats.n_accepted} / {stats.n_proposed} "
               f"(rate {stats.acceptance_rate:.3f}, theory {1 / preset.envelope.m:.3f})")
    if n > 0:
        ks = ks_check(samples, STANDARD_TRIANGLE.cdf)
        click.echo(f"Sample mean: {samples.mean():.4f} (true {STANDARD_TRIANGLE.mean:.4f})")
        click.echo(f"KS statistic: {ks['statistic']:.4f}, p-value: {ks['p_value']:.3f}")

    if output:
        pd.DataFrame({'x': samples}).to_csv(output, index=False)
        click.echo(f"Samples written to {output}")


@main.command()
@click.option(
    '--integrand', '-i',
    type=click.Choice(list(INTEGRAND_PRESETS.keys())),
    default='exp_neg_cube_normal',
    help='Integrand preset (default: exp_neg_cube_normal)'
)
@click.option('--n-samples', '-n', 'n', type=int, default=10000, help='Draws per run (default: 10000)')
@click.option('--runs', '-r', type=int, default=0,
              help='Independent runs for the percentile band (0=disabled)')
@click.option('--z', type=float, default=2.0, help='Band half-width in standard errors (default: 2.0)')
@click.option('--seed', type=int, help='Random seed for reproducibility')
@click.option('--output', '-o', type=click.Path(), help='Write the running estimate to this CSV')
@click.option('--verbose/--quiet', '-v/-q', default=False, help='Verbose output')
def integrate(integrand, n, runs, z, seed, output, verbose):
    """Running Monte Carlo / importance sampling estimate of an integral."""
    _configure_logging(verbose)
    if n <= 0:
        raise click.BadParameter("n must be a positive integer", param_hint="'--n-samples'")
    if runs < 0:
        raise click.BadParameter("runs must be non-negative", param_hint="'--runs'")
    if z <= 0:
        raise click.BadParameter("z must be positive", param_hint="'--z'")

    preset = get_integrand_preset(integrand)
    single_seed, multi_seed = spawn_seeds(seed, 2)
    estimate = importance_integral(preset.integrand, preset.base, n, seed=single_seed)
    lower, upper = estimate.band(z)

    click.echo(f"Integral: {preset.description}")
    click.echo(f"Estimate: {estimate.final:.5f} +/- {z * estimate.final_std_error:.5f} "
               f"(true {preset.true_value:.5f})")

    frame = pd.DataFrame({
        'k': np.arange(1, n + 1),
        'mean': estimate.means,
        'variance': estimate.variances,
        'band_low': lower,
        'band_high': upper,
    })

    if runs > 0:
        band = multi_run_band(
            preset.base.draw, importance_weights(preset.integrand, preset.base),
            n, runs, seed=multi_seed
        )
        click.echo(f"{runs}-run band at n={n}: "
                   f"[{band.lower[-1]:.5f}, {band.median[-1]:.5f}, {band.upper[-1]:.5f}]")
        frame['pct_low'] = band.lower
        frame['pct_median'] = band.median
        frame['pct_high'] = band.upper

    if output:
        frame.to_csv(output, index=False)
        click.echo(f"Running estimate written to {output}")


@main.command()
@click.argument('csv_path', type=click.Path(exists=True))
@click.option('--x-column', '-x', required=True, help='Denominator column')
@click.option('--y-column', '-y', required=True, help='Numerator column')
@click.option('--n-boot', '-b', type=int, default=2000, help='Bootstrap resamples (default: 2000)')
@click.option('--confidence', type=float, default=0.95, help='Confidence level (default: 0.95)')
@click.option(
    '--method',
    type=click.Choice(list(CI_METHODS)),
    default='percentile',
    help='Confidence interval method (default: percentile)'
)
@click.option('--seed', type=int, help='Random seed for reproducibility')
@click.option('--output', '-o', type=click.Path(), help='Write the summary to this JSON')
@click.option('--verbose/--quiet', '-v/-q', default=False, help='Verbose output')
def bootstrap(csv_path, x_column, y_column, n_boot, confidence, method, seed, output, verbose):
    """
    Bootstrap the ratio mean(Y) / mean(X).

    CSV_PATH: CSV holding the paired columns
    """
    _configure_logging(verbose)
    if n_boot <= 0:
        raise click.BadParameter("n-boot must be a positive integer", param_hint="'--n-boot'")
    if not 0.0 < confidence < 1.0:
        raise click.BadParameter("confidence must be in (0, 1)", param_hint="'--confidence'")

    x, y = load_paired_columns(csv_path, x_column, y_column)
    result = bootstrap_ratio_of_means(
        x, y, n_boot=n_boot, confidence=confidence, method=method, seed=seed
    )

    click.echo(f"Pairs: {len(x)}")
    click.echo(f"Ratio mean({y_column}) / mean({x_column}): {result.estimate:.4f}")
    click.echo(f"Std error: {result.std_error:.4f}, bias: {result.bias:.4f}")
    click.echo(f"{confidence * 100:.0f}% {method} CI: [{result.ci_low:.4f}, {result.ci_high:.4f}]")

    if output:
        with open(output, 'w') as f:
            json.dump(result.to_dict(), f, indent=2)
        click.echo(f"Summary saved to {output}")


@main.command()
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
              help='Notebook config JSON')
@click.option('--seed', type=int, help='Random seed (overrides config)')
@click.option(
    '--section', '-s',
    type=click.Choice(list(SECTIONS)),
    multiple=True,
    help='Section to run (repeatable, default: all)'
)
@click.option('--output', '-o', type=click.Path(), help='Write results to this JSON')
@click.option('--verbose/--quiet', '-v/-q', default=True, help='Verbose output')
def run(config_path, seed, section, output, verbose):
    """Run the full notebook."""
    _configure_logging(verbose)

    config = load_notebook_config(config_path) if config_path else NotebookConfig()
    if seed is not None:
        config.seed = seed

    results = run_notebook(config, sections=section or SECTIONS)
    click.echo(format_diagnostics(results))

    if output:
        with open(output, 'w') as f:
            json.dump(results, f, indent=2, default=str)
        click.echo(f"\nResults saved to {output}")


if __name__ == '__main__':
    main()
