"""
Rejection sampler.

Draws x* from a proposal and u ~ Uniform(0, 1), and accepts x* when
u * M * g(x*) < f(x*). Accepted draws are i.i.d. from the target f as long
as M is a valid envelope (f <= M * g on the support).

Preconditions, not checked here:
- An underestimated M silently biases the output toward the proposal.
- A zero acceptance probability (e.g. target and proposal supports do not
  overlap) makes the sampler loop forever.
"""

import numpy as np
from typing import Callable, Iterator, Optional, Tuple, Union
import logging

from ..types import Envelope, SamplerStats
from ..densities.proposals import Proposal

logger = logging.getLogger(__name__)


SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]
Density = Callable[[float], float]
ProposalSampler = Callable[[np.random.Generator], float]

# Acceptance rates below this are logged as a warning after a run
LOW_ACCEPTANCE_RATE = 0.05


def iter_rejection_samples(
    target_density: Density,
    proposal_sampler: ProposalSampler,
    proposal_density: Density,
    envelope_m: float,
    seed: SeedLike = None,
    stats: Optional[SamplerStats] = None,
) -> Iterator[float]:
    """
    Lazily yield accepted draws from the target density.

    The generator is infinite; take as many samples as needed. Calling it
    again with the same integer seed restarts the identical sequence.

    Args:
        target_density: f(x) >= 0
        proposal_sampler: Draws one value from the proposal given a Generator
        proposal_density: g(x), density of the proposal
        envelope_m: M with f(x) <= M * g(x) on the support
        seed: int, SeedSequence, Generator or None
        stats: Optional SamplerStats updated in place with proposal counts

    Returns:
        Infinite iterator of accepted samples (floats)

    Raises:
        ValueError: If envelope_m is not positive, before any draw is made
    """
    _check_envelope(envelope_m)
    return _accepted_draws(
        target_density, proposal_sampler, proposal_density, envelope_m,
        np.random.default_rng(seed), stats
    )


def _check_envelope(envelope_m: float) -> None:
    if not envelope_m > 0:
        raise ValueError(f"envelope_m must be positive, got {envelope_m}")


def _accepted_draws(target_density, proposal_sampler, proposal_density, envelope_m, rng, stats):
    while True:
        x = proposal_sampler(rng)
        u = rng.uniform(0.0, 1.0)
        if stats is not None:
            stats.n_proposed += 1
        if u * envelope_m * proposal_density(x) < target_density(x):
            if stats is not None:
                stats.n_accepted += 1
            yield x


def rejection_sample_with_stats(
    target_density: Density,
    proposal_sampler: ProposalSampler,
    proposal_density: Density,
    envelope_m: float,
    n: int,
    seed: SeedLike = None,
) -> Tuple[np.ndarray, SamplerStats]:
    """
    Draw exactly n samples from the target and report acceptance stats.

    Returns:
        (samples [n] float64, SamplerStats)
    """
    if n < 0:
        raise ValueError(f"Sample size must be non-negative, got {n}")
    _check_envelope(envelope_m)

    stats = SamplerStats(n_accepted=0, n_proposed=0)
    samples = np.empty(n, dtype=np.float64)
    if n == 0:
        return samples, stats

    accepted = iter_rejection_samples(
        target_density, proposal_sampler, proposal_density, envelope_m,
        seed=seed, stats=stats
    )
    for i, x in zip(range(n), accepted):
        samples[i] = x

    logger.info(
        "Rejection sampler: %d accepted / %d proposed (rate=%.3f, M=%.4f)",
        stats.n_accepted, stats.n_proposed, stats.acceptance_rate, envelope_m
    )
    if stats.acceptance_rate < LOW_ACCEPTANCE_RATE:
        logger.warning(
            "Low acceptance rate %.4f; the envelope may be loose",
            stats.acceptance_rate
        )

    return samples, stats


def rejection_sample(
    target_density: Density,
    proposal_sampler: ProposalSampler,
    proposal_density: Density,
    envelope_m: float,
    n: int,
    seed: SeedLike = None,
) -> np.ndarray:
    """
    Draw exactly n i.i.d. samples from the target density.

    n = 0 returns an empty array.
    """
    samples, _ = rejection_sample_with_stats(
        target_density, proposal_sampler, proposal_density, envelope_m, n, seed=seed
    )
    return samples


def sample_from_proposal(
    target_density: Density,
    proposal: Proposal,
    envelope: Envelope,
    n: int,
    seed: SeedLike = None,
) -> Tuple[np.ndarray, SamplerStats]:
    """Rejection sample using a Proposal object and its Envelope."""
    return rejection_sample_with_stats(
        target_density,
        proposal.draw,
        proposal.pdf,
        envelope.m,
        n,
        seed=seed,
    )
