"""
Monte Carlo integration and importance sampling on top of the running estimator.
"""

import numpy as np
from scipy.special import gamma
from typing import Callable

from ..types import RunningEstimate
from ..densities.proposals import Proposal
from .running import running_estimate, SeedLike


# Closed form of the integral of exp(-x^3) over (0, inf)
EXP_NEG_CUBE_INTEGRAL = float(gamma(4.0 / 3.0))


def exp_neg_cube(x):
    """exp(-x^3) on x > 0, zero elsewhere."""
    x = np.asarray(x, dtype=np.float64)
    positive = np.clip(x, 0.0, None)
    return np.where(x > 0, np.exp(-positive ** 3), 0.0)


def uniform_integral(
    g: Callable[[np.ndarray], np.ndarray],
    a: float,
    b: float,
    n: int,
    seed: SeedLike = None,
) -> RunningEstimate:
    """Integral of g over (a, b) as (b - a) * E[g(U)], U ~ Uniform(a, b)."""
    if not b > a:
        raise ValueError(f"Integration interval must have b > a, got ({a}, {b})")
    width = b - a

    def draw(rng, size):
        return rng.uniform(a, b, size)

    def transform(u):
        return width * np.asarray(g(u), dtype=np.float64)

    return running_estimate(draw, transform, n, seed=seed)


def importance_weights(
    g: Callable[[np.ndarray], np.ndarray],
    base: Proposal,
) -> Callable[[np.ndarray], np.ndarray]:
    """Transform x -> g(x) / base.pdf(x) for draws from `base`."""
    def transform(x):
        numerator = np.asarray(g(x), dtype=np.float64)
        density = np.asarray(base.pdf(x), dtype=np.float64)
        with np.errstate(divide='ignore', invalid='ignore'):
            return np.where(numerator != 0, numerator / density, 0.0)
    return transform


def importance_integral(
    g: Callable[[np.ndarray], np.ndarray],
    base: Proposal,
    n: int,
    seed: SeedLike = None,
) -> RunningEstimate:
    """
    Integral of g by importance sampling from `base`.

    g must vanish outside the integration domain, and base must put
    positive density wherever g is non-zero.
    """
    return running_estimate(base.draw, importance_weights(g, base), n, seed=seed)
