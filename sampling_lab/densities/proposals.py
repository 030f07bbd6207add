"""
Proposal distributions for rejection and importance sampling.

Thin wrappers over frozen scipy.stats distributions so samplers can draw
from a numpy Generator and evaluate the matching density.
"""

from dataclasses import dataclass
from typing import Tuple, Optional
import numpy as np
from scipy import stats


@dataclass(frozen=True)
class Proposal:
    """
    Sampleable distribution with a known density.

    Attributes:
        name: Human-readable label
        dist: Frozen scipy.stats distribution
    """
    name: str
    dist: object

    @property
    def support(self) -> Tuple[float, float]:
        low, high = self.dist.support()
        return (float(low), float(high))

    @property
    def is_bounded(self) -> bool:
        low, high = self.support
        return bool(np.isfinite(low) and np.isfinite(high))

    def draw(self, rng: np.random.Generator, size: Optional[int] = None):
        """Draw one value (size=None) or an array of draws."""
        value = self.dist.rvs(size=size, random_state=rng)
        if size is None:
            return float(value)
        return np.asarray(value, dtype=np.float64)

    def pdf(self, x):
        density = self.dist.pdf(x)
        if np.ndim(density) == 0:
            return float(density)
        return density


def uniform_proposal(low: float = 0.0, high: float = 1.0) -> Proposal:
    """Uniform(low, high) proposal."""
    return Proposal(f"Uniform({low:g}, {high:g})", stats.uniform(loc=low, scale=high - low))


def beta_proposal(a: float = 2.0, b: float = 2.0) -> Proposal:
    """Beta(a, b) proposal on (0, 1)."""
    return Proposal(f"Beta({a:g}, {b:g})", stats.beta(a, b))


def normal_proposal(loc: float = 0.0, scale: float = 1.0) -> Proposal:
    """Normal(loc, scale) proposal on the whole real line."""
    return Proposal(f"Normal({loc:g}, {scale:g})", stats.norm(loc=loc, scale=scale))


def exponential_proposal(rate: float = 1.0) -> Proposal:
    """Exponential(rate) proposal on (0, inf)."""
    return Proposal(f"Exponential({rate:g})", stats.expon(scale=1.0 / rate))


def half_normal_proposal(scale: float = 1.0) -> Proposal:
    """
    |Z| for Z ~ Normal(0, scale): the normal base folded onto (0, inf).

    Density 2 * phi(x / scale) / scale on x >= 0, so importance weights for an
    integrand on (0, inf) are g(|Z|) / (2 phi(Z)).
    """
    return Proposal(f"|Normal(0, {scale:g})|", stats.halfnorm(scale=scale))
