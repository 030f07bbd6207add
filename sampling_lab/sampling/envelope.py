"""
Envelope constant computation.

M is the supremum of target(x) / proposal(x) over the support. Numeric
envelopes search a finite interval: a coarse grid locates the peak, then a
bounded scalar minimizer refines it. If the peak sits on the edge of the
search interval while the proposal support extends past it, the supremum
may lie outside and EnvelopeNotAttainedError is raised; widen the bounds
or supply an analytic constant.
"""

import numpy as np
from scipy.optimize import minimize_scalar
from typing import Callable, Tuple, Optional
import logging

from ..types import Envelope

logger = logging.getLogger(__name__)


# Relative distance from a search bound that counts as "on the edge"
EDGE_TOLERANCE = 1e-6


class EnvelopeNotAttainedError(ValueError):
    """Ratio maximum found at the edge of a search interval that does not cover the support."""


def analytic_envelope(m: float, argmax: float) -> Envelope:
    """Envelope from a closed-form supremum."""
    return Envelope(m=float(m), argmax=float(argmax), method="analytic")


def _ratio(
    target_density: Callable,
    proposal_density: Callable,
    x: np.ndarray
) -> np.ndarray:
    """target/proposal, zero where the proposal density vanishes."""
    f = np.asarray(target_density(x), dtype=np.float64)
    g = np.asarray(proposal_density(x), dtype=np.float64)
    with np.errstate(divide='ignore', invalid='ignore'):
        ratio = np.where(g > 0, f / g, 0.0)
    return ratio


def compute_envelope(
    target_density: Callable,
    proposal_density: Callable,
    bounds: Tuple[float, float],
    support: Optional[Tuple[float, float]] = None,
    n_grid: int = 1001,
) -> Envelope:
    """
    Numerically maximize target/proposal on a finite interval.

    Args:
        target_density: Vectorized target density
        proposal_density: Vectorized proposal density
        bounds: (low, high) finite search interval
        support: Proposal support; when it extends past `bounds`, a peak on
                 the edge of `bounds` raises EnvelopeNotAttainedError
        n_grid: Grid size for the coarse search

    Returns:
        Envelope with method="numeric"

    Raises:
        ValueError: If bounds are not finite and ordered, or the ratio is
                    zero everywhere on the grid
        EnvelopeNotAttainedError: If the supremum may lie outside `bounds`
    """
    low, high = float(bounds[0]), float(bounds[1])
    if not (np.isfinite(low) and np.isfinite(high)) or low >= high:
        raise ValueError(f"Search bounds must be finite with low < high, got {bounds}")
    if n_grid < 3:
        raise ValueError(f"n_grid must be at least 3, got {n_grid}")

    grid = np.linspace(low, high, n_grid)
    ratios = _ratio(target_density, proposal_density, grid)
    best = int(np.argmax(ratios))
    if not ratios[best] > 0:
        raise ValueError(
            f"Target/proposal ratio is zero everywhere on [{low}, {high}]; "
            "supports do not overlap"
        )

    # Refine inside the neighbouring grid cells
    lo_idx = max(best - 1, 0)
    hi_idx = min(best + 1, n_grid - 1)
    result = minimize_scalar(
        lambda x: -float(_ratio(target_density, proposal_density, np.array([x]))[0]),
        bounds=(grid[lo_idx], grid[hi_idx]),
        method='bounded',
    )

    if -result.fun > ratios[best]:
        m, argmax = float(-result.fun), float(result.x)
    else:
        m, argmax = float(ratios[best]), float(grid[best])

    if support is not None:
        _check_attained(argmax, (low, high), support)

    logger.info("Numeric envelope: M=%.6f at x=%.6f on [%g, %g]", m, argmax, low, high)
    return Envelope(m=m, argmax=argmax, method="numeric", bounds=(low, high))


def _check_attained(
    argmax: float,
    bounds: Tuple[float, float],
    support: Tuple[float, float]
) -> None:
    low, high = bounds
    tol = EDGE_TOLERANCE * max(1.0, high - low)
    if abs(argmax - low) <= tol and support[0] < low:
        raise EnvelopeNotAttainedError(
            f"Ratio peaks at the lower search bound {low}; the proposal support "
            f"starts at {support[0]}, so the supremum may lie outside. "
            "Widen the bounds or use an analytic envelope."
        )
    if abs(argmax - high) <= tol and support[1] > high:
        raise EnvelopeNotAttainedError(
            f"Ratio peaks at the upper search bound {high}; the proposal support "
            f"extends to {support[1]}, so the supremum may lie outside. "
            "Widen the bounds or use an analytic envelope."
        )


def envelope_violation(
    target_density: Callable,
    proposal_density: Callable,
    m: float,
    grid: np.ndarray,
) -> float:
    """
    Largest target(x) - m * proposal(x) over a grid.

    Non-positive for a valid envelope. Diagnostic only.
    """
    grid = np.asarray(grid, dtype=np.float64)
    f = np.asarray(target_density(grid), dtype=np.float64)
    g = np.asarray(proposal_density(grid), dtype=np.float64)
    return float(np.max(f - m * g))
