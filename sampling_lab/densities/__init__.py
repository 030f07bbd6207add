"""Target densities and proposal distributions."""

from .triangular import TriangularDensity, STANDARD_TRIANGLE
from .proposals import (
    Proposal,
    uniform_proposal,
    beta_proposal,
    normal_proposal,
    half_normal_proposal,
    exponential_proposal,
)

__all__ = [
    "TriangularDensity",
    "STANDARD_TRIANGLE",
    "Proposal",
    "uniform_proposal",
    "beta_proposal",
    "normal_proposal",
    "half_normal_proposal",
    "exponential_proposal",
]
