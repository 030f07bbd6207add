"""
Triangular target density.

The default instance is f(x) = 2 - 4|x - 0.5| on (0, 1), the density the
rejection sampling section draws from.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np


@dataclass(frozen=True)
class TriangularDensity:
    """
    Triangular density on (left, right) peaking at mode.

    Attributes:
        left: Lower end of the support
        mode: Location of the peak
        right: Upper end of the support
    """
    left: float = 0.0
    mode: float = 0.5
    right: float = 1.0

    def __post_init__(self) -> None:
        if not (self.left <= self.mode <= self.right) or self.left >= self.right:
            raise ValueError(
                f"Triangular density needs left <= mode <= right and left < right, "
                f"got ({self.left}, {self.mode}, {self.right})"
            )

    @property
    def support(self) -> Tuple[float, float]:
        return (self.left, self.right)

    @property
    def peak(self) -> float:
        """Density value at the mode (2 / width)."""
        return 2.0 / (self.right - self.left)

    @property
    def mean(self) -> float:
        return (self.left + self.mode + self.right) / 3.0

    @property
    def variance(self) -> float:
        a, c, b = self.left, self.mode, self.right
        return (a * a + b * b + c * c - a * b - a * c - b * c) / 18.0

    def pdf(self, x):
        """Density at x (scalar or array); zero outside the open support."""
        x = np.asarray(x, dtype=np.float64)
        a, c, b = self.left, self.mode, self.right
        rising = self.peak * (x - a) / (c - a) if c > a else np.zeros_like(x)
        falling = self.peak * (b - x) / (b - c) if b > c else np.zeros_like(x)
        density = np.where(x <= c, rising, falling)
        density = np.where((x > a) & (x < b), density, 0.0)
        if density.ndim == 0:
            return float(density)
        return density

    def cdf(self, x):
        """Cumulative distribution at x (scalar or array)."""
        x = np.asarray(x, dtype=np.float64)
        a, c, b = self.left, self.mode, self.right
        width = b - a
        lower = (x - a) ** 2 / (width * (c - a)) if c > a else np.zeros_like(x)
        upper = 1.0 - (b - x) ** 2 / (width * (b - c)) if b > c else np.ones_like(x)
        cumulative = np.where(x <= c, lower, upper)
        cumulative = np.where(x <= a, 0.0, np.where(x >= b, 1.0, cumulative))
        if cumulative.ndim == 0:
            return float(cumulative)
        return cumulative

    def __call__(self, x):
        return self.pdf(x)


STANDARD_TRIANGLE = TriangularDensity(0.0, 0.5, 1.0)
