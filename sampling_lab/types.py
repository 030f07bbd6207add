"""
Core data structures for the sampling lab.

Plain dataclasses shared by the sampler, the running estimator,
the bootstrap and the pipeline.
"""

from dataclasses import dataclass
from typing import Tuple, Dict, Optional
import numpy as np


@dataclass
class Envelope:
    """
    Envelope constant for rejection sampling.

    Attributes:
        m: Scalar with target(x) <= m * proposal(x) on the support
        argmax: Point where the ratio target/proposal peaks
        method: "analytic" or "numeric"
        bounds: Search interval used for numeric envelopes
    """
    m: float
    argmax: float
    method: str = "analytic"
    bounds: Optional[Tuple[float, float]] = None

    def __post_init__(self) -> None:
        if not self.m > 0:
            raise ValueError(
                f"Envelope constant must be positive, got {self.m}"
            )


@dataclass
class SamplerStats:
    """Acceptance bookkeeping for one rejection sampling run."""
    n_accepted: int
    n_proposed: int

    @property
    def acceptance_rate(self) -> float:
        return self.n_accepted / self.n_proposed if self.n_proposed > 0 else 0.0

    def to_dict(self) -> Dict:
        return {
            'n_accepted': self.n_accepted,
            'n_proposed': self.n_proposed,
            'acceptance_rate': self.acceptance_rate,
        }


@dataclass
class RunningEstimate:
    """
    Running Monte Carlo estimate over increasing prefixes of a sample stream.

    Attributes:
        means: [n] mean_k of the first k evaluations
        variances: [n] plug-in variance of mean_k (Var(f) / k)
    """
    means: np.ndarray
    variances: np.ndarray

    def __len__(self) -> int:
        return len(self.means)

    @property
    def final(self) -> float:
        """Estimate using all n evaluations."""
        if len(self.means) == 0:
            raise ValueError("Empty running estimate has no final value")
        return float(self.means[-1])

    @property
    def final_std_error(self) -> float:
        if len(self.variances) == 0:
            raise ValueError("Empty running estimate has no final value")
        return float(np.sqrt(self.variances[-1]))

    def band(self, z: float = 2.0) -> Tuple[np.ndarray, np.ndarray]:
        """Pointwise (lower, upper) band mean_k +/- z * sqrt(var_k)."""
        half_width = z * np.sqrt(self.variances)
        return self.means - half_width, self.means + half_width

    def to_dict(self, z: float = 2.0) -> Dict:
        """Summary of the final estimate (full sequences are not serialized)."""
        if len(self.means) == 0:
            return {'n': 0, 'estimate': None, 'std_error': None,
                    'band_low': None, 'band_high': None}
        lower, upper = self.band(z)
        return {
            'n': len(self.means),
            'estimate': self.final,
            'std_error': self.final_std_error,
            'band_low': float(lower[-1]),
            'band_high': float(upper[-1]),
        }


@dataclass
class PercentileBand:
    """
    Pointwise percentile band across independent running estimates.

    Attributes:
        lower: [n] lower percentile of mean_k across runs
        median: [n] median of mean_k across runs
        upper: [n] upper percentile of mean_k across runs
        n_runs: Number of independent runs
        percentiles: (lower, median, upper) percentile levels
    """
    lower: np.ndarray
    median: np.ndarray
    upper: np.ndarray
    n_runs: int
    percentiles: Tuple[float, float, float] = (2.5, 50.0, 97.5)

    def __len__(self) -> int:
        return len(self.median)

    @property
    def final_width(self) -> float:
        return float(self.upper[-1] - self.lower[-1]) if len(self.median) else 0.0

    def to_dict(self) -> Dict:
        if len(self.median) == 0:
            return {'n': 0, 'n_runs': self.n_runs, 'lower': None,
                    'median': None, 'upper': None}
        return {
            'n': len(self.median),
            'n_runs': self.n_runs,
            'percentiles': list(self.percentiles),
            'lower': float(self.lower[-1]),
            'median': float(self.median[-1]),
            'upper': float(self.upper[-1]),
        }


@dataclass
class BootstrapResult:
    """
    Bootstrap sampling distribution and confidence interval for a statistic.

    Attributes:
        estimate: Statistic on the observed sample
        replicates: [n_boot] statistic on each resample
        ci_low: Lower confidence bound
        ci_high: Upper confidence bound
        std_error: Standard deviation of the replicates
        bias: mean(replicates) - estimate
        confidence: Confidence level (e.g. 0.95)
        method: Interval method ("percentile", "basic" or "normal")
    """
    estimate: float
    replicates: np.ndarray
    ci_low: float
    ci_high: float
    std_error: float
    bias: float
    confidence: float
    method: str

    @property
    def n_boot(self) -> int:
        return len(self.replicates)

    def to_dict(self) -> Dict:
        return {
            'estimate': self.estimate,
            'ci_low': self.ci_low,
            'ci_high': self.ci_high,
            'std_error': self.std_error,
            'bias': self.bias,
            'confidence': self.confidence,
            'method': self.method,
            'n_boot': self.n_boot,
        }
