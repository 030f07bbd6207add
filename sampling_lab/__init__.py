"""Rejection sampling, running Monte Carlo estimation and bootstrap tools."""

from .types import Envelope, SamplerStats, RunningEstimate, PercentileBand, BootstrapResult
from .sampling import rejection_sample, iter_rejection_samples, compute_envelope
from .estimation import running_estimate, multi_run_band

__all__ = [
    "Envelope",
    "SamplerStats",
    "RunningEstimate",
    "PercentileBand",
    "BootstrapResult",
    "rejection_sample",
    "iter_rejection_samples",
    "compute_envelope",
    "running_estimate",
    "multi_run_band",
]
