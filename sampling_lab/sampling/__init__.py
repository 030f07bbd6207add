"""Rejection sampling and envelope computation."""

from .rejection import (
    iter_rejection_samples,
    rejection_sample,
    rejection_sample_with_stats,
    sample_from_proposal,
)
from .envelope import (
    analytic_envelope,
    compute_envelope,
    envelope_violation,
    EnvelopeNotAttainedError,
)

__all__ = [
    "iter_rejection_samples",
    "rejection_sample",
    "rejection_sample_with_stats",
    "sample_from_proposal",
    "analytic_envelope",
    "compute_envelope",
    "envelope_violation",
    "EnvelopeNotAttainedError",
]
