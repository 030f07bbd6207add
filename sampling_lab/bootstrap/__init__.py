"""Bootstrap resampling."""

from .ratio import bootstrap_ratio_of_means, ratio_of_means, CI_METHODS

__all__ = ['bootstrap_ratio_of_means', 'ratio_of_means', 'CI_METHODS']
