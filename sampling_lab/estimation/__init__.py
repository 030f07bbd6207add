"""Running Monte Carlo estimation and integration."""

from .running import running_estimate, running_statistics, multi_run_band, spawn_seeds
from .integrals import (
    uniform_integral,
    importance_integral,
    importance_weights,
    exp_neg_cube,
    EXP_NEG_CUBE_INTEGRAL,
)

__all__ = [
    "running_estimate",
    "running_statistics",
    "multi_run_band",
    "spawn_seeds",
    "uniform_integral",
    "importance_integral",
    "importance_weights",
    "exp_neg_cube",
    "EXP_NEG_CUBE_INTEGRAL",
]
