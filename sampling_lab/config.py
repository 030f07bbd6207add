"""
Configuration management for the sampling lab.

Proposal and integrand presets, per-section defaults, and versioned JSON
loading/saving of a notebook run configuration.
"""

import json
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional, Callable

import numpy as np

from .types import Envelope
from .densities.triangular import TriangularDensity
from .densities.proposals import (
    Proposal, uniform_proposal, beta_proposal, half_normal_proposal, exponential_proposal
)
from .sampling.envelope import analytic_envelope
from .estimation.integrals import exp_neg_cube, EXP_NEG_CUBE_INTEGRAL


NOTEBOOK_CONFIG_VERSION = "1.0"


# =============================================================================
# Proposal Presets (for the standard triangle f(x) = 2 - 4|x - 0.5|)
# =============================================================================

@dataclass(frozen=True)
class ProposalPreset:
    """Proposal plus its envelope constant against the standard triangle."""
    proposal: Proposal
    envelope: Envelope


PROPOSAL_PRESETS: Dict[str, ProposalPreset] = {
    # f/g = f on (0, 1): peaks at the mode with f(0.5) = 2
    'uniform': ProposalPreset(
        proposal=uniform_proposal(0.0, 1.0),
        envelope=analytic_envelope(2.0, 0.5),
    ),
    # f/g = 2 / (3 (1 - x)) for x <= 0.5, symmetric above: peaks at 2 / 1.5
    'beta22': ProposalPreset(
        proposal=beta_proposal(2.0, 2.0),
        envelope=analytic_envelope(4.0 / 3.0, 0.5),
    ),
}


# =============================================================================
# Integrand Presets
# =============================================================================

@dataclass(frozen=True)
class IntegrandPreset:
    """
    Integral estimated as E_base[g(X) / base.pdf(X)].

    Attributes:
        integrand: Vectorized g, zero outside the integration domain
        base: Distribution the draws come from
        true_value: Closed-form value of the integral
        description: Label for reports
    """
    integrand: Callable[[np.ndarray], np.ndarray]
    base: Proposal
    true_value: float
    description: str


INTEGRAND_PRESETS: Dict[str, IntegrandPreset] = {
    'exp_neg_cube_normal': IntegrandPreset(
        integrand=exp_neg_cube,
        base=half_normal_proposal(1.0),
        true_value=EXP_NEG_CUBE_INTEGRAL,
        description="int_0^inf exp(-x^3) dx, standard normal base folded to |Z|",
    ),
    'exp_neg_cube_exponential': IntegrandPreset(
        integrand=exp_neg_cube,
        base=exponential_proposal(1.0),
        true_value=EXP_NEG_CUBE_INTEGRAL,
        description="int_0^inf exp(-x^3) dx, Exponential(1) base",
    ),
    # Plain Monte Carlo over (0, 3); the tail past 3 is below exp(-27)
    'exp_neg_cube_uniform': IntegrandPreset(
        integrand=exp_neg_cube,
        base=uniform_proposal(0.0, 3.0),
        true_value=EXP_NEG_CUBE_INTEGRAL,
        description="int_0^3 exp(-x^3) dx, Uniform(0, 3) base",
    ),
}


def get_proposal_preset(name: str) -> ProposalPreset:
    if name not in PROPOSAL_PRESETS:
        raise KeyError(
            f"Unknown proposal '{name}'. Available: {list(PROPOSAL_PRESETS.keys())}"
        )
    return PROPOSAL_PRESETS[name]


def get_integrand_preset(name: str) -> IntegrandPreset:
    if name not in INTEGRAND_PRESETS:
        raise KeyError(
            f"Unknown integrand '{name}'. Available: {list(INTEGRAND_PRESETS.keys())}"
        )
    return INTEGRAND_PRESETS[name]


# =============================================================================
# Section Configs
# =============================================================================

@dataclass
class RejectionConfig:
    """Rejection sampling section: triangle on (left, right) with peak at mode."""
    n: int = 10000
    proposals: List[str] = field(default_factory=lambda: ['uniform', 'beta22'])
    left: float = 0.0
    mode: float = 0.5
    right: float = 1.0

    def __post_init__(self) -> None:
        if self.n < 0:
            raise ValueError(f"RejectionConfig.n must be non-negative, got {self.n}")
        target = TriangularDensity(self.left, self.mode, self.right)
        for name in self.proposals:
            low, high = get_proposal_preset(name).proposal.support
            # No envelope M can cover target mass where the proposal density is zero
            if target.left < low or target.right > high:
                raise ValueError(
                    f"Target support {target.support} is not inside the support "
                    f"({low:g}, {high:g}) of proposal '{name}'"
                )


@dataclass
class MonteCarloConfig:
    """Monte Carlo integration section."""
    n: int = 10000
    n_runs: int = 200
    integrands: List[str] = field(
        default_factory=lambda: ['exp_neg_cube_normal', 'exp_neg_cube_exponential']
    )
    z: float = 2.0

    def __post_init__(self) -> None:
        if self.n < 0:
            raise ValueError(f"MonteCarloConfig.n must be non-negative, got {self.n}")
        if self.n_runs < 0:
            raise ValueError(
                f"MonteCarloConfig.n_runs must be non-negative, got {self.n_runs}"
            )
        if self.z <= 0:
            raise ValueError(f"MonteCarloConfig.z must be positive, got {self.z}")
        for name in self.integrands:
            get_integrand_preset(name)


@dataclass
class BootstrapConfig:
    """Bootstrap section; skipped when csv_path is None."""
    n_boot: int = 2000
    confidence: float = 0.95
    method: str = "percentile"
    csv_path: Optional[str] = None
    x_column: str = "x"
    y_column: str = "y"

    def __post_init__(self) -> None:
        if self.n_boot <= 0:
            raise ValueError(f"BootstrapConfig.n_boot must be positive, got {self.n_boot}")
        if not 0.0 < self.confidence < 1.0:
            raise ValueError(
                f"BootstrapConfig.confidence must be in (0, 1), got {self.confidence}"
            )
        if self.method not in ("percentile", "basic", "normal"):
            raise ValueError(f"Unknown bootstrap CI method '{self.method}'")


@dataclass
class NotebookConfig:
    """Complete configuration for one notebook run."""
    seed: Optional[int] = 42
    rejection: RejectionConfig = field(default_factory=RejectionConfig)
    monte_carlo: MonteCarloConfig = field(default_factory=MonteCarloConfig)
    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)


# =============================================================================
# JSON Loading Utilities
# =============================================================================

def _validate_version(config: Dict[str, Any]) -> None:
    version = config.get('version', NOTEBOOK_CONFIG_VERSION)
    if version != NOTEBOOK_CONFIG_VERSION:
        raise ValueError(
            f"Unsupported notebook config version '{version}'. "
            f"Expected '{NOTEBOOK_CONFIG_VERSION}'."
        )


def notebook_config_from_dict(data: Dict[str, Any]) -> NotebookConfig:
    """
    Build a NotebookConfig from a parsed JSON dict.

    Expected format (every section and key optional):
    {
        "version": "1.0",
        "seed": 42,
        "rejection": {"n": 10000, "proposals": ["uniform", "beta22"]},
        "monte_carlo": {"n": 10000, "n_runs": 200,
                        "integrands": ["exp_neg_cube_normal"]},
        "bootstrap": {"n_boot": 2000, "confidence": 0.95,
                      "method": "percentile", "csv_path": "pairs.csv",
                      "x_column": "x", "y_column": "y"}
    }
    """
    _validate_version(data)
    return NotebookConfig(
        seed=data.get('seed', 42),
        rejection=RejectionConfig(**data.get('rejection', {})),
        monte_carlo=MonteCarloConfig(**data.get('monte_carlo', {})),
        bootstrap=BootstrapConfig(**data.get('bootstrap', {})),
    )


def notebook_config_to_dict(config: NotebookConfig) -> Dict[str, Any]:
    """Serialize a NotebookConfig with the current version tag."""
    data = {'version': NOTEBOOK_CONFIG_VERSION}
    data.update(asdict(config))
    return data


def load_notebook_config(path: str) -> NotebookConfig:
    """
    Load a notebook config from a JSON file.

    Raises:
        ValueError: If the config version is unsupported or a value is invalid
        KeyError: If a preset name is unknown
    """
    with open(path, 'r') as f:
        data = json.load(f)
    return notebook_config_from_dict(data)


def save_notebook_config(config: NotebookConfig, path: str) -> None:
    """Save a notebook config to a JSON file."""
    with open(path, 'w') as f:
        json.dump(notebook_config_to_dict(config), f, indent=2)
