"""Tests for presets and notebook configuration."""

import json

import pytest

from sampling_lab.config import (
    PROPOSAL_PRESETS,
    INTEGRAND_PRESETS,
    NOTEBOOK_CONFIG_VERSION,
    NotebookConfig,
    RejectionConfig,
    MonteCarloConfig,
    BootstrapConfig,
    get_proposal_preset,
    get_integrand_preset,
    load_notebook_config,
    save_notebook_config,
    notebook_config_from_dict,
    notebook_config_to_dict,
)
from sampling_lab.densities.triangular import STANDARD_TRIANGLE
from sampling_lab.sampling.envelope import compute_envelope


class TestPresets:
    """Tests for proposal and integrand presets."""

    @pytest.mark.parametrize("name", sorted(PROPOSAL_PRESETS))
    def test_analytic_envelopes_match_numeric(self, name):
        """Preset envelope constants agree with a numeric search."""
        preset = PROPOSAL_PRESETS[name]
        numeric = compute_envelope(STANDARD_TRIANGLE.pdf, preset.proposal.pdf, (0.0, 1.0))
        assert preset.envelope.m == pytest.approx(numeric.m, abs=1e-6)

    def test_unknown_presets(self):
        """Unknown preset names raise KeyError."""
        with pytest.raises(KeyError):
            get_proposal_preset('cauchy')
        with pytest.raises(KeyError):
            get_integrand_preset('sin')

    def test_integrand_presets_share_true_value(self):
        """All exp(-x^3) presets target Gamma(4/3)."""
        values = {round(p.true_value, 10) for p in INTEGRAND_PRESETS.values()}
        assert len(values) == 1


class TestSectionConfigs:
    """Tests for section config validation."""

    def test_defaults(self):
        """Default notebook config uses both proposals and seed 42."""
        config = NotebookConfig()
        assert config.seed == 42
        assert config.rejection.proposals == ['uniform', 'beta22']
        assert config.bootstrap.csv_path is None

    @pytest.mark.parametrize("factory", [
        lambda: RejectionConfig(n=-1),
        lambda: RejectionConfig(mode=1.5),
        lambda: MonteCarloConfig(n=-5),
        lambda: MonteCarloConfig(n_runs=-1),
        lambda: MonteCarloConfig(z=0.0),
        lambda: BootstrapConfig(n_boot=0),
        lambda: BootstrapConfig(confidence=1.5),
        lambda: BootstrapConfig(method='studentized'),
    ])
    def test_invalid_values(self, factory):
        """Invalid section values raise ValueError."""
        with pytest.raises(ValueError):
            factory()

    @pytest.mark.parametrize("left, right", [(-0.5, 1.0), (0.0, 1.5), (-1.0, 2.0)])
    def test_target_wider_than_proposal_support(self, left, right):
        """A triangle reaching outside the (0, 1) proposals is rejected."""
        with pytest.raises(ValueError, match="not inside the support"):
            RejectionConfig(proposals=['uniform'], left=left, mode=0.5, right=right)

    def test_narrower_target_is_accepted(self):
        """A triangle inside (0, 1) passes validation."""
        config = RejectionConfig(left=0.2, mode=0.3, right=0.9)
        assert config.right == 0.9

    def test_unknown_proposal_in_section(self):
        """Unknown proposal names raise KeyError."""
        with pytest.raises(KeyError):
            RejectionConfig(proposals=['uniform', 'cauchy'])


class TestNotebookConfigJson:
    """Tests for versioned JSON loading and saving."""

    def test_save_then_load(self, tmp_path, small_config):
        """A saved config loads back to an equal config."""
        path = tmp_path / "notebook.json"
        save_notebook_config(small_config, str(path))
        assert load_notebook_config(str(path)) == small_config

        with open(path) as f:
            assert json.load(f)['version'] == NOTEBOOK_CONFIG_VERSION

    def test_partial_dict(self):
        """Missing sections fall back to defaults."""
        config = notebook_config_from_dict({'seed': 7, 'rejection': {'n': 100}})
        assert config.seed == 7
        assert config.rejection.n == 100
        assert config.monte_carlo == MonteCarloConfig()

    def test_unsupported_version(self):
        """Unknown versions are rejected."""
        with pytest.raises(ValueError, match="Unsupported notebook config version"):
            notebook_config_from_dict({'version': '2.0'})

    def test_to_dict_tags_version(self):
        """Serialized configs carry the current version."""
        assert notebook_config_to_dict(NotebookConfig())['version'] == NOTEBOOK_CONFIG_VERSION
