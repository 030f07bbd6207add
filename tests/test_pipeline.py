"""End-to-end tests for the notebook pipeline."""

import json

import numpy as np
import pytest

from sampling_lab.config import BootstrapConfig, RejectionConfig
from sampling_lab.diagnostics import format_diagnostics
from sampling_lab.pipeline import (
    run_notebook,
    run_rejection_section,
    run_bootstrap_section,
)


class TestRunNotebook:
    """Tests for run_notebook."""

    def test_all_sections(self, small_config):
        """Every section produces results plus metadata."""
        results = run_notebook(small_config)

        rejection = results['rejection']
        assert set(rejection['proposals']) == {'uniform', 'beta22'}
        for entry in rejection['proposals'].values():
            assert entry['stats']['n_accepted'] == 500
            assert entry['envelope_method'] == 'analytic'
            assert entry['envelope_violation'] <= 1e-9

        monte_carlo = results['monte_carlo']
        for entry in monte_carlo['integrands'].values():
            assert entry['single_run']['n'] == 500
            assert entry['multi_run']['n_runs'] == 5
            assert set(entry['checkpoints']) == {10, 100}

        bootstrap = results['bootstrap']
        assert bootstrap['n_pairs'] == 60
        assert bootstrap['ci_low'] < bootstrap['estimate'] < bootstrap['ci_high']

        assert results['metadata']['seed'] == 123

    def test_results_are_json_serializable(self, small_config):
        """Results dump to JSON without a custom encoder."""
        json.dumps(run_notebook(small_config))

    def test_deterministic(self, small_config):
        """Same config gives identical results."""
        assert run_notebook(small_config) == run_notebook(small_config)

    def test_subset_does_not_change_other_sections(self, small_config):
        """Running one section alone gives the same output as in a full run."""
        full = run_notebook(small_config)
        only = run_notebook(small_config, sections=['monte_carlo'])
        assert only['rejection'] is None
        assert only['bootstrap'] is None
        assert only['monte_carlo'] == full['monte_carlo']

    def test_unknown_section(self, small_config):
        """Unknown section names raise ValueError."""
        with pytest.raises(ValueError):
            run_notebook(small_config, sections=['regression'])

    def test_format_diagnostics(self, small_config):
        """Console report mentions every section."""
        text = format_diagnostics(run_notebook(small_config))
        assert "Rejection sampling" in text
        assert "Monte Carlo integration" in text
        assert "Bootstrap ratio of means" in text


class TestSections:
    """Tests for individual sections."""

    def test_non_standard_triangle_uses_numeric_envelope(self):
        """A shifted mode gets a numeric envelope and still samples correctly."""
        config = RejectionConfig(n=2000, proposals=['uniform'], mode=0.3)
        result = run_rejection_section(config, seed=0)
        entry = result['proposals']['uniform']
        assert entry['envelope_method'] == 'numeric'
        assert entry['envelope_m'] == pytest.approx(2.0, abs=1e-4)
        assert abs(entry['sample_mean'] - result['true_mean']) < 0.03

    def test_reused_seed_sequence_is_reproducible(self):
        """Passing the same SeedSequence object twice gives identical samples."""
        root = np.random.SeedSequence(21)
        config = RejectionConfig(n=300, proposals=['uniform', 'beta22'])
        first = run_rejection_section(config, seed=root)
        second = run_rejection_section(config, seed=root)
        for name in config.proposals:
            assert first['proposals'][name]['stats'] == second['proposals'][name]['stats']
            assert first['proposals'][name]['sample_mean'] == second['proposals'][name]['sample_mean']

    def test_zero_samples(self):
        """n = 0 runs without sampling statistics."""
        result = run_rejection_section(RejectionConfig(n=0), seed=0)
        for entry in result['proposals'].values():
            assert entry['sample_mean'] is None
            assert entry['ks'] is None

    def test_bootstrap_without_data_is_skipped(self):
        """No CSV and no arrays returns None."""
        assert run_bootstrap_section(BootstrapConfig(), seed=0) is None

    def test_bootstrap_with_arrays(self, paired_data):
        """Arrays passed directly bypass the CSV."""
        x, y = paired_data
        result = run_bootstrap_section(BootstrapConfig(n_boot=100), seed=1, x=x, y=y)
        assert result['estimate'] == pytest.approx(np.mean(y) / np.mean(x))
