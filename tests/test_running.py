"""Tests for the running Monte Carlo estimator."""

import numpy as np
import pytest

from sampling_lab.diagnostics import band_coverage, mean_variance_profile
from sampling_lab.estimation.running import (
    running_estimate,
    running_statistics,
    multi_run_band,
    spawn_seeds,
)


def _uniform_draw(rng, size):
    return rng.uniform(0.0, 1.0, size)


def _square(x):
    return x ** 2


class TestRunningStatistics:
    """Tests for the cumulative mean / variance-of-mean formulas."""

    def test_small_sequence(self):
        """Hand-computed running mean and variance for [1, 2, 3]."""
        est = running_statistics(np.array([1.0, 2.0, 3.0]))
        np.testing.assert_allclose(est.means, [1.0, 1.5, 2.0])
        np.testing.assert_allclose(est.variances, [0.0, 0.125, 2.0 / 9.0])

    def test_constant_values_have_zero_variance(self):
        """Constant evaluations never give negative variances."""
        est = running_statistics(np.full(1000, 0.1))
        assert np.all(est.variances >= 0.0)
        np.testing.assert_allclose(est.variances, 0.0, atol=1e-12)

    def test_empty(self):
        """Empty input gives empty sequences."""
        est = running_statistics(np.array([]))
        assert len(est) == 0
        assert est.to_dict()['estimate'] is None


class TestRunningEstimate:
    """Tests for running_estimate."""

    def test_lengths(self):
        """Means and variances both have length n."""
        est = running_estimate(_uniform_draw, _square, 250, seed=0)
        assert est.means.shape == (250,)
        assert est.variances.shape == (250,)

    def test_zero_draws(self):
        """n = 0 is an empty result, not an error."""
        est = running_estimate(_uniform_draw, _square, 0, seed=0)
        assert len(est) == 0

    def test_negative_n_raises(self):
        """Negative n raises ValueError."""
        with pytest.raises(ValueError):
            running_estimate(_uniform_draw, _square, -3)

    def test_converges_to_expectation(self):
        """E[U^2] = 1/3 is recovered with many draws."""
        est = running_estimate(_uniform_draw, _square, 100000, seed=1)
        assert est.final == pytest.approx(1.0 / 3.0, abs=0.005)

    def test_band_brackets_means(self):
        """The analytic band contains the running mean at every k."""
        est = running_estimate(_uniform_draw, _square, 500, seed=2)
        lower, upper = est.band(z=2.0)
        assert np.all(lower <= est.means)
        assert np.all(est.means <= upper)

    def test_transform_errors_propagate(self):
        """Domain errors raised by the transform reach the caller."""
        def strict_log(x):
            if np.any(x <= 0):
                raise ValueError("log of non-positive value")
            return np.log(x)

        def signed_draw(rng, size):
            return rng.normal(0.0, 1.0, size)

        with pytest.raises(ValueError, match="non-positive"):
            running_estimate(signed_draw, strict_log, 1000, seed=0)

    def test_bad_draw_shape(self):
        """draw must return exactly n values."""
        with pytest.raises(ValueError):
            running_estimate(lambda rng, size: rng.uniform(size=size + 1), _square, 10)

    def test_deterministic(self):
        """Same seed gives bit-identical sequences."""
        first = running_estimate(_uniform_draw, _square, 300, seed=42)
        second = running_estimate(_uniform_draw, _square, 300, seed=42)
        assert np.array_equal(first.means, second.means)
        assert np.array_equal(first.variances, second.variances)


class TestMultiRunBand:
    """Tests for percentile bands over independent runs."""

    def test_shape_and_ordering(self):
        """lower <= median <= upper at every k."""
        band = multi_run_band(_uniform_draw, _square, 200, 50, seed=3)
        assert len(band) == 200
        assert band.n_runs == 50
        assert np.all(band.lower <= band.median)
        assert np.all(band.median <= band.upper)

    def test_band_narrows(self):
        """The percentile band is narrower at n than at the first few draws."""
        band = multi_run_band(_uniform_draw, _square, 1000, 100, seed=4)
        assert band.upper[-1] - band.lower[-1] < band.upper[9] - band.lower[9]
        assert band.lower[-1] < 1.0 / 3.0 < band.upper[-1]

    def test_deterministic(self):
        """Same root seed gives identical bands."""
        first = multi_run_band(_uniform_draw, _square, 100, 20, seed=5)
        second = multi_run_band(_uniform_draw, _square, 100, 20, seed=5)
        assert np.array_equal(first.lower, second.lower)
        assert np.array_equal(first.upper, second.upper)

    def test_accepts_seed_sequence(self):
        """A SeedSequence root gives the same band as its integer entropy."""
        first = multi_run_band(_uniform_draw, _square, 50, 10, seed=np.random.SeedSequence(6))
        second = multi_run_band(_uniform_draw, _square, 50, 10, seed=6)
        assert np.array_equal(first.median, second.median)

    def test_reused_seed_sequence_is_reproducible(self):
        """Passing the same SeedSequence object twice gives identical bands."""
        root = np.random.SeedSequence(6)
        first = multi_run_band(_uniform_draw, _square, 50, 10, seed=root)
        second = multi_run_band(_uniform_draw, _square, 50, 10, seed=root)
        assert np.array_equal(first.median, second.median)
        assert root.n_children_spawned == 0

    def test_invalid_runs(self):
        """n_runs must be positive."""
        with pytest.raises(ValueError):
            multi_run_band(_uniform_draw, _square, 100, 0)


class TestSpawnSeeds:
    """Tests for deriving child seeds without mutating the root."""

    def test_matches_fresh_spawn(self):
        """Children equal those of SeedSequence.spawn on a fresh root."""
        ours = spawn_seeds(11, 3)
        fresh = np.random.SeedSequence(11).spawn(3)
        for a, b in zip(ours, fresh):
            assert np.array_equal(a.generate_state(4), b.generate_state(4))

    def test_nested_children_are_stable(self):
        """Spawning from a child twice gives the same grandchildren."""
        child = spawn_seeds(12, 1)[0]
        first = spawn_seeds(child, 2)
        second = spawn_seeds(child, 2)
        assert [s.spawn_key for s in first] == [s.spawn_key for s in second]
        assert first[0].spawn_key != first[1].spawn_key


class TestEstimatorProperties:
    """Statistical properties across repeated runs."""

    def test_band_coverage_near_95_percent(self):
        """mean_n +/- 2 sqrt(var_n) covers the true value about 95% of the time."""
        coverage = band_coverage(_uniform_draw, _square, 500, 1.0 / 3.0, 400, seed=1)
        assert 0.90 <= coverage <= 0.99

    def test_variance_shrinks_with_k(self):
        """Average var_k decreases as k grows."""
        profile = mean_variance_profile(_uniform_draw, _square, 1000, 200, seed=2)
        assert profile[9] > profile[99] > profile[999]
        # Var(U^2) = 4/45, so var_k should be near 4 / (45 k)
        assert profile[999] == pytest.approx(4.0 / 45.0 / 1000, rel=0.1)

    def test_reused_seed_sequence_gives_same_coverage(self):
        """band_coverage and mean_variance_profile leave the root untouched."""
        root = np.random.SeedSequence(8)
        first = band_coverage(_uniform_draw, _square, 100, 1.0 / 3.0, 20, seed=root)
        second = band_coverage(_uniform_draw, _square, 100, 1.0 / 3.0, 20, seed=root)
        assert first == second
        profile_a = mean_variance_profile(_uniform_draw, _square, 50, 10, seed=root)
        profile_b = mean_variance_profile(_uniform_draw, _square, 50, 10, seed=root)
        assert np.array_equal(profile_a, profile_b)
