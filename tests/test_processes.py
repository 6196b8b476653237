"""Tests for Box-Muller draws and daily GBM paths."""

import numpy as np
import pytest

from wxpricer.processes import box_muller, gbm_paths, gbm_terminal

S0, r, sigma = 12.0, 0.05, 0.30
N_DAYS, N_PATHS, SEED = 90, 50_000, 42


class TestBoxMuller:
    def test_moments(self):
        z = box_muller(np.random.default_rng(SEED), 200_000)
        assert abs(z.mean()) < 0.01
        assert abs(z.std() - 1.0) < 0.01

    def test_finite(self):
        z = box_muller(np.random.default_rng(0), 100_000)
        assert np.all(np.isfinite(z))


class TestGBMPaths:
    def test_output_shape(self):
        paths = gbm_paths(S0, r, sigma, N_DAYS, 1000, seed=SEED)
        assert paths.shape == (N_DAYS + 1, 1000)
        assert np.all(paths[0] == S0)

    def test_mean_terminal(self):
        """E[S_T] = S0 exp(rT) under the risk-neutral measure."""
        paths = gbm_paths(S0, r, sigma, N_DAYS, N_PATHS, antithetic=True, seed=SEED)
        expected = S0 * np.exp(r * N_DAYS / 365)
        assert abs(paths[-1].mean() - expected) / expected < 0.01

    def test_antithetic_pairs(self):
        paths = gbm_paths(S0, r, sigma, 1, 10, antithetic=True, seed=SEED)
        log_inc = np.log(paths[1] / S0)
        drift = (r - 0.5 * sigma**2) / 365
        assert np.allclose(log_inc[:5] - drift, -(log_inc[5:] - drift))

    def test_terminal_matches_full_paths(self):
        full = gbm_paths(S0, r, sigma, N_DAYS, 500, seed=SEED)
        term = gbm_terminal(S0, r, sigma, N_DAYS, 500, seed=SEED)
        assert np.allclose(full[-1], term, rtol=1e-10)

    def test_seeded_reproducible(self):
        a = gbm_terminal(S0, r, sigma, N_DAYS, 100, seed=7)
        b = gbm_terminal(S0, r, sigma, N_DAYS, 100, seed=7)
        assert np.array_equal(a, b)

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            gbm_paths(S0, r, sigma, 0, 10)
        with pytest.raises(ValueError):
            gbm_terminal(S0, r, sigma, 10, 0)
