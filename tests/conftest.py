'''
Pytest configuration and fixtures for the NSE toolkit test suite.

This module provides the simulated series shared across the test suite
(i.i.d. noise, AR(1) and VAR(1) processes) and a fixture resetting the
package configuration for tests that change it at runtime.
'''

import numpy as np
import pytest

from nse.core.config import reset_config


def simulate_ar1(rng: np.random.Generator,
                 n: int,
                 phi: float,
                 sd: float = 1.0,
                 mean: float = 0.0,
                 burn: int = 500) -> np.ndarray:
    """Simulate a Gaussian AR(1) series after a burn-in period."""
    shocks = rng.standard_normal(n + burn) * sd
    y = np.zeros(n + burn)
    for t in range(1, n + burn):
        y[t] = phi * y[t - 1] + shocks[t]
    return y[burn:] + mean


def simulate_var1(rng: np.random.Generator,
                  n: int,
                  A: np.ndarray,
                  burn: int = 500) -> np.ndarray:
    """Simulate a Gaussian VAR(1) series with identity innovation covariance."""
    k = A.shape[0]
    shocks = rng.standard_normal((n + burn, k))
    y = np.zeros((n + burn, k))
    for t in range(1, n + burn):
        y[t] = A @ y[t - 1] + shocks[t]
    return y[burn:]


@pytest.fixture
def clean_config():
    """Start and finish the test with the built-in configuration."""
    reset_config()
    yield
    reset_config()


# ---- Basic Data Generation Fixtures ----

@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def sample_size() -> int:
    """Default sample size for test data."""
    return 1000


@pytest.fixture
def iid_data(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """Univariate standard normal noise."""
    return rng.standard_normal(sample_size)


@pytest.fixture
def ar1_data(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """AR(1) series with coefficient 0.9, noise scale 10 and mean 1."""
    return simulate_ar1(rng, sample_size, phi=0.9, sd=10.0, mean=1.0)


@pytest.fixture
def bivariate_ar1_data(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """Two independent AR(1) columns (coefficients 0.9 and 0.6)."""
    first = simulate_ar1(rng, sample_size, phi=0.9, sd=10.0, mean=1.0)
    second = simulate_ar1(rng, sample_size, phi=0.6, sd=2.0, mean=5.0)
    return np.column_stack((first, second))


@pytest.fixture
def var1_data(rng: np.random.Generator) -> np.ndarray:
    """Long bivariate VAR(1) series with a non-diagonal coefficient matrix."""
    A = np.array([[0.5, 0.1],
                  [0.0, 0.3]])
    return simulate_var1(rng, 20000, A)
