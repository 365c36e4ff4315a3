# tests/test_hac.py
"""
Tests for the kernel summation engine, bandwidth selectors and the kernel
HAC estimators (Newey-West, Andrews, Hirukawa).
"""

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose

from nse.core.exceptions import DimensionError, InvalidTypeError, NumericError, ParameterError
from nse.core.types import Kernel
from nse.models.bandwidth import andrews_bandwidth, hirukawa_bandwidth, newey_west_bandwidth
from nse.models.hac import lrvar, nse_andrews, nse_hiruk, nse_nw
from nse.utils.covariance import kernel_lrv, long_run_covariance, prewhiten_var1, recolor

from tests.conftest import simulate_ar1


def _direct_kernel_sum(x, bandwidth, kernel_fn):
    """Reference kernel summation written with plain numpy."""
    n = x.shape[0]
    e = x - x.mean(axis=0)
    omega = e.T @ e / n
    for j in range(1, n):
        w = kernel_fn(j / bandwidth)
        if w == 0.0:
            continue
        gamma = e[j:].T @ e[:-j] / n
        omega += w * (gamma + gamma.T)
    return omega * n / (n - 1)


class TestKernelSummation:
    """Tests for the shared kernel summation engine."""

    @pytest.mark.parametrize("kernel", list(Kernel))
    def test_zero_bandwidth_is_sample_variance(self, rng, kernel):
        x = rng.standard_normal(250)
        assert lrvar(x, bandwidth=0, kernel=kernel) == pytest.approx(x.var(ddof=1) / 250, rel=1e-12)

    @pytest.mark.parametrize("kernel", list(Kernel))
    def test_zero_bandwidth_is_sample_covariance(self, rng, kernel):
        x = rng.standard_normal((300, 3))
        expected = np.cov(x, rowvar=False, ddof=1) / 300
        assert_allclose(lrvar(x, bandwidth=0.0, kernel=kernel), expected, rtol=1e-12, atol=1e-15)

    def test_matches_direct_bartlett_sum(self, bivariate_ar1_data):
        x = bivariate_ar1_data[:400]
        expected = _direct_kernel_sum(x, 7.0, lambda z: max(0.0, 1.0 - abs(z)))
        assert_allclose(kernel_lrv(x, 7.0, Kernel.BARTLETT), expected, rtol=1e-10)

    def test_matches_direct_truncated_sum(self, ar1_data):
        x = ar1_data[:300].reshape(-1, 1)
        expected = _direct_kernel_sum(x, 4.0, lambda z: 1.0 if abs(z) <= 1.0 else 0.0)
        assert_allclose(kernel_lrv(x, 4.0, Kernel.TRUNCATED), expected, rtol=1e-10)

    def test_result_is_symmetric(self, bivariate_ar1_data):
        omega = kernel_lrv(bivariate_ar1_data, 10.0, Kernel.QUADRATIC_SPECTRAL)
        assert_allclose(omega, omega.T)

    def test_small_weights_are_dropped(self, ar1_data):
        x = (ar1_data - ar1_data.mean()).reshape(-1, 1)
        full = long_run_covariance(x, 8.0, Kernel.QUADRATIC_SPECTRAL, tol=0.0)
        trimmed = long_run_covariance(x, 8.0, Kernel.QUADRATIC_SPECTRAL, tol=0.5)
        assert not np.allclose(full, trimmed)

    def test_invalid_bandwidth(self, iid_data):
        with pytest.raises(ParameterError):
            lrvar(iid_data, bandwidth=-1.0)
        with pytest.raises(ParameterError):
            lrvar(iid_data, bandwidth=np.nan)

    def test_unknown_kernel(self, iid_data):
        with pytest.raises(InvalidTypeError, match="Quadratic Spectral"):
            lrvar(iid_data, bandwidth=2.0, kernel="Epanechnikov")


class TestPrewhitening:
    """Tests for VAR(1) pre-whitening and re-colouring."""

    def test_recovers_var1_coefficients(self, var1_data):
        e = var1_data - var1_data.mean(axis=0)
        residuals, A = prewhiten_var1(e)
        assert residuals.shape == (e.shape[0] - 1, 2)
        assert_allclose(A, [[0.5, 0.1], [0.0, 0.3]], atol=0.03)

    def test_recolored_long_run_variance(self, var1_data):
        # True long-run covariance: (I - A)^-1 (I - A)^-T for unit innovations
        A = np.array([[0.5, 0.1], [0.0, 0.3]])
        D = np.linalg.inv(np.eye(2) - A)
        expected = D @ D.T
        omega = kernel_lrv(var1_data, newey_west_bandwidth(20000) + 1, Kernel.BARTLETT, prewhite=True)
        assert_allclose(omega, expected, rtol=0.15, atol=0.1)

    def test_singular_filter(self):
        with pytest.raises(NumericError):
            recolor(np.eye(2), np.eye(2))

    def test_prewhite_changes_estimate(self, ar1_data):
        assert nse_nw(ar1_data, prewhite=True) != nse_nw(ar1_data)


class TestNeweyWest:
    """Tests for the Newey-West fixed bandwidth rule."""

    @pytest.mark.parametrize("n, expected", [(2, 1), (50, 3), (100, 4), (1000, 6), (10000, 11)])
    def test_rule(self, n, expected):
        assert newey_west_bandwidth(n) == expected

    def test_uses_bartlett_with_rule(self, ar1_data):
        lags = newey_west_bandwidth(ar1_data.shape[0])
        expected = lrvar(ar1_data, bandwidth=lags + 1, kernel=Kernel.BARTLETT)
        assert nse_nw(ar1_data) == pytest.approx(expected)

    def test_scalar_and_matrix_output(self, ar1_data, bivariate_ar1_data):
        assert isinstance(nse_nw(ar1_data), float)
        out = nse_nw(bivariate_ar1_data)
        assert out.shape == (2, 2)
        assert_allclose(out, out.T)

    def test_pandas_input(self, bivariate_ar1_data):
        frame = pd.DataFrame(bivariate_ar1_data, columns=["a", "b"])
        out = nse_nw(frame)
        assert isinstance(out, np.ndarray)
        assert_allclose(out, nse_nw(bivariate_ar1_data))


class TestAndrews:
    """Tests for the Andrews automatic bandwidth and estimator."""

    def test_bartlett_bandwidth_formula(self, ar1_data):
        n = ar1_data.shape[0]
        e = ar1_data - ar1_data.mean()
        slope, intercept = np.polyfit(e[:-1], e[1:], 1)
        alpha = 4 * slope ** 2 / ((1 - slope) ** 2 * (1 + slope) ** 2)
        expected = 1.1447 * (alpha * n) ** (1 / 3)
        assert andrews_bandwidth(ar1_data, Kernel.BARTLETT) == pytest.approx(expected, rel=1e-8)

    def test_second_order_bandwidth_formula(self, ar1_data):
        n = ar1_data.shape[0]
        e = ar1_data - ar1_data.mean()
        slope, intercept = np.polyfit(e[:-1], e[1:], 1)
        alpha = 4 * slope ** 2 / (1 - slope) ** 4
        expected = 1.3221 * (alpha * n) ** (1 / 5)
        assert andrews_bandwidth(ar1_data, "Quadratic Spectral") == pytest.approx(expected, rel=1e-8)

    @pytest.mark.parametrize("kernel", list(Kernel))
    def test_bandwidth_bounds(self, ar1_data, iid_data, kernel):
        n = ar1_data.shape[0]
        persistent = andrews_bandwidth(ar1_data, kernel)
        noise = andrews_bandwidth(iid_data, kernel)
        assert 0.0 <= noise < persistent <= n - 1

    def test_bandwidth_capped_for_random_walk(self, rng):
        x = np.cumsum(rng.standard_normal(200))
        assert andrews_bandwidth(x, Kernel.TRUNCATED) <= 199

    @pytest.mark.parametrize("kernel", list(Kernel))
    def test_estimator(self, ar1_data, kernel):
        out = nse_andrews(ar1_data, type=kernel)
        assert isinstance(out, float)
        assert out > ar1_data.var(ddof=1) / ar1_data.shape[0]

    def test_prewhite_multivariate(self, bivariate_ar1_data):
        out = nse_andrews(bivariate_ar1_data, prewhite=True, type="Parzen")
        assert out.shape == (2, 2)
        assert np.all(np.linalg.eigvalsh(out) > 0)

    def test_invalid_kernel(self, ar1_data):
        with pytest.raises(InvalidTypeError) as excinfo:
            nse_andrews(ar1_data, type="Gaussian")
        for name in ("Bartlett", "Parzen", "Quadratic Spectral", "Truncated", "Tukey-Hanning"):
            assert name in str(excinfo.value)


class TestHirukawa:
    """Tests for the Hirukawa two-stage bandwidth and estimator."""

    @pytest.mark.parametrize("kernel", ["Bartlett", "Parzen"])
    @pytest.mark.parametrize("prewhite", [False, True])
    def test_estimator(self, ar1_data, kernel, prewhite):
        out = nse_hiruk(ar1_data, prewhite=prewhite, type=kernel)
        assert isinstance(out, float)
        assert out > 0

    @pytest.mark.parametrize("kernel", [Kernel.BARTLETT, Kernel.PARZEN])
    def test_bandwidth_bounds(self, ar1_data, kernel):
        bandwidth = hirukawa_bandwidth(ar1_data, kernel)
        assert 0.0 < bandwidth <= ar1_data.shape[0] - 1

    def test_matches_lrvar_with_its_bandwidth(self, ar1_data):
        bandwidth = hirukawa_bandwidth(ar1_data, Kernel.PARZEN)
        expected = lrvar(ar1_data, bandwidth=bandwidth, kernel=Kernel.PARZEN)
        assert nse_hiruk(ar1_data, type="Parzen") == pytest.approx(expected)

    def test_rejects_multivariate(self, bivariate_ar1_data):
        with pytest.raises(DimensionError):
            nse_hiruk(bivariate_ar1_data)

    @pytest.mark.parametrize("kernel", ["Quadratic Spectral", "Truncated", "Tukey-Hanning", "foo"])
    def test_rejects_other_kernels(self, ar1_data, kernel):
        with pytest.raises(InvalidTypeError) as excinfo:
            nse_hiruk(ar1_data, type=kernel)
        assert excinfo.value.valid_options == ("Bartlett", "Parzen")


class TestIndependentSeries:
    """For uncorrelated data every HAC estimator is close to var(x) / n."""

    @pytest.mark.parametrize("estimator", [
        lambda x: nse_nw(x),
        lambda x: nse_nw(x, prewhite=True),
        lambda x: nse_andrews(x, type="Bartlett"),
        lambda x: nse_andrews(x, type="Quadratic Spectral"),
        lambda x: nse_hiruk(x, type="Bartlett"),
        lambda x: nse_hiruk(x, type="Parzen"),
    ])
    def test_close_to_naive_variance(self, rng, estimator):
        x = rng.standard_normal(20000)
        naive = x.var(ddof=1) / x.shape[0]
        assert estimator(x) == pytest.approx(naive, rel=0.15)
