# tests/test_geyer.py
"""
Tests for the batch-means and Geyer initial-sequence estimators.
"""

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose
from hypothesis import given, strategies as st, settings
from hypothesis.extra.numpy import arrays

from nse.core.config import set_config
from nse.core.exceptions import DimensionError, InvalidSizeError, InvalidTypeError, ParameterError
from nse.core.types import GeyerType
from nse.models.geyer import (
    GeyerInitialSequence, InitialSequenceResult, batch_means_variance, initial_sequence, nse_geyer
)
from nse.utils.batching import batch_means

from tests.conftest import simulate_ar1


class TestInitialSequence:
    """Tests for the initial-sequence solver."""

    @given(arrays(np.float64, st.integers(min_value=2, max_value=300),
                  elements=st.floats(min_value=-1e3, max_value=1e3, allow_nan=False, allow_infinity=False)))
    @settings(deadline=None, max_examples=50)
    def test_non_negative(self, x):
        result = initial_sequence(x)
        assert result.var_pos >= 0.0
        assert result.var_dec >= 0.0
        assert result.var_dec <= result.var_pos
        assert nse_geyer(x, type="iseq") >= 0.0

    def test_monotone_sequence(self, ar1_data):
        result = initial_sequence(ar1_data)
        assert result.n_terms > 0
        assert np.all(result.gamma_pos > 0)
        assert np.all(np.diff(result.gamma_dec) <= 0)
        assert np.all(result.gamma_dec <= result.gamma_pos)

    def test_matches_direct_computation(self, ar1_data):
        x = ar1_data
        n = x.shape[0]
        e = x - x.mean()
        gamma = np.array([e[k:] @ e[:n - k] / n for k in range(n)])
        n_pairs = n // 2
        pairs = gamma[0:2 * n_pairs:2] + gamma[1:2 * n_pairs:2]
        m = np.argmax(pairs <= 0) if np.any(pairs <= 0) else pairs.shape[0]
        monotone = np.minimum.accumulate(pairs[:m])
        expected = -gamma[0] + 2 * monotone.sum()

        result = initial_sequence(x)
        assert result.gamma0 == pytest.approx(gamma[0])
        assert result.n_terms == m
        assert result.var_dec == pytest.approx(expected, rel=1e-8)

    def test_constant_series(self):
        assert nse_geyer(np.full(50, 3.0), type="iseq") == 0.0

    def test_lag_cap(self, ar1_data, clean_config):
        capped = GeyerInitialSequence(max_lag=3)(ar1_data)
        assert capped.n_terms <= 2
        set_config("estimator", "iseq_max_lag", 3)
        assert initial_sequence(ar1_data).var_dec == pytest.approx(capped.var_dec)

    def test_rejects_multivariate(self, bivariate_ar1_data):
        with pytest.raises(DimensionError):
            initial_sequence(bivariate_ar1_data)


class TestBatchMeansVariance:
    """Tests for the batch-means estimator."""

    def test_definition(self, ar1_data):
        x = ar1_data.reshape(-1, 1)
        means = batch_means(x, 30)
        expected = means.var(ddof=1) / 30
        assert_allclose(batch_means_variance(x, 30), [[expected]])
        assert nse_geyer(ar1_data, type="bm", nbatch=30) == pytest.approx(expected)

    def test_one_observation_per_batch_is_invalid(self, iid_data):
        with pytest.raises(InvalidSizeError):
            nse_geyer(iid_data, type="bm", nbatch=iid_data.shape[0])
        with pytest.raises(InvalidSizeError):
            nse_geyer(iid_data[:20], type="bm", nbatch=30)

    def test_invalid_batch_counts(self, iid_data):
        with pytest.raises(ParameterError):
            nse_geyer(iid_data, type="bm", nbatch=1)
        with pytest.raises(ParameterError):
            nse_geyer(iid_data, type="bm", nbatch=0)
        with pytest.raises(ParameterError):
            nse_geyer(iid_data, type="bm", nbatch=12.5)

    def test_independent_columns(self, bivariate_ar1_data):
        out = nse_geyer(bivariate_ar1_data, type="bm", nbatch=30)
        assert isinstance(out, np.ndarray)
        assert out.shape == (2, 2)
        assert_allclose(out, out.T)
        assert np.all(np.linalg.eigvalsh(out) >= -1e-12)
        correlation = out[0, 1] / np.sqrt(out[0, 0] * out[1, 1])
        assert abs(correlation) < 0.6

    def test_default_batch_count_from_config(self, ar1_data, clean_config):
        assert nse_geyer(ar1_data) == pytest.approx(nse_geyer(ar1_data, nbatch=30))
        set_config("estimator", "default_nbatch", 10)
        assert nse_geyer(ar1_data) == pytest.approx(nse_geyer(ar1_data, nbatch=10))


class TestNseGeyer:
    """Tests for the dispatcher over the three estimator types."""

    def test_unknown_type(self, iid_data):
        with pytest.raises(InvalidTypeError) as excinfo:
            nse_geyer(iid_data, type="foo")
        message = str(excinfo.value)
        for name in ("'iseq'", "'bm'", "'iseq.bm'"):
            assert name in message
        assert excinfo.value.valid_options == ("iseq", "bm", "iseq.bm")

    @pytest.mark.parametrize("estimator_type", ["iseq", "bm", "iseq.bm", GeyerType.ISEQ_BM, "ISEQ"])
    def test_scalar_output(self, ar1_data, estimator_type):
        out = nse_geyer(ar1_data, type=estimator_type)
        assert isinstance(out, float)
        assert out > 0

    @pytest.mark.parametrize("estimator_type", ["iseq", "iseq.bm"])
    def test_univariate_only(self, bivariate_ar1_data, estimator_type):
        with pytest.raises(DimensionError):
            nse_geyer(bivariate_ar1_data, type=estimator_type)

    def test_pandas_input(self, ar1_data):
        series = pd.Series(ar1_data, index=pd.date_range("2000-01-01", periods=ar1_data.shape[0]))
        assert nse_geyer(series, type="iseq") == nse_geyer(ar1_data, type="iseq")

    def test_injected_solver(self, ar1_data):
        calls = []

        def solver(x):
            calls.append(x.shape)
            return InitialSequenceResult(gamma0=1.0, var_pos=6.0, var_dec=5.0, n_terms=1,
                                         gamma_pos=np.array([1.0]), gamma_dec=np.array([1.0]))

        n = ar1_data.shape[0]
        assert nse_geyer(ar1_data, type="iseq", solver=solver) == pytest.approx(5.0 / n)
        assert nse_geyer(ar1_data, type="iseq.bm", nbatch=25, solver=solver) == pytest.approx(5.0 / 25)
        assert calls == [(n,), (25,)]

    def test_ar1_cross_method_consistency(self):
        ratios = []
        for seed in range(20):
            x = simulate_ar1(np.random.default_rng(seed), 1000, phi=0.9, sd=10.0, mean=1.0)
            bm = nse_geyer(x, type="bm", nbatch=30)
            iseq = nse_geyer(x, type="iseq")
            assert bm > 0 and iseq > 0
            ratios.append(bm / iseq)
        ratios = np.array(ratios)
        assert 0.5 < np.median(ratios) < 2.0
        assert np.mean((ratios > 0.5) & (ratios < 2.0)) >= 0.5

    @pytest.mark.parametrize("estimator_type", ["iseq", "bm", "iseq.bm"])
    def test_independent_series(self, rng, estimator_type):
        x = rng.standard_normal(20000)
        naive = x.var(ddof=1) / x.shape[0]
        out = nse_geyer(x, type=estimator_type, nbatch=200)
        assert out == pytest.approx(naive, rel=0.5)
