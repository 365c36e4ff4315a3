# tests/test_batching.py
"""
Tests for the sequence splitter used by the batch-means estimators.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from hypothesis import given, strategies as st, settings

from nse.core.exceptions import InvalidSizeError, ParameterError
from nse.utils.batching import batch_labels, batch_means, batch_ranges


class TestBatchLabels:
    """Tests for the ceiling-rule batch assignment."""

    def test_known_partition(self):
        assert_array_equal(batch_labels(7, 3), [0, 0, 1, 1, 2, 2, 2])
        assert_array_equal(batch_labels(6, 3), [0, 0, 1, 1, 2, 2])
        assert_array_equal(batch_labels(5, 5), [0, 1, 2, 3, 4])
        assert_array_equal(batch_labels(4, 1), [0, 0, 0, 0])

    @given(st.integers(min_value=1, max_value=500), st.data())
    @settings(deadline=None)
    def test_near_equal_contiguous_batches(self, n, data):
        nbatch = data.draw(st.integers(min_value=1, max_value=n))
        labels = batch_labels(n, nbatch)
        counts = np.bincount(labels, minlength=nbatch)

        assert labels.shape == (n,)
        assert np.all(np.diff(labels) >= 0)
        assert labels[0] == 0 and labels[-1] == nbatch - 1
        assert counts.sum() == n
        assert counts.min() >= n // nbatch
        assert counts.max() <= -(-n // nbatch)

    def test_invalid_counts(self):
        with pytest.raises(ParameterError):
            batch_labels(10, 0)
        with pytest.raises(ParameterError):
            batch_labels(10, -2)
        with pytest.raises(ParameterError):
            batch_labels(10, 2.5)
        with pytest.raises(InvalidSizeError):
            batch_labels(10, 11)

    def test_integral_float_count(self):
        assert_array_equal(batch_labels(4, 2.0), [0, 0, 1, 1])


class TestBatchRanges:
    """Tests for the half-open batch ranges."""

    def test_ranges_cover_series(self):
        ranges = batch_ranges(10, 3)
        assert ranges == [(0, 3), (3, 6), (6, 10)]

    def test_ranges_match_labels(self):
        n, nbatch = 97, 7
        labels = batch_labels(n, nbatch)
        for b, (start, stop) in enumerate(batch_ranges(n, nbatch)):
            assert np.all(labels[start:stop] == b)


class TestBatchMeans:
    """Tests for per-batch column means."""

    def test_univariate(self):
        x = np.arange(6, dtype=float).reshape(-1, 1)
        assert_allclose(batch_means(x, 3), [[0.5], [2.5], [4.5]])

    def test_multivariate(self):
        x = np.column_stack((np.arange(7.0), 10.0 * np.arange(7.0)))
        means = batch_means(x, 3)
        expected_first = [x[0:2].mean(axis=0), x[2:4].mean(axis=0), x[4:7].mean(axis=0)]
        assert means.shape == (3, 2)
        assert_allclose(means, expected_first)

    def test_overall_mean_preserved_for_equal_batches(self, rng):
        x = rng.standard_normal((120, 3))
        means = batch_means(x, 12)
        assert_allclose(means.mean(axis=0), x.mean(axis=0))
