# nse/models/geyer.py

"""
Batch means and Geyer initial-sequence estimators.

This module implements the estimators of the variance of a sample mean that
work directly on the autocovariance sequence or on non-overlapping batches of
the series:

- Batch means: the sample covariance of ``k`` batch-mean vectors divided by ``k``.
- Initial sequence (Geyer, 1992): the sum of autocovariances truncated where
  the sums of adjacent pairs ``Gamma_m = gamma_{2m} + gamma_{2m+1}`` stop being
  positive, with the monotone correction enforced by a running minimum.
- Initial sequence on batch means: the initial-sequence estimator applied to
  the series of batch means.

The initial-sequence computation is exposed as an injectable solver so that
``nse_geyer`` can be driven by any object satisfying
``nse.core.types.InitialSequenceSolver``.

References:
    Geyer, C. J. (1992). Practical Markov chain Monte Carlo. Statistical
    Science, 7(4), 473-483.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np
from statsmodels.tsa.stattools import acovf

from nse.core.config import get_estimator_config
from nse.core.exceptions import raise_parameter_error, raise_size_error
from nse.core.types import GeyerType, InitialSequenceSolver, Matrix, SeriesLike, VarianceEstimate, Vector
from nse.core.validation import (
    collapse_variance, parse_option, require_univariate, validate_positive_int, validate_series
)
from nse.utils.batching import batch_means

logger = logging.getLogger("nse.models.geyer")


@dataclass
class InitialSequenceResult:
    """Output of the initial-sequence solver.

    Attributes:
        gamma0: Lag-0 autocovariance (biased sample variance)
        var_pos: Long-run variance from the positive initial sequence
        var_dec: Long-run variance from the monotone initial sequence
        n_terms: Number of pair sums kept by the positivity truncation
        gamma_pos: Positive initial sequence of pair sums
        gamma_dec: Monotone (non-increasing) initial sequence of pair sums
    """
    gamma0: float
    var_pos: float
    var_dec: float
    n_terms: int
    gamma_pos: Vector = field(repr=False)
    gamma_dec: Vector = field(repr=False)


class GeyerInitialSequence:
    """Default initial-sequence solver.

    Autocovariances are computed by FFT for lags ``0..L`` where ``L`` is
    ``n - 1`` unless a cap is given here or through the ``iseq_max_lag``
    configuration option. The sum stops at the first non-positive pair sum,
    so the cap only matters for very long, very persistent chains.

    Args:
        max_lag: Largest autocovariance lag to compute
    """

    def __init__(self, max_lag: Optional[int] = None) -> None:
        if max_lag is not None:
            max_lag = validate_positive_int(max_lag, "max_lag")
        self.max_lag = max_lag

    def __repr__(self) -> str:
        return f"GeyerInitialSequence(max_lag={self.max_lag})"

    def __call__(self, x: np.ndarray) -> InitialSequenceResult:
        x = np.asarray(x, dtype=np.float64).reshape(-1)
        n = x.shape[0]
        if n < 2:
            raise_size_error(
                "The initial sequence needs at least two observations",
                data_name="x",
                size=n,
                required="n >= 2"
            )

        max_lag = self.max_lag
        if max_lag is None:
            max_lag = get_estimator_config().iseq_max_lag
        lags = n - 1 if max_lag is None else min(int(max_lag), n - 1)

        gamma = acovf(x, adjusted=False, demean=True, fft=True, nlag=lags)
        gamma0 = float(gamma[0])

        n_pairs = gamma.shape[0] // 2
        pair_sums = gamma[0:2 * n_pairs:2] + gamma[1:2 * n_pairs:2]

        nonpositive = np.flatnonzero(pair_sums <= 0)
        n_terms = int(nonpositive[0]) if nonpositive.size else n_pairs
        if not nonpositive.size:
            logger.debug(f"Initial sequence reached the lag cap ({lags}) without a non-positive pair sum")

        gamma_pos = pair_sums[:n_terms].copy()
        gamma_dec = np.minimum.accumulate(gamma_pos) if n_terms else gamma_pos.copy()

        var_pos = max(-gamma0 + 2.0 * float(gamma_pos.sum()), 0.0)
        var_dec = max(-gamma0 + 2.0 * float(gamma_dec.sum()), 0.0)
        logger.debug(f"Initial sequence kept {n_terms} pair sums, var_dec={var_dec:.6g}")

        return InitialSequenceResult(
            gamma0=gamma0,
            var_pos=var_pos,
            var_dec=var_dec,
            n_terms=n_terms,
            gamma_pos=gamma_pos,
            gamma_dec=gamma_dec
        )


def initial_sequence(x: SeriesLike, max_lag: Optional[int] = None) -> InitialSequenceResult:
    """Compute Geyer's initial-sequence estimates for a univariate series.

    Args:
        x: Univariate series
        max_lag: Largest autocovariance lag to compute (default ``n - 1``)

    Returns:
        InitialSequenceResult with the positive and monotone long-run variances

    Raises:
        DimensionError: If ``x`` has more than one column

    Examples:
        >>> result = initial_sequence(np.random.default_rng(0).standard_normal(500))
        >>> result.var_dec >= 0
        True
    """
    data = validate_series(x)
    require_univariate(data, "initial_sequence")
    return GeyerInitialSequence(max_lag)(data[:, 0])


def _check_nbatch(n: int, nbatch: int) -> int:
    nbatch = validate_positive_int(nbatch, "nbatch")
    if nbatch < 2:
        raise_parameter_error(
            "At least two batches are needed to estimate a variance",
            param_name="nbatch",
            param_value=nbatch,
            constraint=">= 2"
        )
    if nbatch >= n:
        raise_size_error(
            f"A series of length {n} is too short for {nbatch} batches",
            data_name="x",
            size=n,
            required=f"n > nbatch ({nbatch})",
            details="With one observation per batch the batch means are the raw series"
        )
    return nbatch


def batch_means_variance(x: Matrix, nbatch: int) -> Matrix:
    """Batch-means estimate of the variance of the mean.

    Args:
        x: Validated data matrix (n x d)
        nbatch: Number of batches, ``2 <= nbatch < n``

    Returns:
        Variance of the mean as a d x d matrix
    """
    nbatch = _check_nbatch(x.shape[0], nbatch)
    means = batch_means(x, nbatch)
    return np.atleast_2d(np.cov(means, rowvar=False, ddof=1)) / nbatch


def nse_geyer(x: SeriesLike,
              type: Union[GeyerType, str] = GeyerType.BM,
              nbatch: Optional[int] = None,
              solver: Optional[InitialSequenceSolver] = None) -> VarianceEstimate:
    """Squared NSE by batch means, the initial sequence, or both combined.

    Args:
        x: Series (vector) or n x d matrix of observations
        type: ``"bm"`` for batch means, ``"iseq"`` for Geyer's monotone initial
            sequence, ``"iseq.bm"`` for the initial sequence on batch means
        nbatch: Number of batches for ``"bm"`` and ``"iseq.bm"``
            (default from configuration, 30)
        solver: Initial-sequence solver, defaults to GeyerInitialSequence()

    Returns:
        Variance of the mean; a float for univariate input, a d x d matrix otherwise

    Raises:
        InvalidTypeError: If ``type`` is not one of ``iseq``, ``bm``, ``iseq.bm``
        DimensionError: If ``iseq`` or ``iseq.bm`` receives multivariate input
        InvalidSizeError: If the series is too short for ``nbatch``

    Examples:
        >>> x = np.random.default_rng(1).standard_normal(1000)
        >>> isinstance(nse_geyer(x, type="iseq"), float)
        True
    """
    estimator = parse_option(GeyerType, type, "type")
    data = validate_series(x)
    n = data.shape[0]
    if solver is None:
        solver = GeyerInitialSequence()
    if nbatch is None:
        nbatch = get_estimator_config().default_nbatch

    if estimator is GeyerType.ISEQ:
        require_univariate(data, "nse_geyer(type='iseq')")
        result = solver(data[:, 0])
        omega = np.array([[result.var_dec / n]])
    elif estimator is GeyerType.BM:
        omega = batch_means_variance(data, nbatch)
    else:
        require_univariate(data, "nse_geyer(type='iseq.bm')")
        nbatch = _check_nbatch(n, nbatch)
        means = batch_means(data, nbatch)
        result = solver(means[:, 0])
        omega = np.array([[result.var_dec / nbatch]])

    logger.debug(f"nse_geyer({estimator.value}) on {n} x {data.shape[1]} series")
    return collapse_variance(omega)
