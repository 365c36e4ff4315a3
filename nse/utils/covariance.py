# nse/utils/covariance.py

"""
Long-run Covariance Estimation Module

This module contains the numerical engine shared by every HAC-type estimator
in the toolkit: the kernel-weighted sum of sample autocovariances

    Omega = Gamma_0 + sum_{j>=1} w_j (Gamma_j + Gamma_j')

together with the VAR(1) pre-whitening step and the matching re-colouring of
the long-run covariance. The inner loop is compiled with Numba's @jit
decorator; the surrounding functions validate their inputs and handle
degenerate cases.

Functions:
    long_run_covariance: Kernel summation on a centred series
    kernel_lrv: Long-run covariance of a series for a given bandwidth and kernel
    prewhiten_var1: Fit a VAR(1) and return its residuals and coefficient matrix
    recolor: Map a residual long-run covariance back through the VAR(1) filter
"""

import logging
from typing import Optional, Tuple

import numpy as np
from numba import jit
from scipy import linalg

from nse.core.config import get_estimator_config
from nse.core.exceptions import NumericError, raise_dimension_error, raise_size_error
from nse.core.types import CovarianceMatrix, Kernel, Matrix
from nse.utils.kernels import kernel_weights

logger = logging.getLogger("nse.utils.covariance")


@jit(nopython=True, cache=True)
def _kernel_summation_core(e: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    Numba-accelerated kernel summation of autocovariances.

    Args:
        e: Centred data matrix (T x K)
        weights: Kernel weights for lags 1..len(weights)

    Returns:
        Long-run covariance matrix (not small-sample adjusted)
    """
    T, K = e.shape

    # Lag-0 autocovariance
    cov = np.zeros((K, K))
    for t in range(T):
        for j in range(K):
            for k in range(K):
                cov[j, k] += e[t, j] * e[t, k]

    for lag in range(1, weights.shape[0] + 1):
        weight = weights[lag - 1]
        if weight == 0.0:
            continue

        acov = np.zeros((K, K))
        for t in range(lag, T):
            for j in range(K):
                for k in range(K):
                    acov[j, k] += e[t, j] * e[t - lag, k]

        for j in range(K):
            for k in range(K):
                cov[j, k] += weight * (acov[j, k] + acov[k, j])

    return cov / T


def long_run_covariance(e: Matrix, bandwidth: float, kernel: Kernel,
                        tol: Optional[float] = None) -> CovarianceMatrix:
    """
    Kernel-weighted long-run covariance of an already centred series.

    Lags ``1..T-1`` are weighted by ``k(j / bandwidth)``; trailing lags whose
    weight is at most ``tol`` in absolute value are skipped. The result is
    multiplied by ``T / (T - 1)`` so that a zero bandwidth reproduces the
    unbiased sample covariance.

    Args:
        e: Centred data matrix (T x K)
        bandwidth: Non-negative kernel bandwidth
        kernel: Kernel weighting the autocovariances
        tol: Weight tolerance, defaults to the configured ``kernel_weight_tol``

    Returns:
        Long-run covariance matrix (K x K)
    """
    e = np.ascontiguousarray(e, dtype=np.float64)
    if e.ndim != 2:
        raise_dimension_error(
            "Input must be a 2D array",
            array_name="e",
            expected_shape="(T, K)",
            actual_shape=e.shape
        )
    T = e.shape[0]
    if T < 2:
        raise_size_error(
            "At least two observations are needed for a long-run covariance",
            data_name="e",
            size=T,
            required="T >= 2"
        )
    if tol is None:
        tol = get_estimator_config().kernel_weight_tol

    weights = kernel_weights(T - 1, float(bandwidth), kernel)
    significant = np.flatnonzero(np.abs(weights) > tol)
    weights = weights[: significant[-1] + 1] if significant.size else weights[:0]
    logger.debug(f"Kernel summation over {weights.shape[0]} lags "
                 f"({kernel.value}, bandwidth {bandwidth:.4f})")

    omega = _kernel_summation_core(e, np.ascontiguousarray(weights))
    omega = omega * T / (T - 1)

    # Ensure the result is symmetric (to handle numerical precision issues)
    return (omega + omega.T) / 2


def prewhiten_var1(e: Matrix) -> Tuple[Matrix, Matrix]:
    """
    Fit a VAR(1) without intercept by least squares.

    The model is ``e_t = A e_{t-1} + u_t`` for ``t = 2..T``.

    Args:
        e: Centred data matrix (T x K)

    Returns:
        Tuple of the residuals ``u`` (T-1 x K) and the coefficient matrix ``A`` (K x K)

    Raises:
        InvalidSizeError: If fewer than three observations are available
    """
    T, K = e.shape
    if T < 3:
        raise_size_error(
            "Pre-whitening needs at least three observations",
            data_name="x",
            size=T,
            required="n >= 3"
        )
    y = e[1:]
    z = e[:-1]
    coef, _, _, _ = linalg.lstsq(z, y)
    residuals = y - z @ coef
    A = coef.T
    logger.debug(f"VAR(1) pre-whitening coefficients: {A.ravel()}")
    return np.ascontiguousarray(residuals), A


def recolor(omega: CovarianceMatrix, A: Matrix) -> CovarianceMatrix:
    """
    Re-colour a residual long-run covariance: ``(I - A)^-1 Omega (I - A)^-T``.

    Raises:
        NumericError: If ``I - A`` is singular
    """
    K = A.shape[0]
    try:
        D = linalg.inv(np.eye(K) - A)
    except linalg.LinAlgError as e:
        raise NumericError(
            "Cannot re-colour the pre-whitened covariance: I - A is singular",
            operation="recolor",
            values=A,
            error_type="singular_matrix",
            details=str(e)
        ) from e
    out = D @ omega @ D.T
    return (out + out.T) / 2


def kernel_lrv(x: Matrix, bandwidth: float, kernel: Kernel,
               prewhite: bool = False,
               tol: Optional[float] = None) -> CovarianceMatrix:
    """
    Long-run covariance of a series for a given bandwidth and kernel.

    The series is demeaned; with ``prewhite`` the kernel summation runs on
    the residuals of a VAR(1) and the result is re-coloured.

    Args:
        x: Validated data matrix (n x d)
        bandwidth: Non-negative kernel bandwidth
        kernel: Kernel weighting the autocovariances
        prewhite: Whether to pre-whiten with a VAR(1)
        tol: Weight tolerance, defaults to the configured ``kernel_weight_tol``

    Returns:
        Long-run covariance matrix (d x d); divide by n for the variance of the mean
    """
    e = x - x.mean(axis=0)
    if not prewhite:
        return long_run_covariance(e, bandwidth, kernel, tol)
    residuals, A = prewhiten_var1(e)
    omega = long_run_covariance(residuals, bandwidth, kernel, tol)
    return recolor(omega, A)
