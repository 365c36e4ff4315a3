# nse/utils/kernels.py
"""
Kernel weight functions for HAC long-run variance estimators.

This module evaluates the five kernels of Andrews (1991) used to weight sample
autocovariances, together with the constants needed by the automatic
bandwidth rules: the characteristic exponent ``q`` of each kernel and the rate
constant ``c`` in the MSE-optimal bandwidth ``c * (alpha(q) * n)^(1/(2q+1))``.

Kernels are evaluated at ``x = j / bandwidth``:

- Truncated:          1 for |x| <= 1
- Bartlett:           1 - |x| for |x| <= 1
- Parzen:             1 - 6x^2 + 6|x|^3 for |x| <= 1/2, 2(1 - |x|)^3 for |x| <= 1
- Tukey-Hanning:      (1 + cos(pi x)) / 2 for |x| <= 1
- Quadratic Spectral: 25 / (12 pi^2 x^2) (sin(6 pi x / 5) / (6 pi x / 5) - cos(6 pi x / 5))

and zero elsewhere, except the Quadratic Spectral kernel which has unbounded
support.

References:
    Andrews, D. W. K. (1991). Heteroskedasticity and autocorrelation
    consistent covariance matrix estimation. Econometrica, 59(3), 817-858.
"""

import logging
from typing import Dict, NamedTuple

import numpy as np
from numba import jit

from nse.core.exceptions import raise_parameter_error
from nse.core.types import Kernel

logger = logging.getLogger("nse.utils.kernels")


class KernelConstants(NamedTuple):
    """Characteristic exponent, integer code and Andrews rate constant of a kernel."""
    code: int
    q: int
    rate: float


KERNEL_CONSTANTS: Dict[Kernel, KernelConstants] = {
    Kernel.TRUNCATED: KernelConstants(code=0, q=2, rate=0.6611),
    Kernel.BARTLETT: KernelConstants(code=1, q=1, rate=1.1447),
    Kernel.PARZEN: KernelConstants(code=2, q=2, rate=2.6614),
    Kernel.TUKEY_HANNING: KernelConstants(code=3, q=2, rate=1.7462),
    Kernel.QUADRATIC_SPECTRAL: KernelConstants(code=4, q=2, rate=1.3221),
}


@jit(nopython=True, cache=True)
def _kernel_values_numba(x: np.ndarray, code: int) -> np.ndarray:
    """
    Numba-accelerated evaluation of a kernel at the points ``x``.

    Args:
        x: Points at which to evaluate the kernel
        code: Integer kernel code from KERNEL_CONSTANTS

    Returns:
        Kernel values
    """
    out = np.zeros(x.shape[0], dtype=np.float64)
    for i in range(x.shape[0]):
        a = abs(x[i])
        if code == 4:
            z = 6.0 * np.pi * a / 5.0
            if z < 1e-3:
                # Taylor expansion around zero
                out[i] = 1.0 - z * z / 10.0
            else:
                out[i] = 3.0 / (z * z) * (np.sin(z) / z - np.cos(z))
        elif a <= 1.0:
            if code == 0:
                out[i] = 1.0
            elif code == 1:
                out[i] = 1.0 - a
            elif code == 2:
                if a <= 0.5:
                    out[i] = 1.0 - 6.0 * a * a + 6.0 * a * a * a
                else:
                    out[i] = 2.0 * (1.0 - a) ** 3
            else:
                out[i] = (1.0 + np.cos(np.pi * a)) / 2.0
    return out


def kernel_function(x: np.ndarray, kernel: Kernel) -> np.ndarray:
    """
    Evaluate a kernel at arbitrary points.

    Args:
        x: Points at which to evaluate the kernel
        kernel: Kernel to evaluate

    Returns:
        Array of kernel values with the same length as ``x``

    Examples:
        >>> kernel_function(np.array([0.0, 0.5, 1.0]), Kernel.BARTLETT)
        array([1. , 0.5, 0. ])
    """
    x = np.ascontiguousarray(np.atleast_1d(x), dtype=np.float64)
    return _kernel_values_numba(x, KERNEL_CONSTANTS[kernel].code)


def kernel_weights(lags: int, bandwidth: float, kernel: Kernel) -> np.ndarray:
    """
    Compute the weights ``k(j / bandwidth)`` for lags ``j = 1..lags``.

    A bandwidth of zero gives all-zero weights, so the long-run variance
    reduces to the lag-0 autocovariance.

    Args:
        lags: Number of lags to compute weights for
        bandwidth: Non-negative kernel bandwidth
        kernel: Kernel to use

    Returns:
        Vector of weights (length = lags)

    Raises:
        ParameterError: If lags or bandwidth are negative, or bandwidth is not finite
    """
    if lags < 0:
        raise_parameter_error(
            f"lags must be non-negative, got {lags}",
            param_name="lags",
            param_value=lags,
            constraint=">= 0"
        )
    if not np.isfinite(bandwidth) or bandwidth < 0:
        raise_parameter_error(
            f"bandwidth must be a non-negative finite number, got {bandwidth}",
            param_name="bandwidth",
            param_value=bandwidth,
            constraint="finite, >= 0"
        )
    if lags == 0 or bandwidth == 0:
        return np.zeros(lags, dtype=np.float64)
    j = np.arange(1, lags + 1, dtype=np.float64)
    return kernel_function(j / bandwidth, kernel)


def kernel_rate(kernel: Kernel) -> float:
    """Andrews (1991) rate constant of the MSE-optimal bandwidth."""
    return KERNEL_CONSTANTS[kernel].rate


def kernel_exponent(kernel: Kernel) -> int:
    """Characteristic exponent ``q`` of the kernel."""
    return KERNEL_CONSTANTS[kernel].q
