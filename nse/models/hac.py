# nse/models/hac.py

"""
Kernel HAC estimators of the variance of the mean.

All estimators in this module share one computation, the kernel summation
of ``nse.utils.covariance.kernel_lrv``, and differ only in how the bandwidth
is chosen:

- ``nse_nw``: Newey-West fixed rule with the Bartlett kernel
- ``nse_andrews``: Andrews automatic bandwidth for any of the five kernels
- ``nse_hiruk``: Hirukawa two-stage plug-in bandwidth (univariate, Bartlett
  or Parzen)
- ``lrvar``: a bandwidth supplied by the caller

Each returns the long-run covariance divided by ``n``; a float for univariate
input and a d x d matrix otherwise.
"""

import logging
from typing import Union

import numpy as np

from nse.core.exceptions import raise_parameter_error
from nse.core.types import Kernel, SeriesLike, VarianceEstimate
from nse.core.validation import collapse_variance, parse_option, require_univariate, validate_series
from nse.models.bandwidth import (
    andrews_bandwidth, hirukawa_bandwidth, newey_west_bandwidth, parse_hirukawa_kernel
)
from nse.utils.covariance import kernel_lrv

logger = logging.getLogger("nse.models.hac")


def lrvar(x: SeriesLike,
          bandwidth: float = 0.0,
          kernel: Union[Kernel, str] = Kernel.BARTLETT,
          prewhite: bool = False) -> VarianceEstimate:
    """Kernel estimate of the variance of the mean for a given bandwidth.

    Args:
        x: Series or n x d matrix of observations
        bandwidth: Non-negative kernel bandwidth; zero keeps only lag 0 so the
            result is the sample variance (ddof=1) divided by ``n``
        kernel: Kernel weighting the autocovariances
        prewhite: Whether to pre-whiten with a VAR(1) and re-colour

    Returns:
        Variance of the mean; a float for univariate input, a d x d matrix otherwise

    Raises:
        ParameterError: If the bandwidth is negative or not finite

    Examples:
        >>> x = np.random.default_rng(3).standard_normal(200)
        >>> np.isclose(lrvar(x, bandwidth=0), x.var(ddof=1) / 200)
        True
    """
    kernel = parse_option(Kernel, kernel, "kernel")
    try:
        bandwidth = float(bandwidth)
    except (TypeError, ValueError):
        bandwidth = float("nan")
    if not np.isfinite(bandwidth) or bandwidth < 0:
        raise_parameter_error(
            f"bandwidth must be a non-negative finite number, got {bandwidth}",
            param_name="bandwidth",
            param_value=bandwidth,
            constraint=">= 0"
        )
    data = validate_series(x)
    n = data.shape[0]
    omega = kernel_lrv(data, bandwidth, kernel, prewhite)
    return collapse_variance(omega / n)


def nse_nw(x: SeriesLike, prewhite: bool = False) -> VarianceEstimate:
    """Newey-West estimate of the squared NSE.

    Uses ``B = floor(4 (n / 100)^(2/9))`` lags with Bartlett weights
    ``1 - j / (B + 1)``.

    Args:
        x: Series or n x d matrix of observations
        prewhite: Whether to pre-whiten with a VAR(1)

    Returns:
        Variance of the mean; a float for univariate input, a d x d matrix otherwise
    """
    data = validate_series(x)
    lags = newey_west_bandwidth(data.shape[0])
    logger.debug(f"Newey-West lags: {lags}")
    return lrvar(data, bandwidth=lags + 1, kernel=Kernel.BARTLETT, prewhite=prewhite)


def nse_andrews(x: SeriesLike,
                prewhite: bool = False,
                type: Union[Kernel, str] = Kernel.BARTLETT) -> VarianceEstimate:
    """Kernel estimate of the squared NSE with the Andrews automatic bandwidth.

    Args:
        x: Series or n x d matrix of observations
        prewhite: Whether to pre-whiten with a VAR(1)
        type: Kernel, one of ``Bartlett``, ``Parzen``, ``Quadratic Spectral``,
            ``Truncated``, ``Tukey-Hanning``

    Returns:
        Variance of the mean; a float for univariate input, a d x d matrix otherwise

    Raises:
        InvalidTypeError: If the kernel is not recognised
    """
    kernel = parse_option(Kernel, type, "type")
    data = validate_series(x)
    bandwidth = andrews_bandwidth(data, kernel, prewhite)
    return lrvar(data, bandwidth=bandwidth, kernel=kernel, prewhite=prewhite)


def nse_hiruk(x: SeriesLike,
              prewhite: bool = False,
              type: Union[Kernel, str] = Kernel.BARTLETT) -> float:
    """Kernel estimate of the squared NSE with the Hirukawa two-stage bandwidth.

    Args:
        x: Univariate series
        prewhite: Whether to pre-whiten with an AR(1)
        type: Kernel, ``Bartlett`` or ``Parzen``

    Returns:
        Variance of the mean as a float

    Raises:
        DimensionError: If ``x`` has more than one column
        InvalidTypeError: If the kernel is not Bartlett or Parzen
    """
    kernel = parse_hirukawa_kernel(type)
    data = validate_series(x)
    require_univariate(data, "nse_hiruk")
    bandwidth = hirukawa_bandwidth(data, kernel, prewhite)
    return lrvar(data, bandwidth=bandwidth, kernel=kernel, prewhite=prewhite)
