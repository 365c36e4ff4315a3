# nse/models/spectral.py

"""
Spectral density at zero from an autoregressive fit.

The long-run variance of a univariate series equals ``2 pi`` times its
spectral density at frequency zero. This module fits autoregressions of every
order up to ``order_max`` by Yule-Walker (the Levinson-Durbin recursion from
statsmodels), selects the order minimising AIC and evaluates the implied
spectrum at zero,

    S(0) = sigma2 / (1 - phi_1 - ... - phi_p)^2,

where ``sigma2`` is the innovation variance with the degrees-of-freedom
inflation ``n / (n - (p + 1))``.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from statsmodels.tsa.stattools import acovf, levinson_durbin

from nse.core.config import get_estimator_config
from nse.core.exceptions import raise_numeric_error, warn_numeric
from nse.core.types import SeriesLike, SpectrumAtZeroFitter, Vector
from nse.core.validation import collapse_variance, require_univariate, validate_positive_int, validate_series

logger = logging.getLogger("nse.models.spectral")

# Threshold on 1 - sum(phi) below which the fit is treated as near a unit root
_UNIT_ROOT_TOL = 1e-6


@dataclass
class ARFit:
    """Autoregression selected by AIC.

    Attributes:
        order: Selected order p
        coefficients: AR coefficients phi_1..phi_p
        sigma2: Innovation variance with the degrees-of-freedom inflation
        order_max: Largest order considered
        aic: AIC of every order 0..order_max, relative to the minimum
    """
    order: int
    coefficients: Vector
    sigma2: float
    order_max: int
    aic: Vector = field(repr=False)

    @property
    def spectrum0(self) -> float:
        """Long-run variance implied by the fitted model."""
        return self.sigma2 / (1.0 - float(np.sum(self.coefficients))) ** 2


def default_order_max(n: int) -> int:
    """Default largest AR order, ``min(n - 1, floor(10 log10 n))``."""
    return int(min(n - 1, np.floor(10.0 * np.log10(n))))


def fit_ar_aic(x: SeriesLike, order_max: Optional[int] = None) -> ARFit:
    """Fit autoregressions by Yule-Walker and select the order by AIC.

    Args:
        x: Univariate series
        order_max: Largest order to consider; defaults to the configured
            ``ar_order_max`` or ``min(n - 1, floor(10 log10 n))``

    Returns:
        ARFit describing the selected model

    Raises:
        DimensionError: If ``x`` has more than one column
        NumericError: If the series has zero variance
    """
    data = validate_series(x, min_length=2)
    require_univariate(data, "fit_ar_aic")
    x = data[:, 0]
    n = x.shape[0]

    if order_max is None:
        order_max = get_estimator_config().ar_order_max
    if order_max is None:
        order_max = default_order_max(n)
    # Leave at least one degree of freedom for the innovation variance; two
    # observations only support the order-0 fit
    order_max = min(validate_positive_int(order_max, "order_max"), n - 2)

    acov = acovf(x, adjusted=False, demean=True, fft=True, nlag=order_max)
    if acov[0] <= 0:
        raise_numeric_error(
            "Cannot fit an autoregression to a series with zero variance",
            operation="fit_ar_aic",
            values=float(acov[0]),
            error_type="zero_variance"
        )

    if order_max == 0:
        sig = acov[:1].copy()
        phi = np.zeros((1, 1))
    else:
        with np.errstate(divide="ignore", invalid="ignore"):
            _, _, _, sig, phi = levinson_durbin(acov, nlags=order_max, isacov=True)
        # The recursion leaves the order-0 entry unset
        sig = np.asarray(sig, dtype=np.float64).copy()
        sig[0] = acov[0]

    orders = np.arange(order_max + 1)
    with np.errstate(divide="ignore", invalid="ignore"):
        aic = n * np.log(sig) + 2.0 * orders
    aic = np.where(np.isnan(aic), np.inf, aic)
    order = int(np.argmin(aic))
    aic = aic - aic[order]

    coefficients = np.asarray(phi[1:order + 1, order], dtype=np.float64).copy()
    sigma2 = float(sig[order]) * n / (n - (order + 1))
    logger.debug(f"AR order {order} selected by AIC (order_max={order_max}), sigma2={sigma2:.6g}")

    return ARFit(order=order, coefficients=coefficients, sigma2=sigma2,
                 order_max=order_max, aic=aic)


class ARSpectrumAtZero:
    """Default spectrum-at-zero fitter based on ``fit_ar_aic``.

    A constant series has spectrum zero. Trending series go through the AR
    fit, where a near unit root is reported with a NumericWarning.

    Args:
        order_max: Largest AR order to consider
    """

    def __init__(self, order_max: Optional[int] = None) -> None:
        self.order_max = order_max

    def __repr__(self) -> str:
        return f"ARSpectrumAtZero(order_max={self.order_max})"

    def fit(self, x: np.ndarray) -> ARFit:
        return fit_ar_aic(x, self.order_max)

    def spectrum0(self, x: np.ndarray) -> float:
        x = np.asarray(x, dtype=np.float64).reshape(-1)
        if np.ptp(x) == 0.0:
            logger.debug("Series is constant, spectrum at zero is 0")
            return 0.0

        ar_fit = self.fit(x)
        denominator = 1.0 - float(np.sum(ar_fit.coefficients))
        if abs(denominator) < _UNIT_ROOT_TOL:
            warn_numeric(
                "Fitted autoregression is close to a unit root, the spectrum at zero is unreliable",
                operation="spectrum0",
                issue="near unit root",
                value=float(np.sum(ar_fit.coefficients))
            )
        return ar_fit.spectrum0


def nse_spec0(x: SeriesLike, fitter: Optional[SpectrumAtZeroFitter] = None) -> float:
    """Squared NSE from the spectral density at zero of an AR fit.

    Args:
        x: Univariate series
        fitter: Spectrum-at-zero fitter, defaults to ARSpectrumAtZero()

    Returns:
        Variance of the mean as a float

    Raises:
        DimensionError: If ``x`` has more than one column

    Examples:
        >>> x = np.random.default_rng(2).standard_normal(2000)
        >>> nse_spec0(x) > 0
        True
    """
    data = validate_series(x)
    require_univariate(data, "nse_spec0")
    if fitter is None:
        fitter = ARSpectrumAtZero()
    n = data.shape[0]
    spec = fitter.spectrum0(data[:, 0])
    return collapse_variance(np.array([[spec / n]]))
