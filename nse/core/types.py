# nse/core/types.py

"""
Core type annotations and custom types for the NSE toolkit.

This module defines the array aliases used in signatures, the closed
enumerations for estimator, kernel and bootstrap-scheme tags, and the
protocol classes describing the numerical capabilities that the estimators
delegate to (initial-sequence solving, AR spectrum fitting, block-length
selection and block resampling). Default implementations of every protocol
live in ``nse.models``; any object satisfying the protocol can be injected
into the public estimators instead.
"""

from enum import Enum
from typing import (
    TYPE_CHECKING, Any, Callable, Optional, Protocol, Sequence, Union,
    runtime_checkable
)

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from nse.models.bootstrap import BootstrapBase
    from nse.models.geyer import InitialSequenceResult

# NumPy array type aliases
Vector = np.ndarray  # 1D array
Matrix = np.ndarray  # 2D array
CovarianceMatrix = np.ndarray  # Symmetric positive semi-definite matrix

# Accepted input containers for a series
SeriesLike = Union[np.ndarray, pd.Series, pd.DataFrame, Sequence[float], Sequence[Sequence[float]]]

# Public result of every estimator: a float when d == 1, a d x d matrix otherwise
VarianceEstimate = Union[float, np.ndarray]

# Random state accepted by the bootstrap engine
RandomStateLike = Optional[Union[int, np.random.Generator]]

# Statistic evaluated on each bootstrap replicate
StatisticFunction = Callable[[np.ndarray], np.ndarray]


class GeyerType(Enum):
    """Estimator variants of ``nse_geyer``."""
    ISEQ = "iseq"
    BM = "bm"
    ISEQ_BM = "iseq.bm"


class Kernel(Enum):
    """Kernel weight functions for HAC estimators."""
    BARTLETT = "Bartlett"
    PARZEN = "Parzen"
    QUADRATIC_SPECTRAL = "Quadratic Spectral"
    TRUNCATED = "Truncated"
    TUKEY_HANNING = "Tukey-Hanning"


class BootstrapScheme(Enum):
    """Block bootstrap resampling schemes."""
    STATIONARY = "stationary"
    CIRCULAR = "circular"


# Protocol classes for the injected numerical capabilities

@runtime_checkable
class InitialSequenceSolver(Protocol):
    """Computes Geyer's initial-sequence variance estimates of a 1-D series."""

    def __call__(self, x: np.ndarray) -> "InitialSequenceResult":
        ...


@runtime_checkable
class SpectrumAtZeroFitter(Protocol):
    """Fits a parametric model and returns the spectral density at zero.

    The returned value is the long-run variance of the series (the spectral
    density scaled by 2*pi).
    """

    def spectrum0(self, x: np.ndarray) -> float:
        ...


@runtime_checkable
class BlockLengthSelector(Protocol):
    """Chooses bootstrap block lengths for every column of a series.

    ``select`` returns a DataFrame with one row per column and the columns
    ``stationary`` and ``circular``.
    """

    def select(self, x: np.ndarray) -> pd.DataFrame:
        ...


# Factory building a resampler for a scheme, block length, replicate count
# and random state
ResamplerFactory = Callable[
    [BootstrapScheme, float, int, RandomStateLike], "BootstrapBase"
]

__all__ = [
    "Vector",
    "Matrix",
    "CovarianceMatrix",
    "SeriesLike",
    "VarianceEstimate",
    "RandomStateLike",
    "StatisticFunction",
    "GeyerType",
    "Kernel",
    "BootstrapScheme",
    "InitialSequenceSolver",
    "SpectrumAtZeroFitter",
    "BlockLengthSelector",
    "ResamplerFactory",
]
