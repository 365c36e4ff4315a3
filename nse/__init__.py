# nse/__init__.py
"""
NSE Toolkit - Numerical Standard Errors for Python

Estimators of the variance of a sample mean (the squared numerical standard
error) of a stationary, weakly dependent series such as MCMC output:

- Batch means and Geyer's monotone initial sequence (``nse_geyer``)
- Spectral density at zero from an AR fit (``nse_spec0``)
- Kernel HAC estimators with Newey-West, Andrews and Hirukawa bandwidths
  (``nse_nw``, ``nse_andrews``, ``nse_hiruk``, ``lrvar``)
- Stationary and circular block bootstrap (``nse_boot``)

Every estimator returns a float for a univariate series and a d x d
covariance matrix for a d-column series.
"""

import logging
from typing import Union

from .version import __version__, __title__, __description__, __license__

# Set up package-wide logger; output is left to the application
logger = logging.getLogger("nse")
logger.addHandler(logging.NullHandler())

from . import core
from . import utils
from . import models

from .core.exceptions import (
    NSEError,
    ParameterError,
    InvalidTypeError,
    DimensionError,
    DataError,
    InvalidSizeError,
    NumericError,
    BootstrapError,
    ConfigurationError,
    NSEWarning,
    NumericWarning,
)
from .core.types import BootstrapScheme, GeyerType, Kernel
from .core.config import get_config, reset_config, set_config
from .models import (
    compare_estimators,
    lrvar,
    nse_andrews,
    nse_boot,
    nse_geyer,
    nse_hiruk,
    nse_nw,
    nse_spec0,
    optimal_block_length,
)


def set_log_level(level: Union[int, str]) -> None:
    """
    Set the level of the ``nse`` package logger.

    Args:
        level: Level name (e.g. "DEBUG") or numeric logging level

    Raises:
        ConfigurationError: If the level name is not recognised
    """
    if isinstance(level, int):
        level = logging.getLevelName(level)
    set_config("logging", "level", level)
    logger.setLevel(get_config("logging", "level"))


def _initialize_logging() -> None:
    """Apply the configured log level on first import."""
    try:
        logger.setLevel(get_config("logging", "level"))
    except ConfigurationError as e:
        logger.warning(f"Failed to initialize configuration: {e}")
        logger.warning("Using default settings")


_initialize_logging()

__all__ = [
    # Estimators
    'nse_geyer',
    'nse_spec0',
    'nse_nw',
    'nse_andrews',
    'nse_hiruk',
    'nse_boot',
    'lrvar',
    'compare_estimators',
    'optimal_block_length',

    # Tags
    'GeyerType',
    'Kernel',
    'BootstrapScheme',

    # Exceptions
    'NSEError',
    'ParameterError',
    'InvalidTypeError',
    'DimensionError',
    'DataError',
    'InvalidSizeError',
    'NumericError',
    'BootstrapError',
    'ConfigurationError',
    'NSEWarning',
    'NumericWarning',

    # Configuration and logging
    'get_config',
    'set_config',
    'reset_config',
    'set_log_level',

    # Version
    '__version__',
]
