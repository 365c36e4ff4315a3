"""
NSE Toolkit Core Module

Foundations shared by every estimator: the exception hierarchy, type aliases
and tag enumerations, input validation and configuration management.
"""

import logging

logger = logging.getLogger("nse.core")

from .exceptions import (
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

from .types import (
    GeyerType,
    Kernel,
    BootstrapScheme,
    InitialSequenceSolver,
    SpectrumAtZeroFitter,
    BlockLengthSelector,
)

from .validation import (
    validate_series,
    require_univariate,
    parse_option,
    collapse_variance,
)

from .config import (
    get_config,
    set_config,
    reset_config,
    get_estimator_config,
)

__all__ = [
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

    # Types
    'GeyerType',
    'Kernel',
    'BootstrapScheme',
    'InitialSequenceSolver',
    'SpectrumAtZeroFitter',
    'BlockLengthSelector',

    # Validation
    'validate_series',
    'require_univariate',
    'parse_option',
    'collapse_variance',

    # Configuration
    'get_config',
    'set_config',
    'reset_config',
    'get_estimator_config',
]
