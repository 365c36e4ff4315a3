# nse/core/validation.py

"""
Validation utilities for the NSE toolkit.

Every public estimator runs its input through the helpers in this module
before any computation: the series is coerced to a float64 ``n x d`` matrix,
univariate-only estimators check the column count, string tags are parsed
into the closed enumerations of ``nse.core.types`` and, on the way out, the
internal ``d x d`` variance matrix is collapsed to a plain float when
``d == 1``. Pandas labels are dropped at both ends so that the numeric
result never carries index or column metadata.
"""

from enum import Enum
from typing import Any, Type, TypeVar, Union

import numpy as np
import pandas as pd

from nse.core.exceptions import (
    InvalidTypeError, raise_data_error, raise_dimension_error,
    raise_parameter_error, raise_size_error
)
from nse.core.types import Matrix, SeriesLike, VarianceEstimate

E = TypeVar('E', bound=Enum)


def validate_series(
    x: SeriesLike,
    min_length: int = 2,
    data_name: str = "x"
) -> Matrix:
    """Coerce a series to a C-contiguous float64 matrix with rows as time.

    Args:
        x: Vector, matrix, pandas Series or DataFrame of observations
        min_length: Minimum number of observations
        data_name: Name of the data for error messages

    Returns:
        np.ndarray: Array of shape (n, d)

    Raises:
        DimensionError: If the input has more than two dimensions
        InvalidSizeError: If the series has fewer than ``min_length`` rows
        DataError: If the data is not numeric or contains NaN/Inf values
    """
    if x is None:
        raise TypeError(f"{data_name} cannot be None")

    if isinstance(x, (pd.Series, pd.DataFrame)):
        values = x.to_numpy()
    else:
        values = np.asarray(x)

    if values.dtype == object or not (
        np.issubdtype(values.dtype, np.number) or np.issubdtype(values.dtype, np.bool_)
    ):
        raise_data_error(
            f"{data_name} must contain real numbers, got dtype {values.dtype}",
            data_name=data_name,
            issue="non-numeric data"
        )
    if np.iscomplexobj(values):
        raise_data_error(
            f"{data_name} must contain real numbers, got complex values",
            data_name=data_name,
            issue="complex data"
        )

    if values.ndim == 0:
        values = values.reshape(1, 1)
    elif values.ndim == 1:
        values = values.reshape(-1, 1)
    elif values.ndim != 2:
        raise_dimension_error(
            f"{data_name} must be a vector or a matrix, got {values.ndim} dimensions",
            array_name=data_name,
            expected_shape="(n,) or (n, d)",
            actual_shape=values.shape
        )

    n = values.shape[0]
    if n < min_length:
        raise_size_error(
            f"{data_name} is too short (length {n}), minimum required length is {min_length}",
            data_name=data_name,
            size=n,
            required=f"n >= {min_length}"
        )
    if values.shape[1] < 1:
        raise_dimension_error(
            f"{data_name} has no columns",
            array_name=data_name,
            expected_shape="(n, d) with d >= 1",
            actual_shape=values.shape
        )

    values = np.ascontiguousarray(values, dtype=np.float64)

    if np.isnan(values).any():
        raise_data_error(
            f"{data_name} contains NaN values",
            data_name=data_name,
            issue="contains NaN values"
        )
    if np.isinf(values).any():
        raise_data_error(
            f"{data_name} contains infinite values",
            data_name=data_name,
            issue="contains infinite values"
        )

    return values


def require_univariate(x: Matrix, estimator: str, data_name: str = "x") -> None:
    """Reject multivariate input for estimators defined on a single series.

    Args:
        x: Validated (n, d) array
        estimator: Name of the estimator for the error message
        data_name: Name of the data for error messages

    Raises:
        DimensionError: If ``x`` has more than one column
    """
    if x.shape[1] != 1:
        raise_dimension_error(
            f"{estimator} is only defined for univariate series, got {x.shape[1]} columns",
            array_name=data_name,
            expected_shape="(n,) or (n, 1)",
            actual_shape=x.shape
        )


def parse_option(enum_cls: Type[E], value: Union[E, str], param_name: str) -> E:
    """Resolve a tag given as an enum member or a string.

    Strings are matched case-insensitively against the enum values.

    Args:
        enum_cls: Enumeration to resolve into
        value: Member or string tag
        param_name: Name of the argument for error messages

    Returns:
        The matching enum member

    Raises:
        InvalidTypeError: If the tag is not one of the enum values
    """
    if isinstance(value, enum_cls):
        return value

    valid = [member.value for member in enum_cls]
    if isinstance(value, str):
        wanted = value.strip().lower()
        for member in enum_cls:
            if member.value.lower() == wanted:
                return member

    options = ", ".join(f"'{v}'" for v in valid)
    raise InvalidTypeError(
        f"Invalid {param_name} {value!r}: must be one of {options}",
        param_name=param_name,
        param_value=value,
        valid_options=valid
    )


def validate_positive_int(value: Any, param_name: str, minimum: int = 1) -> int:
    """Validate an integer tuning parameter such as a batch or replicate count.

    Raises:
        ParameterError: If ``value`` is not an integer or is below ``minimum``
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        if isinstance(value, (float, np.floating)) and float(value).is_integer():
            value = int(value)
        else:
            raise_parameter_error(
                f"{param_name} must be an integer, got {value!r}",
                param_name=param_name,
                param_value=value,
                constraint="integer"
            )
    value = int(value)
    if value < minimum:
        raise_parameter_error(
            f"{param_name} must be at least {minimum}, got {value}",
            param_name=param_name,
            param_value=value,
            constraint=f">= {minimum}"
        )
    return value


def collapse_variance(omega: Matrix) -> VarianceEstimate:
    """Return a float for a 1 x 1 variance matrix and a symmetric copy otherwise."""
    omega = np.asarray(omega, dtype=np.float64)
    if omega.size == 1:
        return float(omega.reshape(-1)[0])
    return np.array((omega + omega.T) / 2.0)
