# nse/utils/batching.py

"""
Sequence splitting for batch-means estimators.

Observation ``i`` (1-based) of a series of length ``n`` is assigned to batch
``ceil(i * k / n)``. This yields exactly ``k`` contiguous, non-overlapping
batches covering the whole series whose sizes are ``floor(n / k)`` or
``ceil(n / k)``.

Functions:
    batch_labels: Batch index of every observation
    batch_ranges: Half-open index ranges of the batches
    batch_means: Per-batch column means
"""

import logging
from typing import List, Tuple

import numpy as np

from nse.core.exceptions import raise_size_error
from nse.core.types import Matrix
from nse.core.validation import validate_positive_int

logger = logging.getLogger("nse.utils.batching")


def _check_batch_count(n: int, nbatch: int) -> int:
    nbatch = validate_positive_int(nbatch, "nbatch", minimum=1)
    if nbatch > n:
        raise_size_error(
            f"Cannot split a series of length {n} into {nbatch} batches",
            data_name="x",
            size=n,
            required=f"n >= nbatch ({nbatch})"
        )
    return nbatch


def batch_labels(n: int, nbatch: int) -> np.ndarray:
    """
    Compute the 0-based batch index of every observation.

    Args:
        n: Series length
        nbatch: Number of batches

    Returns:
        Integer array of length ``n`` with values in ``0..nbatch-1``

    Raises:
        ParameterError: If ``nbatch`` is not a positive integer
        InvalidSizeError: If ``nbatch`` exceeds ``n``

    Examples:
        >>> batch_labels(7, 3)
        array([0, 0, 1, 1, 2, 2, 2])
    """
    nbatch = _check_batch_count(n, nbatch)
    i = np.arange(1, n + 1, dtype=np.int64)
    # Integer form of ceil(i * k / n), shifted to 0-based labels
    return (i * nbatch + n - 1) // n - 1


def batch_ranges(n: int, nbatch: int) -> List[Tuple[int, int]]:
    """Return the half-open ``(start, stop)`` row ranges of each batch."""
    labels = batch_labels(n, nbatch)
    stops = np.searchsorted(labels, np.arange(nbatch), side="right")
    starts = np.concatenate(([0], stops[:-1]))
    return [(int(a), int(b)) for a, b in zip(starts, stops)]


def batch_means(x: Matrix, nbatch: int) -> Matrix:
    """
    Compute the column means of each batch of a series.

    Args:
        x: Validated data matrix (n x d)
        nbatch: Number of batches

    Returns:
        Array of shape (nbatch, d) holding the batch means in time order
    """
    n, d = x.shape
    labels = batch_labels(n, nbatch)
    sums = np.zeros((nbatch, d), dtype=np.float64)
    np.add.at(sums, labels, x)
    counts = np.bincount(labels, minlength=nbatch).astype(np.float64)
    logger.debug(f"Split {n} observations into {nbatch} batches "
                 f"(sizes {int(counts.min())}-{int(counts.max())})")
    return sums / counts[:, None]
