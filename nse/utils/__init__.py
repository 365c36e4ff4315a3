"""
NSE Toolkit Utilities

Numerical building blocks shared by the estimators: the batch splitter,
kernel weight functions and the kernel summation engine.
"""

from .batching import batch_labels, batch_means, batch_ranges
from .kernels import KERNEL_CONSTANTS, kernel_exponent, kernel_function, kernel_rate, kernel_weights
from .covariance import kernel_lrv, long_run_covariance, prewhiten_var1, recolor

__all__ = [
    'batch_labels',
    'batch_means',
    'batch_ranges',
    'KERNEL_CONSTANTS',
    'kernel_exponent',
    'kernel_function',
    'kernel_rate',
    'kernel_weights',
    'kernel_lrv',
    'long_run_covariance',
    'prewhiten_var1',
    'recolor',
]
