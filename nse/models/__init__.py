"""
NSE Toolkit Estimators

Estimators of the variance of a sample mean of a dependent series, together
with the default implementations of the collaborators they delegate to.
"""

from .geyer import (
    GeyerInitialSequence,
    InitialSequenceResult,
    batch_means_variance,
    initial_sequence,
    nse_geyer,
)
from .spectral import ARFit, ARSpectrumAtZero, fit_ar_aic, nse_spec0
from .bandwidth import andrews_bandwidth, hirukawa_bandwidth, newey_west_bandwidth
from .hac import lrvar, nse_andrews, nse_hiruk, nse_nw
from .bootstrap import (
    BootstrapBase,
    CircularBlockBootstrap,
    PolitisWhiteSelector,
    StationaryBootstrap,
    create_resampler,
    nse_boot,
    optimal_block_length,
)
from .summary import compare_estimators

__all__ = [
    # Batch means and initial sequence
    'GeyerInitialSequence',
    'InitialSequenceResult',
    'batch_means_variance',
    'initial_sequence',
    'nse_geyer',

    # Spectral density at zero
    'ARFit',
    'ARSpectrumAtZero',
    'fit_ar_aic',
    'nse_spec0',

    # Kernel HAC
    'andrews_bandwidth',
    'hirukawa_bandwidth',
    'newey_west_bandwidth',
    'lrvar',
    'nse_andrews',
    'nse_hiruk',
    'nse_nw',

    # Block bootstrap
    'BootstrapBase',
    'CircularBlockBootstrap',
    'PolitisWhiteSelector',
    'StationaryBootstrap',
    'create_resampler',
    'nse_boot',
    'optimal_block_length',

    # Comparison
    'compare_estimators',
]
