# nse/models/summary.py

"""
Side-by-side comparison of the NSE estimators for a univariate series.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from nse.core.config import get_estimator_config
from nse.core.types import BootstrapScheme, GeyerType, Kernel, RandomStateLike, SeriesLike
from nse.core.validation import require_univariate, validate_series
from nse.models.bootstrap import nse_boot
from nse.models.geyer import nse_geyer
from nse.models.hac import nse_andrews, nse_hiruk, nse_nw
from nse.models.spectral import nse_spec0

logger = logging.getLogger("nse.models.summary")


def compare_estimators(x: SeriesLike,
                       nbatch: Optional[int] = None,
                       nb: Optional[int] = None,
                       random_state: RandomStateLike = None) -> pd.DataFrame:
    """Run every estimator with its default settings on a univariate series.

    Both bootstrap schemes draw from one Generator built from
    ``random_state``, so a fixed seed reproduces the whole table.

    Args:
        x: Univariate series
        nbatch: Number of batches for the batch-means estimators
            (default from configuration, 30)
        nb: Number of bootstrap replicates (default from configuration, 1000)
        random_state: Seed or Generator for the bootstrap estimators

    Returns:
        DataFrame indexed by estimator name with the columns ``variance``
        (squared NSE) and ``nse``

    Raises:
        DimensionError: If ``x`` has more than one column

    Examples:
        >>> x = np.random.default_rng(5).standard_normal(1000)
        >>> list(compare_estimators(x, nb=100, random_state=0).columns)
        ['variance', 'nse']
    """
    data = validate_series(x)
    require_univariate(data, "compare_estimators")
    config = get_estimator_config()
    if nbatch is None:
        nbatch = config.default_nbatch
    if nb is None:
        nb = config.default_bootstraps
    rng = np.random.default_rng(random_state)

    estimates = {
        "geyer.bm": nse_geyer(data, type=GeyerType.BM, nbatch=nbatch),
        "geyer.iseq": nse_geyer(data, type=GeyerType.ISEQ),
        "geyer.iseq.bm": nse_geyer(data, type=GeyerType.ISEQ_BM, nbatch=nbatch),
        "spec0": nse_spec0(data),
        "nw": nse_nw(data),
        "nw.prewhite": nse_nw(data, prewhite=True),
    }
    for kernel in Kernel:
        estimates[f"andrews.{kernel.value}"] = nse_andrews(data, type=kernel)
    for kernel in (Kernel.BARTLETT, Kernel.PARZEN):
        estimates[f"hiruk.{kernel.value}"] = nse_hiruk(data, type=kernel)
    for scheme in BootstrapScheme:
        estimates[f"boot.{scheme.value}"] = nse_boot(data, nb, type=scheme, random_state=rng)

    logger.debug(f"Compared {len(estimates)} estimators on {data.shape[0]} observations")
    variance = pd.Series(estimates, name="variance", dtype=np.float64)
    return pd.DataFrame({"variance": variance, "nse": np.sqrt(variance)})
