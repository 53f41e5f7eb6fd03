"""
Rolling posterior over the Rt grid.

With a flat prior, the posterior for a day is proportional to the product
of the likelihoods of the last `posterior_window` retained days, i.e. the
exponential of their summed log-likelihoods. Evidence older than the
window is forgotten.
"""

import logging

import numpy as np

from ..config import RtConfig
from ..core.tables import LikelihoodTable, PosteriorTable

logger = logging.getLogger(__name__)


def rolling_sum(values: np.ndarray, window: int) -> np.ndarray:
    """
    Trailing sum over the last `window` rows of a 2-D array, per column.

    The first window - 1 rows use every row available so far.
    """
    values = np.asarray(values, dtype=float)
    result = values.copy()
    # shift-and-add keeps -inf rows at -inf
    for lag in range(1, min(window, len(values))):
        result[lag:] += values[:-lag]
    return result


def normalize_rows(unnormalized: np.ndarray) -> tuple:
    """
    Normalise each row to sum to 1.

    Rows whose total is zero or not finite are returned as all zeros.

    Returns:
        Tuple of (normalised array, boolean mask of degenerate rows)
    """
    totals = unnormalized.sum(axis=1)
    degenerate = ~np.isfinite(totals) | (totals <= 0)

    posterior = np.zeros_like(unnormalized)
    ok = ~degenerate
    posterior[ok] = unnormalized[ok] / totals[ok, None]
    return posterior, degenerate


def compute_posterior(likelihood: LikelihoodTable, config: RtConfig) -> PosteriorTable:
    """
    Fold the trailing window of log-likelihoods into a per-day posterior.

    Args:
        likelihood: Output of the likelihood stage
        config: Shared pipeline configuration

    Returns:
        PosteriorTable on the same dates as `likelihood`
    """
    window_log_likelihood = rolling_sum(likelihood.log_likelihood, config.posterior_window)

    with np.errstate(over="ignore", under="ignore"):
        unnormalized = np.exp(window_log_likelihood)

    posterior, degenerate = normalize_rows(unnormalized)

    if degenerate.any():
        logger.warning(
            "%d of %d days have no usable posterior (region=%r)",
            int(degenerate.sum()), len(degenerate), likelihood.region,
        )

    return PosteriorTable(
        dates=likelihood.dates.copy(),
        grid=likelihood.grid,
        posterior=posterior,
        degenerate=degenerate,
        region=likelihood.region,
    )
