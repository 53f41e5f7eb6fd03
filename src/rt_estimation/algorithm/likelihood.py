"""
Poisson log-likelihood of each candidate Rt.

Under exponential growth the expected count on day t is
    lambda(r) = k[t-1] * exp(gamma * (r - 1))
for a candidate reproduction number r, and the observed smoothed count
k[t] is Poisson distributed around it.
"""

import logging

import numpy as np
from scipy import stats

from ..config import RtConfig
from ..core.series import SmoothedSeries
from ..core.tables import LikelihoodTable

logger = logging.getLogger(__name__)


def expected_counts(previous: np.ndarray, grid: np.ndarray, gamma: float) -> np.ndarray:
    """
    Expected count for every (day, candidate Rt) pair.

    Args:
        previous: Count on the preceding day, one per row
        grid: Candidate Rt values
        gamma: Reciprocal of the serial interval

    Returns:
        Array of shape (len(previous), len(grid))
    """
    return previous[:, None] * np.exp(gamma * (grid[None, :] - 1.0))


def compute_log_likelihood(smoothed: SmoothedSeries, config: RtConfig) -> LikelihoodTable:
    """
    Evaluate the log-likelihood surface for a smoothed series.

    Days with a smoothed count of zero are left out. Of the remaining days
    the first is dropped as well, since it has no predecessor; every other
    day is compared against the preceding retained day.

    Args:
        smoothed: Output of the smoothing stage
        config: Shared pipeline configuration

    Returns:
        LikelihoodTable with one row per retained day after the first
    """
    grid = config.rt_grid
    positive = smoothed.smoothed_counts > 0
    dates = smoothed.dates[positive]
    counts = smoothed.smoothed_counts[positive]

    if len(counts) < 2:
        logger.debug(
            "Fewer than two days with cases; empty likelihood table (region=%r)",
            smoothed.region,
        )
        return LikelihoodTable(
            dates=dates[:0],
            grid=grid,
            log_likelihood=np.empty((0, len(grid))),
            counts=counts[:0],
            region=smoothed.region,
        )

    lam = expected_counts(counts[:-1], grid, config.gamma)
    log_likelihood = stats.poisson.logpmf(counts[1:, None], lam)

    logger.debug(
        "Log-likelihood surface: %d days x %d grid points (region=%r)",
        len(counts) - 1, len(grid), smoothed.region,
    )

    return LikelihoodTable(
        dates=dates[1:],
        grid=grid,
        log_likelihood=log_likelihood,
        counts=counts[1:].copy(),
        region=smoothed.region,
    )
