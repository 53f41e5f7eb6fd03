import logging
from typing import Optional

import numpy as np

from ..config import RtConfig
from ..core.estimate import EstimateTable, RtEstimate
from ..core.tables import PosteriorTable
from .intervals import IntervalStrategy, get_interval_strategy

logger = logging.getLogger(__name__)


def most_likely_rt(posterior: np.ndarray, grid: np.ndarray) -> float:
    """Grid value at the posterior mode; the smallest Rt wins ties."""
    return float(grid[int(np.argmax(posterior))])


def estimate_rt(
    posterior: PosteriorTable,
    config: RtConfig,
    strategy: Optional[IntervalStrategy] = None,
) -> EstimateTable:
    """
    Reduce each day's posterior to a most likely Rt and a credible interval.

    Args:
        posterior: Output of the posterior stage
        config: Shared pipeline configuration
        strategy: Interval strategy; defaults to the one named by
                  config.interval_method

    Returns:
        EstimateTable with one RtEstimate per posterior date. Degenerate
        days get an estimate whose values are all None.
    """
    if strategy is None:
        strategy = get_interval_strategy(config)

    grid = posterior.grid
    estimates = []
    for day, row, degenerate in zip(posterior.dates, posterior.posterior, posterior.degenerate):
        if degenerate:
            estimates.append(RtEstimate(date=day, rt_mle=None, rt_lower=None, rt_upper=None))
            continue

        lower, upper = strategy.interval(row, grid, config.hdi_mass)
        estimates.append(
            RtEstimate(
                date=day,
                rt_mle=most_likely_rt(row, grid),
                rt_lower=lower,
                rt_upper=upper,
            )
        )

    logger.debug(
        "Estimated Rt for %d of %d days (region=%r)",
        len(estimates) - posterior.n_degenerate, len(estimates), posterior.region,
    )

    return EstimateTable(estimates=estimates, mass=config.hdi_mass, region=posterior.region)
