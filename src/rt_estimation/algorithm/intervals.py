"""
Credible interval strategies for a discrete posterior over the Rt grid.

These strategies determine how the lower and upper bound of Rt are read
off a single day's posterior vector.
"""

import logging
from typing import Tuple

import numpy as np

from ..config import RtConfig

logger = logging.getLogger(__name__)

# Slack for floating-point error in cumulative sums
_MASS_TOLERANCE = 1e-12


class IntervalStrategy:
    """Base class for credible interval strategies."""

    def interval(
        self, posterior: np.ndarray, grid: np.ndarray, mass: float
    ) -> Tuple[float, float]:
        raise NotImplementedError


class HDIStrategy(IntervalStrategy):
    """
    Highest density interval computed directly from the discrete posterior.

    Returns the narrowest contiguous run of grid points whose total
    probability is at least `mass`. Among runs of equal width the one
    holding more probability wins, then the one further left.
    """

    def interval(
        self, posterior: np.ndarray, grid: np.ndarray, mass: float
    ) -> Tuple[float, float]:
        cumulative = np.concatenate(([0.0], np.cumsum(posterior)))
        needed = max(mass * cumulative[-1] - _MASS_TOLERANCE, 0.0)

        # For each start index, the first end index reaching the needed mass
        ends = np.searchsorted(cumulative, cumulative[:-1] + needed, side="left")
        starts = np.arange(len(posterior))
        # an interval always holds at least one grid point
        ends = np.maximum(ends, starts + 1)
        valid = ends <= len(posterior)
        starts, ends = starts[valid], ends[valid]

        widths = ends - 1 - starts
        covered = cumulative[ends] - cumulative[starts]
        best = np.lexsort((-covered, widths))[0]

        return float(grid[starts[best]]), float(grid[ends[best] - 1])


class SampleStrategy(IntervalStrategy):
    """
    Highest density interval of weighted draws from the posterior.

    Draws `n_samples` grid values with probability given by the posterior
    and returns the shortest interval spanning floor(n_samples * mass) + 1
    sorted draws. Draws come from one generator seeded once, so a run is
    reproducible for a given seed.
    """

    def __init__(self, n_samples: int, seed: int):
        self.n_samples = n_samples
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def interval(
        self, posterior: np.ndarray, grid: np.ndarray, mass: float
    ) -> Tuple[float, float]:
        draws = self._rng.choice(grid, size=self.n_samples, replace=True, p=posterior / posterior.sum())
        return sample_hdi(draws, mass)


def sample_hdi(samples: np.ndarray, mass: float) -> Tuple[float, float]:
    """Shortest interval containing a `mass` share of the samples."""
    ordered = np.sort(samples)
    n = len(ordered)
    exclude = n - int(np.floor(n * mass))
    if exclude == 0:
        return float(ordered[0]), float(ordered[-1])

    lows = ordered[:exclude]
    highs = ordered[n - exclude:]
    best = int(np.argmin(highs - lows))
    return float(lows[best]), float(highs[best])


def get_interval_strategy(config: RtConfig) -> IntervalStrategy:
    """
    Get the interval strategy configured by `config.interval_method`.

    Args:
        config: Shared pipeline configuration; 'hdi' or 'sample'

    Returns:
        IntervalStrategy instance
    """
    if config.interval_method == "hdi":
        return HDIStrategy()
    if config.interval_method == "sample":
        logger.info(
            "Sampling credible intervals with seed=%d, n_samples=%d",
            config.seed, config.n_samples,
        )
        return SampleStrategy(n_samples=config.n_samples, seed=config.seed)

    raise ValueError(f"Unknown interval method: {config.interval_method}")
