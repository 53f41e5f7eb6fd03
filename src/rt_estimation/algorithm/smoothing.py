"""
Gaussian smoothing of daily case counts.

Reported counts are noisy (weekend dips, batch reporting). Each day is
replaced by a Gaussian-weighted average of the surrounding window; near
the ends of the series the weights of the days that exist are
renormalised so no observation is dropped.
"""

import logging

import numpy as np

from ..config import RtConfig
from ..core.series import CaseSeries, SmoothedSeries

logger = logging.getLogger(__name__)


def _offsets(window: int) -> np.ndarray:
    # Centre sits at index window // 2, so even windows lean one day into the past
    return np.arange(window) - window // 2


def gaussian_weights(window: int, alpha: float) -> np.ndarray:
    """
    Gaussian kernel of `window` points.

    The weight at offset n from the centre is exp(-0.5 * (alpha * n / (window / 2))**2),
    with offsets running from -(window // 2) to window - 1 - window // 2.
    Weights are normalised to sum to 1.
    """
    offsets = _offsets(window)
    weights = np.exp(-0.5 * (alpha * offsets / (window / 2.0)) ** 2)
    return weights / weights.sum()


def smooth_counts(counts: np.ndarray, window: int, alpha: float) -> np.ndarray:
    """
    Centred Gaussian moving average with partial windows at both ends.

    Returns unrounded floats.
    """
    counts = np.asarray(counts, dtype=float)
    weights = gaussian_weights(window, alpha)
    n = len(counts)
    if n == 0:
        return counts.copy()

    weighted = np.zeros(n)
    coverage = np.zeros(n)
    for offset, weight in zip(_offsets(window), weights):
        # day t takes counts[t + offset] when that day exists
        lo, hi = max(0, -offset), min(n, n - offset)
        if lo >= hi:
            continue
        weighted[lo:hi] += weight * counts[lo + offset:hi + offset]
        coverage[lo:hi] += weight
    return weighted / coverage


def smooth_cases(series: CaseSeries, config: RtConfig) -> SmoothedSeries:
    """
    Smooth a region's daily counts.

    Args:
        series: Raw daily counts; validated here
        config: Shared pipeline configuration

    Returns:
        SmoothedSeries on exactly the input dates, smoothed counts rounded
        half-to-even

    Raises:
        InputError: if the series fails CaseSeries.validate()
    """
    series.validate()

    smoothed = np.round(
        smooth_counts(series.counts, config.smoothing_window, config.smoothing_alpha)
    )

    negative = smoothed < 0
    if negative.any():
        logger.warning(
            "Clamping %d negative smoothed counts to zero (region=%r)",
            int(negative.sum()), series.region,
        )
        smoothed = np.where(negative, 0.0, smoothed)

    logger.debug("Smoothed %d days (region=%r)", len(series), series.region)

    return SmoothedSeries(
        dates=series.dates.copy(),
        raw_counts=series.counts.copy(),
        smoothed_counts=smoothed,
        region=series.region,
    )
