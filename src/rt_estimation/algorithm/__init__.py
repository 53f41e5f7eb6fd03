from .smoothing import gaussian_weights, smooth_counts, smooth_cases
from .likelihood import expected_counts, compute_log_likelihood
from .posterior import rolling_sum, normalize_rows, compute_posterior
from .intervals import (
    IntervalStrategy,
    HDIStrategy,
    SampleStrategy,
    sample_hdi,
    get_interval_strategy,
)
from .estimation import most_likely_rt, estimate_rt

__all__ = [
    "gaussian_weights",
    "smooth_counts",
    "smooth_cases",
    "expected_counts",
    "compute_log_likelihood",
    "rolling_sum",
    "normalize_rows",
    "compute_posterior",
    "IntervalStrategy",
    "HDIStrategy",
    "SampleStrategy",
    "sample_hdi",
    "get_interval_strategy",
    "most_likely_rt",
    "estimate_rt",
]
