"""
Rt Estimation Package.

This package estimates the time-varying effective reproduction number Rt
of an epidemic from daily confirmed-case counts, using a rolling Bayesian
update over a fixed grid of candidate Rt values.
"""

from .config import RtConfig
from .core import (
    RtEstimationError,
    ConfigurationError,
    InputError,
    CaseSeries,
    SmoothedSeries,
    LikelihoodTable,
    PosteriorTable,
    RtEstimate,
    EstimateTable,
)
from .algorithm import (
    smooth_cases,
    compute_log_likelihood,
    compute_posterior,
    estimate_rt,
    HDIStrategy,
    SampleStrategy,
    get_interval_strategy,
)
from .pipeline import (
    RegionResult,
    BatchResult,
    run_region,
    run_regions,
    split_regions,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "RtConfig",
    # Errors
    "RtEstimationError",
    "ConfigurationError",
    "InputError",
    # Core types
    "CaseSeries",
    "SmoothedSeries",
    "LikelihoodTable",
    "PosteriorTable",
    "RtEstimate",
    "EstimateTable",
    # Algorithm
    "smooth_cases",
    "compute_log_likelihood",
    "compute_posterior",
    "estimate_rt",
    "HDIStrategy",
    "SampleStrategy",
    "get_interval_strategy",
    # Pipeline
    "RegionResult",
    "BatchResult",
    "run_region",
    "run_regions",
    "split_regions",
]
