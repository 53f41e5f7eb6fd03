from .runner import (
    RegionResult,
    BatchResult,
    run_region,
    run_regions,
    split_regions,
)

__all__ = [
    "RegionResult",
    "BatchResult",
    "run_region",
    "run_regions",
    "split_regions",
]
