from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from .types import RegionId


def _long_frame(dates: pd.DatetimeIndex, grid: np.ndarray, values: np.ndarray, name: str) -> pd.DataFrame:
    """Flatten a (dates x grid) array into one row per (date, grid value)."""
    return pd.DataFrame({
        "date": np.repeat(dates.to_numpy(), len(grid)),
        "rt": np.tile(grid, len(dates)),
        name: values.reshape(-1),
    })


@dataclass
class LikelihoodTable:
    """
    Per-date log-likelihood of every candidate Rt.

    Rows follow `dates`; columns follow `grid`. `counts` holds the
    smoothed count each row was evaluated at.
    """

    dates: pd.DatetimeIndex
    grid: np.ndarray
    log_likelihood: np.ndarray
    counts: np.ndarray
    region: Optional[RegionId] = None

    def __len__(self) -> int:
        return len(self.dates)

    def to_frame(self) -> pd.DataFrame:
        return _long_frame(self.dates, self.grid, self.log_likelihood, "log_likelihood")


@dataclass
class PosteriorTable:
    """
    Per-date posterior distribution over the Rt grid.

    Each row sums to 1, except rows flagged in `degenerate`, which are
    all zero because every candidate's evidence underflowed.
    """

    dates: pd.DatetimeIndex
    grid: np.ndarray
    posterior: np.ndarray
    degenerate: np.ndarray
    region: Optional[RegionId] = None

    def __len__(self) -> int:
        return len(self.dates)

    @property
    def n_degenerate(self) -> int:
        return int(self.degenerate.sum())

    def row(self, day) -> np.ndarray:
        """Posterior vector for a single date."""
        return self.posterior[self.dates.get_loc(pd.Timestamp(day))]

    def to_frame(self) -> pd.DataFrame:
        return _long_frame(self.dates, self.grid, self.posterior, "posterior")
