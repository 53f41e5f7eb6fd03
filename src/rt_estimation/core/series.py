from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .errors import InputError
from .types import CaseRecord, RegionId


def _to_index(dates) -> pd.DatetimeIndex:
    try:
        return pd.DatetimeIndex(pd.to_datetime(list(dates)))
    except (TypeError, ValueError) as exc:
        raise InputError(f"Could not parse dates: {exc}") from exc


@dataclass
class CaseSeries:
    """
    Daily new confirmed cases for one region.

    Dates and counts are coerced on construction; the ordering and value
    checks run in validate(), which the smoothing stage calls before use.
    """

    dates: pd.DatetimeIndex
    counts: np.ndarray
    region: Optional[RegionId] = None

    def __post_init__(self):
        self.dates = _to_index(self.dates)
        try:
            self.counts = np.asarray(self.counts, dtype=float)
        except (TypeError, ValueError) as exc:
            raise InputError(f"Counts must be numeric: {exc}") from exc
        if self.counts.ndim != 1:
            raise InputError("Counts must be one-dimensional")
        if len(self.dates) != len(self.counts):
            raise InputError(
                f"Got {len(self.dates)} dates but {len(self.counts)} counts"
            )

    def __len__(self) -> int:
        return len(self.counts)

    def validate(self) -> None:
        """
        Check that the series can enter the pipeline.

        Raises:
            InputError: if the series is empty, dates are not strictly
                increasing, or any count is negative, missing or fractional.
        """
        label = f" for region {self.region!r}" if self.region is not None else ""

        if len(self) == 0:
            raise InputError(f"Empty case series{label}")

        if len(self) > 1:
            backwards = np.diff(self.dates.to_numpy()) <= np.timedelta64(0, "ns")
            if backwards.any():
                first_bad = int(np.argmax(backwards)) + 1
                raise InputError(
                    f"Dates must be strictly increasing{label}; "
                    f"{self.dates[first_bad].date()} follows "
                    f"{self.dates[first_bad - 1].date()}"
                )

        if not np.isfinite(self.counts).all():
            raise InputError(f"Counts contain missing or infinite values{label}")
        if (self.counts < 0).any():
            raise InputError(f"Counts must be non-negative{label}")
        if (self.counts != np.round(self.counts)).any():
            raise InputError(f"Counts must be whole numbers{label}")

    @classmethod
    def from_pandas(cls, series: pd.Series, region: Optional[RegionId] = None) -> "CaseSeries":
        """Create a CaseSeries from a pandas Series indexed by date."""
        if region is None:
            region = series.name
        return cls(dates=series.index, counts=series.to_numpy(), region=region)

    @classmethod
    def from_records(
        cls, records: Iterable[CaseRecord], region: Optional[RegionId] = None
    ) -> "CaseSeries":
        """Create a CaseSeries from (date, count) pairs."""
        records = list(records)
        dates = [d for d, _ in records]
        counts = [c for _, c in records]
        return cls(dates=dates, counts=counts, region=region)


@dataclass
class SmoothedSeries:
    """A CaseSeries together with its smoothed counts, on the same dates."""

    dates: pd.DatetimeIndex
    raw_counts: np.ndarray
    smoothed_counts: np.ndarray
    region: Optional[RegionId] = None

    def __len__(self) -> int:
        return len(self.dates)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            "date": self.dates,
            "raw_count": self.raw_counts.astype(np.int64),
            "smoothed_count": self.smoothed_counts.astype(np.int64),
        })
