from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from .types import RegionId


@dataclass
class RtEstimate:
    """Point estimate and credible interval of Rt for one date."""

    date: pd.Timestamp
    rt_mle: Optional[float]
    rt_lower: Optional[float]
    rt_upper: Optional[float]

    @property
    def has_estimate(self) -> bool:
        return self.rt_mle is not None


@dataclass
class EstimateTable:
    """Daily Rt estimates for one region, one entry per posterior date."""

    estimates: List[RtEstimate]
    mass: float
    region: Optional[RegionId] = None

    def __len__(self) -> int:
        return len(self.estimates)

    def __iter__(self):
        return iter(self.estimates)

    def get(self, day) -> RtEstimate:
        day = pd.Timestamp(day)
        for estimate in self.estimates:
            if estimate.date == day:
                return estimate
        raise KeyError(day)

    def to_frame(self) -> pd.DataFrame:
        """
        Estimates as a DataFrame.

        Dates without an estimate carry <NA> in the nullable Float64
        columns and False in `has_estimate`.
        """
        return pd.DataFrame({
            "date": pd.DatetimeIndex([e.date for e in self.estimates]),
            "rt_mle": pd.array([e.rt_mle for e in self.estimates], dtype="Float64"),
            "rt_lower": pd.array([e.rt_lower for e in self.estimates], dtype="Float64"),
            "rt_upper": pd.array([e.rt_upper for e in self.estimates], dtype="Float64"),
            "has_estimate": [e.has_estimate for e in self.estimates],
        })
