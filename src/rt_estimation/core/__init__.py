from .errors import RtEstimationError, ConfigurationError, InputError
from .series import CaseSeries, SmoothedSeries
from .tables import LikelihoodTable, PosteriorTable
from .estimate import RtEstimate, EstimateTable
from .types import (
    RegionId,
    CaseRecord,
    RegionErrors,
)

__all__ = [
    "RtEstimationError",
    "ConfigurationError",
    "InputError",
    "CaseSeries",
    "SmoothedSeries",
    "LikelihoodTable",
    "PosteriorTable",
    "RtEstimate",
    "EstimateTable",
    "RegionId",
    "CaseRecord",
    "RegionErrors",
]
