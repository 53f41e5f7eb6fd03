from .series import (
    START_DATE,
    FLAT_THEN_DOUBLED,
    WIDE_REGIONS,
    make_dates,
    make_series,
    exponential_counts,
)
