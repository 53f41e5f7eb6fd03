"""
Main entry point for Rt estimation.

This module chains smoothing, likelihood evaluation, the rolling posterior
and interval estimation for one region, and runs many regions
independently of each other.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional

import pandas as pd

from ..config import RtConfig
from ..core.errors import InputError
from ..core.estimate import EstimateTable
from ..core.series import CaseSeries, SmoothedSeries
from ..core.tables import LikelihoodTable, PosteriorTable
from ..core.types import RegionErrors, RegionId
from ..algorithm.smoothing import smooth_cases
from ..algorithm.likelihood import compute_log_likelihood
from ..algorithm.posterior import compute_posterior
from ..algorithm.estimation import estimate_rt

logger = logging.getLogger(__name__)


@dataclass
class RegionResult:
    """Every stage's output for a single region."""

    region: Optional[RegionId]
    smoothed: SmoothedSeries
    likelihood: LikelihoodTable
    posterior: PosteriorTable
    estimates: EstimateTable

    def smoothed_frame(self) -> pd.DataFrame:
        """(date, raw_count, smoothed_count) rows."""
        return self.smoothed.to_frame()

    def posterior_frame(self) -> pd.DataFrame:
        """(date, rt, posterior) rows, one per date and grid value."""
        return self.posterior.to_frame()

    def estimate_frame(self) -> pd.DataFrame:
        """(date, rt_mle, rt_lower, rt_upper, has_estimate) rows."""
        return self.estimates.to_frame()


@dataclass
class BatchResult:
    """Results for many regions, plus the regions whose input was rejected."""

    results: Dict[RegionId, RegionResult] = field(default_factory=dict)
    errors: RegionErrors = field(default_factory=dict)

    def __getitem__(self, region: RegionId) -> RegionResult:
        return self.results[region]

    def _combined(self, frame_name: str) -> pd.DataFrame:
        frames = []
        for region, result in self.results.items():
            frame = getattr(result, frame_name)()
            frame.insert(0, "region", region)
            frames.append(frame)
        if not frames:
            return pd.DataFrame()
        return pd.concat(frames, ignore_index=True)

    def smoothed_frame(self) -> pd.DataFrame:
        return self._combined("smoothed_frame")

    def posterior_frame(self) -> pd.DataFrame:
        return self._combined("posterior_frame")

    def estimate_frame(self) -> pd.DataFrame:
        return self._combined("estimate_frame")


def run_region(
    series: CaseSeries,
    config: RtConfig,
    region: Optional[RegionId] = None,
) -> RegionResult:
    """
    Run the full pipeline for one region.

    Args:
        series: Daily new confirmed cases
        config: Shared pipeline configuration
        region: Region label; overrides series.region when given

    Returns:
        RegionResult with the output of every stage

    Raises:
        InputError: if the series is empty, unordered or has invalid counts
    """
    if region is not None and series.region != region:
        series = CaseSeries(dates=series.dates, counts=series.counts, region=region)
    region = series.region

    logger.info("Estimating Rt for region %r (%d days)", region, len(series))

    smoothed = smooth_cases(series, config)
    likelihood = compute_log_likelihood(smoothed, config)
    posterior = compute_posterior(likelihood, config)
    estimates = estimate_rt(posterior, config)

    return RegionResult(
        region=region,
        smoothed=smoothed,
        likelihood=likelihood,
        posterior=posterior,
        estimates=estimates,
    )


def _as_series(region: RegionId, data) -> CaseSeries:
    if isinstance(data, CaseSeries):
        if data.region != region:
            return CaseSeries(dates=data.dates, counts=data.counts, region=region)
        return data
    if isinstance(data, pd.Series):
        return CaseSeries.from_pandas(data, region=region)
    return CaseSeries.from_records(data, region=region)


def run_regions(
    series_by_region: Mapping[RegionId, object],
    config: RtConfig,
    max_workers: Optional[int] = None,
) -> BatchResult:
    """
    Run the pipeline independently for every region.

    A region whose input is rejected is recorded in BatchResult.errors and
    does not stop the others.

    Args:
        series_by_region: Region -> CaseSeries, pandas Series indexed by date,
                          or iterable of (date, count) pairs
        config: Shared pipeline configuration
        max_workers: Run regions on a thread pool of this size; None or 1
                     runs them one after another

    Returns:
        BatchResult with results and errors keyed by region, in input order
    """
    regions = list(series_by_region.keys())
    results: Dict[RegionId, RegionResult] = {}
    errors: RegionErrors = {}

    def run_one(region: RegionId) -> RegionResult:
        series = _as_series(region, series_by_region[region])
        return run_region(series, config, region=region)

    def record_error(region: RegionId, exc: InputError) -> None:
        logger.warning("Skipping region %r: %s", region, exc)
        errors[region] = str(exc)

    if max_workers is None or max_workers <= 1:
        for region in regions:
            try:
                results[region] = run_one(region)
            except InputError as exc:
                record_error(region, exc)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = {pool.submit(run_one, region): region for region in regions}
            for future in as_completed(futures):
                region = futures[future]
                try:
                    results[region] = future.result()
                except InputError as exc:
                    record_error(region, exc)

    return BatchResult(
        results={r: results[r] for r in regions if r in results},
        errors={r: errors[r] for r in regions if r in errors},
    )


def split_regions(
    frame: pd.DataFrame,
    regions: Optional[Iterable[RegionId]] = None,
    date_column: str = "Date",
) -> Dict[RegionId, CaseSeries]:
    """
    Split a wide table of daily counts into one CaseSeries per region.

    Args:
        frame: A date column plus one count column per region
        regions: Columns to keep; defaults to every column except the date
        date_column: Name of the date column

    Returns:
        Dictionary mapping region -> CaseSeries, sorted by date
    """
    if date_column not in frame.columns:
        raise InputError(f"Missing date column: {date_column!r}")

    if regions is None:
        regions = [c for c in frame.columns if c != date_column]
    regions = list(regions)

    missing = [r for r in regions if r not in frame.columns]
    if missing:
        raise InputError(f"Unknown regions: {missing}")

    ordered = frame.sort_values(date_column)
    return {
        region: CaseSeries(
            dates=ordered[date_column].to_numpy(),
            counts=ordered[region].to_numpy(),
            region=region,
        )
        for region in regions
    }
