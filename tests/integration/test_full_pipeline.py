"""
Integration tests for the full estimation pipeline.

These tests verify that all stages work together correctly.
"""

import numpy as np
import pandas as pd
import pytest

from rt_estimation import (
    CaseSeries,
    RtConfig,
    InputError,
    run_region,
    run_regions,
    split_regions,
)
from tests.fixtures import (
    FLAT_THEN_DOUBLED,
    WIDE_REGIONS,
    make_dates,
    make_series,
    exponential_counts,
)


def _interval_width(result, day_index):
    estimate = list(result.estimates)[day_index]
    return estimate.rt_upper - estimate.rt_lower


class TestFlatThenDoubled:
    """One week at 10 cases a day, then one week at 20."""

    @pytest.fixture
    def result(self):
        return run_region(make_series(FLAT_THEN_DOUBLED, region="X"), RtConfig())

    def test_smoothed_series(self, result):
        frame = result.smoothed_frame()

        assert len(frame) == 14
        assert frame["smoothed_count"].iloc[:5].tolist() == [10] * 5
        assert frame["smoothed_count"].iloc[7] > 10
        assert frame["smoothed_count"].iloc[-1] == 20

    def test_growth_signal_on_day_eight(self, result):
        day8 = result.estimates.get(result.smoothed.dates[7])

        assert day8.rt_mle > 1.0

    def test_flat_week_is_near_one(self, result):
        day4 = result.estimates.get(result.smoothed.dates[3])

        assert day4.rt_mle == pytest.approx(1.0, abs=0.01)

    def test_more_evidence_narrows_posterior(self, result):
        """Day 2 has one day of evidence; day 14 has a full week."""
        dates = result.smoothed.dates
        day2 = result.posterior.row(dates[1])
        day14 = result.posterior.row(dates[13])

        assert day2.max() < day14.max()

        day2_width = _interval_width(result, 0)
        day14_width = _interval_width(result, len(result.estimates) - 1)
        assert day2_width > 2 * day14_width

    def test_first_date_has_no_likelihood(self, result):
        assert result.likelihood.dates.equals(result.smoothed.dates[1:])
        assert result.posterior.dates.equals(result.likelihood.dates)
        assert len(result.estimates) == 13


class TestPipelineProperties:
    """Properties that hold for any valid input."""

    @pytest.fixture
    def result(self):
        rng = np.random.default_rng(2020)
        counts = rng.poisson(np.linspace(20, 200, 60))
        return run_region(make_series(counts), RtConfig())

    def test_posterior_rows_sum_to_one_or_zero(self, result):
        totals = result.posterior.posterior.sum(axis=1)

        for total, degenerate in zip(totals, result.posterior.degenerate):
            if degenerate:
                assert total == 0.0
            else:
                assert total == pytest.approx(1.0, abs=1e-9)

    def test_intervals_cover_target_mass(self, result):
        config = RtConfig()
        grid = config.rt_grid

        for estimate, row in zip(result.estimates, result.posterior.posterior):
            if not estimate.has_estimate:
                continue
            assert estimate.rt_lower <= estimate.rt_upper

            lo = int(np.searchsorted(grid, estimate.rt_lower))
            hi = int(np.searchsorted(grid, estimate.rt_upper))
            assert row[lo:hi + 1].sum() >= config.hdi_mass - 1e-9

    def test_intervals_are_narrowest(self, result):
        config = RtConfig()
        grid = config.rt_grid

        for estimate, row in list(zip(result.estimates, result.posterior.posterior))[::10]:
            if not estimate.has_estimate:
                continue
            lo = int(np.searchsorted(grid, estimate.rt_lower))
            hi = int(np.searchsorted(grid, estimate.rt_upper))
            width = hi - lo

            # no contiguous run of `width` points reaches the target mass
            if width > 0:
                cumulative = np.concatenate(([0.0], np.cumsum(row)))
                narrower = cumulative[width:] - cumulative[:-width]
                assert (narrower < config.hdi_mass - 1e-9).all()

    def test_rerun_is_bit_identical(self, result):
        rng = np.random.default_rng(2020)
        counts = rng.poisson(np.linspace(20, 200, 60))
        again = run_region(make_series(counts), RtConfig())

        pd.testing.assert_frame_equal(result.smoothed_frame(), again.smoothed_frame(), check_exact=True)
        pd.testing.assert_frame_equal(result.posterior_frame(), again.posterior_frame(), check_exact=True)
        pd.testing.assert_frame_equal(result.estimate_frame(), again.estimate_frame(), check_exact=True)

    def test_output_tables(self, result):
        assert len(result.posterior_frame()) == len(result.posterior) * 1001
        assert list(result.estimate_frame().columns) == [
            "date", "rt_mle", "rt_lower", "rt_upper", "has_estimate",
        ]


class TestGrowthConvergence:
    """Sustained exponential growth at rate g gives Rt near 1 + g / gamma."""

    @pytest.mark.parametrize("growth_rate", [-0.05, 0.05, 0.1])
    def test_rt_matches_growth_rate(self, growth_rate):
        config = RtConfig()
        counts = exponential_counts(40, growth_rate)
        result = run_region(make_series(counts), config)

        expected = 1 + growth_rate / config.gamma
        # away from both edges of the smoothing window
        for day in result.smoothed.dates[15:35]:
            assert result.estimates.get(day).rt_mle == pytest.approx(expected, abs=0.02)

    def test_other_serial_interval(self):
        config = RtConfig(gamma=1 / 7)
        counts = exponential_counts(40, 0.05)
        result = run_region(make_series(counts), config)

        day = result.smoothed.dates[25]
        assert result.estimates.get(day).rt_mle == pytest.approx(1.35, abs=0.02)


class TestDegenerateDays:
    """Evidence that no candidate Rt can explain gives no estimate."""

    def test_sudden_jump_gives_missing_estimates(self):
        counts = [1] * 10 + [1_000_000] * 10
        result = run_region(make_series(counts), RtConfig())
        frame = result.estimate_frame()

        assert result.posterior.degenerate.any()
        assert frame["rt_mle"].isna().tolist() == list(result.posterior.degenerate)
        assert frame["has_estimate"].tolist() == list(~result.posterior.degenerate)

        zero_rows = result.posterior.posterior[result.posterior.degenerate]
        assert (zero_rows == 0).all()


class TestSampledIntervals:
    """Monte Carlo intervals are reproducible for a given seed."""

    def test_same_seed_same_output(self):
        config = RtConfig(interval_method="sample", seed=42, n_samples=2000)
        series = make_series(FLAT_THEN_DOUBLED)

        first = run_region(series, config).estimate_frame()
        second = run_region(series, config).estimate_frame()

        pd.testing.assert_frame_equal(first, second, check_exact=True)

    def test_point_estimate_does_not_depend_on_method(self):
        series = make_series(FLAT_THEN_DOUBLED)
        sampled = run_region(series, RtConfig(interval_method="sample", seed=1, n_samples=2000))
        analytic = run_region(series, RtConfig())

        assert sampled.estimate_frame()["rt_mle"].equals(analytic.estimate_frame()["rt_mle"])


class TestMultipleRegions:
    """Regions are processed independently."""

    def test_results_keyed_by_region(self):
        batch = run_regions(
            {"A": make_series([10] * 14), "B": make_series(FLAT_THEN_DOUBLED)},
            RtConfig(),
        )

        assert list(batch.results) == ["A", "B"]
        assert batch.errors == {}
        assert batch["A"].region == "A"
        assert batch["B"].estimates.region == "B"

    def test_mapping_key_overrides_series_label(self):
        """Results and combined frames agree on the key a series was passed under."""
        batch = run_regions({"A": make_series([10] * 8, region="NY")}, RtConfig())

        assert list(batch.results) == ["A"]
        assert batch["A"].region == "A"
        assert batch["A"].smoothed.region == "A"
        assert batch["A"].estimates.region == "A"
        assert set(batch.estimate_frame()["region"]) == {"A"}

    def test_explicit_region_overrides_series_label(self):
        result = run_region(make_series([10] * 8, region="NY"), RtConfig(), region="CA")

        assert result.region == "CA"
        assert result.estimates.region == "CA"

    def test_bad_region_does_not_stop_others(self):
        batch = run_regions(
            {
                "good": make_series(FLAT_THEN_DOUBLED),
                "negative": make_series([5, -1, 5]),
                "empty": [],
                "also_good": make_series([10] * 10),
            },
            RtConfig(),
        )

        assert list(batch.results) == ["good", "also_good"]
        assert list(batch.errors) == ["negative", "empty"]
        assert "non-negative" in batch.errors["negative"]

    def test_region_result_matches_single_run(self):
        series = make_series(FLAT_THEN_DOUBLED)
        batch = run_regions({"A": series, "B": make_series([3] * 10)}, RtConfig())
        alone = run_region(make_series(FLAT_THEN_DOUBLED), RtConfig())

        pd.testing.assert_frame_equal(
            batch["A"].estimate_frame(), alone.estimate_frame(), check_exact=True
        )

    def test_thread_pool_matches_sequential(self):
        inputs = {
            "A": make_series(FLAT_THEN_DOUBLED),
            "B": make_series(list(exponential_counts(30, 0.05))),
            "C": make_series([4, -4]),
        }
        sequential = run_regions(inputs, RtConfig())
        parallel = run_regions(inputs, RtConfig(), max_workers=3)

        assert list(parallel.results) == list(sequential.results)
        assert parallel.errors == sequential.errors
        pd.testing.assert_frame_equal(
            parallel.estimate_frame(), sequential.estimate_frame(), check_exact=True
        )

    def test_accepts_pandas_series_and_records(self):
        dates = make_dates(10)
        batch = run_regions(
            {
                "series": pd.Series([10] * 10, index=pd.DatetimeIndex(dates)),
                "records": list(zip(dates, [10] * 10)),
            },
            RtConfig(),
        )

        assert set(batch.results) == {"series", "records"}
        pd.testing.assert_frame_equal(
            batch["series"].estimate_frame(), batch["records"].estimate_frame()
        )

    def test_combined_frame_has_region_column(self):
        batch = run_regions(
            {"A": make_series([10] * 8), "B": make_series([20] * 8)}, RtConfig()
        )
        frame = batch.estimate_frame()

        assert frame.columns[0] == "region"
        assert frame["region"].tolist() == ["A"] * 7 + ["B"] * 7
        assert len(batch.smoothed_frame()) == 16


class TestSplitRegions:
    """Wide tables are split into one series per region."""

    @pytest.fixture
    def wide(self):
        dates = make_dates(10)
        frame = pd.DataFrame({"Date": dates})
        for i, region in enumerate(WIDE_REGIONS):
            frame[region] = [10 * (i + 1)] * 10
        return frame.iloc[::-1].reset_index(drop=True)

    def test_all_regions(self, wide):
        series = split_regions(wide)

        assert list(series) == WIDE_REGIONS
        assert isinstance(series["NY"], CaseSeries)
        assert series["CA"].region == "CA"
        assert (series["MI"].counts == 30).all()

    def test_rows_sorted_by_date(self, wide):
        series = split_regions(wide, regions=["NY"])

        assert series["NY"].dates.is_monotonic_increasing

    def test_unknown_region(self, wide):
        with pytest.raises(InputError):
            split_regions(wide, regions=["TX"])

    def test_missing_date_column(self, wide):
        with pytest.raises(InputError):
            split_regions(wide, date_column="day")

    def test_end_to_end(self, wide):
        batch = run_regions(split_regions(wide), RtConfig())

        assert list(batch.results) == WIDE_REGIONS
        for region in WIDE_REGIONS:
            frame = batch[region].estimate_frame()
            assert frame["rt_mle"].astype(float).between(0.9, 1.1).all()
