"""
Unit tests for Training Load Analyzer

Tests ATL, CTL, TSB calculations, form classification, ramp rate,
ride accumulation, insights, projection and export.
"""

import math
from datetime import date, datetime, timedelta

import pytest

from ride_analytics.core.exceptions import ConfigurationError, InvalidInputError
from ride_analytics.models import DailyTrainingLoad, RideRecord
from ride_analytics.services.readiness import PhysiologicalReadiness
from ride_analytics.services.training_load import (
    PERIOD_MONTH,
    PERIOD_WEEK,
    FormStatus,
    InsightPriority,
    RampRateStatus,
    TrainingLoadAnalyzer,
    TrendDirection,
    classify_form,
    classify_ramp_rate,
    get_form_info,
    trend_direction,
)


CTL_DECAY = math.exp(-1 / 42)
ATL_DECAY = math.exp(-1 / 7)


@pytest.fixture
def analyzer():
    return TrainingLoadAnalyzer(weekly_target=350)


class TestFormClassification:
    """Test TSB -> form bins and their boundaries."""

    @pytest.mark.parametrize("tsb,expected", [
        (-40.0, FormStatus.OVERREACHED),
        (-20.01, FormStatus.OVERREACHED),
        (-20.0, FormStatus.BUILDING),
        (-5.01, FormStatus.BUILDING),
        (-5.0, FormStatus.NEUTRAL),
        (0.0, FormStatus.NEUTRAL),
        (10.0, FormStatus.NEUTRAL),
        (10.01, FormStatus.FRESH),
        (25.0, FormStatus.FRESH),
        (25.01, FormStatus.VERY_FRESH),
    ])
    def test_bins(self, tsb, expected):
        assert classify_form(tsb) == expected

    def test_missing_tsb_is_unknown(self):
        assert classify_form(None) == FormStatus.UNKNOWN

    def test_form_info_labels(self):
        assert get_form_info(-30).label == "Overreached"
        assert get_form_info(30).label == "Very Fresh"
        assert get_form_info(None).color == "gray"


class TestTrendAndRamp:
    @pytest.mark.parametrize("delta,expected", [
        (1.0, TrendDirection.STABLE),
        (1.01, TrendDirection.UP),
        (-1.0, TrendDirection.STABLE),
        (-1.01, TrendDirection.DOWN),
    ])
    def test_trend_threshold(self, delta, expected):
        assert trend_direction(delta) == expected

    @pytest.mark.parametrize("ramp,expected", [
        (-10.0, RampRateStatus.DETRAINING),
        (-5.0, RampRateStatus.TAPERING),
        (0.0, RampRateStatus.MAINTAINING),
        (6.0, RampRateStatus.BUILDING_SAFELY),
        (8.0, RampRateStatus.BUILDING_SAFELY),
        (9.0, RampRateStatus.BUILDING_TOO_FAST),
    ])
    def test_ramp_rate_status(self, ramp, expected):
        assert classify_ramp_rate(ramp) == expected


class TestRecalculate:
    """Test the exponential moving averages."""

    def test_first_day_seeds_both_averages(self, analyzer, make_series):
        series = analyzer.recalculate(make_series([100]))
        assert series[0].ctl == 100
        assert series[0].atl == 100
        assert series[0].tsb == 0

    def test_one_decay_step(self, analyzer, make_series):
        """A rest day after 100 TSS decays by the 42- and 7-day constants."""
        series = analyzer.recalculate(make_series([100, 0]))
        assert series[1].ctl == pytest.approx(100 * CTL_DECAY)
        assert series[1].atl == pytest.approx(100 * ATL_DECAY)

    def test_atl_responds_faster_than_ctl(self, analyzer, make_series):
        series = analyzer.recalculate(make_series([50] + [150] * 5))
        latest = series[-1]
        assert latest.atl > latest.ctl
        assert latest.tsb < 0

    def test_constant_load_stays_flat(self, analyzer, make_series):
        series = analyzer.recalculate(make_series([50] * 100))
        assert series[-1].ctl == pytest.approx(50)
        assert series[-1].atl == pytest.approx(50)
        assert series[-1].tsb == pytest.approx(0)

    def test_converges_to_constant_load(self, analyzer, make_series):
        series = analyzer.recalculate(make_series([0] + [80] * 400))
        assert series[-1].ctl == pytest.approx(80, abs=0.01)
        assert series[-1].atl == pytest.approx(80, abs=0.01)
        assert abs(series[-1].tsb) < 0.01

    def test_convergence_is_monotonic(self, analyzer, make_series):
        series = analyzer.recalculate(make_series([0] + [100] * 42))
        ctl = [load.ctl for load in series]
        atl = [load.atl for load in series]
        assert all(a < b for a, b in zip(ctl, ctl[1:]))
        assert all(a < b for a, b in zip(atl, atl[1:]))
        assert all(value < 100 for value in ctl + atl)

    def test_sorts_by_date(self, analyzer, make_series):
        series = make_series([10, 20, 30])
        result = analyzer.recalculate(list(reversed(series)))
        assert [load.date for load in result] == [load.date for load in series]
        assert result[0].ctl == 10

    def test_input_not_mutated(self, analyzer, make_series):
        series = make_series([100, 50])
        analyzer.recalculate(series)
        assert series[0].ctl is None
        assert series[1].atl is None

    def test_stored_values_ignored(self, analyzer):
        """CTL/ATL already on the input are recomputed from TSS."""
        loads = [DailyTrainingLoad(date=date(2025, 1, 1), tss=40.0, ctl=999.0, atl=999.0)]
        assert analyzer.recalculate(loads)[0].ctl == 40.0


class TestFillMissingDays:
    def test_gaps_become_rest_days(self, analyzer):
        loads = [
            DailyTrainingLoad(date=date(2025, 1, 1), tss=100.0),
            DailyTrainingLoad(date=date(2025, 1, 4), tss=50.0),
        ]
        filled = analyzer.fill_missing_days(loads)
        assert [load.date.day for load in filled] == [1, 2, 3, 4]
        assert [load.tss for load in filled] == [100.0, 0.0, 0.0, 50.0]
        assert filled[2].ctl == pytest.approx(100 * CTL_DECAY ** 2)

    def test_extends_through_date(self, analyzer, make_series):
        filled = analyzer.fill_missing_days(make_series([100]), through=date(2025, 1, 8))
        assert len(filled) == 8
        assert filled[-1].atl == pytest.approx(100 * ATL_DECAY ** 7)

    def test_empty(self, analyzer):
        assert analyzer.fill_missing_days([]) == []


class TestRideAccumulation:
    def test_add_ride_creates_day(self, analyzer):
        ride = RideRecord(start_time=datetime(2025, 3, 1, 7, 30), tss=85.0, duration_s=5400, distance_m=45000)
        result = analyzer.add_ride([], ride)
        assert len(result) == 1
        assert result[0].date == date(2025, 3, 1)
        assert result[0].tss == 85.0
        assert result[0].ride_count == 1
        assert result[0].ctl == 85.0

    def test_add_ride_accumulates_same_day(self, analyzer):
        morning = RideRecord(start_time=datetime(2025, 3, 1, 7, 0), tss=60.0, duration_s=3600, distance_m=30000)
        evening = RideRecord(start_time=datetime(2025, 3, 1, 18, 0), tss=40.0, duration_s=1800, distance_m=15000)
        result = analyzer.add_ride(analyzer.add_ride([], morning), evening)
        assert len(result) == 1
        assert result[0].tss == 100.0
        assert result[0].ride_count == 2
        assert result[0].total_duration_s == 5400
        assert result[0].total_distance_m == 45000

    def test_negative_tss_rejected(self, analyzer):
        with pytest.raises(InvalidInputError) as exc:
            analyzer.add_ride([], RideRecord(start_time=datetime(2025, 3, 1), tss=-5.0))
        assert exc.value.field == "tss"

    def test_remove_ride(self, analyzer):
        first = RideRecord(start_time=datetime(2025, 3, 1, 7, 0), tss=60.0)
        second = RideRecord(start_time=datetime(2025, 3, 1, 18, 0), tss=40.0)
        loads = analyzer.add_ride(analyzer.add_ride([], first), second)

        after_one = analyzer.remove_ride(loads, second)
        assert after_one[0].tss == 60.0
        assert after_one[0].ride_count == 1

        assert analyzer.remove_ride(after_one, first) == []


class TestAnalyze:
    def test_empty_series(self, analyzer):
        assert analyzer.analyze([]) is None

    def test_single_entry(self, analyzer, make_series):
        """Cold start: CTL = ATL = TSS, ramp 0, neutral."""
        summary = analyzer.analyze(make_series([100]))
        assert summary.current_ctl == 100
        assert summary.current_atl == 100
        assert summary.current_tsb == 0
        assert summary.ramp_rate == 0
        assert summary.form_status == FormStatus.NEUTRAL
        assert summary.ctl_trend == TrendDirection.STABLE
        assert summary.atl_trend == TrendDirection.STABLE
        assert summary.weekly_tss == 100

    def test_ramp_rate_uses_entry_seven_days_before(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([0] * 7 + [100]))
        expected_ctl = 100 * (1 - CTL_DECAY)
        assert summary.ramp_rate == pytest.approx(expected_ctl)
        assert summary.ctl_trend == TrendDirection.UP
        assert summary.atl_trend == TrendDirection.UP

    def test_ramp_rate_zero_without_entry_seven_days_before(self, analyzer):
        """Gaps aren't filled; a missing comparison day means ramp 0."""
        loads = [
            DailyTrainingLoad(date=date(2025, 1, 1), tss=0.0),
            DailyTrainingLoad(date=date(2025, 1, 9), tss=100.0),
        ]
        summary = analyzer.analyze(loads)
        assert summary.current_ctl == pytest.approx(100 * (1 - CTL_DECAY))
        assert summary.ramp_rate == 0
        assert summary.ctl_trend == TrendDirection.STABLE

    def test_weekly_tss_is_trailing_seven_days(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([10] * 10))
        assert summary.weekly_tss == 70

    def test_weekly_tss_window_edge(self, analyzer):
        """Day -6 is inside the window, day -7 is not."""
        as_of = date(2025, 1, 10)
        loads = [
            DailyTrainingLoad(date=as_of - timedelta(days=7), tss=500.0),
            DailyTrainingLoad(date=as_of - timedelta(days=6), tss=40.0),
            DailyTrainingLoad(date=as_of, tss=60.0),
        ]
        assert analyzer.analyze(loads).weekly_tss == 100.0

    def test_as_of_ignores_later_entries(self, analyzer, make_series):
        series = make_series([50] * 10 + [300])
        summary = analyzer.analyze(series, as_of=date(2025, 1, 10))
        assert summary.as_of == date(2025, 1, 10)
        assert summary.current_ctl == pytest.approx(50)

    def test_tsb_is_ctl_minus_atl(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([40, 80, 120, 0, 60]))
        assert summary.current_tsb == pytest.approx(summary.current_ctl - summary.current_atl)


class TestRecommendations:
    def test_overreached(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([20] * 50 + [150] * 5))
        assert summary.form_status == FormStatus.OVERREACHED
        assert summary.recommendation.startswith("Take 2-3 rest days")

    def test_fresh_but_detraining(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([100] * 60 + [0] * 7))
        assert summary.form_status == FormStatus.VERY_FRESH
        assert summary.ramp_rate < -5
        assert summary.recommendation.startswith("You're fresh but detraining")

    def test_maintaining(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([50] * 30))
        assert summary.recommendation.startswith("Maintaining current fitness level")
        assert summary.is_safe_ramp_rate


class TestInsights:
    def test_no_data(self, analyzer):
        insights = analyzer.insights(None)
        assert len(insights) == 1
        assert insights[0].title == "No Training Data"

    def test_overreached_sorted_by_priority(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([20] * 50 + [150] * 5))
        insights = analyzer.insights(summary)
        assert [i.title for i in insights] == [
            "High Fatigue Level",
            "Building Too Fast",
            "Fatigue Exceeds Fitness",
        ]
        assert insights[0].priority == InsightPriority.CRITICAL

    def test_fresh_without_readiness(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([100] * 60 + [0] * 7))
        titles = [i.title for i in analyzer.insights(summary)]
        assert titles == ["Fitness Declining", "Low Training Volume", "Well Recovered"]

    def test_readiness_mismatch(self, analyzer, make_series):
        """Positive form with suppressed HRV is flagged before anything else."""
        summary = analyzer.analyze(make_series([100] * 60 + [0] * 7))
        readiness = PhysiologicalReadiness(latest_hrv=40, average_hrv=60)
        insights = analyzer.insights(summary, readiness)
        assert insights[0].title == "Readiness Mismatch"
        assert insights[0].priority == InsightPriority.CRITICAL
        assert "HRV is 40ms (well below your avg of 60ms)." in insights[0].message
        assert "Well Recovered" not in [i.title for i in insights]

    def test_primed_for_performance(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([50] * 30))
        readiness = PhysiologicalReadiness(
            latest_hrv=70, average_hrv=60, sleep_duration_s=8 * 3600,
        )
        assert [i.title for i in analyzer.insights(summary, readiness)] == ["Primed for Performance"]

    def test_inadequate_recovery(self, analyzer, make_series):
        summary = analyzer.analyze(make_series([20] * 50 + [150] * 5))
        readiness = PhysiologicalReadiness(sleep_duration_s=5 * 3600)
        insights = analyzer.insights(summary, readiness)
        titles = [i.title for i in insights]
        assert titles[0] == "High Fatigue Level"
        assert "Inadequate Recovery" in titles
        recovery = next(i for i in insights if i.title == "Inadequate Recovery")
        assert "only slept 5 hours" in recovery.message


class TestWeeklyViews:
    def test_weekly_progress(self, make_series):
        progress = TrainingLoadAnalyzer(weekly_target=500).weekly_progress(make_series([50] * 30))
        assert progress.weekly_tss == 350
        assert progress.completion == pytest.approx(0.7)

    def test_weekly_progress_completion_capped(self, analyzer, make_series):
        assert analyzer.weekly_progress(make_series([100] * 10)).completion == 1.0

    def test_weekly_progress_empty(self, analyzer):
        assert analyzer.weekly_progress([]) is None

    def test_default_target_from_settings(self):
        assert TrainingLoadAnalyzer().weekly_target == 350

    @pytest.mark.parametrize("target", [0, -100])
    def test_non_positive_target_rejected(self, target):
        """A zero target would make completion divide by zero."""
        with pytest.raises(ConfigurationError) as exc:
            TrainingLoadAnalyzer(weekly_target=target)
        assert exc.value.field == "weekly_target"

    def test_weekly_stats(self, analyzer, make_series):
        stats = analyzer.weekly_stats(make_series([50, 0, 50, 50, 0, 50, 50, 50, 0, 50]))
        assert stats.ride_days == 5
        assert stats.total_hours == pytest.approx(5.0)
        assert stats.total_distance_km == pytest.approx(150.0)
        assert stats.total_distance_miles == pytest.approx(150000 / 1609.344)

    def test_weekly_stats_empty(self, analyzer):
        stats = analyzer.weekly_stats([])
        assert stats.ride_days == 0
        assert stats.fitness_change == 0.0

    def test_loads_for_period_newest_first(self, analyzer, make_series):
        series = make_series([10] * 60)
        as_of = series[-1].date
        week = analyzer.loads_for_period(series, PERIOD_WEEK, as_of)
        assert week[0].date == as_of
        assert all(as_of - timedelta(days=7) <= load.date <= as_of for load in week)
        assert len(analyzer.loads_for_period(series, PERIOD_MONTH, as_of)) == 31


class TestProjection:
    def test_rest_days_decay(self, analyzer, make_series):
        projection = analyzer.project(make_series([50] * 30), days_ahead=14)
        assert len(projection) == 14
        assert projection[0].date == date(2025, 1, 31)
        assert projection[0].ctl == pytest.approx(50 * CTL_DECAY)
        assert projection[0].atl == pytest.approx(50 * ATL_DECAY)
        assert projection[-1].tsb > projection[0].tsb

    def test_planned_load_holds_steady(self, analyzer, make_series):
        projection = analyzer.project(make_series([50] * 30), days_ahead=5, planned_tss_per_day=[50] * 5)
        assert all(day.ctl == pytest.approx(50) for day in projection)
        assert all(day.form_status == FormStatus.NEUTRAL for day in projection)

    def test_empty(self, analyzer):
        assert analyzer.project([]) == []


class TestExportCSV:
    def test_rows(self, analyzer, make_series):
        lines = analyzer.export_csv(make_series([100, 0])).splitlines()
        assert lines[0] == "Date,TSS,ATL,CTL,TSB,Rides,Distance(km),Duration(min)"
        assert lines[1] == "2025-01-01,100,100.0,100.0,0.0,1,30.0,60"
        assert lines[2] == "2025-01-02,0,86.7,97.6,11.0,0,0.0,0"

    def test_header_only_when_empty(self, analyzer):
        assert analyzer.export_csv([]) == "Date,TSS,ATL,CTL,TSB,Rides,Distance(km),Duration(min)\n"
