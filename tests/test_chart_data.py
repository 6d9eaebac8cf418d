"""Tests for chart bucketing across periods."""

import math
from datetime import date, timedelta

import pytest

from healthmate_sleep.core.analysis.chart_data import build_chart_data
from healthmate_sleep.core.models.output_models import ChartPeriod


def _assert_no_nan(buckets):
    for bucket in buckets:
        for value in (bucket.value, bucket.quality, bucket.efficiency):
            assert not math.isnan(value)


def test_week_has_seven_buckets_oldest_first(make_session, now):
    sessions = [make_session("2024-04-28"), make_session("2024-04-30", wake_time="06:00")]

    buckets = build_chart_data(ChartPeriod.WEEK, sessions, now)

    assert len(buckets) == 7
    assert [b.date for b in buckets] == [date(2024, 4, 24) + timedelta(days=i) for i in range(7)]
    assert buckets[-1].has_data
    assert buckets[-1].duration == 420
    assert buckets[-1].value == 7.0
    assert buckets[4].has_data
    assert buckets[4].label == "Sun"
    assert not buckets[0].has_data
    _assert_no_nan(buckets)


def test_week_without_sessions_is_all_empty(now):
    buckets = build_chart_data("week", [], now)

    assert len(buckets) == 7
    assert all(not b.has_data for b in buckets)
    assert all(b.value == 0 and b.quality == 0 and b.efficiency == 0 for b in buckets)
    _assert_no_nan(buckets)


def test_daily_bucket_defaults_missing_efficiency(make_session, now):
    sessions = [make_session("2024-04-30", efficiency=None)]

    bucket = build_chart_data("week", sessions, now)[-1]

    assert bucket.efficiency == 80


def test_month_has_one_bucket_per_day(make_session, now):
    buckets = build_chart_data("month", [make_session("2024-04-15")], now)

    assert len(buckets) == 30
    assert buckets[0].date == date(2024, 4, 1)
    assert buckets[-1].date == date(2024, 4, 30)
    assert buckets[14].has_data
    assert buckets[14].label == "15"
    assert sum(b.has_data for b in buckets) == 1


def test_day_uses_todays_session(make_session, now):
    sessions = [make_session("2024-04-29"), make_session("2024-04-30", bedtime="22:30")]

    buckets = build_chart_data("day", sessions, now)

    assert len(buckets) == 1
    assert buckets[0].date == date(2024, 4, 30)
    assert buckets[0].bedtime == "22:30"


def test_day_falls_back_to_most_recent_session(make_session, now):
    sessions = [make_session("2024-04-20"), make_session("2024-04-27", bedtime="00:30", wake_time="08:00")]

    buckets = build_chart_data("day", sessions, now)

    assert len(buckets) == 1
    assert buckets[0].date == date(2024, 4, 27)
    assert buckets[0].duration == 450


def test_day_without_sessions_is_empty(now):
    assert build_chart_data("day", [], now) == []


def test_six_month_sums_durations(make_session, now):
    sessions = [
        make_session("2024-04-01", bedtime="00:00", wake_time="07:00", efficiency=80.0),
        make_session("2024-04-02", bedtime="00:00", wake_time="07:30", efficiency=90.0),
        make_session("2024-04-03", bedtime="00:00", wake_time="08:00", efficiency=85.0),
    ]

    buckets = build_chart_data("6month", sessions, now)

    assert len(buckets) == 6
    assert [b.label for b in buckets] == ["Nov", "Dec", "Jan", "Feb", "Mar", "Apr"]
    assert buckets[0].date == date(2023, 11, 1)
    april = buckets[-1]
    assert april.value == 22.5
    assert april.duration == 1350
    assert april.days_with_data == 3
    assert april.has_data
    assert april.efficiency == 85.0
    assert april.quality == 5.0
    assert all(not b.has_data and b.days_with_data == 0 for b in buckets[:-1])
    _assert_no_nan(buckets)


def test_six_month_ignores_sessions_outside_window(make_session, now):
    buckets = build_chart_data("6month", [make_session("2023-09-15")], now)

    assert all(not b.has_data for b in buckets)


def test_year_has_twelve_calendar_months(make_session, now):
    sessions = [make_session("2024-01-10"), make_session("2024-04-30"), make_session("2023-12-31")]

    buckets = build_chart_data("year", sessions, now)

    assert len(buckets) == 12
    assert [b.date for b in buckets] == [date(2024, month, 1) for month in range(1, 13)]
    assert buckets[0].days_with_data == 1
    assert buckets[3].days_with_data == 1
    assert buckets[11].days_with_data == 0
    assert sum(b.days_with_data for b in buckets) == 2
    _assert_no_nan(buckets)


def test_unknown_period_is_rejected(now):
    with pytest.raises(ValueError):
        build_chart_data("fortnight", [], now)
