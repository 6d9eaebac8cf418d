"""Tests for rolling averages, consistency and trends."""

from datetime import timedelta

from conftest import TODAY

from healthmate_sleep.core.analysis.sleep_stats import compute_stats
from healthmate_sleep.core.models.output_models import BedtimeTrend, DurationTrend, PeriodAverage, SleepTrends


def test_empty_history_returns_zero_state(now):
    stats = compute_stats([], now=now)

    assert stats.weekly_average == PeriodAverage()
    assert stats.monthly_average == PeriodAverage()
    assert stats.weekly_average.bedtime == "22:00"
    assert stats.weekly_average.wake_time == "07:00"
    assert stats.consistency == 0
    assert stats.trends == SleepTrends()


def test_weekly_and_monthly_windows(make_session, now):
    sessions = [
        make_session("2024-04-30", bedtime="23:00", wake_time="07:00"),
        make_session("2024-04-24", bedtime="23:30", wake_time="06:30"),
        make_session("2024-04-23", bedtime="01:00", wake_time="07:00"),
    ]

    stats = compute_stats(sessions, now=now)

    # 2024-04-23 at midnight falls before now - 7 days
    assert stats.weekly_average.duration == 450
    assert stats.weekly_average.bedtime == "23:15"
    assert stats.weekly_average.wake_time == "06:45"
    assert stats.monthly_average.duration == 420


def test_average_quality_and_efficiency(make_session, now):
    sessions = [
        make_session("2024-04-30", efficiency=90.0, quality=5),
        make_session("2024-04-29", efficiency=None, quality=3),
    ]

    stats = compute_stats(sessions, now=now)

    assert stats.weekly_average.quality == 4
    assert stats.weekly_average.sleep_efficiency == 85


def test_consistency_counts_efficient_nights(make_session, now):
    sessions = [
        make_session(TODAY - timedelta(days=offset), efficiency=85.0 if offset < 6 else 70.0)
        for offset in range(10)
    ]

    assert compute_stats(sessions, now=now).consistency == 60


def test_missing_efficiency_counts_as_consistent(make_session, now):
    sessions = [make_session("2024-04-30", efficiency=None), make_session("2024-04-29", efficiency=60.0)]

    assert compute_stats(sessions, now=now).consistency == 50


def test_trends_stay_flat_with_fewer_than_fifteen_sessions(make_session, now):
    sessions = [
        make_session(TODAY - timedelta(days=offset), wake_time="08:00" if offset < 7 else "05:00")
        for offset in range(14)
    ]

    assert compute_stats(sessions, now=now).trends == SleepTrends()


def _two_blocks(make_session, recent, prior):
    return [
        make_session(TODAY - timedelta(days=offset), **(recent if offset < 14 else prior))
        for offset in range(28)
    ]


def test_trends_improving_and_later(make_session, now):
    sessions = _two_blocks(
        make_session,
        recent={"bedtime": "23:00", "wake_time": "08:00", "efficiency": 90.0},
        prior={"bedtime": "22:30", "wake_time": "06:00", "efficiency": 80.0},
    )

    trends = compute_stats(sessions, now=now).trends

    assert trends.sleep_duration_trend == DurationTrend.IMPROVING
    assert trends.bedtime_trend == BedtimeTrend.LATER
    assert trends.efficiency_trend == DurationTrend.IMPROVING


def test_trends_declining_and_earlier(make_session, now):
    sessions = _two_blocks(
        make_session,
        recent={"bedtime": "22:00", "wake_time": "05:00", "efficiency": 70.0},
        prior={"bedtime": "23:00", "wake_time": "07:00", "efficiency": 90.0},
    )

    trends = compute_stats(sessions, now=now).trends

    assert trends.sleep_duration_trend == DurationTrend.DECLINING
    assert trends.bedtime_trend == BedtimeTrend.EARLIER
    assert trends.efficiency_trend == DurationTrend.DECLINING


def test_trend_changes_at_threshold_are_stable(make_session, now):
    sessions = _two_blocks(
        make_session,
        recent={"bedtime": "23:15", "wake_time": "07:15", "efficiency": 85.0},
        prior={"bedtime": "23:00", "wake_time": "06:45", "efficiency": 80.0},
    )

    trends = compute_stats(sessions, now=now).trends

    # duration +15, bedtime +15, efficiency +5: none exceed their threshold
    assert trends == SleepTrends()


def test_circular_clock_average(make_session, now):
    sessions = [
        make_session("2024-04-30", bedtime="23:50", wake_time="07:00"),
        make_session("2024-04-29", bedtime="00:10", wake_time="07:00"),
    ]

    assert compute_stats(sessions, now=now).weekly_average.bedtime == "12:00"
    assert compute_stats(sessions, now=now, circular_clock=True).weekly_average.bedtime == "00:00"
