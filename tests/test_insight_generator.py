"""Tests for rule-based insight generation."""

from datetime import timedelta

from conftest import TODAY

from healthmate_sleep.core.models.data_models import SleepGoals
from healthmate_sleep.core.models.output_models import InsightType
from healthmate_sleep.core.recommendation.insight_generator import generate_insights


def _ids(insights):
    return [i.id for i in insights]


def test_no_sessions_no_insights(goals, now):
    assert generate_insights([], goals, now) == []


def test_good_week_insights(week_of_sessions, goals, now):
    insights = generate_insights(week_of_sessions, goals, now)

    assert _ids(insights) == ["sleep-duration-good", "efficiency-excellent", "quality-good", "consistency-good"]
    assert all(i.type == InsightType.POSITIVE for i in insights)
    assert all(i.created_at == now for i in insights)
    assert insights[0].title == "Great Sleep Duration!"
    assert "8.0 hours" in insights[0].description


def test_insight_ids_are_stable_across_runs(week_of_sessions, goals, now):
    first = generate_insights(week_of_sessions, goals, now)
    second = generate_insights(week_of_sessions, goals)

    assert _ids(first) == _ids(second)
    assert len(set(_ids(first))) == len(first)


def test_short_nights_below_goal(make_session, now):
    sessions = [make_session(TODAY - timedelta(days=d), bedtime="01:00", wake_time="07:00") for d in range(7)]

    insights = generate_insights(sessions, SleepGoals(target_sleep_hours=8), now)

    low = next(i for i in insights if i.id == "sleep-duration-low")
    assert low.type == InsightType.WARNING
    assert "2.0h below" in low.description
    assert "quality-good" not in _ids(insights)


def test_poor_efficiency_and_consistency(make_session, goals, now):
    sessions = [make_session(TODAY - timedelta(days=d), efficiency=60.0) for d in range(7)]

    ids = _ids(generate_insights(sessions, goals, now))

    assert "efficiency-poor" in ids
    assert "consistency-poor" in ids
    assert "efficiency-excellent" not in ids


def test_middle_efficiency_produces_no_efficiency_insight(make_session, goals, now):
    sessions = [make_session(TODAY - timedelta(days=d), efficiency=75.0) for d in range(7)]

    ids = _ids(generate_insights(sessions, goals, now))

    assert not any(i.startswith("efficiency-") for i in ids)


def test_only_the_latest_week_is_considered(make_session, goals, now):
    recent = [make_session(TODAY - timedelta(days=d), efficiency=94.0) for d in range(7)]
    older = [make_session(TODAY - timedelta(days=d), efficiency=55.0) for d in range(7, 10)]

    ids = _ids(generate_insights(older + recent, goals, now))

    assert "efficiency-excellent" in ids


def test_weekend_pattern(make_session, goals, now):
    # 2024-04-27 and 2024-04-28 are the weekend
    sessions = [
        make_session(TODAY - timedelta(days=d), bedtime="23:30" if d in (2, 3) else "22:00", wake_time="07:00")
        for d in range(7)
    ]

    insights = generate_insights(sessions, goals, now)

    weekend = next(i for i in insights if i.id == "weekend-pattern")
    assert weekend.type == InsightType.NEUTRAL
    assert "90 minutes later" in weekend.description


def test_no_weekend_pattern_for_small_shift(make_session, goals, now):
    sessions = [
        make_session(TODAY - timedelta(days=d), bedtime="23:20" if d in (2, 3) else "23:00")
        for d in range(7)
    ]

    assert "weekend-pattern" not in _ids(generate_insights(sessions, goals, now))


def test_default_goals_when_none(week_of_sessions, now):
    assert "sleep-duration-good" in _ids(generate_insights(week_of_sessions, None, now))
