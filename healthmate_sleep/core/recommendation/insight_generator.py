"""
Module for generating short sleep insights from recent sessions and goals.

Every rule is checked on each pass and emits at most one insight with a fixed
id, so regenerating replaces the previous set instead of growing it.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

import pandas as pd

from healthmate_sleep.core.analysis.sleep_stats import calculate_consistency
from healthmate_sleep.core.data_processing.preprocessing import preprocess_sessions
from healthmate_sleep.core.models.data_models import SleepGoals, SleepSession
from healthmate_sleep.core.models.output_models import SleepInsight
from healthmate_sleep.utils.constants import insight_settings, insight_styles

logger = logging.getLogger(__name__)


def generate_insights(
    sessions: Sequence[SleepSession],
    goals: Optional[SleepGoals] = None,
    now: Optional[datetime] = None,
) -> List[SleepInsight]:
    """
    Generate insights from the most recent sessions.

    Args:
        sessions: Snapshot of sleep sessions in any order
        goals: Active sleep goals; defaults are used when absent
        now: Timestamp stamped on each insight

    Returns:
        list: SleepInsight objects in rule order (empty without sessions)
    """
    data = preprocess_sessions(sessions)
    if data.empty:
        return []

    goals = goals or SleepGoals()
    created_at = now or datetime.now()
    recent = data.head(insight_settings['window_sessions'])

    insights = []
    insights.extend(_duration_insights(recent, goals))
    insights.extend(_efficiency_insights(recent))
    insights.extend(_quality_insights(recent))
    insights.extend(_consistency_insights(data))
    insights.extend(_weekend_insights(recent))

    logger.debug(f"Generated {len(insights)} insights from {len(recent)} recent sessions")
    return [_build_insight(insight_id, description, created_at) for insight_id, description in insights]


def _build_insight(insight_id: str, description: str, created_at: datetime) -> SleepInsight:
    style = insight_styles[insight_id]
    return SleepInsight(id=insight_id, description=description, created_at=created_at, **style)


def _duration_insights(recent: pd.DataFrame, goals: SleepGoals):
    avg_duration = recent['duration'].mean()
    target_minutes = goals.target_sleep_hours * 60
    target_label = f"{goals.target_sleep_hours:g}"

    if avg_duration >= target_minutes:
        return [(
            'sleep-duration-good',
            f"You're averaging {avg_duration / 60:.1f} hours of sleep, meeting your {target_label}h goal."
        )]

    deficit = (target_minutes - avg_duration) / 60
    return [(
        'sleep-duration-low',
        f"You're averaging {avg_duration / 60:.1f} hours, {deficit:.1f}h below your {target_label}h goal."
    )]


def _efficiency_insights(recent: pd.DataFrame):
    avg_efficiency = recent['efficiency'].mean()

    if avg_efficiency >= insight_settings['efficiency_excellent']:
        return [(
            'efficiency-excellent',
            f"Your {avg_efficiency:.0f}% sleep efficiency is excellent! You fall asleep quickly and stay asleep."
        )]
    if avg_efficiency < insight_settings['efficiency_poor']:
        return [(
            'efficiency-poor',
            f"Your {avg_efficiency:.0f}% sleep efficiency suggests difficulty falling or staying asleep."
        )]
    return []


def _quality_insights(recent: pd.DataFrame):
    avg_quality = recent['quality'].mean()

    if avg_quality >= insight_settings['quality_good']:
        return [(
            'quality-good',
            f"Your average sleep quality rating is {avg_quality:.1f}/5 - you're sleeping well!"
        )]
    return []


def _consistency_insights(data: pd.DataFrame):
    # Consistency covers the whole history, not just the recent window
    consistency = calculate_consistency(data)

    if consistency >= insight_settings['consistency_good']:
        return [(
            'consistency-good',
            f"You maintain good sleep efficiency {consistency:.0f}% of the time. Keep it up!"
        )]
    if consistency < insight_settings['consistency_poor']:
        return [(
            'consistency-poor',
            f"Your sleep consistency is {consistency:.0f}%. Try to maintain regular sleep and wake times."
        )]
    return []


def _weekend_insights(recent: pd.DataFrame):
    weekend = recent[recent['is_weekend']]
    weekday = recent[~recent['is_weekend']]

    if len(weekend) < insight_settings['weekend_min_sessions'] or len(weekday) < insight_settings['weekday_min_sessions']:
        return []

    difference = weekend['bedtime_minutes'].mean() - weekday['bedtime_minutes'].mean()
    if abs(difference) <= insight_settings['weekend_bedtime_difference']:
        return []

    direction = 'later' if difference > 0 else 'earlier'
    return [(
        'weekend-pattern',
        f"You go to bed about {abs(difference):.0f} minutes {direction} on weekends. "
        f"Keeping a similar schedule every night helps your body clock."
    )]
