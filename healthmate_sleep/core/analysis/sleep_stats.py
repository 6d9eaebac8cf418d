"""
Module for calculating rolling sleep statistics and trends.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence

import pandas as pd

from healthmate_sleep.core.data_processing.preprocessing import preprocess_sessions, to_reference_timestamp
from healthmate_sleep.core.models.data_models import SleepGoals, SleepSession
from healthmate_sleep.core.models.output_models import (
    BedtimeTrend,
    DurationTrend,
    PeriodAverage,
    SleepStats,
    SleepTrends,
)
from healthmate_sleep.utils.constants import stats_settings
from healthmate_sleep.utils.time_utils import average_clock, format_clock

logger = logging.getLogger(__name__)


def compute_stats(
    sessions: Sequence[SleepSession],
    goals: Optional[SleepGoals] = None,
    now: Optional[datetime] = None,
    circular_clock: bool = False,
) -> SleepStats:
    """
    Calculate weekly/monthly averages, consistency and trends.

    Args:
        sessions: Snapshot of sleep sessions in any order
        goals: Active sleep goals (unused by the current thresholds)
        now: Reference time; defaults to the current time
        circular_clock: Average bedtimes on the 24-hour dial instead of arithmetically

    Returns:
        SleepStats: Fully recomputed statistics
    """
    reference = to_reference_timestamp(now)
    data = preprocess_sessions(sessions)

    weekly = _window(data, reference, stats_settings['weekly_window_days'])
    monthly = _window(data, reference, stats_settings['monthly_window_days'])

    stats = SleepStats(
        weekly_average=calculate_average(weekly, circular_clock),
        monthly_average=calculate_average(monthly, circular_clock),
        consistency=calculate_consistency(data),
        trends=calculate_trends(data),
    )

    logger.debug(
        f"Computed stats over {len(data)} sessions "
        f"({len(weekly)} weekly, {len(monthly)} monthly): consistency {stats.consistency:.1f}%"
    )
    return stats


def _window(data: pd.DataFrame, reference: pd.Timestamp, days: int) -> pd.DataFrame:
    """Sessions whose date (at midnight) falls on or after reference - days"""
    cutoff = reference - pd.Timedelta(days=days)
    return data[data['date'] >= cutoff]


def calculate_average(records: pd.DataFrame, circular_clock: bool = False) -> PeriodAverage:
    """Average duration, quality, efficiency and clock times of a window"""
    if len(records) == 0:
        return PeriodAverage()

    return PeriodAverage(
        duration=float(records['duration'].mean()),
        quality=float(records['quality'].mean()),
        bedtime=format_clock(average_clock(records['bedtime_minutes'], circular=circular_clock)),
        wake_time=format_clock(average_clock(records['wake_minutes'], circular=circular_clock)),
        sleep_efficiency=float(records['efficiency'].mean()),
    )


def calculate_consistency(data: pd.DataFrame) -> float:
    """Percentage of all retained sessions at or above the efficiency threshold"""
    if len(data) == 0:
        return 0.0

    threshold = stats_settings['consistency_efficiency_threshold']
    good_nights = int((data['efficiency'] >= threshold).sum())
    return good_nights / len(data) * 100


def calculate_trends(data: pd.DataFrame) -> SleepTrends:
    """
    Compare the latest block of sessions with the block before it.

    Sessions are taken most recent first; the recent block is the first 14,
    the prior block the next 14. Without both blocks every trend stays flat.
    """
    block = stats_settings['trend_block_size']
    ordered = data.sort_values('date', ascending=False, kind='stable')
    recent = ordered.iloc[:block]
    prior = ordered.iloc[block:2 * block]

    if len(recent) == 0 or len(prior) == 0:
        return SleepTrends()

    duration_change = recent['duration'].mean() - prior['duration'].mean()
    efficiency_change = recent['efficiency'].mean() - prior['efficiency'].mean()
    bedtime_change = recent['bedtime_minutes'].mean() - prior['bedtime_minutes'].mean()

    return SleepTrends(
        sleep_duration_trend=_classify_change(duration_change, stats_settings['duration_trend_threshold']),
        bedtime_trend=_classify_bedtime_change(bedtime_change, stats_settings['bedtime_trend_threshold']),
        efficiency_trend=_classify_change(efficiency_change, stats_settings['efficiency_trend_threshold']),
    )


def _classify_change(change: float, threshold: float) -> DurationTrend:
    if change > threshold:
        return DurationTrend.IMPROVING
    if change < -threshold:
        return DurationTrend.DECLINING
    return DurationTrend.STABLE


def _classify_bedtime_change(change: float, threshold: float) -> BedtimeTrend:
    if change < -threshold:
        return BedtimeTrend.EARLIER
    if change > threshold:
        return BedtimeTrend.LATER
    return BedtimeTrend.CONSISTENT
