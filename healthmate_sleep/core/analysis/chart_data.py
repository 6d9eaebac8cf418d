"""
Module for turning the session history into chart-ready datasets.

Each chart period has its own bucket builder. Daily periods (week, month)
produce one bucket per calendar day populated from an exact date match;
monthly periods (6-month, year) sum the durations of every session in a month.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Union

import pandas as pd

from healthmate_sleep.core.data_processing.preprocessing import preprocess_sessions, to_reference_timestamp
from healthmate_sleep.core.models.data_models import SleepSession
from healthmate_sleep.core.models.output_models import ChartBucket, ChartPeriod

logger = logging.getLogger(__name__)

SIX_MONTH_SPAN = 6


def build_chart_data(
    period: Union[ChartPeriod, str],
    sessions: Sequence[SleepSession],
    now: Optional[datetime] = None,
) -> List[ChartBucket]:
    """
    Bucket the session history for the selected chart period.

    Args:
        period: Chart granularity (day, week, month, 6month, year)
        sessions: Snapshot of sleep sessions in any order
        now: Reference time; defaults to the current time

    Returns:
        list: ChartBucket objects ordered oldest to newest
    """
    period = ChartPeriod(period)
    today = to_reference_timestamp(now).normalize()
    data = preprocess_sessions(sessions)

    builder = _BUCKET_BUILDERS[period]
    buckets = builder(data, today)

    logger.debug(f"Built {len(buckets)} {period.value} buckets from {len(data)} sessions")
    return buckets


def _build_day_buckets(data: pd.DataFrame, today: pd.Timestamp) -> List[ChartBucket]:
    """The session filed under today, or the most recent one when today has none"""
    if data.empty:
        return []

    matches = data[data['date'] == today]
    row = matches.iloc[0] if len(matches) > 0 else data.iloc[0]
    return [_daily_bucket(row['date'], row, label=row['date'].strftime('%a'))]


def _build_week_buckets(data: pd.DataFrame, today: pd.Timestamp) -> List[ChartBucket]:
    days = pd.date_range(end=today, periods=7, freq='D')
    return _daily_buckets(data, days, label_format='%a')


def _build_month_buckets(data: pd.DataFrame, today: pd.Timestamp) -> List[ChartBucket]:
    month_start = today.replace(day=1)
    days = pd.date_range(start=month_start, periods=today.days_in_month, freq='D')
    return _daily_buckets(data, days, label_format='%d')


def _build_six_month_buckets(data: pd.DataFrame, today: pd.Timestamp) -> List[ChartBucket]:
    current = today.to_period('M')
    months = [current - offset for offset in range(SIX_MONTH_SPAN - 1, -1, -1)]
    return _monthly_buckets(data, months)


def _build_year_buckets(data: pd.DataFrame, today: pd.Timestamp) -> List[ChartBucket]:
    months = [pd.Period(year=today.year, month=month, freq='M') for month in range(1, 13)]
    return _monthly_buckets(data, months)


_BUCKET_BUILDERS: Dict[ChartPeriod, Callable[[pd.DataFrame, pd.Timestamp], List[ChartBucket]]] = {
    ChartPeriod.DAY: _build_day_buckets,
    ChartPeriod.WEEK: _build_week_buckets,
    ChartPeriod.MONTH: _build_month_buckets,
    ChartPeriod.SIX_MONTH: _build_six_month_buckets,
    ChartPeriod.YEAR: _build_year_buckets,
}


def _daily_buckets(data: pd.DataFrame, days: pd.DatetimeIndex, label_format: str) -> List[ChartBucket]:
    """One bucket per day, filled from the first session recorded on that date"""
    by_date = data.drop_duplicates(subset='date', keep='first').set_index('date')

    buckets = []
    for day in days:
        label = day.strftime(label_format)
        if day in by_date.index:
            buckets.append(_daily_bucket(day, by_date.loc[day], label=label))
        else:
            buckets.append(ChartBucket(date=day.date(), label=label))
    return buckets


def _daily_bucket(day: pd.Timestamp, row: pd.Series, label: str) -> ChartBucket:
    duration = int(row['duration'])
    return ChartBucket(
        date=day.date(),
        label=label,
        value=duration / 60,
        quality=float(row['quality']),
        efficiency=float(row['efficiency']),
        has_data=True,
        duration=duration,
        bedtime=row['bedtime'],
        wake_time=row['wake_time'],
    )


def _monthly_buckets(data: pd.DataFrame, months: List[pd.Period]) -> List[ChartBucket]:
    """
    One bucket per calendar month.

    The value is the total hours slept in the month, not the nightly average;
    quality and efficiency are means over the sessions found.
    """
    totals = None
    if not data.empty:
        grouped = data.assign(month=data['date'].dt.to_period('M')).groupby('month')
        totals = grouped.agg(
            total_minutes=('duration', 'sum'),
            quality=('quality', 'mean'),
            efficiency=('efficiency', 'mean'),
            days_with_data=('duration', 'count'),
        )

    buckets = []
    for month in months:
        month_start = month.start_time.date()
        label = month.strftime('%b')
        if totals is not None and month in totals.index:
            row = totals.loc[month]
            total_minutes = int(row['total_minutes'])
            buckets.append(ChartBucket(
                date=month_start,
                label=label,
                value=total_minutes / 60,
                quality=float(row['quality']),
                efficiency=float(row['efficiency']),
                has_data=True,
                duration=total_minutes,
                days_with_data=int(row['days_with_data']),
            ))
        else:
            buckets.append(ChartBucket(date=month_start, label=label, days_with_data=0))
    return buckets
