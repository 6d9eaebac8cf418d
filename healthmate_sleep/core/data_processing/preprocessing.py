import logging
from datetime import datetime
from typing import Iterable, Optional, Union

import pandas as pd

from healthmate_sleep.core.models.data_models import SleepSession
from healthmate_sleep.utils.time_utils import is_weekend

logger = logging.getLogger(__name__)

SESSION_COLUMNS = {
    'id': 'object',
    'date': 'datetime64[ns]',
    'bedtime': 'object',
    'wake_time': 'object',
    'duration': 'int64',
    'quality': 'int64',
    'efficiency': 'float64',
    'bedtime_minutes': 'int64',
    'wake_minutes': 'int64',
    'is_weekend': 'bool',
}


def to_reference_timestamp(now: Optional[Union[datetime, pd.Timestamp]] = None) -> pd.Timestamp:
    """Naive timestamp used as the 'now' of an analytics pass"""
    ts = pd.Timestamp(now if now is not None else datetime.now())
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts


def preprocess_sessions(sessions: Iterable[SleepSession]) -> pd.DataFrame:
    """
    Flatten a session snapshot into a DataFrame for windowing and bucketing.

    Adds the derived columns every analytics pass needs: clock times in
    minutes, efficiency with the missing-value default applied and a weekend
    flag. Rows are ordered most recent date first; ties keep input order.

    Args:
        sessions: Snapshot of SleepSession records

    Returns:
        DataFrame with the columns in SESSION_COLUMNS
    """
    rows = [
        {
            'id': s.id,
            'date': pd.Timestamp(s.date),
            'bedtime': s.bedtime,
            'wake_time': s.wake_time,
            'duration': s.duration,
            'quality': s.quality,
            'efficiency': float(s.efficiency_or_default),
            'bedtime_minutes': s.bedtime_minutes,
            'wake_minutes': s.wake_minutes,
            'is_weekend': is_weekend(s.date),
        }
        for s in sessions
    ]

    if not rows:
        return pd.DataFrame({col: pd.Series(dtype=dtype) for col, dtype in SESSION_COLUMNS.items()})

    data = pd.DataFrame(rows, columns=list(SESSION_COLUMNS))
    data = data.sort_values('date', ascending=False, kind='stable').reset_index(drop=True)

    logger.debug(f"Preprocessed {len(data)} sleep sessions")
    return data
