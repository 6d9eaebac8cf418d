# healthmate_sleep/utils/time_utils.py
"""
Clock-time helpers for sleep sessions.

Bedtimes and wake times are stored as 24-hour "HH:MM" strings. Everything the
analytics do with them goes through minutes since midnight.
"""

import math
import re
from datetime import date, datetime
from typing import Iterable, Union

import numpy as np

from healthmate_sleep.core.exceptions import FormatError
from healthmate_sleep.utils.constants import MINUTES_PER_DAY

CLOCK_PATTERN = re.compile(r'^([01]\d|2[0-3]):([0-5]\d)$')


def parse_clock(value: str) -> int:
    """
    Convert an "HH:MM" clock string to minutes since midnight.

    Args:
        value: 24-hour clock string, e.g. "23:30"

    Returns:
        int: Minutes since midnight in [0, 1440)

    Raises:
        FormatError: If the value is not a zero-padded HH:MM string
    """
    if not isinstance(value, str):
        raise FormatError(f"Clock value must be a string, got {type(value).__name__}")

    match = CLOCK_PATTERN.match(value.strip())
    if not match:
        raise FormatError(f"Invalid clock value '{value}'. Expected HH:MM (00:00-23:59)")

    hours, minutes = int(match.group(1)), int(match.group(2))
    return hours * 60 + minutes


def overnight_duration(bedtime_minutes: int, wake_minutes: int) -> int:
    """
    Minutes between bedtime and wake time, wrapping past midnight.

    A wake time at or before the bedtime is taken to be on the next day, so the
    result is always positive (equal times give a full 24 hours).
    """
    if wake_minutes <= bedtime_minutes:
        wake_minutes += MINUTES_PER_DAY
    return wake_minutes - bedtime_minutes


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def format_clock(minutes: float) -> str:
    """Format minutes since midnight as a zero-padded "HH:MM" string."""
    total = round_half_up(minutes) % MINUTES_PER_DAY
    hours, mins = divmod(total, 60)
    return f"{hours:02d}:{mins:02d}"


def average_clock(minutes: Iterable[float], circular: bool = False) -> float:
    """
    Average a set of clock times given as minutes since midnight.

    The naive mode is a plain arithmetic mean, so 23:50 and 00:10 average to
    about noon. The circular mode maps each time onto the 24-hour dial and
    takes the angle of the mean vector, which gives 00:00 for the same pair.

    Args:
        minutes: Clock times in minutes since midnight
        circular: Use the circular (vector) mean instead of the arithmetic one

    Returns:
        float: Mean clock time in minutes since midnight
    """
    values = np.asarray(list(minutes), dtype=float)
    if values.size == 0:
        raise ValueError("Cannot average an empty set of clock times")

    if not circular:
        return float(values.mean())

    angles = values / MINUTES_PER_DAY * 2 * np.pi
    mean_angle = np.arctan2(np.sin(angles).mean(), np.cos(angles).mean())
    return float((mean_angle / (2 * np.pi) * MINUTES_PER_DAY) % MINUTES_PER_DAY)


def is_weekend(day: Union[date, datetime]) -> bool:
    """True for Saturday and Sunday."""
    return day.weekday() >= 5
