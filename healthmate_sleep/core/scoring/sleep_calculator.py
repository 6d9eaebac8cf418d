"""
Module for deriving duration, quality, sleep stages and efficiency for a
newly logged night.
"""

import logging
import uuid
from datetime import date, datetime
from typing import Dict, Optional, Union

import numpy as np

from healthmate_sleep.core.exceptions import InvalidSessionError
from healthmate_sleep.core.models.data_models import SleepSession
from healthmate_sleep.utils.constants import (
    MINUTES_PER_DAY,
    efficiency_settings,
    lowest_quality,
    quality_bands,
    quality_descriptions,
    stage_simulation,
)
from healthmate_sleep.utils.time_utils import overnight_duration, parse_clock, round_half_up

logger = logging.getLogger(__name__)


class StageEstimator:
    """
    Simulates sleep stage percentages from a quality score.

    There is no sensor data behind these numbers; they are a heuristic
    placeholder. Subclasses only decide how much noise is added.
    """

    def noise(self, amplitude: float) -> float:
        raise NotImplementedError

    def estimate(self, quality: int) -> Dict[str, int]:
        s = stage_simulation
        deep = np.clip(
            s['deep_base'] + s['deep_per_quality'] * quality + self.noise(s['deep_noise']),
            *s['deep_range'],
        )
        rem = np.clip(
            s['rem_base'] + s['rem_per_quality'] * quality + self.noise(s['rem_noise']),
            *s['rem_range'],
        )
        light = max(s['light_min'], 100 - deep - rem)

        return {
            'deep_sleep': round_half_up(deep),
            'rem_sleep': round_half_up(rem),
            'light_sleep': round_half_up(light),
        }


class DeterministicStageEstimator(StageEstimator):
    """Noise-free stages, so the same quality always gives the same split"""

    def noise(self, amplitude: float) -> float:
        return 0.0


class RandomStageEstimator(StageEstimator):
    """Uniform noise in [-amplitude, amplitude] from a seedable generator"""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def noise(self, amplitude: float) -> float:
        return float(self.rng.uniform(-amplitude, amplitude))


def create_stage_estimator(strategy: str = 'deterministic', seed: Optional[int] = None) -> StageEstimator:
    """Build the stage estimator named in configuration"""
    if strategy == 'deterministic':
        return DeterministicStageEstimator()
    if strategy == 'randomized':
        return RandomStageEstimator(seed)
    raise ValueError(f"Unknown stage simulation strategy '{strategy}'. Use 'deterministic' or 'randomized'")


def calculate_automatic_quality(duration_minutes: int) -> int:
    """Quality score (1-5) from sleep duration banding"""
    hours = duration_minutes / 60
    for low, high, low_inclusive, high_inclusive, score in quality_bands:
        above_low = hours >= low if low_inclusive else hours > low
        below_high = hours <= high if high_inclusive else hours < high
        if above_low and below_high:
            return score
    return lowest_quality


def calculate_sleep_efficiency(duration_minutes: int, quality: int) -> int:
    """
    Estimate sleep efficiency (%) from quality and duration.

    The quality sets a base of 65-85%, which is scaled down for very short or
    very long nights and up for nights in the optimal range.
    """
    e = efficiency_settings
    base = e['base'] + e['per_quality'] * quality
    hours = duration_minutes / 60

    optimal_low, optimal_high = e['optimal_hours']
    if hours < e['short_hours'] or hours > e['long_hours']:
        factor = e['penalty_factor']
    elif optimal_low <= hours <= optimal_high:
        factor = e['optimal_factor']
    else:
        factor = 1.0

    low, high = e['range']
    return max(low, min(high, round_half_up(base * factor)))


def quality_description(quality: int) -> str:
    return quality_descriptions.get(quality, 'Unknown')


class SleepCalculator:
    """
    Derives duration, quality, stages and efficiency for a newly logged night.
    Called once per session when it is logged, never on reads.
    """

    def __init__(self, stage_estimator: Optional[StageEstimator] = None):
        self.stage_estimator = stage_estimator or DeterministicStageEstimator()

    def calculate_duration(self, bedtime: str, wake_time: str) -> int:
        return overnight_duration(parse_clock(bedtime), parse_clock(wake_time))

    def create_session(
        self,
        session_date: Union[date, str],
        bedtime: str,
        wake_time: str,
        notes: Optional[str] = None,
        session_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> SleepSession:
        """
        Build a complete SleepSession from the logged times.

        Args:
            session_date: Calendar date the night is filed under
            bedtime: "HH:MM" bedtime
            wake_time: "HH:MM" wake time
            notes: Optional free text
            session_id: Identifier to use; a new one is generated when omitted
            now: Timestamp for created_at/updated_at

        Returns:
            SleepSession with all derived fields filled in

        Raises:
            FormatError: If either clock string is malformed
            InvalidSessionError: If the duration is outside (0, 24h]
        """
        duration = self.calculate_duration(bedtime, wake_time)
        if duration <= 0 or duration > MINUTES_PER_DAY:
            raise InvalidSessionError(f"Invalid sleep duration of {duration} minutes")

        quality = calculate_automatic_quality(duration)
        stages = self.stage_estimator.estimate(quality)
        efficiency = calculate_sleep_efficiency(duration, quality)
        timestamp = now or datetime.now()

        logger.debug(
            f"Calculated session for {session_date}: {duration} min, quality {quality}, "
            f"efficiency {efficiency}%"
        )

        return SleepSession(
            id=session_id or uuid.uuid4().hex,
            date=session_date,
            bedtime=bedtime,
            wake_time=wake_time,
            duration=duration,
            quality=quality,
            notes=notes,
            sleep_efficiency=efficiency,
            created_at=timestamp,
            updated_at=timestamp,
            **stages,
        )
