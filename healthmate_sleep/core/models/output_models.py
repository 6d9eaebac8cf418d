# healthmate_sleep/core/models/output_models.py

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from healthmate_sleep.core.models.data_models import CamelModel


class ChartPeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    SIX_MONTH = "6month"
    YEAR = "year"


class DurationTrend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class BedtimeTrend(str, Enum):
    EARLIER = "earlier"
    LATER = "later"
    CONSISTENT = "consistent"


class InsightType(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    WARNING = "warning"


class ChartBucket(CamelModel):
    """One point of a chart dataset: a single day or a calendar month"""
    date: date
    label: str
    value: float = 0.0  # hours
    quality: float = 0.0
    efficiency: float = 0.0
    has_data: bool = False
    duration: int = 0  # minutes
    bedtime: Optional[str] = None
    wake_time: Optional[str] = None
    days_with_data: Optional[int] = None


class PeriodAverage(CamelModel):
    """Averages over a rolling window of sessions"""
    duration: float = 0.0
    quality: float = 0.0
    bedtime: str = "22:00"
    wake_time: str = "07:00"
    sleep_efficiency: float = 0.0


class SleepTrends(CamelModel):
    sleep_duration_trend: DurationTrend = DurationTrend.STABLE
    bedtime_trend: BedtimeTrend = BedtimeTrend.CONSISTENT
    efficiency_trend: DurationTrend = DurationTrend.STABLE


class SleepStats(CamelModel):
    """Rolling statistics derived from the session history"""
    weekly_average: PeriodAverage = Field(default_factory=PeriodAverage)
    monthly_average: PeriodAverage = Field(default_factory=PeriodAverage)
    consistency: float = Field(0.0, ge=0.0, le=100.0)
    trends: SleepTrends = Field(default_factory=SleepTrends)


class SleepInsight(CamelModel):
    """Rule-triggered observation about recent sleep"""
    id: str
    type: InsightType
    title: str
    description: str
    icon: str
    color: str
    created_at: datetime = Field(default_factory=datetime.now)
