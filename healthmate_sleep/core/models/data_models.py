# healthmate_sleep/core/models/data_models.py

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from healthmate_sleep.utils.constants import default_values
from healthmate_sleep.utils.time_utils import overnight_duration, parse_clock


class CamelModel(BaseModel):
    """Base model serialized with the camelCase keys used by the mobile app"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Sleep Data Models
class SleepSession(CamelModel):
    """One logged night of sleep. The date is the upsert key."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    date: date
    bedtime: str
    wake_time: str
    duration: int = Field(..., gt=0, le=1440)
    quality: int = Field(..., ge=1, le=5)
    deep_sleep: Optional[float] = Field(None, ge=0, le=100)
    rem_sleep: Optional[float] = Field(None, ge=0, le=100)
    light_sleep: Optional[float] = Field(None, ge=0, le=100)
    sleep_efficiency: Optional[float] = Field(None, ge=50, le=100)
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator('bedtime', 'wake_time')
    @classmethod
    def validate_clock(cls, v):
        parse_clock(v)
        return v

    @field_validator('notes')
    @classmethod
    def blank_notes_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v

    @property
    def bedtime_minutes(self) -> int:
        return parse_clock(self.bedtime)

    @property
    def wake_minutes(self) -> int:
        return parse_clock(self.wake_time)

    @property
    def efficiency_or_default(self) -> float:
        if self.sleep_efficiency is None:
            return default_values['missing_efficiency']
        return self.sleep_efficiency


class SleepGoals(CamelModel):
    """User sleep goals. Duration is derived from the schedule when not given."""
    bedtime: str = default_values['bedtime']
    wake_time: str = default_values['wake_time']
    duration: Optional[int] = Field(None, gt=0, le=1440)
    quality: int = Field(default_values['goal_quality'], ge=1, le=5)
    target_sleep_hours: float = Field(
        default_values['target_sleep_hours'],
        ge=default_values['min_target_sleep_hours'],
        le=default_values['max_target_sleep_hours'],
    )

    @field_validator('bedtime', 'wake_time')
    @classmethod
    def validate_clock(cls, v):
        parse_clock(v)
        return v

    @model_validator(mode='after')
    def derive_duration(self):
        if self.duration is None:
            self.duration = overnight_duration(parse_clock(self.bedtime), parse_clock(self.wake_time))
        return self


class SleepGoalsUpdate(BaseModel):
    """Partial goals update. Unset fields keep their current value."""
    bedtime: Optional[str] = None
    wake_time: Optional[str] = None
    quality: Optional[int] = Field(None, ge=1, le=5)
    target_sleep_hours: Optional[float] = None

    @field_validator('bedtime', 'wake_time')
    @classmethod
    def validate_clock(cls, v):
        if v is not None:
            parse_clock(v)
        return v

    @field_validator('target_sleep_hours')
    @classmethod
    def clamp_target_hours(cls, v):
        # The schedule editor clamps rather than rejects
        if v is None:
            return v
        return max(default_values['min_target_sleep_hours'],
                   min(default_values['max_target_sleep_hours'], v))
