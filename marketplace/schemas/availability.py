# marketplace/schemas/availability.py
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, model_validator


class ProviderTimeOffCreate(BaseModel):
    start_date: date
    end_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    reason: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("start_time and end_time must be given together")
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class ProviderTimeOffResponse(ProviderTimeOffCreate):
    id: int
    provider_id: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class TimeWindowResponse(BaseModel):
    start: str
    end: str


class AvailabilityResponse(BaseModel):
    available: bool
    available_times: list[TimeWindowResponse]
