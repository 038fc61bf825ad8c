# coachslots/schemas/availability.py

from __future__ import annotations
from datetime import time
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator


class EventWindowIn(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday .. 6=Saturday")
    start_time: time = Field(..., description="Coach-local wall clock, HH:MM")
    end_time: time

    @model_validator(mode="after")
    def _start_before_end(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class WeeklyWindowIn(EventWindowIn):
    slot_duration_minutes: int = Field(30, gt=0, le=24 * 60)


class WeeklyWindowsUpdate(BaseModel):
    windows: List[WeeklyWindowIn] = Field(default_factory=list)


class EventWindowsUpdate(BaseModel):
    windows: List[EventWindowIn] = Field(default_factory=list)


class EventWindowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    day_of_week: int
    start_time: time
    end_time: time

    @field_serializer("start_time", "end_time")
    def _hh_mm(self, value: time) -> str:
        return value.strftime("%H:%M")


class WeeklyWindowOut(EventWindowOut):
    slot_duration_minutes: int


class SlotOut(BaseModel):
    slot_at: str = Field(..., description="UTC instant, ISO-8601")
    duration_minutes: int


class SlotsResponse(BaseModel):
    slots: List[SlotOut]
