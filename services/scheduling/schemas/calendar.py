from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from services.scheduling.services.free_slots import TimeSlot


class CamelModel(BaseModel):
    """JSON fields are camelCase on the wire; Python code uses snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# Request Models
class MeetingRequest(CamelModel):
    """Body for booking a meeting or checking a proposed one for conflicts."""

    title: Optional[str] = Field(None, max_length=255)
    start_time: datetime = Field(..., description="Meeting start (local time)")
    end_time: datetime = Field(..., description="Meeting end (local time)")
    owner_id: Optional[int] = Field(
        None, description="Owner employee id (conflict checks only)"
    )
    participant_ids: List[int] = Field(default_factory=list)

    @field_validator("start_time", "end_time")
    @classmethod
    def to_local_naive(cls, v: datetime) -> datetime:
        # Stored timestamps are naive local time
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v


class EmployeeCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)


# Response Models
class EmployeeResponse(CamelModel):
    id: int
    name: str


class MeetingResponse(CamelModel):
    id: int
    title: Optional[str] = None
    start_time: datetime
    end_time: datetime
    owner: EmployeeResponse
    participants: List[EmployeeResponse] = Field(default_factory=list)


class FreeSlotResponse(CamelModel):
    date: str = Field(..., description="ISO local date, e.g. 2024-01-15")
    start_time: str = Field(..., description="Local start time, e.g. 09:30")
    end_time: str = Field(..., description="Local end time, e.g. 10:00")

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "FreeSlotResponse":
        return cls(
            date=slot.date.isoformat(),
            start_time=slot.start_time.isoformat(timespec="minutes"),
            end_time=slot.end_time.isoformat(timespec="minutes"),
        )
