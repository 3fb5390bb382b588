from services.scheduling.schemas.calendar import (
    EmployeeCreateRequest,
    EmployeeResponse,
    FreeSlotResponse,
    MeetingRequest,
    MeetingResponse,
)

__all__ = [
    "EmployeeCreateRequest",
    "EmployeeResponse",
    "FreeSlotResponse",
    "MeetingRequest",
    "MeetingResponse",
]
