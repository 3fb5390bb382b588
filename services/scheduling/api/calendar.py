from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Callable, Generator, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError

from services.common.http_errors import (
    GENERIC_ERROR_MESSAGE,
    ErrorCode,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from services.common.logging_config import get_logger
from services.scheduling.models import Employee, Meeting, get_session
from services.scheduling.schemas import (
    EmployeeResponse,
    FreeSlotResponse,
    MeetingRequest,
    MeetingResponse,
)
from services.scheduling.services.booking import BookingService, ConflictBookingGuard
from services.scheduling.services.conflicts import ConflictDetector
from services.scheduling.services.free_slots import (
    MAX_DURATION_MINUTES,
    FreeSlotFinder,
)
from services.scheduling.services.store import CalendarStore, SqlCalendarStore
from services.scheduling.settings import get_settings

logger = get_logger(__name__)

router = APIRouter()


def get_clock() -> Callable[[], datetime]:
    """Wall clock used by the free-slot search; overridden in tests."""
    return datetime.now


@contextmanager
def calendar_store() -> Generator[SqlCalendarStore, None, None]:
    """Open a session-bound store; database failures become a generic 500."""
    try:
        with get_session() as session:
            yield SqlCalendarStore(session)
    except SQLAlchemyError as e:
        logger.error("Calendar store failure", error=str(e), exc_info=True)
        raise ServiceError(
            GENERIC_ERROR_MESSAGE, code=ErrorCode.DATABASE_ERROR, status_code=500
        ) from e


def resolve_owner(store: CalendarStore, owner_id: int) -> Employee:
    owner = store.get_employee(owner_id)
    if owner is None:
        raise NotFoundError(
            "Owner", str(owner_id), message=f"Owner not found with ID: {owner_id}"
        )
    return owner


def resolve_participants(
    store: CalendarStore, participant_ids: List[int]
) -> List[Employee]:
    # Repeated ids name the same attendee once
    unique_ids = list(dict.fromkeys(participant_ids))
    participants = store.get_employees(unique_ids)
    if len(participants) != len(unique_ids):
        found = {employee.id for employee in participants}
        raise NotFoundError(
            "Participant",
            message="One or more participants not found",
            details={"missing_ids": [i for i in unique_ids if i not in found]},
        )
    return participants


def to_meeting(
    store: CalendarStore, meeting_request: MeetingRequest, owner: Employee | None
) -> Meeting:
    logger.debug(
        "Converting meeting request",
        owner_id=owner.id if owner is not None else None,
    )
    meeting = Meeting(
        title=meeting_request.title,
        start_time=meeting_request.start_time,
        end_time=meeting_request.end_time,
    )
    meeting.owner = owner
    meeting.participants = resolve_participants(store, meeting_request.participant_ids)
    return meeting


@router.post("/meetings", response_model=MeetingResponse, status_code=201)
def book_meeting(
    meeting_request: MeetingRequest,
    owner_id: int = Query(..., alias="ownerId"),
) -> MeetingResponse:
    logger.info(
        "Received request to book meeting",
        owner_id=owner_id,
        title=meeting_request.title,
    )
    settings = get_settings()
    with calendar_store() as store:
        owner = resolve_owner(store, owner_id)
        meeting = to_meeting(store, meeting_request, owner)

        guard = None
        if settings.prevent_double_booking:
            guard = ConflictBookingGuard(ConflictDetector(store, logger=logger))

        booked = BookingService(store, logger=logger, guard=guard).book_meeting(
            owner_id, meeting
        )
        response = MeetingResponse.model_validate(booked)

    logger.info("Successfully booked meeting", meeting_id=response.id)
    return response


@router.get("/free-slots", response_model=List[FreeSlotResponse])
def find_free_slots(
    employee1_id: int = Query(..., alias="employee1Id"),
    employee2_id: int = Query(..., alias="employee2Id"),
    duration_minutes: int = Query(
        ..., alias="durationMinutes", le=MAX_DURATION_MINUTES
    ),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> List[FreeSlotResponse]:
    logger.info(
        "Searching for free slots",
        employee1_id=employee1_id,
        employee2_id=employee2_id,
        duration_minutes=duration_minutes,
    )
    settings = get_settings()
    with calendar_store() as store:
        finder = FreeSlotFinder(
            store,
            logger=logger,
            clock=clock,
            business_hours_start=settings.business_hours_start,
            business_hours_end=settings.business_hours_end,
            horizon_days=settings.search_horizon_days,
            step=timedelta(minutes=settings.slot_step_minutes),
        )
        slots = finder.find_free_slots(
            employee1_id, employee2_id, timedelta(minutes=duration_minutes)
        )

    logger.info(f"Found {len(slots)} free slots")
    return [FreeSlotResponse.from_slot(slot) for slot in slots]


@router.post("/conflicts", response_model=List[EmployeeResponse])
def find_conflicts(meeting_request: MeetingRequest) -> List[EmployeeResponse]:
    logger.info(
        "Checking conflicts for meeting",
        title=meeting_request.title,
        start=meeting_request.start_time,
        end=meeting_request.end_time,
    )
    if meeting_request.owner_id is None:
        raise ValidationError("Proposed meeting has no owner", field="ownerId")

    with calendar_store() as store:
        owner = resolve_owner(store, meeting_request.owner_id)
        proposed = to_meeting(store, meeting_request, owner)

        conflicts = ConflictDetector(store, logger=logger).find_conflicts(proposed)
        response = [EmployeeResponse.model_validate(employee) for employee in conflicts]

    logger.info(
        f"Found {len(response)} conflicting employees",
        title=meeting_request.title,
    )
    return response
