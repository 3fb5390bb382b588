from typing import Callable, Optional

import structlog

from services.common.http_errors import ConflictError, NotFoundError
from services.common.logging_config import get_logger
from services.scheduling.models import Meeting
from services.scheduling.services.conflicts import ConflictDetector
from services.scheduling.services.store import CalendarStore

# Called with the fully assembled meeting right before it is persisted.
# Raising rejects the booking.
BookingGuard = Callable[[Meeting], None]


class ConflictBookingGuard:
    """Booking guard that rejects meetings whose attendees are already busy.

    This narrows the double-booking window but does not close it: the check
    and the insert are separate statements. Exactly-once slots need a
    database-level constraint.
    """

    def __init__(self, detector: ConflictDetector):
        self.detector = detector

    def __call__(self, meeting: Meeting) -> None:
        conflicting = self.detector.find_conflicts(meeting)
        if conflicting:
            raise ConflictError(
                "Meeting conflicts with existing bookings",
                details={
                    "conflicting_employee_ids": [
                        employee.id for employee in conflicting
                    ]
                },
            )


class BookingService:
    """Persist new meetings for an owner.

    Participants must already be resolved to Employee records. No overlap
    check happens here unless a guard is installed.
    """

    def __init__(
        self,
        store: CalendarStore,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        guard: Optional[BookingGuard] = None,
    ):
        self.store = store
        self.logger = logger or get_logger(__name__)
        self.guard = guard

    def book_meeting(self, owner_id: int, meeting: Meeting) -> Meeting:
        self.logger.info(
            "Attempting to book meeting", owner_id=owner_id, title=meeting.title
        )
        try:
            owner = self.store.get_employee(owner_id)
            if owner is None:
                raise NotFoundError(
                    "Owner",
                    str(owner_id),
                    message=f"Owner not found with ID: {owner_id}",
                )
            meeting.owner = owner

            if self.guard is not None:
                self.guard(meeting)

            saved = self.store.save_meeting(meeting)
        except Exception as e:
            self.logger.error(
                "Failed to book meeting", owner_id=owner_id, error=str(e)
            )
            raise

        self.logger.info(
            "Successfully booked meeting",
            meeting_id=saved.id,
            owner=owner.name,
            start_time=saved.start_time,
        )
        return saved
