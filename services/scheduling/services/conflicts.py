from typing import List, Optional

import structlog

from services.common.http_errors import ValidationError
from services.common.logging_config import get_logger
from services.scheduling.models import Employee, Meeting
from services.scheduling.services.store import CalendarStore


class ConflictDetector:
    """
    Find the attendees of a proposed meeting who are already busy.

    Read-only: one store query per attendee over the proposed meeting's
    ``[start_time, end_time)``. Store failures propagate unchanged.
    """

    def __init__(
        self,
        store: CalendarStore,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self.store = store
        self.logger = logger or get_logger(__name__)

    def find_conflicts(self, proposed_meeting: Meeting) -> List[Employee]:
        """
        Return the owner (if busy) followed by busy participants in order.

        An employee appears at most once, even when they are both owner and
        participant of the proposed meeting.
        """
        self.logger.info(
            "Checking conflicts for meeting",
            title=proposed_meeting.title,
            start=proposed_meeting.start_time,
            end=proposed_meeting.end_time,
        )

        owner = proposed_meeting.owner
        if owner is None:
            raise ValidationError("Proposed meeting has no owner", field="ownerId")

        conflicting: List[Employee] = []
        checked_ids = set()
        try:
            for employee in [owner, *proposed_meeting.participants]:
                if employee.id in checked_ids:
                    continue
                checked_ids.add(employee.id)

                busy = self.store.find_overlapping(
                    employee.id,
                    proposed_meeting.start_time,
                    proposed_meeting.end_time,
                )
                self.logger.debug(
                    "Found conflicting meetings for employee",
                    employee_id=employee.id,
                    employee_name=employee.name,
                    count=len(busy),
                )
                if busy:
                    conflicting.append(employee)
        except Exception as e:
            self.logger.error(
                "Error checking meeting conflicts",
                meeting_id=proposed_meeting.id,
                error=str(e),
                exc_info=True,
            )
            raise

        if conflicting:
            self.logger.info(
                f"Found {len(conflicting)} employees with conflicts",
                employees=", ".join(str(employee.name) for employee in conflicting),
            )
        else:
            self.logger.info("No conflicts found for the proposed meeting")
        return conflicting
