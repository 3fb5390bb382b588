"""
Free-slot search between two employees.

The search covers today from the start of business hours through the same
time of day ``horizon_days`` later, ending at the close of business hours.
Candidate start times are taken every ``step`` across the whole window; a
candidate is kept when its start hour falls inside business hours and the
slot of the requested duration overlaps no meeting of either employee.
Only the start hour is checked, so a slot may end after business hours.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional, Sequence

import structlog

from services.common.http_errors import NotFoundError, ValidationError
from services.common.logging_config import get_logger
from services.scheduling.models import Meeting
from services.scheduling.services.overlap import overlaps
from services.scheduling.services.store import CalendarStore

DEFAULT_BUSINESS_HOURS_START = 9
DEFAULT_BUSINESS_HOURS_END = 17
DEFAULT_HORIZON_DAYS = 7
DEFAULT_STEP = timedelta(minutes=30)
# Largest duration accepted over HTTP (a signed 32-bit minute count)
MAX_DURATION_MINUTES = 2_147_483_647


@dataclass(frozen=True)
class TimeSlot:
    date: date
    start_time: time
    end_time: time


def is_slot_free(
    slot_start: datetime, slot_end: datetime, meetings: Sequence[Meeting]
) -> bool:
    return not any(
        overlaps(slot_start, slot_end, meeting.start_time, meeting.end_time)
        for meeting in meetings
    )


class FreeSlotFinder:
    def __init__(
        self,
        store: CalendarStore,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        clock: Callable[[], datetime] = datetime.now,
        business_hours_start: int = DEFAULT_BUSINESS_HOURS_START,
        business_hours_end: int = DEFAULT_BUSINESS_HOURS_END,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        step: timedelta = DEFAULT_STEP,
    ):
        if not 0 <= business_hours_start < business_hours_end <= 24:
            raise ValueError("Business hours must satisfy 0 <= start < end <= 24")
        if step <= timedelta(0):
            raise ValueError("Slot step must be positive")
        if horizon_days < 0:
            raise ValueError("Search horizon must not be negative")
        self.store = store
        self.logger = logger or get_logger(__name__)
        self.clock = clock
        self.business_hours_start = business_hours_start
        self.business_hours_end = business_hours_end
        self.horizon_days = horizon_days
        self.step = step

    def search_window(self) -> tuple[datetime, datetime]:
        """Return the ``(start, end)`` of the search for the current clock."""
        today = self.clock().date()
        window_start = datetime.combine(today, time(self.business_hours_start))
        last_day = today + timedelta(days=self.horizon_days)
        if self.business_hours_end == 24:
            window_end = datetime.combine(last_day + timedelta(days=1), time(0))
        else:
            window_end = datetime.combine(last_day, time(self.business_hours_end))
        return window_start, window_end

    def in_business_hours(self, moment: datetime) -> bool:
        return self.business_hours_start <= moment.hour < self.business_hours_end

    def find_free_slots(
        self, employee_a_id: int, employee_b_id: int, duration: timedelta
    ) -> List[TimeSlot]:
        """
        List every slot of ``duration`` in which both employees are free.

        Raises:
            ValidationError: duration is not positive, or so large a slot
                would end past the last representable datetime (both checked
                before any store access)
            NotFoundError: either employee does not exist
        """
        if duration <= timedelta(0):
            raise ValidationError("Duration must be positive", field="durationMinutes")
        # The last candidate starts just before the window closes
        if duration > datetime.max - self.search_window()[1]:
            raise ValidationError("Duration too large", field="durationMinutes")

        self.logger.info(
            "Finding free slots for employees",
            employee1_id=employee_a_id,
            employee2_id=employee_b_id,
            duration_minutes=duration.total_seconds() / 60,
        )
        try:
            employee_a = self.store.get_employee(employee_a_id)
            if employee_a is None:
                raise NotFoundError(
                    "Employee 1", str(employee_a_id), message="Employee 1 not found"
                )
            employee_b = self.store.get_employee(employee_b_id)
            if employee_b is None:
                raise NotFoundError(
                    "Employee 2", str(employee_b_id), message="Employee 2 not found"
                )

            window_start, window_end = self.search_window()
            self.logger.debug(
                "Searching for meetings in window",
                window_start=window_start,
                window_end=window_end,
            )

            # One query per employee for the whole window
            meetings_a = self.store.find_overlapping(
                employee_a_id, window_start, window_end
            )
            meetings_b = self.store.find_overlapping(
                employee_b_id, window_start, window_end
            )
            self.logger.debug(
                "Fetched meetings for both employees",
                employee1_meetings=len(meetings_a),
                employee2_meetings=len(meetings_b),
            )

            free_slots: List[TimeSlot] = []
            current = window_start
            while current < window_end:
                if self.in_business_hours(current):
                    slot_end = current + duration
                    if is_slot_free(current, slot_end, meetings_a) and is_slot_free(
                        current, slot_end, meetings_b
                    ):
                        free_slots.append(
                            TimeSlot(
                                date=current.date(),
                                start_time=current.time(),
                                end_time=slot_end.time(),
                            )
                        )
                current += self.step
        except Exception as e:
            self.logger.error(
                "Error finding free slots",
                employee1_id=employee_a_id,
                employee2_id=employee_b_id,
                error=str(e),
            )
            raise

        self.logger.info(
            f"Found {len(free_slots)} free slots",
            employee1=employee_a.name,
            employee2=employee_b.name,
        )
        return free_slots
