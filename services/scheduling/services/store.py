"""
Calendar store: the persistence collaborator used by the scheduling core.

The core depends only on the ``CalendarStore`` protocol. ``SqlCalendarStore``
implements it on top of a SQLAlchemy session; tests substitute mocks.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Protocol

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session, selectinload

from services.scheduling.models import Employee, Meeting, meeting_participants


class CalendarStore(Protocol):
    def get_employee(self, employee_id: int) -> Optional[Employee]: ...

    def get_employees(self, employee_ids: Iterable[int]) -> List[Employee]: ...

    def list_employees(self) -> List[Employee]: ...

    def add_employee(self, name: str) -> Employee: ...

    def find_overlapping(
        self, employee_id: int, window_start: datetime, window_end: datetime
    ) -> List[Meeting]:
        """Meetings the employee owns or attends that overlap ``[window_start, window_end)``."""
        ...

    def save_meeting(self, meeting: Meeting) -> Meeting: ...


class SqlCalendarStore:
    """SQLAlchemy-backed calendar store bound to a single session."""

    def __init__(self, session: Session):
        self.session = session

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self.session.get(Employee, employee_id)

    def get_employees(self, employee_ids: Iterable[int]) -> List[Employee]:
        ids = list(employee_ids)
        if not ids:
            return []
        rows = self.session.scalars(select(Employee).where(Employee.id.in_(ids)))
        by_id = {employee.id: employee for employee in rows}
        # Keep caller order; unknown ids are simply absent
        return [by_id[employee_id] for employee_id in ids if employee_id in by_id]

    def list_employees(self) -> List[Employee]:
        return list(self.session.scalars(select(Employee).order_by(Employee.id)))

    def add_employee(self, name: str) -> Employee:
        employee = Employee(name=name)
        self.session.add(employee)
        self.session.flush()
        return employee

    def find_overlapping(
        self, employee_id: int, window_start: datetime, window_end: datetime
    ) -> List[Meeting]:
        attends = select(meeting_participants.c.meeting_id).where(
            meeting_participants.c.employee_id == employee_id
        )
        stmt = (
            select(Meeting)
            .where(
                or_(Meeting.owner_id == employee_id, Meeting.id.in_(attends)),
                # Half-open overlap; empty meetings never overlap
                and_(
                    Meeting.start_time < Meeting.end_time,
                    Meeting.start_time < window_end,
                    Meeting.end_time > window_start,
                ),
            )
            .options(selectinload(Meeting.owner), selectinload(Meeting.participants))
        )
        return list(self.session.scalars(stmt))

    def save_meeting(self, meeting: Meeting) -> Meeting:
        self.session.add(meeting)
        self.session.flush()
        self.session.refresh(meeting)
        return meeting
