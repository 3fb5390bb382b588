from datetime import datetime
from typing import List

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from services.scheduling.models.base import Base

# Participation is a plain association table. Employees hold no collections;
# who owns or attends what is answered by querying meetings.
meeting_participants = Table(
    "meeting_participants",
    Base.metadata,
    Column(
        "meeting_id",
        Integer,
        ForeignKey("meetings.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "employee_id",
        Integer,
        ForeignKey("employees.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"Employee(id={self.id!r}, name={self.name!r})"


class Meeting(Base):
    __tablename__ = "meetings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str | None] = mapped_column(String(255))
    # Naive local timestamps; the busy interval is [start_time, end_time)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("employees.id"), index=True
    )

    owner: Mapped[Employee | None] = relationship(Employee, foreign_keys=[owner_id])
    participants: Mapped[List[Employee]] = relationship(
        Employee, secondary=meeting_participants
    )

    def __repr__(self) -> str:
        return (
            f"Meeting(id={self.id!r}, title={self.title!r}, "
            f"start_time={self.start_time!r}, end_time={self.end_time!r}, "
            f"owner_id={self.owner_id!r})"
        )
