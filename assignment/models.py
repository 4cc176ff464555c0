from __future__ import annotations
import datetime as dt
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Integer, String, Text, ForeignKey, Enum as SAEnum, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from core.database import Base

if TYPE_CHECKING:
    from employee.models import Employee
    from user.models import User


def _values(enum_cls):
    return [m.value for m in enum_cls]


class AssignmentStatus(str, Enum):
    scheduled = "Scheduled"
    completed = "Completed"
    missed = "Missed"
    swapped = "Swapped"
    cancelled = "Cancelled"

class SwapStatus(str, Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"

class WorkLocation(str, Enum):
    office = "Office"
    home = "Home"
    field = "Field"
    client_site = "Client Site"

class WorkType(str, Enum):
    regular = "Regular"
    overtime = "Overtime"
    weekend_overtime = "Weekend overtime"
    client_side_overtime = "Client side overtime"

# rows in these states no longer occupy the employee's calendar
INACTIVE_STATUSES = (AssignmentStatus.cancelled, AssignmentStatus.swapped)


class ShiftAssignment(Base):
    __tablename__ = "shift_assignments"

    id: Mapped[int] = mapped_column(primary_key=True)

    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), index=True, nullable=False
    )
    group_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)

    # supplementary span of the scheduling action this row belongs to
    start_date: Mapped[dt.date | None] = mapped_column(Date(), nullable=True)
    end_date: Mapped[dt.date | None] = mapped_column(Date(), nullable=True)

    shift_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    date: Mapped[dt.date] = mapped_column(Date(), nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)

    location: Mapped[WorkLocation] = mapped_column(
        SAEnum(WorkLocation, name="work_location", values_callable=_values),
        nullable=False, default=WorkLocation.office,
    )
    work_type: Mapped[WorkType] = mapped_column(
        SAEnum(WorkType, name="work_type", values_callable=_values),
        nullable=False, default=WorkType.regular,
    )
    status: Mapped[AssignmentStatus] = mapped_column(
        SAEnum(AssignmentStatus, name="assignment_status", values_callable=_values),
        nullable=False, default=AssignmentStatus.scheduled,
    )

    break_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assigned_by: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    notes: Mapped[str] = mapped_column(Text(), nullable=False, default="")

    # embedded swap request; swap_status NULL means no request was ever filed
    swap_requested_by: Mapped[int | None] = mapped_column(ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    swap_requested_with: Mapped[int | None] = mapped_column(ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    swap_status: Mapped[SwapStatus | None] = mapped_column(
        SAEnum(SwapStatus, name="swap_status", values_callable=_values), nullable=True
    )
    swap_reason: Mapped[str] = mapped_column(Text(), nullable=False, default="")
    swap_requested_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    swap_reviewed_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    swap_reviewed_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # relationships
    employee: Mapped["Employee"] = relationship("Employee", foreign_keys=[employee_id], lazy="joined")
    assigner: Mapped["User"] = relationship("User", foreign_keys=[assigned_by], lazy="joined")

    @property
    def swap_request(self) -> dict | None:
        if self.swap_status is None:
            return None
        return {
            "requested_by": self.swap_requested_by,
            "requested_with": self.swap_requested_with,
            "status": self.swap_status,
            "reason": self.swap_reason,
            "requested_at": self.swap_requested_at,
            "reviewed_by": self.swap_reviewed_by,
            "reviewed_at": self.swap_reviewed_at,
        }


Index("ix_shift_assignments_employee_date", ShiftAssignment.employee_id, ShiftAssignment.date)
Index("ix_shift_assignments_group_date", ShiftAssignment.group_id, ShiftAssignment.date)
Index("ix_shift_assignments_status_date", ShiftAssignment.status, ShiftAssignment.date)
