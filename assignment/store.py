"""
Persistence port for the rota core.

Conflict detection, grouping, swaps and team assignment only talk to an
``AssignmentStore``; ``SqlAssignmentStore`` is the SQLAlchemy implementation
handed in by the routers.
"""
from __future__ import annotations
import datetime as dt
from typing import Any, Iterable, Optional, Protocol

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from .models import ShiftAssignment, AssignmentStatus
from employee.models import Employee
from employee import service as employee_service
from team.models import Team
from team import service as team_service


class AssignmentStore(Protocol):
    def find_assignments(
        self,
        *,
        employee_id: Optional[int] = None,
        date_from: Optional[dt.date] = None,
        date_to: Optional[dt.date] = None,
        date_before: Optional[dt.date] = None,
        status: Optional[AssignmentStatus] = None,
        exclude_statuses: Iterable[AssignmentStatus] = (),
        exclude_id: Optional[int] = None,
        location: Optional[str] = None,
        work_type: Optional[str] = None,
        group_id: Optional[str] = None,
        newest_first: bool = False,
    ) -> list[ShiftAssignment]: ...

    def get_assignment(self, assignment_id: int) -> Optional[ShiftAssignment]: ...

    def create_assignment(self, values: dict[str, Any]) -> ShiftAssignment: ...

    def update_assignment(self, assignment_id: int, patch: dict[str, Any]) -> Optional[ShiftAssignment]: ...

    def delete_assignment(self, assignment_id: int) -> bool: ...

    def delete_assignments_by_group(self, group_id: str) -> int: ...

    def find_team(self, team_id: int) -> Optional[Team]: ...

    def find_team_members(self, team_id: int, active_only: bool = True) -> list[Employee]: ...

    def find_employee(self, employee_id: int) -> Optional[Employee]: ...

    def rollback(self) -> None: ...


class SqlAssignmentStore:
    def __init__(self, db: Session):
        self.db = db

    # ---------- assignments ----------

    def find_assignments(
        self,
        *,
        employee_id: Optional[int] = None,
        date_from: Optional[dt.date] = None,
        date_to: Optional[dt.date] = None,
        date_before: Optional[dt.date] = None,
        status: Optional[AssignmentStatus] = None,
        exclude_statuses: Iterable[AssignmentStatus] = (),
        exclude_id: Optional[int] = None,
        location: Optional[str] = None,
        work_type: Optional[str] = None,
        group_id: Optional[str] = None,
        newest_first: bool = False,
    ) -> list[ShiftAssignment]:
        stmt = select(ShiftAssignment)
        if employee_id is not None:
            stmt = stmt.where(ShiftAssignment.employee_id == employee_id)
        if date_from is not None:
            stmt = stmt.where(ShiftAssignment.date >= date_from)
        if date_to is not None:
            stmt = stmt.where(ShiftAssignment.date <= date_to)
        if date_before is not None:
            stmt = stmt.where(ShiftAssignment.date < date_before)
        if status is not None:
            stmt = stmt.where(ShiftAssignment.status == status)
        excluded = list(exclude_statuses)
        if excluded:
            stmt = stmt.where(ShiftAssignment.status.not_in(excluded))
        if exclude_id is not None:
            stmt = stmt.where(ShiftAssignment.id != exclude_id)
        if location is not None:
            stmt = stmt.where(ShiftAssignment.location == location)
        if work_type is not None:
            stmt = stmt.where(ShiftAssignment.work_type == work_type)
        if group_id is not None:
            stmt = stmt.where(ShiftAssignment.group_id == group_id)

        day_order = ShiftAssignment.date.desc() if newest_first else ShiftAssignment.date.asc()
        stmt = stmt.order_by(day_order, ShiftAssignment.start_time.asc(), ShiftAssignment.id.asc())
        return list(self.db.scalars(stmt).unique())

    def get_assignment(self, assignment_id: int) -> Optional[ShiftAssignment]:
        return self.db.get(ShiftAssignment, assignment_id)

    def create_assignment(self, values: dict[str, Any]) -> ShiftAssignment:
        row = ShiftAssignment(**values)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def update_assignment(self, assignment_id: int, patch: dict[str, Any]) -> Optional[ShiftAssignment]:
        row = self.db.get(ShiftAssignment, assignment_id)
        if not row:
            return None
        for k, v in patch.items():
            setattr(row, k, v)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete_assignment(self, assignment_id: int) -> bool:
        row = self.db.get(ShiftAssignment, assignment_id)
        if not row:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def delete_assignments_by_group(self, group_id: str) -> int:
        result = self.db.execute(delete(ShiftAssignment).where(ShiftAssignment.group_id == group_id))
        self.db.commit()
        return result.rowcount or 0

    # ---------- directory ----------

    def find_team(self, team_id: int) -> Optional[Team]:
        return team_service.get_team(self.db, team_id)

    def find_team_members(self, team_id: int, active_only: bool = True) -> list[Employee]:
        return team_service.get_team_members(self.db, team_id, active_only=active_only)

    def find_employee(self, employee_id: int) -> Optional[Employee]:
        return employee_service.get_employee(self.db, employee_id)

    def rollback(self) -> None:
        self.db.rollback()
