from __future__ import annotations
import logging
from datetime import date, datetime, timedelta
from typing import Optional, List
from zoneinfo import ZoneInfo

from fastapi import HTTPException

from core.config_loader import settings
from .models import ShiftAssignment, AssignmentStatus, WorkLocation, WorkType, INACTIVE_STATUSES
from .schema import AssignmentCreate, AssignmentUpdate, ShiftStatistics
from .store import AssignmentStore
from .conflicts import ensure_no_conflicts
from .grouping import build_groups, ShiftGroup
from .timeslot import minutes_between
from employee.service import is_eligible

logger = logging.getLogger(__name__)


# ---------- helpers ----------

def business_today() -> date:
    return datetime.now(ZoneInfo(settings.BUSINESS_TIMEZONE)).date()


def _listing_window(
    tab: str,
    start_date: Optional[date],
    end_date: Optional[date],
    today: date,
) -> dict:
    """Translate the active/old/all tab and an optional range into store filters."""
    if tab == "active":
        return {"date_from": today, "date_to": today}
    if tab == "old":
        window = {"date_before": today, "newest_first": True}
        if start_date is not None:
            window["date_from"] = start_date
        if end_date is not None:
            window["date_to"] = min(end_date, today - timedelta(days=1))
        return window

    window = {}
    if start_date is not None:
        window["date_from"] = start_date
    if end_date is not None:
        window["date_to"] = end_date
    return window


# ---------- queries ----------

def get_assignments(
    store: AssignmentStore,
    *,
    tab: str = "all",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    employee_id: Optional[int] = None,
    location: Optional[WorkLocation] = None,
    work_type: Optional[WorkType] = None,
    status: Optional[AssignmentStatus] = None,
    today: Optional[date] = None,
) -> List[ShiftAssignment]:
    window = _listing_window(tab, start_date, end_date, today or business_today())
    return store.find_assignments(
        employee_id=employee_id,
        location=location,
        work_type=work_type,
        status=status,
        **window,
    )


def get_grouped_assignments(store: AssignmentStore, **filters) -> List[ShiftGroup]:
    return build_groups(get_assignments(store, **filters))


def get_assignment(store: AssignmentStore, assignment_id: int) -> ShiftAssignment | None:
    return store.get_assignment(assignment_id)


def get_statistics(
    store: AssignmentStore,
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ShiftStatistics:
    rows = store.find_assignments(date_from=start_date, date_to=end_date)

    by_location = {loc.value: 0 for loc in WorkLocation}
    by_work_type = {wt.value: 0 for wt in WorkType}
    by_status = {st.value: 0 for st in AssignmentStatus}
    minutes = 0
    for r in rows:
        by_location[r.location.value] += 1
        by_work_type[r.work_type.value] += 1
        by_status[r.status.value] += 1
        minutes += minutes_between(r.start_time, r.end_time) - (r.break_duration or 0)

    return ShiftStatistics(
        total_shifts=len(rows),
        by_location=by_location,
        by_work_type=by_work_type,
        by_status=by_status,
        total_hours=round(minutes / 60, 2),
        unique_employees=len({r.employee_id for r in rows}),
    )


# ---------- commands ----------

def create_assignment(store: AssignmentStore, dto: AssignmentCreate) -> ShiftAssignment:
    emp = store.find_employee(dto.employee_id)
    if not emp or emp.deleted:
        raise HTTPException(status_code=404, detail="employee not found")
    if not is_eligible(emp):
        raise HTTPException(status_code=400, detail="employee is inactive")

    ensure_no_conflicts(store, emp.id, dto.start_time, dto.end_time, dto.date)

    row = store.create_assignment({
        "employee_id": emp.id,
        "group_id": dto.group_id,
        "start_date": dto.start_date,
        "end_date": dto.end_date,
        "shift_name": dto.shift_name,
        "date": dto.date,
        "start_time": dto.start_time,
        "end_time": dto.end_time,
        "location": dto.location,
        "work_type": dto.work_type,
        "break_duration": dto.break_duration,
        "notes": dto.notes,
        "assigned_by": dto.assigned_by,
        "status": AssignmentStatus.scheduled,
    })
    logger.info(
        "User %d assigned shift %d to employee %d on %s %s-%s",
        dto.assigned_by, row.id, emp.id, dto.date.isoformat(), dto.start_time, dto.end_time,
    )
    return row


def update_assignment(store: AssignmentStore, assignment_id: int, patch: AssignmentUpdate) -> ShiftAssignment:
    row = store.get_assignment(assignment_id)
    if not row:
        raise HTTPException(status_code=404, detail="shift assignment not found")

    data = patch.model_dump(exclude_unset=True, exclude_none=True)

    moves_window = any(k in data for k in ("date", "start_time", "end_time"))
    reactivates = (
        "status" in data
        and data["status"] not in INACTIVE_STATUSES
        and row.status in INACTIVE_STATUSES
    )
    new_status = data.get("status", row.status)
    if (moves_window or reactivates) and new_status not in INACTIVE_STATUSES:
        ensure_no_conflicts(
            store,
            row.employee_id,
            data.get("start_time", row.start_time),
            data.get("end_time", row.end_time),
            data.get("date", row.date),
            exclude_assignment_id=row.id,
        )

    return store.update_assignment(row.id, data)


def delete_assignment(store: AssignmentStore, assignment_id: int) -> None:
    if not store.delete_assignment(assignment_id):
        raise HTTPException(status_code=404, detail="shift assignment not found")


def delete_group(store: AssignmentStore, group_id: str) -> int:
    if not group_id:
        raise HTTPException(status_code=422, detail="group id is required")
    count = store.delete_assignments_by_group(group_id)
    if not count:
        raise HTTPException(status_code=404, detail="shift group not found")
    logger.info("Deleted shift group %s (%d row(s))", group_id, count)
    return count
