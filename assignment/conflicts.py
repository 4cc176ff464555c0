from __future__ import annotations
import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException

from .models import ShiftAssignment, INACTIVE_STATUSES
from .store import AssignmentStore
from .timeslot import to_day, windows_overlap

logger = logging.getLogger(__name__)


def detect_conflicts(
    store: AssignmentStore,
    employee_id: int,
    start_time: str,
    end_time: str,
    day: date | datetime | str,
    exclude_assignment_id: Optional[int] = None,
) -> list[ShiftAssignment]:
    """
    Existing assignments of ``employee_id`` on ``day`` that overlap the
    candidate window. Cancelled and swapped rows are ignored, as is
    ``exclude_assignment_id`` (the row being edited).

    Nothing is locked: a concurrent request can still insert an overlapping
    row between this check and the caller's write.
    """
    target = to_day(day)
    existing = store.find_assignments(
        employee_id=employee_id,
        date_from=target,
        date_to=target,
        exclude_statuses=INACTIVE_STATUSES,
        exclude_id=exclude_assignment_id,
    )
    return [
        row for row in existing
        if windows_overlap(start_time, end_time, row.start_time, row.end_time)
    ]


def conflict_details(conflicts: list[ShiftAssignment]) -> list[dict]:
    return [
        {
            "id": c.id,
            "date": c.date.isoformat(),
            "start_time": c.start_time,
            "end_time": c.end_time,
            "location": c.location.value if hasattr(c.location, "value") else c.location,
            "status": c.status.value if hasattr(c.status, "value") else c.status,
        }
        for c in conflicts
    ]


def ensure_no_conflicts(
    store: AssignmentStore,
    employee_id: int,
    start_time: str,
    end_time: str,
    day: date | datetime | str,
    exclude_assignment_id: Optional[int] = None,
) -> None:
    """Raise 409 carrying every overlapping row when the window is taken."""
    conflicts = detect_conflicts(store, employee_id, start_time, end_time, day, exclude_assignment_id)
    if not conflicts:
        return

    target = to_day(day)
    logger.info(
        "Shift conflict for employee %d on %s %s-%s: %d existing shift(s)",
        employee_id, target.isoformat(), start_time, end_time, len(conflicts),
    )
    raise HTTPException(
        status_code=409,
        detail={
            "message": (
                f"Shift conflict detected. Employee already has {len(conflicts)} shift(s) on "
                f"{target.isoformat()} that overlap with {start_time} - {end_time}."
            ),
            "conflicts": conflict_details(conflicts),
        },
    )
