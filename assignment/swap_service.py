"""
Shift-swap workflow.

Each assignment carries at most one swap request at a time:

    (none) -> Pending -> Approved | Rejected

A new request may be filed once the previous one reached a terminal state.
Approval hands the row to the requested colleague and marks it Swapped.
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException

from .models import ShiftAssignment, AssignmentStatus, SwapStatus
from .store import AssignmentStore
from employee.service import is_eligible

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _get_or_404(store: AssignmentStore, assignment_id: int) -> ShiftAssignment:
    row = store.get_assignment(assignment_id)
    if not row:
        raise HTTPException(status_code=404, detail="shift assignment not found")
    return row


def _ensure_pending(row: ShiftAssignment) -> None:
    if row.swap_status != SwapStatus.pending:
        raise HTTPException(status_code=400, detail="no pending swap request for this shift")


def request_swap(
    store: AssignmentStore,
    assignment_id: int,
    *,
    caller_employee_id: Optional[int],
    target_employee_id: Optional[int],
    reason: str = "",
) -> ShiftAssignment:
    """File a swap request on behalf of the current assignee."""
    if not target_employee_id:
        raise HTTPException(status_code=422, detail="swap target employee id is required")

    row = _get_or_404(store, assignment_id)

    if caller_employee_id is None or row.employee_id != caller_employee_id:
        raise HTTPException(status_code=403, detail="you can only request a swap for your own shifts")

    if row.swap_status == SwapStatus.pending:
        raise HTTPException(status_code=400, detail="a swap request is already pending for this shift")

    target = store.find_employee(target_employee_id)
    if not is_eligible(target):
        raise HTTPException(status_code=404, detail="target employee not found or not eligible for shift swaps")

    updated = store.update_assignment(row.id, {
        "swap_requested_by": caller_employee_id,
        "swap_requested_with": target_employee_id,
        "swap_status": SwapStatus.pending,
        "swap_reason": reason or "",
        "swap_requested_at": _now(),
        "swap_reviewed_by": None,
        "swap_reviewed_at": None,
    })
    logger.info(
        "Employee %d requested swap of assignment %d with employee %d",
        caller_employee_id, row.id, target_employee_id,
    )
    return updated


def approve_swap(store: AssignmentStore, assignment_id: int, *, reviewer_id: int) -> ShiftAssignment:
    """Approve the pending request: the row moves to the requested colleague."""
    row = _get_or_404(store, assignment_id)
    _ensure_pending(row)

    target = store.find_employee(row.swap_requested_with) if row.swap_requested_with else None
    if not is_eligible(target):
        raise HTTPException(status_code=404, detail="target employee not found or not eligible for shift swaps")

    original = row.employee_id
    updated = store.update_assignment(row.id, {
        "employee_id": row.swap_requested_with,
        "status": AssignmentStatus.swapped,
        "swap_status": SwapStatus.approved,
        "swap_reviewed_by": reviewer_id,
        "swap_reviewed_at": _now(),
    })
    logger.info(
        "User %d approved swap of assignment %d: employee %d -> %d",
        reviewer_id, row.id, original, updated.employee_id,
    )
    return updated


def reject_swap(store: AssignmentStore, assignment_id: int, *, reviewer_id: int) -> ShiftAssignment:
    row = _get_or_404(store, assignment_id)
    _ensure_pending(row)

    updated = store.update_assignment(row.id, {
        "swap_status": SwapStatus.rejected,
        "swap_reviewed_by": reviewer_id,
        "swap_reviewed_at": _now(),
    })
    logger.info("User %d rejected swap of assignment %d", reviewer_id, row.id)
    return updated
