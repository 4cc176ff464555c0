from __future__ import annotations
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_manager
from employee.service import get_employee_for_user

from .models import AssignmentStatus, WorkLocation, WorkType
from .schema import (
    AssignmentSchema,
    AssignmentCreatePayload,
    AssignmentCreate,
    AssignmentUpdate,
    ListingTab,
    ShiftGroupSchema,
    ShiftStatistics,
    SwapRequestPayload,
    TeamAssignPayload,
    TeamAssignResponse,
    )
from .store import SqlAssignmentStore
from . import service, swap_service
from .team_assign_service import assign_to_team


assignment_router = APIRouter(prefix="/rota/shift-assignments", tags=["Rota"])


def get_store(db: Session = Depends(get_db)) -> SqlAssignmentStore:
    return SqlAssignmentStore(db)


# Create a single assignment (manager only)
@assignment_router.post("", response_model=AssignmentSchema, status_code=status.HTTP_201_CREATED)
def create_assignment(
    payload: AssignmentCreatePayload,
    store: SqlAssignmentStore = Depends(get_store),
    mgr = Depends(require_manager),
    ):
    dto = AssignmentCreate(assigned_by=mgr.id, **payload.model_dump())
    try:
        return service.create_assignment(store, dto)
    except IntegrityError:
        store.rollback()
        raise HTTPException(status_code=409, detail="shift assignment could not be saved")

# Assign one shift to every active member of a team (manager only)
@assignment_router.post("/team", response_model=TeamAssignResponse, status_code=status.HTTP_201_CREATED)
def create_team_assignment(
    payload: TeamAssignPayload,
    store: SqlAssignmentStore = Depends(get_store),
    mgr = Depends(require_manager),
    ):
    group_id, result = assign_to_team(store, payload, assigned_by=mgr.id)
    return TeamAssignResponse(
        message=(
            f"Shift assignment to team completed. "
            f"{len(result.successful)} successful, {len(result.failed)} failed"
        ),
        group_id=group_id,
        data=result,
    )

# List assignments with optional filters
@assignment_router.get("", response_model=list[AssignmentSchema])
def list_assignments(
    tab: ListingTab = Query("all"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    employee_id: Optional[int] = Query(None),
    location: Optional[WorkLocation] = Query(None),
    work_type: Optional[WorkType] = Query(None),
    status: Optional[AssignmentStatus] = Query(None),
    store: SqlAssignmentStore = Depends(get_store),
    _user = Depends(get_current_active_user),
    ):
    return service.get_assignments(
        store,
        tab=tab,
        start_date=start_date,
        end_date=end_date,
        employee_id=employee_id,
        location=location,
        work_type=work_type,
        status=status,
    )

# Same filters, collapsed into shift groups
@assignment_router.get("/grouped", response_model=list[ShiftGroupSchema])
def list_grouped_assignments(
    tab: ListingTab = Query("all"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    employee_id: Optional[int] = Query(None),
    location: Optional[WorkLocation] = Query(None),
    work_type: Optional[WorkType] = Query(None),
    status: Optional[AssignmentStatus] = Query(None),
    store: SqlAssignmentStore = Depends(get_store),
    _user = Depends(get_current_active_user),
    ):
    return service.get_grouped_assignments(
        store,
        tab=tab,
        start_date=start_date,
        end_date=end_date,
        employee_id=employee_id,
        location=location,
        work_type=work_type,
        status=status,
    )

@assignment_router.get("/statistics", response_model=ShiftStatistics)
def shift_statistics(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    store: SqlAssignmentStore = Depends(get_store),
    _user = Depends(get_current_active_user),
    ):
    return service.get_statistics(store, start_date=start_date, end_date=end_date)

@assignment_router.get("/location/{location}", response_model=list[AssignmentSchema])
def list_by_location(
    location: WorkLocation,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    store: SqlAssignmentStore = Depends(get_store),
    _user = Depends(get_current_active_user),
    ):
    return service.get_assignments(store, location=location, start_date=start_date, end_date=end_date)

@assignment_router.get("/employee/{employee_id}", response_model=list[AssignmentSchema])
def list_by_employee(
    employee_id: int,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    store: SqlAssignmentStore = Depends(get_store),
    _user = Depends(get_current_active_user),
    ):
    return service.get_assignments(store, employee_id=employee_id, start_date=start_date, end_date=end_date)

# Delete every row of a shift group (manager only)
@assignment_router.delete("/group/{group_id}")
def delete_assignment_group(
    group_id: str,
    store: SqlAssignmentStore = Depends(get_store),
    _mgr = Depends(require_manager),
    ):
    count = service.delete_group(store, group_id)
    return {"message": "shift group deleted", "deleted_count": count}

@assignment_router.get("/{assignment_id}", response_model=AssignmentSchema)
def get_assignment(
    assignment_id: int,
    store: SqlAssignmentStore = Depends(get_store),
    _user = Depends(get_current_active_user),
    ):
    obj = service.get_assignment(store, assignment_id)
    if not obj:
        raise HTTPException(status_code=404, detail="shift assignment not found")
    return obj

# Update assignment (manager only)
@assignment_router.patch("/{assignment_id}", response_model=AssignmentSchema)
def update_assignment(
    assignment_id: int,
    payload: AssignmentUpdate,
    store: SqlAssignmentStore = Depends(get_store),
    _mgr = Depends(require_manager),
    ):
    try:
        return service.update_assignment(store, assignment_id, payload)
    except IntegrityError:
        store.rollback()
        raise HTTPException(status_code=409, detail="shift assignment could not be saved")

# Delete assignment (manager only)
@assignment_router.delete("/{assignment_id}")
def delete_assignment(
    assignment_id: int,
    store: SqlAssignmentStore = Depends(get_store),
    _mgr = Depends(require_manager),
    ):
    service.delete_assignment(store, assignment_id)
    return {"message": "shift assignment deleted"}

# ---------- swaps ----------

@assignment_router.post("/{assignment_id}/swap-request", response_model=AssignmentSchema)
def request_swap(
    assignment_id: int,
    payload: SwapRequestPayload,
    db: Session = Depends(get_db),
    store: SqlAssignmentStore = Depends(get_store),
    user = Depends(get_current_active_user),
    ):
    me = get_employee_for_user(db, user.id)
    return swap_service.request_swap(
        store,
        assignment_id,
        caller_employee_id=me.id if me else None,
        target_employee_id=payload.swap_with_employee_id,
        reason=payload.reason,
    )

@assignment_router.post("/{assignment_id}/swap-approve", response_model=AssignmentSchema)
def approve_swap(
    assignment_id: int,
    store: SqlAssignmentStore = Depends(get_store),
    mgr = Depends(require_manager),
    ):
    try:
        return swap_service.approve_swap(store, assignment_id, reviewer_id=mgr.id)
    except IntegrityError:
        store.rollback()
        raise HTTPException(status_code=409, detail="swap could not be applied")

@assignment_router.post("/{assignment_id}/swap-reject", response_model=AssignmentSchema)
def reject_swap(
    assignment_id: int,
    store: SqlAssignmentStore = Depends(get_store),
    mgr = Depends(require_manager),
    ):
    return swap_service.reject_swap(store, assignment_id, reviewer_id=mgr.id)
