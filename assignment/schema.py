from __future__ import annotations
import datetime as dt
from typing import Optional
from typing_extensions import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import AssignmentStatus, SwapStatus, WorkLocation, WorkType
from .timeslot import normalize_hhmm


class EmployeeSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    model_config = ConfigDict(from_attributes=True)


class SwapRequestSchema(BaseModel):
    requested_by: Optional[int] = None
    requested_with: Optional[int] = None
    status: SwapStatus
    reason: str = ""
    requested_at: Optional[dt.datetime] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[dt.datetime] = None


class AssignmentSchema(BaseModel):
    id: int
    employee_id: int
    employee: Optional[EmployeeSummary] = None
    group_id: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    shift_name: str = ""
    date: dt.date
    start_time: str
    end_time: str
    location: WorkLocation
    work_type: WorkType
    status: AssignmentStatus
    break_duration: int = 0
    assigned_by: int
    notes: str = ""
    swap_request: Optional[SwapRequestSchema] = None
    model_config = ConfigDict(from_attributes=True)


class _ShiftFields(BaseModel):
    """Shift parameters shared by single and team assignment."""
    date: dt.date
    start_time: str
    end_time: str
    location: WorkLocation
    work_type: WorkType
    shift_name: str = ""
    break_duration: int = Field(0, ge=0, description="minutes")
    notes: str = ""
    group_id: Optional[str] = Field(None, max_length=64)
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def hhmm(cls, v: str) -> str:
        return normalize_hhmm(v)

    @model_validator(mode="after")
    def span_ordered(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self


# PUBLIC payload from clients
class AssignmentCreatePayload(_ShiftFields):
    employee_id: int
    model_config = ConfigDict(extra="forbid")


# INTERNAL DTO for the service
class AssignmentCreate(_ShiftFields):
    employee_id: int
    assigned_by: int


class TeamAssignPayload(_ShiftFields):
    team_id: int
    model_config = ConfigDict(extra="forbid")


class AssignmentUpdate(BaseModel):
    shift_name: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[WorkLocation] = None
    work_type: Optional[WorkType] = None
    break_duration: Optional[int] = Field(None, ge=0)
    status: Optional[AssignmentStatus] = None
    notes: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

    @field_validator("start_time", "end_time")
    @classmethod
    def hhmm(cls, v: Optional[str]) -> Optional[str]:
        return normalize_hhmm(v) if v is not None else v


class SwapRequestPayload(BaseModel):
    swap_with_employee_id: int
    reason: str = ""
    model_config = ConfigDict(extra="forbid")


# ---------- grouped listing ----------

class GroupedEmployee(BaseModel):
    employee_id: int
    employee_name: str = ""
    email: str = ""
    start_time: str
    end_time: str
    model_config = ConfigDict(from_attributes=True)


class ShiftGroupSchema(BaseModel):
    id: str
    group_id: Optional[str] = None
    shift_name: str = ""
    start_date: dt.date
    end_date: dt.date
    start_time: str
    end_time: str
    location: WorkLocation
    work_type: WorkType
    assigned_by: Optional[int] = None
    assigned_by_name: str = ""
    assigned_employees: list[GroupedEmployee]
    assignment_ids: list[int]
    model_config = ConfigDict(from_attributes=True)


ListingTab = Literal["all", "active", "old"]


# ---------- team assignment ----------

class TeamAssignSuccess(BaseModel):
    employee: EmployeeSummary
    assignment_id: int


class TeamAssignFailure(BaseModel):
    employee: EmployeeSummary
    reason: str


class TeamAssignResult(BaseModel):
    successful: list[TeamAssignSuccess] = []
    failed: list[TeamAssignFailure] = []


class TeamAssignResponse(BaseModel):
    message: str
    group_id: Optional[str] = None
    data: TeamAssignResult


# ---------- statistics ----------

class ShiftStatistics(BaseModel):
    total_shifts: int
    by_location: dict[str, int]
    by_work_type: dict[str, int]
    by_status: dict[str, int]
    total_hours: float
    unique_employees: int
