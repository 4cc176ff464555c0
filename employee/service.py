import logging
from datetime import datetime, timezone
from typing import Optional, List

from sqlalchemy.orm import Session
from sqlalchemy import select, delete, update, and_

from .models import Employee, EmploymentStatus
from .schema import EmployeeCreatePayload, EmployeeUpdate
from assignment.models import ShiftAssignment, SwapStatus
from team.models import TeamMember

logger = logging.getLogger(__name__)


def eligible_clause():
    """SQL filter matching employees who can be put on the rota."""
    return and_(
        Employee.status == EmploymentStatus.active,
        Employee.is_active.is_(True),
        Employee.deleted.is_not(True),
    )

def is_eligible(emp: Optional[Employee]) -> bool:
    return (
        emp is not None
        and emp.status == EmploymentStatus.active
        and bool(emp.is_active)
        and not emp.deleted
    )

def get_employees(db: Session, *, active_only: bool = False) -> List[Employee]:
    statement = select(Employee).where(Employee.deleted.is_not(True))
    if active_only:
        statement = statement.where(eligible_clause())
    statement = statement.order_by(Employee.first_name.asc(), Employee.last_name.asc())
    return list(db.scalars(statement))

def get_employee(db: Session, employee_id: int) -> Optional[Employee]:
    return db.get(Employee, employee_id)

def get_employee_for_user(db: Session, user_id: int) -> Optional[Employee]:
    statement = select(Employee).where(Employee.user_id == user_id, Employee.deleted.is_not(True))
    return db.scalars(statement).first()

def create_employee(db: Session, employee: EmployeeCreatePayload) -> Employee:
    db_employee = Employee(
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=str(employee.email).lower(),
        status=employee.status,
        user_id=employee.user_id,
        is_active=True,
    )
    db.add(db_employee)
    db.commit()
    db.refresh(db_employee)
    return db_employee

def update_employee(db: Session, employee_id: int, patch: EmployeeUpdate) -> Optional[Employee]:
    db_employee = db.get(Employee, employee_id)
    if not db_employee:
        return None
    data = patch.model_dump(exclude_unset=True)
    if "email" in data and data["email"] is not None:
        data["email"] = str(data["email"]).lower()
    for k, v in data.items():
        setattr(db_employee, k, v)
    db.commit()
    db.refresh(db_employee)
    return db_employee

def delete_employee(db: Session, employee_id: int) -> None:
    """
    Remove the employee together with their shift rows and team memberships.
    Pending swap requests offered to them are closed as Rejected.
    """
    db_employee = db.get(Employee, employee_id)
    if db_employee:
        removed = db.execute(
            delete(ShiftAssignment).where(ShiftAssignment.employee_id == employee_id)
        ).rowcount
        # pending swaps offered to this employee can no longer be approved
        withdrawn = db.execute(
            update(ShiftAssignment)
            .where(
                ShiftAssignment.swap_requested_with == employee_id,
                ShiftAssignment.swap_status == SwapStatus.pending,
            )
            .values(
                swap_status=SwapStatus.rejected,
                swap_requested_with=None,
                swap_reviewed_at=datetime.now(timezone.utc),
            )
        ).rowcount
        db.execute(delete(TeamMember).where(TeamMember.employee_id == employee_id))
        db.delete(db_employee)
        db.commit()
        logger.info(
            "Deleted employee %d, %d shift assignment(s), %d pending swap(s) withdrawn",
            employee_id, removed, withdrawn,
        )
    return
