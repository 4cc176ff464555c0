from __future__ import annotations
from typing import Optional, List

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from .models import Team, TeamMember
from .schema import TeamCreatePayload, TeamUpdate
from employee.models import Employee
from employee.service import eligible_clause


def _initials(name: str) -> str:
    words = [w for w in name.split() if w]
    return "".join(w[0] for w in words[:5]).upper()

def get_teams(db: Session, *, active_only: bool = False) -> List[Team]:
    stmt = select(Team)
    if active_only:
        stmt = stmt.where(Team.is_active.is_(True))
    stmt = stmt.order_by(Team.name.asc())
    return list(db.scalars(stmt))

def get_team(db: Session, team_id: int) -> Optional[Team]:
    return db.get(Team, team_id)

def member_count(db: Session, team_id: int) -> int:
    return db.scalar(
        select(func.count(TeamMember.employee_id)).where(TeamMember.team_id == team_id)
    ) or 0

def get_team_members(db: Session, team_id: int, *, active_only: bool = False) -> List[Employee]:
    """
    Members of a team ordered by name.
    With active_only, employees who are not eligible for the rota
    (inactive, terminated or soft-deleted) are left out.
    """
    stmt = (
        select(Employee)
        .join(TeamMember, TeamMember.employee_id == Employee.id)
        .where(TeamMember.team_id == team_id)
    )
    if active_only:
        stmt = stmt.where(eligible_clause())
    stmt = stmt.order_by(Employee.first_name, Employee.last_name, Employee.id)
    return list(db.scalars(stmt))

def create_team(db: Session, dto: TeamCreatePayload) -> Team:
    row = Team(
        name=dto.name.strip(),
        initials=(dto.initials or _initials(dto.name)),
        description=dto.description,
        is_active=True,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row

def update_team(db: Session, team_id: int, patch: TeamUpdate) -> Team:
    row = db.get(Team, team_id)
    if not row:
        raise HTTPException(status_code=404, detail="team not found")
    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    for k, v in data.items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row

def delete_team(db: Session, team_id: int) -> None:
    row = db.get(Team, team_id)
    if row:
        db.delete(row)
        db.commit()

def add_member(db: Session, team_id: int, employee_id: int) -> Team:
    team = db.get(Team, team_id)
    if not team:
        raise HTTPException(status_code=404, detail="team not found")
    emp = db.get(Employee, employee_id)
    if not emp or emp.deleted:
        raise HTTPException(status_code=404, detail="employee not found")

    exists = db.get(TeamMember, (team_id, employee_id))
    if not exists:
        db.add(TeamMember(team_id=team_id, employee_id=employee_id))
        db.commit()
    db.refresh(team)
    return team

def remove_member(db: Session, team_id: int, employee_id: int) -> None:
    row = db.get(TeamMember, (team_id, employee_id))
    if not row:
        raise HTTPException(status_code=404, detail="team member not found")
    db.delete(row)
    db.commit()
