from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_manager
from .schema import TeamSchema, TeamMemberSchema, TeamCreatePayload, TeamUpdate, TeamMemberAdd
from . import service

team_router = APIRouter(prefix="/teams", tags=["Teams"])


def _to_schema(db: Session, team) -> TeamSchema:
    out = TeamSchema.model_validate(team)
    out.member_count = service.member_count(db, team.id)
    return out

# List teams
@team_router.get("", response_model=list[TeamSchema])
def list_teams(db: Session = Depends(get_db), _user=Depends(get_current_active_user)):
    return [_to_schema(db, t) for t in service.get_teams(db)]

# Get team by id
@team_router.get("/{team_id}", response_model=TeamSchema)
def team_detail(team_id: int, db: Session = Depends(get_db), _user=Depends(get_current_active_user)):
    obj = service.get_team(db, team_id)
    if not obj:
        raise HTTPException(status_code=404, detail="team not found")
    return _to_schema(db, obj)

# Create team
@team_router.post("", response_model=TeamSchema, status_code=status.HTTP_201_CREATED)
def team_post(payload: TeamCreatePayload, db: Session = Depends(get_db), _mgr=Depends(require_manager)):
    try:
        return _to_schema(db, service.create_team(db, payload))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="team name already exists")

# Update team
@team_router.patch("/{team_id}", response_model=TeamSchema)
def team_patch(team_id: int, payload: TeamUpdate, db: Session = Depends(get_db), _mgr=Depends(require_manager)):
    try:
        return _to_schema(db, service.update_team(db, team_id, payload))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="team name already exists")

# Delete team
@team_router.delete("/{team_id}")
def team_delete(team_id: int, db: Session = Depends(get_db), _mgr=Depends(require_manager)):
    if not service.get_team(db, team_id):
        raise HTTPException(status_code=404, detail="team not found")
    service.delete_team(db, team_id)
    return {"message": "team deleted"}

# List members
@team_router.get("/{team_id}/members", response_model=list[TeamMemberSchema])
def team_members(team_id: int, active_only: bool = False, db: Session = Depends(get_db), _user=Depends(get_current_active_user)):
    if not service.get_team(db, team_id):
        raise HTTPException(status_code=404, detail="team not found")
    return service.get_team_members(db, team_id, active_only=active_only)

# Add member
@team_router.post("/{team_id}/members", response_model=TeamSchema, status_code=status.HTTP_201_CREATED)
def team_member_add(team_id: int, payload: TeamMemberAdd, db: Session = Depends(get_db), _mgr=Depends(require_manager)):
    return _to_schema(db, service.add_member(db, team_id, payload.employee_id))

# Remove member
@team_router.delete("/{team_id}/members/{employee_id}")
def team_member_remove(team_id: int, employee_id: int, db: Session = Depends(get_db), _mgr=Depends(require_manager)):
    service.remove_member(db, team_id, employee_id)
    return {"message": "team member removed"}
