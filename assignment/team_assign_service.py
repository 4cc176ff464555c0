from __future__ import annotations
import logging
import uuid

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from .models import AssignmentStatus
from .schema import TeamAssignPayload, TeamAssignResult, TeamAssignSuccess, TeamAssignFailure, EmployeeSummary
from .store import AssignmentStore
from .conflicts import detect_conflicts

logger = logging.getLogger(__name__)

CONFLICT_REASON = "conflict detected"


def assign_to_team(
    store: AssignmentStore,
    payload: TeamAssignPayload,
    *,
    assigned_by: int,
) -> tuple[str, TeamAssignResult]:
    """
    Give every eligible member of a team the same shift.

    - Members who are inactive, terminated or deleted are left out silently.
    - Members are handled one at a time; a conflict or a failed insert is
      recorded for that member and the loop moves on.
    - Rows already created stay in place when a later member fails.
    - Every row written shares one group_id so the batch lists as one group.

    Returns (group_id, result).
    """
    team = store.find_team(payload.team_id)
    if not team:
        raise HTTPException(status_code=404, detail="team not found")

    members = store.find_team_members(team.id, active_only=True)
    if not members:
        raise HTTPException(status_code=400, detail="no active members found in this team")

    group_id = payload.group_id or uuid.uuid4().hex
    logger.info("Assigning shift to %d active member(s) of team %d", len(members), team.id)

    result = TeamAssignResult()
    for member in members:
        who = EmployeeSummary.model_validate(member)

        conflicts = detect_conflicts(
            store, member.id, payload.start_time, payload.end_time, payload.date
        )
        if conflicts:
            result.failed.append(TeamAssignFailure(employee=who, reason=CONFLICT_REASON))
            continue

        try:
            row = store.create_assignment({
                "employee_id": member.id,
                "group_id": group_id,
                "start_date": payload.start_date,
                "end_date": payload.end_date,
                "shift_name": payload.shift_name,
                "date": payload.date,
                "start_time": payload.start_time,
                "end_time": payload.end_time,
                "location": payload.location,
                "work_type": payload.work_type,
                "break_duration": payload.break_duration,
                "notes": payload.notes,
                "assigned_by": assigned_by,
                "status": AssignmentStatus.scheduled,
            })
        except SQLAlchemyError as exc:
            store.rollback()
            logger.warning("Failed to assign shift to employee %d: %s", member.id, exc)
            result.failed.append(TeamAssignFailure(employee=who, reason=str(exc.__cause__ or exc)))
            continue

        result.successful.append(TeamAssignSuccess(employee=who, assignment_id=row.id))

    logger.info(
        "Team %d shift assignment completed: %d successful, %d failed",
        team.id, len(result.successful), len(result.failed),
    )
    return group_id, result
