# squad/routers/attendance.py

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from squad import auth, models, schemas
from squad.crud import ResourceHandler, handle_errors
from squad.db import get_db
from squad.errors import BadRequest, NotFound
from squad.models import AttendanceStatus, Role
from squad.ownership import resolve_attendance
from squad.policy import AccessPolicy
from squad.responses import api_response

router = APIRouter(
    prefix="/attendance",
    tags=["Attendance"]
)

ALL_ROLES = [Role.ADMIN.value, Role.COACH.value, Role.PLAYER.value]
VALID_STATUSES = {s.value for s in AttendanceStatus}


class AttendanceHandler(ResourceHandler):
    model = models.SessionAttendance
    out_schema = schemas.AttendanceOut
    # Writes belong to the coach of the session's batch
    policy = AccessPolicy()
    label = "Attendance record"
    id_label = "Attendance"
    related_missing_message = "Related session, batch, or player not found"
    required_fields = ("session_id", "player_id", "status")
    missing_fields_message = "Session ID, Player ID, and status are required for attendance"
    filter_fields = ("session_id", "player_id")

    def order_by(self):
        return [models.SessionAttendance.created_at.desc(), models.SessionAttendance.id.desc()]

    def resolve_ownership(self, db, row):
        return resolve_attendance(db, row)

    def coach_scope(self, coach_id):
        coach_sessions = select(models.TrainingSession.id).join(
            models.Batch, models.TrainingSession.batch_id == models.Batch.id
        ).where(models.Batch.coach_id == coach_id)
        return [models.SessionAttendance.session_id.in_(coach_sessions)]

    def validate_fields(self, values):
        if "status" in values and values["status"] not in VALID_STATUSES:
            raise BadRequest("Invalid status specified")

    def prepare_create(self, db, user, values):
        if db.get(models.TrainingSession, values["session_id"]) is None:
            raise NotFound("Training session not found")
        if db.get(models.Player, values["player_id"]) is None:
            raise NotFound("Player not found")
        return values


handler = AttendanceHandler()

# --- Get one record (?id=) or list records scoped to the caller ---
@router.get("")
@handle_errors("attendance")
def get_attendance(
    attendance_id: Optional[int] = Query(None, alias="id"),
    session_id: Optional[int] = Query(None, alias="sessionId"),
    player_id: Optional[int] = Query(None, alias="playerId"),
    limit: Optional[int] = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    if attendance_id is not None:
        return api_response(True, handler.get(db, current_user, attendance_id))
    records = handler.list(
        db, current_user,
        filters={"session_id": session_id, "player_id": player_id},
        limit=limit, offset=offset,
    )
    return api_response(True, records)

# --- Record attendance (admin or coach only) ---
@router.post("")
@handle_errors("attendance")
def create_attendance(
    payload: Optional[schemas.AttendanceCreate] = Body(None),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    new_id = handler.create(db, current_user, payload)
    return api_response(True, {"id": new_id}, status_code=status.HTTP_201_CREATED)

# --- Update status/comments (admin or the batch coach) ---
@router.put("")
@handle_errors("attendance")
def update_attendance(
    attendance_id: Optional[int] = Query(None, alias="id"),
    payload: Optional[schemas.AttendanceUpdate] = Body(None),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    affected = handler.update(db, current_user, attendance_id, payload)
    return api_response(True, {"affectedRows": affected})

# --- Delete record (admin or the batch coach) ---
@router.delete("")
@handle_errors("attendance")
def delete_attendance(
    attendance_id: Optional[int] = Query(None, alias="id"),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    affected = handler.delete(db, current_user, attendance_id)
    return api_response(True, {"affectedRows": affected})
