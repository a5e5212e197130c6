# squad/routers/performance_notes.py

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from squad import auth, models, schemas
from squad.crud import ResourceHandler, handle_errors
from squad.db import get_db
from squad.errors import BadRequest, NotFound
from squad.models import Role
from squad.ownership import coach_profile_id, resolve_note
from squad.policy import AccessPolicy
from squad.responses import api_response

router = APIRouter(
    prefix="/performance-notes",
    tags=["Performance Notes"]
)

ALL_ROLES = [Role.ADMIN.value, Role.COACH.value, Role.PLAYER.value]


class PerformanceNoteHandler(ResourceHandler):
    model = models.PerformanceNote
    out_schema = schemas.PerformanceNoteOut
    # Writes belong to the authoring coach
    policy = AccessPolicy()
    label = "Performance note"
    id_label = "Performance note"
    required_fields = ("player_id", "date", "note")
    missing_fields_message = "Player ID, date, and note are required for performance note"
    filter_fields = ("player_id", "coach_id")

    def order_by(self):
        return [
            models.PerformanceNote.date.desc(),
            models.PerformanceNote.created_at.desc(),
            models.PerformanceNote.id.desc(),
        ]

    def resolve_ownership(self, db, row):
        return resolve_note(db, row)

    def validate_fields(self, values):
        for field in ("date", "note"):
            if field in values and not values[field]:
                raise BadRequest(f"Performance note {field} cannot be empty")

    def prepare_create(self, db, user, values):
        # A coach always authors as themselves
        if user.role == Role.COACH.value:
            values["coach_id"] = coach_profile_id(db, user.id)
        elif values.get("coach_id") is not None and db.get(models.Coach, values["coach_id"]) is None:
            raise NotFound("Coach not found")
        if db.get(models.Player, values["player_id"]) is None:
            raise NotFound("Player not found")
        return values


handler = PerformanceNoteHandler()

# --- Get one note (?id=) or list notes scoped to the caller ---
@router.get("")
@handle_errors("performance notes")
def get_notes(
    note_id: Optional[int] = Query(None, alias="id"),
    player_id: Optional[int] = Query(None, alias="playerId"),
    coach_id: Optional[int] = Query(None, alias="coachId"),
    limit: Optional[int] = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    if note_id is not None:
        return api_response(True, handler.get(db, current_user, note_id))
    notes = handler.list(
        db, current_user,
        filters={"player_id": player_id, "coach_id": coach_id},
        limit=limit, offset=offset,
    )
    return api_response(True, notes)

# --- Write a note (admin or coach only) ---
@router.post("")
@handle_errors("performance notes")
def create_note(
    payload: Optional[schemas.PerformanceNoteCreate] = Body(None),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    new_id = handler.create(db, current_user, payload)
    return api_response(True, {"id": new_id}, status_code=status.HTTP_201_CREATED)

# --- Edit a note (admin or the authoring coach) ---
@router.put("")
@handle_errors("performance notes")
def update_note(
    note_id: Optional[int] = Query(None, alias="id"),
    payload: Optional[schemas.PerformanceNoteUpdate] = Body(None),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    affected = handler.update(db, current_user, note_id, payload)
    return api_response(True, {"affectedRows": affected})

# --- Delete a note (admin or the authoring coach) ---
@router.delete("")
@handle_errors("performance notes")
def delete_note(
    note_id: Optional[int] = Query(None, alias="id"),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    affected = handler.delete(db, current_user, note_id)
    return api_response(True, {"affectedRows": affected})
