# squad/ownership.py
"""Ownership resolution: walk a row's foreign keys back to user ids.

Each helper is a single hop and returns None when the link is missing, so a
broken chain always ends in "no owner" and the policy denies.
"""

from typing import Optional

from sqlalchemy.orm import Session

from squad import models
from squad.policy import Ownership


# -------------------------------
# Single hops
# -------------------------------
def coach_user_id(db: Session, coach_id: Optional[int]) -> Optional[int]:
    if coach_id is None:
        return None
    row = db.query(models.Coach.user_id).filter(models.Coach.id == coach_id).first()
    return row.user_id if row else None

def player_user_id(db: Session, player_id: Optional[int]) -> Optional[int]:
    if player_id is None:
        return None
    row = db.query(models.Player.user_id).filter(models.Player.id == player_id).first()
    return row.user_id if row else None

def session_batch(db: Session, session_id: Optional[int]) -> Optional[models.Batch]:
    if session_id is None:
        return None
    return db.query(models.Batch).join(
        models.TrainingSession, models.TrainingSession.batch_id == models.Batch.id
    ).filter(models.TrainingSession.id == session_id).first()

def coach_profile_id(db: Session, user_id: int) -> Optional[int]:
    row = db.query(models.Coach.id).filter(models.Coach.user_id == user_id).first()
    return row.id if row else None

def player_profile_id(db: Session, user_id: int) -> Optional[int]:
    row = db.query(models.Player.id).filter(models.Player.user_id == user_id).first()
    return row.id if row else None


# -------------------------------
# Per-resource resolvers
# -------------------------------
def resolve_player(db: Session, player: models.Player) -> Optional[Ownership]:
    return Ownership(subject_user_id=player.user_id)

def resolve_attendance(db: Session, record: models.SessionAttendance) -> Optional[Ownership]:
    """attendance -> session -> batch -> coach -> user, and attendance -> player -> user.

    None when the session, its batch, or the player is gone; a batch without a
    coach still resolves, just without an owner.
    """
    batch = session_batch(db, record.session_id)
    subject = player_user_id(db, record.player_id)
    if batch is None or subject is None:
        return None
    return Ownership(owner_user_id=coach_user_id(db, batch.coach_id), subject_user_id=subject)

def resolve_note(db: Session, note: models.PerformanceNote) -> Optional[Ownership]:
    return Ownership(
        owner_user_id=coach_user_id(db, note.coach_id),
        subject_user_id=player_user_id(db, note.player_id),
    )
