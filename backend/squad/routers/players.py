# squad/routers/players.py

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy import delete, insert
from sqlalchemy.orm import Session

from squad import auth, models, schemas
from squad.crud import ResourceHandler, handle_errors
from squad.db import get_db
from squad.errors import NotImplementedFeature, TransactionFailure
from squad.models import Role
from squad.ownership import resolve_player
from squad.policy import AccessPolicy
from squad.responses import api_response

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/players",
    tags=["Players"]
)

ALL_ROLES = [Role.ADMIN.value, Role.COACH.value, Role.PLAYER.value]

# -------------------------------
# Player <-> game associations
# -------------------------------
def resolve_game_ids(db: Session, names: List[str]) -> List[int]:
    """Game ids for the given names; unknown names are dropped."""
    if not names:
        return []
    rows = db.query(models.Game.id).filter(models.Game.name.in_(list(dict.fromkeys(names)))).all()
    return [row.id for row in rows]

def replace_player_games(db: Session, player_id: int, names: List[str]) -> None:
    """Replace the player's whole association list. Runs inside the caller's transaction."""
    db.execute(delete(models.PlayerGame).where(models.PlayerGame.player_id == player_id))
    game_ids = resolve_game_ids(db, names)
    if game_ids:
        db.execute(insert(models.PlayerGame), [{"player_id": player_id, "game_id": g} for g in game_ids])


class PlayerHandler(ResourceHandler):
    model = models.Player
    out_schema = schemas.PlayerOut
    # Coaches read every profile; a player may update their own; only admins delete
    policy = AccessPolicy(
        read_roles=frozenset({Role.COACH.value}),
        list_roles=frozenset({Role.ADMIN.value, Role.COACH.value}),
        owner_may_write=False,
        subject_may_update=True,
    )
    label = "Player"
    id_label = "Player"
    delete_denied_message = "Access Denied: Admins only"
    side_channel_fields = frozenset({"sports"})

    def resolve_ownership(self, db, row):
        return resolve_player(db, row)

    def scope_collection(self, db, user):
        return []

    def apply_side_channels(self, db: Session, row_id: int, side: Dict[str, Any]) -> None:
        try:
            replace_player_games(db, row_id, side.get("sports") or [])
        except Exception as exc:
            logger.exception("Transaction failed during player sports update")
            raise TransactionFailure("Failed to update player sports") from exc


handler = PlayerHandler()

# --- Get one player (?id=) or list players (admin or coach) ---
@router.get("")
@handle_errors("players")
def get_players(
    player_id: Optional[int] = Query(None, alias="id"),
    limit: Optional[int] = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    if player_id is not None:
        return api_response(True, handler.get(db, current_user, player_id))
    return api_response(True, handler.list(db, current_user, limit=limit, offset=offset))

# --- Players are created by registration, not here ---
@router.post("")
@handle_errors("players")
def create_player(current_user=Depends(auth.require_role(ALL_ROLES))):
    raise NotImplementedFeature("POST method not implemented for /api/players")

# --- Update player profile and/or sports (admin or the player themselves) ---
@router.put("")
@handle_errors("players")
def update_player(
    player_id: Optional[int] = Query(None, alias="id"),
    payload: Optional[schemas.PlayerUpdate] = Body(None),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    affected = handler.update(db, current_user, player_id, payload)
    return api_response(True, {"affectedRows": affected})

# --- Delete player (admin only) ---
@router.delete("")
@handle_errors("players")
def delete_player(
    player_id: Optional[int] = Query(None, alias="id"),
    current_user=Depends(auth.require_role(ALL_ROLES)),
    db: Session = Depends(get_db)
):
    affected = handler.delete(db, current_user, player_id)
    return api_response(True, {"affectedRows": affected})
