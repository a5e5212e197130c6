# squad/crud.py
"""Generic CRUD-with-policy skeleton shared by the resource routers.

A resource subclasses `ResourceHandler`, fills in its model, schema, policy and
ownership resolver, and overrides the hooks it needs. Handlers raise the
exceptions in `squad.errors`; routers turn results into the response envelope.
"""

import functools
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy import delete, update
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from squad.errors import AccessDenied, BadRequest, InternalError, NotFound
from squad.models import Role
from squad.ownership import coach_profile_id, player_profile_id
from squad.policy import NO_OWNER, AccessPolicy, Operation, Ownership, decide

logger = logging.getLogger(__name__)


def handle_errors(label: str):
    """Turn anything that is not already an HTTP error into a logged 500."""
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as exc:
                logger.exception("%s endpoint error", label.capitalize())
                raise InternalError(f"Failed to process {label} request") from exc
        return wrapper
    return decorator


def build_update(payload: Optional[BaseModel], exclude: Iterable[str] = ()) -> Dict[str, Any]:
    """Field -> value for every field the caller actually sent (explicit nulls included)."""
    if payload is None:
        return {}
    excluded = set(exclude)
    return {k: v for k, v in payload.model_dump(exclude_unset=True).items() if k not in excluded}


class ResourceHandler:
    model = None
    out_schema = None
    policy = AccessPolicy()

    # Used in messages: "<id_label> ID is required for PUT method", "<label> not found"
    label = "Record"
    id_label = "Record"
    related_missing_message = "Related record not found"
    delete_denied_message = "Access Denied"

    required_fields: Tuple[str, ...] = ()
    missing_fields_message = "Missing required fields"
    # Body fields that are not columns of the model and get applied by a hook
    side_channel_fields: FrozenSet[str] = frozenset()
    # Query filters honoured for admins and coaches, keyed by column name
    filter_fields: Tuple[str, ...] = ()

    def order_by(self) -> List:
        return [self.model.id]

    # --- hooks ---
    def resolve_ownership(self, db: Session, row) -> Optional[Ownership]:
        return NO_OWNER

    def coach_scope(self, coach_id: int) -> List:
        """Collection conditions for a coach with a profile."""
        return [self.model.coach_id == coach_id]

    def player_scope(self, player_id: int) -> List:
        return [self.model.player_id == player_id]

    def scope_collection(self, db: Session, user) -> Optional[List]:
        """Conditions narrowing the collection to what `user` may see.

        None means the caller can see nothing at all.
        """
        if user.role == Role.PLAYER.value:
            player_id = player_profile_id(db, user.id)
            if player_id is None:
                raise NotFound("Player profile not found")
            return self.player_scope(player_id)
        if user.role == Role.COACH.value:
            coach_id = coach_profile_id(db, user.id)
            if coach_id is None:
                return None
            return self.coach_scope(coach_id)
        return []

    def validate_fields(self, values: Dict[str, Any]) -> None:
        pass

    def prepare_create(self, db: Session, user, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    def apply_side_channels(self, db: Session, row_id: int, side: Dict[str, Any]) -> None:
        pass

    # --- internals ---
    def _get_row(self, db: Session, row_id: int):
        row = db.query(self.model).filter(self.model.id == row_id).first()
        if row is None:
            raise NotFound(f"{self.label} not found")
        return row

    def _ownership(self, db: Session, row) -> Ownership:
        ownership = self.resolve_ownership(db, row)
        if ownership is None:
            raise NotFound(self.related_missing_message)
        return ownership

    def _require_id(self, row_id: Optional[int], method: str) -> int:
        if row_id is None:
            raise BadRequest(f"{self.id_label} ID is required for {method} method")
        return row_id

    # --- operations ---
    def get(self, db: Session, user, row_id: int):
        row = self._get_row(db, row_id)
        ownership = self._ownership(db, row)
        if not decide(user, Operation.READ, ownership, self.policy):
            raise AccessDenied()
        return self.out_schema.model_validate(row)

    def list(self, db: Session, user, filters: Optional[Dict[str, Any]] = None,
             limit: Optional[int] = None, offset: int = 0):
        if not decide(user, Operation.LIST, NO_OWNER, self.policy):
            raise AccessDenied()

        conditions = self.scope_collection(db, user)
        if conditions is None:
            logger.debug("%s list: user %s has no coach profile, returning nothing", self.label, user.id)
            return []
        conditions = list(conditions)

        # Players cannot widen or probe their scope through filters
        if user.role != Role.PLAYER.value:
            for column in self.filter_fields:
                value = (filters or {}).get(column)
                if value is not None:
                    conditions.append(getattr(self.model, column) == value)

        query = db.query(self.model).filter(*conditions).order_by(*self.order_by())
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        return [self.out_schema.model_validate(r) for r in query.all()]

    def create(self, db: Session, user, payload: Optional[BaseModel]) -> int:
        if not decide(user, Operation.CREATE, NO_OWNER, self.policy):
            raise AccessDenied()

        values = payload.model_dump() if payload is not None else {}
        if any(not values.get(field) for field in self.required_fields):
            raise BadRequest(self.missing_fields_message)
        self.validate_fields(values)
        values = self.prepare_create(db, user, values)

        row = self.model(**values)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row.id

    def update(self, db: Session, user, row_id: Optional[int], payload: Optional[BaseModel]) -> int:
        row_id = self._require_id(row_id, "PUT")
        row = self._get_row(db, row_id)

        fields = build_update(payload, exclude=self.side_channel_fields)
        side = {
            k: v for k, v in build_update(payload).items() if k in self.side_channel_fields
        }
        if not fields and not side:
            raise BadRequest("No valid fields provided for update")

        ownership = self._ownership(db, row)
        if not decide(user, Operation.UPDATE, ownership, self.policy):
            raise AccessDenied()
        self.validate_fields(fields)

        # Scalar fields and side channels commit or roll back together
        try:
            affected = 1
            if fields:
                stmt = (
                    update(self.model)
                    .where(self.model.id == row_id)
                    .values(**fields, updated_at=func.now())
                    .execution_options(synchronize_session=False)
                )
                affected = db.execute(stmt).rowcount
            if side:
                self.apply_side_channels(db, row_id, side)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return affected

    def delete(self, db: Session, user, row_id: Optional[int]) -> int:
        row_id = self._require_id(row_id, "DELETE")
        row = self._get_row(db, row_id)
        ownership = self._ownership(db, row)
        if not decide(user, Operation.DELETE, ownership, self.policy):
            raise AccessDenied(self.delete_denied_message)

        stmt = delete(self.model).where(self.model.id == row_id).execution_options(synchronize_session=False)
        affected = db.execute(stmt).rowcount
        db.commit()
        return affected
