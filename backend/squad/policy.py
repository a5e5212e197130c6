# squad/policy.py
"""Row-level access decisions for the resource handlers.

Every resource describes its rules with an `AccessPolicy`; the caller resolves
who owns the row (see `squad.ownership`) and `decide` answers allow/deny.
Admins are always allowed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from squad.models import Role


class Operation(str, Enum):
    READ = "read"
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Ownership:
    """Who a row belongs to, as user ids.

    `owner_user_id` is the user behind the coach responsible for the row
    (batch coach, note author); `subject_user_id` is the user behind the player
    the row is about. Either is None when the chain to it is broken.
    """
    owner_user_id: Optional[int] = None
    subject_user_id: Optional[int] = None


NO_OWNER = Ownership()


@dataclass(frozen=True)
class AccessPolicy:
    # Roles that may read any single row
    read_roles: FrozenSet[str] = frozenset()
    # Roles that may ask for the collection (the handler narrows it per role)
    list_roles: FrozenSet[str] = frozenset({Role.ADMIN.value, Role.COACH.value, Role.PLAYER.value})
    create_roles: FrozenSet[str] = frozenset({Role.ADMIN.value, Role.COACH.value})
    owner_may_write: bool = True
    subject_may_update: bool = False


def is_owner(principal, ownership: Ownership) -> bool:
    return (
        principal.role == Role.COACH.value
        and ownership.owner_user_id is not None
        and principal.id == ownership.owner_user_id
    )


def is_subject(principal, ownership: Ownership) -> bool:
    return ownership.subject_user_id is not None and principal.id == ownership.subject_user_id


def decide(principal, operation: Operation, ownership: Ownership, policy: AccessPolicy) -> bool:
    if principal.role == Role.ADMIN.value:
        return True

    if operation == Operation.READ:
        return (
            principal.role in policy.read_roles
            or is_owner(principal, ownership)
            or is_subject(principal, ownership)
        )
    if operation == Operation.LIST:
        return principal.role in policy.list_roles
    if operation == Operation.CREATE:
        # Players never create, whatever the table says
        return principal.role != Role.PLAYER.value and principal.role in policy.create_roles
    if operation == Operation.UPDATE:
        return (
            (policy.owner_may_write and is_owner(principal, ownership))
            or (policy.subject_may_update and principal.role == Role.PLAYER.value and is_subject(principal, ownership))
        )
    if operation == Operation.DELETE:
        return policy.owner_may_write and is_owner(principal, ownership)
    return False
