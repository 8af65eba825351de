"""Role-based access rules for vacation requests.

Each action is a plain function of (actor, owner); dispatch is on the Role enum.
"""

from __future__ import annotations

from ..core.enums import Role
from ..users.model import User


def is_team_member(manager: User, owner: User) -> bool:
    return owner.manager_id is not None and owner.manager_id == manager.user_id


def can_decide(actor: User, owner: User) -> bool:
    """Approve/reject."""
    if actor.role == Role.ADMIN:
        return True
    if actor.role == Role.MANAGER:
        return is_team_member(actor, owner)
    return False


def can_delete(actor: User, owner: User) -> bool:
    """Managers and admins may delete any request; collaborators only their own."""
    if actor.role in (Role.ADMIN, Role.MANAGER):
        return True
    return actor.user_id == owner.user_id


def can_view(actor: User, owner: User) -> bool:
    if actor.role == Role.ADMIN or actor.user_id == owner.user_id:
        return True
    if actor.role == Role.MANAGER:
        return is_team_member(actor, owner)
    return False
