from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..vacations.repository import VacationRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use case: manage the user directory (admin)."""

    def __init__(self, users: UserRepository, vacations: VacationRepository):
        self._users = users
        self._vacations = vacations

    @staticmethod
    def _require_admin(current_user: User) -> None:
        if current_user.role != Role.ADMIN:
            logger.warning("User %s (%s) denied user management", current_user.user_id, current_user.role.value)
            raise AuthorizationError("Only administrators can manage users")

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _require_manager(self, manager_id: int, *, for_user_id: Optional[int] = None) -> User:
        manager = self._users.get_by_id(int(manager_id))
        if not manager:
            raise NotFoundError("Manager not found")
        if for_user_id is not None:
            self._check_no_cycle(user_id=int(for_user_id), manager=manager)
        return manager

    def _check_no_cycle(self, *, user_id: int, manager: User) -> None:
        # Walk up from the new manager; reaching user_id would close a loop.
        seen: set[int] = set()
        current: Optional[User] = manager
        while current is not None:
            if current.user_id == user_id:
                raise ValidationError("Manager assignment would create a reporting cycle")
            if current.user_id in seen or current.manager_id is None:
                return
            seen.add(current.user_id)
            current = self._users.get_by_id(current.manager_id)

    def list_users(self, *, current_user: User) -> Sequence[User]:
        self._require_admin(current_user)
        return self._users.list_all()

    def get_user(self, *, current_user: User, user_id: int) -> User:
        if current_user.role != Role.ADMIN and current_user.user_id != int(user_id):
            raise AuthorizationError("You can only view your own profile")
        return self._require_user(user_id)

    def team_of(self, *, current_user: User, manager_id: int) -> Sequence[User]:
        if current_user.role != Role.ADMIN and current_user.user_id != int(manager_id):
            raise AuthorizationError("You can only view your own team")
        self._require_user(manager_id)
        return self._users.list_by_manager(int(manager_id))

    def create_user(
        self,
        *,
        current_user: User,
        email: str,
        password: str,
        name: str,
        role: Role,
        manager_id: Optional[int] = None,
    ) -> User:
        self._require_admin(current_user)

        email = require_email(email)
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.exists_by_email(email):
            raise ConflictError("Email already exists")
        if manager_id is not None:
            self._require_manager(manager_id)

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            role=role,
            manager_id=int(manager_id) if manager_id is not None else None,
        )
        logger.info("User %s created user %s (%s, %s)", current_user.user_id, user_id, email, role.value)
        return self._require_user(user_id)

    def update_user(
        self,
        *,
        current_user: User,
        user_id: int,
        email: Optional[str] = None,
        name: Optional[str] = None,
        role: Optional[Role] = None,
        manager_id: Optional[int] = None,
        clear_manager: bool = False,
        password: Optional[str] = None,
    ) -> User:
        """Partial update: only the given fields change.

        ``manager_id`` assigns a new manager; ``clear_manager`` removes it.
        """
        self._require_admin(current_user)
        user = self._require_user(user_id)

        new_email = user.email
        if email is not None:
            email = require_email(email)
            if email != user.email:
                if self._users.exists_by_email(email):
                    raise ConflictError("Email already exists")
                new_email = email

        new_name = require_non_empty(name, "Name") if name is not None else user.name

        new_manager_id = user.manager_id
        if clear_manager:
            new_manager_id = None
        elif manager_id is not None:
            new_manager_id = self._require_manager(manager_id, for_user_id=user.user_id).user_id

        password_hash = user.password_hash
        if password is not None:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            password_hash = generate_password_hash(password)

        self._users.update_user(
            user_id=user.user_id,
            email=new_email,
            password_hash=password_hash,
            name=new_name,
            role=role if role is not None else user.role,
            manager_id=new_manager_id,
        )
        logger.info("User %s updated user %s", current_user.user_id, user.user_id)
        return self._require_user(user.user_id)

    def delete_user(self, *, current_user: User, user_id: int) -> None:
        self._require_admin(current_user)
        user = self._require_user(user_id)

        if user.user_id == current_user.user_id:
            raise ValidationError("You cannot delete your own account")
        if self._vacations.count_for_user(user.user_id) > 0:
            raise ConflictError("Cannot delete user with existing vacation requests")

        if not self._users.delete_by_id(user.user_id):
            raise NotFoundError("User not found")
        logger.info("User %s deleted user %s", current_user.user_id, user.user_id)
