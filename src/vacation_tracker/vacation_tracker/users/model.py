from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object (no DB access). The manager is referenced by id and
    resolved through the repository when needed.
    """

    user_id: int
    email: str
    password_hash: str
    name: str
    role: Role
    manager_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "managerId": self.manager_id,
        }
