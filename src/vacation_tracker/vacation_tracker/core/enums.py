from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    COLLABORATOR = "COLLABORATOR"


class VacationStatus(str, Enum):
    """Lifecycle of a vacation request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
