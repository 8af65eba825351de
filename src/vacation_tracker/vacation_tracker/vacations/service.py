from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import Role, VacationStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from . import permissions
from .model import VacationRequest
from .repository import VacationRepository

logger = logging.getLogger(__name__)


class VacationService:
    """Use cases for the vacation approval workflow.

    Check-then-act sequences (overlap check before insert, permission check
    before a status change or delete) run under one process-wide lock.
    """

    def __init__(self, vacations: VacationRepository, users: UserRepository):
        self._vacations = vacations
        self._users = users
        self._write_lock = threading.Lock()

    def _require_vacation(self, vacation_id: int) -> VacationRequest:
        vacation = self._vacations.get_by_id(int(vacation_id))
        if not vacation:
            raise NotFoundError("Vacation not found")
        return vacation

    def _owner_of(self, vacation: VacationRequest) -> User:
        owner = self._users.get_by_id(vacation.user_id)
        if not owner:
            raise NotFoundError("User not found")
        return owner

    def to_response(self, vacation: VacationRequest) -> dict:
        owner = self._users.get_by_id(vacation.user_id)
        return vacation.to_dict(user_name=owner.name if owner else None)

    def to_responses(self, vacations: Sequence[VacationRequest]) -> List[dict]:
        names: Dict[int, Optional[str]] = {}
        out: List[dict] = []
        for v in vacations:
            if v.user_id not in names:
                owner = self._users.get_by_id(v.user_id)
                names[v.user_id] = owner.name if owner else None
            out.append(v.to_dict(user_name=names[v.user_id]))
        return out

    def create(self, *, current_user: User, start_date: date, end_date: date) -> VacationRequest:
        if start_date > end_date:
            raise ValidationError("Start date must be before end date")

        with self._write_lock:
            overlapping = self._vacations.find_overlapping_approved(
                exclude_user_id=current_user.user_id,
                start_date=start_date,
                end_date=end_date,
            )
            if overlapping:
                logger.warning(
                    "User %s vacation %s..%s overlaps approved vacation(s) %s",
                    current_user.user_id,
                    start_date,
                    end_date,
                    [v.vacation_id for v in overlapping],
                )
                raise ConflictError("Vacation dates overlap with existing approved vacations")

            vacation_id = self._vacations.create(
                user_id=current_user.user_id,
                start_date=start_date,
                end_date=end_date,
            )

        logger.info("User %s requested vacation %s (%s..%s)", current_user.user_id, vacation_id, start_date, end_date)
        return self._require_vacation(vacation_id)

    def list_visible(self, *, current_user: User) -> Sequence[VacationRequest]:
        if current_user.role == Role.ADMIN:
            return self._vacations.list_all()
        if current_user.role == Role.MANAGER:
            return self._vacations.list_for_manager(current_user.user_id)
        return self._vacations.list_for_user(current_user.user_id)

    def get(self, *, current_user: User, vacation_id: int) -> VacationRequest:
        vacation = self._require_vacation(vacation_id)
        if not permissions.can_view(current_user, self._owner_of(vacation)):
            raise AuthorizationError("You cannot view this vacation")
        return vacation

    def _decide(self, *, current_user: User, vacation_id: int, status: VacationStatus) -> VacationRequest:
        action = "approve" if status == VacationStatus.APPROVED else "reject"
        with self._write_lock:
            vacation = self._require_vacation(vacation_id)

            if current_user.role == Role.COLLABORATOR:
                logger.warning("Collaborator %s tried to %s vacation %s", current_user.user_id, action, vacation.vacation_id)
                raise AuthorizationError(f"Collaborators cannot {action} vacations")
            if not permissions.can_decide(current_user, self._owner_of(vacation)):
                logger.warning("User %s tried to %s vacation %s outside their team", current_user.user_id, action, vacation.vacation_id)
                raise AuthorizationError(f"You can only {action} your team's vacations")

            self._vacations.set_status(
                vacation_id=vacation.vacation_id,
                status=status,
                decided_by=current_user.user_id,
                decided_at=now_local(),
            )

        logger.info("User %s set vacation %s to %s", current_user.user_id, vacation.vacation_id, status.value)
        return self._require_vacation(vacation.vacation_id)

    def approve(self, *, current_user: User, vacation_id: int) -> VacationRequest:
        return self._decide(current_user=current_user, vacation_id=vacation_id, status=VacationStatus.APPROVED)

    def reject(self, *, current_user: User, vacation_id: int) -> VacationRequest:
        return self._decide(current_user=current_user, vacation_id=vacation_id, status=VacationStatus.REJECTED)

    def delete(self, *, current_user: User, vacation_id: int) -> None:
        with self._write_lock:
            vacation = self._require_vacation(vacation_id)
            owner = self._owner_of(vacation)

            if not permissions.can_delete(current_user, owner):
                logger.warning("User %s tried to delete vacation %s of user %s", current_user.user_id, vacation.vacation_id, owner.user_id)
                raise AuthorizationError("You can only delete your own vacations")

            if not self._vacations.delete_by_id(vacation.vacation_id):
                raise NotFoundError("Vacation not found")

        logger.info("User %s deleted vacation %s", current_user.user_id, vacation.vacation_id)
