from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import VacationStatus
from .model import VacationRequest


class VacationRepository(Protocol):
    def create(self, *, user_id: int, start_date: date, end_date: date) -> int:
        """Insert a PENDING request and return its id."""

        raise NotImplementedError

    def get_by_id(self, vacation_id: int) -> Optional[VacationRequest]:
        raise NotImplementedError

    def list_all(self) -> Sequence[VacationRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[VacationRequest]:
        raise NotImplementedError

    def list_for_manager(self, manager_id: int) -> Sequence[VacationRequest]:
        """Requests owned by users whose manager is ``manager_id``."""

        raise NotImplementedError

    def find_overlapping_approved(
        self,
        *,
        exclude_user_id: int,
        start_date: date,
        end_date: date,
    ) -> Sequence[VacationRequest]:
        """APPROVED requests of other users intersecting [start_date, end_date] (inclusive)."""

        raise NotImplementedError

    def set_status(
        self,
        *,
        vacation_id: int,
        status: VacationStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, vacation_id: int) -> bool:
        raise NotImplementedError

    def count_for_user(self, user_id: int) -> int:
        raise NotImplementedError
