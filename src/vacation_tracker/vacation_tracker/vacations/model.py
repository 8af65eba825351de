from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import VacationStatus


@dataclass(frozen=True)
class VacationRequest:
    vacation_id: int
    user_id: int
    start_date: date
    end_date: date
    status: VacationStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None

    def overlaps(self, start_date: date, end_date: date) -> bool:
        """Inclusive bounds: sharing one day counts as an overlap."""
        return self.start_date <= end_date and self.end_date >= start_date

    def to_dict(self, *, user_name: Optional[str] = None) -> dict:
        return {
            "id": self.vacation_id,
            "userId": self.user_id,
            "userName": user_name,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "status": self.status.value,
            "decidedBy": self.decided_by,
            "decidedAt": self.decided_at.isoformat(timespec="seconds") if self.decided_at else None,
        }
