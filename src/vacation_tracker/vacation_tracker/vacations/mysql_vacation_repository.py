from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import VacationStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import VacationRequest
from .repository import VacationRepository

_VACATION_COLUMNS = "v.vacation_id, v.user_id, v.start_date, v.end_date, v.status, v.created_at, v.decided_by, v.decided_at"


def _row_to_vacation(row: dict) -> VacationRequest:
    decided_by = row.get("decided_by")
    return VacationRequest(
        vacation_id=int(row["vacation_id"]),
        user_id=int(row["user_id"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        status=VacationStatus(row["status"]),
        created_at=row["created_at"],
        decided_by=int(decided_by) if decided_by is not None else None,
        decided_at=row.get("decided_at"),
    )


class MySQLVacationRepository(VacationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, start_date: date, end_date: date) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO vacation_requests(user_id, start_date, end_date, status)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(user_id), start_date, end_date, VacationStatus.PENDING.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            # fk_vacations_user: the owner was deleted concurrently
            raise NotFoundError("User not found")

    def get_by_id(self, vacation_id: int) -> Optional[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_VACATION_COLUMNS} FROM vacation_requests v WHERE v.vacation_id=%s",
                (int(vacation_id),),
            )
            row = fetchone(cur)
            return _row_to_vacation(row) if row else None

    def _select(self, where: str, params: tuple, *, join_users: bool = False) -> Sequence[VacationRequest]:
        join = "JOIN users u ON u.user_id = v.user_id" if join_users else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_VACATION_COLUMNS}
                FROM vacation_requests v
                {join}
                WHERE {where}
                ORDER BY v.created_at DESC, v.vacation_id DESC
                """,
                params,
            )
            return [_row_to_vacation(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[VacationRequest]:
        return self._select("1=1", ())

    def list_for_user(self, user_id: int) -> Sequence[VacationRequest]:
        return self._select("v.user_id=%s", (int(user_id),))

    def list_for_manager(self, manager_id: int) -> Sequence[VacationRequest]:
        return self._select("u.manager_id=%s", (int(manager_id),), join_users=True)

    def find_overlapping_approved(
        self,
        *,
        exclude_user_id: int,
        start_date: date,
        end_date: date,
    ) -> Sequence[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_VACATION_COLUMNS}
                FROM vacation_requests v
                WHERE v.user_id <> %s
                  AND v.status = %s
                  AND v.start_date <= %s
                  AND v.end_date >= %s
                ORDER BY v.start_date
                """,
                (int(exclude_user_id), VacationStatus.APPROVED.value, end_date, start_date),
            )
            return [_row_to_vacation(r) for r in fetchall(cur)]

    def set_status(
        self,
        *,
        vacation_id: int,
        status: VacationStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_requests
                SET status=%s, decided_by=%s, decided_at=%s
                WHERE vacation_id=%s
                """,
                (status.value, int(decided_by), decided_at, int(vacation_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, vacation_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM vacation_requests WHERE vacation_id=%s", (int(vacation_id),))
            return cur.rowcount > 0

    def count_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM vacation_requests WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
