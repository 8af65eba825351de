from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, email, password_hash, name, role, manager_id"


def _row_to_user(row: dict) -> User:
    manager_id = row.get("manager_id")
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        name=row["name"],
        role=Role(row["role"]),
        manager_id=int(manager_id) if manager_id is not None else None,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def exists_by_email(self, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM users WHERE email=%s LIMIT 1", (email,))
            return fetchone(cur) is not None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY user_id")
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_by_manager(self, manager_id: int) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE manager_id=%s ORDER BY user_id",
                (int(manager_id),),
            )
            return [_row_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        manager_id: Optional[int],
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(email, password_hash, name, role, manager_id)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (email, password_hash, name, role.value, manager_id),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            # unique email, or a manager deleted concurrently
            raise ConflictError("Email already exists or manager no longer exists")

    def update_user(
        self,
        *,
        user_id: int,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        manager_id: Optional[int],
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE users
                    SET email=%s, password_hash=%s, name=%s, role=%s, manager_id=%s
                    WHERE user_id=%s
                    """,
                    (email, password_hash, name, role.value, manager_id, int(user_id)),
                )
                # MySQL reports 0 affected rows when nothing changed; existence was checked by the caller.
                return cur.rowcount >= 0
        except mysql.connector.IntegrityError:
            raise ConflictError("Email already exists or manager no longer exists")

    def delete_by_id(self, user_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError:
            # fk_vacations_user: a vacation was inserted after the service-level check
            raise ConflictError("Cannot delete user with existing vacation requests")
