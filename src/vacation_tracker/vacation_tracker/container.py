from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.service import AuthService
from .core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService
from .vacations.mysql_vacation_repository import MySQLVacationRepository
from .vacations.repository import VacationRepository
from .vacations.service import VacationService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    vacations_repo: VacationRepository

    auth_service: AuthService
    user_service: UserService
    vacation_service: VacationService

    conn: Optional[DatabaseConnection] = None


def assemble(
    users_repo: UserRepository,
    vacations_repo: VacationRepository,
    *,
    secret_key: str,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of the given repositories (MySQL or in-memory)."""
    return Container(
        users_repo=users_repo,
        vacations_repo=vacations_repo,
        auth_service=AuthService(users_repo, secret_key=secret_key, max_age_seconds=token_max_age_seconds),
        user_service=UserService(users_repo, vacations_repo),
        vacation_service=VacationService(vacations_repo, users_repo),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        MySQLUserRepository(conn),
        MySQLVacationRepository(conn),
        secret_key=secret_key,
        token_max_age_seconds=token_max_age_seconds,
        conn=conn,
    )
