from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.vacation_tracker.vacation_tracker.container import assemble
from src.vacation_tracker.vacation_tracker.core.enums import Role, VacationStatus
from src.vacation_tracker.vacation_tracker.main import create_app
from src.vacation_tracker.vacation_tracker.users.model import User
from src.vacation_tracker.vacation_tracker.vacations.model import VacationRequest

PASSWORD = "secret123"
PASSWORD_HASH = generate_password_hash(PASSWORD, method="pbkdf2:sha256:1000")


class InMemoryUsers:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}

    def add(self, *, email: str, name: str, role: Role, manager_id: Optional[int] = None) -> User:
        uid = self.create_user(email=email, password_hash=PASSWORD_HASH, name=name, role=role, manager_id=manager_id)
        return self.users[uid]

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def exists_by_email(self, email):
        return self.get_by_email(email) is not None

    def list_all(self):
        return sorted(self.users.values(), key=lambda u: u.user_id)

    def list_by_manager(self, manager_id):
        return [u for u in self.list_all() if u.manager_id == int(manager_id)]

    def create_user(self, *, email, password_hash, name, role, manager_id):
        uid = self._next_id
        self._next_id += 1
        self.users[uid] = User(
            user_id=uid,
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            manager_id=manager_id,
        )
        return uid

    def update_user(self, *, user_id, email, password_hash, name, role, manager_id):
        if int(user_id) not in self.users:
            return False
        self.users[int(user_id)] = replace(
            self.users[int(user_id)],
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            manager_id=manager_id,
        )
        return True

    def delete_by_id(self, user_id):
        if self.users.pop(int(user_id), None) is None:
            return False
        # ON DELETE SET NULL on users.manager_id
        for uid, u in list(self.users.items()):
            if u.manager_id == int(user_id):
                self.users[uid] = replace(u, manager_id=None)
        return True


class InMemoryVacations:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._next_id = 1
        self.vacations: dict[int, VacationRequest] = {}

    def add(self, *, user_id: int, start_date: date, end_date: date, status: VacationStatus = VacationStatus.PENDING) -> VacationRequest:
        vid = self.create(user_id=user_id, start_date=start_date, end_date=end_date)
        self.vacations[vid] = replace(self.vacations[vid], status=status)
        return self.vacations[vid]

    def create(self, *, user_id, start_date, end_date):
        vid = self._next_id
        self._next_id += 1
        self.vacations[vid] = VacationRequest(
            vacation_id=vid,
            user_id=int(user_id),
            start_date=start_date,
            end_date=end_date,
            status=VacationStatus.PENDING,
            created_at=datetime(2024, 5, 1, 9, 0, 0),
        )
        return vid

    def get_by_id(self, vacation_id):
        return self.vacations.get(int(vacation_id))

    def _newest_first(self, items):
        return sorted(items, key=lambda v: v.vacation_id, reverse=True)

    def list_all(self):
        return self._newest_first(self.vacations.values())

    def list_for_user(self, user_id):
        return self._newest_first(v for v in self.vacations.values() if v.user_id == int(user_id))

    def list_for_manager(self, manager_id):
        team = {u.user_id for u in self._users.list_by_manager(manager_id)}
        return self._newest_first(v for v in self.vacations.values() if v.user_id in team)

    def find_overlapping_approved(self, *, exclude_user_id, start_date, end_date):
        return [
            v
            for v in self.vacations.values()
            if v.user_id != int(exclude_user_id)
            and v.status == VacationStatus.APPROVED
            and v.overlaps(start_date, end_date)
        ]

    def set_status(self, *, vacation_id, status, decided_by, decided_at):
        if int(vacation_id) not in self.vacations:
            return False
        self.vacations[int(vacation_id)] = replace(
            self.vacations[int(vacation_id)],
            status=status,
            decided_by=int(decided_by),
            decided_at=decided_at,
        )
        return True

    def delete_by_id(self, vacation_id):
        return self.vacations.pop(int(vacation_id), None) is not None

    def count_for_user(self, user_id):
        return sum(1 for v in self.vacations.values() if v.user_id == int(user_id))


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def vacations_repo(users_repo):
    return InMemoryVacations(users_repo)


@pytest.fixture
def container(users_repo, vacations_repo):
    return assemble(users_repo, vacations_repo, secret_key="test-secret", token_max_age_seconds=3600)


@pytest.fixture
def people(users_repo):
    """admin, manager M with report U, a second manager with report V, and a collaborator without manager."""
    admin = users_repo.add(email="admin@taskflow.com", name="Admin", role=Role.ADMIN)
    manager = users_repo.add(email="m@taskflow.com", name="Manager M", role=Role.MANAGER)
    report = users_repo.add(email="u@taskflow.com", name="User U", role=Role.COLLABORATOR, manager_id=manager.user_id)
    other_manager = users_repo.add(email="m2@taskflow.com", name="Manager N", role=Role.MANAGER)
    other_report = users_repo.add(
        email="v@taskflow.com", name="User V", role=Role.COLLABORATOR, manager_id=other_manager.user_id
    )
    loner = users_repo.add(email="w@taskflow.com", name="User W", role=Role.COLLABORATOR)
    return {
        "admin": admin,
        "manager": manager,
        "report": report,
        "other_manager": other_manager,
        "other_report": other_report,
        "loner": loner,
    }


@pytest.fixture
def client(container):
    app = create_app(container, settings_module="config.testing")
    return app.test_client()


@pytest.fixture
def auth_header(container):
    def _header(user: User) -> dict:
        return {"Authorization": f"Bearer {container.auth_service.issue_token(user)}"}

    return _header
