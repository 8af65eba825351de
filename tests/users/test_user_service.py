from __future__ import annotations

from datetime import date

import pytest
from werkzeug.security import check_password_hash

from src.vacation_tracker.vacation_tracker.core.enums import Role
from src.vacation_tracker.vacation_tracker.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def test_admin_creates_user_with_hashed_password(container, people, users_repo):
    user = container.user_service.create_user(
        current_user=people["admin"],
        email="New.Person@Taskflow.com",
        password="hunter22",
        name="New Person",
        role=Role.COLLABORATOR,
        manager_id=people["manager"].user_id,
    )

    assert user.email == "new.person@taskflow.com"
    assert user.manager_id == people["manager"].user_id
    assert check_password_hash(users_repo.get_by_id(user.user_id).password_hash, "hunter22")


def test_create_rejects_duplicate_email(container, people):
    with pytest.raises(ConflictError):
        container.user_service.create_user(
            current_user=people["admin"],
            email="u@taskflow.com",
            password="hunter22",
            name="Dup",
            role=Role.COLLABORATOR,
        )


@pytest.mark.parametrize(
    "email, password, name",
    [
        ("not-an-email", "hunter22", "X"),
        ("x@taskflow.com", "short", "X"),
        ("x@taskflow.com", "hunter22", "   "),
    ],
)
def test_create_validates_input(container, people, email, password, name):
    with pytest.raises(ValidationError):
        container.user_service.create_user(
            current_user=people["admin"], email=email, password=password, name=name, role=Role.MANAGER
        )


def test_create_with_unknown_manager_is_not_found(container, people):
    with pytest.raises(NotFoundError):
        container.user_service.create_user(
            current_user=people["admin"],
            email="x@taskflow.com",
            password="hunter22",
            name="X",
            role=Role.COLLABORATOR,
            manager_id=999,
        )


def test_non_admin_cannot_manage_users(container, people):
    svc = container.user_service
    with pytest.raises(AuthorizationError):
        svc.list_users(current_user=people["manager"])
    with pytest.raises(AuthorizationError):
        svc.create_user(
            current_user=people["report"], email="x@taskflow.com", password="hunter22", name="X", role=Role.ADMIN
        )
    with pytest.raises(AuthorizationError):
        svc.delete_user(current_user=people["manager"], user_id=people["report"].user_id)


def test_update_merges_only_given_fields(container, people):
    updated = container.user_service.update_user(
        current_user=people["admin"], user_id=people["report"].user_id, name="Renamed"
    )

    assert updated.name == "Renamed"
    assert updated.email == "u@taskflow.com"
    assert updated.manager_id == people["manager"].user_id
    assert updated.role == Role.COLLABORATOR


def test_update_same_email_is_not_a_conflict(container, people):
    updated = container.user_service.update_user(
        current_user=people["admin"], user_id=people["report"].user_id, email="u@taskflow.com"
    )
    assert updated.email == "u@taskflow.com"


def test_update_to_taken_email_is_a_conflict(container, people):
    with pytest.raises(ConflictError):
        container.user_service.update_user(
            current_user=people["admin"], user_id=people["report"].user_id, email="v@taskflow.com"
        )


def test_update_can_move_and_clear_manager(container, people):
    svc = container.user_service
    moved = svc.update_user(
        current_user=people["admin"], user_id=people["report"].user_id, manager_id=people["other_manager"].user_id
    )
    assert moved.manager_id == people["other_manager"].user_id

    cleared = svc.update_user(current_user=people["admin"], user_id=people["report"].user_id, clear_manager=True)
    assert cleared.manager_id is None


def test_update_rejects_manager_cycles(container, people):
    svc = container.user_service
    manager, report = people["manager"], people["report"]

    with pytest.raises(ValidationError):
        svc.update_user(current_user=people["admin"], user_id=report.user_id, manager_id=report.user_id)
    with pytest.raises(ValidationError):
        svc.update_user(current_user=people["admin"], user_id=manager.user_id, manager_id=report.user_id)


def test_update_missing_user_is_not_found(container, people):
    with pytest.raises(NotFoundError):
        container.user_service.update_user(current_user=people["admin"], user_id=999, name="Ghost")


def test_delete_blocked_while_user_owns_vacations(container, people, vacations_repo):
    vacations_repo.add(user_id=people["report"].user_id, start_date=date(2024, 6, 1), end_date=date(2024, 6, 2))

    with pytest.raises(ConflictError):
        container.user_service.delete_user(current_user=people["admin"], user_id=people["report"].user_id)


def test_delete_user_without_vacations(container, people, users_repo):
    container.user_service.delete_user(current_user=people["admin"], user_id=people["loner"].user_id)
    assert users_repo.get_by_id(people["loner"].user_id) is None

    with pytest.raises(NotFoundError):
        container.user_service.delete_user(current_user=people["admin"], user_id=people["loner"].user_id)


def test_admin_cannot_delete_self(container, people):
    with pytest.raises(ValidationError):
        container.user_service.delete_user(current_user=people["admin"], user_id=people["admin"].user_id)


def test_get_user_is_admin_or_self(container, people):
    svc = container.user_service
    assert svc.get_user(current_user=people["report"], user_id=people["report"].user_id).name == "User U"
    assert svc.get_user(current_user=people["admin"], user_id=people["report"].user_id).name == "User U"
    with pytest.raises(AuthorizationError):
        svc.get_user(current_user=people["loner"], user_id=people["report"].user_id)


def test_team_of_manager(container, people):
    team = container.user_service.team_of(current_user=people["manager"], manager_id=people["manager"].user_id)
    assert [u.user_id for u in team] == [people["report"].user_id]

    with pytest.raises(AuthorizationError):
        container.user_service.team_of(current_user=people["other_manager"], manager_id=people["manager"].user_id)


def test_reports_of_deleted_manager_keep_working(container, people, users_repo):
    container.user_service.delete_user(current_user=people["admin"], user_id=people["other_manager"].user_id)

    orphan = users_repo.get_by_id(people["other_report"].user_id)
    assert orphan.manager_id is None

    svc = container.vacation_service
    vacation = svc.create(current_user=orphan, start_date=date(2024, 6, 1), end_date=date(2024, 6, 2))
    assert [v.vacation_id for v in svc.list_visible(current_user=orphan)] == [vacation.vacation_id]
    assert svc.list_visible(current_user=people["other_manager"]) == []
