from __future__ import annotations

from typing import Optional

from flask import Flask, g, jsonify

from ..auth.controller import make_auth_required
from ..common.http import json_body
from ..container import Container
from ..core.constants import API_PREFIX
from ..core.enums import Role
from ..core.exceptions import ValidationError


def _parse_role(value) -> Role:
    try:
        return Role(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError("Invalid role")


def _parse_manager_id(value) -> Optional[int]:
    if value is None or value == "":
        return None
    # bool is an int subclass; non-integral floats are not ids.
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError("managerId must be a user id")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("managerId must be a user id")


def _optional_str(body: dict, key: str) -> Optional[str]:
    value = body.get(key)
    return None if value is None else str(value)


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container)
    service = container.user_service

    @app.route(f"{API_PREFIX}/users", methods=["GET"], endpoint="list_users")
    @auth_required
    def list_users():
        return jsonify([u.to_dict() for u in service.list_users(current_user=g.current_user)])

    @app.route(f"{API_PREFIX}/users", methods=["POST"], endpoint="create_user")
    @auth_required
    def create_user():
        body = json_body()
        user = service.create_user(
            current_user=g.current_user,
            email=str(body.get("email") or ""),
            password=str(body.get("password") or ""),
            name=str(body.get("name") or ""),
            role=_parse_role(body.get("role")),
            manager_id=_parse_manager_id(body.get("managerId")),
        )
        return jsonify(user.to_dict()), 201

    @app.route(f"{API_PREFIX}/users/me", methods=["GET"], endpoint="current_user")
    @auth_required
    def current_user():
        return jsonify(g.current_user.to_dict())

    @app.route(f"{API_PREFIX}/users/<int:user_id>", methods=["GET"], endpoint="get_user")
    @auth_required
    def get_user(user_id: int):
        return jsonify(service.get_user(current_user=g.current_user, user_id=user_id).to_dict())

    @app.route(f"{API_PREFIX}/users/<int:user_id>/team", methods=["GET"], endpoint="user_team")
    @auth_required
    def user_team(user_id: int):
        team = service.team_of(current_user=g.current_user, manager_id=user_id)
        return jsonify([u.to_dict() for u in team])

    @app.route(f"{API_PREFIX}/users/<int:user_id>", methods=["PUT"], endpoint="update_user")
    @auth_required
    def update_user(user_id: int):
        body = json_body()
        # An explicit "managerId": null removes the manager; an absent key leaves it unchanged.
        clear_manager = "managerId" in body and body.get("managerId") in (None, "")
        user = service.update_user(
            current_user=g.current_user,
            user_id=user_id,
            email=_optional_str(body, "email"),
            name=_optional_str(body, "name"),
            role=_parse_role(body["role"]) if body.get("role") is not None else None,
            manager_id=_parse_manager_id(body.get("managerId")),
            clear_manager=clear_manager,
            password=_optional_str(body, "password"),
        )
        return jsonify(user.to_dict())

    @app.route(f"{API_PREFIX}/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @auth_required
    def delete_user(user_id: int):
        service.delete_user(current_user=g.current_user, user_id=user_id)
        return "", 204
