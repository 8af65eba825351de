from __future__ import annotations

from functools import wraps

from flask import Flask, g, jsonify, request

from ..common.http import json_body
from ..container import Container
from ..core.constants import API_PREFIX


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def make_auth_required(container: Container):
    """Decorator factory: resolve the bearer token into ``g.current_user``."""

    def auth_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = container.auth_service.resolve_token(_bearer_token())
            return view(*args, **kwargs)

        return wrapper

    return auth_required


def register(app: Flask, container: Container) -> None:
    @app.route(f"{API_PREFIX}/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        email = str(body.get("email") or "")
        password = str(body.get("password") or "")
        return jsonify(container.auth_service.login(email, password))
