from __future__ import annotations

import logging
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash

from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS, TOKEN_SALT
from ..core.exceptions import AuthenticationError
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate users and resolve bearer tokens to User records."""

    def __init__(
        self,
        users: UserRepository,
        *,
        secret_key: str,
        max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    ):
        self._users = users
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)
        self._max_age_seconds = int(max_age_seconds)

    def authenticate(self, email: str, password: str) -> User:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.warning("Failed login for %s", user.email)
            raise AuthenticationError("Invalid email or password")
        return user

    def issue_token(self, user: User) -> str:
        return self._serializer.dumps({"uid": user.user_id})

    def login(self, email: str, password: str) -> dict:
        user = self.authenticate(email, password)
        logger.info("User %s logged in", user.user_id)
        return {
            "token": self.issue_token(user),
            "userId": user.user_id,
            "email": user.email,
            "name": user.name,
            "role": user.role.value,
        }

    def resolve_token(self, token: Optional[str]) -> User:
        if not token:
            raise AuthenticationError("Missing bearer token")
        try:
            payload = self._serializer.loads(token, max_age=self._max_age_seconds)
        except SignatureExpired:
            raise AuthenticationError("Token expired")
        except BadSignature:
            raise AuthenticationError("Invalid token")

        user_id = payload.get("uid") if isinstance(payload, dict) else None
        user = self._users.get_by_id(int(user_id)) if user_id is not None else None
        if not user:
            raise AuthenticationError("User not found")
        return user
