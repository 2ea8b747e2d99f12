# crm/services/auth_service.py
from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from crm.core.config import settings
from crm.core.errors import BadRequest, Unauthorized
from crm.core.security import generate_token, hash_password, verify_password
from crm.models.auth_session import AuthSession
from crm.models.base import utcnow
from crm.models.user import User
from crm.schemas.auth import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def _open_session(self, user: User) -> str:
        token = generate_token()
        self.db.add(
            AuthSession(
                token=token,
                user_id=user.id,
                expires_at=utcnow() + timedelta(hours=settings.session_ttl_hours),
            )
        )
        self.db.flush()
        return token

    def register(self, data: RegisterRequest) -> tuple[User, str]:
        """New accounts start without a role until an admin grants one."""
        email = _normalize_email(data.email)
        exists = self.db.execute(select(User.id).where(User.email == email)).first()
        if exists is not None:
            raise BadRequest("Email already registered")

        user = User(
            email=email,
            password_hash=hash_password(data.password),
            full_name=data.full_name.strip(),
            role=None,
        )
        self.db.add(user)
        self.db.flush()

        logger.info("user %s registered (%s)", user.id, email)
        return user, self._open_session(user)

    def login(self, data: LoginRequest) -> tuple[User, str]:
        email = _normalize_email(data.email)
        user = self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()
        if user is None or not verify_password(data.password, user.password_hash):
            logger.info("failed login for %s", email)
            raise Unauthorized("Invalid email or password")

        logger.info("user %s logged in", user.id)
        return user, self._open_session(user)

    def logout(self, token: str) -> None:
        self.db.execute(delete(AuthSession).where(AuthSession.token == token))

    def resolve(self, token: str) -> User:
        """Bearer token -> user; unknown or expired tokens are 401."""
        session = self.db.execute(
            select(AuthSession).where(AuthSession.token == token, AuthSession.expires_at > utcnow())
        ).scalar_one_or_none()
        if session is None:
            raise Unauthorized("Invalid or expired token")
        return session.user
