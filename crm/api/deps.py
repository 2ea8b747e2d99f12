# crm/api/deps.py
from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from crm.core.db import get_db
from crm.core.rbac import ActorContext, ensure_role_assigned
from crm.models.user import User
from crm.services.auth_service import AuthService

# -----------------------------------------------------------------------------
# Bearer session auth
# -----------------------------------------------------------------------------

bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Session token from /auth/login or /auth/register.",
)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=401,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    """Any authenticated user, including ones still waiting for a role."""
    return AuthService(db).resolve(token)


def get_actor(user: User = Depends(get_current_user)) -> ActorContext:
    """Authenticated user with a role; business endpoints depend on this."""
    actor = ActorContext(user_id=user.id, role=user.role, full_name=user.full_name)
    ensure_role_assigned(actor)
    return actor
