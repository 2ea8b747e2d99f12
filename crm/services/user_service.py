# crm/services/user_service.py
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from crm.core.errors import NotFound
from crm.core.rbac import ActorContext, ensure_allowed
from crm.models.user import Role, User

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def list(self, *, actor: ActorContext, role: Role | None = None) -> list[User]:
        ensure_allowed("user.list", actor.role)
        stmt = select(User).order_by(User.full_name)
        if role is not None:
            stmt = stmt.where(User.role == role.value)
        return list(self.db.execute(stmt).scalars())

    def employees(self, *, actor: ActorContext) -> list[User]:
        ensure_allowed("user.list_employees", actor.role)
        return list(
            self.db.execute(
                select(User)
                .where(User.role.is_not(None), User.role != Role.admin.value)
                .order_by(User.full_name)
            ).scalars()
        )

    def set_role(self, *, user_id: UUID, role: Role, actor: ActorContext) -> User:
        ensure_allowed("user.set_role", actor.role)
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found")

        previous = user.role
        user.role = role.value
        self.db.flush()

        logger.info("user %s role %s -> %s by %s", user.id, previous, role.value, actor.user_id)
        return user
