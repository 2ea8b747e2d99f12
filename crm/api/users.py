# crm/api/users.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from crm.api.deps import get_actor
from crm.core.db import get_db
from crm.core.rbac import ActorContext
from crm.models.user import Role
from crm.schemas.user import UpdateRoleRequest, UserRead
from crm.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserRead])
def list_users(
    role: Role | None = Query(default=None, description="Filter by role"),
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return UserService(db).list(actor=actor, role=role)


@router.get("/employees", response_model=list[UserRead])
def list_employees(
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return UserService(db).employees(actor=actor)


@router.patch("/{user_id}/role", response_model=UserRead)
def set_role(
    user_id: UUID,
    body: UpdateRoleRequest,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    user = UserService(db).set_role(user_id=user_id, role=body.role, actor=actor)
    db.commit()
    return user
