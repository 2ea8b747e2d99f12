# crm/api/notifications.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from crm.api.deps import get_actor
from crm.core.db import get_db
from crm.core.rbac import ActorContext
from crm.schemas.common import Ok
from crm.schemas.feed import NotificationRead
from crm.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return NotificationService(db).list_for_user(actor.user_id)


# declared before /{notification_id}/read so "read-all" is not parsed as an id
@router.patch("/read-all", response_model=Ok)
def read_all(
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    NotificationService(db).mark_all_read(actor.user_id)
    db.commit()
    return Ok()


@router.patch("/{notification_id}/read", response_model=Ok)
def read_one(
    notification_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    NotificationService(db).mark_read(notification_id=notification_id, user_id=actor.user_id)
    db.commit()
    return Ok()
