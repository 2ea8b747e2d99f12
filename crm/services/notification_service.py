# crm/services/notification_service.py
from __future__ import annotations

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from crm.core.config import settings
from crm.core.errors import NotFound
from crm.models.notification import Notification, NotificationType


def notify(
    db: Session,
    *,
    user_id: UUID,
    type: NotificationType,
    title: str,
    message: str,
    link: str | None = None,
) -> Notification:
    n = Notification(
        user_id=user_id,
        type=type.value,
        title=title,
        message=message,
        link=link,
    )
    db.add(n)
    return n


def notify_task_assigned(db: Session, *, assignee_id: UUID, task_title: str, client_id: UUID, assigner_name: str) -> Notification:
    return notify(
        db,
        user_id=assignee_id,
        type=NotificationType.task_assigned,
        title="New task",
        message=f"{assigner_name} assigned you a task: {task_title}",
        link=f"/clients/{client_id}",
    )


def notify_client_assigned(db: Session, *, user_id: UUID, client_id: UUID, client_name: str, slot: str) -> Notification:
    return notify(
        db,
        user_id=user_id,
        type=NotificationType.client_assigned,
        title="New client",
        message=f"You were assigned to client {client_name} as {slot}",
        link=f"/clients/{client_id}",
    )


class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: UUID) -> list[Notification]:
        # unread first, newest first within each group
        return list(
            self.db.execute(
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(Notification.is_read.asc(), Notification.created_at.desc())
                .limit(settings.notifications_limit)
            ).scalars()
        )

    def mark_read(self, *, notification_id: UUID, user_id: UUID) -> None:
        n = self.db.get(Notification, notification_id)
        # чужие уведомления не раскрываем
        if n is None or n.user_id != user_id:
            raise NotFound("Notification not found")
        n.is_read = True
        self.db.flush()

    def mark_all_read(self, user_id: UUID) -> int:
        res = self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        return res.rowcount or 0
