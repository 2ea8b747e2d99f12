# crm/models/task.py
from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm.models.base import Base, utcnow
from crm.models.client import Client
from crm.models.user import User


class TaskStatus(str, enum.Enum):
    new = "NEW"
    in_progress = "IN_PROGRESS"
    done = "DONE"


DEFAULT_TASK_PRIORITY = 50


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    client_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=TaskStatus.new.value)

    # 0..100, higher first
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_TASK_PRIORITY)

    creator_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    assignee_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True, index=True
    )

    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    client: Mapped[Client] = relationship(Client)
    creator: Mapped[User] = relationship(User, foreign_keys=[creator_id])
    assignee: Mapped[Optional[User]] = relationship(User, foreign_keys=[assignee_id])
