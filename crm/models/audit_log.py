# crm/models/audit_log.py
from __future__ import annotations

import enum
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from crm.models.base import Base, utcnow


class AuditAction(str, enum.Enum):
    client_created = "CLIENT_CREATED"
    client_archived = "CLIENT_ARCHIVED"
    status_changed = "STATUS_CHANGED"
    specialist_assigned = "SPECIALIST_ASSIGNED"
    specialist_reassigned = "SPECIALIST_REASSIGNED"
    designer_assigned = "DESIGNER_ASSIGNED"
    designer_reassigned = "DESIGNER_REASSIGNED"
    specialist_acknowledged = "SPECIALIST_ACKNOWLEDGED"
    designer_acknowledged = "DESIGNER_ACKNOWLEDGED"


class AuditLog(Base):
    """Append-only business event trail."""

    __tablename__ = "audit_logs"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Что произошло
    action: Mapped[str] = mapped_column(String(50), nullable=False)

    # Кто инициировал
    user_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    client_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    details: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
