# crm/models/assignment_history.py
from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm.models.base import Base, utcnow
from crm.models.user import User


class AssignmentType(str, enum.Enum):
    specialist = "SPECIALIST"
    designer = "DESIGNER"


class AssignmentHistory(Base):
    """Append-only: one row per (re)assignment. Never updated or deleted."""

    __tablename__ = "assignment_history"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    client_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type: Mapped[str] = mapped_column(String(16), nullable=False)

    # exactly one of these is set, matching `type`
    specialist_id: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    designer_id: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    assigned_by_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    specialist: Mapped[Optional[User]] = relationship(User, foreign_keys=[specialist_id])
    designer: Mapped[Optional[User]] = relationship(User, foreign_keys=[designer_id])
    assigned_by: Mapped[User] = relationship(User, foreign_keys=[assigned_by_id])
