# crm/models/publication.py
from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm.models.base import Base, utcnow
from crm.models.user import User


class Publication(Base):
    __tablename__ = "publications"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    author_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    author: Mapped[User] = relationship(User)
