# crm/models/client.py
from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm.models.base import Base, utcnow
from crm.models.user import User


class ClientStatus(str, enum.Enum):
    new = "NEW"
    assigned = "ASSIGNED"
    in_work = "IN_WORK"
    done = "DONE"
    rejected = "REJECTED"


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # at least one of full_name / company_name is set (checked in service)
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    company_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    group_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    services: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    payment_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ClientStatus.new.value, index=True
    )
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_by_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    sold_by_id: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    # ---- specialist slot ----
    assigned_to_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True, index=True
    )
    assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    assignment_seen: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # ---- designer slot ----
    designer_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True, index=True
    )
    designer_assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    designer_assignment_seen: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

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

    row_version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_by: Mapped[User] = relationship(User, foreign_keys=[created_by_id])
    sold_by: Mapped[Optional[User]] = relationship(User, foreign_keys=[sold_by_id])
    assigned_to: Mapped[Optional[User]] = relationship(User, foreign_keys=[assigned_to_id])
    designer: Mapped[Optional[User]] = relationship(User, foreign_keys=[designer_id])

    __mapper_args__ = {"version_id_col": row_version}

    @property
    def display_name(self) -> str:
        return self.full_name or self.company_name or ""
