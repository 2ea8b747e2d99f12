# crm/models/user.py
from __future__ import annotations

import enum
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from crm.models.base import Base, utcnow


class Role(str, enum.Enum):
    admin = "ADMIN"
    sales_manager = "SALES_MANAGER"
    specialist = "SPECIALIST"
    designer = "DESIGNER"
    lead_designer = "LEAD_DESIGNER"


# roles a client's designer slot accepts
DESIGNER_ROLES = {Role.designer.value, Role.lead_designer.value}


class User(Base):
    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)

    # NULL = registered, waiting for an admin to grant a role
    role: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
