# crm/schemas/common.py
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
PHONE_PATTERN = r"^\+?[\d\s\-()]{7,20}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class StrictBaseModel(BaseModel):
    """Strict request models: forbid unknown fields."""

    model_config = ConfigDict(extra="forbid")


class UserBrief(BaseModel):
    id: UUID
    full_name: str
    role: str | None = None

    model_config = {"from_attributes": True}


class Deleted(BaseModel):
    deleted: bool = True


class Ok(BaseModel):
    success: bool = True
