# crm/schemas/user.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from crm.models.user import Role
from crm.schemas.common import StrictBaseModel


class UserRead(BaseModel):
    id: UUID
    email: str
    full_name: str
    role: Role | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UpdateRoleRequest(StrictBaseModel):
    role: Role
