# crm/schemas/feed.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from crm.schemas.common import StrictBaseModel, UserBrief


class NotificationRead(BaseModel):
    id: UUID
    user_id: UUID
    type: str
    title: str
    message: str
    link: str | None = None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class PublicationCreate(StrictBaseModel):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)


class PublicationRead(BaseModel):
    id: UUID
    author_id: UUID
    author: UserBrief | None = None
    title: str
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}
