# crm/schemas/task.py

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from crm.models.task import DEFAULT_TASK_PRIORITY, TaskStatus
from crm.schemas.common import StrictBaseModel, UserBrief


class TaskCreate(StrictBaseModel):
    client_id: UUID
    title: str = Field(min_length=1, max_length=300)
    description: str | None = None
    priority: int = Field(default=DEFAULT_TASK_PRIORITY, ge=0, le=100)
    assignee_id: UUID | None = None
    due_date: date | None = None


class TaskUpdate(StrictBaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    description: Optional[str] = None
    priority: Optional[int] = Field(default=None, ge=0, le=100)
    status: Optional[TaskStatus] = None
    assignee_id: Optional[UUID] = None
    due_date: Optional[date] = None


class TaskClientBrief(BaseModel):
    id: UUID
    full_name: str | None = None
    company_name: str | None = None

    model_config = {"from_attributes": True}


class TaskRead(BaseModel):
    id: UUID
    client_id: UUID
    client: TaskClientBrief | None = None
    title: str
    description: str | None = None
    priority: int
    status: TaskStatus
    creator_id: UUID
    creator: UserBrief | None = None
    assignee_id: UUID | None = None
    assignee: UserBrief | None = None
    due_date: date | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
