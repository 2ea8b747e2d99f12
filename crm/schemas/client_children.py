# crm/schemas/client_children.py
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from crm.schemas.common import MONTH_PATTERN, StrictBaseModel, UserBrief


class CommentCreate(StrictBaseModel):
    content: str = Field(min_length=1, max_length=5000)


class CommentRead(BaseModel):
    id: UUID
    client_id: UUID
    author_id: UUID
    author: UserBrief | None = None
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class PaymentCreate(StrictBaseModel):
    amount: Decimal = Field(gt=0)
    month: str = Field(pattern=MONTH_PATTERN, examples=["2026-10"])
    is_renewal: bool = False


class PaymentRead(BaseModel):
    id: UUID
    client_id: UUID
    manager_id: UUID
    amount: Decimal
    month: str
    is_renewal: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CreativeCreate(StrictBaseModel):
    count: int = Field(gt=0)
    month: str = Field(pattern=MONTH_PATTERN, examples=["2026-10"])


class CreativeRead(BaseModel):
    id: UUID
    client_id: UUID
    designer_id: UUID
    designer: UserBrief | None = None
    count: int
    month: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RenewalClient(BaseModel):
    client_id: UUID
    client_name: str
    amount: Decimal
    renewed_at: datetime
    specialist: UserBrief | None = None


class RenewalsRead(BaseModel):
    month: str
    total_renewals: int
    clients: list[RenewalClient]
