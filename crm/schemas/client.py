# crm/schemas/client.py

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from crm.models.assignment_history import AssignmentType
from crm.models.client import ClientStatus
from crm.schemas.common import EMAIL_PATTERN, PHONE_PATTERN, StrictBaseModel, UserBrief


class ClientCreate(StrictBaseModel):
    full_name: str | None = Field(default=None, max_length=300)
    company_name: str | None = Field(default=None, max_length=300)
    phone: str = Field(pattern=PHONE_PATTERN, examples=["+7 (999) 123-45-67"])
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    group_name: str | None = None
    services: list[str] = Field(min_length=1, examples=[["SMM", "Website"]])
    notes: str | None = None
    payment_amount: Decimal | None = Field(default=None, ge=0)
    sold_by_id: UUID | None = None
    # backfilled creation date (CSV import of historical clients)
    created_at: datetime | None = None


class ClientUpdate(StrictBaseModel):
    """Partial update. Which fields are present decides the required role."""

    full_name: Optional[str] = Field(default=None, max_length=300)
    company_name: Optional[str] = Field(default=None, max_length=300)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    group_name: Optional[str] = None
    services: Optional[list[str]] = None
    notes: Optional[str] = None
    status: Optional[ClientStatus] = None
    payment_amount: Optional[Decimal] = Field(default=None, ge=0)
    sold_by_id: Optional[UUID] = None


class AssignRequest(StrictBaseModel):
    specialist_id: UUID | None = Field(
        default=None,
        description="User ID специалиста",
        examples=["33333333-3333-3333-3333-333333333333"],
    )
    designer_id: UUID | None = Field(
        default=None,
        description="User ID дизайнера",
        examples=["44444444-4444-4444-4444-444444444444"],
    )
    expected_row_version: int | None = Field(
        default=None,
        ge=1,
        description="Optimistic lock: reject with 409 if the client changed since it was read",
    )


class ClientRead(BaseModel):
    id: UUID
    full_name: str | None = None
    company_name: str | None = None
    phone: str
    email: str | None = None
    group_name: str | None = None
    services: list[str]
    notes: str | None = None
    payment_amount: Decimal | None = None
    status: ClientStatus
    archived: bool

    created_by_id: UUID
    created_by: UserBrief | None = None
    sold_by_id: UUID | None = None
    sold_by: UserBrief | None = None

    assigned_to_id: UUID | None = None
    assigned_to: UserBrief | None = None
    assigned_at: datetime | None = None
    assignment_seen: bool

    designer_id: UUID | None = None
    designer: UserBrief | None = None
    designer_assigned_at: datetime | None = None
    designer_assignment_seen: bool

    row_version: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AssignmentHistoryRead(BaseModel):
    id: UUID
    client_id: UUID
    type: AssignmentType
    specialist_id: UUID | None = None
    specialist: UserBrief | None = None
    designer_id: UUID | None = None
    designer: UserBrief | None = None
    assigned_by_id: UUID
    assigned_by: UserBrief | None = None
    assigned_at: datetime

    model_config = {"from_attributes": True}


class ClientDetail(ClientRead):
    assignment_history: list[AssignmentHistoryRead] = []


class AuditLogRead(BaseModel):
    id: UUID
    action: str
    user_id: UUID
    client_id: UUID | None = None
    details: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ClientImportRequest(StrictBaseModel):
    csv: str = Field(
        min_length=1,
        description=(
            "CSV text with a header row. Columns: full_name, company_name, phone, group_name, "
            "services (';'-separated), payment_amount, created_at"
        ),
    )


class ClientImportRowResult(BaseModel):
    row: int
    name: str
    success: bool
    client_id: UUID | None = None
    error: str | None = None


class ClientImportResult(BaseModel):
    created: int
    failed: int
    rows: list[ClientImportRowResult]
