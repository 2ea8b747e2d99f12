# crm/schemas/dashboard.py
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from crm.models.client import ClientStatus


class DashboardClient(BaseModel):
    id: UUID
    full_name: str | None = None
    company_name: str | None = None
    phone: str
    group_name: str | None = None
    status: ClientStatus
    services: list[str]
    created_at: datetime
    assigned_at: datetime | None = None
    designer_assigned_at: datetime | None = None

    model_config = {"from_attributes": True}


class MyDashboard(BaseModel):
    count: int
    clients: list[DashboardClient]
    month: int
    year: int
    role: str | None = None


class StatusCount(BaseModel):
    status: str
    count: int


class NamedCount(BaseModel):
    name: str
    count: int


class NamedAmount(BaseModel):
    name: str
    amount: Decimal


class Analytics(BaseModel):
    total_clients: int
    new_clients_this_month: int
    total_revenue: Decimal
    completed_tasks: int
    clients_by_status: list[StatusCount]
    clients_by_manager: list[NamedCount]
    revenue_by_manager: list[NamedAmount]
    tasks_by_status: list[StatusCount]
    creatives_by_designer: list[NamedCount]
