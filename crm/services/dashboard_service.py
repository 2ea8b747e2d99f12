# crm/services/dashboard_service.py
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from crm.core.errors import BadRequest, NotFound
from crm.core.rbac import ActorContext, ensure_allowed
from crm.models.client import Client
from crm.models.creative import Creative
from crm.models.payment import Payment
from crm.models.task import Task, TaskStatus
from crm.models.user import DESIGNER_ROLES, Role, User
from crm.schemas.dashboard import (
    Analytics,
    DashboardClient,
    MyDashboard,
    NamedAmount,
    NamedCount,
    StatusCount,
)


def month_bounds(year: int | None, month: int | None) -> tuple[int, int, datetime, datetime]:
    """Resolve (year, month) to a half-open [start, end) UTC range; missing parts mean "now"."""
    now = datetime.now(timezone.utc)
    year = now.year if year is None else year
    month = now.month if month is None else month

    if not 1 <= month <= 12 or not 1970 <= year <= 9999:
        raise BadRequest("Invalid year/month")

    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return year, month, start, end


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def _clients_for(self, user_id: UUID, role: str | None, start: datetime, end: datetime) -> list[Client]:
        if role == Role.specialist.value:
            column = Client.assigned_at
            cond = (Client.assigned_to_id == user_id, Client.assignment_seen.is_(True))
        elif role in DESIGNER_ROLES:
            column = Client.designer_assigned_at
            cond = (Client.designer_id == user_id, Client.designer_assignment_seen.is_(True))
        elif role == Role.sales_manager.value:
            column = Client.created_at
            cond = (Client.created_by_id == user_id,)
        else:
            return []

        return list(
            self.db.execute(
                select(Client)
                .where(*cond, column >= start, column < end)
                .order_by(column.desc())
            ).scalars()
        )

    def _view(self, user_id: UUID, role: str | None, year: int | None, month: int | None) -> MyDashboard:
        year, month, start, end = month_bounds(year, month)
        clients = self._clients_for(user_id, role, start, end)
        return MyDashboard(
            count=len(clients),
            clients=[DashboardClient.model_validate(c) for c in clients],
            month=month,
            year=year,
            role=role,
        )

    def my(self, *, actor: ActorContext, year: int | None = None, month: int | None = None) -> MyDashboard:
        ensure_allowed("dashboard.my", actor.role)
        return self._view(actor.user_id, actor.role, year, month)

    def for_user(
        self, *, user_id: UUID, actor: ActorContext, year: int | None = None, month: int | None = None
    ) -> MyDashboard:
        ensure_allowed("dashboard.user", actor.role)
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return self._view(user.id, user.role, year, month)

    def analytics(self, *, actor: ActorContext, year: int | None = None, month: int | None = None) -> Analytics:
        ensure_allowed("dashboard.analytics", actor.role)
        year, month, start, end = month_bounds(year, month)
        month_str = f"{year}-{month:02d}"

        active = Client.archived.is_(False)
        created_in_month = (Client.created_at >= start, Client.created_at < end)
        task_in_month = (Task.created_at >= start, Task.created_at < end)

        total_clients = self.db.scalar(select(func.count(Client.id)).where(active)) or 0
        new_clients = self.db.scalar(select(func.count(Client.id)).where(active, *created_in_month)) or 0
        total_revenue = self.db.scalar(
            select(func.coalesce(func.sum(Payment.amount), 0)).where(Payment.month == month_str)
        )
        completed_tasks = self.db.scalar(
            select(func.count(Task.id)).where(*task_in_month, Task.status == TaskStatus.done.value)
        ) or 0

        clients_by_status = self.db.execute(
            select(Client.status, func.count(Client.id))
            .where(active)
            .group_by(Client.status)
            .order_by(Client.status)
        ).all()

        clients_by_manager = self.db.execute(
            select(User.full_name, func.count(Client.id))
            .join(User, User.id == Client.created_by_id)
            .where(active, *created_in_month)
            .group_by(User.id, User.full_name)
            .order_by(func.count(Client.id).desc())
        ).all()

        revenue_by_manager = self.db.execute(
            select(User.full_name, func.sum(Payment.amount))
            .join(User, User.id == Payment.manager_id)
            .where(Payment.month == month_str)
            .group_by(User.id, User.full_name)
            .order_by(func.sum(Payment.amount).desc())
        ).all()

        tasks_by_status = self.db.execute(
            select(Task.status, func.count(Task.id))
            .where(*task_in_month)
            .group_by(Task.status)
            .order_by(Task.status)
        ).all()

        creatives_by_designer = self.db.execute(
            select(User.full_name, func.sum(Creative.count))
            .join(User, User.id == Creative.designer_id)
            .where(Creative.month == month_str)
            .group_by(User.id, User.full_name)
            .order_by(func.sum(Creative.count).desc())
        ).all()

        return Analytics(
            total_clients=total_clients,
            new_clients_this_month=new_clients,
            total_revenue=Decimal(str(total_revenue or 0)),
            completed_tasks=completed_tasks,
            clients_by_status=[StatusCount(status=s, count=n) for s, n in clients_by_status],
            clients_by_manager=[NamedCount(name=name, count=n) for name, n in clients_by_manager],
            revenue_by_manager=[NamedAmount(name=name, amount=Decimal(str(a))) for name, a in revenue_by_manager],
            tasks_by_status=[StatusCount(status=s, count=n) for s, n in tasks_by_status],
            creatives_by_designer=[NamedCount(name=name, count=int(n)) for name, n in creatives_by_designer],
        )
