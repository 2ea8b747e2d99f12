# tests/test_dashboard_service.py
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from crm.core.errors import BadRequest
from crm.core.rbac import Forbidden
from crm.models.client import ClientStatus
from crm.models.creative import Creative
from crm.models.payment import Payment
from crm.models.task import TaskStatus
from crm.models.user import Role
from crm.services.dashboard_service import DashboardService, month_bounds

from tests.factories import actor_of, make_client, make_task, make_user

MARCH = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)
APRIL = datetime(2026, 4, 2, 9, 0, tzinfo=timezone.utc)


def test_month_bounds_rolls_over_december():
    year, month, start, end = month_bounds(2025, 12)
    assert (year, month) == (2025, 12)
    assert start == datetime(2025, 12, 1, tzinfo=timezone.utc)
    assert end == datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("year,month", [(2026, 0), (2026, 13), (1800, 5)])
def test_month_bounds_rejects_invalid(year, month):
    with pytest.raises(BadRequest):
        month_bounds(year, month)


def test_specialist_dashboard_counts_acknowledged_clients_of_month(db):
    admin = make_user(db, role=Role.admin)
    spec = make_user(db, role=Role.specialist)

    seen = make_client(db, created_by=admin, assigned_to_id=spec.id, assigned_at=MARCH, assignment_seen=True)
    make_client(db, created_by=admin, assigned_to_id=spec.id, assigned_at=MARCH, assignment_seen=False)
    make_client(db, created_by=admin, assigned_to_id=spec.id, assigned_at=APRIL, assignment_seen=True)

    out = DashboardService(db).my(actor=actor_of(spec), year=2026, month=3)

    assert out.count == 1
    assert out.clients[0].id == seen.id
    assert (out.year, out.month, out.role) == (2026, 3, "SPECIALIST")


def test_designer_dashboard_uses_designer_slot(db):
    admin = make_user(db, role=Role.admin)
    lead = make_user(db, role=Role.lead_designer)
    make_client(
        db, created_by=admin, designer_id=lead.id, designer_assigned_at=MARCH, designer_assignment_seen=True
    )

    assert DashboardService(db).my(actor=actor_of(lead), year=2026, month=3).count == 1


def test_sales_dashboard_counts_created_clients(db):
    sales = make_user(db, role=Role.sales_manager)
    make_client(db, created_by=sales, created_at=MARCH)
    make_client(db, created_by=sales, created_at=APRIL)

    assert DashboardService(db).my(actor=actor_of(sales), year=2026, month=4).count == 1


def test_admin_has_no_personal_dashboard(db):
    admin = make_user(db, role=Role.admin)
    with pytest.raises(Forbidden):
        DashboardService(db).my(actor=actor_of(admin), year=2026, month=3)


def test_admin_views_user_dashboard(db):
    admin = make_user(db, role=Role.admin)
    sales = make_user(db, role=Role.sales_manager)
    make_client(db, created_by=sales, created_at=MARCH)

    out = DashboardService(db).for_user(user_id=sales.id, actor=actor_of(admin), year=2026, month=3)
    assert out.count == 1
    assert out.role == "SALES_MANAGER"


def test_analytics_aggregates_month(db):
    admin = make_user(db, role=Role.admin, full_name="Admin")
    sales = make_user(db, role=Role.sales_manager, full_name="Anna Sales")
    designer = make_user(db, role=Role.designer, full_name="Dina Designer")

    c1 = make_client(db, created_by=sales, created_at=MARCH, status=ClientStatus.in_work)
    make_client(db, created_by=sales, created_at=MARCH)
    make_client(db, created_by=admin, created_at=APRIL)
    make_client(db, created_by=sales, created_at=MARCH, archived=True)

    db.add_all(
        [
            Payment(client_id=c1.id, manager_id=sales.id, amount=Decimal("1000.00"), month="2026-03"),
            Payment(client_id=c1.id, manager_id=sales.id, amount=Decimal("500.00"), month="2026-03", is_renewal=True),
            Payment(client_id=c1.id, manager_id=sales.id, amount=Decimal("700.00"), month="2026-04"),
            Creative(client_id=c1.id, designer_id=designer.id, count=4, month="2026-03"),
            Creative(client_id=c1.id, designer_id=designer.id, count=3, month="2026-03"),
        ]
    )
    make_task(db, client=c1, creator=admin, status=TaskStatus.done, created_at=MARCH)
    make_task(db, client=c1, creator=admin, status=TaskStatus.new, created_at=MARCH)
    make_task(db, client=c1, creator=admin, status=TaskStatus.done, created_at=APRIL)
    db.flush()

    a = DashboardService(db).analytics(actor=actor_of(admin), year=2026, month=3)

    assert a.total_clients == 3
    assert a.new_clients_this_month == 2
    assert a.total_revenue == Decimal("1500")
    assert a.completed_tasks == 1
    assert {s.status: s.count for s in a.clients_by_status} == {"IN_WORK": 1, "NEW": 2}
    assert [(m.name, m.count) for m in a.clients_by_manager] == [("Anna Sales", 2)]
    assert [(m.name, m.amount) for m in a.revenue_by_manager] == [("Anna Sales", Decimal("1500"))]
    assert {s.status: s.count for s in a.tasks_by_status} == {"DONE": 1, "NEW": 1}
    assert [(d.name, d.count) for d in a.creatives_by_designer] == [("Dina Designer", 7)]


def test_analytics_is_admin_only(db):
    sales = make_user(db, role=Role.sales_manager)
    with pytest.raises(Forbidden):
        DashboardService(db).analytics(actor=actor_of(sales), year=2026, month=3)
