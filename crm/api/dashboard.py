# crm/api/dashboard.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from crm.api.deps import get_actor
from crm.core.db import get_db
from crm.core.rbac import ActorContext
from crm.schemas.dashboard import Analytics, MyDashboard
from crm.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/my", response_model=MyDashboard)
def my_dashboard(
    year: int | None = Query(default=None),
    month: int | None = Query(default=None),
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return DashboardService(db).my(actor=actor, year=year, month=month)


@router.get("/user/{user_id}", response_model=MyDashboard)
def user_dashboard(
    user_id: UUID,
    year: int | None = Query(default=None),
    month: int | None = Query(default=None),
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return DashboardService(db).for_user(user_id=user_id, actor=actor, year=year, month=month)


@router.get("/analytics", response_model=Analytics)
def analytics(
    year: int | None = Query(default=None),
    month: int | None = Query(default=None),
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return DashboardService(db).analytics(actor=actor, year=year, month=month)
