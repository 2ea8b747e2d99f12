# crm/api/client_children.py
from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from crm.api.deps import get_actor
from crm.core.db import get_db
from crm.core.rbac import ActorContext
from crm.schemas.client_children import (
    CommentCreate,
    CommentRead,
    CreativeCreate,
    CreativeRead,
    PaymentCreate,
    PaymentRead,
    RenewalsRead,
)
from crm.schemas.common import MONTH_PATTERN
from crm.services.client_children_service import ClientChildrenService

router = APIRouter(tags=["client children"])


@router.get("/clients/{client_id}/comments", response_model=list[CommentRead])
def list_comments(
    client_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return ClientChildrenService(db).list_comments(client_id, actor)


@router.post("/clients/{client_id}/comments", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
def add_comment(
    client_id: UUID,
    body: CommentCreate,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    comment = ClientChildrenService(db).add_comment(client_id=client_id, data=body, actor=actor)
    db.commit()
    return comment


@router.get("/clients/{client_id}/payments", response_model=list[PaymentRead])
def list_payments(
    client_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return ClientChildrenService(db).list_payments(client_id, actor)


@router.post("/clients/{client_id}/payments", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
def add_payment(
    client_id: UUID,
    body: PaymentCreate,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    payment = ClientChildrenService(db).add_payment(client_id=client_id, data=body, actor=actor)
    db.commit()
    return payment


@router.get("/clients/{client_id}/creatives", response_model=list[CreativeRead])
def list_creatives(
    client_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return ClientChildrenService(db).list_creatives(client_id, actor)


@router.post("/clients/{client_id}/creatives", response_model=CreativeRead, status_code=status.HTTP_201_CREATED)
def add_creative(
    client_id: UUID,
    body: CreativeCreate,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    creative = ClientChildrenService(db).add_creative(client_id=client_id, data=body, actor=actor)
    db.commit()
    return creative


@router.get("/renewals", response_model=RenewalsRead)
def list_renewals(
    month: str | None = Query(default=None, pattern=MONTH_PATTERN, description="YYYY-MM, defaults to current month"),
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    month = month or datetime.now(timezone.utc).strftime("%Y-%m")
    return ClientChildrenService(db).renewals(month=month, actor=actor)
