# crm/services/client_children_service.py
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from crm.core.rbac import ActorContext, ensure_allowed
from crm.models.client import Client
from crm.models.comment import Comment
from crm.models.creative import Creative
from crm.models.payment import Payment
from crm.models.user import Role
from crm.schemas.client_children import (
    CommentCreate,
    CreativeCreate,
    PaymentCreate,
    RenewalClient,
    RenewalsRead,
)
from crm.schemas.common import UserBrief
from crm.services.client_service import ensure_can_access, get_client_or_404

logger = logging.getLogger(__name__)


class ClientChildrenService:
    """Comments, payments and creatives attached to a client, plus the renewals report."""

    def __init__(self, db: Session):
        self.db = db

    # ---- comments ----

    def list_comments(self, client_id: UUID, actor: ActorContext) -> list[Comment]:
        client = get_client_or_404(self.db, client_id)
        ensure_can_access(client, actor)
        return list(
            self.db.execute(
                select(Comment).where(Comment.client_id == client.id).order_by(Comment.created_at.desc())
            ).scalars()
        )

    def add_comment(self, *, client_id: UUID, data: CommentCreate, actor: ActorContext) -> Comment:
        client = get_client_or_404(self.db, client_id)
        ensure_can_access(client, actor)

        comment = Comment(client_id=client.id, author_id=actor.user_id, content=data.content.strip())
        self.db.add(comment)
        self.db.flush()
        return comment

    # ---- payments ----

    def list_payments(self, client_id: UUID, actor: ActorContext) -> list[Payment]:
        ensure_allowed("payment.read", actor.role)
        client = get_client_or_404(self.db, client_id)
        return list(
            self.db.execute(
                select(Payment).where(Payment.client_id == client.id).order_by(Payment.created_at.desc())
            ).scalars()
        )

    def add_payment(self, *, client_id: UUID, data: PaymentCreate, actor: ActorContext) -> Payment:
        ensure_allowed("payment.create", actor.role)
        client = get_client_or_404(self.db, client_id)

        payment = Payment(
            client_id=client.id,
            manager_id=actor.user_id,
            amount=data.amount,
            month=data.month,
            is_renewal=data.is_renewal,
        )
        self.db.add(payment)
        self.db.flush()

        logger.info(
            "payment %s booked for client %s by %s (renewal=%s)",
            payment.id, client.id, actor.user_id, payment.is_renewal,
        )
        return payment

    # ---- creatives ----

    def list_creatives(self, client_id: UUID, actor: ActorContext) -> list[Creative]:
        ensure_allowed("creative.read", actor.role)
        client = get_client_or_404(self.db, client_id)
        return list(
            self.db.execute(
                select(Creative).where(Creative.client_id == client.id).order_by(Creative.created_at.desc())
            ).scalars()
        )

    def add_creative(self, *, client_id: UUID, data: CreativeCreate, actor: ActorContext) -> Creative:
        ensure_allowed("creative.create", actor.role)
        client = get_client_or_404(self.db, client_id)

        creative = Creative(client_id=client.id, designer_id=actor.user_id, count=data.count, month=data.month)
        self.db.add(creative)
        self.db.flush()
        return creative

    # ---- renewals ----

    def renewals(self, *, month: str, actor: ActorContext) -> RenewalsRead:
        ensure_allowed("renewal.read", actor.role)

        stmt = (
            select(Payment, Client)
            .join(Client, Client.id == Payment.client_id)
            .where(Payment.is_renewal.is_(True), Payment.month == month)
            .order_by(Payment.created_at.desc())
        )
        if actor.role == Role.specialist.value:
            stmt = stmt.where(Client.assigned_to_id == actor.user_id)

        clients = [
            RenewalClient(
                client_id=client.id,
                client_name=client.display_name,
                amount=payment.amount,
                renewed_at=payment.created_at,
                specialist=UserBrief.model_validate(client.assigned_to) if client.assigned_to else None,
            )
            for payment, client in self.db.execute(stmt).all()
        ]
        return RenewalsRead(month=month, total_renewals=len(clients), clients=clients)
