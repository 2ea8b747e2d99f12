# crm/services/client_service.py
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from crm.core.errors import BadRequest, NotFound, VersionConflict
from crm.core.rbac import ActorContext, Forbidden, ensure_allowed, is_allowed
from crm.fsm.status_fsm import parse_client_status
from crm.models.assignment_history import AssignmentHistory
from crm.models.audit_log import AuditAction, AuditLog
from crm.models.base import utcnow
from crm.models.client import Client, ClientStatus
from crm.models.user import Role, User
from crm.schemas.client import ClientCreate, ClientUpdate
from crm.services import audit_service

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("full_name", "company_name", "phone", "email", "group_name", "services", "notes")
NOT_NULL_FIELDS = ("phone", "services")

SORT_FIELDS = {
    "created_at": Client.created_at,
    "full_name": Client.full_name,
    "company_name": Client.company_name,
    "status": Client.status,
    "assigned_at": Client.assigned_at,
}


def flush_versioned(db: Session) -> None:
    """Flush pending client changes; a lost optimistic-lock race becomes 409."""
    try:
        db.flush()
    except StaleDataError as e:
        raise VersionConflict("Client was modified by another request; reload and retry") from e


def get_client_or_404(db: Session, client_id: UUID) -> Client:
    client = db.get(Client, client_id)
    if client is None:
        raise NotFound("Client not found")
    return client


def ensure_can_access(client: Client, actor: ActorContext) -> None:
    """Specialists and designers only see clients they are currently assigned to."""
    if actor.role == Role.specialist.value and client.assigned_to_id != actor.user_id:
        raise Forbidden("No access to this client")
    if actor.role == Role.designer.value and client.designer_id != actor.user_id:
        raise Forbidden("No access to this client")


class ClientService:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    def create(self, *, data: ClientCreate, actor: ActorContext) -> Client:
        ensure_allowed("client.create", actor.role)

        full_name = (data.full_name or "").strip() or None
        company_name = (data.company_name or "").strip() or None
        if not full_name and not company_name:
            raise BadRequest("Either full_name or company_name is required")

        services = [s.strip() for s in data.services if s and s.strip()]
        if not services:
            raise BadRequest("At least one service is required")

        sold_by_id = data.sold_by_id
        if sold_by_id is not None:
            if self.db.get(User, sold_by_id) is None:
                raise BadRequest("Seller not found")
        elif actor.role == Role.sales_manager.value:
            sold_by_id = actor.user_id

        client = Client(
            full_name=full_name,
            company_name=company_name,
            phone=data.phone.strip(),
            email=data.email,
            group_name=data.group_name,
            services=services,
            notes=data.notes,
            payment_amount=data.payment_amount,
            status=ClientStatus.new.value,
            archived=False,
            created_by_id=actor.user_id,
            sold_by_id=sold_by_id,
            created_at=data.created_at or utcnow(),
        )
        self.db.add(client)
        self.db.flush()

        audit_service.log_event(
            self.db,
            action=AuditAction.client_created,
            user_id=actor.user_id,
            client_id=client.id,
            details=f"Client created: {client.display_name}",
        )
        self.db.flush()

        logger.info("client %s created by %s", client.id, actor.user_id)
        return client

    # ------------------------------------------------------------------
    # read
    # ------------------------------------------------------------------

    def list(
        self,
        *,
        actor: ActorContext,
        search: str | None = None,
        status: ClientStatus | None = None,
        unassigned: bool = False,
        created_by_id: UUID | None = None,
        specialist_id: UUID | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> list[Client]:
        stmt = select(Client).where(Client.archived.is_(False))

        # role scoping comes first; the filters below can only narrow it
        if actor.role == Role.specialist.value:
            stmt = stmt.where(Client.assigned_to_id == actor.user_id)
        elif actor.role == Role.designer.value:
            stmt = stmt.where(Client.designer_id == actor.user_id)

        if search and search.strip():
            term = search.strip()
            stmt = stmt.where(
                or_(
                    Client.full_name.icontains(term, autoescape=True),
                    Client.company_name.icontains(term, autoescape=True),
                    Client.phone.icontains(term, autoescape=True),
                    Client.email.icontains(term, autoescape=True),
                    Client.group_name.icontains(term, autoescape=True),
                )
            )

        if status is not None:
            stmt = stmt.where(Client.status == status.value)

        if unassigned:
            stmt = stmt.where(Client.assigned_to_id.is_(None))

        if is_allowed("client.filter_by_staff", actor.role):
            if created_by_id is not None:
                stmt = stmt.where(Client.created_by_id == created_by_id)
            if specialist_id is not None:
                stmt = stmt.where(Client.assigned_to_id == specialist_id)

        column = SORT_FIELDS.get(sort_by, Client.created_at)
        order = column.asc() if sort_order == "asc" else column.desc()
        stmt = stmt.order_by(order, Client.id)

        return list(self.db.execute(stmt).scalars())

    def get(self, client_id: UUID, actor: ActorContext) -> Client:
        client = get_client_or_404(self.db, client_id)
        ensure_can_access(client, actor)
        return client

    def assignment_history(self, client_id: UUID) -> list[AssignmentHistory]:
        return list(
            self.db.execute(
                select(AssignmentHistory)
                .where(AssignmentHistory.client_id == client_id)
                .order_by(AssignmentHistory.assigned_at.desc())
            ).scalars()
        )

    def audit_log(self, client_id: UUID, actor: ActorContext) -> list[AuditLog]:
        ensure_allowed("client.audit", actor.role)
        get_client_or_404(self.db, client_id)
        return audit_service.list_for_client(self.db, client_id)

    # ------------------------------------------------------------------
    # write
    # ------------------------------------------------------------------

    def update(self, *, client_id: UUID, data: ClientUpdate, actor: ActorContext) -> Client:
        fields: dict[str, Any] = data.model_dump(exclude_unset=True)

        client = get_client_or_404(self.db, client_id)
        ensure_can_access(client, actor)

        # role gate per touched field group
        if any(f in fields for f in PROFILE_FIELDS):
            ensure_allowed("client.edit_profile", actor.role)
        if "sold_by_id" in fields:
            ensure_allowed("client.set_seller", actor.role)
        if fields.get("status") is not None:
            ensure_allowed("client.set_status", actor.role)
        if "payment_amount" in fields:
            ensure_allowed("client.set_payment", actor.role)

        for name in NOT_NULL_FIELDS:
            if name in fields and not fields[name]:
                raise BadRequest(f"{name} cannot be empty")

        if fields.get("sold_by_id") is not None and self.db.get(User, fields["sold_by_id"]) is None:
            raise BadRequest("Seller not found")

        old_status = parse_client_status(client.status)
        new_status = fields.pop("status", None) or old_status

        for name, value in fields.items():
            setattr(client, name, value)

        if not (client.full_name or client.company_name):
            raise BadRequest("Either full_name or company_name is required")

        if new_status is not old_status:
            client.status = new_status.value
            audit_service.log_event(
                self.db,
                action=AuditAction.status_changed,
                user_id=actor.user_id,
                client_id=client.id,
                details=f"Status changed: {old_status.value} → {new_status.value}",
            )
            logger.info(
                "client %s status %s -> %s by %s",
                client.id, old_status.value, new_status.value, actor.user_id,
            )

        flush_versioned(self.db)
        return client

    def archive(self, *, client_id: UUID, actor: ActorContext) -> Client:
        ensure_allowed("client.archive", actor.role)
        client = get_client_or_404(self.db, client_id)

        client.archived = True
        audit_service.log_event(
            self.db,
            action=AuditAction.client_archived,
            user_id=actor.user_id,
            client_id=client.id,
            details="Client archived",
        )
        flush_versioned(self.db)

        logger.info("client %s archived by %s", client.id, actor.user_id)
        return client
