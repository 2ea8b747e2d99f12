# crm/services/client_assignment_service.py
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from crm.core.errors import BadRequest, VersionConflict
from crm.core.rbac import ActorContext, Forbidden, ensure_allowed
from crm.fsm.status_fsm import (
    AckRole,
    parse_client_status,
    status_after_acknowledgment,
    status_after_assignment,
)
from crm.models.assignment_history import AssignmentHistory, AssignmentType
from crm.models.audit_log import AuditAction
from crm.models.base import utcnow
from crm.models.client import Client
from crm.models.user import DESIGNER_ROLES, Role, User
from crm.services import audit_service, notification_service
from crm.services.client_service import flush_versioned, get_client_or_404

logger = logging.getLogger(__name__)


def ack_role_for(role: str | None) -> AckRole:
    """Designers (incl. lead) acknowledge the designer slot, everyone else the specialist slot."""
    if role in DESIGNER_ROLES:
        return AckRole.DESIGNER
    return AckRole.SPECIALIST


class ClientAssignmentService:
    def __init__(self, db: Session):
        self.db = db

    def _load_target(self, user_id: UUID, allowed_roles: set[str], error: str) -> User:
        user = self.db.get(User, user_id)
        if user is None or user.role not in allowed_roles:
            raise BadRequest(error)
        return user

    def assign(
        self,
        *,
        client_id: UUID,
        actor: ActorContext,
        specialist_id: UUID | None = None,
        designer_id: UUID | None = None,
        expected_row_version: int | None = None,
    ) -> Client:
        # 1) Load client
        client = get_client_or_404(self.db, client_id)

        # 2) Request shape
        if specialist_id is None and designer_id is None:
            raise BadRequest("Must specify at least one of specialist_id or designer_id")

        # 3) Role gate, then per-slot permission
        ensure_allowed("client.assign", actor.role)
        if specialist_id is not None:
            ensure_allowed("client.assign_specialist", actor.role)
        if designer_id is not None:
            ensure_allowed("client.assign_designer", actor.role)

        # 4) Optimistic lock (optional on this endpoint)
        if expected_row_version is not None and client.row_version != expected_row_version:
            raise VersionConflict(
                f"Expected row_version={expected_row_version}, actual={client.row_version}"
            )

        # 5) Validate every target before writing anything
        specialist = None
        designer = None
        if specialist_id is not None:
            specialist = self._load_target(specialist_id, {Role.specialist.value}, "User is not a specialist")
        if designer_id is not None:
            designer = self._load_target(designer_id, DESIGNER_ROLES, "User is not a designer")

        now = utcnow()
        client_name = client.display_name

        # 6) Specialist slot
        if specialist is not None:
            reassigned = client.assigned_to_id is not None
            client.assigned_to_id = specialist.id
            client.assigned_at = now
            client.assignment_seen = False

            self.db.add(
                AssignmentHistory(
                    client_id=client.id,
                    type=AssignmentType.specialist.value,
                    specialist_id=specialist.id,
                    assigned_by_id=actor.user_id,
                    assigned_at=now,
                )
            )
            audit_service.log_event(
                self.db,
                action=AuditAction.specialist_reassigned if reassigned else AuditAction.specialist_assigned,
                user_id=actor.user_id,
                client_id=client.id,
                details=f"Specialist assigned: {specialist.full_name}",
                created_at=now,
            )
            if specialist.id != actor.user_id:
                notification_service.notify_client_assigned(
                    self.db,
                    user_id=specialist.id,
                    client_id=client.id,
                    client_name=client_name,
                    slot="specialist",
                )

        # 7) Designer slot
        if designer is not None:
            reassigned = client.designer_id is not None
            client.designer_id = designer.id
            client.designer_assigned_at = now
            client.designer_assignment_seen = False

            self.db.add(
                AssignmentHistory(
                    client_id=client.id,
                    type=AssignmentType.designer.value,
                    designer_id=designer.id,
                    assigned_by_id=actor.user_id,
                    assigned_at=now,
                )
            )
            audit_service.log_event(
                self.db,
                action=AuditAction.designer_reassigned if reassigned else AuditAction.designer_assigned,
                user_id=actor.user_id,
                client_id=client.id,
                details=f"Designer assigned: {designer.full_name}",
                created_at=now,
            )
            if designer.id != actor.user_id:
                notification_service.notify_client_assigned(
                    self.db,
                    user_id=designer.id,
                    client_id=client.id,
                    client_name=client_name,
                    slot="designer",
                )

        # 8) Status
        client.status = status_after_assignment(parse_client_status(client.status)).value

        flush_versioned(self.db)

        logger.info(
            "client %s assigned by %s: specialist=%s designer=%s",
            client.id, actor.user_id, specialist_id, designer_id,
        )
        return client

    def acknowledge(self, *, client_id: UUID, actor: ActorContext) -> Client:
        ensure_allowed("client.acknowledge", actor.role)

        client = get_client_or_404(self.db, client_id)
        ack_role = ack_role_for(actor.role)

        if ack_role is AckRole.DESIGNER:
            if client.designer_id != actor.user_id:
                raise Forbidden("You are not the assigned designer of this client")
            if client.designer_assignment_seen:
                raise BadRequest("Assignment already acknowledged")
            client.designer_assignment_seen = True
            action = AuditAction.designer_acknowledged
            details = f"Designer acknowledged: {actor.full_name}"
        else:
            if client.assigned_to_id != actor.user_id:
                raise Forbidden("You are not the assigned specialist of this client")
            if client.assignment_seen:
                raise BadRequest("Assignment already acknowledged")
            client.assignment_seen = True
            action = AuditAction.specialist_acknowledged
            details = f"Specialist acknowledged: {actor.full_name}"

        client.status = status_after_acknowledgment(parse_client_status(client.status), ack_role).value

        audit_service.log_event(
            self.db,
            action=action,
            user_id=actor.user_id,
            client_id=client.id,
            details=details,
        )
        flush_versioned(self.db)

        logger.info("client %s acknowledged by %s as %s", client.id, actor.user_id, ack_role.value)
        return client
