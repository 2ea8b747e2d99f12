# crm/services/audit_service.py
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from crm.models.audit_log import AuditAction, AuditLog
from crm.models.base import utcnow


def log_event(
    db: Session,
    *,
    action: AuditAction,
    user_id: UUID,
    client_id: UUID | None,
    details: str,
    created_at: datetime | None = None,
) -> AuditLog:
    """Append an audit row to the current unit of work (committed with the caller's changes).

    Rows written by one command share `created_at`; readers break the tie by action.
    """
    row = AuditLog(
        action=action.value,
        user_id=user_id,
        client_id=client_id,
        details=details,
        created_at=created_at or utcnow(),
    )
    db.add(row)
    return row


def list_for_client(db: Session, client_id: UUID) -> list[AuditLog]:
    return list(
        db.execute(
            select(AuditLog)
            .where(AuditLog.client_id == client_id)
            .order_by(AuditLog.created_at.asc(), AuditLog.action.asc(), AuditLog.id.asc())
        ).scalars()
    )
