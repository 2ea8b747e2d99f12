# crm/api/clients.py
from __future__ import annotations

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from crm.api.deps import get_actor
from crm.core.db import get_db
from crm.core.rbac import ActorContext, is_allowed
from crm.models.client import Client, ClientStatus
from crm.schemas.client import (
    AssignmentHistoryRead,
    AssignRequest,
    AuditLogRead,
    ClientCreate,
    ClientDetail,
    ClientImportRequest,
    ClientImportResult,
    ClientRead,
    ClientUpdate,
)
from crm.services.client_assignment_service import ClientAssignmentService
from crm.services.client_import_service import ClientImportService
from crm.services.client_service import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])

SortField = Literal["created_at", "full_name", "company_name", "status", "assigned_at"]


def to_client_read(client: Client, actor: ActorContext) -> ClientRead:
    out = ClientRead.model_validate(client)
    if not is_allowed("client.view_payment", actor.role):
        out = out.model_copy(update={"payment_amount": None})
    return out


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(
    data: ClientCreate,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    client = ClientService(db).create(data=data, actor=actor)
    db.commit()
    return to_client_read(client, actor)


@router.get("", response_model=list[ClientRead])
def list_clients(
    search: str | None = Query(default=None, description="Substring of name, company, phone, email or group"),
    status_filter: ClientStatus | None = Query(default=None, alias="status"),
    unassigned: bool = Query(default=False, description="Only clients without a specialist"),
    created_by_id: UUID | None = Query(default=None),
    specialist_id: UUID | None = Query(default=None),
    sort_by: SortField = Query(default="created_at"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    clients = ClientService(db).list(
        actor=actor,
        search=search,
        status=status_filter,
        unassigned=unassigned,
        created_by_id=created_by_id,
        specialist_id=specialist_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return [to_client_read(c, actor) for c in clients]


@router.post("/import", response_model=ClientImportResult)
def import_clients(
    body: ClientImportRequest,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    result = ClientImportService(db).import_csv(text=body.csv, actor=actor)
    db.commit()
    return result


@router.get("/{client_id}", response_model=ClientDetail)
def get_client(
    client_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    service = ClientService(db)
    client = service.get(client_id, actor)
    history = service.assignment_history(client.id)

    base = to_client_read(client, actor)
    return ClientDetail(
        **base.model_dump(),
        assignment_history=[AssignmentHistoryRead.model_validate(h) for h in history],
    )


@router.patch("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: UUID,
    data: ClientUpdate,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    client = ClientService(db).update(client_id=client_id, data=data, actor=actor)
    db.commit()
    return to_client_read(client, actor)


@router.patch("/{client_id}/archive", response_model=ClientRead)
def archive_client(
    client_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    client = ClientService(db).archive(client_id=client_id, actor=actor)
    db.commit()
    return to_client_read(client, actor)


@router.post("/{client_id}/assign", response_model=ClientRead)
def assign_client(
    client_id: UUID,
    body: AssignRequest,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    Assign a specialist and/or a designer.

    ADMIN may fill both slots, LEAD_DESIGNER only the designer slot.
    Pass `expected_row_version` to fail with 409 if the client changed meanwhile.
    """
    client = ClientAssignmentService(db).assign(
        client_id=client_id,
        actor=actor,
        specialist_id=body.specialist_id,
        designer_id=body.designer_id,
        expected_row_version=body.expected_row_version,
    )
    db.commit()
    return to_client_read(client, actor)


@router.post("/{client_id}/acknowledge", response_model=ClientRead)
def acknowledge_client(
    client_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    client = ClientAssignmentService(db).acknowledge(client_id=client_id, actor=actor)
    db.commit()
    return to_client_read(client, actor)


@router.get("/{client_id}/history", response_model=list[AssignmentHistoryRead])
def client_history(
    client_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    service = ClientService(db)
    client = service.get(client_id, actor)
    return service.assignment_history(client.id)


@router.get("/{client_id}/audit", response_model=list[AuditLogRead])
def client_audit(
    client_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return ClientService(db).audit_log(client_id, actor)
