# crm/api/publications.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from crm.api.deps import get_actor
from crm.core.db import get_db
from crm.core.rbac import ActorContext
from crm.schemas.common import Deleted
from crm.schemas.feed import PublicationCreate, PublicationRead
from crm.services.publication_service import PublicationService

router = APIRouter(prefix="/publications", tags=["publications"])


@router.get("", response_model=list[PublicationRead])
def list_publications(
    _actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return PublicationService(db).list()


@router.post("", response_model=PublicationRead, status_code=status.HTTP_201_CREATED)
def create_publication(
    body: PublicationCreate,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    pub = PublicationService(db).create(data=body, actor=actor)
    db.commit()
    return pub


@router.delete("/{publication_id}", response_model=Deleted)
def delete_publication(
    publication_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    PublicationService(db).delete(publication_id=publication_id, actor=actor)
    db.commit()
    return Deleted()
