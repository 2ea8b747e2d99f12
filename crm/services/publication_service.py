# crm/services/publication_service.py
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from crm.core.config import settings
from crm.core.errors import NotFound
from crm.core.rbac import ActorContext, Forbidden, ensure_allowed
from crm.models.publication import Publication
from crm.schemas.feed import PublicationCreate

logger = logging.getLogger(__name__)


class PublicationService:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> list[Publication]:
        return list(
            self.db.execute(
                select(Publication)
                .order_by(Publication.created_at.desc())
                .limit(settings.publications_limit)
            ).scalars()
        )

    def create(self, *, data: PublicationCreate, actor: ActorContext) -> Publication:
        ensure_allowed("publication.create", actor.role)
        pub = Publication(author_id=actor.user_id, title=data.title.strip(), content=data.content)
        self.db.add(pub)
        self.db.flush()
        logger.info("publication %s created by %s", pub.id, actor.user_id)
        return pub

    def delete(self, *, publication_id: UUID, actor: ActorContext) -> None:
        ensure_allowed("publication.delete", actor.role)
        pub = self.db.get(Publication, publication_id)
        if pub is None:
            raise NotFound("Publication not found")
        if pub.author_id != actor.user_id:
            raise Forbidden("You can only delete your own publications")
        self.db.delete(pub)
        self.db.flush()
