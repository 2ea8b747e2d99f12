# crm/services/client_import_service.py
from __future__ import annotations

import csv
import io
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from pydantic import ValidationError
from sqlalchemy.orm import Session

from crm.core.errors import BadRequest, DomainError
from crm.core.rbac import ActorContext, ensure_allowed
from crm.schemas.client import ClientCreate, ClientImportResult, ClientImportRowResult
from crm.services.client_service import ClientService

logger = logging.getLogger(__name__)

COLUMNS = ("full_name", "company_name", "phone", "group_name", "services", "payment_amount", "created_at")


def _cell(cols: list[str], idx: int) -> str:
    return cols[idx].strip() if idx < len(cols) else ""


def _parse_amount(raw: str) -> Decimal | None:
    if not raw:
        return None
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise BadRequest(f"Invalid payment_amount: '{raw}'")


def _parse_created_at(raw: str) -> datetime | None:
    if not raw:
        return None
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        raise BadRequest(f"Invalid created_at: '{raw}'")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _validation_message(e: ValidationError) -> str:
    err = e.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ()))
    return f"{field}: {err['msg']}" if field else err["msg"]


def row_to_payload(cols: list[str]) -> ClientCreate:
    """Build a create payload from one CSV row (column order fixed by COLUMNS)."""
    services_raw = _cell(cols, 4)
    services = [s.strip() for s in services_raw.split(";") if s.strip()]
    try:
        return ClientCreate(
            full_name=_cell(cols, 0) or None,
            company_name=_cell(cols, 1) or None,
            phone=_cell(cols, 2),
            group_name=_cell(cols, 3) or None,
            services=services,
            payment_amount=_parse_amount(_cell(cols, 5)),
            created_at=_parse_created_at(_cell(cols, 6)),
        )
    except ValidationError as e:
        raise BadRequest(_validation_message(e)) from e


class ClientImportService:
    def __init__(self, db: Session):
        self.db = db
        self.clients = ClientService(db)

    def import_csv(self, *, text: str, actor: ActorContext) -> ClientImportResult:
        ensure_allowed("client.import", actor.role)

        rows: list[ClientImportRowResult] = []
        reader = csv.reader(io.StringIO(text))
        header_seen = False
        next_line = 1

        for cols in reader:
            # a quoted cell may span lines: a record starts where the previous one ended
            line_no, next_line = next_line, reader.line_num + 1
            if not any(c.strip() for c in cols):
                continue
            if not header_seen:
                header_seen = True
                continue

            name = _cell(cols, 0) or _cell(cols, 1) or _cell(cols, 2)
            try:
                payload = row_to_payload(cols)
                # each row commits or rolls back on its own savepoint
                with self.db.begin_nested():
                    client = self.clients.create(data=payload, actor=actor)
            except DomainError as e:
                rows.append(ClientImportRowResult(row=line_no, name=name, success=False, error=e.detail))
                continue

            rows.append(ClientImportRowResult(row=line_no, name=name, success=True, client_id=client.id))

        created = sum(1 for r in rows if r.success)
        result = ClientImportResult(created=created, failed=len(rows) - created, rows=rows)

        logger.info("client import by %s: created=%s failed=%s", actor.user_id, result.created, result.failed)
        return result
