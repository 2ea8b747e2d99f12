# crm/core/rbac.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Set
from uuid import UUID

from crm.core.errors import DomainError
from crm.models.user import Role


class Forbidden(DomainError):
    """Raised when actor role is not allowed for an operation."""

    status_code = 403


ADMIN = Role.admin.value
SALES = Role.sales_manager.value
SPECIALIST = Role.specialist.value
DESIGNER = Role.designer.value
LEAD_DESIGNER = Role.lead_designer.value

ALL_ROLES: Set[str] = {r.value for r in Role}

# permission -> roles that hold it
ALLOW: Mapping[str, Set[str]] = {
    # ---- Clients ----
    "client.create": {ADMIN, SALES},
    "client.import": {ADMIN},
    "client.archive": {ADMIN},
    "client.audit": {ADMIN},
    "client.filter_by_staff": {ADMIN, LEAD_DESIGNER},
    "client.set_status": {ADMIN},
    "client.set_payment": {ADMIN, SALES},
    "client.edit_profile": {ADMIN, SALES},
    "client.set_seller": {ADMIN},
    "client.view_payment": {ADMIN, SALES, LEAD_DESIGNER},

    # ---- Assignment workflow ----
    "client.assign": {ADMIN, LEAD_DESIGNER},
    "client.assign_specialist": {ADMIN},
    "client.assign_designer": {ADMIN, LEAD_DESIGNER},
    "client.acknowledge": {SPECIALIST, DESIGNER, LEAD_DESIGNER},

    # ---- Tasks ----
    "task.list_all": {ADMIN, SALES, LEAD_DESIGNER},
    "task.edit_any": {ADMIN, SALES, LEAD_DESIGNER},
    "task.delete": {ADMIN},

    # ---- Client children ----
    "payment.read": {ADMIN, SALES},
    "payment.create": {ADMIN, SALES},
    "creative.read": {ADMIN, DESIGNER, LEAD_DESIGNER},
    "creative.create": {DESIGNER, LEAD_DESIGNER},
    "renewal.read": {ADMIN, SPECIALIST},

    # ---- Feed ----
    "publication.create": {ADMIN},
    "publication.delete": {ADMIN},

    # ---- Users / dashboards ----
    "user.list": {ADMIN, LEAD_DESIGNER},
    "user.list_employees": {ADMIN},
    "user.set_role": {ADMIN},
    "dashboard.my": {SPECIALIST, DESIGNER, SALES, LEAD_DESIGNER},
    "dashboard.user": {ADMIN},
    "dashboard.analytics": {ADMIN},
}


def is_allowed(permission: str, role: str | None) -> bool:
    if role is None:
        return False
    return role in ALLOW.get(permission, set())


def ensure_allowed(permission: str, role: str | None) -> None:
    if not is_allowed(permission, role):
        raise Forbidden(f"Role '{role}' is not allowed for '{permission}'")


@dataclass(frozen=True)
class ActorContext:
    user_id: UUID
    role: str | None
    full_name: str = ""


def ensure_role_assigned(actor: ActorContext) -> None:
    if actor.role is None:
        raise Forbidden("Role is not assigned yet; ask an administrator")
