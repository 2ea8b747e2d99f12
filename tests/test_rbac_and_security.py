# tests/test_rbac_and_security.py
from __future__ import annotations

from uuid import uuid4

import pytest

from crm.core.rbac import ActorContext, Forbidden, ensure_allowed, ensure_role_assigned, is_allowed
from crm.core.security import generate_token, hash_password, verify_password


def test_pending_user_holds_no_permission():
    assert not is_allowed("client.create", None)
    with pytest.raises(Forbidden):
        ensure_role_assigned(ActorContext(user_id=uuid4(), role=None))


def test_lead_designer_assigns_designers_only():
    assert is_allowed("client.assign", "LEAD_DESIGNER")
    assert is_allowed("client.assign_designer", "LEAD_DESIGNER")
    assert not is_allowed("client.assign_specialist", "LEAD_DESIGNER")


def test_payment_hidden_from_specialist_and_designer():
    assert not is_allowed("client.view_payment", "SPECIALIST")
    assert not is_allowed("client.view_payment", "DESIGNER")
    assert is_allowed("client.view_payment", "SALES_MANAGER")


def test_unknown_permission_is_denied():
    with pytest.raises(Forbidden) as e:
        ensure_allowed("client.teleport", "ADMIN")
    assert e.value.status_code == 403


def test_password_hash_roundtrip_and_salt():
    h1 = hash_password("secret123")
    h2 = hash_password("secret123")
    assert h1 != h2
    assert verify_password("secret123", h1)
    assert not verify_password("wrong", h1)


def test_verify_password_rejects_malformed_hash():
    assert not verify_password("secret123", "not-a-hash")


def test_tokens_are_unique():
    assert generate_token() != generate_token()
