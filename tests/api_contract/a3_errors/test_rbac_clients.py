from __future__ import annotations

import pytest

from crm.models.user import Role

from tests.factories import auth, make_client, make_task, make_token, make_user


@pytest.fixture()
def world(db):
    users = {
        "admin": make_user(db, role=Role.admin),
        "sales": make_user(db, role=Role.sales_manager),
        "lead": make_user(db, role=Role.lead_designer),
        "s1": make_user(db, role=Role.specialist),
        "s2": make_user(db, role=Role.specialist),
        "d1": make_user(db, role=Role.designer),
    }
    tokens = {k: make_token(db, u) for k, u in users.items()}
    c = make_client(db, created_by=users["sales"], assigned_to_id=users["s1"].id, payment_amount=1500)
    db.commit()
    return {"users": users, "tokens": tokens, "client": c}


def test_foreign_specialist_cannot_read_client(client, world):
    c = world["client"]
    r = client.get(f"/clients/{c.id}", headers=auth(world["tokens"]["s2"]))
    assert r.status_code == 403, r.text
    assert r.json()["detail"]


def test_foreign_specialist_cannot_patch_client(client, world):
    c = world["client"]
    r = client.patch(f"/clients/{c.id}", json={"notes": "x"}, headers=auth(world["tokens"]["s2"]))
    assert r.status_code == 403, r.text


def test_missing_client_is_404(client, world):
    r = client.get("/clients/00000000-0000-0000-0000-000000000000", headers=auth(world["tokens"]["admin"]))
    assert r.status_code == 404, r.text
    assert r.json() == {"detail": "Client not found"}


def test_payment_amount_hidden_for_specialist(client, world):
    c = world["client"]

    as_spec = client.get(f"/clients/{c.id}", headers=auth(world["tokens"]["s1"]))
    assert as_spec.status_code == 200, as_spec.text
    assert as_spec.json()["payment_amount"] is None

    as_sales = client.get(f"/clients/{c.id}", headers=auth(world["tokens"]["sales"]))
    assert as_sales.json()["payment_amount"] is not None


def test_payment_amount_hidden_in_list_for_specialist(client, world):
    rows = client.get("/clients", headers=auth(world["tokens"]["s1"])).json()
    assert len(rows) == 1
    assert rows[0]["payment_amount"] is None


def test_status_patch_by_sales_is_403(client, world):
    c = world["client"]
    r = client.patch(f"/clients/{c.id}", json={"status": "DONE"}, headers=auth(world["tokens"]["sales"]))
    assert r.status_code == 403, r.text


def test_create_client_by_specialist_is_403(client, world):
    r = client.post(
        "/clients",
        json={"full_name": "Anna", "phone": "+7 999 123-45-67", "services": ["SMM"]},
        headers=auth(world["tokens"]["s1"]),
    )
    assert r.status_code == 403, r.text


def test_archive_by_sales_is_403(client, world):
    c = world["client"]
    r = client.patch(f"/clients/{c.id}/archive", headers=auth(world["tokens"]["sales"]))
    assert r.status_code == 403, r.text


def test_audit_is_admin_only(client, world):
    c = world["client"]
    assert client.get(f"/clients/{c.id}/audit", headers=auth(world["tokens"]["sales"])).status_code == 403
    assert client.get(f"/clients/{c.id}/audit", headers=auth(world["tokens"]["admin"])).status_code == 200


def test_import_is_admin_only(client, world):
    r = client.post("/clients/import", json={"csv": "h\nAnna,,+7 999 123-45-67,,SMM,,"}, headers=auth(world["tokens"]["sales"]))
    assert r.status_code == 403, r.text


def test_payments_hidden_from_designer(client, world):
    c = world["client"]
    r = client.get(f"/clients/{c.id}/payments", headers=auth(world["tokens"]["d1"]))
    assert r.status_code == 403, r.text


def test_users_list_forbidden_for_sales(client, world):
    assert client.get("/users", headers=auth(world["tokens"]["sales"])).status_code == 403


def test_task_delete_by_sales_is_403(client, world, db):
    t = make_task(db, client=world["client"], creator=world["users"]["sales"])
    db.commit()

    r = client.delete(f"/tasks/{t.id}", headers=auth(world["tokens"]["sales"]))
    assert r.status_code == 403, r.text
