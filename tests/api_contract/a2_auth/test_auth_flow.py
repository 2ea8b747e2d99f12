from __future__ import annotations

from crm.models.user import Role

from tests.factories import DEFAULT_PASSWORD, auth, make_token, make_user


def test_register_creates_pending_user_with_token(client):
    r = client.post(
        "/auth/register",
        json={"email": "New.User@crm.local", "password": "secret1", "full_name": "New User"},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["token"]
    assert body["user"]["email"] == "new.user@crm.local"
    assert body["user"]["role"] is None

    me = client.get("/auth/me", headers=auth(body["token"]))
    assert me.status_code == 200, me.text
    assert me.json()["full_name"] == "New User"


def test_register_duplicate_email_is_400(client):
    payload = {"email": "dup@crm.local", "password": "secret1", "full_name": "Dup"}
    assert client.post("/auth/register", json=payload).status_code == 201

    r = client.post("/auth/register", json=payload)
    assert r.status_code == 400, r.text
    assert r.json() == {"detail": "Email already registered"}


def test_login_and_logout(client, db):
    user = make_user(db, role=Role.admin, email="admin@crm.local")
    db.commit()

    r = client.post("/auth/login", json={"email": "admin@crm.local", "password": DEFAULT_PASSWORD})
    assert r.status_code == 200, r.text
    token = r.json()["token"]
    assert r.json()["user"]["id"] == str(user.id)

    assert client.post("/auth/logout", headers=auth(token)).status_code == 200
    assert client.get("/auth/me", headers=auth(token)).status_code == 401


def test_login_wrong_password_is_401(client, db):
    make_user(db, role=Role.admin, email="admin@crm.local")
    db.commit()

    r = client.post("/auth/login", json={"email": "admin@crm.local", "password": "nope"})
    assert r.status_code == 401, r.text


def test_missing_token_is_401(client):
    r = client.get("/clients")
    assert r.status_code == 401, r.text


def test_expired_token_is_401(client, db):
    user = make_user(db, role=Role.admin)
    token = make_token(db, user, expired=True)
    db.commit()

    assert client.get("/clients", headers=auth(token)).status_code == 401


def test_pending_user_is_403_on_business_endpoints(client, db):
    user = make_user(db, role=None)
    token = make_token(db, user)
    db.commit()

    assert client.get("/clients", headers=auth(token)).status_code == 403
    assert client.get("/notifications", headers=auth(token)).status_code == 403
    # pending users can still see themselves
    assert client.get("/auth/me", headers=auth(token)).status_code == 200


def test_admin_grants_role(client, db):
    admin = make_user(db, role=Role.admin)
    pending = make_user(db, role=None)
    admin_token = make_token(db, admin)
    pending_token = make_token(db, pending)
    db.commit()

    r = client.patch(f"/users/{pending.id}/role", json={"role": "SPECIALIST"}, headers=auth(admin_token))
    assert r.status_code == 200, r.text
    assert r.json()["role"] == "SPECIALIST"

    assert client.get("/clients", headers=auth(pending_token)).status_code == 200


def test_set_role_for_missing_user_is_404(client, db):
    admin = make_user(db, role=Role.admin)
    token = make_token(db, admin)
    db.commit()

    r = client.patch(
        "/users/00000000-0000-0000-0000-000000000000/role", json={"role": "DESIGNER"}, headers=auth(token)
    )
    assert r.status_code == 404, r.text


def test_employees_excludes_admins_and_pending(client, db):
    admin = make_user(db, role=Role.admin)
    spec = make_user(db, role=Role.specialist)
    make_user(db, role=None)
    token = make_token(db, admin)
    db.commit()

    ids = [u["id"] for u in client.get("/users/employees", headers=auth(token)).json()]
    assert ids == [str(spec.id)]


def test_users_filter_by_role(client, db):
    lead = make_user(db, role=Role.lead_designer)
    designer = make_user(db, role=Role.designer)
    make_user(db, role=Role.specialist)
    token = make_token(db, lead)
    db.commit()

    r = client.get("/users", params={"role": "DESIGNER"}, headers=auth(token))
    assert r.status_code == 200, r.text
    assert [u["id"] for u in r.json()] == [str(designer.id)]
