# tests/conftest.py
import os

# must be set before crm.core.config is imported anywhere
os.environ.setdefault("DB_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# -----------------------------------------------------------------------------
# IMPORTANT: ensure all ORM tables are registered in metadata before create_all
# -----------------------------------------------------------------------------
import crm.models.assignment_history  # noqa: F401
import crm.models.audit_log  # noqa: F401
import crm.models.auth_session  # noqa: F401
import crm.models.client  # noqa: F401
import crm.models.comment  # noqa: F401
import crm.models.creative  # noqa: F401
import crm.models.notification  # noqa: F401
import crm.models.payment  # noqa: F401
import crm.models.publication  # noqa: F401
import crm.models.task  # noqa: F401
import crm.models.user  # noqa: F401
from crm.core.db import get_db
from crm.main import app
from crm.models.base import Base


@pytest.fixture()
def engine(tmp_path):
    """
    Fresh SQLite file per test.

    A file (not :memory:) so the test session and request sessions get their
    own connections, like separate requests against Postgres.
    """
    eng = create_engine(
        f"sqlite:///{tmp_path / 'crm_test.db'}",
        future=True,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


@pytest.fixture()
def db(session_factory):
    """Session for arranging data and asserting on it. Commit before calling the API."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
