"""
Test configuration: in-memory SQLite store shared by the app and the tests.

DATABASE_URL has no default, so it is set before anything imports
outreach.core.config.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RECONCILE_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from outreach.db.base import create_all
from outreach.db.session import get_db, make_engine
from outreach.main import app


@pytest.fixture()
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def SessionTest(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


@pytest.fixture()
def db(SessionTest):
    session = SessionTest()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(SessionTest):
    def _get_db():
        session = SessionTest()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    # no context manager: startup hooks (create_all on the real engine, scheduler) stay off
    yield TestClient(app)
    app.dependency_overrides.clear()
