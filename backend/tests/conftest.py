import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest
from fastapi.testclient import TestClient #fake http client that calls the FastAPI routes without a real server.
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from termplan.api.deps import get_db, get_session_factory
from termplan.db.base import Base
from termplan.main import app
import termplan.models  # noqa: F401
from termplan.services.auto_assign import auto_assign_toggles
from termplan.services.store import SqlDocumentStore, SubscriptionRegistry, subscriptions


@pytest.fixture()
def engine():
    engine = create_engine( #isolated in-memory DB shared across connections
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def store(session_factory):
    db = session_factory()
    try:
        yield SqlDocumentStore(db, registry=SubscriptionRegistry())
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    subscriptions.clear() #listeners are process-wide; start every test clean.

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    auto_assign_toggles.shutdown()
    subscriptions.clear()


@pytest.fixture
def make_section():
    from termplan.schemas.section import ClassSection, SectionStatus

    def factory(**overrides):
        values = {
            "department_id": "dept-a",
            "term": "2026MFA",
            "subject": "MCSI",
            "course_number": "200",
            "section": "01",
            "title": "Programming 1",
            "method": "LEC",
            "meeting_days": "MW",
            "begin_time": "9:00 AM",
            "end_time": "10:00 AM",
            "room": "CAT 201",
            "faculty": "Staff",
            "status": SectionStatus.keep,
        }
        values.update(overrides)
        return ClassSection(**values)

    return factory
