# tests/conftest.py
import os

# Settings are read at import time: point them at SQLite before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from order_hub.api.deps import get_ingestion_scheduler  # noqa: E402
from order_hub.database import get_db, init_db  # noqa: E402
from order_hub.main import app  # noqa: E402
from order_hub.platforms.sources import MockOrderSource  # noqa: E402
from order_hub.services.order_ingestion import build_ingestion_scheduler  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def scheduler(session_factory):
    return build_ingestion_scheduler(session_factory, source=MockOrderSource())


@pytest.fixture
def integration(scheduler):
    return scheduler.integration


@pytest.fixture
def client(session_factory, scheduler):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_ingestion_scheduler] = lambda: scheduler
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def use_source(client, session_factory):
    """Point the app at a scheduler reading from the given order source"""
    def _use(source):
        scheduler = build_ingestion_scheduler(session_factory, source=source)
        app.dependency_overrides[get_ingestion_scheduler] = lambda: scheduler
        return scheduler
    return _use
