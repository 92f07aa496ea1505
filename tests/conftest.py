from __future__ import annotations

import uuid
from contextlib import contextmanager

import pytest
from sqlalchemy.orm import sessionmaker

from freightmatch.database.db import _build_engine
from freightmatch.models import Base
from freightmatch.services.request_service import RequestLifecycleService


class RecordingDispatcher:
    """In-memory stand-in for the Celery dispatcher."""

    def __init__(self) -> None:
        self.messages: list[dict] = []

    def publish(self, message: dict) -> None:
        self.messages.append(message)

    def event_types(self) -> list[str]:
        return [message["event_type"] for message in self.messages]


@pytest.fixture
def session_factory(tmp_path):
    db_path = tmp_path / f"freightmatch_test_{uuid.uuid4().hex}.db"
    engine = _build_engine(f"sqlite:///{db_path}")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def service(session, dispatcher):
    return RequestLifecycleService(session, dispatcher=dispatcher)


@pytest.fixture
def isolated_db_session(session_factory):
    """Replacement for ``get_db_session`` bound to the test database."""

    @contextmanager
    def _get_db_session():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db_session
