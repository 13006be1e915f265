"""Pytest configuration and shared fixtures."""

import os
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

# Must be set before crediario is imported: the engine is built at import time
_TEST_DIR = Path(tempfile.mkdtemp(prefix="crediario-tests-"))
os.environ["CREDIARIO_CONFIG_FILE"] = str(_TEST_DIR / "config.json")
os.environ["CREDIARIO_DATABASE_URL"] = "sqlite://"
os.environ["CREDIARIO_LOG_TO_FILE"] = "0"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from crediario.commands.handlers import UserCommandHandler  # noqa: E402
from crediario.config import reset_config  # noqa: E402
from crediario.core.enums import DeviceOs  # noqa: E402
from crediario.db.database import Base, create_database_engine, get_db  # noqa: E402
from crediario.domain.entities import Device, Person, Token  # noqa: E402
from crediario.domain.notifications import DomainNotificationHandler  # noqa: E402
from crediario.events.dispatcher import EventDispatcher  # noqa: E402
from crediario.repositories.memory_impl import (  # noqa: E402
    MemoryStore,
    MemoryUnitOfWork,
    create_memory_container,
)


@pytest.fixture(autouse=True)
def fresh_config():
    """Reload configuration from the environment for every test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def notifications() -> DomainNotificationHandler:
    return DomainNotificationHandler()


@pytest.fixture
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


# Mocked collaborators, for asserting exact repository calls


@pytest.fixture
def person_repo() -> MagicMock:
    repo = MagicMock()
    repo.add = AsyncMock(side_effect=lambda p: p)
    repo.update = AsyncMock(side_effect=lambda p: p)
    repo.get_by_email = AsyncMock(return_value=None)
    repo.get_by_serial_key = AsyncMock(return_value=None)
    repo.get_by_username_and_password = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def device_repo() -> MagicMock:
    repo = MagicMock()
    repo.add = AsyncMock(side_effect=lambda d: d)
    repo.update = AsyncMock(side_effect=lambda d: d)
    repo.get_by_person = AsyncMock(return_value=None)
    repo.get_by_identification = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def token_repo() -> MagicMock:
    repo = MagicMock()
    repo.add = AsyncMock(side_effect=lambda t: t)
    repo.update = AsyncMock(side_effect=lambda t: t)
    return repo


@pytest.fixture
def uow() -> MagicMock:
    unit = MagicMock()
    unit.commit = AsyncMock(return_value=True)
    return unit


@pytest.fixture
def handler(person_repo, device_repo, token_repo, uow, notifications, dispatcher):
    """UserCommandHandler wired to mocked repositories."""
    return UserCommandHandler(
        person_repository=person_repo,
        device_repository=device_repo,
        token_repository=token_repo,
        uow=uow,
        notifications=notifications,
        dispatcher=dispatcher,
    )


@pytest.fixture
def person() -> Person:
    return Person(
        name="Maria Silva",
        document_number="12345678900",
        phone_number="5511999990000",
        email="maria@example.com",
        password="secret",
        serial_key="0" * 32,
        resident=True,
    )


@pytest.fixture
def device(person) -> Device:
    return Device.for_person(person, "installation-a", DeviceOs.ANDROID)


@pytest.fixture
def token() -> Token:
    return Token(user_token="old-session", device_os=DeviceOs.ANDROID)


# In-memory persistence, for end-to-end flows through real repositories


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def memory_container(memory_store):
    return create_memory_container(memory_store)


@pytest.fixture
def memory_handler_factory(memory_store, memory_container, dispatcher):
    """Build a handler with its own collector, as the transport does per request."""

    def factory() -> UserCommandHandler:
        return UserCommandHandler(
            person_repository=memory_container.person,
            device_repository=memory_container.device,
            token_repository=memory_container.token,
            uow=MemoryUnitOfWork(memory_store),
            notifications=DomainNotificationHandler(),
            dispatcher=dispatcher,
        )

    return factory


# SQLAlchemy on in-memory SQLite


@pytest.fixture
def test_db():
    """Create a fresh in-memory database and return its session factory."""
    from crediario.db import models  # noqa: F401

    engine = create_database_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

    yield TestingSessionLocal

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(test_db):
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def client(test_db) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override."""
    from crediario.events.handlers import build_event_dispatcher
    from crediario.main import app
    from crediario.repositories.memory_impl import MemoryEmailNotificationRepository

    def override_get_db():
        db = test_db()
        try:
            yield db
        finally:
            db.close()

    outbox = MemoryStore()
    app.dependency_overrides[get_db] = override_get_db
    original_dispatcher = app.state.event_dispatcher
    app.state.event_dispatcher = build_event_dispatcher(
        MemoryEmailNotificationRepository(outbox)
    )
    app.state.test_outbox = outbox

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    app.state.event_dispatcher = original_dispatcher
